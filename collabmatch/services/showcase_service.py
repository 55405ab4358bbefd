"""Showcase cards pinned to a profile."""

from datetime import datetime

from collabmatch.models import Showcase
from collabmatch.store.base import ProfileMessagingStore


class ShowcaseService:
    """Service for a user's dated showcase cards."""

    def __init__(self, store: ProfileMessagingStore) -> None:
        """Initialize showcase service with the caller's store."""
        self.store = store

    async def list_showcases(self, owner_id: str) -> list[Showcase]:
        """Cards of a user, latest date first."""
        return await self.store.list_showcases(owner_id)

    async def add_showcase(
        self,
        owner_id: str,
        title: str,
        org_name: str,
        date: datetime,
        link: str = "",
        summary: str = "",
    ) -> Showcase:
        """Add a card for the caller."""
        card = Showcase.build(
            owner_id=owner_id,
            title=title,
            org_name=org_name,
            date=date,
            link=link,
            summary=summary,
        )
        return await self.store.add_showcase(card)

    async def delete_showcase(self, owner_id: str, showcase_id: str) -> None:
        """Delete one of the caller's cards."""
        await self.store.delete_showcase(owner_id, showcase_id)
