"""Portfolio showcase service."""

import logging
from datetime import datetime

from collabmatch.models import PortfolioItem
from collabmatch.store.base import ProfileMessagingStore

logger = logging.getLogger(__name__)


class PortfolioService:
    """Service for a user's portfolio project cards."""

    def __init__(self, store: ProfileMessagingStore) -> None:
        """Initialize portfolio service with the caller's store."""
        self.store = store

    async def list_items(self, owner_id: str) -> list[PortfolioItem]:
        """Project cards of a user, newest first."""
        return await self.store.list_portfolio_items(owner_id)

    async def save_item(
        self,
        owner_id: str,
        title: str | None = None,
        role: str = "",
        description: str = "",
        skills: list[str] | None = None,
        media_urls: list[str] | None = None,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
        item_id: str | None = None,
    ) -> PortfolioItem:
        """Create a project card, or replace one when ``item_id`` is given.

        A blank title is stored as "Untitled".

        Raises:
            InvalidDocumentError: If the end date precedes the start date.
            NotFoundError: If ``item_id`` does not exist.
        """
        item = PortfolioItem.build(
            id=item_id,
            owner_id=owner_id,
            title=title,
            role=role,
            description=description,
            skills=skills or [],
            media_urls=media_urls or [],
            start_date=start_date,
            end_date=end_date,
        )
        stored = await self.store.put_portfolio_item(item)
        logger.info("Portfolio item %s saved for %s", stored.id, owner_id)
        return stored

    async def delete_item(self, owner_id: str, item_id: str) -> None:
        """Delete one of the caller's project cards."""
        await self.store.delete_portfolio_item(owner_id, item_id)
        logger.info("Portfolio item %s deleted for %s", item_id, owner_id)
