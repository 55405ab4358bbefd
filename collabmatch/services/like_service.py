"""Like store accessor: unilateral like edges and the caller's liked set."""

import logging

from collabmatch.core.snapshots import Observer, SnapshotStream, Subscription
from collabmatch.models import LikeEdge
from collabmatch.store import access
from collabmatch.store.base import ProfileMessagingStore

logger = logging.getLogger(__name__)


class LikeService:
    """Service for recording and querying likes."""

    def __init__(self, store: ProfileMessagingStore) -> None:
        """Initialize like service with the caller's store."""
        self.store = store

    async def record_like(self, liker_id: str | None, target_id: str) -> LikeEdge:
        """Record that ``liker_id`` likes ``target_id``.

        Upserts the edge keyed by the pair, so repeated calls leave one edge
        carrying the latest timestamp.

        Args:
            liker_id: The user giving the like; None when nobody is signed in.
            target_id: The liked user.

        Returns:
            LikeEdge: The stored edge.

        Raises:
            UnauthenticatedError: If ``liker_id`` is missing.
            PermissionDeniedError: If ``liker_id`` is not the caller.
            InvalidDocumentError: If a user tries to like themselves.
            TransientError: On connectivity failures; safe to retry.
        """
        liker = access.require_caller(liker_id)
        edge = LikeEdge.build(liker_id=liker, target_id=target_id)
        stored = await self.store.put_like(edge)
        logger.info("Like recorded: %s -> %s", liker, target_id)
        return stored

    async def has_liked(self, liker_id: str, target_id: str) -> bool:
        """Check whether the edge ``liker_id -> target_id`` exists."""
        return await self.store.get_like(liker_id, target_id) is not None

    async def liked_ids(self, user_id: str) -> frozenset[str]:
        """Ids of every user ``user_id`` has liked."""
        edges = await self.store.list_likes(user_id)
        return frozenset(edge.target_id for edge in edges)

    async def likers_of(self, user_id: str) -> frozenset[str]:
        """Ids of every user who liked ``user_id``."""
        edges = await self.store.list_likers(user_id)
        return frozenset(edge.liker_id for edge in edges)

    def liked_set_stream(self) -> SnapshotStream[frozenset[str]]:
        """Live view of who the caller has liked, as full replacement sets."""
        caller = access.require_caller(self.store.current_user_id())
        return self.store.watch(lambda: self.liked_ids(caller), name=f"likes:{caller}")

    def observe_liked_set(self, observer: Observer[frozenset[str]]) -> Subscription:
        """Push the caller's liked set to ``observer`` on every change.

        The observer receives the complete set each time and is never called
        again once the returned subscription is cancelled.
        """
        return self.liked_set_stream().subscribe(observer)
