"""Match detector: promote mutual likes into direct threads."""

import logging
from dataclasses import dataclass

from collabmatch.core.errors import StoreError
from collabmatch.models import LikeEdge
from collabmatch.services.like_service import LikeService
from collabmatch.services.thread_service import ThreadService
from collabmatch.store import access
from collabmatch.store.base import ProfileMessagingStore

logger = logging.getLogger(__name__)


@dataclass
class MatchResult:
    """Outcome of a like.

    ``error`` is set when the like was stored but promoting it to a match
    failed; the like stands and ``MatchService.reconcile`` can finish the job.
    """

    like: LikeEdge
    mutual: bool = False
    thread_id: str | None = None
    error: StoreError | None = None

    @property
    def promotion_pending(self) -> bool:
        return self.error is not None


class MatchService:
    """Service deciding when two likes make a match."""

    def __init__(
        self,
        store: ProfileMessagingStore,
        like_service: LikeService | None = None,
        thread_service: ThreadService | None = None,
    ) -> None:
        """Initialize match service with the caller's store."""
        self.store = store
        self.likes = like_service or LikeService(store)
        self.threads = thread_service or ThreadService(store)

    async def like(self, me: str | None, target: str) -> MatchResult:
        """Record a like and open a thread if it is reciprocated.

        The like write and the reverse-edge check are separate reads and
        writes. When both users like each other at the same moment, both may
        see the match and both call ``ensure_direct_thread``, which converges
        on a single thread.

        Args:
            me: The caller.
            target: The liked user.

        Returns:
            MatchResult: The stored like and, for a match, the thread id.

        Raises:
            StoreError: Only if recording the like itself fails. Failures after
                that are reported in ``MatchResult.error``.
        """
        edge = await self.likes.record_like(me, target)

        try:
            mutual = await self.likes.has_liked(target, edge.liker_id)
        except StoreError as e:
            logger.warning(
                "Mutual check %s <-> %s failed, match promotion deferred: %s",
                edge.liker_id,
                target,
                e.message,
            )
            return MatchResult(like=edge, error=e)

        if not mutual:
            return MatchResult(like=edge)

        try:
            thread_id = await self.threads.ensure_direct_thread(edge.liker_id, target)
        except StoreError as e:
            logger.warning(
                "Thread creation for match %s <-> %s failed, deferred: %s",
                edge.liker_id,
                target,
                e.message,
            )
            return MatchResult(like=edge, mutual=True, error=e)

        logger.info("Match %s <-> %s in thread %s", edge.liker_id, target, thread_id)
        return MatchResult(like=edge, mutual=True, thread_id=thread_id)

    async def matches(self, me: str | None) -> list[str]:
        """Ids of users who like ``me`` and are liked back, sorted."""
        user_id = access.require_caller(me)
        liked = await self.likes.liked_ids(user_id)
        likers = await self.likes.likers_of(user_id)
        return sorted(liked & likers)

    async def reconcile(self, me: str | None) -> dict[str, str]:
        """Re-derive matches from stored likes and ensure each has a thread.

        Finishes promotions that a failed ``like`` left pending. Retryable
        failures for one pair are logged and skipped so the rest still run.

        Returns:
            dict: Matched user id to thread id, for every pair that succeeded.
        """
        user_id = access.require_caller(me)
        threads: dict[str, str] = {}
        for other in await self.matches(user_id):
            try:
                threads[other] = await self.threads.ensure_direct_thread(user_id, other)
            except StoreError as e:
                if not e.retryable:
                    raise
                logger.warning("Reconcile %s <-> %s failed: %s", user_id, other, e.message)
        logger.info("Reconciled %d matches for %s", len(threads), user_id)
        return threads
