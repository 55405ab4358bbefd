"""Thread registry: find-or-create direct threads and list a user's inbox."""

import logging
from collections import defaultdict
from dataclasses import dataclass, field

from collabmatch.core.errors import NotFoundError
from collabmatch.core.snapshots import SnapshotStream
from collabmatch.models import Thread, direct_thread_key
from collabmatch.store.base import ProfileMessagingStore

logger = logging.getLogger(__name__)


def dedupe_direct_threads(threads: list[Thread]) -> list[Thread]:
    """Order threads by latest activity and collapse duplicate direct pairs.

    Threads created before pair-keyed ids existed can duplicate a pair; the
    most recently active one is kept.
    """
    ordered = sorted(threads, key=lambda t: (t.activity_time, t.id), reverse=True)
    seen: set[frozenset[str]] = set()
    result: list[Thread] = []
    for thread in ordered:
        if not thread.is_group:
            if thread.pair in seen:
                logger.debug("Collapsing duplicate direct thread %s", thread.id)
                continue
            seen.add(thread.pair)
        result.append(thread)
    return result


@dataclass
class DirectThreadMerge:
    """How to fold one pair's legacy direct threads into its canonical thread."""

    canonical: Thread
    legacy_ids: list[str] = field(default_factory=list)
    canonical_exists: bool = False


def plan_direct_thread_merges(threads: list[Thread]) -> list[DirectThreadMerge]:
    """Plan the migration of direct threads that predate pair-keyed ids.

    For every pair that has a thread stored under some other id, the canonical
    thread keeps the summary of the pair's most recently active thread and the
    earliest creation time. Pairs already stored only under their canonical id
    need nothing and are left out.
    """
    by_pair: dict[frozenset[str], list[Thread]] = defaultdict(list)
    for thread in threads:
        if not thread.is_group:
            by_pair[thread.pair].append(thread)

    merges: list[DirectThreadMerge] = []
    for pair_threads in by_pair.values():
        a, b = sorted(pair_threads[0].pair)
        key = direct_thread_key(a, b)
        legacy = [t for t in pair_threads if t.id != key]
        if not legacy:
            continue

        latest = max(pair_threads, key=lambda t: (t.activity_time, t.id))
        created = [t.created_at for t in pair_threads if t.created_at is not None]
        photos: dict[str, str] = {}
        for thread in sorted(pair_threads, key=lambda t: t.activity_time):
            photos.update(thread.participant_photos)

        canonical = Thread.build(
            id=key,
            participants=[a, b],
            last_message=latest.last_message,
            last_message_time=latest.last_message_time,
            participant_photos=photos,
            created_at=min(created) if created else None,
        )
        merges.append(
            DirectThreadMerge(
                canonical=canonical,
                legacy_ids=sorted(t.id for t in legacy),
                canonical_exists=len(legacy) < len(pair_threads),
            )
        )
    return sorted(merges, key=lambda merge: merge.canonical.id)


class ThreadService:
    """Service for direct chat threads."""

    def __init__(self, store: ProfileMessagingStore) -> None:
        """Initialize thread service with the caller's store."""
        self.store = store

    async def ensure_direct_thread(self, a: str, b: str) -> str:
        """Return the id of the direct thread between ``a`` and ``b``.

        The thread id is derived from the unordered pair, and creation is a
        conditional put on that id, so concurrent calls from both participants
        converge on one thread. A pair that only has a thread stored under an
        older generated id keeps using that thread. Both the match path and
        the explicit "start chat" path go through here.

        Args:
            a: One participant; must be the caller or ``b`` must be.
            b: The other participant.

        Returns:
            str: The thread id.

        Raises:
            InvalidDocumentError: If the ids are empty or identical.
            UnauthenticatedError: If nobody is signed in.
            PermissionDeniedError: If the caller is not one of the pair.
            TransientError: On connectivity failures; safe to retry.
        """
        key = direct_thread_key(a, b)

        try:
            existing = await self.store.get_thread(key)
            return existing.id
        except NotFoundError:
            pass

        legacy = await self._find_legacy_thread(a, b)
        if legacy is not None:
            logger.info("Using legacy direct thread %s for %s <-> %s", legacy.id, a, b)
            return legacy.id

        thread = Thread.new_direct(
            a,
            b,
            created_at=self.store.now(),
            participant_photos=await self._participant_photos(a, b),
        )
        stored, created = await self.store.create_thread_if_absent(thread)
        if created:
            logger.info("Direct thread created: %s", stored.id)
        else:
            logger.info("Direct thread %s already existed", stored.id)
        return stored.id

    async def _find_legacy_thread(self, a: str, b: str) -> Thread | None:
        """Most recently active direct thread of the pair stored under another id."""
        caller = self.store.current_user_id()
        if caller not in (a, b):
            return None
        pair = frozenset((a, b))
        candidates = [
            thread for thread in await self.store.list_threads_for(caller)
            if not thread.is_group and thread.pair == pair
        ]
        if not candidates:
            return None
        return max(candidates, key=lambda t: (t.activity_time, t.id))

    async def _participant_photos(self, *user_ids: str) -> dict[str, str]:
        photos: dict[str, str] = {}
        for user_id in user_ids:
            try:
                user = await self.store.get_user(user_id)
            except NotFoundError:
                continue
            if user.photo_url:
                photos[user_id] = user.photo_url
        return photos

    async def get_thread(self, thread_id: str) -> Thread:
        """Get a thread the caller participates in."""
        return await self.store.get_thread(thread_id)

    async def list_threads(self, user_id: str, started_only: bool = False) -> list[Thread]:
        """List a user's threads, most recently active first.

        Args:
            user_id: The user whose inbox to list; must be the caller.
            started_only: Only include threads with at least one message.

        Returns:
            list[Thread]: Threads with duplicate direct pairs collapsed.
        """
        threads = dedupe_direct_threads(await self.store.list_threads_for(user_id))
        if started_only:
            threads = [thread for thread in threads if thread.is_started]
        return threads

    def observe_threads(self, user_id: str, started_only: bool = False) -> SnapshotStream[list[Thread]]:
        """Live view of ``list_threads``."""
        return self.store.watch(
            lambda: self.list_threads(user_id, started_only=started_only),
            name=f"threads:{user_id}",
        )
