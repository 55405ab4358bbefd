"""In-memory profile and messaging store.

Used for local development (``STORE_BACKEND=memory``) and tests. Data lives
in a ``MemoryBackend`` shared by every store view; each ``InMemoryStore`` is
one caller's view of it. Documents are kept in encoded form so every read
goes through the same decode boundary as the Supabase store.
"""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from datetime import datetime, timedelta, timezone
from typing import Any, Awaitable, Callable, TypeVar
from uuid import uuid4

from collabmatch.core.errors import NotFoundError, StoreError
from collabmatch.core.snapshots import ChangeFeed, SnapshotStream
from collabmatch.models import LikeEdge, Message, PortfolioItem, Showcase, Thread, User
from collabmatch.store import access
from collabmatch.store.base import ProfileMessagingStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


class MemoryBackend:
    """Shared state behind every ``InMemoryStore`` view."""

    def __init__(self, latency_seconds: float = 0.0) -> None:
        self.latency_seconds = latency_seconds
        self.users: dict[str, dict[str, Any]] = {}
        self.likes: dict[tuple[str, str], dict[str, Any]] = {}
        self.threads: dict[str, dict[str, Any]] = {}
        self.messages: dict[str, list[dict[str, Any]]] = defaultdict(list)
        self.portfolios: dict[str, dict[str, dict[str, Any]]] = defaultdict(dict)
        self.showcases: dict[str, dict[str, dict[str, Any]]] = defaultdict(dict)
        self.feed = ChangeFeed()
        self.lock = asyncio.Lock()
        self._failures: dict[str, list[StoreError]] = defaultdict(list)
        self._last_tick: datetime | None = None

    def now(self) -> datetime:
        """Strictly increasing UTC clock."""
        tick = datetime.now(timezone.utc)
        if self._last_tick is not None and tick <= self._last_tick:
            tick = self._last_tick + timedelta(microseconds=1)
        self._last_tick = tick
        return tick

    def fail_next(self, operation: str, error: StoreError) -> None:
        """Make the next call of ``operation`` raise ``error``."""
        self._failures[operation].append(error)

    async def enter(self, operation: str) -> None:
        """Simulate a network round trip, honoring injected failures."""
        await asyncio.sleep(self.latency_seconds)
        pending = self._failures.get(operation)
        if pending:
            raise pending.pop(0)

    def changed(self) -> None:
        self.feed.notify()


class InMemoryStore(ProfileMessagingStore):
    """One caller's view of a ``MemoryBackend``."""

    def __init__(self, backend: MemoryBackend | None = None, caller_id: str | None = None) -> None:
        super().__init__(caller_id)
        self.backend = backend or MemoryBackend()

    def as_user(self, caller_id: str | None) -> InMemoryStore:
        """Return a view of the same data bound to another caller."""
        return InMemoryStore(self.backend, caller_id)

    def now(self) -> datetime:
        return self.backend.now()

    def watch(self, fetch: Callable[[], Awaitable[T]], name: str = "snapshot") -> SnapshotStream[T]:
        return SnapshotStream(fetch, self.backend.feed, name=name)

    async def ping(self) -> None:
        await self.backend.enter("ping")

    # Users

    async def get_user(self, user_id: str) -> User:
        access.require_caller(self.caller_id)
        await self.backend.enter("get_user")
        doc = self.backend.users.get(user_id)
        if doc is None:
            raise NotFoundError(f"User {user_id} not found")
        return User.from_document(doc)

    async def put_user(self, user: User, merge: bool = True) -> User:
        access.require_self(self.caller_id, user.id, "edit a profile")
        await self.backend.enter("put_user")
        now = self.now()
        existing = self.backend.users.get(user.id)
        if merge and existing is not None:
            doc = {**existing, **user.to_document(partial=True)}
        else:
            doc = user.to_document()
            doc["created_at"] = (existing or {}).get("created_at") or now.isoformat()
        doc["updated_at"] = now.isoformat()
        stored = User.from_document(doc)
        self.backend.users[user.id] = stored.to_document()
        self.backend.changed()
        return stored

    async def list_users(self, limit: int = 200) -> list[User]:
        access.require_caller(self.caller_id)
        await self.backend.enter("list_users")
        users = [User.from_document(doc) for doc in self.backend.users.values()]
        users.sort(key=lambda u: (u.display_name.lower(), u.id))
        return users[:limit]

    # Likes

    async def put_like(self, edge: LikeEdge) -> LikeEdge:
        access.require_self(self.caller_id, edge.liker_id, "record a like")
        await self.backend.enter("put_like")
        stored = edge.model_copy(update={"created_at": self.now()})
        self.backend.likes[stored.key] = stored.to_document()
        self.backend.changed()
        return stored

    async def get_like(self, liker_id: str, target_id: str) -> LikeEdge | None:
        access.require_caller(self.caller_id)
        await self.backend.enter("get_like")
        doc = self.backend.likes.get((liker_id, target_id))
        return LikeEdge.from_document(doc) if doc else None

    async def list_likes(self, liker_id: str) -> list[LikeEdge]:
        access.require_caller(self.caller_id)
        await self.backend.enter("list_likes")
        return [
            LikeEdge.from_document(doc)
            for (liker, _), doc in sorted(self.backend.likes.items())
            if liker == liker_id
        ]

    async def list_likers(self, target_id: str) -> list[LikeEdge]:
        access.require_caller(self.caller_id)
        await self.backend.enter("list_likers")
        return [
            LikeEdge.from_document(doc)
            for (_, target), doc in sorted(self.backend.likes.items())
            if target == target_id
        ]

    # Threads

    async def get_thread(self, thread_id: str) -> Thread:
        access.require_caller(self.caller_id)
        await self.backend.enter("get_thread")
        thread = self._load_thread(thread_id)
        access.require_participant(self.caller_id, thread)
        return thread

    async def create_thread_if_absent(self, thread: Thread) -> tuple[Thread, bool]:
        access.require_participant_ids(self.caller_id, thread.participants)
        await self.backend.enter("create_thread_if_absent")
        async with self.backend.lock:
            existing = self.backend.threads.get(thread.id)
            if existing is not None:
                return Thread.from_document(existing), False
            self.backend.threads[thread.id] = thread.to_document()
        self.backend.changed()
        return thread, True

    async def list_threads_for(self, user_id: str) -> list[Thread]:
        access.require_self(self.caller_id, user_id, "list threads")
        await self.backend.enter("list_threads_for")
        threads = [Thread.from_document(doc) for doc in self.backend.threads.values()]
        return [thread for thread in threads if thread.has_participant(user_id)]

    async def update_thread_summary(self, thread_id: str, text: str, at: datetime) -> None:
        access.require_caller(self.caller_id)
        await self.backend.enter("update_thread_summary")
        thread = self._load_thread(thread_id)
        access.require_participant(self.caller_id, thread)
        updated = thread.model_copy(update={"last_message": text, "last_message_time": at})
        self.backend.threads[thread_id] = updated.to_document()
        self.backend.changed()

    async def set_participant_photo(self, thread_id: str, user_id: str, url: str) -> None:
        access.require_caller(self.caller_id)
        await self.backend.enter("set_participant_photo")
        thread = self._load_thread(thread_id)
        access.require_participant(self.caller_id, thread)
        photos = {**thread.participant_photos, user_id: url}
        self.backend.threads[thread_id] = thread.model_copy(
            update={"participant_photos": photos}
        ).to_document()
        self.backend.changed()

    def _load_thread(self, thread_id: str) -> Thread:
        doc = self.backend.threads.get(thread_id)
        if doc is None:
            raise NotFoundError(f"Thread {thread_id} not found")
        return Thread.from_document(doc)

    # Messages

    async def add_message(self, message: Message) -> Message:
        access.require_self(self.caller_id, message.sender_id, "send a message")
        await self.backend.enter("add_message")
        thread = self._load_thread(message.thread_id)
        access.require_participant(self.caller_id, thread)
        stored = message.model_copy(update={"id": uuid4().hex, "created_at": self.now()})
        self.backend.messages[message.thread_id].append(stored.to_document())
        self.backend.changed()
        return stored

    async def list_messages(self, thread_id: str, limit: int | None = None) -> list[Message]:
        access.require_caller(self.caller_id)
        await self.backend.enter("list_messages")
        thread = self._load_thread(thread_id)
        access.require_participant(self.caller_id, thread)
        messages = [Message.from_document(doc) for doc in self.backend.messages.get(thread_id, [])]
        if limit is not None:
            messages = messages[-limit:]
        return messages

    # Portfolios

    async def list_portfolio_items(self, owner_id: str) -> list[PortfolioItem]:
        access.require_caller(self.caller_id)
        await self.backend.enter("list_portfolio_items")
        items = [PortfolioItem.from_document(doc) for doc in self.backend.portfolios[owner_id].values()]
        items.sort(key=lambda item: item.created_at or datetime.min.replace(tzinfo=timezone.utc), reverse=True)
        return items

    async def put_portfolio_item(self, item: PortfolioItem) -> PortfolioItem:
        access.require_self(self.caller_id, item.owner_id, "edit a portfolio")
        await self.backend.enter("put_portfolio_item")
        owned = self.backend.portfolios[item.owner_id]
        if item.id is None:
            stored = item.model_copy(update={"id": uuid4().hex, "created_at": self.now()})
        elif item.id in owned:
            created_at = PortfolioItem.from_document(owned[item.id]).created_at
            stored = item.model_copy(update={"created_at": created_at})
        else:
            raise NotFoundError(f"Portfolio item {item.id} not found")
        owned[stored.id] = stored.to_document()
        self.backend.changed()
        return stored

    async def delete_portfolio_item(self, owner_id: str, item_id: str) -> None:
        access.require_self(self.caller_id, owner_id, "edit a portfolio")
        await self.backend.enter("delete_portfolio_item")
        if self.backend.portfolios[owner_id].pop(item_id, None) is None:
            raise NotFoundError(f"Portfolio item {item_id} not found")
        self.backend.changed()

    # Showcases

    async def list_showcases(self, owner_id: str) -> list[Showcase]:
        access.require_caller(self.caller_id)
        await self.backend.enter("list_showcases")
        cards = [Showcase.from_document(doc) for doc in self.backend.showcases[owner_id].values()]
        cards.sort(key=lambda card: card.date, reverse=True)
        return cards

    async def add_showcase(self, showcase: Showcase) -> Showcase:
        access.require_self(self.caller_id, showcase.owner_id, "add a showcase")
        await self.backend.enter("add_showcase")
        stored = showcase.model_copy(update={"id": uuid4().hex})
        self.backend.showcases[showcase.owner_id][stored.id] = stored.to_document()
        self.backend.changed()
        return stored

    async def delete_showcase(self, owner_id: str, showcase_id: str) -> None:
        access.require_self(self.caller_id, owner_id, "delete a showcase")
        await self.backend.enter("delete_showcase")
        if self.backend.showcases[owner_id].pop(showcase_id, None) is None:
            raise NotFoundError(f"Showcase {showcase_id} not found")
        self.backend.changed()
