"""Supabase-backed profile and messaging store.

Tables (public schema):

- ``users``: one row per auth user, primary key ``id``
- ``likes``: primary key ``(liker_id, target_id)``
- ``chats``: text primary key; direct threads use the canonical pair key
- ``messages``: ``thread_id`` references ``chats.id``
- ``portfolios`` and ``showcases``: owned by ``owner_id``
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, TypeVar

import httpx
from postgrest.exceptions import APIError as PostgrestAPIError
from supabase import Client

from collabmatch.core.config import get_settings
from collabmatch.core.errors import (
    InvalidDocumentError,
    NotFoundError,
    PermissionDeniedError,
    StoreError,
    TransientError,
    UnauthenticatedError,
)
from collabmatch.core.snapshots import PollingChangeSource, SnapshotStream
from collabmatch.core.supabase import get_supabase_client
from collabmatch.models import LikeEdge, Message, PortfolioItem, Showcase, Thread, User
from collabmatch.store import access
from collabmatch.store.base import ProfileMessagingStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

_UNAUTHENTICATED_CODES = {"PGRST301", "PGRST302"}
_PERMISSION_CODES = {"42501"}
_NOT_FOUND_CODES = {"PGRST116"}
_INVALID_CODES = {"22P02", "23502", "23503", "23514", "PGRST204"}


def translate_api_error(error: PostgrestAPIError) -> StoreError:
    """Map a PostgREST error onto the store error taxonomy.

    Anything not recognised as a caller mistake is treated as an availability
    problem and reported as transient.
    """
    code = str(error.code or "")
    message = error.message or str(error)

    if code in _UNAUTHENTICATED_CODES:
        return UnauthenticatedError(message)
    if code in _PERMISSION_CODES:
        return PermissionDeniedError(message)
    if code in _NOT_FOUND_CODES:
        return NotFoundError(message)
    if code in _INVALID_CODES:
        return InvalidDocumentError(message)
    return TransientError(message)


class SupabaseStore(ProfileMessagingStore):
    """Store backed by Supabase PostgREST tables."""

    USERS = "users"
    LIKES = "likes"
    CHATS = "chats"
    MESSAGES = "messages"
    PORTFOLIOS = "portfolios"
    SHOWCASES = "showcases"

    def __init__(
        self,
        client: Client | None = None,
        caller_id: str | None = None,
        poll_interval_seconds: float | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            client: Supabase client; defaults to the shared singleton.
            caller_id: Authenticated user the store acts for.
            poll_interval_seconds: Re-read interval for live queries.
        """
        super().__init__(caller_id)
        self.client = client or get_supabase_client()
        self.poll_interval_seconds = (
            poll_interval_seconds or get_settings().snapshot_poll_interval_seconds
        )

    async def _execute(self, query: Any) -> Any:
        """Run a PostgREST request off the event loop and translate failures."""
        try:
            return await asyncio.to_thread(query.execute)
        except PostgrestAPIError as e:
            logger.debug("PostgREST error %s: %s", e.code, e.message)
            raise translate_api_error(e) from e
        except httpx.TransportError as e:
            raise TransientError(f"Supabase unreachable: {e}") from e

    @staticmethod
    def _rows(response: Any) -> list[dict[str, Any]]:
        return list(response.data or []) if response is not None else []

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    def watch(self, fetch: Callable[[], Awaitable[T]], name: str = "snapshot") -> SnapshotStream[T]:
        return SnapshotStream(fetch, PollingChangeSource(self.poll_interval_seconds), name=name)

    async def ping(self) -> None:
        await self._execute(self.client.table(self.USERS).select("id").limit(1))

    # Users

    async def get_user(self, user_id: str) -> User:
        access.require_caller(self.caller_id)
        response = await self._execute(
            self.client.table(self.USERS).select("*").eq("id", user_id).limit(1)
        )
        rows = self._rows(response)
        if not rows:
            raise NotFoundError(f"User {user_id} not found")
        return User.from_document(rows[0])

    async def put_user(self, user: User, merge: bool = True) -> User:
        access.require_self(self.caller_id, user.id, "edit a profile")
        doc = user.to_document(partial=merge)
        doc["id"] = user.id
        doc["updated_at"] = self.now().isoformat()
        response = await self._execute(
            self.client.table(self.USERS).upsert(doc, on_conflict="id")
        )
        rows = self._rows(response)
        return User.from_document(rows[0]) if rows else await self.get_user(user.id)

    async def list_users(self, limit: int = 200) -> list[User]:
        access.require_caller(self.caller_id)
        response = await self._execute(
            self.client.table(self.USERS).select("*").order("display_name").limit(limit)
        )
        return [User.from_document(row) for row in self._rows(response)]

    # Likes

    async def put_like(self, edge: LikeEdge) -> LikeEdge:
        access.require_self(self.caller_id, edge.liker_id, "record a like")
        stored = edge.model_copy(update={"created_at": self.now()})
        response = await self._execute(
            self.client.table(self.LIKES).upsert(
                stored.to_document(), on_conflict="liker_id,target_id"
            )
        )
        rows = self._rows(response)
        return LikeEdge.from_document(rows[0]) if rows else stored

    async def get_like(self, liker_id: str, target_id: str) -> LikeEdge | None:
        access.require_caller(self.caller_id)
        response = await self._execute(
            self.client.table(self.LIKES)
            .select("*")
            .eq("liker_id", liker_id)
            .eq("target_id", target_id)
            .limit(1)
        )
        rows = self._rows(response)
        return LikeEdge.from_document(rows[0]) if rows else None

    async def list_likes(self, liker_id: str) -> list[LikeEdge]:
        access.require_caller(self.caller_id)
        response = await self._execute(
            self.client.table(self.LIKES).select("*").eq("liker_id", liker_id)
        )
        return [LikeEdge.from_document(row) for row in self._rows(response)]

    async def list_likers(self, target_id: str) -> list[LikeEdge]:
        access.require_caller(self.caller_id)
        response = await self._execute(
            self.client.table(self.LIKES).select("*").eq("target_id", target_id)
        )
        return [LikeEdge.from_document(row) for row in self._rows(response)]

    # Threads

    async def _load_thread(self, thread_id: str) -> Thread:
        response = await self._execute(
            self.client.table(self.CHATS).select("*").eq("id", thread_id).limit(1)
        )
        rows = self._rows(response)
        if not rows:
            raise NotFoundError(f"Thread {thread_id} not found")
        return Thread.from_document(rows[0])

    async def get_thread(self, thread_id: str) -> Thread:
        access.require_caller(self.caller_id)
        thread = await self._load_thread(thread_id)
        access.require_participant(self.caller_id, thread)
        return thread

    async def create_thread_if_absent(self, thread: Thread) -> tuple[Thread, bool]:
        access.require_participant_ids(self.caller_id, thread.participants)
        # ON CONFLICT DO NOTHING: only an actual insert returns a row
        response = await self._execute(
            self.client.table(self.CHATS).upsert(
                thread.to_document(), on_conflict="id", ignore_duplicates=True
            )
        )
        rows = self._rows(response)
        if rows:
            return Thread.from_document(rows[0]), True
        return await self._load_thread(thread.id), False

    async def list_threads_for(self, user_id: str) -> list[Thread]:
        access.require_self(self.caller_id, user_id, "list threads")
        response = await self._execute(
            self.client.table(self.CHATS).select("*").contains("participants", [user_id])
        )
        return [Thread.from_document(row) for row in self._rows(response)]

    async def update_thread_summary(self, thread_id: str, text: str, at: datetime) -> None:
        access.require_caller(self.caller_id)
        thread = await self._load_thread(thread_id)
        access.require_participant(self.caller_id, thread)
        await self._execute(
            self.client.table(self.CHATS)
            .update({"last_message": text, "last_message_time": at.isoformat()})
            .eq("id", thread_id)
        )

    async def set_participant_photo(self, thread_id: str, user_id: str, url: str) -> None:
        access.require_caller(self.caller_id)
        thread = await self._load_thread(thread_id)
        access.require_participant(self.caller_id, thread)
        photos = {**thread.participant_photos, user_id: url}
        await self._execute(
            self.client.table(self.CHATS)
            .update({"participant_photos": photos})
            .eq("id", thread_id)
        )

    # Messages

    async def add_message(self, message: Message) -> Message:
        access.require_self(self.caller_id, message.sender_id, "send a message")
        thread = await self._load_thread(message.thread_id)
        access.require_participant(self.caller_id, thread)
        stored = message.model_copy(update={"created_at": self.now()})
        response = await self._execute(
            self.client.table(self.MESSAGES).insert(stored.to_document())
        )
        rows = self._rows(response)
        return Message.from_document(rows[0]) if rows else stored

    async def list_messages(self, thread_id: str, limit: int | None = None) -> list[Message]:
        access.require_caller(self.caller_id)
        thread = await self._load_thread(thread_id)
        access.require_participant(self.caller_id, thread)

        query = self.client.table(self.MESSAGES).select("*").eq("thread_id", thread_id)
        if limit is None:
            response = await self._execute(query.order("created_at", desc=False))
            return [Message.from_document(row) for row in self._rows(response)]

        # Newest N, returned oldest first
        response = await self._execute(query.order("created_at", desc=True).limit(limit))
        return [Message.from_document(row) for row in reversed(self._rows(response))]

    # Portfolios

    async def list_portfolio_items(self, owner_id: str) -> list[PortfolioItem]:
        access.require_caller(self.caller_id)
        response = await self._execute(
            self.client.table(self.PORTFOLIOS)
            .select("*")
            .eq("owner_id", owner_id)
            .order("created_at", desc=True)
        )
        return [PortfolioItem.from_document(row) for row in self._rows(response)]

    async def put_portfolio_item(self, item: PortfolioItem) -> PortfolioItem:
        access.require_self(self.caller_id, item.owner_id, "edit a portfolio")
        if item.id is None:
            doc = item.model_copy(update={"created_at": self.now()}).to_document()
            response = await self._execute(self.client.table(self.PORTFOLIOS).insert(doc))
        else:
            doc = item.to_document()
            doc.pop("created_at", None)
            response = await self._execute(
                self.client.table(self.PORTFOLIOS)
                .update(doc)
                .eq("id", item.id)
                .eq("owner_id", item.owner_id)
            )
        rows = self._rows(response)
        if not rows:
            raise NotFoundError(f"Portfolio item {item.id} not found")
        return PortfolioItem.from_document(rows[0])

    async def delete_portfolio_item(self, owner_id: str, item_id: str) -> None:
        access.require_self(self.caller_id, owner_id, "edit a portfolio")
        response = await self._execute(
            self.client.table(self.PORTFOLIOS).delete().eq("id", item_id).eq("owner_id", owner_id)
        )
        if not self._rows(response):
            raise NotFoundError(f"Portfolio item {item_id} not found")

    # Showcases

    async def list_showcases(self, owner_id: str) -> list[Showcase]:
        access.require_caller(self.caller_id)
        response = await self._execute(
            self.client.table(self.SHOWCASES)
            .select("*")
            .eq("owner_id", owner_id)
            .order("date", desc=True)
        )
        return [Showcase.from_document(row) for row in self._rows(response)]

    async def add_showcase(self, showcase: Showcase) -> Showcase:
        access.require_self(self.caller_id, showcase.owner_id, "add a showcase")
        response = await self._execute(
            self.client.table(self.SHOWCASES).insert(showcase.to_document())
        )
        rows = self._rows(response)
        if not rows:
            raise TransientError("Showcase insert returned no row")
        return Showcase.from_document(rows[0])

    async def delete_showcase(self, owner_id: str, showcase_id: str) -> None:
        access.require_self(self.caller_id, owner_id, "delete a showcase")
        response = await self._execute(
            self.client.table(self.SHOWCASES).delete().eq("id", showcase_id).eq("owner_id", owner_id)
        )
        if not self._rows(response):
            raise NotFoundError(f"Showcase {showcase_id} not found")
