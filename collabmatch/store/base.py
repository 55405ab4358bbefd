"""Profile & Messaging Store capability interface.

Services receive a store at construction time instead of reaching for a
global client, so the same code runs against Supabase in production and
against ``InMemoryStore`` in tests and local development.

A store instance is bound to one caller. Every method enforces the access
rules in ``collabmatch.store.access`` for that caller and reports failures
with the ``collabmatch.core.errors`` taxonomy.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Awaitable, Callable, TypeVar

from collabmatch.core.snapshots import SnapshotStream
from collabmatch.models import LikeEdge, Message, PortfolioItem, Showcase, Thread, User

T = TypeVar("T")


class ProfileMessagingStore(ABC):
    """Backend collaborator exposing auth, documents and live queries."""

    def __init__(self, caller_id: str | None = None) -> None:
        self.caller_id = caller_id

    def current_user_id(self) -> str | None:
        """Return the authenticated caller id, if any."""
        return self.caller_id

    @abstractmethod
    def now(self) -> datetime:
        """Return the store clock, standing in for a server timestamp."""

    @abstractmethod
    def watch(self, fetch: Callable[[], Awaitable[T]], name: str = "snapshot") -> SnapshotStream[T]:
        """Turn a read into a live stream of full-state snapshots."""

    @abstractmethod
    async def ping(self) -> None:
        """Check backend connectivity. Raises on failure."""

    # Users

    @abstractmethod
    async def get_user(self, user_id: str) -> User:
        """Get a user document.

        Raises:
            NotFoundError: If no such user exists.
        """

    @abstractmethod
    async def put_user(self, user: User, merge: bool = True) -> User:
        """Create or update the caller's own user document.

        With ``merge`` the fields left unset on ``user`` keep their stored
        values; ``None`` never overwrites a stored value.
        """

    @abstractmethod
    async def list_users(self, limit: int = 200) -> list[User]:
        """List user documents, ordered by display name."""

    # Likes

    @abstractmethod
    async def put_like(self, edge: LikeEdge) -> LikeEdge:
        """Upsert a like edge keyed by (liker, target). Returns the stored edge."""

    @abstractmethod
    async def get_like(self, liker_id: str, target_id: str) -> LikeEdge | None:
        """Point lookup of one like edge."""

    @abstractmethod
    async def list_likes(self, liker_id: str) -> list[LikeEdge]:
        """All edges recorded by ``liker_id``."""

    @abstractmethod
    async def list_likers(self, target_id: str) -> list[LikeEdge]:
        """All edges pointing at ``target_id``."""

    # Threads

    @abstractmethod
    async def get_thread(self, thread_id: str) -> Thread:
        """Get a thread the caller participates in.

        Raises:
            NotFoundError: If no such thread exists.
        """

    @abstractmethod
    async def create_thread_if_absent(self, thread: Thread) -> tuple[Thread, bool]:
        """Atomically create ``thread`` unless its id is already taken.

        Returns:
            tuple: (stored thread, created) where ``created`` is False when an
            existing thread with the same id was returned instead.
        """

    @abstractmethod
    async def list_threads_for(self, user_id: str) -> list[Thread]:
        """All threads listing ``user_id`` as a participant."""

    @abstractmethod
    async def update_thread_summary(self, thread_id: str, text: str, at: datetime) -> None:
        """Set the thread's last-message text and time."""

    @abstractmethod
    async def set_participant_photo(self, thread_id: str, user_id: str, url: str) -> None:
        """Cache a participant photo URL on the thread."""

    # Messages

    @abstractmethod
    async def add_message(self, message: Message) -> Message:
        """Append a message to its thread. Returns it with its id."""

    @abstractmethod
    async def list_messages(self, thread_id: str, limit: int | None = None) -> list[Message]:
        """Messages of a thread, oldest first. ``limit`` keeps the newest."""

    # Portfolios

    @abstractmethod
    async def list_portfolio_items(self, owner_id: str) -> list[PortfolioItem]:
        """Portfolio items of a user, newest first."""

    @abstractmethod
    async def put_portfolio_item(self, item: PortfolioItem) -> PortfolioItem:
        """Create (no id) or replace (with id) one of the caller's items."""

    @abstractmethod
    async def delete_portfolio_item(self, owner_id: str, item_id: str) -> None:
        """Delete one of the caller's items.

        Raises:
            NotFoundError: If the item does not exist.
        """

    # Showcases

    @abstractmethod
    async def list_showcases(self, owner_id: str) -> list[Showcase]:
        """Showcase cards of a user, latest date first."""

    @abstractmethod
    async def add_showcase(self, showcase: Showcase) -> Showcase:
        """Add a showcase card for the caller."""

    @abstractmethod
    async def delete_showcase(self, owner_id: str, showcase_id: str) -> None:
        """Delete one of the caller's showcase cards.

        Raises:
            NotFoundError: If the card does not exist.
        """
