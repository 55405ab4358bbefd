"""Message channel: append messages and keep thread summaries current."""

import logging

from collabmatch.core.config import get_settings
from collabmatch.core.errors import InvalidDocumentError, TransientError
from collabmatch.core.snapshots import SnapshotStream
from collabmatch.models import Message
from collabmatch.store import access
from collabmatch.store.base import ProfileMessagingStore

logger = logging.getLogger(__name__)


class MessageService:
    """Service for sending and reading chat messages."""

    DEFAULT_PAGE_SIZE = 50

    def __init__(self, store: ProfileMessagingStore, max_message_length: int | None = None) -> None:
        """Initialize message service with the caller's store."""
        self.store = store
        self.max_message_length = max_message_length or get_settings().max_message_length

    async def send(self, thread_id: str, sender_id: str | None, text: str | None) -> Message | None:
        """Send a text message to a thread.

        Blank text is ignored without touching the store. Otherwise the
        message is appended first and the thread summary is updated second.
        The two writes are not atomic: if the summary update fails the message
        still stands and the next send repairs the summary.

        Args:
            thread_id: Target thread.
            sender_id: The caller.
            text: Message body, stored as given.

        Returns:
            Message | None: The stored message, or None for blank text.

        Raises:
            UnauthenticatedError: If ``sender_id`` is missing.
            PermissionDeniedError: If the sender is not the caller or not a participant.
            NotFoundError: If the thread does not exist.
            InvalidDocumentError: If the text is too long.
            TransientError: If the append fails. Retrying may duplicate the
                message when the first attempt actually landed.
        """
        if text is None or not text.strip():
            logger.debug("Ignoring blank message for thread %s", thread_id)
            return None

        sender = access.require_caller(sender_id)
        if len(text) > self.max_message_length:
            raise InvalidDocumentError(
                f"Message exceeds {self.max_message_length} characters"
            )

        message = Message.build(thread_id=thread_id, sender_id=sender, text=text)
        stored = await self.store.add_message(message)

        summary_time = self.store.now()
        if stored.created_at and stored.created_at > summary_time:
            summary_time = stored.created_at

        try:
            await self.store.update_thread_summary(thread_id, text, summary_time)
        except TransientError as e:
            logger.warning(
                "Message %s stored but thread %s summary not updated: %s",
                stored.id,
                thread_id,
                e.message,
            )
        return stored

    async def list_messages(self, thread_id: str, limit: int | None = None) -> list[Message]:
        """Messages of a thread, oldest first."""
        return await self.store.list_messages(thread_id, limit=limit or self.DEFAULT_PAGE_SIZE)

    def observe_messages(self, thread_id: str, limit: int | None = None) -> SnapshotStream[list[Message]]:
        """Live view of ``list_messages``."""
        return self.store.watch(
            lambda: self.list_messages(thread_id, limit=limit),
            name=f"messages:{thread_id}",
        )
