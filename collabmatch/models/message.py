"""Chat message record."""

from datetime import datetime
from enum import Enum

from pydantic import Field, field_validator

from collabmatch.models.base import Document


class MessageStatus(str, Enum):
    """Delivery status. Only ``sent`` exists; there are no receipts."""

    SENT = "sent"


class MessageType(str, Enum):
    """Message payload kind."""

    TEXT = "text"


class Message(Document):
    """Message row representation. Immutable once stored."""

    id: str | None = None
    thread_id: str = Field(min_length=1)
    sender_id: str = Field(min_length=1)
    text: str
    status: MessageStatus = MessageStatus.SENT
    type: MessageType = MessageType.TEXT
    created_at: datetime | None = None

    @field_validator("text")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Message text must not be blank")
        return value
