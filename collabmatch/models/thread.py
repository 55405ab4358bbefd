"""Chat thread record and the canonical direct-thread key."""

from datetime import datetime, timezone

from pydantic import Field, model_validator

from collabmatch.core.errors import InvalidDocumentError
from collabmatch.models.base import Document

DIRECT_KEY_SEPARATOR = "_"

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _escape(user_id: str) -> str:
    return user_id.replace("%", "%25").replace(DIRECT_KEY_SEPARATOR, "%5F")


def direct_thread_key(a: str, b: str) -> str:
    """Return the document id of the direct thread between two users.

    The id is the sorted pair joined by ``_``, so both participants derive the
    same key. Separator characters inside ids are escaped to keep distinct
    pairs from colliding.

    Raises:
        InvalidDocumentError: If an id is empty or both ids are the same.
    """
    if not a or not b:
        raise InvalidDocumentError("Participant ids must be non-empty")
    if a == b:
        raise InvalidDocumentError("A direct thread needs two distinct participants")
    first, second = sorted((a, b))
    return f"{_escape(first)}{DIRECT_KEY_SEPARATOR}{_escape(second)}"


class Thread(Document):
    """Chat thread row representation.

    Only direct (two-party) threads are created by this service. Older threads
    may carry generated ids; those are still read, listed and messaged.
    """

    id: str = Field(min_length=1)
    participants: list[str]
    is_group: bool = False
    last_message: str = ""
    last_message_time: datetime | None = None
    participant_photos: dict[str, str] = Field(default_factory=dict)
    created_at: datetime | None = None

    @model_validator(mode="after")
    def _check_participants(self) -> "Thread":
        if any(not participant for participant in self.participants):
            raise ValueError("Participant ids must be non-empty")
        if not self.is_group and (
            len(self.participants) != 2 or self.participants[0] == self.participants[1]
        ):
            raise ValueError("A direct thread needs exactly two distinct participants")
        return self

    @classmethod
    def new_direct(
        cls,
        a: str,
        b: str,
        created_at: datetime,
        participant_photos: dict[str, str] | None = None,
    ) -> "Thread":
        """Build a fresh direct thread keyed by the canonical pair id."""
        return cls.build(
            id=direct_thread_key(a, b),
            participants=sorted((a, b)),
            is_group=False,
            last_message="",
            last_message_time=created_at,
            participant_photos=participant_photos or {},
            created_at=created_at,
        )

    @property
    def pair(self) -> frozenset[str]:
        return frozenset(self.participants)

    @property
    def activity_time(self) -> datetime:
        """Most recent activity, used to order inbox listings."""
        return self.last_message_time or self.created_at or _EPOCH

    @property
    def is_started(self) -> bool:
        return bool(self.last_message)

    def has_participant(self, user_id: str) -> bool:
        return user_id in self.participants

    def other_participant(self, user_id: str) -> str | None:
        return next((p for p in self.participants if p != user_id), None)
