"""Thread and message schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from collabmatch.models import MessageStatus, MessageType


class ThreadCreate(BaseModel):
    """Request to open (or find) the direct thread with another user."""

    other_user_id: str = Field(..., min_length=1, description="The other participant")


class ThreadCreateResponse(BaseModel):
    """Id of the caller's direct thread with another user."""

    thread_id: str = Field(description="Canonical id of the direct thread")


class ThreadResponse(BaseModel):
    """Thread summary as shown in a thread list."""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(description="Thread identifier")
    participants: list[str] = Field(description="Participant user ids")
    is_group: bool = Field(default=False, description="Group threads are not created by this service")
    last_message: str = Field(default="", description="Text of the latest message, empty if none")
    last_message_time: datetime | None = Field(default=None, description="Time of the latest message")
    participant_photos: dict[str, str] = Field(default_factory=dict, description="Cached avatar urls")
    created_at: datetime | None = Field(default=None, description="Thread creation time")


class ThreadListResponse(BaseModel):
    """The caller's threads, most recent activity first."""

    threads: list[ThreadResponse] = Field(default_factory=list)


class MessageCreate(BaseModel):
    """Request to send a message."""

    text: str = Field(..., description="Message text; blank text is ignored")


class MessageResponse(BaseModel):
    """A stored message."""

    model_config = ConfigDict(from_attributes=True)

    id: str | None = Field(default=None, description="Message identifier")
    thread_id: str = Field(description="Owning thread")
    sender_id: str = Field(description="Author user id")
    text: str = Field(description="Message text")
    status: MessageStatus = Field(description="Delivery status")
    type: MessageType = Field(description="Payload kind")
    created_at: datetime | None = Field(default=None, description="Store-assigned send time")


class MessageListResponse(BaseModel):
    """Messages of a thread, oldest first."""

    messages: list[MessageResponse] = Field(default_factory=list)
