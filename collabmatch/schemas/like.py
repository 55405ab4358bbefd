"""Like and match schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class LikeResponse(BaseModel):
    """A stored like edge."""

    model_config = ConfigDict(from_attributes=True)

    liker_id: str = Field(description="User who liked")
    target_id: str = Field(description="User who was liked")
    created_at: datetime | None = Field(default=None, description="When the like was recorded")


class MatchResponse(BaseModel):
    """Outcome of liking a user."""

    like: LikeResponse = Field(description="The stored like")
    mutual: bool = Field(description="Whether the target already liked the caller")
    thread_id: str | None = Field(default=None, description="Direct thread of the match, if created")
    promotion_pending: bool = Field(
        default=False,
        description="The like is stored but creating the match thread failed; reconcile later",
    )


class LikedStatusResponse(BaseModel):
    """Whether the caller likes a given user."""

    target_id: str
    liked: bool


class LikedSetResponse(BaseModel):
    """Everyone the caller likes."""

    liked_ids: list[str] = Field(default_factory=list, description="Liked user ids, sorted")


class MatchListResponse(BaseModel):
    """Users the caller is matched with."""

    user_ids: list[str] = Field(default_factory=list, description="Matched user ids, sorted")


class ReconcileResponse(BaseModel):
    """Result of re-deriving matches from stored likes."""

    threads: dict[str, str] = Field(
        default_factory=dict,
        description="Matched user id to direct thread id",
    )
