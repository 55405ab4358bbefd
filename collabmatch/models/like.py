"""Like edge record."""

from datetime import datetime

from pydantic import Field, model_validator

from collabmatch.models.base import Document


class LikeEdge(Document):
    """Directed like from ``liker_id`` to ``target_id``.

    Keyed by the pair itself, so writing the same edge twice replaces it.
    """

    liker_id: str = Field(min_length=1)
    target_id: str = Field(min_length=1)
    created_at: datetime | None = None

    @model_validator(mode="after")
    def _no_self_like(self) -> "LikeEdge":
        if self.liker_id == self.target_id:
            raise ValueError("A user cannot like themselves")
        return self

    @property
    def key(self) -> tuple[str, str]:
        return (self.liker_id, self.target_id)
