"""User profile record."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import Field, field_validator

from collabmatch.models.base import Document


class UserRole(str, Enum):
    """Kinds of account a profile can belong to."""

    CONTENT_CREATOR = "content_creator"
    ENTERPRISE = "enterprise"


# Values written by earlier app releases
_LEGACY_ROLES = {
    "media creator": UserRole.CONTENT_CREATOR,
    "media_creator": UserRole.CONTENT_CREATOR,
    "content creator": UserRole.CONTENT_CREATOR,
}


def normalize_tags(tags: list[str] | None) -> list[str]:
    """Strip tags, drop blanks and repeat entries, keep first-seen order."""
    seen: set[str] = set()
    result: list[str] = []
    for tag in tags or []:
        cleaned = tag.strip()
        key = cleaned.lower()
        if cleaned and key not in seen:
            seen.add(key)
            result.append(cleaned)
    return result


class User(Document):
    """User table row representation.

    The id is the auth user id and is assigned by the auth system.
    ``tags`` are shown on the profile; ``searchable`` feeds search and
    similarity and is kept equal to ``tags`` by profile edits.
    """

    id: str = Field(min_length=1)
    display_name: str = ""
    username: str = ""
    role: UserRole = UserRole.CONTENT_CREATOR
    bio: str = ""
    tags: list[str] = Field(default_factory=list)
    searchable: list[str] = Field(default_factory=list)
    photo_url: str | None = None
    cv_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("role", mode="before")
    @classmethod
    def _accept_legacy_role(cls, value: Any) -> Any:
        if isinstance(value, str):
            return _LEGACY_ROLES.get(value.strip().lower(), value.strip().lower())
        return value

    @field_validator("tags", "searchable", mode="before")
    @classmethod
    def _clean_tags(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, list):
            return normalize_tags([str(tag) for tag in value])
        return value

    def similarity(self, tags: list[str]) -> int:
        """Count tags shared with ``tags``, ignoring case."""
        mine = {tag.lower() for tag in self.searchable or self.tags}
        theirs = {tag.strip().lower() for tag in tags}
        return len(mine & theirs)

    def matches_query(self, query: str) -> bool:
        """Case-insensitive substring match on name, username or tags."""
        needle = query.strip().lower()
        if not needle:
            return True
        return (
            needle in self.display_name.lower()
            or needle in self.username.lower()
            or needle in " ".join(self.searchable).lower()
        )
