"""Portfolio project card record."""

from datetime import datetime, timezone
from typing import Any

from pydantic import Field, field_validator, model_validator

from collabmatch.models.base import Document
from collabmatch.models.user import normalize_tags

DEFAULT_TITLE = "Untitled"


class PortfolioItem(Document):
    """A project card shown on a user's portfolio."""

    id: str | None = None
    owner_id: str = Field(min_length=1)
    title: str = DEFAULT_TITLE
    role: str = ""
    description: str = ""
    skills: list[str] = Field(default_factory=list)
    media_urls: list[str] = Field(default_factory=list)
    start_date: datetime | None = None
    end_date: datetime | None = None
    created_at: datetime | None = None

    @field_validator("title", mode="before")
    @classmethod
    def _default_title(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return DEFAULT_TITLE
        return value.strip() if isinstance(value, str) else value

    @field_validator("skills", mode="before")
    @classmethod
    def _clean_skills(cls, value: Any) -> Any:
        if isinstance(value, list):
            return normalize_tags([str(skill) for skill in value])
        return value or []

    @field_validator("start_date", "end_date")
    @classmethod
    def _assume_utc(cls, value: datetime | None) -> datetime | None:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @model_validator(mode="after")
    def _dates_in_order(self) -> "PortfolioItem":
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("Project end date precedes its start date")
        return self
