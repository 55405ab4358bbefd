"""Showcase card record (opportunities and past collaborations)."""

from datetime import datetime

from pydantic import Field

from collabmatch.models.base import Document


class Showcase(Document):
    """A dated card a user pins to their profile."""

    id: str | None = None
    owner_id: str = Field(min_length=1)
    title: str = ""
    org_name: str = ""
    date: datetime
    link: str = ""
    summary: str = ""
