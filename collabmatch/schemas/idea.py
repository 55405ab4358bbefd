"""Ideas feed schemas."""

from datetime import datetime

from pydantic import BaseModel, Field


class IdeaArticle(BaseModel):
    """A story shown in the ideas feed."""

    id: str = Field(description="Upstream object id")
    title: str
    points: int
    author: str
    date: datetime
    url: str


class IdeaListResponse(BaseModel):
    """Articles from the external ideas feed."""

    articles: list[IdeaArticle] = Field(default_factory=list)
