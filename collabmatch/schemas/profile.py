"""Profile, portfolio and showcase Pydantic schemas for API request/response models."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from collabmatch.models import UserRole


class ProfileUpdate(BaseModel):
    """Schema for updating a profile.

    All fields are optional for partial updates.
    """

    model_config = ConfigDict(from_attributes=True)

    display_name: str | None = Field(default=None, max_length=255, description="New display name")
    bio: str | None = Field(default=None, max_length=2000, description="New biography")
    tags: list[str] | None = Field(default=None, description="Replacement interest tags")
    role: UserRole | None = Field(default=None, description="New account kind")
    photo_url: str | None = Field(default=None, description="URL of an uploaded avatar")
    cv_url: str | None = Field(default=None, description="URL of an uploaded CV")


class ProfileResponse(BaseModel):
    """Schema for profile API responses."""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(description="Auth user id")
    display_name: str = Field(description="Name shown to other users")
    username: str = Field(description="Login handle")
    role: UserRole = Field(description="Account kind")
    bio: str = Field(default="", description="Biography")
    tags: list[str] = Field(default_factory=list, description="Interest tags")
    photo_url: str | None = Field(default=None, description="Avatar URL")
    cv_url: str | None = Field(default=None, description="CV URL")
    created_at: datetime | None = Field(default=None, description="Profile creation timestamp")
    updated_at: datetime | None = Field(default=None, description="Last update timestamp")


class ProfileListResponse(BaseModel):
    """A list of profiles."""

    profiles: list[ProfileResponse] = Field(default_factory=list)


class PortfolioItemCreate(BaseModel):
    """Create or replace a project card."""

    id: str | None = Field(default=None, description="Existing card to replace")
    title: str | None = Field(default=None, max_length=255, description="Project title; blank means Untitled")
    role: str = Field(default="", max_length=255, description="The user's role on the project")
    description: str = Field(default="", max_length=4000)
    skills: list[str] = Field(default_factory=list)
    media_urls: list[str] = Field(default_factory=list)
    start_date: datetime | None = None
    end_date: datetime | None = None


class PortfolioItemResponse(BaseModel):
    """A project card."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    owner_id: str
    title: str
    role: str
    description: str
    skills: list[str]
    media_urls: list[str]
    start_date: datetime | None = None
    end_date: datetime | None = None
    created_at: datetime | None = None


class PortfolioListResponse(BaseModel):
    """A user's project cards, newest first."""

    items: list[PortfolioItemResponse] = Field(default_factory=list)


class ShowcaseCreate(BaseModel):
    """Add a showcase card."""

    title: str = Field(..., min_length=1, max_length=255)
    org_name: str = Field(default="", max_length=255, description="Organisation behind the card")
    date: datetime = Field(..., description="Date the card refers to")
    link: str = Field(default="", description="External link")
    summary: str = Field(default="", max_length=4000)


class ShowcaseResponse(BaseModel):
    """A showcase card."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    owner_id: str
    title: str
    org_name: str
    date: datetime
    link: str
    summary: str


class ShowcaseListResponse(BaseModel):
    """A user's showcase cards, latest date first."""

    showcases: list[ShowcaseResponse] = Field(default_factory=list)
