"""Authentication schemas for JWT tokens and user context."""

from pydantic import BaseModel, ConfigDict, Field

from collabmatch.models import UserRole


class UserContext(BaseModel):
    """Authenticated user context extracted from JWT token.

    Populated by the auth dependency from the validated JWT.
    """

    model_config = ConfigDict(from_attributes=True)

    user_id: str = Field(min_length=1, description="Auth user id (from JWT sub claim)")
    email: str | None = Field(default=None, description="User's email address if available")
    role: str | None = Field(default=None, description="Auth role claim (e.g., 'authenticated')")


class TokenPayload(BaseModel):
    """JWT token payload structure for Supabase tokens."""

    model_config = ConfigDict(from_attributes=True)

    sub: str = Field(description="Subject - the user's id")
    email: str | None = Field(default=None, description="User's email address")
    role: str | None = Field(default=None, description="User's role")
    exp: int = Field(description="Expiration timestamp (Unix epoch)")
    iat: int = Field(description="Issued at timestamp (Unix epoch)")
    aud: str | list[str] | None = Field(default=None, description="Audience - intended recipient")
    iss: str | None = Field(default=None, description="Issuer - token issuer URL")

    def to_user_context(self) -> UserContext:
        """Convert token payload to UserContext."""
        return UserContext(
            user_id=self.sub,
            email=self.email,
            role=self.role,
        )


class SignupRequest(BaseModel):
    """Request schema for user signup."""

    model_config = ConfigDict(from_attributes=True)

    email: str = Field(..., description="User's email address", min_length=3, max_length=255)
    password: str = Field(..., description="User's password", min_length=8, max_length=100)
    display_name: str = Field(..., description="Name shown to other users", min_length=1, max_length=255)
    role: UserRole = Field(default=UserRole.CONTENT_CREATOR, description="Account kind")
    bio: str = Field(default="", description="Free-text biography", max_length=2000)
    tags: list[str] = Field(default_factory=list, description="Interest tags")


class SignupResponse(BaseModel):
    """Response schema for user signup."""

    model_config = ConfigDict(from_attributes=True)

    user_id: str = Field(description="Newly created user ID")
    email: str = Field(description="User's email address")
    message: str = Field(description="Success message")
    email_sent: bool = Field(description="Whether verification email was sent")


class LoginRequest(BaseModel):
    """Request schema for user login."""

    model_config = ConfigDict(from_attributes=True)

    email: str = Field(..., description="User's email address")
    password: str = Field(..., description="User's password")


class LoginResponse(BaseModel):
    """Response schema for user login."""

    model_config = ConfigDict(from_attributes=True)

    access_token: str = Field(description="JWT access token")
    refresh_token: str = Field(description="Refresh token for getting new access tokens")
    user_id: str = Field(description="User ID")
    email: str = Field(description="User's email address")
    expires_in: int = Field(description="Token expiration time in seconds")


class LogoutResponse(BaseModel):
    """Response schema for logout."""

    message: str = Field(description="Logout status message")


class RefreshRequest(BaseModel):
    """Request schema for refreshing an access token."""

    refresh_token: str = Field(..., description="Refresh token from login")


class RefreshResponse(BaseModel):
    """Response schema for token refresh."""

    model_config = ConfigDict(from_attributes=True)

    access_token: str = Field(description="New JWT access token")
    refresh_token: str = Field(description="New refresh token")
    expires_in: int = Field(description="Token expiration time in seconds")
