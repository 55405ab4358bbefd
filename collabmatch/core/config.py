"""Application configuration management using Pydantic Settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings can be overridden via environment variables.
    Supabase credentials are only required when the Supabase store is selected.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="collabmatch", description="Application name")
    app_env: str = Field(default="development", description="Environment (development/staging/production)")
    debug: bool = Field(default=False, description="Enable debug mode")

    # Server
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8080, description="Server port")

    # CORS
    cors_origins: str = Field(
        default="http://localhost:3000,http://localhost:5173",
        description="Comma-separated list of allowed CORS origins",
    )

    # Auth redirects
    auth_redirect_url: str = Field(
        default="http://localhost:3000",
        description="Redirect URL after email verification",
    )

    # Supabase
    supabase_url: str = Field(default="", description="Supabase project URL")
    supabase_secret_key: str = Field(default="", description="Supabase secret key for backend operations")
    supabase_signing_key_jwk: str = Field(default="", description="Supabase signing key JWK (JSON string) for JWT token verification")

    # Store
    store_backend: Literal["supabase", "memory"] = Field(
        default="supabase",
        description="Profile & messaging store implementation",
    )
    snapshot_poll_interval_seconds: float = Field(
        default=2.0,
        gt=0,
        description="How often live queries re-read the Supabase store",
    )

    # Messaging
    max_message_length: int = Field(default=4000, gt=0, description="Maximum characters per chat message")

    # Ideas feed
    ideas_api_url: str = Field(
        default="https://hn.algolia.com/api/v1/search",
        description="Search endpoint for the ideas feed",
    )
    ideas_page_size: int = Field(default=30, gt=0, description="Articles per ideas feed page")
    ideas_timeout_seconds: float = Field(default=10.0, gt=0, description="Ideas feed request timeout")

    @model_validator(mode="after")
    def require_supabase_credentials(self) -> "Settings":
        """Reject a Supabase store without a project URL and secret key."""
        if self.store_backend == "supabase" and not (self.supabase_url and self.supabase_secret_key):
            raise ValueError(
                "SUPABASE_URL and SUPABASE_SECRET_KEY are required when STORE_BACKEND=supabase"
            )
        return self

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins string into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.app_env == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings singleton.

    Returns:
        Settings: Application settings instance.

    Note:
        Settings are cached using lru_cache for performance.
        Call get_settings.cache_clear() to reload settings.
    """
    return Settings()
