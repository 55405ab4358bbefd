"""Authentication business logic service."""

import logging
from typing import Any, Callable

import httpx
from supabase_auth.errors import AuthError as SupabaseAuthError

from collabmatch.api.middleware.error_handler import AuthenticationError, ValidationError
from collabmatch.core.config import get_settings
from collabmatch.core.errors import TransientError
from collabmatch.core.supabase import create_auth_client
from collabmatch.models import UserRole
from collabmatch.services.profile_service import ProfileService
from collabmatch.store.base import ProfileMessagingStore
from collabmatch.store.factory import create_store

logger = logging.getLogger(__name__)


class AuthService:
    """Service for signing users up, in and out."""

    def __init__(
        self,
        store_factory: Callable[[str | None], ProfileMessagingStore] = create_store,
    ) -> None:
        """Initialize auth service with an isolated Supabase client.

        Args:
            store_factory: Builds a store bound to a user id, used to write
                the profile of a newly signed up user.
        """
        self.client = create_auth_client()
        self.settings = get_settings()
        self.store_factory = store_factory

    async def signup(
        self,
        email: str,
        password: str,
        display_name: str,
        role: UserRole = UserRole.CONTENT_CREATOR,
        bio: str = "",
        tags: list[str] | None = None,
    ) -> dict[str, Any]:
        """Sign up a new user and create their profile.

        Args:
            email: User's email address, also used as username.
            password: User's password.
            display_name: Name shown to other users.
            role: Account kind.
            bio: Free-text biography.
            tags: Interest tags.

        Returns:
            dict: Signup response with user_id, email and email_sent status.

        Raises:
            ValidationError: If signup fails (e.g., email already exists).
        """
        try:
            response = self.client.auth.sign_up(
                {
                    "email": email,
                    "password": password,
                    "options": {
                        "email_redirect_to": self.settings.auth_redirect_url,
                        "data": {"full_name": display_name},
                    },
                }
            )
        except SupabaseAuthError as e:
            error_msg = str(e)
            logger.error("Signup failed: %s", error_msg)
            if "already registered" in error_msg.lower() or "already exists" in error_msg.lower():
                raise ValidationError("An account with this email already exists") from e
            if "password" in error_msg.lower() and "weak" in error_msg.lower():
                raise ValidationError("Password is too weak. Please use a stronger password.") from e
            raise ValidationError(f"Signup failed: {error_msg}") from e
        except httpx.TransportError as e:
            raise TransientError("Auth service unreachable") from e

        if not response.user:
            raise ValidationError("Failed to create user account")

        user_id = str(response.user.id)
        logger.info("User signed up: %s", user_id)

        profiles = ProfileService(self.store_factory(user_id))
        await profiles.create_profile(
            user_id=user_id,
            display_name=display_name,
            username=email,
            role=role,
            bio=bio,
            tags=tags,
        )

        return {
            "user_id": user_id,
            "email": response.user.email or email,
            "email_sent": response.session is None,  # No session until the email is verified
            "message": "User created successfully. Please check your email to verify your account.",
        }

    async def login(self, email: str, password: str) -> dict[str, Any]:
        """Login user with email and password.

        Makes sure a profile document exists for accounts created before
        profiles were written at signup.

        Returns:
            dict: Login response with access_token, refresh_token, and user info.

        Raises:
            AuthenticationError: If the credentials are rejected.
        """
        try:
            response = self.client.auth.sign_in_with_password(
                {
                    "email": email,
                    "password": password,
                }
            )
        except SupabaseAuthError as e:
            error_msg = str(e)
            logger.warning("Login failed: %s", error_msg)
            if "email not confirmed" in error_msg.lower():
                raise AuthenticationError("Please verify your email before logging in") from e
            raise AuthenticationError("Invalid email or password") from e
        except httpx.TransportError as e:
            raise TransientError("Auth service unreachable") from e

        if not response.user or not response.session:
            raise AuthenticationError("Login failed: No session created")

        user = response.user
        session = response.session
        user_id = str(user.id)
        logger.info("User logged in: %s", user_id)

        await ProfileService(self.store_factory(user_id)).ensure_profile(
            user_id,
            username=user.email or email,
        )

        return {
            "access_token": session.access_token,
            "refresh_token": session.refresh_token,
            "user_id": user_id,
            "email": user.email or email,
            "expires_in": session.expires_in or 3600,
        }

    async def logout(self, access_token: str) -> dict[str, Any]:
        """Logout user by invalidating their session.

        Failures are logged only; the client discards its token either way.
        """
        try:
            self.client.auth.set_session(access_token, "")
            self.client.auth.sign_out()
            logger.info("User logged out")
        except (SupabaseAuthError, httpx.TransportError) as e:
            logger.warning("Logout failed: %s", str(e))

        return {"message": "Logged out successfully"}

    async def refresh_token(self, refresh_token: str) -> dict[str, Any]:
        """Refresh access token using refresh token.

        Raises:
            AuthenticationError: If the refresh token is rejected.
        """
        try:
            response = self.client.auth.refresh_session(refresh_token)
        except SupabaseAuthError as e:
            logger.warning("Token refresh failed: %s", str(e))
            raise AuthenticationError("Invalid or expired refresh token") from e
        except httpx.TransportError as e:
            raise TransientError("Auth service unreachable") from e

        if not response.session:
            raise AuthenticationError("Failed to refresh token")

        session = response.session
        return {
            "access_token": session.access_token,
            "refresh_token": session.refresh_token,
            "expires_in": session.expires_in or 3600,
        }
