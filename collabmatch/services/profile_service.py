"""Profile business logic service."""

import logging
from typing import Any

from collabmatch.core.errors import NotFoundError, StoreError
from collabmatch.models import User, UserRole
from collabmatch.store import access
from collabmatch.store.base import ProfileMessagingStore

logger = logging.getLogger(__name__)


class ProfileService:
    """Service for managing user profiles."""

    DEFAULT_DISPLAY_NAME = "New User"
    DEFAULT_SEARCH_LIMIT = 50
    DEFAULT_SUGGESTION_LIMIT = 20

    def __init__(self, store: ProfileMessagingStore) -> None:
        """Initialize profile service with the caller's store."""
        self.store = store

    async def get_profile(self, user_id: str) -> User | None:
        """Get a profile by user ID.

        Args:
            user_id: The auth user ID.

        Returns:
            User | None: The profile or None if not found.
        """
        try:
            return await self.store.get_user(user_id)
        except NotFoundError:
            return None

    async def create_profile(
        self,
        user_id: str,
        display_name: str,
        username: str,
        role: UserRole = UserRole.CONTENT_CREATOR,
        bio: str = "",
        tags: list[str] | None = None,
    ) -> User:
        """Create the profile document written at signup.

        Args:
            user_id: The auth user ID.
            display_name: Name shown to other users.
            username: Login handle, usually the email.
            role: Account kind.
            bio: Free-text biography.
            tags: Interest tags; also used as the searchable set.

        Returns:
            User: The stored profile.
        """
        user = User.build(
            id=user_id,
            display_name=display_name,
            username=username,
            role=role,
            bio=bio,
            tags=tags or [],
            searchable=tags or [],
        )
        stored = await self.store.put_user(user, merge=True)
        logger.info("Profile created: %s", user_id)
        return stored

    async def ensure_profile(
        self,
        user_id: str,
        username: str | None = None,
        display_name_fallback: str | None = None,
    ) -> User:
        """Get the caller's profile, creating a placeholder if it is missing.

        Args:
            user_id: The auth user ID.
            username: Login handle; defaults to the user ID.
            display_name_fallback: Name for a newly created profile.

        Returns:
            User: The existing or newly created profile.
        """
        profile = await self.get_profile(user_id)
        if profile:
            return profile

        return await self.create_profile(
            user_id=user_id,
            display_name=display_name_fallback or self.DEFAULT_DISPLAY_NAME,
            username=username or user_id,
        )

    async def update_profile(
        self,
        user_id: str,
        display_name: str | None = None,
        bio: str | None = None,
        tags: list[str] | None = None,
        role: UserRole | None = None,
    ) -> User:
        """Update a profile.

        Only the arguments that are not None change. New tags replace both
        the displayed tags and the searchable set.

        Returns:
            User: The updated profile.
        """
        changes: dict[str, Any] = {}
        if display_name is not None:
            changes["display_name"] = display_name
        if bio is not None:
            changes["bio"] = bio
        if role is not None:
            changes["role"] = role
        if tags is not None:
            changes["tags"] = tags
            changes["searchable"] = tags

        if not changes:
            profile = await self.get_profile(user_id)
            if profile is None:
                raise NotFoundError(f"User {user_id} not found")
            return profile

        return await self.store.put_user(User.build(id=user_id, **changes), merge=True)

    async def set_photo_url(self, user_id: str, url: str) -> User:
        """Point the profile at an uploaded avatar.

        Also refreshes the cached photo on the user's threads. Failing to
        refresh a cache is logged, not raised; the profile is the source of
        truth.
        """
        stored = await self.store.put_user(User.build(id=user_id, photo_url=url), merge=True)

        try:
            threads = await self.store.list_threads_for(user_id)
            for thread in threads:
                await self.store.set_participant_photo(thread.id, user_id, url)
        except StoreError as e:
            logger.warning("Photo cache refresh for %s incomplete: %s", user_id, e.message)
        return stored

    async def set_cv_url(self, user_id: str, url: str) -> User:
        """Point the profile at an uploaded CV document."""
        return await self.store.put_user(User.build(id=user_id, cv_url=url), merge=True)

    async def search_users(
        self,
        query: str,
        exclude_id: str | None = None,
        limit: int | None = None,
    ) -> list[User]:
        """Find users by name, username or tag.

        Args:
            query: Case-insensitive substring; blank matches everyone.
            exclude_id: User to leave out, normally the caller.
            limit: Maximum results to return.

        Returns:
            list[User]: Matching users ordered by display name.
        """
        users = await self.store.list_users()
        matches = [
            user for user in users
            if user.id != exclude_id and user.matches_query(query)
        ]
        return matches[: limit or self.DEFAULT_SEARCH_LIMIT]

    async def suggest_candidates(self, me: str | None, limit: int | None = None) -> list[User]:
        """Rank users the caller has not liked yet by shared tags.

        Returns:
            list[User]: Candidates, most shared tags first, then by name.
        """
        user_id = access.require_caller(me)
        profile = await self.get_profile(user_id)
        my_tags = (profile.searchable or profile.tags) if profile else []

        liked = {edge.target_id for edge in await self.store.list_likes(user_id)}
        candidates = [
            user for user in await self.store.list_users()
            if user.id != user_id and user.id not in liked
        ]
        candidates.sort(key=lambda user: (-user.similarity(my_tags), user.display_name.lower(), user.id))
        return candidates[: limit or self.DEFAULT_SUGGESTION_LIMIT]
