"""Unit tests for the profile service."""

import pytest

from collabmatch.core.errors import NotFoundError, PermissionDeniedError, TransientError
from collabmatch.models import UserRole
from collabmatch.services.like_service import LikeService
from collabmatch.services.profile_service import ProfileService
from collabmatch.services.thread_service import ThreadService
from collabmatch.store.memory import InMemoryStore, MemoryBackend


@pytest.fixture
def backend() -> MemoryBackend:
    return MemoryBackend()


def profiles_for(backend: MemoryBackend, user_id: str) -> ProfileService:
    return ProfileService(InMemoryStore(backend, user_id))


async def seed(backend: MemoryBackend, user_id: str, name: str, tags: list[str]) -> None:
    await profiles_for(backend, user_id).create_profile(
        user_id=user_id,
        display_name=name,
        username=f"{user_id}@example.com",
        tags=tags,
    )


class TestCreateAndGet:
    """Tests for profile creation and lookup."""

    @pytest.mark.asyncio
    async def test_create_profile(self, backend: MemoryBackend) -> None:
        service = profiles_for(backend, "u1")

        await service.create_profile(
            user_id="u1",
            display_name="Ada",
            username="ada@example.com",
            role=UserRole.ENTERPRISE,
            tags=["Math"],
        )
        profile = await service.get_profile("u1")

        assert profile.display_name == "Ada"
        assert profile.role == UserRole.ENTERPRISE
        assert profile.searchable == ["Math"]

    @pytest.mark.asyncio
    async def test_get_missing_profile(self, backend: MemoryBackend) -> None:
        assert await profiles_for(backend, "u1").get_profile("u9") is None

    @pytest.mark.asyncio
    async def test_ensure_profile_creates_placeholder_once(self, backend: MemoryBackend) -> None:
        service = profiles_for(backend, "u1")

        first = await service.ensure_profile("u1", username="u1@example.com")
        second = await service.ensure_profile("u1", display_name_fallback="Other")

        assert first.display_name == ProfileService.DEFAULT_DISPLAY_NAME
        assert second.display_name == ProfileService.DEFAULT_DISPLAY_NAME

    @pytest.mark.asyncio
    async def test_cannot_create_for_someone_else(self, backend: MemoryBackend) -> None:
        with pytest.raises(PermissionDeniedError):
            await profiles_for(backend, "u1").create_profile("u2", "Bea", "bea")


class TestUpdateProfile:
    @pytest.mark.asyncio
    async def test_partial_update(self, backend: MemoryBackend) -> None:
        await seed(backend, "u1", "Ada", ["math"])

        updated = await profiles_for(backend, "u1").update_profile("u1", bio="Analyst")

        assert updated.bio == "Analyst"
        assert updated.display_name == "Ada"
        assert updated.tags == ["math"]

    @pytest.mark.asyncio
    async def test_tags_replace_searchable(self, backend: MemoryBackend) -> None:
        await seed(backend, "u1", "Ada", ["math"])

        updated = await profiles_for(backend, "u1").update_profile("u1", tags=["Poetry", "poetry"])

        assert updated.tags == ["Poetry"]
        assert updated.searchable == ["Poetry"]

    @pytest.mark.asyncio
    async def test_no_changes_on_missing_profile(self, backend: MemoryBackend) -> None:
        with pytest.raises(NotFoundError):
            await profiles_for(backend, "u1").update_profile("u1")


class TestPhoto:
    @pytest.mark.asyncio
    async def test_photo_refreshes_thread_cache(self, backend: MemoryBackend) -> None:
        await seed(backend, "u1", "Ada", [])
        store = InMemoryStore(backend, "u1")
        thread_id = await ThreadService(store).ensure_direct_thread("u1", "u2")

        profile = await ProfileService(store).set_photo_url("u1", "https://cdn.test/ada.png")

        assert profile.photo_url == "https://cdn.test/ada.png"
        assert (await store.get_thread(thread_id)).participant_photos["u1"] == "https://cdn.test/ada.png"

    @pytest.mark.asyncio
    async def test_thread_cache_failure_is_not_raised(self, backend: MemoryBackend) -> None:
        await seed(backend, "u1", "Ada", [])
        store = InMemoryStore(backend, "u1")
        await ThreadService(store).ensure_direct_thread("u1", "u2")
        backend.fail_next("set_participant_photo", TransientError("offline"))

        profile = await ProfileService(store).set_photo_url("u1", "https://cdn.test/ada.png")

        assert profile.photo_url == "https://cdn.test/ada.png"

    @pytest.mark.asyncio
    async def test_cv_url(self, backend: MemoryBackend) -> None:
        await seed(backend, "u1", "Ada", [])

        profile = await profiles_for(backend, "u1").set_cv_url("u1", "https://cdn.test/cv.pdf")

        assert profile.cv_url == "https://cdn.test/cv.pdf"
        assert profile.display_name == "Ada"


class TestSearchAndSuggestions:
    """Tests for discovery."""

    @pytest.mark.asyncio
    async def test_search_excludes_caller(self, backend: MemoryBackend) -> None:
        await seed(backend, "u1", "Ada", ["music"])
        await seed(backend, "u2", "Bea", ["Music"])
        await seed(backend, "u3", "Cy", ["film"])

        results = await profiles_for(backend, "u1").search_users("MUSIC", exclude_id="u1")

        assert [user.id for user in results] == ["u2"]

    @pytest.mark.asyncio
    async def test_blank_search_lists_everyone(self, backend: MemoryBackend) -> None:
        await seed(backend, "u1", "Ada", [])
        await seed(backend, "u2", "Bea", [])

        results = await profiles_for(backend, "u1").search_users("", limit=1)

        assert [user.id for user in results] == ["u1"]

    @pytest.mark.asyncio
    async def test_suggestions_rank_by_shared_tags(self, backend: MemoryBackend) -> None:
        await seed(backend, "u1", "Ada", ["music", "film", "games"])
        await seed(backend, "u2", "Bea", ["music"])
        await seed(backend, "u3", "Cy", ["music", "film"])
        await seed(backend, "u4", "Dee", [])
        await seed(backend, "u5", "Eve", ["film", "games"])
        await LikeService(InMemoryStore(backend, "u1")).record_like("u1", "u5")

        suggestions = await profiles_for(backend, "u1").suggest_candidates("u1")

        assert [user.id for user in suggestions] == ["u3", "u2", "u4"]
