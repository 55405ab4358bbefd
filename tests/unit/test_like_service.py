"""Unit tests for the like service."""

import asyncio

import pytest

from collabmatch.core.errors import InvalidDocumentError, UnauthenticatedError
from collabmatch.services.like_service import LikeService
from collabmatch.store.memory import InMemoryStore, MemoryBackend


@pytest.fixture
def backend() -> MemoryBackend:
    return MemoryBackend()


@pytest.fixture
def service(backend: MemoryBackend) -> LikeService:
    return LikeService(InMemoryStore(backend, "u1"))


class TestRecordLike:
    """Tests for LikeService.record_like."""

    @pytest.mark.asyncio
    async def test_records_edge(self, service: LikeService) -> None:
        edge = await service.record_like("u1", "u2")

        assert edge.key == ("u1", "u2")
        assert await service.has_liked("u1", "u2")
        assert not await service.has_liked("u2", "u1")

    @pytest.mark.asyncio
    async def test_repeat_like_keeps_one_edge(self, service: LikeService) -> None:
        first = await service.record_like("u1", "u2")
        second = await service.record_like("u1", "u2")
        stored = await service.store.get_like("u1", "u2")

        assert await service.liked_ids("u1") == frozenset({"u2"})
        assert second.created_at > first.created_at
        assert stored.created_at == second.created_at

    @pytest.mark.asyncio
    async def test_self_like_rejected(self, service: LikeService) -> None:
        with pytest.raises(InvalidDocumentError):
            await service.record_like("u1", "u1")

    @pytest.mark.asyncio
    async def test_requires_signed_in_user(self, service: LikeService) -> None:
        with pytest.raises(UnauthenticatedError):
            await service.record_like(None, "u2")


class TestQueries:
    @pytest.mark.asyncio
    async def test_likers_of(self, backend: MemoryBackend) -> None:
        await LikeService(InMemoryStore(backend, "u2")).record_like("u2", "u1")
        await LikeService(InMemoryStore(backend, "u3")).record_like("u3", "u1")

        likers = await LikeService(InMemoryStore(backend, "u1")).likers_of("u1")

        assert likers == frozenset({"u2", "u3"})


class TestLikedSetStream:
    """Tests for the live liked set."""

    @pytest.mark.asyncio
    async def test_observer_gets_full_sets(self, service: LikeService) -> None:
        seen: list[frozenset[str]] = []
        subscription = service.observe_liked_set(seen.append)
        await asyncio.sleep(0.01)

        await service.record_like("u1", "u2")
        await asyncio.sleep(0.01)
        await service.record_like("u1", "u3")
        await asyncio.sleep(0.01)
        subscription.cancel()
        await subscription.wait_closed()

        assert seen == [frozenset(), frozenset({"u2"}), frozenset({"u2", "u3"})]

    @pytest.mark.asyncio
    async def test_other_users_likes_do_not_repeat_snapshot(
        self, service: LikeService, backend: MemoryBackend
    ) -> None:
        seen: list[frozenset[str]] = []
        subscription = service.observe_liked_set(seen.append)
        await asyncio.sleep(0.01)

        await LikeService(InMemoryStore(backend, "u9")).record_like("u9", "u1")
        await asyncio.sleep(0.01)
        subscription.cancel()
        await subscription.wait_closed()

        assert seen == [frozenset()]

    def test_stream_requires_signed_in_user(self, backend: MemoryBackend) -> None:
        with pytest.raises(UnauthenticatedError):
            LikeService(InMemoryStore(backend, None)).liked_set_stream()
