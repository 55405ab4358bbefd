"""Unit tests for live snapshot streams."""

import asyncio
import logging

import pytest

from collabmatch.core.errors import PermissionDeniedError, TransientError
from collabmatch.core.snapshots import ChangeFeed, PollingChangeSource, SnapshotStream


class Source:
    """Mutable value read by a stream, with a feed to announce changes."""

    def __init__(self, value: object) -> None:
        self.value = value
        self.feed = ChangeFeed()
        self.reads = 0
        self.failures: list[Exception] = []

    async def fetch(self) -> object:
        self.reads += 1
        if self.failures:
            raise self.failures.pop(0)
        return self.value

    def set(self, value: object) -> None:
        self.value = value
        self.feed.notify()


async def next_snapshot(stream: SnapshotStream, timeout: float = 1.0) -> object:
    return await asyncio.wait_for(stream.__anext__(), timeout)


class TestSnapshotStream:
    """Tests for SnapshotStream iteration."""

    @pytest.mark.asyncio
    async def test_first_snapshot_is_current_state(self) -> None:
        source = Source([1])
        stream = SnapshotStream(source.fetch, source.feed)

        assert await next_snapshot(stream) == [1]

    @pytest.mark.asyncio
    async def test_yields_full_state_after_change(self) -> None:
        source = Source([1])
        stream = SnapshotStream(source.fetch, source.feed)
        await next_snapshot(stream)

        source.set([1, 2])

        assert await next_snapshot(stream) == [1, 2]

    @pytest.mark.asyncio
    async def test_unchanged_state_is_not_repeated(self) -> None:
        source = Source([1])
        stream = SnapshotStream(source.fetch, source.feed)
        await next_snapshot(stream)

        source.feed.notify()
        with pytest.raises(asyncio.TimeoutError):
            await next_snapshot(stream, timeout=0.05)
        source.set([2])

        assert await next_snapshot(stream) == [2]

    @pytest.mark.asyncio
    async def test_transient_read_failure_waits_for_next_change(self) -> None:
        source = Source("a")
        source.failures.append(TransientError("offline"))
        stream = SnapshotStream(source.fetch, source.feed)

        pending = asyncio.ensure_future(stream.__anext__())
        await asyncio.sleep(0.01)
        assert not pending.done()

        source.set("b")

        assert await asyncio.wait_for(pending, 1.0) == "b"

    @pytest.mark.asyncio
    async def test_other_errors_propagate(self) -> None:
        source = Source("a")
        source.failures.append(RuntimeError("boom"))
        stream = SnapshotStream(source.fetch, source.feed)

        with pytest.raises(RuntimeError):
            await next_snapshot(stream)

    @pytest.mark.asyncio
    async def test_close_ends_iteration(self) -> None:
        source = Source(1)
        stream = SnapshotStream(source.fetch, source.feed)
        await next_snapshot(stream)

        pending = asyncio.ensure_future(stream.__anext__())
        await asyncio.sleep(0.01)
        stream.close()

        with pytest.raises(StopAsyncIteration):
            await asyncio.wait_for(pending, 1.0)
        assert stream.closed

    @pytest.mark.asyncio
    async def test_closed_stream_is_not_restartable(self) -> None:
        source = Source(1)
        async with SnapshotStream(source.fetch, source.feed) as stream:
            await next_snapshot(stream)

        with pytest.raises(StopAsyncIteration):
            await next_snapshot(stream)

    @pytest.mark.asyncio
    async def test_polling_source_rereads(self) -> None:
        source = Source(1)
        stream = SnapshotStream(source.fetch, PollingChangeSource(0.01))
        await next_snapshot(stream)

        source.value = 2

        assert await next_snapshot(stream) == 2
        assert source.reads >= 2


class TestSubscription:
    """Tests for observer subscriptions."""

    @pytest.mark.asyncio
    async def test_observer_receives_snapshots(self) -> None:
        source = Source(1)
        seen: list[object] = []
        subscription = SnapshotStream(source.fetch, source.feed).subscribe(seen.append)
        await asyncio.sleep(0.01)

        source.set(2)
        await asyncio.sleep(0.01)
        subscription.cancel()
        await subscription.wait_closed()

        assert seen == [1, 2]

    @pytest.mark.asyncio
    async def test_async_observer(self) -> None:
        source = Source("x")
        seen: list[object] = []

        async def observer(value: object) -> None:
            seen.append(value)

        subscription = SnapshotStream(source.fetch, source.feed).subscribe(observer)
        await asyncio.sleep(0.01)
        subscription.cancel()
        await subscription.wait_closed()

        assert seen == ["x"]

    @pytest.mark.asyncio
    async def test_no_delivery_after_cancel(self) -> None:
        source = Source(1)
        seen: list[object] = []
        subscription = SnapshotStream(source.fetch, source.feed).subscribe(seen.append)
        await asyncio.sleep(0.01)

        subscription.cancel()
        source.set(2)
        await asyncio.sleep(0.01)
        await subscription.wait_closed()

        assert seen == [1]
        assert not subscription.active

    @pytest.mark.asyncio
    async def test_cancel_is_idempotent(self) -> None:
        source = Source(1)
        subscription = SnapshotStream(source.fetch, source.feed).subscribe(lambda _: None)

        subscription.cancel()
        subscription.cancel()
        await subscription.wait_closed()

        assert not subscription.active

    @pytest.mark.asyncio
    async def test_failing_observer_ends_subscription(self, caplog: pytest.LogCaptureFixture) -> None:
        source = Source(1)
        seen: list[object] = []

        def observer(value: object) -> None:
            seen.append(value)
            if value == 2:
                raise RuntimeError("observer failed")

        subscription = SnapshotStream(source.fetch, source.feed, name="likes").subscribe(observer)
        await asyncio.sleep(0.01)

        with caplog.at_level(logging.ERROR, logger="collabmatch.core.snapshots"):
            source.set(2)
            await subscription.wait_closed()
        source.set(3)
        await asyncio.sleep(0.01)

        assert seen == [1, 2]
        assert not subscription.active
        assert "likes subscription stopped" in caplog.text

    @pytest.mark.asyncio
    async def test_store_error_ends_subscription(self, caplog: pytest.LogCaptureFixture) -> None:
        source = Source(1)
        seen: list[object] = []
        subscription = SnapshotStream(source.fetch, source.feed).subscribe(seen.append)
        await asyncio.sleep(0.01)

        with caplog.at_level(logging.ERROR, logger="collabmatch.core.snapshots"):
            source.failures.append(PermissionDeniedError())
            source.set(2)
            await subscription.wait_closed()

        assert seen == [1]
        assert not subscription.active
        assert "snapshot subscription stopped" in caplog.text
