"""Live query streams that deliver full-state snapshots.

A ``SnapshotStream`` re-runs a query whenever its change source reports a
change and yields the complete result each time, never a diff. Streams are
lazy, unbounded and non-restartable: once closed they produce nothing more.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Generic, Protocol, TypeVar

from collabmatch.core.errors import TransientError

logger = logging.getLogger(__name__)

T = TypeVar("T")

Observer = Callable[[T], Any]


class ChangeSource(Protocol):
    """Something a stream can wait on between two reads."""

    def token(self) -> Any:
        """Return a marker of the current state, taken before a read."""
        ...

    async def wait(self, token: Any) -> None:
        """Return once the state may differ from the one ``token`` marks."""
        ...


class ChangeFeed:
    """Version counter that wakes waiters on every write.

    Used by stores that observe their own writes. Taking the token before a
    read and waiting on it afterwards means a write landing in between is
    never missed.
    """

    def __init__(self) -> None:
        self._version = 0
        self._event = asyncio.Event()

    def token(self) -> int:
        return self._version

    def notify(self) -> None:
        """Record a change and wake every waiter."""
        self._version += 1
        event, self._event = self._event, asyncio.Event()
        event.set()

    async def wait(self, token: Any) -> None:
        while self._version == token:
            await self._event.wait()


class PollingChangeSource:
    """Change source for backends without push: re-read on a fixed interval."""

    def __init__(self, interval_seconds: float) -> None:
        self.interval_seconds = interval_seconds

    def token(self) -> None:
        return None

    async def wait(self, token: Any) -> None:
        await asyncio.sleep(self.interval_seconds)


class Subscription:
    """Disposable handle for an observer driven by a snapshot stream."""

    def __init__(self, stream: SnapshotStream[Any], task: asyncio.Task[None]) -> None:
        self._stream = stream
        self._task = task

    @property
    def active(self) -> bool:
        """False once cancelled or once delivery stopped on an error."""
        return not self._stream.closed and not self._task.done()

    def cancel(self) -> None:
        """Stop delivery. Safe to call more than once."""
        self._stream.close()
        if not self._task.done():
            self._task.cancel()

    async def wait_closed(self) -> None:
        """Wait for the driving task to finish after ``cancel``."""
        try:
            await self._task
        except asyncio.CancelledError:
            pass


class SnapshotStream(Generic[T]):
    """Async iterator over full-state snapshots of one query."""

    def __init__(
        self,
        fetch: Callable[[], Awaitable[T]],
        changes: ChangeSource,
        name: str = "snapshot",
    ) -> None:
        self._fetch = fetch
        self._changes = changes
        self._name = name
        self._closed = asyncio.Event()
        self._token: Any = None
        self._started = False
        self._has_last = False
        self._last: T | None = None

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def close(self) -> None:
        """Close the stream. Idempotent."""
        if not self._closed.is_set():
            self._closed.set()
            logger.debug("Closed %s stream", self._name)

    async def aclose(self) -> None:
        self.close()

    def __aiter__(self) -> SnapshotStream[T]:
        return self

    async def __aenter__(self) -> SnapshotStream[T]:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        self.close()

    async def __anext__(self) -> T:
        while True:
            if self.closed:
                raise StopAsyncIteration

            if self._started and not await self._wait_for_change():
                raise StopAsyncIteration
            self._started = True

            self._token = self._changes.token()
            try:
                snapshot = await self._fetch()
            except TransientError as e:
                logger.warning("%s stream read failed, waiting for next change: %s", self._name, e)
                continue

            if self.closed:
                raise StopAsyncIteration
            if self._has_last and snapshot == self._last:
                continue

            self._last = snapshot
            self._has_last = True
            return snapshot

    async def _wait_for_change(self) -> bool:
        """Wait for a change or for close. Returns False when closed."""
        change = asyncio.ensure_future(self._changes.wait(self._token))
        closing = asyncio.ensure_future(self._closed.wait())
        try:
            await asyncio.wait({change, closing}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for task in (change, closing):
                if not task.done():
                    task.cancel()
        return not self.closed

    def subscribe(self, observer: Observer[T]) -> Subscription:
        """Push each snapshot to ``observer`` until the handle is cancelled.

        The observer may be a plain function or a coroutine function. It is
        never invoked once the returned subscription has been cancelled.
        """
        task = asyncio.create_task(self._drive(observer))
        return Subscription(self, task)

    async def _drive(self, observer: Observer[T]) -> None:
        try:
            async for snapshot in self:
                if self.closed:
                    break
                result = observer(snapshot)
                if inspect.isawaitable(result):
                    await result
        except Exception:
            logger.exception("%s subscription stopped", self._name)
        finally:
            self.close()
