"""Server-sent events over snapshot streams."""

import json
import logging
from typing import Any, AsyncIterator, Callable, TypeVar

from fastapi.responses import StreamingResponse

from collabmatch.core.errors import StoreError
from collabmatch.core.snapshots import SnapshotStream

logger = logging.getLogger(__name__)

T = TypeVar("T")

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",  # Disable nginx buffering
}


def format_event(event: str, data: Any) -> str:
    """Encode one server-sent event."""
    return f"event: {event}\ndata: {json.dumps(data, default=str)}\n\n"


async def _events(
    stream: SnapshotStream[T],
    event: str,
    encode: Callable[[T], Any],
) -> AsyncIterator[str]:
    try:
        async for snapshot in stream:
            yield format_event(event, encode(snapshot))
    except StoreError as e:
        # Headers are already sent; report in-band and end the stream
        logger.warning("%s stream ended with store error: %s", event, e.message)
        yield format_event("error", {"error": e.code.value, "message": e.message})
    finally:
        stream.close()


def snapshot_response(
    stream: SnapshotStream[T],
    event: str,
    encode: Callable[[T], Any],
) -> StreamingResponse:
    """Stream every snapshot as an SSE event until the client disconnects."""
    return StreamingResponse(
        _events(stream, event, encode),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )
