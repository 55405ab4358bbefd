"""Per-request access log with latency-based severity."""

import logging
import time
from typing import Callable

from fastapi import Request, Response

logger = logging.getLogger(__name__)

SLOW_REQUEST_THRESHOLD_MS = 1000
VERY_SLOW_REQUEST_THRESHOLD_MS = 3000

HEALTH_PATHS = ("/health", "/health/ready")

# Live streams stay open for as long as the client listens
STREAM_SUFFIX = "/stream"


def request_log_level(path: str, status_code: int, latency_ms: float, failed: bool = False) -> tuple[int, str]:
    """Pick the log level and message prefix for a finished request."""
    if path in HEALTH_PATHS:
        return logging.DEBUG, ""
    if failed or status_code >= 500:
        return logging.ERROR, ""
    if path.endswith(STREAM_SUFFIX):
        return logging.INFO, ""
    if latency_ms > VERY_SLOW_REQUEST_THRESHOLD_MS:
        return logging.ERROR, "VERY SLOW REQUEST: "
    if latency_ms > SLOW_REQUEST_THRESHOLD_MS:
        return logging.WARNING, "SLOW REQUEST: "
    if status_code >= 400:
        return logging.WARNING, ""
    return logging.INFO, ""


async def latency_logging_middleware(request: Request, call_next: Callable) -> Response:
    """Log method, path, status and latency of every request.

    Health checks log at debug. Stream requests are never flagged as slow.
    """
    started = time.perf_counter()
    status_code = 500
    failed = True

    try:
        response = await call_next(request)
        status_code = response.status_code
        failed = False
        return response
    finally:
        latency_ms = (time.perf_counter() - started) * 1000
        level, prefix = request_log_level(request.url.path, status_code, latency_ms, failed)
        logger.log(
            level,
            "%s%s %s - %d - %.2fms",
            prefix,
            request.method,
            request.url.path,
            status_code,
            latency_ms,
            extra={
                "method": request.method,
                "path": request.url.path,
                "status_code": status_code,
                "latency_ms": round(latency_ms, 2),
            },
        )
