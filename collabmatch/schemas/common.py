"""Health and error bodies shared by every router."""

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class HealthStatus(str, Enum):
    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"


class HealthResponse(BaseModel):
    """Liveness probe body."""

    status: HealthStatus
    timestamp: datetime = Field(default_factory=_utcnow)


class CheckResult(BaseModel):
    """Outcome of one dependency check."""

    name: str = Field(description="Dependency name, e.g. store")
    healthy: bool
    latency_ms: float | None = Field(default=None, description="Round trip in milliseconds")
    error: str | None = Field(default=None, description="Failure message when unhealthy")


class ReadinessResponse(BaseModel):
    """Readiness probe body; unhealthy if any check failed."""

    status: HealthStatus
    timestamp: datetime = Field(default_factory=_utcnow)
    checks: list[CheckResult] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    """Body of every error response.

    ``error`` is a stable machine-readable category such as ``not_found`` or
    ``service_unavailable``; ``message`` is for humans.
    """

    error: str
    message: str
    request_id: str | None = Field(default=None, description="Echo of the X-Request-ID header")
    timestamp: datetime = Field(default_factory=_utcnow)
