"""Construction of per-caller stores from settings."""

import logging

from collabmatch.core.config import get_settings
from collabmatch.store.base import ProfileMessagingStore
from collabmatch.store.memory import InMemoryStore, MemoryBackend
from collabmatch.store.supabase_store import SupabaseStore

logger = logging.getLogger(__name__)

# Global singleton instance
_memory_backend: MemoryBackend | None = None


def get_memory_backend() -> MemoryBackend:
    """Get or create the process-wide in-memory backend."""
    global _memory_backend
    if _memory_backend is None:
        _memory_backend = MemoryBackend()
        logger.info("In-memory store backend initialized")
    return _memory_backend


def reset_memory_backend() -> None:
    """Drop all in-memory data. Used by tests."""
    global _memory_backend
    _memory_backend = None


def create_store(caller_id: str | None) -> ProfileMessagingStore:
    """Build the configured store bound to ``caller_id``."""
    settings = get_settings()
    if settings.store_backend == "memory":
        return InMemoryStore(get_memory_backend(), caller_id)
    return SupabaseStore(
        caller_id=caller_id,
        poll_interval_seconds=settings.snapshot_poll_interval_seconds,
    )
