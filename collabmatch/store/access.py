"""Access rules every store applies on behalf of its caller.

These mirror the backend's row-level security policies. The Supabase store
talks to PostgREST with the secret key, which bypasses those policies, so
the same checks run in-process before each request.
"""

from collabmatch.core.errors import PermissionDeniedError, UnauthenticatedError
from collabmatch.models import Thread


def require_caller(caller_id: str | None) -> str:
    """Return the caller id or fail when nobody is signed in."""
    if not caller_id:
        raise UnauthenticatedError()
    return caller_id


def require_self(caller_id: str | None, owner_id: str, action: str) -> str:
    """Allow writes only to documents owned by the caller."""
    caller = require_caller(caller_id)
    if caller != owner_id:
        raise PermissionDeniedError(f"Cannot {action} on behalf of another user")
    return caller


def require_participant(caller_id: str | None, thread: Thread) -> str:
    """Allow thread access only to its participants."""
    caller = require_caller(caller_id)
    if not thread.has_participant(caller):
        raise PermissionDeniedError("Not a participant of this thread")
    return caller


def require_participant_ids(caller_id: str | None, participants: list[str]) -> str:
    """Allow thread creation only when the caller is one of the participants."""
    caller = require_caller(caller_id)
    if caller not in participants:
        raise PermissionDeniedError("Cannot create a thread the caller is not part of")
    return caller
