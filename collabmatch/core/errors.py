"""Error taxonomy shared by the store and the services built on it."""

from enum import Enum


class StoreErrorCode(str, Enum):
    """Kinds of failure a store operation can report."""

    UNAUTHENTICATED = "UNAUTHENTICATED"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    TRANSIENT = "TRANSIENT"
    NOT_FOUND = "NOT_FOUND"
    INVALID_ARGUMENT = "INVALID_ARGUMENT"


class StoreError(Exception):
    """Base class for profile and messaging store failures.

    Every failure is local to one operation; none of them is fatal to the
    process. Callers decide whether to retry by looking at ``retryable``.
    """

    code: StoreErrorCode = StoreErrorCode.TRANSIENT
    default_message = "Store operation failed"

    def __init__(self, message: str | None = None) -> None:
        """Initialize store error.

        Args:
            message: Human-readable error description.
        """
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def retryable(self) -> bool:
        """Whether repeating the same call may succeed."""
        return self.code == StoreErrorCode.TRANSIENT


class UnauthenticatedError(StoreError):
    """No caller identity is established."""

    code = StoreErrorCode.UNAUTHENTICATED
    default_message = "Authentication required"


class PermissionDeniedError(StoreError):
    """The backend's access rules rejected the operation."""

    code = StoreErrorCode.PERMISSION_DENIED
    default_message = "Permission denied"


class TransientError(StoreError):
    """Network or availability failure."""

    code = StoreErrorCode.TRANSIENT
    default_message = "Backend temporarily unavailable"


class NotFoundError(StoreError):
    """The referenced document does not exist."""

    code = StoreErrorCode.NOT_FOUND
    default_message = "Document not found"


class InvalidDocumentError(StoreError):
    """A document or argument failed validation at the store boundary."""

    code = StoreErrorCode.INVALID_ARGUMENT
    default_message = "Invalid document"
