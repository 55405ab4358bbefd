"""Error middleware: turns API and store failures into JSON error bodies."""

import logging
import traceback
from typing import Any, Callable

from fastapi import HTTPException, Request, Response, status
from fastapi.responses import JSONResponse

from collabmatch.core.errors import StoreError, StoreErrorCode
from collabmatch.schemas.common import ErrorResponse

logger = logging.getLogger(__name__)

# Seconds a client should wait before retrying after a transient store failure
TRANSIENT_RETRY_AFTER_SECONDS = 5


class APIError(Exception):
    """Error returned to the client with a fixed status and error type.

    Subclasses only override the class attributes.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_type: str = "api_error"
    default_message: str = "An unexpected error occurred"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def headers(self) -> dict[str, str]:
        """Extra response headers for this error."""
        return {}


class NotFoundError(APIError):
    status_code = status.HTTP_404_NOT_FOUND
    error_type = "not_found"
    default_message = "Resource not found"


class ValidationError(APIError):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    error_type = "validation_error"
    default_message = "Validation error"


class AuthenticationError(APIError):
    status_code = status.HTTP_401_UNAUTHORIZED
    error_type = "authentication_error"
    default_message = "Authentication required"


class AuthorizationError(APIError):
    status_code = status.HTTP_403_FORBIDDEN
    error_type = "authorization_error"
    default_message = "Access denied"


class ServiceUnavailableError(APIError):
    """A backing service is down; the client should retry later."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    error_type = "service_unavailable"
    default_message = "Service temporarily unavailable"

    def __init__(
        self,
        message: str | None = None,
        retry_after: int = TRANSIENT_RETRY_AFTER_SECONDS,
    ) -> None:
        super().__init__(message)
        self.retry_after = retry_after

    def headers(self) -> dict[str, str]:
        return {"Retry-After": str(self.retry_after)}


_STORE_ERROR_TYPES: dict[StoreErrorCode, type[APIError]] = {
    StoreErrorCode.UNAUTHENTICATED: AuthenticationError,
    StoreErrorCode.PERMISSION_DENIED: AuthorizationError,
    StoreErrorCode.NOT_FOUND: NotFoundError,
    StoreErrorCode.INVALID_ARGUMENT: ValidationError,
    StoreErrorCode.TRANSIENT: ServiceUnavailableError,
}


def api_error_from_store_error(error: StoreError) -> APIError:
    """Translate a store failure into the matching API error.

    Unknown codes are reported as unavailable.
    """
    error_cls = _STORE_ERROR_TYPES.get(error.code, ServiceUnavailableError)
    return error_cls(error.message)


def create_error_response(
    error_type: str,
    message: str,
    status_code: int,
    request_id: str | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Build the JSON body shared by every error response."""
    body = ErrorResponse(error=error_type, message=message, request_id=request_id)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", exclude_none=True),
        headers=headers,
    )


def _api_error_response(e: APIError, request_id: str | None) -> JSONResponse:
    return create_error_response(
        error_type=e.error_type,
        message=e.message,
        status_code=e.status_code,
        request_id=request_id,
        headers=e.headers(),
    )


async def error_handler_middleware(request: Request, call_next: Callable[[Request], Any]) -> Response:
    """Catch exceptions raised by route handlers and format them.

    Store failures become 401/403/404/422, or 503 with ``Retry-After`` when
    the store is unreachable. Anything unexpected becomes a bare 500.
    """
    request_id = request.headers.get("X-Request-ID")
    log_extra: dict[str, Any] = {"request_id": request_id, "path": request.url.path}

    try:
        return await call_next(request)

    except StoreError as e:
        api_error = api_error_from_store_error(e)
        log = logger.error if e.retryable else logger.warning
        log("Store error on %s: %s - %s", request.url.path, e.code.value, e.message, extra=log_extra)
        return _api_error_response(api_error, request_id)

    except APIError as e:
        logger.warning("API error: %s - %s", e.error_type, e.message, extra=log_extra)
        return _api_error_response(e, request_id)

    except HTTPException as e:
        logger.warning("HTTP exception: %s - %s", e.status_code, e.detail, extra=log_extra)
        return create_error_response(
            error_type="http_error",
            message=str(e.detail),
            status_code=e.status_code,
            request_id=request_id,
            headers=e.headers,
        )

    except Exception as e:
        logger.error("Unhandled exception: %s\n%s", e, traceback.format_exc(), extra=log_extra)
        return create_error_response(
            error_type="internal_error",
            message="An unexpected error occurred",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            request_id=request_id,
        )
