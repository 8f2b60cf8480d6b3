"""FastAPI exception handlers for converting BookingError to HTTP responses.

The ErrorCode-to-HTTP status mapping follows REST conventions:
- 400 Bad Request: Invalid dates or option selection
- 403 Forbidden: Authorization failures
- 404 Not Found: Reservation not found
- 409 Conflict: Room taken, transition not allowed, cancellation refused
- 422 Unprocessable Entity: Malformed request bodies
- 502 Bad Gateway: A collaborator (catalog, store, payment) failed

Usage:
    from booking_api.exceptions import register_exception_handlers
    register_exception_handlers(app)
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_403_FORBIDDEN,
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
    HTTP_422_UNPROCESSABLE_ENTITY,
    HTTP_502_BAD_GATEWAY,
)

from booking_api.models.common import format_validation_errors
from booking_core.models import BookingError, ErrorCode

logger = logging.getLogger(__name__)

# Map ErrorCode to HTTP status codes
ERROR_CODE_TO_HTTP_STATUS: dict[ErrorCode, int] = {
    # Request validation -> 400 Bad Request
    ErrorCode.INVALID_DATE_RANGE: HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_OPTION_SELECTION: HTTP_400_BAD_REQUEST,
    # Authorization errors -> 403 Forbidden
    ErrorCode.UNAUTHORIZED: HTTP_403_FORBIDDEN,
    # Not found errors -> 404 Not Found
    ErrorCode.RESERVATION_NOT_FOUND: HTTP_404_NOT_FOUND,
    # State conflicts -> 409 Conflict
    ErrorCode.ROOM_UNAVAILABLE: HTTP_409_CONFLICT,
    ErrorCode.INVALID_TRANSITION: HTTP_409_CONFLICT,
    ErrorCode.CANCELLATION_NOT_ELIGIBLE: HTTP_409_CONFLICT,
    # Collaborator failures -> 502 Bad Gateway
    ErrorCode.UPSTREAM_FAILURE: HTTP_502_BAD_GATEWAY,
}


def get_http_status_for_error(code: ErrorCode) -> int:
    """Get HTTP status code for an ErrorCode.

    Args:
        code: The ErrorCode to map

    Returns:
        HTTP status code, defaults to 400 if not explicitly mapped.
    """
    return ERROR_CODE_TO_HTTP_STATUS.get(code, HTTP_400_BAD_REQUEST)


async def booking_error_handler(request: Request, exc: BookingError) -> JSONResponse:
    """Convert a BookingError to an ErrorResponse body with the mapped status."""
    status_code = get_http_status_for_error(exc.code)
    if status_code >= 500:
        logger.error(
            "Upstream failure on %s %s: %s",
            request.method,
            request.url.path,
            exc.details,
        )

    return JSONResponse(
        status_code=status_code,
        content=exc.to_response().model_dump(mode="json"),
    )


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Wrap FastAPI request validation errors in the standard error structure."""
    return JSONResponse(
        status_code=HTTP_422_UNPROCESSABLE_ENTITY,
        content=format_validation_errors(list(exc.errors())).model_dump(mode="json"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI app.

    Args:
        app: The FastAPI application instance.
    """
    app.add_exception_handler(BookingError, booking_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_error_handler)  # type: ignore[arg-type]
