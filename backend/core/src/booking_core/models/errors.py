"""Standard error codes and exceptions for the booking engine.

Every failure the engine reports is a BookingError subclass carrying one of
the codes below. The API layer turns them into ErrorResponse bodies.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class ErrorCode(str, Enum):
    """Standard error codes."""

    INVALID_DATE_RANGE = "ERR_001"
    INVALID_OPTION_SELECTION = "ERR_002"
    ROOM_UNAVAILABLE = "ERR_003"
    INVALID_TRANSITION = "ERR_004"
    CANCELLATION_NOT_ELIGIBLE = "ERR_005"
    UPSTREAM_FAILURE = "ERR_006"
    RESERVATION_NOT_FOUND = "ERR_007"
    UNAUTHORIZED = "ERR_008"


# Human-readable error messages
ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.INVALID_DATE_RANGE: "The check-in and check-out dates are not a valid stay",
    ErrorCode.INVALID_OPTION_SELECTION: "The selected room options are not valid for this room",
    ErrorCode.ROOM_UNAVAILABLE: "The room cannot be booked for the requested stay",
    ErrorCode.INVALID_TRANSITION: "The reservation cannot move to the requested state",
    ErrorCode.CANCELLATION_NOT_ELIGIBLE: "The reservation can no longer be cancelled",
    ErrorCode.UPSTREAM_FAILURE: "A dependent service failed to respond",
    ErrorCode.RESERVATION_NOT_FOUND: "Reservation not found",
    ErrorCode.UNAUTHORIZED: "Not authorized for this action",
}

# Recovery suggestions for callers
ERROR_RECOVERY: dict[ErrorCode, str] = {
    ErrorCode.INVALID_DATE_RANGE: "Choose a check-out date after the check-in date, starting today or later",
    ErrorCode.INVALID_OPTION_SELECTION: "Pick options from the room's catalog with non-negative quantities",
    ErrorCode.ROOM_UNAVAILABLE: "Choose other dates or another room",
    ErrorCode.INVALID_TRANSITION: "Reload the reservation to see its current status",
    ErrorCode.CANCELLATION_NOT_ELIGIBLE: "Contact the property directly for same-day changes",
    ErrorCode.UPSTREAM_FAILURE: "Try again in a moment",
    ErrorCode.RESERVATION_NOT_FOUND: "Verify the reservation ID",
    ErrorCode.UNAUTHORIZED: "Sign in with an account allowed to perform this action",
}


class ErrorResponse(BaseModel):
    """Standard error body returned to callers."""

    model_config = ConfigDict(strict=True)

    success: bool = False
    error_code: ErrorCode
    message: str
    recovery: str
    details: Optional[dict[str, str]] = None

    @classmethod
    def from_code(
        cls,
        code: ErrorCode,
        details: Optional[dict[str, str]] = None,
    ) -> "ErrorResponse":
        """Create an ErrorResponse from an error code.

        Args:
            code: The error code
            details: Optional additional context about the error

        Returns:
            An ErrorResponse with the message and recovery hint for the code.
        """
        return cls(
            error_code=code,
            message=ERROR_MESSAGES[code],
            recovery=ERROR_RECOVERY[code],
            details=details,
        )


class BookingError(Exception):
    """Base exception raised by booking operations.

    Subclasses fix the error code; callers may still pass one explicitly.
    """

    code: ErrorCode = ErrorCode.UPSTREAM_FAILURE

    def __init__(
        self,
        details: Optional[dict[str, str]] = None,
        *,
        code: Optional[ErrorCode] = None,
    ):
        if code is not None:
            self.code = code
        self.message = ERROR_MESSAGES[self.code]
        self.recovery = ERROR_RECOVERY[self.code]
        self.details = details
        super().__init__(self.message)

    def to_response(self) -> ErrorResponse:
        """Convert this exception to an ErrorResponse."""
        return ErrorResponse.from_code(self.code, self.details)


class InvalidDateRange(BookingError):
    """Check-out not after check-in, or a new booking starting in the past."""

    code = ErrorCode.INVALID_DATE_RANGE


class InvalidOptionSelection(BookingError):
    """Unknown option id or negative quantity."""

    code = ErrorCode.INVALID_OPTION_SELECTION


class RoomUnavailable(BookingError):
    """Room not bookable, catalog lookup failed, or nights already taken."""

    code = ErrorCode.ROOM_UNAVAILABLE


class InvalidTransition(BookingError):
    """Lifecycle transition not permitted from the current state."""

    code = ErrorCode.INVALID_TRANSITION


class CancellationNotEligible(BookingError):
    """Cancellation refused by the cancellation policy."""

    code = ErrorCode.CANCELLATION_NOT_ELIGIBLE


class UpstreamFailure(BookingError):
    """A collaborator (catalog, store, payment) failed or timed out."""

    code = ErrorCode.UPSTREAM_FAILURE


class ReservationNotFound(BookingError):
    """No reservation with the given identifier."""

    code = ErrorCode.RESERVATION_NOT_FOUND


class NotAuthorized(BookingError):
    """Actor is not the owner or lacks the role for a transition."""

    code = ErrorCode.UNAUTHORIZED
