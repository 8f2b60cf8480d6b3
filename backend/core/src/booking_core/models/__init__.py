"""Pydantic models for booking engine data entities."""

from .actor import Actor
from .cancellation import CancellationDecision, CancellationPreview, CancellationResult
from .enums import (
    TERMINAL_STATUSES,
    ActorRole,
    LifecycleEvent,
    PaymentProvider,
    PaymentStatus,
    RefundTier,
    ReservationStatus,
    RoomStatus,
    TransactionStatus,
)
from .errors import (
    ERROR_MESSAGES,
    ERROR_RECOVERY,
    BookingError,
    CancellationNotEligible,
    ErrorCode,
    ErrorResponse,
    InvalidDateRange,
    InvalidOptionSelection,
    InvalidTransition,
    NotAuthorized,
    ReservationNotFound,
    RoomUnavailable,
    UpstreamFailure,
)
from .payment import Payment, RefundTicket
from .quote import OptionSelection, Quote, QuoteLine
from .reservation import (
    Reservation,
    ReservationOption,
    ReservationPage,
    ReservationSearchCondition,
    ReservationView,
)
from .room import OptionOffering, RoomOfferingSnapshot
from .stay import DateRange

__all__ = [
    # Actor
    "Actor",
    # Enums
    "TERMINAL_STATUSES",
    "ActorRole",
    "LifecycleEvent",
    "PaymentProvider",
    "PaymentStatus",
    "RefundTier",
    "ReservationStatus",
    "RoomStatus",
    "TransactionStatus",
    # Stay and room
    "DateRange",
    "OptionOffering",
    "RoomOfferingSnapshot",
    # Quote
    "OptionSelection",
    "Quote",
    "QuoteLine",
    # Reservation
    "Reservation",
    "ReservationOption",
    "ReservationPage",
    "ReservationSearchCondition",
    "ReservationView",
    # Cancellation
    "CancellationDecision",
    "CancellationPreview",
    "CancellationResult",
    # Payment
    "Payment",
    "RefundTicket",
    # Errors
    "BookingError",
    "CancellationNotEligible",
    "ErrorCode",
    "ErrorResponse",
    "ERROR_MESSAGES",
    "ERROR_RECOVERY",
    "InvalidDateRange",
    "InvalidOptionSelection",
    "InvalidTransition",
    "NotAuthorized",
    "ReservationNotFound",
    "RoomUnavailable",
    "UpstreamFailure",
]
