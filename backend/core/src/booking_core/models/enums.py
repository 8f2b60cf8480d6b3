"""Enumeration types for booking engine data models."""

from enum import Enum


class ReservationStatus(str, Enum):
    """Authoritative booking state of a reservation."""

    PENDING = "PENDING"  # awaiting confirmation/payment
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"  # cancelled by the guest
    REJECTED = "REJECTED"  # rejected by the property
    COMPLETED = "COMPLETED"  # stay finished
    NO_SHOW = "NO_SHOW"


TERMINAL_STATUSES: frozenset[ReservationStatus] = frozenset(
    {
        ReservationStatus.CANCELLED,
        ReservationStatus.REJECTED,
        ReservationStatus.COMPLETED,
        ReservationStatus.NO_SHOW,
    }
)


class PaymentStatus(str, Enum):
    """Status of the payment attached to a reservation."""

    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"  # nothing captured, nothing refunded
    REFUNDED = "REFUNDED"


class RoomStatus(str, Enum):
    """Bookability of a room in the catalog."""

    AVAILABLE = "AVAILABLE"
    UNAVAILABLE = "UNAVAILABLE"


class ActorRole(str, Enum):
    """Role of whoever triggers a lifecycle transition."""

    USER = "USER"
    ADMIN = "ADMIN"
    SYSTEM = "SYSTEM"  # scheduled jobs and payment callbacks


class LifecycleEvent(str, Enum):
    """Events that move a reservation between states."""

    CONFIRM = "CONFIRM"
    REJECT = "REJECT"
    CANCEL = "CANCEL"
    COMPLETE = "COMPLETE"
    MARK_NO_SHOW = "MARK_NO_SHOW"


class RefundTier(str, Enum):
    """Cancellation refund tiers."""

    FULL = "full"
    PARTIAL = "partial"
    NONE = "none"


class PaymentProvider(str, Enum):
    """Payment processing providers."""

    STRIPE = "stripe"
    MOCK = "mock"


class TransactionStatus(str, Enum):
    """Status of a payment transaction record."""

    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"
