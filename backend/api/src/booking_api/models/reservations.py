"""API models for reservation endpoints."""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field, model_validator

from booking_core.models import (
    CancellationResult,
    PaymentStatus,
    ReservationStatus,
    ReservationView,
)

from .quotes import QuoteRequest


class ReservationCreateRequest(QuoteRequest):
    """Request to create a new reservation.

    User ID is not included - it comes from the authenticated identity.
    """


class CancelRequest(BaseModel):
    """Optional body for a cancellation."""

    model_config = ConfigDict(strict=False)

    reason: str | None = Field(
        default=None,
        max_length=200,
        description="Reason for cancellation",
    )


class CancellationResponse(BaseModel):
    """Reservation cancellation result with refund information."""

    model_config = ConfigDict(
        strict=False,
        json_schema_extra={
            "examples": [
                {
                    "reservation_id": "RES-2025-ABC12345",
                    "status": "CANCELLED",
                    "payment_status": "REFUNDED",
                    "refund_rate": 100,
                    "refund_amount": 360000,
                    "refund_id": "TXN-0123456789AB",
                }
            ]
        },
    )

    reservation_id: str = Field(..., description="Cancelled reservation ID")
    status: ReservationStatus = Field(..., description="New reservation status")
    payment_status: PaymentStatus
    refund_rate: int = Field(..., description="Refund percentage applied")
    refund_amount: int = Field(..., ge=0, description="Amount refunded")
    refund_id: str | None = Field(default=None, description="Refund ticket ID")

    @classmethod
    def from_result(cls, result: CancellationResult) -> "CancellationResponse":
        return cls(
            reservation_id=result.reservation.reservation_id,
            status=result.reservation.status,
            payment_status=result.reservation.payment_status,
            refund_rate=result.refund_rate,
            refund_amount=result.refund_amount,
            refund_id=result.refund.ticket_id if result.refund else None,
        )


ADMIN_STATUS_TARGETS = frozenset(
    {ReservationStatus.REJECTED, ReservationStatus.COMPLETED, ReservationStatus.NO_SHOW}
)


class StatusUpdateRequest(BaseModel):
    """Administrative status change."""

    model_config = ConfigDict(
        strict=False,
        json_schema_extra={
            "examples": [{"status": "REJECTED", "reason": "Room under maintenance"}]
        },
    )

    status: ReservationStatus = Field(..., description="REJECTED, COMPLETED or NO_SHOW")
    reason: str | None = Field(default=None, max_length=500)

    @model_validator(mode="after")
    def _check_target(self) -> "StatusUpdateRequest":
        if self.status not in ADMIN_STATUS_TARGETS:
            raise ValueError(f"status must be one of {sorted(s.value for s in ADMIN_STATUS_TARGETS)}")
        if self.status == ReservationStatus.REJECTED and not (self.reason and self.reason.strip()):
            raise ValueError("reason is required when rejecting a reservation")
        return self


class RoomReservationStatusResponse(BaseModel):
    """Reservations holding a room within a date window."""

    model_config = ConfigDict(strict=False)

    room_id: str
    start_date: date
    end_date: date
    reservations: list[ReservationView] = Field(default_factory=list)
