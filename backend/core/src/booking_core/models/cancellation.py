"""Cancellation policy results."""

from pydantic import BaseModel, ConfigDict, Field

from .enums import RefundTier
from .payment import RefundTicket
from .reservation import Reservation


class CancellationDecision(BaseModel):
    """Outcome of evaluating the cancellation policy for a reservation."""

    model_config = ConfigDict(frozen=True)

    eligible: bool = Field(..., description="Self-service cancellation allowed")
    refund_rate: int = Field(..., description="Refund percentage: 0, 50 or 100")
    days_until_check_in: int = Field(
        ..., description="Whole days until check-in, negative once passed"
    )
    tier: RefundTier


class CancellationPreview(BaseModel):
    """Decision plus the refund amount it implies for a reservation."""

    model_config = ConfigDict(strict=False)

    reservation_id: str
    eligible: bool
    refund_rate: int
    refund_amount: int = Field(..., ge=0)
    days_until_check_in: int
    tier: RefundTier
    description: str


class CancellationResult(BaseModel):
    """Cancelled reservation and the refund that was requested."""

    model_config = ConfigDict(strict=False)

    reservation: Reservation
    refund_rate: int
    refund_amount: int = Field(..., ge=0)
    refund: RefundTicket | None = None
