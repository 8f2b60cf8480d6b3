"""Payment and refund records."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .enums import PaymentProvider, TransactionStatus


class Payment(BaseModel):
    """A payment transaction for a reservation.

    Refund transactions are stored with a negative amount.
    """

    model_config = ConfigDict(strict=True)

    payment_id: str = Field(..., description="Unique payment ID")
    reservation_id: str = Field(..., description="Reference to Reservation")
    amount: int = Field(..., description="Amount in currency units")
    currency: str = Field(default="KRW")
    status: TransactionStatus
    provider: PaymentProvider
    provider_transaction_id: str | None = Field(
        default=None,
        description="External reference (PaymentIntent ID for Stripe)",
    )
    created_at: datetime
    completed_at: datetime | None = None
    refund_amount: int | None = Field(default=None, ge=0)
    refunded_at: datetime | None = None


class RefundTicket(BaseModel):
    """Acknowledgement that a refund was accepted for processing."""

    model_config = ConfigDict(strict=False)

    ticket_id: str = Field(..., description="Refund transaction ID")
    reservation_id: str
    amount: int = Field(..., ge=0, description="Refunded amount")
    provider: PaymentProvider
    status: TransactionStatus
    provider_refund_id: str | None = Field(
        default=None, description="Provider refund reference (re_xxx for Stripe)"
    )
    created_at: datetime
