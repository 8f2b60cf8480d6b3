"""Reservation model for booking records."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from .enums import PaymentStatus, ReservationStatus
from .stay import DateRange


class ReservationOption(BaseModel):
    """An option booked with a reservation, price locked at booking time."""

    model_config = ConfigDict(frozen=True)

    option_id: str = Field(..., description="Option identifier")
    name: str = Field(..., description="Option name at booking time")
    quantity: int = Field(..., ge=1, description="Booked quantity")
    price: int = Field(..., ge=0, description="Per-night unit price at booking time")


class Reservation(BaseModel):
    """A persisted booking.

    total_price is the quote total captured at creation and is never
    recomputed from live room prices.
    """

    # Served over JSON: dates and enums arrive back as strings
    model_config = ConfigDict(strict=False)

    reservation_id: str = Field(..., description="Unique reservation ID (RES-YYYY-XXXXXXXX)")
    user_id: str = Field(..., description="Owning user")
    room_id: str = Field(..., description="Booked room")
    check_in: date = Field(..., description="Check-in date")
    check_out: date = Field(..., description="Check-out date")
    nights: int = Field(..., ge=1, description="Number of nights")
    nightly_price: int = Field(..., ge=0, description="Room price per night at booking time")
    options: list[ReservationOption] = Field(default_factory=list)
    total_price: int = Field(..., ge=0, description="Locked total price")
    currency: str = Field(default="KRW")
    status: ReservationStatus = Field(default=ReservationStatus.PENDING)
    payment_status: PaymentStatus = Field(default=PaymentStatus.PENDING)
    status_reason: str | None = Field(
        default=None, description="Reason for rejection or cancellation"
    )
    refund_amount: int | None = Field(default=None, ge=0)
    refund_id: str | None = Field(default=None, description="Refund ticket ID")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")

    @property
    def date_range(self) -> DateRange:
        return DateRange(check_in=self.check_in, check_out=self.check_out)


class ReservationView(Reservation):
    """Reservation plus server-computed UI hints."""

    can_cancel: bool = Field(
        default=False, description="Self-service cancellation currently allowed"
    )
    can_modify: bool = Field(default=False, description="Reservation still pending")


class ReservationPage(BaseModel):
    """One page of reservations, newest first."""

    model_config = ConfigDict(strict=False)

    content: list[ReservationView] = Field(default_factory=list)
    page: int = Field(..., ge=0)
    size: int = Field(..., ge=1)
    total_elements: int = Field(..., ge=0)
    total_pages: int = Field(..., ge=0)
    first: bool
    last: bool


class ReservationSearchCondition(BaseModel):
    """Administrative search filters. All filters are optional."""

    # JSON has no native date type, dates arrive as ISO strings
    model_config = ConfigDict(strict=False)

    user_id: str | None = None
    room_id: str | None = None
    statuses: list[ReservationStatus] | None = None
    check_in_from: date | None = None
    check_in_to: date | None = None

    def matches(self, reservation: Reservation) -> bool:
        if self.user_id and reservation.user_id != self.user_id:
            return False
        if self.room_id and reservation.room_id != self.room_id:
            return False
        if self.statuses and reservation.status not in self.statuses:
            return False
        if self.check_in_from and reservation.check_in < self.check_in_from:
            return False
        if self.check_in_to and reservation.check_in > self.check_in_to:
            return False
        return True
