"""Ports to the collaborators the booking engine depends on.

DynamoDB, Stripe and in-memory test doubles all satisfy these protocols.
"""

import datetime as dt
from typing import Protocol

from booking_core.models import (
    Payment,
    PaymentStatus,
    RefundTicket,
    Reservation,
    ReservationPage,
    ReservationSearchCondition,
    ReservationStatus,
    RoomOfferingSnapshot,
)


class Clock(Protocol):
    """Source of the current instant (timezone-aware)."""

    def __call__(self) -> dt.datetime: ...


class RoomCatalog(Protocol):
    """Room catalog service."""

    def get_room_offering(self, room_id: str) -> RoomOfferingSnapshot: ...


class ReservationStore(Protocol):
    """Reservation persistence with the no-double-booking guarantee."""

    def create(self, reservation: Reservation) -> Reservation: ...

    def update_status(
        self,
        reservation_id: str,
        new_status: ReservationStatus,
        reason: str | None = None,
        *,
        expected_status: ReservationStatus,
        payment_status: PaymentStatus | None = None,
        refund: RefundTicket | None = None,
    ) -> Reservation: ...

    def get(self, reservation_id: str) -> Reservation | None: ...

    def list_by_user(
        self,
        user_id: str,
        status: ReservationStatus | None = None,
        page: int = 0,
        size: int = 10,
    ) -> ReservationPage: ...

    def search(
        self,
        condition: ReservationSearchCondition,
        page: int = 0,
        size: int = 10,
    ) -> ReservationPage: ...

    def list_for_room(
        self, room_id: str, start: dt.date, end: dt.date
    ) -> list[Reservation]: ...


class PaymentCollaborator(Protocol):
    """Payment provider facade: records captured charges and issues refunds."""

    def record_charge(
        self,
        reservation_id: str,
        amount: int,
        provider_transaction_id: str | None = None,
    ) -> Payment: ...

    def request_refund(
        self, reservation_id: str, amount: int, reason: str | None = None
    ) -> RefundTicket: ...


def utc_now() -> dt.datetime:
    """Default clock."""
    return dt.datetime.now(dt.UTC)
