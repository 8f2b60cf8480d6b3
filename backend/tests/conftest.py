"""Pytest configuration and fixtures for the booking engine tests.

This module provides reusable fixtures for testing:
- DynamoDB mocking with moto
- A fixed clock and settings pinned to Asia/Seoul
- In-memory collaborators (room catalog, reservation store, payments)
- Sample room data
"""

import datetime as dt
import os
from collections.abc import Generator
from typing import Any

import boto3
import pytest
from moto import mock_aws

# === Environment Setup ===

# Set environment variables for testing before imports
os.environ.setdefault("AWS_DEFAULT_REGION", "ap-northeast-2")
os.environ.setdefault("DYNAMODB_TABLE_PREFIX", "test-booking")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("BOOKING_TIMEZONE", "Asia/Seoul")
os.environ.setdefault("PAYMENT_PROVIDER", "mock")

# Only set fake credentials for moto if no real credentials are present
if not os.environ.get("AWS_PROFILE") and not os.environ.get("AWS_ACCESS_KEY_ID"):
    os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
    os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")

from booking_core.config import BookingSettings  # noqa: E402
from booking_core.models import (  # noqa: E402
    InvalidTransition,
    OptionOffering,
    Payment,
    PaymentProvider,
    PaymentStatus,
    RefundTicket,
    Reservation,
    ReservationNotFound,
    ReservationPage,
    ReservationSearchCondition,
    ReservationStatus,
    RoomOfferingSnapshot,
    RoomUnavailable,
    TransactionStatus,
    UpstreamFailure,
)
from booking_core.services.reservation_store import RELEASED_STATUSES, paginate  # noqa: E402
from booking_core.services.stay_calculator import stay_dates  # noqa: E402

# 2025-05-20 10:00 in Seoul
NOW = dt.datetime(2025, 5, 20, 1, 0, tzinfo=dt.UTC)
TODAY = dt.date(2025, 5, 20)
TEST_USER_ID = "user-123"
OTHER_USER_ID = "user-456"
ADMIN_USER_ID = "admin-1"


# === Singleton Resets ===


@pytest.fixture(autouse=True)
def reset_singletons() -> Generator[None, None, None]:
    """Reset cached services, settings and the DynamoDB singleton around each test.

    This ensures tests using mock_aws get a fresh service instance
    inside the mock context.
    """
    from booking_api.dependencies import reset_services

    reset_services()
    yield
    reset_services()


# === Clock and Settings ===


class FixedClock:
    """Clock returning a settable instant."""

    def __init__(self, now: dt.datetime = NOW) -> None:
        self.now = now

    def __call__(self) -> dt.datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + dt.timedelta(**kwargs)


@pytest.fixture
def clock() -> FixedClock:
    """Clock pinned to 2025-05-20 10:00 KST."""
    return FixedClock()


@pytest.fixture
def settings() -> BookingSettings:
    """Settings for tests (Seoul calendar, KRW, mock payments)."""
    return BookingSettings(
        environment="test",
        table_prefix="test-booking",
        timezone="Asia/Seoul",
        currency="KRW",
        payment_provider=PaymentProvider.MOCK,
    )


# === Sample Data Fixtures ===


@pytest.fixture
def sample_room() -> RoomOfferingSnapshot:
    """Room at 100,000 KRW per night with breakfast and parking options."""
    return RoomOfferingSnapshot(
        room_id="room-101",
        name="Ocean View Double",
        nightly_price=100000,
        capacity=2,
        options=(
            OptionOffering(option_id="breakfast", name="Breakfast", price=10000),
            OptionOffering(option_id="parking", name="Parking", price=5000),
        ),
    )


@pytest.fixture
def sample_room_item() -> dict[str, Any]:
    """The same room as stored in the rooms table."""
    return {
        "room_id": "room-101",
        "name": "Ocean View Double",
        "price_per_night": 100000,
        "capacity": 2,
        "status": "AVAILABLE",
        "options": [
            {"option_id": "breakfast", "name": "Breakfast", "price": 10000},
            {"option_id": "parking", "name": "Parking", "price": 5000},
        ],
    }


def make_reservation(**overrides: Any) -> Reservation:
    """Build a stored reservation with sensible defaults."""
    data: dict[str, Any] = {
        "reservation_id": "RES-2025-TEST0001",
        "user_id": TEST_USER_ID,
        "room_id": "room-101",
        "check_in": TODAY + dt.timedelta(days=5),
        "check_out": TODAY + dt.timedelta(days=7),
        "nights": 2,
        "nightly_price": 100000,
        "options": [],
        "total_price": 200000,
        "currency": "KRW",
        "status": ReservationStatus.CONFIRMED,
        "payment_status": PaymentStatus.COMPLETED,
        "created_at": NOW,
        "updated_at": NOW,
    }
    data.update(overrides)
    if "nights" not in overrides:
        data["nights"] = (data["check_out"] - data["check_in"]).days
    return Reservation.model_validate(data)


@pytest.fixture
def reservation_factory():
    """Factory for Reservation records."""
    return make_reservation


# === In-memory Collaborators ===


class InMemoryRoomCatalog:
    """Room catalog over a dict; `fail` simulates an unreachable catalog."""

    def __init__(self, *rooms: RoomOfferingSnapshot) -> None:
        self.rooms = {room.room_id: room for room in rooms}
        self.fail = False

    def get_room_offering(self, room_id: str) -> RoomOfferingSnapshot:
        if self.fail or room_id not in self.rooms:
            raise RoomUnavailable(details={"room_id": room_id})
        return self.rooms[room_id]


class InMemoryReservationStore:
    """Reservation store with per-night locks, mirroring the DynamoDB store.

    `fail_next_update` makes the next status write fail once, as an
    unreachable table would.
    """

    def __init__(self) -> None:
        self.reservations: dict[str, Reservation] = {}
        self.nights: dict[tuple[str, dt.date], str] = {}
        self.updates: list[tuple[str, ReservationStatus]] = []
        self.fail_next_update = False

    def create(self, reservation: Reservation) -> Reservation:
        keys = [(reservation.room_id, night) for night in stay_dates(reservation.date_range)]
        if any(key in self.nights for key in keys):
            raise RoomUnavailable(
                details={"room_id": reservation.room_id, "reason": "booking_conflict"}
            )
        for key in keys:
            self.nights[key] = reservation.reservation_id
        self.reservations[reservation.reservation_id] = reservation
        return reservation

    def add(self, reservation: Reservation) -> Reservation:
        """Seed a reservation in any status."""
        self.reservations[reservation.reservation_id] = reservation
        if reservation.status not in RELEASED_STATUSES:
            for night in stay_dates(reservation.date_range):
                self.nights[(reservation.room_id, night)] = reservation.reservation_id
        return reservation

    def update_status(
        self,
        reservation_id: str,
        new_status: ReservationStatus,
        reason: str | None = None,
        *,
        expected_status: ReservationStatus,
        payment_status: PaymentStatus | None = None,
        refund: RefundTicket | None = None,
    ) -> Reservation:
        if self.fail_next_update:
            self.fail_next_update = False
            raise UpstreamFailure(
                details={"operation": "update_status", "error": "table unreachable"}
            )
        current = self.reservations.get(reservation_id)
        if current is None:
            raise ReservationNotFound(details={"reservation_id": reservation_id})
        if current.status != expected_status:
            raise InvalidTransition(details={"reservation_id": reservation_id})

        update: dict[str, Any] = {"status": new_status, "updated_at": NOW}
        if payment_status is not None:
            update["payment_status"] = payment_status
        if reason:
            update["status_reason"] = reason
        if refund is not None:
            update["refund_amount"] = refund.amount
            update["refund_id"] = refund.ticket_id

        updated = current.model_copy(update=update)
        self.reservations[reservation_id] = updated
        self.updates.append((reservation_id, new_status))

        if new_status in RELEASED_STATUSES:
            for night in stay_dates(current.date_range):
                if self.nights.get((current.room_id, night)) == reservation_id:
                    del self.nights[(current.room_id, night)]
        return updated

    def get(self, reservation_id: str) -> Reservation | None:
        return self.reservations.get(reservation_id)

    def list_by_user(
        self,
        user_id: str,
        status: ReservationStatus | None = None,
        page: int = 0,
        size: int = 10,
    ) -> ReservationPage:
        found = [
            r
            for r in self.reservations.values()
            if r.user_id == user_id and (status is None or r.status == status)
        ]
        found.sort(key=lambda r: r.created_at, reverse=True)
        return paginate(found, page, size)

    def search(
        self, condition: ReservationSearchCondition, page: int = 0, size: int = 10
    ) -> ReservationPage:
        found = [r for r in self.reservations.values() if condition.matches(r)]
        found.sort(key=lambda r: r.created_at, reverse=True)
        return paginate(found, page, size)

    def list_for_room(self, room_id: str, start: dt.date, end: dt.date) -> list[Reservation]:
        found = [
            r
            for r in self.reservations.values()
            if r.room_id == room_id
            and r.check_in < end
            and r.check_out > start
            and r.status not in RELEASED_STATUSES
        ]
        return sorted(found, key=lambda r: r.check_in)


class FakePaymentCollaborator:
    """Records charges and refund requests; `fail` makes the provider reject refunds.

    Like the real payment service, at most one refund is issued per reservation.
    """

    def __init__(self) -> None:
        self.charges: dict[str, Payment] = {}
        self.refunds: list[tuple[str, int, str | None]] = []
        self.tickets: dict[str, RefundTicket] = {}
        self.fail = False

    def record_charge(
        self,
        reservation_id: str,
        amount: int,
        provider_transaction_id: str | None = None,
    ) -> Payment:
        if reservation_id not in self.charges:
            self.charges[reservation_id] = Payment(
                payment_id=f"TXN-CHARGE{len(self.charges) + 1:04d}",
                reservation_id=reservation_id,
                amount=amount,
                status=TransactionStatus.COMPLETED,
                provider=PaymentProvider.MOCK,
                provider_transaction_id=provider_transaction_id,
                created_at=NOW,
                completed_at=NOW,
            )
        return self.charges[reservation_id]

    def request_refund(
        self, reservation_id: str, amount: int, reason: str | None = None
    ) -> RefundTicket:
        if self.fail:
            raise UpstreamFailure(details={"operation": "refund", "error": "provider down"})
        if reservation_id in self.tickets:
            return self.tickets[reservation_id]
        self.refunds.append((reservation_id, amount, reason))
        ticket = RefundTicket(
            ticket_id=f"TXN-REFUND{len(self.refunds):04d}",
            reservation_id=reservation_id,
            amount=amount,
            provider=PaymentProvider.MOCK,
            status=TransactionStatus.COMPLETED,
            provider_refund_id=f"MOCK-REFUND-{len(self.refunds)}",
            created_at=NOW,
        )
        self.tickets[reservation_id] = ticket
        return ticket


@pytest.fixture
def room_catalog(sample_room: RoomOfferingSnapshot) -> InMemoryRoomCatalog:
    return InMemoryRoomCatalog(sample_room)


@pytest.fixture
def reservation_store() -> InMemoryReservationStore:
    return InMemoryReservationStore()


@pytest.fixture
def payments() -> FakePaymentCollaborator:
    return FakePaymentCollaborator()


@pytest.fixture
def booking_service(
    room_catalog: InMemoryRoomCatalog,
    reservation_store: InMemoryReservationStore,
    payments: FakePaymentCollaborator,
    clock: FixedClock,
    settings: BookingSettings,
):
    """BookingService wired to in-memory collaborators and the fixed clock."""
    from booking_core.services.booking import BookingService

    return BookingService(
        catalog=room_catalog,
        store=reservation_store,
        payments=payments,
        clock=clock,
        settings=settings,
    )


# === DynamoDB Fixtures ===


@pytest.fixture
def aws_credentials() -> None:
    """Mocked AWS Credentials for moto."""
    if not os.environ.get("AWS_PROFILE"):
        os.environ["AWS_ACCESS_KEY_ID"] = "testing"
        os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
        os.environ["AWS_SECURITY_TOKEN"] = "testing"
        os.environ["AWS_SESSION_TOKEN"] = "testing"
    os.environ["AWS_DEFAULT_REGION"] = "ap-northeast-2"


@pytest.fixture
def dynamodb_client(aws_credentials: None) -> Generator[Any, None, None]:
    """Create a mocked DynamoDB client."""
    with mock_aws():
        client = boto3.client("dynamodb", region_name="ap-northeast-2")
        yield client


TABLES: list[dict[str, Any]] = [
    {
        "TableName": "test-booking-rooms",
        "KeySchema": [{"AttributeName": "room_id", "KeyType": "HASH"}],
        "AttributeDefinitions": [{"AttributeName": "room_id", "AttributeType": "S"}],
        "BillingMode": "PAY_PER_REQUEST",
    },
    {
        "TableName": "test-booking-reservations",
        "KeySchema": [{"AttributeName": "reservation_id", "KeyType": "HASH"}],
        "AttributeDefinitions": [
            {"AttributeName": "reservation_id", "AttributeType": "S"},
            {"AttributeName": "user_id", "AttributeType": "S"},
            {"AttributeName": "created_at", "AttributeType": "S"},
            {"AttributeName": "room_id", "AttributeType": "S"},
            {"AttributeName": "check_in", "AttributeType": "S"},
        ],
        "GlobalSecondaryIndexes": [
            {
                "IndexName": "user_id-index",
                "KeySchema": [
                    {"AttributeName": "user_id", "KeyType": "HASH"},
                    {"AttributeName": "created_at", "KeyType": "RANGE"},
                ],
                "Projection": {"ProjectionType": "ALL"},
            },
            {
                "IndexName": "room_id-index",
                "KeySchema": [
                    {"AttributeName": "room_id", "KeyType": "HASH"},
                    {"AttributeName": "check_in", "KeyType": "RANGE"},
                ],
                "Projection": {"ProjectionType": "ALL"},
            },
        ],
        "BillingMode": "PAY_PER_REQUEST",
    },
    {
        "TableName": "test-booking-room-nights",
        "KeySchema": [
            {"AttributeName": "room_id", "KeyType": "HASH"},
            {"AttributeName": "stay_date", "KeyType": "RANGE"},
        ],
        "AttributeDefinitions": [
            {"AttributeName": "room_id", "AttributeType": "S"},
            {"AttributeName": "stay_date", "AttributeType": "S"},
        ],
        "BillingMode": "PAY_PER_REQUEST",
    },
    {
        "TableName": "test-booking-payments",
        "KeySchema": [{"AttributeName": "payment_id", "KeyType": "HASH"}],
        "AttributeDefinitions": [
            {"AttributeName": "payment_id", "AttributeType": "S"},
            {"AttributeName": "reservation_id", "AttributeType": "S"},
        ],
        "GlobalSecondaryIndexes": [
            {
                "IndexName": "reservation_id-index",
                "KeySchema": [{"AttributeName": "reservation_id", "KeyType": "HASH"}],
                "Projection": {"ProjectionType": "ALL"},
            },
        ],
        "BillingMode": "PAY_PER_REQUEST",
    },
]


@pytest.fixture
def create_tables(dynamodb_client: Any) -> None:
    """Create all required DynamoDB tables for testing."""
    for table_config in TABLES:
        dynamodb_client.create_table(**table_config)


@pytest.fixture
def dynamodb(create_tables: None):
    """DynamoDBService bound to the mocked test tables."""
    from booking_core.services.dynamodb import DynamoDBService

    return DynamoDBService(table_prefix="test-booking")
