"""DynamoDB-backed reservation store.

Tables (prefix omitted):
- reservations: reservation_id (HASH); GSIs user_id-index
  (user_id, created_at) and room_id-index (room_id, check_in)
- room-nights: room_id (HASH), stay_date (RANGE); one lock item per booked
  night, so two reservations can never hold the same room on the same night
"""

import datetime as dt
import math
from decimal import Decimal
from typing import Any

from boto3.dynamodb.conditions import Key
from botocore.exceptions import BotoCoreError, ClientError

from booking_core.models import (
    InvalidTransition,
    PaymentStatus,
    RefundTicket,
    Reservation,
    ReservationNotFound,
    ReservationPage,
    ReservationSearchCondition,
    ReservationStatus,
    ReservationView,
    RoomUnavailable,
    UpstreamFailure,
)
from booking_core.utils.logging import get_logger

from .dynamodb import DynamoDBService, get_dynamodb_service
from .interfaces import Clock, utc_now
from .stay_calculator import stay_dates

logger = get_logger(__name__)

RESERVATIONS_TABLE = "reservations"
ROOM_NIGHTS_TABLE = "room-nights"

# Statuses that no longer hold their nights
RELEASED_STATUSES = frozenset({ReservationStatus.CANCELLED, ReservationStatus.REJECTED})


def _from_dynamodb(value: Any) -> Any:
    """Convert boto3 Decimals back to ints, recursively."""
    if isinstance(value, Decimal):
        return int(value)
    if isinstance(value, list):
        return [_from_dynamodb(v) for v in value]
    if isinstance(value, dict):
        return {k: _from_dynamodb(v) for k, v in value.items()}
    return value


def _timestamp(value: dt.datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=dt.UTC)
    return value.astimezone(dt.UTC).isoformat()


def paginate(reservations: list[Reservation], page: int, size: int) -> ReservationPage:
    """Slice an already ordered list into a ReservationPage."""
    total = len(reservations)
    total_pages = math.ceil(total / size) if total else 0
    start = page * size
    content = [
        ReservationView.model_validate(r.model_dump()) for r in reservations[start : start + size]
    ]
    return ReservationPage(
        content=content,
        page=page,
        size=size,
        total_elements=total,
        total_pages=total_pages,
        first=page == 0,
        last=page >= total_pages - 1,
    )


class DynamoDBReservationStore:
    """Reservation persistence with the no-double-booking guarantee."""

    def __init__(self, db: DynamoDBService | None = None, clock: Clock = utc_now) -> None:
        self.db = db or get_dynamodb_service()
        self.clock = clock

    # Serialization

    def _to_item(self, reservation: Reservation) -> dict[str, Any]:
        item = reservation.model_dump(mode="json", exclude={"can_cancel", "can_modify"})
        item["created_at"] = _timestamp(reservation.created_at)
        item["updated_at"] = _timestamp(reservation.updated_at)
        return item

    def _from_item(self, item: dict[str, Any]) -> Reservation:
        return Reservation.model_validate(_from_dynamodb(item))

    def _lock_key(self, room_id: str, night: dt.date) -> dict[str, Any]:
        return {"room_id": {"S": room_id}, "stay_date": {"S": night.isoformat()}}

    # Writes

    def create(self, reservation: Reservation) -> Reservation:
        """Store a new reservation and lock each of its nights atomically.

        Raises:
            RoomUnavailable: Any night is already held by another reservation
            UpstreamFailure: DynamoDB error
        """
        transact_items: list[dict[str, Any]] = [
            {
                "Put": {
                    "TableName": self.db.table_name(RESERVATIONS_TABLE),
                    "Item": self.db.serialize(self._to_item(reservation)),
                    "ConditionExpression": "attribute_not_exists(reservation_id)",
                }
            }
        ]

        # Double-booking prevention: one conditional lock per night
        for night in stay_dates(reservation.date_range):
            transact_items.append(
                {
                    "Put": {
                        "TableName": self.db.table_name(ROOM_NIGHTS_TABLE),
                        "Item": {
                            **self._lock_key(reservation.room_id, night),
                            "reservation_id": {"S": reservation.reservation_id},
                            "created_at": {"S": _timestamp(reservation.created_at)},
                        },
                        "ConditionExpression": "attribute_not_exists(room_id)",
                    }
                }
            )

        try:
            success = self.db.transact_write(transact_items)
        except (ClientError, BotoCoreError) as e:
            logger.error(
                "Reservation write failed",
                extra={"reservation_id": reservation.reservation_id, "error": str(e)},
            )
            raise UpstreamFailure(
                details={"operation": "create_reservation", "error": str(e)}
            ) from e

        if not success:
            # Booking conflict: another reservation holds at least one night
            raise RoomUnavailable(
                details={
                    "room_id": reservation.room_id,
                    "check_in": reservation.check_in.isoformat(),
                    "check_out": reservation.check_out.isoformat(),
                    "reason": "booking_conflict",
                }
            )

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
        """Move a reservation to new_status if it is still expected_status.

        Moving to CANCELLED or REJECTED releases the night locks in the same
        transaction.

        Raises:
            ReservationNotFound: Unknown reservation
            InvalidTransition: Status changed concurrently
            UpstreamFailure: DynamoDB error
        """
        current = self.get(reservation_id)
        if current is None:
            raise ReservationNotFound(details={"reservation_id": reservation_id})

        now = _timestamp(self.clock())
        set_parts = ["#s = :new_status", "updated_at = :now"]
        values: dict[str, Any] = {
            ":new_status": {"S": new_status.value},
            ":expected": {"S": expected_status.value},
            ":now": {"S": now},
        }
        if payment_status is not None:
            set_parts.append("payment_status = :payment_status")
            values[":payment_status"] = {"S": payment_status.value}
        if reason:
            set_parts.append("status_reason = :reason")
            values[":reason"] = {"S": reason}
        if refund is not None:
            set_parts.append("refund_amount = :refund_amount, refund_id = :refund_id")
            values[":refund_amount"] = {"N": str(refund.amount)}
            values[":refund_id"] = {"S": refund.ticket_id}

        transact_items: list[dict[str, Any]] = [
            {
                "Update": {
                    "TableName": self.db.table_name(RESERVATIONS_TABLE),
                    "Key": {"reservation_id": {"S": reservation_id}},
                    "UpdateExpression": "SET " + ", ".join(set_parts),
                    "ConditionExpression": "#s = :expected",
                    "ExpressionAttributeNames": {"#s": "status"},
                    "ExpressionAttributeValues": values,
                }
            }
        ]

        if new_status in RELEASED_STATUSES and expected_status not in RELEASED_STATUSES:
            for night in stay_dates(current.date_range):
                transact_items.append(
                    {
                        "Delete": {
                            "TableName": self.db.table_name(ROOM_NIGHTS_TABLE),
                            "Key": self._lock_key(current.room_id, night),
                            # Only release locks this reservation holds
                            "ConditionExpression": (
                                "attribute_not_exists(reservation_id) OR reservation_id = :rid"
                            ),
                            "ExpressionAttributeValues": {":rid": {"S": reservation_id}},
                        }
                    }
                )

        try:
            success = self.db.transact_write(transact_items)
        except (ClientError, BotoCoreError) as e:
            logger.error(
                "Reservation status update failed",
                extra={"reservation_id": reservation_id, "error": str(e)},
            )
            raise UpstreamFailure(
                details={"operation": "update_status", "error": str(e)}
            ) from e

        if not success:
            raise InvalidTransition(
                details={
                    "reservation_id": reservation_id,
                    "expected_status": expected_status.value,
                    "reason": "status changed concurrently",
                }
            )

        updated = self.get(reservation_id)
        if updated is None:
            raise ReservationNotFound(details={"reservation_id": reservation_id})
        return updated

    # Reads

    def get(self, reservation_id: str) -> Reservation | None:
        """Get a reservation by ID."""
        try:
            item = self.db.get_item(RESERVATIONS_TABLE, {"reservation_id": reservation_id})
        except (ClientError, BotoCoreError) as e:
            raise UpstreamFailure(details={"operation": "get_reservation", "error": str(e)}) from e
        return self._from_item(item) if item else None

    def list_by_user(
        self,
        user_id: str,
        status: ReservationStatus | None = None,
        page: int = 0,
        size: int = 10,
    ) -> ReservationPage:
        """A user's reservations, newest first, optionally filtered by status."""
        try:
            items = self.db.query_by_gsi(
                table=RESERVATIONS_TABLE,
                index_name="user_id-index",
                partition_key_name="user_id",
                partition_key_value=user_id,
                scan_index_forward=False,
            )
        except (ClientError, BotoCoreError) as e:
            raise UpstreamFailure(details={"operation": "list_by_user", "error": str(e)}) from e

        reservations = [self._from_item(item) for item in items]
        if status is not None:
            reservations = [r for r in reservations if r.status == status]
        reservations.sort(key=lambda r: r.created_at, reverse=True)
        return paginate(reservations, page, size)

    def search(
        self,
        condition: ReservationSearchCondition,
        page: int = 0,
        size: int = 10,
    ) -> ReservationPage:
        """Administrative search, newest first."""
        try:
            if condition.room_id:
                items = self.db.query_by_gsi(
                    table=RESERVATIONS_TABLE,
                    index_name="room_id-index",
                    partition_key_name="room_id",
                    partition_key_value=condition.room_id,
                )
            elif condition.user_id:
                items = self.db.query_by_gsi(
                    table=RESERVATIONS_TABLE,
                    index_name="user_id-index",
                    partition_key_name="user_id",
                    partition_key_value=condition.user_id,
                )
            else:
                items = self.db.scan(RESERVATIONS_TABLE)
        except (ClientError, BotoCoreError) as e:
            raise UpstreamFailure(details={"operation": "search", "error": str(e)}) from e

        reservations = [
            r for r in (self._from_item(item) for item in items) if condition.matches(r)
        ]
        reservations.sort(key=lambda r: r.created_at, reverse=True)
        return paginate(reservations, page, size)

    def list_for_room(self, room_id: str, start: dt.date, end: dt.date) -> list[Reservation]:
        """Reservations still holding nights of the room within [start, end)."""
        try:
            items = self.db.query_by_gsi(
                table=RESERVATIONS_TABLE,
                index_name="room_id-index",
                partition_key_name="room_id",
                partition_key_value=room_id,
                sort_key_condition=Key("check_in").lt(end.isoformat()),
            )
        except (ClientError, BotoCoreError) as e:
            raise UpstreamFailure(details={"operation": "list_for_room", "error": str(e)}) from e

        reservations = [
            r
            for r in (self._from_item(item) for item in items)
            if r.check_out > start and r.status not in RELEASED_STATUSES
        ]
        reservations.sort(key=lambda r: r.check_in)
        return reservations
