"""Room catalog backed by the DynamoDB rooms table."""

from typing import Any

from botocore.exceptions import BotoCoreError, ClientError
from pydantic import ValidationError

from booking_core.models import OptionOffering, RoomOfferingSnapshot, RoomStatus, RoomUnavailable
from booking_core.utils.logging import get_logger

from .dynamodb import DynamoDBService, get_dynamodb_service

logger = get_logger(__name__)

ROOMS_TABLE = "rooms"


class DynamoDBRoomCatalog:
    """Reads room prices and option catalogs."""

    def __init__(self, db: DynamoDBService | None = None) -> None:
        self.db = db or get_dynamodb_service()

    def _to_snapshot(self, item: dict[str, Any]) -> RoomOfferingSnapshot:
        return RoomOfferingSnapshot(
            room_id=str(item["room_id"]),
            name=str(item.get("name", "")),
            nightly_price=int(item["price_per_night"]),
            capacity=int(item.get("capacity", 1)),
            status=RoomStatus(item.get("status", RoomStatus.AVAILABLE.value)),
            options=tuple(
                OptionOffering(
                    option_id=str(option["option_id"]),
                    name=str(option.get("name", option["option_id"])),
                    price=int(option["price"]),
                )
                for option in item.get("options", [])
            ),
        )

    def get_room_offering(self, room_id: str) -> RoomOfferingSnapshot:
        """Get a room's current price and options.

        A catalog lookup that fails for any reason surfaces as
        RoomUnavailable, so no quote is produced from partial data.

        Raises:
            RoomUnavailable: Room missing, malformed or lookup failed
        """
        try:
            item = self.db.get_item(ROOMS_TABLE, {"room_id": room_id})
        except (ClientError, BotoCoreError) as e:
            logger.error("Room lookup failed", extra={"room_id": room_id, "error": str(e)})
            raise RoomUnavailable(
                details={"room_id": room_id, "reason": "catalog_unavailable"}
            ) from e

        if not item:
            raise RoomUnavailable(details={"room_id": room_id, "reason": "not_found"})

        try:
            return self._to_snapshot(item)
        except (KeyError, ValueError, ValidationError) as e:
            logger.error("Malformed room record", extra={"room_id": room_id, "error": str(e)})
            raise RoomUnavailable(
                details={"room_id": room_id, "reason": "invalid_catalog_data"}
            ) from e
