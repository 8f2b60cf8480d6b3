"""Room offering snapshot as returned by the room catalog."""

from pydantic import BaseModel, ConfigDict, Field

from .enums import RoomStatus


class OptionOffering(BaseModel):
    """A bookable add-on (e.g. breakfast) priced per night."""

    model_config = ConfigDict(strict=True, frozen=True)

    option_id: str = Field(..., description="Option identifier")
    name: str = Field(..., description="Display name")
    price: int = Field(..., ge=0, description="Per-night unit price")


class RoomOfferingSnapshot(BaseModel):
    """Room price and option catalog captured at quote time.

    Amounts are integer currency units.
    """

    model_config = ConfigDict(strict=True, frozen=True)

    room_id: str = Field(..., description="Room identifier")
    name: str = Field(default="", description="Room name")
    nightly_price: int = Field(..., ge=0, description="Base price per night")
    capacity: int = Field(..., ge=1, description="Maximum number of guests")
    status: RoomStatus = Field(default=RoomStatus.AVAILABLE)
    options: tuple[OptionOffering, ...] = Field(default=())

    def find_option(self, option_id: str) -> OptionOffering | None:
        """Return the catalog option with the given id, if any."""
        for option in self.options:
            if option.option_id == option_id:
                return option
        return None

    @property
    def is_bookable(self) -> bool:
        return self.status == RoomStatus.AVAILABLE
