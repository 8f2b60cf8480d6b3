"""Quote models produced by the price composer."""

from collections.abc import Mapping
from datetime import date

from pydantic import BaseModel, ConfigDict, Field

# option_id -> selected quantity
OptionSelection = Mapping[str, int]


class QuoteLine(BaseModel):
    """Price contribution of one selected option."""

    model_config = ConfigDict(frozen=True)

    option_id: str
    name: str
    unit_price: int = Field(..., ge=0, description="Per-night unit price")
    quantity: int = Field(..., ge=1)
    subtotal: int = Field(..., ge=0, description="unit_price * quantity * nights")


class Quote(BaseModel):
    """Ephemeral price estimate for a stay.

    Never patched in place: any change to dates or selection produces a new
    Quote.
    """

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "examples": [
                {
                    "room_id": "room-101",
                    "check_in": "2025-06-01",
                    "check_out": "2025-06-04",
                    "nights": 3,
                    "nightly_price": 100000,
                    "room_subtotal": 300000,
                    "options": [
                        {
                            "option_id": "breakfast",
                            "name": "Breakfast",
                            "unit_price": 10000,
                            "quantity": 2,
                            "subtotal": 60000,
                        }
                    ],
                    "options_subtotal": 60000,
                    "total": 360000,
                    "currency": "KRW",
                }
            ]
        },
    )

    room_id: str
    check_in: date
    check_out: date
    nights: int = Field(..., ge=1)
    nightly_price: int = Field(..., ge=0)
    room_subtotal: int = Field(..., ge=0)
    options: tuple[QuoteLine, ...] = Field(default=())
    options_subtotal: int = Field(..., ge=0)
    total: int = Field(..., ge=0)
    currency: str = Field(default="KRW")
