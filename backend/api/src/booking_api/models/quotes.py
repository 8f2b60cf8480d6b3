"""API models for quote endpoints."""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field


class QuoteRequest(BaseModel):
    """Request to price a prospective stay."""

    model_config = ConfigDict(
        # JSON has no native date type, dates arrive as ISO strings
        strict=False,
        json_schema_extra={
            "examples": [
                {
                    "room_id": "room-101",
                    "check_in": "2025-06-01",
                    "check_out": "2025-06-04",
                    "options": {"breakfast": 2},
                }
            ]
        },
    )

    room_id: str = Field(..., min_length=1, description="Room to quote")
    check_in: date = Field(..., description="Check-in date (YYYY-MM-DD)")
    check_out: date = Field(..., description="Check-out date (YYYY-MM-DD)")
    # Quantities are checked by the pricing service so bad selections
    # come back as INVALID_OPTION_SELECTION
    options: dict[str, int] = Field(
        default_factory=dict,
        description="Option ID -> quantity",
    )
