"""Stay date range model."""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .errors import InvalidDateRange


class DateRange(BaseModel):
    """Check-in and check-out calendar dates of a stay.

    Check-out must be strictly later than check-in; constructing an
    inverted or zero-night range raises InvalidDateRange.
    """

    model_config = ConfigDict(strict=True, frozen=True)

    check_in: date = Field(..., description="Check-in date")
    check_out: date = Field(..., description="Check-out date")

    @model_validator(mode="after")
    def _check_out_after_check_in(self) -> "DateRange":
        if self.check_out <= self.check_in:
            raise InvalidDateRange(
                details={
                    "check_in": self.check_in.isoformat(),
                    "check_out": self.check_out.isoformat(),
                    "reason": "check_out must be after check_in",
                }
            )
        return self

    @property
    def nights(self) -> int:
        """Whole nights between check-in and check-out (always >= 1)."""
        return (self.check_out - self.check_in).days
