"""Pricing service: compose quotes from a room snapshot, dates and options.

All amounts are integer currency units; no floating point is involved, so
recomputing a quote as the guest edits the form never drifts.
"""

import datetime as dt
from typing import TYPE_CHECKING

from booking_core.models import (
    DateRange,
    InvalidOptionSelection,
    OptionSelection,
    Quote,
    QuoteLine,
    RoomOfferingSnapshot,
    RoomUnavailable,
)

from .stay_calculator import validate_new_stay

if TYPE_CHECKING:
    from .interfaces import RoomCatalog


def validate_selection(snapshot: RoomOfferingSnapshot, selection: OptionSelection) -> None:
    """Reject negative quantities and unknown options.

    Entries with quantity 0 are ignored even when the option is unknown.

    Raises:
        InvalidOptionSelection: On the first offending entry
    """
    for option_id, quantity in selection.items():
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise InvalidOptionSelection(
                details={"option_id": str(option_id), "reason": "quantity must be an integer"}
            )
        if quantity < 0:
            raise InvalidOptionSelection(
                details={"option_id": str(option_id), "reason": "quantity must not be negative"}
            )
        if quantity > 0 and snapshot.find_option(option_id) is None:
            raise InvalidOptionSelection(
                details={
                    "option_id": str(option_id),
                    "room_id": snapshot.room_id,
                    "reason": "option is not offered for this room",
                }
            )


def compose_quote(
    snapshot: RoomOfferingSnapshot,
    stay: DateRange,
    selection: OptionSelection,
    currency: str = "KRW",
) -> Quote:
    """Calculate the total price for a stay with options.

    room_subtotal = nightly_price * nights
    options_subtotal = sum(option.price * quantity * nights)
    total = room_subtotal + options_subtotal

    Args:
        snapshot: Room price and option catalog
        stay: Valid check-in/check-out range
        selection: option_id -> quantity
        currency: Currency code echoed on the quote

    Returns:
        A fresh Quote

    Raises:
        InvalidOptionSelection: Unknown option or negative quantity
    """
    validate_selection(snapshot, selection)

    nights = stay.nights
    room_subtotal = snapshot.nightly_price * nights

    # Catalog order keeps the breakdown stable across recomputations
    lines: list[QuoteLine] = []
    for option in snapshot.options:
        quantity = selection.get(option.option_id, 0)
        if quantity <= 0:
            continue
        lines.append(
            QuoteLine(
                option_id=option.option_id,
                name=option.name,
                unit_price=option.price,
                quantity=quantity,
                subtotal=option.price * quantity * nights,
            )
        )

    options_subtotal = sum(line.subtotal for line in lines)

    return Quote(
        room_id=snapshot.room_id,
        check_in=stay.check_in,
        check_out=stay.check_out,
        nights=nights,
        nightly_price=snapshot.nightly_price,
        room_subtotal=room_subtotal,
        options=tuple(lines),
        options_subtotal=options_subtotal,
        total=room_subtotal + options_subtotal,
        currency=currency,
    )


class PricingService:
    """Service for quoting stays against the live room catalog."""

    def __init__(self, catalog: "RoomCatalog", currency: str = "KRW") -> None:
        """Initialize pricing service.

        Args:
            catalog: Room catalog collaborator
            currency: Currency code for produced quotes
        """
        self.catalog = catalog
        self.currency = currency

    def quote_snapshot(
        self,
        room_id: str,
        check_in: dt.date,
        check_out: dt.date,
        selection: OptionSelection,
        today: dt.date,
    ) -> tuple[RoomOfferingSnapshot, Quote]:
        """Fetch the room once and quote a new stay against it.

        Dates are checked before the catalog is called.

        Raises:
            InvalidDateRange: Bad or past-dated range
            RoomUnavailable: Room missing or not bookable
            InvalidOptionSelection: Bad selection
        """
        stay = validate_new_stay(check_in, check_out, today)
        snapshot = self.catalog.get_room_offering(room_id)
        if not snapshot.is_bookable:
            raise RoomUnavailable(
                details={"room_id": room_id, "status": snapshot.status.value}
            )
        return snapshot, compose_quote(snapshot, stay, selection, self.currency)

    def get_quote(
        self,
        room_id: str,
        check_in: dt.date,
        check_out: dt.date,
        selection: OptionSelection,
        today: dt.date,
    ) -> Quote:
        """Quote a new stay using the room's current price and options."""
        _, quote = self.quote_snapshot(room_id, check_in, check_out, selection, today)
        return quote
