"""Quote endpoint.

Prices a prospective stay from the room's current nightly price and
option catalog. Nothing is stored; any change to dates or options needs a
new quote.
"""

from fastapi import APIRouter, Depends

from booking_api.dependencies import get_booking_service
from booking_api.models.quotes import QuoteRequest
from booking_core.models import Quote
from booking_core.services.booking import BookingService

router = APIRouter(tags=["quotes"])


@router.post(
    "/quotes",
    summary="Get price quote",
    description="""
Calculate the price of a stay with optional add-ons.

**Public endpoint** - no authentication required.

total = nightly_price × nights + Σ(option price × quantity × nights)

**Notes:**
- Amounts are integer currency units (KRW)
- Check-in may not be in the past; check-out must be after check-in
- Options with quantity 0 are ignored
""",
    response_description="Itemized quote",
    response_model=Quote,
    responses={
        200: {"description": "Quote calculated"},
        400: {"description": "Invalid dates or option selection"},
        409: {"description": "Room not bookable"},
        502: {"description": "Room catalog unavailable"},
    },
)
async def get_quote(
    body: QuoteRequest,
    service: BookingService = Depends(get_booking_service),
) -> Quote:
    """Quote a stay."""
    return service.get_quote(body.room_id, body.check_in, body.check_out, body.options)
