"""Payment endpoints.

The payment provider (or its webhook relay) reports a captured charge here.
The charge is recorded and a PENDING reservation becomes CONFIRMED, which
makes the charge refundable on a later cancellation.
"""

from fastapi import APIRouter, Depends

from booking_api.dependencies import get_booking_service
from booking_api.models.payments import PaymentCapturedRequest
from booking_api.security import require_operator
from booking_core.models import Actor, ReservationView
from booking_core.services.booking import BookingService

router = APIRouter(tags=["payments"])


@router.post(
    "/reservations/{reservation_id}/payment",
    summary="Record captured payment",
    description="""
Record that the reservation's total price was captured by the payment provider.

**Requires x-user-role: SYSTEM or ADMIN.**

**Notes:**
- The captured amount is the reservation's locked total price
- PENDING reservations become CONFIRMED
- Reservations an administrator already confirmed only have their payment status updated
""",
    response_description="Reservation with payment COMPLETED",
    response_model=ReservationView,
    responses={
        200: {"description": "Payment recorded"},
        401: {"description": "Authentication required"},
        403: {"description": "System or administrator role required"},
        404: {"description": "Reservation not found"},
        409: {"description": "Reservation is not awaiting payment"},
        502: {"description": "Payment or storage failure"},
    },
)
async def record_payment(
    reservation_id: str,
    body: PaymentCapturedRequest | None = None,
    actor: Actor = Depends(require_operator),
    service: BookingService = Depends(get_booking_service),
) -> ReservationView:
    """Payment success callback."""
    reservation = service.record_payment(
        reservation_id,
        actor,
        body.provider_transaction_id if body else None,
    )
    return service.to_view(reservation)
