"""Reservation endpoints for guests.

Provides REST endpoints for:
- Creating new reservations
- Listing the caller's reservations
- Retrieving a reservation by ID (owner or admin)
- Previewing and performing cancellation (owner only)

API Gateway authenticates the caller and passes identity via the
x-user-id and x-user-role headers.
"""

from fastapi import APIRouter, Depends, Query
from starlette.status import HTTP_201_CREATED

from booking_api.dependencies import get_booking_service
from booking_api.models.reservations import (
    CancellationResponse,
    CancelRequest,
    ReservationCreateRequest,
)
from booking_api.security import get_actor
from booking_core.models import (
    Actor,
    CancellationPreview,
    ReservationPage,
    ReservationStatus,
    ReservationView,
)
from booking_core.services.booking import BookingService

router = APIRouter(tags=["reservations"])


@router.post(
    "/reservations",
    summary="Create reservation",
    description="""
Create a new reservation.

**Requires authentication.**

Prices the stay from the room's current catalog and atomically holds every
night of the stay. The quoted total is locked into the reservation.

**Notes:**
- The reservation starts as PENDING with payment PENDING
- Overlapping stays for the same room are refused
""",
    response_description="Created reservation",
    response_model=ReservationView,
    status_code=HTTP_201_CREATED,
    responses={
        201: {"description": "Reservation created successfully"},
        400: {"description": "Invalid dates or option selection"},
        401: {"description": "Authentication required"},
        409: {"description": "Room not bookable or nights already taken"},
        502: {"description": "Catalog or storage failure"},
    },
)
async def create_reservation(
    body: ReservationCreateRequest,
    actor: Actor = Depends(get_actor),
    service: BookingService = Depends(get_booking_service),
) -> ReservationView:
    """Create a new reservation for the caller."""
    reservation = service.book(
        actor.user_id, body.room_id, body.check_in, body.check_out, body.options
    )
    return service.to_view(reservation)


@router.get(
    "/reservations",
    summary="Get my reservations",
    description="""
Get the caller's reservations, newest first.

**Requires authentication.**

Each reservation carries can_cancel and can_modify hints computed from the
cancellation policy at request time.
""",
    response_description="Page of the caller's reservations",
    response_model=ReservationPage,
    responses={
        200: {"description": "Reservations retrieved"},
        401: {"description": "Authentication required"},
    },
)
async def get_my_reservations(
    status: ReservationStatus | None = Query(
        default=None,
        description="Filter by reservation status",
    ),
    page: int = Query(default=0, ge=0, description="Zero-based page number"),
    size: int = Query(default=10, ge=1, le=100, description="Page size"),
    actor: Actor = Depends(get_actor),
    service: BookingService = Depends(get_booking_service),
) -> ReservationPage:
    """List the caller's reservations."""
    return service.list_user_reservations(actor.user_id, status, page, size)


@router.get(
    "/reservations/{reservation_id}",
    summary="Get reservation by ID",
    response_description="Reservation details",
    response_model=ReservationView,
    responses={
        200: {"description": "Reservation found"},
        401: {"description": "Authentication required"},
        403: {"description": "Not the owner of this reservation"},
        404: {"description": "Reservation not found"},
    },
)
async def get_reservation(
    reservation_id: str,
    actor: Actor = Depends(get_actor),
    service: BookingService = Depends(get_booking_service),
) -> ReservationView:
    """Get one reservation (owner or admin)."""
    return service.get_reservation(reservation_id, actor)


@router.get(
    "/reservations/{reservation_id}/cancellation",
    summary="Preview cancellation",
    description="""
Show whether the reservation can be cancelled right now and what would be
refunded.

**Cancellation policy:**
- 3+ days before check-in: Full refund
- 1-2 days before check-in: 50% refund
- On the day of check-in or later: cancellation not available
""",
    response_description="Cancellation eligibility and refund amount",
    response_model=CancellationPreview,
    responses={
        200: {"description": "Preview calculated"},
        401: {"description": "Authentication required"},
        403: {"description": "Not the owner of this reservation"},
        404: {"description": "Reservation not found"},
    },
)
async def preview_cancellation(
    reservation_id: str,
    actor: Actor = Depends(get_actor),
    service: BookingService = Depends(get_booking_service),
) -> CancellationPreview:
    """Cancellation preview."""
    return service.preview_cancellation(reservation_id, actor)


@router.patch(
    "/reservations/{reservation_id}/cancel",
    summary="Cancel reservation",
    description="""
Cancel a reservation.

**Requires authentication. Only the reservation owner can cancel.**

Eligibility is re-checked on the server. When the payment was captured, the
refund is requested first and the reservation is only cancelled once the
refund was accepted.

**Notes:**
- Cancelled nights become available again
- Cancelling an already cancelled reservation is refused
""",
    response_description="Cancellation result with refund info",
    response_model=CancellationResponse,
    responses={
        200: {"description": "Reservation cancelled"},
        401: {"description": "Authentication required"},
        403: {"description": "Not the owner of this reservation"},
        404: {"description": "Reservation not found"},
        409: {"description": "Not cancellable (terminal status or same-day)"},
        502: {"description": "Refund request failed; reservation unchanged"},
    },
)
async def cancel_reservation(
    reservation_id: str,
    body: CancelRequest | None = None,
    actor: Actor = Depends(get_actor),
    service: BookingService = Depends(get_booking_service),
) -> CancellationResponse:
    """Cancel a reservation and request its refund."""
    result = service.cancel(reservation_id, actor, body.reason if body else None)
    return CancellationResponse.from_result(result)
