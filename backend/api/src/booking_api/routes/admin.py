"""Administrative reservation endpoints.

All endpoints require x-user-role: ADMIN.
"""

import datetime as dt

from fastapi import APIRouter, Depends, Query

from booking_api.dependencies import get_booking_service
from booking_api.models.reservations import (
    RoomReservationStatusResponse,
    StatusUpdateRequest,
)
from booking_api.security import require_admin
from booking_core.models import (
    Actor,
    ReservationPage,
    ReservationSearchCondition,
    ReservationStatus,
    ReservationView,
)
from booking_core.services.booking import BookingService

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post(
    "/reservations/search",
    summary="Search reservations",
    description="""
Search all reservations, newest first.

Filters (all optional): user_id, room_id, statuses, check_in_from, check_in_to.
""",
    response_model=ReservationPage,
    responses={
        200: {"description": "Search results"},
        401: {"description": "Authentication required"},
        403: {"description": "Administrator role required"},
    },
)
async def search_reservations(
    condition: ReservationSearchCondition,
    page: int = Query(default=0, ge=0),
    size: int = Query(default=10, ge=1, le=100),
    actor: Actor = Depends(require_admin),
    service: BookingService = Depends(get_booking_service),
) -> ReservationPage:
    """Administrative reservation search."""
    return service.search_reservations(condition, page, size)


@router.patch(
    "/reservations/{reservation_id}/confirm",
    summary="Confirm reservation",
    response_model=ReservationView,
    responses={
        200: {"description": "Reservation confirmed"},
        403: {"description": "Administrator role required"},
        404: {"description": "Reservation not found"},
        409: {"description": "Reservation is not PENDING"},
    },
)
async def confirm_reservation(
    reservation_id: str,
    actor: Actor = Depends(require_admin),
    service: BookingService = Depends(get_booking_service),
) -> ReservationView:
    """PENDING -> CONFIRMED."""
    return service.to_view(service.confirm(reservation_id, actor))


@router.patch(
    "/reservations/{reservation_id}/status",
    summary="Change reservation status",
    description="""
Move a reservation to REJECTED (reason required), COMPLETED or NO_SHOW.

- REJECTED: only from PENDING
- COMPLETED: only from CONFIRMED, on or after the check-out date
- NO_SHOW: only from CONFIRMED, after the check-in date
""",
    response_model=ReservationView,
    responses={
        200: {"description": "Status changed"},
        403: {"description": "Administrator role required"},
        404: {"description": "Reservation not found"},
        409: {"description": "Transition not allowed"},
        422: {"description": "Unsupported target status or missing reason"},
    },
)
async def update_reservation_status(
    reservation_id: str,
    body: StatusUpdateRequest,
    actor: Actor = Depends(require_admin),
    service: BookingService = Depends(get_booking_service),
) -> ReservationView:
    """Administrative lifecycle transition."""
    if body.status == ReservationStatus.REJECTED:
        reservation = service.reject(reservation_id, actor, body.reason or "")
    elif body.status == ReservationStatus.COMPLETED:
        reservation = service.complete(reservation_id, actor)
    else:
        reservation = service.mark_no_show(reservation_id, actor)
    return service.to_view(reservation)


@router.get(
    "/rooms/{room_id}/reservations",
    summary="Room reservation status",
    description="Reservations still holding nights of the room in [start_date, end_date).",
    response_model=RoomReservationStatusResponse,
    responses={
        200: {"description": "Occupancy retrieved"},
        403: {"description": "Administrator role required"},
    },
)
async def room_reservation_status(
    room_id: str,
    start_date: dt.date = Query(..., description="Window start (YYYY-MM-DD)"),
    end_date: dt.date = Query(..., description="Window end, exclusive (YYYY-MM-DD)"),
    actor: Actor = Depends(require_admin),
    service: BookingService = Depends(get_booking_service),
) -> RoomReservationStatusResponse:
    """Admin occupancy view for a room."""
    return RoomReservationStatusResponse(
        room_id=room_id,
        start_date=start_date,
        end_date=end_date,
        reservations=service.room_reservation_status(room_id, start_date, end_date),
    )
