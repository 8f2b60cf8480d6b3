"""Reservation lifecycle state machine.

The transition table is closed: any (status, event) pair not listed here is
an InvalidTransition, never a silent no-op.
"""

from typing import NamedTuple

from booking_core.models import (
    ActorRole,
    InvalidTransition,
    LifecycleEvent,
    NotAuthorized,
    ReservationStatus,
)


class Transition(NamedTuple):
    target: ReservationStatus
    roles: frozenset[ActorRole]


_S = ReservationStatus
_E = LifecycleEvent
_R = ActorRole

TRANSITIONS: dict[tuple[ReservationStatus, LifecycleEvent], Transition] = {
    (_S.PENDING, _E.CONFIRM): Transition(_S.CONFIRMED, frozenset({_R.ADMIN, _R.SYSTEM})),
    (_S.PENDING, _E.REJECT): Transition(_S.REJECTED, frozenset({_R.ADMIN})),
    (_S.PENDING, _E.CANCEL): Transition(_S.CANCELLED, frozenset({_R.USER})),
    (_S.CONFIRMED, _E.CANCEL): Transition(_S.CANCELLED, frozenset({_R.USER})),
    (_S.CONFIRMED, _E.COMPLETE): Transition(_S.COMPLETED, frozenset({_R.SYSTEM, _R.ADMIN})),
    (_S.CONFIRMED, _E.MARK_NO_SHOW): Transition(_S.NO_SHOW, frozenset({_R.SYSTEM, _R.ADMIN})),
}


def next_status(
    status: ReservationStatus, event: LifecycleEvent, role: ActorRole
) -> ReservationStatus:
    """Resolve the status a reservation moves to.

    Raises:
        InvalidTransition: The event is not allowed from this status
        NotAuthorized: The role may not trigger this event
    """
    transition = TRANSITIONS.get((status, event))
    if transition is None:
        raise InvalidTransition(
            details={"status": status.value, "event": event.value}
        )
    if role not in transition.roles:
        raise NotAuthorized(
            details={"status": status.value, "event": event.value, "role": role.value}
        )
    return transition.target


def allowed_events(status: ReservationStatus, role: ActorRole) -> list[LifecycleEvent]:
    """Events the role may trigger from this status."""
    return [
        event
        for (source, event), transition in TRANSITIONS.items()
        if source == status and role in transition.roles
    ]
