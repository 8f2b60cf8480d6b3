"""Caller identity for protected endpoints.

API Gateway authenticates the caller and forwards the identity in the
x-user-id and x-user-role headers. Requests without an identity are
rejected with 401.
"""

from fastapi import Depends, Header, HTTPException
from starlette.status import HTTP_401_UNAUTHORIZED

from booking_core.models import Actor, ActorRole, NotAuthorized


def get_actor(
    x_user_id: str | None = Header(default=None, description="Authenticated user ID"),
    x_user_role: str | None = Header(default=None, description="USER, ADMIN or SYSTEM"),
) -> Actor:
    """Resolve the authenticated actor from gateway headers."""
    if not x_user_id:
        raise HTTPException(
            status_code=HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )

    try:
        role = ActorRole((x_user_role or ActorRole.USER.value).upper())
    except ValueError:
        raise HTTPException(
            status_code=HTTP_401_UNAUTHORIZED,
            detail=f"Unknown role: {x_user_role}",
        ) from None

    return Actor(user_id=x_user_id, role=role)


def require_admin(actor: Actor = Depends(get_actor)) -> Actor:
    """Only administrators pass."""
    if actor.role != ActorRole.ADMIN:
        raise NotAuthorized(details={"required_role": ActorRole.ADMIN.value})
    return actor


def require_operator(actor: Actor = Depends(get_actor)) -> Actor:
    """System processes (payment callbacks) and administrators pass."""
    if actor.role not in (ActorRole.SYSTEM, ActorRole.ADMIN):
        raise NotAuthorized(
            details={"required_role": f"{ActorRole.SYSTEM.value} or {ActorRole.ADMIN.value}"}
        )
    return actor
