"""API routes package.

Routers are organized by audience:

- health: Health check endpoints
- quotes: Price quotes for prospective stays
- reservations: Guest booking, listing and cancellation
- payments: Payment success callback
- admin: Administrative search and lifecycle transitions

All routers are registered in main.py with /api prefix.
"""

from booking_api.routes.admin import router as admin_router
from booking_api.routes.health import router as health_router
from booking_api.routes.payments import router as payments_router
from booking_api.routes.quotes import router as quotes_router
from booking_api.routes.reservations import router as reservations_router

__all__ = [
    "admin_router",
    "health_router",
    "payments_router",
    "quotes_router",
    "reservations_router",
]
