"""FastAPI dependency injection providers for booking services.

Services are lazily instantiated and cached with @lru_cache.

Service Dependency Graph:
    DynamoDBService (singleton via get_dynamodb_service)
        ├── DynamoDBRoomCatalog
        ├── DynamoDBReservationStore
        └── PaymentService ── StripeService (stripe provider only)
                └── BookingService

Testing:
    Use reset_services() to clear cached instances between tests, or
    app.dependency_overrides[get_booking_service] to inject fakes.
"""

from functools import lru_cache

from booking_core.config import get_settings
from booking_core.services.booking import BookingService
from booking_core.services.dynamodb import get_dynamodb_service
from booking_core.services.interfaces import Clock, utc_now
from booking_core.services.payment_service import PaymentService
from booking_core.services.reservation_store import DynamoDBReservationStore
from booking_core.services.room_catalog import DynamoDBRoomCatalog


def get_clock() -> Clock:
    """Wall clock used by all services."""
    return utc_now


@lru_cache
def get_room_catalog() -> DynamoDBRoomCatalog:
    """Get cached room catalog backed by the rooms table."""
    return DynamoDBRoomCatalog(db=get_dynamodb_service())


@lru_cache
def get_reservation_store() -> DynamoDBReservationStore:
    """Get cached reservation store."""
    return DynamoDBReservationStore(db=get_dynamodb_service(), clock=get_clock())


@lru_cache
def get_payment_service() -> PaymentService:
    """Get cached PaymentService for the configured provider."""
    settings = get_settings()
    return PaymentService(
        db=get_dynamodb_service(),
        provider=settings.payment_provider,
        currency=settings.currency,
        clock=get_clock(),
    )


@lru_cache
def get_booking_service() -> BookingService:
    """Get cached BookingService wired to the DynamoDB collaborators."""
    return BookingService(
        catalog=get_room_catalog(),
        store=get_reservation_store(),
        payments=get_payment_service(),
        clock=get_clock(),
        settings=get_settings(),
    )


def reset_services() -> None:
    """Clear all cached service instances.

    Also resets the settings, the Stripe and SSM clients and the underlying
    DynamoDB singleton.
    """
    from booking_core.config import reset_settings
    from booking_core.services.dynamodb import reset_dynamodb_service
    from booking_core.services.ssm_service import get_ssm_service
    from booking_core.services.stripe_service import get_stripe_service

    get_room_catalog.cache_clear()
    get_reservation_store.cache_clear()
    get_payment_service.cache_clear()
    get_booking_service.cache_clear()
    get_stripe_service.cache_clear()
    get_ssm_service.cache_clear()

    reset_settings()
    reset_dynamodb_service()
