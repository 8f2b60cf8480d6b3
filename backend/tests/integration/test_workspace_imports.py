"""Workspace import integration tests.

Validates that both workspace packages (booking_core, booking_api) are
correctly installable and their public interfaces are accessible.
"""


class TestCorePackageImports:
    """Tests for booking_core public interface."""

    def test_can_import_core_package(self):
        """Core package should be importable."""
        import booking_core

        assert hasattr(booking_core, "__version__")

    def test_can_import_models(self):
        """All public models should be importable from booking_core.models."""
        from booking_core.models import (
            # Enums
            ActorRole,
            LifecycleEvent,
            PaymentStatus,
            ReservationStatus,
            RoomStatus,
            # Stay and catalog
            DateRange,
            OptionOffering,
            RoomOfferingSnapshot,
            # Quotes
            Quote,
            QuoteLine,
            # Reservations
            Reservation,
            ReservationPage,
            ReservationView,
            # Cancellation and payments
            CancellationDecision,
            CancellationPreview,
            Payment,
            RefundTicket,
            # Errors
            BookingError,
            ErrorCode,
            ErrorResponse,
        )

        assert ReservationStatus.PENDING.value == "PENDING"

    def test_can_import_services(self):
        """Services should be importable from booking_core.services."""
        from booking_core.services import (
            BookingService,
            DynamoDBReservationStore,
            DynamoDBRoomCatalog,
            PaymentService,
            PricingService,
            RefundPolicyService,
            StripeService,
            compose_quote,
            next_status,
        )

        assert callable(compose_quote)


class TestApiPackageImports:
    """Tests for booking_api public interface."""

    def test_can_import_app(self):
        """FastAPI app should be importable."""
        from booking_api.main import app, handler

        assert app.title == "Booking Engine API"
        assert handler is not None

    def test_can_import_dependencies(self):
        from booking_api.dependencies import get_booking_service, reset_services

        assert callable(get_booking_service)
        assert callable(reset_services)
