"""Business logic services for the booking engine."""

from .booking import BookingService, generate_reservation_id
from .dynamodb import DynamoDBService, get_dynamodb_service, reset_dynamodb_service
from .interfaces import Clock, PaymentCollaborator, ReservationStore, RoomCatalog, utc_now
from .lifecycle import TRANSITIONS, allowed_events, next_status
from .payment_service import PaymentService
from .pricing import PricingService, compose_quote, validate_selection
from .refund_policy_service import RefundPolicyService, days_until_check_in
from .reservation_store import DynamoDBReservationStore
from .room_catalog import DynamoDBRoomCatalog
from .ssm_service import SSMService, SSMServiceError, get_ssm_service
from .stay_calculator import adjust_check_out, compute_nights, stay_dates, validate_new_stay
from .stripe_service import StripeService, StripeServiceError, get_stripe_service

__all__ = [
    # Orchestration
    "BookingService",
    "generate_reservation_id",
    # Calculators
    "PricingService",
    "RefundPolicyService",
    "adjust_check_out",
    "compose_quote",
    "compute_nights",
    "days_until_check_in",
    "stay_dates",
    "validate_new_stay",
    "validate_selection",
    # Lifecycle
    "TRANSITIONS",
    "allowed_events",
    "next_status",
    # Ports
    "Clock",
    "PaymentCollaborator",
    "ReservationStore",
    "RoomCatalog",
    "utc_now",
    # Adapters
    "DynamoDBReservationStore",
    "DynamoDBRoomCatalog",
    "DynamoDBService",
    "PaymentService",
    "SSMService",
    "SSMServiceError",
    "StripeService",
    "StripeServiceError",
    "get_dynamodb_service",
    "get_ssm_service",
    "get_stripe_service",
    "reset_dynamodb_service",
]
