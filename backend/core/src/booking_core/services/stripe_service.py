"""Stripe service for refunds.

Uses the v8+ StripeClient pattern with the secret key read from SSM
Parameter Store.
"""

import logging
from functools import lru_cache

import stripe
from stripe import StripeClient

from booking_core.config import get_settings

from .ssm_service import SSMService, SSMServiceError, get_ssm_service

logger = logging.getLogger(__name__)


class StripeServiceError(Exception):
    """Raised when a Stripe operation fails."""

    def __init__(self, message: str, stripe_error_code: str | None = None) -> None:
        """Initialize with message and optional Stripe error code.

        Args:
            message: Human-readable error message.
            stripe_error_code: Stripe-specific error code if available.
        """
        super().__init__(message)
        self.stripe_error_code = stripe_error_code


class StripeService:
    """Service for Stripe refund operations.

    Usage:
        stripe_svc = get_stripe_service()
        refund = stripe_svc.create_refund(
            payment_intent_id="pi_123",
            amount=50000,
            reason="Guest cancelled",
        )
    """

    def __init__(
        self,
        environment: str | None = None,
        ssm: SSMService | None = None,
        client: StripeClient | None = None,
    ) -> None:
        """Initialize Stripe service.

        Args:
            environment: Environment name (dev, prod). Defaults to settings.
            ssm: SSM service used to fetch the secret key.
            client: Pre-built StripeClient (skips SSM lookup).
        """
        self._environment = environment or get_settings().environment
        self._ssm = ssm or get_ssm_service()
        self._client = client

    def _get_client(self) -> StripeClient:
        """Get or create the Stripe client (lazy initialization).

        Raises:
            StripeServiceError: If credentials cannot be retrieved.
        """
        if self._client is None:
            try:
                secret_key = self._ssm.get_parameter(
                    f"/booking/{self._environment}/stripe/secret_key"
                )
            except SSMServiceError as e:
                raise StripeServiceError(f"Failed to initialize Stripe client: {e}") from e
            self._client = StripeClient(secret_key)
            logger.info("Stripe client initialized for environment: %s", self._environment)
        return self._client

    def create_refund(
        self,
        *,
        payment_intent_id: str,
        amount: int,
        reason: str | None = None,
        idempotency_key: str | None = None,
    ) -> dict:
        """Create a refund for a captured payment.

        Args:
            payment_intent_id: Stripe PaymentIntent ID (pi_xxx).
            amount: Refund amount in the smallest currency unit.
            reason: Reason for refund (stored as metadata).
            idempotency_key: Optional key so retries never refund twice.

        Returns:
            Dict with refund_id, amount and status.

        Raises:
            StripeServiceError: If refund creation fails.
        """
        client = self._get_client()

        params: dict = {"payment_intent": payment_intent_id, "amount": amount}
        if reason:
            params["metadata"] = {"reason": reason}

        options: dict = {}
        if idempotency_key:
            options["idempotency_key"] = idempotency_key

        try:
            logger.info(
                "Creating refund for PaymentIntent %s, amount %d",
                payment_intent_id,
                amount,
            )
            refund = client.refunds.create(params=params, options=options)
        except stripe.StripeError as e:
            error_code = getattr(e, "code", None)
            logger.error("Stripe refund creation failed: %s (code: %s)", str(e), error_code)
            raise StripeServiceError(
                f"Failed to create refund: {e}",
                stripe_error_code=error_code,
            ) from e

        logger.info("Refund created: %s for PaymentIntent %s", refund.id, payment_intent_id)
        return {
            "refund_id": refund.id,
            "amount": refund.amount,
            "status": refund.status,
        }


@lru_cache(maxsize=1)
def get_stripe_service() -> StripeService:
    """Get the shared StripeService instance.

    Returns:
        StripeService: Shared service instance.
    """
    return StripeService()
