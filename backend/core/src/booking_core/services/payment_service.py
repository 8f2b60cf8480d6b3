"""Payment service: the refund side of the payment collaborator.

Charges are captured outside this system; this service records them and
issues refunds through the configured provider. The mock provider accepts
every refund immediately.
"""

import datetime as dt
import uuid
from typing import TYPE_CHECKING, Any

from botocore.exceptions import BotoCoreError, ClientError

from booking_core.models import (
    Payment,
    PaymentProvider,
    RefundTicket,
    TransactionStatus,
    UpstreamFailure,
)
from booking_core.utils.logging import get_logger, log_refund_operation

from .interfaces import Clock, utc_now
from .stripe_service import StripeService, StripeServiceError, get_stripe_service

if TYPE_CHECKING:
    from .dynamodb import DynamoDBService

logger = get_logger(__name__)


class PaymentService:
    """Service for recording payments and requesting refunds."""

    PAYMENTS_TABLE = "payments"

    def __init__(
        self,
        db: "DynamoDBService",
        provider: PaymentProvider = PaymentProvider.MOCK,
        stripe_service: StripeService | None = None,
        currency: str = "KRW",
        clock: Clock = utc_now,
    ) -> None:
        """Initialize payment service.

        Args:
            db: DynamoDB service instance
            provider: Provider used for refunds
            stripe_service: Stripe service (created lazily when needed)
            currency: Currency recorded on transactions
            clock: Source of the current instant
        """
        self.db = db
        self.provider = provider
        self._stripe = stripe_service
        self.currency = currency
        self.clock = clock

    @property
    def stripe(self) -> StripeService:
        if self._stripe is None:
            self._stripe = get_stripe_service()
        return self._stripe

    def _generate_payment_id(self, prefix: str = "TXN") -> str:
        """Generate a unique payment/transaction ID like TXN-ABC123DEF456."""
        return f"{prefix}-{uuid.uuid4().hex[:12].upper()}"

    # Reads

    def get_payment(self, payment_id: str) -> Payment | None:
        """Get a payment by ID."""
        item = self.db.get_item(self.PAYMENTS_TABLE, {"payment_id": payment_id})
        return self._item_to_payment(item) if item else None

    def get_payments_for_reservation(self, reservation_id: str) -> list[Payment]:
        """Get all payment transactions for a reservation."""
        items = self.db.query_by_gsi(
            self.PAYMENTS_TABLE,
            "reservation_id-index",
            "reservation_id",
            reservation_id,
        )
        return [self._item_to_payment(item) for item in items]

    def _captured_charge(self, reservation_id: str) -> Payment | None:
        # A REFUNDED charge still carries the payment intent a retry refunds against
        for payment in self.get_payments_for_reservation(reservation_id):
            if payment.amount > 0 and payment.status in (
                TransactionStatus.COMPLETED,
                TransactionStatus.REFUNDED,
            ):
                return payment
        return None

    def get_refund(self, reservation_id: str) -> RefundTicket | None:
        """Get the refund already issued for a reservation, if any."""
        for payment in self.get_payments_for_reservation(reservation_id):
            if payment.amount < 0:
                return RefundTicket(
                    ticket_id=payment.payment_id,
                    reservation_id=reservation_id,
                    amount=-payment.amount,
                    provider=payment.provider,
                    status=payment.status,
                    provider_refund_id=payment.provider_transaction_id,
                    created_at=payment.created_at,
                )
        return None

    # Writes

    def record_charge(
        self,
        reservation_id: str,
        amount: int,
        provider_transaction_id: str | None = None,
    ) -> Payment:
        """Record a charge captured by the provider.

        Args:
            reservation_id: Reservation that was paid
            amount: Captured amount
            provider_transaction_id: PaymentIntent ID for Stripe

        Returns:
            The stored payment. A repeated callback returns the charge
            already recorded for the reservation.
        """
        existing = self._captured_charge(reservation_id)
        if existing is not None:
            logger.info(
                "Charge already recorded",
                extra={"reservation_id": reservation_id, "payment_id": existing.payment_id},
            )
            return existing

        now = self.clock()
        payment = Payment(
            payment_id=self._generate_payment_id(
                "PAY" if self.provider == PaymentProvider.STRIPE else "TXN"
            ),
            reservation_id=reservation_id,
            amount=amount,
            currency=self.currency,
            status=TransactionStatus.COMPLETED,
            provider=self.provider,
            provider_transaction_id=provider_transaction_id or f"MOCK-{uuid.uuid4().hex[:8]}",
            created_at=now,
            completed_at=now,
        )
        self.db.put_item(self.PAYMENTS_TABLE, self._payment_to_item(payment))
        return payment

    def request_refund(
        self, reservation_id: str, amount: int, reason: str | None = None
    ) -> RefundTicket:
        """Issue a refund for a reservation's captured charge.

        At most one refund is issued per reservation. When a refund was
        already accepted (a cancel retried after its status write failed),
        that refund's ticket is returned and the provider is not called again.

        Args:
            reservation_id: Reservation being cancelled
            amount: Refund amount (integer currency units)
            reason: Optional refund reason

        Returns:
            RefundTicket once the provider accepted the refund

        Raises:
            UpstreamFailure: No refundable charge, provider error or storage error
        """
        if amount <= 0:
            raise ValueError(f"Refund amount must be positive, got {amount}")

        try:
            return self._request_refund(reservation_id, amount, reason)
        except StripeServiceError as e:
            log_refund_operation(
                logger,
                reservation_id,
                amount,
                provider=self.provider.value,
                result="error",
                error=str(e),
            )
            details = {"operation": "refund", "error": str(e)}
            if e.stripe_error_code:
                details["stripe_error_code"] = e.stripe_error_code
            raise UpstreamFailure(details=details) from e
        except (ClientError, BotoCoreError) as e:
            log_refund_operation(
                logger,
                reservation_id,
                amount,
                provider=self.provider.value,
                result="error",
                error=str(e),
            )
            raise UpstreamFailure(details={"operation": "refund", "error": str(e)}) from e

    def _request_refund(self, reservation_id: str, amount: int, reason: str | None) -> RefundTicket:
        issued = self.get_refund(reservation_id)
        if issued is not None:
            log_refund_operation(
                logger,
                reservation_id,
                issued.amount,
                provider=issued.provider.value,
                ticket_id=issued.ticket_id,
                result="already_issued",
            )
            return issued

        original = self._captured_charge(reservation_id)
        if original is not None and amount > original.amount:
            raise UpstreamFailure(
                details={
                    "operation": "refund",
                    "reason": f"Refund amount ({amount}) exceeds payment ({original.amount})",
                }
            )

        now = self.clock()
        refund_id = self._generate_payment_id()

        if self.provider == PaymentProvider.STRIPE:
            if original is None or not original.provider_transaction_id:
                raise UpstreamFailure(
                    details={"operation": "refund", "reason": "no captured Stripe payment"}
                )
            result = self.stripe.create_refund(
                payment_intent_id=original.provider_transaction_id,
                amount=amount,
                reason=reason,
                idempotency_key=f"refund_{reservation_id}",
            )
            provider_refund_id = result["refund_id"]
            status = (
                TransactionStatus.COMPLETED
                if result["status"] == "succeeded"
                else TransactionStatus.PENDING
            )
        else:
            # MOCK: refunds always succeed
            provider_refund_id = f"MOCK-REFUND-{uuid.uuid4().hex[:8]}"
            status = TransactionStatus.COMPLETED

        # Refund record (negative amount convention)
        refund = Payment(
            payment_id=refund_id,
            reservation_id=reservation_id,
            amount=-amount,
            currency=self.currency,
            status=status,
            provider=self.provider,
            provider_transaction_id=provider_refund_id,
            created_at=now,
            completed_at=now if status == TransactionStatus.COMPLETED else None,
        )
        self.db.put_item(self.PAYMENTS_TABLE, self._payment_to_item(refund))

        if original is not None:
            self.update_payment_refund(original.payment_id, amount, provider_refund_id, now)

        log_refund_operation(
            logger,
            reservation_id,
            amount,
            provider=self.provider.value,
            ticket_id=refund_id,
            result="accepted",
        )

        return RefundTicket(
            ticket_id=refund_id,
            reservation_id=reservation_id,
            amount=amount,
            provider=self.provider,
            status=status,
            provider_refund_id=provider_refund_id,
            created_at=now,
        )

    def update_payment_refund(
        self,
        payment_id: str,
        refund_amount: int,
        provider_refund_id: str,
        refunded_at: dt.datetime,
    ) -> None:
        """Mark the original charge as refunded and link the refund."""
        self.db.update_item(
            self.PAYMENTS_TABLE,
            {"payment_id": payment_id},
            "SET #status = :status, refund_amount = :amount, "
            "provider_refund_id = :rid, refunded_at = :rat",
            {
                ":status": TransactionStatus.REFUNDED.value,
                ":amount": refund_amount,
                ":rid": provider_refund_id,
                ":rat": refunded_at.isoformat(),
            },
            {"#status": "status"},  # status is a reserved word
        )

    # Conversion helpers

    def _payment_to_item(self, payment: Payment) -> dict[str, Any]:
        """Convert Payment model to DynamoDB item."""
        item: dict[str, Any] = {
            "payment_id": payment.payment_id,
            "reservation_id": payment.reservation_id,
            "amount": payment.amount,
            "currency": payment.currency,
            "status": payment.status.value,
            "provider": payment.provider.value,
            "created_at": payment.created_at.isoformat(),
        }
        if payment.provider_transaction_id:
            item["provider_transaction_id"] = payment.provider_transaction_id
        if payment.completed_at:
            item["completed_at"] = payment.completed_at.isoformat()
        if payment.refund_amount is not None:
            item["refund_amount"] = payment.refund_amount
        if payment.refunded_at:
            item["refunded_at"] = payment.refunded_at.isoformat()
        return item

    def _item_to_payment(self, item: dict[str, Any]) -> Payment:
        """Convert DynamoDB item to Payment model."""
        return Payment(
            payment_id=item["payment_id"],
            reservation_id=item["reservation_id"],
            amount=int(item["amount"]),
            currency=item.get("currency", self.currency),
            status=TransactionStatus(item["status"]),
            provider=PaymentProvider(item["provider"]),
            provider_transaction_id=item.get("provider_transaction_id"),
            created_at=dt.datetime.fromisoformat(item["created_at"]),
            completed_at=(
                dt.datetime.fromisoformat(item["completed_at"])
                if item.get("completed_at")
                else None
            ),
            refund_amount=(
                int(item["refund_amount"]) if item.get("refund_amount") is not None else None
            ),
            refunded_at=(
                dt.datetime.fromisoformat(item["refunded_at"])
                if item.get("refunded_at")
                else None
            ),
        )
