"""Booking service: quotes, reservations and their lifecycle.

Orchestrates the pricing and refund policy services with the room catalog,
reservation store and payment collaborators. Every state change re-runs the
authoritative server-side checks before anything is written.
"""

import datetime as dt
import uuid

from booking_core.config import BookingSettings, get_settings
from booking_core.models import (
    Actor,
    ActorRole,
    CancellationNotEligible,
    CancellationPreview,
    CancellationResult,
    InvalidTransition,
    LifecycleEvent,
    NotAuthorized,
    OptionSelection,
    PaymentStatus,
    Quote,
    Reservation,
    ReservationNotFound,
    ReservationOption,
    ReservationPage,
    ReservationSearchCondition,
    ReservationStatus,
    ReservationView,
)
from booking_core.utils.logging import (
    get_logger,
    log_refund_operation,
    log_reservation_operation,
)

from .interfaces import Clock, PaymentCollaborator, ReservationStore, RoomCatalog, utc_now
from .lifecycle import next_status
from .pricing import PricingService
from .refund_policy_service import RefundPolicyService

logger = get_logger(__name__)


def generate_reservation_id(now: dt.datetime) -> str:
    """Generate a unique reservation ID."""
    unique_part = uuid.uuid4().hex[:8].upper()
    return f"RES-{now.year}-{unique_part}"


class BookingService:
    """Service for booking rooms and moving reservations through their lifecycle."""

    def __init__(
        self,
        catalog: RoomCatalog,
        store: ReservationStore,
        payments: PaymentCollaborator,
        clock: Clock = utc_now,
        settings: BookingSettings | None = None,
    ) -> None:
        """Initialize booking service.

        Args:
            catalog: Room catalog collaborator
            store: Reservation store collaborator
            payments: Payment collaborator used for refunds
            clock: Source of the current instant
            settings: Runtime settings (defaults to environment settings)
        """
        self.settings = settings or get_settings()
        self.catalog = catalog
        self.store = store
        self.payments = payments
        self.clock = clock
        self.pricing = PricingService(catalog, self.settings.currency)
        self.policy = RefundPolicyService(self.settings.tzinfo)

    def _today(self, now: dt.datetime) -> dt.date:
        return self.settings.today(now)

    # ------------------------------------------------------------------
    # Quotes and booking
    # ------------------------------------------------------------------

    def get_quote(
        self,
        room_id: str,
        check_in: dt.date,
        check_out: dt.date,
        option_quantities: OptionSelection,
    ) -> Quote:
        """Price a prospective stay. Nothing is written."""
        return self.pricing.get_quote(
            room_id, check_in, check_out, option_quantities, self._today(self.clock())
        )

    def book(
        self,
        user_id: str,
        room_id: str,
        check_in: dt.date,
        check_out: dt.date,
        option_quantities: OptionSelection,
    ) -> Reservation:
        """Create a PENDING reservation at the quoted price.

        The quote total and option prices are locked into the reservation.

        Raises:
            InvalidDateRange, InvalidOptionSelection: Bad request
            RoomUnavailable: Room not bookable or nights already taken
            UpstreamFailure: Catalog or store failure
        """
        now = self.clock()
        _, quote = self.pricing.quote_snapshot(
            room_id, check_in, check_out, option_quantities, self._today(now)
        )

        reservation = Reservation(
            reservation_id=generate_reservation_id(now),
            user_id=user_id,
            room_id=room_id,
            check_in=quote.check_in,
            check_out=quote.check_out,
            nights=quote.nights,
            nightly_price=quote.nightly_price,
            options=[
                ReservationOption(
                    option_id=line.option_id,
                    name=line.name,
                    quantity=line.quantity,
                    price=line.unit_price,
                )
                for line in quote.options
            ],
            total_price=quote.total,
            currency=quote.currency,
            status=ReservationStatus.PENDING,
            payment_status=PaymentStatus.PENDING,
            created_at=now,
            updated_at=now,
        )

        created = self.store.create(reservation)
        log_reservation_operation(
            logger,
            "book",
            reservation_id=created.reservation_id,
            status=created.status.value,
            amount=created.total_price,
            room_id=room_id,
            user_id=user_id,
        )
        return created

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def _load(self, reservation_id: str) -> Reservation:
        reservation = self.store.get(reservation_id)
        if reservation is None:
            raise ReservationNotFound(details={"reservation_id": reservation_id})
        return reservation

    def _ensure_can_view(self, reservation: Reservation, actor: Actor) -> None:
        if actor.role in (ActorRole.ADMIN, ActorRole.SYSTEM):
            return
        if reservation.user_id != actor.user_id:
            raise NotAuthorized(details={"reservation_id": reservation.reservation_id})

    def to_view(self, reservation: Reservation, now: dt.datetime | None = None) -> ReservationView:
        """Attach can_cancel and can_modify hints computed from the policy."""
        decision = self.policy.evaluate_cancellation(
            reservation.check_in, now or self.clock(), reservation.status
        )
        data = reservation.model_dump()
        data["can_cancel"] = decision.eligible
        data["can_modify"] = reservation.status == ReservationStatus.PENDING
        return ReservationView.model_validate(data)

    def _page_views(self, page: ReservationPage) -> ReservationPage:
        now = self.clock()
        return page.model_copy(
            update={"content": [self.to_view(r, now) for r in page.content]}
        )

    def get_reservation(self, reservation_id: str, actor: Actor) -> ReservationView:
        """Get one reservation; users only see their own."""
        reservation = self._load(reservation_id)
        self._ensure_can_view(reservation, actor)
        return self.to_view(reservation)

    def list_user_reservations(
        self,
        user_id: str,
        status: ReservationStatus | None = None,
        page: int = 0,
        size: int = 10,
    ) -> ReservationPage:
        """A user's reservations, newest first."""
        return self._page_views(self.store.list_by_user(user_id, status, page, size))

    def search_reservations(
        self,
        condition: ReservationSearchCondition,
        page: int = 0,
        size: int = 10,
    ) -> ReservationPage:
        """Administrative search across all reservations."""
        return self._page_views(self.store.search(condition, page, size))

    def room_reservation_status(
        self, room_id: str, start: dt.date, end: dt.date
    ) -> list[ReservationView]:
        """Active reservations for a room overlapping [start, end)."""
        if end <= start:
            end = start + dt.timedelta(days=1)
        now = self.clock()
        return [self.to_view(r, now) for r in self.store.list_for_room(room_id, start, end)]

    # ------------------------------------------------------------------
    # Cancellation
    # ------------------------------------------------------------------

    def preview_cancellation(self, reservation_id: str, actor: Actor) -> CancellationPreview:
        """What cancelling now would mean, without changing anything."""
        reservation = self._load(reservation_id)
        self._ensure_can_view(reservation, actor)
        return self.policy.preview(reservation, self.clock())

    def cancel(
        self, reservation_id: str, actor: Actor, reason: str | None = None
    ) -> CancellationResult:
        """Cancel a reservation on behalf of its owner.

        The refund request must be accepted before the status is written;
        if the payment collaborator fails, the reservation is left untouched.
        If the status write fails after the refund was accepted, the
        reservation keeps its status and a retried cancel gets back the
        refund already issued.

        Raises:
            ReservationNotFound: Unknown reservation
            NotAuthorized: Actor is not the owner
            InvalidTransition: Reservation already terminal
            CancellationNotEligible: Same-day or past check-in
            UpstreamFailure: Refund request or store failure
        """
        now = self.clock()
        reservation = self._load(reservation_id)
        if reservation.user_id != actor.user_id:
            raise NotAuthorized(details={"reservation_id": reservation_id})

        target = next_status(reservation.status, LifecycleEvent.CANCEL, actor.role)

        decision = self.policy.evaluate_cancellation(
            reservation.check_in, now, reservation.status
        )
        if not decision.eligible:
            log_reservation_operation(
                logger,
                "cancel",
                reservation_id=reservation_id,
                status=reservation.status.value,
                error="not eligible",
                days_until_check_in=decision.days_until_check_in,
            )
            raise CancellationNotEligible(
                details={
                    "reservation_id": reservation_id,
                    "days_until_check_in": str(decision.days_until_check_in),
                }
            )

        refund_amount = self.policy.calculate_refund_amount(
            reservation.total_price, decision.refund_rate
        )

        ticket = None
        payment_status = reservation.payment_status
        if reservation.payment_status == PaymentStatus.COMPLETED and refund_amount > 0:
            ticket = self.payments.request_refund(reservation_id, refund_amount, reason)
            payment_status = PaymentStatus.REFUNDED
            log_refund_operation(
                logger,
                reservation_id,
                refund_amount,
                provider=ticket.provider.value,
                ticket_id=ticket.ticket_id,
                result="accepted",
            )
        elif reservation.payment_status == PaymentStatus.PENDING:
            # Nothing was captured, so there is nothing to refund
            payment_status = PaymentStatus.CANCELLED
            log_refund_operation(
                logger, reservation_id, 0, result="skipped", reason="payment not captured"
            )

        updated = self.store.update_status(
            reservation_id,
            target,
            reason,
            expected_status=reservation.status,
            payment_status=payment_status,
            refund=ticket,
        )

        log_reservation_operation(
            logger,
            "cancel",
            reservation_id=reservation_id,
            status=updated.status.value,
            amount=ticket.amount if ticket else 0,
            refund_rate=decision.refund_rate,
        )

        return CancellationResult(
            reservation=updated,
            refund_rate=decision.refund_rate,
            refund_amount=ticket.amount if ticket else 0,
            refund=ticket,
        )

    # ------------------------------------------------------------------
    # Administrative and scheduled transitions
    # ------------------------------------------------------------------

    def _transition(
        self,
        reservation: Reservation,
        event: LifecycleEvent,
        actor: Actor,
        reason: str | None = None,
        payment_status: PaymentStatus | None = None,
    ) -> Reservation:
        target = next_status(reservation.status, event, actor.role)
        updated = self.store.update_status(
            reservation.reservation_id,
            target,
            reason,
            expected_status=reservation.status,
            payment_status=payment_status,
        )
        log_reservation_operation(
            logger,
            event.value.lower(),
            reservation_id=reservation.reservation_id,
            status=updated.status.value,
            actor=actor.role.value,
        )
        return updated

    def confirm(self, reservation_id: str, actor: Actor) -> Reservation:
        """PENDING -> CONFIRMED (admin or system)."""
        return self._transition(self._load(reservation_id), LifecycleEvent.CONFIRM, actor)

    def reject(self, reservation_id: str, actor: Actor, reason: str) -> Reservation:
        """PENDING -> REJECTED (admin). A reason is required."""
        reservation = self._load(reservation_id)
        if not reason or not reason.strip():
            raise InvalidTransition(
                details={"reservation_id": reservation_id, "reason": "rejection reason is required"}
            )
        return self._transition(
            reservation,
            LifecycleEvent.REJECT,
            actor,
            reason.strip(),
            payment_status=PaymentStatus.CANCELLED,
        )

    def complete(self, reservation_id: str, actor: Actor) -> Reservation:
        """CONFIRMED -> COMPLETED once the check-out date has been reached."""
        reservation = self._load(reservation_id)
        today = self._today(self.clock())
        if today < reservation.check_out:
            raise InvalidTransition(
                details={
                    "reservation_id": reservation_id,
                    "reason": "stay has not ended",
                    "check_out": reservation.check_out.isoformat(),
                }
            )
        return self._transition(reservation, LifecycleEvent.COMPLETE, actor)

    def mark_no_show(self, reservation_id: str, actor: Actor) -> Reservation:
        """CONFIRMED -> NO_SHOW after the check-in date has passed."""
        reservation = self._load(reservation_id)
        today = self._today(self.clock())
        if today <= reservation.check_in:
            raise InvalidTransition(
                details={
                    "reservation_id": reservation_id,
                    "reason": "check-in date has not passed",
                    "check_in": reservation.check_in.isoformat(),
                }
            )
        return self._transition(reservation, LifecycleEvent.MARK_NO_SHOW, actor)

    def record_payment(
        self,
        reservation_id: str,
        actor: Actor | None = None,
        provider_transaction_id: str | None = None,
    ) -> Reservation:
        """Payment success callback: charge recorded, payment COMPLETED, PENDING -> CONFIRMED.

        The captured amount is the locked total price. A reservation an
        administrator already confirmed only has its payment status updated.

        Raises:
            ReservationNotFound: Unknown reservation
            NotAuthorized: Caller is neither the system nor an administrator
            InvalidTransition: Reservation is not awaiting payment
            UpstreamFailure: Payment or store failure
        """
        actor = actor or Actor.system()
        reservation = self._load(reservation_id)
        if actor.role not in (ActorRole.SYSTEM, ActorRole.ADMIN):
            raise NotAuthorized(details={"reservation_id": reservation_id})

        confirmed_unpaid = (
            reservation.status == ReservationStatus.CONFIRMED
            and reservation.payment_status != PaymentStatus.COMPLETED
        )
        if not confirmed_unpaid:
            # Refuse before anything is recorded with the provider
            next_status(reservation.status, LifecycleEvent.CONFIRM, actor.role)

        charge = self.payments.record_charge(
            reservation_id, reservation.total_price, provider_transaction_id
        )

        if confirmed_unpaid:
            updated = self.store.update_status(
                reservation_id,
                ReservationStatus.CONFIRMED,
                expected_status=ReservationStatus.CONFIRMED,
                payment_status=PaymentStatus.COMPLETED,
            )
            log_reservation_operation(
                logger,
                "record_payment",
                reservation_id=reservation_id,
                status=updated.status.value,
                amount=charge.amount,
            )
            return updated

        return self._transition(
            reservation,
            LifecycleEvent.CONFIRM,
            actor,
            payment_status=PaymentStatus.COMPLETED,
        )
