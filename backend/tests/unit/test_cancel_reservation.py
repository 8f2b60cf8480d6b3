"""Unit tests for BookingService.cancel().

The clock is pinned to 2025-05-20 10:00 in Seoul, so a check-in of
TODAY + k is exactly k days away.

Test categories:
- Refund tiers applied to the locked total
- Policy refusals (same day, terminal states)
- Ownership
- Refund-before-transition ordering and retries after a failed status write
- Unpaid reservations
"""

import datetime as dt
import logging

import pytest

from booking_core.models import (
    Actor,
    ActorRole,
    CancellationNotEligible,
    InvalidTransition,
    NotAuthorized,
    PaymentStatus,
    ReservationNotFound,
    ReservationStatus,
    UpstreamFailure,
)

TODAY = dt.date(2025, 5, 20)
USER = Actor(user_id="user-123")
RES_ID = "RES-2025-TEST0001"


def _in_days(days: int) -> dt.date:
    return TODAY + dt.timedelta(days=days)


class TestCancelRefundTiers:
    """Refund amounts for eligible cancellations."""

    def test_two_days_before_refunds_half(
        self, booking_service, reservation_store, reservation_factory, payments
    ) -> None:
        """CONFIRMED, total 200,000, check-in in 2 days: 50% refunded."""
        reservation_store.add(reservation_factory(check_in=_in_days(2), check_out=_in_days(4)))

        result = booking_service.cancel(RES_ID, USER, "Change of plans")

        assert result.refund_rate == 50
        assert result.refund_amount == 100000
        assert result.reservation.status == ReservationStatus.CANCELLED
        assert result.reservation.payment_status == PaymentStatus.REFUNDED
        assert result.reservation.refund_amount == 100000
        assert result.reservation.refund_id == "TXN-REFUND0001"
        assert result.reservation.status_reason == "Change of plans"
        assert payments.refunds == [(RES_ID, 100000, "Change of plans")]

    def test_five_days_before_refunds_everything(
        self, booking_service, reservation_store, reservation_factory, payments
    ) -> None:
        reservation_store.add(reservation_factory())

        result = booking_service.cancel(RES_ID, USER)

        assert result.refund_rate == 100
        assert result.refund_amount == 200000
        assert result.refund is not None
        assert payments.refunds == [(RES_ID, 200000, None)]

    def test_refund_uses_locked_total(
        self, booking_service, reservation_store, reservation_factory, room_catalog, sample_room
    ) -> None:
        """Later catalog price changes do not affect the refund."""
        reservation_store.add(reservation_factory(total_price=230000))
        room_catalog.rooms["room-101"] = sample_room.model_copy(update={"nightly_price": 1})

        result = booking_service.cancel(RES_ID, USER)

        assert result.refund_amount == 230000

    def test_cancel_releases_nights(
        self, booking_service, reservation_store, reservation_factory
    ) -> None:
        reservation_store.add(reservation_factory())

        booking_service.cancel(RES_ID, USER)
        rebooked = booking_service.book("user-456", "room-101", _in_days(5), _in_days(7), {})

        assert rebooked.status == ReservationStatus.PENDING


class TestCancelRefused:
    """Cancellations the engine refuses."""

    def test_same_day_not_eligible(
        self, booking_service, reservation_store, reservation_factory, payments
    ) -> None:
        """Check-in today: refused, no refund requested, nothing written."""
        reservation_store.add(reservation_factory(check_in=TODAY, check_out=_in_days(2)))

        with pytest.raises(CancellationNotEligible) as exc_info:
            booking_service.cancel(RES_ID, USER)

        assert exc_info.value.details["days_until_check_in"] == "0"
        assert payments.refunds == []
        assert reservation_store.updates == []
        assert reservation_store.get(RES_ID).status == ReservationStatus.CONFIRMED

    def test_already_cancelled_refused(
        self, booking_service, reservation_store, reservation_factory, payments
    ) -> None:
        """A second cancellation is an invalid transition and refunds nothing."""
        reservation_store.add(
            reservation_factory(
                status=ReservationStatus.CANCELLED, payment_status=PaymentStatus.REFUNDED
            )
        )

        with pytest.raises(InvalidTransition):
            booking_service.cancel(RES_ID, USER)

        assert payments.refunds == []

    @pytest.mark.parametrize(
        "status",
        [ReservationStatus.REJECTED, ReservationStatus.COMPLETED, ReservationStatus.NO_SHOW],
    )
    def test_terminal_states_refused(
        self, booking_service, reservation_store, reservation_factory, status
    ) -> None:
        reservation_store.add(reservation_factory(status=status))

        with pytest.raises(InvalidTransition):
            booking_service.cancel(RES_ID, USER)

    def test_other_user_cannot_cancel(
        self, booking_service, reservation_store, reservation_factory, payments
    ) -> None:
        reservation_store.add(reservation_factory())

        with pytest.raises(NotAuthorized):
            booking_service.cancel(RES_ID, Actor(user_id="user-456"))

        assert payments.refunds == []

    def test_admin_is_not_the_owner(
        self, booking_service, reservation_store, reservation_factory
    ) -> None:
        """Self-service cancellation is reserved to the owning user."""
        reservation_store.add(reservation_factory())

        with pytest.raises(NotAuthorized):
            booking_service.cancel(RES_ID, Actor(user_id="admin-1", role=ActorRole.ADMIN))

    def test_unknown_reservation(self, booking_service) -> None:
        with pytest.raises(ReservationNotFound):
            booking_service.cancel("RES-2025-MISSING0", USER)


class TestRefundOrdering:
    """The reservation only changes once the refund was accepted."""

    def test_refund_failure_leaves_reservation_unchanged(
        self, booking_service, reservation_store, reservation_factory, payments
    ) -> None:
        reservation_store.add(reservation_factory())
        payments.fail = True

        with pytest.raises(UpstreamFailure):
            booking_service.cancel(RES_ID, USER)

        stored = reservation_store.get(RES_ID)
        assert stored.status == ReservationStatus.CONFIRMED
        assert stored.payment_status == PaymentStatus.COMPLETED
        assert reservation_store.updates == []
        assert (("room-101", _in_days(5))) in reservation_store.nights

    def test_status_write_failure_then_retry_refunds_once(
        self, booking_service, reservation_store, reservation_factory, payments
    ) -> None:
        """Refund accepted, status write lost: the retry completes the cancel."""
        reservation_store.add(reservation_factory())
        reservation_store.fail_next_update = True

        with pytest.raises(UpstreamFailure):
            booking_service.cancel(RES_ID, USER)

        stored = reservation_store.get(RES_ID)
        assert stored.status == ReservationStatus.CONFIRMED
        assert stored.payment_status == PaymentStatus.COMPLETED

        result = booking_service.cancel(RES_ID, USER)

        assert result.reservation.status == ReservationStatus.CANCELLED
        assert result.reservation.payment_status == PaymentStatus.REFUNDED
        assert result.refund_amount == 200000
        assert result.reservation.refund_id == "TXN-REFUND0001"
        assert payments.refunds == [(RES_ID, 200000, None)]
        assert reservation_store.nights == {}

    def test_retry_against_payment_ledger_refunds_once(
        self,
        dynamodb,
        room_catalog,
        reservation_store,
        reservation_factory,
        clock,
        settings,
    ) -> None:
        from booking_core.models import PaymentProvider
        from booking_core.services.booking import BookingService
        from booking_core.services.payment_service import PaymentService

        payment_service = PaymentService(db=dynamodb, provider=PaymentProvider.MOCK, clock=clock)
        service = BookingService(
            catalog=room_catalog,
            store=reservation_store,
            payments=payment_service,
            clock=clock,
            settings=settings,
        )
        reservation_store.add(reservation_factory())
        payment_service.record_charge(RES_ID, 200000)
        reservation_store.fail_next_update = True

        with pytest.raises(UpstreamFailure):
            service.cancel(RES_ID, USER)
        result = service.cancel(RES_ID, USER)

        assert result.reservation.status == ReservationStatus.CANCELLED
        assert result.refund_amount == 200000
        amounts = sorted(p.amount for p in payment_service.get_payments_for_reservation(RES_ID))
        assert amounts == [-200000, 200000]
        assert result.refund.ticket_id == payment_service.get_refund(RES_ID).ticket_id

    def test_refund_logged(
        self, booking_service, reservation_store, reservation_factory, caplog
    ) -> None:
        reservation_store.add(reservation_factory())

        with caplog.at_level(logging.INFO, logger="booking_core.services.booking"):
            booking_service.cancel(RES_ID, USER)

        messages = [r.getMessage() for r in caplog.records]
        assert any("Refund: RES-2025-TEST0001 (200000)" in m for m in messages)
        assert any("Reservation operation: cancel" in m for m in messages)


class TestUnpaidCancellation:
    """Reservations whose payment was never captured."""

    def test_pending_payment_cancelled_without_refund(
        self, booking_service, reservation_store, reservation_factory, payments
    ) -> None:
        reservation_store.add(
            reservation_factory(
                status=ReservationStatus.PENDING, payment_status=PaymentStatus.PENDING
            )
        )

        result = booking_service.cancel(RES_ID, USER)

        assert result.refund is None
        assert result.refund_amount == 0
        assert result.refund_rate == 100
        assert result.reservation.status == ReservationStatus.CANCELLED
        assert result.reservation.payment_status == PaymentStatus.CANCELLED
        assert payments.refunds == []
        assert reservation_store.nights == {}


class TestPreviewCancellation:
    """Tests for preview_cancellation()."""

    def test_preview_matches_cancel(
        self, booking_service, reservation_store, reservation_factory
    ) -> None:
        reservation_store.add(reservation_factory(check_in=_in_days(1), check_out=_in_days(3)))

        preview = booking_service.preview_cancellation(RES_ID, USER)
        result = booking_service.cancel(RES_ID, USER)

        assert preview.refund_amount == result.refund_amount == 100000
        assert preview.refund_rate == result.refund_rate == 50

    def test_preview_changes_nothing(
        self, booking_service, reservation_store, reservation_factory, payments
    ) -> None:
        reservation_store.add(reservation_factory())

        booking_service.preview_cancellation(RES_ID, USER)

        assert reservation_store.updates == []
        assert payments.refunds == []

    def test_preview_of_other_users_reservation(
        self, booking_service, reservation_store, reservation_factory
    ) -> None:
        reservation_store.add(reservation_factory())

        with pytest.raises(NotAuthorized):
            booking_service.preview_cancellation(RES_ID, Actor(user_id="user-456"))
