"""Refund policy service for cancellation eligibility and refund amounts.

Cancellation policy:
- Full refund (100%): Cancel 3+ days before check-in
- Partial refund (50%): Cancel 1-2 days before check-in
- Same day or later: self-service cancellation blocked

All amounts are integer currency units to avoid floating-point issues.
"""

import datetime as dt
from zoneinfo import ZoneInfo

from booking_core.models import (
    CancellationDecision,
    CancellationPreview,
    RefundTier,
    Reservation,
    ReservationStatus,
)

_ONE_DAY = dt.timedelta(days=1)

CANCELLABLE_STATUSES = frozenset({ReservationStatus.PENDING, ReservationStatus.CONFIRMED})


def days_until_check_in(check_in: dt.date, now: dt.datetime, tz: dt.tzinfo) -> int:
    """ceil((check_in midnight - now) / 1 day), check_in taken in tz.

    Naive `now` values are treated as UTC.
    """
    if now.tzinfo is None:
        now = now.replace(tzinfo=dt.UTC)
    start = dt.datetime.combine(check_in, dt.time.min, tzinfo=tz)
    delta = start - now
    return -((-delta) // _ONE_DAY)


class RefundPolicyService:
    """Service for evaluating cancellations based on timing.

    Policy tiers:
    - FULL (100%): 3+ days before check-in
    - PARTIAL (50%): 1-2 days before check-in
    - NONE (0%): same day, after check-in, or reservation not cancellable
    """

    # Policy thresholds (days before check-in)
    FULL_REFUND_DAYS = 3  # >= 3 days = full refund
    PARTIAL_REFUND_DAYS = 1  # >= 1 day = partial refund

    # Refund percentages
    FULL_REFUND_PERCENT = 100
    PARTIAL_REFUND_PERCENT = 50
    NO_REFUND_PERCENT = 0

    def __init__(self, tz: dt.tzinfo | str = "Asia/Seoul") -> None:
        self.tz = ZoneInfo(tz) if isinstance(tz, str) else tz

    def evaluate_cancellation(
        self,
        check_in: dt.date,
        now: dt.datetime,
        status: ReservationStatus,
    ) -> CancellationDecision:
        """Decide whether a reservation may be cancelled and at which rate.

        Args:
            check_in: Reservation check-in date
            now: Current instant, injected by the caller
            status: Current reservation status

        Returns:
            CancellationDecision; ineligible decisions always carry rate 0
        """
        days = days_until_check_in(check_in, now, self.tz)

        if status not in CANCELLABLE_STATUSES or days < self.PARTIAL_REFUND_DAYS:
            return CancellationDecision(
                eligible=False,
                refund_rate=self.NO_REFUND_PERCENT,
                days_until_check_in=days,
                tier=RefundTier.NONE,
            )

        if days >= self.FULL_REFUND_DAYS:
            return CancellationDecision(
                eligible=True,
                refund_rate=self.FULL_REFUND_PERCENT,
                days_until_check_in=days,
                tier=RefundTier.FULL,
            )

        return CancellationDecision(
            eligible=True,
            refund_rate=self.PARTIAL_REFUND_PERCENT,
            days_until_check_in=days,
            tier=RefundTier.PARTIAL,
        )

    def calculate_refund_amount(self, total_price: int, refund_rate: int) -> int:
        """Refund for a locked total price (integer division)."""
        return (total_price * refund_rate) // 100

    def describe(self, decision: CancellationDecision, status: ReservationStatus) -> str:
        """Human-readable explanation of a decision."""
        days = decision.days_until_check_in
        if status not in CANCELLABLE_STATUSES:
            return f"Cancellation not available: reservation is {status.value}"
        if decision.tier == RefundTier.FULL:
            return (
                f"Full refund (100%): Cancelling {days} days before check-in "
                f"(policy: 3+ days = full refund)"
            )
        if decision.tier == RefundTier.PARTIAL:
            return (
                f"Partial refund (50%): Cancelling {days} day(s) before check-in "
                f"(policy: 1-2 days = 50% refund)"
            )
        if days < 0:
            return "Cancellation not available: check-in date has passed"
        return "Cancellation not available on the day of check-in"

    def preview(self, reservation: Reservation, now: dt.datetime) -> CancellationPreview:
        """Decision plus refund amount for a stored reservation."""
        decision = self.evaluate_cancellation(reservation.check_in, now, reservation.status)
        return CancellationPreview(
            reservation_id=reservation.reservation_id,
            eligible=decision.eligible,
            refund_rate=decision.refund_rate,
            refund_amount=self.calculate_refund_amount(
                reservation.total_price, decision.refund_rate
            ),
            days_until_check_in=decision.days_until_check_in,
            tier=decision.tier,
            description=self.describe(decision, reservation.status),
        )

    def get_policy_description(self) -> str:
        """Get human-readable description of the cancellation policy.

        Returns:
            Policy description text
        """
        return (
            "Cancellation Policy:\n"
            f"• {self.FULL_REFUND_DAYS}+ days before check-in: Full refund (100%)\n"
            f"• {self.PARTIAL_REFUND_DAYS}-{self.FULL_REFUND_DAYS - 1} days before check-in: "
            "Partial refund (50%)\n"
            "• On the day of check-in or later: Cancellation not available"
        )
