"""Stay calculator: nights between two calendar dates.

Pure functions. "Today" is always passed in by the caller.
"""

import datetime as dt

from booking_core.models import DateRange, InvalidDateRange


def compute_nights(check_in: dt.date, check_out: dt.date) -> int:
    """Whole nights between check-in and check-out.

    Args:
        check_in: Check-in date
        check_out: Check-out date

    Returns:
        Number of nights, always >= 1

    Raises:
        InvalidDateRange: If check_out is not after check_in
    """
    nights = (check_out - check_in).days
    if nights < 1:
        raise InvalidDateRange(
            details={
                "check_in": check_in.isoformat(),
                "check_out": check_out.isoformat(),
                "reason": "check_out must be after check_in",
            }
        )
    return nights


def validate_new_stay(check_in: dt.date, check_out: dt.date, today: dt.date) -> DateRange:
    """Validate dates for a new booking.

    New bookings may not start before today. Stored reservations are
    re-evaluated with DateRange directly and skip this rule.

    Raises:
        InvalidDateRange: If the range is inverted, empty or starts in the past
    """
    compute_nights(check_in, check_out)
    if check_in < today:
        raise InvalidDateRange(
            details={
                "check_in": check_in.isoformat(),
                "today": today.isoformat(),
                "reason": "check_in is in the past",
            }
        )
    return DateRange(check_in=check_in, check_out=check_out)


def adjust_check_out(check_in: dt.date, check_out: dt.date | None) -> dt.date:
    """Check-out to use after the guest changes check-in.

    Keeps check_out when it is still after check_in, otherwise moves it to
    the day after check_in.
    """
    if check_out is None or check_out <= check_in:
        return check_in + dt.timedelta(days=1)
    return check_out


def stay_dates(stay: DateRange) -> list[dt.date]:
    """Each night of the stay, check-out excluded."""
    return [stay.check_in + dt.timedelta(days=i) for i in range(stay.nights)]
