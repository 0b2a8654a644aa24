"""Calendar arithmetic with end-of-month clamping."""

import calendar
from datetime import datetime

from dateutil.relativedelta import relativedelta


def is_leap_year(year: int) -> bool:
    """Return True for Gregorian leap years."""
    return calendar.isleap(year)


def days_in_month(year: int, month: int) -> int:
    """Return the number of days in ``month`` of ``year``."""
    return calendar.monthrange(year, month)[1]


def add_months(date: datetime, months: int) -> datetime:
    """Add calendar months to a date, clamping to the last valid day.

    Year overflow is carried for any multiple of twelve, and negative values
    step backwards. The time of day and tzinfo are kept.

    Examples:
        Jan 31 2026 + 1 month -> Feb 28 2026
        Jan 31 2028 + 1 month -> Feb 29 2028

    Args:
        date: The date to shift.
        months: Number of months to add.

    Returns:
        The shifted datetime.
    """
    # relativedelta clamps the day-of-month to the target month's length
    return date + relativedelta(months=months)


def add_years(date: datetime, years: int) -> datetime:
    """Add calendar years to a date (Feb 29 clamps to Feb 28)."""
    return add_months(date, 12 * years)
