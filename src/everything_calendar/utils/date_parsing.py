"""Date parsing and display formatting utilities."""

from datetime import datetime
from typing import Optional

from dateutil.parser import isoparse

from everything_calendar.config.constants import MONTH_ABBREVIATIONS


def parse_iso_datetime(value: str) -> datetime:
    """Parse an ISO-8601 timestamp as stored in event records.

    Date-only strings resolve to midnight; offsets and ``Z`` give aware
    datetimes.

    Args:
        value: ISO-8601 string (e.g., "2026-03-15T14:30:00").

    Returns:
        Parsed datetime.

    Raises:
        ValueError: If the string is not valid ISO-8601.
        TypeError: If ``value`` is not a string.
    """
    if not isinstance(value, str):
        raise TypeError(f"Expected an ISO-8601 string, got {type(value).__name__}")
    return isoparse(value.strip())


def parse_optional_iso_datetime(value: Optional[str]) -> Optional[datetime]:
    """Like parse_iso_datetime, but None and "" map to None."""
    if value is None or value == "":
        return None
    return parse_iso_datetime(value)


def format_iso_datetime(dt: datetime) -> str:
    """Format a datetime the way records store it."""
    return dt.isoformat()


def month_abbreviation(month: int) -> str:
    """Fixed 3-letter English month name, independent of locale."""
    return MONTH_ABBREVIATIONS[min(max(month, 1), 12) - 1]


def format_short_date(dt: datetime) -> str:
    """Format a date for display, e.g. "Mar 15, 2026"."""
    return f"{month_abbreviation(dt.month)} {dt.day}, {dt.year}"
