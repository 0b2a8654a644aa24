"""Utility functions for the Everything calendar core."""

from everything_calendar.utils.date_parsing import (
    format_short_date,
    parse_iso_datetime,
)

__all__ = [
    "format_short_date",
    "parse_iso_datetime",
]
