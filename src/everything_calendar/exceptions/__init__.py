"""Custom exceptions for the Everything calendar core."""

from everything_calendar.exceptions.errors import (
    EverythingCalendarError,
    RecurrenceValidationError,
    EventValidationError,
)

__all__ = [
    "EverythingCalendarError",
    "RecurrenceValidationError",
    "EventValidationError",
]
