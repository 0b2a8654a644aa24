"""Custom exception classes for the Everything calendar core."""

from typing import Iterable, Optional


class EverythingCalendarError(Exception):
    """Base class for errors raised by the calendar core."""


class RecurrenceValidationError(EverythingCalendarError, ValueError):
    """Raised when a recurrence rule is built with an invalid interval."""

    def __init__(self, interval: object):
        self.interval = interval
        super().__init__(
            f"Recurrence interval must be an integer >= 1, got {interval!r}"
        )


class EventValidationError(EverythingCalendarError):
    """Raised when an event record is missing required fields or holds bad data."""

    def __init__(
        self,
        missing_fields: Optional[Iterable[str]] = None,
        event_title: str = "Unknown",
        reason: Optional[str] = None,
    ):
        self.missing_fields = set(missing_fields or ())
        self.event_title = event_title
        self.reason = reason

        if self.missing_fields:
            fields = ", ".join(sorted(self.missing_fields))
            message = f"Event '{event_title}' is missing required fields: {fields}"
        else:
            message = f"Event '{event_title}' is invalid"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
