"""
everything-calendar - Recurrence engine and iCalendar exporter

The calendar core of the Everything personal event manager: expands
recurring events into concrete occurrences and exports events as
RFC 5545 .ics documents.
"""

__version__ = "1.0.0"

# Public API - import commonly used components
from everything_calendar.config.settings import EXPORT_CONFIG, RECURRENCE_CONFIG, load_settings
from everything_calendar.exceptions.errors import (
    EverythingCalendarError,
    EventValidationError,
    RecurrenceValidationError,
)
from everything_calendar.core.calendar_math import add_months
from everything_calendar.core.event_model import Event, EventPriority, EventTag
from everything_calendar.core.ics_builder import CalendarExporter, ICSExport
from everything_calendar.core.recurrence import RecurrenceFrequency, RecurrenceRule
from everything_calendar.core.reminders import ReminderOffset, ReminderSettings

__all__ = [
    # Version
    "__version__",
    # Config
    "EXPORT_CONFIG",
    "RECURRENCE_CONFIG",
    "load_settings",
    # Exceptions
    "EverythingCalendarError",
    "EventValidationError",
    "RecurrenceValidationError",
    # Core
    "add_months",
    "Event",
    "EventPriority",
    "EventTag",
    "CalendarExporter",
    "ICSExport",
    "RecurrenceFrequency",
    "RecurrenceRule",
    "ReminderOffset",
    "ReminderSettings",
]
