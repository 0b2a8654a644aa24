"""Core business logic: recurrence, reminders, events and ICS export."""

from everything_calendar.core.calendar_math import add_months, add_years
from everything_calendar.core.clock import Clock, FixedClock, SystemClock
from everything_calendar.core.event_model import Event, EventPriority, EventTag
from everything_calendar.core.ics_builder import CalendarExporter, ICSExport, escape_text, fold_line
from everything_calendar.core.recurrence import RecurrenceFrequency, RecurrenceRule
from everything_calendar.core.reminders import ReminderOffset, ReminderSettings

__all__ = [
    "add_months",
    "add_years",
    "Clock",
    "FixedClock",
    "SystemClock",
    "Event",
    "EventPriority",
    "EventTag",
    "CalendarExporter",
    "ICSExport",
    "escape_text",
    "fold_line",
    "RecurrenceFrequency",
    "RecurrenceRule",
    "ReminderOffset",
    "ReminderSettings",
]
