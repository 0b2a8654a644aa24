"""iCalendar (RFC 5545) export of events."""

import logging
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional

from icalendar import vDatetime

from everything_calendar.config.constants import (
    ICS_VERSION,
    ICS_CALSCALE,
    ICS_METHOD,
    ICS_MIME_TYPE,
    ICS_MAX_LINE_OCTETS,
    MAX_FILENAME_LENGTH,
    FALLBACK_FILENAME,
    BULK_FILENAME_PREFIX,
    ICS_FILE_EXTENSION,
)
from everything_calendar.config.settings import EXPORT_CONFIG, ExportConfig
from everything_calendar.core.clock import SYSTEM_CLOCK, Clock
from everything_calendar.core.event_model import Event, EventPriority
from everything_calendar.core.recurrence import RecurrenceFrequency, RecurrenceRule
from everything_calendar.core.timezone_utils import to_floating_local, to_utc

logger = logging.getLogger(__name__)

CRLF = "\r\n"

# RFC 5545: 1 = highest, 9 = lowest
PRIORITY_TO_ICS = {
    EventPriority.URGENT: 1,
    EventPriority.HIGH: 3,
    EventPriority.MEDIUM: 5,
    EventPriority.LOW: 9,
}

FREQUENCY_TO_ICS = {
    RecurrenceFrequency.DAILY: "DAILY",
    RecurrenceFrequency.WEEKLY: "WEEKLY",
    RecurrenceFrequency.MONTHLY: "MONTHLY",
    RecurrenceFrequency.YEARLY: "YEARLY",
}

_WHITESPACE_RUN = re.compile(r"\s+")
_NON_WORD = re.compile(r"[^\w\s]", re.ASCII)
_WHITESPACE_CHAR = re.compile(r"\s")


@dataclass
class ICSExport:
    """Export output ready for a share/save collaborator."""
    content: str
    filename: str
    mime_type: str = ICS_MIME_TYPE

    def to_bytes(self) -> bytes:
        return self.content.encode("utf-8")


def escape_text(text: str) -> str:
    """Escape a TEXT value per RFC 5545 section 3.3.11.

    Backslashes are escaped first so later escapes are not doubled.
    Carriage returns are dropped.
    """
    return (
        text.replace("\\", "\\\\")
        .replace(";", "\\;")
        .replace(",", "\\,")
        .replace("\r", "")
        .replace("\n", "\\n")
    )


def fold_line(line: str, limit: int = ICS_MAX_LINE_OCTETS) -> str:
    """Fold a content line per RFC 5545 section 3.1.

    The first physical line holds up to ``limit`` octets, continuation lines
    a leading space plus up to ``limit - 1`` octets. Budgets are UTF-8
    octets and a multi-byte character is never split.

    Args:
        line: One fully escaped logical line, without line ending.
        limit: Maximum octets per physical line.

    Returns:
        The folded line, segments joined by CRLF + space.
    """
    if len(line.encode("utf-8")) <= limit:
        return line

    segments = []
    current: List[str] = []
    size = 0
    budget = limit
    for char in line:
        char_size = len(char.encode("utf-8"))
        if current and size + char_size > budget:
            segments.append("".join(current))
            current = []
            size = 0
            budget = limit - 1
        current.append(char)
        size += char_size
    segments.append("".join(current))
    return (CRLF + " ").join(segments)


def format_datetime(dt: datetime) -> str:
    """Format as a floating local DATE-TIME (YYYYMMDDTHHMMSS)."""
    return vDatetime(to_floating_local(dt)).to_ical().decode("ascii")


def format_datetime_utc(dt: datetime) -> str:
    """Format as a UTC DATE-TIME with trailing Z."""
    return vDatetime(to_utc(dt)).to_ical().decode("ascii")


def map_priority(priority: EventPriority) -> int:
    return PRIORITY_TO_ICS[priority]


def map_frequency(frequency: RecurrenceFrequency) -> str:
    return FREQUENCY_TO_ICS[frequency]


def build_rrule(rule: RecurrenceRule) -> str:
    """Build the RRULE property line (FREQ, INTERVAL, UNTIL in that order)."""
    parts = [f"FREQ={map_frequency(rule.frequency)}"]
    if rule.interval > 1:
        parts.append(f"INTERVAL={rule.interval}")
    if rule.end_date is not None:
        parts.append(f"UNTIL={format_datetime(rule.end_date)}")
    return "RRULE:" + ";".join(parts)


def filename_for_title(title: str) -> str:
    """Build a safe .ics filename from an event title.

    "Meeting @ 3pm! (Room #5)" -> "meeting__3pm_room_5.ics"

    Whitespace runs are collapsed before symbols are stripped, so a removed
    symbol between two spaces leaves a double underscore ("a @ b" -> "a__b")
    while plain runs of spaces give one ("a   b" -> "a_b").
    """
    collapsed = _WHITESPACE_RUN.sub(" ", title).lower()
    stripped = _NON_WORD.sub("", collapsed)
    slug = _WHITESPACE_CHAR.sub("_", stripped)[:MAX_FILENAME_LENGTH]
    return f"{slug or FALLBACK_FILENAME}{ICS_FILE_EXTENSION}"


class CalendarExporter:
    """Turns events into RFC 5545 documents.

    Performs no I/O. The clock is only read for DTSTAMP and the bulk
    export filename.
    """

    MIME_TYPE = ICS_MIME_TYPE

    def __init__(self, config: Optional[ExportConfig] = None, clock: Optional[Clock] = None):
        self.config = config or EXPORT_CONFIG
        self.clock = clock or SYSTEM_CLOCK

    def export_event(self, event: Event) -> str:
        """Export a single event as an ICS string."""
        return self.export_events([event])

    def export_events(self, events: Iterable[Event]) -> str:
        """Export any number of events in one VCALENDAR."""
        dtstamp = format_datetime_utc(self.clock.utcnow())
        lines = self._calendar_header()
        count = 0
        for event in events:
            lines.extend(self._build_vevent(event, dtstamp))
            count += 1
        lines.append("END:VCALENDAR")

        content = CRLF.join(fold_line(line) for line in lines) + CRLF
        logger.debug("Exported %d event(s), %d characters", count, len(content))
        return content

    def export_event_bytes(self, event: Event) -> bytes:
        return self.export_event(event).encode("utf-8")

    def export_events_bytes(self, events: Iterable[Event]) -> bytes:
        return self.export_events(events).encode("utf-8")

    def generate_filename(self, event: Event) -> str:
        return filename_for_title(event.title)

    def generate_bulk_filename(self) -> str:
        return f"{BULK_FILENAME_PREFIX}{self.clock.now():%Y%m%d}{ICS_FILE_EXTENSION}"

    def build_event_export(self, event: Event) -> ICSExport:
        return ICSExport(
            content=self.export_event(event),
            filename=self.generate_filename(event),
        )

    def build_events_export(self, events: Iterable[Event]) -> ICSExport:
        return ICSExport(
            content=self.export_events(events),
            filename=self.generate_bulk_filename(),
        )

    def _calendar_header(self) -> List[str]:
        return [
            "BEGIN:VCALENDAR",
            f"VERSION:{ICS_VERSION}",
            f"PRODID:{self.config.prodid}",
            f"CALSCALE:{ICS_CALSCALE}",
            f"METHOD:{ICS_METHOD}",
        ]

    def _build_vevent(self, event: Event, dtstamp: str) -> List[str]:
        """Logical (unfolded) lines of one VEVENT, in fixed field order."""
        start = to_floating_local(event.date)
        end = start + self.config.event_duration

        lines = [
            "BEGIN:VEVENT",
            f"UID:{escape_text(event.id)}@{self.config.uid_domain}",
            f"DTSTAMP:{dtstamp}",
            f"DTSTART:{format_datetime(start)}",
            f"DTEND:{format_datetime(end)}",
            f"SUMMARY:{escape_text(event.title)}",
        ]

        if event.description or event.tags:
            parts = []
            if event.description:
                parts.append(event.description)
            if event.tags:
                parts.append("Tags: " + ", ".join(tag.name for tag in event.tags))
            parts.append(f"Priority: {event.priority.label}")
            lines.append("DESCRIPTION:" + "\\n".join(escape_text(p) for p in parts))

        lines.append(f"PRIORITY:{map_priority(event.priority)}")

        if event.tags:
            lines.append("CATEGORIES:" + ",".join(escape_text(tag.name) for tag in event.tags))

        if event.recurrence is not None:
            lines.append(build_rrule(event.recurrence))

        lines.append("END:VEVENT")
        return lines
