"""Reminder offsets and per-event reminder settings."""

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from everything_calendar.core.clock import SYSTEM_CLOCK, Clock

logger = logging.getLogger(__name__)


class ReminderOffset(Enum):
    """Predefined reminder times before an event.

    Members are declared in order of increasing duration; values are the
    names stored in event records.
    """

    AT_TIME = "atTime"
    FIVE_MINUTES = "fiveMinutes"
    FIFTEEN_MINUTES = "fifteenMinutes"
    THIRTY_MINUTES = "thirtyMinutes"
    ONE_HOUR = "oneHour"
    TWO_HOURS = "twoHours"
    ONE_DAY = "oneDay"
    TWO_DAYS = "twoDays"
    ONE_WEEK = "oneWeek"

    @property
    def duration(self) -> timedelta:
        return _OFFSET_DETAILS[self][0]

    @property
    def label(self) -> str:
        return _OFFSET_DETAILS[self][1]

    @property
    def short_label(self) -> str:
        return _OFFSET_DETAILS[self][2]

    def notification_time(self, event_date: datetime) -> datetime:
        """When to notify for an event at ``event_date``."""
        return event_date - self.duration

    def is_upcoming(self, event_date: datetime, clock: Optional[Clock] = None) -> bool:
        """Whether the notification time is still in the future."""
        clock = clock or SYSTEM_CLOCK
        notify_at = self.notification_time(event_date)
        return notify_at > clock.now_like(notify_at)

    def to_json_value(self) -> str:
        return self.value

    @classmethod
    def from_string(
        cls, value: str, default: Optional["ReminderOffset"] = None
    ) -> "ReminderOffset":
        """Parse a stored name, falling back to ``default`` (15 minutes)."""
        for offset in cls:
            if offset.value == value:
                return offset
        return default if default is not None else cls.FIFTEEN_MINUTES


_OFFSET_DETAILS = {
    ReminderOffset.AT_TIME: (timedelta(0), "At time of event", "At time"),
    ReminderOffset.FIVE_MINUTES: (timedelta(minutes=5), "5 minutes before", "5m"),
    ReminderOffset.FIFTEEN_MINUTES: (timedelta(minutes=15), "15 minutes before", "15m"),
    ReminderOffset.THIRTY_MINUTES: (timedelta(minutes=30), "30 minutes before", "30m"),
    ReminderOffset.ONE_HOUR: (timedelta(hours=1), "1 hour before", "1h"),
    ReminderOffset.TWO_HOURS: (timedelta(hours=2), "2 hours before", "2h"),
    ReminderOffset.ONE_DAY: (timedelta(days=1), "1 day before", "1d"),
    ReminderOffset.TWO_DAYS: (timedelta(days=2), "2 days before", "2d"),
    ReminderOffset.ONE_WEEK: (timedelta(days=7), "1 week before", "1w"),
}


def _normalize(offsets: Iterable[ReminderOffset]) -> Tuple[ReminderOffset, ...]:
    return tuple(sorted(set(offsets), key=lambda o: o.duration))


@dataclass(frozen=True)
class ReminderSettings:
    """The reminders attached to one event.

    ``offsets`` is always de-duplicated and sorted by increasing duration;
    every mutator returns a new settings value.
    """

    offsets: Tuple[ReminderOffset, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "offsets", _normalize(self.offsets))

    @property
    def has_reminders(self) -> bool:
        return bool(self.offsets)

    @property
    def count(self) -> int:
        return len(self.offsets)

    @property
    def summary(self) -> str:
        """Compact display, e.g. "15m, 1h, 1d"."""
        if not self.offsets:
            return "None"
        return ", ".join(o.short_label for o in self.offsets)

    def add_reminder(self, offset: ReminderOffset) -> "ReminderSettings":
        if offset in self.offsets:
            return self
        return ReminderSettings(self.offsets + (offset,))

    def remove_reminder(self, offset: ReminderOffset) -> "ReminderSettings":
        return ReminderSettings(tuple(o for o in self.offsets if o is not offset))

    def toggle_reminder(self, offset: ReminderOffset) -> "ReminderSettings":
        if offset in self.offsets:
            return self.remove_reminder(offset)
        return self.add_reminder(offset)

    def notification_times(
        self, event_date: datetime, clock: Optional[Clock] = None
    ) -> List[datetime]:
        """Notification times still in the future, earliest first."""
        clock = clock or SYSTEM_CLOCK
        now = clock.now_like(event_date)
        times = (o.notification_time(event_date) for o in self.offsets)
        return sorted(t for t in times if t > now)

    def next_notification_time(
        self, event_date: datetime, clock: Optional[Clock] = None
    ) -> Optional[datetime]:
        times = self.notification_times(event_date, clock)
        return times[0] if times else None

    def to_json(self) -> List[str]:
        return [o.to_json_value() for o in self.offsets]

    def to_json_string(self) -> str:
        return json.dumps(self.to_json())

    @classmethod
    def from_json(cls, values: object) -> "ReminderSettings":
        """Build settings from a list of stored names.

        Any malformed entry makes the whole payload fall back to no
        reminders.
        """
        if not isinstance(values, list):
            logger.warning("Ignoring malformed reminders %r: not a list", values)
            return NO_REMINDERS
        known = {o.value: o for o in ReminderOffset}
        offsets = []
        for value in values:
            if not isinstance(value, str) or value not in known:
                logger.warning("Ignoring reminders %r: unknown offset %r", values, value)
                return NO_REMINDERS
            offsets.append(known[value])
        return cls(tuple(offsets))

    @classmethod
    def from_json_string(cls, value: Optional[str]) -> "ReminderSettings":
        """Deserialize from storage; never raises."""
        if not value:
            return NO_REMINDERS
        try:
            decoded = json.loads(value)
        except (ValueError, TypeError, RecursionError) as e:
            logger.warning("Ignoring malformed reminders %r: %s", value, e)
            return NO_REMINDERS
        return cls.from_json(decoded)


NO_REMINDERS = ReminderSettings()
DEFAULT_REMINDERS = ReminderSettings((ReminderOffset.FIFTEEN_MINUTES,))
