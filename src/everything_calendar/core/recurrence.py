"""Recurrence rules and occurrence generation."""

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Dict, List, Optional

from everything_calendar.config.constants import DEFAULT_MAX_OCCURRENCES
from everything_calendar.core.calendar_math import add_months
from everything_calendar.core.timezone_utils import to_floating_local
from everything_calendar.exceptions.errors import RecurrenceValidationError
from everything_calendar.utils.date_parsing import (
    format_iso_datetime,
    format_short_date,
    parse_optional_iso_datetime,
)

logger = logging.getLogger(__name__)


class RecurrenceFrequency(Enum):
    """How often an event repeats. Values are the stored names."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @property
    def unit(self) -> str:
        return _UNITS[self]

    def description_with_interval(self, interval: int) -> str:
        """Short description such as "Every week" or "Every 2 weeks"."""
        if interval == 1:
            return f"Every {self.unit}"
        return f"Every {interval} {self.unit}s"

    @classmethod
    def from_string(cls, value: str) -> "RecurrenceFrequency":
        """Convert a stored name back to a frequency (WEEKLY if unknown)."""
        for frequency in cls:
            if frequency.value == value:
                return frequency
        return cls.WEEKLY


_UNITS = {
    RecurrenceFrequency.DAILY: "day",
    RecurrenceFrequency.WEEKLY: "week",
    RecurrenceFrequency.MONTHLY: "month",
    RecurrenceFrequency.YEARLY: "year",
}


def _is_after(candidate: datetime, bound: datetime) -> bool:
    # Mixed naive/aware values are compared as local wall-clock times
    if (candidate.tzinfo is None) != (bound.tzinfo is None):
        return to_floating_local(candidate) > to_floating_local(bound)
    return candidate > bound


@dataclass(frozen=True)
class RecurrenceRule:
    """A repeat pattern: every ``interval`` units of ``frequency``.

    ``end_date`` is an inclusive upper bound. Without it the event repeats
    indefinitely and callers cap generation with ``max_occurrences``.
    Equality is structural over all three fields.
    """

    frequency: RecurrenceFrequency
    interval: int = 1
    end_date: Optional[datetime] = None

    def __post_init__(self):
        if not isinstance(self.frequency, RecurrenceFrequency):
            object.__setattr__(self, "frequency", RecurrenceFrequency(self.frequency))
        # bool is an int subclass; True must not pass as interval 1
        if (
            isinstance(self.interval, bool)
            or not isinstance(self.interval, int)
            or self.interval < 1
        ):
            raise RecurrenceValidationError(self.interval)

    @property
    def summary(self) -> str:
        """Human-readable summary, e.g. "Every 2 weeks until Mar 15, 2026"."""
        description = self.frequency.description_with_interval(self.interval)
        if self.end_date is not None:
            return f"{description} until {format_short_date(self.end_date)}"
        return description

    def next_occurrence(self, current: datetime) -> datetime:
        """Compute the occurrence that follows ``current``."""
        if self.frequency is RecurrenceFrequency.DAILY:
            return current + timedelta(days=self.interval)
        if self.frequency is RecurrenceFrequency.WEEKLY:
            return current + timedelta(days=7 * self.interval)
        if self.frequency is RecurrenceFrequency.MONTHLY:
            return add_months(current, self.interval)
        return add_months(current, 12 * self.interval)

    def generate_occurrences(
        self,
        start_date: datetime,
        max_occurrences: int = DEFAULT_MAX_OCCURRENCES,
    ) -> List[datetime]:
        """Generate occurrence dates starting from ``start_date``.

        The start date is always the first element. Each following date is
        stepped from the previous one, so a day-of-month clamped once (Jan 31
        -> Feb 28) stays clamped (Mar 28). Generation stops before the first
        date strictly after ``end_date``, or once ``max_occurrences`` dates
        exist.

        Args:
            start_date: The anchor occurrence.
            max_occurrences: Upper bound on the number of dates returned.

        Returns:
            Strictly increasing list of datetimes.
        """
        if max_occurrences < 1:
            return []

        occurrences = [start_date]
        current = start_date
        while len(occurrences) < max_occurrences:
            try:
                current = self.next_occurrence(current)
            except (OverflowError, ValueError):
                logger.debug("Stopping recurrence at %s: date out of range", current)
                break
            if self.end_date is not None and _is_after(current, self.end_date):
                break
            occurrences.append(current)
        return occurrences

    def to_json(self) -> Dict[str, Any]:
        """Serialize to a JSON-compatible map."""
        data: Dict[str, Any] = {
            "frequency": self.frequency.value,
            "interval": self.interval,
        }
        if self.end_date is not None:
            data["endDate"] = format_iso_datetime(self.end_date)
        return data

    def to_json_string(self) -> str:
        """Serialize to a JSON string for database storage."""
        return json.dumps(self.to_json())

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "RecurrenceRule":
        """Create a rule from a JSON map.

        Raises:
            TypeError: If the payload or its fields have the wrong shape.
            KeyError: If ``frequency`` is missing.
            ValueError: If the interval or end date is invalid.
        """
        if not isinstance(data, dict):
            raise TypeError(f"Expected a JSON object, got {type(data).__name__}")
        frequency = data["frequency"]
        if not isinstance(frequency, str):
            raise TypeError("frequency must be a string")
        interval = data.get("interval")
        return cls(
            frequency=RecurrenceFrequency.from_string(frequency),
            interval=1 if interval is None else interval,
            end_date=parse_optional_iso_datetime(data.get("endDate")),
        )

    @classmethod
    def from_json_string(cls, value: Optional[str]) -> Optional["RecurrenceRule"]:
        """Deserialize from database storage.

        Never raises: empty or malformed payloads yield None so one corrupted
        record cannot break calendar rendering.
        """
        if not value:
            return None
        try:
            return cls.from_json(json.loads(value))
        except (ValueError, TypeError, KeyError, OverflowError, RecursionError) as e:
            logger.warning("Ignoring malformed recurrence rule %r: %s", value, e)
            return None
