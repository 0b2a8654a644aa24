"""Injectable wall-clock access.

Recurrence expansion is pure; only DTSTAMP generation, the bulk export
filename and reminder "still upcoming" checks need the current time. They
read it through a Clock so tests can pin it.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from everything_calendar.core.timezone_utils import to_floating_local, to_utc, utc_now


class Clock(ABC):
    """Source of the current time."""

    @abstractmethod
    def now(self) -> datetime:
        """Current local wall-clock time (naive)."""

    @abstractmethod
    def utcnow(self) -> datetime:
        """Current time as an aware UTC datetime."""

    def now_like(self, reference: datetime) -> datetime:
        """Current time comparable with ``reference``.

        Naive references get local wall-clock time; aware references get the
        current instant in their own zone.
        """
        if reference.tzinfo is None:
            return self.now()
        return self.utcnow().astimezone(reference.tzinfo)


class SystemClock(Clock):
    """Reads the real system clock."""

    def now(self) -> datetime:
        return datetime.now()

    def utcnow(self) -> datetime:
        return utc_now()


class FixedClock(Clock):
    """Always reports the same instant.

    A naive ``instant`` is used as-is for local time and is also read as
    UTC, so tests behave the same on every machine. An aware ``instant`` is
    converted to local wall-clock time for ``now()``.
    """

    def __init__(self, instant: datetime, utc_instant: Optional[datetime] = None):
        self.instant = instant
        self.utc_instant = to_utc(utc_instant if utc_instant is not None else instant)

    def now(self) -> datetime:
        return to_floating_local(self.instant)

    def utcnow(self) -> datetime:
        return self.utc_instant


SYSTEM_CLOCK = SystemClock()
