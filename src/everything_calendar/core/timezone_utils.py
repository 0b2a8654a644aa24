"""Timezone helpers for floating local times and UTC stamps."""

import logging
from datetime import datetime

import pytz
import tzlocal

logger = logging.getLogger(__name__)


def get_local_timezone():
    """Return the user's system zone (DST aware).

    Returns:
        A tzinfo for the local zone, or UTC if it cannot be determined.
    """
    try:
        return tzlocal.get_localzone()
    except Exception as e:
        logger.warning("Couldn't resolve local timezone, using UTC: %s", e)
        return pytz.utc


def to_floating_local(dt: datetime) -> datetime:
    """Return a naive wall-clock datetime in the local zone.

    Exports write DTSTART/DTEND/UNTIL as floating local times, so aware
    datetimes are converted to the system zone and stripped of tzinfo.
    Naive datetimes are already local and pass through unchanged.

    Args:
        dt: A naive or timezone-aware datetime.

    Returns:
        A naive datetime.
    """
    if dt.tzinfo is None or dt.tzinfo.utcoffset(dt) is None:
        return dt
    return dt.astimezone(get_local_timezone()).replace(tzinfo=None)


def to_utc(dt: datetime) -> datetime:
    """Return an aware UTC datetime.

    Naive values are taken to be UTC already, which is how Clock.utcnow
    implementations hand them over.

    Args:
        dt: A naive or timezone-aware datetime.

    Returns:
        A datetime carrying pytz.utc.
    """
    if dt.tzinfo is None:
        return pytz.utc.localize(dt)
    return dt.astimezone(pytz.utc)


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(pytz.utc)
