"""Runtime settings for the exporter and recurrence previews."""

import logging
import os
from dataclasses import dataclass, replace
from datetime import timedelta
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

from dotenv import dotenv_values

from everything_calendar.config.constants import (
    ICS_PRODID,
    ICS_UID_DOMAIN,
    DEFAULT_EVENT_DURATION_MINUTES,
    DEFAULT_MAX_OCCURRENCES,
    PREVIEW_MAX_OCCURRENCES,
    ENV_ICS_PRODID,
    ENV_ICS_UID_DOMAIN,
    ENV_EVENT_DURATION_MINUTES,
    ENV_MAX_OCCURRENCES,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExportConfig:
    """Settings consumed by CalendarExporter."""
    prodid: str = ICS_PRODID
    uid_domain: str = ICS_UID_DOMAIN
    event_duration_minutes: int = DEFAULT_EVENT_DURATION_MINUTES

    @property
    def event_duration(self) -> timedelta:
        return timedelta(minutes=self.event_duration_minutes)


@dataclass(frozen=True)
class RecurrenceConfig:
    """Occurrence caps handed to RecurrenceRule.generate_occurrences."""
    max_occurrences: int = DEFAULT_MAX_OCCURRENCES
    preview_occurrences: int = PREVIEW_MAX_OCCURRENCES


EXPORT_CONFIG = ExportConfig()
RECURRENCE_CONFIG = RecurrenceConfig()


def _read_overrides(env_file: Optional[Union[str, Path]]) -> Dict[str, str]:
    """Merge .env values with the process environment (environment wins)."""
    values: Dict[str, str] = {}
    if env_file is not None and Path(env_file).exists():
        # Parse without mutating os.environ
        for key, value in dotenv_values(env_file).items():
            if value is not None:
                values[key] = value
    for key in (ENV_ICS_PRODID, ENV_ICS_UID_DOMAIN,
                ENV_EVENT_DURATION_MINUTES, ENV_MAX_OCCURRENCES):
        if key in os.environ:
            values[key] = os.environ[key]
    return values


def _positive_int(values: Dict[str, str], key: str) -> Optional[int]:
    raw = values.get(key)
    if raw is None:
        return None
    try:
        number = int(str(raw).strip())
    except ValueError:
        logger.warning("Ignoring %s=%r: not an integer", key, raw)
        return None
    if number < 1:
        logger.warning("Ignoring %s=%r: must be >= 1", key, raw)
        return None
    return number


def load_settings(
    env_file: Optional[Union[str, Path]] = None,
) -> Tuple[ExportConfig, RecurrenceConfig]:
    """Build settings from defaults, an optional .env file and the environment.

    Args:
        env_file: Optional path to a .env file with overrides.

    Returns:
        Tuple of (ExportConfig, RecurrenceConfig).
    """
    values = _read_overrides(env_file)

    export_config = EXPORT_CONFIG
    prodid = (values.get(ENV_ICS_PRODID) or "").strip()
    if prodid:
        export_config = replace(export_config, prodid=prodid)
    uid_domain = (values.get(ENV_ICS_UID_DOMAIN) or "").strip()
    if uid_domain:
        export_config = replace(export_config, uid_domain=uid_domain)
    duration = _positive_int(values, ENV_EVENT_DURATION_MINUTES)
    if duration is not None:
        export_config = replace(export_config, event_duration_minutes=duration)

    recurrence_config = RECURRENCE_CONFIG
    max_occurrences = _positive_int(values, ENV_MAX_OCCURRENCES)
    if max_occurrences is not None:
        recurrence_config = replace(recurrence_config, max_occurrences=max_occurrences)

    return export_config, recurrence_config
