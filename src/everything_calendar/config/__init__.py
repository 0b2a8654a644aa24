"""Configuration module for the Everything calendar core."""

from everything_calendar.config.settings import (
    EXPORT_CONFIG,
    RECURRENCE_CONFIG,
    ExportConfig,
    RecurrenceConfig,
    load_settings,
)
from everything_calendar.config.constants import (
    ICS_PRODID,
    ICS_UID_DOMAIN,
    ICS_MIME_TYPE,
    DEFAULT_MAX_OCCURRENCES,
    PREVIEW_MAX_OCCURRENCES,
)

__all__ = [
    "EXPORT_CONFIG",
    "RECURRENCE_CONFIG",
    "ExportConfig",
    "RecurrenceConfig",
    "load_settings",
    "ICS_PRODID",
    "ICS_UID_DOMAIN",
    "ICS_MIME_TYPE",
    "DEFAULT_MAX_OCCURRENCES",
    "PREVIEW_MAX_OCCURRENCES",
]
