"""Centralized constants for the Everything calendar core.

Fixed literals used by the recurrence engine and the iCalendar exporter.
Values that deployments may want to override live in settings.py.
"""

# ICS calendar constants
ICS_PRODID = "-//Everything App//Event Export//EN"
ICS_VERSION = "2.0"
ICS_CALSCALE = "GREGORIAN"
ICS_METHOD = "PUBLISH"
ICS_UID_DOMAIN = "everything.app"
ICS_MIME_TYPE = "text/calendar"

# RFC 5545 section 3.1: content lines are folded at 75 octets
ICS_MAX_LINE_OCTETS = 75

# The event model has no end time, so exports use a fixed duration
DEFAULT_EVENT_DURATION_MINUTES = 60

# Export filenames
MAX_FILENAME_LENGTH = 50
FALLBACK_FILENAME = "event"
BULK_FILENAME_PREFIX = "everything_events_"
ICS_FILE_EXTENSION = ".ics"

# Occurrence caps used by callers (detail view vs. compact preview)
DEFAULT_MAX_OCCURRENCES = 52
PREVIEW_MAX_OCCURRENCES = 4

# Display month table for recurrence summaries ("until Mar 15, 2026")
MONTH_ABBREVIATIONS = [
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
]

# Tag palette, indexed by EventTag.color_index
TAG_PALETTE_NAMES = [
    "Blue", "Green", "Orange", "Purple",
    "Pink", "Cyan", "Brown", "Grey",
]

# Environment variable names for settings overrides
ENV_ICS_PRODID = "EVERYTHING_ICS_PRODID"
ENV_ICS_UID_DOMAIN = "EVERYTHING_ICS_UID_DOMAIN"
ENV_EVENT_DURATION_MINUTES = "EVERYTHING_EVENT_DURATION_MINUTES"
ENV_MAX_OCCURRENCES = "EVERYTHING_MAX_OCCURRENCES"
