"""Event data model and occurrence expansion."""

import json
import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, ClassVar, Dict, FrozenSet, List, Optional, Tuple

from everything_calendar.config.constants import TAG_PALETTE_NAMES
from everything_calendar.config.settings import RECURRENCE_CONFIG, RecurrenceConfig
from everything_calendar.core.recurrence import RecurrenceRule
from everything_calendar.core.reminders import NO_REMINDERS, ReminderSettings
from everything_calendar.exceptions.errors import EventValidationError
from everything_calendar.utils.date_parsing import format_iso_datetime, parse_iso_datetime

logger = logging.getLogger(__name__)


class EventPriority(Enum):
    """Priority levels for events. Values are the stored names."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @classmethod
    def from_string(cls, value: Optional[str]) -> "EventPriority":
        """Convert a stored name back to a priority (MEDIUM if unknown)."""
        for priority in cls:
            if priority.value == value:
                return priority
        return cls.MEDIUM


@dataclass(frozen=True, eq=False)
class EventTag:
    """A named tag with a palette color; equal by case-insensitive name."""

    name: str
    color_index: int = 0

    @property
    def palette_name(self) -> str:
        index = min(max(self.color_index, 0), len(TAG_PALETTE_NAMES) - 1)
        return TAG_PALETTE_NAMES[index]

    def __eq__(self, other):
        if not isinstance(other, EventTag):
            return NotImplemented
        return self.name.lower() == other.name.lower()

    def __hash__(self):
        return hash(self.name.lower())

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EventTag":
        name = data["name"]
        if not isinstance(name, str):
            raise TypeError("tag name must be a string")
        color_index = data.get("colorIndex")
        if isinstance(color_index, bool) or not isinstance(color_index, int):
            color_index = 0
        return cls(name=name, color_index=color_index)

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "colorIndex": self.color_index}


PRESET_TAGS = tuple(
    EventTag(name, index)
    for index, name in enumerate(
        ["Work", "Personal", "Meeting", "Birthday", "Health", "Travel", "Finance", "Social"]
    )
)


def _parse_tags(raw: Any, event_title: str) -> Tuple[EventTag, ...]:
    """Tags arrive as a list or a JSON string; malformed data means no tags."""
    if raw is None or raw == "":
        return ()
    try:
        decoded = json.loads(raw) if isinstance(raw, str) else raw
        if not isinstance(decoded, list):
            raise TypeError("tags must be a list")
        return tuple(EventTag.from_dict(item) for item in decoded)
    except (ValueError, TypeError, KeyError, AttributeError, RecursionError) as e:
        logger.warning("Ignoring malformed tags on '%s': %s", event_title, e)
        return ()


def _parse_recurrence(raw: Any, event_title: str) -> Optional[RecurrenceRule]:
    """Recurrence arrives as a map or a JSON string; malformed data means none."""
    if raw is None or raw == "":
        return None
    if isinstance(raw, str):
        return RecurrenceRule.from_json_string(raw)
    try:
        return RecurrenceRule.from_json(raw)
    except (ValueError, TypeError, KeyError, OverflowError) as e:
        logger.warning("Ignoring malformed recurrence on '%s': %s", event_title, e)
        return None


def _parse_reminders(raw: Any) -> ReminderSettings:
    if raw is None or raw == "":
        return NO_REMINDERS
    if isinstance(raw, str):
        return ReminderSettings.from_json_string(raw)
    return ReminderSettings.from_json(raw)


@dataclass(frozen=True)
class Event:
    """Type-safe representation of a stored event.

    ``date`` is the anchor (first) occurrence. Events are never mutated;
    copies come from ``copy_with``.
    """

    id: str
    title: str
    date: datetime
    description: str = ""
    priority: EventPriority = EventPriority.MEDIUM
    tags: Tuple[EventTag, ...] = ()
    recurrence: Optional[RecurrenceRule] = None
    reminders: ReminderSettings = field(default_factory=ReminderSettings)

    # Required fields for validation
    REQUIRED_FIELDS: ClassVar[FrozenSet[str]] = frozenset({"id", "title", "date"})

    def __post_init__(self):
        object.__setattr__(self, "tags", tuple(self.tags))

    @property
    def is_recurring(self) -> bool:
        return self.recurrence is not None

    def generate_occurrences(
        self,
        max_occurrences: Optional[int] = None,
        config: Optional[RecurrenceConfig] = None,
    ) -> List["Event"]:
        """Generate future occurrences as new, unpersisted events.

        The anchor itself is skipped. The n-th following occurrence gets the
        id ``"<id>_<n>"`` (1-based) and its own date; every other field is
        copied unchanged.

        Args:
            max_occurrences: Cap passed to the recurrence rule, anchor included.
                Defaults to ``config.max_occurrences``.
            config: Occurrence caps from load_settings (RECURRENCE_CONFIG if
                omitted).

        Returns:
            List of derived events, empty when the event does not repeat.
        """
        if self.recurrence is None:
            return []
        if max_occurrences is None:
            max_occurrences = (config or RECURRENCE_CONFIG).max_occurrences
        dates = self.recurrence.generate_occurrences(self.date, max_occurrences)
        return [
            self.copy_with(id=f"{self.id}_{index}", date=occurrence)
            for index, occurrence in enumerate(dates[1:], start=1)
        ]

    def preview_occurrences(self, config: Optional[RecurrenceConfig] = None) -> List["Event"]:
        """Short list of upcoming occurrences for compact displays."""
        return self.generate_occurrences((config or RECURRENCE_CONFIG).preview_occurrences)

    def copy_with(self, clear_recurrence: bool = False, **changes: Any) -> "Event":
        """Return a copy with ``changes`` applied."""
        if clear_recurrence:
            changes["recurrence"] = None
        return replace(self, **changes)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Event":
        """Create an Event from a persisted record, validating required fields.

        Tags, recurrence and reminders are fail-soft: malformed values are
        logged and dropped rather than failing the whole event.

        Args:
            data: Record with id, title, date and optional fields.

        Returns:
            A validated Event instance.

        Raises:
            EventValidationError: If required fields are missing or invalid.
        """
        title = data.get("title")
        display_title = title if isinstance(title, str) else "Unknown"
        missing = {key for key in cls.REQUIRED_FIELDS if data.get(key) is None}
        if missing:
            raise EventValidationError(missing_fields=missing, event_title=display_title)

        if not isinstance(data["id"], str) or not isinstance(title, str):
            raise EventValidationError(event_title=display_title, reason="id and title must be strings")
        try:
            date = parse_iso_datetime(data["date"])
        except (ValueError, TypeError, OverflowError) as e:
            raise EventValidationError(event_title=title, reason=f"bad date: {e}") from e

        description = data.get("description")
        return cls(
            id=data["id"],
            title=title,
            date=date,
            description=description if isinstance(description, str) else "",
            priority=EventPriority.from_string(data.get("priority")),
            tags=_parse_tags(data.get("tags"), title),
            recurrence=_parse_recurrence(data.get("recurrence"), title),
            reminders=_parse_reminders(data.get("reminders")),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the persisted record shape."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "date": format_iso_datetime(self.date),
            "priority": self.priority.value,
            "tags": json.dumps([tag.to_dict() for tag in self.tags]),
            "recurrence": self.recurrence.to_json_string() if self.recurrence else None,
            "reminders": self.reminders.to_json_string() if self.reminders.has_reminders else None,
        }
