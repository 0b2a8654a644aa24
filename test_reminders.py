from datetime import datetime, timedelta

import pytest
import pytz

from everything_calendar.core.clock import Clock, FixedClock
from everything_calendar.core.reminders import (
    DEFAULT_REMINDERS,
    NO_REMINDERS,
    ReminderOffset,
    ReminderSettings,
)

EVENT_DATE = datetime(2026, 3, 15, 14, 30)
NOON = FixedClock(datetime(2026, 3, 15, 12, 0))


# --- ReminderOffset -----------------------------------------------------------

def test_all_offsets_have_labels() -> None:
    for offset in ReminderOffset:
        assert offset.label
        assert offset.short_label


def test_offset_durations() -> None:
    assert ReminderOffset.AT_TIME.duration == timedelta(0)
    assert ReminderOffset.FIVE_MINUTES.duration == timedelta(minutes=5)
    assert ReminderOffset.ONE_HOUR.duration == timedelta(minutes=60)
    assert ReminderOffset.ONE_DAY.duration == timedelta(hours=24)
    assert ReminderOffset.ONE_WEEK.duration == timedelta(days=7)


def test_offsets_are_declared_in_increasing_duration() -> None:
    durations = [offset.duration for offset in ReminderOffset]
    assert len(durations) == 9
    assert durations == sorted(durations)
    assert len(set(durations)) == 9


def test_notification_time_subtracts_duration() -> None:
    assert ReminderOffset.THIRTY_MINUTES.notification_time(EVENT_DATE) == datetime(2026, 3, 15, 14, 0)
    assert ReminderOffset.AT_TIME.notification_time(EVENT_DATE) == EVENT_DATE


def test_is_upcoming_uses_clock() -> None:
    assert ReminderOffset.FIFTEEN_MINUTES.is_upcoming(EVENT_DATE, NOON)
    assert not ReminderOffset.ONE_DAY.is_upcoming(EVENT_DATE, NOON)


def test_is_upcoming_with_system_clock_for_past_event() -> None:
    assert not ReminderOffset.AT_TIME.is_upcoming(datetime(2000, 1, 1))


def test_from_string() -> None:
    assert ReminderOffset.from_string("oneHour") is ReminderOffset.ONE_HOUR
    assert ReminderOffset.from_string("bogus") is ReminderOffset.FIFTEEN_MINUTES
    assert ReminderOffset.from_string("bogus", ReminderOffset.AT_TIME) is ReminderOffset.AT_TIME


def test_to_json_value_is_stored_name() -> None:
    assert ReminderOffset.TWO_DAYS.to_json_value() == "twoDays"


# --- ReminderSettings ---------------------------------------------------------

def test_empty_settings() -> None:
    settings = ReminderSettings()
    assert not settings.has_reminders
    assert settings.count == 0
    assert settings.summary == "None"
    assert settings == NO_REMINDERS


def test_default_reminder_is_fifteen_minutes() -> None:
    assert DEFAULT_REMINDERS.offsets == (ReminderOffset.FIFTEEN_MINUTES,)


def test_constructor_sorts_and_deduplicates() -> None:
    settings = ReminderSettings([ReminderOffset.ONE_WEEK, ReminderOffset.AT_TIME, ReminderOffset.ONE_WEEK])
    assert settings.offsets == (ReminderOffset.AT_TIME, ReminderOffset.ONE_WEEK)


def test_add_reminder_keeps_sorted_order() -> None:
    settings = NO_REMINDERS.add_reminder(ReminderOffset.ONE_DAY).add_reminder(ReminderOffset.FIVE_MINUTES)
    assert settings.offsets == (ReminderOffset.FIVE_MINUTES, ReminderOffset.ONE_DAY)


def test_add_reminder_prevents_duplicates() -> None:
    settings = DEFAULT_REMINDERS.add_reminder(ReminderOffset.FIFTEEN_MINUTES)
    assert settings.count == 1


def test_mutators_are_pure() -> None:
    original = ReminderSettings([ReminderOffset.ONE_HOUR])
    original.add_reminder(ReminderOffset.ONE_DAY)
    original.remove_reminder(ReminderOffset.ONE_HOUR)
    original.toggle_reminder(ReminderOffset.ONE_HOUR)
    assert original.offsets == (ReminderOffset.ONE_HOUR,)


def test_remove_reminder() -> None:
    settings = ReminderSettings([ReminderOffset.ONE_HOUR, ReminderOffset.ONE_DAY])
    assert settings.remove_reminder(ReminderOffset.ONE_HOUR).offsets == (ReminderOffset.ONE_DAY,)
    assert settings.remove_reminder(ReminderOffset.ONE_WEEK) == settings


def test_toggle_reminder() -> None:
    settings = NO_REMINDERS.toggle_reminder(ReminderOffset.TWO_HOURS)
    assert settings.offsets == (ReminderOffset.TWO_HOURS,)
    assert settings.toggle_reminder(ReminderOffset.TWO_HOURS) == NO_REMINDERS


def test_toggle_every_offset_on_then_off() -> None:
    settings = NO_REMINDERS
    for offset in reversed(list(ReminderOffset)):
        settings = settings.toggle_reminder(offset)
    assert settings.offsets == tuple(ReminderOffset)
    for offset in ReminderOffset:
        settings = settings.toggle_reminder(offset)
    assert settings == NO_REMINDERS


def test_summary_uses_short_labels_in_order() -> None:
    settings = ReminderSettings([ReminderOffset.ONE_DAY, ReminderOffset.FIFTEEN_MINUTES, ReminderOffset.ONE_HOUR])
    assert settings.summary == "15m, 1h, 1d"


def test_notification_times_are_future_only_and_sorted() -> None:
    settings = ReminderSettings([ReminderOffset.ONE_DAY, ReminderOffset.FIFTEEN_MINUTES, ReminderOffset.ONE_HOUR])
    assert settings.notification_times(EVENT_DATE, NOON) == [
        datetime(2026, 3, 15, 13, 30),
        datetime(2026, 3, 15, 14, 15),
    ]
    assert settings.next_notification_time(EVENT_DATE, NOON) == datetime(2026, 3, 15, 13, 30)


def test_notification_time_equal_to_now_is_not_upcoming() -> None:
    settings = ReminderSettings([ReminderOffset.TWO_HOURS, ReminderOffset.AT_TIME])
    clock = FixedClock(datetime(2026, 3, 15, 12, 30))
    assert settings.notification_times(EVENT_DATE, clock) == [EVENT_DATE]


def test_next_notification_time_none_when_all_past() -> None:
    settings = ReminderSettings([ReminderOffset.ONE_DAY])
    assert settings.next_notification_time(EVENT_DATE, NOON) is None
    assert NO_REMINDERS.next_notification_time(EVENT_DATE, NOON) is None


def test_notification_times_for_aware_event_date() -> None:
    event_date = pytz.utc.localize(EVENT_DATE)
    settings = ReminderSettings([ReminderOffset.ONE_HOUR, ReminderOffset.ONE_DAY])
    assert settings.notification_times(event_date, NOON) == [pytz.utc.localize(datetime(2026, 3, 15, 13, 30))]


def test_json_round_trip() -> None:
    settings = ReminderSettings([ReminderOffset.ONE_HOUR, ReminderOffset.FIFTEEN_MINUTES])
    assert settings.to_json() == ["fifteenMinutes", "oneHour"]
    assert ReminderSettings.from_json_string(settings.to_json_string()) == settings
    assert ReminderSettings.from_json(settings.to_json()) == settings


def test_empty_to_json_string() -> None:
    assert NO_REMINDERS.to_json_string() == "[]"


@pytest.mark.parametrize(
    "payload",
    [None, "", "not json", "{}", "42", '["bogus"]', '["oneHour", "bogus"]', "[1, 2]", "[" * 100000],
)
def test_from_json_string_is_fail_soft(payload: object) -> None:
    assert ReminderSettings.from_json_string(payload) == NO_REMINDERS


def test_equality_and_hash() -> None:
    a = ReminderSettings([ReminderOffset.ONE_HOUR, ReminderOffset.ONE_DAY])
    b = ReminderSettings([ReminderOffset.ONE_DAY, ReminderOffset.ONE_HOUR])
    assert a == b
    assert hash(a) == hash(b)
    assert a != ReminderSettings([ReminderOffset.ONE_HOUR])


def test_clock_is_abstract() -> None:
    with pytest.raises(TypeError):
        Clock()
