"""Thread safety tests for the exporter and recurrence expansion.

Export and expansion share no mutable state, so concurrent callers must
see exactly the results a single thread sees.
"""

import unittest
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime

from everything_calendar.core.clock import FixedClock
from everything_calendar.core.event_model import Event, EventPriority, EventTag
from everything_calendar.core.ics_builder import CalendarExporter
from everything_calendar.core.recurrence import RecurrenceFrequency, RecurrenceRule
from everything_calendar.core.reminders import ReminderOffset, ReminderSettings


def _make_events():
    events = []
    for index, frequency in enumerate(RecurrenceFrequency):
        events.append(Event(
            id=f"evt-{index}",
            title=f"Event {index}, with; specials",
            date=datetime(2026, 1, 31, 9, index),
            description="Line one\nLine two",
            priority=EventPriority.URGENT,
            tags=(EventTag("Work"), EventTag("Travel", 5)),
            recurrence=RecurrenceRule(frequency, interval=index + 1),
            reminders=ReminderSettings([ReminderOffset.ONE_HOUR]),
        ))
    return events


class TestExporterThreadSafety(unittest.TestCase):
    """Test that one CalendarExporter can serve many threads."""

    def setUp(self):
        self.exporter = CalendarExporter(clock=FixedClock(datetime(2026, 3, 1, 9, 0)))
        self.events = _make_events()

    def test_concurrent_bulk_exports_match(self):
        """Verify every thread produces the same document."""
        expected = self.exporter.export_events(self.events)

        with ThreadPoolExecutor(max_workers=8) as executor:
            futures = [executor.submit(self.exporter.export_events, self.events) for _ in range(50)]
            results = [f.result() for f in futures]

        self.assertEqual(len(results), 50)
        for result in results:
            self.assertEqual(result, expected)

    def test_concurrent_single_exports(self):
        """Verify interleaved single-event exports don't bleed into each other."""
        expected = {event.id: self.exporter.export_event(event) for event in self.events}

        def export(event):
            return event.id, self.exporter.export_event(event)

        with ThreadPoolExecutor(max_workers=8) as executor:
            results = list(executor.map(export, self.events * 25))

        for event_id, content in results:
            self.assertEqual(content, expected[event_id])
            self.assertIn(f"UID:{event_id}@everything.app", content)


class TestRecurrenceThreadSafety(unittest.TestCase):
    """Test that occurrence expansion is deterministic across threads."""

    def test_concurrent_expansion(self):
        """Verify the same anchor always expands to the same occurrences."""
        events = _make_events()
        expected = [event.generate_occurrences() for event in events]

        with ThreadPoolExecutor(max_workers=8) as executor:
            runs = [executor.submit(lambda: [e.generate_occurrences() for e in events]) for _ in range(20)]
            results = [f.result() for f in runs]

        for result in results:
            self.assertEqual(result, expected)


if __name__ == "__main__":
    unittest.main()
