"""Entry point for running everything_calendar as a module.

Usage: python -m everything_calendar EVENTS.json [-o DIR] [--env-file PATH] [--expand]

Reads persisted event records (a JSON list, or a single object) and saves
them as an .ics file under the generated export filename.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="everything_calendar",
        description="Export stored events as an iCalendar (.ics) file.",
    )
    parser.add_argument("events", type=Path, help="JSON file with event records")
    parser.add_argument(
        "-o", "--output-dir", type=Path, default=Path("."),
        help="Directory to write the .ics file into (default: current directory)",
    )
    parser.add_argument(
        "--env-file", type=Path, default=None,
        help="Optional .env file with export settings overrides",
    )
    parser.add_argument(
        "--expand", action="store_true",
        help="Write recurring events as separate occurrences instead of an RRULE",
    )
    return parser


def expand_events(events, recurrence_config):
    """Replace each recurring event by its occurrences, capped by the config."""
    expanded = []
    for event in events:
        expanded.append(event.copy_with(clear_recurrence=True))
        expanded.extend(
            occurrence.copy_with(clear_recurrence=True)
            for occurrence in event.generate_occurrences(config=recurrence_config)
        )
    return expanded


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the exporter."""
    # Configure logging
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    from everything_calendar.config.settings import load_settings
    from everything_calendar.core.event_model import Event
    from everything_calendar.core.ics_builder import CalendarExporter
    from everything_calendar.exceptions.errors import EventValidationError

    args = build_parser().parse_args(argv)

    try:
        records = json.loads(args.events.read_text(encoding="utf-8"))
    except (OSError, ValueError, RecursionError) as e:
        logger.error("Could not read events from %s: %s", args.events, e)
        return 1
    if isinstance(records, dict):
        records = [records]
    if not isinstance(records, list) or not all(isinstance(r, dict) for r in records):
        logger.error("Expected a list of event objects in %s", args.events)
        return 1

    try:
        events = [Event.from_dict(record) for record in records]
    except EventValidationError as e:
        logger.error("Invalid event record: %s", e)
        return 1

    export_config, recurrence_config = load_settings(args.env_file)
    if args.expand:
        events = expand_events(events, recurrence_config)
    exporter = CalendarExporter(config=export_config)
    if len(events) == 1:
        export = exporter.build_event_export(events[0])
    else:
        export = exporter.build_events_export(events)

    args.output_dir.mkdir(parents=True, exist_ok=True)
    target = args.output_dir / export.filename
    target.write_bytes(export.to_bytes())
    logger.info("Wrote %d event(s) to %s (%s)", len(events), target, export.mime_type)
    return 0


if __name__ == "__main__":
    sys.exit(main())
