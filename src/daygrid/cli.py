from __future__ import annotations

import argparse
import logging
import sys
from datetime import date
from pathlib import Path
from typing import Iterable, List, Optional

from .config import get_settings
from .domain import Event, EventCategory, EventDraft, ScheduleError, ValidationError, parse_date, parse_time
from .logging import configure_logging
from .services import ServiceContext, build_month
from .services.grid import WEEKDAY_LABELS, DayCell, weeks

logger = logging.getLogger(__name__)


def _parse_month(text: str) -> date:
    try:
        year_text, month_text = text.split("-", 1)
        return date(int(year_text), int(month_text), 1)
    except ValueError as exc:
        raise ValidationError(f"Invalid month {text!r}; expected YYYY-MM") from exc


def _format_event(event: Event) -> str:
    line = f"{event.id}  {event.date.isoformat()}  {event.time_range}  [{event.category.value}]  {event.name}"
    if event.description:
        line += f"\n    {event.description}"
    return line


def _print_events(events: Iterable[Event]) -> None:
    lines = [_format_event(event) for event in events]
    print("\n".join(lines) if lines else "No events.")


def render_month(reference: date, cells: List) -> str:
    month = build_month(reference)
    rows = [month.label.center(7 * 5 - 1), " ".join(f"{label:>4}" for label in WEEKDAY_LABELS)]
    for week in weeks(cells):
        parts = []
        for cell in week:
            if not isinstance(cell, DayCell):
                parts.append("    ")
                continue
            marker = "*" if cell.has_events else " "
            text = f"{cell.day:>2}{marker}"
            parts.append(f"[{text}" if cell.is_today else f" {text}")
        rows.append(" ".join(parts).rstrip())
    return "\n".join(rows)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="daygrid: a personal monthly event calendar.")
    parser.add_argument("--log-level", default=None, help="Override DAYGRID_LOG_LEVEL.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    categories = [category.value for category in EventCategory]

    add_parser = subparsers.add_parser("add", help="Add an event.")
    add_parser.add_argument("name")
    add_parser.add_argument("--date", required=True, help="YYYY-MM-DD")
    add_parser.add_argument("--start", required=True, help="HH:MM")
    add_parser.add_argument("--end", required=True, help="HH:MM")
    add_parser.add_argument("--description", default="")
    add_parser.add_argument("--category", choices=categories, default=EventCategory.DEFAULT.value)

    update_parser = subparsers.add_parser("update", help="Edit fields of an existing event.")
    update_parser.add_argument("event_id", type=int)
    update_parser.add_argument("--name")
    update_parser.add_argument("--date")
    update_parser.add_argument("--start")
    update_parser.add_argument("--end")
    update_parser.add_argument("--description")
    update_parser.add_argument("--category", choices=categories)

    move_parser = subparsers.add_parser("move", help="Move an event to another day.")
    move_parser.add_argument("event_id", type=int)
    move_parser.add_argument("new_date", help="YYYY-MM-DD")

    delete_parser = subparsers.add_parser("delete", help="Delete an event.")
    delete_parser.add_argument("event_id", type=int)

    list_parser = subparsers.add_parser("list", help="List events.")
    list_parser.add_argument("--date", help="Only events on this day (YYYY-MM-DD).")
    list_parser.add_argument("--filter", default="", help="Substring of the name or description.")

    month_parser = subparsers.add_parser("month", help="Print a month grid.")
    month_parser.add_argument("month", nargs="?", help="YYYY-MM (defaults to the current month).")
    month_parser.add_argument("--filter", default="")

    export_parser = subparsers.add_parser("export", help="Export a month of events as JSON.")
    export_parser.add_argument("month", help="YYYY-MM")
    export_parser.add_argument("--output", type=Path, default=None, help="Target directory.")

    api_parser = subparsers.add_parser("api", help="Start the local HTTP API.")
    api_parser.add_argument("--host", default=None)
    api_parser.add_argument("--port", type=int, default=None)

    return parser


def _run(args: argparse.Namespace) -> int:
    if args.command == "api":
        from .services.http import run_local_server

        server = get_settings().server
        run_local_server(host=args.host or server.host, port=args.port or server.port)
        return 0

    context = ServiceContext()
    schedule = context.schedule

    if args.command == "add":
        draft = EventDraft(
            name=args.name,
            date=parse_date(args.date),
            start_time=parse_time(args.start),
            end_time=parse_time(args.end),
            description=args.description,
            category=EventCategory.parse(args.category),
        )
        print(_format_event(schedule.add_event(draft)))
    elif args.command == "update":
        draft = EventDraft.from_event(schedule.get_event(args.event_id))
        if args.name is not None:
            draft.name = args.name
        if args.date is not None:
            draft.date = parse_date(args.date)
        if args.start is not None:
            draft.start_time = parse_time(args.start)
        if args.end is not None:
            draft.end_time = parse_time(args.end)
        if args.description is not None:
            draft.description = args.description
        if args.category is not None:
            draft.category = EventCategory.parse(args.category)
        print(_format_event(schedule.edit_event(args.event_id, draft)))
    elif args.command == "move":
        print(_format_event(schedule.move_event(args.event_id, parse_date(args.new_date))))
    elif args.command == "delete":
        removed = schedule.delete_event(args.event_id)
        print(f"Deleted {args.event_id}." if removed else f"No event {args.event_id}; nothing deleted.")
    elif args.command == "list":
        if args.date:
            _print_events(schedule.events_on(parse_date(args.date), args.filter))
        else:
            events = schedule.filter_events(schedule.list_events(), args.filter)
            _print_events(sorted(events, key=lambda event: (event.date, event.start_time)))
    elif args.command == "month":
        reference = _parse_month(args.month) if args.month else date.today()
        print(render_month(reference, schedule.month_view(reference, query=args.filter)))
    elif args.command == "export":
        reference = _parse_month(args.month)
        export = schedule.export_month(schedule.list_events(), reference.year, reference.month)
        target = schedule.write_export(export, args.output or context.settings.storage.export_dir)
        print(f"Exported {len(export.events)} events to {target}")
    else:  # pragma: no cover - argparse enforces choices
        raise ValueError(f"Unknown command {args.command!r}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    logger.debug("daygrid CLI running %s", args.command)
    try:
        return _run(args)
    except ScheduleError as exc:
        print(f"{exc.title}: {exc.message}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
