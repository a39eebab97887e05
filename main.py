import logging
import asyncio
import argparse
import datetime
import sys
from typing import Any, Dict, List, Optional

from dependency_injector.wiring import inject, Provide

from containers import ApplicationContainer, get_container
from calendar_events import (
    ExternalChangeReloader,
    StoreAccessError,
    EventNotFoundError,
    holidays_for_year,
)
from calendar_events.constants import RECURRENCE_PATTERNS, USER_EVENT_TYPES
from services.interfaces import (
    CalendarEvent,
    IConfigService,
    IEventStore,
    IWatchService,
)
from utils import format_date, setup_logging

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Markdown calendar - events stored as one .md file each"
    )
    parser.add_argument(
        "--watch",
        action="store_true",
        help="Keep running and reload when event files change on disk",
    )
    subparsers = parser.add_subparsers(dest="command")

    agenda = subparsers.add_parser("agenda", help="List events in a date range")
    agenda.add_argument("--start", help="YYYY-MM-DD (default: first day of this month)")
    agenda.add_argument("--end", help="YYYY-MM-DD (default: last day of this month)")

    holidays = subparsers.add_parser("holidays", help="List public holidays of a year")
    holidays.add_argument("year", type=int)

    add = subparsers.add_parser("add", help="Create an event")
    add.add_argument("--title", required=True)
    add.add_argument("--start", required=True, help="YYYY-MM-DD")
    add.add_argument("--end", help="YYYY-MM-DD")
    add.add_argument("--start-time", help="HH:MM")
    add.add_argument("--end-time", help="HH:MM")
    add.add_argument("--type", choices=USER_EVENT_TYPES, default="personal")
    add.add_argument("--color")
    add.add_argument("--recurrence", choices=list(RECURRENCE_PATTERNS), default="none")
    add.add_argument("--interval", type=int, default=1)
    add.add_argument("--until", help="Recurrence end date, YYYY-MM-DD")
    add.add_argument("--description", default="")

    remove = subparsers.add_parser("remove", help="Delete an event by id")
    remove.add_argument("id")

    return parser.parse_args(argv)


def _current_month_range() -> tuple:
    today = datetime.date.today()
    first = today.replace(day=1)
    next_month = (first + datetime.timedelta(days=32)).replace(day=1)
    return format_date(first), format_date(next_month - datetime.timedelta(days=1))


def format_event_line(event: CalendarEvent) -> str:
    when = event["startDate"]
    if event.get("endDate") and event["endDate"] != event["startDate"]:
        when = f"{when}..{event['endDate']}"
    if event.get("allDay"):
        time_part = "all day"
    else:
        time_part = "-".join(t for t in (event.get("startTime"), event.get("endTime")) if t)
    return f"{when}  {time_part:<11}  [{event.get('type')}] {event.get('title')}  ({event.get('id')})"


def _add_arguments_to_event(args: argparse.Namespace) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "title": args.title,
        "startDate": args.start,
        "endDate": args.end or args.start,
        "allDay": not args.start_time,
        "type": args.type,
        "recurrence": args.recurrence,
        "recurrenceInterval": args.interval,
        "description": args.description,
    }
    if args.start_time:
        data["startTime"] = args.start_time
        data["endTime"] = args.end_time
    if args.color:
        data["color"] = args.color
    if args.until:
        data["recurrenceEnd"] = args.until
    return data


@inject
async def run_command(
    args: argparse.Namespace,
    event_store: IEventStore = Provide[ApplicationContainer.event_store],
) -> int:
    """Выполняет команду CLI. Возвращает код выхода."""
    if args.command == "holidays":
        for holiday in holidays_for_year(args.year):
            print(f"{holiday.date}  {holiday.localized_name}  ({holiday.name})")
        return 0

    await event_store.load_all()

    if args.command == "add":
        data = _add_arguments_to_event(args)
        errors = event_store.validate(data)
        if errors:
            for error in errors:
                print(f"Error: {error}", file=sys.stderr)
            return 2
        event = await event_store.create(data)
        print(f"Created {event['id']} -> {event.get('_filename')}")
        return 0

    if args.command == "remove":
        if await event_store.delete(args.id):
            print(f"Deleted {args.id}")
            return 0
        print(f"Event {args.id} not found", file=sys.stderr)
        return 1

    # agenda (default command)
    start, end = _current_month_range()
    start = getattr(args, "start", None) or start
    end = getattr(args, "end", None) or end
    for event in event_store.get_range(start, end):
        print(format_event_line(event))
    return 0


@inject
async def watch_forever(
    event_store: IEventStore = Provide[ApplicationContainer.event_store],
    watch_service: IWatchService = Provide[ApplicationContainer.services.watch_service],
    config_service: IConfigService = Provide[ApplicationContainer.core.config_service],
) -> None:
    """Наблюдает за каталогом событий и перезагружает хранилище при изменениях."""
    events_dir = config_service.get_events_dir()
    if not events_dir:
        logger.warning("Events directory not configured. File watching not enabled.")
        return

    reloader = ExternalChangeReloader(event_store, asyncio.get_running_loop())
    watch_service.watch_directory(events_dir, reloader)
    watch_service.start()
    logger.info("Watching events directory. Press Ctrl+C to stop.")
    try:
        while True:
            await asyncio.sleep(3600)
    finally:
        watch_service.stop()


async def main_async(argv: Optional[List[str]] = None) -> int:
    """Asynchronous main function to initialize and run all components."""
    args = parse_args(argv)
    container = get_container()
    setup_logging(container.core.config_service().get_log_level())

    logger.info("Wiring modules for dependency injection...")
    container.wire(modules=[__name__])

    try:
        exit_code = await run_command(args)
        if args.watch or container.core.config_service().watch_events_dir_enabled():
            await watch_forever()
        return exit_code
    except StoreAccessError as e:
        logger.error(f"Event storage is not available: {e}. Set CALENDAR_EVENTS_DIR.")
        return 1
    except EventNotFoundError as e:
        logger.error(str(e))
        return 1
    finally:
        logger.info("Application shutdown.")


if __name__ == "__main__":
    try:
        sys.exit(asyncio.run(main_async()))
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt, shutting down...")
