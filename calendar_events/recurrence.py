import logging
import datetime
from typing import Any, Iterable, List, Mapping, Optional

from dateutil.relativedelta import relativedelta

from services.interfaces import CalendarEvent
from utils import DateLike, format_date, parse_date, to_date

from .constants import MAX_RECURRENCE_INSTANCES
from .event_fields import instance_id, is_recurring

logger = logging.getLogger(__name__)


def _period_offset(recurrence: str, interval: int, n: int) -> Optional[relativedelta]:
    """Смещение n-го повторения от начала серии."""
    steps = interval * n
    if recurrence == "daily":
        return relativedelta(days=steps)
    if recurrence == "weekly":
        return relativedelta(days=7 * steps)
    if recurrence == "monthly":
        # relativedelta clamps to the last day of shorter months (Jan 31 -> Feb 28)
        return relativedelta(months=steps)
    if recurrence == "yearly":
        return relativedelta(years=steps)
    return None


def _interval_of(event: Mapping[str, Any]) -> int:
    interval = event.get("recurrenceInterval") or 1
    if isinstance(interval, bool) or not isinstance(interval, int) or interval < 1:
        return 1
    return interval


def expand_event(
    event: Mapping[str, Any],
    range_start: datetime.date,
    range_end: datetime.date,
    max_instances: int = MAX_RECURRENCE_INSTANCES,
) -> List[CalendarEvent]:
    """
    Разворачивает одно повторяющееся событие в экземпляры, пересекающие
    диапазон [range_start, range_end] (обе границы включительно).
    """
    start = parse_date(event.get("startDate"))
    if start is None:
        logger.warning(
            f"Recurring event '{event.get('id')}' has no valid start date. Skipping."
        )
        return []
    end = parse_date(event.get("endDate") or event.get("startDate")) or start
    duration = end - start
    if duration.days < 0:
        duration = datetime.timedelta(0)

    recurrence = event.get("recurrence")
    interval = _interval_of(event)

    ceiling = range_end
    recurrence_end = parse_date(event.get("recurrenceEnd"))
    if recurrence_end is not None and recurrence_end < ceiling:
        ceiling = recurrence_end

    instances: List[CalendarEvent] = []
    n = 0
    cursor = start
    while cursor <= ceiling and len(instances) < max_instances:
        instance_end = cursor + duration
        if cursor <= range_end and instance_end >= range_start:
            instance_date = format_date(cursor)
            instance = dict(event)
            instance["id"] = instance_id(event["id"], instance_date)
            instance["startDate"] = instance_date
            instance["endDate"] = format_date(instance_end)
            instance["_isRecurrenceInstance"] = True
            instance["_originalId"] = event["id"]
            instance["_instanceDate"] = instance_date
            instances.append(instance)  # type: ignore[arg-type]

        n += 1
        offset = _period_offset(recurrence, interval, n)
        if offset is None:
            logger.warning(
                f"Unknown recurrence {recurrence!r} on event '{event.get('id')}'."
            )
            break
        cursor = start + offset

    if len(instances) >= max_instances:
        logger.warning(
            f"Recurring event '{event.get('id')}' hit the limit of {max_instances} instances."
        )
    return instances


def expand_recurring_events(
    events: Iterable[Mapping[str, Any]], range_start: DateLike, range_end: DateLike
) -> List[CalendarEvent]:
    """
    Неповторяющиеся события проходят без изменений, каждое повторяющееся
    заменяется своими экземплярами в пределах диапазона.
    """
    start = to_date(range_start)
    end = to_date(range_end)

    expanded: List[CalendarEvent] = []
    for event in events:
        if not is_recurring(event):
            expanded.append(event)  # type: ignore[arg-type]
            continue
        expanded.extend(expand_event(event, start, end))
    return expanded
