import logging
import re
import uuid
from typing import Any, Dict, Mapping, Optional

from services.interfaces import CalendarEvent
from utils import parse_date

from .constants import (
    DEFAULT_EVENT_TYPE,
    DEFAULT_TITLE,
    EVENT_TYPES,
    FALLBACK_SLUG,
    FILE_EXTENSION,
    INSTANCE_ID_SEPARATOR,
    MAX_SLUG_LENGTH,
    NO_RECURRENCE,
    RECURRENCE_PATTERNS,
    USER_EVENT_TYPES,
)

logger = logging.getLogger(__name__)

SLUG_INVALID_RE = re.compile(r"[^a-z0-9]+")
INSTANCE_ID_RE = re.compile(
    rf"^(.+){re.escape(INSTANCE_ID_SEPARATOR)}(\d{{4}}-\d{{2}}-\d{{2}})$"
)

# Keys that only exist on projections (instances, holidays) and never on stored events
DERIVED_KEYS = frozenset(
    {"_isRecurrenceInstance", "_originalId", "_instanceDate", "_isHoliday", "_holidayName"}
)


def generate_id() -> str:
    return str(uuid.uuid4())


def slugify(title: Any) -> str:
    """Lowercase, non-alphanumeric runs collapsed to '-', max 50 chars, 'event' if empty."""
    slug = SLUG_INVALID_RE.sub("-", str(title or "").lower()).strip("-")
    return slug[:MAX_SLUG_LENGTH] or FALLBACK_SLUG


def generate_filename(event: Mapping[str, Any]) -> str:
    """Имя файла события: `{startDate}-{slug(title)}.md`."""
    return f"{event.get('startDate')}-{slugify(event.get('title'))}{FILE_EXTENSION}"


def is_recurring(event: Mapping[str, Any]) -> bool:
    return (event.get("recurrence") or NO_RECURRENCE) != NO_RECURRENCE


def instance_id(original_id: str, instance_date: str) -> str:
    return f"{original_id}{INSTANCE_ID_SEPARATOR}{instance_date}"


def resolve_base_id(event_id: str, known_ids: Optional[Mapping[str, Any]] = None) -> str:
    """
    Сводит ID экземпляра повторяющегося события (`{originalId}_{YYYY-MM-DD}`)
    к ID исходного события. ID, который уже есть в хранилище, возвращается как есть.
    """
    if known_ids is not None and event_id in known_ids:
        return event_id
    match = INSTANCE_ID_RE.match(event_id or "")
    if match:
        return match.group(1)
    return event_id


def _as_text(value: Any) -> Optional[str]:
    """Text field value; bools and ints from the frontmatter are rendered back as written."""
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    text = str(value).strip()
    return text or None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip() in ("true", "false"):
        return value.strip() == "true"
    return None


def _as_interval(value: Any) -> int:
    if isinstance(value, bool):
        return 1
    if isinstance(value, int):
        return value if value >= 1 else 1
    if isinstance(value, str) and value.strip().isdigit():
        return max(int(value.strip()), 1)
    return 1


def _normalize(event: Dict[str, Any]) -> Dict[str, Any]:
    """Defaults shared by load, create and update. Does not touch allDay."""
    event["title"] = _as_text(event.get("title")) or DEFAULT_TITLE
    event["startDate"] = _as_text(event.get("startDate"))
    event["endDate"] = _as_text(event.get("endDate")) or event["startDate"]

    start = parse_date(event["startDate"]) if event["startDate"] else None
    end = parse_date(event["endDate"]) if event["endDate"] else None
    if start and end and end < start:
        logger.warning(
            f"Event '{event.get('id')}' ends ({event['endDate']}) before it starts "
            f"({event['startDate']}). Clamping end date."
        )
        event["endDate"] = event["startDate"]

    if event.get("allDay"):
        event["startTime"] = None
        event["endTime"] = None
    else:
        event["startTime"] = _as_text(event.get("startTime"))
        event["endTime"] = _as_text(event.get("endTime"))

    event_type = event.get("type")
    if event_type not in USER_EVENT_TYPES:
        if event_type is not None:
            logger.debug(f"Unsupported event type {event_type!r}, using default.")
        event_type = DEFAULT_EVENT_TYPE
    event["type"] = event_type
    event["color"] = _as_text(event.get("color")) or EVENT_TYPES[event_type]["color"]

    recurrence = event.get("recurrence")
    if recurrence not in RECURRENCE_PATTERNS:
        recurrence = NO_RECURRENCE
    event["recurrence"] = recurrence
    event["recurrenceEnd"] = _as_text(event.get("recurrenceEnd"))
    event["recurrenceInterval"] = _as_interval(event.get("recurrenceInterval"))

    description = event.get("description")
    event["description"] = description if isinstance(description, str) else ""
    return event


def build_event(
    fields: Mapping[str, Any],
    description: Optional[str] = None,
    event_id: Optional[str] = None,
) -> CalendarEvent:
    """
    Собирает событие из полей frontmatter (или данных формы), применяя значения
    по умолчанию. Используется и при загрузке, и при создании.

    allDay = не указано явно `false` И нет startTime.
    """
    start_time = _as_text(fields.get("startTime"))
    all_day = _as_bool(fields.get("allDay")) is not False and not start_time

    event: Dict[str, Any] = {
        "id": event_id or _as_text(fields.get("id")) or generate_id(),
        "title": fields.get("title"),
        "startDate": fields.get("startDate"),
        "endDate": fields.get("endDate"),
        "startTime": start_time,
        "endTime": fields.get("endTime"),
        "allDay": all_day,
        "color": fields.get("color"),
        "type": fields.get("type"),
        "recurrence": fields.get("recurrence"),
        "recurrenceEnd": fields.get("recurrenceEnd"),
        "recurrenceInterval": fields.get("recurrenceInterval"),
        "description": (
            description if description is not None else fields.get("description")
        ),
    }
    return _normalize(event)  # type: ignore[return-value]


def merge_event_patch(
    existing: Mapping[str, Any], patch: Mapping[str, Any]
) -> CalendarEvent:
    """Накладывает частичные изменения на существующее событие (patch побеждает)."""
    changes = {
        key: value
        for key, value in patch.items()
        if key not in DERIVED_KEYS and key not in ("id", "_filename")
    }
    merged: Dict[str, Any] = {**existing, **changes}
    merged["id"] = existing["id"]
    all_day = _as_bool(merged.get("allDay"))
    merged["allDay"] = bool(all_day)
    return _normalize(merged)  # type: ignore[return-value]
