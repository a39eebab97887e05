import re
from typing import Any, List, Mapping

from utils import parse_date

TIME_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")

TITLE_REQUIRED = "Title is required"
INVALID_START_DATE = "Invalid start date format (expected YYYY-MM-DD)"
INVALID_END_DATE = "Invalid end date format (expected YYYY-MM-DD)"
END_BEFORE_START = "End date must be on or after start date"
INVALID_START_TIME = "Invalid start time format (expected HH:MM)"
INVALID_END_TIME = "Invalid end time format (expected HH:MM)"


def _is_valid_time(value: Any) -> bool:
    return isinstance(value, str) and bool(TIME_RE.match(value))


def validate_event(candidate: Mapping[str, Any]) -> List[str]:
    """
    Проверяет формат полей события перед сохранением.
    Возвращает полный список ошибок (пустой список - событие корректно).
    """
    errors: List[str] = []

    title = candidate.get("title")
    if not isinstance(title, str) or not title.strip():
        errors.append(TITLE_REQUIRED)

    start = parse_date(candidate.get("startDate"))
    if start is None:
        errors.append(INVALID_START_DATE)

    end_date = candidate.get("endDate")
    if end_date:
        end = parse_date(end_date)
        if end is None:
            errors.append(INVALID_END_DATE)
        elif start is not None and end < start:
            errors.append(END_BEFORE_START)

    # Times are only checked for timed events, and only when supplied
    if candidate.get("allDay") is not True:
        start_time = candidate.get("startTime")
        if start_time and not _is_valid_time(start_time):
            errors.append(INVALID_START_TIME)
        end_time = candidate.get("endTime")
        if end_time and not _is_valid_time(end_time):
            errors.append(INVALID_END_TIME)

    return errors
