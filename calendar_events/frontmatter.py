import logging
import re
import yaml
from typing import Any, Dict, List, Mapping, Tuple, Union

from .constants import NO_RECURRENCE

logger = logging.getLogger(__name__)

FrontmatterValue = Union[str, bool, int]

FRONTMATTER_RE = re.compile(
    r"^---[ \t]*\n(?:(.*?)\n)?---[ \t]*(?:\n(.*))?$", re.DOTALL
)
INTEGER_RE = re.compile(r"^\d+$")


def _decode_double_quoted(value: str) -> str:
    # The serializer writes YAML double-quoted scalars, so let YAML undo the escapes
    try:
        decoded = yaml.safe_load(value)
    except yaml.YAMLError:
        logger.debug(f"Could not decode quoted value {value!r}, stripping quotes only")
        return value[1:-1]
    if isinstance(decoded, str):
        return decoded
    return value[1:-1]


def parse_value(raw: str) -> FrontmatterValue:
    """Преобразует строковое значение frontmatter в str, bool или int."""
    value = raw.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        if value[0] == '"':
            value = _decode_double_quoted(value)
        else:
            value = value[1:-1]
    # Coercion applies after unquoting: `"true"` and `"3"` become bool and int
    if value == "true":
        return True
    if value == "false":
        return False
    if INTEGER_RE.match(value):
        return int(value)
    return value


def parse_frontmatter(content: str) -> Tuple[Dict[str, FrontmatterValue], str]:
    """
    Разбирает блок frontmatter (`---` ... `---`) и тело файла.
    Если структура не распознана, возвращает пустой словарь и весь текст как тело.
    Никогда не выбрасывает исключений.
    """
    if not isinstance(content, str):
        return {}, ""

    text = content.replace("\r\n", "\n")
    match = FRONTMATTER_RE.match(text)
    if not match:
        return {}, content

    fields: Dict[str, FrontmatterValue] = {}
    for line in (match.group(1) or "").split("\n"):
        key, sep, raw_value = line.partition(":")
        key = key.strip()
        if not sep or not key:
            continue
        fields[key] = parse_value(raw_value)

    body = (match.group(2) or "").strip()
    return fields, body


def _quote(value: Any) -> str:
    text = (
        str(value)
        .replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\r", "\\r")
    )
    return f'"{text}"'


def serialize_event(event: Mapping[str, Any]) -> str:
    """Сериализует событие в markdown с frontmatter в фиксированном порядке полей."""
    start_date = event.get("startDate")
    end_date = event.get("endDate")
    all_day = bool(event.get("allDay"))

    lines: List[str] = ["---"]
    lines.append(f"id: {_quote(event.get('id', ''))}")
    lines.append(f"title: {_quote(event.get('title', ''))}")
    lines.append(f"startDate: {_quote(start_date)}")

    if end_date and end_date != start_date:
        lines.append(f"endDate: {_quote(end_date)}")

    lines.append(f"allDay: {'true' if all_day else 'false'}")

    if not all_day:
        if event.get("startTime"):
            lines.append(f"startTime: {_quote(event['startTime'])}")
        if event.get("endTime"):
            lines.append(f"endTime: {_quote(event['endTime'])}")

    lines.append(f"color: {_quote(event.get('color', ''))}")
    lines.append(f"type: {_quote(event.get('type', ''))}")

    recurrence = event.get("recurrence") or NO_RECURRENCE
    if recurrence != NO_RECURRENCE:
        lines.append(f"recurrence: {_quote(recurrence)}")
        if event.get("recurrenceEnd"):
            lines.append(f"recurrenceEnd: {_quote(event['recurrenceEnd'])}")
        interval = event.get("recurrenceInterval") or 1
        if isinstance(interval, int) and interval > 1:
            lines.append(f"recurrenceInterval: {interval}")

    lines.append("---")
    lines.append("")

    description = event.get("description")
    if description:
        lines.append(description)

    return "\n".join(lines)
