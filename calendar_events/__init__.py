# This file makes the 'calendar_events' directory a Python package.

from .engine import EventStore, holiday_to_event
from .errors import (
    CalendarError,
    StoreAccessError,
    EventNotFoundError,
    MalformedEventFileError,
    FileStoreWriteError,
)
from .event_fields import (
    build_event,
    generate_filename,
    merge_event_patch,
    resolve_base_id,
    slugify,
)
from .frontmatter import parse_frontmatter, serialize_event
from .holidays import (
    Holiday,
    calculate_easter,
    find_holiday,
    holidays_for_range,
    holidays_for_year,
)
from .recurrence import expand_recurring_events
from .reloader import ExternalChangeReloader
from .validation import validate_event

__all__ = [
    "EventStore",
    "holiday_to_event",
    "CalendarError",
    "StoreAccessError",
    "EventNotFoundError",
    "MalformedEventFileError",
    "FileStoreWriteError",
    "build_event",
    "generate_filename",
    "merge_event_patch",
    "resolve_base_id",
    "slugify",
    "parse_frontmatter",
    "serialize_event",
    "Holiday",
    "calculate_easter",
    "find_holiday",
    "holidays_for_range",
    "holidays_for_year",
    "expand_recurring_events",
    "ExternalChangeReloader",
    "validate_event",
]
