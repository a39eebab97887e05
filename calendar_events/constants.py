"""Общие константы календаря: типы событий, шаблоны повторения, лимиты."""

from typing import Dict

# Display label and default colour per event type
EVENT_TYPES: Dict[str, Dict[str, str]] = {
    "personal": {"label": "Personal", "color": "#8b5cf6"},
    "work": {"label": "Work", "color": "#3b82f6"},
    "birthday": {"label": "Birthday", "color": "#ec4899"},
    "holiday": {"label": "Holidays", "color": "#22c55e"},
    "other": {"label": "Other", "color": "#6b7280"},
}

HOLIDAY_TYPE = "holiday"
DEFAULT_EVENT_TYPE = "personal"

# "holiday" is generated by the holiday calculator and never stored
USER_EVENT_TYPES = tuple(t for t in EVENT_TYPES if t != HOLIDAY_TYPE)

RECURRENCE_PATTERNS: Dict[str, str] = {
    "none": "None",
    "daily": "Daily",
    "weekly": "Weekly",
    "monthly": "Monthly",
    "yearly": "Yearly",
}

NO_RECURRENCE = "none"

DEFAULT_TITLE = "Untitled"

# Upper bound on instances produced from one recurring event
MAX_RECURRENCE_INSTANCES = 365

FILE_EXTENSION = ".md"
MAX_SLUG_LENGTH = 50
FALLBACK_SLUG = "event"

# Separator between the original id and the occurrence date in instance ids
INSTANCE_ID_SEPARATOR = "_"
HOLIDAY_ID_PREFIX = "holiday-"
