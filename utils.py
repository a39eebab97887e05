import logging
import re
import sys
from datetime import date, datetime
from typing import Optional, Union

DATE_FORMAT = "%Y-%m-%d"
DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

DateLike = Union[str, date]


def setup_logging(log_level_name: str = "INFO"):
    """Sets up basic logging configuration."""
    log_level_name = (log_level_name or "INFO").upper()
    log_level = getattr(logging, log_level_name, logging.INFO)  # Default to INFO

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stdout,
    )
    # Reduce noise from libraries
    logging.getLogger("watchdog").setLevel(logging.WARNING)

    logger = logging.getLogger(__name__)
    logger.info(f"Logging configured at level: {log_level_name}")


def format_date(value: date) -> str:
    """Formats a date as YYYY-MM-DD."""
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def parse_date(value: str) -> Optional[date]:
    """Parses a strict YYYY-MM-DD string. Returns None for anything else."""
    if not isinstance(value, str) or not DATE_PATTERN.match(value):
        return None
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except ValueError:
        return None


def to_date(value: DateLike) -> date:
    """Accepts a date/datetime or a YYYY-MM-DD string and returns a date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    parsed = parse_date(value)
    if parsed is None:
        raise ValueError(f"Invalid date (expected YYYY-MM-DD): {value!r}")
    return parsed


def to_date_str(value: DateLike) -> str:
    return format_date(to_date(value))
