import logging
import datetime
from typing import Dict, List, NamedTuple, Optional, Tuple

from utils import DateLike, format_date, to_date

logger = logging.getLogger(__name__)

SATURDAY = 5  # date.weekday()


class Holiday(NamedTuple):
    date: str  # YYYY-MM-DD
    name: str
    localized_name: str


# (month, day, name, Swedish name)
FIXED_HOLIDAYS: Tuple[Tuple[int, int, str, str], ...] = (
    (1, 1, "New Year's Day", "Nyårsdagen"),
    (1, 6, "Epiphany", "Trettondedag jul"),
    (5, 1, "May Day", "Första maj"),
    (6, 6, "National Day of Sweden", "Sveriges nationaldag"),
    (12, 25, "Christmas Day", "Juldagen"),
    (12, 26, "Second Day of Christmas", "Annandag jul"),
)

# (offset from Easter Sunday in days, name, Swedish name)
EASTER_HOLIDAYS: Tuple[Tuple[int, str, str], ...] = (
    (-2, "Good Friday", "Långfredagen"),
    (0, "Easter Sunday", "Påskdagen"),
    (1, "Easter Monday", "Annandag påsk"),
    (39, "Ascension Day", "Kristi himmelsfärdsdag"),
    (49, "Whit Sunday", "Pingstdagen"),
)

# Process-wide, append-only; a year's holidays never change
_holiday_cache: Dict[int, Tuple[Holiday, ...]] = {}


def calculate_easter(year: int) -> datetime.date:
    """Пасхальное воскресенье по анонимному григорианскому алгоритму."""
    a = year % 19
    b = year // 100
    c = year % 100
    d = b // 4
    e = b % 4
    f = (b + 8) // 25
    g = (b - f + 1) // 3
    h = (19 * a + b - d - g + 15) % 30
    i = c // 4
    k = c % 4
    l = (32 + 2 * e + 2 * i - h - k) % 7
    m = (a + 11 * h + 22 * l) // 451
    month = (h + l - 7 * m + 114) // 31
    day = ((h + l - 7 * m + 114) % 31) + 1
    return datetime.date(year, month, day)


def _find_saturday_between(
    start: datetime.date, end: datetime.date
) -> Optional[datetime.date]:
    current = start
    while current <= end:
        if current.weekday() == SATURDAY:
            return current
        current += datetime.timedelta(days=1)
    return None


def _compute_holidays(year: int) -> Tuple[Holiday, ...]:
    holidays: List[Holiday] = [
        Holiday(format_date(datetime.date(year, month, day)), name, name_sv)
        for month, day, name, name_sv in FIXED_HOLIDAYS
    ]

    easter = calculate_easter(year)
    for offset, name, name_sv in EASTER_HOLIDAYS:
        holidays.append(
            Holiday(
                format_date(easter + datetime.timedelta(days=offset)), name, name_sv
            )
        )

    # Midsummer Day - the Saturday between June 20 and 26
    midsummer = _find_saturday_between(
        datetime.date(year, 6, 20), datetime.date(year, 6, 26)
    )
    if midsummer:
        holidays.append(Holiday(format_date(midsummer), "Midsummer Day", "Midsommardagen"))

    # All Saints' Day - the Saturday between October 31 and November 6
    all_saints = _find_saturday_between(
        datetime.date(year, 10, 31), datetime.date(year, 11, 6)
    )
    if all_saints:
        holidays.append(
            Holiday(format_date(all_saints), "All Saints' Day", "Alla helgons dag")
        )

    holidays.sort(key=lambda holiday: holiday.date)
    return tuple(holidays)


def holidays_for_year(year: int) -> Tuple[Holiday, ...]:
    """
    Возвращает отсортированные по дате шведские праздники для года.
    Результат кэшируется на уровне процесса.
    """
    cached = _holiday_cache.get(year)
    if cached is not None:
        return cached

    holidays = _compute_holidays(year)
    _holiday_cache[year] = holidays
    logger.debug(f"Computed {len(holidays)} holidays for {year}")
    return holidays


def holidays_for_range(start: DateLike, end: DateLike) -> List[Holiday]:
    """Праздники всех затронутых лет в пределах [start, end] включительно."""
    start_date = to_date(start)
    end_date = to_date(end)
    start_str = format_date(start_date)
    end_str = format_date(end_date)

    result: List[Holiday] = []
    for year in range(start_date.year, end_date.year + 1):
        result.extend(
            h for h in holidays_for_year(year) if start_str <= h.date <= end_str
        )
    return result


def find_holiday(day: DateLike) -> Optional[Holiday]:
    """Returns the holiday falling on the given date, if any."""
    day_date = to_date(day)
    day_str = format_date(day_date)
    for holiday in holidays_for_year(day_date.year):
        if holiday.date == day_str:
            return holiday
    return None
