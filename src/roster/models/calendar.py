"""Calendar helpers: day-of-week convention and date parsing."""
from datetime import date, datetime, time, timedelta
from typing import Iterator, Optional

from .rules import DAY_NAMES

# Day normalization map
DAY_ALIASES = {
    "sun": 0, "sunday": 0,
    "mon": 1, "monday": 1,
    "tue": 2, "tues": 2, "tuesday": 2,
    "wed": 3, "wednesday": 3,
    "thu": 4, "thur": 4, "thurs": 4, "thursday": 4,
    "fri": 5, "friday": 5,
    "sat": 6, "saturday": 6,
}


def day_of_week(d: date) -> int:
    """Day index with Sunday = 0 and Saturday = 6."""
    return (d.weekday() + 1) % 7


def day_name(dow: int) -> str:
    return DAY_NAMES[dow % 7]


def normalize_day(value) -> int:
    """Parse a day-of-week given as an index (0 = Sunday) or a name."""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, int):
        if not 0 <= value <= 6:
            raise ValueError(f"day_of_week out of range: {value}")
        return value
    key = str(value).strip().lower()
    if key.isdigit():
        return normalize_day(int(key))
    if key in DAY_ALIASES:
        return DAY_ALIASES[key]
    raise ValueError(f"Unrecognized day of week: {value!r}")


def date_range(start: date, end: date) -> Iterator[date]:
    """Yield every date of the closed range [start, end]."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def parse_date(value) -> Optional[date]:
    """Parse ISO dates, datetimes or pandas timestamps; blanks become None."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text or text.lower() in ("nan", "nat", "none", "null"):
        return None
    return date.fromisoformat(text[:10])


def parse_datetime(value) -> Optional[datetime]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    text = str(value).strip()
    if not text or text.lower() in ("nan", "nat", "none", "null"):
        return None
    if text[-1] in "Zz":
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def parse_time(value) -> Optional[time]:
    if value is None:
        return None
    if isinstance(value, time):
        return value
    text = str(value).strip()
    if not text or text.lower() in ("nan", "none", "null"):
        return None
    if text[-1] in "Zz":
        text = text[:-1] + "+00:00"
    return time.fromisoformat(text)
