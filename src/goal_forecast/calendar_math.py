"""
Calendar arithmetic for yearly goal forecasting.

All timestamps are handled as naive local wall-clock datetimes. A trailing
'Z' or UTC offset on an input string is dropped rather than converted, since
provider "local" timestamps carry the athlete's wall-clock time.
"""

import math
from datetime import date, datetime, timedelta
from typing import Union

SECONDS_PER_DAY = 24 * 60 * 60


def is_leap_year(year: int) -> bool:
    return (year % 4 == 0 and year % 100 != 0) or year % 400 == 0


def days_in_year(year: int) -> int:
    """Return 366 for leap years, 365 otherwise."""
    return 366 if is_leap_year(year) else 365


def day_of_year(value: Union[date, datetime]) -> int:
    """1-based day of the year (Jan 1 -> 1)."""
    return value.timetuple().tm_yday


def start_of_year(year: int) -> datetime:
    return datetime(year, 1, 1, 0, 0, 0, 0)


def end_of_year(year: int) -> datetime:
    return datetime(year, 12, 31, 23, 59, 59, 999000)


def diff_days(a: datetime, b: datetime) -> float:
    """Fractional days from a to b (negative if b is earlier)."""
    return (b - a).total_seconds() / SECONDS_PER_DAY


def whole_days_between(a: datetime, b: datetime) -> int:
    """Whole days from a to b, floored and never negative."""
    return max(0, math.floor(diff_days(a, b)))


def add_days(value: datetime, days: float) -> datetime:
    """Add calendar days, dropping any fractional part."""
    return value + timedelta(days=int(days))


def parse_local_datetime(value: Union[str, datetime, date, None]) -> datetime:
    """
    Parse an ISO-like local timestamp into a naive datetime.

    Raises:
        ValueError: If the value is empty or not an ISO date/datetime
    """
    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Invalid local timestamp: {value!r}")

    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1]
    parsed = datetime.fromisoformat(text)
    return parsed.replace(tzinfo=None)


def parse_iso_date(value: Union[str, date, datetime]) -> date:
    """Parse a YYYY-MM-DD (or full timestamp) string into a date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return parse_local_datetime(value).date()


def js_round(n: float, digits: int = 1) -> float:
    """
    Round half up to a number of decimals.

    Matches how the UI layer rounds for display, unlike the built-in
    round() which rounds half to even.
    """
    factor = 10 ** digits
    result = math.floor(n * factor + 0.5) / factor
    if digits <= 0:
        return int(result)
    return result
