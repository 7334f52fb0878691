# laborops/utils/timezones.py
from datetime import date, datetime, timedelta
from typing import Optional, Union

from laborops.core.errors import InvalidInputError

DateLike = Union[str, date, datetime, None]


def to_date(value: DateLike) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        raise InvalidInputError(f"Invalid date provided: {value!r}")


def monday_of_week(d: date) -> date:
    # Monday=0 .. Sunday=6
    return d - timedelta(days=d.weekday())


def week_window(d: date):
    """Monday -> Sunday (inclusive) week containing ``d``."""
    start = monday_of_week(d)
    return start, start + timedelta(days=6)


def day_of_week(d: date) -> int:
    """Day number as stored on availability rows: 0 = Sunday .. 6 = Saturday."""
    return (d.weekday() + 1) % 7
