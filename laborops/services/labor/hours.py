"""Time arithmetic for shifts.

Shift times are local wall-clock values on a single calendar day. A shift
that ends at or before it starts is rejected by ``validate_time_range``;
overnight shifts are not modelled.
"""
import math
from datetime import datetime, time
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Union

from laborops.core.errors import InvalidInputError

TimeLike = Union[str, time, None]
TimestampLike = Union[str, datetime, None]

_CLOCK_FORMATS = ("%H:%M", "%H:%M:%S")


def round_two(value) -> float:
    """Round half-up to 2 decimals; anything non-finite becomes 0."""
    if value is None:
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return float(Decimal(repr(number)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def parse_clock_time(value: TimeLike) -> Optional[time]:
    """Parse 'HH:MM' (or 'HH:MM:SS') into a time. Empty input gives None."""
    if value is None or value == "":
        return None
    if isinstance(value, time):
        return value
    if not isinstance(value, str):
        raise InvalidInputError(f"Invalid time value: {value!r}")

    s = value.strip()
    for fmt in _CLOCK_FORMATS:
        try:
            return datetime.strptime(s, fmt).time()
        except ValueError:
            continue
    raise InvalidInputError(f"Invalid time value: {value!r} (expected HH:MM)")


def parse_timestamp(value: TimestampLike) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        raise InvalidInputError(f"Invalid timestamp: {value!r}")


def validate_time_range(start: TimeLike, end: TimeLike) -> tuple[time, time]:
    start_t = parse_clock_time(start)
    end_t = parse_clock_time(end)
    if start_t is None or end_t is None:
        raise InvalidInputError("Both start and end times are required")
    if end_t <= start_t:
        raise InvalidInputError(
            f"Invalid start/end time range: {start_t:%H:%M}-{end_t:%H:%M} (end must be after start)"
        )
    return start_t, end_t


def validate_break_minutes(break_minutes) -> int:
    if break_minutes is None:
        return 0
    try:
        minutes = int(break_minutes)
    except (TypeError, ValueError):
        raise InvalidInputError(f"Invalid break duration: {break_minutes!r}")
    if minutes < 0:
        raise InvalidInputError("Break duration cannot be negative")
    return minutes


def _minutes_of_day(t: time) -> float:
    return t.hour * 60 + t.minute + t.second / 60


def scheduled_hours(start: TimeLike, end: TimeLike, break_minutes: int = 0) -> float:
    start_t = parse_clock_time(start)
    end_t = parse_clock_time(end)
    if start_t is None or end_t is None:
        return 0.0

    total_minutes = _minutes_of_day(end_t) - _minutes_of_day(start_t)
    hours = (total_minutes - (break_minutes or 0)) / 60
    return round_two(max(0.0, hours))


def actual_hours(clock_in: TimestampLike, clock_out: TimestampLike, break_minutes: int = 0) -> float:
    in_at = parse_timestamp(clock_in)
    out_at = parse_timestamp(clock_out)
    if in_at is None or out_at is None:
        return 0.0

    total_minutes = (out_at - in_at).total_seconds() / 60
    hours = (total_minutes - (break_minutes or 0)) / 60
    return round_two(max(0.0, hours))


def shifts_overlap(a_start: time, a_end: time, b_start: time, b_end: time) -> bool:
    # half-open [start, end)
    return a_start < b_end and a_end > b_start
