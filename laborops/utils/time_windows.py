from datetime import date, datetime, time, timedelta
from typing import Optional
import re

from laborops.utils.timezones import monday_of_week


def parse_since(since: Optional[str], today: Optional[date] = None) -> date:
    """
    Accepts '24h', '7d', '12w', 'YYYY-MM-DD', or None.
    Returns a date lower bound; defaults to the last 7 days.
    """
    today = today or date.today()
    if not since or since.strip().lower() in {"all", "any"}:
        return today - timedelta(days=7)

    s = since.strip().lower()
    if re.fullmatch(r"\d{4}-\d{2}-\d{2}", s):
        return date.fromisoformat(s)

    m = re.fullmatch(r"(\d+)([hdw])", s)
    if m:
        n, unit = int(m.group(1)), m.group(2)
        if unit == "h":
            return (datetime.combine(today, time.min) - timedelta(hours=n)).date()
        if unit == "d":
            return today - timedelta(days=n)
        if unit == "w":
            return today - timedelta(weeks=n)

    return today - timedelta(days=7)


def determine_granularity(start: Optional[date], end: Optional[date]) -> str:
    """hour for ranges up to 2 days, day up to 90 days, week beyond."""
    if not start or not end:
        return "day"

    span = end - start
    if span <= timedelta(days=2):
        return "hour"
    if span <= timedelta(days=90):
        return "day"
    return "week"


def bucket_key(day: date, granularity: str, at: Optional[time] = None) -> str:
    if granularity == "hour":
        hour = at.hour if at else 0
        return f"{day.isoformat()}T{hour:02d}:00:00"
    if granularity == "week":
        return monday_of_week(day).isoformat()
    return day.isoformat()
