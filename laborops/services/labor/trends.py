"""Sales vs. labor series for dashboards."""
import math
from datetime import date
from typing import Iterable, Optional

from laborops.services.labor.hours import round_two
from laborops.utils.time_windows import bucket_key, determine_granularity


def _finite(value) -> float:
    if value is None:
        return 0.0
    value = float(value)
    return value if math.isfinite(value) else 0.0


def build_labor_trend(entries: Iterable, start: Optional[date], end: Optional[date]) -> list[dict]:
    """Bucket labor cost and sales by hour, day or week depending on the range length."""
    entries = list(entries)
    if not entries:
        return []

    granularity = determine_granularity(start, end)
    buckets: dict[str, dict] = {}
    for e in entries:
        key = bucket_key(e.date, granularity, e.start_time)
        bucket = buckets.setdefault(key, {"date": key, "sales": 0.0, "labor_cost": 0.0})
        bucket["sales"] += _finite(e.sales)
        bucket["labor_cost"] += _finite(e.labor_cost)

    return [
        {
            "date": key,
            "granularity": granularity,
            "sales": round_two(buckets[key]["sales"]),
            "labor_cost": round_two(buckets[key]["labor_cost"]),
        }
        for key in sorted(buckets)
    ]


def build_labor_vs_sales(entries: Iterable) -> list[dict]:
    return [
        {
            "entry_id": e.id,
            "date": e.date.isoformat(),
            "labor_cost": round_two(e.labor_cost),
            "sales": round_two(e.sales),
            "position": e.position,
        }
        for e in entries
    ]
