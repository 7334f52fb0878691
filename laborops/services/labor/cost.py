"""Labor cost and summary rollups.

``summarize_labor`` works on any "labor line": an object exposing
``scheduled_hours``, ``actual_hours``, ``labor_cost``, ``position`` and
``status``, and optionally ``sales``. Both ``Shift`` and ``LaborEntry`` rows
qualify.
"""
import math
from typing import Iterable, Optional

from laborops.core.config import settings
from laborops.services.labor.hours import round_two


def labor_cost(scheduled_hours, actual_hours, hourly_rate) -> float:
    """Cost of one shift: actual hours when recorded, otherwise the plan."""
    if not hourly_rate:
        return 0.0
    hours = actual_hours or scheduled_hours or 0
    return round_two(hours * hourly_rate)


def coverage_by_position(lines: Iterable) -> dict:
    coverage = {}
    for line in lines:
        position = getattr(line, "position", None)
        if not position:
            continue
        bucket = coverage.setdefault(position, {"scheduled_hours": 0.0, "actual_hours": 0.0, "headcount": 0})
        bucket["scheduled_hours"] += float(line.scheduled_hours or 0)
        bucket["actual_hours"] += float(line.actual_hours or 0)
        bucket["headcount"] += 1

    return {
        position: {
            "scheduled_hours": round_two(values["scheduled_hours"]),
            "actual_hours": round_two(values["actual_hours"]),
            "headcount": values["headcount"],
        }
        for position, values in coverage.items()
    }


def empty_summary() -> dict:
    return {
        "total_shifts": 0,
        "scheduled_hours": 0.0,
        "actual_hours": 0.0,
        "total_hours": 0.0,
        "total_cost": 0.0,
        "labor_percent": None,
        "overtime_hours": 0.0,
        "open_shifts": 0,
        "coverage_by_position": {},
    }


def summarize_labor(lines: Iterable, total_sales: Optional[float] = None) -> dict:
    """Roll a set of labor lines up into hours, cost, overtime and coverage.

    Overtime is daily: any actual hours beyond the per-shift threshold.
    ``labor_percent`` is cost over sales; it stays ``None`` when there are
    no sales to divide by. When ``total_sales`` is not given it is summed from
    each line's ``sales``.
    """
    lines = list(lines)
    if not lines:
        return empty_summary()

    threshold = settings.overtime_threshold_hours
    scheduled = actual = cost = overtime = 0.0
    sales_sum = 0.0

    for line in lines:
        line_scheduled = float(line.scheduled_hours or 0)
        line_actual = float(line.actual_hours or 0)

        scheduled += line_scheduled
        actual += line_actual
        cost += float(line.labor_cost or 0)

        if line_actual > threshold:
            overtime += line_actual - threshold

        sales = getattr(line, "sales", None)
        if sales is not None and math.isfinite(sales):
            sales_sum += sales

    if total_sales is None:
        total_sales = sales_sum

    labor_percent = round_two(cost / total_sales * 100) if total_sales else None

    return {
        "total_shifts": len(lines),
        "scheduled_hours": round_two(scheduled),
        "actual_hours": round_two(actual),
        "total_hours": round_two(actual or scheduled),
        "total_cost": round_two(cost),
        "labor_percent": labor_percent,
        "overtime_hours": round_two(overtime),
        "open_shifts": sum(1 for line in lines if line.status == "open"),
        "coverage_by_position": coverage_by_position(lines),
    }
