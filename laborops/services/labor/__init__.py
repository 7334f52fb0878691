"""Labor arithmetic: hours, cost, summaries."""
from laborops.services.labor.cost import coverage_by_position, labor_cost, summarize_labor
from laborops.services.labor.hours import (
    actual_hours,
    parse_clock_time,
    round_two,
    scheduled_hours,
    validate_time_range,
)

__all__ = [
    "actual_hours",
    "coverage_by_position",
    "labor_cost",
    "parse_clock_time",
    "round_two",
    "scheduled_hours",
    "summarize_labor",
    "validate_time_range",
]
