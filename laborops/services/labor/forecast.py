"""
Labor Forecast Service

Projects labor needs for a date from labor entries recorded on the same
weekday:
- hours baseline (actual hours when recorded, otherwise scheduled)
- a fixed buffer on top of the baseline
- average sales for that weekday
- per-position staffing split by historical share of scheduled hours
- a confidence label driven only by sample size
"""
import logging
import math
from datetime import date, timedelta
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from laborops.core.config import settings
from laborops.core.constants import ForecastConfidence
from laborops.models.labor_entry import LaborEntry
from laborops.services.labor.cost import coverage_by_position
from laborops.services.labor.hours import round_two
from laborops.utils.timezones import to_date

log = logging.getLogger(__name__)


def average(values) -> float:
    finite = [float(v) for v in values if v is not None and math.isfinite(float(v))]
    if not finite:
        return 0.0
    return sum(finite) / len(finite)


def resolve_confidence(sample_size: int) -> str:
    if sample_size >= 7:
        return ForecastConfidence.HIGH.value
    if sample_size >= 3:
        return ForecastConfidence.MEDIUM.value
    if sample_size >= 1:
        return ForecastConfidence.LOW.value
    return ForecastConfidence.INSUFFICIENT.value


def build_staffing_suggestions(coverage: dict, recommended_labor_hours: float) -> list[dict]:
    if not coverage:
        return []

    total_scheduled = sum(v["scheduled_hours"] or 0 for v in coverage.values())
    suggestions = []
    for position, value in coverage.items():
        weight = value["scheduled_hours"] / total_scheduled if total_scheduled else 0
        hours_for_position = round_two(recommended_labor_hours * weight)
        avg_shift_length = value["scheduled_hours"] / value["headcount"] if value["headcount"] else 0

        if avg_shift_length:
            headcount = max(1, math.floor(hours_for_position / avg_shift_length + 0.5))
        else:
            headcount = value["headcount"] or 1

        suggestions.append({
            "position": position,
            "hours": hours_for_position,
            "average_shift_length": round_two(avg_shift_length),
            "recommended_headcount": headcount,
        })
    return suggestions


class LaborForecaster:
    """Same-weekday forecast over a bounded window of history"""

    def __init__(self, db: AsyncSession, lookback_weeks: Optional[int] = None):
        self.db = db
        self.lookback_weeks = lookback_weeks or settings.forecast_lookback_weeks

    async def history_for(self, target: date, location_id: Optional[str] = None) -> list[LaborEntry]:
        window_start = target - timedelta(weeks=self.lookback_weeks)
        q = select(LaborEntry).where(
            LaborEntry.date >= window_start,
            LaborEntry.date < target,
        )
        if location_id:
            q = q.where(LaborEntry.location_id == str(location_id))

        result = await self.db.execute(q.order_by(LaborEntry.date, LaborEntry.start_time))
        weekday = target.weekday()
        return [e for e in result.scalars().all() if e.date.weekday() == weekday]

    async def generate_forecast(self, target_date=None, location_id: Optional[str] = None) -> dict:
        target = to_date(target_date) or date.today()
        matches = await self.history_for(target, location_id)

        sample_size = len(matches)
        avg_scheduled = average(e.scheduled_hours for e in matches)
        avg_actual = average(e.actual_hours for e in matches)
        baseline = avg_actual or avg_scheduled
        recommended = round_two(baseline * settings.forecast_buffer)

        sales = [e.sales if e.sales is not None and math.isfinite(e.sales) else 0 for e in matches]
        forecasted_sales = sum(sales) / sample_size if sample_size else 0

        coverage = coverage_by_position(matches)
        forecast = {
            "date": target.isoformat(),
            "location_id": str(location_id) if location_id else None,
            "historical_sample_size": sample_size,
            "forecasted_sales": round_two(forecasted_sales),
            "recommended_labor_hours": recommended,
            "suggested_staffing": build_staffing_suggestions(coverage, recommended),
            "confidence": resolve_confidence(sample_size),
        }
        log.info(
            "forecast: location=%s date=%s samples=%s hours=%s confidence=%s",
            location_id, forecast["date"], sample_size, recommended, forecast["confidence"],
        )
        return forecast
