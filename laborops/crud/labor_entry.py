from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from typing import Optional
import logging
import uuid

from laborops.core.errors import InvalidInputError
from laborops.models.labor_entry import LaborEntry
from laborops.schemas.labor import LaborEntryCreate
from laborops.services.labor.cost import labor_cost, summarize_labor
from laborops.services.labor.hours import (
    actual_hours, scheduled_hours, validate_break_minutes, validate_time_range,
)
from laborops.services.scheduling.directory import EmployeeDirectory
from laborops.utils.timeclock_service import as_wall_clock
from laborops.utils.timezones import to_date

log = logging.getLogger(__name__)


async def create_entry(db: AsyncSession, data: LaborEntryCreate):
    start_t, end_t = validate_time_range(data.start_time, data.end_time)
    break_minutes = validate_break_minutes(data.break_minutes)

    if data.hourly_rate is not None:
        rate = float(data.hourly_rate)
    else:
        rate = await EmployeeDirectory(db).hourly_rate(data.user_id) or 0.0

    clock_in_at = as_wall_clock(data.clock_in_time)
    clock_out_at = as_wall_clock(data.clock_out_time)
    planned = scheduled_hours(start_t, end_t, break_minutes)
    worked = actual_hours(clock_in_at, clock_out_at, break_minutes)

    entry = LaborEntry(
        id=str(uuid.uuid4()),
        location_id=data.location_id,
        user_id=data.user_id,
        date=data.date,
        start_time=start_t,
        end_time=end_t,
        position=data.position,
        status=data.status,
        clock_in_time=clock_in_at,
        clock_out_time=clock_out_at,
        clock_in_location=data.clock_in_location,
        break_minutes=break_minutes,
        scheduled_hours=planned,
        actual_hours=worked,
        hourly_rate=rate,
        labor_cost=labor_cost(planned, worked, rate),
        approved_by=data.approved_by,
        notes=data.notes,
        actual_sales=data.actual_sales,
        projected_sales=data.projected_sales,
    )
    db.add(entry)
    await db.commit()
    await db.refresh(entry)

    log.info(
        "labor entry created: entry=%s location=%s user=%s date=%s hours=%s cost=%s",
        entry.id, entry.location_id, entry.user_id, entry.date, planned, entry.labor_cost,
    )
    return entry


async def get_entry(db: AsyncSession, entry_id: str) -> Optional[LaborEntry]:
    if not entry_id:
        return None
    return await db.get(LaborEntry, entry_id)


async def query_entries(
    db: AsyncSession,
    location_id: Optional[str] = None,
    user_id: Optional[str] = None,
    status: Optional[str] = None,
    start_date=None,
    end_date=None,
) -> list[LaborEntry]:
    start_date, end_date = to_date(start_date), to_date(end_date)
    if start_date and end_date and end_date < start_date:
        raise InvalidInputError("end_date cannot be before start_date")

    query = select(LaborEntry)
    if location_id:
        query = query.where(LaborEntry.location_id == str(location_id))
    if user_id:
        query = query.where(LaborEntry.user_id == str(user_id))
    if status:
        query = query.where(LaborEntry.status == status)
    if start_date:
        query = query.where(LaborEntry.date >= start_date)
    if end_date:
        query = query.where(LaborEntry.date <= end_date)

    result = await db.execute(query.order_by(LaborEntry.date, LaborEntry.start_time))
    return list(result.scalars().all())


async def list_entries(db: AsyncSession, **filters) -> dict:
    entries = await query_entries(db, **filters)
    return {"entries": entries, "labor_summary": summarize_labor(entries)}
