from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
from sqlalchemy.future import select
from datetime import date, datetime
from typing import Optional
import logging
import uuid

from laborops.core.constants import ScheduleStatus
from laborops.core.errors import ConflictError, NotFoundError
from laborops.models.schedule import Schedule
from laborops.models.shift import Shift
from laborops.schemas.scheduling import ScheduleCreate
from laborops.utils.timezones import week_window

log = logging.getLogger(__name__)


async def create_schedule(db: AsyncSession, data: ScheduleCreate):
    existing = await db.execute(
        select(Schedule.id).where(
            Schedule.location_id == data.location_id,
            Schedule.schedule_date == data.schedule_date,
        )
    )
    if existing.scalar_one_or_none():
        raise ConflictError(f"Schedule already exists for {data.schedule_date} at this location")

    week_start, week_end = week_window(data.schedule_date)
    schedule = Schedule(
        id=str(uuid.uuid4()),
        location_id=data.location_id,
        schedule_date=data.schedule_date,
        week_start=week_start,
        week_end=week_end,
        status=ScheduleStatus.DRAFT.value,
        notes=data.notes,
        created_by=data.created_by,
    )
    db.add(schedule)
    try:
        await db.commit()
    except IntegrityError:
        # lost a race with another create for the same day
        await db.rollback()
        raise ConflictError(f"Schedule already exists for {data.schedule_date} at this location")
    await db.refresh(schedule)

    log.info("schedule created: schedule=%s location=%s week=%s", schedule.id, schedule.location_id, week_start)
    return schedule


async def get_schedule(db: AsyncSession, schedule_id: str):
    """Schedule and its shifts, or None."""
    schedule = await db.get(Schedule, schedule_id)
    if not schedule:
        return None

    result = await db.execute(
        select(Shift)
        .where(Shift.schedule_id == schedule_id)
        .order_by(Shift.shift_date, Shift.start_time, Shift.id)
    )
    return {"schedule": schedule, "shifts": list(result.scalars().all())}


async def list_schedules(
    db: AsyncSession,
    location_id: str,
    week_start: Optional[date] = None,
    week_end: Optional[date] = None,
):
    query = select(Schedule).where(Schedule.location_id == location_id)
    if week_start:
        query = query.where(Schedule.week_start >= week_start)
    if week_end:
        query = query.where(Schedule.week_end <= week_end)

    result = await db.execute(query.order_by(Schedule.week_start.desc(), Schedule.schedule_date))
    return result.scalars().all()


async def publish_schedule(db: AsyncSession, schedule_id: str, published_by: str):
    schedule = await db.get(Schedule, schedule_id)
    if not schedule:
        raise NotFoundError.for_id("Schedule", schedule_id)

    schedule.status = ScheduleStatus.PUBLISHED.value
    schedule.published_by = published_by
    schedule.published_at = datetime.utcnow()
    await db.commit()
    await db.refresh(schedule)

    log.info("schedule published: schedule=%s by=%s", schedule_id, published_by)
    return schedule
