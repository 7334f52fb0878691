from datetime import datetime, timedelta, timezone
from sqlalchemy import select, and_
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
import logging

from laborops.core.config import settings
from laborops.core.constants import ShiftStatus
from laborops.core.errors import NotFoundError
from laborops.models.labor_entry import LaborEntry
from laborops.services.labor.cost import labor_cost
from laborops.services.labor.hours import actual_hours, parse_timestamp, validate_break_minutes

log = logging.getLogger(__name__)


def append_note(existing: Optional[str], addition: Optional[str]) -> str:
    trimmed = addition.strip() if isinstance(addition, str) else ""
    if not trimmed:
        return existing or ""
    if not existing:
        return trimmed
    return f"{existing}\n{trimmed}"


def as_wall_clock(value) -> Optional[datetime]:
    """Timestamps are stored naive; aware input is converted to UTC first."""
    ts = parse_timestamp(value)
    if ts is not None and ts.tzinfo is not None:
        ts = ts.astimezone(timezone.utc).replace(tzinfo=None)
    return ts


async def get_entry_or_404(db: AsyncSession, entry_id: str) -> LaborEntry:
    e = await db.get(LaborEntry, entry_id)
    if not e:
        raise NotFoundError.for_id("Labor entry", entry_id)
    return e


async def clock_in(
    db: AsyncSession,
    entry_id: str,
    timestamp=None,
    location: Optional[str] = None,
    break_minutes=None,
    notes: Optional[str] = None,
):
    e = await get_entry_or_404(db, entry_id)

    e.clock_in_time = as_wall_clock(timestamp) or datetime.utcnow()
    e.clock_in_location = location or e.clock_in_location
    if break_minutes is not None:
        e.break_minutes = validate_break_minutes(break_minutes)
    e.status = ShiftStatus.IN_PROGRESS.value
    e.notes = append_note(e.notes, notes)

    await db.flush()
    log.info("clock_in: location=%s user=%s entry=%s at=%s", e.location_id, e.user_id, e.id, e.clock_in_time)
    return e


async def clock_out(
    db: AsyncSession,
    entry_id: str,
    timestamp=None,
    break_minutes=None,
    notes: Optional[str] = None,
):
    e = await get_entry_or_404(db, entry_id)

    out_at = as_wall_clock(timestamp) or datetime.utcnow()
    if e.clock_in_time is None:
        # never clocked in: zero-length entry rather than a guess
        log.warning("clock_out with no clock_in: location=%s user=%s entry=%s", e.location_id, e.user_id, e.id)
        e.clock_in_time = out_at
    if break_minutes is not None:
        e.break_minutes = validate_break_minutes(break_minutes)

    e.clock_out_time = out_at
    e.actual_hours = actual_hours(e.clock_in_time, e.clock_out_time, e.break_minutes)
    e.labor_cost = labor_cost(e.scheduled_hours, e.actual_hours, e.hourly_rate)
    e.status = ShiftStatus.COMPLETED.value
    e.notes = append_note(e.notes, notes)

    await db.flush()
    log.info(
        "clock_out: location=%s user=%s entry=%s hours=%s cost=%s",
        e.location_id, e.user_id, e.id, e.actual_hours, e.labor_cost,
    )
    return e


async def autoclose_stale_entries(db: AsyncSession, location_id: Optional[str] = None, max_hours: Optional[int] = None):
    """Close in-progress entries clocked in more than max_hours ago."""
    max_hours = max_hours or settings.stale_clock_in_hours
    now = datetime.utcnow()
    cutoff = now - timedelta(hours=max_hours)

    conditions = [
        LaborEntry.status == ShiftStatus.IN_PROGRESS.value,
        LaborEntry.clock_out_time.is_(None),
        LaborEntry.clock_in_time < cutoff,
    ]
    if location_id:
        conditions.append(LaborEntry.location_id == location_id)

    res = await db.execute(select(LaborEntry).where(and_(*conditions)))
    entries = res.scalars().all()

    count = 0
    for e in entries:
        e.clock_out_time = now
        e.actual_hours = actual_hours(e.clock_in_time, e.clock_out_time, e.break_minutes)
        e.labor_cost = labor_cost(e.scheduled_hours, e.actual_hours, e.hourly_rate)
        e.status = ShiftStatus.COMPLETED.value
        e.notes = append_note(e.notes, "auto-closed (stale)")
        count += 1

    if count:
        await db.flush()
        log.warning("autoclosed %s stale entries for location=%s", count, location_id)
    return count
