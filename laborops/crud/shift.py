from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from datetime import date, datetime
from itertools import combinations
from typing import Optional
import logging
import uuid

from laborops.core.constants import INACTIVE_SHIFT_STATUSES, ShiftStatus
from laborops.core.errors import ConflictError, InvalidInputError, NotFoundError
from laborops.models.schedule import Schedule
from laborops.models.shift import Shift
from laborops.schemas.scheduling import ShiftCreate
from laborops.services.labor.cost import summarize_labor
from laborops.services.labor.hours import (
    actual_hours, round_two, scheduled_hours, shifts_overlap,
    validate_break_minutes, validate_time_range,
)
from laborops.services.scheduling.auto_assign import apply_assignment
from laborops.services.scheduling.availability import AvailabilityResolver
from laborops.services.scheduling.directory import EmployeeDirectory
from laborops.utils.timeclock_service import append_note, as_wall_clock
from laborops.utils.timezones import to_date, week_window

log = logging.getLogger(__name__)

SHIFT_STATUSES = {s.value for s in ShiftStatus}


async def get_shift(db: AsyncSession, shift_id: str) -> Optional[Shift]:
    return await db.get(Shift, shift_id)


async def _require_shift(db: AsyncSession, shift_id: str) -> Shift:
    shift = await get_shift(db, shift_id)
    if not shift:
        raise NotFoundError.for_id("Shift", shift_id)
    return shift


async def _check_assignable(db: AsyncSession, shift: Shift, user_id: str) -> None:
    """The employee must exist and be free (no overlapping shift, no approved time off)."""
    await EmployeeDirectory(db).require(user_id)
    await AvailabilityResolver(db).ensure_assignable(user_id, shift)


async def create_shift(db: AsyncSession, data: ShiftCreate):
    start_t, end_t = validate_time_range(data.start_time, data.end_time)
    break_minutes = validate_break_minutes(data.break_minutes)

    schedule = await db.get(Schedule, data.schedule_id)
    if not schedule:
        raise NotFoundError.for_id("Schedule", data.schedule_id)

    hours = scheduled_hours(start_t, end_t, break_minutes)
    shift = Shift(
        id=str(uuid.uuid4()),
        schedule_id=schedule.id,
        location_id=schedule.location_id,
        user_id=None,
        position=data.position,
        shift_date=data.shift_date,
        start_time=start_t,
        end_time=end_t,
        break_minutes=break_minutes,
        total_hours=hours,
        status=ShiftStatus.SCHEDULED.value,
        requires_coverage=data.user_id is None,
        notes=data.notes,
    )
    if data.user_id:
        await _check_assignable(db, shift, data.user_id)
        apply_assignment(shift, data.user_id, await EmployeeDirectory(db).hourly_rate(data.user_id))

    db.add(shift)
    await db.commit()
    await db.refresh(shift)

    log.info(
        "shift created: shift=%s schedule=%s date=%s %s-%s user=%s hours=%s",
        shift.id, shift.schedule_id, shift.shift_date, start_t, end_t, shift.user_id, hours,
    )
    return shift


async def assign_shift(db: AsyncSession, shift_id: str, user_id: str):
    shift = await _require_shift(db, shift_id)
    if shift.status in INACTIVE_SHIFT_STATUSES:
        raise ConflictError(f"Cannot assign a {shift.status} shift")

    await _check_assignable(db, shift, user_id)
    apply_assignment(shift, user_id, await EmployeeDirectory(db).hourly_rate(user_id))
    await db.commit()
    await db.refresh(shift)

    log.info("shift assigned: shift=%s user=%s rate=%s cost=%s", shift_id, user_id, shift.hourly_rate, shift.estimated_cost)
    return shift


async def update_shift_status(
    db: AsyncSession,
    shift_id: str,
    status: str,
    user_id: Optional[str] = None,
    notes: Optional[str] = None,
):
    """Set a shift's status. With ``user_id`` only that employee's shift is touched.

    ``notes`` is appended to the shift's existing notes.
    """
    if status not in SHIFT_STATUSES:
        raise InvalidInputError(f"Invalid shift status: {status}")

    shift = await _require_shift(db, shift_id)
    if user_id and shift.user_id != user_id:
        raise NotFoundError(f"Shift {shift_id} not found for employee {user_id}")

    shift.status = status
    if notes:
        shift.notes = append_note(shift.notes, notes)
    await db.commit()
    await db.refresh(shift)

    log.info("shift status: shift=%s status=%s by=%s", shift_id, status, user_id)
    return shift


async def cancel_shift(db: AsyncSession, shift_id: str):
    return await update_shift_status(db, shift_id, ShiftStatus.CANCELLED.value)


async def clock_in_shift(db: AsyncSession, shift_id: str, timestamp=None):
    shift = await _require_shift(db, shift_id)
    if shift.status in INACTIVE_SHIFT_STATUSES:
        raise ConflictError(f"Cannot clock in to a {shift.status} shift")

    shift.clock_in_at = as_wall_clock(timestamp) or datetime.utcnow()
    shift.status = ShiftStatus.IN_PROGRESS.value
    await db.commit()
    await db.refresh(shift)

    log.info("shift clock_in: shift=%s user=%s at=%s", shift_id, shift.user_id, shift.clock_in_at)
    return shift


async def clock_out_shift(db: AsyncSession, shift_id: str, timestamp=None):
    shift = await _require_shift(db, shift_id)

    out_at = as_wall_clock(timestamp) or datetime.utcnow()
    if shift.clock_in_at is None:
        shift.clock_in_at = out_at
    shift.clock_out_at = out_at
    shift.actual_hours = actual_hours(shift.clock_in_at, out_at, shift.break_minutes)
    shift.status = ShiftStatus.COMPLETED.value
    await db.commit()
    await db.refresh(shift)

    log.info("shift clock_out: shift=%s user=%s hours=%s", shift_id, shift.user_id, shift.actual_hours)
    return shift


async def get_employee_shifts(db: AsyncSession, user_id: str, start_date, end_date):
    start_date, end_date = to_date(start_date), to_date(end_date)
    if not start_date or not end_date:
        raise InvalidInputError("start_date and end_date are required")
    if end_date < start_date:
        raise InvalidInputError("end_date cannot be before start_date")

    result = await db.execute(
        select(Shift)
        .where(
            Shift.user_id == user_id,
            Shift.shift_date >= start_date,
            Shift.shift_date <= end_date,
        )
        .order_by(Shift.shift_date, Shift.start_time)
    )
    return result.scalars().all()


async def get_schedule_conflicts(db: AsyncSession, schedule_id: str) -> list[dict]:
    """Double bookings inside a schedule, plus assigned shifts that fall on approved time off."""
    if not await db.get(Schedule, schedule_id):
        raise NotFoundError.for_id("Schedule", schedule_id)

    result = await db.execute(
        select(Shift)
        .where(
            Shift.schedule_id == schedule_id,
            Shift.user_id.is_not(None),
            Shift.status.not_in(INACTIVE_SHIFT_STATUSES),
        )
        .order_by(Shift.shift_date, Shift.start_time, Shift.id)
    )
    shifts = list(result.scalars().all())

    by_day: dict[tuple, list[Shift]] = {}
    for s in shifts:
        by_day.setdefault((s.user_id, s.shift_date), []).append(s)

    conflicts = []
    for (user_id, shift_date), day_shifts in by_day.items():
        for a, b in combinations(day_shifts, 2):
            if shifts_overlap(a.start_time, a.end_time, b.start_time, b.end_time):
                conflicts.append({
                    "conflict_type": "overlap",
                    "user_id": user_id,
                    "shift_date": shift_date,
                    "shift1_id": a.id,
                    "shift2_id": b.id,
                    "time_off_id": None,
                })

    resolver = AvailabilityResolver(db)
    for s in shifts:
        for request in await resolver.approved_time_off(s.user_id, s.shift_date):
            conflicts.append({
                "conflict_type": "time_off",
                "user_id": s.user_id,
                "shift_date": s.shift_date,
                "shift1_id": s.id,
                "shift2_id": None,
                "time_off_id": request.id,
            })

    conflicts.sort(key=lambda c: (c["shift_date"], c["user_id"], c["shift1_id"]))
    return conflicts


async def get_weekly_summary(db: AsyncSession, location_id: str, week_of) -> dict:
    week_start, week_end = week_window(to_date(week_of) or date.today())

    result = await db.execute(
        select(Shift)
        .where(
            Shift.location_id == location_id,
            Shift.shift_date >= week_start,
            Shift.shift_date <= week_end,
            Shift.status != ShiftStatus.CANCELLED.value,
        )
        .order_by(Shift.shift_date, Shift.start_time)
    )
    shifts = list(result.scalars().all())

    summary = summarize_labor(shifts)
    summary.update({
        "week_start": week_start,
        "week_end": week_end,
        "unique_employees": len({s.user_id for s in shifts if s.user_id}),
        "uncovered_shifts": sum(1 for s in shifts if s.user_id is None or s.requires_coverage),
        "confirmed_shifts": sum(1 for s in shifts if s.status == ShiftStatus.CONFIRMED.value),
        "declined_shifts": sum(1 for s in shifts if s.status == ShiftStatus.DECLINED.value),
    })
    # planned cost of the week, even before anyone clocks in
    summary["estimated_cost"] = round_two(sum(s.estimated_cost or 0 for s in shifts))
    return summary
