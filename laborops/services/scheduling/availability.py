"""Who can work a given shift window.

An active employee is eligible for ``(date, start, end)`` when all of these hold:

1. one of their availability rows for that weekday fully contains the window
   and is in effect on that date,
2. none of their live shifts that day overlaps the window (half-open),
3. no approved time-off request covers the date.

Eligible employees come back preferred-availability first, then by fewest
hours already scheduled in the Monday-aligned week, then by id, so repeated
runs over the same data give the same answer.
"""
import logging
from dataclasses import dataclass
from datetime import date, time
from typing import Iterable, Optional

from sqlalchemy import and_, case, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from laborops.core.constants import INACTIVE_SHIFT_STATUSES, TimeOffStatus
from laborops.core.errors import ConflictError
from laborops.models.availability import EmployeeAvailability
from laborops.models.shift import Shift
from laborops.models.time_off import TimeOffRequest
from laborops.models.user import User
from laborops.services.labor.hours import parse_clock_time, validate_time_range
from laborops.utils.timezones import day_of_week, to_date, week_window

log = logging.getLogger(__name__)


@dataclass
class Candidate:
    user_id: str
    name: str
    is_preferred: bool
    week_hours: float

    def sort_key(self):
        return (not self.is_preferred, self.week_hours, self.user_id)


@dataclass
class Conflicts:
    shifts: list
    time_off: list

    @property
    def count(self) -> int:
        return len(self.shifts) + len(self.time_off)


class AvailabilityResolver:
    def __init__(self, db: AsyncSession):
        self.db = db

    # ---------- conflict checks ----------
    async def overlapping_shifts(
        self,
        user_id: str,
        shift_date: date,
        start_time: time,
        end_time: time,
        exclude_shift_ids: Iterable[str] = (),
    ) -> list[Shift]:
        # Overlap logic: (A_start < B_end) AND (A_end > B_start)
        q = select(Shift).where(
            Shift.user_id == user_id,
            Shift.shift_date == shift_date,
            Shift.start_time < end_time,
            Shift.end_time > start_time,
            Shift.status.not_in(INACTIVE_SHIFT_STATUSES),
        )
        excluded = [sid for sid in exclude_shift_ids if sid]
        if excluded:
            q = q.where(Shift.id.not_in(excluded))

        result = await self.db.execute(q.order_by(Shift.start_time))
        return list(result.scalars().all())

    async def approved_time_off(self, user_id: str, on_date: date) -> list[TimeOffRequest]:
        result = await self.db.execute(
            select(TimeOffRequest).where(
                TimeOffRequest.user_id == user_id,
                TimeOffRequest.status == TimeOffStatus.APPROVED.value,
                TimeOffRequest.start_date <= on_date,
                TimeOffRequest.end_date >= on_date,
            )
        )
        return list(result.scalars().all())

    async def conflicts_for(
        self,
        user_id: str,
        shift_date,
        start_time,
        end_time,
        exclude_shift_id: Optional[str] = None,
        also_exclude: Iterable[str] = (),
    ) -> Conflicts:
        """Live overlapping shifts and approved time off for one employee.

        ``also_exclude`` names shifts the employee is about to give up (the
        other half of a swap), which must not count against them.
        """
        shift_date = to_date(shift_date)
        start_t = parse_clock_time(start_time)
        end_t = parse_clock_time(end_time)
        excluded = [exclude_shift_id, *also_exclude]
        return Conflicts(
            shifts=await self.overlapping_shifts(user_id, shift_date, start_t, end_t, excluded),
            time_off=await self.approved_time_off(user_id, shift_date),
        )

    async def ensure_assignable(self, user_id: str, shift, also_exclude: Iterable[str] = ()) -> None:
        """Raise ConflictError when ``user_id`` cannot take ``shift``.

        ``shift`` may be a persisted row or one not yet added to the session.
        """
        conflicts = await self.conflicts_for(
            user_id, shift.shift_date, shift.start_time, shift.end_time,
            exclude_shift_id=shift.id, also_exclude=also_exclude,
        )
        if conflicts.count:
            log.warning("assign refused: shift=%s user=%s conflicts=%s", shift.id, user_id, conflicts.count)
            raise ConflictError(f"Cannot assign shift: {conflicts.count} conflict(s) detected")

    # ---------- eligibility ----------
    async def candidates(
        self,
        shift_date,
        start_time,
        end_time,
        location_id: Optional[str] = None,
        exclude_shift_id: Optional[str] = None,
    ) -> list[Candidate]:
        shift_date = to_date(shift_date)
        start_t, end_t = validate_time_range(start_time, end_time)
        dow = day_of_week(shift_date)

        # 1. declared availability containing the whole window
        avail_q = (
            select(
                User.id,
                User.name,
                func.max(case((EmployeeAvailability.is_preferred == True, 1), else_=0)).label("is_preferred"),  # noqa: E712
            )
            .join(EmployeeAvailability, EmployeeAvailability.user_id == User.id)
            .where(
                User.is_active == True,  # noqa: E712
                EmployeeAvailability.day_of_week == dow,
                EmployeeAvailability.start_time <= start_t,
                EmployeeAvailability.end_time >= end_t,
                or_(EmployeeAvailability.effective_date.is_(None), EmployeeAvailability.effective_date <= shift_date),
                or_(EmployeeAvailability.expiration_date.is_(None), EmployeeAvailability.expiration_date >= shift_date),
            )
            .group_by(User.id, User.name)
        )
        if location_id:
            avail_q = avail_q.where(EmployeeAvailability.location_id == location_id)

        rows = (await self.db.execute(avail_q)).all()
        if not rows:
            return []
        user_ids = [r.id for r in rows]

        # 2. already working an overlapping shift that day
        busy_q = select(Shift.user_id).where(
            Shift.user_id.in_(user_ids),
            Shift.shift_date == shift_date,
            Shift.start_time < end_t,
            Shift.end_time > start_t,
            Shift.status.not_in(INACTIVE_SHIFT_STATUSES),
        )
        if exclude_shift_id:
            busy_q = busy_q.where(Shift.id != exclude_shift_id)
        busy = set((await self.db.execute(busy_q)).scalars().all())

        # 3. approved time off covering the date
        away_q = select(TimeOffRequest.user_id).where(
            TimeOffRequest.user_id.in_(user_ids),
            TimeOffRequest.status == TimeOffStatus.APPROVED.value,
            TimeOffRequest.start_date <= shift_date,
            TimeOffRequest.end_date >= shift_date,
        )
        away = set((await self.db.execute(away_q)).scalars().all())

        free_ids = [uid for uid in user_ids if uid not in busy and uid not in away]
        week_hours = await self._week_hours(free_ids, shift_date)

        candidates = [
            Candidate(
                user_id=r.id,
                name=r.name,
                is_preferred=bool(r.is_preferred),
                week_hours=week_hours.get(r.id, 0.0),
            )
            for r in rows
            if r.id in free_ids
        ]
        candidates.sort(key=Candidate.sort_key)

        log.debug(
            "eligibility: date=%s window=%s-%s available=%s busy=%s away=%s eligible=%s",
            shift_date, start_t, end_t, len(rows), len(busy), len(away), len(candidates),
        )
        return candidates

    async def find_eligible_employees(
        self,
        shift_date,
        start_time,
        end_time,
        location_id: Optional[str] = None,
        exclude_shift_id: Optional[str] = None,
    ) -> list[str]:
        candidates = await self.candidates(shift_date, start_time, end_time, location_id, exclude_shift_id)
        return [c.user_id for c in candidates]

    async def _week_hours(self, user_ids: list[str], on_date: date) -> dict[str, float]:
        if not user_ids:
            return {}
        week_start, week_end = week_window(on_date)
        result = await self.db.execute(
            select(Shift.user_id, func.coalesce(func.sum(Shift.total_hours), 0))
            .where(
                and_(
                    Shift.user_id.in_(user_ids),
                    Shift.shift_date >= week_start,
                    Shift.shift_date <= week_end,
                    Shift.status.not_in(INACTIVE_SHIFT_STATUSES),
                )
            )
            .group_by(Shift.user_id)
        )
        return {uid: float(hours or 0) for uid, hours in result.all()}
