"""
Auto-assignment of open shifts.

Greedy, single pass, no backtracking. Open shifts (no employee, status
``scheduled``) are visited in (date, start) order; each goes to the best
eligible employee at that moment. Every assignment is flushed before the next
shift is resolved, so an employee picked for an earlier shift is seen as busy
for an overlapping later one. The pass is one transaction: if any write fails,
nothing is kept.
"""
import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from laborops.core.constants import ShiftStatus
from laborops.core.errors import NotFoundError
from laborops.db import transaction
from laborops.models.schedule import Schedule
from laborops.models.shift import Shift
from laborops.services.labor.hours import round_two
from laborops.services.scheduling.availability import AvailabilityResolver
from laborops.services.scheduling.directory import EmployeeDirectory

log = logging.getLogger(__name__)


def apply_assignment(shift: Shift, user_id: str, hourly_rate: Optional[float]) -> Shift:
    shift.user_id = user_id
    shift.hourly_rate = hourly_rate
    # unknown rate means unknown cost, not a free shift
    if hourly_rate is None:
        shift.estimated_cost = None
    else:
        shift.estimated_cost = round_two((shift.total_hours or 0) * hourly_rate)
    shift.requires_coverage = False
    return shift


class AutoAssigner:
    """Fills the open shifts of one schedule"""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.resolver = AvailabilityResolver(db)
        self.directory = EmployeeDirectory(db)

    async def auto_assign(self, schedule_id: str) -> dict:
        schedule = await self.db.get(Schedule, schedule_id)
        if not schedule:
            raise NotFoundError.for_id("Schedule", schedule_id)

        assignments = []
        async with transaction(self.db, "auto-assign"):
            result = await self.db.execute(
                select(Shift)
                .where(
                    Shift.schedule_id == schedule_id,
                    Shift.user_id.is_(None),
                    Shift.status == ShiftStatus.SCHEDULED.value,
                )
                .order_by(Shift.shift_date, Shift.start_time, Shift.id)
            )
            unassigned = list(result.scalars().all())

            for shift in unassigned:
                candidates = await self.resolver.candidates(
                    shift.shift_date,
                    shift.start_time,
                    shift.end_time,
                    location_id=shift.location_id,
                    exclude_shift_id=shift.id,
                )
                if not candidates:
                    log.info("auto_assign: no candidate for shift=%s %s %s-%s",
                             shift.id, shift.shift_date, shift.start_time, shift.end_time)
                    continue

                best = candidates[0]
                apply_assignment(shift, best.user_id, await self.directory.hourly_rate(best.user_id))
                # later shifts in this pass must see this one as taken
                await self.db.flush()

                assignments.append({
                    "shift_id": shift.id,
                    "employee_id": best.user_id,
                    "employee_name": best.name,
                })

        report = {
            "total_unassigned": len(unassigned),
            "assigned": len(assignments),
            "remaining": len(unassigned) - len(assignments),
            "assignments": assignments,
        }
        log.info(
            "auto_assign: schedule=%s total=%s assigned=%s remaining=%s",
            schedule_id, report["total_unassigned"], report["assigned"], report["remaining"],
        )
        return report
