from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from typing import Optional
import logging
import uuid

from laborops.core.constants import ShiftStatus
from laborops.core.errors import InvalidInputError, NotFoundError
from laborops.db import transaction
from laborops.models.schedule import Schedule, ScheduleTemplate, TemplateShift
from laborops.models.shift import Shift
from laborops.schemas.scheduling import TemplateCreate
from laborops.services.labor.hours import scheduled_hours, validate_time_range
from laborops.utils.timezones import to_date

log = logging.getLogger(__name__)


async def _template_shifts(db: AsyncSession, template_id: str):
    result = await db.execute(
        select(TemplateShift)
        .where(TemplateShift.template_id == template_id)
        .order_by(TemplateShift.start_time, TemplateShift.position)
    )
    return list(result.scalars().all())


async def create_template(db: AsyncSession, data: TemplateCreate):
    """Create a template and its shift slots together."""
    slots = []
    for s in data.shifts:
        start_t, end_t = validate_time_range(s.start_time, s.end_time)
        slots.append((s, start_t, end_t))

    async with transaction(db, "template create"):
        template = ScheduleTemplate(
            id=str(uuid.uuid4()),
            location_id=data.location_id,
            name=data.name,
            description=data.description,
            day_of_week=data.day_of_week,
            is_active=True,
            created_by=data.created_by,
        )
        db.add(template)
        await db.flush()

        for s, start_t, end_t in slots:
            db.add(TemplateShift(
                id=str(uuid.uuid4()),
                template_id=template.id,
                position=s.position,
                start_time=start_t,
                end_time=end_t,
                required_count=s.required_count,
                notes=s.notes,
            ))

    log.info("template created: template=%s location=%s slots=%s", template.id, data.location_id, len(slots))
    return await get_template(db, template.id)


async def get_template(db: AsyncSession, template_id: str):
    template = await db.get(ScheduleTemplate, template_id)
    if not template:
        return None
    return {"template": template, "shifts": await _template_shifts(db, template_id)}


async def list_templates(db: AsyncSession, location_id: str, active_only: bool = True):
    query = select(ScheduleTemplate).where(ScheduleTemplate.location_id == location_id)
    if active_only:
        query = query.where(ScheduleTemplate.is_active == True)  # noqa: E712

    result = await db.execute(query.order_by(ScheduleTemplate.name))
    return [
        {"template": t, "shifts": await _template_shifts(db, t.id)}
        for t in result.scalars().all()
    ]


async def generate_from_template(db: AsyncSession, template_id: str, schedule_id: str, shift_date):
    """Create ``required_count`` open shifts per template slot on ``shift_date``."""
    shift_date = to_date(shift_date)
    if shift_date is None:
        raise InvalidInputError("shift_date is required")

    template = await db.get(ScheduleTemplate, template_id)
    if not template:
        raise NotFoundError.for_id("Template", template_id)
    schedule = await db.get(Schedule, schedule_id)
    if not schedule:
        raise NotFoundError.for_id("Schedule", schedule_id)

    created = []
    async with transaction(db, "template generate"):
        for slot in await _template_shifts(db, template_id):
            hours = scheduled_hours(slot.start_time, slot.end_time)
            for _ in range(slot.required_count or 1):
                shift = Shift(
                    id=str(uuid.uuid4()),
                    schedule_id=schedule.id,
                    location_id=schedule.location_id,
                    user_id=None,
                    position=slot.position,
                    shift_date=shift_date,
                    start_time=slot.start_time,
                    end_time=slot.end_time,
                    break_minutes=0,
                    total_hours=hours,
                    status=ShiftStatus.SCHEDULED.value,
                    requires_coverage=True,
                    notes=slot.notes,
                )
                db.add(shift)
                created.append(shift)

    for shift in created:
        await db.refresh(shift)

    log.info(
        "template generated: template=%s schedule=%s date=%s shifts=%s",
        template_id, schedule_id, shift_date, len(created),
    )
    return created
