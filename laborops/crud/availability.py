from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import or_
from datetime import date
from typing import Optional
import logging
import uuid

from laborops.core.errors import InvalidInputError, NotFoundError
from laborops.models.availability import EmployeeAvailability
from laborops.schemas.scheduling import AvailabilityCreate
from laborops.services.labor.hours import validate_time_range

log = logging.getLogger(__name__)


async def set_availability(db: AsyncSession, data: AvailabilityCreate):
    start_t, end_t = validate_time_range(data.start_time, data.end_time)
    if data.effective_date and data.expiration_date and data.expiration_date < data.effective_date:
        raise InvalidInputError("expiration_date cannot be before effective_date")

    row = EmployeeAvailability(
        id=str(uuid.uuid4()),
        user_id=data.user_id,
        location_id=data.location_id,
        day_of_week=data.day_of_week,
        start_time=start_t,
        end_time=end_t,
        is_preferred=data.is_preferred,
        effective_date=data.effective_date,
        expiration_date=data.expiration_date,
        notes=data.notes,
    )
    db.add(row)
    await db.commit()
    await db.refresh(row)

    log.info(
        "availability set: user=%s dow=%s %s-%s preferred=%s",
        row.user_id, row.day_of_week, start_t, end_t, row.is_preferred,
    )
    return row


async def get_availability(
    db: AsyncSession,
    user_id: str,
    location_id: Optional[str] = None,
    as_of: Optional[date] = None,
):
    """Current availability windows for an employee (expired rows skipped)."""
    as_of = as_of or date.today()
    query = select(EmployeeAvailability).where(
        EmployeeAvailability.user_id == user_id,
        or_(EmployeeAvailability.expiration_date.is_(None), EmployeeAvailability.expiration_date >= as_of),
    )
    if location_id:
        query = query.where(EmployeeAvailability.location_id == location_id)

    result = await db.execute(query.order_by(EmployeeAvailability.day_of_week, EmployeeAvailability.start_time))
    return result.scalars().all()


async def delete_availability(db: AsyncSession, availability_id: str):
    row = await db.get(EmployeeAvailability, availability_id)
    if not row:
        raise NotFoundError.for_id("Availability", availability_id)

    await db.delete(row)
    await db.commit()
    log.info("availability deleted: availability=%s user=%s", availability_id, row.user_id)
    return row
