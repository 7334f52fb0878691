from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import aliased
from datetime import datetime
from typing import Optional
import logging
import uuid

from laborops.core.constants import TimeOffStatus, TimeOffType
from laborops.core.errors import ConflictError, InvalidInputError, NotFoundError
from laborops.models.time_off import TimeOffRequest
from laborops.models.user import User
from laborops.schemas.scheduling import TimeOffCreate

log = logging.getLogger(__name__)

REVIEW_OUTCOMES = (TimeOffStatus.APPROVED.value, TimeOffStatus.DENIED.value)


async def request_time_off(db: AsyncSession, data: TimeOffCreate):
    if data.request_type not in {t.value for t in TimeOffType}:
        raise InvalidInputError(f"Invalid time-off type: {data.request_type}")
    if data.end_date < data.start_date:
        raise InvalidInputError("end_date cannot be before start_date")

    request = TimeOffRequest(
        id=str(uuid.uuid4()),
        user_id=data.user_id,
        location_id=data.location_id,
        request_type=data.request_type,
        start_date=data.start_date,
        end_date=data.end_date,
        total_days=(data.end_date - data.start_date).days + 1,
        reason=data.reason,
        status=TimeOffStatus.PENDING.value,
    )
    db.add(request)
    await db.commit()
    await db.refresh(request)

    log.info(
        "time off requested: request=%s user=%s %s..%s days=%s",
        request.id, request.user_id, request.start_date, request.end_date, request.total_days,
    )
    return request


async def review_time_off(
    db: AsyncSession,
    request_id: str,
    status: str,
    reviewed_by: str,
    review_notes: Optional[str] = None,
):
    if status not in REVIEW_OUTCOMES:
        raise InvalidInputError(f"Review status must be one of {', '.join(REVIEW_OUTCOMES)}")

    request = await db.get(TimeOffRequest, request_id)
    if not request:
        raise NotFoundError.for_id("Time-off request", request_id)
    if request.status == TimeOffStatus.CANCELLED.value:
        raise ConflictError(f"Time-off request {request_id} was cancelled")

    request.status = status
    request.reviewed_by = reviewed_by
    request.reviewed_at = datetime.utcnow()
    request.review_notes = review_notes
    await db.commit()
    await db.refresh(request)

    log.info("time off reviewed: request=%s status=%s by=%s", request_id, status, reviewed_by)
    return request


async def list_time_off(db: AsyncSession, location_id: str, status: Optional[str] = None):
    """Requests at a location, newest first, with employee and reviewer names."""
    reviewer = aliased(User)
    query = (
        select(TimeOffRequest, User.name, User.email, reviewer.name)
        .join(User, User.id == TimeOffRequest.user_id)
        .outerjoin(reviewer, reviewer.id == TimeOffRequest.reviewed_by)
        .where(TimeOffRequest.location_id == location_id)
    )
    if status:
        query = query.where(TimeOffRequest.status == status)

    result = await db.execute(query.order_by(TimeOffRequest.requested_at.desc(), TimeOffRequest.id))
    return [
        {
            "request": request,
            "employee_name": employee_name,
            "employee_email": employee_email,
            "reviewer_name": reviewer_name,
        }
        for request, employee_name, employee_email, reviewer_name in result.all()
    ]
