from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
from datetime import date

from laborops.db import get_db
from laborops.crud import availability as availability_crud
from laborops.crud import schedule as schedule_crud
from laborops.crud import shift as shift_crud
from laborops.crud import template as template_crud
from laborops.crud import time_off as time_off_crud
from laborops.schemas.scheduling import (
    AutoAssignReport, AvailabilityCreate, AvailabilityRead, EligibilityQuery,
    ScheduleConflict, ScheduleCreate, ScheduleDetail, SchedulePublish, ScheduleRead,
    ShiftAssign, ShiftClock, ShiftCreate, ShiftRead, ShiftStatusUpdate,
    TemplateCreate, TemplateGenerate, TemplateRead, TemplateShiftRead, TimeOffCreate, TimeOffListItem,
    TimeOffRead, TimeOffReview, TradeApprove, TradeCreate, TradeListItem, TradeRead,
    TradeResponse, WeeklySummary,
)
from laborops.services.scheduling import AutoAssigner, AvailabilityResolver, ShiftTradeService

router = APIRouter(prefix="/scheduling", tags=["scheduling"])


def _schedule_detail(found: dict) -> ScheduleDetail:
    return ScheduleDetail(
        **ScheduleRead.model_validate(found["schedule"]).model_dump(),
        shifts=[ShiftRead.model_validate(s) for s in found["shifts"]],
    )


def _template_read(found: dict) -> TemplateRead:
    t = found["template"]
    return TemplateRead(
        id=t.id,
        location_id=t.location_id,
        name=t.name,
        description=t.description,
        day_of_week=t.day_of_week,
        is_active=t.is_active,
        created_by=t.created_by,
        shifts=[TemplateShiftRead.model_validate(s) for s in found["shifts"]],
    )


# -------------------------
# Schedules
# -------------------------
@router.post("/schedules", response_model=ScheduleRead, status_code=201)
async def create_schedule(data: ScheduleCreate, db: AsyncSession = Depends(get_db)):
    return await schedule_crud.create_schedule(db, data)


@router.get("/schedules", response_model=List[ScheduleRead])
async def list_schedules(
    location_id: str,
    week_start: Optional[date] = None,
    week_end: Optional[date] = None,
    db: AsyncSession = Depends(get_db),
):
    return await schedule_crud.list_schedules(db, location_id, week_start, week_end)


@router.get("/schedules/{schedule_id}", response_model=ScheduleDetail)
async def get_schedule(schedule_id: str, db: AsyncSession = Depends(get_db)):
    found = await schedule_crud.get_schedule(db, schedule_id)
    if not found:
        raise HTTPException(status_code=404, detail="Schedule not found")
    return _schedule_detail(found)


@router.post("/schedules/{schedule_id}/publish", response_model=ScheduleRead)
async def publish_schedule(schedule_id: str, data: SchedulePublish, db: AsyncSession = Depends(get_db)):
    return await schedule_crud.publish_schedule(db, schedule_id, data.published_by)


@router.post("/schedules/{schedule_id}/auto-assign", response_model=AutoAssignReport)
async def auto_assign(schedule_id: str, db: AsyncSession = Depends(get_db)):
    return await AutoAssigner(db).auto_assign(schedule_id)


@router.get("/schedules/{schedule_id}/conflicts", response_model=List[ScheduleConflict])
async def schedule_conflicts(schedule_id: str, db: AsyncSession = Depends(get_db)):
    return await shift_crud.get_schedule_conflicts(db, schedule_id)


@router.get("/weekly-summary", response_model=WeeklySummary)
async def weekly_summary(location_id: str, week_of: Optional[date] = None, db: AsyncSession = Depends(get_db)):
    return await shift_crud.get_weekly_summary(db, location_id, week_of)


# -------------------------
# Templates
# -------------------------
@router.post("/templates", response_model=TemplateRead, status_code=201)
async def create_template(data: TemplateCreate, db: AsyncSession = Depends(get_db)):
    return _template_read(await template_crud.create_template(db, data))


@router.get("/templates", response_model=List[TemplateRead])
async def list_templates(location_id: str, active_only: bool = True, db: AsyncSession = Depends(get_db)):
    return [_template_read(t) for t in await template_crud.list_templates(db, location_id, active_only)]


@router.get("/templates/{template_id}", response_model=TemplateRead)
async def get_template(template_id: str, db: AsyncSession = Depends(get_db)):
    found = await template_crud.get_template(db, template_id)
    if not found:
        raise HTTPException(status_code=404, detail="Template not found")
    return _template_read(found)


@router.post("/templates/{template_id}/generate", response_model=List[ShiftRead], status_code=201)
async def generate_from_template(template_id: str, data: TemplateGenerate, db: AsyncSession = Depends(get_db)):
    return await template_crud.generate_from_template(db, template_id, data.schedule_id, data.shift_date)


# -------------------------
# Shifts
# -------------------------
@router.post("/shifts", response_model=ShiftRead, status_code=201)
async def create_shift(data: ShiftCreate, db: AsyncSession = Depends(get_db)):
    return await shift_crud.create_shift(db, data)


@router.get("/shifts/{shift_id}", response_model=ShiftRead)
async def get_shift(shift_id: str, db: AsyncSession = Depends(get_db)):
    shift = await shift_crud.get_shift(db, shift_id)
    if not shift:
        raise HTTPException(status_code=404, detail="Shift not found")
    return shift


@router.post("/shifts/{shift_id}/assign", response_model=ShiftRead)
async def assign_shift(shift_id: str, data: ShiftAssign, db: AsyncSession = Depends(get_db)):
    return await shift_crud.assign_shift(db, shift_id, data.user_id)


@router.patch("/shifts/{shift_id}/status", response_model=ShiftRead)
async def update_shift_status(shift_id: str, data: ShiftStatusUpdate, db: AsyncSession = Depends(get_db)):
    return await shift_crud.update_shift_status(db, shift_id, data.status, data.user_id, data.notes)


@router.post("/shifts/{shift_id}/cancel", response_model=ShiftRead)
async def cancel_shift(shift_id: str, db: AsyncSession = Depends(get_db)):
    return await shift_crud.cancel_shift(db, shift_id)


@router.post("/shifts/{shift_id}/clock-in", response_model=ShiftRead)
async def clock_in_shift(shift_id: str, data: ShiftClock, db: AsyncSession = Depends(get_db)):
    return await shift_crud.clock_in_shift(db, shift_id, data.timestamp)


@router.post("/shifts/{shift_id}/clock-out", response_model=ShiftRead)
async def clock_out_shift(shift_id: str, data: ShiftClock, db: AsyncSession = Depends(get_db)):
    return await shift_crud.clock_out_shift(db, shift_id, data.timestamp)


@router.get("/employees/{user_id}/shifts", response_model=List[ShiftRead])
async def employee_shifts(
    user_id: str,
    start_date: date = Query(...),
    end_date: date = Query(...),
    db: AsyncSession = Depends(get_db),
):
    return await shift_crud.get_employee_shifts(db, user_id, start_date, end_date)


@router.post("/eligible-employees", response_model=List[str])
async def eligible_employees(data: EligibilityQuery, db: AsyncSession = Depends(get_db)):
    return await AvailabilityResolver(db).find_eligible_employees(
        data.shift_date, data.start_time, data.end_time, data.location_id, data.exclude_shift_id,
    )


# -------------------------
# Availability
# -------------------------
@router.post("/availability", response_model=AvailabilityRead, status_code=201)
async def set_availability(data: AvailabilityCreate, db: AsyncSession = Depends(get_db)):
    return await availability_crud.set_availability(db, data)


@router.get("/availability/{user_id}", response_model=List[AvailabilityRead])
async def get_availability(user_id: str, location_id: Optional[str] = None, db: AsyncSession = Depends(get_db)):
    return await availability_crud.get_availability(db, user_id, location_id)


@router.delete("/availability/{availability_id}")
async def delete_availability(availability_id: str, db: AsyncSession = Depends(get_db)):
    await availability_crud.delete_availability(db, availability_id)
    return {"message": "Availability deleted"}


# -------------------------
# Time off
# -------------------------
@router.post("/time-off", response_model=TimeOffRead, status_code=201)
async def request_time_off(data: TimeOffCreate, db: AsyncSession = Depends(get_db)):
    return await time_off_crud.request_time_off(db, data)


@router.post("/time-off/{request_id}/review", response_model=TimeOffRead)
async def review_time_off(request_id: str, data: TimeOffReview, db: AsyncSession = Depends(get_db)):
    return await time_off_crud.review_time_off(db, request_id, data.status, data.reviewed_by, data.review_notes)


@router.get("/time-off", response_model=List[TimeOffListItem])
async def list_time_off(location_id: str, status: Optional[str] = None, db: AsyncSession = Depends(get_db)):
    rows = await time_off_crud.list_time_off(db, location_id, status)
    return [
        TimeOffListItem(
            **TimeOffRead.model_validate(r["request"]).model_dump(),
            employee_name=r["employee_name"],
            employee_email=r["employee_email"],
            reviewer_name=r["reviewer_name"],
        )
        for r in rows
    ]


# -------------------------
# Shift trades
# -------------------------
@router.post("/trades", response_model=TradeRead, status_code=201)
async def request_trade(data: TradeCreate, db: AsyncSession = Depends(get_db)):
    return await ShiftTradeService(db).request_trade(**data.model_dump())


@router.post("/trades/{trade_id}/respond", response_model=TradeRead)
async def respond_to_trade(trade_id: str, data: TradeResponse, db: AsyncSession = Depends(get_db)):
    return await ShiftTradeService(db).respond_to_trade(trade_id, data.user_id, data.response)


@router.post("/trades/{trade_id}/approve", response_model=TradeRead)
async def approve_trade(trade_id: str, data: TradeApprove, db: AsyncSession = Depends(get_db)):
    return await ShiftTradeService(db).approve_trade(trade_id, data.approved_by)


@router.get("/trades", response_model=List[TradeListItem])
async def list_trades(location_id: str, status: Optional[str] = None, db: AsyncSession = Depends(get_db)):
    rows = await ShiftTradeService(db).list_trades(location_id, status)
    return [
        TradeListItem(
            **TradeRead.model_validate(r.pop("trade")).model_dump(),
            **r,
        )
        for r in rows
    ]
