from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
from datetime import date

from laborops.db import get_db
from laborops.crud import labor_entry as labor_crud
from laborops.schemas.labor import (
    ClockIn, ClockOut, Forecast, LaborEntryCreate, LaborEntryList, LaborEntryRead, LaborTrends,
)
from laborops.services.labor.forecast import LaborForecaster
from laborops.services.labor.trends import build_labor_trend, build_labor_vs_sales
from laborops.utils.time_windows import parse_since
from laborops.utils.timeclock_service import autoclose_stale_entries, clock_in, clock_out

router = APIRouter(prefix="/labor", tags=["labor"])


@router.post("/entries", response_model=LaborEntryRead, status_code=201)
async def create_entry(data: LaborEntryCreate, db: AsyncSession = Depends(get_db)):
    return await labor_crud.create_entry(db, data)


@router.get("/entries", response_model=LaborEntryList)
async def list_entries(
    location_id: Optional[str] = None,
    user_id: Optional[str] = None,
    status: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: AsyncSession = Depends(get_db),
):
    return await labor_crud.list_entries(
        db,
        location_id=location_id,
        user_id=user_id,
        status=status,
        start_date=start_date,
        end_date=end_date,
    )


@router.get("/entries/{entry_id}", response_model=LaborEntryRead)
async def get_entry(entry_id: str, db: AsyncSession = Depends(get_db)):
    entry = await labor_crud.get_entry(db, entry_id)
    if not entry:
        raise HTTPException(status_code=404, detail="Labor entry not found")
    return entry


@router.post("/entries/{entry_id}/clock-in", response_model=LaborEntryRead)
async def post_clock_in(entry_id: str, data: ClockIn, db: AsyncSession = Depends(get_db)):
    e = await clock_in(db, entry_id, data.timestamp, data.location, data.break_minutes, data.notes)
    await db.commit()
    await db.refresh(e)
    return e


@router.post("/entries/{entry_id}/clock-out", response_model=LaborEntryRead)
async def post_clock_out(entry_id: str, data: ClockOut, db: AsyncSession = Depends(get_db)):
    e = await clock_out(db, entry_id, data.timestamp, data.break_minutes, data.notes)
    await db.commit()
    await db.refresh(e)
    return e


@router.post("/entries/autoclose")
async def post_autoclose(
    location_id: Optional[str] = None,
    max_hours: Optional[int] = None,
    db: AsyncSession = Depends(get_db),
):
    closed = await autoclose_stale_entries(db, location_id, max_hours)
    await db.commit()
    return {"closed": closed}


@router.get("/forecast", response_model=Forecast)
async def get_forecast(
    target_date: Optional[date] = Query(default=None, alias="date"),
    location_id: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
):
    return await LaborForecaster(db).generate_forecast(target_date, location_id)


@router.get("/trends", response_model=LaborTrends)
async def get_trends(
    location_id: Optional[str] = None,
    since: Optional[str] = None,
    until: Optional[date] = None,
    db: AsyncSession = Depends(get_db),
):
    """Sales vs. labor cost; ``since`` accepts 24h, 7d, 12w or YYYY-MM-DD."""
    end = until or date.today()
    start = parse_since(since, today=end)
    entries = await labor_crud.query_entries(db, location_id=location_id, start_date=start, end_date=end)
    return {
        "start": start,
        "end": end,
        "trend": build_labor_trend(entries, start, end),
        "labor_vs_sales": build_labor_vs_sales(entries),
    }
