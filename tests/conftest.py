import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import uuid
from datetime import date, time

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import laborops.models  # noqa: F401
from laborops.db import get_db
from laborops.main import app
from laborops.models.availability import EmployeeAvailability
from laborops.models.base import Base
from laborops.models.labor_entry import LaborEntry
from laborops.models.location import Location
from laborops.models.schedule import Schedule
from laborops.models.shift import Shift
from laborops.models.time_off import TimeOffRequest
from laborops.models.user import User
from laborops.services.labor.hours import scheduled_hours
from laborops.utils.timezones import week_window

# Monday 2024-01-01 .. Sunday 2024-01-07
MONDAY = date(2024, 1, 1)


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db(engine):
    maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with maker() as session:
        yield session


@pytest_asyncio.fixture
async def client(engine):
    maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db():
        async with maker() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def location(db):
    loc = Location(id=str(uuid.uuid4()), name="Main Street", code="MS-01")
    db.add(loc)
    await db.commit()
    return loc


@pytest.fixture
def make_employee(db, location):
    async def _make(name, hourly_rate=15.0, user_id=None, is_active=True):
        user = User(
            id=user_id or str(uuid.uuid4()),
            name=name,
            role="crew",
            location_id=location.id,
            hourly_rate=hourly_rate,
            is_active=is_active,
        )
        db.add(user)
        await db.commit()
        return user
    return _make


@pytest.fixture
def make_availability(db, location):
    async def _make(user, day_of_week, start="06:00", end="22:00", is_preferred=False, **kwargs):
        row = EmployeeAvailability(
            id=str(uuid.uuid4()),
            user_id=user.id,
            location_id=location.id,
            day_of_week=day_of_week,
            start_time=time.fromisoformat(start),
            end_time=time.fromisoformat(end),
            is_preferred=is_preferred,
            **kwargs,
        )
        db.add(row)
        await db.commit()
        return row
    return _make


@pytest.fixture
def make_time_off(db, location):
    async def _make(user, start_date, end_date, status="approved"):
        request = TimeOffRequest(
            id=str(uuid.uuid4()),
            user_id=user.id,
            location_id=location.id,
            request_type="vacation",
            start_date=start_date,
            end_date=end_date,
            total_days=(end_date - start_date).days + 1,
            status=status,
        )
        db.add(request)
        await db.commit()
        return request
    return _make


@pytest_asyncio.fixture
async def schedule(db, location):
    week_start, week_end = week_window(MONDAY)
    sched = Schedule(
        id=str(uuid.uuid4()),
        location_id=location.id,
        schedule_date=MONDAY,
        week_start=week_start,
        week_end=week_end,
        status="draft",
    )
    db.add(sched)
    await db.commit()
    return sched


@pytest.fixture
def make_shift(db, schedule):
    async def _make(shift_date, start, end, user=None, position="line", status="scheduled", break_minutes=0):
        start_t, end_t = time.fromisoformat(start), time.fromisoformat(end)
        rate = user.hourly_rate if user else None
        hours = scheduled_hours(start_t, end_t, break_minutes)
        shift = Shift(
            id=str(uuid.uuid4()),
            schedule_id=schedule.id,
            location_id=schedule.location_id,
            user_id=user.id if user else None,
            position=position,
            shift_date=shift_date,
            start_time=start_t,
            end_time=end_t,
            break_minutes=break_minutes,
            total_hours=hours,
            hourly_rate=rate,
            estimated_cost=hours * rate if rate else None,
            status=status,
            requires_coverage=user is None,
        )
        db.add(shift)
        await db.commit()
        return shift
    return _make


@pytest.fixture
def make_entry(db, location):
    async def _make(user, entry_date, scheduled=8.0, actual=0.0, position="line", cost=0.0,
                    actual_sales=None, projected_sales=None, start="09:00", end="17:00"):
        entry = LaborEntry(
            id=str(uuid.uuid4()),
            location_id=location.id,
            user_id=user.id,
            date=entry_date,
            start_time=time.fromisoformat(start),
            end_time=time.fromisoformat(end),
            position=position,
            status="completed" if actual else "scheduled",
            scheduled_hours=scheduled,
            actual_hours=actual,
            hourly_rate=user.hourly_rate or 0,
            labor_cost=cost,
            actual_sales=actual_sales,
            projected_sales=projected_sales,
        )
        db.add(entry)
        await db.commit()
        return entry
    return _make
