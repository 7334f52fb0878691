# scripts/seed_demo_data.py

import asyncio
import argparse
import uuid
from datetime import date, datetime, time, timedelta

from sqlalchemy.future import select

from laborops.db import async_session, create_db_and_tables
from laborops.models.availability import EmployeeAvailability
from laborops.models.labor_entry import LaborEntry
from laborops.models.location import Location
from laborops.models.user import User
from laborops.services.labor.cost import labor_cost
from laborops.services.labor.hours import actual_hours, scheduled_hours

LOCATION = {"name": "Downtown Kitchen", "code": "DT-01"}

# name, role, hourly rate, position
EMPLOYEES_TO_SEED = [
    ("Avery", "manager", 24.00, "manager"),
    ("Jordan", "crew", 16.50, "line"),
    ("Riley", "crew", 16.00, "line"),
    ("Sam", "crew", 15.00, "cashier"),
    ("Taylor", "crew", 15.50, "prep"),
]

# every weekday 07:00-17:00, weekends preferred for the line cooks
WEEKDAY_WINDOW = (time(7, 0), time(17, 0))
WEEKEND_WINDOW = (time(9, 0), time(21, 0))


async def seed(weeks: int):
    await create_db_and_tables()

    async with async_session() as session:
        # Step 1: Ensure the location exists
        result = await session.execute(select(Location).where(Location.code == LOCATION["code"]))
        location = result.scalar_one_or_none()
        if not location:
            location = Location(id=str(uuid.uuid4()), **LOCATION)
            session.add(location)
            await session.commit()
            print(f"Created location: {location.name}")

        # Step 2: Employees and their recurring availability
        employees = []
        for name, role, rate, position in EMPLOYEES_TO_SEED:
            result = await session.execute(select(User).where(User.name == name, User.location_id == location.id))
            user = result.scalar_one_or_none()
            if user:
                print(f"Employee '{name}' already exists. Skipping.")
                employees.append((user, position))
                continue

            user = User(
                id=str(uuid.uuid4()),
                name=name,
                role=role,
                location_id=location.id,
                hourly_rate=rate,
            )
            session.add(user)
            employees.append((user, position))

            for dow in range(7):
                start, end = WEEKEND_WINDOW if dow in (0, 6) else WEEKDAY_WINDOW
                session.add(EmployeeAvailability(
                    id=str(uuid.uuid4()),
                    user_id=user.id,
                    location_id=location.id,
                    day_of_week=dow,
                    start_time=start,
                    end_time=end,
                    is_preferred=position == "line" and dow in (0, 6),
                ))
            print(f"Created: {name} ({role}, {position}) at {rate:.2f}/h")

        await session.commit()

        # Step 3: Labor history for forecasting
        today = date.today()
        created = 0
        for days_back in range(1, weeks * 7 + 1):
            day = today - timedelta(days=days_back)
            busy = day.weekday() >= 4  # Fri-Sun
            for i, (user, position) in enumerate(employees):
                start = time(8 + (i % 2), 0)
                end = time(16 + (i % 2) + (1 if busy else 0), 0)
                planned = scheduled_hours(start, end, 30)
                clock_in_at = datetime.combine(day, start) - timedelta(minutes=5)
                clock_out_at = datetime.combine(day, end) + timedelta(minutes=10)
                worked = actual_hours(clock_in_at, clock_out_at, 30)

                session.add(LaborEntry(
                    id=str(uuid.uuid4()),
                    location_id=location.id,
                    user_id=user.id,
                    date=day,
                    start_time=start,
                    end_time=end,
                    position=position,
                    status="completed",
                    clock_in_time=clock_in_at,
                    clock_out_time=clock_out_at,
                    break_minutes=30,
                    scheduled_hours=planned,
                    actual_hours=worked,
                    hourly_rate=user.hourly_rate,
                    labor_cost=labor_cost(planned, worked, user.hourly_rate),
                    actual_sales=(900.0 if busy else 600.0) / len(employees),
                ))
                created += 1

        await session.commit()
        print(f"Done seeding {created} labor entries over {weeks} week(s).\n")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed LaborOps demo data")
    parser.add_argument("--weeks", type=int, default=4, help="Weeks of labor history to create")
    args = parser.parse_args()

    asyncio.run(seed(args.weeks))


### Action	Command
#Seed demo data	python -m scripts.seed_demo_data --weeks 8
