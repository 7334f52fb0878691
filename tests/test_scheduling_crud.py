from datetime import date, datetime, timedelta

import pytest

from laborops.core.errors import ConflictError, InvalidInputError, NotFoundError
from laborops.crud import availability as availability_crud
from laborops.crud import schedule as schedule_crud
from laborops.crud import shift as shift_crud
from laborops.crud import template as template_crud
from laborops.crud import time_off as time_off_crud
from laborops.schemas.scheduling import (
    AvailabilityCreate, ScheduleCreate, ShiftCreate, TemplateCreate, TemplateShiftCreate, TimeOffCreate,
)
from tests.conftest import MONDAY


# ---------- schedules ----------
async def test_create_schedule_derives_monday_week(db, location):
    thursday = date(2024, 1, 4)
    schedule = await schedule_crud.create_schedule(db, ScheduleCreate(location_id=location.id, schedule_date=thursday))

    assert schedule.week_start == date(2024, 1, 1)
    assert schedule.week_end == date(2024, 1, 7)
    assert schedule.status == "draft"


async def test_sunday_belongs_to_the_week_before(db, location):
    sunday = date(2024, 1, 7)
    schedule = await schedule_crud.create_schedule(db, ScheduleCreate(location_id=location.id, schedule_date=sunday))
    assert schedule.week_start == date(2024, 1, 1)


async def test_duplicate_schedule_is_a_conflict(db, location):
    data = ScheduleCreate(location_id=location.id, schedule_date=MONDAY)
    await schedule_crud.create_schedule(db, data)
    with pytest.raises(ConflictError):
        await schedule_crud.create_schedule(db, data)


async def test_publish_and_get_schedule(db, schedule, make_shift):
    late = await make_shift(MONDAY, "14:00", "18:00")
    early = await make_shift(MONDAY, "08:00", "12:00")

    published = await schedule_crud.publish_schedule(db, schedule.id, "mgr-1")
    assert published.status == "published"
    assert published.published_by == "mgr-1"
    assert published.published_at is not None

    found = await schedule_crud.get_schedule(db, schedule.id)
    assert [s.id for s in found["shifts"]] == [early.id, late.id]
    assert await schedule_crud.get_schedule(db, "missing") is None

    with pytest.raises(NotFoundError):
        await schedule_crud.publish_schedule(db, "missing", "mgr-1")


async def test_list_schedules_newest_week_first(db, location):
    for d in (date(2024, 1, 1), date(2024, 1, 15), date(2024, 1, 8)):
        await schedule_crud.create_schedule(db, ScheduleCreate(location_id=location.id, schedule_date=d))

    schedules = await schedule_crud.list_schedules(db, location.id)
    assert [s.week_start for s in schedules] == [date(2024, 1, 15), date(2024, 1, 8), date(2024, 1, 1)]

    bounded = await schedule_crud.list_schedules(db, location.id, week_start=date(2024, 1, 8))
    assert len(bounded) == 2


# ---------- templates ----------
async def test_template_generation_creates_required_count(db, location, schedule):
    created = await template_crud.create_template(db, TemplateCreate(
        location_id=location.id,
        name="Standard Weekday",
        day_of_week=1,
        shifts=[
            TemplateShiftCreate(position="line", start_time="08:00", end_time="16:00", required_count=3),
            TemplateShiftCreate(position="cashier", start_time="11:00", end_time="15:00", required_count=1),
        ],
    ))
    template = created["template"]
    assert len(created["shifts"]) == 2

    shifts = await template_crud.generate_from_template(db, template.id, schedule.id, MONDAY)

    assert len(shifts) == 4
    assert sum(1 for s in shifts if s.position == "line") == 3
    assert all(s.user_id is None and s.requires_coverage for s in shifts)
    assert all(s.status == "scheduled" for s in shifts)
    assert {s.total_hours for s in shifts if s.position == "line"} == {8.0}


async def test_template_with_bad_slot_is_rejected_whole(db, location):
    with pytest.raises(InvalidInputError):
        await template_crud.create_template(db, TemplateCreate(
            location_id=location.id,
            name="Broken",
            shifts=[
                TemplateShiftCreate(position="line", start_time="08:00", end_time="16:00"),
                TemplateShiftCreate(position="line", start_time="16:00", end_time="08:00"),
            ],
        ))
    assert await template_crud.list_templates(db, location.id) == []


async def test_generate_from_unknown_template(db, schedule):
    with pytest.raises(NotFoundError):
        await template_crud.generate_from_template(db, "missing", schedule.id, MONDAY)


# ---------- shifts ----------
async def test_create_shift_computes_hours_and_cost(db, schedule, make_employee):
    emp = await make_employee("Jordan", hourly_rate=16.0)
    shift = await shift_crud.create_shift(db, ShiftCreate(
        schedule_id=schedule.id, user_id=emp.id, position="line",
        shift_date=MONDAY, start_time="08:00", end_time="16:00", break_minutes=30,
    ))

    assert shift.total_hours == 7.5
    assert shift.hourly_rate == 16.0
    assert shift.estimated_cost == 120.0
    assert shift.requires_coverage is False


async def test_open_shift_requires_coverage(db, schedule):
    shift = await shift_crud.create_shift(db, ShiftCreate(
        schedule_id=schedule.id, position="line", shift_date=MONDAY, start_time="08:00", end_time="12:00",
    ))
    assert shift.user_id is None
    assert shift.requires_coverage is True
    assert shift.estimated_cost is None


@pytest.mark.parametrize(
    "start,end,break_minutes",
    [("16:00", "08:00", 0), ("08:00", "08:00", 0), ("8 o'clock", "16:00", 0), ("08:00", "16:00", -10)],
)
async def test_create_shift_validation(db, schedule, start, end, break_minutes):
    with pytest.raises(InvalidInputError):
        await shift_crud.create_shift(db, ShiftCreate(
            schedule_id=schedule.id, position="line", shift_date=MONDAY,
            start_time=start, end_time=end, break_minutes=break_minutes,
        ))


async def test_assign_refused_on_overlap(db, make_employee, make_shift):
    emp = await make_employee("Booked")
    await make_shift(MONDAY, "09:00", "13:00", user=emp)
    second = await make_shift(MONDAY, "12:00", "17:00")

    with pytest.raises(ConflictError, match=r"Cannot assign shift: 1 conflict\(s\) detected"):
        await shift_crud.assign_shift(db, second.id, emp.id)

    await db.refresh(second)
    assert second.user_id is None


async def test_assign_refused_on_approved_time_off(db, make_employee, make_shift, make_time_off):
    emp = await make_employee("On Leave")
    shift = await make_shift(MONDAY, "09:00", "13:00")
    await make_time_off(emp, MONDAY, MONDAY)

    with pytest.raises(ConflictError):
        await shift_crud.assign_shift(db, shift.id, emp.id)


async def test_create_preassigned_shift_refused_on_overlap(db, schedule, make_employee, make_shift):
    emp = await make_employee("Booked")
    await make_shift(MONDAY, "09:00", "13:00", user=emp)

    with pytest.raises(ConflictError, match=r"Cannot assign shift: 1 conflict\(s\) detected"):
        await shift_crud.create_shift(db, ShiftCreate(
            schedule_id=schedule.id, user_id=emp.id, position="line",
            shift_date=MONDAY, start_time="12:00", end_time="17:00",
        ))

    shifts = await shift_crud.get_employee_shifts(db, emp.id, MONDAY, MONDAY)
    assert len(shifts) == 1


async def test_create_preassigned_shift_refused_on_time_off(db, schedule, make_employee, make_time_off):
    emp = await make_employee("On Leave")
    await make_time_off(emp, MONDAY, MONDAY)

    with pytest.raises(ConflictError):
        await shift_crud.create_shift(db, ShiftCreate(
            schedule_id=schedule.id, user_id=emp.id, position="line",
            shift_date=MONDAY, start_time="09:00", end_time="13:00",
        ))


async def test_create_preassigned_shift_for_unknown_employee(db, schedule):
    with pytest.raises(NotFoundError):
        await shift_crud.create_shift(db, ShiftCreate(
            schedule_id=schedule.id, user_id="nobody", position="line",
            shift_date=MONDAY, start_time="09:00", end_time="13:00",
        ))


async def test_unrated_employee_leaves_cost_unknown(db, schedule, make_employee, make_shift):
    emp = await make_employee("No Rate", hourly_rate=None)
    created = await shift_crud.create_shift(db, ShiftCreate(
        schedule_id=schedule.id, user_id=emp.id, position="line",
        shift_date=MONDAY, start_time="09:00", end_time="13:00",
    ))
    assert created.hourly_rate is None
    assert created.estimated_cost is None

    open_shift = await make_shift(MONDAY, "14:00", "18:00")
    assigned = await shift_crud.assign_shift(db, open_shift.id, emp.id)
    assert assigned.user_id == emp.id
    assert assigned.hourly_rate is None
    assert assigned.estimated_cost is None


async def test_assign_sets_rate_and_cost(db, make_employee, make_shift):
    emp = await make_employee("Free", hourly_rate=20.0)
    shift = await make_shift(MONDAY, "09:00", "13:00")

    assigned = await shift_crud.assign_shift(db, shift.id, emp.id)

    assert assigned.user_id == emp.id
    assert assigned.estimated_cost == 80.0
    assert assigned.requires_coverage is False


async def test_assign_unknown_employee_or_shift(db, make_employee, make_shift):
    shift = await make_shift(MONDAY, "09:00", "13:00")
    with pytest.raises(NotFoundError):
        await shift_crud.assign_shift(db, shift.id, "nobody")

    emp = await make_employee("Real")
    with pytest.raises(NotFoundError):
        await shift_crud.assign_shift(db, "missing", emp.id)


async def test_status_update_and_owner_guard(db, make_employee, make_shift):
    emp = await make_employee("Owner")
    other = await make_employee("Other")
    shift = await make_shift(MONDAY, "09:00", "13:00", user=emp)

    confirmed = await shift_crud.update_shift_status(db, shift.id, "confirmed", user_id=emp.id)
    assert confirmed.status == "confirmed"

    with pytest.raises(NotFoundError):
        await shift_crud.update_shift_status(db, shift.id, "declined", user_id=other.id)
    with pytest.raises(InvalidInputError):
        await shift_crud.update_shift_status(db, shift.id, "finished")


async def test_status_update_appends_notes(db, make_employee, make_shift):
    emp = await make_employee("Owner")
    shift = await make_shift(MONDAY, "09:00", "13:00", user=emp)

    await shift_crud.update_shift_status(db, shift.id, "confirmed", notes="  will be ten minutes early ")
    updated = await shift_crud.update_shift_status(db, shift.id, "declined", user_id=emp.id, notes="sick")

    assert updated.status == "declined"
    assert updated.notes == "will be ten minutes early\nsick"

    unchanged = await shift_crud.update_shift_status(db, shift.id, "scheduled")
    assert unchanged.notes == "will be ten minutes early\nsick"


async def test_cancel_keeps_the_row(db, make_shift):
    shift = await make_shift(MONDAY, "09:00", "13:00")
    cancelled = await shift_crud.cancel_shift(db, shift.id)

    assert cancelled.status == "cancelled"
    assert await shift_crud.get_shift(db, shift.id) is not None


async def test_clock_in_and_out_of_a_shift(db, make_employee, make_shift):
    emp = await make_employee("Clocker")
    shift = await make_shift(MONDAY, "08:00", "16:00", user=emp, break_minutes=30)

    started = await shift_crud.clock_in_shift(db, shift.id, datetime(2024, 1, 1, 7, 55))
    assert started.status == "in_progress"

    done = await shift_crud.clock_out_shift(db, shift.id, datetime(2024, 1, 1, 16, 10))
    assert done.status == "completed"
    assert done.actual_hours == 7.75


async def test_employee_shifts_in_range(db, make_employee, make_shift):
    emp = await make_employee("Ranger")
    await make_shift(MONDAY, "09:00", "13:00", user=emp)
    await make_shift(MONDAY + timedelta(days=3), "09:00", "13:00", user=emp)
    await make_shift(MONDAY + timedelta(days=10), "09:00", "13:00", user=emp)

    shifts = await shift_crud.get_employee_shifts(db, emp.id, MONDAY, MONDAY + timedelta(days=6))
    assert len(shifts) == 2

    with pytest.raises(InvalidInputError):
        await shift_crud.get_employee_shifts(db, emp.id, MONDAY, MONDAY - timedelta(days=1))


async def test_schedule_conflicts_report(db, schedule, make_employee, make_shift, make_time_off):
    emp = await make_employee("Double Booked")
    away = await make_employee("Away")
    a = await make_shift(MONDAY, "09:00", "13:00", user=emp)
    b = await make_shift(MONDAY, "12:00", "17:00", user=emp)
    await make_shift(MONDAY, "17:00", "20:00", user=emp)
    c = await make_shift(MONDAY, "09:00", "13:00", user=away)
    request = await make_time_off(away, MONDAY, MONDAY)

    conflicts = await shift_crud.get_schedule_conflicts(db, schedule.id)

    overlaps = [x for x in conflicts if x["conflict_type"] == "overlap"]
    time_off = [x for x in conflicts if x["conflict_type"] == "time_off"]
    assert len(overlaps) == 1
    assert {overlaps[0]["shift1_id"], overlaps[0]["shift2_id"]} == {a.id, b.id}
    assert len(time_off) == 1
    assert time_off[0]["shift1_id"] == c.id
    assert time_off[0]["time_off_id"] == request.id


async def test_weekly_summary(db, location, make_employee, make_shift):
    emp = await make_employee("Weekly", hourly_rate=10.0)
    await make_shift(MONDAY, "08:00", "16:00", user=emp, status="confirmed")
    await make_shift(MONDAY + timedelta(days=1), "08:00", "12:00", user=emp, status="declined")
    await make_shift(MONDAY + timedelta(days=2), "08:00", "12:00", position="cashier")
    await make_shift(MONDAY + timedelta(days=3), "08:00", "12:00", status="cancelled")
    await make_shift(MONDAY + timedelta(days=8), "08:00", "12:00")  # next week

    summary = await shift_crud.get_weekly_summary(db, location.id, MONDAY + timedelta(days=4))

    assert summary["week_start"] == MONDAY
    assert summary["total_shifts"] == 3
    assert summary["scheduled_hours"] == 16.0
    assert summary["unique_employees"] == 1
    assert summary["uncovered_shifts"] == 1
    assert summary["confirmed_shifts"] == 1
    assert summary["declined_shifts"] == 1
    assert summary["estimated_cost"] == 120.0
    assert summary["coverage_by_position"]["cashier"]["headcount"] == 1


# ---------- availability ----------
async def test_set_get_delete_availability(db, location, make_employee):
    emp = await make_employee("Avail")
    row = await availability_crud.set_availability(db, AvailabilityCreate(
        user_id=emp.id, location_id=location.id, day_of_week=1, start_time="08:00", end_time="16:00",
    ))
    await availability_crud.set_availability(db, AvailabilityCreate(
        user_id=emp.id, location_id=location.id, day_of_week=2, start_time="08:00", end_time="16:00",
        expiration_date=date(2024, 1, 1),
    ))

    current = await availability_crud.get_availability(db, emp.id, as_of=date(2024, 2, 1))
    assert [r.id for r in current] == [row.id]

    await availability_crud.delete_availability(db, row.id)
    assert await availability_crud.get_availability(db, emp.id, as_of=date(2024, 2, 1)) == []
    with pytest.raises(NotFoundError):
        await availability_crud.delete_availability(db, row.id)


async def test_availability_rejects_inverted_window(db, location, make_employee):
    emp = await make_employee("Backwards")
    with pytest.raises(InvalidInputError):
        await availability_crud.set_availability(db, AvailabilityCreate(
            user_id=emp.id, location_id=location.id, day_of_week=1, start_time="16:00", end_time="08:00",
        ))


# ---------- time off ----------
async def test_time_off_days_are_inclusive(db, location, make_employee):
    emp = await make_employee("Vacationer")
    single = await time_off_crud.request_time_off(db, TimeOffCreate(
        user_id=emp.id, location_id=location.id, request_type="sick",
        start_date=MONDAY, end_date=MONDAY,
    ))
    week = await time_off_crud.request_time_off(db, TimeOffCreate(
        user_id=emp.id, location_id=location.id, request_type="vacation",
        start_date=date(2024, 2, 26), end_date=date(2024, 3, 3),
    ))
    assert single.total_days == 1
    assert week.total_days == 7
    assert week.status == "pending"


async def test_time_off_validation(db, location, make_employee):
    emp = await make_employee("Invalid")
    with pytest.raises(InvalidInputError):
        await time_off_crud.request_time_off(db, TimeOffCreate(
            user_id=emp.id, location_id=location.id, request_type="sabbatical",
            start_date=MONDAY, end_date=MONDAY,
        ))
    with pytest.raises(InvalidInputError):
        await time_off_crud.request_time_off(db, TimeOffCreate(
            user_id=emp.id, location_id=location.id, request_type="vacation",
            start_date=MONDAY, end_date=MONDAY - timedelta(days=1),
        ))


async def test_review_and_list_time_off(db, location, make_employee):
    emp = await make_employee("Requester")
    mgr = await make_employee("Manager")
    request = await time_off_crud.request_time_off(db, TimeOffCreate(
        user_id=emp.id, location_id=location.id, request_type="personal",
        start_date=MONDAY, end_date=MONDAY,
    ))

    reviewed = await time_off_crud.review_time_off(db, request.id, "approved", mgr.id, "enjoy")
    assert reviewed.status == "approved"
    assert reviewed.reviewed_at is not None

    rows = await time_off_crud.list_time_off(db, location.id, status="approved")
    assert len(rows) == 1
    assert rows[0]["employee_name"] == "Requester"
    assert rows[0]["reviewer_name"] == "Manager"

    with pytest.raises(InvalidInputError):
        await time_off_crud.review_time_off(db, request.id, "maybe", mgr.id)
    with pytest.raises(NotFoundError):
        await time_off_crud.review_time_off(db, "missing", "approved", mgr.id)
