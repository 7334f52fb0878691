from datetime import date, timedelta

import pytest

from laborops.services.labor.forecast import LaborForecaster, build_staffing_suggestions, resolve_confidence

TARGET = date(2024, 3, 4)  # a Monday


def mondays_before(target, n):
    return [target - timedelta(weeks=i) for i in range(1, n + 1)]


@pytest.mark.parametrize(
    "sample_size,expected",
    [(0, "insufficient-data"), (1, "low"), (2, "low"), (3, "medium"), (6, "medium"), (7, "high"), (30, "high")],
)
def test_confidence_thresholds(sample_size, expected):
    assert resolve_confidence(sample_size) == expected


async def test_no_history_means_insufficient_data(db, location):
    forecast = await LaborForecaster(db).generate_forecast(TARGET, location.id)

    assert forecast == {
        "date": "2024-03-04",
        "location_id": location.id,
        "historical_sample_size": 0,
        "forecasted_sales": 0,
        "recommended_labor_hours": 0,
        "suggested_staffing": [],
        "confidence": "insufficient-data",
    }


async def test_forecast_from_same_weekday_history(db, location, make_employee, make_entry):
    emp = await make_employee("Sam")
    for day in mondays_before(TARGET, 3):
        await make_entry(emp, day, scheduled=8, position="line", actual_sales=500.0)
        await make_entry(emp, day, scheduled=4, position="cashier", projected_sales=200.0)
    # a Tuesday never counts toward a Monday forecast
    await make_entry(emp, TARGET - timedelta(days=6), scheduled=12, position="line", actual_sales=9000.0)

    forecast = await LaborForecaster(db).generate_forecast(TARGET, location.id)

    assert forecast["historical_sample_size"] == 6
    assert forecast["confidence"] == "medium"
    assert forecast["recommended_labor_hours"] == 6.3  # mean 6h scheduled * 1.05
    assert forecast["forecasted_sales"] == 350.0
    staffing = {s["position"]: s for s in forecast["suggested_staffing"]}
    assert staffing == {
        "line": {"position": "line", "hours": 4.2, "average_shift_length": 8.0, "recommended_headcount": 1},
        "cashier": {"position": "cashier", "hours": 2.1, "average_shift_length": 4.0, "recommended_headcount": 1},
    }


async def test_actual_hours_preferred_over_scheduled(db, location, make_employee, make_entry):
    emp = await make_employee("Riley")
    for day in mondays_before(TARGET, 2):
        await make_entry(emp, day, scheduled=8, actual=10, position="line")

    forecast = await LaborForecaster(db).generate_forecast(TARGET, location.id)

    assert forecast["recommended_labor_hours"] == 10.5
    assert forecast["confidence"] == "low"


async def test_staffing_hours_sum_to_recommendation(db, location, make_employee, make_entry):
    emp = await make_employee("Taylor")
    layout = [("line", 7.5), ("line", 8.25), ("prep", 5.0), ("cashier", 6.33), ("dish", 4.1)]
    for day in mondays_before(TARGET, 4):
        for position, hours in layout:
            await make_entry(emp, day, scheduled=hours, position=position)

    forecast = await LaborForecaster(db).generate_forecast(TARGET, location.id)

    total = sum(s["hours"] for s in forecast["suggested_staffing"])
    assert total == pytest.approx(forecast["recommended_labor_hours"], abs=0.01 * len(layout))
    assert forecast["confidence"] == "high"
    assert all(s["recommended_headcount"] >= 1 for s in forecast["suggested_staffing"])


async def test_lookback_window_is_bounded(db, location, make_employee, make_entry):
    emp = await make_employee("Old Timer")
    await make_entry(emp, TARGET - timedelta(weeks=13), scheduled=8, position="line")
    await make_entry(emp, TARGET, scheduled=8, position="line")  # the target day itself is not history
    await make_entry(emp, TARGET - timedelta(weeks=12), scheduled=6, position="line")

    forecast = await LaborForecaster(db).generate_forecast(TARGET, location.id)
    assert forecast["historical_sample_size"] == 1
    assert forecast["recommended_labor_hours"] == 6.3

    wider = await LaborForecaster(db, lookback_weeks=20).generate_forecast(TARGET, location.id)
    assert wider["historical_sample_size"] == 2


async def test_location_filter(db, location, make_employee, make_entry):
    emp = await make_employee("Pat")
    await make_entry(emp, TARGET - timedelta(weeks=1), scheduled=8, position="line")

    elsewhere = await LaborForecaster(db).generate_forecast(TARGET, "other-location")
    assert elsewhere["historical_sample_size"] == 0

    everywhere = await LaborForecaster(db).generate_forecast(TARGET)
    assert everywhere["historical_sample_size"] == 1
    assert everywhere["location_id"] is None


async def test_accepts_iso_date_string(db, location):
    forecast = await LaborForecaster(db).generate_forecast("2024-03-04", location.id)
    assert forecast["date"] == "2024-03-04"


def test_headcount_rounds_and_never_drops_below_one():
    coverage = {
        "line": {"scheduled_hours": 40.0, "actual_hours": 0.0, "headcount": 5},
        "host": {"scheduled_hours": 0.0, "actual_hours": 0.0, "headcount": 2},
    }
    suggestions = build_staffing_suggestions(coverage, 30.0)

    line, host = suggestions
    assert line["hours"] == 30.0
    assert line["recommended_headcount"] == 4  # 30 / 8 = 3.75
    assert host["hours"] == 0
    assert host["recommended_headcount"] == 2


def test_headcount_rounds_half_up():
    coverage = {"line": {"scheduled_hours": 16.0, "actual_hours": 0.0, "headcount": 4}}
    # 10 / 4 = 2.5
    assert build_staffing_suggestions(coverage, 10.0)[0]["recommended_headcount"] == 3
