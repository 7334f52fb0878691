from datetime import date, time
from types import SimpleNamespace

import pytest

from laborops.services.labor.trends import build_labor_trend, build_labor_vs_sales
from laborops.utils.time_windows import bucket_key, determine_granularity, parse_since

TODAY = date(2024, 3, 15)


def entry(day, at="09:00", cost=100.0, sales=None, entry_id="e1", position="line"):
    return SimpleNamespace(
        id=entry_id, date=day, start_time=time.fromisoformat(at),
        labor_cost=cost, sales=sales, position=position,
    )


@pytest.mark.parametrize(
    "since,expected",
    [
        (None, date(2024, 3, 8)),
        ("all", date(2024, 3, 8)),
        ("24h", date(2024, 3, 14)),
        ("3d", date(2024, 3, 12)),
        ("2w", date(2024, 3, 1)),
        ("2024-01-01", date(2024, 1, 1)),
        ("soon", date(2024, 3, 8)),
    ],
)
def test_parse_since(since, expected):
    assert parse_since(since, today=TODAY) == expected


@pytest.mark.parametrize(
    "start,end,expected",
    [
        (date(2024, 3, 1), date(2024, 3, 3), "hour"),
        (date(2024, 3, 1), date(2024, 3, 4), "day"),
        (date(2024, 1, 1), date(2024, 3, 31), "day"),
        (date(2024, 1, 1), date(2024, 4, 1), "week"),
        (None, date(2024, 3, 1), "day"),
    ],
)
def test_granularity_thresholds(start, end, expected):
    assert determine_granularity(start, end) == expected


def test_bucket_keys():
    wednesday = date(2024, 3, 13)
    assert bucket_key(wednesday, "hour", time(14, 30)) == "2024-03-13T14:00:00"
    assert bucket_key(wednesday, "hour") == "2024-03-13T00:00:00"
    assert bucket_key(wednesday, "day") == "2024-03-13"
    assert bucket_key(wednesday, "week") == "2024-03-11"


def test_daily_trend_sums_and_sorts():
    entries = [
        entry(date(2024, 3, 5), cost=50.0, sales=400.0),
        entry(date(2024, 3, 4), cost=120.0, sales=900.0),
        entry(date(2024, 3, 5), cost=25.5, sales=None),
    ]
    trend = build_labor_trend(entries, date(2024, 3, 1), date(2024, 3, 10))

    assert trend == [
        {"date": "2024-03-04", "granularity": "day", "sales": 900.0, "labor_cost": 120.0},
        {"date": "2024-03-05", "granularity": "day", "sales": 400.0, "labor_cost": 75.5},
    ]


def test_hourly_trend_for_short_ranges():
    entries = [entry(date(2024, 3, 4), at="09:15"), entry(date(2024, 3, 4), at="17:00")]
    trend = build_labor_trend(entries, date(2024, 3, 4), date(2024, 3, 5))
    assert [p["date"] for p in trend] == ["2024-03-04T09:00:00", "2024-03-04T17:00:00"]


def test_weekly_trend_and_non_finite_values():
    entries = [
        entry(date(2024, 1, 2), cost=10.0, sales=float("nan")),
        entry(date(2024, 1, 5), cost=float("inf"), sales=20.0),
    ]
    trend = build_labor_trend(entries, date(2024, 1, 1), date(2024, 6, 1))
    assert trend == [{"date": "2024-01-01", "granularity": "week", "sales": 20.0, "labor_cost": 10.0}]


def test_empty_trend():
    assert build_labor_trend([], date(2024, 1, 1), date(2024, 1, 2)) == []


def test_labor_vs_sales_rows():
    rows = build_labor_vs_sales([entry(date(2024, 3, 4), cost=99.999, sales=None, entry_id="abc")])
    assert rows == [{"entry_id": "abc", "date": "2024-03-04", "labor_cost": 100.0, "sales": 0.0, "position": "line"}]
