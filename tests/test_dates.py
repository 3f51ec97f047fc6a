from datetime import date, datetime, time, timezone

import pytest

from tracker.dates import (
    days_in_month,
    end_bound,
    month_bounds,
    period_start,
    start_bound,
    sunday_weekday,
    to_moment,
)


def test_to_moment_date_only_is_midnight():
    assert to_moment("2025-03-01") == datetime(2025, 3, 1)
    assert to_moment(date(2025, 3, 1)) == datetime(2025, 3, 1)


def test_to_moment_aware_values_become_local():
    aware = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)
    expected = aware.astimezone().replace(tzinfo=None)

    assert to_moment(aware) == expected
    assert to_moment("2025-03-01T12:00:00Z") == expected
    assert to_moment("2025-03-01T12:00:00.000Z") == expected


def test_bounds():
    assert start_bound(None) == datetime.min
    assert end_bound(None) == datetime.max
    assert end_bound("2025-03-31") == datetime.combine(date(2025, 3, 31), time.max)
    assert end_bound("2025-03-31T10:00:00") == datetime(2025, 3, 31, 10)


def test_month_bounds_cover_leap_day():
    start, end = month_bounds(2024, 2)

    assert start == datetime(2024, 2, 1)
    assert end.date() == date(2024, 2, 29)
    assert days_in_month(2025, 2) == 28


def test_days_in_month_rejects_bad_month():
    with pytest.raises(ValueError):
        days_in_month(2025, 0)


def test_sunday_weekday():
    assert sunday_weekday(datetime(2025, 3, 16)) == 0
    assert sunday_weekday(datetime(2025, 3, 22)) == 6


def test_period_start():
    now = datetime(2025, 3, 19, 15, 30)

    assert period_start("daily", now) == datetime(2025, 3, 19)
    assert period_start("weekly", now) == datetime(2025, 3, 16)
    assert period_start("monthly", now) == datetime(2025, 3, 1)
    assert period_start("yearly", now) == datetime(2025, 1, 1)
    assert period_start("", now) == datetime(2025, 3, 1)


def test_weekly_start_crosses_month():
    assert period_start("weekly", datetime(2025, 3, 1, 9)) == datetime(2025, 2, 23)
