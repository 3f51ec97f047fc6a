import calendar
from datetime import date

import pytest

from tracker.domain import CategorySnapshot, Transaction
from tracker.reports import group_by_date, monthly_report, yearly_report

FOOD = CategorySnapshot(name="Food", color="#FF5722")


def make_tx(id, type, amount, date, cat_id="1"):
    return Transaction(id=id, type=type, amount=amount, date=date, category_id=cat_id, category=FOOD)


TRANS = (
    make_tx("t0", "expense", 999, "2025-02-28T23:00:00"),
    make_tx("t1", "expense", 1000, "2025-03-01T08:00:00"),
    make_tx("t2", "income", 5000, "2025-03-02T09:00:00", cat_id="3"),
    make_tx("t3", "expense", 200, "2025-03-02T19:00:00"),
    make_tx("t4", "expense", 300, "2025-03-31T23:30:00"),
    make_tx("t5", "income", 70, "2025-11-11"),
)


def test_monthly_report_summary():
    report = monthly_report(TRANS, 3, 2025)

    assert report.summary.income == 5000
    assert report.summary.expenses == 1500
    assert report.summary.balance == 3500
    assert report.category_totals[0].total == 1500


def test_monthly_report_includes_late_last_day():
    report = monthly_report(TRANS, 3, 2025)

    assert report.daily_series[-1].date == date(2025, 3, 31)
    assert report.daily_series[-1].expenses == 300


def test_daily_series_has_one_point_per_day():
    for year, month in [(2025, 2), (2024, 2), (2025, 4), (2025, 3)]:
        series = monthly_report(TRANS, month, year).daily_series
        days = calendar.monthrange(year, month)[1]

        assert len(series) == days
        assert [p.date.day for p in series] == list(range(1, days + 1))


def test_daily_series_fills_empty_days_with_zero():
    series = monthly_report(TRANS, 3, 2025).daily_series

    assert series[1].income == 5000
    assert series[1].expenses == 200
    assert series[2].income == 0
    assert series[2].expenses == 0


def test_monthly_report_empty_input():
    report = monthly_report((), 6, 2025)

    assert report.summary.balance == 0
    assert report.category_totals == ()
    assert len(report.daily_series) == 30


def test_monthly_report_rejects_bad_month():
    with pytest.raises(ValueError):
        monthly_report(TRANS, 13, 2025)


def test_yearly_report_has_twelve_months():
    report = yearly_report(TRANS, 2025)

    assert len(report.monthly_series) == 12
    assert [p.month for p in report.monthly_series] == list(range(1, 13))
    assert report.monthly_series[0].label == calendar.month_abbr[1]


def test_yearly_report_buckets():
    report = yearly_report(TRANS, 2025)
    series = report.monthly_series

    assert series[1].expenses == 999
    assert series[2].income == 5000
    assert series[2].expenses == 1500
    assert series[10].income == 70
    assert series[0].income == 0 and series[0].expenses == 0
    assert report.summary.income == 5070


def test_yearly_report_other_year_is_empty():
    report = yearly_report(TRANS, 2024)

    assert len(report.monthly_series) == 12
    assert report.summary.income == 0
    assert all(p.income == 0 and p.expenses == 0 for p in report.monthly_series)


def test_group_by_date_newest_first():
    groups = group_by_date(TRANS)

    assert [day for day, _ in groups][:2] == [date(2025, 11, 11), date(2025, 3, 31)]
    march_second = dict(groups)[date(2025, 3, 2)]
    assert [t.id for t in march_second] == ["t2", "t3"]


def test_group_by_date_empty():
    assert group_by_date(()) == ()
