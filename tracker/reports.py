import calendar
from collections import defaultdict
from datetime import date
from typing import Iterable

from tracker.aggregation import category_totals, summarize
from tracker.dates import local_day, month_bounds, month_days, year_bounds
from tracker.domain import DailyPoint, MonthlyPoint, MonthlyReport, Transaction, YearlyReport
from tracker.filters import filter_by_date_range


def _by_day(trans: Iterable[Transaction]) -> dict[date, list[Transaction]]:
    days: dict[date, list[Transaction]] = defaultdict(list)
    for t in trans:
        days[local_day(t.date)].append(t)
    return days


def monthly_report(trans: Iterable[Transaction], month: int, year: int) -> MonthlyReport:
    """Summary, category totals and a gap-free daily series for one month.

    month is 1-12. Every day of the month appears in the series, days
    without transactions as zeros.
    """
    start, end = month_bounds(year, month)
    in_month = filter_by_date_range(trans, start, end)
    days = _by_day(in_month)

    series = []
    for day in month_days(year, month):
        totals = summarize(days.get(day, ()))
        series.append(DailyPoint(date=day, income=totals.income, expenses=totals.expenses))

    return MonthlyReport(
        year=year,
        month=month,
        summary=summarize(in_month),
        category_totals=category_totals(in_month),
        daily_series=tuple(series),
    )


def yearly_report(trans: Iterable[Transaction], year: int) -> YearlyReport:
    """Summary, category totals and twelve monthly points for one year."""
    start, end = year_bounds(year)
    in_year = filter_by_date_range(trans, start, end)

    series = []
    for month in range(1, 13):
        m_start, m_end = month_bounds(year, month)
        totals = summarize(filter_by_date_range(in_year, m_start, m_end))
        series.append(
            MonthlyPoint(
                month=month,
                label=calendar.month_abbr[month],
                income=totals.income,
                expenses=totals.expenses,
            )
        )

    return YearlyReport(
        year=year,
        summary=summarize(in_year),
        category_totals=category_totals(in_year),
        monthly_series=tuple(series),
    )


def group_by_date(
    trans: Iterable[Transaction],
) -> tuple[tuple[date, tuple[Transaction, ...]], ...]:
    # newest day first, transactions keep their input order within a day
    days = _by_day(trans)
    return tuple((day, tuple(days[day])) for day in sorted(days, reverse=True))
