import calendar
from datetime import date, datetime, time, timedelta
from functools import lru_cache
from typing import Optional

from tracker.domain import DAILY, WEEKLY, YEARLY, Moment


def _parse_text(value: str) -> tuple[datetime, bool]:
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    if len(text) == 10:
        return datetime.combine(date.fromisoformat(text), time.min), True
    return datetime.fromisoformat(text), False


def _to_local(moment: datetime) -> datetime:
    if moment.tzinfo is not None:
        return moment.astimezone().replace(tzinfo=None)
    return moment


def to_moment(value: Moment) -> datetime:
    """Naive local datetime for a transaction date.

    Date-only values map to midnight; timezone-aware values are converted to
    local time first so every comparison happens on the local calendar.
    """
    if isinstance(value, datetime):
        return _to_local(value)
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    moment, _ = _parse_text(value)
    return _to_local(moment)


def local_day(value: Moment) -> date:
    return to_moment(value).date()


def start_bound(value: Optional[Moment]) -> datetime:
    if value is None:
        return datetime.min
    return to_moment(value)


def end_bound(value: Optional[Moment]) -> datetime:
    # a bare calendar day includes everything up to its last microsecond
    if value is None:
        return datetime.max
    if isinstance(value, datetime):
        return _to_local(value)
    if isinstance(value, date):
        return datetime.combine(value, time.max)
    moment, date_only = _parse_text(value)
    if date_only:
        return datetime.combine(moment.date(), time.max)
    return _to_local(moment)


@lru_cache(maxsize=None)
def days_in_month(year: int, month: int) -> int:
    if not 1 <= month <= 12:
        raise ValueError(f"month must be in 1..12, got {month}")
    return calendar.monthrange(year, month)[1]


@lru_cache(maxsize=None)
def month_bounds(year: int, month: int) -> tuple[datetime, datetime]:
    last = days_in_month(year, month)
    return (
        datetime(year, month, 1),
        datetime.combine(date(year, month, last), time.max),
    )


def year_bounds(year: int) -> tuple[datetime, datetime]:
    return datetime(year, 1, 1), datetime.combine(date(year, 12, 31), time.max)


def month_days(year: int, month: int) -> tuple[date, ...]:
    first = date(year, month, 1)
    return tuple(first + timedelta(days=i) for i in range(days_in_month(year, month)))


def sunday_weekday(moment: datetime) -> int:
    # Sunday = 0 ... Saturday = 6
    return (moment.weekday() + 1) % 7


def period_start(period: str, now: datetime) -> datetime:
    """Start of the budget window containing now. Unknown periods are monthly."""
    midnight = datetime.combine(now.date(), time.min)
    if period == DAILY:
        return midnight
    if period == WEEKLY:
        return midnight - timedelta(days=sunday_weekday(now))
    if period == YEARLY:
        return midnight.replace(month=1, day=1)
    # MONTHLY and anything unrecognised
    return midnight.replace(day=1)


def current_moment(now: Optional[Moment] = None) -> datetime:
    if now is None:
        return datetime.now()
    return to_moment(now)
