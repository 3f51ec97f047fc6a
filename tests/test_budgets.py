from datetime import datetime
from decimal import Decimal

from tracker.budgets import budget_exceeded, budget_spent, budget_status, budget_window, check_budget
from tracker.domain import Budget, Transaction

# Wednesday
NOW = datetime(2025, 3, 19, 15, 0, 0)


def make_tx(id, amount, date, type="expense", cat_id="1"):
    return Transaction(id=id, type=type, amount=amount, date=date, category_id=cat_id)


def make_budget(amount, period="monthly", cat_id=None):
    return Budget(id="b1", amount=amount, period=period, category_id=cat_id)


TRANS = (
    make_tx("t1", 400, "2025-02-27T10:00:00"),
    make_tx("t2", 300, "2025-03-02T10:00:00"),
    make_tx("t3", 500, "2025-03-16T00:00:00", cat_id="2"),
    make_tx("t4", 200, "2025-03-19T08:00:00"),
    make_tx("t5", 9000, "2025-03-19T09:00:00", type="income", cat_id="3"),
    make_tx("t6", 700, "2025-03-19T18:00:00"),
)


def test_monthly_budget_counts_current_month_only():
    assert budget_spent(make_budget(1000), TRANS, NOW) == 1000


def test_exactly_at_limit_is_not_exceeded():
    assert not budget_exceeded(make_budget(1000), TRANS, NOW)
    assert budget_exceeded(make_budget(Decimal("999.99")), TRANS, NOW)


def test_daily_window():
    assert budget_spent(make_budget(100, "daily"), TRANS, NOW) == 200


def test_calendar_day_now_counts_the_whole_day():
    assert budget_spent(make_budget(100, "daily"), TRANS, "2025-03-19") == 900
    assert budget_window("daily", "2025-03-19")[1] == datetime(2025, 3, 19, 23, 59, 59, 999999)
    assert budget_exceeded(make_budget(800, "daily"), TRANS, "2025-03-19")


def test_weekly_window_starts_on_sunday():
    start, end = budget_window("weekly", NOW)

    assert start == datetime(2025, 3, 16)
    assert end == NOW
    assert budget_spent(make_budget(100, "weekly"), TRANS, NOW) == 700


def test_weekly_window_on_sunday_starts_today():
    sunday = datetime(2025, 3, 16, 9, 0)

    assert budget_window("weekly", sunday)[0] == datetime(2025, 3, 16)


def test_yearly_window():
    assert budget_spent(make_budget(100, "yearly"), TRANS, NOW) == 1400


def test_unknown_period_falls_back_to_monthly():
    assert budget_window("fortnightly", NOW) == budget_window("monthly", NOW)
    assert budget_spent(make_budget(100, "fortnightly"), TRANS, NOW) == 1000


def test_category_budget_counts_that_category_only():
    assert budget_spent(make_budget(100, cat_id="2"), TRANS, NOW) == 500
    assert budget_exceeded(make_budget(499, cat_id="2"), TRANS, NOW)
    assert not budget_exceeded(make_budget(500, cat_id="2"), TRANS, NOW)


def test_category_budget_ignores_income_in_category():
    trans = (make_tx("i", 50, "2025-03-10", type="income", cat_id="3"),)

    assert budget_spent(make_budget(10, cat_id="3"), trans, NOW) == 0
    assert not budget_exceeded(make_budget(10, cat_id="3"), trans, NOW)


def test_empty_transactions_never_exceed():
    assert budget_exceeded(make_budget(0), (), NOW) is False
    assert budget_exceeded(make_budget(10, cat_id="nope"), TRANS, NOW) is False


def test_budget_exceeded_defaults_to_current_time():
    today = datetime.now().replace(microsecond=0)
    trans = (make_tx("now", 2000, today.replace(hour=0, minute=0, second=0).isoformat()),)

    assert budget_exceeded(make_budget(1000), trans)


def test_check_budget_reports_overrun():
    result = check_budget(make_budget(800), TRANS, NOW)

    assert result.is_left()
    error = result.get_error()
    assert error["error"] == "budget_exceeded"
    assert error["spent"] == 1000
    assert error["over_budget"] == 200


def test_check_budget_within_limit():
    budget = make_budget(5000)

    assert check_budget(budget, TRANS, NOW).get_or_else(None) == budget


def test_budget_status():
    status = budget_status(make_budget(4000), TRANS, NOW)

    assert status.spent == 1000
    assert status.remaining == 3000
    assert status.exceeded is False
    assert status.progress == 0.25


def test_budget_status_caps_progress():
    status = budget_status(make_budget(500), TRANS, NOW)

    assert status.exceeded is True
    assert status.progress == 1.0
    assert status.remaining == -500
