from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional

from tracker.aggregation import summarize
from tracker.dates import current_moment, end_bound, period_start
from tracker.domain import EXPENSE, ZERO, Budget, BudgetStatus, Moment, Transaction, to_amount
from tracker.filters import filter_by_category, filter_by_date_range, filter_by_type
from tracker.functional import Either, Left, Right


def budget_window(period: str, now: Optional[Moment] = None) -> tuple[datetime, datetime]:
    """Start and inclusive end of the budget period containing now.

    A calendar-day now (date or "YYYY-MM-DD") ends the window at the end
    of that day; a now with a time ends it exactly there.
    """
    moment = current_moment(now)
    end = end_bound(now) if now is not None else moment
    return period_start(period, moment), end


def budget_spent(
    budget: Budget, trans: Iterable[Transaction], now: Optional[Moment] = None
) -> Decimal:
    """Spending counted against a budget in its current window.

    A budget tied to a category counts that category only; one without a
    category counts every expense.
    """
    start, end = budget_window(budget.period, now)
    in_window = filter_by_date_range(trans, start, end)
    if budget.category_id:
        scoped = filter_by_category(in_window, budget.category_id)
    else:
        scoped = filter_by_type(in_window, EXPENSE)
    return summarize(scoped).expenses


def budget_exceeded(
    budget: Budget, trans: Iterable[Transaction], now: Optional[Moment] = None
) -> bool:
    # spending exactly at the limit is still within budget
    return budget_spent(budget, trans, now) > to_amount(budget.amount)


def check_budget(
    budget: Budget, trans: Iterable[Transaction], now: Optional[Moment] = None
) -> Either[dict, Budget]:
    limit = to_amount(budget.amount)
    spent = budget_spent(budget, trans, now)

    if spent > limit:
        return Left({
            "error": "budget_exceeded",
            "message": f"Budget limit exceeded for {budget.category_id or 'all expenses'}",
            "budget_id": budget.id,
            "category_id": budget.category_id,
            "limit": limit,
            "spent": spent,
            "over_budget": spent - limit,
        })

    return Right(budget)


def budget_status(
    budget: Budget, trans: Iterable[Transaction], now: Optional[Moment] = None
) -> BudgetStatus:
    limit = to_amount(budget.amount)
    spent = budget_spent(budget, trans, now)
    if limit > ZERO:
        progress = float(spent / limit)
    else:
        progress = 1.0 if spent > ZERO else 0.0
    return BudgetStatus(
        budget=budget,
        spent=spent,
        remaining=limit - spent,
        exceeded=spent > limit,
        progress=min(1.0, max(0.0, progress)),
    )
