import logging
from datetime import datetime, time, timedelta
from typing import Iterable, NamedTuple, Optional

from tracker.budgets import check_budget
from tracker.dates import current_moment
from tracker.domain import Budget, Moment, Transaction
from tracker.events import BUDGET_ALERT, EventBus
from tracker.formatting import format_currency

logger = logging.getLogger(__name__)

ALL_EXPENSES = "All expenses"
REMINDER_TITLE = "Daily reminder"
REMINDER_BODY = "Record today's income and expenses!"


class BudgetAlert(NamedTuple):
    budget_id: str
    title: str
    body: str


def budget_alerts(
    budgets: Iterable[Budget],
    trans: Iterable[Transaction],
    now: Optional[Moment] = None,
    currency: str = "JPY",
) -> tuple[BudgetAlert, ...]:
    """One alert per budget whose current window is over its limit."""
    trans = tuple(trans)
    moment = now if now is not None else current_moment()
    alerts = []
    for budget in budgets:
        result = check_budget(budget, trans, moment)
        if result.is_right():
            continue
        name = budget.category.name if budget.category else ALL_EXPENSES
        detail = result.get_error()
        alerts.append(
            BudgetAlert(
                budget_id=budget.id,
                title="Budget exceeded",
                body=(
                    f"{name} went over its {budget.period} budget of "
                    f"{format_currency(detail['limit'], currency)} "
                    f"(spent {format_currency(detail['spent'], currency)})."
                ),
            )
        )
    return tuple(alerts)


def notify_exceeded_budgets(
    budgets: Iterable[Budget],
    trans: Iterable[Transaction],
    bus: EventBus,
    now: Optional[Moment] = None,
    currency: str = "JPY",
) -> tuple[BudgetAlert, ...]:
    alerts = budget_alerts(budgets, trans, now, currency)
    for alert in alerts:
        logger.info("budget %s exceeded", alert.budget_id)
        bus.publish(BUDGET_ALERT, alert._asdict())
    return alerts


def next_reminder_at(now: Optional[Moment] = None, hour: int = 20) -> datetime:
    # today at hour:00, or tomorrow once that time has passed
    moment = current_moment(now)
    scheduled = datetime.combine(moment.date(), time(hour=hour))
    if moment > scheduled:
        scheduled += timedelta(days=1)
    return scheduled
