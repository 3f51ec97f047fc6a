import logging
from functools import partial
from typing import Iterable, Optional

from tracker.budgets import budget_status
from tracker.dates import current_moment
from tracker.domain import ALL_TYPES, Budget, BudgetStatus, Moment, MonthlyReport, Transaction, YearlyReport
from tracker.filters import filter_by_category, filter_by_type
from tracker.functional import pipe
from tracker.reports import monthly_report, yearly_report

logger = logging.getLogger(__name__)


class ReportService:
    """Facade the reports page uses: narrow the snapshot, then build a report.

    The optional category and type filters run before the report so its
    summary, totals and series all describe the same subset.
    """

    def __init__(self, category_id: Optional[str] = None, tx_type: str = ALL_TYPES):
        self.category_id = category_id
        self.tx_type = tx_type

    def _narrow(self, trans: Iterable[Transaction]) -> tuple[Transaction, ...]:
        return pipe(
            tuple(trans),
            partial(filter_by_category, category_id=self.category_id),
            partial(filter_by_type, tx_type=self.tx_type),
        )

    def monthly(self, trans: Iterable[Transaction], year: int, month: int) -> MonthlyReport:
        scoped = self._narrow(trans)
        logger.debug("monthly report %04d-%02d over %d transactions", year, month, len(scoped))
        return monthly_report(scoped, month, year)

    def yearly(self, trans: Iterable[Transaction], year: int) -> YearlyReport:
        scoped = self._narrow(trans)
        logger.debug("yearly report %04d over %d transactions", year, len(scoped))
        return yearly_report(scoped, year)


class BudgetService:
    def statuses(
        self,
        budgets: Iterable[Budget],
        trans: Iterable[Transaction],
        now: Optional[Moment] = None,
    ) -> tuple[BudgetStatus, ...]:
        trans = tuple(trans)
        moment = now if now is not None else current_moment()
        return tuple(budget_status(b, trans, moment) for b in budgets)

    def exceeded(
        self,
        budgets: Iterable[Budget],
        trans: Iterable[Transaction],
        now: Optional[Moment] = None,
    ) -> tuple[Budget, ...]:
        return tuple(s.budget for s in self.statuses(budgets, trans, now) if s.exceeded)
