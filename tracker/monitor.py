import asyncio
import logging
from typing import Optional

from tracker.config import Config, configure_logging
from tracker.domain import Moment
from tracker.events import BUDGET_ALERT, EventBus
from tracker.notifications import BudgetAlert, notify_exceeded_budgets
from tracker.store import MemoryStore, open_store

logger = logging.getLogger(__name__)


class BudgetMonitor:
    """Re-checks a user's budgets against freshly fetched records.

    Budgets and transactions are fetched concurrently; every exceeded budget
    is published on the bus as a BUDGET_ALERT.
    """

    def __init__(self, store: MemoryStore, bus: EventBus, currency: str = "JPY"):
        self.store = store
        self.bus = bus
        self.currency = currency

    async def check(self, user_id: str, now: Optional[Moment] = None) -> tuple[BudgetAlert, ...]:
        budgets, trans = await asyncio.gather(
            asyncio.to_thread(self.store.budgets, user_id),
            asyncio.to_thread(self.store.transactions, user_id),
        )
        return notify_exceeded_budgets(budgets, trans, self.bus, now, self.currency)

    async def run(self, user_id: str, interval: float, iterations: Optional[int] = None) -> int:
        """Check every interval seconds; returns the number of checks made.

        A failed check is logged and the loop carries on. iterations=None
        runs until cancelled.
        """
        done = 0
        while iterations is None or done < iterations:
            try:
                alerts = await self.check(user_id)
                logger.debug("budget check for %s raised %d alert(s)", user_id, len(alerts))
            except Exception:
                logger.exception("budget check failed for user %s", user_id)
            done += 1
            if iterations is None or done < iterations:
                await asyncio.sleep(interval)
        return done


def _log_alert(event) -> dict:
    logger.warning("%s: %s", event.payload["title"], event.payload["body"])
    return {"logged": True}


def main(iterations: Optional[int] = None) -> int:
    """Watch the configured user's budgets from the seed file, logging every alert."""
    configure_logging()
    bus = EventBus()
    bus.subscribe(BUDGET_ALERT, _log_alert)
    monitor = BudgetMonitor(open_store(Config.SEED_PATH, Config.USER_ID), bus, Config.CURRENCY)
    logger.info("checking budgets for %s every %ss", Config.USER_ID, Config.BUDGET_CHECK_INTERVAL)
    try:
        asyncio.run(monitor.run(Config.USER_ID, Config.BUDGET_CHECK_INTERVAL, iterations))
    except KeyboardInterrupt:
        logger.info("budget monitor stopped")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
