from datetime import datetime

from tracker.domain import Budget, CategorySnapshot, Transaction
from tracker.events import BUDGET_ALERT, TRANSACTION_ADDED, Event, EventBus
from tracker.notifications import ALL_EXPENSES, budget_alerts, next_reminder_at, notify_exceeded_budgets

NOW = datetime(2025, 3, 19, 15, 0)
FOOD = CategorySnapshot(name="Food", color="#FF5722")

TRANS = (
    Transaction(id="t1", type="expense", amount=900, date="2025-03-10", category_id="1", category=FOOD),
    Transaction(id="t2", type="expense", amount=300, date="2025-03-11", category_id="2"),
)

BUDGETS = (
    Budget(id="all", amount=1000, period="monthly"),
    Budget(id="food", amount=800, period="monthly", category_id="1", category=FOOD),
    Budget(id="car", amount=800, period="monthly", category_id="2"),
)


def test_event_bus_publish_and_unsubscribe():
    bus = EventBus()
    seen = []

    def handler(event: Event) -> dict:
        seen.append(event)
        return {"ok": True}

    bus.subscribe(TRANSACTION_ADDED, handler)
    assert bus.publish(TRANSACTION_ADDED, {"id": "t1"}) == [{"ok": True}]
    assert seen[0].name == TRANSACTION_ADDED
    assert seen[0].payload == {"id": "t1"}

    bus.unsubscribe(TRANSACTION_ADDED, handler)
    assert bus.publish(TRANSACTION_ADDED, {"id": "t2"}) == []
    assert len(seen) == 1


def test_publish_without_subscribers():
    assert EventBus().publish(BUDGET_ALERT, {}) == []


def test_budget_alerts_for_exceeded_budgets_only():
    alerts = budget_alerts(BUDGETS, TRANS, NOW)

    assert [a.budget_id for a in alerts] == ["all", "food"]
    assert alerts[0].body.startswith(ALL_EXPENSES)
    assert "¥1,000" in alerts[0].body
    assert "¥1,200" in alerts[0].body
    assert alerts[1].body.startswith("Food")


def test_notify_publishes_budget_alert_events():
    bus = EventBus()
    received = []
    bus.subscribe(BUDGET_ALERT, lambda event: received.append(event.payload) or {})

    alerts = notify_exceeded_budgets(BUDGETS, TRANS, bus, NOW, currency="USD")

    assert len(received) == len(alerts) == 2
    assert received[1]["budget_id"] == "food"
    assert "$800.00" in received[1]["body"]


def test_no_alerts_without_transactions():
    assert budget_alerts(BUDGETS, (), NOW) == ()


def test_next_reminder_today_before_hour():
    assert next_reminder_at(datetime(2025, 3, 19, 9, 0)) == datetime(2025, 3, 19, 20, 0)


def test_next_reminder_tomorrow_after_hour():
    assert next_reminder_at(datetime(2025, 3, 31, 20, 1)) == datetime(2025, 4, 1, 20, 0)
    assert next_reminder_at(datetime(2025, 3, 19, 7, 0), hour=6) == datetime(2025, 3, 20, 6, 0)
