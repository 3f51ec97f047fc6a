from collections import defaultdict
from datetime import datetime
from typing import Callable, Dict, List, NamedTuple

__all__ = [
    "Event",
    "EventBus",
    "TRANSACTION_ADDED",
    "TRANSACTION_UPDATED",
    "TRANSACTION_DELETED",
    "BUDGET_ALERT",
]

TRANSACTION_ADDED = "TRANSACTION_ADDED"
TRANSACTION_UPDATED = "TRANSACTION_UPDATED"
TRANSACTION_DELETED = "TRANSACTION_DELETED"
BUDGET_ALERT = "BUDGET_ALERT"


class Event(NamedTuple):
    name: str
    ts: str
    payload: dict


Handler = Callable[[Event], dict]


class EventBus:
    def __init__(self):
        self._subscribers: Dict[str, List[Handler]] = defaultdict(list)

    def subscribe(self, name: str, handler: Handler) -> None:
        self._subscribers[name].append(handler)

    def unsubscribe(self, name: str, handler: Handler) -> None:
        if handler in self._subscribers.get(name, ()):
            self._subscribers[name].remove(handler)

    def publish(self, name: str, payload: dict) -> List[dict]:
        """Deliver an event to every handler of that name, in subscription order.

        Returns what each handler returned.
        """
        handlers = list(self._subscribers.get(name, ()))
        if not handlers:
            return []
        event = Event(name=name, ts=datetime.now().isoformat(), payload=payload)
        return [handler(event) for handler in handlers]
