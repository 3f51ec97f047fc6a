import json
import logging
import os
from dataclasses import replace
from pathlib import Path
from typing import Any, Callable, Dict, Tuple
from uuid import uuid4

from tracker.domain import EXPENSE, INCOME, Budget, Category, Transaction

logger = logging.getLogger(__name__)

TRANSACTIONS = "transactions"
CATEGORIES = "categories"
BUDGETS = "budgets"

DEFAULT_CATEGORIES = (
    {"name": "Food", "icon": "food", "color": "#FF5722", "type": EXPENSE},
    {"name": "Transportation", "icon": "car", "color": "#4CAF50", "type": EXPENSE},
    {"name": "Housing", "icon": "home", "color": "#9C27B0", "type": EXPENSE},
    {"name": "Entertainment", "icon": "movie", "color": "#FFEB3B", "type": EXPENSE},
    {"name": "Medical", "icon": "medical-bag", "color": "#F44336", "type": EXPENSE},
    {"name": "Salary", "icon": "cash", "color": "#2196F3", "type": INCOME},
)

_PARSERS: Dict[str, Callable[[dict], Any]] = {
    TRANSACTIONS: Transaction.from_record,
    CATEGORIES: Category.from_record,
    BUDGETS: Budget.from_record,
}


class RecordNotFound(KeyError):
    pass


class MemoryStore:
    """Per-user collections of transactions, categories and budgets.

    Reads hand out tuples, so callers always work on a snapshot. New records
    get a fresh uuid4 id; ids are never reused.
    """

    def __init__(self):
        self._users: Dict[str, Dict[str, Dict[str, Any]]] = {}

    def _collection(self, user_id: str, kind: str) -> Dict[str, Any]:
        user = self._users.setdefault(user_id, {TRANSACTIONS: {}, CATEGORIES: {}, BUDGETS: {}})
        return user[kind]

    def _all(self, user_id: str, kind: str) -> Tuple[Any, ...]:
        return tuple(self._collection(user_id, kind).values())

    def _add(self, user_id: str, kind: str, record: Any) -> Any:
        saved = replace(record, id=uuid4().hex)
        self._collection(user_id, kind)[saved.id] = saved
        logger.debug("added %s %s for user %s", kind, saved.id, user_id)
        return saved

    def _update(self, user_id: str, kind: str, record_id: str, changes: dict) -> Any:
        records = self._collection(user_id, kind)
        if record_id not in records:
            raise RecordNotFound(f"{kind} {record_id} not found for user {user_id}")
        # a new frozen record replaces the old one, id stays
        updated = replace(records[record_id], **{**changes, "id": record_id})
        records[record_id] = updated
        logger.debug("updated %s %s for user %s", kind, record_id, user_id)
        return updated

    def _delete(self, user_id: str, kind: str, record_id: str) -> str:
        records = self._collection(user_id, kind)
        if record_id not in records:
            raise RecordNotFound(f"{kind} {record_id} not found for user {user_id}")
        del records[record_id]
        logger.debug("deleted %s %s for user %s", kind, record_id, user_id)
        return record_id

    def transactions(self, user_id: str) -> Tuple[Transaction, ...]:
        return self._all(user_id, TRANSACTIONS)

    def categories(self, user_id: str) -> Tuple[Category, ...]:
        return self._all(user_id, CATEGORIES)

    def budgets(self, user_id: str) -> Tuple[Budget, ...]:
        return self._all(user_id, BUDGETS)

    def get_transaction(self, user_id: str, transaction_id: str) -> Transaction:
        try:
            return self._collection(user_id, TRANSACTIONS)[transaction_id]
        except KeyError:
            raise RecordNotFound(f"{TRANSACTIONS} {transaction_id} not found for user {user_id}") from None

    def add_transaction(self, user_id: str, t: Transaction) -> Transaction:
        return self._add(user_id, TRANSACTIONS, t)

    def update_transaction(self, user_id: str, transaction_id: str, **changes) -> Transaction:
        return self._update(user_id, TRANSACTIONS, transaction_id, changes)

    def delete_transaction(self, user_id: str, transaction_id: str) -> str:
        return self._delete(user_id, TRANSACTIONS, transaction_id)

    def add_category(self, user_id: str, c: Category) -> Category:
        return self._add(user_id, CATEGORIES, c)

    def update_category(self, user_id: str, category_id: str, **changes) -> Category:
        return self._update(user_id, CATEGORIES, category_id, changes)

    def delete_category(self, user_id: str, category_id: str) -> str:
        # transactions keep their category snapshot
        return self._delete(user_id, CATEGORIES, category_id)

    def add_budget(self, user_id: str, b: Budget) -> Budget:
        return self._add(user_id, BUDGETS, b)

    def update_budget(self, user_id: str, budget_id: str, **changes) -> Budget:
        return self._update(user_id, BUDGETS, budget_id, changes)

    def delete_budget(self, user_id: str, budget_id: str) -> str:
        return self._delete(user_id, BUDGETS, budget_id)

    def ensure_default_categories(self, user_id: str) -> Tuple[Category, ...]:
        if not self.categories(user_id):
            logger.info("seeding default categories for user %s", user_id)
            for data in DEFAULT_CATEGORIES:
                self.add_category(user_id, Category(id="", **data))
        return self.categories(user_id)

    def load(self, user_id: str, data: dict) -> None:
        """Replace one user's records with the ones in a seed mapping."""
        for kind, parse in _PARSERS.items():
            records = self._collection(user_id, kind)
            records.clear()
            for raw in data.get(kind, []):
                record = parse(raw)
                records[record.id] = record

    def dump(self, path: str) -> None:
        payload = {
            user_id: {kind: [r.to_record() for r in records.values()] for kind, records in user.items()}
            for user_id, user in self._users.items()
        }
        with open(path, "w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=2)
        logger.info("wrote %d user(s) to %s", len(payload), path)


def load_seed(path: str, user_id: str) -> MemoryStore:
    """Store holding the records of a JSON seed file for one user.

    The file is either a single user's mapping with "transactions",
    "categories" and "budgets" lists, or the output of MemoryStore.dump
    keyed by user id.
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    if user_id in data and not set(data) & set(_PARSERS):
        data = data[user_id]

    store = MemoryStore()
    store.load(user_id, data)
    logger.info(
        "loaded %d transactions, %d categories, %d budgets from %s",
        len(store.transactions(user_id)),
        len(store.categories(user_id)),
        len(store.budgets(user_id)),
        Path(path).name,
    )
    return store


def open_store(path: str, user_id: str) -> MemoryStore:
    """Seeded store for user_id, or an empty one when path does not exist.

    Either way the user ends up with the default categories.
    """
    if os.path.exists(path):
        store = load_seed(path, user_id)
    else:
        logger.warning("seed file %s not found, starting empty", path)
        store = MemoryStore()
    store.ensure_default_categories(user_id)
    return store
