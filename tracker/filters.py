from typing import Callable, Iterable, Optional

from tracker.dates import end_bound, start_bound, to_moment
from tracker.domain import ALL_TYPES, Moment, Transaction

Predicate = Callable[[Transaction], bool]


def by_date_range(start: Optional[Moment], end: Optional[Moment]) -> Predicate:
    lower = start_bound(start)
    upper = end_bound(end)

    def _filter(t: Transaction) -> bool:
        return lower <= to_moment(t.date) <= upper

    return _filter


def by_category(category_id: str) -> Predicate:
    def _filter(t: Transaction) -> bool:
        return t.category_id == category_id

    return _filter


def by_type(tx_type: str) -> Predicate:
    def _filter(t: Transaction) -> bool:
        return t.type == tx_type

    return _filter


def filter_by_date_range(
    trans: Iterable[Transaction],
    start: Optional[Moment] = None,
    end: Optional[Moment] = None,
) -> tuple[Transaction, ...]:
    """Transactions dated within [start, end], both bounds inclusive.

    A missing bound leaves that side open; with neither bound the input
    comes back unchanged.
    """
    if start is None and end is None:
        return tuple(trans)
    return tuple(filter(by_date_range(start, end), trans))


def filter_by_category(
    trans: Iterable[Transaction], category_id: Optional[str]
) -> tuple[Transaction, ...]:
    if not category_id:
        return tuple(trans)
    return tuple(filter(by_category(category_id), trans))


def filter_by_type(
    trans: Iterable[Transaction], tx_type: Optional[str]
) -> tuple[Transaction, ...]:
    if not tx_type or tx_type == ALL_TYPES:
        return tuple(trans)
    return tuple(filter(by_type(tx_type), trans))
