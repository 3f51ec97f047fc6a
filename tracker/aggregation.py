from decimal import Decimal
from itertools import islice
from typing import Iterable, Iterator, Optional

from tracker.domain import (
    EXPENSE,
    FALLBACK_COLOR,
    FALLBACK_NAME,
    INCOME,
    UNCATEGORIZED,
    ZERO,
    CategoryTotal,
    Summary,
    Transaction,
    to_amount,
)

FALLBACK_LABEL = (FALLBACK_NAME, FALLBACK_COLOR)


def summarize(trans: Iterable[Transaction]) -> Summary:
    """Income, expenses and balance of a set of transactions.

    Anything that is not income counts as an expense. The balance is taken
    once from the two finished totals.
    """
    income = ZERO
    expenses = ZERO
    for t in trans:
        if t.type == INCOME:
            income += to_amount(t.amount)
        else:
            expenses += to_amount(t.amount)
    return Summary(income=income, expenses=expenses, balance=income - expenses)


def category_totals(trans: Iterable[Transaction]) -> tuple[CategoryTotal, ...]:
    """Expense totals per category, largest first.

    Transactions without a category id share one bucket, reported under
    the "uncategorized" id; a real category with that id keeps its own.
    Name and color come from the first snapshot seen for the category, so
    historical reports keep the labels they were recorded with.
    """
    labels: dict[Optional[str], tuple[str, str]] = {}
    totals: dict[Optional[str], Decimal] = {}

    for t in trans:
        if t.type != EXPENSE:
            continue
        # None keys the missing-category bucket so no real id can join it
        key = t.category_id or None
        totals[key] = totals.get(key, ZERO) + to_amount(t.amount)
        if key is not None and key not in labels and t.category is not None:
            labels[key] = (t.category.name or FALLBACK_NAME, t.category.color or FALLBACK_COLOR)

    # dicts keep insertion order and sorted() is stable, so ties stay in
    # first-appearance order
    ordered = sorted(totals.items(), key=lambda item: item[1], reverse=True)
    result = []
    for key, total in ordered:
        name, color = labels.get(key, FALLBACK_LABEL)
        result.append(CategoryTotal(category_id=key or UNCATEGORIZED, name=name, color=color, total=total))
    return tuple(result)


def top_categories(trans: Iterable[Transaction], k: int) -> Iterator[CategoryTotal]:
    yield from islice(category_totals(trans), max(0, k))
