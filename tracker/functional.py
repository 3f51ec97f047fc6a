from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Any, Callable, Generic, Iterable, TypeVar

from tracker.domain import (
    BUDGET_PERIODS,
    EXPENSE,
    TRANSACTION_TYPES,
    Budget,
    Category,
    Transaction,
    to_amount,
)

T = TypeVar("T")
U = TypeVar("U")
E = TypeVar("E")


class Maybe(Generic[T], ABC):

    @abstractmethod
    def map(self, f: Callable[[T], U]) -> "Maybe[U]":
        ...

    @abstractmethod
    def bind(self, f: Callable[[T], "Maybe[U]"]) -> "Maybe[U]":
        ...

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        ...

    def is_some(self) -> bool:
        return isinstance(self, Some)

    def is_none(self) -> bool:
        return not self.is_some()


@dataclass(frozen=True)
class Some(Maybe[T]):
    value: T

    def map(self, f):
        return Some(f(self.value))

    def bind(self, f):
        return f(self.value)

    def get_or_else(self, default):
        return self.value


@dataclass(frozen=True)
class Nothing(Maybe[T]):

    def map(self, f):
        return self

    def bind(self, f):
        return self

    def get_or_else(self, default):
        return default


class Either(Generic[E, T], ABC):

    @abstractmethod
    def map(self, f: Callable[[T], U]) -> "Either[E, U]":
        ...

    @abstractmethod
    def bind(self, f: Callable[[T], "Either[E, U]"]) -> "Either[E, U]":
        ...

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        ...

    @abstractmethod
    def get_error(self) -> E:
        ...

    def is_right(self) -> bool:
        return isinstance(self, Right)

    def is_left(self) -> bool:
        return not self.is_right()


@dataclass(frozen=True)
class Right(Either[E, T]):
    value: T

    def map(self, f):
        return Right(f(self.value))

    def bind(self, f):
        return f(self.value)

    def get_or_else(self, default):
        return self.value

    def get_error(self):
        raise ValueError("Cannot get error from Right")


@dataclass(frozen=True)
class Left(Either[E, T]):
    error: E

    def map(self, f):
        return self

    def bind(self, f):
        return self

    def get_or_else(self, default):
        return default

    def get_error(self):
        return self.error


def _invalid(error: str, field: str, message: str, **extra: Any) -> Left:
    return Left({"error": error, "field": field, "message": message, **extra})


def _positive_amount(value: Any, field: str = "amount") -> Either[dict, Decimal]:
    if value is None or value == "":
        return _invalid("amount_required", field, "Please enter an amount")
    try:
        amount = to_amount(value)
    except (TypeError, ValueError):
        return _invalid("amount_invalid", field, "Please enter a valid amount", amount=value)
    if amount <= 0:
        return _invalid("amount_invalid", field, "Please enter a valid amount", amount=value)
    return Right(amount)


def safe_category(cats: Iterable[Category], category_id: str) -> Maybe[Category]:
    for cat in cats:
        if cat.id == category_id:
            return Some(cat)
    return Nothing()


def validate_transaction(t: Transaction, cats: Iterable[Category]) -> Either[dict, Transaction]:
    """Entry rules for a transaction before it is saved.

    The amount must be a positive number, a category must be chosen and its
    type must match the transaction type.
    """
    cats = tuple(cats)
    amount = _positive_amount(t.amount)
    if amount.is_left():
        return amount

    if t.type not in TRANSACTION_TYPES:
        return _invalid("type_invalid", "type", f"Unknown transaction type {t.type!r}", type=t.type)

    if not t.category_id:
        return _invalid("category_required", "category", "Please choose a category")

    found = safe_category(cats, t.category_id)
    if found.is_none():
        return _invalid(
            "category_not_found",
            "category",
            f"Category with ID {t.category_id} does not exist",
            category_id=t.category_id,
        )

    category = found.get_or_else(None)
    if category.type != t.type:
        return _invalid(
            "category_type_mismatch",
            "category",
            f"{category.type.capitalize()} category {category.name} cannot hold {t.type} transactions",
            category_type=category.type,
        )

    return Right(replace(t, amount=amount.get_or_else(t.amount)))


def validate_budget(b: Budget, cats: Iterable[Category]) -> Either[dict, Budget]:
    amount = _positive_amount(b.amount)
    if amount.is_left():
        return amount

    if b.period not in BUDGET_PERIODS:
        return _invalid("period_invalid", "period", f"Unknown budget period {b.period!r}", period=b.period)

    if b.category_id:
        found = safe_category(cats, b.category_id)
        if found.is_none():
            return _invalid(
                "category_not_found",
                "category",
                f"Category with ID {b.category_id} does not exist",
                category_id=b.category_id,
            )
        if found.get_or_else(None).type != EXPENSE:
            return _invalid(
                "category_type_mismatch",
                "category",
                "Budgets can only track expense categories",
                category_id=b.category_id,
            )

    return Right(replace(b, amount=amount.get_or_else(b.amount)))


def validate_category(c: Category) -> Either[dict, Category]:
    name = (c.name or "").strip()
    if not name:
        return _invalid("name_required", "name", "Please enter a category name")
    if c.type not in TRANSACTION_TYPES:
        return _invalid("type_invalid", "type", f"Unknown category type {c.type!r}", type=c.type)
    return Right(replace(c, name=name))


def attach_category(t: Transaction, cats: Iterable[Category]) -> Transaction:
    """Copy the current category details onto the transaction being saved."""
    return (
        safe_category(cats, t.category_id)
        .map(lambda c: replace(t, category=c.snapshot()))
        .get_or_else(t)
    )


def compose(*funcs):
    """compose(f, g, h)(x) == f(g(h(x)))"""
    def _composed(x):
        res = x
        for f in reversed(funcs):
            res = f(res)
        return res
    return _composed


def pipe(x, *funcs):
    """pipe(x, f, g, h) == h(g(f(x)))"""
    res = x
    for f in funcs:
        res = f(res)
    return res
