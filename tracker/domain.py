from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Optional, Union

INCOME = "income"
EXPENSE = "expense"
ALL_TYPES = "all"
TRANSACTION_TYPES = (INCOME, EXPENSE)

DAILY = "daily"
WEEKLY = "weekly"
MONTHLY = "monthly"
YEARLY = "yearly"
BUDGET_PERIODS = (DAILY, WEEKLY, MONTHLY, YEARLY)

UNCATEGORIZED = "uncategorized"
FALLBACK_NAME = "Other"
FALLBACK_COLOR = "#CCCCCC"

ZERO = Decimal("0")

Moment = Union[str, datetime, date]


def to_amount(value: Any) -> Decimal:
    """Parse an amount into a Decimal.

    Accepts Decimal, int, float and numeric text. Anything else is a caller
    error and raises TypeError; text that is not a finite number raises
    ValueError.
    """
    if isinstance(value, Decimal):
        parsed = value
    elif isinstance(value, bool):
        raise TypeError("amount must be numeric, got bool")
    elif isinstance(value, int):
        parsed = Decimal(value)
    elif isinstance(value, float):
        parsed = Decimal(str(value))
    elif isinstance(value, str):
        try:
            parsed = Decimal(value.strip())
        except InvalidOperation as exc:
            raise ValueError(f"amount is not a number: {value!r}") from exc
    else:
        raise TypeError(f"amount must be numeric, got {type(value).__name__}")
    if not parsed.is_finite():
        raise ValueError(f"amount is not finite: {value!r}")
    return parsed


def _pick(data: dict, *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


@dataclass(frozen=True)
class CategorySnapshot:
    # copy of a category taken when a transaction is saved
    name: str
    color: str = FALLBACK_COLOR
    icon: str = ""

    def to_record(self) -> dict:
        return {"name": self.name, "color": self.color, "icon": self.icon}

    @classmethod
    def from_record(cls, data: Optional[dict]) -> Optional["CategorySnapshot"]:
        if not data:
            return None
        return cls(
            name=data.get("name") or FALLBACK_NAME,
            color=data.get("color") or FALLBACK_COLOR,
            icon=data.get("icon") or "",
        )


@dataclass(frozen=True)
class Category:
    id: str
    name: str
    type: str
    color: str = FALLBACK_COLOR
    icon: str = ""

    def snapshot(self) -> CategorySnapshot:
        return CategorySnapshot(name=self.name, color=self.color, icon=self.icon)

    def to_record(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "color": self.color,
            "icon": self.icon,
        }

    @classmethod
    def from_record(cls, data: dict) -> "Category":
        return cls(
            id=str(data["id"]),
            name=data["name"],
            type=data["type"],
            color=data.get("color") or FALLBACK_COLOR,
            icon=data.get("icon") or "",
        )


@dataclass(frozen=True)
class Transaction:
    id: str
    type: str               # income | expense
    amount: Decimal         # never negative, direction lives in type
    date: Moment            # when it happened, e.g. "2025-03-01T10:00:00"
    category_id: Optional[str] = None
    category: Optional[CategorySnapshot] = None
    memo: str = ""
    receipt_url: Optional[str] = None

    def to_record(self) -> dict:
        moment = self.date.isoformat() if isinstance(self.date, (date, datetime)) else self.date
        return {
            "id": self.id,
            "type": self.type,
            "amount": str(self.amount),
            "date": moment,
            "categoryId": self.category_id,
            "category": self.category.to_record() if self.category else None,
            "memo": self.memo,
            "receiptUrl": self.receipt_url,
        }

    @classmethod
    def from_record(cls, data: dict) -> "Transaction":
        category_id = _pick(data, "categoryId", "category_id")
        return cls(
            id=str(data["id"]),
            type=data["type"],
            amount=to_amount(data["amount"]),
            date=data["date"],
            category_id=str(category_id) if category_id is not None else None,
            category=CategorySnapshot.from_record(data.get("category")),
            memo=data.get("memo") or "",
            receipt_url=_pick(data, "receiptUrl", "receipt_url"),
        )


@dataclass(frozen=True)
class Budget:
    id: str
    amount: Decimal
    period: str = MONTHLY
    category_id: Optional[str] = None   # None applies to every expense
    category: Optional[CategorySnapshot] = None

    def to_record(self) -> dict:
        return {
            "id": self.id,
            "amount": str(self.amount),
            "period": self.period,
            "categoryId": self.category_id,
            "category": self.category.to_record() if self.category else None,
        }

    @classmethod
    def from_record(cls, data: dict) -> "Budget":
        category_id = _pick(data, "categoryId", "category_id")
        return cls(
            id=str(data["id"]),
            amount=to_amount(data["amount"]),
            period=data.get("period") or MONTHLY,
            category_id=str(category_id) if category_id is not None else None,
            category=CategorySnapshot.from_record(data.get("category")),
        )


@dataclass(frozen=True)
class Summary:
    income: Decimal = ZERO
    expenses: Decimal = ZERO
    balance: Decimal = ZERO


@dataclass(frozen=True)
class CategoryTotal:
    category_id: str
    name: str
    color: str
    total: Decimal


@dataclass(frozen=True)
class DailyPoint:
    date: date
    income: Decimal
    expenses: Decimal


@dataclass(frozen=True)
class MonthlyPoint:
    month: int
    label: str
    income: Decimal
    expenses: Decimal


@dataclass(frozen=True)
class MonthlyReport:
    year: int
    month: int
    summary: Summary
    category_totals: tuple[CategoryTotal, ...]
    daily_series: tuple[DailyPoint, ...]


@dataclass(frozen=True)
class YearlyReport:
    year: int
    summary: Summary
    category_totals: tuple[CategoryTotal, ...]
    monthly_series: tuple[MonthlyPoint, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class BudgetStatus:
    budget: Budget
    spent: Decimal
    remaining: Decimal
    exceeded: bool
    progress: float  # spent / amount, capped to [0, 1]
