from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from tracker.dates import current_moment, sunday_weekday, to_moment
from tracker.domain import Moment, to_amount

CURRENCY_SYMBOLS = {"JPY": "¥", "USD": "$", "EUR": "€", "GBP": "£", "KZT": "₸"}
ZERO_DECIMAL_CURRENCIES = {"JPY", "KZT", "KRW"}


def format_currency(amount, currency: str = "JPY") -> str:
    if amount is None:
        return ""
    value = to_amount(amount)
    places = Decimal("1") if currency in ZERO_DECIMAL_CURRENCIES else Decimal("0.01")
    value = value.quantize(places, rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    symbol = CURRENCY_SYMBOLS.get(currency, currency + " ")
    return f"{sign}{symbol}{abs(value):,}"


def format_date(value: Optional[Moment], fmt: str = "%Y/%m/%d") -> str:
    if value is None or value == "":
        return ""
    return to_moment(value).strftime(fmt)


def relative_date_label(value: Moment, now: Optional[Moment] = None) -> str:
    """Short label for a transaction date as seen from now."""
    moment = to_moment(value)
    today = current_moment(now)
    day = moment.date()

    if day == today.date():
        return "Today"
    if day == today.date() - timedelta(days=1):
        return "Yesterday"
    week_start = today.date() - timedelta(days=sunday_weekday(today))
    if week_start <= day <= week_start + timedelta(days=6):
        return moment.strftime("%A")
    if day.year == today.year:
        return f"{moment:%b} {day.day}"
    return moment.strftime("%Y/%m/%d")


def month_title(year: int, month: int) -> str:
    return datetime(year, month, 1).strftime("%B %Y")
