import json
from datetime import date
from typing import Any, Iterable, Mapping, Optional

from tracker.domain import Transaction


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (dict, list, tuple)):
        text = json.dumps(value, ensure_ascii=False, default=str)
    else:
        text = str(value)
    return '"' + text.replace('"', '""') + '"'


def to_delimited_text(rows: Iterable[Mapping[str, Any]]) -> str:
    """Comma separated table with a header taken from the first row's keys.

    Values are always quoted with embedded quotes doubled, missing values
    are empty and nested structures are written as JSON. Nested values are
    readable but not parsed back by anything here.
    """
    rows = list(rows)
    if not rows:
        return ""

    headers = list(rows[0].keys())
    lines = [",".join(headers)]
    for row in rows:
        lines.append(",".join(_cell(row.get(h)) for h in headers))
    return "\n".join(lines)


def transaction_rows(trans: Iterable[Transaction]) -> list[dict]:
    return [t.to_record() for t in trans]


def export_transactions(trans: Iterable[Transaction]) -> str:
    return to_delimited_text(transaction_rows(trans))


def export_filename(prefix: str = "transactions", day: Optional[date] = None) -> str:
    if day is None:
        return f"{prefix}.csv"
    return f"{prefix}_{day:%Y%m%d}.csv"
