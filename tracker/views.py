from typing import Iterable, Sequence, Union

import pandas as pd
import plotly.graph_objects as go

from tracker.dates import to_moment
from tracker.domain import CategoryTotal, DailyPoint, MonthlyPoint, Transaction

Point = Union[DailyPoint, MonthlyPoint]

FRAME_COLUMNS = ["date", "type", "amount", "category", "memo", "id"]


def category_pie(totals: Sequence[CategoryTotal], title: str = "Expenses by category") -> go.Figure:
    fig = go.Figure(
        go.Pie(
            labels=[t.name for t in totals],
            values=[float(t.total) for t in totals],
            marker=dict(colors=[t.color for t in totals]),
            sort=False,
        )
    )
    fig.update_layout(title=title, margin=dict(t=40, b=10, l=10, r=10))
    return fig


def series_line(points: Sequence[Point], title: str = "") -> go.Figure:
    """Income and expense lines over a daily or monthly series."""
    if points and isinstance(points[0], DailyPoint):
        x = [p.date.day for p in points]
    else:
        x = [p.label for p in points]

    fig = go.Figure()
    fig.add_trace(go.Scatter(x=x, y=[float(p.income) for p in points], mode="lines+markers", name="Income"))
    fig.add_trace(go.Scatter(x=x, y=[float(p.expenses) for p in points], mode="lines+markers", name="Expenses"))
    fig.update_layout(title=title, margin=dict(t=40, b=10, l=10, r=10))
    return fig


def transactions_frame(trans: Iterable[Transaction]) -> pd.DataFrame:
    rows = [
        {
            "date": to_moment(t.date),
            "type": t.type,
            "amount": float(t.amount),
            "category": t.category.name if t.category else "",
            "memo": t.memo,
            "id": t.id,
        }
        for t in trans
    ]
    df = pd.DataFrame(rows, columns=FRAME_COLUMNS)
    if not df.empty:
        df = df.sort_values("date", ascending=False).reset_index(drop=True)
    return df
