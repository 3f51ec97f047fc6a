from datetime import date
from decimal import Decimal

from tracker.domain import CategoryTotal, CategorySnapshot, DailyPoint, MonthlyPoint, Transaction
from tracker.views import FRAME_COLUMNS, category_pie, series_line, transactions_frame


def test_category_pie_uses_category_colors():
    totals = (
        CategoryTotal(category_id="2", name="Transport", color="#4CAF50", total=Decimal("500")),
        CategoryTotal(category_id="1", name="Food", color="#FF5722", total=Decimal("300")),
    )
    fig = category_pie(totals)
    pie = fig.data[0]

    assert list(pie.labels) == ["Transport", "Food"]
    assert list(pie.values) == [500.0, 300.0]
    assert list(pie.marker.colors) == ["#4CAF50", "#FF5722"]


def test_series_line_daily_uses_day_numbers():
    points = [DailyPoint(date=date(2025, 3, d), income=Decimal(d), expenses=Decimal(0)) for d in (1, 2, 3)]
    fig = series_line(points)

    assert [trace.name for trace in fig.data] == ["Income", "Expenses"]
    assert list(fig.data[0].x) == [1, 2, 3]
    assert list(fig.data[0].y) == [1.0, 2.0, 3.0]


def test_series_line_monthly_uses_labels():
    points = [MonthlyPoint(month=1, label="Jan", income=Decimal(1), expenses=Decimal(2))]
    fig = series_line(points)

    assert list(fig.data[1].x) == ["Jan"]
    assert list(fig.data[1].y) == [2.0]


def test_transactions_frame_newest_first():
    trans = [
        Transaction(id="a", type="expense", amount=Decimal("5"), date="2025-03-01",
                    category_id="1", category=CategorySnapshot(name="Food")),
        Transaction(id="b", type="income", amount=Decimal("7.5"), date="2025-03-09T10:00:00"),
    ]
    df = transactions_frame(trans)

    assert list(df.columns) == FRAME_COLUMNS
    assert list(df["id"]) == ["b", "a"]
    assert list(df["category"]) == ["", "Food"]
    assert df["amount"].sum() == 12.5


def test_transactions_frame_empty():
    df = transactions_frame([])

    assert df.empty
    assert list(df.columns) == FRAME_COLUMNS
