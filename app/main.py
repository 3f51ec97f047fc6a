import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import asyncio
import logging
import time
from dataclasses import replace
from datetime import date, datetime

import streamlit as st

from tracker.config import Config, configure_logging
from tracker.dates import to_moment
from tracker.domain import (
    ALL_TYPES,
    BUDGET_PERIODS,
    EXPENSE,
    INCOME,
    MONTHLY,
    Budget,
    Category,
    Transaction,
)
from tracker.events import BUDGET_ALERT, TRANSACTION_ADDED, TRANSACTION_DELETED, TRANSACTION_UPDATED, EventBus
from tracker.export import export_filename, export_transactions
from tracker.formatting import CURRENCY_SYMBOLS, format_currency, month_title, relative_date_label
from tracker.functional import (
    attach_category,
    safe_category,
    validate_budget,
    validate_category,
    validate_transaction,
)
from tracker.monitor import BudgetMonitor
from tracker.notifications import next_reminder_at, notify_exceeded_budgets
from tracker.reports import group_by_date
from tracker.services import BudgetService, ReportService
from tracker.store import MemoryStore, open_store
from tracker.views import category_pie, series_line, transactions_frame

configure_logging()
logger = logging.getLogger("tracker.app")

st.set_page_config(page_title="Finance Tracker", layout="wide")

USER = Config.USER_ID
CURRENCY = st.session_state.get("currency", Config.CURRENCY)
EDITABLE_FIELDS = ("type", "amount", "date", "category_id", "category", "memo")


def _on_budget_alert(event) -> dict:
    st.session_state.alerts.append(
        {"ts": event.ts[11:19], "title": event.payload["title"], "body": event.payload["body"]}
    )
    return {"shown": True}


# each browser session gets its own store, bus and alert list
if "store" not in st.session_state:
    st.session_state.store = open_store(Config.SEED_PATH, USER)
    st.session_state.alerts = []
    st.session_state.bus = EventBus()
    st.session_state.bus.subscribe(BUDGET_ALERT, _on_budget_alert)

store: MemoryStore = st.session_state.store
bus: EventBus = st.session_state.bus


def _check_budgets_if_due() -> None:
    last = st.session_state.get("last_budget_check")
    if last is not None and time.monotonic() - last < Config.BUDGET_CHECK_INTERVAL:
        return
    st.session_state.last_budget_check = time.monotonic()
    asyncio.run(BudgetMonitor(store, bus, CURRENCY).check(USER))


_check_budgets_if_due()

transactions = store.transactions(USER)
categories = store.categories(USER)
budgets = store.budgets(USER)


def money(value) -> str:
    return format_currency(value, CURRENCY)


def save_transaction(draft: Transaction) -> bool:
    """Validate and store a new (empty id) or edited transaction."""
    result = validate_transaction(draft, categories)
    if result.is_left():
        st.error(result.get_error()["message"])
        return False
    t = attach_category(result.get_or_else(draft), categories)
    if t.id:
        saved = store.update_transaction(USER, t.id, **{f: getattr(t, f) for f in EDITABLE_FIELDS})
        bus.publish(TRANSACTION_UPDATED, saved.to_record())
    else:
        saved = store.add_transaction(USER, t)
        bus.publish(TRANSACTION_ADDED, saved.to_record())
    notify_exceeded_budgets(store.budgets(USER), store.transactions(USER), bus, currency=CURRENCY)
    return True


menu = st.sidebar.radio(
    "Menu",
    ["🏠 Overview", "🧾 Transactions", "🗂 Categories", "📑 Reports", "💰 Budgets", "⚙️ Settings"],
    key="menu",
)

if st.session_state.alerts:
    st.sidebar.markdown("### 🔔 Alerts")
    for alert in reversed(st.session_state.alerts[-5:]):
        st.sidebar.warning(f"[{alert['ts']}] {alert['body']}")

if menu == "🏠 Overview":
    st.title("🏠 Overview")
    today = date.today()
    report = ReportService().monthly(transactions, today.year, today.month)
    summary = report.summary

    k1, k2, k3 = st.columns(3)
    with k1:
        st.metric("Income", money(summary.income))
    with k2:
        st.metric("Expenses", money(summary.expenses))
    with k3:
        st.metric("Balance", money(summary.balance))
    st.caption(month_title(today.year, today.month))

    st.subheader("Top categories")
    for total in report.category_totals[:5]:
        st.markdown(f"- **{total.name}**: {money(total.total)}")

    st.subheader("Recent transactions")
    for day, day_trans in group_by_date(transactions)[:7]:
        st.markdown(f"**{relative_date_label(day)}**")
        for t in day_trans:
            sign = "+" if t.type == INCOME else "-"
            label = t.category.name if t.category else "Other"
            st.write(f"{label} {sign}{money(t.amount)} {t.memo}")

elif menu == "🧾 Transactions":
    st.title("🧾 Transactions")

    st.subheader("➕ Add Transaction")
    tx_type = st.radio("Type", [EXPENSE, INCOME], horizontal=True, key="tx_type")
    options = [c for c in categories if c.type == tx_type]
    with st.form("transaction_form", clear_on_submit=True):
        col1, col2 = st.columns(2)
        with col1:
            tx_date = st.date_input("Date", value=date.today(), key="tx_date")
            amount = st.text_input("Amount", key="tx_amount")
        with col2:
            category_name = st.selectbox("Category", [c.name for c in options], key="tx_category")
            memo = st.text_input("Memo (optional)", key="tx_memo")
        submitted = st.form_submit_button("Save", key="tx_save")

    if submitted:
        draft = Transaction(
            id="",
            type=tx_type,
            amount=amount,
            date=datetime.combine(tx_date, datetime.now().time()).isoformat(timespec="seconds"),
            category_id=next((c.id for c in options if c.name == category_name), None),
            memo=memo,
        )
        if save_transaction(draft):
            st.success("Transaction saved")
            st.rerun()

    st.subheader("📋 All Transactions")
    df = transactions_frame(transactions)
    if df.empty:
        st.info("No transactions yet.")
    else:
        shown = df.assign(
            date=df["date"].dt.strftime("%Y-%m-%d"),
            amount=df["amount"].map(money),
        )
        st.dataframe(shown.drop(columns=["id"]), width="stretch")

        labels = {row.id: f"{row.date:%Y-%m-%d} {row.category} {money(row.amount)} {row.memo} [{row.id}]" for row in df.itertuples()}

        st.subheader("✏️ Edit Transaction")
        to_edit = st.selectbox("Transaction", ["-"] + list(df["id"]), format_func=lambda i: labels.get(i, i), key="edit_tx_id")
        if to_edit != "-":
            current = store.get_transaction(USER, to_edit)
            moment = to_moment(current.date)
            edit_type = st.radio(
                "Type", [EXPENSE, INCOME], index=[EXPENSE, INCOME].index(current.type),
                horizontal=True, key=f"edit_tx_type_{to_edit}",
            )
            edit_options = [c for c in categories if c.type == edit_type]
            current_index = next((i for i, c in enumerate(edit_options) if c.id == current.category_id), 0)
            with st.form(f"edit_transaction_form_{to_edit}"):
                col1, col2 = st.columns(2)
                with col1:
                    edit_date = st.date_input("Date", value=moment.date(), key=f"edit_tx_date_{to_edit}")
                    edit_amount = st.text_input("Amount", value=str(current.amount), key=f"edit_tx_amount_{to_edit}")
                with col2:
                    edit_category = st.selectbox(
                        "Category", [c.name for c in edit_options], index=current_index,
                        key=f"edit_tx_category_{to_edit}",
                    )
                    edit_memo = st.text_input("Memo (optional)", value=current.memo, key=f"edit_tx_memo_{to_edit}")
                updated = st.form_submit_button("Update", key=f"edit_tx_save_{to_edit}")

            if updated:
                draft = replace(
                    current,
                    type=edit_type,
                    amount=edit_amount,
                    date=datetime.combine(edit_date, moment.time()).isoformat(timespec="seconds"),
                    category_id=next((c.id for c in edit_options if c.name == edit_category), None),
                    memo=edit_memo,
                )
                if save_transaction(draft):
                    st.success("Transaction updated")
                    st.rerun()

        to_delete = st.selectbox("Delete transaction", ["-"] + list(df["id"]), format_func=lambda i: labels.get(i, i))
        if to_delete != "-" and st.button("Delete"):
            store.delete_transaction(USER, to_delete)
            bus.publish(TRANSACTION_DELETED, {"id": to_delete})
            st.rerun()

elif menu == "🗂 Categories":
    st.title("🗂 Categories")

    for kind, heading in ((EXPENSE, "Expense categories"), (INCOME, "Income categories")):
        st.subheader(heading)
        rows = [{"name": c.name, "color": c.color, "icon": c.icon} for c in categories if c.type == kind]
        if rows:
            st.dataframe(rows, width="stretch")
        else:
            st.info("No categories yet.")

    st.subheader("➕ Add Category")
    with st.form("category_form", clear_on_submit=True):
        new_name = st.text_input("Name", key="cat_name")
        new_type = st.selectbox("Type", [EXPENSE, INCOME], key="cat_type")
        new_color = st.color_picker("Color", value="#2196F3", key="cat_color")
        new_icon = st.text_input("Icon", value="category", key="cat_icon")
        added = st.form_submit_button("Add category", key="cat_add")

    if added:
        result = validate_category(Category(id="", name=new_name, type=new_type, color=new_color, icon=new_icon))
        if result.is_left():
            st.error(result.get_error()["message"])
        else:
            store.add_category(USER, result.get_or_else(None))
            st.rerun()

    st.subheader("✏️ Edit Category")
    names = {c.id: f"{c.name} ({c.type})" for c in categories}
    to_edit = st.selectbox("Category", ["-"] + list(names), format_func=lambda i: names.get(i, i), key="edit_cat_id")
    if to_edit != "-":
        current = next(c for c in categories if c.id == to_edit)
        with st.form(f"edit_category_form_{to_edit}"):
            edit_name = st.text_input("Name", value=current.name, key=f"edit_cat_name_{to_edit}")
            edit_color = st.color_picker("Color", value=current.color, key=f"edit_cat_color_{to_edit}")
            edit_icon = st.text_input("Icon", value=current.icon, key=f"edit_cat_icon_{to_edit}")
            updated = st.form_submit_button("Update category", key=f"edit_cat_save_{to_edit}")

        if updated:
            result = validate_category(replace(current, name=edit_name, color=edit_color, icon=edit_icon))
            if result.is_left():
                st.error(result.get_error()["message"])
            else:
                c = result.get_or_else(current)
                store.update_category(USER, to_edit, name=c.name, color=c.color, icon=c.icon)
                st.rerun()

        st.caption("Transactions keep the category details they were saved with.")
        if st.button("Delete category", key=f"del_cat_{to_edit}"):
            store.delete_category(USER, to_edit)
            st.rerun()

elif menu == "📑 Reports":
    st.title("📑 Reports")

    if "report_date" not in st.session_state:
        st.session_state.report_date = date.today().replace(day=1)

    report_kind = st.radio("Report", ["monthly", "yearly"], horizontal=True)
    col_prev, col_title, col_next = st.columns([1, 3, 1])
    current = st.session_state.report_date
    with col_prev:
        if st.button("◀"):
            if report_kind == "monthly":
                y, m = (current.year, current.month - 1) if current.month > 1 else (current.year - 1, 12)
            else:
                y, m = current.year - 1, current.month
            st.session_state.report_date = date(y, m, 1)
            st.rerun()
    with col_next:
        if st.button("▶"):
            if report_kind == "monthly":
                y, m = (current.year, current.month + 1) if current.month < 12 else (current.year + 1, 1)
            else:
                y, m = current.year + 1, current.month
            st.session_state.report_date = date(y, m, 1)
            st.rerun()
    with col_title:
        heading = month_title(current.year, current.month) if report_kind == "monthly" else str(current.year)
        st.subheader(heading)

    f1, f2 = st.columns(2)
    with f1:
        cat_names = ["All"] + [c.name for c in categories]
        cat_choice = st.selectbox("Category", cat_names)
        cat_id = next((c.id for c in categories if c.name == cat_choice), None)
    with f2:
        type_choice = st.selectbox("Type", [ALL_TYPES, INCOME, EXPENSE])

    service = ReportService(category_id=cat_id, tx_type=type_choice)
    if report_kind == "monthly":
        report = service.monthly(transactions, current.year, current.month)
        series = report.daily_series
    else:
        report = service.yearly(transactions, current.year)
        series = report.monthly_series

    k1, k2, k3 = st.columns(3)
    k1.metric("Income", money(report.summary.income))
    k2.metric("Expenses", money(report.summary.expenses))
    k3.metric("Balance", money(report.summary.balance))

    if report.category_totals:
        st.plotly_chart(category_pie(report.category_totals), width="stretch")
    else:
        st.info("No expenses in this period.")
    st.plotly_chart(series_line(series, title="Income vs expenses"), width="stretch")

elif menu == "💰 Budgets":
    st.title("💰 Budgets")

    statuses = BudgetService().statuses(budgets, transactions)
    if not statuses:
        st.info("No budgets defined")
    for status in statuses:
        b = status.budget
        name = b.category.name if b.category else "All expenses"
        st.metric(
            f"{name} ({b.period})",
            f"{money(status.spent)} / {money(b.amount)}",
            f"{money(status.remaining)} remaining",
            delta_color="normal" if not status.exceeded else "inverse",
        )
        st.progress(status.progress)
        if st.button("Delete", key=f"del_budget_{b.id}"):
            store.delete_budget(USER, b.id)
            st.rerun()

    st.subheader("➕ Add Budget")
    expense_cats = [c for c in categories if c.type == EXPENSE]
    with st.form("budget_form", clear_on_submit=True):
        scope = st.selectbox("Category", ["All expenses"] + [c.name for c in expense_cats])
        period = st.selectbox("Period", list(BUDGET_PERIODS), index=BUDGET_PERIODS.index(MONTHLY))
        limit = st.text_input("Amount")
        submitted = st.form_submit_button("Save budget")

    if submitted:
        category_id = next((c.id for c in expense_cats if c.name == scope), None)
        snapshot = safe_category(categories, category_id).map(lambda c: c.snapshot()).get_or_else(None)
        draft = Budget(id="", amount=limit, period=period, category_id=category_id, category=snapshot)
        result = validate_budget(draft, categories)
        if result.is_left():
            st.error(result.get_error()["message"])
        else:
            store.add_budget(USER, result.get_or_else(draft))
            st.rerun()

elif menu == "⚙️ Settings":
    st.title("⚙️ Settings")

    currencies = sorted(set(CURRENCY_SYMBOLS) | {CURRENCY})
    currency = st.selectbox("Currency", currencies, index=currencies.index(CURRENCY))
    st.session_state["currency"] = currency

    st.caption(f"Next daily reminder: {next_reminder_at(hour=Config.REMINDER_HOUR):%Y/%m/%d %H:%M}")

    st.subheader("⬇ Export")
    st.download_button(
        "Download transactions (CSV)",
        export_transactions(transactions),
        file_name=export_filename(day=date.today()),
        mime="text/csv",
    )

    if st.button("💾 Save to seed file"):
        store.dump(Config.SEED_PATH)
        st.success(f"Saved to {Config.SEED_PATH}")
