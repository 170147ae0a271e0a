import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import streamlit as st
import plotly.express as px
import plotly.graph_objects as go
from datetime import date

from moneybook.config import load_settings, configure_logging
from moneybook.domain import (
    EXPENSE_CATEGORIES,
    INCOME_CATEGORIES,
    MEMO_CATEGORY_LABELS,
    MemoCategory,
    TxType,
)
from moneybook.frames import (
    budget_frame,
    category_frame,
    transactions_frame,
    trend_frame,
    to_csv,
)
from moneybook.insights import budget_status, OVER, WARNING
from moneybook.session import FinanceSession
from moneybook.stats import DEFAULT_TREND_DAYS

st.set_page_config(page_title="Moneybook", layout="wide")

if "settings" not in st.session_state:
    st.session_state.settings = load_settings()
    configure_logging(st.session_state.settings)
settings = st.session_state.settings

if "finance" not in st.session_state:
    st.session_state.finance = FinanceSession(settings=settings)
finance: FinanceSession = st.session_state.finance

CUR = settings.currency


def money(value) -> str:
    return f"{CUR}{float(value):,.0f}"


def show_rejection(result):
    if result.is_left():
        st.error(result.get_error()["message"])
        return True
    return False


stats = finance.stats()

st.title("💰 Moneybook")
menu = st.sidebar.radio("View", ["🏠 Overview", "📝 My analysis", "➕ Input"])

if menu == "🏠 Overview":
    k1, k2, k3, k4 = st.columns(4)
    with k1:
        st.metric("Total income", money(stats.total_income))
    with k2:
        st.metric("Total expense", money(stats.total_expense))
    with k3:
        st.metric("Balance", money(stats.balance))
    with k4:
        st.metric("Transactions", len(finance.transactions))

    col_pie, col_bar = st.columns(2)
    with col_pie:
        st.subheader("Expenses by category")
        df_cat = category_frame(stats)
        if not df_cat.empty:
            fig_cat = px.pie(df_cat, values="amount", names="category")
            fig_cat.update_layout(height=320, margin=dict(t=10, b=10, l=10, r=10))
            st.plotly_chart(fig_cat, use_container_width=True)
        else:
            st.info("No expenses yet.")
    with col_bar:
        st.subheader("Budget vs actual")
        df_bud = budget_frame(stats)
        if not df_bud.empty:
            fig_bud = go.Figure()
            fig_bud.add_trace(go.Bar(x=df_bud["category"], y=df_bud["budget"], name="Budget"))
            fig_bud.add_trace(go.Bar(x=df_bud["category"], y=df_bud["spent"], name="Spent"))
            fig_bud.update_layout(barmode="group", height=320, margin=dict(t=10, b=10, l=10, r=10))
            st.plotly_chart(fig_bud, use_container_width=True)
        else:
            st.info("No budgets set.")

    st.subheader(f"Daily expenses (last {DEFAULT_TREND_DAYS} days)")
    df_trend = trend_frame(stats)
    fig_ts = px.line(df_trend, x="label", y="amount", markers=True, labels={"label": "Day", "amount": "Expense"})
    fig_ts.update_layout(margin=dict(t=10, b=10, l=10, r=10))
    st.plotly_chart(fig_ts, use_container_width=True)

    st.subheader("Recent transactions")
    recent = finance.recent_transactions()
    if recent:
        for t in recent:
            c1, c2, c3 = st.columns([4, 2, 1])
            with c1:
                st.markdown(f"**{t.category}** · {t.description or '-'}")
                st.caption(t.date.isoformat())
            with c2:
                sign = "+" if t.type == TxType.INCOME else "-"
                st.markdown(f"{sign}{money(t.amount)}")
            with c3:
                if st.button("🗑", key=f"del_tx_{t.id}"):
                    finance.delete_transaction(t.id)
                    st.rerun()
        st.download_button(
            "⬇ Download CSV",
            to_csv(transactions_frame(finance.transactions)),
            file_name="transactions.csv",
            mime="text/csv",
        )
    else:
        st.info("No transactions yet.")

elif menu == "📝 My analysis":
    col_form, col_help = st.columns(2)
    with col_form:
        st.subheader("Write an analysis memo")
        with st.form("memo_form", clear_on_submit=True):
            title = st.text_input("Title")
            category = st.selectbox(
                "Category",
                list(MemoCategory),
                format_func=lambda c: MEMO_CATEGORY_LABELS[c],
            )
            content = st.text_area("Content", placeholder="Why did food spending go up this month?")
            memo_date = st.date_input("Date", value=date.today())
            if st.form_submit_button("Save memo"):
                if not show_rejection(finance.add_memo(title, content, category, memo_date)):
                    st.rerun()

    with col_help:
        st.subheader("Analysis helper")
        info = finance.insights()
        st.markdown("**Income & expense**")
        st.write(f"- Total income: {money(info['total_income'])}")
        st.write(f"- Total expense: {money(info['total_expense'])}")
        st.write(f"- Savings rate: {info['savings_rate']:.1f}%")

        st.markdown("**Top expense categories**")
        if info["top_categories"]:
            for idx, (name, amount, share) in enumerate(info["top_categories"], start=1):
                st.write(f"{idx}. {name}: {money(amount)} ({share:.1f}%)")
        else:
            st.caption("No expenses yet.")

        st.markdown("**Budget warnings**")
        if not info["has_budgets"]:
            st.caption("No budgets set.")
        for w in info["budget_warnings"]:
            st.write(f"- {w['category']}: {w['percentage']}% used" + (" (over!)" if w["over"] else ""))

        st.markdown("**Patterns**")
        st.write(f"- Average expense: {money(info['average_expense'])}")
        st.write(f"- Transactions: {info['transaction_count']}")
        st.write(f"- Most active category: {info['most_active_category'] or 'none'}")

    st.subheader("Saved memos")
    if finance.memos:
        for memo in finance.memos:
            with st.container(border=True):
                c1, c2 = st.columns([6, 1])
                with c1:
                    st.markdown(f"**{memo.title}** · `{MEMO_CATEGORY_LABELS[memo.category]}`")
                    st.write(memo.content)
                    st.caption(f"{memo.date.isoformat()} · written {memo.created_at:%Y-%m-%d %H:%M}")
                with c2:
                    if st.button("🗑", key=f"del_memo_{memo.id}"):
                        finance.delete_memo(memo.id)
                        st.rerun()
    else:
        st.info("No memos yet.")

elif menu == "➕ Input":
    col_tx, col_budget = st.columns(2)
    with col_tx:
        st.subheader("Add transaction")
        tx_type = st.radio("Type", list(TxType), format_func=lambda t: t.value.title(), horizontal=True)
        options = EXPENSE_CATEGORIES if tx_type == TxType.EXPENSE else INCOME_CATEGORIES
        with st.form("tx_form", clear_on_submit=True):
            amount = st.text_input(f"Amount ({CUR})")
            category = st.selectbox("Category", [""] + list(options))
            description = st.text_input("Description (optional)")
            tx_date = st.date_input("Date", value=date.today())
            if st.form_submit_button("Add transaction"):
                if not show_rejection(finance.add_transaction(tx_type, amount, category, description, tx_date)):
                    st.success("Transaction added")
                    st.rerun()

    with col_budget:
        st.subheader("Set budget")
        with st.form("budget_form", clear_on_submit=True):
            b_category = st.selectbox("Category", [""] + list(EXPENSE_CATEGORIES))
            b_amount = st.text_input(f"Budget ({CUR})")
            if st.form_submit_button("Set budget"):
                if not show_rejection(finance.set_budget(b_category, b_amount)):
                    st.rerun()

        if stats.budget_comparison:
            st.markdown("**Budget progress**")
            for category, line in stats.budget_comparison.items():
                status = budget_status(line.percentage, settings.warning_pct)
                icon = "🔴" if status == OVER else "🟠" if status == WARNING else "🟢"
                pct = "n/a (zero budget)" if line.zero_budget else f"{line.percentage}%"
                st.write(f"{icon} **{category}** {pct} · {money(line.spent)} / {money(line.budget)}")
                st.progress(min(max(line.percentage, 0), 100) / 100)
                if line.percentage > 100:
                    st.caption(f"⚠ Over budget by {money(-line.remaining)}")

    st.divider()
    st.subheader("⚠️ Budget alerts")
    if finance.alerts:
        for alert in reversed(finance.alerts[-10:]):
            st.warning(f"[{alert['ts']}] {alert['message']}")
        if st.button("Clear alerts", key="btn_clear_alerts"):
            finance.clear_alerts()
            st.rerun()
    else:
        st.info("No alerts at the moment")

    df_all = transactions_frame(finance.transactions)
    if not df_all.empty:
        st.subheader("All transactions")
        disp = df_all.sort_values("date", ascending=False, kind="stable").copy()
        disp["date"] = disp["date"].dt.strftime("%Y-%m-%d")
        disp["amount"] = disp["amount"].map(lambda x: f"{CUR}{x:,.0f}")
        st.dataframe(disp.reset_index(drop=True), use_container_width=True)
