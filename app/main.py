"""
Streamlit Frontend for Expense Tracker

This is the dashboard the user interacts with daily.

DESIGN PRINCIPLES:
1. Every number shown is derived from the last successful fetch
2. Every store operation ends in a short, self-dismissing notification
3. Deleting needs an explicit confirmation
4. A failed load keeps the old list on screen

UI state (tab, theme, currency, budget, filters) lives in one
DashboardState object per session and is passed into each render function.
"""

import asyncio
from decimal import Decimal
from typing import Optional

import streamlit as st

from expense_tracker.aggregation import (
    currency_symbol,
    data_size_kb,
    format_amount,
    format_long_date,
    format_percentage,
    progress_width,
)
from expense_tracker.display import category_badge_html, recent_row_html
from expense_tracker.models.expense import (
    ALL_CATEGORIES,
    CURRENCY_NAMES,
    Currency,
    DashboardState,
    ExpenseCategory,
    Notification,
)
from expense_tracker.orchestrator import (
    ExpenseDashboardFlow,
    create_app_components,
    create_initial_state,
)


# Page configuration
st.set_page_config(
    page_title="MoneyMagnet",
    page_icon="💰",
    layout="wide",
    initial_sidebar_state="expanded",
)

TABS = {
    "dashboard": "📊 Dashboard",
    "expenses": "💰 Expenses",
    "analytics": "📈 Analytics",
    "settings": "⚙️ Settings",
}

STATUS_COLORS = {
    "healthy": "#4ECDC4",
    "warning": "#FECA57",
    "critical": "#FF6B6B",
}

BASE_CSS = """
<style>
    .category-badge { padding: 2px 10px; border-radius: 12px; font-size: 0.85em; }
    .progress-track { background: #e9ecef; border-radius: 8px; height: 12px; }
    .progress-fill { height: 12px; border-radius: 8px; }
</style>
"""

DARK_CSS = """
<style>
    .stApp { background-color: #121212; color: #f1f1f1; }
    .progress-track { background: #2a2a2a; }
</style>
"""


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


def get_flow() -> ExpenseDashboardFlow:
    """Get or create this session's dashboard flow and load the expenses once."""
    if "flow" not in st.session_state:
        flow, _ = create_app_components()
        st.session_state.flow = flow
        queue_notification(run_async(flow.refresh()))
    return st.session_state.flow


def get_state() -> DashboardState:
    if "dashboard_state" not in st.session_state:
        st.session_state.dashboard_state = create_initial_state()
    return st.session_state.dashboard_state


def queue_notification(notification: Optional[Notification]) -> None:
    """Keep a notification until the next render so it survives st.rerun()."""
    if notification is None:
        return
    st.session_state.setdefault("pending_notifications", []).append(notification)


def show_notifications(state: DashboardState) -> None:
    pending = st.session_state.pop("pending_notifications", [])
    if not state.notifications_enabled:
        return
    for notification in pending:
        st.toast(notification.message, icon=notification.icon)


def main():
    """Main application entry point."""
    state = get_state()
    flow = get_flow()

    st.markdown(BASE_CSS, unsafe_allow_html=True)
    if state.dark_mode:
        st.markdown(DARK_CSS, unsafe_allow_html=True)

    show_notifications(state)
    render_sidebar(state, flow)

    st.title("💰 MoneyMagnet")

    if state.active_tab == "dashboard":
        render_dashboard_tab(state, flow)
    elif state.active_tab == "expenses":
        render_expenses_tab(state, flow)
    elif state.active_tab == "analytics":
        render_analytics_tab(state, flow)
    elif state.active_tab == "settings":
        render_settings_tab(state, flow)


def render_sidebar(state: DashboardState, flow: ExpenseDashboardFlow):
    """Navigation, theme toggle and quick budget setter."""
    st.sidebar.title("💰 MoneyMagnet")
    st.sidebar.markdown("---")

    tab_keys = list(TABS)
    state.active_tab = st.sidebar.radio(
        "Navigate to:",
        tab_keys,
        index=tab_keys.index(state.active_tab),
        format_func=lambda key: TABS[key],
    )

    st.sidebar.markdown("---")
    state.dark_mode = st.sidebar.toggle("🌙 Dark mode", value=state.dark_mode)
    budget = st.sidebar.number_input(
        f"Budget ({state.currency_symbol})",
        value=float(state.budget),
        step=500.0,
    )
    state.budget = Decimal(str(budget))

    if st.sidebar.button("🔄 Reload expenses"):
        queue_notification(run_async(flow.refresh()))
        st.rerun()


def render_filters(state: DashboardState, key_prefix: str):
    """Search box and category selector shared by the list views."""
    col1, col2 = st.columns([3, 1])
    with col1:
        state.search_term = st.text_input(
            "Search",
            value=state.search_term,
            placeholder="🔍 Search expenses...",
            key=f"{key_prefix}_search",
        )
    with col2:
        options = [ALL_CATEGORIES] + [c.value for c in ExpenseCategory]
        current = state.filter_category if state.filter_category in options else ALL_CATEGORIES
        state.filter_category = st.selectbox(
            "Category",
            options=options,
            index=options.index(current),
            key=f"{key_prefix}_category",
        )


def render_progress(width: Decimal, color: str) -> None:
    st.markdown(
        f'<div class="progress-track"><div class="progress-fill" '
        f'style="width:{width:.1f}%;background:{color}"></div></div>',
        unsafe_allow_html=True,
    )


def render_dashboard_tab(state: DashboardState, flow: ExpenseDashboardFlow):
    """Add form, stat cards, budget bar and recent expenses."""
    summary = flow.summary(state.budget)

    col_form, col_stats = st.columns([1, 1])

    with col_form:
        st.subheader("💎 Add New Expense")
        with st.form("add_expense", clear_on_submit=True):
            title = st.text_input("Title", placeholder="Dinner with friends, Uber ride...")
            amount = st.text_input(f"Amount ({state.currency_symbol})", placeholder="0.00")
            category = st.selectbox("Category", [c.value for c in ExpenseCategory])
            description = st.text_area("Description (optional)")
            submitted = st.form_submit_button("➕ Add Expense", type="primary")

        if submitted:
            notification, _ = run_async(
                flow.add_expense(
                    title=title,
                    amount=amount,
                    category=category,
                    description=description,
                )
            )
            queue_notification(notification)
            st.rerun()

    with col_stats:
        st.subheader("📊 Overview")
        c1, c2, c3 = st.columns(3)
        c1.metric("Total Spent", format_amount(summary.total, state.currency))
        c2.metric("Remaining", format_amount(summary.remaining, state.currency))
        c3.metric("Transactions", summary.transaction_count)

        st.markdown(
            f"**Monthly Budget Progress** &nbsp; {format_percentage(summary.usage)}%"
        )
        render_progress(progress_width(summary.usage), STATUS_COLORS[summary.status])
        if summary.is_over_budget:
            st.warning("You are over budget.")

    st.markdown("---")
    st.subheader("🕒 Recent Expenses")
    render_filters(state, "dashboard")

    recent = flow.recent(category=state.filter_category, search_term=state.search_term)
    if not recent:
        render_empty_list(state)
        return

    for expense in recent:
        col1, col2 = st.columns([4, 1])
        with col1:
            st.markdown(recent_row_html(expense, state.dark_mode), unsafe_allow_html=True)
            if expense.description:
                st.caption(expense.description)
        with col2:
            st.markdown(f"**{format_amount(expense.amount, state.currency)}**")
            render_delete_control(flow, expense.id, key_prefix="recent")


def render_empty_list(state: DashboardState):
    if state.search_term or state.filter_category != ALL_CATEGORIES:
        st.info("No expenses found. Try changing your search or filter.")
    else:
        st.info("No expenses yet. Add your first expense above!")


def render_delete_control(flow: ExpenseDashboardFlow, expense_id: str, key_prefix: str):
    """Delete button that asks for confirmation before calling the store."""
    pending_key = "pending_delete"
    if st.session_state.get(pending_key) == expense_id:
        st.warning("Delete this expense?")
        yes, no = st.columns(2)
        if yes.button("Yes", key=f"{key_prefix}_confirm_{expense_id}"):
            st.session_state.pop(pending_key, None)
            queue_notification(run_async(flow.delete_expense(expense_id, confirmed=True)))
            st.rerun()
        if no.button("No", key=f"{key_prefix}_cancel_{expense_id}"):
            st.session_state.pop(pending_key, None)
            st.rerun()
    elif st.button("🗑️", key=f"{key_prefix}_delete_{expense_id}"):
        st.session_state[pending_key] = expense_id
        st.rerun()


def render_export_button(flow: ExpenseDashboardFlow, label: str, key: str):
    """Download button for the JSON snapshot; the download itself is audited."""
    filename, payload = flow.export()
    st.download_button(
        label,
        data=payload,
        file_name=filename,
        mime="application/json",
        key=key,
        on_click=lambda: queue_notification(run_async(flow.record_export(filename))),
    )


def render_expenses_tab(state: DashboardState, flow: ExpenseDashboardFlow):
    """Full filtered list plus export."""
    st.subheader("💰 All Expenses")
    render_filters(state, "expenses")

    render_export_button(flow, "📥 Export", key="expenses_export")

    expenses = flow.filtered(category=state.filter_category, search_term=state.search_term)
    if not expenses:
        render_empty_list(state)
        return

    header = st.columns([3, 2, 2, 2, 1])
    for column, label in zip(header, ["Title", "Category", "Date", "Amount", ""]):
        column.markdown(f"**{label}**")

    for expense in expenses:
        row = st.columns([3, 2, 2, 2, 1])
        row[0].markdown(expense.title)
        row[1].markdown(category_badge_html(expense.category, state.dark_mode), unsafe_allow_html=True)
        row[2].markdown(format_long_date(expense.date))
        row[3].markdown(format_amount(expense.amount, state.currency))
        with row[4]:
            render_delete_control(flow, expense.id, key_prefix="table")


def render_analytics_tab(state: DashboardState, flow: ExpenseDashboardFlow):
    """Category distribution and monthly insights."""
    summary = flow.summary(state.budget)
    col1, col2 = st.columns(2)

    with col1:
        st.subheader("📊 Category Distribution")
        breakdown = flow.breakdown()
        if not breakdown:
            st.info("No data to analyse yet.")
        for row in breakdown:
            st.markdown(
                f"{row.style.icon} **{row.category}** &nbsp; "
                f"{format_amount(row.total, state.currency)} &nbsp; "
                f"({format_percentage(row.percentage)}%)"
            )
            render_progress(progress_width(row.percentage), row.style.color)

    with col2:
        st.subheader("📈 Monthly Insights")
        st.metric("💰 Average Daily Spend", format_amount(summary.average_daily_spend, state.currency))
        st.metric("🎯 Budget Utilization", f"{format_percentage(summary.usage)}%")
        st.metric("📅 Transactions This Month", summary.transaction_count)


def render_settings_tab(state: DashboardState, flow: ExpenseDashboardFlow):
    """Preferences, data export and connection status."""
    st.subheader("⚙️ Preferences")

    codes = [c.value for c in Currency]
    state.currency = st.selectbox(
        "Default Currency",
        options=codes,
        index=codes.index(state.currency) if state.currency in codes else 0,
        format_func=lambda code: f"{CURRENCY_NAMES[code]} ({currency_symbol(code)})",
    )
    budget = st.number_input("Monthly Budget", value=float(state.budget), step=500.0)
    state.budget = Decimal(str(budget))
    state.notifications_enabled = st.checkbox(
        "Enable Notifications",
        value=state.notifications_enabled,
    )

    st.markdown("---")
    st.subheader("📤 Data Management")
    render_export_button(flow, "📥 Export All Data", key="settings_export")

    st.markdown("---")
    st.subheader("ℹ️ App Information")
    st.markdown(f"**Total Expenses:** {len(flow.expenses)}")
    st.markdown(f"**Data Size:** {data_size_kb(flow.expenses)} KB")

    st.markdown("---")
    st.subheader("🔌 Connection Status")
    render_connection_status()


def render_connection_status():
    """Check configuration and API reachability."""
    from expense_tracker.config import validate_all_settings

    status = validate_all_settings()
    for name, key in [("Expense API settings", "store_api"), ("Dashboard settings", "dashboard")]:
        if status.get(key, False):
            st.success(f"✅ {name} - Valid")
        else:
            st.error(f"❌ {name} - {status.get(f'{key}_error', 'Not configured')}")

    if st.button("🔍 Test connection"):
        _, store = create_app_components()
        with st.spinner("Contacting the expense API..."):
            connected, message = run_async(store.check_connection())
        if connected:
            st.success(f"✅ {message}")
        else:
            st.error(f"❌ {message}")


if __name__ == "__main__":
    main()
