"""
Streamlit Frontend for WealthTrack

The interface a household or small-business owner uses daily to
record money in and out, keep track of funds borrowed from investors
and see what interest falls due next.

DESIGN PRINCIPLES:
1. Simple, clear interface
2. Clear error messages in simple language
3. Visual feedback for all operations
4. No hidden actions

Nothing is saved without an explicit "Save" action; every form goes
through validation first.
"""

import asyncio
from datetime import date

import streamlit as st

from wealthtrack.audit import create_correlation_id
from wealthtrack.config import get_settings, validate_all_settings
from wealthtrack.constants import DEFAULT_PAYMENT_MODE, PAYMENT_MODES
from wealthtrack.interest import (
    build_investor_accounts,
    filter_events,
    portfolio_totals,
    sort_events,
    upcoming_events,
    urgency,
)
from wealthtrack.models import (
    ReturnPeriod,
    SortOrder,
    TimeWindow,
    TransactionDraft,
    TransactionType,
    Urgency,
    User,
)
from wealthtrack.orchestrator import AppComponents, create_app_components
from wealthtrack.reports import (
    EXCEL_MIME_TYPE,
    category_ledger,
    category_stats,
    dashboard_totals,
    export_filename,
    export_workbook,
    group_stats,
)
from wealthtrack.utils import format_currency


# Page configuration
st.set_page_config(
    page_title="WealthTrack",
    page_icon="💰",
    layout="wide",
    initial_sidebar_state="expanded",
)

PAGES = [
    "🏠 Dashboard",
    "➕ Add Transaction",
    "📊 Reports",
    "🤝 Investors",
    "📅 Payment Calendar",
    "💬 Assistant",
    "⚙️ Settings",
]

URGENCY_BADGES = {
    Urgency.OVERDUE: "🔴 Overdue",
    Urgency.SOON: "🟠 Due soon",
    Urgency.LATER: "🟢 Upcoming",
}

WINDOW_LABELS = {
    TimeWindow.DAYS_30: "Next 30 days",
    TimeWindow.DAYS_60: "Next 60 days",
    TimeWindow.DAYS_90: "Next 90 days",
    TimeWindow.ALL: "All upcoming",
}

SORT_LABELS = {
    SortOrder.DATE_ASC: "Date (soonest first)",
    SortOrder.DATE_DESC: "Date (latest first)",
    SortOrder.AMOUNT_DESC: "Amount (highest first)",
    SortOrder.NAME_ASC: "Investor name (A-Z)",
}


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@st.cache_resource
def get_components() -> AppComponents:
    """Get or create application components (cached)."""
    try:
        return create_app_components(use_storage=True)
    except Exception as e:
        st.error(f"Failed to initialize: {e}")
        return create_app_components(use_storage=False)


def main():
    """Main application entry point."""
    components = get_components()

    user = components.users.active_user()
    if user is None:
        render_user_selection(components)
        return

    # Another page asked to switch pages before the radio is drawn
    if "next_page" in st.session_state:
        st.session_state.page = st.session_state.pop("next_page")

    st.sidebar.title("💰 WealthTrack")
    st.sidebar.markdown(f"Signed in as **{user.name}**")
    if st.sidebar.button("🔁 Switch user"):
        components.users.logout()
        st.rerun()
    st.sidebar.markdown("---")

    page = st.sidebar.radio("Navigate to:", PAGES, key="page")

    if page == "🏠 Dashboard":
        render_dashboard(components, user)
    elif page == "➕ Add Transaction":
        render_add_transaction(components, user)
    elif page == "📊 Reports":
        render_reports(components, user)
    elif page == "🤝 Investors":
        render_investors(components, user)
    elif page == "📅 Payment Calendar":
        render_calendar(components, user)
    elif page == "💬 Assistant":
        render_assistant(components, user)
    elif page == "⚙️ Settings":
        render_settings(components)


def render_user_selection(components: AppComponents):
    """Pick an existing profile or create one."""
    st.title("💰 WealthTrack")
    st.markdown("Who is managing money today?")

    users = components.users.list_users()
    if users:
        cols = st.columns(min(len(users), 4))
        for idx, existing in enumerate(users):
            with cols[idx % len(cols)]:
                if st.button(f"👤 {existing.name}", key=f"user-{existing.id}"):
                    components.users.select_user(existing.id)
                    st.rerun()
        st.markdown("---")

    with st.form("new_user"):
        name = st.text_input("New profile name", max_chars=100)
        if st.form_submit_button("Create profile", type="primary"):
            try:
                components.users.create_user(name)
                st.rerun()
            except ValueError as e:
                st.error(str(e))


def render_dashboard(components: AppComponents, user: User):
    """Balance, totals and the latest entries."""
    st.title("🏠 Dashboard")

    transactions = components.transactions.list_transactions(user.id)
    totals = dashboard_totals(
        transactions,
        recent_count=get_settings().app.recent_transactions_count,
    )

    col1, col2, col3 = st.columns(3)
    col1.metric("Balance", format_currency(totals.balance))
    col2.metric("Income", format_currency(totals.income))
    col3.metric("Expense", format_currency(totals.expense))

    st.markdown("### Recent transactions")
    if not totals.recent:
        st.info("No transactions yet. Use 'Add Transaction' to record your first one.")
        return

    for t in totals.recent:
        sign = "+" if t.type == TransactionType.INCOME else "-"
        col_a, col_b = st.columns([5, 1])
        col_a.markdown(
            f"**{t.category}** · {t.date.strftime('%d %b %Y')} · "
            f"{t.payment_mode or 'Unknown'}  \n"
            f"{sign}{format_currency(t.amount)}"
            + (f" · _{t.note}_" if t.note else "")
        )
        if col_b.button("🗑️", key=f"del-{t.id}", help="Delete this transaction"):
            components.transactions.delete_transaction(t.id)
            st.rerun()


def render_add_transaction(components: AppComponents, user: User):
    """Income / expense form, with investor terms for borrowed funds."""
    st.title("➕ Add Transaction")

    prefill: TransactionDraft = st.session_state.pop("prefill", None) or TransactionDraft()
    if prefill.category:
        st.info(f"Recording a payment to **{prefill.category}**")

    categories = components.categories.get_categories()
    labels = [item for group in categories for item in group.items]
    if prefill.category and prefill.category not in labels:
        labels.insert(0, prefill.category)

    tx_type = st.radio(
        "Type",
        list(TransactionType),
        index=list(TransactionType).index(prefill.type),
        format_func=lambda t: "Income" if t == TransactionType.INCOME else "Expense",
        horizontal=True,
    )

    with st.form("transaction_form"):
        amount = st.text_input("Amount (₹)", value=prefill.amount or "")
        category = st.selectbox(
            "Category",
            options=labels,
            index=labels.index(prefill.category) if prefill.category in labels else 0,
        )
        payment_mode = st.selectbox(
            "Payment mode",
            options=PAYMENT_MODES,
            index=PAYMENT_MODES.index(prefill.payment_mode or DEFAULT_PAYMENT_MODE),
        )
        on_date = st.date_input("Date", value=prefill.on_date or date.today())
        note = st.text_input("Note", value=prefill.note or "", max_chars=1000)

        investor = {}
        if tx_type == TransactionType.INCOME:
            with st.expander("🤝 Funds from an investor?"):
                investor["investor_name"] = st.text_input("Investor name", max_chars=200)
                investor["roi"] = st.text_input("Rate of interest (% per year)")
                investor["return_period"] = st.selectbox(
                    "Interest paid",
                    options=list(ReturnPeriod),
                    format_func=lambda p: p.value,
                )
                investor["duration_months"] = st.number_input(
                    "Duration (months)", min_value=1, max_value=1200, value=12
                )
                investor["purpose"] = st.text_input("Purpose / project", max_chars=500)
                investor["periodic_interest_amount"] = st.text_input(
                    "Interest per period (optional, ₹)"
                )

        submitted = st.form_submit_button("💾 Save", type="primary")

    if not submitted:
        return

    draft = TransactionDraft(
        type=tx_type,
        amount=amount,
        category=category,
        payment_mode=payment_mode,
        on_date=on_date,
        note=note,
        **(investor if investor.get("investor_name") else {}),
    )

    saved, result, message = components.transactions.save_transaction(
        user_id=user.id,
        draft=draft,
        correlation_id=create_correlation_id(),
    )
    if saved is None:
        st.error(message)
        return

    if result.warnings:
        st.warning(message)
    st.success(f"Saved {format_currency(saved.amount)} under {saved.category}")


def render_reports(components: AppComponents, user: User):
    """Balance sheet, category breakdown and Excel export."""
    st.title("📊 Reports")

    transactions = components.transactions.list_transactions(user.id)
    categories = components.categories.get_categories()

    if transactions:
        st.download_button(
            "⬇️ Download Excel report",
            data=export_workbook(transactions, categories),
            file_name=export_filename(),
            mime=EXCEL_MIME_TYPE,
        )

    summary_tab, category_tab = st.tabs(["Balance Sheet", "Categories"])

    with summary_tab:
        for stat in group_stats(transactions, categories):
            st.markdown(
                f"**{stat.name}**: in {format_currency(stat.income)} · "
                f"out {format_currency(stat.expense)} · "
                f"net {format_currency(stat.net)}"
            )

    with category_tab:
        stats = category_stats(transactions)
        if not stats:
            st.info("No transactions to report on yet.")
            return

        selected = st.selectbox("Open ledger for", [None] + list(stats),
                                format_func=lambda c: "Choose a category" if c is None else c)
        if selected:
            stat = stats[selected]
            col1, col2, col3 = st.columns(3)
            col1.metric("Total in", format_currency(stat.income))
            col2.metric("Total out", format_currency(stat.expense))
            col3.metric("Net", format_currency(stat.net))
            for t in category_ledger(transactions, selected):
                sign = "+" if t.type == TransactionType.INCOME else "-"
                st.markdown(
                    f"{t.date.strftime('%d %b %Y')} · {sign}{format_currency(t.amount)}"
                    + (f" · _{t.note}_" if t.note else "")
                )
        else:
            for stat in sorted(stats.values(), key=lambda s: abs(s.net), reverse=True):
                st.markdown(
                    f"**{stat.name}** ({stat.count}): net {format_currency(stat.net)}"
                )


def render_investors(components: AppComponents, user: User):
    """Per-investor passbooks with accrued interest."""
    st.title("🤝 Investors")

    transactions = components.transactions.list_transactions(user.id)
    accounts = build_investor_accounts(transactions, as_of=date.today())
    if not accounts:
        st.info("No investor funds yet. Record an income with investor details to start.")
        return

    totals = portfolio_totals(accounts)
    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Principal", format_currency(totals.principal))
    col2.metric("Interest due", format_currency(totals.interest))
    col3.metric("Paid", format_currency(totals.paid))
    col4.metric("Outstanding", format_currency(totals.outstanding))

    for account in accounts:
        with st.expander(f"{account.name}: outstanding {format_currency(account.outstanding)}"):
            st.markdown(
                f"Principal {format_currency(account.total_principal)} · "
                f"interest {format_currency(account.total_interest_accrued)} · "
                f"paid {format_currency(account.total_paid)}"
            )
            if st.button("💸 Record payment", key=f"pay-{account.name}"):
                st.session_state.prefill = components.transactions.prepare_payment(account.name)
                st.session_state.next_page = "➕ Add Transaction"
                st.rerun()

            for entry in account.entries:
                marker = "🕒" if entry.is_virtual else ("⬆️" if entry.is_credit else "⬇️")
                st.markdown(
                    f"{marker} {entry.date.strftime('%d %b %Y')} · "
                    f"{entry.description} · {format_currency(entry.amount)}"
                )


def render_calendar(components: AppComponents, user: User):
    """Upcoming principal maturities and interest payments."""
    st.title("📅 Payment Calendar")

    col1, col2, col3 = st.columns(3)
    window = col1.selectbox("Window", list(TimeWindow), format_func=WINDOW_LABELS.get)
    order = col2.selectbox("Sort by", list(SortOrder), format_func=SORT_LABELS.get)
    search = col3.text_input("Search", placeholder="Investor, purpose, 'interest'...")

    transactions = components.transactions.list_transactions(user.id)
    events = sort_events(
        filter_events(upcoming_events(transactions, window=window), search),
        order,
    )

    if not events:
        st.info("Nothing falls due in this window.")
        return

    st.metric("Total due", format_currency(sum(e.amount for e in events)))
    for event in events:
        st.markdown(
            f"{URGENCY_BADGES[urgency(event)]} · **{event.investor_name}** · "
            f"{event.kind_label} · {event.date.strftime('%d %b %Y')} "
            f"({event.days_until_due} days) · {format_currency(event.amount)}"
            + (f"  \n_{event.purpose}_" if event.purpose else "")
        )


def render_assistant(components: AppComponents, user: User):
    """Free-form questions about the user's money."""
    st.title("💬 Assistant")
    st.markdown("Ask anything about your income and expenses.")

    with st.expander("📝 Example Questions"):
        st.markdown("""
        - "How much did I spend this month?"
        - "Which payment mode do I use most?"
        - "What have I spent on Galaxy so far?"
        """)

    question = st.text_input("Your question:")
    if st.button("🔍 Ask", type="primary") and question:
        with st.spinner("Thinking..."):
            answer = run_async(components.advisor.ask(question, user))
        st.markdown(answer)


def render_settings(components: AppComponents):
    """Category editing, connection status and recent activity."""
    st.title("⚙️ Settings")

    st.markdown("### Categories")
    for group in components.categories.get_categories():
        with st.expander(f"{group.group} ({len(group.items)})"):
            for item in group.items:
                col_a, col_b = st.columns([5, 1])
                col_a.write(item)
                if col_b.button("✖", key=f"rm-{group.group}-{item}"):
                    components.categories.remove_item(group.group, item)
                    st.rerun()
            new_item = st.text_input("Add category", key=f"add-{group.group}")
            if st.button("Add", key=f"add-btn-{group.group}") and new_item:
                if components.categories.add_item(group.group, new_item):
                    st.rerun()
                else:
                    st.warning(f"'{new_item}' is already in {group.group}")

    if st.button("↩️ Reset categories to defaults"):
        components.categories.reset_categories()
        st.rerun()

    st.markdown("---")
    st.markdown("### Connection Status")

    status = validate_all_settings()
    services = [
        ("Storage", "storage"),
        ("Google Sheets (optional)", "google_sheets"),
        ("Gemini (Assistant)", "gemini"),
    ]
    for name, key in services:
        if status.get(key, False):
            st.success(f"✅ {name} - Configured")
        else:
            error = status.get(f"{key}_error", "Not configured")
            st.error(f"❌ {name} - {error}")

    st.markdown("---")
    st.markdown("### Recent Activity")
    for event in components.audit_logger.recent_events(limit=20):
        st.markdown(f"`{event.timestamp:%d %b %H:%M}` {event.description}")


if __name__ == "__main__":
    main()
