"""
Streamlit Frontend for Mi Billetera

This is the screen the user sees every day: sign in, jot down an
expense, glance at how the month is going.

DESIGN PRINCIPLES:
1. Simple, clear interface
2. Explicit confirmation before anything is deleted
3. Clear error messages in simple language
4. Storage problems are warnings, never crashes
5. No hidden actions

Screens:
- Login: biometric prompt, or an explicit skip
- Home: total, add form, monthly statistics, expense list
"""

import asyncio
from html import escape

import streamlit as st

from wallet.config import get_settings
from wallet.models import ExpenseCategory, ValidationResult, category_display, period_label
from wallet.orchestrator import AppComponents, create_app_components, open_ledger
from wallet.queries import format_amount, format_percentage
from wallet.services.auth import HOME_SCREEN
from wallet.services.storage import StorageUnavailable
from wallet.validation import ExpenseValidator, ValidationError


# Page configuration
st.set_page_config(
    page_title="Mi Billetera",
    page_icon="💳",
    layout="centered",
)

# Custom CSS for better UX
st.markdown("""
<style>
    .stButton>button {
        width: 100%;
        margin-top: 10px;
    }
    .summary-card {
        padding: 20px;
        background-color: #3498db;
        color: #fff;
        border-radius: 12px;
        text-align: center;
        margin: 10px 0;
    }
    .big-number {
        font-size: 2.5em;
        font-weight: bold;
    }
    .expense-card {
        padding: 12px 16px;
        background-color: #fff;
        border-radius: 10px;
        border-left: 5px solid #3498db;
        margin: 6px 0;
    }
</style>
""", unsafe_allow_html=True)


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


def get_components() -> AppComponents:
    """One set of components per browser session."""
    if "components" not in st.session_state:
        st.session_state.components = create_app_components()
        st.session_state.pending_delete = None
        st.session_state.confirm_skip = False
        st.session_state.confirm_sign_out = False
    return st.session_state.components


def show_notices(notices) -> None:
    """Render queued notices as dismissable banners."""
    for notice in notices:
        text = f"**{notice.title}** - {notice.message}"
        if notice.level.value == "error":
            st.error(text)
        elif notice.level.value == "warning":
            st.warning(text)
        else:
            st.info(text)


def validation_message(error: ValidationError) -> str:
    """Form error text, one issue per line."""
    summary = ExpenseValidator().get_user_friendly_summary(ValidationResult(issues=error.issues))
    # Markdown needs two trailing spaces for a line break
    return summary.replace("\n", "  \n")


def expense_card_html(record, currency: str) -> str:
    """List card for one expense; user text is escaped."""
    display = record.display
    return f"""
    <div class="expense-card" style="border-left-color: {escape(display.color)}">
        <strong>{escape(record.name)}</strong> · {display.icon} {escape(display.label)}
        <span style="float:right"><strong>{escape(currency)}{format_amount(record.amount)}</strong></span>
        <br/><small>📅 {escape(record.date)}</small>
    </div>
    """


def main():
    """Main application entry point."""
    components = get_components()

    if components.navigator.current_screen == HOME_SCREEN:
        render_home_page(components)
    else:
        render_login_page(components)


def render_login_page(components: AppComponents):
    """Render the sign-in screen."""
    gate = components.gate

    st.title("💳 Mi Billetera Digital")
    st.subheader("Universitaria")

    if gate.is_supported is None:
        run_async(gate.check_capability())

    if st.button("🔐 Authenticate with biometrics", type="primary", disabled=gate.is_authenticating):
        with st.spinner("Authenticating..."):
            run_async(gate.authenticate())
        if gate.has_access:
            st.rerun()

    show_notices(gate.pop_notices())

    if gate.last_outcome is not None and gate.last_outcome.value == "not_enrolled":
        if st.button("Continue without biometrics"):
            run_async(gate.continue_without_biometrics())
            st.rerun()

    if gate.is_supported:
        st.caption("Use your fingerprint or Face ID to sign in")
    else:
        st.caption("Biometrics are not available on this device")

    st.markdown("---")

    if not st.session_state.confirm_skip:
        if st.button("Skip authentication"):
            st.session_state.confirm_skip = True
            st.rerun()
    else:
        st.warning("Enter without biometric authentication?")
        col1, col2 = st.columns(2)
        with col1:
            if st.button("No"):
                st.session_state.confirm_skip = False
                st.rerun()
        with col2:
            if st.button("Yes, continue", type="primary"):
                st.session_state.confirm_skip = False
                run_async(gate.skip(confirmed=True))
                st.rerun()


def render_home_page(components: AppComponents):
    """Render the ledger screen."""
    app_settings = get_settings().app
    currency = app_settings.currency_symbol
    ledger = run_async(open_ledger(components.gate, components.ledger))

    header, logout = st.columns([4, 1])
    with header:
        st.title("Mi Billetera 💳")
        st.caption("Manage your expenses")
    with logout:
        if st.button("Sign out"):
            st.session_state.confirm_sign_out = True

    if st.session_state.confirm_sign_out:
        st.warning("Do you want to leave the app?")
        col1, col2 = st.columns(2)
        with col1:
            if st.button("Cancel"):
                st.session_state.confirm_sign_out = False
                st.rerun()
        with col2:
            if st.button("Leave", type="primary"):
                st.session_state.confirm_sign_out = False
                run_async(components.gate.sign_out(confirmed=True))
                st.rerun()

    show_notices(ledger.pop_notices())

    # Period selector drives both the form and the statistics
    periods = ledger.available_periods()
    selected_period = st.selectbox(
        "Month",
        options=periods,
        index=periods.index(ledger.current_period),
        format_func=period_label,
    )
    summary = ledger.monthly_summary(selected_period)

    st.markdown(f"""
    <div class="summary-card">
        <div>Total spent in {summary.label}</div>
        <div class="big-number">{currency}{format_amount(summary.total)}</div>
        <div>{summary.count} records · {currency}{ledger.format_total()} all time</div>
    </div>
    """, unsafe_allow_html=True)

    render_add_form(components, selected_period, app_settings.default_category)
    render_statistics(summary, currency)
    render_history(ledger)
    render_expense_list(components, summary.records, currency)


def render_add_form(components: AppComponents, period: str, default_category: str):
    """New-expense form; the expense lands in the selected month."""
    ledger = components.ledger
    categories = [category.value for category in ExpenseCategory]
    default_index = categories.index(default_category) if default_category in categories else 0

    with st.expander("➕ Add expense"):
        with st.form("new_expense", clear_on_submit=True):
            name = st.text_input("Expense name")
            amount = st.text_input("Amount")
            expense_date = st.text_input("Date (YYYY-MM-DD)", placeholder="Today")
            category = st.radio(
                "Category",
                options=categories,
                index=default_index,
                horizontal=True,
                format_func=lambda value: f"{category_display(value).icon} {value}",
            )
            submitted = st.form_submit_button("Save", type="primary")

        if submitted:
            try:
                record = run_async(ledger.add_expense(
                    name=name,
                    amount=amount,
                    date=expense_date,
                    category=category,
                    period=period,
                ))
                st.success(f"Saved {record.name}")
                st.rerun()
            except ValidationError as e:
                st.error(validation_message(e))
            except StorageUnavailable:
                st.warning("**Error** - The expense could not be saved.")


def render_statistics(summary, currency: str):
    """Category breakdown for the selected month."""
    if not summary.breakdown:
        return

    st.markdown("### 📊 By category")
    for category, share in summary.breakdown.items():
        display = category_display(category)
        st.markdown(
            f"{display.icon} **{display.label}** · {currency}{format_amount(share.total)} "
            f"({format_percentage(share.percentage)}%)"
        )
        st.progress(min(float(share.percentage) / 100, 1.0))


def render_history(ledger):
    """Spending per month, when there is more than one."""
    totals = ledger.totals_by_period()
    if len(totals) < 2:
        return

    with st.expander("📅 Monthly history"):
        chart_data = {period_label(period): float(total) for period, total in reversed(totals.items())}
        st.bar_chart(chart_data)


def render_expense_list(components: AppComponents, records, currency: str):
    """Expenses of the selected month with two-step delete."""
    ledger = components.ledger

    st.markdown("### 🧾 Expenses")
    if not records:
        st.info("📝 No expenses recorded. Use 'Add expense' to get started.")
        return

    pending = st.session_state.pending_delete

    for record in records:
        st.markdown(expense_card_html(record, currency), unsafe_allow_html=True)

        if pending is not None and pending.expense_id == record.id:
            st.warning(f"Delete '{pending.expense_name}'?")
            col1, col2 = st.columns(2)
            with col1:
                if st.button("Cancel", key=f"cancel_{record.id}"):
                    run_async(ledger.cancel_delete(pending.token))
                    st.session_state.pending_delete = None
                    st.rerun()
            with col2:
                if st.button("Delete", key=f"confirm_{record.id}", type="primary"):
                    st.session_state.pending_delete = None
                    try:
                        run_async(ledger.confirm_delete(pending.token))
                    except StorageUnavailable:
                        st.warning("**Error** - The expense could not be deleted.")
                    else:
                        st.rerun()
        elif st.button("🗑️ Delete", key=f"delete_{record.id}"):
            st.session_state.pending_delete = run_async(ledger.request_delete(record.id))
            st.rerun()


if __name__ == "__main__":
    main()
