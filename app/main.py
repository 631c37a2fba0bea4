"""
Streamlit Frontend for Expense Tracker

This is the rendering layer. It collects form input, calls into the
session and ledger engine, and displays what they return.

DESIGN PRINCIPLES:
1. No ledger logic here; validation, ids, totals all come from the engine
2. Every error the engine raises is shown next to the field it concerns
3. Nothing is changed without an explicit button press
"""

from datetime import date

import streamlit as st

from expense_tracker.auth import AuthError
from expense_tracker.config import validate_all_settings
from expense_tracker.ledger import (
    LedgerValidationError,
    PersistenceError,
    TransactionNotFoundError,
)
from expense_tracker.models import Category, TransactionKind
from expense_tracker.presentation import (
    added_message,
    deleted_message,
    describe_listing,
    empty_listing_message,
    format_currency,
    format_date,
    format_signed_amount,
    updated_message,
)
from expense_tracker.session import ExpenseTrackerSession, create_app_components


# Page configuration
st.set_page_config(
    page_title="Expense Tracker",
    page_icon="💰",
    layout="wide",
)


def get_session() -> ExpenseTrackerSession:
    """One tracker session per browser session, restored on first use."""
    if "tracker" not in st.session_state:
        tracker = create_app_components()
        tracker.restore()
        st.session_state.tracker = tracker
        st.session_state.editing_id = None
        st.session_state.form_errors = {}
        st.session_state.form_version = 0
    return st.session_state.tracker


def main():
    """Main application entry point."""
    tracker = get_session()

    if not tracker.is_authenticated:
        render_auth_page(tracker)
        return

    st.sidebar.title("💰 Expense Tracker")
    st.sidebar.markdown(f"Welcome, **{tracker.current_user.name}**")
    if st.sidebar.button("Log out"):
        tracker.sign_out()
        st.session_state.editing_id = None
        st.toast("Logged out successfully")
        st.rerun()
    render_settings_status(tracker)

    render_dashboard(tracker)
    render_transaction_form(tracker)
    render_transaction_list(tracker)


def render_auth_page(tracker: ExpenseTrackerSession):
    """Sign in or create an account."""
    st.title("💰 Expense Tracker")

    mode = st.radio(
        "Mode",
        ["Sign in", "Create account"],
        horizontal=True,
        label_visibility="collapsed",
    )
    is_login = mode == "Sign in"

    with st.form("auth-form"):
        st.subheader("Welcome Back" if is_login else "Create Account")
        name = "" if is_login else st.text_input("Full name")
        username = st.text_input("Username")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Sign In" if is_login else "Create Account")

    if not submitted:
        return

    try:
        if is_login:
            user = tracker.sign_in(username, password)
            st.toast(f"Welcome back, {user.name}!")
        else:
            user = tracker.register(username, password, name)
            st.toast(f"Account created successfully! Welcome, {user.name}!")
    except AuthError as e:
        st.error(str(e))
        return

    st.rerun()


def render_dashboard(tracker: ExpenseTrackerSession):
    """Balance, income, expenses and count cards."""
    summary = tracker.ledger.aggregate()

    col1, col2, col3, col4 = st.columns(4)
    col1.metric(
        "Total Balance",
        format_currency(summary.balance),
        "Positive balance" if summary.is_positive_balance else "Negative balance",
        delta_color="normal" if summary.is_positive_balance else "inverse",
    )
    col2.metric("Total Income", format_currency(summary.total_income))
    col3.metric("Total Expenses", format_currency(summary.total_expenses))
    col4.metric("Transactions", summary.transaction_count)

    breakdown = tracker.ledger.category_breakdown(TransactionKind.EXPENSE)
    if breakdown:
        with st.expander("Spending by category"):
            for category, total in breakdown.items():
                st.markdown(f"{category.value}: **{format_currency(total)}**")


def render_settings_status(tracker: ExpenseTrackerSession):
    """Configuration check and recent activity, in the sidebar."""
    with st.sidebar.expander("⚙️ Settings"):
        status = validate_all_settings()
        for name, label in [("storage", "Storage"), ("app", "Application")]:
            if status.get(name, False):
                st.success(f"✅ {label} settings OK")
            else:
                st.error(f"❌ {label} - {status.get(f'{name}_error', 'Invalid')}")

        if tracker.audit_logger:
            st.markdown("**Recent activity**")
            for event in tracker.audit_logger.recent_events[:5]:
                st.caption(f"{event.timestamp:%H:%M:%S} · {event.description}")


def render_transaction_form(tracker: ExpenseTrackerSession):
    """Add a new transaction, or edit the one selected in the list."""
    editing = None
    if st.session_state.editing_id:
        editing = tracker.ledger.get(st.session_state.editing_id)
        if editing is None:
            st.session_state.editing_id = None

    errors = st.session_state.form_errors
    categories = list(Category)
    kinds = list(TransactionKind)

    # Widgets keep their input until form_version moves on after a save
    prefix = f"txn-{editing.id if editing else 'new'}-{st.session_state.form_version}"

    st.markdown("---")
    st.subheader("Edit Transaction" if editing else "Add New Transaction")

    with st.form("transaction-form"):
        description = st.text_input(
            "Description",
            value=editing.description if editing else "",
            key=f"{prefix}-description",
        )
        if "description" in errors:
            st.error(errors["description"])

        col1, col2 = st.columns(2)
        with col1:
            amount = st.text_input(
                "Amount ($)",
                value=str(editing.amount) if editing else "",
                key=f"{prefix}-amount",
            )
            if "amount" in errors:
                st.error(errors["amount"])

            kind = st.selectbox(
                "Type",
                options=kinds,
                index=kinds.index(editing.kind) if editing else kinds.index(TransactionKind.EXPENSE),
                format_func=lambda k: k.value.capitalize(),
                key=f"{prefix}-kind",
            )
        with col2:
            txn_date = st.date_input(
                "Date",
                value=editing.date if editing else date.today(),
                key=f"{prefix}-date",
            )
            if "date" in errors:
                st.error(errors["date"])

            category = st.selectbox(
                "Category",
                options=[None] + categories,
                index=categories.index(editing.category) + 1 if editing else 0,
                format_func=lambda c: "Select category" if c is None else c.value,
                key=f"{prefix}-category",
            )
            if "category" in errors:
                st.error(errors["category"])

        submitted = st.form_submit_button(
            "Update Transaction" if editing else "Add Transaction"
        )

    if editing and st.button("Cancel"):
        st.session_state.editing_id = None
        st.session_state.form_errors = {}
        st.rerun()

    if not submitted:
        return

    candidate = {
        "description": description,
        "amount": amount,
        "date": txn_date,
        "kind": kind,
        "category": category,
    }

    try:
        if editing:
            tracker.ledger.update(editing.id, candidate)
            message = updated_message()
            st.session_state.editing_id = None
        else:
            created = tracker.ledger.create(candidate)
            message = added_message(created)
    except LedgerValidationError as e:
        st.session_state.form_errors = e.errors_by_field
        st.rerun()
    except TransactionNotFoundError:
        st.session_state.editing_id = None
        st.warning("That transaction no longer exists.")
        return
    except PersistenceError as e:
        st.error(str(e))
        return

    st.session_state.form_errors = {}
    st.session_state.form_version += 1
    st.toast(message)
    st.rerun()


def render_transaction_list(tracker: ExpenseTrackerSession):
    """Filtered, newest-first transaction list with edit/delete actions."""
    st.markdown("---")
    st.subheader("Transactions")

    with st.expander("Filters"):
        col1, col2, col3 = st.columns(3)
        with col1:
            start_date = st.date_input("Start date", value=None)
            end_date = st.date_input("End date", value=None)
        with col2:
            min_amount = st.text_input("Min amount")
            max_amount = st.text_input("Max amount")
        with col3:
            kind = st.selectbox("Type", ["all", "income", "expense"], format_func=str.capitalize)
            category = st.selectbox(
                "Category",
                options=[""] + [c.value for c in tracker.ledger.categories_in_use()],
                format_func=lambda c: c or "All Categories",
            )

    try:
        listing = tracker.ledger.list({
            "start_date": start_date,
            "end_date": end_date,
            "min_amount": min_amount,
            "max_amount": max_amount,
            "kind": kind,
            "category": category,
        })
    except ValueError as e:
        st.error(f"Invalid filter: {e}")
        return

    st.caption(describe_listing(listing))

    empty_message = empty_listing_message(listing)
    if empty_message:
        st.info(empty_message)
        return

    for txn in listing.transactions:
        col1, col2, col3, col4 = st.columns([4, 2, 1, 1])
        col1.markdown(
            f"**{txn.description}**  \n"
            f"{format_date(txn.date)} · {txn.kind.value} · {txn.category.value}"
        )
        col2.markdown(f"**{format_signed_amount(txn)}**")
        if col3.button("✏️ Edit", key=f"edit-{txn.id}"):
            st.session_state.editing_id = txn.id
            st.session_state.form_errors = {}
            st.rerun()
        if col4.button("🗑️ Delete", key=f"delete-{txn.id}"):
            try:
                tracker.ledger.delete(txn.id)
            except PersistenceError as e:
                st.error(str(e))
                return
            if st.session_state.editing_id == txn.id:
                st.session_state.editing_id = None
            st.toast(deleted_message(txn))
            st.rerun()


if __name__ == "__main__":
    main()
