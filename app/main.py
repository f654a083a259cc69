"""
Streamlit Frontend for Finance Tracker

The screens a user works with day to day: dashboard, transactions,
budgets and savings goals, plus a local profile.

DESIGN PRINCIPLES:
1. Every figure on screen comes from the tracker's derived views
2. Amounts are rounded to two places only here, when displayed
3. Clear error messages in simple language
4. Visual feedback for all operations

The month being viewed is a UI choice. Recurring budgets are always
rolled into the real current month, whatever month is on screen.
"""

from datetime import date
from decimal import Decimal

import plotly.express as px
import plotly.graph_objects as go
import streamlit as st
from pydantic import ValidationError

from finance_tracker.config import get_settings, validate_all_settings
from finance_tracker.engine.dashboard import EXPENSE_COLOR, INCOME_COLOR
from finance_tracker.models import (
    Budget,
    Goal,
    Period,
    Transaction,
    TransactionQuery,
    TransactionType,
)
from finance_tracker.orchestrator import FinanceTracker, create_app_components, create_tracker
from finance_tracker.services.storage import DuplicateError, NotFoundError


# Page configuration
st.set_page_config(
    page_title="Finance Tracker",
    page_icon="💰",
    layout="wide",
    initial_sidebar_state="expanded",
)

st.markdown("""
<style>
    .stButton>button {
        width: 100%;
        margin-top: 10px;
    }
    .big-number {
        font-size: 2.5em;
        font-weight: bold;
        color: #2c3e50;
    }
</style>
""", unsafe_allow_html=True)


MONTH_NAMES = [date(2000, m, 1).strftime("%B") for m in range(1, 13)]


def format_amount(value: Decimal, currency: str = "") -> str:
    """Two decimal places with thousands separators and a currency label."""
    text = f"{value:,.2f}"
    return f"{text} {currency}" if currency else text


@st.cache_resource
def get_components():
    """Get or create application components (cached)."""
    return create_app_components()


def get_tracker(store, audit_logger, user_id) -> FinanceTracker:
    """One opened tracker per signed-in profile, kept for the session."""
    if st.session_state.get("tracker_user") != user_id or "tracker" not in st.session_state:
        st.session_state.tracker = create_tracker(
            store,
            user_id=user_id,
            audit_logger=audit_logger,
            uncategorized=get_settings().app.uncategorized_label,
        )
        st.session_state.tracker_user = user_id
    return st.session_state.tracker


def main():
    """Main application entry point."""
    try:
        profiles, store, audit_logger = get_components()
    except ValidationError as e:
        st.error(f"Configuration is invalid: {e}")
        st.stop()

    user = profiles.current_user()

    st.sidebar.title("💰 Finance Tracker")
    st.sidebar.markdown("---")

    if user is None:
        render_sign_in_page(profiles)
        return

    tracker = get_tracker(store, audit_logger, user.id)
    currency = user.currency

    st.sidebar.markdown(f"Signed in as **{user.name}**")
    page = st.sidebar.radio(
        "Navigate to:",
        ["📊 Dashboard", "📋 Transactions", "➕ Add Transaction", "🎯 Budget", "🏁 Goals", "👤 Profile"],
        index=0,
    )

    if tracker.unsaved_collections:
        st.sidebar.warning(
            "Could not save " + ", ".join(tracker.unsaved_collections)
            + ". Changes are kept until the next successful save."
        )

    st.sidebar.markdown("---")
    period = render_period_picker(tracker)

    if page == "📊 Dashboard":
        render_dashboard_page(tracker, period, currency)
    elif page == "📋 Transactions":
        render_transactions_page(tracker, period, currency)
    elif page == "➕ Add Transaction":
        render_add_transaction_page(tracker)
    elif page == "🎯 Budget":
        render_budget_page(tracker, period, currency)
    elif page == "🏁 Goals":
        render_goals_page(tracker, currency)
    elif page == "👤 Profile":
        render_profile_page(profiles, user)


def render_period_picker(tracker: FinanceTracker) -> Period:
    """Month and year selector; defaults to the current month."""
    current = tracker.current_period()
    month = st.sidebar.selectbox(
        "Month",
        options=list(range(12)),
        index=current.month,
        format_func=lambda m: MONTH_NAMES[m],
    )
    year = st.sidebar.number_input(
        "Year",
        min_value=1,
        max_value=9999,
        value=current.year,
        step=1,
    )
    return Period(month=month, year=int(year))


def render_sign_in_page(profiles):
    """Render the mock sign-in and registration forms."""
    st.title("👋 Welcome")
    st.markdown("Sign in with the email of an existing profile, or create a new one.")

    sign_in_tab, register_tab = st.tabs(["Sign in", "Register"])

    with sign_in_tab:
        with st.form("sign_in_form"):
            email = st.text_input("Email")
            if st.form_submit_button("Sign in", type="primary"):
                try:
                    profiles.sign_in(email)
                    st.rerun()
                except NotFoundError:
                    st.error("No profile uses that email. Register first.")

    with register_tab:
        with st.form("register_form"):
            name = st.text_input("Name")
            email = st.text_input("Email", key="register_email")
            currency = st.text_input("Currency", value=get_settings().app.default_currency)
            if st.form_submit_button("Create profile", type="primary"):
                try:
                    profiles.register(name, email, currency)
                    st.rerun()
                except DuplicateError:
                    st.error("A profile with that email already exists.")
                except ValidationError as e:
                    st.error(f"Please check the details: {e.errors()[0]['msg']}")


def render_dashboard_page(tracker: FinanceTracker, period: Period, currency: str):
    """Render totals and charts for the chosen month."""
    st.title("📊 Dashboard")
    st.caption(period.label())

    summary = tracker.dashboard(period)

    col1, col2, col3 = st.columns(3)
    col1.metric("Income", format_amount(summary.total_income, currency))
    col2.metric("Expenses", format_amount(summary.total_expenses, currency))
    col3.metric("Balance", format_amount(summary.balance, currency))

    col1, col2 = st.columns(2)
    with col1:
        fig_overview = px.bar(
            x=[s.name for s in summary.overview_series],
            y=[float(s.value) for s in summary.overview_series],
            color=[s.name for s in summary.overview_series],
            color_discrete_map={"Income": INCOME_COLOR, "Expenses": EXPENSE_COLOR},
            labels={"x": "", "y": currency},
            title="Income vs expenses",
        )
        st.plotly_chart(fig_overview, use_container_width=True)

    with col2:
        if summary.category_series:
            fig_cat = px.pie(
                names=[s.name for s in summary.category_series],
                values=[float(s.value) for s in summary.category_series],
                color=[s.name for s in summary.category_series],
                color_discrete_map={s.name: s.color for s in summary.category_series},
                title="Expenses by category",
            )
            st.plotly_chart(fig_cat, use_container_width=True)
        else:
            st.info("No expenses recorded for this month.")

    fig_expected = go.Figure()
    names = [row.name for row in summary.monthly_series]
    fig_expected.add_trace(go.Bar(x=names, y=[float(r.actual) for r in summary.monthly_series], name="Actual"))
    fig_expected.add_trace(go.Bar(x=names, y=[float(r.expected) for r in summary.monthly_series], name="Budgeted"))
    fig_expected.update_layout(barmode="group", title="Actual vs budgeted", margin=dict(t=40, b=10, l=10, r=10))
    st.plotly_chart(fig_expected, use_container_width=True)

    st.subheader("Savings goals")
    top = tracker.top_goals()
    if not top:
        st.info("No goals yet. Add one on the Goals page.")
    for goal in top:
        st.markdown(f"**{goal.title}**: {format_amount(goal.collected, currency)} of "
                    f"{format_amount(goal.target, currency)}")
        st.progress(min(float(goal.progress_percent), 100.0) / 100)


def render_transactions_page(tracker: FinanceTracker, period: Period, currency: str):
    """Render the searchable transaction list."""
    st.title("📋 Transactions")

    col1, col2, col3 = st.columns(3)
    with col1:
        search_term = st.text_input("Search descriptions")
    with col2:
        type_filter = st.selectbox(
            "Type",
            options=[None] + list(TransactionType),
            format_func=lambda x: "All types" if x is None else x.value.title(),
        )
    with col3:
        only_period = st.checkbox(f"Only {period.label()}", value=True)

    result = tracker.search_transactions(TransactionQuery(
        search_term=search_term,
        type_filter=type_filter,
        period=period if only_period else None,
    ))
    st.caption(result.query_description)

    if not result.data_found:
        st.info("No transactions match. Use 'Add Transaction' to record one.")
        return

    for row in result.rows:
        transaction = row.transaction
        sign = "+" if transaction.type == TransactionType.INCOME else "-"
        col1, col2, col3, col4 = st.columns([3, 2, 3, 1])
        col1.markdown(f"**{transaction.description or '(no description)'}**  \n"
                      f"{transaction.date.isoformat()} · {transaction.category or get_settings().app.uncategorized_label}")
        col2.markdown(f"{sign}{format_amount(transaction.amount, currency)}")
        if row.budget_status is not None:
            status = row.budget_status
            label = "over budget" if status.is_over_budget else "left"
            col3.markdown(f"{format_amount(status.remaining, currency)} {label}")
        else:
            col3.markdown("No budget")
        if col4.button("🗑️", key=f"delete_tx_{transaction.id}"):
            tracker.delete_transaction(transaction.id)
            st.rerun()


def render_add_transaction_page(tracker: FinanceTracker):
    """Render the add-transaction form."""
    st.title("➕ Add Transaction")

    with st.form("add_transaction_form", clear_on_submit=True):
        description = st.text_input("Description")
        amount = st.number_input("Amount", min_value=0.0, step=0.01, format="%.2f")
        tx_date = st.date_input("Date", value=tracker.today())
        category = st.text_input("Category")
        tx_type = st.radio(
            "Type",
            options=list(TransactionType),
            format_func=lambda x: x.value.title(),
            horizontal=True,
            index=1,
        )
        if st.form_submit_button("💾 Save", type="primary"):
            try:
                tracker.add_transaction(Transaction(
                    description=description,
                    amount=Decimal(str(amount)),
                    date=tx_date,
                    category=category,
                    type=tx_type,
                ))
                st.success("Transaction saved.")
            except ValidationError as e:
                st.error(f"Please check the details: {e.errors()[0]['msg']}")


def render_budget_page(tracker: FinanceTracker, period: Period, currency: str):
    """Render budgets for the chosen month."""
    st.title("🎯 Budget")
    st.caption(period.label())

    overview = tracker.budget_overview(period)

    col1, col2 = st.columns(2)
    col1.metric(
        "Expenses",
        format_amount(overview.total_actual_expense, currency),
        delta=f"of {format_amount(overview.total_budgeted_expense, currency)} budgeted",
        delta_color="off",
    )
    col2.metric(
        "Income",
        format_amount(overview.total_actual_income, currency),
        delta=f"of {format_amount(overview.total_budgeted_income, currency)} budgeted",
        delta_color="off",
    )

    if overview.has_budgets:
        fig = go.Figure()
        names = [p.name for p in overview.chart]
        fig.add_trace(go.Bar(x=names, y=[float(p.budgeted) for p in overview.chart], name="Budgeted"))
        fig.add_trace(go.Bar(x=names, y=[float(p.actual) for p in overview.chart], name="Actual"))
        fig.update_layout(barmode="group", margin=dict(t=30, b=10, l=10, r=10))
        st.plotly_chart(fig, use_container_width=True)
    else:
        st.info("No budgets for this month yet.")

    budgets_by_id = {b.id: b for b in tracker.budgets}
    for heading, rows in (("Expense budgets", overview.expense_budgets),
                          ("Income budgets", overview.income_budgets)):
        if not rows:
            continue
        st.subheader(heading)
        for progress in rows:
            budget = budgets_by_id[progress.budget_id]
            col1, col2, col3 = st.columns([4, 3, 1])
            col1.markdown(f"**{progress.category}**" + (" 🔁" if budget.is_recurring else ""))
            col1.progress(float(progress.percent_used) / 100)
            col2.markdown(
                f"{format_amount(progress.spent, currency)} / {format_amount(progress.budgeted, currency)}  \n"
                f"{'⚠️ ' if progress.is_over_budget else ''}{format_amount(progress.remaining, currency)} remaining"
            )
            if col3.button("🗑️", key=f"delete_budget_{budget.id}"):
                tracker.delete_budget(budget.id)
                st.rerun()

            with st.expander(f"Edit {progress.category}"):
                with st.form(f"edit_budget_{budget.id}"):
                    new_category = st.text_input("Category", value=budget.category)
                    new_amount = st.number_input("Amount", min_value=0.0, value=float(budget.amount), step=0.01)
                    new_type = st.radio(
                        "Type",
                        options=list(TransactionType),
                        format_func=lambda x: x.value.title(),
                        horizontal=True,
                        index=list(TransactionType).index(budget.type),
                    )
                    col_month, col_year = st.columns(2)
                    new_month = col_month.selectbox(
                        "Month",
                        options=list(range(12)),
                        index=budget.month,
                        format_func=lambda m: MONTH_NAMES[m],
                    )
                    new_year = col_year.number_input("Year", min_value=1, max_value=9999, value=budget.year, step=1)
                    new_notes = st.text_input("Notes", value=budget.notes or "")
                    recurring = st.checkbox("Repeat every month", value=budget.is_recurring)
                    if st.form_submit_button("Update"):
                        try:
                            tracker.update_budget(Budget(
                                id=budget.id,
                                category=new_category,
                                amount=Decimal(str(new_amount)),
                                type=new_type,
                                month=new_month,
                                year=int(new_year),
                                notes=new_notes or None,
                                is_recurring=recurring,
                            ))
                            st.rerun()
                        except ValidationError as e:
                            st.error(f"Please check the details: {e.errors()[0]['msg']}")
                        except NotFoundError:
                            st.error("That budget no longer exists.")

    st.markdown("---")
    st.subheader("Add budget")
    with st.form("add_budget_form", clear_on_submit=True):
        category = st.text_input("Category")
        amount = st.number_input("Amount", min_value=0.0, step=0.01, format="%.2f")
        budget_type = st.radio(
            "Type",
            options=list(TransactionType),
            format_func=lambda x: x.value.title(),
            horizontal=True,
            index=1,
        )
        notes = st.text_input("Notes")
        recurring = st.checkbox("Repeat every month")
        if st.form_submit_button("💾 Save budget", type="primary"):
            try:
                tracker.add_budget(Budget(
                    category=category,
                    amount=Decimal(str(amount)),
                    type=budget_type,
                    month=period.month,
                    year=period.year,
                    notes=notes or None,
                    is_recurring=recurring,
                ))
                st.rerun()
            except ValidationError as e:
                st.error(f"Please check the details: {e.errors()[0]['msg']}")


def render_goals_page(tracker: FinanceTracker, currency: str):
    """Render savings goals with their projections."""
    st.title("🏁 Goals")

    projections = {p.goal_id: p for p in tracker.goal_projections()}

    chart = tracker.goal_chart()
    if chart:
        fig = go.Figure()
        names = [p.name for p in chart]
        fig.add_trace(go.Bar(x=names, y=[float(p.current) for p in chart], name="Current"))
        fig.add_trace(go.Bar(x=names, y=[float(p.target) for p in chart], name="Target"))
        fig.add_trace(go.Bar(x=names, y=[float(p.projected) for p in chart], name="Projected"))
        fig.update_layout(barmode="group", margin=dict(t=30, b=10, l=10, r=10))
        st.plotly_chart(fig, use_container_width=True)
    else:
        st.info("No goals yet.")

    for goal in tracker.goals:
        projection = projections[goal.id]
        st.markdown(f"### {goal.title}")
        st.progress(min(float(projection.progress_percent), 100.0) / 100)

        col1, col2, col3 = st.columns(3)
        col1.metric("Saved", format_amount(goal.collected, currency),
                    delta=f"of {format_amount(goal.target, currency)}", delta_color="off")
        col2.metric("Needed per month", format_amount(projection.monthly_needed, currency))
        if projection.is_complete:
            col3.success("Goal reached 🎉")
        elif not projection.is_reachable:
            col3.warning("Set a monthly contribution to get a projected date.")
        elif projection.on_track:
            col3.success(f"On track: reached by {projection.projected_date.isoformat()}")
        else:
            col3.warning(f"Behind: reached by {projection.projected_date.isoformat()}")

        with st.expander("Update"):
            with st.form(f"edit_goal_{goal.id}"):
                title = st.text_input("Title", value=goal.title)
                target = st.number_input("Target", min_value=0.0, value=float(goal.target), step=0.01)
                collected = st.number_input("Saved so far", min_value=0.0, value=float(goal.collected), step=0.01)
                deadline = st.date_input("Deadline", value=goal.deadline)
                contribution = st.number_input(
                    "Monthly contribution",
                    min_value=0.0,
                    value=float(goal.monthly_contribution),
                    step=0.01,
                )
                description = st.text_area("Description", value=goal.description or "")
                if st.form_submit_button("Update"):
                    try:
                        tracker.update_goal(Goal(
                            id=goal.id,
                            title=title,
                            target=Decimal(str(target)),
                            collected=Decimal(str(collected)),
                            deadline=deadline,
                            monthly_contribution=Decimal(str(contribution)),
                            description=description or None,
                        ))
                        st.rerun()
                    except ValidationError as e:
                        st.error(f"Please check the details: {e.errors()[0]['msg']}")
                    except NotFoundError:
                        st.error("That goal no longer exists.")
            if st.button("🗑️ Delete goal", key=f"delete_goal_{goal.id}"):
                tracker.delete_goal(goal.id)
                st.rerun()

    st.markdown("---")
    st.subheader("Add goal")
    with st.form("add_goal_form", clear_on_submit=True):
        title = st.text_input("Title")
        target = st.number_input("Target", min_value=0.0, step=0.01, format="%.2f")
        collected = st.number_input("Already saved", min_value=0.0, step=0.01, format="%.2f")
        deadline = st.date_input("Deadline", value=tracker.today())
        contribution = st.number_input("Monthly contribution", min_value=0.0, step=0.01, format="%.2f")
        description = st.text_area("Description")
        if st.form_submit_button("💾 Save goal", type="primary"):
            try:
                tracker.add_goal(Goal(
                    title=title,
                    target=Decimal(str(target)),
                    collected=Decimal(str(collected)),
                    deadline=deadline,
                    monthly_contribution=Decimal(str(contribution)),
                    description=description or None,
                ))
                st.rerun()
            except ValidationError as e:
                st.error(f"Please check the details: {e.errors()[0]['msg']}")


def render_profile_page(profiles, user):
    """Render profile details, settings status and sign-out."""
    st.title("👤 Profile")

    with st.form("profile_form"):
        name = st.text_input("Name", value=user.name)
        email = st.text_input("Email", value=user.email)
        currency = st.text_input("Currency", value=user.currency)
        if st.form_submit_button("Save profile", type="primary"):
            try:
                profiles.update_profile(user.id, name=name, email=email, currency=currency)
                st.success("Profile updated.")
                st.rerun()
            except DuplicateError:
                st.error("Another profile already uses that email.")
            except ValidationError as e:
                st.error(f"Please check the details: {e.errors()[0]['msg']}")

    if st.button("Sign out"):
        profiles.sign_out()
        st.session_state.pop("tracker", None)
        st.session_state.pop("tracker_user", None)
        st.rerun()

    st.markdown("---")
    st.markdown("### Configuration")
    status = validate_all_settings()
    for name, key in (("Storage", "storage"), ("Application", "app")):
        if status.get(key, False):
            st.success(f"✅ {name} settings OK")
        else:
            st.error(f"❌ {name}: {status.get(f'{key}_error', 'Invalid')}")
    st.markdown(
        "Settings are read from environment variables and a `.env` file. "
        "See `.env.example` for the available variables."
    )


if __name__ == "__main__":
    main()
