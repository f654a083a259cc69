"""
Projection and aggregation engine.

Pure functions only: inputs are source records plus a period or a
date, outputs are new derived models. Nothing here touches storage,
the clock or the audit log.
"""

from finance_tracker.engine.aggregation import (
    UNCATEGORIZED,
    budget_overview,
    budget_progress,
    category_label,
    category_totals,
    find_budget,
    percent_used,
    transaction_budget_status,
)
from finance_tracker.engine.dashboard import dashboard_summary
from finance_tracker.engine.periods import (
    budgets_in_period,
    parse_record_date,
    transactions_in_period,
)
from finance_tracker.engine.projection import (
    goal_chart_series,
    months_between,
    project_goal,
    top_goals,
)
from finance_tracker.engine.rollover import roll_recurring_budgets

__all__ = [
    "UNCATEGORIZED",
    "budget_overview",
    "budget_progress",
    "budgets_in_period",
    "category_label",
    "category_totals",
    "dashboard_summary",
    "find_budget",
    "goal_chart_series",
    "months_between",
    "parse_record_date",
    "percent_used",
    "project_goal",
    "roll_recurring_budgets",
    "top_goals",
    "transaction_budget_status",
    "transactions_in_period",
]
