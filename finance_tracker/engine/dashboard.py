"""
Dashboard Summary

Period totals and the chart-ready series built from them. Only numbers
are produced here; how they are drawn belongs to the front end.
"""

from decimal import Decimal
from typing import Iterable, Optional

from finance_tracker.engine.aggregation import UNCATEGORIZED, category_totals
from finance_tracker.engine.periods import budgets_in_period, transactions_in_period
from finance_tracker.models.derived import (
    ChartSlice,
    DashboardSummary,
    ExpectedComparison,
)
from finance_tracker.models.records import (
    Budget,
    Period,
    Transaction,
    TransactionType,
)


INCOME_COLOR = "#4CAF50"
EXPENSE_COLOR = "#F44336"

# Category slices cycle through this palette by position
CATEGORY_PALETTE = (
    "#FF6384",
    "#36A2EB",
    "#FFCE56",
    "#4BC0C0",
    "#9966FF",
    "#FF9F40",
    "#8D6E63",
    "#26A69A",
)

ZERO = Decimal("0")


def color_for_index(index: int) -> str:
    return CATEGORY_PALETTE[index % len(CATEGORY_PALETTE)]


def dashboard_summary(
    transactions: Iterable[Transaction],
    period: Period,
    budgets: Optional[Iterable[Budget]] = None,
    uncategorized: str = UNCATEGORIZED,
) -> DashboardSummary:
    """
    Summarize one period.

    Args:
        transactions: All transactions; only those in ``period`` count
        period: Month being viewed
        budgets: When given, the period's budgets supply the expected
            income and expense figures. Without budgets both are zero.
        uncategorized: Label for transactions without a category
    """
    totals = category_totals(transactions_in_period(transactions, period), uncategorized)
    total_income = sum(totals[TransactionType.INCOME].values(), ZERO)
    total_expenses = sum(totals[TransactionType.EXPENSE].values(), ZERO)
    expense_by_category = dict(totals[TransactionType.EXPENSE])

    expected_income = ZERO
    expected_expenses = ZERO
    for budget in budgets_in_period(budgets or [], period):
        if budget.type == TransactionType.INCOME:
            expected_income += budget.amount
        else:
            expected_expenses += budget.amount

    return DashboardSummary(
        period=period,
        total_income=total_income,
        total_expenses=total_expenses,
        balance=total_income - total_expenses,
        expense_by_category=expense_by_category,
        expected_income=expected_income,
        expected_expenses=expected_expenses,
        overview_series=[
            ChartSlice(name="Income", value=total_income, color=INCOME_COLOR),
            ChartSlice(name="Expenses", value=total_expenses, color=EXPENSE_COLOR),
        ],
        monthly_series=[
            ExpectedComparison(name="Income", actual=total_income, expected=expected_income),
            ExpectedComparison(name="Expenses", actual=total_expenses, expected=expected_expenses),
        ],
        category_series=[
            ChartSlice(name=name, value=value, color=color_for_index(index))
            for index, (name, value) in enumerate(expense_by_category.items())
        ],
    )
