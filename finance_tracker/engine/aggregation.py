"""
Aggregation Engine

Turns the transactions of a period into category totals, and budgets
into progress figures against those totals.

DESIGN DECISION: Sums are exact Decimal running additions. Rounding to
two places is a display concern and never happens here.

Zero-amount budgets are guarded explicitly: nothing spent against a
zero target reads as 0% used, anything spent saturates at 100%.
"""

from decimal import Decimal
from typing import Iterable, Optional

from finance_tracker.engine.periods import (
    budgets_in_period,
    period_of,
    transactions_in_period,
)
from finance_tracker.models.derived import (
    BudgetChartPoint,
    BudgetOverview,
    BudgetProgress,
    CategoryTotals,
)
from finance_tracker.models.records import (
    Budget,
    Period,
    Transaction,
    TransactionType,
)


UNCATEGORIZED = "Uncategorized"

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def category_label(category: Optional[str], uncategorized: str = UNCATEGORIZED) -> str:
    """Category used for grouping; blank categories fall back to the label."""
    if category is None or not category.strip():
        return uncategorized
    return category


def category_totals(
    transactions: Iterable[Transaction],
    uncategorized: str = UNCATEGORIZED,
) -> CategoryTotals:
    """
    Sum transaction amounts by type, then by category.

    Both the income and the expense key are always present, so
    lookups for a direction with no transactions return an empty
    mapping rather than failing. Categories keep first-seen order.
    """
    totals: CategoryTotals = {
        TransactionType.INCOME: {},
        TransactionType.EXPENSE: {},
    }
    for transaction in transactions:
        bucket = totals[transaction.type]
        key = category_label(transaction.category, uncategorized)
        bucket[key] = bucket.get(key, ZERO) + transaction.amount
    return totals


def percent_used(spent: Decimal, amount: Decimal) -> Decimal:
    """Share of ``amount`` reached by ``spent``, within [0, 100]."""
    if amount == 0:
        return ZERO if spent == 0 else HUNDRED
    return max(ZERO, min(HUNDRED, spent / amount * HUNDRED))


def budget_progress(budget: Budget, totals: CategoryTotals) -> BudgetProgress:
    """
    Compute how a budget is doing against the period's totals.

    Expense budgets are over when more was spent than planned.
    Income budgets are "over" (behind) when less came in than planned.
    """
    spent = totals.get(budget.type, {}).get(budget.category, ZERO)

    if budget.type == TransactionType.EXPENSE:
        remaining = budget.amount - spent
        is_over_budget = spent > budget.amount
    else:
        remaining = spent - budget.amount
        is_over_budget = spent < budget.amount

    return BudgetProgress(
        budget_id=budget.id,
        category=budget.category,
        type=budget.type,
        period=budget.period,
        budgeted=budget.amount,
        spent=spent,
        remaining=remaining,
        percent_used=percent_used(spent, budget.amount),
        is_over_budget=is_over_budget,
    )


def find_budget(
    budgets: Iterable[Budget],
    category: str,
    type: TransactionType,
    period: Period,
) -> Optional[Budget]:
    """
    Return the first budget occupying the slot, or None.

    A missing budget is a normal state ("no data"), not an error.
    """
    for budget in budgets:
        if budget.occupies(category, type, period):
            return budget
    return None


def transaction_budget_status(
    transaction: Transaction,
    transactions: Iterable[Transaction],
    budgets: Iterable[Budget],
    uncategorized: str = UNCATEGORIZED,
) -> Optional[BudgetProgress]:
    """
    Progress of the budget a transaction counts against.

    Looks up the budget with the transaction's category and type in the
    transaction's own month, then measures it against every transaction
    of that month. Returns None when no such budget exists.
    """
    period = period_of(transaction)
    category = category_label(transaction.category, uncategorized)
    budget = find_budget(budgets, category, transaction.type, period)
    if budget is None:
        return None

    totals = category_totals(transactions_in_period(transactions, period), uncategorized)
    return budget_progress(budget, totals)


def budget_overview(
    transactions: Iterable[Transaction],
    budgets: Iterable[Budget],
    period: Period,
    uncategorized: str = UNCATEGORIZED,
) -> BudgetOverview:
    """
    Collect every budget figure shown for one period.

    Actual totals cover all transactions of the period, including
    categories that have no budget.
    """
    period_budgets = budgets_in_period(budgets, period)
    totals = category_totals(transactions_in_period(transactions, period), uncategorized)

    expense_rows = []
    income_rows = []
    chart = []
    for budget in period_budgets:
        progress = budget_progress(budget, totals)
        if budget.type == TransactionType.EXPENSE:
            expense_rows.append(progress)
        else:
            income_rows.append(progress)
        chart.append(BudgetChartPoint(
            name=budget.category,
            budgeted=budget.amount,
            actual=progress.spent,
            type=budget.type,
        ))

    return BudgetOverview(
        period=period,
        expense_budgets=expense_rows,
        income_budgets=income_rows,
        total_budgeted_expense=sum((row.budgeted for row in expense_rows), ZERO),
        total_budgeted_income=sum((row.budgeted for row in income_rows), ZERO),
        total_actual_expense=sum(totals[TransactionType.EXPENSE].values(), ZERO),
        total_actual_income=sum(totals[TransactionType.INCOME].values(), ZERO),
        chart=chart,
    )
