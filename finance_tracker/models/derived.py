"""
Derived View Models

Everything in this module is computed from source records on every
read and is never persisted. Engines return these; the front end
renders them.
"""

import datetime as dt
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from finance_tracker.models.records import Period, TransactionType


# type -> category -> summed amount
CategoryTotals = dict[TransactionType, dict[str, Decimal]]


class DerivedModel(BaseModel):
    model_config = ConfigDict(frozen=True)


# =============================================================================
# BUDGETS
# =============================================================================

class BudgetProgress(DerivedModel):
    """
    How a single budget is doing in its month.

    For income budgets "over budget" means the income fell short
    of the target.
    """

    budget_id: str
    category: str
    type: TransactionType
    period: Period
    budgeted: Decimal
    spent: Decimal
    remaining: Decimal
    percent_used: Decimal = Field(
        ...,
        ge=0,
        le=100,
        description="Share of the target reached, capped at 100"
    )
    is_over_budget: bool


class BudgetChartPoint(DerivedModel):
    """One bar pair of the budgeted-vs-actual chart."""

    name: str
    budgeted: Decimal
    actual: Decimal
    type: TransactionType


class BudgetOverview(DerivedModel):
    """All budget figures for one period."""

    period: Period
    expense_budgets: list[BudgetProgress] = Field(default_factory=list)
    income_budgets: list[BudgetProgress] = Field(default_factory=list)
    total_budgeted_expense: Decimal = Decimal("0")
    total_budgeted_income: Decimal = Decimal("0")
    total_actual_expense: Decimal = Decimal("0")
    total_actual_income: Decimal = Decimal("0")
    chart: list[BudgetChartPoint] = Field(default_factory=list)

    @property
    def has_budgets(self) -> bool:
        return bool(self.expense_budgets or self.income_budgets)


# =============================================================================
# GOALS
# =============================================================================

class GoalProjection(DerivedModel):
    """
    Where a goal stands relative to its deadline.

    months_to_complete and projected_date are None when the goal is
    unreachable (no monthly contribution while money is still missing).
    """

    goal_id: str
    title: str
    months_remaining: int = Field(
        ...,
        description="Calendar-month boundaries until the deadline; negative once passed"
    )
    remaining_amount: Decimal
    monthly_needed: Decimal
    months_to_complete: Optional[int] = None
    projected_date: Optional[dt.date] = None
    is_reachable: bool
    is_complete: bool
    on_track: bool
    progress_percent: Decimal


class GoalChartPoint(DerivedModel):
    """Current, target and deadline-projected amounts of one goal."""

    name: str
    current: Decimal
    target: Decimal
    projected: Decimal


class GoalProgress(DerivedModel):
    """Compact goal row for the dashboard card."""

    goal_id: str
    title: str
    collected: Decimal
    target: Decimal
    progress_percent: Decimal

    @property
    def is_complete(self) -> bool:
        return self.progress_percent >= 100


# =============================================================================
# DASHBOARD
# =============================================================================

class ChartSlice(DerivedModel):
    """A named value, optionally with a display colour."""

    name: str
    value: Decimal
    color: Optional[str] = None


class ExpectedComparison(DerivedModel):
    """Actual against budgeted amount for one direction."""

    name: str
    actual: Decimal
    expected: Decimal


class DashboardSummary(DerivedModel):
    """Totals and chart series for one period."""

    period: Period
    total_income: Decimal
    total_expenses: Decimal
    balance: Decimal
    expense_by_category: dict[str, Decimal] = Field(default_factory=dict)
    expected_income: Decimal = Decimal("0")
    expected_expenses: Decimal = Decimal("0")
    overview_series: list[ChartSlice] = Field(default_factory=list)
    monthly_series: list[ExpectedComparison] = Field(default_factory=list)
    category_series: list[ChartSlice] = Field(default_factory=list)
