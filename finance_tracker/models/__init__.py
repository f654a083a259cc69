"""
Data Models Package

This package contains all Pydantic models used in the Finance Tracker.
Source records live in records, figures computed from them in derived.
"""

from finance_tracker.models.records import (
    Budget,
    Goal,
    Period,
    Transaction,
    TransactionType,
    UserProfile,
)
from finance_tracker.models.derived import (
    BudgetChartPoint,
    BudgetOverview,
    BudgetProgress,
    CategoryTotals,
    ChartSlice,
    DashboardSummary,
    ExpectedComparison,
    GoalChartPoint,
    GoalProgress,
    GoalProjection,
)
from finance_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)
from finance_tracker.models.query import (
    TransactionListResult,
    TransactionQuery,
    TransactionRow,
)

__all__ = [
    # Source records
    "Budget",
    "Goal",
    "Period",
    "Transaction",
    "TransactionType",
    "UserProfile",
    # Derived views
    "BudgetChartPoint",
    "BudgetOverview",
    "BudgetProgress",
    "CategoryTotals",
    "ChartSlice",
    "DashboardSummary",
    "ExpectedComparison",
    "GoalChartPoint",
    "GoalProgress",
    "GoalProjection",
    # Queries
    "TransactionListResult",
    "TransactionQuery",
    "TransactionRow",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
