"""Tests for the dashboard summary."""

from datetime import date
from decimal import Decimal

from finance_tracker.engine.dashboard import (
    CATEGORY_PALETTE,
    EXPENSE_COLOR,
    INCOME_COLOR,
    color_for_index,
    dashboard_summary,
)
from finance_tracker.models import Budget, Period, Transaction, TransactionType


MARCH = Period(month=2, year=2024)


def _tx(amount, category, type=TransactionType.EXPENSE, day=date(2024, 3, 5)):
    return Transaction(amount=Decimal(amount), date=day, category=category, type=type)


class TestDashboardSummary:
    """Tests for dashboard_summary()."""

    def test_totals_and_balance(self):
        transactions = [
            _tx("2500", "Salary", TransactionType.INCOME),
            _tx("200", "Food"),
            _tx("900", "Rent"),
            _tx("50", "Food", day=date(2024, 2, 28)),
        ]
        summary = dashboard_summary(transactions, MARCH)

        assert summary.total_income == Decimal("2500")
        assert summary.total_expenses == Decimal("1100")
        assert summary.balance == Decimal("1400")
        assert summary.expense_by_category == {
            "Food": Decimal("200"),
            "Rent": Decimal("900"),
        }

    def test_negative_balance(self):
        summary = dashboard_summary([_tx("10", "Food")], MARCH)
        assert summary.balance == Decimal("-10")

    def test_expected_figures_come_from_budgets(self):
        budgets = [
            Budget(category="Salary", amount=Decimal("3000"), type=TransactionType.INCOME, month=2, year=2024),
            Budget(category="Food", amount=Decimal("300"), month=2, year=2024),
            Budget(category="Rent", amount=Decimal("900"), month=2, year=2024),
            Budget(category="Rent", amount=Decimal("900"), month=3, year=2024),
        ]
        summary = dashboard_summary([], MARCH, budgets=budgets)
        assert summary.expected_income == Decimal("3000")
        assert summary.expected_expenses == Decimal("1200")
        assert [(row.name, row.expected) for row in summary.monthly_series] == [
            ("Income", Decimal("3000")),
            ("Expenses", Decimal("1200")),
        ]

    def test_chart_series(self):
        transactions = [
            _tx("100", "Salary", TransactionType.INCOME),
            _tx("20", "Food"),
            _tx("10", ""),
        ]
        summary = dashboard_summary(transactions, MARCH)

        assert [(s.name, s.color) for s in summary.overview_series] == [
            ("Income", INCOME_COLOR),
            ("Expenses", EXPENSE_COLOR),
        ]
        assert [(s.name, s.value) for s in summary.category_series] == [
            ("Food", Decimal("20")),
            ("Uncategorized", Decimal("10")),
        ]
        assert summary.category_series[0].color == CATEGORY_PALETTE[0]

    def test_empty_period(self):
        summary = dashboard_summary([], MARCH)
        assert summary.total_income == Decimal("0")
        assert summary.category_series == []


class TestPalette:
    def test_colors_cycle(self):
        assert color_for_index(len(CATEGORY_PALETTE)) == CATEGORY_PALETTE[0]
