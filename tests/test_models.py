"""
Tests for Finance Tracker models

Test strategy:
1. Unit tests for individual components (models, validators)
2. Integration tests for flows (in-memory store, pinned clock)
3. No files outside pytest's tmp_path are touched
"""

import pytest
from datetime import date
from decimal import Decimal
from uuid import uuid4

from pydantic import TypeAdapter, ValidationError

from finance_tracker.models import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
    Budget,
    Goal,
    Period,
    Transaction,
    TransactionType,
    UserProfile,
)


class TestPeriod:
    """Tests for the zero-based month period."""

    def test_from_date_is_zero_based(self):
        """January is month 0."""
        period = Period.from_date(date(2024, 1, 31))
        assert period.month == 0
        assert period.year == 2024

    def test_contains(self):
        """Test contains() checks month and year."""
        period = Period(month=2, year=2024)
        assert period.contains(date(2024, 3, 1))
        assert period.contains(date(2024, 3, 31))
        assert not period.contains(date(2024, 4, 1))
        assert not period.contains(date(2023, 3, 15))

    def test_rejects_month_twelve(self):
        """Months run 0..11."""
        with pytest.raises(ValidationError):
            Period(month=12, year=2024)

    def test_label(self):
        assert Period(month=2, year=2024).label() == "March 2024"


class TestTransaction:
    """Tests for the Transaction record."""

    def test_transaction_creation(self):
        """Test Transaction model creation."""
        transaction = Transaction(
            description="Weekly shop",
            amount=Decimal("82.40"),
            date=date(2024, 3, 2),
            category="Food",
            type=TransactionType.EXPENSE,
        )
        assert transaction.amount == Decimal("82.40")
        assert transaction.type == TransactionType.EXPENSE
        assert transaction.id

    def test_defaults(self):
        """Category and description default to empty, type to expense."""
        transaction = Transaction(amount=Decimal("5"), date=date(2024, 3, 2))
        assert transaction.category == ""
        assert transaction.description == ""
        assert transaction.type == TransactionType.EXPENSE

    def test_rejects_negative_amount(self):
        """Test that negative amounts are rejected."""
        with pytest.raises(ValueError):
            Transaction(amount=Decimal("-1"), date=date(2024, 3, 2))

    def test_strips_whitespace(self):
        transaction = Transaction(amount=Decimal("1"), date=date(2024, 3, 2), category="  Food ")
        assert transaction.category == "Food"

    def test_records_are_frozen(self):
        """Edits replace whole records."""
        transaction = Transaction(amount=Decimal("1"), date=date(2024, 3, 2))
        with pytest.raises(ValidationError):
            transaction.amount = Decimal("2")

    def test_reads_stored_json(self):
        """Stored records with plain numbers and ISO dates load."""
        transaction = Transaction.model_validate_json(
            '{"id": "t1", "description": "Pay", "amount": 2500, '
            '"date": "2024-03-01", "category": "Salary", "type": "income"}'
        )
        assert transaction.date == date(2024, 3, 1)
        assert transaction.type == TransactionType.INCOME
        assert transaction.amount == Decimal("2500")


class TestBudget:
    """Tests for the Budget record."""

    def test_camel_case_round_trip(self):
        """Budgets serialize with the stored camelCase names."""
        budget = Budget(
            id="b1",
            category="Food",
            amount=Decimal("150"),
            month=2,
            year=2024,
            is_recurring=True,
        )
        dumped = budget.model_dump(by_alias=True)
        assert dumped["isRecurring"] is True
        assert "is_recurring" not in dumped

        restored = TypeAdapter(list[Budget]).validate_json(
            TypeAdapter(list[Budget]).dump_json([budget], by_alias=True)
        )
        assert restored == [budget]

    def test_period_and_slot(self):
        budget = Budget(category="Food", amount=Decimal("150"), month=2, year=2024)
        assert budget.period == Period(month=2, year=2024)
        assert budget.occupies("Food", TransactionType.EXPENSE, Period(month=2, year=2024))
        assert not budget.occupies("Food", TransactionType.INCOME, Period(month=2, year=2024))
        assert not budget.occupies("Food", TransactionType.EXPENSE, Period(month=3, year=2024))

    def test_rejects_month_out_of_range(self):
        with pytest.raises(ValidationError):
            Budget(category="Food", amount=Decimal("150"), month=12, year=2024)

    def test_rejects_blank_category(self):
        """A budget with no category could never match spending."""
        with pytest.raises(ValidationError):
            Budget(category="  ", amount=Decimal("100"), month=2, year=2024)
        with pytest.raises(ValidationError):
            Budget.model_validate({"amount": "100", "month": 2, "year": 2024})


class TestGoal:
    """Tests for the Goal record."""

    def test_goal_defaults(self):
        goal = Goal(title="Car", target=Decimal("1000"), deadline=date(2024, 9, 1))
        assert goal.collected == Decimal("0")
        assert goal.monthly_contribution == Decimal("0")

    def test_goal_requires_title(self):
        with pytest.raises(ValidationError):
            Goal(title="", target=Decimal("1000"), deadline=date(2024, 9, 1))

    def test_goal_accepts_camel_case(self):
        goal = Goal.model_validate({
            "title": "Car",
            "target": "1000",
            "deadline": "2024-09-01",
            "monthlyContribution": "100",
        })
        assert goal.monthly_contribution == Decimal("100")


class TestUserProfile:
    """Tests for local profiles."""

    def test_email_is_lowercased(self):
        profile = UserProfile(name="Sam", email="Sam@Example.COM")
        assert profile.email == "sam@example.com"
        assert profile.currency == "USD"

    def test_rejects_email_without_at(self):
        with pytest.raises(ValueError, match="Not an email address"):
            UserProfile(name="Sam", email="sam.example.com")


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.TRANSACTION_ADDED,
            description="Transaction added",
        )
        assert event.event_type == AuditEventType.TRANSACTION_ADDED
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEvent(
            event_type=AuditEventType.BUDGET_UPDATED,
            description="Budget updated",
            details={"changes": {"amount": "200"}},
        )
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "budget_updated"
        assert log_dict["details"]["changes"]["amount"] == "200"

    def test_builder_budget_rolled_over(self):
        """Test AuditEventBuilder.budget_rolled_over."""
        correlation_id = uuid4()
        event = AuditEventBuilder.budget_rolled_over(
            budget_id="b2",
            source_id="b1",
            category="Food",
            period_label="March 2024",
            correlation_id=correlation_id,
        )
        assert event.event_type == AuditEventType.BUDGET_ROLLED_OVER
        assert event.entity_id == "b2"
        assert event.correlation_id == correlation_id
        assert event.details["source_budget_id"] == "b1"
        assert event.is_user_action is False

    def test_builder_record_deleted(self):
        event = AuditEventBuilder.record_deleted("goal", "g1")
        assert event.event_type == AuditEventType.GOAL_DELETED
        assert event.is_user_action is True

    def test_builder_save_failed_is_error(self):
        event = AuditEventBuilder.save_failed("budgets", "disk full")
        assert event.severity == AuditSeverity.ERROR
        assert event.error_message == "disk full"

    def test_builder_data_load_failed_names_backup(self):
        event = AuditEventBuilder.data_load_failed("budgets", "bad json", backup_key="budgets.bad")
        assert event.details["backup_key"] == "budgets.bad"
        assert "budgets.bad" in event.description


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
