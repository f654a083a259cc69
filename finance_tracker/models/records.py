"""
Core Data Models for Finance Tracker

These models define the source records the whole application derives
its figures from. They are designed to:
1. Enforce type safety at runtime
2. Serialize with the exact field names the store has always used
3. Never carry derived values (spent, remaining, projections)

DESIGN DECISION: Records are frozen. An edit replaces the whole record,
so engines can never observe a half-updated budget or goal.
Attributes are snake_case in Python and camelCase on disk
(isRecurring, monthlyContribution); both spellings are accepted.
"""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from finance_tracker.services.ids import generate_id


RECORD_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    str_strip_whitespace=True,
    frozen=True,
)


# =============================================================================
# ENUMS
# =============================================================================

class TransactionType(str, Enum):
    """
    Direction of money movement.

    Amounts are always stored non-negative; the sign lives here.
    """
    INCOME = "income"
    EXPENSE = "expense"


# =============================================================================
# PERIOD
# =============================================================================

class Period(BaseModel):
    """
    A calendar month used to scope aggregation.

    Months are zero-based (0 = January) to match the stored budget
    records.
    """
    model_config = ConfigDict(frozen=True)

    month: int = Field(..., ge=0, le=11)
    year: int = Field(..., ge=1, le=9999)

    @classmethod
    def from_date(cls, value: Union[dt.date, dt.datetime]) -> "Period":
        return cls(month=value.month - 1, year=value.year)

    def contains(self, value: dt.date) -> bool:
        """True when the date falls inside this calendar month."""
        return value.year == self.year and value.month - 1 == self.month

    @property
    def first_day(self) -> dt.date:
        return dt.date(self.year, self.month + 1, 1)

    def label(self) -> str:
        """Human label such as 'March 2024'."""
        return self.first_day.strftime("%B %Y")


# =============================================================================
# SOURCE RECORDS
# =============================================================================

class Transaction(BaseModel):
    """
    A single income or expense entry.

    Created by the Add-Transaction flow and never edited afterwards;
    the only other lifecycle event is deletion by id.
    """
    model_config = RECORD_CONFIG

    id: str = Field(
        default_factory=generate_id,
        min_length=1,
        description="Opaque unique identifier"
    )
    description: str = Field(
        default="",
        max_length=500,
        description="Free text"
    )
    amount: Decimal = Field(
        ...,
        ge=0,
        description="Non-negative amount; direction comes from type"
    )
    date: dt.date = Field(
        ...,
        description="Calendar date of the transaction"
    )
    category: str = Field(
        default="",
        max_length=100,
        description="Free text; empty means uncategorized"
    )
    type: TransactionType = Field(
        default=TransactionType.EXPENSE,
        description="income or expense"
    )


class Budget(BaseModel):
    """
    A monthly target for one category and direction.

    The "slot" of a budget is (category, type, month, year). Slots are
    not unique: duplicates are allowed and tracked by id.
    """
    model_config = RECORD_CONFIG

    id: str = Field(
        default_factory=generate_id,
        min_length=1
    )
    category: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Required; spending is matched to budgets by category"
    )
    amount: Decimal = Field(
        ...,
        ge=0,
        description="Target amount for the month"
    )
    type: TransactionType = Field(
        default=TransactionType.EXPENSE
    )
    month: int = Field(
        ...,
        ge=0,
        le=11,
        description="Zero-based month (0 = January)"
    )
    year: int = Field(
        ...,
        ge=1,
        le=9999
    )
    notes: Optional[str] = Field(
        default=None,
        max_length=1000
    )
    is_recurring: bool = Field(
        default=False,
        description="Copy this budget into every new month until removed"
    )

    @property
    def period(self) -> Period:
        return Period(month=self.month, year=self.year)

    def occupies(
        self,
        category: str,
        type: TransactionType,
        period: Period,
    ) -> bool:
        """Check whether this budget sits in the given slot."""
        return (
            self.category == category
            and self.type == type
            and self.month == period.month
            and self.year == period.year
        )


class Goal(BaseModel):
    """
    A savings goal.

    collected and monthly_contribution are only changed by replacing
    the whole record; the engines never add contributions themselves.
    """
    model_config = RECORD_CONFIG

    id: str = Field(
        default_factory=generate_id,
        min_length=1
    )
    title: str = Field(
        ...,
        min_length=1,
        max_length=200
    )
    target: Decimal = Field(
        ...,
        ge=0,
        description="Amount to save"
    )
    collected: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        description="Amount saved so far"
    )
    deadline: dt.date = Field(
        ...,
        description="Date the target should be reached by"
    )
    description: Optional[str] = Field(
        default=None,
        max_length=1000
    )
    monthly_contribution: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        description="Expected recurring contribution per month"
    )


class UserProfile(BaseModel):
    """
    Local user profile.

    There is no password: sign-in is a stand-in that only selects
    whose data namespace is loaded.
    """
    model_config = RECORD_CONFIG

    id: str = Field(
        default_factory=generate_id,
        min_length=1
    )
    name: str = Field(
        ...,
        min_length=1,
        max_length=200
    )
    email: str = Field(
        ...,
        min_length=3,
        max_length=320
    )
    currency: str = Field(
        default="USD",
        min_length=1,
        max_length=8,
        description="Display label only; amounts are never converted"
    )
    created_at: dt.datetime = Field(
        default_factory=dt.datetime.utcnow
    )

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v: str) -> str:
        """Emails identify profiles, so compare them case-insensitively."""
        if "@" not in v:
            raise ValueError(f"Not an email address: {v}")
        return v.lower()
