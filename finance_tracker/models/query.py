"""
Query Models

A TransactionQuery describes what the transaction list should show;
a TransactionListResult is what the executor found.
"""

from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from finance_tracker.models.derived import BudgetProgress
from finance_tracker.models.records import Period, Transaction, TransactionType


class TransactionQuery(BaseModel):
    """
    Filters for the transaction list.

    Every filter is optional; an empty query lists everything in
    stored order.
    """

    query_id: UUID = Field(
        default_factory=uuid4
    )
    search_term: str = Field(
        default="",
        max_length=200,
        description="Case-insensitive substring of the description"
    )
    type_filter: Optional[TransactionType] = Field(
        default=None,
        description="Only income or only expense; None means both"
    )
    category_filter: Optional[str] = None
    period: Optional[Period] = None
    include_budget_status: bool = Field(
        default=True,
        description="Attach the matching budget's progress to each row"
    )
    limit: Optional[int] = Field(
        default=None,
        ge=1
    )


class TransactionRow(BaseModel):
    """A transaction plus the budget it counts against, if any."""

    transaction: Transaction
    budget_status: Optional[BudgetProgress] = None


class TransactionListResult(BaseModel):
    """Result of executing a TransactionQuery."""

    query_id: UUID
    data_found: bool = Field(
        ...,
        description="Was any transaction found?"
    )
    result_count: int = Field(
        ge=0
    )
    rows: list[TransactionRow] = Field(default_factory=list)
    query_description: str = Field(
        ...,
        description="Human-readable description of what was queried"
    )
