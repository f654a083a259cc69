"""
Transaction Query Execution

DESIGN DECISION: Query execution is DETERMINISTIC and read-only.
The executor is handed snapshots of the collections and returns a
result built only from them; it never edits or caches anything.

Budget status per row comes from the aggregation engine, so the
transaction list and the budget tab always agree on the figures.
"""

from typing import Iterable, Optional

from finance_tracker.engine.aggregation import (
    UNCATEGORIZED,
    category_label,
    transaction_budget_status,
)
from finance_tracker.engine.periods import transactions_in_period
from finance_tracker.models.query import (
    TransactionListResult,
    TransactionQuery,
    TransactionRow,
)
from finance_tracker.models.records import Budget, Transaction


class TransactionQueryExecutor:
    """
    Executes transaction list queries.

    GUARANTEES:
    - Only returns transactions that exist in the given snapshot
    - Keeps stored order
    - Clear "no data found" if nothing matches
    """

    def __init__(self, uncategorized: str = UNCATEGORIZED):
        self._uncategorized = uncategorized

    def execute(
        self,
        query: TransactionQuery,
        transactions: Iterable[Transaction],
        budgets: Iterable[Budget] = (),
    ) -> TransactionListResult:
        """Run ``query`` against the given transactions and budgets."""
        all_transactions = list(transactions)
        all_budgets = list(budgets)

        matches = self._filter(query, all_transactions)
        if query.limit is not None:
            matches = matches[:query.limit]

        rows = []
        for transaction in matches:
            status = None
            if query.include_budget_status:
                status = transaction_budget_status(
                    transaction,
                    all_transactions,
                    all_budgets,
                    self._uncategorized,
                )
            rows.append(TransactionRow(transaction=transaction, budget_status=status))

        return TransactionListResult(
            query_id=query.query_id,
            data_found=len(rows) > 0,
            result_count=len(rows),
            rows=rows,
            query_description=self._describe(query),
        )

    def _filter(
        self,
        query: TransactionQuery,
        transactions: list[Transaction],
    ) -> list[Transaction]:
        selected = transactions
        if query.period is not None:
            selected = transactions_in_period(selected, query.period)

        needle = query.search_term.strip().lower()
        wanted_category: Optional[str] = None
        if query.category_filter is not None:
            wanted_category = category_label(query.category_filter, self._uncategorized)

        return [
            transaction for transaction in selected
            if needle in transaction.description.lower()
            and (query.type_filter is None or transaction.type == query.type_filter)
            and (
                wanted_category is None
                or category_label(transaction.category, self._uncategorized) == wanted_category
            )
        ]

    def _describe(self, query: TransactionQuery) -> str:
        """Format the query for display."""
        desc_parts = ["Listing transactions"]
        if query.type_filter:
            desc_parts.append(f"type: {query.type_filter.value}")
        if query.category_filter is not None:
            desc_parts.append(
                f"category: {category_label(query.category_filter, self._uncategorized)}"
            )
        if query.search_term.strip():
            desc_parts.append(f"matching '{query.search_term.strip()}'")
        if query.period is not None:
            desc_parts.append(f"in {query.period.label()}")
        return " | ".join(desc_parts)
