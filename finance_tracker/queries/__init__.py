"""Query execution package."""

from finance_tracker.queries.executor import TransactionQueryExecutor

__all__ = ["TransactionQueryExecutor"]
