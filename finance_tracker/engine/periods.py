"""Period selection for transactions and budgets.

Both filters are stable: matching records come back in input order.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Iterable, Optional, TypeVar

from finance_tracker.models.records import Budget, Period, Transaction

T = TypeVar("T")


def parse_record_date(value: Any) -> Optional[date]:
    """Best-effort conversion of a stored date to a ``date``.

    Accepts ``date``, ``datetime`` and ISO-8601 strings (date or
    timestamp). Anything else returns ``None``.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text[:10])
        except ValueError:
            return None
    return None


def _date_of(record: Any) -> Optional[date]:
    if isinstance(record, dict):
        return parse_record_date(record.get("date"))
    return parse_record_date(getattr(record, "date", None))


def transactions_in_period(records: Iterable[T], period: Period) -> list[T]:
    """Return the records dated inside ``period``.

    Records may be ``Transaction`` models or raw mappings with a
    ``date`` key. A date that cannot be parsed never matches.
    """
    selected = []
    for record in records:
        record_date = _date_of(record)
        if record_date is not None and period.contains(record_date):
            selected.append(record)
    return selected


def budgets_in_period(budgets: Iterable[Budget], period: Period) -> list[Budget]:
    """Return the budgets whose (month, year) equals ``period``."""
    return [
        budget for budget in budgets
        if budget.month == period.month and budget.year == period.year
    ]


def period_of(transaction: Transaction) -> Period:
    return Period.from_date(transaction.date)
