"""
Recurring Budget Roller

A budget flagged recurring is a template: it should exist in every
month until the user removes it. The roller makes sure the current
calendar month (from the clock, not the month on screen) has a copy.

GUARANTEES:
- Never mutates the budgets it is given; returns the new ones
- At most one budget per (category, type) slot is created per run
- A slot that already holds any budget is left alone
- Running again against the same month creates nothing
"""

from datetime import date
from typing import Iterable

from finance_tracker.models.records import Budget, Period
from finance_tracker.services.ids import IdGenerator, generate_id


def roll_recurring_budgets(
    budgets: Iterable[Budget],
    today: date,
    id_generator: IdGenerator = generate_id,
) -> list[Budget]:
    """
    Materialize recurring budgets into the current month.

    Args:
        budgets: Every budget the user has, in any period
        today: Evaluation date; its month is the target period
        id_generator: Source of ids for the created budgets

    Returns:
        The budgets to add, in the order their sources appear.
    """
    current = Period.from_date(today)
    existing = list(budgets)
    created: list[Budget] = []

    for source in existing:
        if not source.is_recurring or source.period == current:
            continue

        # Copies made earlier in this run count as occupying their slot
        if any(
            budget.occupies(source.category, source.type, current)
            for budget in existing + created
        ):
            continue

        created.append(source.model_copy(update={
            "id": id_generator(),
            "month": current.month,
            "year": current.year,
        }))

    return created
