"""
Goal Projection Engine

Answers, for each savings goal: how many months are left, how much has
to go in each month to make the deadline, and when the goal will be
reached at the current contribution rate.

Degenerate inputs have defined answers instead of division errors:
- Nothing left to save (including a zero target): complete, on track,
  projected for today
- No monthly contribution while money is missing: unreachable, no date
- Deadline this month or already passed: the whole remainder is due now
"""

import math
from datetime import date
from decimal import Decimal
from typing import Iterable

from dateutil.relativedelta import relativedelta

from finance_tracker.models.derived import GoalChartPoint, GoalProgress, GoalProjection
from finance_tracker.models.records import Goal


ZERO = Decimal("0")
HUNDRED = Decimal("100")


def months_between(start: date, end: date) -> int:
    """Signed count of calendar-month boundaries from start to end."""
    return (end.year - start.year) * 12 + (end.month - start.month)


def add_months(start: date, months: int) -> date:
    """Shift by whole calendar months, clamping the day to the month's end."""
    return start + relativedelta(months=months)


def progress_percent(goal: Goal) -> Decimal:
    """Collected as a percentage of target; not capped."""
    if goal.target == 0:
        return HUNDRED
    return goal.collected / goal.target * HUNDRED


def project_goal(goal: Goal, today: date) -> GoalProjection:
    """
    Project a goal forward from ``today``.

    Pure function of (goal, today); the goal is not modified.
    """
    months_remaining = months_between(today, goal.deadline)
    remaining_amount = goal.target - goal.collected
    contribution = goal.monthly_contribution

    if remaining_amount <= 0:
        return GoalProjection(
            goal_id=goal.id,
            title=goal.title,
            months_remaining=months_remaining,
            remaining_amount=remaining_amount,
            monthly_needed=ZERO,
            months_to_complete=0,
            projected_date=today,
            is_reachable=True,
            is_complete=True,
            on_track=True,
            progress_percent=progress_percent(goal),
        )

    if months_remaining > 0:
        monthly_needed = remaining_amount / months_remaining
    else:
        monthly_needed = remaining_amount

    if contribution > 0:
        months_to_complete = math.ceil(remaining_amount / contribution)
        projected_date = add_months(today, months_to_complete)
    else:
        months_to_complete = None
        projected_date = None

    return GoalProjection(
        goal_id=goal.id,
        title=goal.title,
        months_remaining=months_remaining,
        remaining_amount=remaining_amount,
        monthly_needed=monthly_needed,
        months_to_complete=months_to_complete,
        projected_date=projected_date,
        is_reachable=months_to_complete is not None,
        is_complete=False,
        on_track=contribution >= monthly_needed,
        progress_percent=progress_percent(goal),
    )


def goal_chart_series(goals: Iterable[Goal], today: date) -> list[GoalChartPoint]:
    """
    Current vs target vs amount expected by the deadline.

    The projected figure extends the current contribution rate over the
    months left; a passed deadline projects below the current amount,
    as the stored contribution is simply multiplied out.
    """
    return [
        GoalChartPoint(
            name=goal.title,
            current=goal.collected,
            target=goal.target,
            projected=goal.collected
            + months_between(today, goal.deadline) * goal.monthly_contribution,
        )
        for goal in goals
    ]


def top_goals(goals: Iterable[Goal], limit: int = 3) -> list[GoalProgress]:
    """The first ``limit`` goals, in stored order, with their progress."""
    rows = []
    for goal in goals:
        if len(rows) >= limit:
            break
        rows.append(GoalProgress(
            goal_id=goal.id,
            title=goal.title,
            collected=goal.collected,
            target=goal.target,
            progress_percent=progress_percent(goal),
        ))
    return rows
