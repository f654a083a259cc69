"""
Clock Capability

DESIGN DECISION: Nothing in the engines calls date.today() directly.
The recurring-budget roller and goal projections take "today" from
a Clock so tests and replays can pin the date.
"""

from abc import ABC, abstractmethod
from datetime import date


class Clock(ABC):
    """Source of the current date."""

    @abstractmethod
    def today(self) -> date:
        pass


class SystemClock(Clock):
    """Wall-clock time of the local machine."""

    def today(self) -> date:
        return date.today()


class FixedClock(Clock):
    """
    A clock pinned to one date.

    Call advance_to() to move it, e.g. to cross a month boundary
    inside a test.
    """

    def __init__(self, today: date):
        self._today = today

    def today(self) -> date:
        return self._today

    def advance_to(self, today: date) -> None:
        self._today = today
