"""Identifier generation for new records."""

from typing import Callable
from uuid import uuid4


# Any zero-argument callable returning a unique string will do.
# Nothing in the package parses ids or assumes their structure.
IdGenerator = Callable[[], str]


def generate_id() -> str:
    """Default generator: a random UUID as text."""
    return str(uuid4())
