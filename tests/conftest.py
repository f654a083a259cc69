"""Shared fixtures: a pinned clock, an in-memory store and predictable ids."""

from datetime import date
from itertools import count

import pytest

from finance_tracker.audit import AuditLogger
from finance_tracker.orchestrator import FinanceTracker
from finance_tracker.services.clock import FixedClock
from finance_tracker.services.storage import (
    CollectionRepository,
    InMemoryStore,
    KeyValueAuditStorage,
)


@pytest.fixture
def clock():
    """15 March 2024 (period month 2)."""
    return FixedClock(date(2024, 3, 15))


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def id_generator():
    counter = count(1)
    return lambda: f"id-{next(counter)}"


@pytest.fixture
def audit_storage(store):
    return KeyValueAuditStorage(store)


@pytest.fixture
def audit_logger(audit_storage):
    return AuditLogger(audit_storage)


@pytest.fixture
def repository(store, audit_logger):
    return CollectionRepository(store, audit_logger=audit_logger)


@pytest.fixture
def tracker(repository, clock, id_generator, audit_logger):
    """An opened tracker over an empty store."""
    tracker = FinanceTracker(
        repository,
        clock=clock,
        id_generator=id_generator,
        audit_logger=audit_logger,
    )
    tracker.open()
    return tracker
