"""
Storage Services Package

Provides abstract interfaces and concrete implementations for data storage.
Currently implements JSON files and process memory as backends.
"""

from finance_tracker.services.storage.interface import (
    AuditStorageInterface,
    DuplicateError,
    KeyValueStore,
    NotFoundError,
    StorageError,
)
from finance_tracker.services.storage.audit_store import KeyValueAuditStorage
from finance_tracker.services.storage.json_file import JsonFileStore
from finance_tracker.services.storage.memory import InMemoryStore
from finance_tracker.services.storage.repository import (
    BACKUP_SUFFIX,
    BUDGETS,
    COLLECTIONS,
    GOALS,
    TRANSACTIONS,
    CollectionRepository,
    collection_key,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "KeyValueStore",
    # Exceptions
    "DuplicateError",
    "NotFoundError",
    "StorageError",
    # Implementations
    "InMemoryStore",
    "JsonFileStore",
    "KeyValueAuditStorage",
    # Collections
    "BACKUP_SUFFIX",
    "BUDGETS",
    "COLLECTIONS",
    "GOALS",
    "TRANSACTIONS",
    "CollectionRepository",
    "collection_key",
]
