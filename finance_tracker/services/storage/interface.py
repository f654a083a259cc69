"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Keep JSON files on disk for everyday use
2. Use in-memory storage for testing
3. Swap in another backend without touching the tracker

The interface is intentionally tiny - a scoped key-value store holding
one serialized collection per key. Everything richer (records, user
namespaces, fallback on bad data) is layered on top by the repository.
"""

from abc import ABC, abstractmethod
from typing import Optional

from finance_tracker.models.audit import AuditEvent


class KeyValueStore(ABC):
    """
    Abstract interface for a string key-value store.

    Any storage implementation must implement these methods.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Read the value stored under a key.

        Returns:
            The stored text, or None if the key is absent

        Raises:
            StorageError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """
        Store a value, replacing any previous one.

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """
        Remove a key.

        Returns:
            True if a value was removed
        """
        pass

    @abstractmethod
    def keys(self) -> list[str]:
        """List stored keys in sorted order."""
        pass

    @abstractmethod
    def move(self, key: str, new_key: str) -> bool:
        """
        Move a value to another key, replacing anything stored there.

        The value is moved as stored, even if it cannot be read back.

        Returns:
            True if a value was moved, False if the key was absent

        Raises:
            StorageError: If the backend rejects the move
        """
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never modify stored events.
    """

    @abstractmethod
    def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: str,
    ) -> list[AuditEvent]:
        """
        Get all events for a specific record, in chronological order.
        """
        pass

    @abstractmethod
    def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events (newest first).
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class DuplicateError(StorageError):
    """Attempted to insert a duplicate entity."""
    pass
