"""
Key-Value Audit Storage

Keeps the audit trail as a single JSON list in the key-value store,
oldest first, trimmed to a fixed number of events.
"""

from pydantic import TypeAdapter, ValidationError

from finance_tracker.models.audit import AuditEvent
from finance_tracker.services.storage.interface import (
    AuditStorageInterface,
    KeyValueStore,
    StorageError,
)


AUDIT_KEY = "audit_log"

_EVENTS = TypeAdapter(list[AuditEvent])


class KeyValueAuditStorage(AuditStorageInterface):
    """
    Audit storage on top of any KeyValueStore.

    When more than ``limit`` events are stored, the oldest are dropped.
    """

    def __init__(self, store: KeyValueStore, limit: int = 500, key: str = AUDIT_KEY):
        self._store = store
        self._limit = limit
        self._key = key

    def _read(self) -> list[AuditEvent]:
        raw = self._store.get(self._key)
        if raw is None:
            return []
        try:
            return _EVENTS.validate_json(raw)
        except ValidationError as e:
            raise StorageError(f"Audit log is unreadable: {e}")

    def append_event(self, event: AuditEvent) -> bool:
        events = self._read()
        events.append(event)
        events = events[-self._limit:]
        self._store.set(self._key, _EVENTS.dump_json(events).decode("utf-8"))
        return True

    def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: str,
    ) -> list[AuditEvent]:
        return [
            event for event in self._read()
            if event.entity_type == entity_type and event.entity_id == entity_id
        ]

    def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        return list(reversed(self._read()))[:limit]
