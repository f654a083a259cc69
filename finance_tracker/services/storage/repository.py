"""
Collection Repository

Maps the three record collections onto a key-value store.

Layout: one key per collection ("transactions", "budgets", "goals"),
prefixed with "<user id>_" when a profile is signed in. Each value is a
JSON list of records using the camelCase field names. There is no
schema version field.

DESIGN DECISION: Unreadable data is not fatal. If a collection fails to
parse or validate, the repository moves it aside to "<key>.bad", logs
it and hands back an empty list. The user loses the broken collection's
view rather than the whole app, and the data stays on disk for repair.
"""

from typing import TYPE_CHECKING, Optional, TypeVar

import structlog
from pydantic import BaseModel, TypeAdapter, ValidationError

from finance_tracker.models.records import Budget, Goal, Transaction
from finance_tracker.services.storage.interface import KeyValueStore, StorageError

if TYPE_CHECKING:
    from finance_tracker.audit.logger import AuditLogger


TRANSACTIONS = "transactions"
BUDGETS = "budgets"
GOALS = "goals"

COLLECTIONS = (TRANSACTIONS, BUDGETS, GOALS)

BACKUP_SUFFIX = ".bad"

_ADAPTERS: dict[str, TypeAdapter] = {
    TRANSACTIONS: TypeAdapter(list[Transaction]),
    BUDGETS: TypeAdapter(list[Budget]),
    GOALS: TypeAdapter(list[Goal]),
}

R = TypeVar("R", bound=BaseModel)


def collection_key(name: str, user_id: Optional[str] = None) -> str:
    """Store key of a collection, namespaced per user when given."""
    return f"{user_id}_{name}" if user_id else name


class CollectionRepository:
    """Loads and saves the record collections of one (optional) user."""

    def __init__(
        self,
        store: KeyValueStore,
        user_id: Optional[str] = None,
        audit_logger: Optional["AuditLogger"] = None,
    ):
        self._store = store
        self._user_id = user_id
        self._audit_logger = audit_logger
        self._logger = structlog.get_logger(__name__)

    @property
    def user_id(self) -> Optional[str]:
        return self._user_id

    def key(self, name: str) -> str:
        return collection_key(name, self._user_id)

    def _load(self, name: str) -> list:
        key = self.key(name)
        try:
            raw = self._store.get(key)
            if raw is None:
                return []
            return _ADAPTERS[name].validate_json(raw)
        except (ValidationError, StorageError) as e:
            backup_key = self._set_aside(key)
            self._logger.warning(
                "collection_load_failed",
                key=key,
                backup_key=backup_key,
                error=str(e),
            )
            if self._audit_logger:
                self._audit_logger.log_data_load_failed(
                    collection=name,
                    error_message=str(e),
                    backup_key=backup_key,
                )
            return []

    def _set_aside(self, key: str) -> Optional[str]:
        """
        Move unreadable data to "<key>.bad" so the next save can't overwrite it.

        Returns the backup key, or None if nothing could be moved.
        """
        backup_key = f"{key}{BACKUP_SUFFIX}"
        try:
            if self._store.move(key, backup_key):
                return backup_key
        except StorageError as e:
            self._logger.error("collection_backup_failed", key=key, error=str(e))
        return None

    def _save(self, name: str, records: list[R]) -> None:
        """
        Serialize and store a collection.

        Raises:
            StorageError: If the store rejects the write
        """
        payload = _ADAPTERS[name].dump_json(records, by_alias=True, indent=2)
        self._store.set(self.key(name), payload.decode("utf-8"))

    def load_transactions(self) -> list[Transaction]:
        return self._load(TRANSACTIONS)

    def load_budgets(self) -> list[Budget]:
        return self._load(BUDGETS)

    def load_goals(self) -> list[Goal]:
        return self._load(GOALS)

    def save_transactions(self, transactions: list[Transaction]) -> None:
        self._save(TRANSACTIONS, transactions)

    def save_budgets(self, budgets: list[Budget]) -> None:
        self._save(BUDGETS, budgets)

    def save_goals(self, goals: list[Goal]) -> None:
        self._save(GOALS, goals)
