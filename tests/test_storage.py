"""Tests for the key-value stores and the collection repository."""

from datetime import date
from decimal import Decimal

import pytest

from finance_tracker.models import AuditEventType, Budget, Goal, Transaction
from finance_tracker.orchestrator import create_tracker
from finance_tracker.services.clock import FixedClock
from finance_tracker.services.storage import (
    BACKUP_SUFFIX,
    CollectionRepository,
    InMemoryStore,
    JsonFileStore,
    KeyValueAuditStorage,
    StorageError,
    collection_key,
)
from finance_tracker.models import AuditEventBuilder


class TestInMemoryStore:
    """Tests for the in-process store."""

    def test_set_get_delete(self):
        store = InMemoryStore()
        assert store.get("budgets") is None
        store.set("budgets", "[]")
        assert store.get("budgets") == "[]"
        assert store.keys() == ["budgets"]
        assert store.delete("budgets") is True
        assert store.delete("budgets") is False

    def test_move(self):
        store = InMemoryStore()
        store.set("budgets", "{oops")
        assert store.move("budgets", "budgets.bad") is True
        assert store.get("budgets") is None
        assert store.get("budgets.bad") == "{oops"
        assert store.move("budgets", "budgets.bad") is False


class TestJsonFileStore:
    """Tests for file-per-key storage."""

    def test_round_trip(self, tmp_path):
        store = JsonFileStore(tmp_path / "data")
        store.set("transactions", '[{"id": "t1"}]')

        assert (tmp_path / "data" / "transactions.json").exists()
        assert store.get("transactions") == '[{"id": "t1"}]'
        assert store.keys() == ["transactions"]

    def test_missing_key_is_none(self, tmp_path):
        assert JsonFileStore(tmp_path).get("goals") is None

    def test_unsafe_key_characters_are_replaced(self, tmp_path):
        store = JsonFileStore(tmp_path)
        store.set("../user 1/goals", "[]")
        assert (tmp_path / ".._user_1_goals.json").exists()
        assert store.get("../user 1/goals") == "[]"

    def test_overwrite_leaves_no_temp_file(self, tmp_path):
        store = JsonFileStore(tmp_path)
        store.set("goals", "[1]")
        store.set("goals", "[2]")
        assert store.get("goals") == "[2]"
        assert list(tmp_path.glob("*.tmp")) == []

    def test_delete(self, tmp_path):
        store = JsonFileStore(tmp_path)
        store.set("goals", "[]")
        assert store.delete("goals") is True
        assert store.delete("goals") is False

    def test_empty_key_rejected(self, tmp_path):
        with pytest.raises(StorageError):
            JsonFileStore(tmp_path).get("")

    def test_unwritable_location_raises_storage_error(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("not a directory")
        store = JsonFileStore(blocker / "data")
        with pytest.raises(StorageError):
            store.set("goals", "[]")

    def test_undecodable_file_raises_storage_error(self, tmp_path):
        (tmp_path / "transactions.json").write_bytes(b'[{"description": "\xff\xfe"}]')
        with pytest.raises(StorageError):
            JsonFileStore(tmp_path).get("transactions")

    def test_move_keeps_raw_file(self, tmp_path):
        raw = b'[{"description": "\xff\xfe"}]'
        (tmp_path / "transactions.json").write_bytes(raw)
        store = JsonFileStore(tmp_path)

        assert store.move("transactions", "transactions.bad") is True
        assert not (tmp_path / "transactions.json").exists()
        assert (tmp_path / "transactions.bad.json").read_bytes() == raw

    def test_move_missing_key(self, tmp_path):
        assert JsonFileStore(tmp_path).move("goals", "goals.bad") is False


class TestCollectionRepository:
    """Tests for loading and saving record collections."""

    def test_round_trip_all_collections(self, store):
        repository = CollectionRepository(store)
        transactions = [Transaction(id="t1", amount=Decimal("12.50"), date=date(2024, 3, 2), category="Food")]
        budgets = [Budget(id="b1", category="Food", amount=Decimal("150"), month=2, year=2024, is_recurring=True)]
        goals = [Goal(id="g1", title="Car", target=Decimal("1000"), deadline=date(2024, 9, 1))]

        repository.save_transactions(transactions)
        repository.save_budgets(budgets)
        repository.save_goals(goals)

        assert repository.load_transactions() == transactions
        assert repository.load_budgets() == budgets
        assert repository.load_goals() == goals

    def test_stored_json_uses_camel_case(self, store):
        repository = CollectionRepository(store)
        repository.save_budgets([
            Budget(id="b1", category="Food", amount=Decimal("150"), month=2, year=2024, is_recurring=True)
        ])
        assert '"isRecurring": true' in store.get("budgets")

    def test_user_namespace(self, store):
        assert collection_key("goals") == "goals"
        assert collection_key("goals", "u1") == "u1_goals"

        CollectionRepository(store, user_id="u1").save_goals([
            Goal(id="g1", title="Car", target=Decimal("1000"), deadline=date(2024, 9, 1))
        ])
        assert store.keys() == ["u1_goals"]
        assert CollectionRepository(store).load_goals() == []
        assert len(CollectionRepository(store, user_id="u1").load_goals()) == 1

    def test_missing_collection_is_empty(self, store):
        assert CollectionRepository(store).load_transactions() == []

    def test_malformed_collection_is_empty_and_audited(self, store, audit_logger, audit_storage):
        store.set("budgets", "{not json")
        store.set("goals", '[{"id": "g1"}]')
        repository = CollectionRepository(store, audit_logger=audit_logger)

        assert repository.load_budgets() == []
        assert repository.load_goals() == []

        failures = [
            event for event in audit_storage.get_recent_events()
            if event.event_type == AuditEventType.DATA_LOAD_FAILED
        ]
        assert {event.details["collection"] for event in failures} == {"budgets", "goals"}

    def test_malformed_collection_is_kept_aside(self, store, audit_logger, audit_storage):
        """Unreadable data moves to <key>.bad so a later save cannot overwrite it."""
        store.set("u1_budgets", "{not json")
        repository = CollectionRepository(store, user_id="u1", audit_logger=audit_logger)

        assert repository.load_budgets() == []
        assert store.get("u1_budgets") is None
        assert store.get(f"u1_budgets{BACKUP_SUFFIX}") == "{not json"

        repository.save_budgets([
            Budget(id="b1", category="Food", amount=Decimal("150"), month=2, year=2024)
        ])
        assert store.get("u1_budgets.bad") == "{not json"

        failure = next(
            event for event in audit_storage.get_recent_events()
            if event.event_type == AuditEventType.DATA_LOAD_FAILED
        )
        assert failure.details["backup_key"] == "u1_budgets.bad"

    def test_undecodable_file_loads_empty_and_survives_next_save(self, tmp_path):
        """A collection file that is not UTF-8 neither crashes startup nor gets overwritten."""
        raw = b'[{"description": "\xff\xfe"}]'
        (tmp_path / "transactions.json").write_bytes(raw)

        tracker = create_tracker(JsonFileStore(tmp_path), clock=FixedClock(date(2024, 3, 15)))
        assert tracker.transactions == ()

        tracker.add_transaction(Transaction(amount=Decimal("5"), date=date(2024, 3, 2), category="Food"))
        assert (tmp_path / "transactions.bad.json").read_bytes() == raw
        assert len(CollectionRepository(JsonFileStore(tmp_path)).load_transactions()) == 1


class TestKeyValueAuditStorage:
    """Tests for the audit trail store."""

    def test_recent_events_newest_first(self, store):
        storage = KeyValueAuditStorage(store)
        storage.append_event(AuditEventBuilder.record_deleted("goal", "g1"))
        storage.append_event(AuditEventBuilder.record_deleted("goal", "g2"))

        assert [e.entity_id for e in storage.get_recent_events()] == ["g2", "g1"]
        assert [e.entity_id for e in storage.get_events_by_entity("goal", "g1")] == ["g1"]

    def test_trims_to_limit(self, store):
        storage = KeyValueAuditStorage(store, limit=2)
        for goal_id in ("g1", "g2", "g3"):
            storage.append_event(AuditEventBuilder.record_deleted("goal", goal_id))
        assert [e.entity_id for e in storage.get_recent_events()] == ["g3", "g2"]

    def test_unreadable_log_raises(self, store):
        store.set("audit_log", "oops")
        with pytest.raises(StorageError):
            KeyValueAuditStorage(store).get_recent_events()
