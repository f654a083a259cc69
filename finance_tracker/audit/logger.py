"""
Audit Logger

DESIGN DECISION: Every change to the user's records is logged.
This provides:
1. Traceability of edits and deletions
2. A visible record of budgets created by the rollover
3. Debugging capability when data fails to load or save

The audit logger:
- Gracefully handles failures (a failed audit write never breaks a mutation)
- Binds the signed-in user to every event it writes
- Supports correlation IDs to group related events
"""

import logging
import sys
from typing import Any, Optional
from uuid import UUID, uuid4

import structlog

from finance_tracker.models.audit import AuditEvent, AuditEventBuilder
from finance_tracker.services.storage.interface import AuditStorageInterface


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """Route structlog output to stderr at the given level."""
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper(), logging.INFO),
    )


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. The audit store (for persistence and user visibility)
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
        user_id: Optional[str] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
            user_id: Profile stamped on events that don't name one.
        """
        self._storage = storage
        self._user_id = user_id
        self._logger = structlog.get_logger(__name__)

    @property
    def storage(self) -> Optional[AuditStorageInterface]:
        return self._storage

    def for_user(self, user_id: Optional[str]) -> "AuditLogger":
        """Same storage, different user stamp."""
        return AuditLogger(storage=self._storage, user_id=user_id)

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        if event.user_id is None and self._user_id is not None:
            event = event.model_copy(update={"user_id": self._user_id})

        log_dict = event.to_log_dict()

        if event.severity.value in ("error", "critical"):
            self._logger.error("audit_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("audit_event", **log_dict)
        elif event.severity.value == "debug":
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return self._storage.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    def log_record_added(self, entity_type: str, entity_id: str, summary: str) -> None:
        self.log(AuditEventBuilder.record_added(entity_type, entity_id, summary))

    def log_record_updated(
        self,
        entity_type: str,
        entity_id: str,
        changes: dict[str, Any],
    ) -> None:
        self.log(AuditEventBuilder.record_updated(entity_type, entity_id, changes))

    def log_record_deleted(self, entity_type: str, entity_id: str) -> None:
        self.log(AuditEventBuilder.record_deleted(entity_type, entity_id))

    def log_budget_rolled_over(
        self,
        budget_id: str,
        source_id: str,
        category: str,
        period_label: str,
        correlation_id: UUID,
    ) -> None:
        """Log a budget created by the recurring rollover."""
        self.log(AuditEventBuilder.budget_rolled_over(
            budget_id=budget_id,
            source_id=source_id,
            category=category,
            period_label=period_label,
            correlation_id=correlation_id,
        ))

    def log_data_loaded(self, counts: dict[str, int]) -> None:
        self.log(AuditEventBuilder.data_loaded(counts))

    def log_data_load_failed(
        self,
        collection: str,
        error_message: str,
        backup_key: Optional[str] = None,
    ) -> None:
        self.log(AuditEventBuilder.data_load_failed(collection, error_message, backup_key))

    def log_save_failed(self, collection: str, error_message: str) -> None:
        self.log(AuditEventBuilder.save_failed(collection, error_message))

    def log_user_registered(self, user_id: str, email: str) -> None:
        self.log(AuditEventBuilder.user_registered(user_id, email))

    def log_user_signed_in(self, user_id: str) -> None:
        self.log(AuditEventBuilder.user_signed_in(user_id))

    def log_user_signed_out(self, user_id: str) -> None:
        self.log(AuditEventBuilder.user_signed_out(user_id))

    def log_profile_updated(self, user_id: str, changes: dict[str, Any]) -> None:
        self.log(AuditEventBuilder.profile_updated(user_id, changes))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a multi-record operation (e.g. one rollover
    run) and pass it to every event the operation logs.
    """
    return uuid4()
