"""
Audit Models for Finance Tracker

Every mutation of the user's records is logged for audit purposes.
This provides:
1. Traceability of who changed what and when
2. Debugging information when a save or load goes wrong
3. A record of budgets the system created on the user's behalf

DESIGN DECISION: Audit logs are append-only. We never modify them;
the store only trims the oldest entries past the configured limit.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Transactions
    TRANSACTION_ADDED = "transaction_added"
    TRANSACTION_DELETED = "transaction_deleted"

    # Budgets
    BUDGET_ADDED = "budget_added"
    BUDGET_UPDATED = "budget_updated"
    BUDGET_DELETED = "budget_deleted"
    BUDGET_ROLLED_OVER = "budget_rolled_over"

    # Goals
    GOAL_ADDED = "goal_added"
    GOAL_UPDATED = "goal_updated"
    GOAL_DELETED = "goal_deleted"

    # Profiles
    USER_REGISTERED = "user_registered"
    USER_SIGNED_IN = "user_signed_in"
    USER_SIGNED_OUT = "user_signed_out"
    PROFILE_UPDATED = "profile_updated"

    # Persistence
    DATA_LOADED = "data_loaded"
    DATA_LOAD_FAILED = "data_load_failed"
    SAVE_FAILED = "save_failed"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


_ADDED = {
    "transaction": AuditEventType.TRANSACTION_ADDED,
    "budget": AuditEventType.BUDGET_ADDED,
    "goal": AuditEventType.GOAL_ADDED,
}
_UPDATED = {
    "budget": AuditEventType.BUDGET_UPDATED,
    "goal": AuditEventType.GOAL_UPDATED,
}
_DELETED = {
    "transaction": AuditEventType.TRANSACTION_DELETED,
    "budget": AuditEventType.BUDGET_DELETED,
    "goal": AuditEventType.GOAL_DELETED,
}


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    Every mutation creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what record is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of record (e.g., 'transaction', 'budget', 'goal')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the record this event relates to"
    )
    user_id: Optional[str] = Field(
        default=None,
        description="Profile whose data was touched, if signed in"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., one rollover run)"
    )

    # Event details
    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Error information (if applicable)
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "user_id": self.user_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.record_added("budget", budget.id, "Food")
        event = AuditEventBuilder.save_failed("goals", str(exc))
    """

    @staticmethod
    def record_added(
        entity_type: str,
        entity_id: str,
        summary: str,
        user_id: Optional[str] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=_ADDED[entity_type],
            entity_type=entity_type,
            entity_id=entity_id,
            user_id=user_id,
            description=f"{entity_type.capitalize()} added: {summary}",
            is_user_action=True,
        )

    @staticmethod
    def record_updated(
        entity_type: str,
        entity_id: str,
        changes: dict[str, Any],
        user_id: Optional[str] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=_UPDATED[entity_type],
            entity_type=entity_type,
            entity_id=entity_id,
            user_id=user_id,
            description=f"{entity_type.capitalize()} updated ({len(changes)} fields changed)",
            details={"changes": changes},
            is_user_action=True,
        )

    @staticmethod
    def record_deleted(
        entity_type: str,
        entity_id: str,
        user_id: Optional[str] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=_DELETED[entity_type],
            entity_type=entity_type,
            entity_id=entity_id,
            user_id=user_id,
            description=f"{entity_type.capitalize()} deleted",
            is_user_action=True,
        )

    @staticmethod
    def budget_rolled_over(
        budget_id: str,
        source_id: str,
        category: str,
        period_label: str,
        correlation_id: UUID,
        user_id: Optional[str] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BUDGET_ROLLED_OVER,
            entity_type="budget",
            entity_id=budget_id,
            user_id=user_id,
            correlation_id=correlation_id,
            description=f"Recurring budget '{category}' copied into {period_label}",
            details={
                "source_budget_id": source_id,
                "category": category,
            },
        )

    @staticmethod
    def data_loaded(
        counts: dict[str, int],
        user_id: Optional[str] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DATA_LOADED,
            severity=AuditSeverity.DEBUG,
            user_id=user_id,
            description="Loaded " + ", ".join(f"{n} {name}" for name, n in counts.items()),
            details=counts,
        )

    @staticmethod
    def data_load_failed(
        collection: str,
        error_message: str,
        backup_key: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> AuditEvent:
        description = f"Stored {collection} unreadable; starting with an empty list"
        if backup_key:
            description += f" (kept as {backup_key})"
        return AuditEvent(
            event_type=AuditEventType.DATA_LOAD_FAILED,
            severity=AuditSeverity.WARNING,
            user_id=user_id,
            description=description,
            details={"collection": collection, "backup_key": backup_key},
            error_message=error_message,
        )

    @staticmethod
    def save_failed(
        collection: str,
        error_message: str,
        user_id: Optional[str] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            user_id=user_id,
            description=f"Failed to save {collection}",
            details={"collection": collection},
            error_message=error_message,
        )

    @staticmethod
    def user_registered(user_id: str, email: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.USER_REGISTERED,
            entity_type="profile",
            entity_id=user_id,
            user_id=user_id,
            description=f"Profile registered: {email}",
            is_user_action=True,
        )

    @staticmethod
    def user_signed_in(user_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.USER_SIGNED_IN,
            entity_type="profile",
            entity_id=user_id,
            user_id=user_id,
            description="User signed in",
            is_user_action=True,
        )

    @staticmethod
    def user_signed_out(user_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.USER_SIGNED_OUT,
            entity_type="profile",
            entity_id=user_id,
            user_id=user_id,
            description="User signed out",
            is_user_action=True,
        )

    @staticmethod
    def profile_updated(user_id: str, changes: dict[str, Any]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PROFILE_UPDATED,
            entity_type="profile",
            entity_id=user_id,
            user_id=user_id,
            description="Profile updated",
            details={"changes": changes},
            is_user_action=True,
        )

