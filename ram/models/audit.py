"""
Audit Models for RAM

Every significant action (mutations, authentication attempts,
refused operations, storage failures) produces an audit event.
This is the diagnostic channel of the application: nothing here is
shown to the user as an error, but everything can be traced.

DESIGN DECISION: Events never carry a password. Credential events
only name the website.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Collections
    COLLECTION_LOADED = "collection_loaded"
    COLLECTION_LOAD_FAILED = "collection_load_failed"
    RECORD_APPENDED = "record_appended"
    RECORDS_DELETED = "records_deleted"
    PERSIST_FAILED = "persist_failed"

    # User input
    DEBT_INPUT_REJECTED = "debt_input_rejected"
    CREDENTIAL_ADD_REFUSED = "credential_add_refused"
    CREDENTIAL_DELETE_REFUSED = "credential_delete_refused"

    # Authentication
    AUTHENTICATION_REQUESTED = "authentication_requested"
    AUTHENTICATION_SUCCEEDED = "authentication_succeeded"
    AUTHENTICATION_FAILED = "authentication_failed"
    AUTHENTICATION_UNAVAILABLE = "authentication_unavailable"
    AUTHENTICATION_ALREADY_IN_PROGRESS = "authentication_already_in_progress"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of the diagnostic trail.
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

    # Context - what is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Collection key or 'auth'"
    )
    entity_id: Optional[UUID] = Field(
        default=None,
        description="ID of the record this event relates to"
    )

    # Correlation - ties together the events of one authentication attempt
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

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
            "entity_id": str(self.entity_id) if self.entity_id else None,
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
        event = AuditEventBuilder.record_appended("debts", record_id, count)
        event = AuditEventBuilder.authentication_failed(reason, correlation_id)
    """

    @staticmethod
    def collection_loaded(collection: str, count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.COLLECTION_LOADED,
            entity_type=collection,
            description=f"Loaded {count} records from '{collection}'",
            details={"count": count},
        )

    @staticmethod
    def collection_load_failed(collection: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.COLLECTION_LOAD_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type=collection,
            description=f"Could not decode '{collection}', starting empty",
            error_message=error_message,
        )

    @staticmethod
    def record_appended(collection: str, record_id: UUID, count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_APPENDED,
            entity_type=collection,
            entity_id=record_id,
            description=f"Record appended to '{collection}'",
            details={"count": count},
            is_user_action=True,
        )

    @staticmethod
    def records_deleted(
        collection: str,
        positions: list[int],
        record_ids: list[UUID],
        count: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORDS_DELETED,
            entity_type=collection,
            description=f"{len(record_ids)} records deleted from '{collection}'",
            details={
                "positions": positions,
                "record_ids": [str(record_id) for record_id in record_ids],
                "count": count,
            },
            is_user_action=True,
        )

    @staticmethod
    def persist_failed(collection: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PERSIST_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type=collection,
            description=f"Failed to persist '{collection}'",
            error_message=error_message,
        )

    @staticmethod
    def debt_input_rejected(issues: list[dict]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DEBT_INPUT_REJECTED,
            severity=AuditSeverity.WARNING,
            description=f"Debt not added: input has {len(issues)} issues",
            details={"issues": issues},
            is_user_action=True,
        )

    @staticmethod
    def credential_add_refused(website: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CREDENTIAL_ADD_REFUSED,
            severity=AuditSeverity.WARNING,
            description="Authentication required to add passwords.",
            details={"website": website},
            is_user_action=True,
        )

    @staticmethod
    def credential_delete_refused(positions: list[int]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CREDENTIAL_DELETE_REFUSED,
            severity=AuditSeverity.WARNING,
            description="Authentication required to delete passwords.",
            details={"positions": positions},
            is_user_action=True,
        )

    @staticmethod
    def authentication_requested(reason: str, correlation_id: UUID) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.AUTHENTICATION_REQUESTED,
            entity_type="auth",
            correlation_id=correlation_id,
            description="Authentication requested",
            details={"reason": reason},
            is_user_action=True,
        )

    @staticmethod
    def authentication_succeeded(correlation_id: UUID) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.AUTHENTICATION_SUCCEEDED,
            entity_type="auth",
            correlation_id=correlation_id,
            description="Authentication succeeded",
        )

    @staticmethod
    def authentication_failed(
        error_message: Optional[str],
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.AUTHENTICATION_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="auth",
            correlation_id=correlation_id,
            description="Authentication failed",
            error_message=error_message,
        )

    @staticmethod
    def authentication_unavailable(
        reason: Optional[str],
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.AUTHENTICATION_UNAVAILABLE,
            severity=AuditSeverity.WARNING,
            entity_type="auth",
            correlation_id=correlation_id,
            description="Biometric authentication unavailable.",
            error_message=reason,
        )

    @staticmethod
    def authentication_already_in_progress() -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.AUTHENTICATION_ALREADY_IN_PROGRESS,
            severity=AuditSeverity.DEBUG,
            entity_type="auth",
            description="Authentication already in progress, request ignored",
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )
