"""
Data Models Package

This package contains all Pydantic models used in RAM.
Records, authentication state and audit events all live here.
"""

from ram.models.records import (
    CredentialRecord,
    DebtRecord,
    ValidationIssue,
    ValidationResult,
)
from ram.models.auth import (
    AuthenticationResult,
    AuthOutcome,
    AuthState,
)
from ram.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Record models
    "CredentialRecord",
    "DebtRecord",
    "ValidationIssue",
    "ValidationResult",
    # Auth models
    "AuthenticationResult",
    "AuthOutcome",
    "AuthState",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
