"""
Audit Logger

DESIGN DECISION: Every significant action in the system is logged.
This is the only diagnostic channel RAM has: refused operations,
failed authentication and unreadable storage are reported here and
nowhere else.

The audit logger:
- Is synchronous, like the store operations that call it
- Never raises into the caller
- Supports correlation IDs to trace one authentication attempt
"""

import logging
from typing import Optional
from uuid import UUID, uuid4

import structlog

from ram.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


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
    """Route structlog output through a stdlib handler at `level`."""
    logging.basicConfig(format="%(message)s", level=getattr(logging, level.upper()))


class AuditLogger:
    """
    Central audit logging service.

    Events are rendered as structured JSON log lines.
    """

    def __init__(self, logger_name: str = "ram.audit"):
        self._logger = structlog.get_logger(logger_name)

    def log(self, event: AuditEvent) -> None:
        """Log an audit event at the level matching its severity."""
        log_dict = event.to_log_dict()

        if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

    def log_collection_loaded(self, collection: str, count: int) -> None:
        self.log(AuditEventBuilder.collection_loaded(collection, count))

    def log_collection_load_failed(self, collection: str, error_message: str) -> None:
        self.log(AuditEventBuilder.collection_load_failed(collection, error_message))

    def log_record_appended(self, collection: str, record_id: UUID, count: int) -> None:
        self.log(AuditEventBuilder.record_appended(collection, record_id, count))

    def log_records_deleted(
        self,
        collection: str,
        positions: list[int],
        record_ids: list[UUID],
        count: int,
    ) -> None:
        self.log(AuditEventBuilder.records_deleted(collection, positions, record_ids, count))

    def log_persist_failed(self, collection: str, error_message: str) -> None:
        self.log(AuditEventBuilder.persist_failed(collection, error_message))

    def log_debt_input_rejected(self, issues: list[dict]) -> None:
        self.log(AuditEventBuilder.debt_input_rejected(issues))

    def log_credential_add_refused(self, website: str) -> None:
        self.log(AuditEventBuilder.credential_add_refused(website))

    def log_credential_delete_refused(self, positions: list[int]) -> None:
        self.log(AuditEventBuilder.credential_delete_refused(positions))

    def log_authentication_requested(self, reason: str, correlation_id: UUID) -> None:
        self.log(AuditEventBuilder.authentication_requested(reason, correlation_id))

    def log_authentication_succeeded(self, correlation_id: UUID) -> None:
        self.log(AuditEventBuilder.authentication_succeeded(correlation_id))

    def log_authentication_failed(
        self,
        error_message: Optional[str],
        correlation_id: UUID,
    ) -> None:
        self.log(AuditEventBuilder.authentication_failed(error_message, correlation_id))

    def log_authentication_unavailable(
        self,
        reason: Optional[str],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.authentication_unavailable(reason, correlation_id))

    def log_authentication_already_in_progress(self) -> None:
        self.log(AuditEventBuilder.authentication_already_in_progress())

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        self.log(AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    One is created per authentication attempt.
    """
    return uuid4()
