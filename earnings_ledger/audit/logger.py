"""
Audit Logger

DESIGN DECISION: Every state change in the ledger is logged.
This provides:
1. Traceability of synthetic debt-payment records back to the entry that paid them
2. A visible trail when surplus is dropped or a stored record is skipped
3. Debugging capability

The audit logger:
- Always logs locally through structlog
- Gracefully handles storage failures (never breaks a ledger operation)
- Supports correlation IDs to trace related events
"""

from typing import Optional, Sequence
from uuid import UUID, uuid4

import structlog

from earnings_ledger.models.audit import AuditEvent, AuditSeverity
from earnings_ledger.services.storage.interface import AuditStorageInterface


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


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. Audit storage, when configured (for persistence and user visibility)
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger("earnings_ledger.audit")

    def _log_locally(self, event: AuditEvent) -> None:
        log_dict = event.to_log_dict()

        if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        return self.log_many([event])

    def log_many(self, events: Sequence[AuditEvent]) -> bool:
        """
        Log every event one ledger operation produced, in order.

        The events reach storage in one append, so an earning and the
        debt payments it made are persisted together.

        Returns True if storage write succeeded (or no storage configured).
        """
        if not events:
            return True

        for event in events:
            self._log_locally(event)

        if self._storage:
            try:
                return self._storage.append_events(list(events))
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_ids=[str(event.event_id) for event in events],
                )
                return False

        return True


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a ledger operation and pass it to every
    event that operation emits.
    """
    return uuid4()
