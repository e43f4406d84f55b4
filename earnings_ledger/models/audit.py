"""
Audit Models for Daily Earnings Ledger

Every state change in the ledger is logged for audit purposes.
This provides:
1. Traceability of every synthetic debt-payment record
2. A record of surplus that was dropped rather than applied
3. Visibility into corrupt stored records that were skipped

DESIGN DECISION: Audit logs are append-only. We never modify them.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Earnings
    EARNING_RECORDED = "earning_recorded"
    EARNING_REJECTED = "earning_rejected"
    RECORD_DELETED = "record_deleted"

    # Surplus distribution
    DEBT_PAYMENT_APPLIED = "debt_payment_applied"
    SAVINGS_CREDITED = "savings_credited"
    SURPLUS_LEFTOVER_DROPPED = "surplus_leftover_dropped"

    # Expenses
    EXPENSE_RECORDED = "expense_recorded"
    EXPENSE_DELETED = "expense_deleted"

    # Persistence
    CORRUPT_RECORD_SKIPPED = "corrupt_record_skipped"
    SAVE_FAILED = "save_failed"

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

    Every significant ledger action creates one of these.
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
    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'earning', 'expense', 'savings')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    # Correlation - all events caused by one ledger operation share this
    correlation_id: Optional[UUID] = None

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(default_factory=dict)

    # Error information (if applicable)
    error_code: Optional[str] = None
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.

        The same dict is what audit storage persists.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_code": self.error_code,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.earning_recorded(record_id, day, amount, correlation_id)
    """

    @staticmethod
    def earning_recorded(
        record_id: str,
        day: str,
        amount: Decimal,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EARNING_RECORDED,
            entity_type="earning",
            entity_id=record_id,
            correlation_id=correlation_id,
            description=f"Earning recorded for {day}: {amount}",
            details={"date": day, "amount": str(amount)},
            is_user_action=True,
        )

    @staticmethod
    def earning_rejected(
        reason: str,
        issues: list[dict],
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EARNING_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="earning",
            correlation_id=correlation_id,
            description=f"Earning rejected: {reason}",
            details={"issues": issues},
            is_user_action=True,
        )

    @staticmethod
    def debt_payment_applied(
        record_id: str,
        day: str,
        amount: Decimal,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DEBT_PAYMENT_APPLIED,
            entity_type="earning",
            entity_id=record_id,
            correlation_id=correlation_id,
            description=f"Surplus paid {amount} towards missed day {day}",
            details={"date": day, "amount": str(amount)},
        )

    @staticmethod
    def savings_credited(
        amount: Decimal,
        balance: Decimal,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVINGS_CREDITED,
            entity_type="savings",
            correlation_id=correlation_id,
            description=f"Savings jar credited {amount}",
            details={"amount": str(amount), "balance": str(balance)},
        )

    @staticmethod
    def surplus_leftover_dropped(
        amount: Decimal,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SURPLUS_LEFTOVER_DROPPED,
            severity=AuditSeverity.WARNING,
            entity_type="savings",
            correlation_id=correlation_id,
            description=(
                f"Surplus of {amount} left after paying every missed day "
                "was not credited anywhere"
            ),
            details={"amount": str(amount)},
        )

    @staticmethod
    def record_deleted(
        record_id: str,
        synthetic: bool,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_DELETED,
            entity_type="earning",
            entity_id=record_id,
            correlation_id=correlation_id,
            description=f"Earning record deleted: {record_id}",
            details={"synthetic": synthetic},
            is_user_action=True,
        )

    @staticmethod
    def expense_recorded(
        expense_id: str,
        category: str,
        amount: Decimal,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_RECORDED,
            entity_type="expense",
            entity_id=expense_id,
            correlation_id=correlation_id,
            description=f"Expense logged: {category} - {amount}",
            details={"category": category, "amount": str(amount)},
            is_user_action=True,
        )

    @staticmethod
    def expense_deleted(
        expense_id: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_DELETED,
            entity_type="expense",
            entity_id=expense_id,
            correlation_id=correlation_id,
            description=f"Expense deleted: {expense_id}",
            is_user_action=True,
        )

    @staticmethod
    def corrupt_record_skipped(
        key: str,
        index: int,
        error_message: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CORRUPT_RECORD_SKIPPED,
            severity=AuditSeverity.WARNING,
            entity_type=key,
            description=f"Skipped unreadable entry #{index} under '{key}'",
            error_message=error_message,
            details={"key": key, "index": index},
        )

    @staticmethod
    def save_failed(
        key: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type=key,
            correlation_id=correlation_id,
            description=f"Failed to persist '{key}'",
            error_message=error_message,
            details={"key": key},
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )
