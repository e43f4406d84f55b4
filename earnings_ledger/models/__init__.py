"""
Data Models Package

This package contains all Pydantic models used in the Daily Earnings Ledger.
All data flowing through the system must conform to these schemas.
"""

from earnings_ledger.models.earning import (
    DEBT_PAYMENT_NOTE,
    DailyEarningRecord,
    DayStatus,
    DayView,
    EarningResult,
    Expense,
    ExpenseCategory,
    MonthlyStatistics,
    RecordOrigin,
    ValidationIssue,
    ValidationResult,
    decimal_to_number,
)
from earnings_ledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Earning models
    "DEBT_PAYMENT_NOTE",
    "DailyEarningRecord",
    "DayStatus",
    "DayView",
    "EarningResult",
    "Expense",
    "ExpenseCategory",
    "MonthlyStatistics",
    "RecordOrigin",
    "ValidationIssue",
    "ValidationResult",
    "decimal_to_number",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
