"""
Earnings Ledger - Main Service

This module ties together storage, validation, the reconciliation engine
and the audit trail, and exposes the operations a UI calls:

- record_earning            (validate -> distribute surplus -> persist)
- compute_monthly_statistics
- compute_goal_streak
- classify_day
- delete_record
- record_expense / delete_expense
- list_month_days

DESIGN DECISION: The ledger enforces the boundaries:
- Nothing is mutated until validation passes
- Every mutation is a read-modify-write of the whole collection
- Records and savings from one earning are persisted as one logical write
- Every step is audited

`today` defaults to the local date here and only here; the engine below
always receives it explicitly.
"""

from datetime import date
from decimal import Decimal
from typing import Any, Optional

from earnings_ledger.audit import AuditLogger, create_correlation_id
from earnings_ledger.config import LedgerSettings, get_settings
from earnings_ledger.engine import (
    apply_earning_transaction,
    classify_day,
    compute_goal_streak,
    compute_monthly_statistics,
    index_by_day,
    month_days,
)
from earnings_ledger.models.audit import AuditEventBuilder
from earnings_ledger.models.earning import (
    DailyEarningRecord,
    DayStatus,
    DayView,
    EarningResult,
    Expense,
    MonthlyStatistics,
)
from earnings_ledger.repository import EarningsRepository
from earnings_ledger.services.storage import (
    KeyValueAuditStorage,
    KeyValueStoreInterface,
    NotFoundError,
    create_store,
)
from earnings_ledger.validation import EarningValidationError, EarningValidator


class EarningsLedger:
    """
    Orchestrates every ledger operation against one key-value store.

    Single user, single session: operations are serialized by the caller
    and each one reloads the full state it needs.
    """

    def __init__(
        self,
        store: Optional[KeyValueStoreInterface] = None,
        settings: Optional[LedgerSettings] = None,
        audit_logger: Optional[AuditLogger] = None,
        validator: Optional[EarningValidator] = None,
    ):
        self._settings = settings or get_settings().ledger
        self._store = store or create_store(self._settings)
        self._audit_logger = audit_logger or AuditLogger()
        self._repository = EarningsRepository(
            self._store, self._settings, self._audit_logger,
        )
        self._validator = validator or EarningValidator(self._settings)

    @property
    def daily_goal(self) -> Decimal:
        return self._settings.daily_goal

    # -------------------------------------------------------------------------
    # Earnings
    # -------------------------------------------------------------------------

    def record_earning(
        self,
        amount: Any,
        notes: str = "",
        today: Optional[date] = None,
    ) -> EarningResult:
        """
        Record today's earning and route any surplus.

        Args:
            amount: Amount as entered (number or numeric string)
            notes: Optional notes
            today: The day being recorded (defaults to the local date)

        Returns:
            EarningResult with the persisted next state

        Raises:
            EarningValidationError: Bad amount; nothing was changed
            DuplicateEntryError: Today already has an entry; nothing was changed
            StorageError: Persisting failed; nothing was changed
            SavingsPersistenceError: Records saved, savings not; retry with
                retry_savings_persistence(error.pending_savings)
        """
        today = today or date.today()
        notes = (notes or "").strip()
        correlation_id = create_correlation_id()

        records = self._repository.load_records()

        try:
            parsed, _ = self._validator.ensure_valid_earning(amount, records, today, notes)
        except EarningValidationError as e:
            self._audit_logger.log(AuditEventBuilder.earning_rejected(
                reason=str(e),
                issues=[i.model_dump() for i in e.issues],
                correlation_id=correlation_id,
            ))
            raise

        savings = self._repository.load_savings()

        result = apply_earning_transaction(
            records=records,
            savings=savings,
            amount=parsed,
            notes=notes,
            today=today,
            daily_goal=self.daily_goal,
            leftover_to_savings=self._settings.leftover_surplus_to_savings,
        )

        self._repository.save_earning_state(
            result.updated_records,
            result.updated_savings,
            correlation_id,
        )

        self._audit_result(result, correlation_id)
        return result

    def _audit_result(self, result: EarningResult, correlation_id) -> None:
        events = [AuditEventBuilder.earning_recorded(
            record_id=result.record.id,
            day=result.record.date.isoformat(),
            amount=result.record.amount,
            correlation_id=correlation_id,
        )]
        events.extend(
            AuditEventBuilder.debt_payment_applied(
                record_id=payment.id,
                day=payment.date.isoformat(),
                amount=payment.amount,
                correlation_id=correlation_id,
            )
            for payment in result.debt_payments
        )
        if result.savings_credited > 0:
            events.append(AuditEventBuilder.savings_credited(
                amount=result.savings_credited,
                balance=result.updated_savings,
                correlation_id=correlation_id,
            ))
        if result.leftover_surplus > 0:
            events.append(AuditEventBuilder.surplus_leftover_dropped(
                amount=result.leftover_surplus,
                correlation_id=correlation_id,
            ))
        self._audit_logger.log_many(events)

    def retry_savings_persistence(self, value: Decimal) -> bool:
        """Write only the savings balance, after a SavingsPersistenceError."""
        return self._repository.save_savings(value)

    def delete_record(self, record_id: str) -> list[DailyEarningRecord]:
        """
        Delete one earning record.

        Deletion never rebalances: debt payments made from the deleted
        record's surplus stay where they are.

        Raises:
            NotFoundError: No record has this id
        """
        records = self._repository.load_records()
        target = next((r for r in records if r.id == record_id), None)
        if target is None:
            raise NotFoundError(f"Earning record not found: {record_id}")

        remaining = [r for r in records if r.id != record_id]
        self._repository.save_records(remaining)

        self._audit_logger.log(AuditEventBuilder.record_deleted(
            record_id=record_id,
            synthetic=target.is_synthetic,
            correlation_id=create_correlation_id(),
        ))
        return remaining

    def get_records(self) -> list[DailyEarningRecord]:
        """All earning records, newest first."""
        return sorted(self._repository.load_records(), key=lambda r: r.date, reverse=True)

    def get_savings(self) -> Decimal:
        return self._repository.load_savings()

    # -------------------------------------------------------------------------
    # Read-only views
    # -------------------------------------------------------------------------

    def classify_day(self, day: date) -> DayStatus:
        by_day = index_by_day(self._repository.load_records())
        return classify_day(day, by_day.get(day))

    def compute_monthly_statistics(
        self,
        year: Optional[int] = None,
        month: Optional[int] = None,
        today: Optional[date] = None,
    ) -> MonthlyStatistics:
        """Statistics for a month; defaults to the month containing today."""
        today = today or date.today()
        return compute_monthly_statistics(
            records=self._repository.load_records(),
            expenses=self._repository.load_expenses(),
            year=year or today.year,
            month=month or today.month,
            today=today,
            daily_goal=self.daily_goal,
            savings=self._repository.load_savings(),
        )

    def compute_goal_streak(self, today: Optional[date] = None) -> int:
        return compute_goal_streak(
            self._repository.load_records(),
            today or date.today(),
        )

    def list_month_days(
        self,
        year: Optional[int] = None,
        month: Optional[int] = None,
        today: Optional[date] = None,
    ) -> list[DayView]:
        """Day-by-day view of a month, newest day first."""
        today = today or date.today()
        return month_days(
            self._repository.load_records(),
            year or today.year,
            month or today.month,
            today,
            self.daily_goal,
        )

    # -------------------------------------------------------------------------
    # Expenses
    # -------------------------------------------------------------------------

    def record_expense(
        self,
        amount: Any,
        category: Any,
        notes: str = "",
        today: Optional[date] = None,
    ) -> Expense:
        """
        Log an expense for today.

        Raises:
            EarningValidationError: Bad amount or unknown category
        """
        today = today or date.today()
        notes = (notes or "").strip()
        correlation_id = create_correlation_id()

        parsed, parsed_category = self._validator.ensure_valid_expense(amount, category, notes)

        expense = Expense(
            date=today,
            amount=parsed,
            category=parsed_category,
            notes=notes,
        )
        expenses = [expense] + self._repository.load_expenses()
        self._repository.save_expenses(expenses)

        self._audit_logger.log(AuditEventBuilder.expense_recorded(
            expense_id=expense.id,
            category=expense.category.value,
            amount=expense.amount,
            correlation_id=correlation_id,
        ))
        return expense

    def delete_expense(self, expense_id: str) -> list[Expense]:
        """
        Raises:
            NotFoundError: No expense has this id
        """
        expenses = self._repository.load_expenses()
        remaining = [e for e in expenses if e.id != expense_id]
        if len(remaining) == len(expenses):
            raise NotFoundError(f"Expense not found: {expense_id}")

        self._repository.save_expenses(remaining)
        self._audit_logger.log(AuditEventBuilder.expense_deleted(
            expense_id=expense_id,
            correlation_id=create_correlation_id(),
        ))
        return remaining

    def get_expenses(self) -> list[Expense]:
        return self._repository.load_expenses()


def create_ledger(
    settings: Optional[LedgerSettings] = None,
    store: Optional[KeyValueStoreInterface] = None,
) -> EarningsLedger:
    """
    Factory function to create a ledger with persisted audit logging.

    The audit log lives in the same store as the ledger data.
    """
    settings = settings or get_settings().ledger
    store = store or create_store(settings)
    audit_logger = AuditLogger(KeyValueAuditStorage(
        store,
        key=settings.audit_key,
        max_events=settings.audit_max_events,
    ))
    return EarningsLedger(
        store=store,
        settings=settings,
        audit_logger=audit_logger,
    )
