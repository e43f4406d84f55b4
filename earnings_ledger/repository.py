"""
Earnings Repository

Translates between the key-value store's plain JSON and the ledger's
models.

CORRUPTION HANDLING:
- A single stored record that fails to parse is skipped and audited.
  One bad row must not cost the user their whole history.
- A stored value that is not a list at all raises CorruptDataError
  (audited as a system error). Treating it as empty would let the next
  save overwrite everything.
- Entries stored without an id get one derived from their content, so
  the same entry has the same id on every load and can be deleted.
- An unreadable or negative savings balance loads as 0 with a warning.

PERSISTENCE ORDER:
Earnings and savings are written together when the store can commit
several keys atomically. Otherwise earnings go first and savings second,
so the only possible partial failure is a savings undercount, never a
surplus applied twice. That failure raises SavingsPersistenceError.
"""

import hashlib
import json
from decimal import Decimal, InvalidOperation
from typing import Optional, TypeVar
from uuid import UUID

from pydantic import ValidationError

from earnings_ledger.audit.logger import AuditLogger
from earnings_ledger.config import LedgerSettings, get_settings
from earnings_ledger.models.audit import AuditEventBuilder
from earnings_ledger.models.earning import (
    DailyEarningRecord,
    Expense,
    decimal_to_number,
)
from earnings_ledger.services.storage.interface import (
    CorruptDataError,
    KeyValueStoreInterface,
    SavingsPersistenceError,
    StorageError,
)


EntryT = TypeVar("EntryT", DailyEarningRecord, Expense)

LEGACY_ID_PREFIX = "legacy_"


def with_stable_ids(raw_entries: list) -> list:
    """
    Give every id-less stored entry an id derived from its content.

    Identical entries are numbered in list order so each one stays
    addressable. Entries that already carry an id are left alone.
    """
    seen: dict[str, int] = {}
    result = []
    for raw in raw_entries:
        if isinstance(raw, dict) and raw.get("id") in (None, ""):
            content = json.dumps(raw, sort_keys=True, default=str)
            digest = hashlib.sha1(content.encode("utf-8")).hexdigest()[:16]
            seen[digest] = seen.get(digest, 0) + 1
            suffix = "" if seen[digest] == 1 else f"_{seen[digest]}"
            raw = {**raw, "id": f"{LEGACY_ID_PREFIX}{digest}{suffix}"}
        result.append(raw)
    return result


class EarningsRepository:
    """Loads and saves earnings, expenses and the savings jar."""

    def __init__(
        self,
        store: KeyValueStoreInterface,
        settings: Optional[LedgerSettings] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._settings = settings or get_settings().ledger
        self._audit_logger = audit_logger or AuditLogger()

    def _load_entries(self, key: str, model: type[EntryT]) -> list[EntryT]:
        try:
            raw_entries = self._store.load_list(key)
        except CorruptDataError as e:
            self._audit_logger.log(AuditEventBuilder.system_error(
                error_type="CorruptDataError",
                error_message=str(e),
                details={"key": key},
            ))
            raise

        entries = []
        for index, raw in enumerate(with_stable_ids(raw_entries)):
            try:
                entries.append(model.model_validate(raw))
            except ValidationError as e:
                self._audit_logger.log(AuditEventBuilder.corrupt_record_skipped(
                    key=key,
                    index=index,
                    error_message=str(e),
                ))
        return entries

    def load_records(self) -> list[DailyEarningRecord]:
        return self._load_entries(self._settings.earnings_key, DailyEarningRecord)

    def load_expenses(self) -> list[Expense]:
        return self._load_entries(self._settings.expenses_key, Expense)

    def load_savings(self) -> Decimal:
        raw = self._store.load_scalar(self._settings.savings_key)
        if raw is None or raw == "":
            return Decimal("0")

        try:
            value = Decimal(str(raw))
        except InvalidOperation:
            value = None

        if value is None or not value.is_finite() or value < 0:
            self._audit_logger.log(AuditEventBuilder.corrupt_record_skipped(
                key=self._settings.savings_key,
                index=0,
                error_message=f"Unusable savings balance {raw!r}, using 0",
            ))
            return Decimal("0")
        return value

    def save_records(self, records: list[DailyEarningRecord]) -> bool:
        return self._store.save_list(
            self._settings.earnings_key,
            [r.to_storage_dict() for r in records],
        )

    def save_expenses(self, expenses: list[Expense]) -> bool:
        return self._store.save_list(
            self._settings.expenses_key,
            [e.to_storage_dict() for e in expenses],
        )

    def save_savings(self, value: Decimal) -> bool:
        return self._store.save_scalar(
            self._settings.savings_key,
            decimal_to_number(value),
        )

    def save_earning_state(
        self,
        records: list[DailyEarningRecord],
        savings: Decimal,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """
        Persist records and savings as one logical write.

        Raises:
            StorageError: Nothing was written (or the records write failed)
            SavingsPersistenceError: Records were written, savings were not
        """
        if self._store.supports_atomic_writes:
            try:
                self._store.save_many({
                    self._settings.earnings_key: [r.to_storage_dict() for r in records],
                    self._settings.savings_key: decimal_to_number(savings),
                })
            except StorageError as e:
                self._audit_logger.log(AuditEventBuilder.save_failed(
                    key=self._settings.earnings_key,
                    error_message=str(e),
                    correlation_id=correlation_id,
                ))
                raise
            return

        try:
            self.save_records(records)
        except StorageError as e:
            self._audit_logger.log(AuditEventBuilder.save_failed(
                key=self._settings.earnings_key,
                error_message=str(e),
                correlation_id=correlation_id,
            ))
            raise

        try:
            self.save_savings(savings)
        except StorageError as e:
            self._audit_logger.log(AuditEventBuilder.save_failed(
                key=self._settings.savings_key,
                error_message=str(e),
                correlation_id=correlation_id,
            ))
            raise SavingsPersistenceError(
                f"Earnings were saved but the savings balance was not: {e}",
                pending_savings=savings,
            )
