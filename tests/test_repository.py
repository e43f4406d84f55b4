"""Tests for the earnings repository."""

from datetime import date
from decimal import Decimal

import pytest

from earnings_ledger.audit import AuditLogger
from earnings_ledger.repository import LEGACY_ID_PREFIX, EarningsRepository
from earnings_ledger.services.storage import (
    CorruptDataError,
    InMemoryKeyValueStore,
    SavingsPersistenceError,
    StorageError,
)

from conftest import make_record


@pytest.fixture
def repository(store, settings, audit_storage):
    return EarningsRepository(store, settings, AuditLogger(audit_storage))


def event_types(audit_storage):
    return [e["event_type"] for e in audit_storage.get_recent_events()]


class TestLoadRecords:
    """Tests for reading records back."""

    def test_corrupt_record_skipped_and_audited(self, store, settings, repository, audit_storage):
        """Test one bad record does not hide the rest."""
        store.save_list(settings.earnings_key, [
            {"id": "good", "date": "2024-03-04", "amount": 100, "goal": 28000},
            {"id": "bad", "date": "not a date", "amount": 100, "goal": 28000},
            {"id": "neg", "date": "2024-03-05", "amount": -1, "goal": 28000},
        ])
        records = repository.load_records()

        assert [r.id for r in records] == ["good"]
        assert event_types(audit_storage) == ["corrupt_record_skipped"] * 2

    def test_non_list_raises(self, store, settings, repository, audit_storage):
        """Test a scalar under the earnings key is never read as empty."""
        store.save_scalar(settings.earnings_key, "garbage")
        with pytest.raises(CorruptDataError):
            repository.load_records()
        assert event_types(audit_storage) == ["system_error"]

    def test_out_of_range_datetime_skipped(self, store, settings, repository, audit_storage):
        """Test a datetime that cannot be shifted to local time is skipped, not fatal."""
        store.save_list(settings.earnings_key, [
            {"id": "ok", "date": "2024-03-01", "amount": 100, "goal": 28000},
            {"id": "bad", "date": "0001-01-01T00:00:00+14:00", "amount": 100, "goal": 28000},
        ])
        assert [r.id for r in repository.load_records()] == ["ok"]
        assert event_types(audit_storage) == ["corrupt_record_skipped"]

    def test_missing_id_is_stable(self, store, settings, repository):
        """Test an id-less record gets the same id on every load."""
        store.save_list(settings.earnings_key, [
            {"date": "2024-03-01", "amount": 28000, "goal": 28000},
            {"date": "2024-03-01", "amount": 28000, "goal": 28000},
            {"id": "", "date": "2024-03-02", "amount": 5, "goal": 28000},
        ])
        first = [r.id for r in repository.load_records()]
        second = [r.id for r in repository.load_records()]

        assert first == second
        assert len(set(first)) == 3
        assert all(i.startswith(LEGACY_ID_PREFIX) for i in first)

    def test_round_trip(self, repository):
        """Test saved records load back equal."""
        records = [make_record(date(2024, 3, 4), 100), make_record(date(2024, 3, 3), 200)]
        repository.save_records(records)
        assert repository.load_records() == records


class TestSavings:
    """Tests for the savings balance."""

    def test_missing_is_zero(self, repository):
        """Test an absent balance is 0."""
        assert repository.load_savings() == Decimal("0")

    @pytest.mark.parametrize("stored,expected", [(1500, "1500"), ("2500.5", "2500.5"), (0.25, "0.25")])
    def test_reads_numbers_and_strings(self, store, settings, repository, stored, expected):
        """Test numeric and string balances both load."""
        store.save_scalar(settings.savings_key, stored)
        assert repository.load_savings() == Decimal(expected)

    @pytest.mark.parametrize("stored", ["abc", -5, "NaN"])
    def test_unusable_balance_is_zero(self, store, settings, repository, audit_storage, stored):
        """Test a junk balance loads as 0 and is audited."""
        store.save_scalar(settings.savings_key, stored)
        assert repository.load_savings() == Decimal("0")
        assert event_types(audit_storage) == ["corrupt_record_skipped"]

    def test_saved_as_number(self, store, settings, repository):
        """Test the balance is written as a plain number."""
        repository.save_savings(Decimal("42000"))
        assert store.load_scalar(settings.savings_key) == 42000


class TestSaveEarningState:
    """Tests for the combined records + savings write."""

    def test_atomic_store_writes_both(self, store, settings, repository):
        """Test both keys are written together."""
        repository.save_earning_state([make_record(date(2024, 3, 4), 1)], Decimal("10"))
        assert len(store.load_list(settings.earnings_key)) == 1
        assert store.load_scalar(settings.savings_key) == 10

    def test_atomic_failure_writes_nothing(self, settings, audit_storage):
        """Test an atomic store failure leaves both keys untouched."""
        store = InMemoryKeyValueStore(failing_keys={settings.savings_key})
        repository = EarningsRepository(store, settings, AuditLogger(audit_storage))

        with pytest.raises(StorageError) as exc_info:
            repository.save_earning_state([make_record(date(2024, 3, 4), 1)], Decimal("10"))

        assert not isinstance(exc_info.value, SavingsPersistenceError)
        assert store.dump() == {}
        assert event_types(audit_storage) == ["save_failed"]

    def test_ordered_savings_failure(self, settings, audit_storage):
        """Test earnings land first and a savings failure is reported with the pending value."""
        store = InMemoryKeyValueStore(failing_keys={settings.savings_key}, atomic=False)
        repository = EarningsRepository(store, settings, AuditLogger(audit_storage))

        with pytest.raises(SavingsPersistenceError) as exc_info:
            repository.save_earning_state([make_record(date(2024, 3, 4), 1)], Decimal("10"))

        assert exc_info.value.pending_savings == Decimal("10")
        assert len(store.load_list(settings.earnings_key)) == 1
        assert store.load_scalar(settings.savings_key) is None

    def test_ordered_records_failure(self, settings, audit_storage):
        """Test a failed earnings write stops before savings."""
        store = InMemoryKeyValueStore(failing_keys={settings.earnings_key}, atomic=False)
        repository = EarningsRepository(store, settings, AuditLogger(audit_storage))

        with pytest.raises(StorageError) as exc_info:
            repository.save_earning_state([make_record(date(2024, 3, 4), 1)], Decimal("10"))

        assert not isinstance(exc_info.value, SavingsPersistenceError)
        assert store.dump() == {}
