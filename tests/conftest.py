"""Shared fixtures for the ledger tests."""

from datetime import date
from decimal import Decimal

import pytest

from earnings_ledger.audit import AuditLogger
from earnings_ledger.config import LedgerSettings, StorageBackend
from earnings_ledger.ledger import EarningsLedger
from earnings_ledger.models.earning import DailyEarningRecord, RecordOrigin
from earnings_ledger.services.storage import InMemoryKeyValueStore, KeyValueAuditStorage


GOAL = Decimal("28000")


def make_record(
    day: date,
    amount,
    goal=GOAL,
    origin: RecordOrigin = RecordOrigin.ORGANIC,
    record_id: str = None,
) -> DailyEarningRecord:
    """Build a record with Decimal amounts from ints/strings."""
    kwargs = {}
    if record_id is not None:
        kwargs["id"] = record_id
    return DailyEarningRecord(
        date=day,
        amount=Decimal(str(amount)),
        goal=Decimal(str(goal)),
        origin=origin,
        **kwargs,
    )


@pytest.fixture
def settings() -> LedgerSettings:
    return LedgerSettings(
        daily_goal=GOAL,
        storage_backend=StorageBackend.MEMORY,
    )


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def audit_store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def audit_storage(audit_store) -> KeyValueAuditStorage:
    return KeyValueAuditStorage(audit_store, key="audit")


@pytest.fixture
def ledger(store, settings, audit_storage) -> EarningsLedger:
    return EarningsLedger(
        store=store,
        settings=settings,
        audit_logger=AuditLogger(audit_storage),
    )
