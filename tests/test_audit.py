"""Tests for audit events and the audit logger."""

from decimal import Decimal
from unittest.mock import MagicMock

from earnings_ledger.audit import AuditLogger, create_correlation_id
from earnings_ledger.models.audit import (
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)
from earnings_ledger.services.storage import KeyValueAuditStorage


class TestAuditEventBuilder:
    """Tests for the event builders."""

    def test_earning_recorded(self):
        """Test the recorded event carries the entity and amount."""
        cid = create_correlation_id()
        event = AuditEventBuilder.earning_recorded("r1", "2024-03-04", Decimal("28000"), cid)
        assert event.event_type == AuditEventType.EARNING_RECORDED
        assert event.entity_id == "r1"
        assert event.is_user_action
        assert event.details == {"date": "2024-03-04", "amount": "28000"}

    def test_leftover_dropped_is_warning(self):
        """Test dropped surplus is flagged, not silent."""
        event = AuditEventBuilder.surplus_leftover_dropped(Decimal("5"), create_correlation_id())
        assert event.severity == AuditSeverity.WARNING

    def test_to_log_dict_is_plain(self):
        """Test the log dict holds only JSON-friendly values."""
        cid = create_correlation_id()
        data = AuditEventBuilder.save_failed("k", "boom", cid).to_log_dict()
        assert data["event_type"] == "save_failed"
        assert data["severity"] == "error"
        assert data["correlation_id"] == str(cid)
        assert data["error_message"] == "boom"
        assert isinstance(data["timestamp"], str)

    def test_corrupt_record_without_correlation(self):
        """Test load-time events have no correlation id."""
        data = AuditEventBuilder.corrupt_record_skipped("k", 3, "bad").to_log_dict()
        assert data["correlation_id"] is None
        assert data["details"] == {"key": "k", "index": 3}


class TestAuditLogger:
    """Tests for AuditLogger."""

    def test_without_storage(self):
        """Test local-only logging succeeds."""
        event = AuditEventBuilder.expense_deleted("e1", create_correlation_id())
        assert AuditLogger().log(event) is True

    def test_persists_to_storage(self, audit_storage):
        """Test events reach the configured storage."""
        event = AuditEventBuilder.expense_deleted("e1", create_correlation_id())
        assert AuditLogger(audit_storage).log(event) is True
        assert audit_storage.get_recent_events()[0]["event_id"] == str(event.event_id)

    def test_storage_failure_swallowed(self):
        """Test a failing audit store never breaks the caller."""
        storage = MagicMock()
        storage.append_events.side_effect = RuntimeError("disk full")
        event = AuditEventBuilder.system_error("Boom", "details")
        assert AuditLogger(storage).log(event) is False

    def test_log_many_single_append(self):
        """Test one operation's events reach storage in one append, in order."""
        storage = MagicMock()
        storage.append_events.return_value = True
        cid = create_correlation_id()
        events = [
            AuditEventBuilder.earning_recorded("r1", "2024-03-04", Decimal("70000"), cid),
            AuditEventBuilder.debt_payment_applied("d1", "2024-03-02", Decimal("28000"), cid),
        ]

        assert AuditLogger(storage).log_many(events) is True
        storage.append_events.assert_called_once_with(events)

    def test_log_many_empty(self):
        """Test an empty batch touches nothing."""
        storage = MagicMock()
        assert AuditLogger(storage).log_many([]) is True
        storage.append_events.assert_not_called()

    def test_batch_capped_in_key_value_storage(self, audit_store):
        """Test a batch append keeps only the newest max_events."""
        storage = KeyValueAuditStorage(audit_store, key="audit", max_events=2)
        cid = create_correlation_id()
        events = [AuditEventBuilder.expense_deleted(f"e{i}", cid) for i in range(3)]

        assert AuditLogger(storage).log_many(events) is True
        assert [e["entity_id"] for e in audit_store.load_list("audit")] == ["e1", "e2"]
