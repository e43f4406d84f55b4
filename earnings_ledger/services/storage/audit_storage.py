"""
Audit Log Storage on top of a Key-Value Store

The audit log is one capped list under a single key. Appends re-save the
list; when it grows past `max_events` the oldest events fall off.
"""

from uuid import UUID

from earnings_ledger.models.audit import AuditEvent
from earnings_ledger.services.storage.interface import (
    AuditStorageInterface,
    KeyValueStoreInterface,
)


class KeyValueAuditStorage(AuditStorageInterface):
    """Append-only audit storage kept as a list in a key-value store."""

    def __init__(
        self,
        store: KeyValueStoreInterface,
        key: str = "earnings_audit_log",
        max_events: int = 1000,
    ):
        self._store = store
        self._key = key
        self._max_events = max_events

    def append_event(self, event: AuditEvent) -> bool:
        return self.append_events([event])

    def append_events(self, events: list[AuditEvent]) -> bool:
        stored = self._store.load_list(self._key)
        stored.extend(event.to_log_dict() for event in events)
        return self._store.save_list(self._key, stored[-self._max_events:])

    def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[dict]:
        wanted = str(correlation_id)
        return [
            e for e in self._store.load_list(self._key)
            if e.get("correlation_id") == wanted
        ]

    def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: str,
    ) -> list[dict]:
        return [
            e for e in self._store.load_list(self._key)
            if e.get("entity_type") == entity_type and e.get("entity_id") == entity_id
        ]

    def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[dict]:
        events = self._store.load_list(self._key)
        return list(reversed(events[-limit:]))
