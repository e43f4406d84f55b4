"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract key-value interface for storage.
This allows us to:
1. Swap the local JSON file for Google Sheets (or anything else)
2. Use in-memory storage for testing
3. Keep the reconciliation engine decoupled from persistence

The interface is intentionally tiny - whole lists are read, modified in
memory and written back. The only extra is `save_many`, which lets a
backend that can commit several keys at once do so.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Any, Optional, Union
from uuid import UUID

from earnings_ledger.models.audit import AuditEvent


Scalar = Union[str, int, float]


class KeyValueStoreInterface(ABC):
    """
    Abstract interface for key-value persistence.

    Values are plain JSON-compatible data: lists of dicts for collections,
    strings or numbers for scalars.
    """

    supports_atomic_writes: bool = False

    @abstractmethod
    def load_list(self, key: str) -> list:
        """
        Load a list stored under `key`.

        Returns:
            The stored list, or an empty list if the key is absent

        Raises:
            StorageError: If the read fails
            CorruptDataError: If the stored value is not a list
        """
        pass

    @abstractmethod
    def save_list(self, key: str, records: list) -> bool:
        """
        Replace the list stored under `key`.

        Returns:
            True if saved successfully

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    def load_scalar(self, key: str) -> Optional[Scalar]:
        """
        Load a scalar stored under `key`.

        Returns:
            The stored string/number, or None if absent
        """
        pass

    @abstractmethod
    def save_scalar(self, key: str, value: Scalar) -> bool:
        """
        Store a scalar under `key`.

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    def remove(self, key: str) -> bool:
        """
        Remove `key`.

        Returns:
            True if the key existed
        """
        pass

    def save_many(self, items: dict[str, Any]) -> bool:
        """
        Write several keys.

        The default writes them one by one, in the order given, so a
        failure part-way leaves the earlier keys written. Backends that
        can commit everything at once set `supports_atomic_writes` and
        override this.
        """
        for key, value in items.items():
            if isinstance(value, list):
                self.save_list(key, value)
            else:
                self.save_scalar(key, value)
        return True


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    def append_event(self, event: AuditEvent) -> bool:
        """Append an audit event to the log."""
        pass

    def append_events(self, events: list[AuditEvent]) -> bool:
        """Append several events in order. Backends may batch the write."""
        for event in events:
            self.append_event(event)
        return True

    @abstractmethod
    def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[dict]:
        """
        Get all events for a correlation ID (e.g., one record_earning call).

        Returns:
            Events in chronological order, as stored dicts
        """
        pass

    @abstractmethod
    def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: str,
    ) -> list[dict]:
        """Get all events for a specific entity, chronological."""
        pass

    @abstractmethod
    def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[dict]:
        """Get the most recent audit events (newest first)."""
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class ConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass


class CorruptDataError(StorageError):
    """A stored value could not be read as the expected shape."""
    pass


class SavingsPersistenceError(StorageError):
    """
    The earning records were saved but the savings balance was not.

    Only the savings write needs retrying; `pending_savings` is the value
    that should have been written.
    """

    def __init__(self, message: str, pending_savings: Decimal):
        super().__init__(message)
        self.pending_savings = pending_savings
