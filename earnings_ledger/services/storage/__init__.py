"""
Storage Services Package

Provides the abstract key-value interface and concrete implementations.
The local JSON file is the default backend; Google Sheets and in-memory
stores are swappable through settings.
"""

from earnings_ledger.services.storage.interface import (
    AuditStorageInterface,
    ConnectionError,
    CorruptDataError,
    KeyValueStoreInterface,
    NotFoundError,
    SavingsPersistenceError,
    StorageError,
)
from earnings_ledger.services.storage.memory import InMemoryKeyValueStore
from earnings_ledger.services.storage.json_file import JsonFileKeyValueStore
from earnings_ledger.services.storage.audit_storage import KeyValueAuditStorage
from earnings_ledger.services.storage.factory import create_store

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "KeyValueStoreInterface",
    # Exceptions
    "ConnectionError",
    "CorruptDataError",
    "NotFoundError",
    "SavingsPersistenceError",
    "StorageError",
    # Implementations
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueAuditStorage",
    "create_store",
]
