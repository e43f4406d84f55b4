"""Services package."""

from earnings_ledger.services.storage import (
    AuditStorageInterface,
    ConnectionError,
    CorruptDataError,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueAuditStorage,
    KeyValueStoreInterface,
    NotFoundError,
    SavingsPersistenceError,
    StorageError,
    create_store,
)

__all__ = [
    "AuditStorageInterface",
    "ConnectionError",
    "CorruptDataError",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueAuditStorage",
    "KeyValueStoreInterface",
    "NotFoundError",
    "SavingsPersistenceError",
    "StorageError",
    "create_store",
]
