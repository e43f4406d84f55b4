"""Backend selection from settings."""

from typing import Optional

from earnings_ledger.config import LedgerSettings, StorageBackend, get_settings
from earnings_ledger.services.storage.interface import KeyValueStoreInterface
from earnings_ledger.services.storage.json_file import JsonFileKeyValueStore
from earnings_ledger.services.storage.memory import InMemoryKeyValueStore


def create_store(settings: Optional[LedgerSettings] = None) -> KeyValueStoreInterface:
    """
    Build the key-value store named by EARNINGS_STORAGE_BACKEND.

    The Google Sheets backend is imported lazily so the gspread stack is
    only loaded when it is actually selected.
    """
    settings = settings or get_settings().ledger

    if settings.storage_backend == StorageBackend.MEMORY:
        return InMemoryKeyValueStore()
    if settings.storage_backend == StorageBackend.GOOGLE_SHEETS:
        from earnings_ledger.services.storage.google_sheets import (
            GoogleSheetsKeyValueStore,
        )
        return GoogleSheetsKeyValueStore()
    return JsonFileKeyValueStore(settings.json_store_path)
