"""Configuration package."""

from earnings_ledger.config.settings import (
    GoogleSheetsSettings,
    LedgerSettings,
    Settings,
    StorageBackend,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "GoogleSheetsSettings",
    "LedgerSettings",
    "Settings",
    "StorageBackend",
    "get_settings",
    "validate_all_settings",
]
