"""
Configuration Management for Daily Earnings Ledger

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The daily goal in particular is policy, not data: statistics use the
currently configured goal, while each record keeps the goal it was
created with.
"""

from decimal import Decimal
from enum import Enum
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageBackend(str, Enum):
    """Available key-value storage backends."""
    MEMORY = "memory"
    JSON = "json"
    GOOGLE_SHEETS = "google_sheets"


class GoogleSheetsSettings(BaseSettings):
    """Google Sheets storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GOOGLE_SHEETS_",
        extra="ignore"
    )

    credentials_path: str = Field(
        ...,
        description="Path to Google service account credentials JSON"
    )
    spreadsheet_id: str = Field(
        ...,
        description="ID of the Google Sheets spreadsheet to use"
    )
    store_sheet_name: str = Field(
        default="KeyValue",
        description="Name of the worksheet holding key/value rows"
    )

    @field_validator('credentials_path')
    @classmethod
    def validate_credentials_path(cls, v: str) -> str:
        """Warn if credentials file doesn't exist (but don't fail - might be mounted later)."""
        if not Path(v).exists():
            import warnings
            warnings.warn(
                f"Google credentials file not found at {v}. "
                "Make sure it exists before running the application."
            )
        return v


class LedgerSettings(BaseSettings):
    """
    Main ledger settings.

    Loads configuration from EARNINGS_* environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="EARNINGS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Goal policy
    daily_goal: Decimal = Field(
        default=Decimal("28000"),
        gt=0,
        description="Target earning amount per day"
    )
    currency_symbol: str = Field(
        default="₦",
        max_length=5,
        description="Symbol used in user-facing messages"
    )
    max_daily_amount: Decimal = Field(
        default=Decimal("10000000"),
        gt=0,
        description="Amount above which an entry is flagged as suspicious"
    )
    leftover_surplus_to_savings: bool = Field(
        default=False,
        description=(
            "Route surplus left after paying every debt day into savings. "
            "When False the leftover is dropped and flagged in the audit log."
        )
    )

    # Storage
    storage_backend: StorageBackend = Field(
        default=StorageBackend.JSON,
        description="Which key-value backend to use"
    )
    json_store_path: str = Field(
        default="earnings_ledger.json",
        description="File used by the JSON backend"
    )
    earnings_key: str = Field(default="taskmaster_earnings")
    expenses_key: str = Field(default="taskmaster_expenses")
    savings_key: str = Field(default="taskmaster_savings_jar")
    audit_key: str = Field(default="earnings_audit_log")
    audit_max_events: int = Field(
        default=1000,
        ge=10,
        description="Oldest audit events are dropped beyond this count"
    )


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Note: These are loaded lazily to allow partial configuration

    @property
    def ledger(self) -> LedgerSettings:
        return LedgerSettings()

    @property
    def google_sheets(self) -> GoogleSheetsSettings:
        return GoogleSheetsSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}.
    Google Sheets is only required when it is the selected backend.
    """
    results = {}

    settings = get_settings()

    try:
        ledger = settings.ledger
        results["ledger"] = True
    except Exception as e:
        results["ledger"] = False
        results["ledger_error"] = str(e)
        return results

    if ledger.storage_backend == StorageBackend.GOOGLE_SHEETS:
        try:
            _ = settings.google_sheets
            results["google_sheets"] = True
        except Exception as e:
            results["google_sheets"] = False
            results["google_sheets_error"] = str(e)

    return results
