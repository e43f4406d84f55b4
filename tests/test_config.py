"""Tests for settings loading."""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from earnings_ledger.config import (
    LedgerSettings,
    StorageBackend,
    get_settings,
    validate_all_settings,
)


class TestLedgerSettings:
    """Tests for LedgerSettings."""

    def test_defaults(self, monkeypatch):
        """Test the default goal, backend and storage keys."""
        for name in ("EARNINGS_DAILY_GOAL", "EARNINGS_STORAGE_BACKEND"):
            monkeypatch.delenv(name, raising=False)
        settings = LedgerSettings(_env_file=None)
        assert settings.daily_goal == Decimal("28000")
        assert settings.storage_backend == StorageBackend.JSON
        assert settings.earnings_key == "taskmaster_earnings"
        assert settings.savings_key == "taskmaster_savings_jar"
        assert settings.leftover_surplus_to_savings is False

    def test_environment_override(self, monkeypatch):
        """Test EARNINGS_* variables are read."""
        monkeypatch.setenv("EARNINGS_DAILY_GOAL", "15000")
        monkeypatch.setenv("EARNINGS_STORAGE_BACKEND", "memory")
        monkeypatch.setenv("EARNINGS_LEFTOVER_SURPLUS_TO_SAVINGS", "true")
        settings = LedgerSettings(_env_file=None)
        assert settings.daily_goal == Decimal("15000")
        assert settings.storage_backend == StorageBackend.MEMORY
        assert settings.leftover_surplus_to_savings is True

    @pytest.mark.parametrize("goal", ["0", "-1"])
    def test_goal_must_be_positive(self, goal):
        """Test a non-positive goal is refused."""
        with pytest.raises(ValidationError):
            LedgerSettings(daily_goal=Decimal(goal), _env_file=None)


class TestValidateAllSettings:
    """Tests for validate_all_settings."""

    @pytest.fixture(autouse=True)
    def fresh_settings(self):
        get_settings.cache_clear()
        yield
        get_settings.cache_clear()

    def test_memory_backend_needs_nothing_else(self, monkeypatch):
        """Test Google Sheets settings are only checked when selected."""
        monkeypatch.setenv("EARNINGS_STORAGE_BACKEND", "memory")
        assert validate_all_settings() == {"ledger": True}

    def test_bad_ledger_settings_reported(self, monkeypatch):
        """Test an invalid goal is reported instead of raised."""
        monkeypatch.setenv("EARNINGS_DAILY_GOAL", "-5")
        results = validate_all_settings()
        assert results["ledger"] is False
        assert "ledger_error" in results

    def test_sheets_backend_requires_sheet_settings(self, monkeypatch):
        """Test a missing spreadsheet id is reported for the Sheets backend."""
        monkeypatch.setenv("EARNINGS_STORAGE_BACKEND", "google_sheets")
        monkeypatch.delenv("GOOGLE_SHEETS_CREDENTIALS_PATH", raising=False)
        monkeypatch.delenv("GOOGLE_SHEETS_SPREADSHEET_ID", raising=False)
        results = validate_all_settings()
        assert results["google_sheets"] is False
