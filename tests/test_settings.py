"""Tests for environment-driven configuration."""

import pytest
from decimal import Decimal
from pathlib import Path

from pydantic import ValidationError

from personal_ledger.config import (
    AccountSettings,
    LoggingSettings,
    RateSettings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Start every test from the built-in defaults."""
    for name in (
        "LEDGER_STORAGE_DATA_DIR",
        "LEDGER_STORAGE_AUDIT_LOG_ENABLED",
        "LEDGER_RATES_FD_ANNUAL_RATE",
        "LEDGER_RATES_SIP_ANNUAL_RATE",
        "LEDGER_ACCOUNT_MINIMUM_BALANCE",
        "LEDGER_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestDefaults:
    """Tests for default values."""

    def test_storage_defaults(self):
        """Test the per-user file layout."""
        settings = StorageSettings()
        assert settings.data_dir == Path(".")
        assert settings.data_file_for("alice") == Path("alice_finance_data.txt")
        assert settings.audit_file_for("alice") == Path("alice_audit.jsonl")
        assert settings.audit_log_enabled is False

    def test_rate_defaults(self):
        """Test the default annual rates."""
        settings = RateSettings()
        assert settings.fd_annual_rate == Decimal("0.071")
        assert settings.sip_annual_rate == Decimal("0.096")

    def test_account_defaults(self):
        """Test the default balance policy."""
        settings = AccountSettings()
        assert settings.initial_balance == Decimal("2000")
        assert settings.minimum_balance == Decimal("1000")

    def test_logging_defaults(self):
        """Test default log output."""
        settings = LoggingSettings()
        assert settings.level == "INFO"
        assert settings.json_output is True


class TestEnvironmentOverrides:
    """Tests for reading environment variables."""

    def test_data_dir_override(self, monkeypatch, tmp_path):
        """Test LEDGER_STORAGE_DATA_DIR."""
        monkeypatch.setenv("LEDGER_STORAGE_DATA_DIR", str(tmp_path))
        assert get_settings().storage.data_file_for("bob") == tmp_path / "bob_finance_data.txt"

    def test_sub_settings_read_env_on_access(self, monkeypatch):
        """Test that the cached root still sees later changes."""
        settings = get_settings()
        monkeypatch.setenv("LEDGER_RATES_FD_ANNUAL_RATE", "0.05")
        assert settings.rates.fd_annual_rate == Decimal("0.05")

    def test_log_level_is_normalized(self, monkeypatch):
        """Test case-insensitive log levels."""
        monkeypatch.setenv("LEDGER_LOG_LEVEL", " debug ")
        assert LoggingSettings().level == "DEBUG"

    def test_unknown_log_level(self, monkeypatch):
        """Test that an unknown level is rejected."""
        monkeypatch.setenv("LEDGER_LOG_LEVEL", "LOUD")
        with pytest.raises(ValidationError):
            LoggingSettings()

    def test_rate_out_of_range(self, monkeypatch):
        """Test that rates are bounded."""
        monkeypatch.setenv("LEDGER_RATES_SIP_ANNUAL_RATE", "7")
        with pytest.raises(ValidationError):
            RateSettings()


class TestUsernames:
    """Tests for mapping usernames to files."""

    @pytest.mark.parametrize("raw,expected", [
        ("alice", "alice"),
        ("  alice  ", "alice"),
        ("", "default"),
        ("   ", "default"),
        ("../etc/passwd", ".._etc_passwd"),
        ("a\\b", "a_b"),
        ("..", "__"),
        (".", "_"),
    ])
    def test_safe_username(self, raw, expected):
        """Test that names stay inside the data directory."""
        assert StorageSettings().safe_username(raw) == expected


class TestValidateAllSettings:
    """Tests for validate_all_settings()."""

    def test_all_valid(self):
        """Test a clean environment."""
        results = validate_all_settings()
        assert results == {"storage": True, "rates": True, "account": True, "logging": True}

    def test_reports_invalid_section(self, monkeypatch):
        """Test that one bad section is reported without raising."""
        monkeypatch.setenv("LEDGER_ACCOUNT_MINIMUM_BALANCE", "-1")
        results = validate_all_settings()
        assert results["account"] is False
        assert "account_error" in results
        assert results["storage"] is True


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
