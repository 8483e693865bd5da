"""
Configuration Management for Personal Ledger

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The core itself only needs a per-user file path; everything else
(rates, balance policy, logging) is a tunable with a sensible default.
"""

from decimal import Decimal
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Where ledger files and audit trails live."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_STORAGE_",
        extra="ignore"
    )

    data_dir: Path = Field(
        default=Path("."),
        description="Directory holding per-user ledger files"
    )
    data_file_suffix: str = Field(
        default="_finance_data.txt",
        description="Suffix appended to the username to form the ledger file name"
    )
    default_username: str = Field(
        default="default",
        min_length=1,
        description="Username used when none is given"
    )
    audit_log_enabled: bool = Field(
        default=False,
        description="Persist audit events next to the ledger file"
    )
    audit_file_suffix: str = Field(
        default="_audit.jsonl",
        description="Suffix appended to the username to form the audit file name"
    )

    def safe_username(self, username: str) -> str:
        """Strip the name and keep it inside data_dir."""
        name = username.strip() if username else ""
        if not name:
            return self.default_username
        for sep in ("/", "\\"):
            name = name.replace(sep, "_")
        if name in (".", ".."):
            name = name.replace(".", "_")
        return name

    def data_file_for(self, username: str) -> Path:
        """Ledger file for a user."""
        return self.data_dir / f"{self.safe_username(username)}{self.data_file_suffix}"

    def audit_file_for(self, username: str) -> Path:
        """Audit trail file for a user."""
        return self.data_dir / f"{self.safe_username(username)}{self.audit_file_suffix}"


class RateSettings(BaseSettings):
    """Annual interest rates used for maturity projections."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_RATES_",
        extra="ignore"
    )

    fd_annual_rate: Decimal = Field(
        default=Decimal("0.071"),
        ge=0,
        le=1,
        description="Fixed deposit rate, compounded annually"
    )
    sip_annual_rate: Decimal = Field(
        default=Decimal("0.096"),
        ge=0,
        le=1,
        description="SIP rate on the principal leg, compounded monthly"
    )


class AccountSettings(BaseSettings):
    """Balance policy applied by the account session."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_ACCOUNT_",
        extra="ignore"
    )

    initial_balance: Decimal = Field(
        default=Decimal("2000"),
        description="Opening balance before the ledger file is replayed"
    )
    minimum_balance: Decimal = Field(
        default=Decimal("1000"),
        ge=0,
        description="Balance that expenditures and investments may not go below"
    )


class LoggingSettings(BaseSettings):
    """structlog output configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_LOG_",
        extra="ignore"
    )

    level: str = Field(
        default="INFO",
        description="Minimum log level"
    )
    json_output: bool = Field(
        default=True,
        description="Render JSON lines instead of console output"
    )

    @field_validator("level")
    @classmethod
    def normalize_level(cls, v: str) -> str:
        """Accept level names in any case."""
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


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

    # Sub-settings are loaded lazily to allow partial configuration

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def rates(self) -> RateSettings:
        return RateSettings()

    @property
    def account(self) -> AccountSettings:
        return AccountSettings()

    @property
    def logging(self) -> LoggingSettings:
        return LoggingSettings()


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

    Returns a dict of {setting_name: is_valid}, with a
    "<name>_error" entry for each failure.
    """
    results = {}

    settings = get_settings()

    for name in ("storage", "rates", "account", "logging"):
        try:
            getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
