"""Configuration package."""

from personal_ledger.config.settings import (
    AccountSettings,
    LoggingSettings,
    RateSettings,
    Settings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AccountSettings",
    "LoggingSettings",
    "RateSettings",
    "Settings",
    "StorageSettings",
    "get_settings",
    "validate_all_settings",
]
