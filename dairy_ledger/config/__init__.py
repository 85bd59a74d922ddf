"""Configuration package."""

from dairy_ledger.config.settings import (
    AppSettings,
    BusinessSettings,
    Settings,
    StatementSettings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "BusinessSettings",
    "Settings",
    "StatementSettings",
    "StorageSettings",
    "get_settings",
    "validate_all_settings",
]
