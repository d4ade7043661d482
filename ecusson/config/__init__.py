"""Configuration package."""

from ecusson.config.settings import (
    AppSettings,
    LedgerSettings,
    ReminderSettings,
    Settings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "LedgerSettings",
    "ReminderSettings",
    "Settings",
    "StorageSettings",
    "get_settings",
    "validate_all_settings",
]
