"""Configuration package."""

from wallet.config.settings import (
    AppSettings,
    AuthSettings,
    Settings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "AuthSettings",
    "Settings",
    "StorageSettings",
    "get_settings",
    "validate_all_settings",
]
