"""Configuration package."""

from fintrack.config.settings import (
    AppSettings,
    AuditSettings,
    InputSettings,
    LedgerSettings,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "AuditSettings",
    "InputSettings",
    "LedgerSettings",
    "Settings",
    "get_settings",
    "validate_all_settings",
]
