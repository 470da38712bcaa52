"""Configuration package."""

from income_tracker.config.settings import (
    AppSettings,
    ExportSettings,
    ImportSettings,
    LoggingSettings,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "ExportSettings",
    "ImportSettings",
    "LoggingSettings",
    "Settings",
    "get_settings",
    "validate_all_settings",
]
