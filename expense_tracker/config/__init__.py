"""Configuration package."""

from expense_tracker.config.settings import (
    DashboardSettings,
    Settings,
    StoreApiSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "DashboardSettings",
    "Settings",
    "StoreApiSettings",
    "get_settings",
    "validate_all_settings",
]
