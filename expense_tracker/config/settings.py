"""
Configuration Management for Expense Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The dashboard talks to exactly one external service (the expense REST API),
so the settings are split into the API connection and the dashboard defaults.
"""

from decimal import Decimal
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StoreApiSettings(BaseSettings):
    """Expense REST API configuration."""

    model_config = SettingsConfigDict(
        env_prefix="EXPENSE_API_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    base_url: str = Field(
        default="http://localhost:5000/api",
        description="Base URL of the expense API (without /expenses)"
    )
    timeout_seconds: float = Field(
        default=10.0,
        ge=1.0,
        le=120.0,
        description="Per-request timeout in seconds"
    )
    health_check_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts made by the connection status check"
    )

    @field_validator('base_url')
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalise the base URL so paths can be joined with a single slash."""
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"Expense API URL must start with http:// or https://: {v}")
        return v.rstrip("/")


class DashboardSettings(BaseSettings):
    """
    Dashboard defaults.

    These seed the per-session DashboardState. The user can change
    budget, currency and theme from the Settings tab at runtime.
    """

    model_config = SettingsConfigDict(
        env_prefix="DASHBOARD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    default_budget: Decimal = Field(
        default=Decimal("50000"),
        description="Monthly budget ceiling shown on first load"
    )
    default_currency: str = Field(
        default="INR",
        description="Currency code used for display (INR, USD, EUR, GBP)"
    )
    recent_limit: int = Field(
        default=5,
        ge=1,
        le=50,
        description="How many records the 'Recent Expenses' card shows"
    )
    notification_seconds: int = Field(
        default=3,
        ge=1,
        le=30,
        description="How long a transient notification stays visible"
    )
    notifications_enabled: bool = Field(
        default=True,
        description="Show transient notifications after store operations"
    )
    dark_mode: bool = Field(
        default=False,
        description="Start in dark mode"
    )
    average_daily_days: int = Field(
        default=30,
        ge=1,
        description="Divisor used for the 'Average Daily Spend' insight"
    )

    @field_validator('default_currency')
    @classmethod
    def upper_currency(cls, v: str) -> str:
        return v.strip().upper()


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

    # Loaded lazily so a bad dashboard value doesn't hide API problems

    @property
    def store_api(self) -> StoreApiSettings:
        return StoreApiSettings()

    @property
    def dashboard(self) -> DashboardSettings:
        return DashboardSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}.
    Error messages are stored under "<setting_name>_error".
    """
    results = {}

    settings = get_settings()

    try:
        _ = settings.store_api
        results["store_api"] = True
    except Exception as e:
        results["store_api"] = False
        results["store_api_error"] = str(e)

    try:
        _ = settings.dashboard
        results["dashboard"] = True
    except Exception as e:
        results["dashboard"] = False
        results["dashboard_error"] = str(e)

    return results
