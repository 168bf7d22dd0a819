"""Configuration package."""

from finplan.config.settings import (
    AnalyticsSettings,
    AppSettings,
    ForecastSettings,
    GoalSettings,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AnalyticsSettings",
    "AppSettings",
    "ForecastSettings",
    "GoalSettings",
    "Settings",
    "get_settings",
    "validate_all_settings",
]
