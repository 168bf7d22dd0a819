"""
Configuration Management for finplan

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All tunable thresholds live here.
The calculation modules take these values as plain arguments, so they stay
pure, while hosts can tune alert sensitivity or forecast length through the
environment or a .env file.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AnalyticsSettings(BaseSettings):
    """Thresholds for spending analytics."""

    model_config = SettingsConfigDict(
        env_prefix="FINPLAN_ANALYTICS_",
        extra="ignore"
    )

    months_back: int = Field(
        default=6,
        ge=1,
        le=60,
        description="Trailing window length in calendar months"
    )
    growth_threshold_pct: float = Field(
        default=10.0,
        ge=0.0,
        description="Trend (%) above which a category counts as growing"
    )
    inflation_threshold_pct: float = Field(
        default=20.0,
        ge=0.0,
        description="Trend (%) above which lifestyle inflation is flagged"
    )
    inflation_min_monthly: float = Field(
        default=50.0,
        ge=0.0,
        description="Minimum average monthly spend for an inflation alert"
    )
    top_categories_limit: int = Field(
        default=5,
        ge=1,
        le=50,
        description="Number of top spending categories to report"
    )


class ForecastSettings(BaseSettings):
    """Cash-flow projection and FIRE search configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FINPLAN_FORECAST_",
        extra="ignore"
    )

    projection_months: int = Field(
        default=12,
        ge=1,
        le=120,
        description="Number of months in a cash-flow projection"
    )
    fire_withdrawal_rate: float = Field(
        default=0.04,
        gt=0.0,
        le=1.0,
        description="Safe withdrawal rate used for the FIRE target (4% rule)"
    )
    fire_max_months: int = Field(
        default=600,
        ge=1,
        le=600,
        description="Upper bound for the years-to-FIRE search (50 years)"
    )


class GoalSettings(BaseSettings):
    """Goal tracking and reminder configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FINPLAN_GOALS_",
        extra="ignore"
    )

    on_track_tolerance: float = Field(
        default=0.9,
        gt=0.0,
        le=1.0,
        description="Share of expected progress a goal needs to count as on track"
    )
    cancellation_horizon_days: int = Field(
        default=30,
        ge=1,
        le=365,
        description="Look-ahead for subscription cancellation deadlines"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        description="Minimum level for local structured logs"
    )

    # Display
    currency: str = Field(
        default="EUR",
        min_length=3,
        max_length=3,
        description="ISO 4217 code of the amounts handled"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Only allow standard logging level names."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"Unsupported log level: {v}. Allowed: {allowed}")
        return v.upper()


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
    def analytics(self) -> AnalyticsSettings:
        return AnalyticsSettings()

    @property
    def forecast(self) -> ForecastSettings:
        return ForecastSettings()

    @property
    def goals(self) -> GoalSettings:
        return GoalSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


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
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    for name in ("analytics", "forecast", "goals", "app"):
        try:
            _ = getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
