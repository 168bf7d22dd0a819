"""
Tests for environment-driven configuration.
"""

import pytest

from pydantic import ValidationError

from finplan.config import (
    AnalyticsSettings,
    AppSettings,
    ForecastSettings,
    GoalSettings,
    validate_all_settings,
)


class TestSettings:
    """Tests for defaults and environment overrides."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("FINPLAN_ANALYTICS_MONTHS_BACK", raising=False)
        assert AnalyticsSettings().months_back == 6
        assert ForecastSettings().fire_withdrawal_rate == 0.04
        assert GoalSettings().on_track_tolerance == 0.9

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("FINPLAN_ANALYTICS_MONTHS_BACK", "12")
        monkeypatch.setenv("FINPLAN_FORECAST_PROJECTION_MONTHS", "24")
        assert AnalyticsSettings().months_back == 12
        assert ForecastSettings().projection_months == 24

    def test_invalid_env_value_rejected(self, monkeypatch):
        monkeypatch.setenv("FINPLAN_GOALS_ON_TRACK_TOLERANCE", "1.5")
        with pytest.raises(ValidationError):
            GoalSettings()

    def test_log_level_normalized(self):
        assert AppSettings(log_level="debug").log_level == "DEBUG"
        with pytest.raises(ValidationError):
            AppSettings(log_level="chatty")

    def test_validate_all_settings(self):
        results = validate_all_settings()
        assert results["analytics"] is True
        assert results["forecast"] is True
