"""Tests for config schema validation."""

import pytest
from pydantic import ValidationError

from weatherboard.config.schema import (
    DashboardConfig,
    DisplayConfig,
    ProviderConfig,
    RefreshConfig,
)
from weatherboard.models.common import UnitPreference


class TestDefaults:
    def test_refresh_interval_is_five_minutes(self):
        assert RefreshConfig().interval_seconds == 300

    def test_provider_requests_metric(self):
        assert ProviderConfig().units == "metric"

    def test_display_defaults(self):
        d = DisplayConfig()
        assert d.unit == UnitPreference.CELSIUS
        assert d.forecast_length == 5

    def test_api_key_not_in_repr(self):
        assert "secret" not in repr(ProviderConfig(api_key="secret"))


class TestValidation:
    def test_non_positive_interval(self):
        with pytest.raises(ValidationError):
            RefreshConfig(interval_seconds=0)

    def test_forecast_length_bounds(self):
        with pytest.raises(ValidationError):
            DisplayConfig(forecast_length=0)

    def test_extra_forbidden(self):
        with pytest.raises(ValidationError):
            DashboardConfig(metrics={"enabled": True})

    def test_unit_from_string(self):
        assert DisplayConfig(unit="F").unit == UnitPreference.FAHRENHEIT

    def test_unknown_timezone_rejected(self):
        with pytest.raises(ValidationError):
            DisplayConfig(timezone="Mars/Base")

    def test_utc_accepted(self):
        assert DisplayConfig(timezone="UTC").timezone == "UTC"
