"""Pydantic v2 configuration schema with strict validation."""

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, Field, field_validator

from weatherboard.config.defaults import (
    DEFAULT_DB_PATH,
    DEFAULT_FORECAST_URL,
    DEFAULT_REFRESH_INTERVAL,
    DEFAULT_STORAGE_KEY,
)
from weatherboard.models.common import UnitPreference


class ProviderConfig(BaseModel):
    model_config = {"extra": "forbid"}

    forecast_url: str = DEFAULT_FORECAST_URL
    api_key: str = Field(default="", repr=False)
    units: str = "metric"  # always request the metric base, convert on display
    timeout_seconds: float = Field(default=10.0, gt=0.0)


class RefreshConfig(BaseModel):
    model_config = {"extra": "forbid"}

    interval_seconds: float = Field(default=DEFAULT_REFRESH_INTERVAL, gt=0.0)
    stale_after_seconds: float = Field(default=600.0, gt=0.0)
    refresh_on_remove: bool = True


class StorageConfig(BaseModel):
    model_config = {"extra": "forbid"}

    db_path: str = DEFAULT_DB_PATH
    key: str = DEFAULT_STORAGE_KEY


class DisplayConfig(BaseModel):
    model_config = {"extra": "forbid"}

    unit: UnitPreference = UnitPreference.CELSIUS
    forecast_length: int = Field(default=5, ge=1, le=40)
    timezone: str = "UTC"
    date_format: str = "%Y-%m-%d"
    datetime_format: str = "%Y-%m-%d %H:%M:%S"

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, v: str) -> str:
        if v.upper() == "UTC":
            return v
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"unknown timezone: {v!r}") from e
        return v


class DashboardConfig(BaseModel):
    model_config = {"extra": "forbid"}

    provider: ProviderConfig = ProviderConfig()
    refresh: RefreshConfig = RefreshConfig()
    storage: StorageConfig = StorageConfig()
    display: DisplayConfig = DisplayConfig()
