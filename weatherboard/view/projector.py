"""Projection of forecast bundles into display models.

Everything here is pure: no network, no storage, no clock.
"""

from datetime import UTC, datetime
from zoneinfo import ZoneInfo

from weatherboard.config.schema import DisplayConfig
from weatherboard.models.common import UnitPreference
from weatherboard.models.display import (
    CurrentConditions,
    DisplayModel,
    DisplayState,
    ForecastEntry,
    IconCategory,
)
from weatherboard.models.forecast import ForecastBundle
from weatherboard.models.snapshot import FetchFailure, FetchSuccess, RefreshSnapshot

DEFAULT_DISPLAY = DisplayConfig()


def icon_category(condition_code: int) -> IconCategory:
    """Map a provider condition code to an icon category.

    Total over all integers; anything outside the known groups is FOG.
    """
    if 200 <= condition_code < 300:
        return IconCategory.THUNDERSTORM
    if 300 <= condition_code < 500:
        return IconCategory.DRIZZLE
    if 500 <= condition_code < 600:
        return IconCategory.RAIN
    if 600 <= condition_code < 700:
        return IconCategory.SNOW
    if condition_code == 800:
        return IconCategory.CLEAR
    if condition_code > 800:
        return IconCategory.CLOUD
    return IconCategory.FOG


def celsius_to_fahrenheit(c: float) -> float:
    return c * 9 / 5 + 32


def fahrenheit_to_celsius(f: float) -> float:
    return (f - 32) * 5 / 9


def convert_temperature(celsius: float, unit: UnitPreference) -> float:
    if unit is UnitPreference.FAHRENHEIT:
        return celsius_to_fahrenheit(celsius)
    return celsius


def _format_ts(ts: int, fmt: str, tz: str) -> str:
    zone = UTC if tz.upper() == "UTC" else ZoneInfo(tz)
    return datetime.fromtimestamp(ts, zone).strftime(fmt)


def project(
    bundle: ForecastBundle,
    unit: UnitPreference,
    display: DisplayConfig = DEFAULT_DISPLAY,
) -> DisplayModel:
    """Build the ready-state display model for one bundle."""
    now = bundle.current
    current = CurrentConditions(
        icon=icon_category(now.condition_code),
        temperature=convert_temperature(now.temperature_c, unit),
        description=now.condition_description,
        humidity_pct=now.humidity_pct,
        wind_speed_ms=now.wind_speed_ms,
        updated_at=_format_ts(now.timestamp, display.datetime_format, display.timezone),
    )
    forecast = [
        ForecastEntry(
            date=_format_ts(p.timestamp, display.date_format, display.timezone),
            description=p.condition_description,
            temperature=convert_temperature(p.temperature_c, unit),
        )
        for p in bundle.points[: display.forecast_length]
    ]
    return DisplayModel(
        location=bundle.location,
        state=DisplayState.READY,
        unit=unit,
        current=current,
        forecast=forecast,
    )


def project_location(
    location: str,
    snapshot: RefreshSnapshot,
    unit: UnitPreference,
    display: DisplayConfig = DEFAULT_DISPLAY,
) -> DisplayModel:
    """Display model for one tracked location given the current snapshot.

    Loading wins over everything else, then a per-location error, then
    data; a location the snapshot knows nothing about has no data yet.
    """
    if snapshot.loading:
        return DisplayModel(location=location, state=DisplayState.LOADING, unit=unit)
    result = snapshot.get(location)
    if isinstance(result, FetchFailure):
        return DisplayModel(
            location=location, state=DisplayState.ERROR, unit=unit, error=result.reason
        )
    if isinstance(result, FetchSuccess):
        return project(result.bundle, unit, display)
    return DisplayModel(location=location, state=DisplayState.NO_DATA, unit=unit)
