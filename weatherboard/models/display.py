"""Display-ready view models derived from forecast bundles."""

from dataclasses import dataclass, field
from enum import StrEnum

from weatherboard.models.common import UnitPreference


class IconCategory(StrEnum):
    THUNDERSTORM = "thunderstorm"
    DRIZZLE = "drizzle"
    RAIN = "rain"
    SNOW = "snow"
    CLEAR = "clear"
    CLOUD = "cloud"
    FOG = "fog"


class DisplayState(StrEnum):
    LOADING = "loading"
    ERROR = "error"
    NO_DATA = "no_data"
    READY = "ready"


@dataclass(frozen=True)
class CurrentConditions:
    icon: IconCategory
    temperature: float
    description: str
    humidity_pct: int
    wind_speed_ms: float
    updated_at: str  # full date-time


@dataclass(frozen=True)
class ForecastEntry:
    date: str  # calendar date
    description: str
    temperature: float


@dataclass(frozen=True)
class DisplayModel:
    location: str
    state: DisplayState
    unit: UnitPreference = UnitPreference.CELSIUS
    error: str | None = None
    current: CurrentConditions | None = None
    forecast: list[ForecastEntry] = field(default_factory=list)

    @property
    def unit_symbol(self) -> str:
        return f"°{self.unit.value}"
