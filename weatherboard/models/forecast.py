"""Provider forecast data models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ForecastPoint:
    timestamp: int  # unix seconds
    condition_code: int
    condition_description: str
    temperature_c: float
    humidity_pct: int
    wind_speed_ms: float


@dataclass(frozen=True)
class ForecastBundle:
    location: str
    points: tuple[ForecastPoint, ...]
    fetched_at: str

    @property
    def current(self) -> ForecastPoint:
        return self.points[0]
