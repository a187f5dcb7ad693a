"""Fetch results and refresh snapshots."""

from dataclasses import dataclass, field
from typing import TypeAlias

from weatherboard.models.forecast import ForecastBundle

FAILURE_MESSAGE = "Failed to load weather data for {location}"


@dataclass(frozen=True)
class FetchSuccess:
    location: str
    bundle: ForecastBundle


@dataclass(frozen=True)
class FetchFailure:
    location: str
    reason: str
    cause: str = ""

    @classmethod
    def for_location(cls, location: str, cause: str = "") -> "FetchFailure":
        return cls(location=location, reason=FAILURE_MESSAGE.format(location=location), cause=cause)


FetchResult: TypeAlias = FetchSuccess | FetchFailure


@dataclass(frozen=True)
class RefreshSnapshot:
    """Result of one completed refresh cycle.

    Snapshots are never merged; each cycle publishes a new one that
    replaces the previous snapshot wholesale.
    """

    results: dict[str, FetchResult] = field(default_factory=dict)
    loading: bool = False
    cycle: int = 0
    completed_at: str | None = None

    def get(self, location: str) -> FetchResult | None:
        return self.results.get(location)

    def successes(self) -> list[FetchSuccess]:
        return [r for r in self.results.values() if isinstance(r, FetchSuccess)]

    def failures(self) -> list[FetchFailure]:
        return [r for r in self.results.values() if isinstance(r, FetchFailure)]
