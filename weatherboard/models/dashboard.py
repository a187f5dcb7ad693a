"""Aggregate dashboard state exposed to the presentation layer."""

from dataclasses import dataclass

from weatherboard.models.common import TrackedLocations, UnitPreference
from weatherboard.models.display import DisplayModel
from weatherboard.models.snapshot import RefreshSnapshot


@dataclass(frozen=True)
class DashboardState:
    locations: TrackedLocations
    snapshot: RefreshSnapshot
    unit: UnitPreference
    cards: tuple[DisplayModel, ...] = ()
    notice: str | None = None
    stale: bool = False
    persisted: bool = True

    @property
    def loading(self) -> bool:
        return self.snapshot.loading
