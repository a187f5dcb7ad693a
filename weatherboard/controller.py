"""Dashboard controller: owns tracked locations, the latest snapshot and units."""

import asyncio
import logging
from collections.abc import Callable

from weatherboard.config.schema import DashboardConfig
from weatherboard.errors import RejectReason
from weatherboard.ingest.staleness import is_snapshot_stale
from weatherboard.ingest.weather_fetcher import WeatherFetcher
from weatherboard.models.common import TrackedLocations, UnitPreference
from weatherboard.models.dashboard import DashboardState
from weatherboard.models.snapshot import RefreshSnapshot
from weatherboard.pipeline.orchestrator import FetchOrchestrator
from weatherboard.pipeline.refresh_timer import RefreshTimer
from weatherboard.storage.location_store import LocationStore, Rejected
from weatherboard.view.projector import project_location

logger = logging.getLogger(__name__)

NOTICES = {
    RejectReason.EMPTY_INPUT: "Please enter a valid city name.",
    RejectReason.DUPLICATE: "City already added.",
}

StateListener = Callable[[DashboardState], None]


class DashboardController:
    """Top-level state owner for the dashboard.

    Must be used from inside a running event loop: location changes
    schedule refresh cycles and (re)arm the refresh timer.
    """

    def __init__(
        self,
        config: DashboardConfig,
        store: LocationStore,
        fetcher: WeatherFetcher,
        on_change: StateListener | None = None,
    ):
        self.config = config
        self.store = store
        self.on_change = on_change
        self.orchestrator = FetchOrchestrator(fetcher, on_publish=self._on_snapshot)
        self.timer = RefreshTimer(config.refresh.interval_seconds, self.refresh)
        self.locations: TrackedLocations = store.load()
        self.unit: UnitPreference = config.display.unit
        self.notice: str | None = None
        self._cycles: set[asyncio.Task] = set()
        self._disposed = False

    # --- lifecycle ---

    def start(self) -> None:
        """Run the first cycle for persisted locations and arm the timer."""
        self._locations_changed(refetch=True)

    async def dispose(self) -> None:
        """Cancel the timer and any in-flight cycles."""
        self._disposed = True
        self.timer.cancel()
        for task in list(self._cycles):
            task.cancel()
        if self._cycles:
            await asyncio.gather(*self._cycles, return_exceptions=True)
        self._cycles.clear()

    async def wait_idle(self) -> None:
        """Wait until every cycle scheduled so far has settled."""
        while self._cycles:
            await asyncio.gather(*list(self._cycles), return_exceptions=True)

    # --- user operations ---

    def add_location(self, raw: str) -> Rejected | None:
        """Track a new location. Returns the rejection, if any."""
        outcome = self.store.add(self.locations, raw)
        if isinstance(outcome, Rejected):
            self.notice = NOTICES[outcome.reason]
            logger.info("Rejected location %r: %s", raw, outcome.reason.value)
            self._emit()
            return outcome

        self.notice = None
        self.locations = outcome
        self.store.save(self.locations)
        logger.info("Added location %s", self.locations[-1])
        self._locations_changed(refetch=True)
        return None

    def remove_location(self, identifier: str) -> None:
        updated = self.store.remove(self.locations, identifier)
        if updated == self.locations:
            return
        self.notice = None
        self.locations = updated
        self.store.save(self.locations)
        logger.info("Removed location %s", identifier)
        self._locations_changed(refetch=self.config.refresh.refresh_on_remove)

    def toggle_units(self) -> UnitPreference:
        self.unit = self.unit.toggled()
        self._emit()
        return self.unit

    def refresh(self) -> asyncio.Task | None:
        """Schedule a refresh cycle for the current locations."""
        if self._disposed:
            return None
        task = asyncio.get_running_loop().create_task(
            self.orchestrator.run_cycle(self.locations)
        )
        self._cycles.add(task)
        task.add_done_callback(self._cycle_done)
        return task

    # --- state ---

    @property
    def snapshot(self) -> RefreshSnapshot:
        return self.orchestrator.snapshot

    def state(self) -> DashboardState:
        """One consistent read of locations, snapshot and unit."""
        locations = self.locations
        snapshot = self.orchestrator.snapshot
        unit = self.unit
        stale = bool(locations) and is_snapshot_stale(
            snapshot.completed_at, self.config.refresh.stale_after_seconds
        )
        cards = tuple(
            project_location(loc, snapshot, unit, self.config.display)
            for loc in locations
        )
        return DashboardState(
            locations=locations,
            snapshot=snapshot,
            unit=unit,
            cards=cards,
            notice=self.notice,
            stale=stale,
            persisted=not self.store.degraded,
        )

    # --- internals ---

    def _locations_changed(self, refetch: bool) -> None:
        if self.locations:
            self.timer.start()
            if refetch:
                self.refresh()
        else:
            self.timer.cancel()
            # Empty set resolves immediately and supersedes anything in flight
            self.refresh()
        self._emit()

    def _on_snapshot(self, snapshot: RefreshSnapshot) -> None:
        self._emit()

    def _cycle_done(self, task: asyncio.Task) -> None:
        self._cycles.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("Refresh cycle crashed", exc_info=task.exception())

    def _emit(self) -> None:
        if self.on_change is not None:
            self.on_change(self.state())
