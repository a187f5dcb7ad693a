"""Fetch orchestrator: concurrent fan-out over all tracked locations."""

import asyncio
import dataclasses
import logging
import time
from collections.abc import Callable, Sequence

from weatherboard.ingest.weather_fetcher import WeatherFetcher
from weatherboard.models.common import utc_now_iso
from weatherboard.models.reporting import CycleSummary
from weatherboard.models.snapshot import FetchFailure, FetchResult, RefreshSnapshot
from weatherboard.reporting.cycle_summarizer import CycleSummarizer
from weatherboard.reporting.formatters import format_cycle_text

logger = logging.getLogger(__name__)

SnapshotListener = Callable[[RefreshSnapshot], None]


class FetchOrchestrator:
    """Runs refresh cycles and publishes whole snapshots.

    Cycles may overlap. Every cycle gets a generation number when it starts
    and only the most recently started cycle is allowed to publish; results
    of a superseded cycle are dropped once they settle.
    """

    def __init__(
        self,
        fetcher: WeatherFetcher,
        on_publish: SnapshotListener | None = None,
    ):
        self.fetcher = fetcher
        self.on_publish = on_publish
        self.snapshot = RefreshSnapshot()
        self.last_summary: CycleSummary | None = None
        self._generation = 0

    async def run_cycle(self, locations: Sequence[str]) -> RefreshSnapshot:
        """Fetch every location concurrently and return the assembled snapshot.

        The returned snapshot is the one this cycle built, even when a newer
        cycle has since superseded it and it was not published.
        """
        self._generation += 1
        generation = self._generation
        locations = list(dict.fromkeys(locations))

        if not locations:
            snapshot = RefreshSnapshot(
                results={}, loading=False, cycle=generation, completed_at=utc_now_iso()
            )
            self._publish(snapshot)
            return snapshot

        # Keep showing the previous results while this cycle runs
        self._publish(dataclasses.replace(self.snapshot, loading=True))

        start = time.monotonic()
        settled = await asyncio.gather(
            *(self.fetcher.fetch(loc) for loc in locations),
            return_exceptions=True,
        )

        results: dict[str, FetchResult] = {}
        for loc, outcome in zip(locations, settled):
            if isinstance(outcome, BaseException):
                if isinstance(outcome, asyncio.CancelledError):
                    raise outcome
                logger.error("Unexpected error fetching %s: %r", loc, outcome)
                outcome = FetchFailure.for_location(loc, f"unexpected:{type(outcome).__name__}")
            results[loc] = outcome

        snapshot = RefreshSnapshot(
            results=results, loading=False, cycle=generation, completed_at=utc_now_iso()
        )

        summarizer = CycleSummarizer(generation)
        summarizer.record_results(results)
        if generation != self._generation:
            summarizer.mark_discarded()
        self.last_summary = summarizer.finalize(time.monotonic() - start)
        logger.info("%s", format_cycle_text(self.last_summary))

        if generation == self._generation:
            self._publish(snapshot)
        return snapshot

    def _publish(self, snapshot: RefreshSnapshot) -> None:
        self.snapshot = snapshot
        if self.on_publish is not None:
            self.on_publish(snapshot)
