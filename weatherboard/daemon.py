"""Watch daemon: keeps the dashboard refreshing and re-renders on every change.

Usage:
    python -m weatherboard watch
    python -m weatherboard watch --interval 60 --fahrenheit
    python -m weatherboard status
"""

import asyncio
import json
import logging
import os
import signal
import sys
from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path

from weatherboard.config.loader import require_api_key
from weatherboard.config.schema import DashboardConfig
from weatherboard.controller import DashboardController
from weatherboard.ingest.owm_client import OpenWeatherMapClient
from weatherboard.ingest.weather_fetcher import WeatherFetcher
from weatherboard.models.dashboard import DashboardState
from weatherboard.reporting.formatters import format_dashboard_text
from weatherboard.storage.kv_store import SqliteKeyValueStore
from weatherboard.storage.location_store import LocationStore

logger = logging.getLogger(__name__)

STATE_DIR = Path("data")
STATE_FILE = STATE_DIR / "watch_state.json"


class WatchDaemon:
    """Runs a DashboardController until SIGINT/SIGTERM."""

    def __init__(
        self,
        config: DashboardConfig,
        render: Callable[[str], None] | None = None,
    ):
        self.config = config
        self.render = render or _print_screen
        self._stop: asyncio.Event | None = None
        self._published = 0
        self._started_at: str | None = None
        self._last_cycle = 0

    def start(self) -> int:
        """Start the watch loop. Returns a process exit code."""
        api_key = require_api_key(self.config)
        self._started_at = datetime.now(UTC).isoformat()
        logger.info(
            "Watch started: interval=%.0fs pid=%d",
            self.config.refresh.interval_seconds, os.getpid(),
        )
        try:
            asyncio.run(self._run(api_key))
        except KeyboardInterrupt:
            logger.info("Watch interrupted by keyboard")
        finally:
            self._save_state()
        logger.info("Watch stopped after %d published snapshots", self._published)
        return 0

    async def _run(self, api_key: str) -> None:
        self._stop = asyncio.Event()
        self._setup_signals()

        kv = SqliteKeyValueStore(self.config.storage.db_path)
        store = LocationStore(kv, key=self.config.storage.key)
        client = OpenWeatherMapClient(
            api_key,
            forecast_url=self.config.provider.forecast_url,
            units=self.config.provider.units,
            timeout=self.config.provider.timeout_seconds,
        )
        controller = DashboardController(
            self.config, store, WeatherFetcher(client), on_change=self._on_change
        )
        try:
            controller.start()
            await self._stop.wait()
        finally:
            await controller.dispose()
            await client.aclose()
            kv.close()

    def stop(self) -> None:
        if self._stop is not None:
            self._stop.set()

    def _on_change(self, state: DashboardState) -> None:
        if state.snapshot.cycle != self._last_cycle and not state.loading:
            self._last_cycle = state.snapshot.cycle
            self._published += 1
            self._save_state()
        self.render(format_dashboard_text(state))

    def _setup_signals(self) -> None:
        """Handle SIGTERM and SIGINT for graceful shutdown."""
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGTERM, signal.SIGINT):
            try:
                loop.add_signal_handler(sig, self._on_signal, sig)
            except NotImplementedError:
                # Windows event loops lack signal handlers; Ctrl+C still raises
                pass

    def _on_signal(self, sig: signal.Signals) -> None:
        logger.info("Received %s, shutting down gracefully...", sig.name)
        self.stop()

    def _save_state(self) -> None:
        """Persist watch stats for status reporting."""
        state = {
            "pid": os.getpid(),
            "started_at": self._started_at,
            "interval": self.config.refresh.interval_seconds,
            "published_snapshots": self._published,
            "last_cycle": self._last_cycle,
            "last_update": datetime.now(UTC).isoformat(),
        }
        STATE_DIR.mkdir(parents=True, exist_ok=True)
        STATE_FILE.write_text(json.dumps(state, indent=2))


def _print_screen(text: str) -> None:
    if sys.stdout.isatty():
        sys.stdout.write("\x1b[2J\x1b[H")
    print(text, flush=True)


def watch_status() -> int:
    """Print watch status from the state file."""
    if not STATE_FILE.exists():
        print("No watch state found")
        return 1

    state = json.loads(STATE_FILE.read_text())
    print(f"  PID: {state.get('pid', '?')}")
    print(f"  Interval: {state.get('interval', '?')}s")
    print(f"  Started: {state.get('started_at', '?')}")
    print(f"  Published snapshots: {state.get('published_snapshots', 0)}")
    print(f"  Last cycle: {state.get('last_cycle', 0)}")
    print(f"  Last update: {state.get('last_update', '?')}")
    return 0
