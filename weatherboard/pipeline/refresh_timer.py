"""Recurring refresh timer owned by the dashboard controller."""

import asyncio
import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)


class RefreshTimer:
    """Calls ``on_tick`` every ``interval`` seconds until cancelled.

    ``on_tick`` is synchronous and expected to schedule work rather than
    perform it, so a slow refresh never delays the next tick.
    """

    def __init__(self, interval: float, on_tick: Callable[[], object]):
        self.interval = interval
        self.on_tick = on_tick
        self.ticks = 0
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Arm the timer, restarting the period if it is already running."""
        self.cancel()
        self._task = asyncio.get_running_loop().create_task(self._loop())

    def cancel(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            self.ticks += 1
            logger.debug("Refresh timer tick #%d", self.ticks)
            try:
                self.on_tick()
            except Exception:
                logger.exception("Refresh timer callback failed")
