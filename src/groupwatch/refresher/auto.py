"""AutoRefresher - Re-runs a refresh on a fixed interval."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from groupwatch.config import DEFAULT_REFRESH_INTERVAL

logger = logging.getLogger("groupwatch.refresher.auto")


class AutoRefresher:
    """Timer that triggers a refresh every ``interval_seconds``.

    A tick that lands while a refresh is still in flight is skipped, not
    queued. ``stop()`` cancels the timer; a refresh already running is left
    to finish.
    """

    def __init__(
        self,
        refresh: Callable[[], Awaitable[object]],
        is_busy: Callable[[], bool],
        interval_seconds: float = DEFAULT_REFRESH_INTERVAL,
    ) -> None:
        """Initialize the AutoRefresher.

        Args:
            refresh: Coroutine function running one refresh.
            is_busy: Returns True while a refresh (manual or automatic) is running.
            interval_seconds: Seconds between ticks.
        """
        if interval_seconds <= 0:
            raise ValueError(f"Refresh interval must be positive, got {interval_seconds}")
        self._refresh = refresh
        self._is_busy = is_busy
        self.interval_seconds = interval_seconds
        self._timer: asyncio.Task[None] | None = None
        self._running_refresh: asyncio.Task[object] | None = None
        self.ticks = 0
        self.skipped = 0

    @property
    def running(self) -> bool:
        return self._timer is not None and not self._timer.done()

    def start(self) -> None:
        """Start (or restart) the timer. Must be called from a running event loop."""
        self.stop()
        self._timer = asyncio.get_running_loop().create_task(self._run())
        logger.info("Auto-refresh started (every %ss)", self.interval_seconds)

    def stop(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
            logger.info("Auto-refresh stopped")

    def set_interval(self, interval_seconds: float) -> None:
        """Change the interval, restarting the timer if it is running."""
        if interval_seconds <= 0:
            raise ValueError(f"Refresh interval must be positive, got {interval_seconds}")
        self.interval_seconds = interval_seconds
        if self.running:
            self.start()

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            self.ticks += 1
            if self._is_busy() or (
                self._running_refresh is not None and not self._running_refresh.done()
            ):
                self.skipped += 1
                logger.debug("Refresh still in flight, skipping tick %d", self.ticks)
                continue
            self._running_refresh = asyncio.create_task(self._tick())

    async def _tick(self) -> None:
        try:
            await self._refresh()
        except Exception:
            logger.exception("Auto-refresh failed")
