"""
Interval scheduler for check cycles.

The scheduler is driven by ticks, the way a UI repaint timer would drive it.
On every tick it triggers a cycle if automatic checks are enabled and the
check interval has elapsed since the last check. Explicit "check now"
requests reuse the same trigger and reset the interval.
"""

import asyncio
import logging
import time
from asyncio import Task
from typing import Callable, Optional

from .config.constants import DEFAULT_CHECK_INTERVAL, DEFAULT_TICK_INTERVAL
from .orchestrator import CheckOrchestrator

# Module logger
logger = logging.getLogger(__name__)


class CheckScheduler:
    """Fires the orchestrator on a fixed interval and on explicit request."""

    def __init__(
        self,
        orchestrator: CheckOrchestrator,
        check_interval: float = DEFAULT_CHECK_INTERVAL,
        auto_check_enabled: bool = True,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if check_interval <= 0:
            raise ValueError("check_interval must be a positive number.")

        self._orchestrator: CheckOrchestrator = orchestrator
        self._check_interval: float = check_interval
        self._clock: Callable[[], float] = clock
        self._is_running: bool = False
        self.auto_check_enabled: bool = auto_check_enabled
        self.last_check_timestamp: float = clock()

    @property
    def check_interval(self) -> float:
        return self._check_interval

    def set_auto_check(self, enabled: bool) -> None:
        self.auto_check_enabled = enabled
        logger.info(f"Automatic checks {'enabled' if enabled else 'disabled'}.")

    def toggle_auto_check(self) -> bool:
        self.set_auto_check(not self.auto_check_enabled)
        return self.auto_check_enabled

    def seconds_since_last_check(self) -> float:
        return self._clock() - self.last_check_timestamp

    def seconds_until_next_check(self) -> Optional[float]:
        """Returns the time left before the next automatic check, or None when disabled."""
        if not self.auto_check_enabled:
            return None
        return max(0.0, self._check_interval - self.seconds_since_last_check())

    def tick(self, now: Optional[float] = None) -> Optional[Task]:
        """
        Triggers a check cycle if one is due.

        Args:
            now: The current clock reading; read from the clock when omitted.

        Returns:
            Optional[Task]: The cycle task if a cycle was triggered, else None.
        """
        if now is None:
            now = self._clock()
        if not self.auto_check_enabled or now - self.last_check_timestamp < self._check_interval:
            return None
        self.last_check_timestamp = now
        logger.debug("Check interval elapsed; triggering check cycle.")
        return self._orchestrator.trigger()

    def check_now(self) -> Task:
        """Triggers a check cycle immediately and restarts the interval."""
        self.last_check_timestamp = self._clock()
        logger.info("Manual check requested.")
        return self._orchestrator.trigger()

    async def run(self, tick_interval: float = DEFAULT_TICK_INTERVAL) -> None:
        """
        Ticks until stop() is called.

        Args:
            tick_interval: Seconds to sleep between ticks.
        """
        logger.info(
            f"Starting scheduler (interval: {self._check_interval}s, "
            f"auto check: {self.auto_check_enabled})..."
        )
        self._is_running = True
        while self._is_running:
            self.tick()
            await asyncio.sleep(tick_interval)
        logger.info("Scheduler stopped.")

    def stop(self) -> None:
        self._is_running = False
