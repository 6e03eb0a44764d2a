"""Restart loop with a failures-per-minute budget.

A run of the dispatch loop that ends because of a transport failure is
restarted until failures outpace the configured budget. The elapsed time
is floored at one minute so the first minute gets its full budget.
"""

import asyncio
import logging
import time
from typing import Awaitable, Callable

from .app import AppError
from .errors import TransportError

logger = logging.getLogger("sedbot.supervisor")


class Supervisor:
    """Runs ``run_once`` until it returns cleanly or the budget is spent."""

    def __init__(
        self,
        max_failures_per_minute: int = 30,
        restart_delay: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.max_failures_per_minute = max_failures_per_minute
        self.restart_delay = restart_delay
        self._clock = clock
        self._sleep = sleep
        self.failures = 0

    def budget_exceeded(self, elapsed: float) -> bool:
        """Whether ``self.failures`` is over budget after ``elapsed`` seconds."""
        minutes_basis = max(elapsed, 60.0)
        return self.failures * 60 > self.max_failures_per_minute * minutes_basis

    async def run(self, run_once: Callable[[], Awaitable[None]]) -> bool:
        """Supervise ``run_once``.

        Returns:
            True when a run ended cleanly, False when the failure budget
            was exhausted.
        """
        start = self._clock()
        while True:
            try:
                await run_once()
            except (AppError, TransportError) as e:
                self.failures += 1
                logger.error(f"Run failed ({type(e).__name__}): {e}", exc_info=e)
                if self.budget_exceeded(self._clock() - start):
                    logger.critical(
                        f"Exiting: {self.failures} failures exceed "
                        f"{self.max_failures_per_minute} per minute"
                    )
                    return False
                logger.warning(f"Restarting in {self.restart_delay}s (failure #{self.failures})...")
                await self._sleep(self.restart_delay)
                continue

            logger.info("Disconnected without errors.")
            return True
