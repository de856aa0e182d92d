"""Minimum-spacing rate limiter for outbound requests."""

import asyncio
import time
from typing import Awaitable, Callable, Optional


class RateLimiter:
    """Keep at least ``min_interval`` seconds between marked events."""

    def __init__(
        self,
        min_interval: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """Initialize rate limiter."""
        self.min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._last: Optional[float] = None

    async def wait(self) -> float:
        """Sleep until the interval since the last mark has elapsed.

        Returns:
            Seconds slept
        """
        if self._last is None or self.min_interval <= 0:
            return 0.0
        remaining = self.min_interval - (self._clock() - self._last)
        if remaining <= 0:
            return 0.0
        await self._sleep(remaining)
        return remaining

    def mark(self) -> None:
        """Record that an event happened now."""
        self._last = self._clock()

    async def acquire(self) -> float:
        """Wait for the interval, then mark."""
        slept = await self.wait()
        self.mark()
        return slept
