"""Pacing gate for sequential calls to rate-limited providers."""

import asyncio
import time
from collections.abc import Awaitable, Callable


class FixedIntervalGate:
    """
    Lets callers through no more often than once per interval.

    The first call passes immediately; later calls sleep until the interval
    since the previous release has elapsed. The interval is measured between
    releases, not from the end of the caller's work, so work that already
    takes longer than the interval is never delayed.
    """

    def __init__(
        self,
        interval_seconds: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self._interval = interval_seconds
        self._clock = clock
        self._sleep = sleep
        self._last_release: float | None = None
        self._lock = asyncio.Lock()

    async def wait(self) -> None:
        async with self._lock:
            if self._last_release is not None:
                remaining = self._interval - (self._clock() - self._last_release)
                if remaining > 0:
                    await self._sleep(remaining)
            self._last_release = self._clock()

    def reset(self) -> None:
        self._last_release = None
