import asyncio
import time
from typing import Callable, Optional

from app.core.config import CREATE_DELAY_MS, UPLOAD_DELAY_MS


class Throttle:
    """Awaited after every remote write to stay under the backend's rate limit."""

    async def wait(self) -> None:
        raise NotImplementedError


class NoDelay(Throttle):
    """Never pauses. Used by tests and local runs against a self-hosted backend."""

    def __init__(self):
        self.calls = 0

    async def wait(self) -> None:
        self.calls += 1


class FixedDelay(Throttle):
    """Sleeps for a fixed number of seconds on every call."""

    def __init__(self, seconds: float, sleep: Callable = asyncio.sleep):
        if seconds < 0:
            raise ValueError("Delay must not be negative.")
        self.seconds = seconds
        self._sleep = sleep

    async def wait(self) -> None:
        if self.seconds:
            await self._sleep(self.seconds)


class TokenBucket(Throttle):
    """
    Allows bursts of up to `capacity` calls, then refills at `rate` tokens per second.
    wait() consumes one token, sleeping until one is available.
    """

    def __init__(
        self,
        rate: float,
        capacity: int = 1,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable = asyncio.sleep,
    ):
        if rate <= 0 or capacity < 1:
            raise ValueError("Token bucket needs a positive rate and a capacity of at least 1.")
        self.rate = rate
        self.capacity = capacity
        self._clock = clock
        self._sleep = sleep
        self._tokens = float(capacity)
        self._last = clock()

    def _refill(self) -> None:
        now = self._clock()
        self._tokens = min(self.capacity, self._tokens + (now - self._last) * self.rate)
        self._last = now

    async def wait(self) -> None:
        self._refill()
        if self._tokens < 1:
            await self._sleep((1 - self._tokens) / self.rate)
            self._refill()
        # Clock may not have advanced under a fake sleep; the token is owed either way
        self._tokens = max(self._tokens - 1, 0.0)


def default_create_throttle(delay_ms: Optional[int] = None) -> Throttle:
    return FixedDelay((CREATE_DELAY_MS if delay_ms is None else delay_ms) / 1000)


def default_upload_throttle(delay_ms: Optional[int] = None) -> Throttle:
    return FixedDelay((UPLOAD_DELAY_MS if delay_ms is None else delay_ms) / 1000)
