"""CAMPEX — Inter-request Rate Limiters."""

import asyncio
from abc import ABC, abstractmethod


class RateLimiter(ABC):
    """Gate awaited by the pagination driver after every processed page."""

    @abstractmethod
    async def wait(self) -> None:
        ...


class FixedIntervalRateLimiter(RateLimiter):
    """Sleep a fixed delay each time, regardless of API responses."""

    def __init__(self, delay_seconds: float):
        if delay_seconds < 0:
            raise ValueError("delay_seconds must be >= 0")
        self.delay_seconds = delay_seconds

    async def wait(self) -> None:
        await asyncio.sleep(self.delay_seconds)


class NoopRateLimiter(RateLimiter):
    """Never waits. Counts calls so tests can assert on them."""

    def __init__(self):
        self.calls = 0

    async def wait(self) -> None:
        self.calls += 1
