"""
Launch control for the dispatcher.

This module provides the concurrency token pool that bounds how many
executions are in flight, and the fixed inter-launch delay.
"""

import asyncio
from typing import Optional
from dataclasses import dataclass

from .exceptions import ConfigError


@dataclass
class LaunchConfig:
    """Configuration for launch pacing and the concurrency ceiling."""
    max_concurrent: int = 5                 # Tokens in the pool
    interval: float = 0.0                   # Seconds to pause after each launch

    def __post_init__(self):
        if self.max_concurrent < 1:
            raise ConfigError(f"max_concurrent must be >= 1, got {self.max_concurrent}")
        if self.interval < 0:
            raise ConfigError(f"interval must be >= 0, got {self.interval}")


class TokenPool:
    """
    Fixed-size pool of concurrency tokens.

    Features:
    - Exactly max_concurrent tokens exist
    - acquire() suspends until a token is free
    - Tracks tokens in use and the highest count ever observed
    """

    def __init__(self, config: Optional[LaunchConfig] = None):
        self.config = config or LaunchConfig()
        self._semaphore = asyncio.Semaphore(self.config.max_concurrent)
        self._in_flight = 0
        self._peak_in_flight = 0

    @property
    def size(self) -> int:
        return self.config.max_concurrent

    @property
    def in_flight(self) -> int:
        """Number of tokens currently held."""
        return self._in_flight

    @property
    def peak_in_flight(self) -> int:
        """Highest number of tokens held at the same time."""
        return self._peak_in_flight

    @property
    def available(self) -> int:
        return self.size - self._in_flight

    async def acquire(self) -> None:
        """Wait until a token is free and take it."""
        await self._semaphore.acquire()
        self._in_flight += 1
        self._peak_in_flight = max(self._peak_in_flight, self._in_flight)

    def release(self) -> None:
        """Return a token to the pool."""
        if self._in_flight <= 0:
            raise RuntimeError("TokenPool released more tokens than were acquired")
        self._in_flight -= 1
        self._semaphore.release()

    async def __aenter__(self):
        await self.acquire()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.release()
        return False

    async def pace(self) -> None:
        """Sleep for the configured inter-launch interval, if any."""
        if self.config.interval > 0:
            await asyncio.sleep(self.config.interval)

