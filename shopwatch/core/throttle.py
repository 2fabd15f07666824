"""
Outbound pacing for the alert cycle.

The cycle talks to the shop API and the chat platform once per user; a
throttle sits between users so both stay under their rate limits. The
throttle is injected into the engine, so tests can run with `NoThrottle`.
"""

import asyncio
import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Optional

logger = logging.getLogger(__name__)

SleepFunc = Callable[[float], Awaitable[None]]
ClockFunc = Callable[[], float]


class ThrottleStrategy(Enum):
    """Pacing strategies"""
    FIXED_DELAY = "fixed_delay"
    TOKEN_BUCKET = "token_bucket"
    NONE = "none"


@dataclass
class ThrottleConfig:
    """Throttle configuration"""
    delay: float  # Seconds between two users
    strategy: ThrottleStrategy = ThrottleStrategy.FIXED_DELAY
    burst: int = 1  # Token bucket capacity


class Throttle(ABC):
    """Abstract pacer awaited between two units of work"""

    def __init__(self, sleep: Optional[SleepFunc] = None):
        self._sleep = sleep or asyncio.sleep
        self.waits = 0
        self.total_slept = 0.0

    @abstractmethod
    def next_delay(self) -> float:
        """Seconds to wait before the next unit of work may start"""
        pass

    async def wait(self) -> None:
        delay = self.next_delay()
        self.waits += 1
        if delay <= 0:
            return
        self.total_slept += delay
        await self._sleep(delay)


class NoThrottle(Throttle):
    """Never waits"""

    def next_delay(self) -> float:
        return 0.0


class FixedDelayThrottle(Throttle):
    """Waits the same delay every time"""

    def __init__(self, delay: float, sleep: Optional[SleepFunc] = None):
        super().__init__(sleep)
        if delay < 0:
            raise ValueError("delay must be >= 0")
        self.delay = delay

    def next_delay(self) -> float:
        return self.delay


class TokenBucketThrottle(Throttle):
    """Token bucket: one token per `interval` seconds, up to `capacity` tokens.

    A full bucket lets `capacity` users through back to back; after that the
    throttle waits until the next token is refilled.
    """

    def __init__(
        self,
        interval: float,
        capacity: int = 1,
        sleep: Optional[SleepFunc] = None,
        clock: Optional[ClockFunc] = None
    ):
        super().__init__(sleep)
        if interval < 0:
            raise ValueError("interval must be >= 0")
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        self.interval = interval
        self.capacity = capacity
        self._clock = clock or time.monotonic
        self._tokens = float(capacity)
        self._last_refill = self._clock()

    def _refill(self) -> None:
        now = self._clock()
        if self.interval == 0:
            self._tokens = float(self.capacity)
        else:
            elapsed = max(0.0, now - self._last_refill)
            self._tokens = min(float(self.capacity), self._tokens + elapsed / self.interval)
        self._last_refill = max(now, self._last_refill)

    def next_delay(self) -> float:
        self._refill()
        if self._tokens >= 1:
            self._tokens -= 1
            return 0.0
        # Wait for the missing fraction of a token, which is then consumed
        delay = (1 - self._tokens) * self.interval
        self._tokens = 0.0
        self._last_refill = self._clock() + delay
        return delay


def create_throttle(config: ThrottleConfig, sleep: Optional[SleepFunc] = None) -> Throttle:
    """Build a throttle from configuration"""
    if config.strategy == ThrottleStrategy.NONE:
        return NoThrottle(sleep)
    if config.strategy == ThrottleStrategy.TOKEN_BUCKET:
        return TokenBucketThrottle(config.delay, capacity=config.burst, sleep=sleep)
    return FixedDelayThrottle(config.delay, sleep=sleep)


def throttle_from_settings(settings, sleep: Optional[SleepFunc] = None) -> Throttle:
    """Build the cycle throttle from application settings"""
    config = ThrottleConfig(
        delay=settings.alerts_delay_seconds,
        strategy=ThrottleStrategy(settings.alerts_throttle_strategy),
        burst=settings.alerts_throttle_burst,
    )
    logger.debug("Alert throttle: %s delay=%.2fs burst=%d", config.strategy.value, config.delay, config.burst)
    return create_throttle(config, sleep=sleep)
