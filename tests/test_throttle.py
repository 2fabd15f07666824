import pytest
from types import SimpleNamespace

from shopwatch.core.throttle import (
    FixedDelayThrottle,
    NoThrottle,
    ThrottleConfig,
    ThrottleStrategy,
    TokenBucketThrottle,
    create_throttle,
    throttle_from_settings,
)


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now


@pytest.fixture
def slept():
    return []


@pytest.fixture
def fake_sleep(slept):
    async def _sleep(delay):
        slept.append(delay)
    return _sleep


class TestFixedDelayThrottle:

    @pytest.mark.asyncio
    async def test_waits_fixed_delay(self, fake_sleep, slept):
        throttle = FixedDelayThrottle(5.0, sleep=fake_sleep)

        await throttle.wait()
        await throttle.wait()

        assert slept == [5.0, 5.0]
        assert throttle.waits == 2
        assert throttle.total_slept == 10.0

    @pytest.mark.asyncio
    async def test_zero_delay_never_sleeps(self, fake_sleep, slept):
        throttle = FixedDelayThrottle(0, sleep=fake_sleep)

        await throttle.wait()

        assert slept == []
        assert throttle.waits == 1

    def test_negative_delay_rejected(self):
        with pytest.raises(ValueError):
            FixedDelayThrottle(-1)


class TestTokenBucketThrottle:

    @pytest.mark.asyncio
    async def test_burst_then_paced(self, fake_sleep, slept):
        clock = FakeClock()
        throttle = TokenBucketThrottle(2.0, capacity=2, sleep=fake_sleep, clock=clock)

        await throttle.wait()
        await throttle.wait()
        await throttle.wait()

        assert slept == [2.0]

    @pytest.mark.asyncio
    async def test_refills_over_time(self, fake_sleep, slept):
        clock = FakeClock()
        throttle = TokenBucketThrottle(2.0, capacity=1, sleep=fake_sleep, clock=clock)

        await throttle.wait()
        clock.now += 1.0
        await throttle.wait()
        assert slept == [1.0]

        clock.now += 3.0  # the 1s wait plus a full interval
        await throttle.wait()
        assert slept == [1.0]

    def test_invalid_arguments(self):
        with pytest.raises(ValueError):
            TokenBucketThrottle(-1.0)
        with pytest.raises(ValueError):
            TokenBucketThrottle(1.0, capacity=0)


class TestThrottleFactory:

    @pytest.mark.asyncio
    async def test_no_throttle(self, fake_sleep, slept):
        throttle = create_throttle(ThrottleConfig(delay=5.0, strategy=ThrottleStrategy.NONE), sleep=fake_sleep)

        await throttle.wait()

        assert isinstance(throttle, NoThrottle)
        assert slept == []

    def test_from_settings(self):
        settings = SimpleNamespace(
            alerts_delay_seconds=3.0,
            alerts_throttle_strategy="token_bucket",
            alerts_throttle_burst=4,
        )

        throttle = throttle_from_settings(settings)

        assert isinstance(throttle, TokenBucketThrottle)
        assert throttle.interval == 3.0
        assert throttle.capacity == 4

    def test_default_is_fixed_delay(self):
        throttle = create_throttle(ThrottleConfig(delay=5.0))
        assert isinstance(throttle, FixedDelayThrottle)
        assert throttle.delay == 5.0
