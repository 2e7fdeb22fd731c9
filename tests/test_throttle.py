import pytest
from unittest.mock import AsyncMock

from app.core.throttle import FixedDelay, NoDelay, TokenBucket, default_create_throttle, default_upload_throttle


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now

    async def sleep(self, seconds):
        self.now += seconds


@pytest.mark.asyncio
async def test_fixed_delay_sleeps_every_call():
    sleep = AsyncMock()
    throttle = FixedDelay(0.2, sleep=sleep)

    await throttle.wait()
    await throttle.wait()

    assert sleep.await_count == 2
    sleep.assert_awaited_with(0.2)


@pytest.mark.asyncio
async def test_fixed_delay_of_zero_does_not_sleep():
    sleep = AsyncMock()
    await FixedDelay(0, sleep=sleep).wait()
    sleep.assert_not_awaited()


def test_fixed_delay_rejects_negative():
    with pytest.raises(ValueError):
        FixedDelay(-1)


@pytest.mark.asyncio
async def test_no_delay_counts_calls():
    throttle = NoDelay()
    await throttle.wait()
    await throttle.wait()
    assert throttle.calls == 2


@pytest.mark.asyncio
async def test_token_bucket_allows_burst_then_paces():
    clock = FakeClock()
    bucket = TokenBucket(rate=5, capacity=2, clock=clock, sleep=clock.sleep)

    await bucket.wait()
    await bucket.wait()
    assert clock.now == 0.0

    await bucket.wait()
    assert clock.now == pytest.approx(0.2)
    await bucket.wait()
    assert clock.now == pytest.approx(0.4)


@pytest.mark.asyncio
async def test_token_bucket_refills_while_idle():
    clock = FakeClock()
    bucket = TokenBucket(rate=1, capacity=1, clock=clock, sleep=clock.sleep)

    await bucket.wait()
    clock.now += 5
    await bucket.wait()

    assert clock.now == 5


def test_token_bucket_rejects_bad_settings():
    with pytest.raises(ValueError):
        TokenBucket(rate=0)
    with pytest.raises(ValueError):
        TokenBucket(rate=1, capacity=0)


def test_default_throttles_use_configured_delays():
    assert default_create_throttle(200).seconds == pytest.approx(0.2)
    assert default_upload_throttle(300).seconds == pytest.approx(0.3)
