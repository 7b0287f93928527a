import pytest

from context_service.adapter.services.rate_limiter import InMemoryRateLimiter


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


@pytest.mark.asyncio
async def test_sliding_window_blocks_then_recovers():
    clock = FakeClock()
    limiter = InMemoryRateLimiter(clock=clock)

    for expected_remaining in (2, 1, 0):
        decision = await limiter.hit("viewers:1.2.3.4", 3, 60)
        assert decision.allowed
        assert decision.remaining == expected_remaining

    blocked = await limiter.hit("viewers:1.2.3.4", 3, 60)
    assert not blocked.allowed
    assert blocked.retry_after == 60

    clock.now += 61
    assert (await limiter.hit("viewers:1.2.3.4", 3, 60)).allowed


@pytest.mark.asyncio
async def test_keys_are_independent():
    limiter = InMemoryRateLimiter(clock=FakeClock())
    assert (await limiter.hit("files:a", 1, 60)).allowed
    assert not (await limiter.hit("files:a", 1, 60)).allowed
    assert (await limiter.hit("files:b", 1, 60)).allowed
