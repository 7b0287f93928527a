"""
Rate limiter backends.

``InMemoryRateLimiter`` keeps per-process state and is only consistent for
single-instance deployments. ``RedisRateLimiter`` shares the window across
instances using a sorted set per key (ZREMRANGEBYSCORE + ZADD + ZCARD).
"""

import logging
import math
import time
import uuid
from collections import deque
from typing import Deque, Dict

from redis.asyncio import Redis

from context_service.app.services.rate_limiter import IRateLimiter, RateLimitDecision

logger = logging.getLogger(__name__)

_MAX_TRACKED_KEYS = 10_000


class InMemoryRateLimiter(IRateLimiter):
    """Process-local sliding window; each key maps to a deque of hit times"""

    def __init__(self, clock=time.monotonic):
        self._clock = clock
        self._hits: Dict[str, Deque[float]] = {}

    async def hit(self, key: str, limit: int, window_seconds: int) -> RateLimitDecision:
        now = self._clock()
        window_start = now - window_seconds

        hits = self._hits.get(key)
        if hits is None:
            if len(self._hits) >= _MAX_TRACKED_KEYS:
                self._evict_idle(window_start)
            hits = self._hits.setdefault(key, deque())

        while hits and hits[0] <= window_start:
            hits.popleft()

        if len(hits) >= limit:
            retry_after = max(1, math.ceil(hits[0] + window_seconds - now))
            return RateLimitDecision(allowed=False, remaining=0, retry_after=retry_after)

        hits.append(now)
        return RateLimitDecision(allowed=True, remaining=limit - len(hits))

    def _evict_idle(self, window_start: float) -> None:
        idle = [key for key, hits in self._hits.items() if not hits or hits[-1] <= window_start]
        for key in idle:
            del self._hits[key]


class RedisRateLimiter(IRateLimiter):
    """Sliding window shared through Redis sorted sets"""

    def __init__(self, redis: Redis, prefix: str = "ratelimit"):
        self._redis = redis
        self._prefix = prefix

    @classmethod
    def from_url(cls, url: str) -> "RedisRateLimiter":
        return cls(Redis.from_url(url, decode_responses=True))

    async def hit(self, key: str, limit: int, window_seconds: int) -> RateLimitDecision:
        redis_key = f"{self._prefix}:{key}"
        now = time.time()
        window_start = now - window_seconds

        pipe = self._redis.pipeline()
        pipe.zremrangebyscore(redis_key, 0, window_start)
        pipe.zadd(redis_key, {f"{now}:{uuid.uuid4().hex}": now})
        pipe.zcard(redis_key)
        pipe.zrange(redis_key, 0, 0, withscores=True)
        pipe.expire(redis_key, window_seconds)
        _, _, count, oldest, _ = await pipe.execute()

        if count > limit:
            oldest_score = oldest[0][1] if oldest else now
            retry_after = max(1, math.ceil(oldest_score + window_seconds - now))
            return RateLimitDecision(allowed=False, remaining=0, retry_after=retry_after)

        return RateLimitDecision(allowed=True, remaining=limit - count)
