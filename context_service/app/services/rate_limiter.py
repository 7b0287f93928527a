from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    remaining: int
    retry_after: int = 0


class IRateLimiter(ABC):
    """Sliding-window request counter keyed by an arbitrary string"""

    @abstractmethod
    async def hit(self, key: str, limit: int, window_seconds: int) -> RateLimitDecision:
        """Record one request for key and report whether it is within limit"""
        pass
