import threading
import time
from math import ceil
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from config.settings import settings


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    remaining: int
    reset_in: float            # seconds until the current window ends

    @property
    def retry_after(self) -> int:
        return max(1, ceil(self.reset_in))


class RateLimiter(ABC):
    """Counter per key (client address). Implementations may be shared across processes."""

    @abstractmethod
    def hit(self, key: str) -> RateLimitDecision: ...

    @abstractmethod
    def reset(self) -> None: ...


class FixedWindowRateLimiter(RateLimiter):
    """
    In-process fixed window: the first hit opens a window of `window_seconds`,
    at most `limit` hits are allowed inside it, an expired window starts over.
    State lives in this process only.
    """

    def __init__(self, limit: int, window_seconds: float, clock: Callable[[], float] = time.monotonic):
        self.limit = limit
        self.window_seconds = window_seconds
        self.clock = clock
        self._windows: Dict[str, list] = {}      # key -> [count, reset_at]
        self._lock = threading.Lock()

    def hit(self, key: str) -> RateLimitDecision:
        now = self.clock()
        with self._lock:
            self._evict_expired(now)
            window = self._windows.get(key)
            if window is None:
                window = [0, now + self.window_seconds]
                self._windows[key] = window
            if window[0] >= self.limit:
                return RateLimitDecision(allowed=False, remaining=0, reset_in=window[1] - now)
            window[0] += 1
            return RateLimitDecision(allowed=True, remaining=self.limit - window[0], reset_in=window[1] - now)

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()

    def _evict_expired(self, now: float) -> None:
        expired = [k for k, (_, reset_at) in self._windows.items() if now >= reset_at]
        for k in expired:
            del self._windows[k]


_limiter: Optional[RateLimiter] = None


def get_rate_limiter() -> RateLimiter:
    """Process-wide limiter; override this dependency to plug in a shared backend."""
    global _limiter
    if _limiter is None:
        _limiter = FixedWindowRateLimiter(
            limit=settings.RATE_LIMIT_MAX,
            window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
        )
    return _limiter
