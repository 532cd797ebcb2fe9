from __future__ import annotations

import asyncio
import time
from collections import defaultdict, deque
from typing import Callable, Deque, Dict, Protocol

from ..config.schema import RateLimitConfig


class RateLimiter(Protocol):
    """Anything that can admit or reject a request for an identifier."""

    async def limit(self, identifier: str) -> bool:
        ...


class SlidingWindowRateLimiter:
    """In-memory sliding-window limiter: at most ``requests`` per ``window_seconds`` per identifier."""

    def __init__(
        self,
        requests: int,
        window_seconds: float,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.requests = requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._history: Dict[str, Deque[float]] = defaultdict(lambda: deque(maxlen=max(requests, 1)))
        self._lock = asyncio.Lock()

    @classmethod
    def from_config(cls, cfg: RateLimitConfig) -> "SlidingWindowRateLimiter":
        return cls(cfg.requests, cfg.window_seconds)

    async def limit(self, identifier: str) -> bool:
        async with self._lock:
            now = self._clock()
            self._evict_idle(now)
            window = self._history[identifier]
            while window and now - window[0] >= self.window_seconds:
                window.popleft()
            if len(window) >= self.requests:
                return False
            window.append(now)
            return True

    def _evict_idle(self, now: float) -> None:
        idle = [key for key, window in self._history.items() if not window or now - window[-1] >= self.window_seconds]
        for key in idle:
            del self._history[key]
