"""Per-client request rate limiting."""
from __future__ import annotations

import threading
import time
from collections import deque
from typing import Callable, Deque, Dict, Mapping, Optional, Protocol

from . import config


class RateLimitPolicy(Protocol):
    def allow(self, key: str) -> bool:
        ...


class NoRateLimit:
    """Policy used when rate limiting is not configured."""

    def allow(self, key: str) -> bool:
        return True


class SlidingWindowRateLimiter:
    """Allow at most ``limit`` calls per key within any ``window_seconds`` span."""

    def __init__(
        self,
        limit: int = config.RATE_LIMIT_REQUESTS,
        window_seconds: float = config.RATE_LIMIT_WINDOW_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if limit <= 0:
            raise ValueError("limit must be > 0")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be > 0")
        self.limit = int(limit)
        self.window_seconds = float(window_seconds)
        self.clock = clock
        self._hits: Dict[str, Deque[float]] = {}
        self._last_sweep = clock()
        self._lock = threading.Lock()

    @property
    def tracked_keys(self) -> int:
        with self._lock:
            return len(self._hits)

    def allow(self, key: str) -> bool:
        now = self.clock()
        cutoff = now - self.window_seconds
        with self._lock:
            if now - self._last_sweep >= self.window_seconds:
                self._sweep(cutoff)
                self._last_sweep = now
            hits = self._hits.setdefault(key, deque())
            _trim(hits, cutoff)
            if len(hits) >= self.limit:
                return False
            hits.append(now)
            return True

    def _sweep(self, cutoff: float) -> None:
        # Drop keys with no hits left in the window.
        for key in list(self._hits):
            hits = self._hits[key]
            _trim(hits, cutoff)
            if not hits:
                del self._hits[key]


def _trim(hits: Deque[float], cutoff: float) -> None:
    while hits and hits[0] <= cutoff:
        hits.popleft()


def build_rate_limiter() -> RateLimitPolicy:
    if not config.RATE_LIMIT_ENABLED:
        return NoRateLimit()
    return SlidingWindowRateLimiter(
        limit=config.RATE_LIMIT_REQUESTS,
        window_seconds=config.RATE_LIMIT_WINDOW_SECONDS,
    )


def client_key_from_headers(headers: Optional[Mapping[str, str]]) -> str:
    """Build the limiter key from proxy headers, first forwarded hop wins."""
    headers = {k.lower(): v for k, v in (headers or {}).items()}
    ip = ""
    forwarded = headers.get("x-forwarded-for")
    if forwarded:
        ip = forwarded.split(",")[0].strip()
    if not ip:
        ip = (headers.get("x-real-ip") or "").strip()
    return f"{config.RATE_LIMIT_KEY_PREFIX}:{ip or 'unknown'}"
