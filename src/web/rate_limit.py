"""
Fixed-window rate limiting.

Windows start at the first request for a key and last window_ms from there.
Counters live in process memory only and are lost on restart. Ended windows
are swept at most once per window length.
"""
import math
import threading
import time
from dataclasses import dataclass
from typing import Callable, Protocol


@dataclass
class RateLimitDecision:
    admitted: bool
    remaining: int
    reset_at_ms: int
    retry_after_s: int


class RateLimiter(Protocol):
    def check(self, key: str, limit: int, window_ms: int) -> RateLimitDecision:
        ...


def _now_ms() -> int:
    return int(time.time() * 1000)


class InMemoryRateLimiter:
    """Per-process fixed-window counter map."""

    def __init__(self, clock: Callable[[], int] = _now_ms):
        self._clock = clock
        self._windows: dict[str, list[int]] = {}  # key -> [count, reset_at_ms]
        self._next_sweep_ms = 0
        self._lock = threading.Lock()

    def _sweep(self, now: int) -> None:
        """Drop windows that have ended. Caller holds the lock."""
        expired = [key for key, (_, reset_at) in self._windows.items() if now >= reset_at]
        for key in expired:
            del self._windows[key]

    def check(self, key: str, limit: int, window_ms: int) -> RateLimitDecision:
        now = self._clock()
        with self._lock:
            # at most one sweep per window keeps the map bounded by live keys
            if now >= self._next_sweep_ms:
                self._sweep(now)
                self._next_sweep_ms = now + window_ms

            window = self._windows.get(key)
            if window is None or now >= window[1]:
                window = [1, now + window_ms]
                self._windows[key] = window
            else:
                window[0] += 1
            count, reset_at = window

        return RateLimitDecision(
            admitted=count <= limit,
            remaining=max(limit - count, 0),
            reset_at_ms=reset_at,
            retry_after_s=max(1, math.ceil((reset_at - now) / 1000)),
        )

    def __len__(self) -> int:
        with self._lock:
            return len(self._windows)
