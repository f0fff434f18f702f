"""
In-memory rate limiting and client address helpers.
"""
from __future__ import annotations

import math
import threading
import time
from typing import Callable, Dict, Tuple


def client_ip(request) -> str:
    return request.client.host if request is not None and request.client else "unknown"


class RateLimiter:
    """
    Sliding-window limiter shared by every request in the process.
    Keys are free-form; callers use ``"<action>:<ip>"``.
    """

    def __init__(self, limit: int = 10, window_seconds: int = 900, clock: Callable[[], float] = time.time):
        self.limit = limit
        self.window_seconds = window_seconds
        self._clock = clock
        self._state: Dict[str, list[float]] = {}
        self._lock = threading.Lock()
        self._last_sweep = clock()

    def _sweep(self, window_start: float) -> None:
        """Drop every key whose attempts have all left the window. Caller holds the lock."""
        expired = [k for k, history in self._state.items() if not history or history[-1] <= window_start]
        for k in expired:
            del self._state[k]

    def allow_request_with_remaining(self, key: str) -> Tuple[bool, int, int]:
        """
        Record an attempt for ``key``.
        Returns (allowed, remaining_after, retry_after_seconds).
        """
        now = self._clock()
        window_start = now - self.window_seconds
        with self._lock:
            if now - self._last_sweep >= self.window_seconds:
                self._sweep(window_start)
                self._last_sweep = now

            history = [t for t in self._state.pop(key, []) if t > window_start]
            if len(history) >= self.limit:
                self._state[key] = history
                retry_after = max(1, math.ceil(history[0] + self.window_seconds - now))
                return False, 0, retry_after
            history.append(now)
            self._state[key] = history
            return True, max(0, self.limit - len(history)), 0

    def tracked_keys(self) -> int:
        with self._lock:
            return len(self._state)

    def allow_request(self, key: str) -> bool:
        allowed, _, _ = self.allow_request_with_remaining(key)
        return allowed

    def reset(self) -> None:
        with self._lock:
            self._state.clear()


__all__ = ["RateLimiter", "client_ip"]
