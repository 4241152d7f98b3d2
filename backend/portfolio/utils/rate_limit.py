"""In-memory rate limiting for the public write endpoints."""

from __future__ import annotations

import threading
import time
from collections import defaultdict, deque

from fastapi import Request


def client_key(request: Request) -> str:
    """Limiter key for a request: client host plus path."""
    host = request.client.host if request.client else "unknown"
    return f"{host}:{request.url.path}"


class InMemoryRateLimiter:
    """Sliding-window limiter per key.

    Hits older than the window are dropped on each call, so a key regains
    capacity as its oldest hits age out. Keys whose hits have all aged out
    are swept at most once per window. State lives in this process only.
    """

    def __init__(self):
        self._hits: dict[str, deque] = defaultdict(deque)
        self._lock = threading.Lock()
        self._last_sweep = time.monotonic()

    def __len__(self) -> int:
        return len(self._hits)

    def allow(self, key: str, max_requests: int, window_seconds: int) -> tuple[bool, int]:
        """Record a hit for `key` and return `(allowed, retry_after_seconds)`."""
        if max_requests <= 0:
            return True, 0
        now = time.monotonic()
        cutoff = now - window_seconds
        with self._lock:
            if now - self._last_sweep >= window_seconds:
                self._sweep(cutoff)
                self._last_sweep = now
            hits = self._hits[key]
            while hits and hits[0] < cutoff:
                hits.popleft()
            if len(hits) >= max_requests:
                return False, max(1, int(window_seconds - (now - hits[0])))
            hits.append(now)
        return True, 0

    def _sweep(self, cutoff: float) -> None:
        # caller holds the lock
        stale = [key for key, hits in self._hits.items() if not hits or hits[-1] < cutoff]
        for key in stale:
            del self._hits[key]

    def reset(self) -> None:
        with self._lock:
            self._hits.clear()
