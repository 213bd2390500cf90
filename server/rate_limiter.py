"""Rate limit handling for API requests"""

import time
from collections import defaultdict, deque
from threading import Lock
from typing import Any, Deque, Dict, Optional, Tuple

from config import get_logger

logger = get_logger(__name__)


class InMemoryRateLimiter:
    """
    Sliding-window rate limiter keyed by hashed client IP.

    Process-local: limits reset on restart and are not shared between
    workers. The service keeps no database, so nothing is persisted.
    """

    def __init__(self, requests_limit: int = 100, window_seconds: int = 900):
        """
        Args:
            requests_limit: Maximum requests allowed in window
            window_seconds: Window length in seconds
        """
        self.requests_limit = requests_limit
        self.window_seconds = window_seconds
        self._hits: Dict[str, Deque[float]] = defaultdict(deque)
        self._lock = Lock()

        # Cleanup tracker - avoid sweeping idle clients on every request
        self._last_cleanup = time.monotonic()
        self._cleanup_interval = 300

    def check_rate_limit(
        self, client_key: str, now: Optional[float] = None
    ) -> Tuple[bool, int, Dict[str, Any]]:
        """Record a request and decide whether it is allowed

        Returns:
            (is_allowed, remaining, limit_info)
        """
        now = time.monotonic() if now is None else now
        cutoff = now - self.window_seconds

        with self._lock:
            hits = self._hits[client_key]
            while hits and hits[0] <= cutoff:
                hits.popleft()

            if len(hits) >= self.requests_limit:
                retry_after = int(hits[0] + self.window_seconds - now) + 1
                return False, 0, {
                    "limit": self.requests_limit,
                    "window_seconds": self.window_seconds,
                    "retry_after": max(retry_after, 1),
                }

            hits.append(now)
            remaining = self.requests_limit - len(hits)

            if now - self._last_cleanup > self._cleanup_interval:
                self._cleanup(cutoff)
                self._last_cleanup = now

        return True, remaining, {
            "limit": self.requests_limit,
            "window_seconds": self.window_seconds,
        }

    def _cleanup(self, cutoff: float) -> None:
        """Drop clients with no hits inside the window (caller holds the lock)"""
        stale = [key for key, hits in self._hits.items() if not hits or hits[-1] <= cutoff]
        for key in stale:
            del self._hits[key]
        if stale:
            logger.debug("rate limiter cleanup", removed_clients=len(stale))

    def reset(self) -> None:
        with self._lock:
            self._hits.clear()
