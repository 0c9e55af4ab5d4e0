"""
Sliding-window limiter for registration submissions.
"""

import threading
import time
from collections import deque
from typing import Callable, Deque, Dict, Optional


class RateLimiter:
    """In-memory per-client sliding window"""

    def __init__(self, max_requests: int = 5, window_seconds: int = 300,
                 clock: Callable[[], float] = time.time):
        """
        Args:
            max_requests: Submissions allowed per window
            window_seconds: Window length in seconds
            clock: Time source, seconds since the epoch
        """
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._hits: Dict[str, Deque[float]] = {}
        self._last_sweep = clock()
        self._lock = threading.Lock()

    def _prune(self, client: str, now: float) -> Optional[Deque[float]]:
        """Drop expired hits; a client left with none is forgotten"""
        hits = self._hits.get(client)
        if hits is None:
            return None
        while hits and hits[0] <= now - self.window_seconds:
            hits.popleft()
        if not hits:
            del self._hits[client]
            return None
        return hits

    def _sweep(self, now: float) -> None:
        # Clients that never come back are only reached here
        if now - self._last_sweep < self.window_seconds:
            return
        for client in list(self._hits):
            self._prune(client, now)
        self._last_sweep = now

    def is_allowed(self, client: str) -> bool:
        """Record a hit for ``client`` if it is under the limit"""
        now = self._clock()
        with self._lock:
            self._sweep(now)
            hits = self._prune(client, now)
            if len(hits or ()) >= self.max_requests:
                return False
            self._hits.setdefault(client, deque()).append(now)
            return True

    def remaining(self, client: str) -> int:
        with self._lock:
            hits = self._prune(client, self._clock())
            return max(0, self.max_requests - len(hits or ()))

    def reset_time(self, client: str) -> float:
        """Epoch seconds when the oldest hit for ``client`` leaves the window"""
        now = self._clock()
        with self._lock:
            hits = self._prune(client, now)
            return hits[0] + self.window_seconds if hits else now

    def __len__(self) -> int:
        """Number of clients currently tracked"""
        with self._lock:
            return len(self._hits)
