"""
Fixed-window request limiter keyed by client identity.

Process-wide state shared by concurrent requests; every read-modify-write of
a client's window happens under one lock.
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict

logger = logging.getLogger(__name__)


@dataclass
class _Window:
    count: int
    reset_time: float


class RequestRateLimiter:
    """
    Allow at most `max_requests` per client within a `window_seconds` window.

    The window starts at the client's first request and is replaced by a new
    one once it expires.

    Example:
        >>> limiter = RequestRateLimiter(max_requests=2, window_seconds=60)
        >>> [limiter.allow("10.0.0.1") for _ in range(3)]
        [True, True, False]
    """

    def __init__(
        self,
        max_requests: int = 20,
        window_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.clock = clock
        self._windows: Dict[str, _Window] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings) -> "RequestRateLimiter":
        return cls(
            max_requests=settings.RATE_LIMIT_MAX_REQUESTS,
            window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
        )

    def allow(self, client_id: str) -> bool:
        """Count a request for `client_id`; False when over the limit."""
        now = self.clock()
        with self._lock:
            self._purge_expired(now)

            window = self._windows.get(client_id)
            if window is None:
                self._windows[client_id] = _Window(1, now + self.window_seconds)
                return True

            if window.count >= self.max_requests:
                logger.warning(f"Limite de requisições excedido para {client_id}")
                return False

            window.count += 1
            return True

    def _purge_expired(self, now: float):
        expired = [k for k, w in self._windows.items() if now > w.reset_time]
        for key in expired:
            del self._windows[key]
