"""
Per-client request limiting for /notify.

A fixed window per caller address: the counter and the window reset
together once the window has elapsed.
"""

import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict

from kai.voice_server.errors import RateLimitExceeded

RATE_LIMIT_WINDOW_SECONDS = 60.0
RATE_LIMIT_MAX_REQUESTS = 10


@dataclass
class RateLimitRecord:
    count: int
    reset_at: float


class RateLimiter:
    """Fixed-window counter keyed by client address"""

    def __init__(self, max_requests: int = RATE_LIMIT_MAX_REQUESTS,
                 window_seconds: float = RATE_LIMIT_WINDOW_SECONDS,
                 clock: Callable[[], float] = time.monotonic):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._records: Dict[str, RateLimitRecord] = {}
        self._lock = threading.Lock()

    def check(self, client: str) -> None:
        """
        Count one request for client.

        Raises:
            RateLimitExceeded: The client already hit its limit this window
        """
        now = self._clock()
        with self._lock:
            record = self._records.get(client)
            if record is None or now >= record.reset_at:
                self._records[client] = RateLimitRecord(count=1, reset_at=now + self.window_seconds)
                return
            if record.count >= self.max_requests:
                raise RateLimitExceeded(client, retry_after=record.reset_at - now)
            record.count += 1

    def remaining(self, client: str) -> int:
        now = self._clock()
        with self._lock:
            record = self._records.get(client)
            if record is None or now >= record.reset_at:
                return self.max_requests
            return max(0, self.max_requests - record.count)

    def reset(self) -> None:
        with self._lock:
            self._records.clear()
