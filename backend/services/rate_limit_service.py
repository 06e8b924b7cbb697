"""
Rate Limit Service - sliding window limit for contact submissions.

Each caller address keeps the timestamps of its accepted submissions.
Timestamps that fell out of the trailing window are dropped whenever the
address is checked; there is no background sweep.

Note: storage is per process. With several instances behind a load
balancer every instance enforces its own limit.
"""

import math
import threading
import time
from collections.abc import Callable
from typing import Dict, List

from models.exceptions import RateLimitExceededException


class SubmissionRateLimiter:
    """Sliding window limiter with atomic check-and-record."""

    def __init__(
        self,
        limit: int,
        window_seconds: float,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.limit = limit
        self.window_seconds = window_seconds
        self._clock = clock
        self._buckets: Dict[str, List[float]] = {}
        self._lock = threading.Lock()

    def _recent(self, key: str, now: float) -> List[float]:
        window_start = now - self.window_seconds
        return [t for t in self._buckets.get(key, []) if t > window_start]

    def check_and_record(self, key: str) -> None:
        """
        Admit one submission for `key` or reject it.

        Pruning, counting and recording happen under one lock, so concurrent
        requests from the same address cannot push the bucket past the limit.

        Args:
            key: Caller address

        Raises:
            RateLimitExceededException: If the window is already full
        """
        with self._lock:
            now = self._clock()
            recent = self._recent(key, now)

            if len(recent) >= self.limit:
                self._buckets[key] = recent
                # Oldest entry leaving the window frees the next slot
                retry_after = max(1, math.ceil(recent[0] + self.window_seconds - now))
                raise RateLimitExceededException(retry_after=retry_after)

            recent.append(now)
            self._buckets[key] = recent

    def remaining(self, key: str) -> int:
        """Submissions `key` may still make in the current window."""
        with self._lock:
            return max(0, self.limit - len(self._recent(key, self._clock())))

    def reset(self, key: str | None = None) -> None:
        """Forget one address, or every address when `key` is None."""
        with self._lock:
            if key is None:
                self._buckets.clear()
            else:
                self._buckets.pop(key, None)
