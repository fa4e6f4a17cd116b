# backend/fitlog/rate_limit.py
import threading
import time
from typing import Callable, Dict, NamedTuple


class RateLimitStatus(NamedTuple):
    allowed: bool
    remaining: int
    reset_at: float


class RateLimiter:
    """Fixed-window attempt counter keyed by an identifier (in-process only)."""

    # expired windows are swept once this many keys are tracked
    PRUNE_THRESHOLD = 1000

    def __init__(self, max_attempts: int = 5, window_seconds: int = 15 * 60,
                 clock: Callable[[], float] = time.time):
        self.max_attempts = max_attempts
        self.window_seconds = window_seconds
        self._clock = clock
        self._entries: Dict[str, list] = {}
        self._lock = threading.Lock()

    def _live_entry(self, key: str, now: float):
        entry = self._entries.get(key)
        if entry and now >= entry[1]:
            del self._entries[key]
            return None
        return entry

    def _prune(self, now: float) -> None:
        for key in [k for k, (_, reset_at) in self._entries.items() if now >= reset_at]:
            del self._entries[key]

    def check(self, key: str) -> RateLimitStatus:
        now = self._clock()
        with self._lock:
            entry = self._live_entry(key, now)
            if entry is None:
                return RateLimitStatus(True, self.max_attempts - 1, now + self.window_seconds)
            count, reset_at = entry
            return RateLimitStatus(
                count < self.max_attempts,
                max(0, self.max_attempts - count - 1),
                reset_at,
            )

    def record(self, key: str) -> None:
        now = self._clock()
        with self._lock:
            entry = self._live_entry(key, now)
            if entry is None:
                if len(self._entries) >= self.PRUNE_THRESHOLD:
                    self._prune(now)
                self._entries[key] = [1, now + self.window_seconds]
            else:
                entry[0] += 1

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def reset(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)
