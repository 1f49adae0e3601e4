from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Callable

BYTES_PER_MEGABIT = 1024 * 1024 / 8


@dataclass(frozen=True, slots=True)
class CounterSnapshot:
    total_requests: int
    total_bytes: int
    uptime_sec: float

    @property
    def requests_per_sec(self) -> float:
        if self.uptime_sec <= 0:
            return 0.0
        return self.total_requests / self.uptime_sec

    @property
    def bytes_per_sec(self) -> float:
        if self.uptime_sec <= 0:
            return 0.0
        return self.total_bytes / self.uptime_sec

    @property
    def megabits_per_sec(self) -> float:
        return self.bytes_per_sec / BYTES_PER_MEGABIT


class ServerCounters:
    """Request and byte totals shared by every handler of one server process.

    Each operation takes the lock on its own; a bandwidth response racing a
    reset may be counted in either epoch.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._requests = 0
        self._bytes = 0
        self._started = clock()

    def increment(self, nbytes: int) -> None:
        with self._lock:
            self._requests += 1
            self._bytes += nbytes

    def snapshot(self) -> CounterSnapshot:
        with self._lock:
            requests = self._requests
            nbytes = self._bytes
            started = self._started
        return CounterSnapshot(
            total_requests=requests,
            total_bytes=nbytes,
            uptime_sec=max(0.0, self._clock() - started),
        )

    def uptime(self) -> float:
        with self._lock:
            started = self._started
        return max(0.0, self._clock() - started)

    def reset_all(self) -> None:
        with self._lock:
            self._requests = 0
            self._bytes = 0
            self._started = self._clock()
