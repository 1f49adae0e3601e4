from __future__ import annotations

import threading

from bwload.server import ServerCounters


def test_concurrent_increments_are_not_lost() -> None:
    counters = ServerCounters()
    threads = [
        threading.Thread(target=lambda: [counters.increment(3) for _ in range(1000)])
        for _ in range(8)
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    snapshot = counters.snapshot()
    assert snapshot.total_requests == 8000
    assert snapshot.total_bytes == 24000


def test_reset_restarts_uptime() -> None:
    now = [10.0]
    counters = ServerCounters(clock=lambda: now[0])
    counters.increment(100)
    now[0] = 14.0
    assert counters.uptime() == 4.0
    counters.reset_all()
    snapshot = counters.snapshot()
    assert (snapshot.total_requests, snapshot.total_bytes, snapshot.uptime_sec) == (0, 0, 0.0)
    assert snapshot.requests_per_sec == 0.0
    assert snapshot.megabits_per_sec == 0.0
