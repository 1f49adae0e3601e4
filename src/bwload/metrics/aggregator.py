from __future__ import annotations

from typing import Iterable

import numpy as np

from bwload.metrics.models import AggregateStats, RequestOutcome

BYTES_PER_MEGABIT = 1024 * 1024 / 8


def aggregate(outcomes: Iterable[RequestOutcome], elapsed_sec: float) -> AggregateStats:
    total = 0
    successful = 0
    total_bytes = 0
    latencies: list[float] = []
    for outcome in outcomes:
        total += 1
        if not outcome.success:
            continue
        successful += 1
        total_bytes += outcome.bytes_received
        if outcome.transfer_time_sec > 0:
            latencies.append(outcome.transfer_time_sec)

    if latencies:
        times = np.asarray(latencies, dtype=float)
        avg_time = float(times.mean())
        min_time: float | None = float(times.min())
        max_time: float | None = float(times.max())
    else:
        avg_time = 0.0
        min_time = max_time = None

    if elapsed_sec > 0:
        requests_per_sec = successful / elapsed_sec
        bytes_per_sec = total_bytes / elapsed_sec
        mbps = bytes_per_sec / BYTES_PER_MEGABIT
    else:
        requests_per_sec = bytes_per_sec = mbps = 0.0

    return AggregateStats(
        total=total,
        successful=successful,
        failed=total - successful,
        total_bytes=total_bytes,
        elapsed_sec=elapsed_sec,
        avg_time=avg_time,
        min_time=min_time,
        max_time=max_time,
        requests_per_sec=requests_per_sec,
        bytes_per_sec=bytes_per_sec,
        mbps=mbps,
    )
