from __future__ import annotations

from datetime import datetime
from pathlib import Path

from bwload.config import LoadTestConfig
from bwload.metrics import AggregateStats

UNDEFINED = "n/a"


def to_key_values(stats: AggregateStats) -> dict[str, str]:
    return {
        "total_requests": str(stats.total),
        "successful_requests": str(stats.successful),
        "failed_requests": str(stats.failed),
        "test_duration": f"{stats.elapsed_sec:.4f}",
        "requests_per_sec": f"{stats.requests_per_sec:.2f}",
        "avg_response_time": f"{stats.avg_time:.4f}",
        "min_response_time": _optional(stats.min_time),
        "max_response_time": _optional(stats.max_time),
        "total_bytes": str(stats.total_bytes),
        "bytes_per_sec": f"{stats.bytes_per_sec:.0f}",
        "bandwidth_mbps": f"{stats.mbps:.2f}",
    }


def write_report(
    path: Path,
    config: LoadTestConfig,
    stats: AggregateStats,
    now: datetime | None = None,
) -> None:
    stamp = (now or datetime.now()).strftime("%a %b %d %H:%M:%S %Y")
    lines = [
        f"# Load Test Results - {stamp}",
        (
            f"# Configuration: {config.concurrency} concurrent, {stats.total} requests, "
            f"{config.payload_size} bytes payload"
        ),
        "",
    ]
    lines.extend(f"{key}={value}" for key, value in to_key_values(stats).items())
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")


def _optional(value: float | None) -> str:
    if value is None:
        return UNDEFINED
    return f"{value:.4f}"
