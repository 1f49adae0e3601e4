from __future__ import annotations

from datetime import datetime
from pathlib import Path

from bwload.config import build_config
from bwload.metrics import AggregateStats
from bwload.report import to_key_values, write_report

REPORT_KEYS = [
    "total_requests",
    "successful_requests",
    "failed_requests",
    "test_duration",
    "requests_per_sec",
    "avg_response_time",
    "min_response_time",
    "max_response_time",
    "total_bytes",
    "bytes_per_sec",
    "bandwidth_mbps",
]


def _stats(min_time: float | None, max_time: float | None) -> AggregateStats:
    return AggregateStats(
        total=3,
        successful=2,
        failed=1,
        total_bytes=300,
        elapsed_sec=1.0,
        avg_time=0.15,
        min_time=min_time,
        max_time=max_time,
        requests_per_sec=2.0,
        bytes_per_sec=300.0,
        mbps=0.00229,
    )


def test_key_values_order_and_format() -> None:
    values = to_key_values(_stats(0.1, 0.2))
    assert list(values) == REPORT_KEYS
    assert values["total_requests"] == "3"
    assert values["successful_requests"] == "2"
    assert values["failed_requests"] == "1"
    assert values["min_response_time"] == "0.1000"
    assert values["max_response_time"] == "0.2000"
    assert values["total_bytes"] == "300"
    assert values["bytes_per_sec"] == "300"


def test_undefined_extremes() -> None:
    values = to_key_values(_stats(None, None))
    assert values["min_response_time"] == "n/a"
    assert values["max_response_time"] == "n/a"


def test_write_report(tmp_path: Path) -> None:
    config = build_config(concurrency=5, total_requests=3, payload_size=2048)
    path = tmp_path / "results.txt"
    write_report(path, config, _stats(0.1, 0.2), now=datetime(2024, 1, 2, 3, 4, 5))
    lines = path.read_text(encoding="utf-8").splitlines()
    assert lines[0] == "# Load Test Results - Tue Jan 02 03:04:05 2024"
    assert lines[1] == "# Configuration: 5 concurrent, 3 requests, 2048 bytes payload"
    assert lines[2] == ""
    assert [line.split("=", 1)[0] for line in lines[3:]] == REPORT_KEYS
