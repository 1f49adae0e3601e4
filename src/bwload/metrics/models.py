from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

SUCCESS_STATUS = 200
# No HTTP exchange completed.
TRANSPORT_FAILURE_STATUS = 0


class ErrorType(str, Enum):
    TIMEOUT = "timeout"
    CONNECT = "connect"
    READ = "read"
    OTHER = "other"


@dataclass(frozen=True, slots=True)
class RequestOutcome:
    request_id: int
    status_code: int
    transfer_time_sec: float
    bytes_received: int
    wall_time_sec: float
    started_mono: float = 0.0
    error_type: ErrorType | None = None

    @property
    def success(self) -> bool:
        return self.status_code == SUCCESS_STATUS


@dataclass(frozen=True, slots=True)
class AggregateStats:
    total: int
    successful: int
    failed: int
    total_bytes: int
    elapsed_sec: float
    avg_time: float
    min_time: float | None
    max_time: float | None
    requests_per_sec: float
    bytes_per_sec: float
    mbps: float

    @property
    def success_rate(self) -> float:
        if self.total == 0:
            return 0.0
        return self.successful * 100.0 / self.total


@dataclass(frozen=True, slots=True)
class ServerStats:
    total_requests: int
    total_bytes: int
    uptime_seconds: float
    requests_per_second: float
    bytes_per_second: float
    mb_per_second: float
