from __future__ import annotations

from bwload.metrics.aggregator import aggregate
from bwload.metrics.models import (
    SUCCESS_STATUS,
    TRANSPORT_FAILURE_STATUS,
    AggregateStats,
    ErrorType,
    RequestOutcome,
    ServerStats,
)

__all__ = [
    "SUCCESS_STATUS",
    "TRANSPORT_FAILURE_STATUS",
    "AggregateStats",
    "ErrorType",
    "RequestOutcome",
    "ServerStats",
    "aggregate",
]
