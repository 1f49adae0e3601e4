from __future__ import annotations

from bwload.config.models import (
    DEFAULT_CONCURRENCY,
    DEFAULT_PAYLOAD_SIZE,
    DEFAULT_SERVER_URL,
    DEFAULT_TIMEOUT_SEC,
    DEFAULT_TOTAL_REQUESTS,
    LoadTestConfig,
    RunMode,
    TargetConfig,
    build_config,
)

__all__ = [
    "DEFAULT_CONCURRENCY",
    "DEFAULT_PAYLOAD_SIZE",
    "DEFAULT_SERVER_URL",
    "DEFAULT_TIMEOUT_SEC",
    "DEFAULT_TOTAL_REQUESTS",
    "LoadTestConfig",
    "RunMode",
    "TargetConfig",
    "build_config",
]
