from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping

import httpx

from bwload.errors import ConfigurationError

DEFAULT_SERVER_URL = "http://localhost:8080"
DEFAULT_CONCURRENCY = 10
DEFAULT_TOTAL_REQUESTS = 100
DEFAULT_PAYLOAD_SIZE = 1024
DEFAULT_TIMEOUT_SEC = 10.0


class RunMode(str, Enum):
    COUNT = "count"
    DURATION = "duration"


@dataclass(frozen=True, slots=True)
class TargetConfig:
    base_url: str = DEFAULT_SERVER_URL
    timeout_sec: float = DEFAULT_TIMEOUT_SEC
    headers: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.base_url:
            msg = "Server URL must not be empty"
            raise ConfigurationError(msg)
        try:
            url = httpx.URL(self.base_url)
        except httpx.InvalidURL as exc:
            msg = f"Invalid server URL {self.base_url!r}: {exc}"
            raise ConfigurationError(msg) from None
        if url.scheme not in ("http", "https") or not url.host:
            msg = f"Server URL must be an absolute http(s) URL, got {self.base_url!r}"
            raise ConfigurationError(msg)
        if not math.isfinite(self.timeout_sec) or self.timeout_sec <= 0:
            msg = f"Request timeout must be positive, got {self.timeout_sec}"
            raise ConfigurationError(msg)

    def url(self, path: str) -> str:
        return self.base_url.rstrip("/") + path


@dataclass(frozen=True, slots=True)
class LoadTestConfig:
    target: TargetConfig
    concurrency: int = DEFAULT_CONCURRENCY
    total_requests: int | None = None
    duration_sec: float | None = None
    payload_size: int = DEFAULT_PAYLOAD_SIZE

    def __post_init__(self) -> None:
        if self.concurrency < 1:
            msg = f"Concurrent requests must be a positive integer, got {self.concurrency}"
            raise ConfigurationError(msg)
        if self.payload_size < 1:
            msg = f"Payload size must be a positive integer, got {self.payload_size}"
            raise ConfigurationError(msg)
        if (self.total_requests is None) == (self.duration_sec is None):
            msg = "Exactly one of total_requests or duration_sec must be set"
            raise ConfigurationError(msg)
        if self.total_requests is not None and self.total_requests < 1:
            msg = f"Total requests must be a positive integer, got {self.total_requests}"
            raise ConfigurationError(msg)
        if self.duration_sec is not None and (
            not math.isfinite(self.duration_sec) or self.duration_sec <= 0
        ):
            msg = f"Test duration must be positive, got {self.duration_sec}"
            raise ConfigurationError(msg)

    @property
    def mode(self) -> RunMode:
        if self.duration_sec is not None:
            return RunMode.DURATION
        return RunMode.COUNT

    def to_metadata(self) -> Mapping[str, Any]:
        return {
            "server": self.target.base_url,
            "mode": self.mode.value,
            "concurrency": self.concurrency,
            "total_requests": self.total_requests,
            "duration_sec": self.duration_sec,
            "payload_size": self.payload_size,
            "timeout_sec": self.target.timeout_sec,
        }


def build_config(
    server_url: str = DEFAULT_SERVER_URL,
    concurrency: int | str = DEFAULT_CONCURRENCY,
    total_requests: int | str | None = DEFAULT_TOTAL_REQUESTS,
    payload_size: int | str = DEFAULT_PAYLOAD_SIZE,
    duration_sec: float | str | None = None,
    timeout_sec: float | str = DEFAULT_TIMEOUT_SEC,
) -> LoadTestConfig:
    """Build a validated config from raw (possibly textual) values.

    A duration, when given, takes precedence over the request count.
    """
    duration = _parse_float("duration", duration_sec) if duration_sec is not None else None
    if duration is not None:
        total = None
    else:
        total = _parse_int("requests", total_requests) if total_requests is not None else None
    target = TargetConfig(base_url=server_url, timeout_sec=_parse_float("timeout", timeout_sec))
    return LoadTestConfig(
        target=target,
        concurrency=_parse_int("concurrent", concurrency),
        total_requests=total,
        duration_sec=duration,
        payload_size=_parse_int("size", payload_size),
    )


def _parse_int(name: str, value: int | str) -> int:
    if isinstance(value, bool):
        msg = f"{name} must be an integer, got {value!r}"
        raise ConfigurationError(msg)
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        msg = f"{name} must be an integer, got {value!r}"
        raise ConfigurationError(msg) from None


def _parse_float(name: str, value: float | str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        msg = f"{name} must be a number, got {value!r}"
        raise ConfigurationError(msg) from None
    if not math.isfinite(number):
        msg = f"{name} must be a finite number, got {value!r}"
        raise ConfigurationError(msg)
    return number
