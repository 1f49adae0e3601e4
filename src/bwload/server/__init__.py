from __future__ import annotations

from bwload.server.app import create_app
from bwload.server.counters import CounterSnapshot, ServerCounters
from bwload.server.payload import ALPHABET, DEFAULT_PAYLOAD_SIZE, generate, parse_size

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8080

__all__ = [
    "ALPHABET",
    "DEFAULT_HOST",
    "DEFAULT_PAYLOAD_SIZE",
    "DEFAULT_PORT",
    "CounterSnapshot",
    "ServerCounters",
    "create_app",
    "generate",
    "parse_size",
]
