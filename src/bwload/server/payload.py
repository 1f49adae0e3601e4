from __future__ import annotations

import string

DEFAULT_PAYLOAD_SIZE = 1024

ALPHABET = (string.ascii_uppercase + string.ascii_lowercase + string.digits).encode("ascii")


def generate(size: int) -> bytes:
    """Return ``size`` bytes cycling through ``ALPHABET``; empty for ``size <= 0``."""
    if size <= 0:
        return b""
    repeats, remainder = divmod(size, len(ALPHABET))
    return ALPHABET * repeats + ALPHABET[:remainder]


def parse_size(raw: str | None, default: int = DEFAULT_PAYLOAD_SIZE) -> int:
    if raw is None or raw == "":
        return default
    try:
        size = int(raw)
    except ValueError:
        return default
    return size if size > 0 else default
