from __future__ import annotations


class ConfigurationError(ValueError):
    """Invalid load test settings. Raised before any request is issued."""
