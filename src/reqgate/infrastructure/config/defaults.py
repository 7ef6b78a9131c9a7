"""Hardcoded default configuration values."""

from __future__ import annotations

from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {
    "app_name": "reqgate",
    "environment": "dev",
    "concurrency": {
        "max_concurrent": 5,
        "max_queue": 100,
        "timeout_ms": 30_000,
    },
    "http": {
        "base_url": "",
        "timeout_seconds": 30.0,
        "follow_redirects": True,
        "user_agent": "reqgate/0.1.0",
    },
    "logging": {
        "level": "INFO",
        "format": None,  # Derived from environment in schema.py
    },
}
