"""reqgate: bounded, queued and deadline-enforced outbound requests."""

from __future__ import annotations

from reqgate.domain.exceptions import (
    ConcurrencyError,
    QueueClearedError,
    QueueFullError,
    RequestTimeoutError,
)
from reqgate.infrastructure.concurrency import ConcurrencyController
from reqgate.infrastructure.http.request_client import RequestClient

__version__ = "0.1.0"

__all__ = [
    "ConcurrencyController",
    "ConcurrencyError",
    "QueueClearedError",
    "QueueFullError",
    "RequestClient",
    "RequestTimeoutError",
    "__version__",
]
