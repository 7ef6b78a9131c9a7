"""Concurrency controller exceptions."""

from __future__ import annotations


class ConcurrencyError(Exception):
    """Base class for all controller-originated failures."""


class QueueFullError(ConcurrencyError):
    """Raised at admission time when every slot is busy and the queue is full."""

    def __init__(self, max_queue: int) -> None:
        super().__init__("queue is full")
        self.max_queue = max_queue


class RequestTimeoutError(ConcurrencyError, TimeoutError):
    """Raised when a running task does not settle before its deadline."""

    def __init__(self, timeout_ms: int) -> None:
        super().__init__("request timed out")
        self.timeout_ms = timeout_ms


class QueueClearedError(ConcurrencyError):
    """Raised for queued tasks discarded by ``clear_queue()``."""

    def __init__(self) -> None:
        super().__init__("queue was cleared")
