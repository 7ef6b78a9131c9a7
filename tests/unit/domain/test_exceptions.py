"""Tests for the controller exception hierarchy."""

from __future__ import annotations

import pytest

from reqgate.domain.exceptions import (
    ConcurrencyError,
    QueueClearedError,
    QueueFullError,
    RequestTimeoutError,
)


class TestHierarchy:
    @pytest.mark.parametrize(
        "exc",
        [QueueFullError(3), RequestTimeoutError(1000), QueueClearedError()],
    )
    def test_all_derive_from_base(self, exc: Exception) -> None:
        assert isinstance(exc, ConcurrencyError)

    def test_timeout_is_builtin_timeout(self) -> None:
        assert isinstance(RequestTimeoutError(10), TimeoutError)

    def test_queue_errors_are_not_timeouts(self) -> None:
        assert not isinstance(QueueFullError(1), TimeoutError)
        assert not isinstance(QueueClearedError(), TimeoutError)


class TestMessages:
    def test_queue_full(self) -> None:
        exc = QueueFullError(100)
        assert str(exc) == "queue is full"
        assert exc.max_queue == 100

    def test_request_timeout(self) -> None:
        exc = RequestTimeoutError(30_000)
        assert str(exc) == "request timed out"
        assert exc.timeout_ms == 30_000

    def test_queue_cleared(self) -> None:
        assert str(QueueClearedError()) == "queue was cleared"
