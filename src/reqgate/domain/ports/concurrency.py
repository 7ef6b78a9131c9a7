"""Concurrency controller port for governed task execution."""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Protocol, TypeVar, runtime_checkable

T = TypeVar("T")


@runtime_checkable
class ConcurrencyControllerPort(Protocol):
    """Admission control for outbound asynchronous work.

    Runs a task immediately when a slot is free, queues it when the
    queue has room, and rejects it otherwise.  Running tasks are raced
    against a per-task deadline.
    """

    @property
    def current_concurrent(self) -> int:
        """Number of tasks currently occupying a slot."""
        ...

    @property
    def queue_length(self) -> int:
        """Number of tasks waiting for a slot."""
        ...

    async def execute(self, task: Callable[[], Awaitable[T]]) -> T:
        """Run *task* under the controller's limits and return its result."""
        ...

    def clear_queue(self) -> int:
        """Fail every queued task with ``QueueClearedError``."""
        ...

    def snapshot(self) -> dict[str, Any]:
        """Return a JSON-serializable view of limits, state and counters."""
        ...
