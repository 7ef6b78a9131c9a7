"""Client-side concurrency controller with a bounded FIFO queue.

Every submitted task is classified when its ``execute()`` call starts:

- a free slot exists → the task runs immediately;
- all slots are busy and the queue has room → the task waits in FIFO
  order until a running task finishes;
- all slots are busy and the queue is full → ``QueueFullError``.

A running task is raced against a per-task deadline (``timeout_ms``,
measured from run start, not from enqueue time).  When the deadline
wins the caller gets ``RequestTimeoutError`` and the task is detached:
it is neither awaited nor cancelled, and its eventual outcome never
touches the slot count or the queue.

Slot bookkeeping happens between ``await`` points, so it is atomic with
respect to the event loop and needs no lock.  A queued item's slot is
reserved at promotion time, before its caller resumes, so no newcomer
can take the slot in between.
"""

from __future__ import annotations

import asyncio
import time
from collections import deque
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, TypeVar

import structlog

from reqgate.domain.exceptions import (
    QueueClearedError,
    QueueFullError,
    RequestTimeoutError,
)
from reqgate.infrastructure.config.schema import ConcurrencyConfig
from reqgate.infrastructure.metrics import ControllerStats

log = structlog.get_logger(__name__)

T = TypeVar("T")

DEFAULT_MAX_CONCURRENT = 5
DEFAULT_MAX_QUEUE = 100
DEFAULT_TIMEOUT_MS = 30_000


@dataclass(eq=False)
class _QueueItem:
    """A waiting task plus the future its caller is suspended on.

    ``admitted`` resolves to ``None`` on promotion (slot already
    reserved) or fails with ``QueueClearedError``.  Whichever path pops
    the item from the queue owns it.
    """

    task: Callable[[], Awaitable[Any]]
    admitted: asyncio.Future[None]


def _require_int(name: str, value: Any, minimum: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an int, got: {type(value)!r}")
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got: {value}")
    return value


class ConcurrencyController:
    """Bound simultaneously running tasks, queue the excess, reject overflow.

    Parameters:
        max_concurrent: Maximum number of tasks running at once (> 0).
        max_queue: Maximum number of tasks waiting for a slot (>= 0).
            ``0`` means a task either runs immediately or is rejected.
        timeout_ms: Per-task deadline in milliseconds (> 0), starting
            when the task begins running.

    All three limits are fixed for the controller's lifetime.  Each
    instance owns its own slot counter, queue and stats.
    """

    def __init__(
        self,
        *,
        max_concurrent: int = DEFAULT_MAX_CONCURRENT,
        max_queue: int = DEFAULT_MAX_QUEUE,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
    ) -> None:
        self._max_concurrent = _require_int("max_concurrent", max_concurrent, 1)
        self._max_queue = _require_int("max_queue", max_queue, 0)
        self._timeout_ms = _require_int("timeout_ms", timeout_ms, 1)
        self._current = 0
        self._queue: deque[_QueueItem] = deque()
        self._detached: set[asyncio.Future[Any]] = set()
        self._stats = ControllerStats()

    @classmethod
    def from_config(cls, config: ConcurrencyConfig) -> ConcurrencyController:
        """Build a controller from a validated :class:`ConcurrencyConfig`."""
        return cls(
            max_concurrent=config.max_concurrent,
            max_queue=config.max_queue,
            timeout_ms=config.timeout_ms,
        )

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def max_concurrent(self) -> int:
        return self._max_concurrent

    @property
    def max_queue(self) -> int:
        return self._max_queue

    @property
    def timeout_ms(self) -> int:
        return self._timeout_ms

    @property
    def current_concurrent(self) -> int:
        """Number of tasks currently occupying a slot."""
        return self._current

    @property
    def queue_length(self) -> int:
        """Number of tasks waiting for a slot."""
        return len(self._queue)

    @property
    def detached_tasks(self) -> int:
        """Timed-out tasks that are still running in the background."""
        return len(self._detached)

    @property
    def stats(self) -> ControllerStats:
        return self._stats

    def snapshot(self) -> dict[str, Any]:
        """Return a JSON-serializable view of limits, state and counters."""
        return {
            "max_concurrent": self._max_concurrent,
            "max_queue": self._max_queue,
            "timeout_ms": self._timeout_ms,
            "current_concurrent": self._current,
            "queue_length": len(self._queue),
            "available": self._max_concurrent - self._current,
            "detached": len(self._detached),
            "stats": self._stats.snapshot(),
        }

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def execute(self, task: Callable[[], Awaitable[T]]) -> T:
        """Run *task* under the controller's limits and return its result.

        Raises:
            QueueFullError: Every slot is busy and the queue is full.
                *task* is never invoked.
            RequestTimeoutError: *task* did not settle within
                ``timeout_ms`` of starting.
            QueueClearedError: *task* was still queued when
                :meth:`clear_queue` ran.

        Any exception raised by *task* itself propagates unchanged.
        """
        self._stats.submitted += 1

        if self._current < self._max_concurrent:
            self._occupy_slot()
            return await self._run(task)

        if len(self._queue) >= self._max_queue:
            self._stats.rejected += 1
            log.warning(
                "queue_full",
                max_concurrent=self._max_concurrent,
                max_queue=self._max_queue,
            )
            raise QueueFullError(self._max_queue)

        item = _QueueItem(
            task=task,
            admitted=asyncio.get_running_loop().create_future(),
        )
        self._queue.append(item)
        self._stats.queued += 1
        log.debug("task_queued", queue_length=len(self._queue))

        try:
            await item.admitted
        except asyncio.CancelledError:
            self._abandon(item)
            raise

        return await self._run(task)

    def clear_queue(self) -> int:
        """Fail every queued task with ``QueueClearedError``.

        Running tasks are unaffected.  Returns the number of callers
        that were settled; ``0`` on an empty queue.
        """
        items, self._queue = self._queue, deque()
        cleared = 0
        for item in items:
            if item.admitted.done():
                # Caller already cancelled
                continue
            item.admitted.set_exception(QueueClearedError())
            cleared += 1

        self._stats.cleared += cleared
        if cleared:
            log.info("queue_cleared", cleared=cleared)
        return cleared

    # ------------------------------------------------------------------
    # Run protocol
    # ------------------------------------------------------------------

    def _occupy_slot(self) -> None:
        self._current += 1
        self._stats.admitted += 1

    def _release_slot(self) -> None:
        self._current -= 1
        self._promote()

    def _promote(self) -> None:
        """Hand free slots to queued items, oldest first."""
        while self._queue and self._current < self._max_concurrent:
            item = self._queue.popleft()
            if item.admitted.done():
                continue
            self._occupy_slot()
            item.admitted.set_result(None)
            log.debug(
                "task_promoted",
                current_concurrent=self._current,
                queue_length=len(self._queue),
            )

    def _abandon(self, item: _QueueItem) -> None:
        """Undo whatever *item* holds after its waiting caller was cancelled."""
        if item.admitted.cancelled():
            if item in self._queue:
                self._queue.remove(item)
            self._stats.cancelled += 1
        elif item.admitted.exception() is None:
            # Promoted, but the caller never resumed: give the slot back.
            self._stats.cancelled += 1
            self._release_slot()

    async def _run(self, task: Callable[[], Awaitable[T]]) -> T:
        """Race an admitted task against the deadline; always frees the slot."""
        started_ns = time.perf_counter_ns()
        outcome = "cancelled"
        try:
            result = await self._race(task)
            outcome = "succeeded"
            return result
        except RequestTimeoutError:
            outcome = "timed_out"
            raise
        except Exception:
            outcome = "failed"
            raise
        finally:
            self._stats.record_outcome(outcome, time.perf_counter_ns() - started_ns)
            self._release_slot()

    async def _race(self, task: Callable[[], Awaitable[T]]) -> T:
        future = asyncio.ensure_future(task())
        try:
            done, _ = await asyncio.wait({future}, timeout=self._timeout_ms / 1000)
        except asyncio.CancelledError:
            if not future.cancel() and not future.cancelled():
                # Settled in the same tick; mark its outcome as retrieved.
                future.exception()
            raise

        if not done:
            self._detach(future)
            log.warning("task_timed_out", timeout_ms=self._timeout_ms)
            raise RequestTimeoutError(self._timeout_ms)

        return future.result()

    def _detach(self, future: asyncio.Future[Any]) -> None:
        # Keep a strong reference until the task finishes on its own.
        self._detached.add(future)
        future.add_done_callback(self._on_detached_done)

    def _on_detached_done(self, future: asyncio.Future[Any]) -> None:
        self._detached.discard(future)
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            log.debug("detached_task_failed", error=repr(exc))
        else:
            log.debug("detached_task_completed")
