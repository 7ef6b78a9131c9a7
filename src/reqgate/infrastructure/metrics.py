"""Zero-impact in-memory counters for a single concurrency controller.

All counters are plain Python integers manipulated inside the single-threaded
async event loop, so no locks are needed.

``time.perf_counter_ns()`` is used for timing (monotonic, nanosecond
resolution, near-zero overhead).
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field


@dataclass
class ControllerStats:
    """Accumulated outcome counters for one controller.

    ``admitted`` counts every transition into the running state, whether
    the task was started directly or promoted from the queue.  Each
    admitted task ends in exactly one of ``succeeded``, ``failed``,
    ``timed_out`` or ``cancelled``.  ``cancelled`` also counts callers
    abandoned while still queued, which were never admitted, so
    ``admitted`` can be lower than the sum of the four outcomes.
    """

    submitted: int = 0
    admitted: int = 0
    queued: int = 0
    rejected: int = 0
    succeeded: int = 0
    failed: int = 0
    timed_out: int = 0
    cleared: int = 0
    cancelled: int = 0
    total_run_ns: int = 0
    _start_ns: int = field(default_factory=time.perf_counter_ns, repr=False)

    def record_outcome(self, outcome: str, duration_ns: int) -> None:
        """Count one run ending in *outcome*.

        *outcome* is one of ``succeeded``, ``failed``, ``timed_out`` or
        ``cancelled``.  Cancelled runs are counted but their duration is
        left out of the average.
        """
        setattr(self, outcome, getattr(self, outcome) + 1)
        if outcome != "cancelled":
            self.total_run_ns += duration_ns

    @property
    def finished(self) -> int:
        return self.succeeded + self.failed + self.timed_out

    def snapshot(self) -> dict[str, object]:
        """Return a JSON-serializable summary."""
        avg_ms = (
            round(self.total_run_ns / self.finished / 1_000_000, 1)
            if self.finished
            else 0.0
        )
        uptime_ns = time.perf_counter_ns() - self._start_ns
        return {
            "uptime_seconds": round(uptime_ns / 1_000_000_000, 1),
            "submitted": self.submitted,
            "admitted": self.admitted,
            "queued": self.queued,
            "rejected": self.rejected,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "timed_out": self.timed_out,
            "cleared": self.cleared,
            "cancelled": self.cancelled,
            "avg_run_ms": avg_ms,
        }
