"""Tests for the zero-impact ControllerStats counters."""

from __future__ import annotations

from reqgate.infrastructure.metrics import ControllerStats


class TestControllerStats:
    def test_default_values(self) -> None:
        stats = ControllerStats()
        assert stats.submitted == 0
        assert stats.admitted == 0
        assert stats.rejected == 0
        assert stats.total_run_ns == 0
        assert stats.finished == 0

    def test_snapshot_no_runs(self) -> None:
        snap = ControllerStats().snapshot()
        assert snap["submitted"] == 0
        assert snap["avg_run_ms"] == 0.0
        assert snap["uptime_seconds"] >= 0.0

    def test_snapshot_with_data(self) -> None:
        stats = ControllerStats(
            submitted=6,
            admitted=4,
            queued=2,
            rejected=1,
            succeeded=2,
            failed=1,
            timed_out=1,
            cleared=1,
            total_run_ns=2_000_000_000,  # 2s total
        )
        snap = stats.snapshot()
        assert snap["submitted"] == 6
        assert snap["admitted"] == 4
        assert snap["queued"] == 2
        assert snap["rejected"] == 1
        assert snap["cleared"] == 1
        assert snap["avg_run_ms"] == 500.0  # 2000ms / 4 finished

    def test_record_outcome_counts_and_times(self) -> None:
        stats = ControllerStats()
        stats.record_outcome("succeeded", 1_000_000)
        stats.record_outcome("failed", 3_000_000)
        stats.record_outcome("timed_out", 2_000_000)
        assert stats.succeeded == 1
        assert stats.failed == 1
        assert stats.timed_out == 1
        assert stats.total_run_ns == 6_000_000
        assert stats.snapshot()["avg_run_ms"] == 2.0

    def test_cancelled_runs_not_in_average(self) -> None:
        stats = ControllerStats()
        stats.record_outcome("succeeded", 10_000_000)
        stats.record_outcome("cancelled", 500_000_000)
        assert stats.cancelled == 1
        assert stats.finished == 1
        assert stats.snapshot()["avg_run_ms"] == 10.0
