"""Tests for attempt history and metrics."""

from __future__ import annotations

from pathlib import Path

import pytest

from throw_tracker.analysis.metrics import MetricsTracker, export_stats, import_stats
from throw_tracker.core.types import ThrowResult, ThrowStats, ThrowStatus


@pytest.fixture
def tracker(sample_results: list[ThrowResult]) -> MetricsTracker:
    """Create a tracker holding the mixed attempt history."""
    tracker = MetricsTracker()
    for result in sample_results:
        tracker.add_result(result)
    return tracker


class TestMetricsTracker:
    """Tests for the MetricsTracker class."""

    def test_empty_summary(self) -> None:
        """No attempts should give empty statistics."""
        summary = MetricsTracker().get_summary()

        assert summary.total_attempts == 0
        assert summary.best_height_m is None
        assert summary.avg_height_m is None
        assert summary.success_rate is None

    def test_summary_counts_outcomes(self, tracker: MetricsTracker) -> None:
        """Summary should break attempts down by status."""
        summary = tracker.get_summary()

        assert summary.total_attempts == 5
        assert summary.successful_throws == 3
        assert summary.too_short == 1
        assert summary.timeouts == 1
        assert summary.success_rate == pytest.approx(0.6)

    def test_summary_heights_ignore_failures(self, tracker: MetricsTracker) -> None:
        """Height statistics should only cover successful throws."""
        summary = tracker.get_summary()

        assert summary.best_height_m == pytest.approx(2.5)
        assert summary.avg_height_m == pytest.approx(1.5)
        assert summary.std_height_m is not None
        assert summary.std_height_m > 0

    def test_new_best_flag(self) -> None:
        """add_result should report only strictly higher successful throws."""
        tracker = MetricsTracker()

        assert tracker.add_result(ThrowResult(ThrowStatus.SUCCESS, 1.0, 0.9, 1000.0))
        assert not tracker.add_result(ThrowResult(ThrowStatus.SUCCESS, 0.5, 0.6, 2000.0))
        assert not tracker.add_result(ThrowResult(ThrowStatus.SUCCESS, 1.0, 0.9, 3000.0))
        assert not tracker.add_result(ThrowResult(ThrowStatus.TIMEOUT, 0.0, 0.0, 4000.0))
        assert tracker.add_result(ThrowResult(ThrowStatus.SUCCESS, 1.1, 0.95, 5000.0))

    def test_leaderboard_orders_by_height(self, tracker: MetricsTracker) -> None:
        """Leaderboard should list successful throws, highest first."""
        board = tracker.leaderboard()

        assert [r.height_m for r in board] == [2.5, 1.2, 0.8]
        assert tracker.leaderboard(count=1)[0].height_m == 2.5

    def test_recent_results_newest_first(self, tracker: MetricsTracker) -> None:
        """Recent results should include failures, newest first."""
        recent = tracker.get_recent_results(count=2)

        assert [r.status for r in recent] == [ThrowStatus.SUCCESS, ThrowStatus.TIMEOUT]
        assert recent[0].height_m == 0.8

    def test_reset(self, tracker: MetricsTracker) -> None:
        """Reset should clear all attempts."""
        tracker.reset()

        assert tracker.attempt_count == 0
        assert tracker.last_result is None


class TestStatsPersistence:
    """Tests for JSON export and import."""

    def test_export_import_preserves_history(
        self, tmp_path: Path, sample_results: list[ThrowResult]
    ) -> None:
        """Exported history should import back unchanged."""
        stats = ThrowStats(results=list(sample_results), start_time=1234.0)
        path = tmp_path / "history" / "throws.json"

        export_stats(stats, path)
        loaded = import_stats(path)

        assert loaded.start_time == 1234.0
        assert loaded.results == sample_results

    def test_export_includes_aggregates(
        self, tmp_path: Path, sample_results: list[ThrowResult]
    ) -> None:
        """Export should write aggregates alongside the results."""
        import json

        path = tmp_path / "throws.json"
        export_stats(ThrowStats(results=list(sample_results)), path)

        data = json.loads(path.read_text())

        assert data["attempt_count"] == 5
        assert data["best_height_m"] == pytest.approx(2.5)
        assert data["results"][1]["status"] == "TOO_SHORT"
