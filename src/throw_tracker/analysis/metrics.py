"""Attempt history and metrics across throw sessions.

This module is pure logic apart from the JSON export/import helpers.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from throw_tracker.core.types import ThrowResult, ThrowStats, ThrowStatus


@dataclass
class SessionSummary:
    """Summary statistics over all recorded attempts."""

    total_attempts: int
    successful_throws: int
    too_short: int
    timeouts: int
    best_height_m: float | None
    avg_height_m: float | None
    std_height_m: float | None
    success_rate: float | None


class MetricsTracker:
    """Tracks results across sessions and provides computed statistics.

    The detector keeps no state between sessions; this tracker is the only
    place attempts accumulate.
    """

    def __init__(self, stats: ThrowStats | None = None) -> None:
        """Initialize tracker with optional existing stats.

        Args:
            stats: Existing stats to continue tracking
        """
        self.stats = stats or ThrowStats()

    @property
    def attempt_count(self) -> int:
        """Get total attempt count."""
        return self.stats.attempt_count

    @property
    def best_height(self) -> float | None:
        """Get highest measured throw."""
        return self.stats.best_height

    @property
    def last_result(self) -> ThrowResult | None:
        """Get most recent result."""
        return self.stats.last_result

    def add_result(self, result: ThrowResult) -> bool:
        """Record a finished session.

        Args:
            result: Terminal result of the session

        Returns:
            True if the result is a new personal best
        """
        previous_best = self.stats.best_height
        self.stats.add_result(result)

        return result.succeeded and (previous_best is None or result.height_m > previous_best)

    def get_summary(self) -> SessionSummary:
        """Get summary statistics over all attempts."""
        heights = [r.height_m for r in self.stats.successes]

        std = None
        if len(heights) >= 2:
            mean = sum(heights) / len(heights)
            std = (sum((h - mean) ** 2 for h in heights) / len(heights)) ** 0.5

        return SessionSummary(
            total_attempts=self.attempt_count,
            successful_throws=len(heights),
            too_short=self._count(ThrowStatus.TOO_SHORT),
            timeouts=self._count(ThrowStatus.TIMEOUT),
            best_height_m=self.stats.best_height,
            avg_height_m=self.stats.avg_height,
            std_height_m=std,
            success_rate=self.stats.success_rate,
        )

    def leaderboard(self, count: int = 10) -> list[ThrowResult]:
        """Get the highest successful throws.

        Args:
            count: Number of entries to return

        Returns:
            Successful results, highest first (ties keep chronological order)
        """
        ranked = sorted(self.stats.successes, key=lambda r: r.height_m, reverse=True)
        return ranked[:count]

    def get_recent_results(self, count: int = 5) -> list[ThrowResult]:
        """Get most recent results (newest first)."""
        return list(reversed(self.stats.results[-count:]))

    def reset(self) -> None:
        """Clear all recorded data."""
        self.stats.reset()

    def _count(self, status: ThrowStatus) -> int:
        return sum(1 for r in self.stats.results if r.status is status)


def export_stats(stats: ThrowStats, path: Path) -> None:
    """Export attempt history to a JSON file.

    Args:
        stats: Attempt history to export
        path: Output file path
    """
    results_data = [
        {
            "status": r.status.name,
            "height_m": r.height_m,
            "freefall_duration_s": r.freefall_duration_s,
            "finished_at_ms": r.finished_at_ms,
            "throw_started_at_ms": r.throw_started_at_ms,
            "freefall_started_at_ms": r.freefall_started_at_ms,
            "clamped": r.clamped,
        }
        for r in stats.results
    ]

    data = {
        "start_time": stats.start_time,
        "attempt_count": stats.attempt_count,
        "best_height_m": stats.best_height,
        "avg_height_m": stats.avg_height,
        "results": results_data,
    }

    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(data, f, indent=2)


def import_stats(path: Path) -> ThrowStats:
    """Import attempt history from a JSON file.

    Args:
        path: Input file path

    Returns:
        Reconstructed ThrowStats
    """
    with open(path) as f:
        data = json.load(f)

    stats = ThrowStats(start_time=data.get("start_time", 0.0))

    for r in data.get("results", []):
        stats.add_result(
            ThrowResult(
                status=ThrowStatus[r["status"]],
                height_m=r["height_m"],
                freefall_duration_s=r["freefall_duration_s"],
                finished_at_ms=r["finished_at_ms"],
                throw_started_at_ms=r.get("throw_started_at_ms"),
                freefall_started_at_ms=r.get("freefall_started_at_ms"),
                clamped=r.get("clamped", False),
            )
        )

    return stats
