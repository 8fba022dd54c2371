"""Pure analysis logic: throw detection, height calculation, and metrics.

This module contains NO sensor or network I/O.
All functions operate on typed dataclasses and return results.
"""

from throw_tracker.analysis.detector import ThrowDetector, detect_throw_batch
from throw_tracker.analysis.filters import AccelerationGauge, RollingHistory
from throw_tracker.analysis.metrics import MetricsTracker

__all__ = [
    "ThrowDetector",
    "detect_throw_batch",
    "RollingHistory",
    "AccelerationGauge",
    "MetricsTracker",
]
