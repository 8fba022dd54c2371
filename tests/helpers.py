"""Sample builders shared by the test modules."""

from __future__ import annotations

from throw_tracker.analysis.detector import ThrowDetector
from throw_tracker.core.scheduler import VirtualScheduler
from throw_tracker.core.types import Sample

GRAVITY = 9.81


def sample_with_magnitude(magnitude: float, timestamp_ms: float) -> Sample:
    """Create a sample whose gravity-compensated magnitude is exactly ``magnitude``."""
    return Sample(timestamp_ms=timestamp_ms, ax=magnitude, ay=0.0, az=GRAVITY)


def samples_from_magnitudes(
    magnitudes: list[float],
    start_ms: float = 0.0,
    spacing_ms: float = 100.0,
) -> list[Sample]:
    """Create evenly spaced samples from a magnitude profile."""
    return [
        sample_with_magnitude(m, start_ms + i * spacing_ms) for i, m in enumerate(magnitudes)
    ]


def feed(detector: ThrowDetector, scheduler: VirtualScheduler, samples: list[Sample]) -> None:
    """Deliver samples in order, firing timers that fall due first."""
    for s in samples:
        scheduler.advance_to(s.timestamp_ms)
        detector.process_sample(s)
