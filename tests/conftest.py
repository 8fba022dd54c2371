"""Pytest fixtures for Throw Tracker tests."""

from __future__ import annotations

import pytest

from helpers import samples_from_magnitudes
from throw_tracker.analysis.detector import ThrowDetector
from throw_tracker.core.config import DetectionSettings
from throw_tracker.core.scheduler import VirtualScheduler
from throw_tracker.core.types import Sample, ThrowResult, ThrowStatus


@pytest.fixture
def detection_settings() -> DetectionSettings:
    """Create detection settings with the documented defaults."""
    return DetectionSettings(
        gravity=9.81,
        throw_threshold=14.0,
        freefall_threshold=4.0,
        impact_threshold=8.0,
        max_realistic_height=20.0,
        min_freefall_time=0.1,
        settling_delay_ms=1000.0,
        session_timeout_ms=20000.0,
        history_size=20,
    )


@pytest.fixture
def scheduler() -> VirtualScheduler:
    """Create a virtual clock starting at 0 ms."""
    return VirtualScheduler(start_ms=0.0)


@pytest.fixture
def detector(detection_settings: DetectionSettings, scheduler: VirtualScheduler) -> ThrowDetector:
    """Create a detector on the virtual clock (not yet armed)."""
    return ThrowDetector(detection_settings, scheduler)


@pytest.fixture
def armed_detector(detector: ThrowDetector) -> ThrowDetector:
    """Create a detector armed at t=0."""
    detector.arm(0.0)
    return detector


@pytest.fixture
def quiet_samples() -> list[Sample]:
    """Settling-period samples well below every threshold (t = 0..1000 ms)."""
    return samples_from_magnitudes([2.0] * 11, start_ms=0.0)


@pytest.fixture
def throw_samples() -> list[Sample]:
    """A complete throw after the settling window.

    Quiet until 1000 ms, spike at 1100 ms, free-fall from 1200 ms,
    catch at 1400 ms: 0.2 s of free-fall.
    """
    profile = [2.0] * 11 + [16.0, 2.0, 2.0, 9.0]
    return samples_from_magnitudes(profile, start_ms=0.0)


@pytest.fixture
def sample_results() -> list[ThrowResult]:
    """A mixed attempt history."""
    return [
        ThrowResult(ThrowStatus.SUCCESS, 1.2, 0.99, 5000.0, 3000.0, 3100.0),
        ThrowResult(ThrowStatus.TOO_SHORT, 0.0, 0.05, 9000.0, 8000.0, 8100.0),
        ThrowResult(ThrowStatus.SUCCESS, 2.5, 1.43, 15000.0, 13000.0, 13100.0),
        ThrowResult(ThrowStatus.TIMEOUT, 0.0, 0.0, 20000.0),
        ThrowResult(ThrowStatus.SUCCESS, 0.8, 0.81, 30000.0, 28000.0, 28100.0),
    ]
