"""Synthetic throw recordings for demo mode and accuracy checks.

The generator shapes the detector's magnitude signal rather than simulating
device physics: a quiet hold, a short push spike, a low-magnitude interval
whose length encodes the target height, a catch spike, then quiet again.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from throw_tracker.analysis.calculator import STANDARD_GRAVITY, freefall_duration_for_height
from throw_tracker.core.types import Sample


@dataclass(frozen=True)
class ThrowProfile:
    """Shape of a synthetic throw.

    Attributes:
        rate_hz: Sample rate
        lead_in_ms: Quiet hold before the push
        push_ms: Length of the push spike
        push_magnitude: Magnitude during the push (m/s²)
        freefall_magnitude: Magnitude while airborne (m/s²)
        impact_ms: Length of the catch spike
        impact_magnitude: Magnitude at the catch (m/s²)
        tail_ms: Quiet hold after the catch
        noise_std: Per-axis Gaussian noise (m/s²)
    """

    rate_hz: float = 50.0
    lead_in_ms: float = 1500.0
    push_ms: float = 150.0
    push_magnitude: float = 22.0
    freefall_magnitude: float = 0.5
    impact_ms: float = 60.0
    impact_magnitude: float = 15.0
    tail_ms: float = 300.0
    noise_std: float = 0.2


def synthesize_throw(
    height_m: float,
    profile: ThrowProfile | None = None,
    start_ms: float = 0.0,
    gravity: float = STANDARD_GRAVITY,
    seed: int | None = None,
) -> list[Sample]:
    """Generate a sample sequence for a throw of the given height.

    The airborne interval is rounded to a whole number of sample periods, so
    the measurable height is quantised by the sample rate.

    Args:
        height_m: Target apex height in meters
        profile: Signal shape (defaults to ThrowProfile())
        start_ms: Timestamp of the first sample
        gravity: Gravity added back onto the Z axis
        seed: Random seed for reproducible noise

    Returns:
        Samples in timestamp order
    """
    profile = profile or ThrowProfile()
    period_ms = 1000.0 / profile.rate_hz

    def count(duration_ms: float) -> int:
        return max(1, int(round(duration_ms / period_ms)))

    freefall_ms = freefall_duration_for_height(height_m, gravity) * 1000.0
    segments = [
        (count(profile.lead_in_ms), 0.0),
        (count(profile.push_ms), profile.push_magnitude),
        (count(freefall_ms), profile.freefall_magnitude),
        (count(profile.impact_ms), profile.impact_magnitude),
        (count(profile.tail_ms), 0.0),
    ]

    levels = np.concatenate([np.full(n, level, dtype=np.float64) for n, level in segments])
    timestamps = start_ms + np.arange(len(levels), dtype=np.float64) * period_ms

    rng = np.random.default_rng(seed)
    noise = rng.normal(0.0, profile.noise_std, size=(len(levels), 3))

    ax = levels + noise[:, 0]
    ay = noise[:, 1]
    az = gravity + noise[:, 2]

    return [
        Sample(timestamp_ms=float(t), ax=float(x), ay=float(y), az=float(z))
        for t, x, y, z in zip(timestamps, ax, ay, az)
    ]
