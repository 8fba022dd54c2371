"""Acceleration magnitude, adaptive thresholds and height calculation.

This module is pure logic with NO I/O.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from throw_tracker.core.types import Sample

STANDARD_GRAVITY = 9.81  # m/s^2


@dataclass(frozen=True)
class HeightEstimate:
    """Height derived from a free-fall interval."""

    height_m: float  # After clamping
    raw_height_m: float  # Before clamping
    clamped: bool


def acceleration_magnitude(
    ax: float,
    ay: float,
    az: float,
    gravity: float = STANDARD_GRAVITY,
) -> float:
    """Magnitude of the acceleration vector with gravity removed from Z.

    Args:
        ax: X acceleration including gravity (m/s²)
        ay: Y acceleration including gravity (m/s²)
        az: Z acceleration including gravity (m/s²)
        gravity: Nominal gravity subtracted from the Z axis

    Returns:
        sqrt(ax² + ay² + (az - g)²)
    """
    return math.sqrt(ax * ax + ay * ay + (az - gravity) ** 2)


def sample_magnitude(sample: Sample, gravity: float = STANDARD_GRAVITY) -> float | None:
    """Magnitude of a sample, or None if the sample is incomplete."""
    if not sample.is_complete:
        return None
    return acceleration_magnitude(sample.ax, sample.ay, sample.az, gravity)  # type: ignore[arg-type]


def magnitudes(
    samples: Sequence[Sample],
    gravity: float = STANDARD_GRAVITY,
) -> NDArray[np.float64]:
    """Vectorised magnitudes for a recorded sequence.

    Incomplete samples yield NaN so the output stays aligned with the input.

    Args:
        samples: Recorded samples
        gravity: Nominal gravity subtracted from the Z axis

    Returns:
        Array of magnitudes, one per sample
    """
    if not samples:
        return np.empty(0, dtype=np.float64)

    axes = np.array(
        [
            [
                np.nan if s.ax is None else s.ax,
                np.nan if s.ay is None else s.ay,
                np.nan if s.az is None else s.az,
            ]
            for s in samples
        ],
        dtype=np.float64,
    )
    axes[:, 2] -= gravity
    return np.sqrt(np.sum(axes**2, axis=1))


def dynamic_threshold(history: Iterable[float], floor: float) -> float:
    """Noise-adaptive throw trigger level.

    Twice the mean of the recent magnitudes, never below ``floor``.

    Args:
        history: Recent magnitudes
        floor: Hard minimum threshold

    Returns:
        max(floor, 2 * mean(history)); ``floor`` for an empty history
    """
    values = list(history)
    if not values:
        return floor
    return max(floor, 2 * (sum(values) / len(values)))


def height_from_freefall(duration_s: float, gravity: float = STANDARD_GRAVITY) -> float:
    """Apex height for a free-fall interval.

    Uses h = g·t²/8: the measured interval is treated as the full up-and-down
    flight, so the fall from the apex lasts t/2 and h = ½·g·(t/2)².

    Args:
        duration_s: Free-fall duration in seconds
        gravity: Gravitational acceleration (m/s²)

    Returns:
        Height in meters
    """
    return gravity * duration_s**2 / 8


def clamp_height(height_m: float, max_height_m: float) -> float:
    """Clamp a height to [0, max_height_m]."""
    return min(max(height_m, 0.0), max_height_m)


def estimate_height(
    duration_s: float,
    gravity: float = STANDARD_GRAVITY,
    max_height_m: float = 20.0,
) -> HeightEstimate:
    """Compute and clamp the height for a free-fall interval.

    Args:
        duration_s: Free-fall duration in seconds
        gravity: Gravitational acceleration (m/s²)
        max_height_m: Maximum realistic height

    Returns:
        HeightEstimate with both raw and clamped values
    """
    raw = height_from_freefall(duration_s, gravity)
    height = clamp_height(raw, max_height_m)
    return HeightEstimate(height_m=height, raw_height_m=raw, clamped=height != raw)


def freefall_duration_for_height(height_m: float, gravity: float = STANDARD_GRAVITY) -> float:
    """Inverse of height_from_freefall.

    Args:
        height_m: Apex height in meters
        gravity: Gravitational acceleration (m/s²)

    Returns:
        Free-fall duration in seconds that yields ``height_m``
    """
    if height_m <= 0:
        return 0.0
    return math.sqrt(8 * height_m / gravity)
