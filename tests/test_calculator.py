"""Tests for magnitude, threshold and height calculation."""

from __future__ import annotations

import math

import numpy as np
import pytest

from throw_tracker.analysis.calculator import (
    acceleration_magnitude,
    clamp_height,
    dynamic_threshold,
    estimate_height,
    freefall_duration_for_height,
    height_from_freefall,
    magnitudes,
    sample_magnitude,
)
from throw_tracker.core.types import Sample


class TestAccelerationMagnitude:
    """Tests for gravity-compensated magnitude."""

    def test_device_at_rest_is_zero(self) -> None:
        """Flat device reading only gravity should give zero magnitude."""
        assert acceleration_magnitude(0.0, 0.0, 9.81) == pytest.approx(0.0)

    def test_gravity_removed_from_z_only(self) -> None:
        """Only the Z axis should be gravity compensated."""
        assert acceleration_magnitude(3.0, 4.0, 9.81) == pytest.approx(5.0)
        assert acceleration_magnitude(0.0, 0.0, 0.0) == pytest.approx(9.81)

    def test_free_fall_reads_gravity(self) -> None:
        """A device in free fall reads zero, so the magnitude equals g."""
        assert acceleration_magnitude(0.0, 0.0, 0.0, gravity=9.8) == pytest.approx(9.8)

    def test_incomplete_sample_has_no_magnitude(self) -> None:
        """Samples with a missing or non-finite axis should be rejected."""
        assert sample_magnitude(Sample(0.0, None, 0.0, 9.81)) is None
        assert sample_magnitude(Sample(0.0, 0.0, math.nan, 9.81)) is None
        assert sample_magnitude(Sample(0.0, 0.0, 0.0, math.inf)) is None

    def test_sample_magnitude(self) -> None:
        """Complete samples should match the scalar formula."""
        assert sample_magnitude(Sample(0.0, 6.0, 8.0, 9.81)) == pytest.approx(10.0)


class TestMagnitudes:
    """Tests for vectorised magnitudes."""

    def test_matches_scalar_formula(self) -> None:
        """Vectorised result should equal the per-sample result."""
        samples = [
            Sample(0.0, 3.0, 4.0, 9.81),
            Sample(10.0, 0.0, 0.0, 19.81),
            Sample(20.0, 1.0, 2.0, 7.81),
        ]

        result = magnitudes(samples)

        expected = [sample_magnitude(s) for s in samples]
        np.testing.assert_allclose(result, expected)

    def test_incomplete_samples_are_nan(self) -> None:
        """Incomplete samples should keep their slot as NaN."""
        samples = [Sample(0.0, 3.0, 4.0, 9.81), Sample(10.0, None, 0.0, 9.81)]

        result = magnitudes(samples)

        assert len(result) == 2
        assert result[0] == pytest.approx(5.0)
        assert np.isnan(result[1])

    def test_empty_input(self) -> None:
        """No samples should give an empty array."""
        assert magnitudes([]).shape == (0,)


class TestDynamicThreshold:
    """Tests for the noise-adaptive throw threshold."""

    def test_twice_the_average(self) -> None:
        """Noisy history should raise the threshold to twice its mean."""
        assert dynamic_threshold([10.0] * 20, floor=14.0) == pytest.approx(20.0)

    def test_never_below_floor(self) -> None:
        """Quiet history should fall back to the floor."""
        assert dynamic_threshold([1.0, 2.0, 3.0], floor=14.0) == 14.0

    def test_empty_history_uses_floor(self) -> None:
        """No history should give the floor."""
        assert dynamic_threshold([], floor=14.0) == 14.0


class TestHeightCalculation:
    """Tests for free-fall height."""

    def test_one_second_free_fall(self) -> None:
        """1.0 s of free-fall should give g/8."""
        assert height_from_freefall(1.0) == pytest.approx(1.22625)

    def test_quadratic_in_duration(self) -> None:
        """Doubling the duration should quadruple the height."""
        assert height_from_freefall(2.0) == pytest.approx(4 * height_from_freefall(1.0))

    def test_zero_duration(self) -> None:
        """Zero duration should give zero height."""
        assert height_from_freefall(0.0) == 0.0

    def test_clamp(self) -> None:
        """Heights should be clamped into [0, max]."""
        assert clamp_height(25.0, 20.0) == 20.0
        assert clamp_height(-1.0, 20.0) == 0.0
        assert clamp_height(3.5, 20.0) == 3.5

    def test_estimate_clamps_unrealistic_heights(self) -> None:
        """5.0 s of free-fall (30.66 m raw) should clamp to 20 m."""
        estimate = estimate_height(5.0, max_height_m=20.0)

        assert estimate.height_m == 20.0
        assert estimate.raw_height_m == pytest.approx(30.65625)
        assert estimate.clamped

    def test_estimate_within_range_not_clamped(self) -> None:
        """Realistic heights should pass through unchanged."""
        estimate = estimate_height(1.0)

        assert estimate.height_m == pytest.approx(1.22625)
        assert not estimate.clamped

    def test_duration_for_height_inverts_formula(self) -> None:
        """Duration for a height should reproduce that height."""
        duration = freefall_duration_for_height(2.0)

        assert height_from_freefall(duration) == pytest.approx(2.0)

    def test_duration_for_non_positive_height(self) -> None:
        """Non-positive heights need no free-fall."""
        assert freefall_duration_for_height(0.0) == 0.0
        assert freefall_duration_for_height(-1.0) == 0.0
