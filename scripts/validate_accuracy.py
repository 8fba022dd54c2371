#!/usr/bin/env python3
"""Validate throw height measurement accuracy.

Sweeps a range of target heights through synthetic throws and compares the
measured height against the target. The free-fall interval is quantised by
the sample rate, so the error floor depends on --rate.
"""

from __future__ import annotations

import argparse
import csv
import sys
from dataclasses import dataclass
from pathlib import Path

import numpy as np

from throw_tracker.analysis.detector import detect_throw_batch
from throw_tracker.core.config import get_settings
from throw_tracker.core.logging import setup_logging
from throw_tracker.core.types import ThrowStatus
from throw_tracker.sensors.synthetic import ThrowProfile, synthesize_throw


@dataclass
class ValidationResult:
    """Result of validating a single synthetic throw."""

    target_height_m: float
    seed: int
    status: ThrowStatus
    measured_height_m: float
    error_m: float | None
    error_percent: float | None


@dataclass
class ValidationSummary:
    """Summary statistics for a validation run."""

    total_throws: int
    successful_throws: int
    mean_absolute_error_m: float | None
    std_error_m: float | None
    max_error_m: float | None
    mean_error_percent: float | None


def validate_height(
    target_height_m: float,
    seed: int,
    profile: ThrowProfile,
) -> ValidationResult:
    """Measure one synthetic throw."""
    settings = get_settings()
    samples = synthesize_throw(
        target_height_m,
        profile=profile,
        gravity=settings.detection.gravity,
        seed=seed,
    )
    result = detect_throw_batch(samples, settings.detection)

    if not result.succeeded:
        return ValidationResult(
            target_height_m=target_height_m,
            seed=seed,
            status=result.status,
            measured_height_m=result.height_m,
            error_m=None,
            error_percent=None,
        )

    error = result.height_m - target_height_m
    return ValidationResult(
        target_height_m=target_height_m,
        seed=seed,
        status=result.status,
        measured_height_m=result.height_m,
        error_m=error,
        error_percent=error / target_height_m * 100 if target_height_m > 0 else None,
    )


def compute_summary(results: list[ValidationResult]) -> ValidationSummary:
    """Aggregate errors over successful throws."""
    matched = [r for r in results if r.error_m is not None]

    if not matched:
        return ValidationSummary(
            total_throws=len(results),
            successful_throws=0,
            mean_absolute_error_m=None,
            std_error_m=None,
            max_error_m=None,
            mean_error_percent=None,
        )

    errors = np.array([abs(r.error_m) for r in matched if r.error_m is not None])
    error_pcts = [abs(r.error_percent) for r in matched if r.error_percent is not None]

    return ValidationSummary(
        total_throws=len(results),
        successful_throws=len(matched),
        mean_absolute_error_m=float(np.mean(errors)),
        std_error_m=float(np.std(errors)),
        max_error_m=float(np.max(errors)),
        mean_error_percent=float(np.mean(error_pcts)) if error_pcts else None,
    )


def print_results(
    results: list[ValidationResult],
    summary: ValidationSummary,
    target_error_m: float,
) -> None:
    """Print validation results to console."""
    print("\n" + "=" * 64)
    print("VALIDATION RESULTS")
    print("=" * 64)
    print(f"{'Target':<10} {'Seed':<6} {'Status':<10} {'Measured':<10} {'Error':<10} {'Error %':<8}")
    print("-" * 64)

    for r in results:
        err_str = f"{r.error_m:+.3f}" if r.error_m is not None else "N/A"
        pct_str = f"{r.error_percent:+.1f}%" if r.error_percent is not None else "N/A"
        print(
            f"{r.target_height_m:<10.2f} "
            f"{r.seed:<6} "
            f"{r.status.name:<10} "
            f"{r.measured_height_m:<10.3f} "
            f"{err_str:<10} "
            f"{pct_str:<8}"
        )

    print("\n" + "=" * 64)
    print("SUMMARY")
    print("=" * 64)
    print(f"Throws:              {summary.total_throws}")
    print(f"Measured:            {summary.successful_throws}")

    if summary.mean_absolute_error_m is None:
        return

    print(f"\nMean Absolute Error: {summary.mean_absolute_error_m:.3f} m")
    print(f"Std Dev Error:       {summary.std_error_m:.3f} m")
    print(f"Max Error:           {summary.max_error_m:.3f} m")
    if summary.mean_error_percent is not None:
        print(f"Mean Error %:        {summary.mean_error_percent:.1f}%")

    if summary.mean_absolute_error_m <= target_error_m:
        print(f"\nPASS: mean error {summary.mean_absolute_error_m:.3f} m <= {target_error_m} m")
    else:
        print(f"\nFAIL: mean error {summary.mean_absolute_error_m:.3f} m > {target_error_m} m")


def main() -> int:
    """Run validation script."""
    parser = argparse.ArgumentParser(description="Validate throw height measurement accuracy")
    parser.add_argument(
        "--min-height",
        type=float,
        default=0.25,
        help="Smallest target height in meters (default: 0.25)",
    )
    parser.add_argument(
        "--max-height",
        type=float,
        default=5.0,
        help="Largest target height in meters (default: 5.0)",
    )
    parser.add_argument(
        "--steps",
        type=int,
        default=10,
        help="Number of heights in the sweep (default: 10)",
    )
    parser.add_argument(
        "--seeds",
        type=int,
        default=3,
        help="Noise seeds per height (default: 3)",
    )
    parser.add_argument(
        "--rate",
        type=float,
        default=50.0,
        help="Sample rate in Hz (default: 50)",
    )
    parser.add_argument(
        "--target-error",
        type=float,
        default=0.1,
        help="Acceptable mean absolute error in meters (default: 0.1)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log every detector transition",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        help="Output CSV for results",
    )

    args = parser.parse_args()

    settings = get_settings()
    setup_logging("INFO" if args.verbose else "WARNING", settings.logging.file)

    profile = ThrowProfile(rate_hz=args.rate)
    heights = np.linspace(args.min_height, args.max_height, args.steps)

    results = [
        validate_height(float(h), seed, profile) for h in heights for seed in range(args.seeds)
    ]
    summary = compute_summary(results)
    print_results(results, summary, args.target_error)

    if args.output:
        with open(args.output, "w", newline="") as f:
            writer = csv.writer(f)
            writer.writerow(["target_m", "seed", "status", "measured_m", "error_m", "error_percent"])
            for r in results:
                writer.writerow(
                    [
                        r.target_height_m,
                        r.seed,
                        r.status.name,
                        r.measured_height_m,
                        "" if r.error_m is None else r.error_m,
                        "" if r.error_percent is None else r.error_percent,
                    ]
                )
        print(f"\nResults saved to {args.output}")

    if summary.mean_absolute_error_m is None:
        return 1
    return 0 if summary.mean_absolute_error_m <= args.target_error else 1


if __name__ == "__main__":
    sys.exit(main())
