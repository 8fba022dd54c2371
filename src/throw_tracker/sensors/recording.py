"""CSV recordings of accelerometer samples.

Format: a header row ``timestamp_ms,ax,ay,az`` followed by one row per
sample. An empty axis cell is read back as a missing value.
"""

from __future__ import annotations

import csv
from collections.abc import Iterable
from pathlib import Path

from throw_tracker.core.exceptions import RecordingError
from throw_tracker.core.logging import get_logger
from throw_tracker.core.types import Sample

logger = get_logger(__name__)

FIELDS = ("timestamp_ms", "ax", "ay", "az")


def save_recording(samples: Iterable[Sample], path: Path) -> int:
    """Write samples to a CSV file.

    Args:
        samples: Samples to write
        path: Output file path

    Returns:
        Number of rows written
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    count = 0
    with open(path, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(FIELDS)
        for s in samples:
            writer.writerow(
                [
                    s.timestamp_ms,
                    "" if s.ax is None else s.ax,
                    "" if s.ay is None else s.ay,
                    "" if s.az is None else s.az,
                ]
            )
            count += 1

    logger.info("Saved %d samples to %s", count, path)
    return count


def load_recording(path: Path) -> list[Sample]:
    """Read samples from a CSV file.

    Args:
        path: Input file path

    Returns:
        Samples in file order

    Raises:
        RecordingError: If the file is missing, lacks the expected columns,
            or holds a row without a numeric timestamp
    """
    if not path.exists():
        raise RecordingError(f"Recording not found: {path}")

    samples: list[Sample] = []
    with open(path, newline="") as f:
        reader = csv.DictReader(f)
        missing = set(FIELDS) - set(reader.fieldnames or [])
        if missing:
            raise RecordingError(f"{path}: missing columns {', '.join(sorted(missing))}")

        for line_no, row in enumerate(reader, start=2):
            try:
                timestamp = float(row["timestamp_ms"])
            except (TypeError, ValueError) as e:
                raise RecordingError(f"{path}:{line_no}: invalid timestamp") from e

            samples.append(
                Sample(
                    timestamp_ms=timestamp,
                    ax=_parse_axis(row["ax"]),
                    ay=_parse_axis(row["ay"]),
                    az=_parse_axis(row["az"]),
                )
            )

    logger.info("Loaded %d samples from %s", len(samples), path)
    return samples


def _parse_axis(value: str | None) -> float | None:
    if value is None or not value.strip():
        return None
    try:
        return float(value)
    except ValueError:
        return None
