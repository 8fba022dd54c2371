"""Core data types and structures."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum, auto


@dataclass(frozen=True, slots=True)
class Sample:
    """A single accelerometer reading.

    Axis values include gravity and are in m/s². Any axis may be None when
    the sensor delivered an incomplete reading.

    Attributes:
        timestamp_ms: Monotonic timestamp in milliseconds
        ax: Acceleration along the device X axis
        ay: Acceleration along the device Y axis
        az: Acceleration along the device Z axis
    """

    timestamp_ms: float
    ax: float | None
    ay: float | None
    az: float | None

    @property
    def is_complete(self) -> bool:
        """True when every axis carries a finite value."""
        return all(
            value is not None and math.isfinite(value) for value in (self.ax, self.ay, self.az)
        )


class ThrowPhase(Enum):
    """States in the throw detection state machine."""

    IDLE = auto()
    THROWING = auto()
    FREE_FALLING = auto()
    FINISHED = auto()


class ThrowStatus(Enum):
    """How a finished session ended."""

    SUCCESS = auto()
    TOO_SHORT = auto()
    TIMEOUT = auto()


@dataclass(frozen=True, slots=True)
class ThrowResult:
    """Terminal outcome of one throw session.

    Attributes:
        status: How the session ended
        height_m: Estimated apex height in meters (0 unless SUCCESS)
        freefall_duration_s: Measured free-fall time in seconds
        finished_at_ms: Timestamp at which the session finished
        throw_started_at_ms: Timestamp of the throw trigger, if any
        freefall_started_at_ms: Timestamp free-fall was entered, if any
        clamped: Whether the raw height exceeded the realistic maximum
    """

    status: ThrowStatus
    height_m: float
    freefall_duration_s: float
    finished_at_ms: float
    throw_started_at_ms: float | None = None
    freefall_started_at_ms: float | None = None
    clamped: bool = False

    @property
    def succeeded(self) -> bool:
        """True when a height was measured."""
        return self.status is ThrowStatus.SUCCESS


@dataclass(frozen=True, slots=True)
class PhaseChange:
    """Notification emitted on every phase transition."""

    previous: ThrowPhase
    current: ThrowPhase
    timestamp_ms: float
    magnitude: float | None = None


@dataclass(frozen=True, slots=True)
class GaugeReading:
    """Throttled acceleration readout for live feedback.

    Attributes:
        timestamp_ms: Sample timestamp the reading was taken from
        magnitude: Gravity-compensated acceleration magnitude (m/s²)
        fraction: Magnitude relative to the gauge full scale, in [0, 1]
    """

    timestamp_ms: float
    magnitude: float
    fraction: float


@dataclass(slots=True)
class ThrowStats:
    """Results of every session played on this device.

    Attributes:
        results: Finished sessions in chronological order
        start_time: Timestamp the log was started
    """

    results: list[ThrowResult] = field(default_factory=list)
    start_time: float = 0.0

    @property
    def attempt_count(self) -> int:
        """Total number of finished sessions."""
        return len(self.results)

    @property
    def successes(self) -> list[ThrowResult]:
        """Sessions that produced a height."""
        return [r for r in self.results if r.succeeded]

    @property
    def success_rate(self) -> float | None:
        """Fraction of sessions that produced a height."""
        if not self.results:
            return None
        return len(self.successes) / len(self.results)

    @property
    def best_height(self) -> float | None:
        """Highest measured throw in meters."""
        heights = [r.height_m for r in self.successes]
        return max(heights) if heights else None

    @property
    def avg_height(self) -> float | None:
        """Average height over successful throws in meters."""
        heights = [r.height_m for r in self.successes]
        if not heights:
            return None
        return sum(heights) / len(heights)

    @property
    def last_result(self) -> ThrowResult | None:
        """Most recent result."""
        return self.results[-1] if self.results else None

    def add_result(self, result: ThrowResult) -> None:
        """Append a finished session."""
        self.results.append(result)

    def reset(self) -> None:
        """Clear all recorded results."""
        self.results.clear()
