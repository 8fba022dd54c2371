"""Rolling history and gauge throttling for the magnitude signal."""

from __future__ import annotations

from collections import deque

from throw_tracker.core.types import GaugeReading


class RollingHistory:
    """Fixed-capacity FIFO of recent magnitudes.

    Backed by a bounded deque: once full, every push evicts the oldest value.
    """

    def __init__(self, size: int = 20) -> None:
        """Initialize history.

        Args:
            size: Maximum number of values retained
        """
        self.size = size
        self._buffer: deque[float] = deque(maxlen=size)

    def __len__(self) -> int:
        return len(self._buffer)

    @property
    def is_full(self) -> bool:
        """Check if buffer is at capacity."""
        return len(self._buffer) >= self.size

    @property
    def values(self) -> list[float]:
        """Retained values, oldest first."""
        return list(self._buffer)

    @property
    def mean(self) -> float:
        """Running average, 0.0 when empty."""
        if not self._buffer:
            return 0.0
        return sum(self._buffer) / len(self._buffer)

    def push(self, value: float) -> None:
        """Append a value, evicting the oldest past capacity."""
        self._buffer.append(value)

    def clear(self) -> None:
        """Drop all values."""
        self._buffer.clear()


class AccelerationGauge:
    """Rate-limited magnitude readout for a live acceleration bar."""

    def __init__(self, full_scale: float = 20.0, update_interval_ms: float = 100.0) -> None:
        """Initialize gauge.

        Args:
            full_scale: Magnitude shown as a full bar (m/s²)
            update_interval_ms: Minimum spacing between emitted readings
        """
        self.full_scale = full_scale
        self.update_interval_ms = update_interval_ms
        self._last_emit_ms: float | None = None

    def reset(self) -> None:
        """Forget the last emission so the next update is reported."""
        self._last_emit_ms = None

    def update(self, timestamp_ms: float, magnitude: float) -> GaugeReading | None:
        """Offer a new magnitude.

        Args:
            timestamp_ms: Sample timestamp
            magnitude: Current magnitude (m/s²)

        Returns:
            GaugeReading if the update interval has passed, None otherwise
        """
        if (
            self._last_emit_ms is not None
            and timestamp_ms - self._last_emit_ms <= self.update_interval_ms
        ):
            return None

        self._last_emit_ms = timestamp_ms
        return GaugeReading(
            timestamp_ms=timestamp_ms,
            magnitude=magnitude,
            fraction=min(1.0, max(0.0, magnitude / self.full_scale)),
        )
