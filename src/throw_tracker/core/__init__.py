"""Core infrastructure: config, types, exceptions, and logging."""

from throw_tracker.core.config import Settings, get_settings
from throw_tracker.core.exceptions import (
    RecordingError,
    SensorUnavailableError,
    ThrowTrackerError,
)
from throw_tracker.core.logging import configure_logging, get_logger, setup_logging
from throw_tracker.core.types import (
    GaugeReading,
    PhaseChange,
    Sample,
    ThrowPhase,
    ThrowResult,
    ThrowStats,
    ThrowStatus,
)

__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Types
    "Sample",
    "ThrowPhase",
    "ThrowStatus",
    "ThrowResult",
    "PhaseChange",
    "GaugeReading",
    "ThrowStats",
    # Exceptions
    "ThrowTrackerError",
    "SensorUnavailableError",
    "RecordingError",
    # Logging
    "setup_logging",
    "configure_logging",
    "get_logger",
]
