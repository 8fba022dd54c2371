"""Custom exceptions for Throw Tracker."""


class ThrowTrackerError(Exception):
    """Base exception for all Throw Tracker errors."""

    pass


class SensorUnavailableError(ThrowTrackerError):
    """No acceleration samples arrived during a session."""

    def __init__(self, message: str = "No sensor samples received") -> None:
        self.message = message
        super().__init__(self.message)


class RecordingError(ThrowTrackerError):
    """A sample recording is missing or malformed."""

    def __init__(self, message: str = "Invalid sample recording") -> None:
        self.message = message
        super().__init__(self.message)
