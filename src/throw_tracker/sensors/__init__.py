"""Sample sources: live sensor feed, CSV recordings, synthetic throws."""

from throw_tracker.sensors.feed import SensorFeed
from throw_tracker.sensors.recording import load_recording, save_recording
from throw_tracker.sensors.synthetic import ThrowProfile, synthesize_throw

__all__ = [
    "SensorFeed",
    "load_recording",
    "save_recording",
    "ThrowProfile",
    "synthesize_throw",
]
