"""Throw Tracker: measure how high a phone was thrown from its accelerometer."""

__version__ = "0.1.0"
