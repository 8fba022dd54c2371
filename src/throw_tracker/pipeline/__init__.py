"""Session orchestration combining detector, sensors and metrics."""

from throw_tracker.pipeline.session import ThrowSession

__all__ = ["ThrowSession"]
