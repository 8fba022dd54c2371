"""Live throw session orchestration."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterable, Callable

from throw_tracker.analysis.calculator import sample_magnitude
from throw_tracker.analysis.detector import ThrowDetector
from throw_tracker.analysis.filters import AccelerationGauge
from throw_tracker.analysis.metrics import MetricsTracker
from throw_tracker.core.config import Settings, get_settings
from throw_tracker.core.exceptions import SensorUnavailableError
from throw_tracker.core.logging import get_logger
from throw_tracker.core.scheduler import AsyncioScheduler, Scheduler
from throw_tracker.core.types import (
    GaugeReading,
    PhaseChange,
    Sample,
    ThrowPhase,
    ThrowResult,
    ThrowStats,
    ThrowStatus,
)

logger = get_logger(__name__)


class ThrowSession:
    """Runs one throw attempt at a time against a live sample source.

    Coordinates:
    - Arming the detector on the event loop clock
    - Feeding samples in arrival order
    - Throttled gauge readings and phase notifications
    - Resolving the single terminal result
    - Recording attempts in the metrics tracker
    """

    def __init__(
        self,
        settings: Settings | None = None,
        metrics: MetricsTracker | None = None,
    ) -> None:
        """Initialize session runner.

        Args:
            settings: Application settings (uses defaults if None)
            metrics: Attempt tracker shared across sessions
        """
        self.settings = settings or get_settings()
        self._metrics = metrics or MetricsTracker()
        self._gauge = AccelerationGauge(
            full_scale=self.settings.gauge.full_scale,
            update_interval_ms=self.settings.gauge.update_interval_ms,
        )
        self._detector: ThrowDetector | None = None
        self._samples_received = 0
        self._phase_listeners: list[Callable[[PhaseChange], None]] = []
        self._gauge_listeners: list[Callable[[GaugeReading], None]] = []

    @property
    def stats(self) -> ThrowStats:
        """Get attempt history."""
        return self._metrics.stats

    @property
    def metrics(self) -> MetricsTracker:
        """Get the attempt tracker."""
        return self._metrics

    @property
    def current_phase(self) -> ThrowPhase | None:
        """Phase of the running attempt, None before the first run."""
        return self._detector.current_phase if self._detector else None

    @property
    def samples_received(self) -> int:
        """Well-formed samples processed by the current or last attempt."""
        return self._samples_received

    def on_phase_change(self, listener: Callable[[PhaseChange], None]) -> None:
        """Register a callback for phase transitions."""
        self._phase_listeners.append(listener)

    def on_gauge(self, listener: Callable[[GaugeReading], None]) -> None:
        """Register a callback for throttled acceleration readings."""
        self._gauge_listeners.append(listener)

    async def run(
        self,
        samples: AsyncIterable[Sample],
        scheduler: Scheduler | None = None,
    ) -> ThrowResult:
        """Run a single attempt until it finishes.

        Sample timestamps must be on the scheduler clock (a SensorFeed bound
        to the same scheduler guarantees this).

        Args:
            samples: Async source of samples
            scheduler: Timer source (event loop clock if None)

        Returns:
            Terminal result of the attempt

        Raises:
            SensorUnavailableError: If the session timed out without a well-formed sample
        """
        loop = asyncio.get_running_loop()
        scheduler = scheduler or AsyncioScheduler(loop)

        detector = ThrowDetector(self.settings.detection, scheduler)
        self._detector = detector
        self._samples_received = 0
        self._gauge.reset()

        done: asyncio.Future[ThrowResult] = loop.create_future()

        def resolve(result: ThrowResult) -> None:
            if not done.done():
                done.set_result(result)

        detector.on_result(resolve)
        for listener in self._phase_listeners:
            detector.on_phase_change(listener)

        detector.arm()
        consumer = asyncio.create_task(self._consume(samples, detector))

        def propagate_failure(task: asyncio.Task[None]) -> None:
            if task.cancelled() or done.done():
                return
            exc = task.exception()
            if exc is not None:
                done.set_exception(exc)

        consumer.add_done_callback(propagate_failure)

        try:
            result = await done
        finally:
            detector.disarm()
            consumer.cancel()
            await asyncio.gather(consumer, return_exceptions=True)

        if result.status is ThrowStatus.TIMEOUT and self._samples_received == 0:
            raise SensorUnavailableError(
                f"No samples received within {self.settings.detection.session_timeout_ms:.0f} ms"
            )

        if self._metrics.add_result(result):
            logger.info("New best throw: %.2f m", result.height_m)

        logger.info(
            "Attempt finished: %s (%.2f m, free-fall %.3f s)",
            result.status.name,
            result.height_m,
            result.freefall_duration_s,
        )
        return result

    async def _consume(self, samples: AsyncIterable[Sample], detector: ThrowDetector) -> None:
        """Feed samples to the detector until it finishes or the source ends.

        Readings stamped before the detector was armed belong to an earlier
        attempt and are dropped. Only well-formed readings count as received.
        """
        gravity = self.settings.detection.gravity
        armed_at = detector.armed_at_ms

        async for sample in samples:
            if not detector.is_active:
                break

            if armed_at is not None and sample.timestamp_ms < armed_at:
                logger.debug("Dropping stale sample at %.0f ms", sample.timestamp_ms)
                continue

            magnitude = sample_magnitude(sample, gravity)
            if magnitude is None:
                logger.debug("Skipping incomplete sample at %.0f ms", sample.timestamp_ms)
                continue

            self._samples_received += 1
            detector.process_sample(sample)

            reading = self._gauge.update(sample.timestamp_ms, magnitude)
            if reading is not None:
                self._emit_gauge(reading)

            if not detector.is_active:
                break

        logger.debug("Sample source drained after %d samples", self._samples_received)

    def _emit_gauge(self, reading: GaugeReading) -> None:
        for listener in self._gauge_listeners:
            try:
                listener(reading)
            except Exception:
                logger.exception("Gauge listener failed")

    def reset(self) -> None:
        """Clear attempt history."""
        self._metrics.reset()
        logger.info("Attempt history reset")
