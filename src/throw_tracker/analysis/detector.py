"""Throw detection state machine.

This module is pure logic with NO I/O. Time only enters through sample
timestamps and the injected Scheduler.
"""

from __future__ import annotations

import itertools
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from throw_tracker.analysis.calculator import dynamic_threshold, estimate_height, sample_magnitude
from throw_tracker.analysis.filters import RollingHistory
from throw_tracker.core.config import DetectionSettings
from throw_tracker.core.logging import get_logger
from throw_tracker.core.scheduler import Scheduler, TimerHandle, VirtualScheduler
from throw_tracker.core.types import PhaseChange, Sample, ThrowPhase, ThrowResult, ThrowStatus

logger = get_logger(__name__)

PhaseListener = Callable[[PhaseChange], None]
ResultListener = Callable[[ThrowResult], None]


@dataclass
class DetectorState:
    """Internal state for one throw session."""

    phase: ThrowPhase = ThrowPhase.IDLE
    armed_at_ms: float = 0.0
    settled: bool = False
    throw_started_at_ms: float | None = None
    freefall_started_at_ms: float | None = None
    result: ThrowResult | None = None


class ThrowDetector:
    """State machine for measuring the height of a single throw.

    Transitions:
        IDLE → THROWING: Magnitude exceeds the dynamic threshold after settling
        THROWING → FREE_FALLING: Magnitude drops below the free-fall threshold
        FREE_FALLING → FINISHED: Magnitude exceeds the impact threshold
        any active phase → FINISHED: Session timer elapses

    Each ``arm()`` starts a new session generation. Timer callbacks carry the
    generation they were scheduled for and are ignored once it is stale, so a
    late timer from a disarmed session never touches the current one.
    """

    def __init__(
        self,
        settings: DetectionSettings | None = None,
        scheduler: Scheduler | None = None,
    ) -> None:
        """Initialize detector.

        Args:
            settings: Detection parameters (uses defaults if None)
            scheduler: Timer source (a fresh VirtualScheduler if None)
        """
        self.settings = settings or DetectionSettings()
        self.scheduler: Scheduler = scheduler or VirtualScheduler()
        self._state = DetectorState()
        self._history = RollingHistory(self.settings.history_size)
        self._armed = False
        self._generation = 0
        self._timers: list[TimerHandle] = []
        self._last_magnitude: float | None = None
        self._phase_listeners: list[PhaseListener] = []
        self._result_listeners: list[ResultListener] = []

    @property
    def current_phase(self) -> ThrowPhase:
        """Get current throw phase."""
        return self._state.phase

    @property
    def is_armed(self) -> bool:
        """True between arm() and disarm()."""
        return self._armed

    @property
    def armed_at_ms(self) -> float | None:
        """Arming time of the current session, None while disarmed."""
        return self._state.armed_at_ms if self._armed else None

    @property
    def is_active(self) -> bool:
        """True while samples are being classified."""
        return self._armed and self._state.phase is not ThrowPhase.FINISHED

    @property
    def is_settled(self) -> bool:
        """True once the settling window of the current session has closed."""
        return self._state.settled

    @property
    def in_flight(self) -> bool:
        """Check if a throw is under way (THROWING or FREE_FALLING)."""
        return self._state.phase in (ThrowPhase.THROWING, ThrowPhase.FREE_FALLING)

    @property
    def result(self) -> ThrowResult | None:
        """Terminal result of the current session, if finished."""
        return self._state.result

    @property
    def history(self) -> list[float]:
        """Recent magnitudes, oldest first."""
        return self._history.values

    @property
    def last_magnitude(self) -> float | None:
        """Magnitude of the most recent well-formed sample."""
        return self._last_magnitude

    @property
    def current_threshold(self) -> float:
        """Dynamic throw threshold for the current history."""
        return dynamic_threshold(self._history.values, self.settings.throw_threshold)

    def on_phase_change(self, listener: PhaseListener) -> None:
        """Register a callback for phase transitions."""
        self._phase_listeners.append(listener)

    def on_result(self, listener: ResultListener) -> None:
        """Register a callback for the terminal result of each session."""
        self._result_listeners.append(listener)

    def arm(self, now_ms: float | None = None) -> None:
        """Start a new session.

        Resets all state, clears the history and schedules the settling and
        session timers. Re-arming an active detector disarms it first.

        Args:
            now_ms: Arming timestamp (defaults to the scheduler clock)
        """
        if self.is_active:
            self.disarm()

        self._cancel_timers()
        self._generation += 1
        generation = self._generation

        armed_at = self.scheduler.now() if now_ms is None else now_ms
        self._state = DetectorState(armed_at_ms=armed_at)
        self._history.clear()
        self._last_magnitude = None
        self._armed = True

        if self.settings.settling_delay_ms > 0:
            self._timers.append(
                self.scheduler.call_later(
                    self.settings.settling_delay_ms,
                    lambda: self._on_settled(generation),
                )
            )
        else:
            self._state.settled = True

        self._timers.append(
            self.scheduler.call_later(
                self.settings.session_timeout_ms,
                lambda: self._on_timeout(generation),
            )
        )

        logger.info(
            "Detector armed at %.0f ms (settling %.0f ms, timeout %.0f ms)",
            armed_at,
            self.settings.settling_delay_ms,
            self.settings.session_timeout_ms,
        )

    def disarm(self) -> None:
        """Stop the session and discard in-flight state.

        Idempotent. After FINISHED the phase and result are kept and no
        notification is emitted.
        """
        if not self._armed:
            return

        self._cancel_timers()

        if self._state.phase is ThrowPhase.FINISHED:
            self._armed = False
            return

        self._generation += 1
        self._state = DetectorState()
        self._history.clear()
        self._last_magnitude = None
        self._armed = False
        logger.info("Detector disarmed")

    def process_sample(self, sample: Sample) -> ThrowResult | None:
        """Classify a new sample.

        Malformed samples are skipped without touching any state.

        Args:
            sample: Incoming accelerometer reading

        Returns:
            ThrowResult if this sample finished the session, None otherwise
        """
        if not self.is_active:
            return None

        magnitude = sample_magnitude(sample, self.settings.gravity)
        if magnitude is None:
            logger.debug("Skipping incomplete sample at %.0f ms", sample.timestamp_ms)
            return None

        self._last_magnitude = magnitude
        self._history.push(magnitude)

        if not self._state.settled:
            return None

        threshold = self.current_threshold

        if self._state.phase is ThrowPhase.IDLE:
            return self._handle_idle(sample.timestamp_ms, magnitude, threshold)

        elif self._state.phase is ThrowPhase.THROWING:
            return self._handle_throwing(sample.timestamp_ms, magnitude)

        elif self._state.phase is ThrowPhase.FREE_FALLING:
            return self._handle_free_falling(sample.timestamp_ms, magnitude)

        return None

    def _handle_idle(
        self,
        timestamp_ms: float,
        magnitude: float,
        threshold: float,
    ) -> ThrowResult | None:
        """Handle IDLE state - watch for the throw spike."""
        if magnitude <= threshold:
            return None

        # Sample clocks may run ahead of the settling timer
        since_armed = timestamp_ms - self._state.armed_at_ms
        if since_armed < self.settings.settling_delay_ms:
            logger.debug(
                "Ignoring early acceleration spike %.2f (%.0f ms after arming)",
                magnitude,
                since_armed,
            )
            return None

        self._state.throw_started_at_ms = timestamp_ms
        logger.info(
            "Throw detected with acceleration %.2f (threshold %.2f)",
            magnitude,
            threshold,
        )
        self._transition(ThrowPhase.THROWING, timestamp_ms, magnitude)
        return None

    def _handle_throwing(self, timestamp_ms: float, magnitude: float) -> ThrowResult | None:
        """Handle THROWING state - wait for the signal to drop into free-fall."""
        if magnitude < self.settings.freefall_threshold:
            self._state.freefall_started_at_ms = timestamp_ms
            logger.info("Free-fall started with acceleration %.2f", magnitude)
            self._transition(ThrowPhase.FREE_FALLING, timestamp_ms, magnitude)

        return None

    def _handle_free_falling(self, timestamp_ms: float, magnitude: float) -> ThrowResult | None:
        """Handle FREE_FALLING state - detect the catch and compute height."""
        if magnitude <= self.settings.impact_threshold:
            return None

        started = self._state.freefall_started_at_ms
        if started is None:
            started = timestamp_ms
        duration_s = (timestamp_ms - started) / 1000.0
        logger.info(
            "Impact detected with acceleration %.2f, free-fall %.3f s",
            magnitude,
            duration_s,
        )

        if duration_s < self.settings.min_freefall_time:
            logger.info(
                "Free-fall too short (%.3f s < %.3f s)",
                duration_s,
                self.settings.min_freefall_time,
            )
            return self._finish(ThrowStatus.TOO_SHORT, timestamp_ms, 0.0, duration_s, magnitude)

        estimate = estimate_height(
            duration_s,
            gravity=self.settings.gravity,
            max_height_m=self.settings.max_realistic_height,
        )
        if estimate.clamped:
            logger.warning(
                "Unrealistic height capped: %.2f m -> %.2f m",
                estimate.raw_height_m,
                estimate.height_m,
            )

        return self._finish(
            ThrowStatus.SUCCESS,
            timestamp_ms,
            estimate.height_m,
            duration_s,
            magnitude,
            clamped=estimate.clamped,
        )

    def _on_settled(self, generation: int) -> None:
        if generation != self._generation or not self.is_active:
            return
        self._state.settled = True
        logger.debug("Settling window closed, ready to detect throws")

    def _on_timeout(self, generation: int) -> None:
        if generation != self._generation or not self.is_active:
            return
        logger.info("Session timeout reached - no complete throw detected")
        self._finish(ThrowStatus.TIMEOUT, self.scheduler.now(), 0.0, 0.0, None)

    def _finish(
        self,
        status: ThrowStatus,
        timestamp_ms: float,
        height_m: float,
        duration_s: float,
        magnitude: float | None,
        clamped: bool = False,
    ) -> ThrowResult:
        """Build the terminal result, stop timers and notify listeners."""
        result = ThrowResult(
            status=status,
            height_m=height_m,
            freefall_duration_s=duration_s,
            finished_at_ms=timestamp_ms,
            throw_started_at_ms=self._state.throw_started_at_ms,
            freefall_started_at_ms=self._state.freefall_started_at_ms,
            clamped=clamped,
        )
        self._state.result = result
        self._cancel_timers()
        self._transition(ThrowPhase.FINISHED, timestamp_ms, magnitude)

        if result.succeeded:
            logger.info("Final height: %.2f m", result.height_m)

        for listener in list(self._result_listeners):
            try:
                listener(result)
            except Exception:
                logger.exception("Result listener failed")

        return result

    def _transition(
        self,
        phase: ThrowPhase,
        timestamp_ms: float,
        magnitude: float | None,
    ) -> None:
        change = PhaseChange(
            previous=self._state.phase,
            current=phase,
            timestamp_ms=timestamp_ms,
            magnitude=magnitude,
        )
        self._state.phase = phase

        for listener in list(self._phase_listeners):
            try:
                listener(change)
            except Exception:
                logger.exception("Phase listener failed")

    def _cancel_timers(self) -> None:
        for timer in self._timers:
            timer.cancel()
        self._timers.clear()


def detect_throw_batch(
    samples: Iterable[Sample],
    settings: DetectionSettings | None = None,
    armed_at_ms: float | None = None,
) -> ThrowResult:
    """Replay a recorded sample sequence through a fresh detector.

    Runs on a virtual clock: timers due at or before a sample's timestamp fire
    before that sample is processed. When the samples run out before the
    session finishes, the clock is advanced to the session deadline, so the
    result is TIMEOUT rather than missing.

    Args:
        samples: Samples in timestamp order
        settings: Detection settings
        armed_at_ms: Arming time (defaults to the first sample's timestamp)

    Returns:
        Terminal result of the session
    """
    settings = settings or DetectionSettings()
    iterator = iter(samples)
    first = next(iterator, None)

    if armed_at_ms is None:
        armed_at_ms = first.timestamp_ms if first is not None else 0.0

    scheduler = VirtualScheduler(start_ms=armed_at_ms)
    detector = ThrowDetector(settings, scheduler)
    detector.arm(armed_at_ms)

    head = [first] if first is not None else []
    for sample in itertools.chain(head, iterator):
        scheduler.advance_to(sample.timestamp_ms)
        if not detector.is_active:
            break
        detector.process_sample(sample)
        if not detector.is_active:
            break

    scheduler.advance_to(armed_at_ms + settings.session_timeout_ms)

    result = detector.result
    assert result is not None
    return result

