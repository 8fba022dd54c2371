"""Main entry point for Throw Tracker."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

from throw_tracker.analysis.detector import detect_throw_batch
from throw_tracker.analysis.metrics import MetricsTracker, export_stats, import_stats
from throw_tracker.core.config import get_settings
from throw_tracker.core.exceptions import SensorUnavailableError, ThrowTrackerError
from throw_tracker.core.logging import configure_logging, get_logger
from throw_tracker.core.scheduler import AsyncioScheduler
from throw_tracker.core.types import GaugeReading, PhaseChange, ThrowResult, ThrowStatus
from throw_tracker.pipeline.session import ThrowSession
from throw_tracker.sensors.feed import SensorFeed
from throw_tracker.sensors.recording import load_recording
from throw_tracker.sensors.synthetic import synthesize_throw

logger = get_logger(__name__)


def describe_result(result: ThrowResult) -> str:
    """Human-readable outcome line."""
    if result.succeeded:
        return f"Great throw! Height: {result.height_m:.2f} m"
    if result.status is ThrowStatus.TOO_SHORT:
        return "Throw too short. Try again with a higher throw!"
    return "No complete throw detected. Try again!"


def run_replay(path: Path) -> int:
    """Replay a recorded CSV through the detector.

    Returns:
        Exit code (0 for a measured throw, 1 otherwise)
    """
    settings = get_settings()
    samples = load_recording(path)

    if not samples:
        raise SensorUnavailableError(f"{path} contains no samples")

    result = detect_throw_batch(samples, settings.detection)
    print(describe_result(result))
    return 0 if result.succeeded else 1


async def _play_synthetic(session: ThrowSession, height_m: float, seed: int | None) -> ThrowResult:
    """Stream a synthetic throw into a live session in real time."""
    loop = asyncio.get_running_loop()
    scheduler = AsyncioScheduler(loop)
    feed = SensorFeed(scheduler)
    samples = synthesize_throw(height_m, seed=seed)

    async def produce() -> None:
        origin = samples[0].timestamp_ms
        start = scheduler.now()
        for s in samples:
            delay_ms = (s.timestamp_ms - origin) - (scheduler.now() - start)
            if delay_ms > 0:
                await asyncio.sleep(delay_ms / 1000.0)
            feed.push(s.ax, s.ay, s.az)
        feed.close()

    producer = asyncio.create_task(produce())
    try:
        return await session.run(feed, scheduler)
    finally:
        producer.cancel()
        await asyncio.gather(producer, return_exceptions=True)


def run_demo_mode(height_m: float, seed: int | None = None, history: Path | None = None) -> int:
    """Run a live session fed by a synthetic throw.

    Args:
        height_m: Target height of the synthetic throw
        seed: Noise seed
        history: Optional JSON attempt history to load and update

    Returns:
        Exit code
    """
    settings = get_settings()

    tracker = MetricsTracker(import_stats(history) if history and history.exists() else None)
    session = ThrowSession(settings, tracker)

    def show_phase(change: PhaseChange) -> None:
        print(f"[{change.timestamp_ms:10.0f} ms] {change.previous.name} -> {change.current.name}")

    def show_gauge(reading: GaugeReading) -> None:
        bar = "#" * int(reading.fraction * 20)
        logger.debug("Acceleration %5.1f |%-20s|", reading.magnitude, bar)

    session.on_phase_change(show_phase)
    session.on_gauge(show_gauge)

    logger.info("Starting demo throw (target %.2f m)", height_m)
    result = asyncio.run(_play_synthetic(session, height_m, seed))
    print(describe_result(result))

    summary = session.metrics.get_summary()
    if summary.best_height_m is not None:
        print(f"Best: {summary.best_height_m:.2f} m over {summary.total_attempts} attempts")

    if history:
        export_stats(session.stats, history)
        logger.info("Attempt history saved to %s", history)

    return 0 if result.succeeded else 1


def main() -> None:
    """CLI entry point."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Throw Tracker - measure throw height from accelerometer samples"
    )
    parser.add_argument(
        "recording",
        nargs="?",
        type=Path,
        help="CSV recording to replay (timestamp_ms,ax,ay,az)",
    )
    parser.add_argument(
        "--demo",
        action="store_true",
        help="Run a live session fed by a synthetic throw",
    )
    parser.add_argument(
        "--height",
        type=float,
        default=1.5,
        help="Target height for --demo in meters (default: 1.5)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Noise seed for --demo",
    )
    parser.add_argument(
        "--history",
        type=Path,
        help="JSON attempt history to load and update in --demo",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args()

    settings = get_settings()
    configure_logging(settings.logging, debug=args.debug)

    if not args.demo and args.recording is None:
        parser.error("a recording path is required unless --demo is given")

    try:
        if args.demo:
            exit_code = run_demo_mode(args.height, args.seed, args.history)
        else:
            exit_code = run_replay(args.recording)

    except SensorUnavailableError as e:
        logger.error("Sensor unavailable: %s", e)
        exit_code = 2

    except ThrowTrackerError as e:
        logger.error("Tracking error: %s", e)
        exit_code = 2

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        exit_code = 0

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
