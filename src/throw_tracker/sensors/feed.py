"""Callback-to-async adapter for live accelerometer readings."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator

from throw_tracker.core.scheduler import Scheduler
from throw_tracker.core.types import Sample


class SensorFeed:
    """Async sample stream fed by a sensor callback.

    The sensor driver calls ``push()`` for every reading; the session consumes
    the feed with ``async for``. Readings pushed without a timestamp are
    stamped on the scheduler clock so they share a time base with the
    detector's timers.
    """

    def __init__(self, scheduler: Scheduler) -> None:
        """Initialize feed.

        Args:
            scheduler: Clock used to stamp readings
        """
        self.scheduler = scheduler
        self._queue: asyncio.Queue[Sample | None] = asyncio.Queue()
        self._closed = False
        self._pushed = 0

    @property
    def is_closed(self) -> bool:
        """Check if the feed has been closed."""
        return self._closed

    @property
    def sample_count(self) -> int:
        """Number of readings accepted so far."""
        return self._pushed

    def push(
        self,
        ax: float | None,
        ay: float | None,
        az: float | None,
        timestamp_ms: float | None = None,
    ) -> Sample | None:
        """Accept one reading from the sensor callback.

        Args:
            ax: X acceleration including gravity (m/s²)
            ay: Y acceleration including gravity (m/s²)
            az: Z acceleration including gravity (m/s²)
            timestamp_ms: Reading time (defaults to the scheduler clock)

        Returns:
            The queued Sample, or None if the feed is closed
        """
        if self._closed:
            return None

        sample = Sample(
            timestamp_ms=self.scheduler.now() if timestamp_ms is None else timestamp_ms,
            ax=ax,
            ay=ay,
            az=az,
        )
        self._queue.put_nowait(sample)
        self._pushed += 1
        return sample

    def close(self) -> None:
        """End the stream; consumers stop after draining queued samples."""
        if self._closed:
            return
        self._closed = True
        self._queue.put_nowait(None)

    def __aiter__(self) -> AsyncIterator[Sample]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[Sample]:
        while True:
            sample = await self._queue.get()
            if sample is None:
                return
            yield sample
