"""Cancellable one-shot timers on a millisecond clock.

Two implementations share the same shape:

- AsyncioScheduler runs callbacks on an asyncio event loop for live sessions.
- VirtualScheduler keeps its own clock that only moves when told to, for
  replaying recordings and for tests.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol


class TimerHandle(Protocol):
    """Handle returned by Scheduler.call_later."""

    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Clock plus one-shot timer factory."""

    def now(self) -> float:
        """Current time in milliseconds."""
        ...

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> TimerHandle:
        """Run ``callback`` once after ``delay_ms``."""
        ...


class AsyncioScheduler:
    """Scheduler backed by an asyncio event loop.

    Callbacks run on the loop thread between other tasks, so they never
    interleave with a sample being processed.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        """Initialize scheduler.

        Args:
            loop: Event loop to use (defaults to the running loop)
        """
        self._loop = loop or asyncio.get_running_loop()

    def now(self) -> float:
        return self._loop.time() * 1000.0

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return self._loop.call_later(max(delay_ms, 0.0) / 1000.0, callback)


@dataclass(order=True)
class _VirtualTimer:
    due_ms: float
    seq: int
    callback: Callable[[], None] = field(compare=False)
    cancelled: bool = field(default=False, compare=False)

    def cancel(self) -> None:
        self.cancelled = True


class VirtualScheduler:
    """Deterministic scheduler driven by explicit clock advances.

    Timers due at the same instant fire in the order they were scheduled.
    """

    def __init__(self, start_ms: float = 0.0) -> None:
        """Initialize scheduler.

        Args:
            start_ms: Initial clock value in milliseconds
        """
        self._now = start_ms
        self._timers: list[_VirtualTimer] = []
        self._seq = itertools.count()

    @property
    def pending(self) -> int:
        """Number of timers that have neither fired nor been cancelled."""
        return sum(1 for t in self._timers if not t.cancelled)

    def now(self) -> float:
        return self._now

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> _VirtualTimer:
        timer = _VirtualTimer(
            due_ms=self._now + max(delay_ms, 0.0),
            seq=next(self._seq),
            callback=callback,
        )
        heapq.heappush(self._timers, timer)
        return timer

    def advance_to(self, target_ms: float) -> None:
        """Move the clock forward, firing every timer due on the way.

        The clock never moves backwards; an earlier target only fires timers
        that are already due.

        Args:
            target_ms: Time to advance to in milliseconds
        """
        while self._timers and self._timers[0].due_ms <= target_ms:
            timer = heapq.heappop(self._timers)
            if timer.cancelled:
                continue
            self._now = max(self._now, timer.due_ms)
            timer.callback()

        self._now = max(self._now, target_ms)

    def advance(self, delta_ms: float) -> None:
        """Move the clock forward by ``delta_ms``."""
        self.advance_to(self._now + delta_ms)
