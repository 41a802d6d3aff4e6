"""Delayed continuations for the resolve pause and computer think-time.

The engine never sleeps. It hands a callback and a delay to a Scheduler;
the host decides how time passes (a test stepping a manual clock, an
asyncio loop, or nothing at all for headless play).
"""

import asyncio
import heapq
import itertools
from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass, field
from typing import Callable

Callback = Callable[[], None]


class Scheduler(ABC):
    """Abstract continuation scheduler."""

    @abstractmethod
    def call_later(self, delay: float, callback: Callback) -> None:
        """Run callback once, roughly delay seconds from now."""
        ...


class ImmediateScheduler(Scheduler):
    """Runs continuations right away, ignoring the delay.

    A continuation scheduled from inside another one is queued and run
    after the outer one returns, so continuations never nest.
    """

    def __init__(self) -> None:
        self._queue: deque[Callback] = deque()
        self._draining = False

    def call_later(self, delay: float, callback: Callback) -> None:
        self._queue.append(callback)
        if self._draining:
            return

        self._draining = True
        try:
            while self._queue:
                self._queue.popleft()()
        finally:
            self._draining = False


@dataclass(order=True)
class _ScheduledCall:
    due: float
    seq: int
    callback: Callback = field(compare=False)


class ManualScheduler(Scheduler):
    """Queues continuations against a clock that only moves when told to.

    Calls run in due order; ties run in the order they were scheduled.
    Callbacks scheduled while advancing run in the same advance if they
    fall due within it.
    """

    def __init__(self) -> None:
        self._queue: list[_ScheduledCall] = []
        self._counter = itertools.count()
        self.now: float = 0.0

    def call_later(self, delay: float, callback: Callback) -> None:
        heapq.heappush(
            self._queue,
            _ScheduledCall(self.now + max(0.0, delay), next(self._counter), callback),
        )

    def advance(self, seconds: float) -> int:
        """Move the clock forward and run what fell due.

        Args:
            seconds: How far to move the clock

        Returns:
            Number of callbacks run
        """
        target = self.now + seconds
        ran = 0
        while self._queue and self._queue[0].due <= target:
            call = heapq.heappop(self._queue)
            self.now = max(self.now, call.due)
            call.callback()
            ran += 1
        self.now = target
        return ran

    def run_all(self, limit: int = 10_000) -> int:
        """Run queued callbacks until the queue drains.

        Args:
            limit: Safety cap on the number of callbacks

        Returns:
            Number of callbacks run
        """
        ran = 0
        while self._queue and ran < limit:
            call = heapq.heappop(self._queue)
            self.now = max(self.now, call.due)
            call.callback()
            ran += 1
        return ran

    def clear(self) -> None:
        """Drop every queued callback."""
        self._queue.clear()

    @property
    def pending(self) -> int:
        """Return the number of queued callbacks."""
        return len(self._queue)


class AsyncioScheduler(Scheduler):
    """Schedules continuations on an asyncio event loop."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def call_later(self, delay: float, callback: Callback) -> None:
        loop = self._loop or asyncio.get_running_loop()
        loop.call_later(max(0.0, delay), callback)
