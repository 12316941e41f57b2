"""
Delayed callback scheduling for the round engine.

The round engine never sleeps; it hands callbacks to a Scheduler. In a running
game that is the host asyncio loop. ManualScheduler runs the same callbacks
against a clock that only moves when told to, for tests and simulations.
"""

from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Tuple
import asyncio
import heapq
import itertools


class Scheduler(ABC):
    """Runs a callback once after a delay, on the engine's thread."""

    @abstractmethod
    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> None:
        """
        Run callback after delay_ms milliseconds.

        Args:
            delay_ms: Delay in milliseconds
            callback: Zero-argument function to run
        """
        pass


class LoopScheduler(Scheduler):
    """
    Scheduler backed by an asyncio event loop.

    Without an explicit loop the running loop at scheduling time is used, so
    calls must come from inside that loop.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> None:
        loop = self._loop or asyncio.get_running_loop()
        loop.call_later(delay_ms / 1000.0, callback)


class ManualScheduler(Scheduler):
    """
    Scheduler with a virtual millisecond clock.

    Callbacks run only from advance(), in due-time order; callbacks due at the
    same time run in the order they were scheduled.
    """

    def __init__(self):
        self.now = 0
        self._queue: List[Tuple[int, int, Callable[[], None]]] = []
        self._counter = itertools.count()

    @property
    def pending(self) -> int:
        return len(self._queue)

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> None:
        heapq.heappush(self._queue, (self.now + delay_ms, next(self._counter), callback))

    def advance(self, delay_ms: int) -> int:
        """
        Move the clock forward, running every callback that becomes due.

        Callbacks scheduled while advancing run too if they fall inside the
        window.

        Returns:
            Number of callbacks run
        """
        target = self.now + delay_ms
        ran = 0
        while self._queue and self._queue[0][0] <= target:
            due, _, callback = heapq.heappop(self._queue)
            self.now = due
            callback()
            ran += 1
        self.now = target
        return ran

    def run_all(self) -> int:
        """Run every pending callback, including ones scheduled meanwhile."""
        ran = 0
        while self._queue:
            ran += self.advance(self._queue[0][0] - self.now)
        return ran
