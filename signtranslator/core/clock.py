"""
Clock and delayed-task abstraction

Design intent:
- Every component reads time through a Clock, never time.time() directly
- Delayed work returns a TimerHandle that can be cancelled
- Tests drive ManualClock / ManualScheduler instead of sleeping
"""
import heapq
import itertools
import threading
import time
from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Tuple


class Clock(ABC):
    @abstractmethod
    def now(self) -> float:
        pass


class MonotonicClock(Clock):
    def now(self) -> float:
        return time.monotonic()


class ManualClock(Clock):
    """Synthetic time. Only moves when set() / advance() is called."""

    def __init__(self, start: float = 0.0):
        self._now = float(start)

    def now(self) -> float:
        return self._now

    def set(self, value: float):
        if value < self._now:
            raise ValueError(f"ManualClock cannot go backwards ({value} < {self._now})")
        self._now = float(value)

    def advance(self, seconds: float):
        self.set(self._now + seconds)


class TimerHandle:
    """Handle to a scheduled callback."""

    def __init__(self, cancel_fn: Optional[Callable[[], None]] = None):
        self._cancel_fn = cancel_fn
        self._cancelled = False

    def cancel(self):
        if self._cancelled:
            return
        self._cancelled = True
        if self._cancel_fn is not None:
            self._cancel_fn()

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class Scheduler(ABC):
    clock: Clock

    @abstractmethod
    def call_later(self, delay: float, callback: Callable, *args) -> TimerHandle:
        """Run callback(*args) after `delay` seconds of `clock` time."""
        pass


class ThreadingScheduler(Scheduler):
    """Runs each callback on its own threading.Timer."""

    def __init__(self, clock: Optional[Clock] = None):
        self.clock = clock or MonotonicClock()

    def call_later(self, delay: float, callback: Callable, *args) -> TimerHandle:
        timer = threading.Timer(max(0.0, delay), callback, args=args)
        timer.daemon = True
        handle = TimerHandle(timer.cancel)
        timer.start()
        return handle


class ManualScheduler(Scheduler):
    """
    Deterministic scheduler for tests.
    Callbacks run inside advance(), in due-time order (FIFO for equal times).
    """

    def __init__(self, clock: Optional[ManualClock] = None):
        self.clock = clock or ManualClock()
        self._queue: List[Tuple[float, int, TimerHandle, Callable, tuple]] = []
        self._seq = itertools.count()

    def call_later(self, delay: float, callback: Callable, *args) -> TimerHandle:
        handle = TimerHandle()
        due = self.clock.now() + max(0.0, delay)
        heapq.heappush(self._queue, (due, next(self._seq), handle, callback, args))
        return handle

    def advance(self, seconds: float):
        target = self.clock.now() + seconds
        while self._queue and self._queue[0][0] <= target:
            due, _, handle, callback, args = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self.clock.set(max(due, self.clock.now()))
            callback(*args)
        self.clock.set(target)

    @property
    def pending(self) -> int:
        return sum(1 for entry in self._queue if not entry[2].cancelled)
