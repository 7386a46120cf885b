"""Cancellable timers for notification expiry.

ThreadingScheduler runs callbacks on a timer thread in real time.
ManualScheduler only moves when advance() is called, so tests can step
through virtual time deterministically.
"""

import heapq
import itertools
import logging
import threading
import time
from typing import Callable, List, Optional, Tuple

logger = logging.getLogger(__name__)


class TimerHandle:
    """Handle returned by a scheduler; cancel() stops the callback from running."""

    def __init__(self, cancel_fn: Optional[Callable[[], None]] = None):
        self._cancel_fn = cancel_fn
        self.cancelled = False

    def cancel(self) -> None:
        if self.cancelled:
            return
        self.cancelled = True
        if self._cancel_fn is not None:
            self._cancel_fn()


class ThreadingScheduler:
    """Wall-clock scheduler backed by threading.Timer."""

    def now(self) -> float:
        return time.monotonic()

    def schedule(self, delay_sec: float, callback: Callable[[], None]) -> TimerHandle:
        timer = threading.Timer(delay_sec, callback)
        timer.daemon = True
        handle = TimerHandle(timer.cancel)
        timer.start()
        return handle


class ManualScheduler:
    """Virtual-time scheduler for tests."""

    def __init__(self, start: float = 0.0):
        self._now = start
        self._seq = itertools.count()
        self._queue: List[Tuple[float, int, TimerHandle, Callable[[], None]]] = []

    def now(self) -> float:
        return self._now

    def schedule(self, delay_sec: float, callback: Callable[[], None]) -> TimerHandle:
        handle = TimerHandle()
        heapq.heappush(self._queue, (self._now + delay_sec, next(self._seq), handle, callback))
        return handle

    @property
    def pending(self) -> int:
        """Number of timers that are scheduled and not cancelled."""
        return sum(1 for _, _, handle, _ in self._queue if not handle.cancelled)

    def advance(self, seconds: float) -> int:
        """Move virtual time forward, firing every timer that comes due.

        Returns:
            Number of callbacks run
        """
        target = self._now + seconds
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            due, _, handle, callback = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self._now = due
            handle.cancelled = True
            callback()
            fired += 1
        self._now = target
        return fired
