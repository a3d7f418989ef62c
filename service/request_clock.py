"""Minimum-interval clock shared by every icon generation request."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager

logger = logging.getLogger("ig.request_clock")

Sleeper = Callable[[float], None]


class RequestClock:
    """Tracks the last outbound generation request and spaces new ones out.

    The clock starts at the epoch, so the first request of a process is never
    delayed, and it is never reset between batches. A lock is held from the
    wait until the request completes, so concurrent batches sharing one
    client still respect the interval.
    """

    def __init__(
        self,
        min_interval: float = 12.0,
        *,
        clock: Callable[[], float] = time.time,
        sleeper: Sleeper | None = None,
    ) -> None:
        self.min_interval = float(min_interval)
        self._clock = clock
        self._sleeper = sleeper
        self._lock = threading.Lock()
        self.last_request_at = 0.0

    def now(self) -> float:
        return self._clock()

    def remaining(self) -> float:
        """Seconds left before the next request may be issued."""
        elapsed = self._clock() - self.last_request_at
        return max(0.0, self.min_interval - elapsed)

    def pause(self, seconds: float, cancel_event: threading.Event | None = None) -> bool:
        """Block for ``seconds``; return False if cancelled."""
        if seconds > 0:
            if self._sleeper is not None:
                self._sleeper(seconds)
            elif cancel_event is not None:
                cancel_event.wait(seconds)
            else:
                time.sleep(seconds)
        return cancel_event is None or not cancel_event.is_set()

    @contextmanager
    def turn(self, cancel_event: threading.Event | None = None) -> Iterator[bool]:
        """Hold the request slot; yields False when cancelled during the wait."""
        with self._lock:
            delay = self.remaining()
            if delay > 0:
                logger.info("Waiting %.1fs before next generation request", delay)
            if not self.pause(delay, cancel_event):
                yield False
                return
            self.last_request_at = self._clock()
            try:
                yield True
            finally:
                self.last_request_at = self._clock()
