"""
JAM Signage - Rotation Timers

Every scheduler component runs on a single cooperative event loop. The loop is
abstracted behind TimerLoop so the same components run on the GLib main loop
in the display service and on a stepped virtual clock in tests.

RotationTimer is the single-purpose countdown the components share: arm for a
duration, fire once, cancel-safe. Re-arming cancels whatever was pending.
"""

import heapq
import itertools
import logging
from typing import Any, Callable, List, Optional, Protocol, Tuple

from jam_signage.constants import MIN_TIMER_DURATION_MS

logger = logging.getLogger(__name__)


class TimerLoop(Protocol):
    """One-shot timer scheduling on a single-threaded event loop."""

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> Any:
        """Schedule callback once after delay_ms. Returns a cancel handle."""

    def cancel(self, handle: Any) -> None:
        """Cancel a pending callback. Unknown or fired handles are ignored."""

    def now(self) -> float:
        """Current loop time in seconds."""


class GLibTimerLoop:
    """
    TimerLoop backed by the GLib default main context.

    The GLib main loop itself is owned by the service (see
    jam_signage_display.main); this only adds and removes timeout sources.
    """

    def __init__(self):
        # Import GLib here so the scheduler core doesn't require PyGObject
        from gi.repository import GLib
        self._glib = GLib

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> int:
        def _run_once() -> bool:
            callback()
            return False  # Don't repeat the GLib timeout

        return self._glib.timeout_add(delay_ms, _run_once)

    def cancel(self, handle: int) -> None:
        # RotationTimer only cancels sources that haven't fired yet
        self._glib.source_remove(handle)

    def now(self) -> float:
        return self._glib.get_monotonic_time() / 1_000_000


class SteppedTimerLoop:
    """
    Deterministic TimerLoop used for tests and previews.

    Loop time advances only when advance() is called. Callbacks fire in
    due-time order, ties broken by the order they were armed, and callbacks
    armed by other callbacks inside the same step fire too if they fall due.
    """

    def __init__(self, start_ms: int = 0):
        self._now_ms = start_ms
        self._queue: List[Tuple[int, int, Callable[[], None]]] = []
        self._seq = itertools.count()
        self._cancelled = set()

    @property
    def now_ms(self) -> int:
        return self._now_ms

    def now(self) -> float:
        return self._now_ms / 1000

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> int:
        handle = next(self._seq)
        heapq.heappush(self._queue, (self._now_ms + max(0, delay_ms), handle, callback))
        return handle

    def cancel(self, handle: int) -> None:
        if any(entry[1] == handle for entry in self._queue):
            self._cancelled.add(handle)

    def pending(self) -> int:
        """Number of callbacks still waiting to fire."""
        return sum(1 for entry in self._queue if entry[1] not in self._cancelled)

    def advance(self, ms: int) -> int:
        """
        Move loop time forward by ms, firing everything that falls due.

        Args:
            ms: Milliseconds to advance. Must be non-negative.

        Returns:
            Number of callbacks fired.
        """
        if ms < 0:
            raise ValueError("ms must be non-negative")

        target = self._now_ms + ms
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            due_ms, handle, callback = heapq.heappop(self._queue)
            if handle in self._cancelled:
                self._cancelled.discard(handle)
                continue
            self._now_ms = due_ms
            callback()
            fired += 1
        self._now_ms = target
        return fired

    def advance_seconds(self, seconds: float) -> int:
        return self.advance(int(seconds * 1000))


class RotationTimer:
    """
    A re-armable one-shot countdown.

    arm() schedules on_fire once; arming again or calling cancel() before
    expiry guarantees the earlier callback never runs.
    """

    def __init__(self, loop: TimerLoop, name: str = "timer"):
        self.name = name
        self._loop = loop
        self._handle: Optional[Any] = None
        self._generation = 0

    @property
    def armed(self) -> bool:
        return self._handle is not None

    def arm(self, duration_ms: int, on_fire: Callable[[], None]) -> None:
        self.cancel()
        if duration_ms < MIN_TIMER_DURATION_MS:
            logger.debug(f"{self.name}: raising {duration_ms}ms to {MIN_TIMER_DURATION_MS}ms")
            duration_ms = MIN_TIMER_DURATION_MS

        self._generation += 1
        generation = self._generation

        def _fire():
            # A superseded arm must never reach its callback
            if generation != self._generation:
                return
            self._handle = None
            on_fire()

        self._handle = self._loop.call_later(duration_ms, _fire)

    def cancel(self) -> None:
        if self._handle is None:
            return
        self._loop.cancel(self._handle)
        self._handle = None
        self._generation += 1
