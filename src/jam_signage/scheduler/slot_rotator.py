"""
JAM Signage - Slot Rotator

Cycles one active item through a content pool (e.g. the sidebar ads), moving
to the next item each time the current item's dwell duration elapses.
"""

import logging
from typing import Callable, Iterable, Optional, Tuple

from jam_signage.constants import DEFAULT_SIDEBAR_AD_SECONDS
from jam_signage.content import ContentItem, dwell_ms
from jam_signage.scheduler.timer import RotationTimer, TimerLoop

logger = logging.getLogger(__name__)


class RotationCursor:
    """
    Cyclic index over a list of known length.

    The list can shrink underneath the cursor. A stale index is clamped to 0
    when read and reset to 0 on the next advance; it never raises.
    """

    def __init__(self, list_length: int = 0):
        self.index = 0
        self.list_length = list_length

    @property
    def is_stale(self) -> bool:
        return self.list_length > 0 and self.index >= self.list_length

    def clamped(self) -> int:
        return 0 if self.is_stale else self.index

    def advance(self) -> int:
        if self.list_length == 0:
            self.index = 0
        elif self.is_stale:
            logger.debug(f"Stale cursor {self.index} for list of {self.list_length}, resetting to 0")
            self.index = 0
        else:
            self.index = (self.index + 1) % self.list_length
        return self.index

    def resize(self, list_length: int) -> None:
        self.list_length = list_length


class SlotRotator:
    """
    Rotates a single slot through its pool.

    Once started the rotator re-arms its own timer after every advance, so the
    cycle sustains itself for as long as the pool is non-empty. An empty pool
    advertises the fallback placeholder instead of failing.
    """

    def __init__(
        self,
        loop: TimerLoop,
        name: str = "slot",
        items: Iterable[ContentItem] = (),
        default_duration_seconds: int = DEFAULT_SIDEBAR_AD_SECONDS,
        fallback: Optional[ContentItem] = None,
        on_change: Optional[Callable[["SlotRotator"], None]] = None,
    ):
        self.name = name
        self.default_duration_seconds = default_duration_seconds
        self.fallback = fallback
        self.on_change = on_change
        self._items: Tuple[ContentItem, ...] = tuple(items)
        self._cursor = RotationCursor(len(self._items))
        self._timer = RotationTimer(loop, f"{name}-rotation")
        self._running = False

    @property
    def items(self) -> Tuple[ContentItem, ...]:
        return self._items

    @property
    def index(self) -> int:
        return self._cursor.index

    @property
    def running(self) -> bool:
        return self._running

    def current(self) -> Optional[ContentItem]:
        """The item on screen, or the fallback when the pool is empty."""
        if not self._items:
            return self.fallback
        return self._items[self._cursor.clamped()]

    def start(self) -> None:
        self._running = True
        self._arm()

    def stop(self) -> None:
        self._running = False
        self._timer.cancel()

    def tick(self) -> Optional[ContentItem]:
        """Advance to the next item and, while running, re-arm for its dwell."""
        before = self.current()
        self._cursor.advance()
        if self._running:
            self._arm()
        after = self.current()
        if after != before:
            self._notify()
        return after

    def replace_items(self, items: Iterable[ContentItem]) -> None:
        """Swap in a new pool. Pending timers for the old pool are discarded."""
        before = self.current()
        self._items = tuple(items)
        self._cursor.resize(len(self._items))
        logger.debug(f"{self.name}: pool replaced ({len(self._items)} items)")
        if self._running:
            self._arm()
        if self.current() != before:
            self._notify()

    def _arm(self) -> None:
        if not self._items:
            self._timer.cancel()
            return
        self._timer.arm(dwell_ms(self.current(), self.default_duration_seconds), self.tick)

    def _notify(self) -> None:
        if self.on_change is not None:
            self.on_change(self)
