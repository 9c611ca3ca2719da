"""
JAM Signage - Fullscreen Interrupt Scheduler

Every interrupt period (60s by default) one fullscreen-tagged ad is picked at
random and takes over the whole screen until its own duration (15s default)
elapses.

The presentation mode is a tagged variant with two constructors:
  - InterruptMode is only ever built by the trigger handler (NORMAL -> INTERRUPT)
  - NormalMode is only ever built by the expiry handler (INTERRUPT -> NORMAL)
    and by stop(), which drops a takeover in progress

Triggers that land while an interrupt is showing, or while the fullscreen pool
is empty, are dropped rather than queued.
"""

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, Optional, Tuple, Union

from jam_signage.constants import DEFAULT_FULLSCREEN_AD_SECONDS, DEFAULT_INTERRUPT_PERIOD_MS
from jam_signage.content import ContentItem, dwell_ms
from jam_signage.scheduler.timer import RotationTimer, TimerLoop

logger = logging.getLogger(__name__)


class PresentationMode(Enum):
    NORMAL = "normal"
    INTERRUPT = "interrupt"


@dataclass(frozen=True)
class ActiveInterrupt:
    item: ContentItem
    armed_at: float


@dataclass(frozen=True)
class NormalMode:
    mode = PresentationMode.NORMAL
    active_interrupt = None


@dataclass(frozen=True)
class InterruptMode:
    active_interrupt: ActiveInterrupt
    mode = PresentationMode.INTERRUPT


ModeState = Union[NormalMode, InterruptMode]


class FullscreenInterruptScheduler:
    """Promotes a random fullscreen ad to a temporary takeover."""

    def __init__(
        self,
        loop: TimerLoop,
        ads: Iterable[ContentItem] = (),
        trigger_period_ms: int = DEFAULT_INTERRUPT_PERIOD_MS,
        default_duration_seconds: int = DEFAULT_FULLSCREEN_AD_SECONDS,
        rng: Optional[random.Random] = None,
        on_change: Optional[Callable[["FullscreenInterruptScheduler"], None]] = None,
    ):
        self.trigger_period_ms = trigger_period_ms
        self.default_duration_seconds = default_duration_seconds
        self.on_change = on_change
        self._loop = loop
        self._rng = rng or random.Random()
        self._ads: Tuple[ContentItem, ...] = tuple(ads)
        self._state: ModeState = NormalMode()
        self._trigger_timer = RotationTimer(loop, "interrupt-trigger")
        self._expiry_timer = RotationTimer(loop, "interrupt-expiry")

    @property
    def ads(self) -> Tuple[ContentItem, ...]:
        return self._ads

    @property
    def state(self) -> ModeState:
        return self._state

    @property
    def mode(self) -> PresentationMode:
        return self._state.mode

    @property
    def active_interrupt(self) -> Optional[ActiveInterrupt]:
        return self._state.active_interrupt

    def start(self) -> None:
        self._trigger_timer.arm(self.trigger_period_ms, self._on_trigger)

    def stop(self) -> None:
        """Cancel both timers. A takeover in progress is dropped, not resumed."""
        self._trigger_timer.cancel()
        self._expiry_timer.cancel()
        self._state = NormalMode()

    def replace_ads(self, ads: Iterable[ContentItem]) -> None:
        """
        Swap in a new fullscreen pool.

        The trigger period is unaffected. A takeover in progress keeps running
        unless the pool is now empty, in which case it expires immediately.
        """
        self._ads = tuple(ads)
        if not self._ads and self._state.mode == PresentationMode.INTERRUPT:
            logger.info("Fullscreen pool emptied, ending takeover early")
            self._expiry_timer.cancel()
            self._on_expiry()

    def _on_trigger(self) -> None:
        # Fixed period, independent of whether this attempt succeeds
        self._trigger_timer.arm(self.trigger_period_ms, self._on_trigger)

        if self._state.mode != PresentationMode.NORMAL:
            logger.debug("Interrupt trigger dropped: takeover already active")
            return
        if not self._ads:
            logger.debug("Interrupt trigger dropped: fullscreen pool is empty")
            return

        item = self._rng.choice(self._ads)
        self._state = InterruptMode(ActiveInterrupt(item=item, armed_at=self._loop.now()))
        self._expiry_timer.arm(dwell_ms(item, self.default_duration_seconds), self._on_expiry)
        logger.info(f"Fullscreen takeover started: ad {item.id}")
        self._notify()

    def _on_expiry(self) -> None:
        ended = self._state.active_interrupt
        self._state = NormalMode()
        if ended is not None:
            logger.info(f"Fullscreen takeover ended: ad {ended.item.id}")
        self._notify()

    def _notify(self) -> None:
        if self.on_change is not None:
            self.on_change(self)
