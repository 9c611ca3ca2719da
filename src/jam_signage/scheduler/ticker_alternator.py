"""
JAM Signage - Ticker / Stripe Ad Alternation

The ticker strip is time-shared between the news ticker and short "stripe"
ads:

    TICKER (30s) -> AD (ad duration, default 10s) -> TICKER -> AD -> ...

With no stripe ads the strip stays on the ticker. The ad pool is re-checked
each time the ticker dwell elapses, so ads added by a content refresh are
picked up at the next ticker exit.
"""

import logging
from enum import Enum
from typing import Any, Callable, Iterable, Optional

from jam_signage.constants import DEFAULT_STRIPE_AD_SECONDS, DEFAULT_TICKER_DWELL_MS
from jam_signage.content import ContentItem, dwell_ms
from jam_signage.scheduler.slot_rotator import SlotRotator
from jam_signage.scheduler.timer import RotationTimer, TimerLoop

logger = logging.getLogger(__name__)


class TickerPhase(Enum):
    TICKER = "ticker"
    AD = "ad"


class TickerAdAlternator:
    """Shows exactly one of {ticker, single stripe ad} at any time."""

    def __init__(
        self,
        loop: TimerLoop,
        ticker_content: Any = None,
        ads: Iterable[ContentItem] = (),
        ticker_dwell_ms: int = DEFAULT_TICKER_DWELL_MS,
        default_ad_duration_seconds: int = DEFAULT_STRIPE_AD_SECONDS,
        on_change: Optional[Callable[["TickerAdAlternator"], None]] = None,
    ):
        self.ticker_dwell_ms = ticker_dwell_ms
        self.default_ad_duration_seconds = default_ad_duration_seconds
        self.on_change = on_change
        self._ticker_content = ticker_content
        # Never started: the alternator drives the cursor itself
        self.ad_cursor = SlotRotator(
            loop,
            name="stripe",
            items=ads,
            default_duration_seconds=default_ad_duration_seconds,
        )
        self._timer = RotationTimer(loop, "ticker-phase")
        self._phase = TickerPhase.TICKER

    @property
    def phase(self) -> TickerPhase:
        return self._phase

    @property
    def ticker_content(self) -> Any:
        return self._ticker_content

    def current_content(self) -> Any:
        """The ticker content in TICKER phase, the current stripe ad in AD phase."""
        if self._phase == TickerPhase.AD:
            return self.ad_cursor.current()
        return self._ticker_content

    def start(self) -> None:
        self._enter_ticker()

    def stop(self) -> None:
        self._timer.cancel()

    def set_ticker_content(self, content: Any) -> None:
        self._ticker_content = content
        if self._phase == TickerPhase.TICKER:
            self._notify()

    def replace_ads(self, ads: Iterable[ContentItem]) -> None:
        """
        Swap in a new stripe ad pool.

        During an AD phase the ad dwell is restarted against the new pool, or
        the strip goes straight back to the ticker if the pool is now empty.
        The ticker dwell is left alone; it re-checks the pool when it fires.
        """
        self.ad_cursor.replace_items(ads)
        if self._phase != TickerPhase.AD:
            return
        if not self.ad_cursor.items:
            logger.info("Stripe ad pool emptied during ad phase, returning to ticker")
            self._enter_ticker()
        else:
            self._enter_ad()

    def _enter_ticker(self) -> None:
        changed = self._phase != TickerPhase.TICKER
        self._phase = TickerPhase.TICKER
        self._timer.arm(self.ticker_dwell_ms, self._on_ticker_elapsed)
        if changed:
            logger.debug("Ticker strip: showing ticker")
            self._notify()

    def _on_ticker_elapsed(self) -> None:
        if not self.ad_cursor.items:
            # No stripe ads: stay on the ticker
            self._enter_ticker()
            return
        self._enter_ad()

    def _enter_ad(self) -> None:
        self._phase = TickerPhase.AD
        ad = self.ad_cursor.current()
        self._timer.arm(dwell_ms(ad, self.default_ad_duration_seconds), self._on_ad_elapsed)
        logger.debug(f"Ticker strip: showing stripe ad {ad.id}")
        self._notify()

    def _on_ad_elapsed(self) -> None:
        self.ad_cursor.tick()
        self._enter_ticker()

    def _notify(self) -> None:
        if self.on_change is not None:
            self.on_change(self)
