"""
JAM Signage - Layout Mode Controller

Composes the rotators into the single "what to show now" value the renderer
consumes.

=== Modes ===

NORMAL (initial)
  - L-bar layout in the foreground: primary media in the main region, sidebar
    ad on the right, ticker/stripe strip along the bottom
INTERRUPT
  - A fullscreen ad covers the screen, primary media shrinks to
    picture-in-picture

Only the FullscreenInterruptScheduler moves between the two. The controller
never pauses the other rotators during a takeover; they keep cycling
underneath and the renderer decides what is visible from the snapshot.
"""

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Optional, Protocol

from jam_signage.content import ContentItem, ContentPools
from jam_signage.scheduler.fullscreen_interrupt import (
    ActiveInterrupt,
    FullscreenInterruptScheduler,
    PresentationMode,
)
from jam_signage.scheduler.playlist_rotator import PlaylistRotator
from jam_signage.scheduler.slot_rotator import SlotRotator
from jam_signage.scheduler.ticker_alternator import TickerAdAlternator, TickerPhase
from jam_signage.scheduler.timer import TimerLoop
from jam_signage.services.common.rotation_config import RotationConfig

logger = logging.getLogger(__name__)

# Default for update_content arguments that should keep their previous content
_UNCHANGED: Any = object()


class ForegroundLayer(Enum):
    L_BAR = "l_bar"
    FULLSCREEN_AD = "fullscreen_ad"


class PrimaryPlacement(Enum):
    MAIN = "main"
    PICTURE_IN_PICTURE = "picture_in_picture"


@dataclass(frozen=True)
class Presentation:
    """Immutable snapshot of everything the renderer needs for one frame."""
    mode: PresentationMode
    active_interrupt: Optional[ActiveInterrupt]
    primary_item: Optional[ContentItem]
    primary_is_request: bool
    sidebar_item: Optional[ContentItem]
    ticker_phase: TickerPhase
    ticker_content: Any

    @property
    def foreground(self) -> ForegroundLayer:
        if self.mode == PresentationMode.INTERRUPT:
            return ForegroundLayer.FULLSCREEN_AD
        return ForegroundLayer.L_BAR

    @property
    def primary_placement(self) -> PrimaryPlacement:
        if self.mode == PresentationMode.INTERRUPT:
            return PrimaryPlacement.PICTURE_IN_PICTURE
        return PrimaryPlacement.MAIN


class PresentationListener(Protocol):
    def on_presentation_changed(self, presentation: Presentation) -> None:
        ...


class LayoutModeController:
    """
    Owns the rotators for one display and exposes the composed presentation.

    Args:
        loop: Event loop every rotator schedules on.
        config: Rotation durations and periods.
        rng: Random source shared by interrupt selection and shuffle.
        sidebar_fallback: Placeholder shown when there are no sidebar ads.
        listener: Notified with a fresh Presentation after every change.
    """

    def __init__(
        self,
        loop: TimerLoop,
        config: Optional[RotationConfig] = None,
        rng: Optional[random.Random] = None,
        sidebar_fallback: Optional[ContentItem] = None,
        listener: Optional[PresentationListener] = None,
    ):
        self.config = config or RotationConfig()
        self.listener = listener
        rng = rng or random.Random()

        self.sidebar = SlotRotator(
            loop,
            name="sidebar",
            default_duration_seconds=self.config.sidebar_ad_seconds,
            fallback=sidebar_fallback,
            on_change=self._on_component_changed,
        )
        self.ticker = TickerAdAlternator(
            loop,
            ticker_dwell_ms=self.config.ticker_dwell_ms,
            default_ad_duration_seconds=self.config.stripe_ad_seconds,
            on_change=self._on_component_changed,
        )
        self.interrupts = FullscreenInterruptScheduler(
            loop,
            trigger_period_ms=self.config.interrupt_period_ms,
            default_duration_seconds=self.config.fullscreen_ad_seconds,
            rng=rng,
            on_change=self._on_component_changed,
        )
        self.playlist = PlaylistRotator(
            loop,
            default_image_seconds=self.config.primary_image_seconds,
            shuffle=self.config.shuffle,
            rng=rng,
            on_change=self._on_component_changed,
        )
        self._started = False

    @property
    def mode(self) -> PresentationMode:
        return self.interrupts.mode

    @property
    def active_interrupt(self) -> Optional[ActiveInterrupt]:
        return self.interrupts.active_interrupt

    def presentation(self) -> Presentation:
        return Presentation(
            mode=self.interrupts.mode,
            active_interrupt=self.interrupts.active_interrupt,
            primary_item=self.playlist.current(),
            primary_is_request=self.playlist.is_request,
            sidebar_item=self.sidebar.current(),
            ticker_phase=self.ticker.phase,
            ticker_content=self.ticker.current_content(),
        )

    def start(self) -> None:
        logger.info("Starting content rotation")
        self.sidebar.start()
        self.ticker.start()
        self.interrupts.start()
        self.playlist.start()
        self._started = True
        self._publish()

    def stop(self) -> None:
        self._started = False
        self.sidebar.stop()
        self.ticker.stop()
        self.interrupts.stop()
        self.playlist.stop()
        logger.info("Content rotation stopped")

    def update_content(
        self,
        pools: Optional[ContentPools] = None,
        ticker_content: Any = _UNCHANGED,
        playlist: Optional[Iterable[ContentItem]] = None,
    ) -> None:
        """
        Push a content refresh. Each argument given is a full replacement;
        pools and playlist left as None keep their previous content. ticker_content
        keeps its previous content when omitted; an explicit None clears it.
        """
        if pools is not None:
            logger.info(
                f"Ad pools updated: {len(pools.sidebar)} sidebar, "
                f"{len(pools.stripe)} stripe, {len(pools.fullscreen)} fullscreen"
            )
            self.sidebar.replace_items(pools.sidebar)
            self.ticker.replace_ads(pools.stripe)
            self.interrupts.replace_ads(pools.fullscreen)
        if ticker_content is not _UNCHANGED:
            self.ticker.set_ticker_content(ticker_content)
        if playlist is not None:
            self.playlist.replace_items(playlist)

    def _on_component_changed(self, component: object) -> None:
        if self._started:
            self._publish()

    def _publish(self) -> None:
        if self.listener is not None:
            self.listener.on_presentation_changed(self.presentation())
