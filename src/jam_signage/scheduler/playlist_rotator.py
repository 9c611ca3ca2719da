"""
JAM Signage - Primary Media Playlist

Drives the main media region. Images stay up for their configured duration;
videos play to the end and the renderer reports completion through
media_finished().

Advance order:
1. A pending viewer request (jukebox queue) always goes next
2. Otherwise the next item in order, or the next card of the shuffle deck
"""

import logging
import random
from typing import Callable, Iterable, List, Optional, Tuple

from jam_signage.constants import DEFAULT_PRIMARY_IMAGE_SECONDS
from jam_signage.content import ContentItem, ContentKind, dwell_ms
from jam_signage.scheduler.timer import RotationTimer, TimerLoop

logger = logging.getLogger(__name__)


class PlaylistRotator:
    """Primary media rotation with shuffle and a viewer request queue."""

    def __init__(
        self,
        loop: TimerLoop,
        items: Iterable[ContentItem] = (),
        default_image_seconds: int = DEFAULT_PRIMARY_IMAGE_SECONDS,
        shuffle: bool = False,
        rng: Optional[random.Random] = None,
        on_change: Optional[Callable[["PlaylistRotator"], None]] = None,
    ):
        self.default_image_seconds = default_image_seconds
        self.on_change = on_change
        self._rng = rng or random.Random()
        self._items: Tuple[ContentItem, ...] = tuple(items)
        self._index = 0
        self._shuffle = shuffle
        self._deck: List[int] = []
        self._requests: List[str] = []
        self._is_request = False
        self._timer = RotationTimer(loop, "playlist")
        self._running = False

    @property
    def items(self) -> Tuple[ContentItem, ...]:
        return self._items

    @property
    def index(self) -> int:
        return self._index

    @property
    def shuffle(self) -> bool:
        return self._shuffle

    @property
    def requests(self) -> Tuple[str, ...]:
        return tuple(self._requests)

    @property
    def is_request(self) -> bool:
        """True while the current item is playing because a viewer asked for it."""
        return self._is_request

    def current(self) -> Optional[ContentItem]:
        if not self._items:
            return None
        if self._index >= len(self._items):
            return self._items[0]
        return self._items[self._index]

    def start(self) -> None:
        self._running = True
        self._arm()

    def stop(self) -> None:
        self._running = False
        self._timer.cancel()

    def media_finished(self, item_id: Optional[str] = None) -> None:
        """
        Called by the renderer when a video reaches its end.

        Args:
            item_id: The finished item's id. Late reports for an item that is
                     no longer current are ignored.
        """
        current = self.current()
        if current is None:
            return
        if item_id is not None and item_id != current.id:
            logger.debug(f"Ignoring stale completion for {item_id}")
            return
        self.advance()

    def advance(self) -> Optional[ContentItem]:
        """Move to the next item: pending request first, then order or shuffle."""
        if not self._items:
            return None

        while self._requests:
            requested = self._requests.pop(0)
            idx = self._find(requested)
            if idx is not None:
                self._is_request = True
                self._move_to(idx)
                return self.current()
            logger.info(f"Requested item {requested} is no longer in the playlist")

        self._is_request = False
        if self._shuffle and len(self._items) > 1:
            self._move_to(self._next_from_deck())
        else:
            self._move_to((self._index + 1) % len(self._items))
        return self.current()

    def previous(self) -> Optional[ContentItem]:
        if not self._items:
            return None
        self._is_request = False
        self._move_to((self._index - 1) % len(self._items))
        return self.current()

    def jump_to(self, item_id: str) -> bool:
        idx = self._find(item_id)
        if idx is None:
            return False
        self._is_request = False
        self._move_to(idx)
        return True

    def request(self, item_id: str) -> bool:
        """Queue an item to play next. Duplicate requests are ignored."""
        if item_id in self._requests:
            return False
        self._requests.append(item_id)
        logger.info(f"Queued request for {item_id} ({len(self._requests)} pending)")
        return True

    def remove_request(self, position: int) -> bool:
        if not 0 <= position < len(self._requests):
            return False
        del self._requests[position]
        return True

    def clear_requests(self) -> None:
        self._requests.clear()

    def set_shuffle(self, shuffle: bool) -> None:
        if shuffle != self._shuffle:
            self._shuffle = shuffle
            self._deck = []
            logger.info(f"Playlist order: {'shuffle' if shuffle else 'sequential'}")

    def replace_items(self, items: Iterable[ContentItem]) -> None:
        """
        Swap in a refreshed playlist.

        The current item keeps playing if it is still in the new playlist.
        Otherwise playback restarts from the first item (a random one when
        shuffling).
        """
        new_items = tuple(items)
        if [i.id for i in new_items] == [i.id for i in self._items]:
            self._items = new_items
            self._arm()
            return

        current = self.current()
        self._items = new_items
        self._deck = []

        idx = self._find(current.id) if current is not None else None
        if idx is not None:
            # Same item keeps playing, only its position moved
            self._index = idx
            self._arm()
            return

        if self._shuffle and new_items:
            self._index = self._rng.randrange(len(new_items))
        else:
            self._index = 0
        self._is_request = False
        self._arm()
        self._notify()

    def _find(self, item_id: str) -> Optional[int]:
        for idx, item in enumerate(self._items):
            if item.id == item_id:
                return idx
        return None

    def _next_from_deck(self) -> int:
        deck = [idx for idx in self._deck if idx < len(self._items)]
        if not deck:
            deck = list(range(len(self._items)))
            self._rng.shuffle(deck)
            # Avoid replaying what just played
            if deck[0] == self._index:
                deck[0], deck[-1] = deck[-1], deck[0]

        if deck[0] == self._index and len(deck) > 1:
            deck.append(deck.pop(0))

        next_index = deck.pop(0)
        self._deck = deck
        return next_index

    def _move_to(self, index: int) -> None:
        self._index = index
        self._arm()
        self._notify()

    def _arm(self) -> None:
        if not self._running:
            return
        item = self.current()
        if item is None or item.kind == ContentKind.VIDEO:
            # Videos advance on media_finished()
            self._timer.cancel()
            return
        self._timer.arm(dwell_ms(item, self.default_image_seconds), self.advance)

    def _notify(self) -> None:
        if self.on_change is not None:
            self.on_change(self)
