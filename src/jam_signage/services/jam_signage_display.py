#!/usr/bin/env python3
"""
JAM Signage Display Service - Content Rotation

This service runs the content rotation scheduler for the signage layout:

1. PRIMARY MEDIA
   - Playlist items in order (or shuffled), viewer requests first
   - Images for their configured duration, videos until they finish

2. SIDEBAR
   - Sidebar ads rotate one at a time, placeholder when there are none

3. TICKER STRIP
   - News ticker for 30s, then one stripe ad, then back to the ticker

4. FULLSCREEN TAKEOVER
   - Every 60s a random fullscreen ad may take over the screen for its
     duration, primary media drops to picture-in-picture meanwhile

Content comes from the snapshot the content manager writes to
~/.jam/app_data/live_content/content.json. The snapshot is re-read every
content_poll_seconds and pushed into the scheduler only when it changed.

Rendering is handled by the display layer, which consumes the presentation
snapshots this service publishes.
"""

import argparse
import json
import logging
import random
from pathlib import Path
from typing import Any, List, NamedTuple, Optional

from jam_signage.content import (
    ContentItem,
    ContentKind,
    LayoutTag,
    content_signature,
    parse_advertisers,
    parse_playlist,
    split_pools,
)
from jam_signage.scheduler.layout_controller import LayoutModeController, Presentation
from jam_signage.scheduler.timer import GLibTimerLoop, TimerLoop
from jam_signage.services.common.logging_config import (
    log_service_ready,
    log_service_start,
    setup_service_logging,
)
from jam_signage.services.common.paths import LIVE_CONTENT_FILE, SIDEBAR_PLACEHOLDER_IMAGE
from jam_signage.services.common.rotation_config import RotationConfig, load_rotation_config
from jam_signage.services.common.system import (
    get_systemd_notifier,
    setup_glib_watchdog,
    setup_signal_handlers,
)

logger = logging.getLogger('jam-signage-display')

SERVICE_NAME = 'JAM Signage Display Service'

# Watchdog ping interval (should be less than WatchdogSec in the unit file)
WATCHDOG_INTERVAL = 30

SIDEBAR_PLACEHOLDER = ContentItem(
    id='sidebar-placeholder',
    kind=ContentKind.IMAGE,
    source_ref=str(SIDEBAR_PLACEHOLDER_IMAGE),
    layout_tag=LayoutTag.SIDEBAR,
)


class ContentSnapshot(NamedTuple):
    playlist: List[ContentItem]
    ads: List[ContentItem]
    ticker: Any
    signature: str


class ContentSnapshotSource:
    """
    Reads the content snapshot file and reports only changed snapshots.

    File layout:
        {
          "playlist": {"playlist": [...]},
          "advertisers": {"advertisers": [{"media": [...]}]},
          "ticker": {"rss_url": "..."}
        }
    """

    def __init__(self, content_file: Path = LIVE_CONTENT_FILE):
        self.content_file = Path(content_file)
        self._last_signature: Optional[str] = None

    def read(self) -> Optional[ContentSnapshot]:
        """Parse the snapshot file. Returns None if it is missing or unreadable."""
        if not self.content_file.exists():
            logger.debug(f"No content snapshot at {self.content_file}")
            return None

        try:
            with open(self.content_file, 'r') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Error reading content snapshot: {e}")
            return None

        if not isinstance(data, dict):
            logger.warning("Content snapshot is not a JSON object, ignoring")
            return None

        playlist = parse_playlist(data.get('playlist') or {})
        ads = parse_advertisers(data.get('advertisers') or {})
        ticker = data.get('ticker')
        return ContentSnapshot(
            playlist=playlist,
            ads=ads,
            ticker=ticker,
            signature=content_signature(playlist, ads, ticker),
        )

    def poll(self) -> Optional[ContentSnapshot]:
        """Return the snapshot if it differs from the last one returned."""
        snapshot = self.read()
        if snapshot is None or snapshot.signature == self._last_signature:
            return None
        self._last_signature = snapshot.signature
        return snapshot


class StatusReportingListener:
    """Logs presentation changes and mirrors them into the systemd status."""

    def __init__(self):
        self._notifier = get_systemd_notifier()
        self._last_status: Optional[str] = None

    @staticmethod
    def describe(presentation: Presentation) -> str:
        if presentation.active_interrupt is not None:
            return f"Fullscreen ad {presentation.active_interrupt.item.id}"
        primary = presentation.primary_item.id if presentation.primary_item else 'none'
        sidebar = presentation.sidebar_item.id if presentation.sidebar_item else 'none'
        strip = presentation.ticker_phase.value
        if isinstance(presentation.ticker_content, ContentItem):
            strip = f"ad {presentation.ticker_content.id}"
        return f"Playing {primary} | sidebar {sidebar} | strip {strip}"

    def on_presentation_changed(self, presentation: Presentation) -> None:
        status = self.describe(presentation)
        if status == self._last_status:
            return
        self._last_status = status
        logger.info(f"Presentation: {status} ({presentation.primary_placement.value})")
        self._notifier.notify(f"STATUS={status}")


class JamSignageDisplayService:
    """Wires the content source into the rotation scheduler."""

    def __init__(
        self,
        loop: TimerLoop,
        config: RotationConfig,
        source: ContentSnapshotSource,
        rng: Optional[random.Random] = None,
        listener=None,
    ):
        self.config = config
        self.source = source
        self.controller = LayoutModeController(
            loop,
            config=config,
            rng=rng,
            sidebar_fallback=SIDEBAR_PLACEHOLDER,
            listener=listener,
        )

    def refresh_content(self) -> bool:
        """
        Push the latest snapshot into the scheduler if it changed.

        Returns:
            True (to keep the GLib timeout repeating)
        """
        snapshot = self.source.poll()
        if snapshot is not None:
            logger.info(
                f"Content updated: {len(snapshot.playlist)} playlist items, {len(snapshot.ads)} ads"
            )
            self.controller.update_content(
                pools=split_pools(snapshot.ads),
                ticker_content=snapshot.ticker,
                playlist=snapshot.playlist,
            )
        return True

    def start(self) -> None:
        self.refresh_content()
        self.controller.start()

    def stop(self) -> None:
        self.controller.stop()


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description='Run the JAM Signage content rotation')
    parser.add_argument('--content-file', '-c', default=str(LIVE_CONTENT_FILE),
                        help='Content snapshot written by the content manager')
    parser.add_argument('--config-file', help='Rotation config JSON (overrides JAM_SIGNAGE_CONFIG)')
    parser.add_argument('--seed', type=int, help='Seed for ad selection and shuffle (testing)')
    return parser.parse_args(argv)


def main(argv=None):
    """Main entry point for the signage display service."""
    from gi.repository import GLib

    setup_service_logging('jam-signage-display')
    args = parse_args(argv)
    log_service_start(logger, SERVICE_NAME)

    config = load_rotation_config(args.config_file)
    rng = random.Random(args.seed) if args.seed is not None else None

    service = JamSignageDisplayService(
        GLibTimerLoop(),
        config,
        ContentSnapshotSource(Path(args.content_file)),
        rng=rng,
        listener=StatusReportingListener(),
    )

    mainloop = GLib.MainLoop()
    setup_signal_handlers(mainloop.quit, logger)

    service.start()
    GLib.timeout_add_seconds(config.content_poll_seconds, service.refresh_content)
    setup_glib_watchdog(WATCHDOG_INTERVAL)

    notifier = get_systemd_notifier()
    notifier.notify("READY=1")
    log_service_ready(logger, SERVICE_NAME, f"polling content every {config.content_poll_seconds}s")

    try:
        mainloop.run()
    except Exception as e:
        logger.exception(f"Main loop error: {e}")
    finally:
        service.stop()
        logger.info("Display service stopped")


if __name__ == '__main__':
    main()
