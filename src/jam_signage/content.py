"""
JAM Signage - Content Model

Content items handed to the rotation scheduler, plus the helpers that turn
backend records (playlist and advertiser payloads) into those items and split
them into the per-slot pools.

Layout tags decide which pool an ad lands in:
  - sidebar, l-bar, all -> sidebar pool
  - stripe              -> ticker/stripe alternation pool
  - fullscreen          -> fullscreen interrupt pool
"""

import hashlib
import json
import logging
import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple

from jam_signage.constants import MAX_DWELL_SECONDS
from jam_signage.exceptions.invalid_content_item_error import InvalidContentItemError

logger = logging.getLogger(__name__)


class ContentKind(Enum):
    IMAGE = "image"
    VIDEO = "video"


class LayoutTag(Enum):
    SIDEBAR = "sidebar"
    L_BAR = "l-bar"
    ALL = "all"
    STRIPE = "stripe"
    FULLSCREEN = "fullscreen"


SIDEBAR_TAGS = frozenset({LayoutTag.SIDEBAR, LayoutTag.L_BAR, LayoutTag.ALL})

# Portrait-shaped creatives are shown in the sidebar slot
LAYOUT_ALIASES = {
    'vertical': LayoutTag.SIDEBAR,
    'portrait': LayoutTag.SIDEBAR,
}

PLAYLIST_TYPES = ('video', 'image', 'youtube')

_VIDEO_URL_RE = re.compile(r"\.(mp4|webm|ogg|mov|m4v)($|\?)", re.IGNORECASE)
_YOUTUBE_HOSTS = ('youtube.com', 'youtu.be')


@dataclass(frozen=True)
class ContentItem:
    """A single piece of displayable content. Immutable once created."""
    id: str
    kind: ContentKind
    source_ref: str
    duration_seconds: Optional[int] = None
    layout_tag: LayoutTag = LayoutTag.ALL


@dataclass(frozen=True)
class ContentPools:
    """Disjoint ad pools, one per slot family."""
    sidebar: Tuple[ContentItem, ...] = ()
    stripe: Tuple[ContentItem, ...] = ()
    fullscreen: Tuple[ContentItem, ...] = ()


def dwell_ms(item: Optional[ContentItem], default_seconds: int) -> int:
    """
    How long an item stays current, in milliseconds.

    Falls back to default_seconds when the item has no duration (or a zero
    duration, which the backend uses for "unset"). Capped at MAX_DWELL_SECONDS.
    """
    seconds = item.duration_seconds if item is not None else None
    if not seconds:
        seconds = default_seconds
    return min(int(seconds), MAX_DWELL_SECONDS) * 1000


def _infer_kind(record_type: Optional[str], url: str) -> ContentKind:
    if record_type in ('video', 'youtube'):
        return ContentKind.VIDEO
    if record_type == 'image':
        return ContentKind.IMAGE
    if _VIDEO_URL_RE.search(url):
        return ContentKind.VIDEO
    if any(host in url for host in _YOUTUBE_HOSTS):
        return ContentKind.VIDEO
    return ContentKind.IMAGE


def _parse_layout(raw: Any) -> LayoutTag:
    name = str(raw or 'all').strip().lower()
    if name in LAYOUT_ALIASES:
        return LAYOUT_ALIASES[name]
    try:
        return LayoutTag(name)
    except ValueError:
        raise InvalidContentItemError(raw, f"unsupported layout '{name}'")


def _parse_duration(record: Dict[str, Any]) -> Optional[int]:
    raw = record.get('duration')
    if raw is None or raw == '':
        return None
    try:
        seconds = float(raw)
    except (TypeError, ValueError, OverflowError):
        raise InvalidContentItemError(record, f"duration '{raw}' is not a number")
    if not math.isfinite(seconds):
        raise InvalidContentItemError(record, f"duration '{raw}' is not finite")
    return min(int(seconds), MAX_DWELL_SECONDS)


def parse_content_item(record: Dict[str, Any]) -> ContentItem:
    """
    Build a ContentItem from a backend media record.

    Args:
        record: Dict with 'id', 'url' and optionally 'type', 'duration'
                and 'layout' keys.

    Returns:
        The parsed ContentItem.

    Raises:
        InvalidContentItemError: If the record is missing its id or url, or
                                 carries an unusable layout or duration.
    """
    if not isinstance(record, dict):
        raise InvalidContentItemError(record, "record is not an object")

    item_id = record.get('id')
    url = record.get('url')
    if not item_id:
        raise InvalidContentItemError(record, "missing id")
    if not url:
        raise InvalidContentItemError(record, "missing url")

    record_type = record.get('type')
    if isinstance(record_type, str):
        record_type = record_type.lower()

    return ContentItem(
        id=str(item_id),
        kind=_infer_kind(record_type, url),
        source_ref=url,
        duration_seconds=_parse_duration(record),
        layout_tag=_parse_layout(record.get('layout')),
    )


def parse_advertisers(payload: Dict[str, Any]) -> List[ContentItem]:
    """
    Flatten an advertisers payload into ad items.

    The payload looks like {"advertisers": [{"media": [record, ...]}, ...]}.
    Invalid media records are skipped with a warning.
    """
    items = []
    advertisers = payload.get('advertisers') if isinstance(payload, dict) else None
    if not isinstance(advertisers, list):
        return items

    for advertiser in advertisers:
        media = advertiser.get('media') if isinstance(advertiser, dict) else None
        if not isinstance(media, list):
            continue
        for record in media:
            try:
                items.append(parse_content_item(record))
            except InvalidContentItemError as e:
                logger.warning(f"Skipping ad media: {e.message}")
    return items


def _is_playlist_record(record: Any) -> bool:
    if not isinstance(record, dict) or not record.get('url'):
        return False
    if record.get('type') not in PLAYLIST_TYPES:
        return False
    # Ads are scheduled separately, never as primary media
    if record.get('advertiser_id') or record.get('advertiserId'):
        return False
    return True


def parse_playlist(payload: Dict[str, Any]) -> List[ContentItem]:
    """Parse the primary media playlist, dropping ads and unsupported types."""
    items = []
    records = payload.get('playlist') if isinstance(payload, dict) else None
    if not isinstance(records, list):
        return items

    for record in records:
        if not _is_playlist_record(record):
            continue
        try:
            items.append(parse_content_item(dict(record, layout='all')))
        except InvalidContentItemError as e:
            logger.warning(f"Skipping playlist item: {e.message}")
    return items


def split_pools(items: Iterable[ContentItem]) -> ContentPools:
    """Split ad items into the sidebar, stripe and fullscreen pools."""
    sidebar, stripe, fullscreen = [], [], []
    for item in items:
        if item.layout_tag in SIDEBAR_TAGS:
            sidebar.append(item)
        elif item.layout_tag == LayoutTag.STRIPE:
            stripe.append(item)
        elif item.layout_tag == LayoutTag.FULLSCREEN:
            fullscreen.append(item)
    return ContentPools(
        sidebar=tuple(sidebar),
        stripe=tuple(stripe),
        fullscreen=tuple(fullscreen),
    )


def _item_fingerprint(item: ContentItem) -> list:
    return [item.id, item.kind.value, item.source_ref, item.duration_seconds, item.layout_tag.value]


def content_signature(playlist: Iterable[ContentItem], ads: Iterable[ContentItem], ticker: Any = None) -> str:
    """Stable digest of a content refresh, used to skip unchanged snapshots."""
    blob = json.dumps(
        {
            'playlist': [_item_fingerprint(i) for i in playlist],
            'ads': [_item_fingerprint(i) for i in ads],
            'ticker': ticker,
        },
        sort_keys=True,
        default=str,
    )
    return hashlib.sha256(blob.encode('utf-8')).hexdigest()
