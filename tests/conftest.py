"""
Shared fixtures for the JAM Signage tests.

All scheduling runs on SteppedTimerLoop, so no test sleeps on the wall clock.
"""

import random
import sys
from pathlib import Path

import pytest

# Make the src layout importable without an editable install.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from jam_signage.content import ContentItem, ContentKind, LayoutTag
from jam_signage.scheduler.timer import SteppedTimerLoop


@pytest.fixture
def loop():
    return SteppedTimerLoop()


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def make_item():
    def _make(item_id, duration=None, layout=LayoutTag.ALL, kind=ContentKind.IMAGE):
        return ContentItem(
            id=str(item_id),
            kind=kind,
            source_ref=f"https://cdn.example.com/{item_id}.jpg",
            duration_seconds=duration,
            layout_tag=layout,
        )
    return _make


class Recorder:
    """Collects on_change callbacks."""

    def __init__(self):
        self.calls = []

    def __call__(self, component):
        self.calls.append(component)


@pytest.fixture
def recorder():
    return Recorder()
