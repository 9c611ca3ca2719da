"""Tests for SlotRotator and RotationCursor."""

import pytest

from jam_signage.content import LayoutTag
from jam_signage.scheduler.slot_rotator import RotationCursor, SlotRotator


@pytest.mark.parametrize("n", [1, 2, 3, 7])
def test_n_ticks_return_to_start(loop, make_item, n):
    rotator = SlotRotator(loop, items=[make_item(i) for i in range(n)])
    start = rotator.current()
    for _ in range(n):
        rotator.tick()
    assert rotator.current() == start
    assert rotator.index == 0


def test_empty_pool_returns_fallback(loop, make_item):
    placeholder = make_item('placeholder', layout=LayoutTag.SIDEBAR)
    rotator = SlotRotator(loop, fallback=placeholder)
    assert rotator.current() is placeholder
    rotator.tick()
    assert rotator.current() is placeholder


def test_empty_pool_without_fallback_returns_none(loop):
    rotator = SlotRotator(loop)
    rotator.start()
    assert rotator.current() is None
    assert loop.pending() == 0


def test_single_item_is_fixed_point(loop, make_item, recorder):
    only = make_item('only', duration=5)
    rotator = SlotRotator(loop, items=[only], on_change=recorder)
    rotator.start()

    loop.advance(60000)
    assert rotator.current() == only
    assert recorder.calls == []
    # Still cycling on the same item
    assert loop.pending() == 1


def test_advances_on_item_duration(loop, make_item):
    a, b = make_item('A', duration=5), make_item('B', duration=5)
    rotator = SlotRotator(loop, items=[a, b])
    rotator.start()

    assert rotator.current() == a
    loop.advance(5000)
    assert rotator.current() == b
    loop.advance(5000)
    assert rotator.current() == a


def test_uses_default_duration_when_missing(loop, make_item):
    a, b = make_item('A'), make_item('B', duration=3)
    rotator = SlotRotator(loop, items=[a, b], default_duration_seconds=10)
    rotator.start()

    loop.advance(9999)
    assert rotator.current() == a
    loop.advance(1)
    assert rotator.current() == b
    loop.advance(3000)
    assert rotator.current() == a


def test_shrunk_pool_clamps_to_first_item(loop, make_item):
    items = [make_item(i) for i in range(3)]
    rotator = SlotRotator(loop, items=items)
    rotator.tick()
    rotator.tick()
    assert rotator.index == 2

    survivor = make_item('survivor')
    rotator.replace_items([survivor])
    assert rotator.current() == survivor

    rotator.tick()
    assert rotator.index == 0
    assert rotator.current() == survivor


def test_replace_rearms_against_new_pool(loop, make_item, recorder):
    rotator = SlotRotator(loop, items=[make_item('old', duration=30)], on_change=recorder)
    rotator.start()
    loop.advance(1000)

    new_a, new_b = make_item('new-a', duration=2), make_item('new-b', duration=2)
    rotator.replace_items([new_a, new_b])
    assert rotator.current() == new_a
    assert recorder.calls == [rotator]

    loop.advance(2000)
    assert rotator.current() == new_b


def test_replace_with_empty_pool_stops_timer(loop, make_item):
    placeholder = make_item('placeholder')
    rotator = SlotRotator(loop, items=[make_item('a', duration=5)], fallback=placeholder)
    rotator.start()
    rotator.replace_items([])

    assert rotator.current() is placeholder
    assert loop.pending() == 0


def test_stop_cancels_rotation(loop, make_item):
    a, b = make_item('A', duration=5), make_item('B', duration=5)
    rotator = SlotRotator(loop, items=[a, b])
    rotator.start()
    rotator.stop()

    loop.advance(20000)
    assert rotator.current() == a


def test_cursor_never_raises_on_stale_index():
    cursor = RotationCursor(5)
    cursor.index = 4
    cursor.resize(2)
    assert cursor.is_stale
    assert cursor.clamped() == 0
    assert cursor.advance() == 0

    cursor.resize(0)
    assert not cursor.is_stale
    assert cursor.advance() == 0
