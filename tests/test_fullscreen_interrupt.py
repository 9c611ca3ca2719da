"""Tests for the fullscreen interrupt scheduler."""

import random

from jam_signage.content import LayoutTag
from jam_signage.scheduler.fullscreen_interrupt import (
    FullscreenInterruptScheduler,
    InterruptMode,
    NormalMode,
    PresentationMode,
)


def fullscreen(make_item, item_id, duration=None):
    return make_item(item_id, duration=duration, layout=LayoutTag.FULLSCREEN)


def test_starts_normal(loop):
    scheduler = FullscreenInterruptScheduler(loop)
    assert scheduler.mode == PresentationMode.NORMAL
    assert scheduler.active_interrupt is None
    assert isinstance(scheduler.state, NormalMode)


def test_single_ad_takeover_and_expiry(loop, make_item):
    ad = fullscreen(make_item, '1', duration=15)
    scheduler = FullscreenInterruptScheduler(loop, ads=[ad])
    scheduler.start()

    loop.advance(59999)
    assert scheduler.mode == PresentationMode.NORMAL

    loop.advance(1)
    assert scheduler.mode == PresentationMode.INTERRUPT
    assert isinstance(scheduler.state, InterruptMode)
    assert scheduler.active_interrupt.item == ad
    assert scheduler.active_interrupt.armed_at == 60.0

    loop.advance(15000)
    assert scheduler.mode == PresentationMode.NORMAL
    assert scheduler.active_interrupt is None


def test_default_duration_is_fifteen_seconds(loop, make_item):
    scheduler = FullscreenInterruptScheduler(loop, ads=[fullscreen(make_item, 'x')])
    scheduler.start()
    loop.advance(60000)

    loop.advance(14999)
    assert scheduler.mode == PresentationMode.INTERRUPT
    loop.advance(1)
    assert scheduler.mode == PresentationMode.NORMAL


def test_trigger_during_interrupt_is_dropped(loop, make_item, recorder):
    long_ad = fullscreen(make_item, 'long', duration=90)
    other = fullscreen(make_item, 'other', duration=90)
    scheduler = FullscreenInterruptScheduler(
        loop, ads=[long_ad, other], rng=random.Random(7), on_change=recorder
    )
    scheduler.start()

    loop.advance(60000)
    first = scheduler.active_interrupt
    assert first is not None

    # Second trigger at 120s lands inside the 90s takeover
    loop.advance(60000)
    assert scheduler.mode == PresentationMode.INTERRUPT
    assert scheduler.active_interrupt is first
    assert len(recorder.calls) == 1

    # Expiry at 150s, not queued for a make-up takeover
    loop.advance(30000)
    assert scheduler.mode == PresentationMode.NORMAL
    loop.advance(29999)
    assert scheduler.mode == PresentationMode.NORMAL
    loop.advance(1)
    assert scheduler.mode == PresentationMode.INTERRUPT


def test_empty_pool_never_interrupts(loop):
    scheduler = FullscreenInterruptScheduler(loop)
    scheduler.start()
    loop.advance(600000)
    assert scheduler.mode == PresentationMode.NORMAL
    # Trigger keeps its period regardless
    assert loop.pending() == 1


def test_selection_uses_injected_random_source(loop, make_item):
    ads = [fullscreen(make_item, str(i), duration=1) for i in range(5)]

    def picks(seed):
        run_loop = type(loop)()
        scheduler = FullscreenInterruptScheduler(run_loop, ads=ads, rng=random.Random(seed))
        scheduler.start()
        chosen = []
        for _ in range(10):
            run_loop.advance(60000)
            chosen.append(scheduler.active_interrupt.item.id)
            run_loop.advance(1000)
        return chosen

    assert picks(42) == picks(42)
    assert set(picks(42)) <= {ad.id for ad in ads}


def test_pool_emptied_ends_takeover_early(loop, make_item):
    scheduler = FullscreenInterruptScheduler(loop, ads=[fullscreen(make_item, 'a', duration=30)])
    scheduler.start()
    loop.advance(60000)
    assert scheduler.mode == PresentationMode.INTERRUPT

    scheduler.replace_ads([])
    assert scheduler.mode == PresentationMode.NORMAL
    assert scheduler.active_interrupt is None
    # Only the trigger is left
    assert loop.pending() == 1


def test_pool_replaced_keeps_running_takeover(loop, make_item):
    current = fullscreen(make_item, 'a', duration=30)
    scheduler = FullscreenInterruptScheduler(loop, ads=[current])
    scheduler.start()
    loop.advance(60000)

    scheduler.replace_ads([fullscreen(make_item, 'b')])
    assert scheduler.active_interrupt.item == current

    loop.advance(30000)
    assert scheduler.mode == PresentationMode.NORMAL


def test_stop_cancels_both_timers(loop, make_item):
    scheduler = FullscreenInterruptScheduler(loop, ads=[fullscreen(make_item, 'a')])
    scheduler.start()
    loop.advance(60000)
    scheduler.stop()
    assert loop.pending() == 0


def test_stop_during_takeover_returns_to_normal(loop, make_item):
    scheduler = FullscreenInterruptScheduler(loop, ads=[fullscreen(make_item, 'a', duration=15)])
    scheduler.start()
    loop.advance(60000)
    assert scheduler.mode == PresentationMode.INTERRUPT

    scheduler.stop()
    assert scheduler.mode == PresentationMode.NORMAL
    assert scheduler.active_interrupt is None

    # Restarted scheduler interrupts again on its own period
    scheduler.start()
    loop.advance(60000)
    assert scheduler.mode == PresentationMode.INTERRUPT
    loop.advance(15000)
    assert scheduler.mode == PresentationMode.NORMAL