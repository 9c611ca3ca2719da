"""Tests for the ticker / stripe ad alternation."""

from jam_signage.content import LayoutTag
from jam_signage.scheduler.ticker_alternator import TickerAdAlternator, TickerPhase

TICKER = {'rss_url': 'https://news.example.com/feed'}


def test_empty_pool_stays_on_ticker(loop):
    alternator = TickerAdAlternator(loop, ticker_content=TICKER)
    alternator.start()

    for _ in range(20):
        loop.advance(30000)
        assert alternator.phase == TickerPhase.TICKER
        assert alternator.current_content() == TICKER
    # The ticker dwell keeps re-arming
    assert loop.pending() == 1


def test_full_cycle(loop, make_item):
    ad = make_item('stripe-1', duration=8, layout=LayoutTag.STRIPE)
    alternator = TickerAdAlternator(loop, ticker_content=TICKER, ads=[ad])
    alternator.start()

    loop.advance(29999)
    assert alternator.phase == TickerPhase.TICKER
    loop.advance(1)
    assert alternator.phase == TickerPhase.AD
    assert alternator.current_content() == ad

    loop.advance(7999)
    assert alternator.phase == TickerPhase.AD
    loop.advance(1)
    assert alternator.phase == TickerPhase.TICKER
    assert alternator.current_content() == TICKER


def test_ads_rotate_between_ticker_phases(loop, make_item):
    ads = [make_item(f's{i}', layout=LayoutTag.STRIPE) for i in range(3)]
    alternator = TickerAdAlternator(loop, ticker_content=TICKER, ads=ads)
    alternator.start()

    shown = []
    for _ in range(4):
        loop.advance(30000)
        shown.append(alternator.current_content().id)
        loop.advance(10000)  # default ad duration
        assert alternator.phase == TickerPhase.TICKER
    assert shown == ['s0', 's1', 's2', 's0']


def test_ads_added_later_are_picked_up_at_ticker_exit(loop, make_item):
    alternator = TickerAdAlternator(loop, ticker_content=TICKER)
    alternator.start()
    loop.advance(45000)

    ad = make_item('late', layout=LayoutTag.STRIPE)
    alternator.replace_ads([ad])
    assert alternator.phase == TickerPhase.TICKER

    loop.advance(15000)
    assert alternator.phase == TickerPhase.AD
    assert alternator.current_content() == ad


def test_pool_emptied_during_ad_returns_to_ticker(loop, make_item, recorder):
    ad = make_item('s', layout=LayoutTag.STRIPE)
    alternator = TickerAdAlternator(loop, ticker_content=TICKER, ads=[ad], on_change=recorder)
    alternator.start()
    loop.advance(30000)
    assert alternator.phase == TickerPhase.AD

    alternator.replace_ads([])
    assert alternator.phase == TickerPhase.TICKER
    assert alternator.current_content() == TICKER

    loop.advance(300000)
    assert alternator.phase == TickerPhase.TICKER


def test_replace_during_ad_rearms_new_duration(loop, make_item):
    alternator = TickerAdAlternator(
        loop, ticker_content=TICKER, ads=[make_item('old', duration=20, layout=LayoutTag.STRIPE)]
    )
    alternator.start()
    loop.advance(30000)

    fresh = make_item('fresh', duration=4, layout=LayoutTag.STRIPE)
    alternator.replace_ads([fresh])
    assert alternator.current_content() == fresh

    loop.advance(4000)
    assert alternator.phase == TickerPhase.TICKER


def test_configurable_ticker_dwell(loop, make_item):
    ad = make_item('s', layout=LayoutTag.STRIPE)
    alternator = TickerAdAlternator(loop, ticker_content=TICKER, ads=[ad], ticker_dwell_ms=5000)
    alternator.start()

    loop.advance(5000)
    assert alternator.phase == TickerPhase.AD


def test_set_ticker_content_passes_through(loop, recorder):
    alternator = TickerAdAlternator(loop, ticker_content=TICKER, on_change=recorder)
    alternator.start()

    updated = {'rss_url': 'https://other.example.com/rss'}
    alternator.set_ticker_content(updated)
    assert alternator.current_content() is updated
    assert recorder.calls == [alternator]
