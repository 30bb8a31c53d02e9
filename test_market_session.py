"""Tests for per-market session state transitions."""

from decimal import Decimal

import pytest

from papersim.config import MarketConfig
from papersim.core.market_session import MarketSession
from papersim.core.models import FillSide, Quote, QuotePair
from papersim.market.replay_feed import SyntheticFeed


@pytest.fixture
def session(market_config):
    return MarketSession.seeded('AAABBB', market_config, Decimal(105), Decimal(95))


def test_first_trade_between_seed_quotes(session, make_trade):
    event = session.process_batch([make_trade(2, 202)])

    assert event.side is FillSide.NONE
    assert event.outcome.last_price == Decimal(101)
    assert event.sequence == 1
    assert session.wallet.base == Decimal(5)
    assert session.wallet.counter == Decimal(5)

    assert event.total_value == Decimal(510)
    assert event.base_ratio == Decimal('0.990196078')
    assert event.counter_ratio == Decimal('0.009803921')
    assert session.quotes.ask.price == Decimal('101.009803921')
    assert session.quotes.bid.price == Decimal('100.009803922')
    assert session.quotes.ask.volume == Decimal('9.90196078')
    assert session.quotes.bid.volume == Decimal('0.09803921')
    assert event.spread_pct == Decimal('0.99')
    assert event.avg_buy_value is None
    assert event.realized_return is None


def test_empty_batch_is_skipped(session):
    before = session.snapshot()

    assert session.process_batch([]) is None
    assert session.batches_processed == 0
    assert session.snapshot() == before


def test_only_last_trade_in_batch_counts(session, resting_quotes, make_trade):
    session.quotes = resting_quotes

    # The first trade would have lifted the ask on its own
    event = session.process_batch([make_trade(1, 200), make_trade(2, 202)])

    assert event.side is FillSide.NONE
    assert session.stats.total_sold == 0


def test_no_fill_leaves_wallet_and_stats_identical(session, resting_quotes, make_trade):
    session.quotes = resting_quotes
    before = session.snapshot()

    session.process_batch([make_trade(2, 202)])

    assert session.wallet == before.wallet
    assert session.stats == before.stats
    # Quotes still track the market
    assert session.quotes != resting_quotes


def test_sell_moves_exact_amounts(session, resting_quotes, make_trade):
    session.quotes = resting_quotes

    event = session.process_batch([make_trade(2, 220)])

    assert event.side is FillSide.SOLD
    assert session.wallet.base == Decimal(3)
    assert session.wallet.counter == Decimal(215)
    assert session.stats.total_sold == Decimal(2)
    assert session.stats.total_earned == Decimal(210)
    assert session.stats.total_bought == 0


def test_trade_below_bid_buys_and_grows_base(session, resting_quotes, make_trade):
    session.quotes = resting_quotes

    event = session.process_batch([make_trade(5, 450)])

    assert event.side is FillSide.BOUGHT
    assert session.wallet.base == Decimal(9)
    # Paper wallets may go negative
    assert session.wallet.counter == Decimal(-355)
    assert session.stats.total_bought == Decimal(4)
    assert session.stats.total_spent == Decimal(360)


def test_round_trip_reports_averages_and_return(session, make_trade):
    session.quotes = QuotePair(ask=Quote(Decimal(105), Decimal(3)), bid=Quote(Decimal(95), Decimal(4)))
    session.process_batch([make_trade(2, 220)])

    session.quotes = QuotePair(ask=Quote(Decimal(200), Decimal(1)), bid=Quote(Decimal(95), Decimal(4)))
    event = session.process_batch([make_trade(5, 450)])

    assert event.avg_buy_value == Decimal(90)
    assert event.avg_sell_value == Decimal(105)
    assert event.realized_return == Decimal(60)
    assert event.wallet.base == Decimal(7)
    assert event.wallet.counter == Decimal(-145)
    assert event.sequence == 2


def test_seed_quotes_fill_nothing(session, make_trade):
    event = session.process_batch([make_trade(1, 110)])

    assert event.side is FillSide.SOLD
    assert event.outcome.volume == 0
    assert session.stats.total_sold == 0
    assert session.wallet.base == Decimal(5)


def test_zero_value_wallet_flags_event(make_trade):
    config = MarketConfig(spread=Decimal(1), order_volume=Decimal(1),
                          base_balance=Decimal(0), counter_balance=Decimal(0))
    session = MarketSession.seeded('EMPTY', config, Decimal(105), Decimal(95))

    event = session.process_batch([make_trade(2, 202)])

    assert event.degenerate
    assert event.base_ratio == 0
    assert event.counter_ratio == 0
    assert session.quotes.ask.volume == 0


def test_event_snapshot_is_detached(session, resting_quotes, make_trade):
    session.quotes = resting_quotes
    event = session.process_batch([make_trade(2, 220)])

    session.process_batch([make_trade(5, 450)])

    assert event.wallet.base == Decimal(3)
    assert event.stats.total_bought == 0


def test_totals_never_decrease(market_config):
    session = MarketSession.seeded('AAABBB', market_config, Decimal(101), Decimal(99))
    feed = SyntheticFeed('AAABBB', start_price=Decimal(100), mean_volume=Decimal(2),
                         num_batches=300, volatility=0.01, random_seed=7)

    previous = session.stats.copy()
    for batch in feed.batches():
        session.process_batch(batch)
        current = session.stats
        assert current.total_bought >= previous.total_bought
        assert current.total_sold >= previous.total_sold
        assert current.total_spent >= previous.total_spent
        assert current.total_earned >= previous.total_earned
        previous = current.copy()

    assert session.batches_processed > 0


def test_oversold_wallet_keeps_totals_monotonic(session, make_trade):
    # The first re-quote offers 9.9 base while only 5 are held
    batches = [
        [make_trade(2, 202)],
        [make_trade(10, 1020)],
        [make_trade(1, 200)],
        [make_trade(5, 400)],
        [make_trade(3, 330)],
        [make_trade(2, 150)],
        [make_trade(1, 300)],
    ]

    previous = session.stats.copy()
    for batch in batches:
        session.process_batch(batch)
        current = session.stats
        assert current.total_bought >= previous.total_bought
        assert current.total_sold >= previous.total_sold
        assert current.total_spent >= previous.total_spent
        assert current.total_earned >= previous.total_earned
        assert session.quotes.ask.volume >= 0
        assert session.quotes.bid.volume >= 0
        previous = current.copy()

    assert session.stats.total_sold >= Decimal('9.90196078')
    assert session.stats.total_bought > 0


def test_short_base_leg_quotes_no_ask(session, make_trade):
    session.process_batch([make_trade(2, 202)])
    session.process_batch([make_trade(10, 1020)])

    assert session.wallet.base < 0
    assert session.quotes.ask.volume == 0

    event = session.process_batch([make_trade(1, 200)])

    assert event.side is FillSide.SOLD
    assert event.outcome.volume == 0
