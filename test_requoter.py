"""Tests for inventory-skewed re-quoting."""

from decimal import Decimal

from papersim.config import MarketConfig
from papersim.core.models import Wallet
from papersim.core.requoter import requote, value_wallet


def test_base_heavy_wallet_quotes(market_config):
    quotes = requote(Decimal(101), Wallet(Decimal(5), Decimal(5)), market_config)

    # base_ratio = 505/510 and counter_ratio = 5/510, truncated to 9 places
    assert quotes.ask.price == Decimal('101.009803921')
    assert quotes.ask.volume == Decimal('9.90196078')
    assert quotes.bid.price == Decimal('100.009803922')
    assert quotes.bid.volume == Decimal('0.09803921')
    assert not quotes.degenerate


def test_volumes_sum_to_order_volume_when_ratios_are_exact(market_config):
    quotes = requote(Decimal(100), Wallet(Decimal(3), Decimal(100)), market_config)

    assert quotes.ask.volume == Decimal('7.5')
    assert quotes.bid.volume == Decimal('2.5')
    assert quotes.ask.volume + quotes.bid.volume == market_config.order_volume


def test_skew_follows_inventory(market_config):
    price = Decimal(100)
    base_heavy = requote(price, Wallet(Decimal(9), Decimal(100)), market_config)
    counter_heavy = requote(price, Wallet(Decimal(1), Decimal(900)), market_config)

    # Holding more base: ask sits closer to the market and carries more size
    assert base_heavy.ask.price - price < counter_heavy.ask.price - price
    assert base_heavy.ask.volume > counter_heavy.ask.volume
    # ...and the bid sits further away with less size
    assert price - base_heavy.bid.price > price - counter_heavy.bid.price
    assert base_heavy.bid.volume < counter_heavy.bid.volume


def test_zero_value_wallet_gives_degenerate_quotes(market_config):
    quotes = requote(Decimal(100), Wallet(Decimal(0), Decimal(0)), market_config)

    assert quotes.degenerate
    assert quotes.ask.price == quotes.bid.price == Decimal(100)
    assert quotes.ask.volume == quotes.bid.volume == 0


def test_offsetting_negative_balance_is_degenerate_too():
    config = MarketConfig(spread=Decimal(1), order_volume=Decimal(1),
                          base_balance=Decimal(1), counter_balance=Decimal(-100))
    quotes = requote(Decimal(100), Wallet(Decimal(1), Decimal(-100)), config)
    assert quotes.degenerate


def test_value_wallet():
    valuation = value_wallet(Wallet(Decimal(2), Decimal(50)), Decimal(25))

    assert valuation.base_value == Decimal(50)
    assert valuation.total_value == Decimal(100)
    assert valuation.base_ratio == Decimal('0.5')
    assert valuation.counter_ratio == Decimal('0.5')
    assert not valuation.degenerate


def test_negative_leg_quotes_zero_volume(market_config):
    short_base = requote(Decimal(100), Wallet(Decimal(-5), Decimal(1000)), market_config)
    short_counter = requote(Decimal(100), Wallet(Decimal(5), Decimal(-100)), market_config)

    assert short_base.ask.volume == 0
    assert short_base.bid.volume > 0
    assert short_counter.bid.volume == 0
    assert short_counter.ask.volume > 0
