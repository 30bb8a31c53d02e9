"""Shared fixtures for the PaperSim test suite."""

from decimal import Decimal

import pytest

from papersim.config import Config, MarketConfig
from papersim.core.models import Quote, QuotePair, Trade


def D(value) -> Decimal:
    return Decimal(str(value))


@pytest.fixture
def market_config():
    """spread=1, order volume=10, wallet 5 base / 5 counter."""
    return MarketConfig(spread=D(1), order_volume=D(10), base_balance=D(5), counter_balance=D(5))


@pytest.fixture
def config(market_config):
    return Config(markets={
        'AAABBB': market_config,
        'CCCDDD': MarketConfig(spread=D('0.5'), order_volume=D(2),
                               base_balance=D(1), counter_balance=D(100)),
    })


@pytest.fixture
def resting_quotes():
    """Ask 3 @ 105, bid 4 @ 95."""
    return QuotePair(ask=Quote(D(105), D(3)), bid=Quote(D(95), D(4)))


@pytest.fixture
def make_trade():
    def _make(base, counter):
        return Trade(base_volume=D(base), counter_volume=D(counter))
    return _make
