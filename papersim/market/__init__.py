"""
Trade feeds for PaperSim.

This module handles:
- The TradeFeed contract and seed prices
- Live trades from the exchange's streaming API
- Replay of recorded trades and synthetic random-walk trades
"""

from .feed import FeedFactory, SeedPrice, TradeFeed
from .luno_stream import LunoStreamFeed, LunoTickerClient, luno_feed_factory
from .replay_feed import ReplayFeed, SyntheticFeed, balanced_price, load_trade_file
from .credentials import read_secret

__all__ = [
    'FeedFactory', 'SeedPrice', 'TradeFeed',
    'LunoStreamFeed', 'LunoTickerClient', 'luno_feed_factory',
    'ReplayFeed', 'SyntheticFeed', 'balanced_price', 'load_trade_file',
    'read_secret',
]
