"""
Trade feed contract.

A feed supplies a one-time reference price and then an ordered stream of
trade batches for a single market. The engine never reconnects a feed;
retrying is left to whoever builds the feeds.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Iterator, List

from ..core.models import Trade


@dataclass(frozen=True)
class SeedPrice:
    """Reference best ask and bid used to place the first quotes."""
    ask: Decimal
    bid: Decimal


class TradeFeed(ABC):
    """
    Source of trade batches for one market.

    Implementations raise FeedError from connect() or from the batch
    iterator when the connection fails or ends abnormally. A clean end of
    the stream simply stops the iterator.
    """

    def __init__(self, market: str):
        self.market = market

    @abstractmethod
    def connect(self) -> SeedPrice:
        """Open the feed and return the reference price."""

    @abstractmethod
    def batches(self) -> Iterator[List[Trade]]:
        """Yield trade batches in arrival order. Batches may be empty."""

    def close(self) -> None:
        """Release the underlying connection. Safe to call more than once."""

    def __enter__(self) -> 'TradeFeed':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


FeedFactory = Callable[[str], TradeFeed]
