"""
Value types for the paper-trading engine.

Wallets, quotes, cumulative statistics and the per-batch event that the
engine hands to reporters. All amounts are decimal.Decimal.
"""

from dataclasses import dataclass, replace
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional

from .fixed_point import ZERO, div

PRICE_SCALE = 8
RATIO_SCALE = 9
AVERAGE_SCALE = 8
SPREAD_SCALE = 4


class FillSide(Enum):
    """Classification of a processed trade."""
    SOLD = "sold"
    BOUGHT = "bought"
    NONE = "none"


@dataclass(frozen=True)
class Trade:
    """One observed market trade."""
    base_volume: Decimal
    counter_volume: Decimal

    @property
    def price(self) -> Decimal:
        return div(self.counter_volume, self.base_volume, PRICE_SCALE)


@dataclass
class Wallet:
    """Simulated holdings for one market. Balances may go negative."""
    base: Decimal
    counter: Decimal

    def copy(self) -> 'Wallet':
        return replace(self)


@dataclass(frozen=True)
class Quote:
    """A synthetic resting order."""
    price: Decimal
    volume: Decimal = ZERO


@dataclass(frozen=True)
class QuotePair:
    """The session's current ask and bid."""
    ask: Quote
    bid: Quote
    degenerate: bool = False

    @classmethod
    def seed(cls, ask_price: Decimal, bid_price: Decimal) -> 'QuotePair':
        """Zero-volume quotes at a reference price, used before the first trade."""
        return cls(ask=Quote(ask_price), bid=Quote(bid_price))


@dataclass
class Stats:
    """Cumulative accounting. Every total is non-decreasing."""
    total_bought: Decimal = ZERO
    total_sold: Decimal = ZERO
    total_spent: Decimal = ZERO
    total_earned: Decimal = ZERO

    def copy(self) -> 'Stats':
        return replace(self)

    @property
    def has_round_trip(self) -> bool:
        return self.total_bought != 0 and self.total_sold != 0

    @property
    def avg_buy_value(self) -> Optional[Decimal]:
        if self.total_bought == 0:
            return None
        return div(self.total_spent, self.total_bought, AVERAGE_SCALE)

    @property
    def avg_sell_value(self) -> Optional[Decimal]:
        if self.total_sold == 0:
            return None
        return div(self.total_earned, self.total_sold, AVERAGE_SCALE)

    @property
    def realized_return(self) -> Optional[Decimal]:
        """Bought volume times the average sell/buy price difference."""
        if not self.has_round_trip:
            return None
        return self.total_bought * (self.avg_sell_value - self.avg_buy_value)


@dataclass(frozen=True)
class FillOutcome:
    """Result of evaluating one trade against the current quotes.

    For SOLD and BOUGHT, `volume` and `price` describe the simulated fill.
    For NONE both are zero and only `last_price` is meaningful.
    """
    side: FillSide
    last_price: Decimal
    volume: Decimal = ZERO
    price: Decimal = ZERO

    @classmethod
    def sold(cls, volume: Decimal, price: Decimal, last_price: Decimal) -> 'FillOutcome':
        return cls(FillSide.SOLD, last_price, volume, price)

    @classmethod
    def bought(cls, volume: Decimal, price: Decimal, last_price: Decimal) -> 'FillOutcome':
        return cls(FillSide.BOUGHT, last_price, volume, price)

    @classmethod
    def no_fill(cls, last_price: Decimal) -> 'FillOutcome':
        return cls(FillSide.NONE, last_price)

    @property
    def value(self) -> Decimal:
        """Counter amount exchanged by the fill."""
        return self.volume * self.price


@dataclass(frozen=True)
class SessionSnapshot:
    """Copy of a session's mutable state."""
    market: str
    wallet: Wallet
    stats: Stats
    quotes: QuotePair


@dataclass(frozen=True)
class SessionEvent:
    """Everything that happened while processing one trade batch."""
    market: str
    sequence: int
    outcome: FillOutcome
    wallet: Wallet
    stats: Stats
    total_value: Decimal
    base_ratio: Decimal
    counter_ratio: Decimal
    quotes: QuotePair
    avg_buy_value: Optional[Decimal] = None
    avg_sell_value: Optional[Decimal] = None
    realized_return: Optional[Decimal] = None
    spread_pct: Optional[Decimal] = None

    @property
    def side(self) -> FillSide:
        return self.outcome.side

    @property
    def degenerate(self) -> bool:
        return self.quotes.degenerate

    def to_dict(self) -> Dict[str, Any]:
        """Flat row for tabular export."""
        return {
            'market': self.market,
            'sequence': self.sequence,
            'side': self.outcome.side.value,
            'last_price': self.outcome.last_price,
            'fill_volume': self.outcome.volume,
            'fill_price': self.outcome.price,
            'base_balance': self.wallet.base,
            'counter_balance': self.wallet.counter,
            'total_bought': self.stats.total_bought,
            'total_sold': self.stats.total_sold,
            'total_spent': self.stats.total_spent,
            'total_earned': self.stats.total_earned,
            'avg_buy_value': self.avg_buy_value,
            'avg_sell_value': self.avg_sell_value,
            'realized_return': self.realized_return,
            'total_value': self.total_value,
            'base_ratio': self.base_ratio,
            'counter_ratio': self.counter_ratio,
            'ask_price': self.quotes.ask.price,
            'ask_volume': self.quotes.ask.volume,
            'bid_price': self.quotes.bid.price,
            'bid_volume': self.quotes.bid.volume,
            'spread_pct': self.spread_pct,
            'degenerate': self.quotes.degenerate,
        }
