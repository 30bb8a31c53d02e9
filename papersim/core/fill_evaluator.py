"""
Fill evaluation: would the latest market trade have executed against
one of our synthetic resting orders?

The evaluator is a pure function. Wallet and statistics updates happen
in MarketSession.
"""

from .fixed_point import ZERO, dmin
from .models import FillOutcome, QuotePair, Trade


def evaluate(quotes: QuotePair, trade: Trade) -> FillOutcome:
    """
    Classify a trade against the current quotes.

    A trade at or above our ask is treated as having lifted it, a trade at
    or below our bid as having hit it. Fill volume is capped by both our
    quoted volume and the traded volume and never goes below zero. The
    fill price is never better than either the quoted or the traded price.

    Args:
        quotes: Current synthetic ask and bid
        trade: Observed market trade, base volume must be positive

    Returns:
        FillOutcome tagged SOLD, BOUGHT or NONE
    """
    if trade.base_volume <= 0:
        raise ValueError(f"trade base volume must be positive, got {trade.base_volume}")

    last_price = trade.price

    if last_price >= quotes.ask.price:
        return FillOutcome.sold(
            volume=_fill_volume(quotes.ask.volume, trade.base_volume),
            price=dmin(quotes.ask.price, last_price),
            last_price=last_price,
        )

    if last_price <= quotes.bid.price:
        # Same clamp direction as the ask side
        return FillOutcome.bought(
            volume=_fill_volume(quotes.bid.volume, trade.base_volume),
            price=dmin(quotes.bid.price, last_price),
            last_price=last_price,
        )

    return FillOutcome.no_fill(last_price)


def _fill_volume(quoted, traded):
    """Smaller of quoted and traded volume, never negative."""
    return max(dmin(quoted, traded), ZERO)
