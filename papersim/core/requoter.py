"""
Inventory-skewed re-quoting.

Quote prices and sizes follow the share of the wallet held in base and
counter at the last traded price: the heavier side gets quoted closer to
the market and with more size, which pushes the wallet back toward
balance.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal

from ..config import MarketConfig
from .fixed_point import ZERO, div
from .models import RATIO_SCALE, Quote, QuotePair, Wallet

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Valuation:
    """Mark-to-market view of a wallet at one price."""
    base_value: Decimal
    total_value: Decimal
    base_ratio: Decimal
    counter_ratio: Decimal

    @property
    def degenerate(self) -> bool:
        return self.total_value == 0


def value_wallet(wallet: Wallet, last_price: Decimal) -> Valuation:
    """Value the wallet at last_price. Ratios are zero when the total is zero."""
    base_value = wallet.base * last_price
    total_value = base_value + wallet.counter

    if total_value == 0:
        return Valuation(base_value, total_value, ZERO, ZERO)

    return Valuation(
        base_value=base_value,
        total_value=total_value,
        base_ratio=div(base_value, total_value, RATIO_SCALE),
        counter_ratio=div(wallet.counter, total_value, RATIO_SCALE),
    )


def requote(last_price: Decimal, wallet: Wallet, config: MarketConfig) -> QuotePair:
    """
    Compute the next ask and bid.

    ask = last + spread * counter_ratio, sized order_volume * base_ratio
    bid = last - spread * base_ratio, sized order_volume * counter_ratio

    Volumes never go below zero, so a negative wallet leg quotes nothing
    on that side.

    A wallet worth nothing at last_price yields zero-volume quotes at
    last_price, flagged as degenerate.
    """
    valuation = value_wallet(wallet, last_price)

    if valuation.degenerate:
        logger.warning("Wallet has zero mark-to-market value at %s, quoting zero volume", last_price)
        return QuotePair(ask=Quote(last_price), bid=Quote(last_price), degenerate=True)

    ask = Quote(
        price=last_price + config.spread * valuation.counter_ratio,
        volume=max(config.order_volume * valuation.base_ratio, ZERO),
    )
    bid = Quote(
        price=last_price - config.spread * valuation.base_ratio,
        volume=max(config.order_volume * valuation.counter_ratio, ZERO),
    )
    return QuotePair(ask=ask, bid=bid)
