"""
Per-market paper-trading state.

A MarketSession owns the simulated wallet, the current synthetic quotes
and cumulative statistics for one market. Each trade batch turns into at
most one simulated fill followed by a full re-quote.
"""

import logging
from decimal import Decimal
from typing import Optional, Sequence

from ..config import MarketConfig
from .fill_evaluator import evaluate
from .fixed_point import HUNDRED, div
from .models import (
    SPREAD_SCALE, FillOutcome, FillSide, QuotePair, SessionEvent,
    SessionSnapshot, Stats, Trade, Wallet,
)
from .requoter import requote, value_wallet


class MarketSession:
    """
    Aggregate root for one market's simulation.

    Only the session's own runner mutates it, so there is no locking.
    State lives in memory only and is gone when the session is dropped.
    """

    def __init__(self, market: str, config: MarketConfig, quotes: QuotePair):
        """
        Args:
            market: Market identifier, e.g. "XBTUSDC"
            config: Static tuning for this market
            quotes: Initial quotes, normally zero-volume seeds at the
                reference ask and bid
        """
        self.market = market
        self.config = config
        self.wallet = Wallet(base=config.base_balance, counter=config.counter_balance)
        self.stats = Stats()
        self.quotes = quotes
        self.batches_processed = 0

        self.logger = logging.getLogger(__name__)

    @classmethod
    def seeded(cls, market: str, config: MarketConfig,
               ask_price: Decimal, bid_price: Decimal) -> 'MarketSession':
        return cls(market, config, QuotePair.seed(ask_price, bid_price))

    def process_batch(self, trades: Sequence[Trade]) -> Optional[SessionEvent]:
        """
        Run one trade batch through the session.

        Only the last trade of a batch is evaluated; the earlier ones are
        dropped on purpose so bursts are not counted more than once.

        Returns:
            The resulting SessionEvent, or None for an empty batch
        """
        if not trades:
            return None

        if len(trades) > 1:
            self.logger.debug(f"{self.market}: evaluating last of {len(trades)} trades")

        outcome = evaluate(self.quotes, trades[-1])
        self.apply(outcome)

        last_price = outcome.last_price
        self.quotes = requote(last_price, self.wallet, self.config)
        self.batches_processed += 1

        return self._build_event(outcome)

    def apply(self, outcome: FillOutcome) -> None:
        """Apply a fill to wallet and statistics. NONE leaves both untouched."""
        if outcome.side is FillSide.SOLD:
            value = outcome.value
            self.wallet.base -= outcome.volume
            self.wallet.counter += value
            self.stats.total_sold += outcome.volume
            self.stats.total_earned += value
        elif outcome.side is FillSide.BOUGHT:
            value = outcome.value
            self.wallet.base += outcome.volume
            self.wallet.counter -= value
            self.stats.total_bought += outcome.volume
            self.stats.total_spent += value

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            market=self.market,
            wallet=self.wallet.copy(),
            stats=self.stats.copy(),
            quotes=self.quotes,
        )

    def _build_event(self, outcome: FillOutcome) -> SessionEvent:
        last_price = outcome.last_price
        valuation = value_wallet(self.wallet, last_price)
        stats = self.stats.copy()

        spread_pct = None
        if last_price != 0:
            spread = self.quotes.ask.price - self.quotes.bid.price
            spread_pct = div(spread, last_price, SPREAD_SCALE) * HUNDRED

        return SessionEvent(
            market=self.market,
            sequence=self.batches_processed,
            outcome=outcome,
            wallet=self.wallet.copy(),
            stats=stats,
            total_value=valuation.total_value,
            base_ratio=valuation.base_ratio,
            counter_ratio=valuation.counter_ratio,
            quotes=self.quotes,
            avg_buy_value=stats.avg_buy_value if stats.has_round_trip else None,
            avg_sell_value=stats.avg_sell_value if stats.has_round_trip else None,
            realized_return=stats.realized_return,
            spread_pct=spread_pct,
        )
