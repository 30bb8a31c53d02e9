"""
Offline trade feeds for PaperSim.

Supports:
- Replaying recorded trades from CSV or Parquet files
- Generating synthetic trades from a seeded random walk
"""

import logging
from decimal import Decimal
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, Union

import numpy as np
import pandas as pd

from ..core.fixed_point import div, to_scale
from ..core.models import PRICE_SCALE, Trade
from ..errors import FeedError
from .feed import SeedPrice, TradeFeed

REQUIRED_COLUMNS = ('base', 'counter')


def load_trade_file(data_path: Union[str, Path]) -> pd.DataFrame:
    """
    Load recorded trades.

    Expected columns are `base` and `counter`, with optional `market` and
    `batch` columns. Volume columns are read as text so no digits are lost.
    """
    data_path = Path(data_path)

    if not data_path.exists():
        raise FileNotFoundError(f"Data path not found: {data_path}")

    suffix = data_path.suffix.lower()
    if suffix == '.csv':
        df = pd.read_csv(data_path, dtype={'base': str, 'counter': str, 'market': str})
    elif suffix in ('.parquet', '.pq'):
        df = pd.read_parquet(data_path)
    else:
        raise ValueError(f"Unsupported data format: {suffix}")

    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Trade file {data_path} is missing columns: {missing}")

    logging.getLogger(__name__).info(f"Loaded {len(df)} trades from {data_path}")
    return df


class ReplayFeed(TradeFeed):
    """Replays a fixed list of trade batches, then ends cleanly."""

    def __init__(self, market: str, batches: Sequence[Sequence[Trade]],
                 seed: Optional[SeedPrice] = None):
        super().__init__(market)
        self._batches = [list(batch) for batch in batches]
        self.seed = seed
        self._closed = False

    @classmethod
    def from_dataframe(cls, market: str, df: pd.DataFrame,
                       seed: Optional[SeedPrice] = None) -> 'ReplayFeed':
        """
        Build a feed from a trades table.

        Rows are filtered on `market` when that column exists. Rows sharing
        a `batch` value form one batch, in order of first appearance;
        without a `batch` column every row is its own batch.
        """
        if 'market' in df.columns:
            df = df[df['market'] == market]

        trades = [
            Trade(base_volume=Decimal(str(base)), counter_volume=Decimal(str(counter)))
            for base, counter in zip(df['base'], df['counter'])
        ]

        if 'batch' in df.columns:
            grouped = {}
            for key, trade in zip(df['batch'], trades):
                grouped.setdefault(key, []).append(trade)
            batches = list(grouped.values())
        else:
            batches = [[trade] for trade in trades]

        # Trades without base volume have no price
        valid = [[t for t in batch if t.base_volume > 0] for batch in batches]
        dropped = len(trades) - sum(len(batch) for batch in valid)
        if dropped:
            logging.getLogger(__name__).warning(f"{market}: dropped {dropped} trades with no base volume")

        return cls(market, valid, seed=seed)

    def connect(self) -> SeedPrice:
        if self.seed is not None:
            return self.seed

        for batch in self._batches:
            if batch:
                price = batch[0].price
                return SeedPrice(ask=price, bid=price)

        raise FeedError("no trades to replay", market=self.market)

    def batches(self) -> Iterator[List[Trade]]:
        for batch in self._batches:
            if self._closed:
                return
            yield list(batch)

    def close(self) -> None:
        self._closed = True


class SyntheticFeed(TradeFeed):
    """
    Random-walk trade generator.

    Log prices follow a Gaussian walk; each batch holds between zero and
    `max_trades_per_batch` trades with exponentially distributed base
    volume around `mean_volume`.
    """

    def __init__(self, market: str, start_price: Decimal, mean_volume: Decimal,
                 num_batches: int = 1000, volatility: float = 0.001,
                 max_trades_per_batch: int = 3, seed_spread: float = 0.001,
                 random_seed: Optional[int] = None):
        super().__init__(market)
        if start_price <= 0:
            raise ValueError("start_price must be positive")
        if mean_volume <= 0:
            raise ValueError("mean_volume must be positive")

        self.start_price = start_price
        self.mean_volume = mean_volume
        self.num_batches = num_batches
        self.volatility = volatility
        self.max_trades_per_batch = max_trades_per_batch
        self.seed_spread = seed_spread
        self.rng = np.random.default_rng(random_seed)
        self._closed = False

    def connect(self) -> SeedPrice:
        half = Decimal(repr(self.seed_spread / 2))
        return SeedPrice(
            ask=to_scale(self.start_price * (1 + half), PRICE_SCALE),
            bid=to_scale(self.start_price * (1 - half), PRICE_SCALE),
        )

    def batches(self) -> Iterator[List[Trade]]:
        log_price = np.log(float(self.start_price))
        mean_volume = float(self.mean_volume)
        min_volume = Decimal(1).scaleb(-PRICE_SCALE)

        for _ in range(self.num_batches):
            if self._closed:
                return

            batch = []
            for _ in range(self.rng.integers(0, self.max_trades_per_batch + 1)):
                log_price += self.rng.normal(0.0, self.volatility)
                price = Decimal(repr(float(np.exp(log_price))))
                base = max(to_scale(Decimal(repr(float(self.rng.exponential(mean_volume)))), PRICE_SCALE),
                           min_volume)
                batch.append(Trade(base_volume=base, counter_volume=to_scale(base * price, PRICE_SCALE)))
            yield batch

    def close(self) -> None:
        self._closed = True


def balanced_price(base_balance: Decimal, counter_balance: Decimal) -> Decimal:
    """Price at which a wallet is split evenly between base and counter."""
    if base_balance <= 0:
        raise ValueError("base_balance must be positive to derive a price")
    return div(counter_balance, base_balance, PRICE_SCALE)
