"""
Reporters turn session events into something a person or a file can use.

The engine only ever calls into a reporter with plain values; reporters
never reach back into a session.
"""

import logging
import threading
from abc import ABC
from decimal import Decimal
from pathlib import Path
from typing import List, Sequence, Union

import pandas as pd

from ..core.fixed_point import to_scale
from ..core.models import FillSide, SessionEvent


class Reporter(ABC):
    """Receives session lifecycle notifications. Every hook is optional."""

    def session_started(self, market: str, ask: Decimal, bid: Decimal) -> None:
        pass

    def report(self, event: SessionEvent) -> None:
        pass

    def session_finished(self, result) -> None:
        pass


class NullReporter(Reporter):
    """Discards everything."""


class LogReporter(Reporter):
    """Renders each event as a few human-readable log lines."""

    def __init__(self, logger: Union[logging.Logger, None] = None):
        self.logger = logger or logging.getLogger(__name__)

    def session_started(self, market: str, ask: Decimal, bid: Decimal) -> None:
        self.logger.info(f"{market}: seeded quotes ask={ask} bid={bid}")

    def report(self, event: SessionEvent) -> None:
        market = event.market
        outcome = event.outcome

        if outcome.side is FillSide.SOLD:
            self.logger.info(f"{market}: sold {outcome.volume}@{outcome.price} last_price={outcome.last_price}")
        elif outcome.side is FillSide.BOUGHT:
            self.logger.info(f"{market}: bought {outcome.volume}@{outcome.price} last_price={outcome.last_price}")
        else:
            self.logger.info(f"{market}: last_price={outcome.last_price}")

        if event.realized_return is not None:
            self.logger.info(
                f"{market}: avg_buy_value={event.avg_buy_value} "
                f"avg_sell_value={event.avg_sell_value} "
                f"avg_buy_return={event.realized_return}"
            )

        self.logger.info(
            f"{market}: current_value={to_scale(event.total_value, 6)} "
            f"base_ratio={to_scale(event.base_ratio, 3)} "
            f"counter_ratio={to_scale(event.counter_ratio, 3)}"
        )

        if event.degenerate:
            self.logger.warning(f"{market}: wallet is worth nothing at {outcome.last_price}, quotes zeroed")

        self.logger.info(
            f"{market}: ask_price={event.quotes.ask.price} bid_price={event.quotes.bid.price} "
            f"spread={event.spread_pct}%"
        )

    def session_finished(self, result) -> None:
        if result.error is not None:
            self.logger.error(f"{result.market}: finished {result.state.value}: {result.error}")
        else:
            self.logger.info(f"{result.market}: finished {result.state.value} "
                             f"after {result.batches_processed} batches")


class RecordingReporter(Reporter):
    """
    Keeps every event in memory for later analysis or export.

    Safe to share between runners on different threads.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._events: List[SessionEvent] = []

    def report(self, event: SessionEvent) -> None:
        with self._lock:
            self._events.append(event)

    @property
    def events(self) -> List[SessionEvent]:
        with self._lock:
            return list(self._events)

    def events_for(self, market: str) -> List[SessionEvent]:
        return [e for e in self.events if e.market == market]

    def to_dataframe(self) -> pd.DataFrame:
        """One row per event. Amounts stay Decimal (object columns)."""
        rows = [event.to_dict() for event in self.events]
        return pd.DataFrame(rows, columns=_EVENT_COLUMNS)

    def save_results(self, output_path: Union[str, Path]) -> Path:
        """Write events to Parquet or CSV, chosen by file suffix.

        Decimal amounts are written as strings so no precision is lost.
        """
        rows = [
            {key: str(value) if isinstance(value, Decimal) else value
             for key, value in event.to_dict().items()}
            for event in self.events
        ]
        df = pd.DataFrame(rows, columns=_EVENT_COLUMNS)

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        if output_path.suffix == '.parquet':
            df.to_parquet(output_path, index=False)
        else:
            df.to_csv(output_path, index=False)

        logging.getLogger(__name__).info(f"Results saved to {output_path}")
        return output_path


class CompositeReporter(Reporter):
    """Forwards every notification to several reporters in order."""

    def __init__(self, reporters: Sequence[Reporter]):
        self.reporters = list(reporters)

    def session_started(self, market: str, ask: Decimal, bid: Decimal) -> None:
        for reporter in self.reporters:
            reporter.session_started(market, ask, bid)

    def report(self, event: SessionEvent) -> None:
        for reporter in self.reporters:
            reporter.report(event)

    def session_finished(self, result) -> None:
        for reporter in self.reporters:
            reporter.session_finished(result)


_EVENT_COLUMNS = [
    'market', 'sequence', 'side', 'last_price', 'fill_volume', 'fill_price',
    'base_balance', 'counter_balance', 'total_bought', 'total_sold',
    'total_spent', 'total_earned', 'avg_buy_value', 'avg_sell_value',
    'realized_return', 'total_value', 'base_ratio', 'counter_ratio',
    'ask_price', 'ask_volume', 'bid_price', 'bid_volume', 'spread_pct',
    'degenerate',
]
