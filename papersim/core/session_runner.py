r"""
Drives one MarketSession over its trade feed.

State machine per market:

    CONNECTING -> STREAMING -> CLOSED
         \            \
          +------------+-> FAILED

Feed errors end the run in FAILED and are returned, not raised. There is
no retry here.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..config import MarketConfig
from ..errors import FeedError
from ..market.feed import TradeFeed
from ..metrics.reporter import NullReporter, Reporter
from .market_session import MarketSession
from .models import SessionSnapshot


class RunnerState(Enum):
    """Session runner states."""
    CONNECTING = "connecting"
    STREAMING = "streaming"
    CLOSED = "closed"
    FAILED = "failed"


@dataclass
class SessionResult:
    """Outcome of one market's run."""
    market: str
    state: RunnerState
    batches_processed: int = 0
    error: Optional[Exception] = None
    snapshot: Optional[SessionSnapshot] = None

    @property
    def success(self) -> bool:
        return self.state is RunnerState.CLOSED


class SessionRunner:
    """
    Owns and mutates exactly one MarketSession.

    The only blocking point is waiting on the feed for the next batch;
    everything else is synchronous arithmetic.
    """

    def __init__(self, market: str, config: MarketConfig, feed: TradeFeed,
                 reporter: Optional[Reporter] = None):
        self.market = market
        self.config = config
        self.feed = feed
        self.reporter = reporter or NullReporter()

        self.state = RunnerState.CONNECTING
        self.session: Optional[MarketSession] = None

        self.logger = logging.getLogger(__name__)

    def run(self) -> SessionResult:
        """Connect, stream until the feed ends, and report the outcome."""
        error = None
        self.state = RunnerState.CONNECTING

        try:
            seed = self.feed.connect()
            self.session = MarketSession.seeded(self.market, self.config, seed.ask, seed.bid)
            self.reporter.session_started(self.market, seed.ask, seed.bid)

            self.state = RunnerState.STREAMING
            self.logger.info(f"{self.market}: streaming from ask={seed.ask} bid={seed.bid}")

            for batch in self.feed.batches():
                event = self.session.process_batch(batch)
                if event is not None:
                    self.reporter.report(event)

            self.state = RunnerState.CLOSED
            self.logger.info(f"{self.market}: feed closed")

        except FeedError as e:
            self.state = RunnerState.FAILED
            error = e
            self.logger.error(f"{self.market}: feed failed: {e}")

        finally:
            self.feed.close()

        result = SessionResult(
            market=self.market,
            state=self.state,
            batches_processed=self.session.batches_processed if self.session else 0,
            error=error,
            snapshot=self.session.snapshot() if self.session else None,
        )
        self.reporter.session_finished(result)
        return result

    def stop(self) -> None:
        """Ask the feed to shut down; run() then returns once the feed unblocks."""
        self.feed.close()
