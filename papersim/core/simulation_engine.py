"""
Main simulation engine for PaperSim.

The SimulationEngine fans out one SessionRunner per market and joins
them:
- Market configuration is resolved before any feed is opened
- Each runner gets its own thread and shares no state with the others
- A failing market does not stop its siblings; errors are aggregated
  once every runner has finished
"""

import time
import logging
from typing import Dict, List, Optional, Sequence
from concurrent.futures import ThreadPoolExecutor

from ..config import Config
from ..market.feed import FeedFactory
from ..metrics.reporter import Reporter
from .session_runner import RunnerState, SessionResult, SessionRunner


class SimulationEngine:
    """
    Paper-trading engine over several independent markets.

    Cancellation is not eager: when one market fails the others keep
    streaming. Call stop() to close every feed, e.g. on Ctrl-C.
    """

    def __init__(self, config: Config, feed_factory: FeedFactory,
                 markets: Optional[Sequence[str]] = None,
                 reporter: Optional[Reporter] = None):
        """
        Initialize the simulation engine.

        Args:
            config: Configuration holding the per-market table
            feed_factory: Builds a TradeFeed for a market name
            markets: Markets to trade, defaults to every configured market
            reporter: Receives session events from all runners

        Raises:
            ConfigurationMissingError: A requested market is not configured
            ValueError: No markets to run
        """
        self.config = config
        self.feed_factory = feed_factory
        self.reporter = reporter

        self.markets = list(markets) if markets is not None else list(config.markets)
        if not self.markets:
            raise ValueError("No markets to simulate")

        # Fail fast, before any connection is made
        self.market_configs = config.require_markets(self.markets)

        self.runners: Dict[str, SessionRunner] = {}
        self.results: List[SessionResult] = []
        self.is_running = False

        self.logger = logging.getLogger(__name__)

    def create_runners(self) -> List[SessionRunner]:
        """Build one runner, with a fresh feed, per market."""
        self.runners = {
            market: SessionRunner(
                market=market,
                config=self.market_configs[market],
                feed=self.feed_factory(market),
                reporter=self.reporter,
            )
            for market in self.markets
        }
        return list(self.runners.values())

    def run(self) -> List[SessionResult]:
        """Run every market to completion and return results in market order."""
        runners = self.create_runners()

        self.is_running = True
        start_time = time.time()

        self.logger.info(f"Starting paper trading on {len(runners)} markets: {', '.join(self.markets)}")

        results = []
        with ThreadPoolExecutor(max_workers=len(runners), thread_name_prefix="papersim") as executor:
            futures = [(runner, executor.submit(runner.run)) for runner in runners]

            try:
                for runner, future in futures:
                    try:
                        results.append(future.result())
                    except Exception as e:
                        self.logger.exception(f"{runner.market}: runner crashed")
                        results.append(SessionResult(
                            market=runner.market,
                            state=RunnerState.FAILED,
                            error=e,
                        ))
            except KeyboardInterrupt:
                # Unblock the workers so the executor can shut down
                self.logger.warning("Interrupted, closing all feeds")
                self.stop()
                self.is_running = False
                raise

        self.results = results
        self.is_running = False

        execution_time = time.time() - start_time
        succeeded = sum(1 for r in results if r.success)
        self.logger.info(f"Paper trading finished in {execution_time:.2f}s")
        self.logger.info(f"Closed cleanly: {succeeded}/{len(results)}")

        return results

    def stop(self) -> None:
        """Close every feed so blocked runners return."""
        for runner in self.runners.values():
            runner.stop()

    def get_summary_statistics(self) -> Dict[str, Dict]:
        """Final wallet and accounting per market from the last run."""
        summary = {}
        for result in self.results:
            entry = {
                'state': result.state.value,
                'batches_processed': result.batches_processed,
                'error': str(result.error) if result.error else None,
            }
            if result.snapshot:
                stats = result.snapshot.stats
                entry.update({
                    'base_balance': result.snapshot.wallet.base,
                    'counter_balance': result.snapshot.wallet.counter,
                    'total_bought': stats.total_bought,
                    'total_sold': stats.total_sold,
                    'realized_return': stats.realized_return,
                })
            summary[result.market] = entry
        return summary


def first_error(results: Sequence[SessionResult]) -> Optional[Exception]:
    """The first failure in market order, if any."""
    for result in results:
        if result.error is not None:
            return result.error
    return None


def raise_first_error(results: Sequence[SessionResult]) -> None:
    """Raise the first failure in market order, if any."""
    error = first_error(results)
    if error is not None:
        raise error
