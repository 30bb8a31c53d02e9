#!/usr/bin/env python3
"""
Simple PaperSim simulation example.

This example demonstrates:
- Building a configuration in code
- Paper trading two markets on synthetic trades
- Collecting session events and saving them
"""

import logging
import os
import sys

# Configure logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')


def main():
    """Run simple simulation example."""
    print("=" * 60)
    print("PaperSim - Simple Simulation Example")
    print("=" * 60)

    from papersim import SimulationEngine, SyntheticFeed, create_default_config
    from papersim.core import first_error
    from papersim.market import balanced_price
    from papersim.metrics import CompositeReporter, LogReporter, RecordingReporter

    config = create_default_config()
    markets = ["XBTUSDC", "ETHUSDC"]

    def synthetic_feed(market):
        market_config = config.market(market)
        return SyntheticFeed(
            market,
            start_price=balanced_price(market_config.base_balance, market_config.counter_balance),
            mean_volume=market_config.order_volume,
            num_batches=500,
            volatility=0.002,
            random_seed=7,
        )

    recorder = RecordingReporter()
    engine = SimulationEngine(
        config, synthetic_feed, markets=markets,
        reporter=CompositeReporter([LogReporter(), recorder]),
    )

    print(f"Paper trading {', '.join(markets)} on synthetic trades...")
    results = engine.run()
    print()

    print("=" * 40)
    print("SIMULATION RESULTS")
    print("=" * 40)

    for market, entry in engine.get_summary_statistics().items():
        events = recorder.events_for(market)
        fills = [e for e in events if e.outcome.volume > 0]
        print(f"{market}: {entry['state']}, {len(events)} events, {len(fills)} fills")
        if 'base_balance' in entry:
            print(f"  Wallet: base={entry['base_balance']} counter={entry['counter_balance']}")
            if entry['realized_return'] is not None:
                print(f"  Realized return: {entry['realized_return']}")
        if events:
            last = events[-1]
            print(f"  Final value: {last.total_value} at {last.outcome.last_price}")
    print()

    results_file = "results/simple_simulation_events.csv"
    os.makedirs("results", exist_ok=True)
    recorder.save_results(results_file)
    print(f"Results saved to: {results_file}")

    error = first_error(results)
    if error is not None:
        print(f"Simulation error: {error}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
