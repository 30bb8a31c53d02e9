"""
Command-line interface for PaperSim.

Provides commands for:
- Paper trading against the live exchange stream
- Replaying recorded trades or generated synthetic trades
- Writing and inspecting the market configuration table
"""

import click
import sys
import logging
from decimal import Decimal, InvalidOperation
from pathlib import Path

from .config import (
    Config, create_default_config, load_config, load_config_from_env,
    merge_configs, save_config,
)
from .core.simulation_engine import SimulationEngine, first_error
from .errors import PaperSimError
from .market.feed import FeedFactory
from .market.luno_stream import luno_feed_factory
from .market.replay_feed import ReplayFeed, SyntheticFeed, balanced_price, load_trade_file
from .metrics.reporter import CompositeReporter, LogReporter, RecordingReporter


def setup_logging(level: str, fmt: str) -> None:
    """Configure root logging once; later calls only change the level."""
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=numeric_level, format=fmt)
    logging.getLogger().setLevel(numeric_level)


def _load(config_path) -> Config:
    config_obj = load_config(config_path) if config_path else create_default_config()
    return merge_configs(config_obj, load_config_from_env())


def build_feed_factory(feed: str, config_obj: Config, data_path=None, batches: int = 1000,
                       seed: int = 42, start_price=None) -> FeedFactory:
    """Choose the trade feed for every market."""
    if feed == 'live':
        return luno_feed_factory(config_obj.feed)

    if feed == 'replay':
        if not data_path:
            raise click.UsageError("--data-path is required for the replay feed")
        trades = load_trade_file(data_path)
        return lambda market: ReplayFeed.from_dataframe(market, trades)

    names = list(config_obj.markets)

    def synthetic(market: str) -> SyntheticFeed:
        market_config = config_obj.market(market)
        price = start_price
        if price is None:
            price = balanced_price(market_config.base_balance, market_config.counter_balance)
        return SyntheticFeed(
            market,
            start_price=price,
            mean_volume=market_config.order_volume,
            num_batches=batches,
            random_seed=seed + names.index(market),
        )

    return synthetic


def _parse_price(ctx, param, value):
    if value is None:
        return None
    try:
        return Decimal(value)
    except InvalidOperation:
        raise click.BadParameter(f"not a decimal number: {value}")


@click.group()
@click.version_option(version="0.1.0")
def main():
    """PaperSim - per-market paper-trading simulator"""
    pass


@main.command()
@click.argument('markets', nargs=-1)
@click.option('--config', '-c', type=click.Path(exists=True),
              help='Configuration file path')
@click.option('--feed', '-f', type=click.Choice(['live', 'replay', 'synthetic']),
              default='live', show_default=True, help='Where trades come from')
@click.option('--data-path', '-d', type=click.Path(exists=True),
              help='Recorded trades (CSV or Parquet) for the replay feed')
@click.option('--batches', '-b', type=int, default=1000, show_default=True,
              help='Number of synthetic trade batches per market')
@click.option('--seed', type=int, default=42, show_default=True,
              help='Random seed for the synthetic feed')
@click.option('--start-price', callback=_parse_price,
              help='Synthetic start price (default: balanced wallet price)')
@click.option('--output', '-o', type=click.Path(),
              help='Write every session event to this CSV or Parquet file')
@click.option('--log-level', type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False),
              help='Override the configured log level')
def run(markets, config, feed, data_path, batches, seed, start_price, output, log_level):
    """Paper trade MARKETS (default: every configured market)."""
    try:
        config_obj = _load(config)
        setup_logging(log_level or config_obj.logging.level, config_obj.logging.format)

        markets = list(markets) or list(config_obj.markets)
        # Fail fast on unknown markets before any feed is built
        config_obj.require_markets(markets)

        factory = build_feed_factory(feed, config_obj, data_path=data_path, batches=batches,
                                     seed=seed, start_price=start_price)

        recorder = RecordingReporter()
        reporter = CompositeReporter([LogReporter(), recorder])

        click.echo(f"Starting paper trading on {', '.join(markets)} ({feed} feed)...")
        engine = SimulationEngine(config_obj, factory, markets=markets, reporter=reporter)
        results = engine.run()

    except KeyboardInterrupt:
        click.echo("Interrupted", err=True)
        sys.exit(130)
    except (PaperSimError, OSError, ValueError) as e:
        click.echo(f"❌ {e}", err=True)
        sys.exit(1)

    if output:
        recorder.save_results(output)

    # Print summary
    click.echo("\n" + "=" * 60)
    click.echo("PAPER TRADING COMPLETE")
    click.echo("=" * 60)

    for market, entry in engine.get_summary_statistics().items():
        click.echo(f"{market}: {entry['state']} after {entry['batches_processed']} batches")
        if 'base_balance' in entry:
            click.echo(f"  base={entry['base_balance']} counter={entry['counter_balance']}")
            click.echo(f"  bought={entry['total_bought']} sold={entry['total_sold']}")
            if entry['realized_return'] is not None:
                click.echo(f"  realized_return={entry['realized_return']}")
        if entry['error']:
            click.echo(f"  error: {entry['error']}")

    if output:
        click.echo(f"\nEvents saved to: {output}")
    click.echo("=" * 60)

    error = first_error(results)
    if error is not None:
        click.echo(f"❌ {error}", err=True)
        sys.exit(1)


@main.command()
@click.argument('path', type=click.Path())
@click.option('--force', is_flag=True, help='Overwrite an existing file')
def init_config(path, force):
    """Write the default configuration to PATH (.yaml, .yml or .json)."""
    if Path(path).exists() and not force:
        click.echo(f"❌ {path} already exists, use --force to overwrite", err=True)
        sys.exit(1)

    try:
        save_config(create_default_config(), path)
    except ValueError as e:
        click.echo(f"❌ {e}", err=True)
        sys.exit(1)

    click.echo(f"Configuration written to {path}")


@main.command()
@click.option('--config', '-c', type=click.Path(exists=True),
              help='Configuration file path')
def show_config(config):
    """Print the market configuration table."""
    try:
        config_obj = _load(config)
    except (OSError, ValueError) as e:
        click.echo(f"❌ {e}", err=True)
        sys.exit(1)

    click.echo(f"{'MARKET':<10} {'SPREAD':>14} {'VOLUME':>10} {'BASE':>12} {'COUNTER':>12}")
    for name, market in config_obj.markets.items():
        click.echo(f"{name:<10} {str(market.spread):>14} {str(market.order_volume):>10} "
                   f"{str(market.base_balance):>12} {str(market.counter_balance):>12}")
    click.echo(f"\nStream: {config_obj.feed.stream_url}")
    click.echo(f"Secret: {config_obj.feed.api_secret_path}")


if __name__ == '__main__':
    main()
