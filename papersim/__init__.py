"""
PaperSim - per-market paper-trading simulator

Watches a live (or replayed) trade feed for each market, decides whether
synthetic resting orders would have filled, keeps simulated wallets and
P&L, and re-quotes with an inventory-skew rule.
"""

__version__ = "0.1.0"
__author__ = "PaperSim Team"
__license__ = "Apache 2.0"

from .config import Config, MarketConfig, load_config, create_default_config
from .errors import PaperSimError, FeedError, ConfigurationMissingError, CredentialsError
from .core import MarketSession, SessionRunner, SimulationEngine, evaluate, requote
from .market import TradeFeed, SeedPrice, ReplayFeed, SyntheticFeed, LunoStreamFeed
from .metrics import LogReporter, RecordingReporter


def create_simulation(config=None, config_path=None, **kwargs):
    """Create a simulation engine from a Config or a configuration file."""
    if config_path:
        config = load_config(config_path)
    elif config is None:
        config = create_default_config()

    return SimulationEngine(config, **kwargs)


__all__ = [
    # Version info
    '__version__', '__author__', '__license__',

    # Configuration
    'Config', 'MarketConfig', 'load_config', 'create_default_config',

    # Errors
    'PaperSimError', 'FeedError', 'ConfigurationMissingError', 'CredentialsError',

    # Engine
    'MarketSession', 'SessionRunner', 'SimulationEngine', 'evaluate', 'requote',

    # Feeds and reporting
    'TradeFeed', 'SeedPrice', 'ReplayFeed', 'SyntheticFeed', 'LunoStreamFeed',
    'LogReporter', 'RecordingReporter',

    # Convenience functions
    'create_simulation',
]
