"""
Configuration management for PaperSim.

Handles loading and validation of the per-market tuning table, feed
connection settings and logging options.
"""

import copy
import os
import json
import yaml
from pathlib import Path
from decimal import Decimal
from typing import Dict, Any, Iterable, Optional, Union
from dataclasses import dataclass, field, asdict

from .errors import ConfigurationMissingError


@dataclass(frozen=True)
class MarketConfig:
    """Static tuning for one market. Immutable for a session's lifetime."""
    spread: Decimal
    order_volume: Decimal
    base_balance: Decimal
    counter_balance: Decimal

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'MarketConfig':
        """Build from a mapping of strings or numbers.

        Floats are converted through their string form so that YAML values
        like 0.000035 keep their written digits.
        """
        def _dec(key):
            if key not in data:
                raise ValueError(f"Market configuration is missing '{key}'")
            value = data[key]
            if isinstance(value, float):
                value = repr(value)
            return Decimal(value)

        return cls(
            spread=_dec('spread'),
            order_volume=_dec('order_volume'),
            base_balance=_dec('base_balance'),
            counter_balance=_dec('counter_balance'),
        )

    def to_dict(self) -> Dict[str, str]:
        return {key: str(value) for key, value in asdict(self).items()}


@dataclass
class FeedConfig:
    """Exchange connection settings."""
    api_key_id: str = ""
    api_secret_path: str = "./secret"
    stream_url: str = "wss://ws.luno.com/api/1/stream"
    api_url: str = "https://api.luno.com"
    read_timeout_s: float = 60.0
    connect_timeout_s: float = 30.0


@dataclass
class LoggingConfig:
    """Logging options applied by the CLI."""
    level: str = "INFO"
    format: str = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


@dataclass
class Config:
    """Main configuration container."""
    markets: Dict[str, MarketConfig] = field(default_factory=dict)
    feed: FeedConfig = field(default_factory=FeedConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def market(self, name: str) -> MarketConfig:
        """Look up a market, raising ConfigurationMissingError if absent."""
        try:
            return self.markets[name]
        except KeyError:
            raise ConfigurationMissingError(name) from None

    def require_markets(self, names: Iterable[str]) -> Dict[str, MarketConfig]:
        """Resolve every market up front so a missing entry fails at startup."""
        return {name: self.market(name) for name in names}


# Spread, total order volume and seed wallet per market
DEFAULT_MARKETS = {
    # Crypto/BTC markets
    "BCHXBT": {"spread": "0.000035", "order_volume": "15",
               "base_balance": "150", "counter_balance": "1"},
    "ETHXBT": {"spread": "0.00035", "order_volume": "1.5",
               "base_balance": "15", "counter_balance": "1"},
    "LTCXBT": {"spread": "0.00001", "order_volume": "45",
               "base_balance": "450", "counter_balance": "1"},
    "XRPXBT": {"spread": "0.00000006", "order_volume": "7000",
               "base_balance": "70000", "counter_balance": "1"},

    # Crypto/Stable markets
    "ETHUSDC": {"spread": "10", "order_volume": "0.05",
                "base_balance": "1", "counter_balance": "2000"},
    "XBTUSDC": {"spread": "150", "order_volume": "0.1",
                "base_balance": "1", "counter_balance": "30000"},
}


def _config_from_dict(data: Dict[str, Any]) -> Config:
    markets = {
        name: MarketConfig.from_dict(values)
        for name, values in (data.get('markets') or {}).items()
    }
    return Config(
        markets=markets,
        feed=FeedConfig(**(data.get('feed') or {})),
        logging=LoggingConfig(**(data.get('logging') or {})),
    )


def config_to_dict(config: Config) -> Dict[str, Any]:
    return {
        'markets': {name: market.to_dict() for name, market in config.markets.items()},
        'feed': asdict(config.feed),
        'logging': asdict(config.logging),
    }


def load_config(config_path: Union[str, Path]) -> Config:
    """Load configuration from file."""
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    # Determine file format
    suffix = config_path.suffix.lower()

    if suffix == '.json':
        with open(config_path, 'r') as f:
            data = json.load(f)
    elif suffix in ['.yml', '.yaml']:
        with open(config_path, 'r') as f:
            data = yaml.safe_load(f)
    else:
        raise ValueError(f"Unsupported configuration format: {suffix}")

    return _config_from_dict(data or {})


def save_config(config: Config, config_path: Union[str, Path]) -> None:
    """Save configuration to file."""
    config_path = Path(config_path)
    data = config_to_dict(config)

    suffix = config_path.suffix.lower()

    if suffix == '.json':
        with open(config_path, 'w') as f:
            json.dump(data, f, indent=2)
    elif suffix in ['.yml', '.yaml']:
        with open(config_path, 'w') as f:
            yaml.safe_dump(data, f, default_flow_style=False, indent=2, sort_keys=False)
    else:
        raise ValueError(f"Unsupported configuration format: {suffix}")


def create_default_config() -> Config:
    """Create default configuration."""
    return _config_from_dict({'markets': DEFAULT_MARKETS})


def merge_configs(base_config: Config, override_config: dict) -> Config:
    """Merge configuration with overrides.

    Market entries in the override replace or add whole markets; feed and
    logging keys are applied one by one.
    """
    merged_config = copy.deepcopy(base_config)

    for name, values in (override_config.get('markets') or {}).items():
        merged_config.markets[name] = MarketConfig.from_dict(values)

    for section in ('feed', 'logging'):
        section_obj = getattr(merged_config, section)
        for key, value in (override_config.get(section) or {}).items():
            if not hasattr(section_obj, key):
                raise ValueError(f"Unknown {section} option: {key}")
            setattr(section_obj, key, value)

    return merged_config


# Environment-based configuration
def load_config_from_env(environ: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
    """Load configuration overrides from environment variables."""
    environ = os.environ if environ is None else environ
    env_config = {}

    if 'PAPERSIM_API_KEY_ID' in environ:
        env_config.setdefault('feed', {})['api_key_id'] = environ['PAPERSIM_API_KEY_ID']

    if 'PAPERSIM_API_SECRET_PATH' in environ:
        env_config.setdefault('feed', {})['api_secret_path'] = environ['PAPERSIM_API_SECRET_PATH']

    if 'PAPERSIM_LOG_LEVEL' in environ:
        env_config['logging'] = {'level': environ['PAPERSIM_LOG_LEVEL'].upper()}

    return env_config
