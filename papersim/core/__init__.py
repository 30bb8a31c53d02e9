"""
Core paper-trading engine for PaperSim.

This module contains the per-market simulation components:
- evaluate: Decides whether a trade would have filled a synthetic quote
- requote: Inventory-skewed ask/bid placement
- MarketSession: Wallet, quotes and statistics for one market
- SessionRunner: Drives one session over its trade feed
- SimulationEngine: Runs every market side by side
"""

from .models import (
    FillOutcome, FillSide, Quote, QuotePair, SessionEvent, SessionSnapshot,
    Stats, Trade, Wallet,
)
from .fill_evaluator import evaluate
from .requoter import Valuation, requote, value_wallet
from .market_session import MarketSession
from .session_runner import RunnerState, SessionResult, SessionRunner
from .simulation_engine import SimulationEngine, first_error, raise_first_error

__all__ = [
    'FillOutcome', 'FillSide', 'Quote', 'QuotePair', 'SessionEvent',
    'SessionSnapshot', 'Stats', 'Trade', 'Wallet',
    'evaluate', 'requote', 'value_wallet', 'Valuation',
    'MarketSession',
    'RunnerState', 'SessionResult', 'SessionRunner',
    'SimulationEngine', 'first_error', 'raise_first_error',
]
