"""
Exception hierarchy for PaperSim.

Feed failures are local to one market's runner; configuration problems
are raised at startup before any connection is opened.
"""

from typing import Optional


class PaperSimError(Exception):
    """Base error for the simulator."""

    def __init__(self, message: str, market: Optional[str] = None):
        self.message = message
        self.market = market
        super().__init__(f"{market}: {message}" if market else message)


class FeedError(PaperSimError):
    """A trade feed failed to connect or terminated abnormally."""


class ConfigurationMissingError(PaperSimError):
    """A requested market has no entry in the configuration table."""

    def __init__(self, market: str):
        super().__init__("no market configuration found", market=market)


class CredentialsError(PaperSimError):
    """The API secret could not be read."""
