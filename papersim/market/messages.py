"""
Wire models for the exchange's public ticker and market stream.

Amounts arrive as JSON strings and are parsed straight into Decimal.
"""

from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from ..core.models import Trade


class Credentials(BaseModel):
    """First message sent on a stream connection."""
    api_key_id: str
    api_key_secret: str


class OrderEntry(BaseModel):
    id: str = ""
    price: Decimal
    volume: Decimal


class OrderBookSnapshot(BaseModel):
    """First message received on a market stream."""
    sequence: int
    asks: List[OrderEntry] = Field(default_factory=list)
    bids: List[OrderEntry] = Field(default_factory=list)
    status: str = ""
    timestamp: int = 0


class TradeUpdate(BaseModel):
    base: Decimal
    counter: Decimal
    maker_order_id: str = ""
    taker_order_id: str = ""

    def to_trade(self) -> Trade:
        return Trade(base_volume=self.base, counter_volume=self.counter)


class StreamUpdate(BaseModel):
    """
    Incremental market update.

    Only trade_updates matter to the simulator; order create, delete and
    status updates are parsed loosely and ignored.
    """
    sequence: int
    trade_updates: Optional[List[TradeUpdate]] = None
    create_update: Optional[dict] = None
    delete_update: Optional[dict] = None
    status_update: Optional[dict] = None
    timestamp: int = 0

    def trades(self) -> List[Trade]:
        return [update.to_trade() for update in self.trade_updates or []]


class Ticker(BaseModel):
    pair: str = ""
    timestamp: int = 0
    ask: Decimal
    bid: Decimal
    last_trade: Optional[Decimal] = None
    rolling_24_hour_volume: Optional[Decimal] = None
    status: str = ""
