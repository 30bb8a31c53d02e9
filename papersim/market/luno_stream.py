"""
Live market feed over the exchange's authenticated streaming API.

Protocol:
- Connect to {stream_url}/{market} and send the API credentials as JSON
- The first message is an order book snapshot carrying a sequence number
- Every later message carries the next sequence number and may hold
  trade updates; an empty message is a keep-alive
- A close frame from the server ends the stream

The reference ask/bid comes from the public REST ticker.
"""

import json
import logging
from typing import Callable, Iterator, List, Optional

import requests
import websocket
from pydantic import ValidationError

from ..config import FeedConfig
from ..core.models import Trade
from ..errors import FeedError
from .credentials import read_secret
from .feed import FeedFactory, SeedPrice, TradeFeed
from .messages import Credentials, OrderBookSnapshot, StreamUpdate, Ticker


class LunoTickerClient:
    """Minimal REST client for the public ticker endpoint."""

    def __init__(self, api_url: str = "https://api.luno.com",
                 session: Optional[requests.Session] = None,
                 timeout: float = 10.0):
        self.api_url = api_url.rstrip('/')
        self.session = session or requests.Session()
        self.timeout = timeout

    def get_ticker(self, market: str) -> Ticker:
        response = self.session.get(
            f"{self.api_url}/api/1/ticker",
            params={'pair': market},
            timeout=self.timeout,
        )
        response.raise_for_status()
        return Ticker.model_validate(response.json())


class LunoStreamFeed(TradeFeed):
    """
    Trade batches for one market from the streaming API.

    Each stream update becomes one batch holding its trade updates, in
    order. Updates without trades yield empty batches.
    """

    def __init__(self, market: str, api_key_id: str, api_key_secret: str,
                 stream_url: str = "wss://ws.luno.com/api/1/stream",
                 ticker_client: Optional[LunoTickerClient] = None,
                 read_timeout_s: float = 60.0,
                 connect_timeout_s: float = 30.0,
                 connection_factory: Callable = websocket.create_connection):
        super().__init__(market)
        self.api_key_id = api_key_id
        self.api_key_secret = api_key_secret
        self.url = f"{stream_url.rstrip('/')}/{market}"
        self.ticker_client = ticker_client or LunoTickerClient()
        self.read_timeout_s = read_timeout_s
        self.connect_timeout_s = connect_timeout_s
        self.connection_factory = connection_factory

        self.sequence: Optional[int] = None
        self._ws = None
        self._closed = False

        self.logger = logging.getLogger(__name__)

    def connect(self) -> SeedPrice:
        try:
            self._ws = self.connection_factory(self.url, timeout=self.connect_timeout_s)
            credentials = Credentials(api_key_id=self.api_key_id, api_key_secret=self.api_key_secret)
            self._ws.send(json.dumps(credentials.model_dump()))
            self._ws.settimeout(self.read_timeout_s)
        except (websocket.WebSocketException, OSError) as e:
            raise FeedError(f"failed to dial {self.url}: {e}", market=self.market) from e

        snapshot = self._read_snapshot()
        self.sequence = snapshot.sequence
        self.logger.info(f"{self.market}: stream established at sequence {self.sequence} "
                         f"key={self.api_key_id}")

        try:
            ticker = self.ticker_client.get_ticker(self.market)
        except (requests.RequestException, ValidationError, ValueError) as e:
            raise FeedError(f"ticker request failed: {e}", market=self.market) from e

        return SeedPrice(ask=ticker.ask, bid=ticker.bid)

    def batches(self) -> Iterator[List[Trade]]:
        if self._ws is None:
            raise FeedError("feed is not connected", market=self.market)

        while True:
            message = self._receive()
            if message is None:
                return
            if not message:
                # Keep-alive
                continue

            update = self._parse(StreamUpdate, message)
            if update.sequence != self.sequence + 1:
                raise FeedError(
                    f"update sequence out of order: expected {self.sequence + 1}, got {update.sequence}",
                    market=self.market,
                )
            self.sequence = update.sequence

            yield self._valid_trades(update.trades())

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._ws is not None:
            try:
                # Shut the socket first so a runner blocked in recv_data() wakes up
                self._ws.abort()
                self._ws.close(timeout=0)
            except (websocket.WebSocketException, OSError) as e:
                self.logger.debug(f"{self.market}: error while closing stream: {e}")

    def _read_snapshot(self) -> OrderBookSnapshot:
        while True:
            message = self._receive()
            if message is None:
                raise FeedError("stream closed before order book snapshot", market=self.market)
            if message:
                return self._parse(OrderBookSnapshot, message)

    def _receive(self) -> Optional[str]:
        """Next text message, '' for keep-alives, None once the stream has closed."""
        try:
            opcode, data = self._ws.recv_data()
        except websocket.WebSocketTimeoutException as e:
            if self._closed:
                return None
            raise FeedError(f"no message within {self.read_timeout_s}s", market=self.market) from e
        except (websocket.WebSocketException, OSError) as e:
            if self._closed:
                return None
            raise FeedError(f"stream connection lost: {e}", market=self.market) from e

        if opcode == websocket.ABNF.OPCODE_CLOSE:
            self.logger.info(f"{self.market}: stream closed by server")
            return None

        if isinstance(data, bytes):
            data = data.decode('utf-8')
        return data.strip()

    def _parse(self, model, message: str):
        try:
            return model.model_validate_json(message)
        except ValidationError as e:
            raise FeedError(f"malformed stream message: {e}", market=self.market) from e

    def _valid_trades(self, trades: List[Trade]) -> List[Trade]:
        valid = [t for t in trades if t.base_volume > 0]
        if len(valid) != len(trades):
            self.logger.warning(f"{self.market}: dropped {len(trades) - len(valid)} trades with no base volume")
        return valid


def luno_feed_factory(feed_config: FeedConfig) -> FeedFactory:
    """
    Build a feed factory from connection settings.

    The API secret is read once, here, so a missing secret fails before
    any market starts.
    """
    secret = read_secret(feed_config.api_secret_path)

    def factory(market: str) -> LunoStreamFeed:
        return LunoStreamFeed(
            market=market,
            api_key_id=feed_config.api_key_id,
            api_key_secret=secret,
            stream_url=feed_config.stream_url,
            ticker_client=LunoTickerClient(feed_config.api_url),
            read_timeout_s=feed_config.read_timeout_s,
            connect_timeout_s=feed_config.connect_timeout_s,
        )

    return factory
