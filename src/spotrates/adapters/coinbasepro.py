from dataclasses import dataclass
from datetime import datetime
from typing import Any

from spotrates.adapters.base import RateAdapter, WireModel
from spotrates.models import CanonicalRate
from spotrates.normalizer import parse_diagnostic_timestamp, parse_float
from spotrates.utils.time import from_rfc3339


class CoinbaseProTickerWire(WireModel):
    trade_id: int
    price: str
    size: str
    time: str
    bid: str
    ask: str
    volume: str

    def normalize(self) -> "CoinbaseProTicker":
        return CoinbaseProTicker(
            trade_id=self.trade_id,
            price=parse_float(self.price, "price"),
            size=parse_float(self.size, "size"),
            bid=parse_float(self.bid, "bid"),
            ask=parse_float(self.ask, "ask"),
            volume=parse_float(self.volume, "volume"),
            server_time=parse_diagnostic_timestamp(self.time, from_rfc3339, "time"),
        )


@dataclass(frozen=True)
class CoinbaseProTicker:
    trade_id: int
    price: float
    size: float
    bid: float
    ask: float
    volume: float
    server_time: datetime | None


class CoinbaseProAdapter(RateAdapter):
    """Adapter for the Coinbase Pro product ticker (last trade + 24h volume)."""

    _BASE_API_URL = "https://api.pro.coinbase.com"
    _TICKER_ENDPOINT = "/products/DASH-USD/ticker"
    quote_currency = "USD"

    @property
    def display_name(self) -> str:
        return "Coinbase Pro"

    def _parse(self, payload: Any, fetch_time: datetime) -> CanonicalRate:
        ticker = self._decode(CoinbaseProTickerWire, payload).normalize()
        return self._rate(ticker.price, ticker.volume, fetch_time)
