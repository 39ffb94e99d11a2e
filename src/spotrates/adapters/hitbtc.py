from dataclasses import dataclass
from datetime import datetime
from functools import partial
from typing import Any

from pydantic import Field

from spotrates.adapters.base import RateAdapter, WireModel
from spotrates.models import CanonicalRate
from spotrates.normalizer import parse_diagnostic_timestamp, parse_float
from spotrates.utils.time import from_layout

TIMESTAMP_LAYOUT = "%Y-%m-%dT%H:%M:%S.%fZ"


class HitBTCTickerWire(WireModel):
    symbol: str
    ask: str
    bid: str
    last: str
    high: str
    low: str
    open: str
    volume: str
    volume_quote: str = Field(alias="volumeQuote")
    timestamp: str

    def normalize(self) -> "HitBTCTicker":
        return HitBTCTicker(
            symbol=self.symbol,
            ask=parse_float(self.ask, "ask"),
            bid=parse_float(self.bid, "bid"),
            last=parse_float(self.last, "last"),
            high=parse_float(self.high, "high"),
            low=parse_float(self.low, "low"),
            open=parse_float(self.open, "open"),
            volume=parse_float(self.volume, "volume"),
            volume_quote=parse_float(self.volume_quote, "volumeQuote"),
            server_time=parse_diagnostic_timestamp(
                self.timestamp, partial(from_layout, layout=TIMESTAMP_LAYOUT), "timestamp"
            ),
        )


@dataclass(frozen=True)
class HitBTCTicker:
    symbol: str
    ask: float
    bid: float
    last: float
    high: float
    low: float
    open: float
    volume: float
    volume_quote: float
    server_time: datetime | None


class HitBTCAdapter(RateAdapter):
    """Adapter for the HitBTC v2 symbol ticker."""

    _BASE_API_URL = "https://api.hitbtc.com/api/2"
    _TICKER_ENDPOINT = "/public/ticker/DASHUSD"
    quote_currency = "USD"

    @property
    def display_name(self) -> str:
        return "HitBTC"

    def _parse(self, payload: Any, fetch_time: datetime) -> CanonicalRate:
        ticker = self._decode(HitBTCTickerWire, payload).normalize()
        return self._rate(ticker.last, ticker.volume, fetch_time)
