from dataclasses import dataclass
from datetime import datetime
from typing import Any

from pydantic import Field

from spotrates.adapters.base import RateAdapter, WireModel
from spotrates.models import CanonicalRate
from spotrates.normalizer import parse_diagnostic_timestamp, parse_float
from spotrates.utils.time import from_rfc3339


class OKExTickerWire(WireModel):
    """OKEx spot v3 instrument ticker.

    OKEx's `base_volume_24h`/`quote_volume_24h` are read with their roles
    swapped: the DASH-denominated figure is the one published as
    `quote_volume_24h`.
    """

    best_ask: str
    best_bid: str
    instrument_id: str
    product_id: str
    last: str
    last_qty: str
    ask: str
    best_ask_size: str
    bid: str
    best_bid_size: str
    open_24h: str
    high_24h: str
    low_24h: str
    quote_volume: str = Field(alias="base_volume_24h")
    base_volume: str = Field(alias="quote_volume_24h")
    timestamp: str

    def normalize(self) -> "OKExTicker":
        return OKExTicker(
            instrument_id=self.instrument_id,
            last=parse_float(self.last, "last"),
            last_qty=parse_float(self.last_qty, "last_qty"),
            best_ask=parse_float(self.best_ask, "best_ask"),
            best_bid=parse_float(self.best_bid, "best_bid"),
            open_24h=parse_float(self.open_24h, "open_24h"),
            high_24h=parse_float(self.high_24h, "high_24h"),
            low_24h=parse_float(self.low_24h, "low_24h"),
            base_volume=parse_float(self.base_volume, "quote_volume_24h"),
            quote_volume=parse_float(self.quote_volume, "base_volume_24h"),
            server_time=parse_diagnostic_timestamp(
                self.timestamp, from_rfc3339, "timestamp"
            ),
        )


@dataclass(frozen=True)
class OKExTicker:
    instrument_id: str
    last: float
    last_qty: float
    best_ask: float
    best_bid: float
    open_24h: float
    high_24h: float
    low_24h: float
    base_volume: float
    quote_volume: float
    server_time: datetime | None


class OKExAdapter(RateAdapter):
    _BASE_API_URL = "https://www.okex.com/api"
    _TICKER_ENDPOINT = "/spot/v3/instruments/DASH-BTC/ticker"
    quote_currency = "BTC"

    @property
    def display_name(self) -> str:
        return "OKEx"

    def _parse(self, payload: Any, fetch_time: datetime) -> CanonicalRate:
        ticker = self._decode(OKExTickerWire, payload).normalize()
        return self._rate(ticker.last, ticker.base_volume, fetch_time)
