from dataclasses import dataclass
from datetime import datetime
from typing import Any

from spotrates.adapters.base import RateAdapter, WireModel
from spotrates.models import CanonicalRate
from spotrates.normalizer import ensure_finite


class LivecoinTickerWire(WireModel):
    cur: str
    symbol: str
    last: float
    high: float
    low: float
    volume: float
    vwap: float
    max_bid: float
    min_ask: float
    best_bid: float
    best_ask: float

    def normalize(self) -> "LivecoinTicker":
        return LivecoinTicker(
            symbol=self.symbol,
            last=ensure_finite(self.last, "last"),
            high=ensure_finite(self.high, "high"),
            low=ensure_finite(self.low, "low"),
            volume=ensure_finite(self.volume, "volume"),
            vwap=ensure_finite(self.vwap, "vwap"),
            best_bid=ensure_finite(self.best_bid, "best_bid"),
            best_ask=ensure_finite(self.best_ask, "best_ask"),
        )


@dataclass(frozen=True)
class LivecoinTicker:
    symbol: str
    last: float
    high: float
    low: float
    volume: float
    vwap: float
    best_bid: float
    best_ask: float


class LivecoinAdapter(RateAdapter):
    _BASE_API_URL = "https://api.livecoin.net"
    _TICKER_ENDPOINT = "/exchange/ticker?currencyPair=DASH/USD"
    quote_currency = "USD"

    @property
    def display_name(self) -> str:
        return "Livecoin"

    def _parse(self, payload: Any, fetch_time: datetime) -> CanonicalRate:
        ticker = self._decode(LivecoinTickerWire, payload).normalize()
        return self._rate(ticker.last, ticker.volume, fetch_time)
