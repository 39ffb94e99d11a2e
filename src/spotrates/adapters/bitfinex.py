from dataclasses import dataclass
from datetime import datetime
from typing import Any

from spotrates.adapters.base import RateAdapter, WireModel
from spotrates.models import CanonicalRate
from spotrates.normalizer import parse_diagnostic_timestamp, parse_float
from spotrates.utils.time import from_dotted_epoch


class BitfinexTickerWire(WireModel):
    mid: str
    bid: str
    ask: str
    last_price: str
    low: str
    high: str
    volume: str
    timestamp: str

    def normalize(self) -> "BitfinexTicker":
        return BitfinexTicker(
            mid=parse_float(self.mid, "mid"),
            bid=parse_float(self.bid, "bid"),
            ask=parse_float(self.ask, "ask"),
            last_price=parse_float(self.last_price, "last_price"),
            low=parse_float(self.low, "low"),
            high=parse_float(self.high, "high"),
            volume=parse_float(self.volume, "volume"),
            server_time=parse_diagnostic_timestamp(
                self.timestamp, from_dotted_epoch, "timestamp"
            ),
        )


@dataclass(frozen=True)
class BitfinexTicker:
    mid: float
    bid: float
    ask: float
    last_price: float
    low: float
    high: float
    volume: float
    server_time: datetime | None


class BitfinexAdapter(RateAdapter):
    """Adapter for the Bitfinex v1 public ticker.

    Bitfinex lists Dash under the short code `dsh`. The `timestamp` field is
    epoch seconds with a fractional part, e.g. "1574694712.4827394".
    """

    _BASE_API_URL = "https://api.bitfinex.com/v1"
    _TICKER_ENDPOINT = "/pubticker/dshusd"
    quote_currency = "USD"

    @property
    def display_name(self) -> str:
        return "Bitfinex"

    def _parse(self, payload: Any, fetch_time: datetime) -> CanonicalRate:
        ticker = self._decode(BitfinexTickerWire, payload).normalize()
        return self._rate(ticker.last_price, ticker.volume, fetch_time)
