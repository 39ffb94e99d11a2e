from dataclasses import dataclass
from datetime import datetime
from typing import Any

from spotrates.adapters.base import RateAdapter, WireModel
from spotrates.models import CanonicalRate
from spotrates.normalizer import parse_diagnostic_timestamp, parse_float
from spotrates.utils.time import from_epoch_seconds


class ExmoTickerWire(WireModel):
    buy_price: str
    sell_price: str
    last_trade: str
    high: str
    low: str
    avg: str
    vol: str
    vol_curr: str
    updated: int

    def normalize(self) -> "ExmoTicker":
        return ExmoTicker(
            buy_price=parse_float(self.buy_price, "buy_price"),
            sell_price=parse_float(self.sell_price, "sell_price"),
            last_trade=parse_float(self.last_trade, "last_trade"),
            high=parse_float(self.high, "high"),
            low=parse_float(self.low, "low"),
            avg=parse_float(self.avg, "avg"),
            vol=parse_float(self.vol, "vol"),
            vol_curr=parse_float(self.vol_curr, "vol_curr"),
            server_time=parse_diagnostic_timestamp(
                self.updated, from_epoch_seconds, "updated"
            ),
        )


@dataclass(frozen=True)
class ExmoTicker:
    buy_price: float
    sell_price: float
    last_trade: float
    high: float
    low: float
    avg: float
    vol: float
    vol_curr: float
    server_time: datetime | None


class ExmoAdapter(RateAdapter):
    """Adapter for the EXMO all-pairs ticker, keyed by `BASE_QUOTE`."""

    _BASE_API_URL = "https://api.exmo.com/v1"
    _TICKER_ENDPOINT = "/ticker/"
    _PAIR_KEY = "DASH_USD"
    quote_currency = "USD"

    @property
    def display_name(self) -> str:
        return "Exmo"

    def _parse(self, payload: Any, fetch_time: datetime) -> CanonicalRate:
        entry = self._select_key(payload, self._PAIR_KEY)
        ticker = self._decode(ExmoTickerWire, entry, where=self._PAIR_KEY).normalize()
        return self._rate(ticker.last_trade, ticker.vol, fetch_time)
