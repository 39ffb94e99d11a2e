from dataclasses import dataclass
from datetime import datetime
from typing import Any

from spotrates.adapters.base import RateAdapter, WireModel
from spotrates.models import CanonicalRate
from spotrates.normalizer import parse_diagnostic_timestamp, parse_float
from spotrates.utils.time import from_epoch_seconds


class IndodaxTickerDataWire(WireModel):
    high: str
    low: str
    vol_drk: str
    vol_btc: str
    last: str
    buy: str
    sell: str
    server_time: int

    def normalize(self) -> "IndodaxTicker":
        return IndodaxTicker(
            high=parse_float(self.high, "high"),
            low=parse_float(self.low, "low"),
            vol_drk=parse_float(self.vol_drk, "vol_drk"),
            vol_btc=parse_float(self.vol_btc, "vol_btc"),
            last=parse_float(self.last, "last"),
            buy=parse_float(self.buy, "buy"),
            sell=parse_float(self.sell, "sell"),
            server_time=parse_diagnostic_timestamp(
                self.server_time, from_epoch_seconds, "server_time"
            ),
        )


class IndodaxTickerWire(WireModel):
    ticker: IndodaxTickerDataWire


@dataclass(frozen=True)
class IndodaxTicker:
    high: float
    low: float
    vol_drk: float
    vol_btc: float
    last: float
    buy: float
    sell: float
    server_time: datetime | None


class IndodaxAdapter(RateAdapter):
    """Adapter for the Indodax ticker.

    Indodax still lists Dash under its pre-2015 ticker, DRK.
    """

    _BASE_API_URL = "https://indodax.com/api"
    _TICKER_ENDPOINT = "/drk_btc/ticker"
    quote_currency = "BTC"

    @property
    def display_name(self) -> str:
        return "Indodax"

    def _parse(self, payload: Any, fetch_time: datetime) -> CanonicalRate:
        ticker = self._decode(IndodaxTickerWire, payload).ticker.normalize()
        return self._rate(ticker.last, ticker.vol_drk, fetch_time)
