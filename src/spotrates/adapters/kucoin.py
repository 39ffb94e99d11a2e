from dataclasses import dataclass
from datetime import datetime
from typing import Any

from pydantic import Field

from spotrates.adapters.base import RateAdapter, WireModel
from spotrates.models import CanonicalRate
from spotrates.normalizer import parse_diagnostic_timestamp, parse_float
from spotrates.utils.time import from_epoch_millis


class KuCoinLevel1Wire(WireModel):
    sequence: str
    best_ask: str = Field(alias="bestAsk")
    size: str
    price: str
    best_bid_size: str = Field(alias="bestBidSize")
    time: int
    best_bid: str = Field(alias="bestBid")
    best_ask_size: str = Field(alias="bestAskSize")

    def normalize(self) -> "KuCoinLevel1":
        return KuCoinLevel1(
            sequence=self.sequence,
            price=parse_float(self.price, "price"),
            size=parse_float(self.size, "size"),
            best_ask=parse_float(self.best_ask, "bestAsk"),
            best_ask_size=parse_float(self.best_ask_size, "bestAskSize"),
            best_bid=parse_float(self.best_bid, "bestBid"),
            best_bid_size=parse_float(self.best_bid_size, "bestBidSize"),
            server_time=parse_diagnostic_timestamp(self.time, from_epoch_millis, "time"),
        )


class KuCoinResponseWire(WireModel):
    code: str
    data: KuCoinLevel1Wire | None


@dataclass(frozen=True)
class KuCoinLevel1:
    sequence: str
    price: float
    size: float
    best_ask: float
    best_ask_size: float
    best_bid: float
    best_bid_size: float
    server_time: datetime | None


class KuCoinAdapter(RateAdapter):
    """Adapter for KuCoin's level-1 order book snapshot.

    Level 1 carries the last trade price but no rolling volume. KuCoin
    answers an unlisted symbol with `"data": null` and a success code.
    """

    _BASE_API_URL = "https://api.kucoin.com"
    _TICKER_ENDPOINT = "/api/v1/market/orderbook/level1?symbol=DASH-BTC"
    quote_currency = "BTC"

    @property
    def display_name(self) -> str:
        return "KuCoin"

    def _parse(self, payload: Any, fetch_time: datetime) -> CanonicalRate:
        response = self._decode(KuCoinResponseWire, payload)
        if response.data is None:
            raise self._pair_unavailable(f"no data (code {response.code})")
        level1 = response.data.normalize()
        return self._rate(level1.price, 0.0, fetch_time)
