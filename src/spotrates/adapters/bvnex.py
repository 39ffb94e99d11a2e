from dataclasses import dataclass
from datetime import datetime
from typing import Any

from pydantic import Field

from spotrates.adapters.base import RateAdapter, WireModel
from spotrates.models import CanonicalRate
from spotrates.normalizer import parse_float


class BvnexTickerDataWire(WireModel):
    last: str
    lowest_ask: str = Field(alias="lowestAsk")
    highest_bid: str = Field(alias="highestBid")
    percent_change: str = Field(alias="percentChange")
    base_volume: str = Field(alias="baseVolume")
    quote_volume: str = Field(alias="quoteVolume")
    high_24hr: str = Field(alias="high24hr")
    low_24hr: str = Field(alias="low24hr")

    def normalize(self) -> "BvnexTicker":
        return BvnexTicker(
            last=parse_float(self.last, "last"),
            lowest_ask=parse_float(self.lowest_ask, "lowestAsk"),
            highest_bid=parse_float(self.highest_bid, "highestBid"),
            percent_change=parse_float(self.percent_change, "percentChange"),
            base_volume=parse_float(self.base_volume, "baseVolume"),
            quote_volume=parse_float(self.quote_volume, "quoteVolume"),
            high_24hr=parse_float(self.high_24hr, "high24hr"),
            low_24hr=parse_float(self.low_24hr, "low24hr"),
        )


class BvnexTickerWire(WireModel):
    code: int
    msg: str
    data: BvnexTickerDataWire | None


@dataclass(frozen=True)
class BvnexTicker:
    last: float
    lowest_ask: float
    highest_bid: float
    percent_change: float
    base_volume: float
    quote_volume: float
    high_24hr: float
    low_24hr: float


class BvnexAdapter(RateAdapter):
    """Adapter for the Bvnex spot ticker."""

    _BASE_API_URL = "https://api.bvnex.com"
    _TICKER_ENDPOINT = "/api/ticker/get?symbol=dash_usdt"
    quote_currency = "USDT"

    @property
    def display_name(self) -> str:
        return "Bvnex"

    def _parse(self, payload: Any, fetch_time: datetime) -> CanonicalRate:
        response = self._decode(BvnexTickerWire, payload)
        if response.data is None:
            raise self._pair_unavailable(response.msg or None)
        ticker = response.data.normalize()
        return self._rate(ticker.last, ticker.base_volume, fetch_time)
