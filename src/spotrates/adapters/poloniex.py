"""Poloniex public `returnTicker` adapter.

The ticker covers every market, keyed quote-first (`BTC_DASH`). As with
other quote-first venues, Poloniex's `baseVolume` is BTC turnover and its
`quoteVolume` is the DASH amount, so the canonical base-asset volume is
read from `quoteVolume`.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from loguru import logger
from pydantic import Field

from spotrates.adapters.base import RateAdapter, WireModel
from spotrates.models import CanonicalRate
from spotrates.normalizer import parse_flag, parse_float, parse_int


class PoloniexTickerWire(WireModel):
    id: int
    last: str
    lowest_ask: str = Field(alias="lowestAsk")
    highest_bid: str = Field(alias="highestBid")
    percent_change: str = Field(alias="percentChange")
    base_volume: str = Field(alias="quoteVolume")
    quote_volume: str = Field(alias="baseVolume")
    is_frozen: str = Field(alias="isFrozen")
    high_24hr: str = Field(alias="high24hr")
    low_24hr: str = Field(alias="low24hr")

    def normalize(self) -> "PoloniexTicker":
        return PoloniexTicker(
            market_id=self.id,
            last=parse_float(self.last, "last"),
            lowest_ask=parse_float(self.lowest_ask, "lowestAsk"),
            highest_bid=parse_float(self.highest_bid, "highestBid"),
            percent_change=parse_float(self.percent_change, "percentChange"),
            base_volume=parse_float(self.base_volume, "quoteVolume"),
            quote_volume=parse_float(self.quote_volume, "baseVolume"),
            is_frozen=parse_flag(
                parse_int(self.is_frozen, "isFrozen"), "isFrozen", zero_means=False
            ),
            high_24hr=parse_float(self.high_24hr, "high24hr"),
            low_24hr=parse_float(self.low_24hr, "low24hr"),
        )


@dataclass(frozen=True)
class PoloniexTicker:
    market_id: int
    last: float
    lowest_ask: float
    highest_bid: float
    percent_change: float
    base_volume: float
    quote_volume: float
    is_frozen: bool
    high_24hr: float
    low_24hr: float


class PoloniexAdapter(RateAdapter):
    _BASE_API_URL = "https://poloniex.com/public"
    _TICKER_ENDPOINT = "?command=returnTicker"
    _MARKET_KEY = "BTC_DASH"
    quote_currency = "BTC"

    @property
    def display_name(self) -> str:
        return "Poloniex"

    def _parse(self, payload: Any, fetch_time: datetime) -> CanonicalRate:
        entry = self._select_key(payload, self._MARKET_KEY)
        ticker = self._decode(PoloniexTickerWire, entry, where=self._MARKET_KEY).normalize()
        if ticker.is_frozen:
            logger.warning(f"[{self.display_name}] Market {self._MARKET_KEY} is frozen.")
        return self._rate(ticker.last, ticker.base_volume, fetch_time)
