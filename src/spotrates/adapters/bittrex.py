"""Bittrex v1.1 market summary adapter.

Bittrex names markets quote-first (`BTC-DASH`) and its `Volume` and
`BaseVolume` fields follow that convention: `Volume` is counted in DASH and
`BaseVolume` in BTC. From the canonical DASH/BTC point of view the two are
swapped, so the canonical base-asset volume comes from `Volume`.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from pydantic import Field

from spotrates.adapters.base import RateAdapter, WireModel
from spotrates.models import CanonicalRate
from spotrates.normalizer import ensure_finite, parse_diagnostic_timestamp
from spotrates.utils.time import from_iso_naive_utc


class BittrexSummaryWire(WireModel):
    market_name: str = Field(alias="MarketName")
    high: float = Field(alias="High")
    low: float = Field(alias="Low")
    # Wire-side naming; see the module docstring.
    quote_volume: float = Field(alias="BaseVolume")
    base_volume: float = Field(alias="Volume")
    last: float = Field(alias="Last")
    bid: float = Field(alias="Bid")
    ask: float = Field(alias="Ask")
    open_buy_orders: int = Field(alias="OpenBuyOrders")
    open_sell_orders: int = Field(alias="OpenSellOrders")
    prev_day: float = Field(alias="PrevDay")
    timestamp: str = Field(alias="TimeStamp")

    def normalize(self) -> "BittrexSummary":
        return BittrexSummary(
            market_name=self.market_name,
            high=ensure_finite(self.high, "High"),
            low=ensure_finite(self.low, "Low"),
            base_volume=ensure_finite(self.base_volume, "Volume"),
            quote_volume=ensure_finite(self.quote_volume, "BaseVolume"),
            last=ensure_finite(self.last, "Last"),
            bid=ensure_finite(self.bid, "Bid"),
            ask=ensure_finite(self.ask, "Ask"),
            prev_day=ensure_finite(self.prev_day, "PrevDay"),
            open_buy_orders=self.open_buy_orders,
            open_sell_orders=self.open_sell_orders,
            server_time=parse_diagnostic_timestamp(
                self.timestamp, from_iso_naive_utc, "TimeStamp"
            ),
        )


class BittrexSummaryResponseWire(WireModel):
    success: bool
    message: str
    result: list[dict[str, Any]] | None


@dataclass(frozen=True)
class BittrexSummary:
    market_name: str
    high: float
    low: float
    base_volume: float
    quote_volume: float
    last: float
    bid: float
    ask: float
    prev_day: float
    open_buy_orders: int
    open_sell_orders: int
    server_time: datetime | None


class BittrexAdapter(RateAdapter):
    _BASE_API_URL = "https://api.bittrex.com"
    _TICKER_ENDPOINT = "/api/v1.1/public/getmarketsummary?market=btc-dash"
    quote_currency = "BTC"

    @property
    def display_name(self) -> str:
        return "Bittrex"

    def _parse(self, payload: Any, fetch_time: datetime) -> CanonicalRate:
        response = self._decode(BittrexSummaryResponseWire, payload)
        if not response.success:
            raise self._pair_unavailable(response.message or "request unsuccessful")
        entry = self._select_first(response.result or [], where="result")
        summary = self._decode(BittrexSummaryWire, entry, where="result[0]").normalize()
        return self._rate(summary.last, summary.base_volume, fetch_time)
