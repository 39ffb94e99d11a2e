"""Yobit v3 ticker adapter.

Yobit's `vol` is turnover in the quote currency and `vol_cur` is the amount
of the traded coin, so the canonical base-asset volume comes from `vol_cur`.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from pydantic import Field

from spotrates.adapters.base import RateAdapter, WireModel
from spotrates.models import CanonicalRate
from spotrates.normalizer import ensure_finite, parse_diagnostic_timestamp
from spotrates.utils.time import from_epoch_seconds


class YobitTickerWire(WireModel):
    high: float
    low: float
    avg: float
    base_volume: float = Field(alias="vol_cur")
    quote_volume: float = Field(alias="vol")
    last: float
    buy: float
    sell: float
    updated: int

    def normalize(self) -> "YobitTicker":
        return YobitTicker(
            high=ensure_finite(self.high, "high"),
            low=ensure_finite(self.low, "low"),
            avg=ensure_finite(self.avg, "avg"),
            base_volume=ensure_finite(self.base_volume, "vol_cur"),
            quote_volume=ensure_finite(self.quote_volume, "vol"),
            last=ensure_finite(self.last, "last"),
            buy=ensure_finite(self.buy, "buy"),
            sell=ensure_finite(self.sell, "sell"),
            server_time=parse_diagnostic_timestamp(
                self.updated, from_epoch_seconds, "updated"
            ),
        )


@dataclass(frozen=True)
class YobitTicker:
    high: float
    low: float
    avg: float
    base_volume: float
    quote_volume: float
    last: float
    buy: float
    sell: float
    server_time: datetime | None


class YobitAdapter(RateAdapter):
    _BASE_API_URL = "https://yobit.net/api/3"
    _TICKER_ENDPOINT = "/ticker/dash_usd"
    _PAIR_KEY = "dash_usd"
    quote_currency = "USD"

    @property
    def display_name(self) -> str:
        return "Yobit"

    def _parse(self, payload: Any, fetch_time: datetime) -> CanonicalRate:
        entry = self._select_key(payload, self._PAIR_KEY)
        ticker = self._decode(YobitTickerWire, entry, where=self._PAIR_KEY).normalize()
        return self._rate(ticker.last, ticker.base_volume, fetch_time)
