from dataclasses import dataclass
from datetime import datetime
from typing import Any

from pydantic import Field

from spotrates.adapters.base import RateAdapter, WireModel
from spotrates.models import CanonicalRate
from spotrates.normalizer import ensure_finite, parse_diagnostic_timestamp
from spotrates.utils.time import from_iso_naive_utc


class Crex24TickerWire(WireModel):
    instrument: str
    last: float
    percent_change: float = Field(alias="percentChange")
    low: float
    high: float
    base_volume: float = Field(alias="baseVolume")
    quote_volume: float = Field(alias="quoteVolume")
    volume_in_btc: float = Field(alias="volumeInBtc")
    volume_in_usd: float = Field(alias="volumeInUsd")
    ask: float
    bid: float
    timestamp: str

    def normalize(self) -> "Crex24Ticker":
        return Crex24Ticker(
            instrument=self.instrument,
            last=ensure_finite(self.last, "last"),
            percent_change=ensure_finite(self.percent_change, "percentChange"),
            low=ensure_finite(self.low, "low"),
            high=ensure_finite(self.high, "high"),
            base_volume=ensure_finite(self.base_volume, "baseVolume"),
            quote_volume=ensure_finite(self.quote_volume, "quoteVolume"),
            volume_in_btc=ensure_finite(self.volume_in_btc, "volumeInBtc"),
            volume_in_usd=ensure_finite(self.volume_in_usd, "volumeInUsd"),
            ask=ensure_finite(self.ask, "ask"),
            bid=ensure_finite(self.bid, "bid"),
            server_time=parse_diagnostic_timestamp(
                self.timestamp, from_iso_naive_utc, "timestamp"
            ),
        )


@dataclass(frozen=True)
class Crex24Ticker:
    instrument: str
    last: float
    percent_change: float
    low: float
    high: float
    base_volume: float
    quote_volume: float
    volume_in_btc: float
    volume_in_usd: float
    ask: float
    bid: float
    server_time: datetime | None


class Crex24Adapter(RateAdapter):
    """Adapter for the CREX24 v2 tickers list.

    The endpoint returns an array even when filtered to one instrument, so
    the entry is picked by its `instrument` field.
    """

    _BASE_API_URL = "https://api.crex24.com/v2"
    _TICKER_ENDPOINT = "/public/tickers?instrument=DASH-BTC"
    _INSTRUMENT = "DASH-BTC"
    quote_currency = "BTC"

    @property
    def display_name(self) -> str:
        return "CREX24"

    def _parse(self, payload: Any, fetch_time: datetime) -> CanonicalRate:
        entry = self._select_first(
            payload,
            lambda item: isinstance(item, dict) and item.get("instrument") == self._INSTRUMENT,
        )
        ticker = self._decode(Crex24TickerWire, entry, where=self._INSTRUMENT).normalize()
        return self._rate(ticker.last, ticker.base_volume, fetch_time)
