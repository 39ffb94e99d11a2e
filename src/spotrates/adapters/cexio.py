from dataclasses import dataclass
from datetime import datetime
from typing import Any

from pydantic import Field

from spotrates.adapters.base import RateAdapter, WireModel
from spotrates.errors import NormalizationError
from spotrates.models import CanonicalRate
from spotrates.normalizer import ensure_finite, parse_diagnostic_timestamp, parse_float
from spotrates.utils.time import from_epoch_seconds


class CexioTickerWire(WireModel):
    """CEX.IO mixes encodings: bid/ask are JSON numbers, the rest are text."""

    timestamp: str
    low: str
    high: str
    last: str
    volume: str
    volume_30d: str = Field(alias="volume30d")
    bid: float
    ask: float
    price_change: str = Field(alias="priceChange")
    price_change_percentage: str = Field(alias="priceChangePercentage")
    pair: str

    def normalize(self) -> "CexioTicker":
        parts = self.pair.split(":")
        if len(parts) != 2 or not all(parts):
            err_msg = f"Field 'pair' is not of the form BASE:QUOTE: {self.pair!r}"
            raise NormalizationError(err_msg, field_name="pair", raw_value=self.pair)
        return CexioTicker(
            base_currency=parts[0],
            quote_currency=parts[1],
            last=parse_float(self.last, "last"),
            low=parse_float(self.low, "low"),
            high=parse_float(self.high, "high"),
            volume=parse_float(self.volume, "volume"),
            volume_30d=parse_float(self.volume_30d, "volume30d"),
            bid=ensure_finite(self.bid, "bid"),
            ask=ensure_finite(self.ask, "ask"),
            price_change=parse_float(self.price_change, "priceChange"),
            price_change_percentage=parse_float(
                self.price_change_percentage, "priceChangePercentage"
            ),
            server_time=parse_diagnostic_timestamp(
                self.timestamp, from_epoch_seconds, "timestamp"
            ),
        )


@dataclass(frozen=True)
class CexioTicker:
    base_currency: str
    quote_currency: str
    last: float
    low: float
    high: float
    volume: float
    volume_30d: float
    bid: float
    ask: float
    price_change: float
    price_change_percentage: float
    server_time: datetime | None


class CexioAdapter(RateAdapter):
    """Adapter for the CEX.IO ticker.

    The pair is taken from the payload's "BASE:QUOTE" string rather than
    from the request.
    """

    _BASE_API_URL = "https://cex.io/api"
    _TICKER_ENDPOINT = "/ticker/DASH/USD"
    quote_currency = "USD"

    @property
    def display_name(self) -> str:
        return "CEX.IO"

    def _parse(self, payload: Any, fetch_time: datetime) -> CanonicalRate:
        ticker = self._decode(CexioTickerWire, payload).normalize()
        return self._rate(
            ticker.last,
            ticker.volume,
            fetch_time,
            base_currency=ticker.base_currency,
            quote_currency=ticker.quote_currency,
        )
