from dataclasses import dataclass
from datetime import datetime
from typing import Any

from pydantic import Field

from spotrates.adapters.base import RateAdapter, WireModel
from spotrates.models import CanonicalRate
from spotrates.normalizer import parse_diagnostic_timestamp, parse_float
from spotrates.utils.time import from_epoch_millis


class CoinCapRateWire(WireModel):
    id: str
    symbol: str
    currency_symbol: str | None = Field(alias="currencySymbol")
    type: str
    rate_usd: str = Field(alias="rateUsd")

    def normalize(self, timestamp: int) -> "CoinCapRate":
        """Builds the typed rate; `timestamp` is the envelope's server time."""
        return CoinCapRate(
            symbol=self.symbol,
            rate_usd=parse_float(self.rate_usd, "rateUsd"),
            server_time=parse_diagnostic_timestamp(timestamp, from_epoch_millis, "timestamp"),
        )


class CoinCapRateResponseWire(WireModel):
    data: CoinCapRateWire | None
    timestamp: int


@dataclass(frozen=True)
class CoinCapRate:
    symbol: str
    rate_usd: float
    server_time: datetime | None


class CoinCapAdapter(RateAdapter):
    """Adapter for the CoinCap v2 reference rate.

    CoinCap publishes an index rate against USD, not a traded market, so
    there is no volume.
    """

    _BASE_API_URL = "https://api.coincap.io/v2"
    _TICKER_ENDPOINT = "/rates/dash"
    quote_currency = "USD"

    @property
    def display_name(self) -> str:
        return "CoinCap"

    def _parse(self, payload: Any, fetch_time: datetime) -> CanonicalRate:
        response = self._decode(CoinCapRateResponseWire, payload)
        if response.data is None:
            raise self._pair_unavailable("no rate in response")
        rate = response.data.normalize(response.timestamp)
        return self._rate(rate.rate_usd, 0.0, fetch_time, base_currency=rate.symbol)
