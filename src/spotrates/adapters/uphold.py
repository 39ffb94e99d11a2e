from datetime import datetime
from typing import Any

from spotrates.adapters.base import RateAdapter, WireModel
from spotrates.models import CanonicalRate
from spotrates.normalizer import parse_float


class UpholdTickerWire(WireModel):
    ask: str
    bid: str
    currency: str


class UpholdAdapter(RateAdapter):
    """Adapter for the Uphold v0 ticker. Uphold quotes, it does not trade, so
    the ask is reported as the price and there is no volume."""

    _BASE_API_URL = "https://api.uphold.com/v0"
    _TICKER_ENDPOINT = "/ticker/DASHUSD"
    quote_currency = "USD"

    @property
    def display_name(self) -> str:
        return "Uphold"

    def _parse(self, payload: Any, fetch_time: datetime) -> CanonicalRate:
        ticker = self._decode(UpholdTickerWire, payload)
        return self._rate(parse_float(ticker.ask, "ask"), 0.0, fetch_time)
