from datetime import datetime
from typing import Any

from spotrates.adapters.base import RateAdapter, WireModel
from spotrates.models import CanonicalRate
from spotrates.normalizer import parse_float


class BinancePriceWire(WireModel):
    symbol: str
    price: str


class BinanceAdapter(RateAdapter):
    """Adapter for the Binance symbol price ticker.

    This endpoint reports the last price only, so volume is left at the
    "not reported" sentinel.
    """

    _BASE_API_URL = "https://api.binance.com"
    _TICKER_ENDPOINT = "/api/v3/ticker/price?symbol=DASHBTC"
    quote_currency = "BTC"

    @property
    def display_name(self) -> str:
        return "Binance"

    def _parse(self, payload: Any, fetch_time: datetime) -> CanonicalRate:
        ticker = self._decode(BinancePriceWire, payload)
        return self._rate(parse_float(ticker.price, "price"), 0.0, fetch_time)
