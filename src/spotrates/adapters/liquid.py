from datetime import datetime
from typing import Any

from spotrates.adapters.base import RateAdapter, WireModel
from spotrates.models import CanonicalRate
from spotrates.normalizer import parse_float


class LiquidProductWire(WireModel):
    id: str
    last_traded_price: str
    volume_24h: str


class LiquidAdapter(RateAdapter):
    """Adapter for a Liquid product; product 116 is DASH/BTC."""

    _BASE_API_URL = "https://api.liquid.com"
    _TICKER_ENDPOINT = "/products/116"
    quote_currency = "BTC"

    @property
    def display_name(self) -> str:
        return "Liquid"

    def _parse(self, payload: Any, fetch_time: datetime) -> CanonicalRate:
        product = self._decode(LiquidProductWire, payload)
        return self._rate(
            parse_float(product.last_traded_price, "last_traded_price"),
            parse_float(product.volume_24h, "volume_24h"),
            fetch_time,
        )
