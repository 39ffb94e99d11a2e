from datetime import datetime
from typing import Any

from spotrates.adapters.base import RateAdapter, WireModel
from spotrates.models import CanonicalRate
from spotrates.normalizer import ensure_finite


class BitbnsTickerWire(WireModel):
    highest_buy_bid: float
    lowest_sell_bid: float
    last_traded_price: float
    yes_price: float
    inr_price: float


class BitbnsAdapter(RateAdapter):
    """Adapter for Bitbns' all-markets ticker.

    The response is one object keyed by market symbol. Its `volume` member is
    an object whose layout the venue does not document, so volume is not
    reported.
    """

    _BASE_API_URL = "https://bitbns.com"
    _TICKER_ENDPOINT = "/order/getTickerWithVolume/"
    _MARKET_KEY = "DASHUSDT"
    quote_currency = "USDT"

    @property
    def display_name(self) -> str:
        return "Bitbns"

    def _parse(self, payload: Any, fetch_time: datetime) -> CanonicalRate:
        entry = self._select_key(payload, self._MARKET_KEY)
        ticker = self._decode(BitbnsTickerWire, entry, where=self._MARKET_KEY)
        price = ensure_finite(ticker.last_traded_price, "last_traded_price")
        return self._rate(price, 0.0, fetch_time)
