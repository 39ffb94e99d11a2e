from datetime import datetime
from typing import Any

from spotrates.adapters.base import RateAdapter, WireModel
from spotrates.models import CanonicalRate
from spotrates.normalizer import ensure_finite


class TrivQuoteWire(WireModel):
    code: str
    name: str
    sell: float
    buy: float


class TrivAdapter(RateAdapter):
    """Adapter for Triv's broker quote list.

    Triv is a broker rather than an order book: it publishes the prices it
    buys and sells at for every listed coin. The `buy` side is reported as
    the rate, and there is no volume.
    """

    _BASE_API_URL = "https://triv.id/api/v1"
    _TICKER_ENDPOINT = "/config/ticker?pair=USD"
    _COIN_CODE = "DASH"
    quote_currency = "USD"

    @property
    def display_name(self) -> str:
        return "Triv"

    def _parse(self, payload: Any, fetch_time: datetime) -> CanonicalRate:
        entry = self._select_first(
            payload, lambda item: isinstance(item, dict) and item.get("code") == self._COIN_CODE
        )
        quote = self._decode(TrivQuoteWire, entry, where=self._COIN_CODE)
        return self._rate(ensure_finite(quote.buy, "buy"), 0.0, fetch_time)
