from datetime import datetime
from typing import Any

from spotrates.adapters.base import RateAdapter, WireModel
from spotrates.models import CanonicalRate
from spotrates.normalizer import parse_float


class CoinbaseRatesWire(WireModel):
    currency: str
    rates: dict[str, str]


class CoinbaseExchangeRatesWire(WireModel):
    data: CoinbaseRatesWire


class CoinbaseAdapter(RateAdapter):
    """Adapter for the Coinbase (retail) exchange-rates table.

    The table maps every quote currency Coinbase knows to a price of one
    unit of `currency`. Only the configured quote is read; a table without
    it means the pair is not offered.
    """

    _BASE_API_URL = "https://api.coinbase.com/v2"
    _TICKER_ENDPOINT = "/exchange-rates?currency=DASH"
    quote_currency = "USD"

    @property
    def display_name(self) -> str:
        return "Coinbase"

    def _parse(self, payload: Any, fetch_time: datetime) -> CanonicalRate:
        table = self._decode(CoinbaseExchangeRatesWire, payload).data
        raw_price = self._select_key(table.rates, self.quote_currency, where="data.rates")
        price = parse_float(raw_price, f"rates.{self.quote_currency}")
        return self._rate(price, 0.0, fetch_time, base_currency=table.currency)
