from dataclasses import dataclass
from datetime import datetime
from typing import Any

from spotrates.adapters.base import RateAdapter, WireModel
from spotrates.models import CanonicalRate
from spotrates.normalizer import ensure_finite, parse_diagnostic_timestamp
from spotrates.utils.time import from_epoch_seconds


class DigifinexTickerWire(WireModel):
    vol: float
    change: float
    base_vol: float
    sell: float
    last: float
    symbol: str
    low: float
    buy: float
    high: float

    def normalize(self) -> "DigifinexTicker":
        return DigifinexTicker(
            symbol=self.symbol,
            last=ensure_finite(self.last, "last"),
            vol=ensure_finite(self.vol, "vol"),
            base_vol=ensure_finite(self.base_vol, "base_vol"),
            change=ensure_finite(self.change, "change"),
            sell=ensure_finite(self.sell, "sell"),
            buy=ensure_finite(self.buy, "buy"),
            low=ensure_finite(self.low, "low"),
            high=ensure_finite(self.high, "high"),
        )


class DigifinexResponseWire(WireModel):
    ticker: list[dict[str, Any]]
    date: int
    code: int


@dataclass(frozen=True)
class DigifinexTicker:
    symbol: str
    last: float
    vol: float
    base_vol: float
    change: float
    sell: float
    buy: float
    low: float
    high: float


class DigifinexAdapter(RateAdapter):
    """Adapter for the Digifinex v3 ticker.

    `vol` is the quote-currency turnover; `base_vol` is the DASH amount.
    """

    _BASE_API_URL = "https://openapi.digifinex.com/v3"
    _TICKER_ENDPOINT = "/ticker?symbol=dash_usdt"
    _SYMBOL = "dash_usdt"
    quote_currency = "USDT"

    @property
    def display_name(self) -> str:
        return "Digifinex"

    def _parse(self, payload: Any, fetch_time: datetime) -> CanonicalRate:
        response = self._decode(DigifinexResponseWire, payload)
        parse_diagnostic_timestamp(response.date, from_epoch_seconds, "date")
        entry = self._select_first(
            response.ticker,
            lambda item: isinstance(item, dict) and item.get("symbol") == self._SYMBOL,
            where="ticker",
        )
        ticker = self._decode(DigifinexTickerWire, entry, where=self._SYMBOL).normalize()
        return self._rate(ticker.last, ticker.base_vol, fetch_time)
