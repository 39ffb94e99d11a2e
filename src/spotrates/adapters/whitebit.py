from dataclasses import dataclass
from datetime import datetime
from typing import Any

from spotrates.adapters.base import RateAdapter, WireModel
from spotrates.models import CanonicalRate
from spotrates.normalizer import parse_float


class WhitebitTickerDataWire(WireModel):
    bid: str
    ask: str
    open: str
    high: str
    low: str
    last: str
    volume: str
    deal: str
    change: str

    def normalize(self) -> "WhitebitTicker":
        return WhitebitTicker(
            bid=parse_float(self.bid, "bid"),
            ask=parse_float(self.ask, "ask"),
            open=parse_float(self.open, "open"),
            high=parse_float(self.high, "high"),
            low=parse_float(self.low, "low"),
            last=parse_float(self.last, "last"),
            volume=parse_float(self.volume, "volume"),
            deal=parse_float(self.deal, "deal"),
            change=parse_float(self.change, "change"),
        )


class WhitebitResponseWire(WireModel):
    """Envelope only; `message` and `result` change shape on errors."""

    success: bool
    message: Any = None
    result: Any = None


@dataclass(frozen=True)
class WhitebitTicker:
    bid: float
    ask: float
    open: float
    high: float
    low: float
    last: float
    volume: float
    deal: float
    change: float


def _describe(message: Any) -> str:
    """Flattens Whitebit's error message, a string or {field: [reasons]}."""
    if isinstance(message, dict):
        reasons = []
        for field, value in message.items():
            texts = value if isinstance(value, list) else [value]
            reasons.extend(f"{field}: {text}" for text in texts)
        return "; ".join(reasons) or "request unsuccessful"
    return str(message) if message else "request unsuccessful"


class WhitebitAdapter(RateAdapter):
    """Adapter for the Whitebit v1 market ticker.

    An unknown market comes back as HTTP 200 with `success: false`, a
    per-field `message` object and an empty `result` array.
    """

    _BASE_API_URL = "https://whitebit.com/api/v1"
    _TICKER_ENDPOINT = "/public/ticker?market=DASH_USD"
    quote_currency = "USD"

    @property
    def display_name(self) -> str:
        return "Whitebit"

    def _parse(self, payload: Any, fetch_time: datetime) -> CanonicalRate:
        response = self._decode(WhitebitResponseWire, payload)
        if not response.success or response.result is None:
            raise self._pair_unavailable(_describe(response.message))
        ticker = self._decode(WhitebitTickerDataWire, response.result, where="result").normalize()
        return self._rate(ticker.last, ticker.volume, fetch_time)
