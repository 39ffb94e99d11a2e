"""Kraken public ticker adapter.

Kraken packs its ticker into positional string arrays:

    a = [ask price, whole lot volume, lot volume]
    b = [bid price, whole lot volume, lot volume]
    c = [last trade price, lot volume]
    v = [volume today, volume last 24 hours]
    p = [vwap today, vwap last 24 hours]
    t = [trade count today, trade count last 24 hours]
    l = [low today, low last 24 hours]
    h = [high today, high last 24 hours]
    o = today's opening price

Each array is checked for its exact length before any element is read.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from spotrates.adapters.base import RateAdapter, WireModel
from spotrates.errors import DecodeError
from spotrates.models import CanonicalRate
from spotrates.normalizer import parse_float, unpack_floats, unpack_ints


class KrakenTickerWire(WireModel):
    a: list[str]
    b: list[str]
    c: list[str]
    v: list[str]
    p: list[str]
    t: list[int]
    l: list[str]  # noqa: E741
    h: list[str]
    o: str

    def normalize(self) -> "KrakenTicker":
        ask = unpack_floats(self.a, 3, "a")
        bid = unpack_floats(self.b, 3, "b")
        last_closed = unpack_floats(self.c, 2, "c")
        volume = unpack_floats(self.v, 2, "v")
        vwap = unpack_floats(self.p, 2, "p")
        trades = unpack_ints(self.t, 2, "t")
        low = unpack_floats(self.l, 2, "l")
        high = unpack_floats(self.h, 2, "h")
        return KrakenTicker(
            ask=KrakenBookLevel(*ask),
            bid=KrakenBookLevel(*bid),
            last_closed=KrakenLastTrade(*last_closed),
            volume=KrakenDaily(*volume),
            vwap=KrakenDaily(*vwap),
            trades=KrakenDailyCount(*trades),
            low=KrakenDaily(*low),
            high=KrakenDaily(*high),
            open=parse_float(self.o, "o"),
        )


class KrakenTickerResponseWire(WireModel):
    error: list[str]
    result: dict[str, Any] | None = None


@dataclass(frozen=True)
class KrakenBookLevel:
    price: float
    whole_lot_volume: float
    lot_volume: float


@dataclass(frozen=True)
class KrakenLastTrade:
    price: float
    lot_volume: float


@dataclass(frozen=True)
class KrakenDaily:
    today: float
    last_24_hours: float


@dataclass(frozen=True)
class KrakenDailyCount:
    today: int
    last_24_hours: int


@dataclass(frozen=True)
class KrakenTicker:
    ask: KrakenBookLevel
    bid: KrakenBookLevel
    last_closed: KrakenLastTrade
    volume: KrakenDaily
    vwap: KrakenDaily
    trades: KrakenDailyCount
    low: KrakenDaily
    high: KrakenDaily
    open: float


class KrakenAdapter(RateAdapter):
    _BASE_API_URL = "https://api.kraken.com/0"
    _TICKER_ENDPOINT = "/public/Ticker?pair=DASHUSD"
    _PAIR_KEY = "DASHUSD"
    quote_currency = "USD"

    @property
    def display_name(self) -> str:
        return "Kraken"

    def _parse(self, payload: Any, fetch_time: datetime) -> CanonicalRate:
        response = self._decode(KrakenTickerResponseWire, payload)
        if response.error:
            errors = "; ".join(response.error)
            if any("Unknown asset pair" in err for err in response.error):
                raise self._pair_unavailable(errors)
            err_msg = f"Venue reported errors: {errors}"
            raise DecodeError(err_msg, source_name=self.display_name)
        if response.result is None:
            err_msg = "Response has neither errors nor a result."
            raise DecodeError(err_msg, source_name=self.display_name)
        entry = self._select_key(response.result, self._PAIR_KEY, where="result")
        ticker = self._decode(KrakenTickerWire, entry, where=self._PAIR_KEY).normalize()
        return self._rate(ticker.last_closed.price, ticker.volume.today, fetch_time)
