"""Huobi adapter.

Huobi has no single endpoint carrying both the last trade and the 24h
volume, so one fetch makes two requests: the latest trade supplies the
price, and the merged market detail supplies the volume (`amount` is in
DASH, `vol` is BTC turnover). The rate is stamped with the time the trade
response arrived.

Both endpoints wrap errors in `{"status": "error", "err-code", "err-msg"}`.
An unlisted symbol is reported as "invalid symbol"; any other error status
is a venue fault, not a missing pair.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from pydantic import Field

from spotrates.adapters.base import RateAdapter, WireModel
from spotrates.errors import DecodeError
from spotrates.models import CanonicalRate
from spotrates.normalizer import ensure_finite, parse_diagnostic_timestamp
from spotrates.utils.time import from_epoch_millis


class HuobiTradeWire(WireModel):
    amount: float
    ts: int
    price: float
    direction: str


class HuobiTradeTickWire(WireModel):
    ts: int
    data: list[HuobiTradeWire]


class HuobiDetailTickWire(WireModel):
    id: int
    close: float
    open: float
    high: float
    low: float
    amount: float
    count: int
    version: int
    vol: float
    ask: list[float]
    bid: list[float]


class HuobiStatusWire(WireModel):
    """Envelope shared by both endpoints; `tick` is absent on errors."""

    status: str
    err_code: str | None = Field(default=None, alias="err-code")
    err_msg: str | None = Field(default=None, alias="err-msg")
    ch: str | None = None
    ts: int | None = None
    tick: dict[str, Any] | None = None


@dataclass(frozen=True)
class HuobiResponses:
    """The two bodies one Huobi fetch is built from."""

    trade: Any
    detail: Any


@dataclass(frozen=True)
class HuobiLastTrade:
    price: float
    amount: float
    direction: str
    trade_time: datetime | None


@dataclass(frozen=True)
class HuobiMarketDetail:
    close: float
    open: float
    high: float
    low: float
    amount: float
    vol: float
    count: int


class HuobiAdapter(RateAdapter):
    _BASE_API_URL = "https://api.huobi.pro"
    _TICKER_ENDPOINT = "/market/trade?symbol=dashbtc"
    _DETAIL_ENDPOINT = "/market/detail/merged?symbol=dashbtc"
    quote_currency = "BTC"

    @property
    def display_name(self) -> str:
        return "Huobi"

    async def _fetch_payload(self) -> tuple[HuobiResponses, datetime]:
        trade_payload, fetch_time = await self._get_json(self._TICKER_ENDPOINT)
        detail_payload, _ = await self._get_json(self._DETAIL_ENDPOINT)
        return HuobiResponses(trade=trade_payload, detail=detail_payload), fetch_time

    def _parse(self, payload: Any, fetch_time: datetime) -> CanonicalRate:
        """`payload` is the HuobiResponses pair built by `_fetch_payload`."""
        trade = self._parse_last_trade(payload.trade)
        detail = self._parse_market_detail(payload.detail)
        return self._rate(trade.price, detail.amount, fetch_time)

    def _checked_tick(self, payload: Any, where: str) -> dict[str, Any]:
        envelope = self._decode(HuobiStatusWire, payload, where=where)
        if envelope.status != "ok":
            reason = envelope.err_msg or envelope.err_code or f"status {envelope.status!r}"
            # Huobi answers an unlisted symbol with err-msg "invalid symbol".
            if "invalid symbol" in (envelope.err_msg or "").casefold():
                raise self._pair_unavailable(reason)
            err_msg = f"{where}: venue reported error {envelope.err_code or '?'}: {reason}"
            raise DecodeError(
                err_msg, source_name=self.display_name, field_name=f"{where}.status"
            )
        if envelope.tick is None:
            err_msg = f"{where}: status is ok but the response has no tick"
            raise DecodeError(err_msg, source_name=self.display_name, field_name=f"{where}.tick")
        return envelope.tick

    def _parse_last_trade(self, payload: Any) -> HuobiLastTrade:
        tick = self._decode(
            HuobiTradeTickWire, self._checked_tick(payload, "trade"), where="trade.tick"
        )
        if not tick.data:
            raise self._pair_unavailable("no recent trades")
        latest = tick.data[0]
        return HuobiLastTrade(
            price=ensure_finite(latest.price, "tick.data[0].price"),
            amount=ensure_finite(latest.amount, "tick.data[0].amount"),
            direction=latest.direction,
            trade_time=parse_diagnostic_timestamp(
                latest.ts, from_epoch_millis, "tick.data[0].ts"
            ),
        )

    def _parse_market_detail(self, payload: Any) -> HuobiMarketDetail:
        tick = self._decode(
            HuobiDetailTickWire, self._checked_tick(payload, "detail"), where="detail.tick"
        )
        return HuobiMarketDetail(
            close=ensure_finite(tick.close, "tick.close"),
            open=ensure_finite(tick.open, "tick.open"),
            high=ensure_finite(tick.high, "tick.high"),
            low=ensure_finite(tick.low, "tick.low"),
            amount=ensure_finite(tick.amount, "tick.amount"),
            vol=ensure_finite(tick.vol, "tick.vol"),
            count=tick.count,
        )
