from dataclasses import dataclass
from datetime import datetime
from typing import Any

from spotrates.adapters.base import RateAdapter, WireModel
from spotrates.models import CanonicalRate
from spotrates.normalizer import parse_float


class BigONEQuoteWire(WireModel):
    price: str
    order_count: int
    quantity: str


class BigONETickerDataWire(WireModel):
    asset_pair_name: str
    bid: BigONEQuoteWire
    ask: BigONEQuoteWire
    open: str
    high: str
    low: str
    close: str
    volume: str
    daily_change: str


class BigONETickerWire(WireModel):
    code: int
    data: BigONETickerDataWire

    def normalize(self) -> "BigONETicker":
        data = self.data
        return BigONETicker(
            asset_pair_name=data.asset_pair_name,
            bid_price=parse_float(data.bid.price, "bid.price"),
            bid_quantity=parse_float(data.bid.quantity, "bid.quantity"),
            ask_price=parse_float(data.ask.price, "ask.price"),
            ask_quantity=parse_float(data.ask.quantity, "ask.quantity"),
            open=parse_float(data.open, "open"),
            high=parse_float(data.high, "high"),
            low=parse_float(data.low, "low"),
            close=parse_float(data.close, "close"),
            volume=parse_float(data.volume, "volume"),
            daily_change=parse_float(data.daily_change, "daily_change"),
        )


@dataclass(frozen=True)
class BigONETicker:
    asset_pair_name: str
    bid_price: float
    bid_quantity: float
    ask_price: float
    ask_quantity: float
    open: float
    high: float
    low: float
    close: float
    volume: float
    daily_change: float


class BigONEAdapter(RateAdapter):
    """Adapter for the BigONE v3 asset-pair ticker.

    The ticker carries best bid/ask objects and a rolling 24h candle. The
    candle's `close` is the most recent trade, so that is the reported price.
    """

    _BASE_API_URL = "https://big.one/api/v3"
    _TICKER_ENDPOINT = "/asset_pairs/DASH-BTC/ticker"
    quote_currency = "BTC"

    @property
    def display_name(self) -> str:
        return "BigONE"

    def _parse(self, payload: Any, fetch_time: datetime) -> CanonicalRate:
        ticker = self._decode(BigONETickerWire, payload).normalize()
        return self._rate(ticker.close, ticker.volume, fetch_time)
