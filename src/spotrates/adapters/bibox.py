from dataclasses import dataclass
from datetime import datetime
from typing import Any

from pydantic import Field

from spotrates.adapters.base import RateAdapter, WireModel
from spotrates.models import CanonicalRate
from spotrates.normalizer import parse_float


class BiboxMarketWire(WireModel):
    """The `result` object of Bibox's `cmd=market` endpoint; numbers are text."""

    is_hide: int
    high_cny: str
    amount: str
    coin_symbol: str
    last: str
    currency_symbol: str
    change: str
    low_cny: str
    base_last_cny: str
    area_id: int
    percent: str
    last_cny: str
    high: str
    low: str
    pair_type: int
    last_usd: str
    vol_24h: str = Field(alias="vol24H")
    id: int
    high_usd: str
    low_usd: str

    def normalize(self) -> "BiboxMarket":
        return BiboxMarket(
            coin_symbol=self.coin_symbol,
            currency_symbol=self.currency_symbol,
            last=parse_float(self.last, "last"),
            high=parse_float(self.high, "high"),
            low=parse_float(self.low, "low"),
            change=parse_float(self.change, "change"),
            amount=parse_float(self.amount, "amount"),
            vol_24h=parse_float(self.vol_24h, "vol24H"),
            last_usd=parse_float(self.last_usd, "last_usd"),
            high_usd=parse_float(self.high_usd, "high_usd"),
            low_usd=parse_float(self.low_usd, "low_usd"),
            last_cny=parse_float(self.last_cny, "last_cny"),
            high_cny=parse_float(self.high_cny, "high_cny"),
            low_cny=parse_float(self.low_cny, "low_cny"),
            base_last_cny=parse_float(self.base_last_cny, "base_last_cny"),
            percent=self.percent,
            is_hide=self.is_hide,
        )


class BiboxTickerWire(WireModel):
    result: BiboxMarketWire
    cmd: str
    ver: str


@dataclass(frozen=True)
class BiboxMarket:
    coin_symbol: str
    currency_symbol: str
    last: float
    high: float
    low: float
    change: float
    amount: float
    vol_24h: float
    last_usd: float
    high_usd: float
    low_usd: float
    last_cny: float
    high_cny: float
    low_cny: float
    base_last_cny: float
    percent: str
    is_hide: int


class BiboxAdapter(RateAdapter):
    """Adapter for the public Bibox market ticker."""

    _BASE_API_URL = "https://api.bibox.com"
    _TICKER_ENDPOINT = "/v1/mdata?cmd=market&pair=DASH_BTC"
    quote_currency = "BTC"

    @property
    def display_name(self) -> str:
        return "Bibox"

    def _parse(self, payload: Any, fetch_time: datetime) -> CanonicalRate:
        market = self._decode(BiboxTickerWire, payload).result.normalize()
        return self._rate(market.last, market.vol_24h, fetch_time)
