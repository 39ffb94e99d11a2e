from dataclasses import dataclass
from datetime import datetime
from typing import Any

from loguru import logger
from pydantic import Field

from spotrates.adapters.base import RateAdapter, WireModel
from spotrates.models import CanonicalRate
from spotrates.normalizer import parse_diagnostic_timestamp, parse_flag, parse_float
from spotrates.utils.time import from_epoch_seconds


class CointradeTickerWire(WireModel):
    timestamp: int
    market: str
    ask: str
    bid: str
    last: str
    spread: str
    low_24h: str = Field(alias="low24h")
    high_24h: str = Field(alias="high24h")
    vol_24h: str = Field(alias="vol24h")
    quote_volume: str = Field(alias="quoteVolume")
    is_frozen: int = Field(alias="isFrozen")

    def normalize(self) -> "CointradeTicker":
        return CointradeTicker(
            market=self.market,
            ask=parse_float(self.ask, "ask"),
            bid=parse_float(self.bid, "bid"),
            last=parse_float(self.last, "last"),
            spread=parse_float(self.spread, "spread"),
            low_24h=parse_float(self.low_24h, "low24h"),
            high_24h=parse_float(self.high_24h, "high24h"),
            vol_24h=parse_float(self.vol_24h, "vol24h"),
            quote_volume=parse_float(self.quote_volume, "quoteVolume"),
            is_frozen=parse_flag(self.is_frozen, "isFrozen", zero_means=False),
            server_time=parse_diagnostic_timestamp(
                self.timestamp, from_epoch_seconds, "timestamp"
            ),
        )


class CointradeResponseWire(WireModel):
    success: bool
    message: str
    result: list[dict[str, Any]] | None


@dataclass(frozen=True)
class CointradeTicker:
    market: str
    ask: float
    bid: float
    last: float
    spread: float
    low_24h: float
    high_24h: float
    vol_24h: float
    quote_volume: float
    is_frozen: bool
    server_time: datetime | None


class CointradeAdapter(RateAdapter):
    """Adapter for the Cointrade public ticker.

    `isFrozen` is an integer flag; a nonzero value means trading on the
    market is halted. The last price is still reported, with a warning.
    """

    _BASE_API_URL = "https://api.cointradecx.com"
    _TICKER_ENDPOINT = "/public/ticker?market=DASH_BTC"
    quote_currency = "BTC"

    @property
    def display_name(self) -> str:
        return "Cointrade"

    def _parse(self, payload: Any, fetch_time: datetime) -> CanonicalRate:
        response = self._decode(CointradeResponseWire, payload)
        if not response.success:
            raise self._pair_unavailable(response.message or "request unsuccessful")
        entry = self._select_first(response.result or [], where="result")
        ticker = self._decode(CointradeTickerWire, entry, where="result[0]").normalize()
        if ticker.is_frozen:
            logger.warning(f"[{self.display_name}] Market {ticker.market} is frozen.")
        return self._rate(ticker.last, ticker.vol_24h, fetch_time)
