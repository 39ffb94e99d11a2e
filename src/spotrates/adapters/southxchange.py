from dataclasses import dataclass
from datetime import datetime
from typing import Any

from pydantic import Field

from spotrates.adapters.base import RateAdapter, WireModel
from spotrates.models import CanonicalRate
from spotrates.normalizer import ensure_finite


class SouthXchangePriceWire(WireModel):
    bid: float | None = Field(alias="Bid")
    ask: float | None = Field(alias="Ask")
    last: float = Field(alias="Last")
    variation_24hr: float = Field(alias="Variation24Hr")
    volume_24hr: float = Field(alias="Volume24Hr")

    def normalize(self) -> "SouthXchangePrice":
        return SouthXchangePrice(
            bid=None if self.bid is None else ensure_finite(self.bid, "Bid"),
            ask=None if self.ask is None else ensure_finite(self.ask, "Ask"),
            last=ensure_finite(self.last, "Last"),
            variation_24hr=ensure_finite(self.variation_24hr, "Variation24Hr"),
            volume_24hr=ensure_finite(self.volume_24hr, "Volume24Hr"),
        )


@dataclass(frozen=True)
class SouthXchangePrice:
    bid: float | None
    ask: float | None
    last: float
    variation_24hr: float
    volume_24hr: float


class SouthXchangeAdapter(RateAdapter):
    """Adapter for the SouthXchange price endpoint.

    Bid and ask are null when that side of the book is empty; neither is
    needed for the rate.
    """

    _BASE_API_URL = "https://www.southxchange.com/api"
    _TICKER_ENDPOINT = "/price/DASH/BTC"
    quote_currency = "BTC"

    @property
    def display_name(self) -> str:
        return "SouthXchange"

    def _parse(self, payload: Any, fetch_time: datetime) -> CanonicalRate:
        price = self._decode(SouthXchangePriceWire, payload).normalize()
        return self._rate(price.last, price.volume_24hr, fetch_time)
