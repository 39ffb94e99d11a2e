import json
import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from spotrates.utils.time import format_rfc3339, from_rfc3339


@dataclass(frozen=True)
class CanonicalRate:
    """A venue-independent spot rate, as produced by one successful fetch.

    `fetch_time` is observed by this client right after the venue's response
    arrived; it is never a timestamp taken from the payload. A
    `base_asset_volume` of 0.0 means the venue does not report volume.
    """

    base_currency: str
    quote_currency: str
    last_price: float
    base_asset_volume: float
    fetch_time: datetime

    def __post_init__(self) -> None:
        for name in ("base_currency", "quote_currency"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                err_msg = f"{name} must be a non-empty string, got {value!r}"
                raise ValueError(err_msg)
        for name in ("last_price", "base_asset_volume"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int | float):
                err_msg = f"{name} must be a number, got {type(value).__name__}"
                raise ValueError(err_msg)
            if not math.isfinite(value) or value < 0:
                err_msg = f"{name} must be finite and non-negative, got {value!r}"
                raise ValueError(err_msg)
            object.__setattr__(self, name, float(value))
        if not isinstance(self.fetch_time, datetime) or self.fetch_time.tzinfo is None:
            err_msg = "fetch_time must be a timezone-aware datetime"
            raise ValueError(err_msg)

    @property
    def pair(self) -> str:
        """The pair in 'BASE/QUOTE' form."""
        return f"{self.base_currency}/{self.quote_currency}"

    def to_dict(self) -> dict[str, Any]:
        """Converts the rate to a JSON-compatible dictionary."""
        return {
            "base_currency": self.base_currency,
            "quote_currency": self.quote_currency,
            "last_price": self.last_price,
            "base_asset_volume": self.base_asset_volume,
            "fetch_time": format_rfc3339(self.fetch_time),
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CanonicalRate":
        """Rebuilds a rate from the output of `to_dict`.

        Raises:
            ValueError: If a field is missing or invalid.
        """
        try:
            return cls(
                base_currency=data["base_currency"],
                quote_currency=data["quote_currency"],
                last_price=data["last_price"],
                base_asset_volume=data["base_asset_volume"],
                fetch_time=from_rfc3339(data["fetch_time"]),
            )
        except KeyError as e:
            err_msg = f"Missing rate field: {e.args[0]}"
            raise ValueError(err_msg) from e

    @classmethod
    def from_json(cls, text: str | bytes) -> "CanonicalRate":
        return cls.from_dict(json.loads(text))
