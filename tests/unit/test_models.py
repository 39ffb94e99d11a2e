import dataclasses
import json
from datetime import datetime, timezone

import pytest

from spotrates.models import CanonicalRate

FETCH_TIME = datetime(2019, 11, 25, 14, 55, 12, 123456, tzinfo=timezone.utc)


@pytest.fixture
def rate() -> CanonicalRate:
    """Provides a valid DASH/USD rate."""
    return CanonicalRate(
        base_currency="DASH",
        quote_currency="USD",
        last_price=88.41,
        base_asset_volume=1211.3,
        fetch_time=FETCH_TIME,
    )


def test_rate_is_immutable(rate: CanonicalRate) -> None:
    with pytest.raises(dataclasses.FrozenInstanceError):
        rate.last_price = 1.0  # type: ignore[misc]


def test_pair(rate: CanonicalRate) -> None:
    assert rate.pair == "DASH/USD"


def test_integer_amounts_are_stored_as_floats() -> None:
    rate = CanonicalRate("DASH", "USD", 88, 0, FETCH_TIME)
    assert isinstance(rate.last_price, float)
    assert isinstance(rate.base_asset_volume, float)


@pytest.mark.parametrize(
    "overrides",
    [
        {"base_currency": ""},
        {"quote_currency": "  "},
        {"last_price": -0.01},
        {"last_price": float("nan")},
        {"base_asset_volume": float("inf")},
        {"last_price": "88.41"},
        {"last_price": True},
        {"fetch_time": datetime(2019, 11, 25)},  # noqa: DTZ001
    ],
)
def test_invalid_fields_are_rejected(rate: CanonicalRate, overrides: dict) -> None:
    with pytest.raises(ValueError):
        dataclasses.replace(rate, **overrides)


def test_to_dict(rate: CanonicalRate) -> None:
    assert rate.to_dict() == {
        "base_currency": "DASH",
        "quote_currency": "USD",
        "last_price": 88.41,
        "base_asset_volume": 1211.3,
        "fetch_time": "2019-11-25T14:55:12.123456Z",
    }


def test_json_round_trip(rate: CanonicalRate) -> None:
    text = rate.to_json()
    assert json.loads(text)["fetch_time"] == "2019-11-25T14:55:12.123456Z"
    assert CanonicalRate.from_json(text) == rate


def test_from_dict_reports_missing_field(rate: CanonicalRate) -> None:
    data = rate.to_dict()
    del data["last_price"]
    with pytest.raises(ValueError, match="last_price"):
        CanonicalRate.from_dict(data)
