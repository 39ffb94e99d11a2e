import pytest

from spotrates.errors import (
    ArrayShapeError,
    DecodeError,
    NormalizationError,
    PairUnavailableError,
    RateSourceError,
    SourceTimeoutError,
    TransportError,
)


@pytest.mark.parametrize(
    "error",
    [
        TransportError("boom", status_code=500),
        SourceTimeoutError("slow", timeout_s=1.0),
        DecodeError("shape"),
        NormalizationError("value", raw_value="n/a"),
        ArrayShapeError("short", expected_length=2, actual_length=1),
        PairUnavailableError("Kraken", "DASH", "USD"),
    ],
    ids=lambda e: type(e).__name__,
)
def test_every_error_is_a_rate_source_error(error: RateSourceError) -> None:
    assert isinstance(error, RateSourceError)


def test_timeout_is_a_transport_error() -> None:
    error = SourceTimeoutError("No response", timeout_s=2.5, source_name="Bibox")
    assert isinstance(error, TransportError)
    assert error.timeout_s == 2.5
    assert error.source_name == "Bibox"


def test_str_includes_source_and_field() -> None:
    error = NormalizationError("bad number", source_name="Exmo", field_name="vol")
    assert str(error) == "NormalizationError: bad number [source=Exmo] [field=vol]"
    assert str(DecodeError("bad shape")) == "DecodeError: bad shape"


def test_to_dict() -> None:
    error = TransportError(
        "HTTP 503",
        source_name="Binance",
        status_code=503,
        request_url="https://api.binance.com/x",
    )
    assert error.to_dict() == {
        "error_type": "TransportError",
        "message": "HTTP 503",
        "source_name": "Binance",
        "field_name": None,
        "context": {},
        "status_code": 503,
        "request_url": "https://api.binance.com/x",
    }


def test_normalization_error_to_dict_abbreviates_raw_value() -> None:
    error = NormalizationError("bad", raw_value="x" * 500)
    assert len(error.to_dict()["raw_value"]) == 200


def test_array_shape_error_carries_both_lineages() -> None:
    error = ArrayShapeError(
        "c has 1 value",
        expected_length=2,
        actual_length=1,
        field_name="c",
        raw_value=["88.45"],
    )
    assert isinstance(error, DecodeError)
    assert isinstance(error, NormalizationError)
    assert error.raw_value == ["88.45"]
    assert error.field_name == "c"


def test_pair_unavailable_message() -> None:
    error = PairUnavailableError("Poloniex", "DASH", "BTC", "no 'BTC_DASH' entry in payload")
    assert error.pair == "DASH/BTC"
    assert error.source_name == "Poloniex"
    assert error.message == (
        "Poloniex does not list the DASH/BTC pair (no 'BTC_DASH' entry in payload)"
    )
