from datetime import datetime, timedelta, timezone

import pytest

from spotrates.utils.time import (
    fetch_timestamp,
    format_rfc3339,
    from_dotted_epoch,
    from_epoch_millis,
    from_epoch_seconds,
    from_iso_naive_utc,
    from_layout,
    from_rfc3339,
)

UTC = timezone.utc


def test_fetch_timestamp_is_aware_and_strictly_increasing() -> None:
    stamps = [fetch_timestamp() for _ in range(1000)]
    assert all(s.tzinfo is not None for s in stamps)
    assert all(b > a for a, b in zip(stamps, stamps[1:], strict=False))


def test_fetch_timestamp_tracks_wall_clock() -> None:
    now = datetime.now(UTC)
    assert abs(fetch_timestamp() - now) < timedelta(seconds=5)


def test_format_rfc3339() -> None:
    dt = datetime(2019, 11, 25, 14, 55, 12, 123456, tzinfo=UTC)
    assert format_rfc3339(dt) == "2019-11-25T14:55:12.123456Z"

    offset = timezone(timedelta(hours=7))
    assert format_rfc3339(dt.astimezone(offset)) == "2019-11-25T14:55:12.123456Z"

    with pytest.raises(ValueError, match="naive"):
        format_rfc3339(datetime(2019, 11, 25))  # noqa: DTZ001


def test_from_epoch_seconds() -> None:
    expected = datetime(2019, 11, 25, 15, 11, 52, tzinfo=UTC)
    assert from_epoch_seconds(1574694712) == expected
    assert from_epoch_seconds("1574694712") == expected
    for bad in ("1574694712.5", "", "abc", True, 1.5):
        with pytest.raises(ValueError):
            from_epoch_seconds(bad)  # type: ignore[arg-type]


def test_from_epoch_millis_keeps_millisecond_precision() -> None:
    assert from_epoch_millis(1574694712345) == datetime(
        2019, 11, 25, 15, 11, 52, 345000, tzinfo=UTC
    )
    with pytest.raises(ValueError):
        from_epoch_millis("1574694712345")  # type: ignore[arg-type]


@pytest.mark.parametrize(
    ("text", "microsecond"),
    [
        ("1574694712.4827394", 482739),
        ("1574694712.5", 500000),
        ("1574694712.000001", 1),
        ("1574694712.0", 0),
    ],
)
def test_from_dotted_epoch_reads_fractional_seconds(text: str, microsecond: int) -> None:
    parsed = from_dotted_epoch(text)
    assert parsed.replace(microsecond=0) == datetime(2019, 11, 25, 15, 11, 52, tzinfo=UTC)
    assert parsed.microsecond == microsecond


@pytest.mark.parametrize("text", ["1574694712", "1574694712.", ".5", "1.2.3", "abc"])
def test_from_dotted_epoch_rejects_other_shapes(text: str) -> None:
    with pytest.raises(ValueError):
        from_dotted_epoch(text)


def test_from_rfc3339_requires_offset() -> None:
    assert from_rfc3339("2019-11-25T14:55:12.123Z") == datetime(
        2019, 11, 25, 14, 55, 12, 123000, tzinfo=UTC
    )
    assert from_rfc3339("2019-11-25T21:55:12+07:00") == datetime(
        2019, 11, 25, 14, 55, 12, tzinfo=UTC
    )
    with pytest.raises(ValueError, match="offset"):
        from_rfc3339("2019-11-25T14:55:12")


def test_from_iso_naive_utc_assumes_utc() -> None:
    assert from_iso_naive_utc("2019-11-25T14:55:12.37") == datetime(
        2019, 11, 25, 14, 55, 12, 370000, tzinfo=UTC
    )
    assert from_iso_naive_utc("2019-11-25T14:55:12Z").tzinfo is not None


def test_from_layout() -> None:
    parsed = from_layout("2019-11-25T14:55:12.123Z", "%Y-%m-%dT%H:%M:%S.%fZ")
    assert parsed == datetime(2019, 11, 25, 14, 55, 12, 123000, tzinfo=UTC)
    with pytest.raises(ValueError):
        from_layout("2019-11-25 14:55:12", "%Y-%m-%dT%H:%M:%S.%fZ")
