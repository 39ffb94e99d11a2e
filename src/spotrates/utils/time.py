import re
import threading
import time
from datetime import datetime, timedelta, timezone

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# "1574244437.8383815": whole seconds, a dot, then the fractional digits.
_DOTTED_EPOCH_RE = re.compile(r"^(\d+)\.(\d+)$")
_INTEGER_RE = re.compile(r"^[+-]?\d+$")

_fetch_lock = threading.Lock()
_last_fetch_us = 0


def fetch_timestamp() -> datetime:
    """Returns the current UTC time for stamping a freshly received response.

    Successive calls within the process are strictly increasing. When the
    wall clock has not advanced (or stepped backwards) since the previous
    call, the value is bumped by one microsecond, the resolution of
    `datetime`.

    Returns:
        A timezone-aware datetime in UTC.
    """
    global _last_fetch_us
    with _fetch_lock:
        now_us = time.time_ns() // 1000
        if now_us <= _last_fetch_us:
            now_us = _last_fetch_us + 1
        _last_fetch_us = now_us
    return EPOCH + timedelta(microseconds=now_us)


def format_rfc3339(dt_obj: datetime) -> str:
    """Formats a datetime as an RFC3339 string in UTC with microsecond precision.

    Example: "2023-10-27T10:00:00.123456Z"

    Raises:
        ValueError: If the datetime is naive.
    """
    if dt_obj.tzinfo is None:
        err_msg = "Refusing to format a naive datetime as RFC3339."
        raise ValueError(err_msg)
    return (
        dt_obj.astimezone(timezone.utc)
        .isoformat(timespec="microseconds")
        .replace("+00:00", "Z")
    )


def from_epoch_seconds(value: int | str) -> datetime:
    """Converts whole Unix seconds (as an int or decimal text) to a UTC datetime."""
    if isinstance(value, str):
        if not _INTEGER_RE.fullmatch(value):
            err_msg = f"Not an integer epoch: {value!r}"
            raise ValueError(err_msg)
        value = int(value)
    elif isinstance(value, bool) or not isinstance(value, int):
        err_msg = f"Unsupported epoch type: {type(value).__name__}"
        raise ValueError(err_msg)
    try:
        return datetime.fromtimestamp(value, tz=timezone.utc)
    except (OverflowError, OSError, ValueError) as e:
        err_msg = f"Epoch timestamp '{value}' is out of range."
        raise ValueError(err_msg) from e


def from_epoch_millis(value: int) -> datetime:
    """Converts Unix milliseconds to a UTC datetime without float rounding."""
    if isinstance(value, bool) or not isinstance(value, int):
        err_msg = f"Unsupported epoch type: {type(value).__name__}"
        raise ValueError(err_msg)
    try:
        return EPOCH + timedelta(milliseconds=value)
    except OverflowError as e:
        err_msg = f"Millisecond timestamp '{value}' is out of range."
        raise ValueError(err_msg) from e


def from_dotted_epoch(text: str) -> datetime:
    """Parses a "seconds.fraction" epoch string such as "1574244437.8383815".

    The text is split on the dot and each half re-parsed as an integer; the
    fraction is read as a decimal fraction of a second and truncated to
    microseconds.

    Raises:
        ValueError: If the text is not exactly two digit groups joined by a dot.
    """
    match = _DOTTED_EPOCH_RE.fullmatch(text)
    if match is None:
        err_msg = f"Invalid dotted timestamp: {text!r}"
        raise ValueError(err_msg)
    seconds_str, fraction_str = match.groups()
    nanoseconds = int(fraction_str[:9].ljust(9, "0"))
    return from_epoch_seconds(int(seconds_str)) + timedelta(
        microseconds=nanoseconds // 1000
    )


def from_rfc3339(text: str) -> datetime:
    """Parses an RFC3339 timestamp; an explicit offset or 'Z' is required."""
    # Python's fromisoformat supports 'Z' since 3.11, but the offset is
    # normalized here so the tz check below sees it either way.
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    dt_obj = datetime.fromisoformat(text)
    if dt_obj.tzinfo is None:
        err_msg = f"RFC3339 timestamp lacks a UTC offset: {text!r}"
        raise ValueError(err_msg)
    return dt_obj.astimezone(timezone.utc)


def from_iso_naive_utc(text: str) -> datetime:
    """Parses an ISO 8601 timestamp, assuming UTC when no offset is given."""
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    dt_obj = datetime.fromisoformat(text)
    if dt_obj.tzinfo is None:
        return dt_obj.replace(tzinfo=timezone.utc)
    return dt_obj.astimezone(timezone.utc)


def from_layout(text: str, layout: str) -> datetime:
    """Parses a timestamp written in a fixed `strptime` layout, as UTC.

    Example layout: "%Y-%m-%dT%H:%M:%S.%fZ" for "2019-11-20T10:15:32.873Z".
    """
    dt_obj = datetime.strptime(text, layout)  # noqa: DTZ007
    if dt_obj.tzinfo is None:
        return dt_obj.replace(tzinfo=timezone.utc)
    return dt_obj.astimezone(timezone.utc)
