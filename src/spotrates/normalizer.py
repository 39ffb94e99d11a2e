"""Field-level conversions shared by every venue's normalization step.

Venues encode numbers as text, pack related values into positional arrays,
send booleans as integers of venue-specific polarity, and pick their own
timestamp encodings. The helpers here turn those wire values into Python
types and fail loudly, with the offending field named, instead of guessing.
"""

import math
import re
from collections.abc import Callable, Sequence
from datetime import datetime

from loguru import logger

from spotrates.errors import ArrayShapeError, NormalizationError

# Plain base-10 notation only: no whitespace, no underscores, no nan/inf.
_FLOAT_RE = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$")
_INT_RE = re.compile(r"^[+-]?\d+$")


def parse_float(raw: str, field: str) -> float:
    """Parses a string-encoded decimal number.

    Args:
        raw: The text taken from the wire.
        field: The wire field name, used in the error.

    Returns:
        The parsed, finite float.

    Raises:
        NormalizationError: If the text is empty, not a decimal number, or
            does not fit in a finite float.
    """
    if not isinstance(raw, str) or not _FLOAT_RE.fullmatch(raw):
        err_msg = f"Field '{field}' is not a decimal number: {raw!r}"
        raise NormalizationError(err_msg, field_name=field, raw_value=raw)
    value = float(raw)
    if not math.isfinite(value):
        err_msg = f"Field '{field}' overflows a float: {raw!r}"
        raise NormalizationError(err_msg, field_name=field, raw_value=raw)
    return value


def parse_int(raw: str, field: str) -> int:
    """Parses a string-encoded base-10 integer."""
    if not isinstance(raw, str) or not _INT_RE.fullmatch(raw):
        err_msg = f"Field '{field}' is not an integer: {raw!r}"
        raise NormalizationError(err_msg, field_name=field, raw_value=raw)
    return int(raw)


def ensure_finite(value: float, field: str) -> float:
    """Checks a number the venue sent as a real JSON number."""
    value = float(value)
    if not math.isfinite(value):
        err_msg = f"Field '{field}' is not a finite number: {value!r}"
        raise NormalizationError(err_msg, field_name=field, raw_value=value)
    return value


def parse_flag(value: int, field: str, *, zero_means: bool) -> bool:
    """Interprets an integer-encoded boolean.

    Venues disagree on polarity, so the caller states what a zero means on
    its venue; any nonzero value means the opposite.

    Args:
        value: The integer from the wire.
        field: The wire field name, used in the error.
        zero_means: The boolean a zero stands for on this venue.
    """
    if isinstance(value, bool) or not isinstance(value, int):
        err_msg = f"Field '{field}' is not an integer flag: {value!r}"
        raise NormalizationError(err_msg, field_name=field, raw_value=value)
    return zero_means if value == 0 else not zero_means


def unpack_floats(values: Sequence[str], length: int, field: str) -> list[float]:
    """Parses a fixed-length array of string-encoded numbers.

    Raises:
        ArrayShapeError: If the array does not hold exactly `length` items.
        NormalizationError: If any element is not a decimal number.
    """
    if len(values) != length:
        err_msg = (
            f"Field '{field}' should hold {length} values, got {len(values)}: "
            f"{list(values)!r}"
        )
        raise ArrayShapeError(
            err_msg,
            expected_length=length,
            actual_length=len(values),
            field_name=field,
            raw_value=list(values),
        )
    return [parse_float(v, f"{field}[{i}]") for i, v in enumerate(values)]


def unpack_ints(values: Sequence[int], length: int, field: str) -> list[int]:
    """Checks the length of a fixed-length array of integers."""
    if len(values) != length:
        err_msg = f"Field '{field}' should hold {length} values, got {len(values)}"
        raise ArrayShapeError(
            err_msg,
            expected_length=length,
            actual_length=len(values),
            field_name=field,
            raw_value=list(values),
        )
    return list(values)


def parse_timestamp(
    raw: str | int, parser: Callable[..., datetime], field: str
) -> datetime:
    """Runs one of the `spotrates.utils.time` parsers, naming the field on failure."""
    try:
        return parser(raw)
    except (TypeError, ValueError) as e:
        err_msg = f"Field '{field}' is not a valid timestamp: {raw!r}"
        raise NormalizationError(err_msg, field_name=field, raw_value=raw) from e


def parse_diagnostic_timestamp(
    raw: str | int | None, parser: Callable[..., datetime], field: str
) -> datetime | None:
    """Parses a payload timestamp that is kept for diagnostics only.

    Server timestamps never reach a `CanonicalRate` (its `fetch_time` is
    observed client-side), so a malformed one is logged and dropped rather
    than failing the whole fetch.
    """
    if raw is None:
        return None
    try:
        return parse_timestamp(raw, parser, field)
    except NormalizationError as e:
        logger.warning(f"Ignoring server timestamp: {e}")
        return None
