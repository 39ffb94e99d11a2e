"""Exception hierarchy for rate sources.

Every failure an adapter can report derives from `RateSourceError`, so the
aggregator can isolate venues with a single ``except`` clause while callers
that care can still tell a dead venue (`TransportError`) from a venue that
changed its schema (`DecodeError`), returned garbage (`NormalizationError`)
or simply does not list the pair (`PairUnavailableError`).
"""

from typing import Any


class RateSourceError(Exception):
    """Base exception for all rate source errors."""

    def __init__(
        self,
        message: str,
        *,
        source_name: str | None = None,
        field_name: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.source_name = source_name
        self.field_name = field_name
        self.context = context or {}

    def to_dict(self) -> dict[str, Any]:
        """Converts the error to a dictionary for logging or JSON output."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "source_name": self.source_name,
            "field_name": self.field_name,
            "context": self.context,
        }

    def __str__(self) -> str:
        parts = [f"{self.__class__.__name__}: {self.message}"]
        if self.source_name:
            parts.append(f"[source={self.source_name}]")
        if self.field_name:
            parts.append(f"[field={self.field_name}]")
        return " ".join(parts)


class TransportError(RateSourceError):
    """The request could not complete or the venue answered with an error status."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        request_url: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.status_code = status_code
        self.request_url = request_url

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data.update({"status_code": self.status_code, "request_url": self.request_url})
        return data


class SourceTimeoutError(TransportError):
    """A caller-imposed deadline expired before the venue answered."""

    def __init__(self, message: str, *, timeout_s: float, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.timeout_s = timeout_s


class DecodeError(RateSourceError):
    """The response body did not match the venue's structural schema."""


class NormalizationError(RateSourceError):
    """A wire value could not be converted into the type the rate requires."""

    def __init__(self, message: str, *, raw_value: Any = None, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.raw_value = raw_value

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["raw_value"] = None if self.raw_value is None else repr(self.raw_value)[:200]
        return data


class ArrayShapeError(DecodeError, NormalizationError):
    """A positional array arrived with an unexpected number of elements.

    This is a schema mismatch discovered while normalizing, so it is both a
    `DecodeError` and a `NormalizationError`.
    """

    def __init__(
        self,
        message: str,
        *,
        expected_length: int,
        actual_length: int,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.expected_length = expected_length
        self.actual_length = actual_length


class PairUnavailableError(RateSourceError):
    """The venue answered correctly but does not list the requested pair."""

    def __init__(
        self,
        source_name: str,
        base_currency: str,
        quote_currency: str,
        detail: str | None = None,
        **kwargs: Any,
    ) -> None:
        message = f"{source_name} does not list the {base_currency}/{quote_currency} pair"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message, source_name=source_name, **kwargs)
        self.base_currency = base_currency
        self.quote_currency = quote_currency

    @property
    def pair(self) -> str:
        return f"{self.base_currency}/{self.quote_currency}"
