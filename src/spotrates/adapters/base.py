import abc
import contextlib
from collections.abc import Callable, Iterator
from datetime import datetime
from typing import Any, ClassVar, TypeVar

import httpx
from loguru import logger
from pydantic import BaseModel, ConfigDict, ValidationError

from spotrates.errors import (
    DecodeError,
    NormalizationError,
    PairUnavailableError,
    RateSourceError,
    TransportError,
)
from spotrates.models import CanonicalRate
from spotrates.utils.time import fetch_timestamp

WireT = TypeVar("WireT", bound=BaseModel)

# Cap on how many validation problems are spelled out in a DecodeError.
MAX_REPORTED_VALIDATION_ERRORS = 5


class WireModel(BaseModel):
    """Base for the per-venue models that mirror a ticker payload.

    Strict mode keeps the wire types honest: a price the venue sends as text
    stays a `str` until the venue's normalizer parses it, and a number
    arriving where text is expected is a schema change, not something to
    coerce.
    """

    model_config = ConfigDict(strict=True, frozen=True, populate_by_name=True)


class RateAdapter(abc.ABC):
    """An abstract base class for all venue adapters.

    An adapter knows one venue's fixed endpoint(s) and wire schema. Each call
    to `fetch_rate` performs one request/response cycle (two for venues that
    split price and market detail), decodes the payload into the venue's
    `WireModel`, normalizes it, and returns a `CanonicalRate`. Adapters hold
    no state between calls and never retry.

    Subclasses set `_BASE_API_URL`, `_TICKER_ENDPOINT`, `base_currency` and
    `quote_currency`, and implement `display_name` and `_parse`. Venues that
    need more than one request override `_fetch_payload`.
    """

    _BASE_API_URL: ClassVar[str]
    _TICKER_ENDPOINT: ClassVar[str]
    base_currency: ClassVar[str] = "DASH"
    quote_currency: ClassVar[str]

    def __init__(self, http_client: httpx.AsyncClient, base_url: str | None = None) -> None:
        """Initializes the adapter.

        Args:
            http_client: A shared httpx.AsyncClient used for every request.
            base_url: Overrides the venue's API root (e.g. for a mirror).
        """
        self.http_client = http_client
        self.base_url = base_url if base_url is not None else self._BASE_API_URL

    @property
    @abc.abstractmethod
    def display_name(self) -> str:
        """A constant, human-readable venue label (e.g. 'Coinbase Pro')."""
        raise NotImplementedError

    async def fetch_rate(self) -> CanonicalRate:
        """Fetches and normalizes the venue's current rate.

        Returns:
            A fully populated CanonicalRate.

        Raises:
            TransportError: The request failed or returned an error status.
            DecodeError: The body did not match the venue's schema.
            NormalizationError: A wire value could not be parsed.
            PairUnavailableError: The venue does not list the pair.
        """
        payload, fetch_time = await self._fetch_payload()
        with self._attributed():
            rate = self._parse(payload, fetch_time)
        logger.debug(
            f"[{self.display_name}] {rate.pair} last={rate.last_price} "
            f"volume={rate.base_asset_volume}"
        )
        return rate

    async def _fetch_payload(self) -> tuple[Any, datetime]:
        """Fetches the body (or bodies) that `_parse` consumes."""
        return await self._get_json(self._TICKER_ENDPOINT)

    @abc.abstractmethod
    def _parse(self, payload: Any, fetch_time: datetime) -> CanonicalRate:
        """Decodes and normalizes a ticker payload into a CanonicalRate.

        Args:
            payload: The JSON-decoded response body.
            fetch_time: When the response was received.
        """
        raise NotImplementedError

    async def _get_json(self, endpoint: str) -> tuple[Any, datetime]:
        """Performs one GET against `base_url + endpoint`.

        Returns:
            The JSON-decoded body and the time the response was received.
        """
        url = self.base_url + endpoint
        logger.debug(f"[{self.display_name}] GET {url}")
        try:
            response = await self.http_client.get(url)
            fetch_time = fetch_timestamp()
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            err_msg = f"HTTP {e.response.status_code} from {url}"
            raise TransportError(
                err_msg,
                source_name=self.display_name,
                status_code=e.response.status_code,
                request_url=url,
            ) from e
        except httpx.HTTPError as e:
            err_msg = f"Request to {url} failed: {type(e).__name__}: {e}"
            raise TransportError(
                err_msg, source_name=self.display_name, request_url=url
            ) from e

        try:
            return response.json(), fetch_time
        except ValueError as e:
            snippet = response.text[:120]
            err_msg = f"Response from {url} is not JSON: {snippet!r}"
            raise DecodeError(err_msg, source_name=self.display_name) from e

    def _decode(self, model: type[WireT], data: Any, where: str = "") -> WireT:
        """Validates decoded JSON against the venue's wire model.

        Raises:
            DecodeError: Listing the locations that did not match.
        """
        try:
            return model.model_validate(data)
        except ValidationError as e:
            problems = [
                f"{'.'.join(str(p) for p in err['loc']) or '<root>'}: {err['msg']}"
                for err in e.errors()[:MAX_REPORTED_VALIDATION_ERRORS]
            ]
            prefix = f"{where}: " if where else ""
            err_msg = (
                f"{prefix}payload does not match {model.__name__} "
                f"({e.error_count()} problem(s)): {'; '.join(problems)}"
            )
            first_loc = e.errors()[0]["loc"] if e.error_count() else ()
            raise DecodeError(
                err_msg,
                source_name=self.display_name,
                field_name=".".join(str(p) for p in first_loc) or None,
            ) from e

    def _select_key(self, container: Any, key: str, where: str = "payload") -> Any:
        """Returns `container[key]` from a map-keyed payload.

        Raises:
            DecodeError: If the container is not a JSON object.
            PairUnavailableError: If the key is absent.
        """
        if not isinstance(container, dict):
            err_msg = f"Expected {where} to be an object, got {type(container).__name__}"
            raise DecodeError(err_msg, source_name=self.display_name, field_name=where)
        if key not in container:
            raise self._pair_unavailable(f"no '{key}' entry in {where}")
        return container[key]

    def _select_first(
        self,
        items: Any,
        predicate: Callable[[Any], bool] | None = None,
        where: str = "payload",
    ) -> Any:
        """Returns the first element of an array payload matching `predicate`.

        Raises:
            DecodeError: If the container is not a JSON array.
            PairUnavailableError: If no element matches.
        """
        if not isinstance(items, list):
            err_msg = f"Expected {where} to be an array, got {type(items).__name__}"
            raise DecodeError(err_msg, source_name=self.display_name, field_name=where)
        for item in items:
            if predicate is None or predicate(item):
                return item
        detail = f"{where} is empty" if not items else f"no matching entry in {where}"
        raise self._pair_unavailable(detail)

    def _pair_unavailable(self, detail: str | None = None) -> PairUnavailableError:
        return PairUnavailableError(
            self.display_name, self.base_currency, self.quote_currency, detail
        )

    def _rate(
        self,
        last_price: float,
        base_asset_volume: float,
        fetch_time: datetime,
        *,
        base_currency: str | None = None,
        quote_currency: str | None = None,
    ) -> CanonicalRate:
        """Builds the CanonicalRate, defaulting to the adapter's fixed pair."""
        try:
            return CanonicalRate(
                base_currency=base_currency or self.base_currency,
                quote_currency=quote_currency or self.quote_currency,
                last_price=last_price,
                base_asset_volume=base_asset_volume,
                fetch_time=fetch_time,
            )
        except ValueError as e:
            raise NormalizationError(str(e), source_name=self.display_name) from e

    @contextlib.contextmanager
    def _attributed(self) -> Iterator[None]:
        """Stamps rate errors escaping the block with this venue's name."""
        try:
            yield
        except RateSourceError as e:
            if e.source_name is None:
                e.source_name = self.display_name
            raise
