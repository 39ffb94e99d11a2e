import asyncio
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from loguru import logger

from spotrates.adapters.base import RateAdapter
from spotrates.errors import RateSourceError, SourceTimeoutError
from spotrates.models import CanonicalRate


@dataclass(frozen=True)
class SourceResult:
    """The outcome of one venue's fetch: exactly one of `rate` or `error`."""

    display_name: str
    rate: CanonicalRate | None = None
    error: Exception | None = None

    def __post_init__(self) -> None:
        if (self.rate is None) == (self.error is None):
            err_msg = (
                f"SourceResult for {self.display_name} must carry either a rate "
                "or an error, not both or neither."
            )
            raise ValueError(err_msg)

    @property
    def ok(self) -> bool:
        return self.error is None


def successes(results: Iterable[SourceResult]) -> list[SourceResult]:
    return [r for r in results if r.ok]


def failures(results: Iterable[SourceResult]) -> list[SourceResult]:
    return [r for r in results if not r.ok]


class Aggregator:
    """Fans a fetch out over a set of venue adapters.

    Adapters are independent: one venue timing out, erroring, or returning
    garbage is recorded against that venue only and never prevents the
    others from being reported.
    """

    def __init__(
        self,
        adapters: Sequence[RateAdapter],
        *,
        timeout_s: float | None = None,
        concurrent: bool = True,
    ) -> None:
        """Initializes the Aggregator.

        Args:
            adapters: The adapters to query, in reporting order.
            timeout_s: Per-adapter deadline in seconds; None for no deadline.
            concurrent: Query all adapters at once rather than one by one.
        """
        if timeout_s is not None and timeout_s <= 0:
            err_msg = f"timeout_s must be positive, got {timeout_s}"
            raise ValueError(err_msg)
        self.adapters = list(adapters)
        self.timeout_s = timeout_s
        self.concurrent = concurrent

    async def collect(self) -> list[SourceResult]:
        """Fetches every adapter's rate once.

        Returns:
            One SourceResult per adapter, in the order the adapters were
            given, regardless of completion order.
        """
        if self.concurrent:
            results = list(
                await asyncio.gather(*(self._fetch_one(a) for a in self.adapters))
            )
        else:
            results = [await self._fetch_one(a) for a in self.adapters]

        failed = failures(results)
        logger.info(
            f"Collected rates from {len(results) - len(failed)} of "
            f"{len(results)} source(s); {len(failed)} failed."
        )
        return results

    async def _fetch_one(self, adapter: RateAdapter) -> SourceResult:
        name = adapter.display_name
        try:
            rate = await self._fetch_with_deadline(adapter)
        except RateSourceError as e:
            logger.warning(f"[{name}] Fetch failed: {e}")
            return SourceResult(display_name=name, error=e)
        except Exception as e:
            # Anything an adapter raises, expected or not, is that venue's
            # failure alone. CancelledError is not an Exception and propagates.
            logger.opt(exception=e).warning(
                f"[{name}] Unexpected error: {type(e).__name__}: {e}"
            )
            return SourceResult(display_name=name, error=e)
        return SourceResult(display_name=name, rate=rate)

    async def _fetch_with_deadline(self, adapter: RateAdapter) -> CanonicalRate:
        if self.timeout_s is None:
            return await adapter.fetch_rate()
        try:
            return await asyncio.wait_for(adapter.fetch_rate(), self.timeout_s)
        except TimeoutError as e:
            err_msg = f"No response within {self.timeout_s}s"
            raise SourceTimeoutError(
                err_msg,
                timeout_s=self.timeout_s,
                source_name=adapter.display_name,
            ) from e
