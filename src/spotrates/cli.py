"""Command-line check of every venue adapter.

Fetches each enabled venue's rate once and prints one line per venue:
`<name> OK` or `<name> ERROR` on stdout, with the error text on stderr.
This is the quickest way to find venue routes that have stopped working.

Usage:
    spotrates [--source NAME ...] [--timeout SECONDS] [--sequential] [--json]
"""

import argparse
import asyncio
import json
import sys
from collections.abc import Sequence
from pathlib import Path

import httpx
from loguru import logger

from spotrates.adapters.base import RateAdapter
from spotrates.adapters.bibox import BiboxAdapter
from spotrates.adapters.bigone import BigONEAdapter
from spotrates.adapters.binance import BinanceAdapter
from spotrates.adapters.bitbns import BitbnsAdapter
from spotrates.adapters.bitfinex import BitfinexAdapter
from spotrates.adapters.bittrex import BittrexAdapter
from spotrates.adapters.bvnex import BvnexAdapter
from spotrates.adapters.cexio import CexioAdapter
from spotrates.adapters.coinbase import CoinbaseAdapter
from spotrates.adapters.coinbasepro import CoinbaseProAdapter
from spotrates.adapters.coincap import CoinCapAdapter
from spotrates.adapters.cointrade import CointradeAdapter
from spotrates.adapters.crex24 import Crex24Adapter
from spotrates.adapters.digifinex import DigifinexAdapter
from spotrates.adapters.exmo import ExmoAdapter
from spotrates.adapters.hitbtc import HitBTCAdapter
from spotrates.adapters.huobi import HuobiAdapter
from spotrates.adapters.indodax import IndodaxAdapter
from spotrates.adapters.kraken import KrakenAdapter
from spotrates.adapters.kucoin import KuCoinAdapter
from spotrates.adapters.liquid import LiquidAdapter
from spotrates.adapters.livecoin import LivecoinAdapter
from spotrates.adapters.okex import OKExAdapter
from spotrates.adapters.poloniex import PoloniexAdapter
from spotrates.adapters.southxchange import SouthXchangeAdapter
from spotrates.adapters.triv import TrivAdapter
from spotrates.adapters.uphold import UpholdAdapter
from spotrates.adapters.whitebit import WhitebitAdapter
from spotrates.adapters.yobit import YobitAdapter
from spotrates.aggregator import Aggregator, SourceResult, successes
from spotrates.config import CONFIG_FILE, Settings, load_config
from spotrates.logging_config import setup_logging

ADAPTER_CLASSES: tuple[type[RateAdapter], ...] = (
    BiboxAdapter,
    BigONEAdapter,
    BinanceAdapter,
    BitbnsAdapter,
    BitfinexAdapter,
    BittrexAdapter,
    BvnexAdapter,
    CexioAdapter,
    CoinCapAdapter,
    CoinbaseAdapter,
    CoinbaseProAdapter,
    CointradeAdapter,
    Crex24Adapter,
    DigifinexAdapter,
    ExmoAdapter,
    HitBTCAdapter,
    HuobiAdapter,
    IndodaxAdapter,
    KrakenAdapter,
    KuCoinAdapter,
    LiquidAdapter,
    LivecoinAdapter,
    OKExAdapter,
    PoloniexAdapter,
    SouthXchangeAdapter,
    TrivAdapter,
    UpholdAdapter,
    WhitebitAdapter,
    YobitAdapter,
)


def _instantiate_adapters(
    http_client: httpx.AsyncClient,
    settings: Settings,
    only: Sequence[str] = (),
) -> list[RateAdapter]:
    """Builds the enabled adapters, in roster order.

    Args:
        http_client: The client shared by every adapter.
        settings: Supplies the enabled/disabled venue lists.
        only: Display names given on the command line; narrows the roster
            further when non-empty.
    """
    adapters = [cls(http_client) for cls in ADAPTER_CLASSES]
    wanted = {name.casefold() for name in only}
    known = {a.display_name.casefold() for a in adapters}
    for name in only:
        if name.casefold() not in known:
            logger.warning(f"Unknown source '{name}' ignored.")

    selected = []
    for adapter in adapters:
        if wanted and adapter.display_name.casefold() not in wanted:
            continue
        if not settings.sources.is_enabled(adapter.display_name):
            logger.debug(f"[{adapter.display_name}] Disabled in configuration.")
            continue
        selected.append(adapter)
    return selected


async def run_checks(
    settings: Settings,
    only: Sequence[str] = (),
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[SourceResult]:
    """Queries every selected venue once and returns the per-venue outcomes."""
    async with httpx.AsyncClient(
        http2=settings.fetch.http2,
        timeout=settings.fetch.timeout_s,
        follow_redirects=settings.fetch.follow_redirects,
        headers={"User-Agent": settings.fetch.user_agent},
        transport=transport,
    ) as http_client:
        adapters = _instantiate_adapters(http_client, settings, only)
        if not adapters:
            logger.error("No sources selected.")
            return []
        aggregator = Aggregator(
            adapters,
            timeout_s=settings.fetch.timeout_s,
            concurrent=settings.fetch.concurrent,
        )
        return await aggregator.collect()


def _print_results(results: Sequence[SourceResult], as_json: bool) -> None:
    for result in results:
        if as_json:
            entry: dict[str, object] = {"source": result.display_name, "ok": result.ok}
            if result.rate is not None:
                entry["rate"] = result.rate.to_dict()
            else:
                entry["error"] = str(result.error)
                entry["error_type"] = type(result.error).__name__
            print(json.dumps(entry))
            continue
        if result.ok:
            print(f"{result.display_name} OK")
        else:
            print(f"error: {result.error}", file=sys.stderr)
            print(f"{result.display_name} ERROR")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="spotrates",
        description="Fetch the DASH spot rate from every configured venue.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=CONFIG_FILE,
        help=f"Path to the TOML config file (default: {CONFIG_FILE}).",
    )
    parser.add_argument(
        "--source",
        action="append",
        default=[],
        metavar="NAME",
        help="Only query this venue (display name); may be repeated.",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        help="Per-venue timeout in seconds (overrides the config file).",
    )
    parser.add_argument(
        "--sequential",
        action="store_true",
        help="Query venues one at a time instead of concurrently.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print one JSON object per venue instead of OK/ERROR lines.",
    )
    parser.add_argument(
        "--log-level",
        help="Console log level (overrides the config file).",
    )
    return parser


def main(
    argv: Sequence[str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> int:
    """Entry point for the `spotrates` script.

    Returns:
        0 if at least one venue returned a rate, 1 otherwise.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)
    if args.timeout is not None and args.timeout <= 0:
        parser.error("--timeout must be positive")

    settings = load_config(args.config)
    if args.timeout is not None:
        settings.fetch.timeout_s = args.timeout
    if args.sequential:
        settings.fetch.concurrent = False
    if args.log_level:
        settings.general.log_level_console = args.log_level

    setup_logging(
        console_level=settings.general.log_level_console,
        file_level=settings.general.log_level_file,
        log_dir=(
            Path(settings.general.log_directory)
            if settings.general.file_logging
            else None
        ),
    )

    results = asyncio.run(run_checks(settings, args.source, transport))
    _print_results(results, args.json)
    return 0 if successes(results) else 1
