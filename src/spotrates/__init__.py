# src/spotrates/__init__.py
"""spotrates: DASH spot rates from many exchanges, in one shape.

Each supported venue publishes its ticker in its own JSON layout. This
package fetches those tickers over asyncio/httpx, decodes them into
per-venue wire models, and normalizes every one into a `CanonicalRate`.

Key modules:
- `adapters`: One adapter per venue, all built on `adapters.base.RateAdapter`.
- `aggregator`: Fans a fetch out over many adapters with per-venue isolation.
- `normalizer`: Strict parsing of wire numbers, flags and arrays.
- `errors`: The error taxonomy every adapter failure maps into.
"""

import importlib.metadata

try:
    __version__: str = importlib.metadata.version("spotrates")
except importlib.metadata.PackageNotFoundError:
    # Not installed (e.g. running from a source checkout).
    __version__ = "0.0.0-dev"
