# src/spotrates/adapters/__init__.py
"""This package contains the venue-specific adapters.

Each adapter is a self-contained module that knows one venue's fixed
ticker endpoint and wire schema, and turns a response into a
`CanonicalRate`. Venue quirks (inverted volume fields, legacy tickers,
positional arrays, nullable book sides) are documented in the module that
handles them.

All adapters inherit from the `RateAdapter` abstract base class defined
in `spotrates.adapters.base`.
"""
