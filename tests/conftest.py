import json
import sys
from collections.abc import AsyncIterator, Callable, Iterator
from pathlib import Path
from typing import Any

import httpx
import pytest
import pytest_asyncio
from loguru import logger

FIXTURES_DIR = Path(__file__).parent / "fixtures"

# A route maps to a JSON-able payload, a ready httpx.Response, or an
# exception to raise from the transport.
Route = Any


def build_transport(routes: dict[str, Route]) -> httpx.MockTransport:
    """Builds a transport serving canned responses keyed by full URL."""
    table = {str(httpx.URL(url)): spec for url, spec in routes.items()}

    def handler(request: httpx.Request) -> httpx.Response:
        spec = table.get(str(request.url))
        if spec is None:
            return httpx.Response(404, json={"error": f"no route for {request.url}"})
        if isinstance(spec, Exception):
            raise spec
        if isinstance(spec, httpx.Response):
            return spec
        return httpx.Response(200, json=spec)

    return httpx.MockTransport(handler)


@pytest.fixture
def mock_transport() -> Callable[[dict[str, Route]], httpx.MockTransport]:
    """Provides `build_transport` for code that creates its own client."""
    return build_transport


@pytest.fixture
def load_fixture() -> Callable[[str], Any]:
    """Provides a loader for the recorded venue payloads in tests/fixtures."""

    def _load(name: str) -> Any:
        with (FIXTURES_DIR / f"{name}.json").open(encoding="utf-8") as f:
            return json.load(f)

    return _load


@pytest_asyncio.fixture
async def mock_client() -> AsyncIterator[Callable[[dict[str, Route]], httpx.AsyncClient]]:
    """Provides a factory for httpx.AsyncClients backed by canned routes.

    Every client created through the factory is closed at teardown.
    """
    clients: list[httpx.AsyncClient] = []

    def _make(routes: dict[str, Route]) -> httpx.AsyncClient:
        client = httpx.AsyncClient(transport=build_transport(routes))
        clients.append(client)
        return client

    yield _make
    for client in clients:
        await client.aclose()


@pytest.fixture(autouse=True)
def restore_loguru() -> Iterator[None]:
    """Puts loguru back to a single stderr sink after tests that reconfigure it."""
    yield
    logger.remove()
    logger.add(lambda message: sys.stderr.write(message), level="DEBUG")


@pytest.fixture
def log_messages() -> Iterator[list[str]]:
    """Captures loguru output (WARNING and above is most useful) as text lines."""
    messages: list[str] = []

    def sink(message: Any) -> None:
        record = message.record
        messages.append(f"{record['level'].name} {record['message']}")

    handler_id = logger.add(sink, level="DEBUG")
    yield messages
    logger.remove(handler_id)
