"""
pytest configuration for fixture_fetch tests.

Adds src directory to Python path for imports and provides shared fixtures:
descriptors, a zero-delay retry policy and an in-process HTTP server.
"""

import asyncio
import logging
import socket
import sys
from collections import Counter
from pathlib import Path
from typing import Dict, Tuple

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

# Add src directory to Python path
src_dir = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_dir))

from fixture_fetch.logging.context import clear_log_context  # noqa: E402
from fixture_fetch.models import AssetDescriptor  # noqa: E402
from fixture_fetch.retry import NO_DELAY_RETRY  # noqa: E402

HELLO_SHA256 = "2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824"


@pytest.fixture
def output_dir(tmp_path):
    """Directory fixture files are written into."""
    return tmp_path / "test-assets"


@pytest.fixture
def fast_retry():
    """Zero-delay retry policy with three attempts."""
    return NO_DELAY_RETRY


@pytest.fixture
def hello_asset():
    return AssetDescriptor(
        filename="a.bin",
        hash=HELLO_SHA256,
        url="https://fixtures.example.com/a.bin",
    )


@pytest.fixture
def unused_port():
    """A local TCP port nothing is listening on."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo setup_logging() side effects between tests."""
    clear_log_context()
    yield
    clear_log_context()
    logging.getLogger().handlers.clear()


class FixtureServer:
    """
    In-process HTTP server serving registered payloads.

    Usage:
        server.add("a.bin", b"hello")
        server.add("flaky.bin", b"data", fail_times=2)  # two 503s first
        server.add("slow.bin", b"data", delay=1.0)  # answers after 1s
        url = server.url("a.bin")
    """

    def __init__(self) -> None:
        self._routes: Dict[str, Tuple[bytes, int, float]] = {}
        self._failures: Dict[str, int] = {}
        self.hits: Counter = Counter()
        self.app = web.Application()
        self.app.router.add_get("/{name:.*}", self._handle)
        self.server = TestServer(self.app)

    def add(
        self,
        name: str,
        body: bytes,
        status: int = 200,
        fail_times: int = 0,
        delay: float = 0.0,
    ) -> None:
        self._routes[name] = (body, status, delay)
        self._failures[name] = fail_times

    def url(self, name: str) -> str:
        return str(self.server.make_url(f"/{name}"))

    async def _handle(self, request: web.Request) -> web.Response:
        name = request.match_info["name"]
        self.hits[name] += 1
        if name not in self._routes:
            return web.Response(status=404, text="not found")
        if self._failures[name] > 0:
            self._failures[name] -= 1
            return web.Response(status=503, text="try again")
        body, status, delay = self._routes[name]
        if delay:
            await asyncio.sleep(delay)
        return web.Response(status=status, body=body)


@pytest_asyncio.fixture
async def fixture_server():
    server = FixtureServer()
    await server.server.start_server()
    yield server
    await server.server.close()
