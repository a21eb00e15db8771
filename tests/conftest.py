"""Shared fixtures: a mock Shirts 4 Mike shop served over real HTTP."""

import asyncio
import socket
import threading
from collections.abc import Callable, Generator
from contextlib import closing

import pytest
from aiohttp import web

from tests.mock_server import SHIRTS, MockCategory, create_app


def find_free_port() -> int:
    """Find a free port on localhost.

    Returns:
        An available port number.
    """
    with closing(socket.socket(socket.AF_INET, socket.SOCK_STREAM)) as s:
        s.bind(("", 0))
        s.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        return s.getsockname()[1]


class AioHttpTestServer:
    """Wrapper to run aiohttp server in a background thread."""

    def __init__(self, app: web.Application, port: int) -> None:
        self.app = app
        self.port = port
        self.host = "127.0.0.1"
        self._loop: asyncio.AbstractEventLoop | None = None
        self._runner: web.AppRunner | None = None
        self._thread: threading.Thread | None = None
        self._started = threading.Event()

    @property
    def url(self) -> str:
        """Base URL of the shop, with the trailing slash the live site uses."""
        return f"http://{self.host}:{self.port}/"

    def start(self) -> None:
        """Start the server in a background thread."""
        self._thread = threading.Thread(target=self._run_server, daemon=True)
        self._thread.start()
        self._started.wait(timeout=5.0)

    def _run_server(self) -> None:
        """Run the server in an asyncio event loop."""
        self._loop = asyncio.new_event_loop()
        asyncio.set_event_loop(self._loop)

        async def start() -> None:
            self._runner = web.AppRunner(self.app)
            await self._runner.setup()
            site = web.TCPSite(self._runner, self.host, self.port)
            await site.start()

        self._loop.run_until_complete(start())
        self._started.set()
        self._loop.run_forever()

    def stop(self) -> None:
        """Stop the server and clean up resources."""
        if self._loop and self._runner:
            runner = self._runner
            future = asyncio.run_coroutine_threadsafe(
                runner.cleanup(), self._loop
            )
            try:
                future.result(timeout=2.0)
            except Exception:
                pass  # Best effort cleanup

        if self._loop:
            self._loop.call_soon_threadsafe(self._loop.stop)

        if self._thread:
            self._thread.join(timeout=2.0)


def start_server(
    catalog: list[MockCategory] | None = None,
) -> AioHttpTestServer:
    server = AioHttpTestServer(create_app(catalog), find_free_port())
    server.start()
    return server


@pytest.fixture
def shop_server() -> Generator[AioHttpTestServer, None, None]:
    """Start the default shop: one "shirts" category with every shirt.

    Yields:
        AioHttpTestServer instance with the shop running.
    """
    server = start_server()
    yield server
    server.stop()


@pytest.fixture
def server_url(shop_server: AioHttpTestServer) -> str:
    """Base URL of the default shop (e.g. "http://127.0.0.1:8080/")."""
    return shop_server.url


@pytest.fixture
def shop_factory() -> Generator[
    Callable[[list[MockCategory]], str], None, None
]:
    """Start shops with a custom catalog.

    Yields:
        A function taking a catalog and returning the shop's base URL.
        Every server started through it is stopped after the test.
    """
    servers: list[AioHttpTestServer] = []

    def factory(catalog: list[MockCategory]) -> str:
        server = start_server(catalog)
        servers.append(server)
        return server.url

    yield factory
    for server in servers:
        server.stop()


@pytest.fixture
def expected_shirt_count() -> int:
    """The number of shirts in the default shop."""
    return len(SHIRTS)

