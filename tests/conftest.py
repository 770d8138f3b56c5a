# File: tests/conftest.py
import asyncio
import threading
from collections import Counter
from typing import Dict, Iterator, Optional, Tuple
from urllib.parse import urldefrag

import pytest
from aiohttp import web

from link_scout.config import FinderConfig
from link_scout.crawler.models import Document
from link_scout.logger import init_logging

ROOT = "http://mock-server.com/"

#: url -> (status, html); anything missing behaves like an unresolvable host
MOCK_SITE: Dict[str, Tuple[int, str]] = {
    ROOT: (
        200,
        """<html><head><title>Home</title></head><body>
        <a href="/contact">Contact</a>
        <a href="/about">About</a>
        <a href="not_found">Missing</a>
        <a href="https://doesnt-exist.com">Dead</a>
        <a href="mailto:youraddress@yourmailserver.com">Mail</a>
        <a href="tel:+13174562564">Call</a>
        <img src="/images/logo.png">
        </body></html>""",
    ),
    "http://mock-server.com/contact": (
        200,
        """<html><body><h1 id="top">Contact</h1>
        <a href="#doesntexist">Bad anchor</a>
        <a href="#top">Top</a>
        <a href="/">Home</a>
        <a href="not_found">Missing</a>
        <a href="ftp://websiteaddress.com">FTP</a>
        </body></html>""",
    ),
    "http://mock-server.com/about": (
        200,
        """<html><body>
        <a href="https://doesnt-exist.com">Dead</a>
        <a href="/contact#top">Contact</a>
        <a href="/">Home</a>
        </body></html>""",
    ),
    "http://mock-server.com/not_found": (404, "<html><body><h1>Not found</h1></body></html>"),
    "http://mock-server.com/images/logo.png": (200, ""),
    "http://mock-server.com/location": (
        200,
        '<html><body><a href="/">Home</a><a href="/about">About</a></body></html>',
    ),
}


class FakeFetcher:
    """In-memory stand-in for Fetcher; counts every fetch per URL."""

    def __init__(self, pages: Dict[str, Tuple[int, str]]) -> None:
        self.pages = dict(pages)
        self.calls: Counter = Counter()
        self._lock = threading.Lock()

    def fetch(self, url: str) -> Optional[Document]:
        with self._lock:
            self.calls[url] += 1
        target = urldefrag(url).url
        if target not in self.pages:
            return None
        status, html = self.pages[target]
        return Document(url=url, content=html, status_code=status)


@pytest.fixture(autouse=True)
def reset_logging():
    """CLI tests reconfigure logging onto CliRunner streams; rebind after each test."""
    yield
    init_logging()


@pytest.fixture()
def fake_fetcher_cls():
    return FakeFetcher


@pytest.fixture()
def mock_fetcher() -> FakeFetcher:
    """FakeFetcher serving the mock site rooted at ROOT."""
    return FakeFetcher(MOCK_SITE)


@pytest.fixture()
def basic_config() -> FinderConfig:
    """Return a basic valid FinderConfig for tests."""
    return FinderConfig(sort="page", max_workers=4, timeout=2.0, user_agent="TestAgent/1.0")


@pytest.fixture()
def live_server(unused_tcp_port: int) -> Iterator[str]:
    """
    Serve a small aiohttp site from a background thread and yield its base URL.

    The blocking Fetcher must not share the event loop with the server.
    """
    app = web.Application()

    async def handle_root(_):
        return web.Response(
            text=(
                '<html><body><h2 id="intro">Intro</h2>'
                '<a href="/page1">Page1</a>'
                '<a href="/missing">Missing</a>'
                '<a href="/page1#nowhere">Bad anchor</a>'
                '<a href="#intro">Intro</a>'
                '<a href="/redirect">Redirect</a>'
                '<a href="mailto:someone@example.com">Mail</a>'
                "</body></html>"
            ),
            content_type="text/html",
        )

    async def handle_page1(_):
        return web.Response(
            text='<html><body><p id="para">Page1</p><a href="/">Home</a></body></html>',
            content_type="text/html",
        )

    async def handle_redirect(_):
        raise web.HTTPFound("/page1")

    async def handle_image(_):
        return web.Response(body=b"\x89PNG", content_type="image/png")

    app.router.add_get("/", handle_root)
    app.router.add_get("/page1", handle_page1)
    app.router.add_get("/redirect", handle_redirect)
    app.router.add_get("/logo.png", handle_image)

    loop = asyncio.new_event_loop()
    runner = web.AppRunner(app)
    loop.run_until_complete(runner.setup())
    site = web.TCPSite(runner, "127.0.0.1", unused_tcp_port)
    loop.run_until_complete(site.start())
    thread = threading.Thread(target=loop.run_forever, daemon=True)
    thread.start()
    try:
        yield f"http://127.0.0.1:{unused_tcp_port}"
    finally:
        loop.call_soon_threadsafe(loop.stop)
        thread.join()
        loop.run_until_complete(runner.cleanup())
        loop.close()
