# link_scout/crawler/fetcher.py
"""
Fetcher module: blocking, thread-safe HTTP fetching backed by one aiohttp session.

The session lives on a private event loop running in a daemon thread, so any
number of worker threads can call :meth:`Fetcher.fetch` concurrently while
sharing a single connection pool.
"""
from __future__ import annotations

import asyncio
import logging
import threading
from typing import Optional, Tuple
from urllib.parse import urldefrag

from aiohttp import ClientError, ClientSession, ClientTimeout

from link_scout.config import DEFAULT_USER_AGENT
from link_scout.crawler.models import Document

__all__ = ("Fetcher",)

logger = logging.getLogger("LinkScout")

_HTML_TYPES = ("text/html", "application/xhtml+xml")


class Fetcher:
    """Fetches URLs into :class:`Document` objects. One attempt per URL, no retries."""

    def __init__(self, timeout: float = 10.0, user_agent: str = DEFAULT_USER_AGENT) -> None:
        self.timeout = timeout
        self.user_agent = user_agent
        self._lock = threading.Lock()
        self._local = threading.local()
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._thread: Optional[threading.Thread] = None
        self._session: Optional[ClientSession] = None

    def __enter__(self) -> Fetcher:
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def last_status(self) -> Optional[int]:
        """HTTP status of the calling thread's most recent fetch (None if it failed)."""
        return getattr(self._local, "status", None)

    def start(self) -> None:
        with self._lock:
            if self._loop is not None:
                return
            loop = asyncio.new_event_loop()
            thread = threading.Thread(target=loop.run_forever, name="link-scout-fetcher", daemon=True)
            thread.start()
            self._session = asyncio.run_coroutine_threadsafe(self._open_session(), loop).result()
            self._loop, self._thread = loop, thread
            logger.debug("Fetcher started (timeout=%s)", self.timeout)

    def close(self) -> None:
        with self._lock:
            if self._loop is None:
                return
            loop, thread, session = self._loop, self._thread, self._session
            self._loop = self._thread = self._session = None
        if session is not None:
            asyncio.run_coroutine_threadsafe(session.close(), loop).result()
        loop.call_soon_threadsafe(loop.stop)
        if thread is not None:
            thread.join()
        loop.close()
        logger.debug("Fetcher closed")

    def fetch(self, url: str) -> Optional[Document]:
        """
        Fetch *url* and return its Document, or None if nothing could be fetched.

        Any HTTP response yields a Document (check ``status_code``); DNS,
        connection, timeout and malformed-URL errors yield None.
        """
        self.start()
        loop = self._loop
        if loop is None:
            raise RuntimeError("Fetcher is closed")
        response = asyncio.run_coroutine_threadsafe(self._fetch(url), loop).result()
        # parse on the calling thread, not on the shared event loop
        doc = Document(*response) if response is not None else None
        self._local.status = doc.status_code if doc is not None else None
        return doc

    async def _open_session(self) -> ClientSession:
        return ClientSession(
            timeout=ClientTimeout(total=self.timeout),
            headers={"User-Agent": self.user_agent},
            raise_for_status=False,
        )

    async def _fetch(self, url: str) -> Optional[Tuple[str, str, int]]:
        if self._session is None:
            raise RuntimeError("Session not initialized")
        target, fragment = urldefrag(url)
        try:
            async with self._session.get(target, allow_redirects=True) as resp:
                status = resp.status
                mime = resp.headers.get("Content-Type", "").split(";", 1)[0].strip().lower()
                content = await resp.text(errors="replace") if mime in _HTML_TYPES else ""
                final_url = str(resp.url)
        except (ClientError, asyncio.TimeoutError, ValueError) as exc:
            logger.debug("Failed %s: %s", url, exc)
            return None

        if fragment:
            final_url = f"{urldefrag(final_url).url}#{fragment}"
        logger.debug("Fetched %s -> HTTP %s", url, status)
        return final_url, content, status
