# === FILE: link_scout/crawler/crawler.py ===
from __future__ import annotations

import logging
import time
from collections import deque
from typing import Callable, Deque, List, Optional, Protocol, Set
from urllib.parse import urlparse

from link_scout.crawler.models import Document
from link_scout.utils import normalize_url, remove_duplicates

__all__ = ("PageFetcher", "PageCallback", "SiteCrawler")

PageCallback = Callable[[Optional[Document]], None]


class PageFetcher(Protocol):
    def fetch(self, url: str) -> Optional[Document]: ...


class SiteCrawler:
    """Breadth-first walker over the pages of one host."""

    def __init__(self, fetcher: PageFetcher) -> None:
        self.fetcher = fetcher
        self.logger = logging.getLogger("LinkScout")

    def crawl_site(self, url: str, on_page: PageCallback) -> Optional[List[str]]:
        """
        Fetch every page reachable from *url* on the same host.

        *on_page* is called once per distinct page, as soon as it is fetched,
        with its Document (or None if the fetch failed). Only pages answering
        with a non-error status are followed further.

        Returns the ordered unique off-site link targets, or None if the root
        itself could not be fetched.
        """
        self.logger.info("Start walking site: %s", url)
        start = time.monotonic()

        root = self.fetcher.fetch(url)
        if root is None or root.not_found:
            self.logger.warning("Root page unreachable: %s", url)
            return None

        host = urlparse(root.url).netloc.lower()
        seen: Set[str] = {normalize_url(url), normalize_url(root.url)}
        pending: Deque[Document] = deque([root])
        externals: List[str] = []
        pages = 1
        on_page(root)

        while pending:
            doc = pending.popleft()
            if not doc.ok:
                continue
            externals.extend(doc.external_links())
            for link in doc.internal_links():
                key = normalize_url(link)
                if key in seen:
                    continue
                seen.add(key)

                page = self.fetcher.fetch(link)
                if page is None:
                    on_page(None)
                    continue
                if urlparse(page.url).netloc.lower() != host:
                    self.logger.debug("Redirected off site, skipping: %s -> %s", link, page.url)
                    continue
                final = normalize_url(page.url)
                if final != key:
                    if final in seen:
                        continue
                    seen.add(final)

                pages += 1
                on_page(page)
                pending.append(page)

        duration = time.monotonic() - start
        self.logger.info("Walked %d pages in %.2f s", pages, duration)
        return remove_duplicates(externals)
