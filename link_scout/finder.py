# link_scout/finder.py
"""
Broken link finder: checks every link of one page, or of every page of a site.

Site crawls hand each discovered page to a bounded thread pool. Links already
classified during the run are never fetched again; results are accumulated in
a shared :class:`~link_scout.aggregator.LinkStore` and sorted once all the
work has drained.
"""
from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
from typing import List, Optional, TextIO, Tuple

from link_scout.aggregator import LinkMap, LinkReport, LinkStore
from link_scout.config import DEFAULT_MAX_WORKERS, FinderConfig
from link_scout.crawler.crawler import PageFetcher, SiteCrawler
from link_scout.crawler.fetcher import Fetcher
from link_scout.crawler.models import Document
from link_scout.links import has_broken_anchor, is_supported, resolve_link
from link_scout.logger import logger
from link_scout.report.text_report import render_text
from link_scout.utils import is_http_url, remove_duplicates

__all__ = ("Finder", "InvalidURLError")


class InvalidURLError(ValueError):
    """The root URL of a crawl is malformed or cannot be fetched."""

    def __init__(self, url: str) -> None:
        super().__init__(f"Invalid or broken URL: {url}")
        self.url = url


class Finder:
    """Finds broken links on a page or a whole site."""

    def __init__(
        self,
        sort: str = "page",
        max_workers: int = DEFAULT_MAX_WORKERS,
        fetcher: Optional[PageFetcher] = None,
        walker: Optional[SiteCrawler] = None,
    ) -> None:
        if max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, not {max_workers}")
        self._store = LinkStore(sort)
        self.sort = sort
        self.max_workers = max_workers
        self._owns_fetcher = fetcher is None
        self.fetcher: PageFetcher = fetcher if fetcher is not None else Fetcher()
        self.walker = walker if walker is not None else SiteCrawler(self.fetcher)
        self._crawled_pages: List[str] = []

    @classmethod
    def from_config(cls, config: FinderConfig, fetcher: Optional[PageFetcher] = None) -> Finder:
        owns_fetcher = fetcher is None
        if fetcher is None:
            fetcher = Fetcher(timeout=config.timeout, user_agent=config.user_agent)
        finder = cls(sort=config.sort, max_workers=config.max_workers, fetcher=fetcher)
        finder._owns_fetcher = owns_fetcher
        return finder

    def __enter__(self) -> Finder:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        """Close the fetcher if this finder created it."""
        if self._owns_fetcher and isinstance(self.fetcher, Fetcher):
            self.fetcher.close()

    # ------------------------------------------------------------------ #
    # Results                                                            #
    # ------------------------------------------------------------------ #

    @property
    def broken_links(self) -> LinkMap:
        """Copy of the broken-link map; changing it does not touch the run state."""
        return {key: list(values) for key, values in self._store.broken_links.items()}

    @property
    def ignored_links(self) -> LinkMap:
        return {key: list(values) for key, values in self._store.ignored_links.items()}

    @property
    def total_links_crawled(self) -> int:
        return self._store.total_links_crawled

    @property
    def crawled_pages(self) -> List[str]:
        return list(self._crawled_pages)

    def report(self) -> LinkReport:
        """Snapshot of the latest crawl."""
        return LinkReport(
            sort=self.sort,
            broken_links=self.broken_links,
            ignored_links=self.ignored_links,
            total_links_crawled=self.total_links_crawled,
            crawled_pages=self.crawled_pages,
        )

    def clear_links(self) -> None:
        self._store.clear()
        self._crawled_pages = []

    # ------------------------------------------------------------------ #
    # Crawling                                                           #
    # ------------------------------------------------------------------ #

    def crawl_url(self, url: str) -> bool:
        """
        Find broken links on a single page; no threads are involved.

        Returns True if at least one broken link was found. Raises
        InvalidURLError if the page is malformed or unreachable.
        """
        self.clear_links()
        url = self._check_root(url)

        doc = self.fetcher.fetch(url)
        if doc is None or doc.not_found:
            raise InvalidURLError(url)

        self._crawled_pages = [doc.url]
        self._find_broken_links(doc)
        self._store.finalise()

        logger.info("Checked %s: %d links, %d broken", url, self.total_links_crawled,
                    len(self._store.all_broken_links))
        return bool(self.broken_links)

    def crawl_site(self, url: str) -> Tuple[bool, List[str]]:
        """
        Find broken links across every page of the site rooted at *url*.

        Returns ``(found_broken_links, crawled_pages)`` where crawled_pages is
        the unique list of page URLs in the order they were discovered.
        """
        self.clear_links()
        url = self._check_root(url)

        crawled_pages: List[str] = []
        futures: List[Future] = []

        with ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="link-check") as pool:

            def on_page(doc: Optional[Document]) -> None:
                if doc is None:
                    return
                crawled_pages.append(doc.url)
                futures.append(pool.submit(self._find_broken_links, doc))

            externals = self.walker.crawl_site(url, on_page)
            # leaving the block joins the pool

        for future in futures:
            future.result()

        if externals is None:
            raise InvalidURLError(url)

        self._crawled_pages = remove_duplicates(crawled_pages)
        self._store.finalise()

        logger.info(
            "Crawled %d pages of %s: %d links, %d broken",
            len(self._crawled_pages), url, self.total_links_crawled,
            len(self._store.all_broken_links),
        )
        return bool(self.broken_links), self.crawled_pages

    def pretty_print_link_report(
        self,
        stream: Optional[TextIO] = None,
        broken_verbose: bool = True,
        ignored_verbose: bool = False,
    ) -> bool:
        """Write a human readable report; returns True if there were broken links."""
        render_text(self.report(), stream, broken_verbose=broken_verbose, ignored_verbose=ignored_verbose)
        return bool(self.broken_links)

    # ------------------------------------------------------------------ #
    # Internals                                                          #
    # ------------------------------------------------------------------ #

    @staticmethod
    def _check_root(url: str) -> str:
        url = url.strip() if isinstance(url, str) else ""
        if not is_http_url(url):
            raise InvalidURLError(url)
        return url

    def _find_broken_links(self, doc: Document) -> None:
        """Classify every supported link of *doc*, recording ignored ones on the way."""
        store = self._store
        for link in self._supported_links(doc):
            if store.is_intact(link):
                continue
            if store.is_broken(link):
                store.record_broken(doc.url, link)
                continue

            link_doc = self._crawl_link(doc, link)
            if link_doc is None or link_doc.not_found or has_broken_anchor(link_doc):
                store.record_broken(doc.url, link)
            else:
                store.record_intact(link)

    def _supported_links(self, doc: Document) -> List[str]:
        supported: List[str] = []
        for link in doc.all_links():
            if is_supported(link):
                supported.append(link)
            else:
                self._store.record_ignored(doc.url, link)
        return supported

    def _crawl_link(self, doc: Document, link: str) -> Optional[Document]:
        try:
            target = resolve_link(doc, link)
        except ValueError as exc:
            logger.debug("Cannot resolve %r on %s: %s", link, doc.url, exc)
            return None
        return self.fetcher.fetch(target)
