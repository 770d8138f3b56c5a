# link_scout/crawler/models.py
"""
Data models for the LinkScout crawler.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List
from urllib.parse import urldefrag, urljoin, urlparse

from link_scout.parser.html_parser import ParsedPage, parse_html
from link_scout.utils import is_http_url, remove_duplicates


@dataclass
class Document:
    """A fetched resource: final URL (with the requested fragment), body and HTTP status."""

    url: str
    content: str = ""
    status_code: int = 200
    parsed: ParsedPage = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self.parsed = parse_html(self.content)

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    @property
    def not_found(self) -> bool:
        return self.status_code == 404

    @property
    def anchor(self) -> str:
        """Fragment of :attr:`url` without the leading ``#`` ('' if none)."""
        return urldefrag(self.url).fragment

    @property
    def base_url(self) -> str:
        """URL that relative links on this page are resolved against."""
        page_url = urldefrag(self.url).url
        if self.parsed.base_href:
            return urljoin(page_url, self.parsed.base_href)
        return page_url

    def all_links(self) -> List[str]:
        """All raw links as authored, in document order, without duplicates."""
        return list(self.parsed.links)

    def fragment_exists(self, fragment: str) -> bool:
        return fragment in self.parsed.ids

    def internal_links(self) -> List[str]:
        """Absolute, de-fragmented page links on the same host as this document."""
        host = urlparse(self.url).netloc.lower()
        return [link for link in self._absolute_page_links() if urlparse(link).netloc.lower() == host]

    def external_links(self) -> List[str]:
        """Absolute, de-fragmented page links pointing to other hosts."""
        host = urlparse(self.url).netloc.lower()
        return [link for link in self._absolute_page_links() if urlparse(link).netloc.lower() != host]

    def _absolute_page_links(self) -> List[str]:
        base = self.base_url
        links: List[str] = []
        for raw in self.parsed.page_links:
            try:
                absolute = urldefrag(urljoin(base, raw)).url
            except ValueError:
                continue
            if is_http_url(absolute):
                links.append(absolute)
        return remove_duplicates(links)
