# === FILE: link_scout/parser/html_parser.py ===
"""HTML parsing utilities for LinkScout.

:func:`parse_html` turns raw markup into a small :class:`ParsedPage` holding
everything the link checker and the site walker need from a document:

* title: document <title> text or ``""`` if absent.
* links: every raw link as authored, in document order, deduplicated.
* page_links: raw ``href`` values of navigable anchors (<a>, <area>).
* ids: all element ids, used to validate ``#fragment`` targets.
* base_href: value of <base href="…"> if the page declares one.

Links are left unresolved; resolution against the page base URL
belongs to :mod:`link_scout.links`.
"""
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Optional

from bs4 import BeautifulSoup
from bs4.element import Tag

__all__: Sequence[str] = ("ParsedPage", "parse_html", "LINK_ATTRIBUTES")

#: tag name -> attribute holding a link target
LINK_ATTRIBUTES: dict[str, str] = {
    "a": "href",
    "area": "href",
    "link": "href",
    "img": "src",
    "script": "src",
    "iframe": "src",
    "source": "src",
}

_NAVIGABLE_TAGS = ("a", "area")


@dataclass(slots=True)
class ParsedPage:
    """Lightweight representation of an HTML page."""

    title: str = ""
    links: list[str] = field(default_factory=list)
    page_links: list[str] = field(default_factory=list)
    ids: frozenset[str] = frozenset()
    base_href: Optional[str] = None


def _attr(tag: Tag, name: str) -> Optional[str]:
    value = tag.get(name)
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def parse_html(content: str) -> ParsedPage:
    """Parse raw HTML markup into a :class:`ParsedPage`.

    Empty or non-HTML content simply yields an empty page.
    """
    if not content:
        return ParsedPage()

    soup = BeautifulSoup(content, "html.parser")

    title_tag = soup.find("title")
    title = title_tag.get_text(strip=True) if title_tag else ""

    base_tag = soup.find("base", href=True)
    base_href = _attr(base_tag, "href") if isinstance(base_tag, Tag) else None

    seen: set[str] = set()
    links: list[str] = []
    page_links: list[str] = []
    for tag in soup.find_all(list(LINK_ATTRIBUTES)):
        if not isinstance(tag, Tag):
            continue
        value = _attr(tag, LINK_ATTRIBUTES[tag.name])
        if value is None:
            continue
        if tag.name in _NAVIGABLE_TAGS:
            page_links.append(value)
        if value not in seen:
            seen.add(value)
            links.append(value)

    ids = frozenset(
        tag["id"]
        for tag in soup.find_all(id=True)
        if isinstance(tag, Tag) and isinstance(tag.get("id"), str)
    )

    return ParsedPage(
        title=title,
        links=links,
        page_links=page_links,
        ids=ids,
        base_href=base_href,
    )
