# link_scout/links.py
"""
Link classification helpers: scheme filtering, resolution and anchor checks.
"""
from __future__ import annotations

import re
from typing import Optional
from urllib.parse import urljoin

from link_scout.crawler.models import Document

__all__ = ("SUPPORTED_SCHEMES", "is_absolute", "is_supported", "resolve_link", "has_broken_anchor")

SUPPORTED_SCHEMES = ("http", "https")

_SCHEME_RE = re.compile(r"^([A-Za-z][A-Za-z0-9+.\-]*):")


def _scheme(link: str) -> Optional[str]:
    match = _SCHEME_RE.match(link)
    return match.group(1).lower() if match else None


def is_absolute(link: str) -> bool:
    """True if *link* starts with a URI scheme, e.g. ``https:`` or ``mailto:``."""
    return _scheme(link) is not None


def is_supported(link: str) -> bool:
    """
    Relative links are always supported; absolute ones only over http(s).

    ``mailto:``, ``tel:``, ``ftp:`` etc. are reported as ignored instead.
    """
    scheme = _scheme(link)
    return scheme is None or scheme in SUPPORTED_SCHEMES


def resolve_link(doc: Document, link: str) -> str:
    """Return *link* in absolute form so it can be fetched."""
    if is_absolute(link):
        return link
    return urljoin(doc.base_url, link)


def has_broken_anchor(doc: Optional[Document]) -> bool:
    """
    True if the document URL names a fragment that has no matching element id.

    A bare ``#`` (or no fragment at all) is never broken.
    """
    if doc is None:
        raise RuntimeError("link document is None")

    anchor = doc.anchor
    if not anchor or anchor == "#":
        return False
    return not doc.fragment_exists(anchor.removeprefix("#"))
