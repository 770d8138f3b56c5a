# File: link_scout/utils.py
"""link_scout.utils: Утилитарные функции для обработки URL и списков ссылок."""

from __future__ import annotations

import posixpath
from typing import Collection, List, Sequence
from urllib.parse import parse_qsl, quote, unquote, urlencode, urlparse, urlunparse

from link_scout.logger import logger

__all__: Sequence[str] = (
    "normalize_url",
    "is_http_url",
    "remove_duplicates",
)


def normalize_url(url: str) -> str:
    """Нормализует URL страницы: регистр схемы и хоста, путь, порядок параметров, без фрагмента."""
    parsed = urlparse(url)
    scheme = parsed.scheme.lower()
    netloc = parsed.netloc.lower()
    path = unquote(parsed.path or "/")
    norm = posixpath.normpath(path)
    if path.endswith("/") and not norm.endswith("/"):
        norm += "/"
    if not norm.startswith("/"):
        norm = "/" + norm
    norm = quote(norm, safe="/")
    qs = parse_qsl(parsed.query, keep_blank_values=True)
    qs.sort()
    query = urlencode(qs, doseq=True)
    return urlunparse((scheme, netloc, norm, "", query, ""))


def is_http_url(url: str) -> bool:
    """Проверяет, что URL абсолютный, использует http(s) и содержит хост."""
    try:
        parsed = urlparse(url)
    except ValueError as exc:
        logger.debug("URL parse error %s: %s", url, exc)
        return False
    return parsed.scheme.lower() in ("http", "https") and bool(parsed.netloc)


def remove_duplicates(urls: Collection[str]) -> List[str]:
    """Удаляет дубликаты из списка URL, сохраняя порядок."""
    unique = list(dict.fromkeys(urls))
    removed = len(urls) - len(unique)
    if removed:
        logger.debug("Removed %d duplicate URLs", removed)
    return unique
