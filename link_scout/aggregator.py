# File: link_scout/aggregator.py
"""link_scout.aggregator: Потокобезопасное накопление результатов проверки ссылок."""

from __future__ import annotations

import json
import threading
from dataclasses import asdict, dataclass, field
from typing import Dict, Iterable, List, Mapping, Set, Tuple

from link_scout.config import SORT_MODES

LinkMap = Dict[str, List[str]]

__all__ = ["LinkMap", "LinkReport", "LinkStore", "sort_links", "transpose_links"]


@dataclass(slots=True)
class LinkReport:
    """Итог одного запуска: битые и игнорируемые ссылки, счётчики и обойдённые страницы."""

    sort: str = "page"
    broken_links: LinkMap = field(default_factory=dict)
    ignored_links: LinkMap = field(default_factory=dict)
    total_links_crawled: int = 0
    crawled_pages: List[str] = field(default_factory=list)

    @property
    def has_broken_links(self) -> bool:
        return bool(self.broken_links)

    def num_broken_links(self) -> int:
        """Число уникальных битых ссылок (независимо от режима сортировки)."""
        return _count_links(self.sort, self.broken_links)

    def num_ignored_links(self) -> int:
        """Число уникальных игнорируемых ссылок."""
        return _count_links(self.sort, self.ignored_links)

    def json(self, *, pretty: bool = False) -> str:
        """Возвращает JSON-представление отчёта (вместе с флагом has_broken_links)."""
        data = asdict(self)
        data["has_broken_links"] = self.has_broken_links
        return json.dumps(data, ensure_ascii=False, indent=2 if pretty else None)


def _count_links(sort: str, links: LinkMap) -> int:
    if sort == "link":
        return len(links)
    return len({link for values in links.values() for link in values})


def sort_links(links: Mapping[str, Iterable[str]]) -> LinkMap:
    """Удаляет дубликаты в значениях, сортирует значения и ключи по возрастанию."""
    return {key: sorted(set(links[key])) for key in sorted(links)}


def transpose_links(links: Mapping[str, Iterable[str]]) -> LinkMap:
    """Меняет местами ключи и значения: page -> [link] превращается в link -> [page]."""
    transposed: Dict[str, List[str]] = {}
    for key, values in links.items():
        for value in values:
            transposed.setdefault(value, []).append(key)
    return sort_links(transposed)


class LinkStore:
    """
    Общее состояние одного запуска, разделяемое рабочими потоками.

    Составные операции (вставка в memo-множество + добавление в карту)
    выполняются под одной блокировкой; чтение принадлежности без неё.
    """

    def __init__(self, sort: str = "page") -> None:
        if sort not in SORT_MODES:
            raise ValueError(f"Sort by either 'page' or 'link', not {sort!r}")
        self.sort = sort
        self._lock = threading.Lock()
        self.clear()

    def clear(self) -> None:
        """Очищает карты и memo-множества перед новым запуском."""
        with self._lock:
            self.broken_links: LinkMap = {}
            self.ignored_links: LinkMap = {}
            self.all_broken_links: Set[str] = set()
            self.all_intact_links: Set[str] = set()

    def is_intact(self, link: str) -> bool:
        return link in self.all_intact_links

    def is_broken(self, link: str) -> bool:
        return link in self.all_broken_links

    def record_broken(self, page: str, link: str) -> None:
        key, value = self._key_value(page, link)
        with self._lock:
            self.broken_links.setdefault(key, []).append(value)
            self.all_broken_links.add(link)

    def record_ignored(self, page: str, link: str) -> None:
        key, value = self._key_value(page, link)
        with self._lock:
            self.ignored_links.setdefault(key, []).append(value)

    def record_intact(self, link: str) -> None:
        with self._lock:
            self.all_intact_links.add(link)

    @property
    def total_links_crawled(self) -> int:
        return len(self.all_broken_links) + len(self.all_intact_links)

    def finalise(self) -> None:
        """Приводит карты к детерминированному виду; вызывается после завершения всех задач."""
        with self._lock:
            self.broken_links = sort_links(self.broken_links)
            self.ignored_links = sort_links(self.ignored_links)

    def _key_value(self, page: str, link: str) -> Tuple[str, str]:
        if self.sort == "page":
            return page, link
        return link, page
