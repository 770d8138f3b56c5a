# File: link_scout/engine.py
"""link_scout.engine: Слой оркестрации для запуска проверки ссылок и сбора отчёта."""

from __future__ import annotations

from link_scout.aggregator import LinkReport
from link_scout.config import FinderConfig
from link_scout.crawler.fetcher import Fetcher
from link_scout.finder import Finder, InvalidURLError
from link_scout.logger import logger

__all__ = ["start_scan"]


def start_scan(config: FinderConfig, url: str, recursive: bool = False) -> LinkReport:
    """Проверяет одну страницу (или весь сайт при recursive=True) и возвращает LinkReport.

    Raises:
        InvalidURLError: если корневой URL некорректен или недоступен.
    """
    logger.info("Starting %s crawl of %s…", "site" if recursive else "page", url)

    with Fetcher(timeout=config.timeout, user_agent=config.user_agent) as fetcher:
        finder = Finder.from_config(config, fetcher=fetcher)
        try:
            if recursive:
                finder.crawl_site(url)
            else:
                finder.crawl_url(url)
        except InvalidURLError as exc:
            logger.error("Crawl aborted: %s", exc)
            raise

    report = finder.report()
    logger.info(
        "Crawl finished: %d links checked, %d broken, %d ignored",
        report.total_links_crawled, report.num_broken_links(), report.num_ignored_links(),
    )
    return report
