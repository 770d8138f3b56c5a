# File: tests/test_engine.py
import pytest

from link_scout.config import FinderConfig
from link_scout.engine import start_scan
from link_scout.finder import InvalidURLError


def test_start_scan_single_page(live_server, basic_config):
    report = start_scan(basic_config, f"{live_server}/")

    assert report.has_broken_links
    assert report.crawled_pages == [f"{live_server}/"]
    assert report.broken_links == {f"{live_server}/": ["/missing", "/page1#nowhere"]}
    assert report.total_links_crawled == 5


def test_start_scan_site_sorted_by_link(live_server):
    cfg = FinderConfig(sort="link", max_workers=2, timeout=5.0)
    report = start_scan(cfg, f"{live_server}/", recursive=True)

    assert report.sort == "link"
    assert report.broken_links == {
        "/missing": [f"{live_server}/"],
        "/page1#nowhere": [f"{live_server}/"],
    }
    assert report.ignored_links == {"mailto:someone@example.com": [f"{live_server}/"]}
    assert len(report.crawled_pages) == 3


def test_start_scan_invalid_root():
    with pytest.raises(InvalidURLError):
        start_scan(FinderConfig(timeout=2.0), "http://127.0.0.1:1/")
