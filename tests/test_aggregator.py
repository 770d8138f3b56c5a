# File: tests/test_aggregator.py
import json
import threading

import pytest

from link_scout.aggregator import LinkReport, LinkStore, sort_links, transpose_links


def test_sort_links_deduplicates_and_orders():
    links = {"b": ["z", "a", "z"], "a": ["m", "c", "m", "c"]}
    result = sort_links(links)

    assert result == {"a": ["c", "m"], "b": ["a", "z"]}
    assert list(result) == ["a", "b"]


def test_transpose_links():
    by_page = {"p1": ["l1", "l2"], "p2": ["l1"]}
    assert transpose_links(by_page) == {"l1": ["p1", "p2"], "l2": ["p1"]}
    assert transpose_links(transpose_links(by_page)) == by_page


def test_store_rejects_unknown_sort():
    with pytest.raises(ValueError, match="Sort by either 'page' or 'link', not 'foo'"):
        LinkStore("foo")


@pytest.mark.parametrize(
    "sort,expected",
    [
        ("page", {"http://p/": ["bad", "worse"]}),
        ("link", {"bad": ["http://p/"], "worse": ["http://p/"]}),
    ],
)
def test_store_keys_by_sort_mode(sort, expected):
    store = LinkStore(sort)
    store.record_broken("http://p/", "worse")
    store.record_broken("http://p/", "bad")
    store.record_broken("http://p/", "bad")
    store.finalise()

    assert store.broken_links == expected
    assert store.all_broken_links == {"bad", "worse"}


def test_store_counts_only_classified_links():
    store = LinkStore()
    store.record_broken("http://p/", "bad")
    store.record_intact("good")
    store.record_intact("good")
    store.record_ignored("http://p/", "mailto:x@y.z")

    assert store.is_broken("bad")
    assert store.is_intact("good")
    assert not store.is_intact("bad")
    assert store.total_links_crawled == 2
    assert store.ignored_links == {"http://p/": ["mailto:x@y.z"]}


def test_store_clear():
    store = LinkStore()
    store.record_broken("http://p/", "bad")
    store.record_intact("good")
    store.record_ignored("http://p/", "tel:1")
    store.clear()

    assert store.broken_links == {}
    assert store.ignored_links == {}
    assert store.total_links_crawled == 0


def test_store_concurrent_records_are_not_lost():
    store = LinkStore("page")
    pages = [f"http://p/{i}" for i in range(8)]

    def work(page):
        for n in range(200):
            store.record_broken(page, f"link{n}")
            store.record_intact(f"{page}-ok{n}")

    threads = [threading.Thread(target=work, args=(page,)) for page in pages]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    store.finalise()

    assert all(len(store.broken_links[page]) == 200 for page in pages)
    assert store.total_links_crawled == 200 + 8 * 200


def test_report_counts_and_json():
    report = LinkReport(
        sort="link",
        broken_links={"bad": ["http://p/1", "http://p/2"]},
        ignored_links={"tel:1": ["http://p/1"], "mailto:a@b": ["http://p/2"]},
        total_links_crawled=4,
        crawled_pages=["http://p/1", "http://p/2"],
    )
    assert report.has_broken_links
    assert report.num_broken_links() == 1
    assert report.num_ignored_links() == 2

    data = json.loads(report.json())
    assert data["sort"] == "link"
    assert data["has_broken_links"] is True
    assert data["broken_links"] == {"bad": ["http://p/1", "http://p/2"]}
    assert data["total_links_crawled"] == 4
