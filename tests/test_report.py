# File: tests/test_report.py
import json
from io import StringIO

import pytest

from link_scout.aggregator import LinkReport
from link_scout.report import render_html, render_json, render_text

PAGE = "http://mock-server.com/"


@pytest.fixture()
def report() -> LinkReport:
    return LinkReport(
        sort="page",
        broken_links={PAGE: ["/a", "/b", "/c", "/d", "/e"]},
        ignored_links={PAGE: ["ftp://x", "mailto:a@b", "tel:1", "tel:2"]},
        total_links_crawled=9,
        crawled_pages=[PAGE],
    )


def test_render_text_verbose(report):
    stream = StringIO()
    assert render_text(report, stream, broken_verbose=True, ignored_verbose=True)
    output = stream.getvalue()

    assert "Found 5 broken link(s) across 1 page(s):" in output
    assert f"The following broken links were found on '{PAGE}':" in output
    assert "/e" in output
    assert "Ignored 4 unsupported link(s) across 1 page(s), which you should check manually:" in output
    assert "tel:2" in output
    assert "other link(s)" not in output


def test_render_text_concise(report):
    stream = StringIO()
    render_text(report, stream, broken_verbose=False, ignored_verbose=False)
    output = stream.getvalue()

    assert "/c\n" in output
    assert "/d\n" not in output
    assert "+ 2 other link(s), remove --concise to see them all" in output
    assert "+ 1 other link(s), use --show-ignored to see them all" in output


def test_render_text_by_link():
    report = LinkReport(
        sort="link",
        broken_links={"/bad": ["http://p/1", "http://p/2"]},
        total_links_crawled=3,
    )
    stream = StringIO()
    render_text(report, stream)
    output = stream.getvalue()

    assert "Found 1 broken link(s) across 2 page(s):" in output
    assert "The broken link '/bad' was found on the following pages:" in output


def test_render_text_by_link_counts_distinct_pages():
    report = LinkReport(
        sort="link",
        broken_links={"/a": ["http://p/1", "http://p/2"], "/b": ["http://p/1"]},
        ignored_links={"tel:1": ["http://p/2"], "mailto:a@b": ["http://p/2"]},
    )
    stream = StringIO()
    render_text(report, stream)
    output = stream.getvalue()

    assert "Found 2 broken link(s) across 2 page(s):" in output
    assert "Ignored 2 unsupported link(s) across 1 page(s)" in output


def test_render_text_no_broken_links():
    stream = StringIO()
    assert not render_text(LinkReport(), stream)
    assert "Good news, there are no broken links!" in stream.getvalue()


def test_render_json(tmp_path, report):
    path = render_json(report, tmp_path / "nested" / "links.json")
    data = json.loads(path.read_text(encoding="utf-8"))

    assert data["has_broken_links"] is True
    assert path.read_text(encoding="utf-8") == report.json(pretty=True)
    assert data["broken_links"] == {PAGE: ["/a", "/b", "/c", "/d", "/e"]}
    assert data["crawled_pages"] == [PAGE]


def test_render_html(tmp_path, report):
    path = render_html(report, None, tmp_path / "links.html")
    html = path.read_text(encoding="utf-8")

    assert "LinkScout report" in html
    assert "Broken links (5)" in html
    assert "mailto:a@b" in html


def test_render_html_custom_template(tmp_path, report):
    templates = tmp_path / "templates"
    templates.mkdir()
    (templates / "report.html.j2").write_text("<p>{{ total_links_crawled }} checked</p>", encoding="utf-8")

    path = render_html(report, templates, tmp_path / "out.html")
    assert path.read_text(encoding="utf-8") == "<p>9 checked</p>"
