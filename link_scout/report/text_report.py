# File: link_scout/report/text_report.py
"""link_scout.report.text_report: Человекочитаемый отчёт о битых и игнорируемых ссылках."""

from __future__ import annotations

from typing import List, Optional, TextIO

import click

from link_scout.aggregator import LinkMap, LinkReport, transpose_links

#: сколько значений на ключ выводится в сжатом режиме
CONCISE_LIMIT = 3


def _num_pages(report: LinkReport, links: LinkMap) -> int:
    if report.sort == "page":
        return len(links)
    return len(transpose_links(links))


def _section(stream: Optional[TextIO], heading: str, values: List[str], verbose: bool, hint: str, noun: str) -> None:
    click.echo(heading, file=stream)
    shown = values if verbose else values[:CONCISE_LIMIT]
    for value in shown:
        click.echo(value, file=stream)
    hidden = len(values) - len(shown)
    if hidden:
        click.echo(f"+ {hidden} other {noun}(s), {hint}", file=stream)
    click.echo("", file=stream)


def render_text(
    report: LinkReport,
    stream: Optional[TextIO] = None,
    *,
    broken_verbose: bool = True,
    ignored_verbose: bool = False,
) -> bool:
    """
    Печатает отчёт в поток (файл и т.п.; None — stdout).

    :return: True, если найдены битые ссылки
    """
    by_page = report.sort == "page"
    noun = "link" if by_page else "page"

    if not report.broken_links:
        click.echo("Good news, there are no broken links!", file=stream)
        click.echo("", file=stream)
    else:
        click.echo(
            f"Found {report.num_broken_links()} broken link(s) across "
            f"{_num_pages(report, report.broken_links)} page(s):",
            file=stream,
        )
        click.echo("", file=stream)
        for key, values in report.broken_links.items():
            heading = (
                f"The following broken links were found on '{key}':"
                if by_page
                else f"The broken link '{key}' was found on the following pages:"
            )
            _section(stream, heading, values, broken_verbose, "remove --concise to see them all", noun)

    if report.ignored_links:
        click.echo(
            f"Ignored {report.num_ignored_links()} unsupported link(s) across "
            f"{_num_pages(report, report.ignored_links)} page(s), which you should check manually:",
            file=stream,
        )
        click.echo("", file=stream)
        for key, values in report.ignored_links.items():
            heading = (
                f"The following links were ignored on '{key}':"
                if by_page
                else f"The link '{key}' was ignored on the following pages:"
            )
            _section(stream, heading, values, ignored_verbose, "use --show-ignored to see them all", noun)

    return report.has_broken_links
