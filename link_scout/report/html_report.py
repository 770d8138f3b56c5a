# File: link_scout/report/html_report.py
"""link_scout.report.html_report: Генерация HTML-отчёта с помощью Jinja2."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Union

from jinja2 import Environment, FileSystemLoader, select_autoescape

from link_scout.aggregator import LinkReport

#: шаблоны, поставляемые вместе с пакетом
DEFAULT_TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"


def render_html(
    report: LinkReport,
    template_dir: Union[Path, str, None],
    output_path: Union[Path, str],
) -> Path:
    """Рендерит HTML-отчёт из шаблона и сохраняет его по указанному пути.

    Args:
        report: объект LinkReport.
        template_dir: директория с Jinja2-шаблонами (None — встроенные шаблоны).
        output_path: путь к итоговому HTML-файлу.

    Returns:
        Path до сохранённого HTML-файла.

    Пример:
    ```python
    from link_scout.report.html_report import render_html
    html_path = render_html(
        finder.report(),
        template_dir=None,
        output_path='reports/links.html'
    )
    ```
    """
    template_dir = Path(template_dir) if template_dir is not None else DEFAULT_TEMPLATE_DIR
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    env = Environment(
        loader=FileSystemLoader(str(template_dir)),
        autoescape=select_autoescape(["html", "xml", "j2"]),
    )
    template = env.get_template("report.html.j2")

    context: dict[str, Any] = {
        "sort": report.sort,
        "broken_links": report.broken_links,
        "ignored_links": report.ignored_links,
        "total_links_crawled": report.total_links_crawled,
        "crawled_pages": report.crawled_pages,
        "num_broken_links": report.num_broken_links(),
        "num_ignored_links": report.num_ignored_links(),
    }

    html_content = template.render(**context)
    output_path.write_text(html_content, encoding="utf-8")

    return output_path
