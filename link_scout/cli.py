# === FILE: link_scout/cli.py ===
#!/usr/bin/env python3
"""
Точка входа для запуска LinkScout через командную строку.

Команды:
  crawl URL   Найти битые ссылки на странице (или на всём сайте с --recursive)
  config      Показать текущую конфигурацию

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (значения по умолчанию, если не указан)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (stderr, если не указан)
  --log-format FORMAT Формат логирования (e.g. "%(asctime)s %(levelname)s %(message)s")

Команда crawl опции:
  --recursive, -r     Обойти весь сайт, а не одну страницу
  --sort page|link    Ключ отчёта: страница или ссылка
  --max-workers INT   Размер пула потоков при обходе сайта
  --verbose/--concise Показать все битые ссылки или только первые
  --show-ignored      Показать все игнорируемые ссылки (--hide-ignored — первые)
  --json PATH         Сохранить JSON-отчёт в файл
  --html PATH         Сохранить HTML-отчёт в файл
  --template DIR      Папка с Jinja2-шаблонами

Код выхода: 0 — битых ссылок нет, 1 — найдены битые ссылки, 2 — ошибка.

Пример:
  link-scout crawl https://example.com --recursive --json report.json
"""
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from link_scout import __version__
from link_scout.config import DEFAULT_MAX_WORKERS, SORT_MODES, FinderConfig, load_config
from link_scout.engine import start_scan
from link_scout.finder import InvalidURLError
from link_scout.logger import DEFAULT_FORMAT, init_logging
from link_scout.report.html_report import render_html
from link_scout.report.json_report import render_json
from link_scout.report.text_report import render_text

CONTEXT_SETTINGS = dict(help_option_names=["--help"])

EXIT_BROKEN_LINKS = 1
EXIT_ERROR = 2


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(EXIT_ERROR)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='LinkScout, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Путь к файлу конфигурации YAML/JSON.'
)
@click.option(
    '--log-level', 'log_level',
    default='WARNING', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Уровень логирования'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Путь к файлу логов (stderr, если не указан)'
)
@click.option(
    '--log-format', 'log_format',
    default=DEFAULT_FORMAT,
    show_default=True,
    help='Строка формата для логов'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """Группа команд LinkScout CLI."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    try:
        cfg = load_config(config_path) if config_path else FinderConfig()
    except (OSError, ValueError, TypeError) as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('crawl', context_settings=CONTEXT_SETTINGS)
@click.argument('url')
@click.option(
    '--recursive', '-r', is_flag=True,
    help='Обойти весь сайт, а не одну страницу'
)
@click.option(
    '--sort', '-s', 'sort',
    default=None,
    type=click.Choice(SORT_MODES),
    help='Ключ отчёта: страница или ссылка (override sort)'
)
@click.option(
    '--max-workers', '-w', 'max_workers',
    type=click.IntRange(min=1),
    default=None,
    help=f'Размер пула потоков (override max_workers, default {DEFAULT_MAX_WORKERS})'
)
@click.option(
    '--verbose/--concise', 'broken_verbose',
    default=None,
    help='Показать все битые ссылки или только первые'
)
@click.option(
    '--show-ignored/--hide-ignored', 'ignored_verbose', default=None,
    help='Показать все игнорируемые ссылки'
)
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить JSON-отчёт в файл'
)
@click.option(
    '--html', '-h', 'html_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить HTML-отчёт в файл'
)
@click.option(
    '--template', '-t', 'template_dir',
    default=None,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help='Папка с Jinja2-шаблонами (встроенные, если не указана)'
)
@click.pass_context
def crawl(ctx, url, recursive, sort, max_workers, broken_verbose, ignored_verbose,
          json_output, html_output, template_dir):
    """Найти битые ссылки на странице URL (или на всём сайте)."""
    overrides = {
        'sort': sort,
        'max_workers': max_workers,
        'broken_verbose': broken_verbose,
        'ignored_verbose': ignored_verbose,
    }
    try:
        cfg = FinderConfig(**{
            **ctx.obj['config'].model_dump(),
            **{k: v for k, v in overrides.items() if v is not None},
        })
    except ValidationError as e:
        print_error(f'Ошибка конфигурации: {e}')

    click.echo(f'Crawling {"site" if recursive else "page"}: {url}', err=True)
    try:
        report = start_scan(cfg, url, recursive=recursive)
    except InvalidURLError as e:
        print_error(str(e))

    render_text(
        report,
        None,
        broken_verbose=cfg.broken_verbose,
        ignored_verbose=cfg.ignored_verbose,
    )
    click.echo(
        f'Crawled {len(report.crawled_pages)} page(s), checked {report.total_links_crawled} link(s).'
    )

    # JSON-отчёт
    if json_output:
        try:
            saved_json = render_json(report, json_output)
            click.echo(f'JSON report: {saved_json}')
        except OSError as e:
            print_error(f'Ошибка при сохранении JSON: {e}')

    # HTML-отчёт
    if html_output:
        try:
            saved_html = render_html(report, template_dir, html_output)
            click.echo(f'HTML report: {saved_html}')
        except OSError as e:
            print_error(f'Ошибка при сохранении HTML: {e}')

    ctx.exit(EXIT_BROKEN_LINKS if report.has_broken_links else 0)


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Показать текущую конфигурацию в JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
