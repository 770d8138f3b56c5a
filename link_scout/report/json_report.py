# link_scout/report/json_report.py

"""
Генерация JSON-отчёта для проекта LinkScout.

Сериализация объекта LinkReport в файл.
"""
from pathlib import Path

from link_scout.aggregator import LinkReport


def render_json(report: LinkReport, output_path: Path | str) -> Path:
    """
    Сохраняет отчёт report в формате JSON по указанному пути.

    :param report: объект LinkReport с результатами проверки
    :param output_path: путь к JSON-файлу
    :return: Path сохранённого файла

    Пример:
    ```python
    from link_scout.report.json_report import render_json
    report_path = render_json(finder.report(), 'reports/links.json')
    print(f"JSON report saved to: {report_path}")
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    output.write_text(report.json(pretty=True), encoding="utf-8")

    return output
