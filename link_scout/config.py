"""
Модуль для загрузки и валидации конфигурации LinkScout.
Используется Pydantic для описания схемы и проверки данных.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Final, Literal, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field

DEFAULT_MAX_WORKERS: Final[int] = 100
DEFAULT_USER_AGENT: Final[str] = "LinkScoutBot/1.0"
SORT_MODES: Final[tuple[str, ...]] = ("page", "link")

SortMode = Literal["page", "link"]


class FinderConfig(BaseModel):
    """Конфигурация одного запуска поиска битых ссылок."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    sort: SortMode = Field("page", description="Ключ отчёта: страница или ссылка.")
    max_workers: int = Field(DEFAULT_MAX_WORKERS, ge=1, description="Размер пула потоков при обходе сайта.")
    timeout: float = Field(10.0, gt=0, description="Таймаут на один запрос (секунд).")
    user_agent: str = Field(DEFAULT_USER_AGENT, min_length=1, description="Заголовок User-Agent.")
    broken_verbose: bool = Field(True, description="Показывать все битые ссылки в отчёте.")
    ignored_verbose: bool = Field(False, description="Показывать все игнорируемые ссылки в отчёте.")


_DEFAULT_CFG = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Неправильный YAML в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень YAML должен быть mapping, получено {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Неправильный JSON в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень JSON должен быть mapping, получено {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None]) -> FinderConfig:
    """
    Читает YAML или JSON и возвращает проверенный объект FinderConfig.
    При отсутствии файла конфига бросает FileNotFoundError.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(_DEFAULT_CFG))
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Неподдерживаемый формат конфига: {suffix}")

    return FinderConfig(**data)


__all__ = [
    "DEFAULT_MAX_WORKERS",
    "DEFAULT_USER_AGENT",
    "SORT_MODES",
    "FinderConfig",
    "SortMode",
    "load_config",
]
