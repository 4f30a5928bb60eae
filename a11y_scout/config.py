"""
Модуль для загрузки и валидации конфигурации краулера A11yScout.
Используется Pydantic для описания схемы и проверки данных.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, List, Literal, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field

__all__ = ("CrawlerSettings", "load_config", "DEFAULT_BROWSER_ARGS")

WaitUntil = Literal["load", "domcontentloaded", "networkidle", "commit"]

DEFAULT_BROWSER_ARGS: List[str] = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
]


class CrawlerSettings(BaseModel):
    """Настройки браузера и значения по умолчанию для запросов на обход."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    user_agent: str = Field("A11yScout-Crawler/1.0", min_length=1, description="Заголовок User-Agent.")
    navigation_timeout: float = Field(10.0, gt=0, description="Таймаут навигации на одну страницу (секунд).")
    wait_until: WaitUntil = Field("domcontentloaded", description="Критерий готовности страницы.")
    headless: bool = Field(True, description="Запускать браузер без окна.")
    browser_args: List[str] = Field(
        default_factory=lambda: list(DEFAULT_BROWSER_ARGS), description="Аргументы запуска Chromium."
    )

    max_pages: int = Field(10, ge=1, description="Лимит страниц по умолчанию.")
    max_depth: int = Field(3, description="Глубина обхода по умолчанию.")
    same_domain_only: bool = Field(True, description="Обходить только домен стартового URL.")

    host: str = Field("127.0.0.1", min_length=1, description="Адрес HTTP-сервера.")
    port: int = Field(8080, ge=1, le=65535, description="Порт HTTP-сервера.")

    @property
    def navigation_timeout_ms(self) -> int:
        return int(self.navigation_timeout * 1000)


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


def load_config(path: Union[str, Path, None] = None) -> CrawlerSettings:
    """
    Читает YAML или JSON и возвращает проверенный объект CrawlerSettings.
    Без пути берёт configs/default.yaml, а если его нет, значения по умолчанию.
    Для явно указанного несуществующего файла бросает FileNotFoundError.
    """
    if path is None:
        if not _DEFAULT_CFG.is_file():
            return CrawlerSettings()
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

    return CrawlerSettings(**data)
