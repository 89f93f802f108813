"""
Загрузка данных представления и партиалов с диска.

Используется CLI; сам движок работает только со строками и
синхронными функциями поиска.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .errors import ConfigLoadError

logger = logging.getLogger(__name__)

_yaml = YAML(typ="safe")

_YAML_SUFFIXES = {".yaml", ".yml"}


def parse_view_text(text: str, fmt: str = "json", source: str = "<view>") -> Any:
    """
    Разбирает текст данных представления.

    Args:
        text: JSON или YAML
        fmt: "json" или "yaml"
        source: Имя источника для сообщений об ошибках
    """
    try:
        if fmt == "yaml":
            return _yaml.load(text)
        return json.loads(text)
    except (ValueError, YAMLError) as e:
        raise ConfigLoadError(f"{source}: cannot parse {fmt} view: {e}") from e


def load_view(path: Path) -> Any:
    """Загружает данные представления; формат определяется по расширению."""
    if not path.is_file():
        raise ConfigLoadError(f"View file not found: {path}")
    fmt = "yaml" if path.suffix.lower() in _YAML_SUFFIXES else "json"
    return parse_view_text(path.read_text(encoding="utf-8"), fmt, str(path))


class FilePartials:
    """
    Поиск партиалов: сначала явно заданные тексты, затем файлы
    <directory>/<name><extension>.

    Прочитанные файлы запоминаются на время жизни объекта.
    """

    def __init__(
        self,
        directory: Optional[Path] = None,
        extension: str = ".mustache",
        overrides: Optional[Mapping[str, str]] = None,
    ):
        self.directory = directory
        self.extension = extension
        self._loaded: Dict[str, Optional[str]] = dict(overrides or {})

    def __call__(self, name: str) -> Optional[str]:
        if name in self._loaded:
            return self._loaded[name]

        text: Optional[str] = None
        if self.directory is not None:
            path = self.directory / f"{name}{self.extension}"
            if path.is_file():
                text = path.read_text(encoding="utf-8")
            else:
                logger.debug("Partial file not found: %s", path)
        self._loaded[name] = text
        return text


__all__ = ["parse_view_text", "load_view", "FilePartials"]
