"""
Файловые настройки рендеринга.

YAML-файл (ruamel.yaml, safe-режим) валидируется моделью pydantic
и превращается в RenderConfig и параметры поиска партиалов.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .errors import ConfigLoadError
from .escaping import escape_html
from .parser import DEFAULT_TAGS
from .types import RenderConfig

_yaml = YAML(typ="safe")


def _no_escape(text: str) -> str:
    return text


class RenderSettings(BaseModel):
    """Настройки рендеринга, общие для CLI и встраивания."""
    model_config = ConfigDict(extra="forbid")

    tags: Tuple[str, str] = DEFAULT_TAGS
    escape: Literal["html", "none"] = "html"
    partials_dir: Optional[Path] = None
    partial_ext: str = ".mustache"
    cache: bool = True

    @field_validator("tags")
    @classmethod
    def _tags_not_empty(cls, value: Tuple[str, str]) -> Tuple[str, str]:
        if not all(value):
            raise ValueError("tags must be two non-empty strings")
        return value

    def escape_func(self):
        return escape_html if self.escape == "html" else _no_escape

    def render_config(self) -> RenderConfig:
        return RenderConfig(tags=self.tags, escape=self.escape_func())


def load_settings(path: Path) -> RenderSettings:
    """
    Загрузить файл настроек.

    • Если файла нет, это ошибка (в отличие от дефолтов без --config).
    • Относительный partials_dir считается от каталога файла настроек.
    """
    if not path.is_file():
        raise ConfigLoadError(f"Settings file not found: {path}")

    try:
        with path.open(encoding="utf-8") as f:
            raw: Dict[str, Any] = _yaml.load(f) or {}
    except YAMLError as e:
        raise ConfigLoadError(f"{path}: invalid YAML: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigLoadError(f"{path}: expected mapping at top level, got {type(raw).__name__}")

    try:
        settings = RenderSettings.model_validate(raw)
    except ValidationError as e:
        raise ConfigLoadError(f"{path}: {e}") from e

    if settings.partials_dir is not None and not settings.partials_dir.is_absolute():
        settings = settings.model_copy(update={"partials_dir": path.parent / settings.partials_dir})
    return settings


__all__ = ["RenderSettings", "load_settings"]
