from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any, Callable, Optional, Sequence, Union

from .parser import DEFAULT_TAGS, Tags, TagsLike, normalize_tags

EscapeFunc = Callable[[str], str]
PartialsLookup = Callable[[str], Optional[str]]
Partials = Union[Mapping, PartialsLookup]


@dataclass(frozen=True)
class RenderConfig:
    """
    Настройки одного вызова render.

    Незаданные поля (None) заменяются значениями по умолчанию:
    разделители {{ }} и HTML-экранирование.
    """
    tags: Optional[Tags] = None
    escape: Optional[EscapeFunc] = None

    @classmethod
    def coerce(cls, config: Any) -> RenderConfig:
        """
        Принимает конфигурацию в любой из допустимых форм.

        - None: всё по умолчанию
        - RenderConfig: как есть
        - отображение с ключами tags / escape
        - пара разделителей (последовательность или строка "<% %>")
        """
        if config is None:
            return cls()
        if isinstance(config, RenderConfig):
            return config
        if isinstance(config, Mapping):
            tags = config.get("tags")
            return cls(
                tags=normalize_tags(tags) if tags is not None else None,
                escape=config.get("escape"),
            )
        if isinstance(config, (str, Sequence)):
            return cls(tags=normalize_tags(config))
        raise TypeError(f"Unsupported render config: {type(config).__name__}")

    def with_defaults(self, tags: TagsLike, escape: EscapeFunc) -> RenderConfig:
        """Заполняет незаданные поля переданными значениями."""
        return replace(
            self,
            tags=self.tags if self.tags is not None else normalize_tags(tags),
            escape=self.escape if self.escape is not None else escape,
        )

    @property
    def resolved_tags(self) -> Tags:
        return self.tags if self.tags is not None else DEFAULT_TAGS


__all__ = ["EscapeFunc", "PartialsLookup", "Partials", "RenderConfig"]
