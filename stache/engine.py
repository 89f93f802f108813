"""
Фасад движка шаблонов.

Хранит конфигурацию по умолчанию (разделители, экранирование) и
экземпляр Writer с кэшем разобранных шаблонов.
"""

from __future__ import annotations

from typing import Any, List, Optional

from .cache import TemplateCache
from .escaping import escape_html
from .parser import DEFAULT_TAGS, TagsLike
from .tokens import TokenTree
from .errors import TemplateTypeError
from .types import EscapeFunc, Partials, RenderConfig
from .version import tool_version
from .writer import Writer


def _type_name(obj: Any) -> str:
    if isinstance(obj, (list, tuple)):
        return "array"
    return type(obj).__name__


class Mustache:
    """
    Точка входа движка.

    tags и escape задают значения по умолчанию для render/parse;
    конфигурация конкретного вызова их не меняет.
    """

    name = "stache"

    def __init__(self, writer: Optional[Writer] = None):
        self.tags: List[str] = list(DEFAULT_TAGS)
        self.escape: EscapeFunc = escape_html
        self.writer = writer if writer is not None else Writer()

    @property
    def version(self) -> str:
        return tool_version()

    @property
    def template_cache(self) -> Optional[TemplateCache]:
        return self.writer.template_cache

    @template_cache.setter
    def template_cache(self, cache: Optional[TemplateCache]) -> None:
        self.writer.template_cache = cache

    def clear_cache(self) -> None:
        """Очищает кэш разобранных шаблонов (при отключенном кэше ничего не делает)."""
        self.writer.clear_cache()

    def parse(self, template: str, tags: Optional[TagsLike] = None) -> TokenTree:
        """Разбирает шаблон (с кэшированием) и возвращает дерево токенов."""
        return self.writer.parse(template, tags if tags is not None else self.tags)

    def render(
        self,
        template: str,
        view: Any = None,
        partials: Optional[Partials] = None,
        config: Any = None,
    ) -> str:
        """
        Отрисовывает шаблон.

        Args:
            template: Текст шаблона
            view: Данные представления
            partials: Отображение имя -> текст либо функция поиска
            config: Пара разделителей, RenderConfig или отображение
                с ключами tags / escape

        Raises:
            TemplateTypeError: Если template не строка
            TemplateSyntaxError: При ошибке разбора шаблона
        """
        if not isinstance(template, str):
            raise TemplateTypeError(
                'Invalid template! Template should be a "string" '
                f'but "{_type_name(template)}" was given as the first '
                "argument for mustache#render(template, view, partials)"
            )
        render_config = RenderConfig.coerce(config).with_defaults(self.tags, self.escape)
        return self.writer.render(template, view, partials, render_config)


# Экземпляр по умолчанию
mustache = Mustache()


def render(template: str, view: Any = None, partials: Optional[Partials] = None, config: Any = None) -> str:
    return mustache.render(template, view, partials, config)


def parse(template: str, tags: Optional[TagsLike] = None) -> TokenTree:
    return mustache.parse(template, tags)


def clear_cache() -> None:
    mustache.clear_cache()


__all__ = ["Mustache", "mustache", "render", "parse", "clear_cache"]
