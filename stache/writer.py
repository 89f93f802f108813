"""
Рендерер шаблонов.

Обходит дерево токенов в заданном контексте и собирает итоговый текст:
подстановка переменных с экранированием, секции (условие, итерация,
лямбды), инвертированные секции и партиалы с отступами.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, List, Optional

from .cache import TemplateCache
from .context import Context
from .errors import HigherOrderSectionError
from .escaping import escape_html
from .parser import DEFAULT_TAGS, TagsLike, normalize_tags, parse_template
from .tokens import PartialToken, SectionToken, Token, TokenKind, TokenTree
from .types import Partials, RenderConfig
from .values import MISSING, ValueKind, classify, is_number, to_text

logger = logging.getLogger(__name__)


class SubRender:
    """
    Колбэк повторной отрисовки для секций высшего порядка.

    Захватывает рендерер, текущий контекст, партиалы и конфигурацию;
    переданный текст проходит полный цикл parse + render.
    """

    def __init__(self, writer: Writer, context: Context, partials: Optional[Partials], config: RenderConfig):
        self.writer = writer
        self.context = context
        self.partials = partials
        self.config = config

    def __call__(self, template: str) -> str:
        return self.writer.render(template, self.context, self.partials, self.config)


class Writer:
    """
    Основной рендерер.

    Владеет кэшем разобранных шаблонов; кэш можно отключить,
    присвоив template_cache = None.
    """

    def __init__(self, template_cache: Optional[TemplateCache] = None, *, cache_enabled: bool = True):
        if template_cache is None and cache_enabled:
            template_cache = TemplateCache()
        self._template_cache: Optional[TemplateCache] = template_cache

    @property
    def template_cache(self) -> Optional[TemplateCache]:
        return self._template_cache

    @template_cache.setter
    def template_cache(self, cache: Optional[TemplateCache]) -> None:
        self._template_cache = cache

    def clear_cache(self) -> None:
        if self._template_cache is not None:
            self._template_cache.clear()

    def parse(self, template: str, tags: Optional[TagsLike] = None) -> TokenTree:
        """
        Разбирает шаблон с кэшированием по ключу (шаблон, разделители).

        Raises:
            TemplateSyntaxError: При ошибке синтаксического анализа
        """
        resolved = normalize_tags(tags) if tags is not None else DEFAULT_TAGS
        cache = self._template_cache
        key = (template, resolved)

        tokens = cache.get(key) if cache is not None else None
        if tokens is not None:
            logger.debug("Template cache hit (%d chars)", len(template))
            return tokens

        tokens = parse_template(template, resolved)
        if cache is not None:
            cache.set(key, tokens)
        return tokens

    def render(
        self,
        template: str,
        view: Any,
        partials: Optional[Partials] = None,
        config: Any = None,
    ) -> str:
        """
        Отрисовывает шаблон с данными view.

        Args:
            template: Текст шаблона
            view: Данные представления или готовый Context
            partials: Отображение имя -> текст либо функция поиска по имени
            config: RenderConfig, отображение, пара разделителей или None

        Returns:
            Отрисованный текст
        """
        render_config = RenderConfig.coerce(config)
        tokens = self.parse(template, render_config.resolved_tags)
        context = view if isinstance(view, Context) else Context(view)
        return self.render_tokens(tokens, context, partials, template, render_config)

    def render_tokens(
        self,
        tokens: TokenTree,
        context: Context,
        partials: Optional[Partials] = None,
        original_template: Optional[str] = None,
        config: Any = None,
    ) -> str:
        """
        Низкоуровневая отрисовка готового дерева токенов.

        original_template нужен только для секций высшего порядка:
        из него вырезается сырое тело секции.
        """
        render_config = RenderConfig.coerce(config)
        result_parts: List[str] = []

        for token in tokens:
            value = self._render_token(token, context, partials, original_template, render_config)
            if value is not None:
                result_parts.append(value)

        return "".join(result_parts)

    # ======= Обработка отдельных токенов =======

    def _render_token(
        self,
        token: Token,
        context: Context,
        partials: Optional[Partials],
        original_template: Optional[str],
        config: RenderConfig,
    ) -> Optional[str]:
        kind = token.kind
        if kind is TokenKind.SECTION:
            return self._render_section(token, context, partials, original_template, config)
        elif kind is TokenKind.INVERTED:
            return self._render_inverted(token, context, partials, original_template, config)
        elif kind is TokenKind.PARTIAL:
            return self._render_partial(token, context, partials, config)
        elif kind is TokenKind.UNESCAPED:
            return self._unescaped_value(token, context)
        elif kind is TokenKind.NAME:
            return self._escaped_value(token, context, config)
        elif kind is TokenKind.TEXT:
            return token.value
        elif kind in (TokenKind.COMMENT, TokenKind.SET_DELIMITERS, TokenKind.CLOSE):
            return None
        raise ValueError(f"Unknown token kind: {kind!r}")

    def _render_section(
        self,
        token: Token,
        context: Context,
        partials: Optional[Partials],
        original_template: Optional[str],
        config: RenderConfig,
    ) -> Optional[str]:
        assert isinstance(token, SectionToken)
        value = context.lookup(token.value)
        if not value:
            return None

        kind = classify(value)
        if kind is ValueKind.LIST:
            return "".join(
                self.render_tokens(token.children, context.push(item), partials, original_template, config)
                for item in value
            )

        if kind in (ValueKind.SECTION_LAMBDA, ValueKind.ACCESSOR):
            if original_template is None:
                raise HigherOrderSectionError(
                    "Cannot use higher-order sections without the original template"
                )
            # Сырое тело секции из исходного шаблона
            body = original_template[token.end:token.section_end]
            result = value(body, SubRender(self, context, partials, config))
            return to_text(result) if result is not None else None

        if kind in (ValueKind.OBJECT, ValueKind.STRING, ValueKind.NUMBER):
            return self.render_tokens(token.children, context.push(value), partials, original_template, config)

        # Прочие истинные значения (True): тот же контекст
        return self.render_tokens(token.children, context, partials, original_template, config)

    def _render_inverted(
        self,
        token: Token,
        context: Context,
        partials: Optional[Partials],
        original_template: Optional[str],
        config: RenderConfig,
    ) -> Optional[str]:
        assert isinstance(token, SectionToken)
        value = context.lookup(token.value)
        if not value:
            return self.render_tokens(token.children, context, partials, original_template, config)
        return None

    @staticmethod
    def indent_partial(partial: str, indentation: str, line_has_non_space: bool) -> str:
        """
        Добавляет отступ к каждой непустой строке партиала.

        Первая строка получает отступ, только если до тега в строке
        не было непробельного текста.
        """
        filtered = "".join(ch for ch in indentation if ch in " \t")
        lines = partial.split("\n")
        for i, line in enumerate(lines):
            if line and (i > 0 or not line_has_non_space):
                lines[i] = filtered + line
        return "\n".join(lines)

    def _resolve_partial(self, name: str, partials: Partials, config: RenderConfig) -> Optional[str]:
        if isinstance(partials, Mapping):
            value = partials.get(name)
            if not value:
                # Совместимость: ключ с закрывающим разделителем
                value = partials.get(name + config.resolved_tags[1])
            return value
        return partials(name)

    def _render_partial(
        self,
        token: Token,
        context: Context,
        partials: Optional[Partials],
        config: RenderConfig,
    ) -> Optional[str]:
        assert isinstance(token, PartialToken)
        if not partials:
            return None

        value = self._resolve_partial(token.value, partials, config)
        if value is None:
            logger.debug("Partial %r not found", token.value)
            return None

        indented = value
        if token.tag_index == 0 and token.indentation:
            indented = self.indent_partial(value, token.indentation, token.line_has_non_space)

        tokens = self.parse(indented, config.resolved_tags)
        return self.render_tokens(tokens, context, partials, indented, config)

    def _unescaped_value(self, token: Token, context: Context) -> Optional[str]:
        value = context.lookup(token.value)
        if value is None or value is MISSING:
            return None
        return to_text(value)

    def _escaped_value(self, token: Token, context: Context, config: RenderConfig) -> Optional[str]:
        escape = config.escape or escape_html
        value = context.lookup(token.value)
        if value is None or value is MISSING:
            return None
        # Числа не экранируются только стандартным экранированием
        if escape is escape_html and is_number(value):
            return to_text(value)
        return escape(to_text(value))


__all__ = ["Writer", "SubRender"]
