"""
Движок шаблонов Mustache.

Сканер, парсер тегов в дерево токенов и рендерер, обходящий дерево
в цепочке контекстов представления.
"""

from __future__ import annotations

from .cache import TemplateCache
from .context import Context
from .engine import Mustache, clear_cache, mustache, parse, render
from .errors import (
    ConfigLoadError,
    HigherOrderSectionError,
    MustacheError,
    TemplateSyntaxError,
    TemplateTypeError,
)
from .escaping import escape_html
from .parser import DEFAULT_TAGS
from .tokens import PartialToken, SectionToken, Token, TokenKind
from .types import RenderConfig
from .values import MISSING, Accessor, SectionLambda, accessor, section_lambda
from .writer import Writer

__all__ = [
    # Основной API
    "Mustache",
    "mustache",
    "render",
    "parse",
    "clear_cache",
    "RenderConfig",
    "DEFAULT_TAGS",
    "escape_html",

    # Компоненты
    "Writer",
    "Context",
    "TemplateCache",
    "Token",
    "TokenKind",
    "SectionToken",
    "PartialToken",

    # Значения представления
    "MISSING",
    "Accessor",
    "SectionLambda",
    "accessor",
    "section_lambda",

    # Исключения
    "MustacheError",
    "TemplateSyntaxError",
    "TemplateTypeError",
    "HigherOrderSectionError",
    "ConfigLoadError",
]
