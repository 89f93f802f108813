"""
Базовые исключения движка шаблонов.

Все ожидаемые ошибки, которые должны показываться пользователю
чистым сообщением (без трейсбека), наследуются от MustacheError.

Ошибки программирования и баги НЕ должны наследоваться от MustacheError.
Они пробрасываются с полным трейсбеком.
"""

from __future__ import annotations

from typing import Optional


class MustacheError(Exception):
    """
    Базовый класс для всех пользовательских ошибок движка.

    Сигнализирует о проблемах, которые пользователь может исправить:
    синтаксис шаблона, неверные разделители, битые файлы настроек и т.п.
    """
    pass


def _line_column(template: str, position: int) -> tuple[int, int]:
    """Переводит смещение в шаблоне в пару (строка, колонка), обе с 1."""
    head = template[:position]
    line = head.count("\n") + 1
    column = position - (head.rfind("\n") + 1) + 1
    return line, column


class TemplateSyntaxError(MustacheError):
    """Ошибка синтаксического анализа шаблона."""

    def __init__(self, message: str, position: int, template: Optional[str] = None):
        if template is not None:
            line, column = _line_column(template, position)
        else:
            line, column = 1, position + 1
        super().__init__(f"{message} at {line}:{column}")
        self.reason = message
        self.position = position
        self.line = line
        self.column = column


class TemplateTypeError(MustacheError, TypeError):
    """Шаблон передан не строкой."""
    pass


class HigherOrderSectionError(MustacheError, RuntimeError):
    """Лямбда-секция отрисовывается без исходного текста шаблона."""
    pass


class ConfigLoadError(MustacheError, ValueError):
    """Ошибка загрузки настроек или данных представления с указанием источника."""
    pass


__all__ = [
    "MustacheError",
    "TemplateSyntaxError",
    "TemplateTypeError",
    "HigherOrderSectionError",
    "ConfigLoadError",
]
