"""
Строковый сканер для парсера шаблонов.

Курсор над неизменяемой строкой: двигается только вперёд,
сопоставляя регулярные выражения в текущей позиции.
"""

from __future__ import annotations

import re
from typing import Pattern, Union

PatternLike = Union[str, Pattern[str]]


def _compile(pattern: PatternLike) -> Pattern[str]:
    return re.compile(pattern) if isinstance(pattern, str) else pattern


class Scanner:
    """
    Простой сканер, которым парсер находит теги в тексте шаблона.
    """

    def __init__(self, string: str):
        self._string = string
        self._pos = 0

    @property
    def string(self) -> str:
        return self._string

    @property
    def pos(self) -> int:
        return self._pos

    @property
    def tail(self) -> str:
        """Ещё не просканированный остаток строки."""
        return self._string[self._pos:]

    def eos(self) -> bool:
        """True, если курсор дошёл до конца строки."""
        return self._pos >= len(self._string)

    def scan(self, pattern: PatternLike) -> str:
        """
        Пытается сопоставить выражение ровно в текущей позиции.

        Возвращает совпавший текст и сдвигает курсор, либо пустую строку
        (курсор остаётся на месте).
        """
        match = _compile(pattern).match(self._string, self._pos)
        if not match:
            return ""

        value = match.group(0)
        self._pos += len(value)
        return value

    def scan_until(self, pattern: PatternLike) -> str:
        """
        Пропускает текст до первого совпадения выражения.

        Возвращает пропущенный фрагмент; если совпадения нет,
        весь остаток строки.
        """
        match = _compile(pattern).search(self._string, self._pos)
        end = match.start() if match else len(self._string)

        value = self._string[self._pos:end]
        self._pos = end
        return value


__all__ = ["Scanner"]
