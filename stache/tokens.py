"""
Лексические типы.

Токены шаблона как размеченное объединение: вид токена задаётся
перечислением TokenKind, секции и партиалы несут дополнительные поля.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Dict, List


class TokenKind(enum.Enum):
    """Виды токенов. Значения совпадают с сигилами тегов."""
    TEXT = "text"
    NAME = "name"
    UNESCAPED = "&"
    SECTION = "#"
    INVERTED = "^"
    CLOSE = "/"
    PARTIAL = ">"
    COMMENT = "!"
    SET_DELIMITERS = "="


# Виды, открывающие блок с телом
BLOCK_KINDS = frozenset({TokenKind.SECTION, TokenKind.INVERTED})

# Виды, которые не попадают в дерево для рендеринга
SILENT_KINDS = frozenset({TokenKind.COMMENT, TokenKind.SET_DELIMITERS})


@dataclass
class Token:
    """
    Токен с позицией в исходном шаблоне.

    start включительно, end исключительно.
    """
    kind: TokenKind
    value: str
    start: int
    end: int

    def as_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "value": self.value,
            "start": self.start,
            "end": self.end,
        }


@dataclass
class SectionToken(Token):
    """
    Секция {{#x}} или инвертированная секция {{^x}}.

    children: тело блока; section_end: смещение, с которого
    начинается закрывающий тег.
    """
    children: List[Token] = field(default_factory=list)
    section_end: int = -1

    def as_dict(self) -> Dict[str, Any]:
        data = super().as_dict()
        data["children"] = [child.as_dict() for child in self.children]
        data["sectionEnd"] = self.section_end
        return data


@dataclass
class PartialToken(Token):
    """
    Партиал {{> name}}.

    indentation: отступ перед тегом в его строке;
    tag_index: сколько тегов было в строке до этого;
    line_has_non_space: был ли в строке непробельный текст до тега.
    """
    indentation: str = ""
    tag_index: int = 0
    line_has_non_space: bool = False

    def as_dict(self) -> Dict[str, Any]:
        data = super().as_dict()
        data["indentation"] = self.indentation
        data["tagIndex"] = self.tag_index
        data["lineHasNonSpace"] = self.line_has_non_space
        return data


# Алиас для дерева токенов
TokenTree = List[Token]


def format_tokens(tokens: TokenTree, indent: int = 0) -> str:
    """
    Форматирует дерево токенов для отладки.

    Args:
        tokens: Список токенов (возможно вложенных)
        indent: Начальный уровень отступа

    Returns:
        Многострочное текстовое представление дерева
    """
    lines: List[str] = []
    prefix = "  " * indent
    for token in tokens:
        lines.append(f"{prefix}{token.kind.name} {token.value!r} [{token.start}:{token.end}]")
        if isinstance(token, SectionToken) and token.children:
            lines.append(format_tokens(token.children, indent + 1))
    return "\n".join(lines)


__all__ = [
    "TokenKind",
    "BLOCK_KINDS",
    "SILENT_KINDS",
    "Token",
    "SectionToken",
    "PartialToken",
    "TokenTree",
    "format_tokens",
]
