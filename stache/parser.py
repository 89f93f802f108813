"""
Парсер шаблонов Mustache.

Разбивает текст шаблона на плоский список токенов при помощи Scanner,
вычищает пробельный текст вокруг «одиночных» тегов, склеивает соседние
текстовые токены и сворачивает результат в дерево секций.
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Pattern, Sequence, Set, Tuple, Union

from .errors import TemplateSyntaxError
from .scanner import Scanner
from .tokens import (
    BLOCK_KINDS, SILENT_KINDS, PartialToken, SectionToken, Token, TokenKind, TokenTree
)

logger = logging.getLogger(__name__)

Tags = Tuple[str, str]
TagsLike = Union[str, Sequence[str]]

DEFAULT_TAGS: Tags = ("{{", "}}")

_WHITE_RE = re.compile(r"\s*")
_SPACE_RE = re.compile(r"\s+")
_EQUALS_RE = re.compile(r"\s*=")
_CURLY_RE = re.compile(r"\s*\}")
_TAG_RE = re.compile(r"#|\^|/|>|\{|&|=|!")
_NON_SPACE_RE = re.compile(r"\S")


def normalize_tags(tags: TagsLike, template: Optional[str] = None, position: int = 0) -> Tags:
    """
    Приводит пару разделителей к кортежу (open, close).

    Строка делится по пробельным символам, берутся первые две части.

    Raises:
        TemplateSyntaxError: Если пара некорректна
    """
    parts = _SPACE_RE.split(tags)[:2] if isinstance(tags, str) else tags
    if (
        not isinstance(parts, (list, tuple))
        or len(parts) != 2
        or not all(isinstance(part, str) and part for part in parts)
    ):
        raise TemplateSyntaxError(f"Invalid tags: {tags!r}", position, template)
    return parts[0], parts[1]


def compile_tags(
    tags: TagsLike, template: Optional[str] = None, position: int = 0
) -> Tuple[Pattern[str], Pattern[str], Pattern[str]]:
    """Строит выражения для открывающего, закрывающего и «}+закрывающего» разделителей."""
    opening, closing = normalize_tags(tags, template, position)
    return (
        re.compile(re.escape(opening) + r"\s*"),
        re.compile(r"\s*" + re.escape(closing)),
        re.compile(r"\s*" + re.escape("}" + closing)),
    )


class TemplateTokenizer:
    """
    Токенизатор шаблона.

    Текст между тегами разбивается на токены по одному символу, чтобы
    можно было построчно отслеживать пробельные позиции. Индексы
    пробельных токенов строк, где есть только блочный/партиал/комментарий
    тег, собираются в stripped.
    """

    def __init__(self, template: str, tags: TagsLike = DEFAULT_TAGS):
        self.template = template
        self.tags = tags
        self.stripped: Set[int] = set()

    def tokenize(self) -> List[Token]:
        """
        Возвращает плоский список токенов (до вычистки пробелов и склейки).

        Raises:
            TemplateSyntaxError: При незакрытом теге, несбалансированных
                секциях или неверных разделителях
        """
        template = self.template
        tokens: List[Token] = []
        sections: List[Token] = []          # стек открытых секций
        self.stripped = set()

        spaces: List[int] = []              # индексы пробельных токенов текущей строки
        has_tag = False                     # есть ли тег в текущей строке
        non_space = False                   # есть ли непробельный символ в текущей строке
        line_has_non_space = False
        indentation = ""
        tag_index = 0

        def strip_space() -> None:
            nonlocal spaces, has_tag, non_space
            if has_tag and not non_space:
                self.stripped.update(spaces)
            spaces = []
            has_tag = False
            non_space = False

        opening_re, closing_re, closing_curly_re = compile_tags(self.tags, template)
        scanner = Scanner(template)

        while not scanner.eos():
            start = scanner.pos

            # Текст до ближайшего тега
            value = scanner.scan_until(opening_re)
            for char in value:
                if _NON_SPACE_RE.search(char):
                    non_space = True
                    line_has_non_space = True
                    indentation += " "
                else:
                    spaces.append(len(tokens))
                    indentation += char

                tokens.append(Token(TokenKind.TEXT, char, start, start + 1))
                start += 1

                if char == "\n":
                    strip_space()
                    indentation = ""
                    tag_index = 0
                    line_has_non_space = False

            if not scanner.scan(opening_re):
                break

            has_tag = True

            sigil = scanner.scan(_TAG_RE) or "name"
            scanner.scan(_WHITE_RE)

            if sigil == "=":
                value = scanner.scan_until(_EQUALS_RE)
                scanner.scan(_EQUALS_RE)
                scanner.scan_until(closing_re)
            elif sigil == "{":
                value = scanner.scan_until(closing_curly_re)
                scanner.scan(_CURLY_RE)
                scanner.scan_until(closing_re)
                sigil = "&"
            else:
                value = scanner.scan_until(closing_re)

            if not scanner.scan(closing_re):
                raise TemplateSyntaxError("Unclosed tag", scanner.pos, template)

            kind = TokenKind(sigil)
            token: Token
            if kind is TokenKind.PARTIAL:
                token = PartialToken(
                    kind, value, start, scanner.pos,
                    indentation=indentation,
                    tag_index=tag_index,
                    line_has_non_space=line_has_non_space,
                )
            elif kind in BLOCK_KINDS:
                token = SectionToken(kind, value, start, scanner.pos)
            else:
                token = Token(kind, value, start, scanner.pos)
            tag_index += 1
            tokens.append(token)

            if kind in BLOCK_KINDS:
                sections.append(token)
            elif kind is TokenKind.CLOSE:
                if not sections:
                    raise TemplateSyntaxError(f'Unopened section "{value}"', start, template)
                open_section = sections.pop()
                if open_section.value != value:
                    raise TemplateSyntaxError(
                        f'Unclosed section "{open_section.value}"', start, template
                    )
            elif kind in (TokenKind.NAME, TokenKind.UNESCAPED):
                non_space = True
            elif kind is TokenKind.SET_DELIMITERS:
                opening_re, closing_re, closing_curly_re = compile_tags(value, template, start)

        strip_space()

        if sections:
            raise TemplateSyntaxError(
                f'Unclosed section "{sections[-1].value}"', scanner.pos, template
            )

        return tokens


def squash_tokens(tokens: List[Token]) -> List[Token]:
    """Склеивает подряд идущие текстовые токены в один."""
    squashed: List[Token] = []
    last: Optional[Token] = None

    for token in tokens:
        if token.kind is TokenKind.TEXT and last is not None and last.kind is TokenKind.TEXT:
            last.value += token.value
            last.end = token.end
        else:
            squashed.append(token)
            last = token

    return squashed


def nest_tokens(tokens: List[Token]) -> TokenTree:
    """
    Сворачивает плоский список в дерево.

    Тело каждой секции попадает в её children, смещение закрывающего
    тега в section_end. Комментарии и смена разделителей отбрасываются.
    """
    nested: TokenTree = []
    collector = nested
    sections: List[SectionToken] = []

    for token in tokens:
        if isinstance(token, SectionToken):
            collector.append(token)
            sections.append(token)
            token.children = []
            collector = token.children
        elif token.kind is TokenKind.CLOSE:
            section = sections.pop()
            section.section_end = token.start
            collector = sections[-1].children if sections else nested
        elif token.kind in SILENT_KINDS:
            continue
        else:
            collector.append(token)

    return nested


def tokenize_template(template: str, tags: TagsLike = DEFAULT_TAGS) -> List[Token]:
    """
    Удобная функция для плоской токенизации.

    Склеенные смещения всех токенов покрывают шаблон целиком.
    """
    if not template:
        return []
    return TemplateTokenizer(template, tags).tokenize()


def parse_template(template: str, tags: TagsLike = DEFAULT_TAGS) -> TokenTree:
    """
    Разбирает шаблон в дерево токенов.

    Args:
        template: Исходный текст шаблона
        tags: Пара разделителей (open, close)

    Returns:
        Дерево токенов верхнего уровня

    Raises:
        TemplateSyntaxError: При ошибке синтаксического анализа
    """
    if not template:
        return []

    tokenizer = TemplateTokenizer(template, tags)
    tokens = tokenizer.tokenize()
    kept = [token for i, token in enumerate(tokens) if i not in tokenizer.stripped]
    tree = nest_tokens(squash_tokens(kept))

    logger.debug("Parsed template (%d chars) -> %d tokens", len(template), len(tree))
    return tree


__all__ = [
    "Tags",
    "TagsLike",
    "DEFAULT_TAGS",
    "normalize_tags",
    "compile_tags",
    "TemplateTokenizer",
    "squash_tokens",
    "nest_tokens",
    "tokenize_template",
    "parse_template",
]
