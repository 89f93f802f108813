"""HTML-экранирование по умолчанию."""

from __future__ import annotations

import re

_ENTITY_MAP = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#39;",
    "/": "&#x2F;",
    "`": "&#x60;",
    "=": "&#x3D;",
}

_ESCAPE_RE = re.compile(r"[&<>\"'`=/]")


def escape_html(text: str) -> str:
    """Заменяет & < > " ' / ` = на HTML-сущности."""
    return _ESCAPE_RE.sub(lambda m: _ENTITY_MAP[m.group(0)], str(text))


__all__ = ["escape_html"]
