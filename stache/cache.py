from __future__ import annotations

import logging
import os
from typing import Dict, Optional, Tuple

from .tokens import TokenTree

logger = logging.getLogger(__name__)

CacheKey = Tuple[str, Tuple[str, str]]


class TemplateCache:
    """
    Кэш разобранных шаблонов в памяти процесса.

    Ключ: пара (текст шаблона, пара разделителей). Записи не устаревают,
    пока кэш не очищен явно. Чтение и запись не синхронизированы:
    при использовании из нескольких потоков синхронизацию обеспечивает
    вызывающая сторона.
    """

    def __init__(self, *, enabled: Optional[bool] = None):
        env = os.environ.get("STACHE_CACHE", None)
        if enabled is not None:
            self.enabled = bool(enabled)
        elif env is not None:
            self.enabled = env.strip().lower() not in {"0", "false", "no", "off", ""}
        else:
            self.enabled = True
        self._entries: Dict[CacheKey, TokenTree] = {}

    def get(self, key: CacheKey) -> Optional[TokenTree]:
        if not self.enabled:
            return None
        return self._entries.get(key)

    def set(self, key: CacheKey, tokens: TokenTree) -> None:
        if not self.enabled:
            return
        self._entries[key] = tokens

    def clear(self) -> None:
        if self._entries:
            logger.debug("Clearing template cache (%d entries)", len(self._entries))
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries


__all__ = ["TemplateCache", "CacheKey"]
