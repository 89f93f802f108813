"""
Контекст рендеринга.

Цепочка фреймов представления: каждый фрейм оборачивает одно значение
и ссылку на родителя, а поиск имени поднимается по цепочке до корня.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from .values import (
    MISSING, Accessor, ValueKind, classify, get_property, has_property, primitive_has_property
)


class Context:
    """
    Фрейм контекста рендеринга.

    Фрейм не изменяется после создания, кроме собственного кэша
    результатов поиска (включая промахи).
    """

    def __init__(self, view: Any, parent: Optional[Context] = None):
        self._view = view
        self._parent = parent
        self._cache: Dict[str, Any] = {".": view}

    @property
    def view(self) -> Any:
        return self._view

    @property
    def parent(self) -> Optional[Context]:
        return self._parent

    def push(self, view: Any) -> Context:
        """Создаёт дочерний фрейм с этим фреймом в роли родителя."""
        return Context(view, self)

    def lookup(self, name: str) -> Any:
        """
        Возвращает значение имени, поднимаясь по цепочке фреймов.

        Имена с точкой разбираются как путь. Если значение не найдено
        ни в одном фрейме, возвращает MISSING. Accessor вызывается
        с view этого фрейма, обычная функция вызывается без аргументов.
        Функцию (text, render) для секции высшего порядка нужно обернуть
        в section_lambda, иначе вызов без аргументов даст TypeError.
        """
        if name in self._cache:
            value = self._cache[name]
        else:
            value = MISSING
            context: Optional[Context] = self
            while context is not None:
                hit, found = context._resolve(name)
                if hit:
                    value = found
                    break
                context = context.parent
            self._cache[name] = value

        kind = classify(value)
        if kind is ValueKind.ACCESSOR:
            if isinstance(value, Accessor):
                return value.resolve(self._view)
            return value()
        return value

    def _resolve(self, name: str) -> tuple[bool, Any]:
        """Пытается найти имя только в view этого фрейма."""
        if name.find(".") > 0:
            names = name.split(".")
            value = self._view
            hit = False
            index = 0
            # Промежуточные значения могут быть и примитивами, но попадание
            # определяется наличием последнего свойства
            while value is not None and index < len(names):
                segment = names[index]
                if index == len(names) - 1:
                    hit = has_property(value, segment) or primitive_has_property(value, segment)
                value = get_property(value, segment)
                index += 1
            return hit, value

        # Без точки примитивы не совпадают никогда
        return has_property(self._view, name), get_property(self._view, name)


__all__ = ["Context"]
