"""
Классификация значений представления.

Явно описывает, чем может быть значение, найденное в контексте:
скаляр, список, объект, аксессор или лямбда-секция. Здесь же
правила чтения свойств у отображений, списков и произвольных объектов.
"""

from __future__ import annotations

import enum
import numbers
from collections.abc import Mapping, Sequence
from typing import Any, Callable


class _Missing:
    """Маркер «значение не найдено» (в отличие от найденного None)."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


class Accessor:
    """
    Вычисляемое свойство представления.

    Оборачивает функцию одного аргумента: при поиске она вызывается
    с view того фрейма, из которого выполнялся поиск.
    """

    def __init__(self, func: Callable[[Any], Any]):
        self.func = func

    def resolve(self, view: Any) -> Any:
        return self.func(view)

    def __repr__(self) -> str:
        return f"Accessor({self.func!r})"


class SectionLambda:
    """
    Лямбда для секции высшего порядка.

    Функция вызывается как func(text, render), где text это сырое тело секции,
    а render это колбэк повторной отрисовки в текущем контексте.
    При поиске в контексте не вызывается.
    """

    def __init__(self, func: Callable[[str, Callable[[str], str]], Any]):
        self.func = func

    def __call__(self, text: str, render: Callable[[str], str]) -> Any:
        return self.func(text, render)

    def __repr__(self) -> str:
        return f"SectionLambda({self.func!r})"


def accessor(func: Callable[[Any], Any]) -> Accessor:
    """Декоратор: помечает функцию как вычисляемое свойство."""
    return Accessor(func)


def section_lambda(func: Callable[[str, Callable[[str], str]], Any]) -> SectionLambda:
    """Декоратор: помечает функцию как лямбду секции."""
    return SectionLambda(func)


class ValueKind(enum.Enum):
    MISSING = "missing"
    NULL = "null"
    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    LIST = "list"
    OBJECT = "object"
    ACCESSOR = "accessor"
    SECTION_LAMBDA = "section_lambda"


_PRIMITIVE_TYPES = (str, bytes, bool, numbers.Number)
_TEXT_TYPES = (str, bytes, bytearray)


def _is_list(value: Any) -> bool:
    """Списком считается любая последовательность, кроме строк и байтов."""
    return isinstance(value, Sequence) and not isinstance(value, _TEXT_TYPES)


def classify(value: Any) -> ValueKind:
    if value is MISSING:
        return ValueKind.MISSING
    if value is None:
        return ValueKind.NULL
    if isinstance(value, SectionLambda):
        return ValueKind.SECTION_LAMBDA
    if isinstance(value, Accessor):
        return ValueKind.ACCESSOR
    # bool раньше чисел: в Python bool наследуется от int
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, numbers.Number):
        return ValueKind.NUMBER
    if isinstance(value, (str, bytes)):
        return ValueKind.STRING
    if _is_list(value):
        return ValueKind.LIST
    if isinstance(value, Mapping):
        return ValueKind.OBJECT
    if callable(value):
        return ValueKind.ACCESSOR
    return ValueKind.OBJECT


def is_primitive(value: Any) -> bool:
    return isinstance(value, _PRIMITIVE_TYPES)


def is_number(value: Any) -> bool:
    return classify(value) is ValueKind.NUMBER


def _list_index(value: Any, name: str) -> int:
    """Индекс элемента списка по имени свойства или -1."""
    if name.isdigit():
        index = int(name)
        if index < len(value):
            return index
    return -1


def _public(name: str) -> bool:
    return bool(name) and not name.startswith("_")


def has_property(obj: Any, name: str) -> bool:
    """
    Есть ли у структурированного значения свойство name.

    Примитивы (строки, числа, bool) и None свойств не имеют.
    """
    if obj is None or obj is MISSING or is_primitive(obj):
        return False
    if isinstance(obj, Mapping):
        return name in obj
    if _is_list(obj):
        return _list_index(obj, name) >= 0
    return _public(name) and hasattr(obj, name)


def primitive_has_property(obj: Any, name: str) -> bool:
    """Есть ли у примитива публичный атрибут name (например, "upper" у строки)."""
    return is_primitive(obj) and _public(name) and hasattr(obj, name)


def get_property(obj: Any, name: str) -> Any:
    """Читает свойство; отсутствующее свойство даёт None."""
    if obj is None or obj is MISSING:
        return None
    if isinstance(obj, Mapping):
        return obj.get(name)
    if _is_list(obj):
        index = _list_index(obj, name)
        return obj[index] if index >= 0 else None
    if not _public(name):
        return None
    return getattr(obj, name, None)


def to_text(value: Any) -> str:
    """Строковая форма значения для вывода."""
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return str(value)


__all__ = [
    "MISSING",
    "Accessor",
    "SectionLambda",
    "accessor",
    "section_lambda",
    "ValueKind",
    "classify",
    "is_primitive",
    "is_number",
    "has_property",
    "primitive_has_property",
    "get_property",
    "to_text",
]
