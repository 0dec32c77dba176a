"""
Элементы тегов.

Неизменяемые значения, из которых состоит содержимое тегов FOR и echo:
литералы (целые, дробные, строковые), ссылки на переменные и функции,
операторы. Каждый элемент умеет вернуть своё исходное текстовое
представление через as_text().
"""

from __future__ import annotations

from dataclasses import dataclass

OPERATORS = ("+", "-", "*", "/", "^")

# Escape-последовательности строковых литералов (символ -> запись в исходнике)
_STRING_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


@dataclass(frozen=True)
class Element:
    """Базовый класс для всех элементов тега."""

    def as_text(self) -> str:
        raise NotImplementedError


@dataclass(frozen=True)
class IntegerLiteral(Element):
    value: int

    def as_text(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class DoubleLiteral(Element):
    value: float

    def as_text(self) -> str:
        return repr(self.value)


@dataclass(frozen=True)
class StringLiteral(Element):
    """
    Строковый литерал.

    Хранит значение без кавычек и с уже разрешёнными escape-последовательностями;
    as_text() возвращает его обратно в кавычках и с экранированием.
    """
    value: str

    def as_text(self) -> str:
        return '"' + "".join(_STRING_ESCAPES.get(ch, ch) for ch in self.value) + '"'


@dataclass(frozen=True)
class Variable(Element):
    name: str

    def as_text(self) -> str:
        return self.name


@dataclass(frozen=True)
class Function(Element):
    """Ссылка на встроенную функцию; name хранится без префикса @."""
    name: str

    def as_text(self) -> str:
        return "@" + self.name


@dataclass(frozen=True)
class Operator(Element):
    symbol: str

    def as_text(self) -> str:
        return self.symbol


# Элементы, значение которых известно на этапе парсинга
LITERAL_TYPES = (IntegerLiteral, DoubleLiteral, StringLiteral)

# Допустимые типы границ и шага цикла FOR
LOOP_BOUND_TYPES = (IntegerLiteral, DoubleLiteral, StringLiteral, Variable)


__all__ = [
    "Element",
    "IntegerLiteral",
    "DoubleLiteral",
    "StringLiteral",
    "Variable",
    "Function",
    "Operator",
    "LITERAL_TYPES",
    "LOOP_BOUND_TYPES",
    "OPERATORS",
]
