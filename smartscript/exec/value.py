"""
Ячейка значения (ValueWrapper).

Хранит число в нормализованном виде (float) и реализует правила
приведения и арифметики, общие для переменных циклов и операторов echo:
- None приводится к 0
- строки разбираются как числа, неразборчивая строка - ошибка
- при извлечении целое по значению число сужается до int
"""

from __future__ import annotations

import math
import re
from typing import Callable, Union

# Значения, которые встречаются на стеках исполнения
StackValue = Union[int, float, str]

# Насколько близко к нулю делитель считается нулём
ZERO_THRESHOLD = 1e-10

# Десятичная запись числа; из особых значений только NaN и Infinity со знаком
_NUMBER_RE = re.compile(
    r"[+-]?(?:(?:[0-9]+\.[0-9]*|\.[0-9]+|[0-9]+)(?:[eE][+-]?[0-9]+)?|NaN|Infinity)"
)


def narrow_number(number: float) -> Union[int, float]:
    """Сужает целое по значению число до int (6.0 -> 6), остальное оставляет как есть."""
    if math.isfinite(number) and number.is_integer():
        return int(number)
    return number


def to_number(value: object, message: str = "Given value is not a valid number") -> float:
    """
    Приводит значение к float по правилам ячейки.

    Raises:
        ValueError: Если значение нельзя разобрать как число
    """
    if value is None:
        return 0.0
    if isinstance(value, bool):
        raise ValueError(f"{message}: {value!r}")
    if isinstance(value, float):
        return value
    if isinstance(value, int):
        try:
            return float(value)
        except OverflowError:
            raise ValueError(f"{message}: integer is too large") from None

    text = str(value).strip()
    if not _NUMBER_RE.fullmatch(text):
        raise ValueError(f"{message}: {value!r}")
    return float(text)


def to_text(value: object) -> str:
    """Текстовое представление значения для вывода."""
    if isinstance(value, float):
        return repr(value)
    return str(value)


class ValueWrapper:
    """
    Числовая ячейка с правилами приведения.

    Используется для хранения значений переменных циклов
    и для вычисления операторов + - * / в echo-тегах.
    """

    def __init__(self, value: object = None):
        """
        Raises:
            ValueError: Если значение не является числом
        """
        self._value = to_number(value)

    def increment(self, value: object) -> None:
        self._apply(value, lambda a, b: a + b, "increment")

    def decrement(self, value: object) -> None:
        self._apply(value, lambda a, b: a - b, "decrement")

    def multiply(self, value: object) -> None:
        self._apply(value, lambda a, b: a * b, "multiplication")

    def divide(self, value: object) -> None:
        """
        Делит хранимое значение на аргумент.

        Raises:
            ZeroDivisionError: Если делитель None или по модулю меньше ZERO_THRESHOLD
            ValueError: Если делитель не является числом
        """
        if value is None:
            raise ZeroDivisionError("Division by zero")
        divisor = to_number(value, "Given division value is not a valid number")
        if abs(divisor) < ZERO_THRESHOLD:
            raise ZeroDivisionError("Division by zero")
        self._value = self._value / divisor

    def num_compare(self, value: object) -> int:
        """
        Численно сравнивает хранимое значение с аргументом.

        Returns:
            -1, 0 или 1 - знак разности (хранимое - аргумент)
        """
        other = to_number(value, "Given comparison value is not a valid number")
        return (self._value > other) - (self._value < other)

    def get_value(self) -> Union[int, float]:
        """Значение для вывода: целое по значению число возвращается как int."""
        return narrow_number(self._value)

    def set_value(self, value: object) -> None:
        self._value = to_number(value)

    def _apply(self, value: object, op: Callable[[float, float], float], what: str) -> None:
        operand = to_number(value, f"Given {what} value is not a valid number")
        self._value = op(self._value, operand)

    def __repr__(self) -> str:
        return f"ValueWrapper({self.get_value()!r})"


__all__ = [
    "StackValue",
    "ZERO_THRESHOLD",
    "ValueWrapper",
    "narrow_number",
    "to_number",
    "to_text",
]
