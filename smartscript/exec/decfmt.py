"""
Форматирование чисел по шаблону в стиле DecimalFormat.

Поддерживается подмножество синтаксиса шаблонов, которого достаточно
для встроенной функции @decfmt:
- "0" - обязательная цифра, "#" - необязательная цифра
- "." - десятичный разделитель, "," - группировка целой части
- "%" в префиксе или суффиксе умножает число на 100
- прочие символы до и после числовой части выводятся как есть,
  текст в одинарных кавычках берётся буквально
- после ";" может идти шаблон для отрицательных чисел (используются
  только его префикс и суффикс)

Округление - HALF_EVEN.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_EVEN
from functools import lru_cache
from typing import Optional, Tuple

_DIGIT_CHARS = "0#,."


@dataclass(frozen=True)
class _Pattern:
    prefix: str
    suffix: str
    negative_prefix: Optional[str]
    negative_suffix: Optional[str]
    min_int: int
    min_frac: int
    max_frac: int
    grouping: int
    percent: bool


def _split_affixes(pattern: str) -> Tuple[str, str, str]:
    """Делит шаблон на префикс, числовую часть и суффикс."""
    start = None
    quoted = False
    for i, ch in enumerate(pattern):
        if ch == "'":
            quoted = not quoted
        elif not quoted and ch in _DIGIT_CHARS:
            start = i
            break
    if start is None:
        raise ValueError(f"Malformed decimal pattern {pattern!r}: no digits")
    end = start
    while end < len(pattern) and pattern[end] in _DIGIT_CHARS:
        end += 1
    return pattern[:start], pattern[start:end], pattern[end:]


def _literal(affix: str) -> str:
    return affix.replace("''", "\0").replace("'", "").replace("\0", "'")


@lru_cache(maxsize=128)
def compile_pattern(pattern: str) -> _Pattern:
    """
    Разбирает шаблон формата.

    Raises:
        ValueError: Если шаблон не содержит цифр или содержит несколько разделителей
    """
    positive, _, negative = pattern.partition(";")
    prefix, number, suffix = _split_affixes(positive)

    if number.count(".") > 1:
        raise ValueError(f"Malformed decimal pattern {pattern!r}: multiple decimal separators")

    int_part, _, frac_part = number.partition(".")
    if "," in frac_part:
        raise ValueError(f"Malformed decimal pattern {pattern!r}: grouping in fraction")

    grouping = 0
    if "," in int_part:
        grouping = len(int_part) - int_part.rfind(",") - 1

    negative_prefix = negative_suffix = None
    if negative:
        neg_prefix, _, neg_suffix = _split_affixes(negative)
        negative_prefix, negative_suffix = _literal(neg_prefix), _literal(neg_suffix)

    return _Pattern(
        prefix=_literal(prefix),
        suffix=_literal(suffix),
        negative_prefix=negative_prefix,
        negative_suffix=negative_suffix,
        min_int=int_part.count("0"),
        min_frac=frac_part.count("0"),
        max_frac=len(frac_part),
        grouping=grouping,
        percent="%" in prefix or "%" in suffix,
    )


def _group(digits: str, size: int) -> str:
    if size <= 0 or len(digits) <= size:
        return digits
    head = len(digits) % size or size
    groups = [digits[:head]]
    groups.extend(digits[i:i + size] for i in range(head, len(digits), size))
    return ",".join(groups)


def format_decimal(number: float, pattern: str) -> str:
    """
    Форматирует число по шаблону.

    >>> format_decimal(3.14159, "0.00")
    '3.14'
    >>> format_decimal(1234567, "#,##0")
    '1,234,567'
    """
    fmt = compile_pattern(pattern)

    if math.isnan(number):
        return "NaN"

    negative = number < 0 or (number == 0 and math.copysign(1.0, number) < 0)
    if math.isinf(number):
        body = "∞"
    else:
        value = Decimal(repr(abs(number)))
        if fmt.percent:
            value *= 100
        quantum = Decimal(1).scaleb(-fmt.max_frac)
        value = value.quantize(quantum, rounding=ROUND_HALF_EVEN)
        if value == 0:
            negative = False

        int_digits, _, frac_digits = format(value, "f").partition(".")
        int_digits = int_digits.lstrip("0").rjust(fmt.min_int, "0")
        frac_digits = frac_digits.rstrip("0").ljust(fmt.min_frac, "0")

        int_digits = _group(int_digits, fmt.grouping)
        body = int_digits + ("." + frac_digits if frac_digits else "")
        if not body:
            body = "0"

    if negative:
        if fmt.negative_prefix is not None:
            return fmt.negative_prefix + body + (fmt.negative_suffix or "")
        return "-" + fmt.prefix + body + fmt.suffix
    return fmt.prefix + body + fmt.suffix


__all__ = ["format_decimal", "compile_pattern"]
