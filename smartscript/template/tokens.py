"""
Лексические типы.

Лексер SmartScript различает всего два продуктивных вида токенов:
участок обычного текста и содержимое тега {$ ... $}.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional


class TokenType(enum.Enum):
    """Типы токенов в скрипте."""
    TEXT = "TEXT"
    TAG = "TAG"      # обрезанное содержимое между {$ и $}
    EOF = "EOF"


@dataclass(frozen=True)
class Token:
    """
    Токен с позиционной информацией для точной диагностики ошибок.
    """
    type: TokenType
    value: Optional[str]  # None только у EOF
    position: int = 0    # Позиция в исходном тексте
    line: int = 1        # Номер строки (начиная с 1)
    column: int = 1      # Номер колонки (начиная с 1)

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.column})"


__all__ = ["TokenType", "Token"]
