"""
Лексический анализатор SmartScript.

Разбивает исходный текст скрипта на последовательность токенов TEXT/TAG,
завершающуюся EOF. Работает как конечный автомат с тремя состояниями:
INIT (выбор первого режима), TEXT (текст вне тегов) и TAG (внутри {$ ... $}).
"""

from __future__ import annotations

import enum
import logging
from typing import List, Optional, Tuple

from .tokens import Token, TokenType
from ..errors import ScanError

logger = logging.getLogger(__name__)

TAG_OPEN = "{$"
TAG_CLOSE = "$}"


class LexerState(enum.Enum):
    """Состояния лексера."""

    # Начальное состояние: по первым символам выбирается TEXT или TAG
    INIT = "INIT"

    # Чтение текста вне скобок {$ и $}
    TEXT = "TEXT"

    # Чтение содержимого тега между {$ и $}
    TAG = "TAG"


class SmartScriptLexer:
    """
    Лексический анализатор скриптов.

    Токены выдаются по одному через next_token(). Текстовый или теговый
    токен выдаётся только при непустом буфере на границе режимов; пустой
    буфер просто переключает режим.

    Экранирование в тексте:
    - \\{ даёт литерал "{" (следующий за ним "$" остаётся текстом)
    - \\\\ даёт литерал "\\"
    - любая другая последовательность с обратным слешем - ошибка
    """

    def __init__(self, text: str):
        self.text = text
        self.position = 0
        self.line = 1
        self.column = 1
        self.length = len(self.text)
        self.state = LexerState.INIT

        self._buffer: List[str] = []
        # Позиция начала накапливаемого токена: (position, line, column)
        self._start: Optional[Tuple[int, int, int]] = None

    def tokenize(self) -> List[Token]:
        """
        Токенизирует весь исходный текст и возвращает список токенов.
        """
        tokens: List[Token] = []

        while True:
            token = self.next_token()
            tokens.append(token)
            if token.type == TokenType.EOF:
                break

        return tokens

    def next_token(self) -> Token:
        """
        Извлекает следующий токен из входного потока.

        Raises:
            ScanError: При неподдерживаемой escape-последовательности
        """
        while self.position < self.length:
            pair = self.text[self.position:self.position + 2]

            if self.state == LexerState.INIT:
                if pair == TAG_OPEN:
                    self._enter_tag()
                else:
                    self.state = LexerState.TEXT
                continue

            if self.state == LexerState.TEXT:
                if pair == TAG_OPEN:
                    if self._buffer:
                        return self._emit()
                    self._enter_tag()
                    continue

                if pair[0] == "\\":
                    escaped = pair[1:]
                    if escaped not in ("{", "\\"):
                        raise ScanError(
                            "Unsupported escape sequence", self.line, self.column, self.position
                        )
                    self._append(escaped)
                    self._advance(2)
                    continue

                self._append(pair[0])
                self._advance(1)
                continue

            # LexerState.TAG
            if pair == TAG_CLOSE:
                if self._buffer:
                    return self._emit()
                self.state = LexerState.TEXT
                self._advance(2)
                continue

            self._append(pair[0])
            self._advance(1)

        if self._buffer:
            if self.state == LexerState.TAG:
                logger.warning("Unterminated tag at end of input, emitting it as is")
            return self._emit()

        return Token(TokenType.EOF, None, self.position, self.line, self.column)

    def _enter_tag(self) -> None:
        """Переходит в режим тега, запоминая позицию открывающего разделителя."""
        self.state = LexerState.TAG
        self._start = (self.position, self.line, self.column)
        self._advance(len(TAG_OPEN))

    def _append(self, chunk: str) -> None:
        if self._start is None:
            self._start = (self.position, self.line, self.column)
        self._buffer.append(chunk)

    def _emit(self) -> Token:
        """Формирует токен из буфера в соответствии с текущим режимом."""
        data = "".join(self._buffer)
        position, line, column = self._start or (self.position, self.line, self.column)
        self._buffer.clear()
        self._start = None

        if self.state == LexerState.TAG:
            return Token(TokenType.TAG, data.strip(), position, line, column)
        return Token(TokenType.TEXT, data, position, line, column)

    def _advance(self, count: int) -> None:
        """
        Перемещает позицию на указанное количество символов,
        обновляя номера строк и колонок.
        """
        for _ in range(count):
            if self.position < self.length:
                if self.text[self.position] == '\n':
                    self.line += 1
                    self.column = 1
                else:
                    self.column += 1
                self.position += 1


def tokenize_script(text: str) -> List[Token]:
    """
    Удобная функция для токенизации скрипта.

    Args:
        text: Исходный текст скрипта

    Returns:
        Список токенов, последний из которых EOF

    Raises:
        ScanError: При ошибке лексического анализа
    """
    lexer = SmartScriptLexer(text)
    return lexer.tokenize()


__all__ = [
    "LexerState",
    "SmartScriptLexer",
    "tokenize_script",
    "TAG_OPEN",
    "TAG_CLOSE",
]
