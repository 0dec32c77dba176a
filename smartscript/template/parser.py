"""
Парсер скриптов SmartScript.

Преобразует последовательность токенов в неизменяемое дерево документа.
Вложенность циклов отслеживается явным стеком открытых областей,
на дне которого всегда лежит корень документа.
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from typing import List, Optional

from .elements import (
    DoubleLiteral,
    Element,
    Function,
    IntegerLiteral,
    LOOP_BOUND_TYPES,
    OPERATORS,
    Operator,
    StringLiteral,
    Variable,
)
from .lexer import SmartScriptLexer
from .nodes import DocumentNode, EchoNode, ForLoopNode, ScriptNode, TextNode, count_nodes
from .tokens import Token, TokenType
from ..errors import ParseError

logger = logging.getLogger(__name__)

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")
_DOUBLE_RE = re.compile(r"[+-]?(?:[0-9]+\.[0-9]*|\.[0-9]+|[0-9]+)(?:[eE][+-]?[0-9]+)?")
_IDENTIFIER_RE = re.compile(r"[A-Za-z][A-Za-z0-9_]*")

# Escape-последовательности внутри строковых литералов
_STRING_UNESCAPES = {
    "\\": "\\",
    '"': '"',
    "n": "\n",
    "r": "\r",
    "t": "\t",
}
_CRLF_ESCAPE = "\\r\\n"

KEYWORD_FOR = "FOR"
KEYWORD_END = "END"
ECHO_PREFIX = "="


def split_tag_chunks(body: str, token: Optional[Token] = None) -> List[str]:
    """
    Делит содержимое тега на части по пробельным символам.

    Строковые литералы в двойных кавычках остаются одной частью вместе
    с пробелами и экранированными символами внутри.

    Raises:
        ParseError: Если строковый литерал не закрыт
    """
    chunks: List[str] = []
    buffer: List[str] = []
    in_string = False
    i = 0

    while i < len(body):
        ch = body[i]

        if in_string:
            buffer.append(ch)
            if ch == "\\" and i + 1 < len(body):
                buffer.append(body[i + 1])
                i += 2
                continue
            if ch == '"':
                in_string = False
                chunks.append("".join(buffer))
                buffer.clear()
            i += 1
            continue

        if ch.isspace():
            if buffer:
                chunks.append("".join(buffer))
                buffer.clear()
        elif ch == '"' and not buffer:
            in_string = True
            buffer.append(ch)
        else:
            buffer.append(ch)
        i += 1

    if in_string:
        raise ParseError(f"Unterminated string literal {''.join(buffer)}", token)

    if buffer:
        chunks.append("".join(buffer))

    return chunks


def unescape_string(inner: str, token: Optional[Token] = None) -> str:
    """Разрешает escape-последовательности строкового литерала (без кавычек)."""
    out: List[str] = []
    i = 0

    while i < len(inner):
        ch = inner[i]
        if ch != "\\":
            out.append(ch)
            i += 1
            continue

        if inner.startswith(_CRLF_ESCAPE, i):
            out.append(os.linesep)
            i += len(_CRLF_ESCAPE)
            continue

        escaped = inner[i + 1:i + 2]
        if escaped not in _STRING_UNESCAPES:
            raise ParseError(f"Invalid escape sequence \\{escaped} in string literal", token)
        out.append(_STRING_UNESCAPES[escaped])
        i += 2

    return "".join(out)


def is_variable_name(text: str) -> bool:
    return _IDENTIFIER_RE.fullmatch(text) is not None


def make_element(chunk: str, token: Optional[Token] = None) -> Element:
    """
    Классифицирует одну часть тега.

    Порядок проверок фиксирован: целое, дробное, переменная, функция,
    строка, оператор. Побеждает первое совпадение.

    Raises:
        ParseError: Если часть не подходит ни под один вид элемента
    """
    if _INTEGER_RE.fullmatch(chunk):
        return IntegerLiteral(int(chunk))

    if _DOUBLE_RE.fullmatch(chunk):
        return DoubleLiteral(float(chunk))

    if is_variable_name(chunk):
        return Variable(chunk)

    if chunk.startswith("@") and is_variable_name(chunk[1:]):
        return Function(chunk[1:])

    if len(chunk) >= 2 and chunk.startswith('"') and chunk.endswith('"'):
        return StringLiteral(unescape_string(chunk[1:-1], token))

    if chunk in OPERATORS:
        return Operator(chunk)

    raise ParseError(f"Invalid element {chunk!r}", token)


@dataclass
class _OpenScope:
    """Открытая область: корень документа или ещё не закрытый цикл."""
    header: Optional[ForLoopNode]
    token: Optional[Token]
    children: List[ScriptNode] = field(default_factory=list)

    def close(self) -> ScriptNode:
        if self.header is None:
            return DocumentNode(children=tuple(self.children))
        return ForLoopNode(
            variable=self.header.variable,
            start=self.header.start,
            end=self.header.end,
            step=self.header.step,
            children=tuple(self.children),
        )


class SmartScriptParser:
    """
    Парсер для скриптов.

    Обрабатывает последовательность токенов и строит дерево документа,
    корректно обрабатывая вложенные циклы. Разбор останавливается
    на первой ошибке, частичное дерево не возвращается.
    """

    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.position = 0
        self._stack: List[_OpenScope] = []

    def parse(self) -> DocumentNode:
        """
        Парсит всю последовательность токенов в дерево документа.

        Raises:
            ParseError: При ошибке синтаксического анализа
        """
        self._stack = [_OpenScope(header=None, token=None)]

        while not self._is_at_end():
            token = self.tokens[self.position]
            self.position += 1

            if token.type == TokenType.TEXT:
                self._top().children.append(TextNode(text=token.value or ""))
            elif token.type == TokenType.TAG:
                self._parse_tag(token)
            else:
                raise ParseError(f"Unexpected token {token.type.name}", token)

        if len(self._stack) != 1:
            raise ParseError(
                f"Unbalanced loop/end tags: {len(self._stack) - 1} FOR tag(s) without END",
                self._stack[-1].token,
            )

        document = self._stack.pop().close()
        assert isinstance(document, DocumentNode)
        logger.debug("Parsed script -> %d nodes", count_nodes(document))
        return document

    # ======= Внутренние методы =======

    def _is_at_end(self) -> bool:
        return (
            self.position >= len(self.tokens)
            or self.tokens[self.position].type == TokenType.EOF
        )

    def _top(self) -> _OpenScope:
        return self._stack[-1]

    def _parse_tag(self, token: Token) -> None:
        """Разбирает один тег и диспетчеризует его по имени."""
        body = token.value or ""

        if body.startswith(ECHO_PREFIX):
            rest = body[len(ECHO_PREFIX):]
            chunks = split_tag_chunks(rest, token)
            # Слитная форма {$=x$} допускает только один элемент
            if rest[:1].isspace() or len(chunks) <= 1:
                self._parse_echo(chunks, token)
                return
            raise ParseError(f"Unknown tag name {ECHO_PREFIX + chunks[0]!r}", token)

        chunks = split_tag_chunks(body, token)
        if not chunks:
            raise ParseError("Empty tag", token)

        name = chunks[0].upper()
        if name == KEYWORD_FOR:
            self._parse_for(chunks[1:], token)
        elif name == KEYWORD_END:
            self._parse_end(chunks[1:], token)
        else:
            raise ParseError(f"Unknown tag name {chunks[0]!r}", token)

    def _parse_echo(self, chunks: List[str], token: Token) -> None:
        elements = tuple(make_element(chunk, token) for chunk in chunks)
        self._top().children.append(EchoNode(elements=elements))

    def _parse_for(self, args: List[str], token: Token) -> None:
        """
        Разбирает заголовок цикла и открывает новую область.

        Формат: FOR variable start end [step]
        """
        if len(args) not in (3, 4):
            raise ParseError(
                f"FOR tag expects 3 or 4 arguments, got {len(args)}", token
            )

        variable = make_element(args[0], token)
        if not isinstance(variable, Variable):
            raise ParseError(f"FOR loop variable must be a variable name, got {args[0]!r}", token)

        bounds: List[Element] = []
        for chunk in args[1:]:
            element = make_element(chunk, token)
            if not isinstance(element, LOOP_BOUND_TYPES):
                raise ParseError(
                    f"FOR loop argument {chunk!r} must be a number, string or variable", token
                )
            bounds.append(element)

        header = ForLoopNode(
            variable=variable,
            start=bounds[0],
            end=bounds[1],
            step=bounds[2] if len(bounds) == 3 else None,
        )
        self._stack.append(_OpenScope(header=header, token=token))

    def _parse_end(self, args: List[str], token: Token) -> None:
        if args:
            raise ParseError("END tag takes no arguments", token)

        if len(self._stack) == 1:
            raise ParseError("More closing tags than opening loop tags", token)

        loop = self._stack.pop().close()
        self._top().children.append(loop)


def parse_script(text: str) -> DocumentNode:
    """
    Удобная функция: токенизирует и парсит исходный текст скрипта.

    Raises:
        ScanError: При ошибке лексического анализа
        ParseError: При ошибке синтаксического анализа
    """
    tokens = SmartScriptLexer(text).tokenize()
    return SmartScriptParser(tokens).parse()


__all__ = [
    "SmartScriptParser",
    "parse_script",
    "split_tag_chunks",
    "unescape_string",
    "make_element",
    "is_variable_name",
]
