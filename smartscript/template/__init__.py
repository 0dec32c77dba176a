"""
Фронтенд SmartScript: лексер, парсер и дерево документа.
"""

from __future__ import annotations

from .elements import (
    Element, IntegerLiteral, DoubleLiteral, StringLiteral, Variable, Function, Operator
)
from .lexer import SmartScriptLexer, LexerState, tokenize_script
from .nodes import DocumentNode, TextNode, EchoNode, ForLoopNode, ScriptNode, format_ast_tree
from .parser import SmartScriptParser, parse_script
from .tokens import Token, TokenType
from .writer import write_document

__all__ = [
    "Element",
    "IntegerLiteral",
    "DoubleLiteral",
    "StringLiteral",
    "Variable",
    "Function",
    "Operator",
    "SmartScriptLexer",
    "LexerState",
    "tokenize_script",
    "DocumentNode",
    "TextNode",
    "EchoNode",
    "ForLoopNode",
    "ScriptNode",
    "format_ast_tree",
    "SmartScriptParser",
    "parse_script",
    "Token",
    "TokenType",
    "write_document",
]
