"""
AST-узлы скрипта.

Неизменяемое дерево документа: корень DocumentNode и три вида узлов:
текст, echo-тег и цикл FOR. Дочерние узлы хранятся кортежами в порядке
следования в исходном тексте, поэтому готовое дерево можно безопасно
разделять между параллельными рендерингами.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

from .elements import Element, Variable


@dataclass(frozen=True)
class ScriptNode:
    """Базовый класс для всех узлов AST скрипта."""
    pass


@dataclass(frozen=True)
class TextNode(ScriptNode):
    """
    Обычный текстовый контент в скрипте.

    Выводится в результат как есть.
    """
    text: str


@dataclass(frozen=True)
class EchoNode(ScriptNode):
    """
    Тег {$= ... $}.

    Элементы вычисляются как постфиксное выражение, остаток стека
    выводится слева направо.
    """
    elements: Tuple[Element, ...] = ()


@dataclass(frozen=True)
class ForLoopNode(ScriptNode):
    """
    Цикл {$ FOR var start end [step] $} ... {$END$}.

    Тело повторяется, пока значение переменной не превышает end.
    """
    variable: Variable
    start: Element
    end: Element
    step: Optional[Element] = None
    children: Tuple[ScriptNode, ...] = ()


@dataclass(frozen=True)
class DocumentNode(ScriptNode):
    """Корень дерева документа."""
    children: Tuple[ScriptNode, ...] = ()


def iter_nodes(node: ScriptNode) -> Iterator[ScriptNode]:
    """Обходит дерево в глубину в порядке исходного текста, начиная с node."""
    yield node
    for child in getattr(node, "children", ()):
        yield from iter_nodes(child)


def count_nodes(document: DocumentNode) -> int:
    """Количество узлов дерева без учёта корня."""
    return sum(1 for _ in iter_nodes(document)) - 1


def format_ast_tree(node: ScriptNode, indent: int = 0) -> str:
    """Форматирует AST как дерево для отладки."""
    prefix = "  " * indent

    if isinstance(node, TextNode):
        # Показываем только начало текста для читабельности
        text_preview = repr(node.text[:50] + "..." if len(node.text) > 50 else node.text)
        return f"{prefix}TextNode({text_preview})"

    if isinstance(node, EchoNode):
        elements = " ".join(e.as_text() for e in node.elements)
        return f"{prefix}EchoNode({elements})"

    if isinstance(node, ForLoopNode):
        header = [node.variable.as_text(), node.start.as_text(), node.end.as_text()]
        if node.step is not None:
            header.append(node.step.as_text())
        lines = [f"{prefix}ForLoopNode({' '.join(header)})"]
    elif isinstance(node, DocumentNode):
        lines = [f"{prefix}DocumentNode"]
    else:
        return f"{prefix}{type(node).__name__}"

    for child in node.children:
        lines.append(format_ast_tree(child, indent + 1))
    return "\n".join(lines)


__all__ = [
    "ScriptNode",
    "TextNode",
    "EchoNode",
    "ForLoopNode",
    "DocumentNode",
    "iter_nodes",
    "count_nodes",
    "format_ast_tree",
]
