"""
Обратное преобразование дерева документа в исходный текст скрипта.

Текстовые узлы экранируются так, чтобы лексер прочитал их обратно
без изменений; теги выводятся в каноническом виде:
"{$= a b $}", "{$ FOR i 1 10 1 $}" ... "{$END$}".
"""

from __future__ import annotations

from typing import List

from .nodes import DocumentNode, EchoNode, ForLoopNode, ScriptNode, TextNode


def escape_text(text: str) -> str:
    """Экранирует текст: обратный слеш удваивается, открывающая "{" перед "$" получает слеш."""
    text = text.replace("\\", "\\\\")
    return text.replace("{$", "\\{$")


def write_node(node: ScriptNode) -> str:
    """Возвращает исходный текст одного узла (вместе с телом цикла)."""
    if isinstance(node, TextNode):
        return escape_text(node.text)

    if isinstance(node, EchoNode):
        parts = ["{$="]
        parts.extend(element.as_text() for element in node.elements)
        return " ".join(parts) + " $}"

    if isinstance(node, ForLoopNode):
        header: List[str] = ["{$ FOR", node.variable.as_text(), node.start.as_text(), node.end.as_text()]
        if node.step is not None:
            header.append(node.step.as_text())
        body = "".join(write_node(child) for child in node.children)
        return " ".join(header) + " $}" + body + "{$END$}"

    if isinstance(node, DocumentNode):
        return "".join(write_node(child) for child in node.children)

    raise TypeError(f"Unsupported node type: {type(node).__name__}")


def write_document(document: DocumentNode) -> str:
    """
    Восстанавливает исходный текст всего документа.

    Повторный парсинг результата даёт дерево, равное исходному.
    """
    return write_node(document)


__all__ = ["escape_text", "write_node", "write_document"]
