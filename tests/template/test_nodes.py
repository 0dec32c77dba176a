"""
Тесты для AST узлов и элементов SmartScript.

Проверяет создание и поведение узлов дерева документа,
текстовую проекцию элементов и вспомогательные функции обхода.
"""

import pytest

from smartscript.template.elements import (
    DoubleLiteral, Function, IntegerLiteral, Operator, StringLiteral, Variable
)
from smartscript.template.nodes import (
    DocumentNode,
    EchoNode,
    ForLoopNode,
    TextNode,
    count_nodes,
    format_ast_tree,
    iter_nodes,
)
from smartscript.template.parser import parse_script


class TestElements:
    """Текстовая проекция элементов."""

    @pytest.mark.parametrize("element, text", [
        (IntegerLiteral(-12), "-12"),
        (DoubleLiteral(2.5), "2.5"),
        (DoubleLiteral(3.0), "3.0"),
        (Variable("counter"), "counter"),
        (Function("decfmt"), "@decfmt"),
        (Operator("*"), "*"),
        (StringLiteral("plain"), '"plain"'),
    ])
    def test_as_text(self, element, text):
        assert element.as_text() == text

    def test_string_as_text_escapes(self):
        """Кавычки, слеши и управляющие символы экранируются обратно."""
        assert StringLiteral('say "hi"\\\n').as_text() == r'"say \"hi\"\\\n"'

    def test_elements_are_values(self):
        assert Variable("i") == Variable("i")
        assert IntegerLiteral(1) != DoubleLiteral(1.0)

    def test_element_immutable(self):
        element = Variable("i")
        with pytest.raises((AttributeError, TypeError)):
            element.name = "j"  # type: ignore


class TestNodes:
    """Тесты для узлов дерева документа."""

    def test_text_node_equality(self):
        assert TextNode(text="a") == TextNode(text="a")
        assert TextNode(text="a") != TextNode(text="b")

    def test_text_node_immutable(self):
        node = TextNode(text="test")
        with pytest.raises((AttributeError, TypeError)):
            node.text = "modified"  # type: ignore

    def test_echo_node_defaults(self):
        assert EchoNode().elements == ()

    def test_for_loop_node_defaults(self):
        loop = ForLoopNode(variable=Variable("i"), start=IntegerLiteral(1), end=IntegerLiteral(2))

        assert loop.step is None
        assert loop.children == ()

    def test_nodes_are_hashable(self):
        """Неизменяемые узлы можно класть в множества."""
        document = parse_script("{$ FOR i 1 2 $}{$= i $}{$END$}")
        assert len({document, parse_script("{$ FOR i 1 2 $}{$= i $}{$END$}")}) == 1


class TestTreeHelpers:
    """Вспомогательные функции обхода дерева."""

    def test_iter_nodes_in_source_order(self):
        document = parse_script("a{$ FOR i 1 2 $}b{$= i $}{$END$}c")

        kinds = [type(n).__name__ for n in iter_nodes(document)]
        assert kinds == ["DocumentNode", "TextNode", "ForLoopNode", "TextNode", "EchoNode", "TextNode"]

    def test_count_nodes(self):
        assert count_nodes(DocumentNode()) == 0
        assert count_nodes(parse_script("a{$ FOR i 1 2 $}b{$END$}")) == 3

    def test_format_ast_tree(self):
        document = parse_script('x{$ FOR i 1 3 $}{$= i "s" @dup $}{$END$}')

        assert format_ast_tree(document) == "\n".join([
            "DocumentNode",
            "  TextNode('x')",
            "  ForLoopNode(i 1 3)",
            '    EchoNode(i "s" @dup)',
        ])

    def test_format_ast_tree_truncates_long_text(self):
        text = "x" * 60
        assert format_ast_tree(TextNode(text)) == f"TextNode({'x' * 50 + '...'!r})"
