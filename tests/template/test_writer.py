"""
Тесты восстановления исходного текста из дерева документа.
"""

import pytest

from smartscript.template.nodes import DocumentNode, TextNode
from smartscript.template.parser import parse_script
from smartscript.template.writer import escape_text, write_document, write_node


class TestWriteDocument:
    """Каноническая форма тегов."""

    def test_loop_and_echo(self):
        document = parse_script("{$FOR i 1 5 1$}{$=i$}{$END$}")

        assert write_document(document) == "{$ FOR i 1 5 1 $}{$= i $}{$END$}"

    def test_loop_without_step(self):
        document = parse_script("{$ for x 0 2 $}-{$ end $}")

        assert write_document(document) == "{$ FOR x 0 2 $}-{$END$}"

    def test_echo_elements_spacing(self):
        document = parse_script('{$=   "a b"   2.5 @decfmt   $}')

        assert write_document(document) == '{$= "a b" 2.5 @decfmt $}'

    def test_empty_echo(self):
        assert write_document(parse_script("{$=$}")) == "{$= $}"

    def test_text_is_escaped(self):
        document = DocumentNode(children=(TextNode("a {$ b \\ c"),))

        assert write_document(document) == r"a \{$ b \\ c"

    def test_escape_text(self):
        assert escape_text("{$") == "\\{$"
        assert escape_text("\\") == "\\\\"
        assert escape_text("{ $") == "{ $"

    def test_brace_before_line_break_is_plain_text(self):
        document = DocumentNode(children=(TextNode("{\n$x $\n}"),))

        assert write_document(document) == "{\n$x $\n}"
        assert parse_script(write_document(document)) == document

    def test_unsupported_node(self):
        with pytest.raises(TypeError):
            write_node(object())  # type: ignore[arg-type]


class TestRoundTrip:
    """Повторный парсинг канонического текста даёт то же дерево."""

    @pytest.mark.parametrize("source", [
        "",
        "just text",
        "{$= 4 2 + $}",
        r'{$= "q\"uote" "back\\slash" "tab\t" -1.5 @swap $}',
        "Header\n{$ FOR i 1 10 2 $}\n  row {$= i i * $}\n{$END$}footer",
        r"escaped \{$ and \\ stay text",
        "{$ FOR i 1 3 $}{$ FOR j i 3 $}({$= i j $}){$END$}{$END$}",
    ])
    def test_round_trip(self, source):
        document = parse_script(source)

        assert parse_script(write_document(document)) == document
