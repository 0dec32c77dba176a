"""Тесты процессора скриптов ScriptProcessor."""

import io
from concurrent.futures import ThreadPoolExecutor

import pytest

from smartscript import render_script
from smartscript.config import EngineConfig
from smartscript.errors import ParseError, ScriptProcessingError
from smartscript.processor import ScriptProcessor

from tests.infrastructure import make_context


class TestParseCache:

    def test_same_script_is_parsed_once(self, processor):
        first = processor.parse("{$= 1 $}", "a")

        assert processor.parse("{$= 1 $}", "a") is first

    def test_cache_key_includes_name(self, processor):
        first = processor.parse("{$= 1 $}", "a")
        second = processor.parse("{$= 1 $}", "b")

        assert first == second
        assert first is not second

    def test_clear_cache(self, processor):
        first = processor.parse("x", "a")
        processor.clear_cache()

        assert processor.parse("x", "a") is not first

    def test_parse_errors_are_not_cached(self, processor):
        for _ in range(2):
            with pytest.raises(ParseError):
                processor.parse("{$ FOR i 1 2 $}", "broken")


class TestRender:

    def test_render(self, processor):
        ctx, out = make_context()

        processor.render("{$ FOR i 1 3 $}{$= i $}{$END$}", ctx, "inline")

        assert out.getvalue() == b"123"

    def test_render_file(self, processor, script_dir):
        ctx, out = make_context()

        processor.render_file(script_dir / "loop.smscr", ctx)

        assert out.getvalue() == b"[1][2][3]"

    def test_render_file_with_parameters(self, processor, script_dir):
        ctx, out = make_context(parameters={"a": "2", "b": "3"})

        processor.render_file(script_dir / "sum.smscr", ctx)

        assert out.getvalue().decode("utf-8") == "a=2\nb=3\nsum=5\n"

    def test_broken_file(self, processor, script_dir):
        ctx, _ = make_context()

        with pytest.raises(ParseError, match="Unbalanced"):
            processor.render_file(script_dir / "broken.smscr", ctx)

    def test_missing_file(self, processor, tmp_path):
        path = tmp_path / "absent.smscr"

        with pytest.raises(ScriptProcessingError) as exc_info:
            processor.load_script(path)

        assert exc_info.value.script_name == str(path)
        assert isinstance(exc_info.value.cause, OSError)

    def test_concurrent_renders_share_tree(self, processor):
        source = '{$ FOR i 1 3 $}{$= "p" "?" @paramGet i $}{$END$}'

        def run(value):
            ctx, out = make_context(parameters={"p": value})
            processor.render(source, ctx, "shared")
            return out.getvalue().decode("utf-8")

        values = [str(n) for n in range(8)]
        with ThreadPoolExecutor(max_workers=4) as pool:
            results = list(pool.map(run, values))

        assert results == [f"{v}1{v}2{v}3" for v in values]

    def test_render_script_helper(self):
        ctx, out = make_context()

        render_script("{$= 2 3 * $}", ctx)

        assert out.getvalue() == b"6"


class TestCreateContext:

    def test_defaults_come_from_config(self):
        config = EngineConfig(mime_type="text/plain", encoding="ISO-8859-1", status_code=201, status_text="Created")
        processor_ = ScriptProcessor(config)
        out = io.BytesIO()

        ctx = processor_.create_context(out, parameters={"a": "1"})
        ctx.write("é")

        assert ctx.get_parameter("a") == "1"
        assert out.getvalue() == (
            b"HTTP/1.1 201 Created\r\nContent-Type: text/plain; charset=ISO-8859-1\r\n\r\n\xe9"
        )

    def test_without_header(self, processor):
        out = io.BytesIO()

        processor.create_context(out, emit_header=False).write("x")

        assert out.getvalue() == b"x"

