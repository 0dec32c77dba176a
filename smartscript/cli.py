from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

from .config import DEFAULT_CFG_FILE, EngineConfig, load_config
from .errors import SmartScriptError
from .processor import ScriptProcessor
from .template.lexer import tokenize_script
from .template.nodes import format_ast_tree
from .template.writer import write_document
from .version import tool_version


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="smscr",
        description="SmartScript: рендеринг и отладка скриптов {$ ... $}",
        add_help=True,
    )
    p.add_argument("-v", "--version", action="version", version=f"%(prog)s {tool_version()}")
    p.add_argument("--debug", action="store_true", help="подробный лог в stderr")
    sub = p.add_subparsers(dest="cmd", required=True)

    sp_render = sub.add_parser("render", help="Исполнить скрипт и вывести результат")
    sp_render.add_argument("script", type=Path, help="путь к файлу скрипта (.smscr)")
    sp_render.add_argument(
        "-p", "--param",
        action="append",
        metavar="NAME=VALUE",
        help="параметр запроса (можно указать несколько)",
    )
    sp_render.add_argument(
        "-P", "--persistent",
        action="append",
        metavar="NAME=VALUE",
        help="постоянный параметр (можно указать несколько)",
    )
    sp_render.add_argument(
        "--config",
        type=Path,
        default=None,
        help=f"файл настроек (по умолчанию ./{DEFAULT_CFG_FILE}, если есть)",
    )
    sp_render.add_argument(
        "--headers",
        action="store_true",
        help="выводить заголовок ответа перед телом",
    )
    sp_render.add_argument("--encoding", help="кодировка тела ответа (перекрывает настройки)")

    sp_tree = sub.add_parser("tree", help="Вывести канонический текст скрипта, восстановленный из дерева")
    sp_tree.add_argument("script", type=Path, help="путь к файлу скрипта")
    sp_tree.add_argument("--ast", action="store_true", help="вывести структуру дерева вместо текста")

    sp_tokens = sub.add_parser("tokens", help="Поток токенов лексера (JSON)")
    sp_tokens.add_argument("script", type=Path, help="путь к файлу скрипта")

    return p


def _setup_logging(debug: bool) -> None:
    log = logging.getLogger("smartscript")
    log.setLevel(logging.DEBUG if debug else logging.WARNING)
    if not log.handlers:
        h = logging.StreamHandler(sys.stderr)
        h.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
        log.addHandler(h)


def _parse_assignments(items: Optional[List[str]]) -> Dict[str, str]:
    """Парсит список NAME=VALUE в словарь."""
    result: Dict[str, str] = {}
    if not items:
        return result

    for item in items:
        name, sep, value = item.partition("=")
        name = name.strip()
        if not sep or not name:
            raise ValueError(f"Invalid parameter format '{item}', expected NAME=VALUE")
        result[name] = value

    return result


def _load_engine_config(path: Optional[Path], encoding: Optional[str]) -> EngineConfig:
    if path is not None and not path.exists():
        raise ValueError(f"Config file not found: {path}")
    cfg = load_config(path if path is not None else Path.cwd() / DEFAULT_CFG_FILE)
    if encoding:
        cfg = EngineConfig.from_dict({**dataclasses.asdict(cfg), "encoding": encoding})
    return cfg


def _run_render(ns: argparse.Namespace) -> int:
    processor = ScriptProcessor(_load_engine_config(ns.config, ns.encoding))
    script_text = processor.load_script(ns.script)

    sys.stdout.flush()
    out = sys.stdout.buffer
    context = processor.create_context(
        out,
        parameters=_parse_assignments(ns.param),
        persistent_parameters=_parse_assignments(ns.persistent),
        emit_header=bool(ns.headers),
    )
    processor.render(script_text, context, str(ns.script))
    out.flush()
    return 0


def _run_tree(ns: argparse.Namespace) -> int:
    processor = ScriptProcessor()
    document = processor.parse(processor.load_script(ns.script), str(ns.script))
    if ns.ast:
        sys.stdout.write(format_ast_tree(document) + "\n")
    else:
        sys.stdout.write(write_document(document))
    return 0


def _run_tokens(ns: argparse.Namespace) -> int:
    processor = ScriptProcessor()
    tokens = tokenize_script(processor.load_script(ns.script))
    data = [
        {"type": t.type.name, "value": t.value, "line": t.line, "column": t.column}
        for t in tokens
    ]
    sys.stdout.write(json.dumps(data, ensure_ascii=False))
    return 0


def main(argv: list[str] | None = None) -> int:
    ns = _build_parser().parse_args(argv)
    _setup_logging(bool(ns.debug))

    try:
        if ns.cmd == "render":
            return _run_render(ns)

        if ns.cmd == "tree":
            return _run_tree(ns)

        if ns.cmd == "tokens":
            return _run_tokens(ns)

    except SmartScriptError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2
    except ValueError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2

    return 2


if __name__ == "__main__":
    raise SystemExit(main())
