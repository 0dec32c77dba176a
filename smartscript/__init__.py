"""
SmartScript - небольшой язык шаблонов с тегами {$= ... $} и {$ FOR ... $}.

Публичный API: парсинг скрипта в неизменяемое дерево документа
и его исполнение с контекстом запроса.
"""

from __future__ import annotations

from typing import Optional

from .config import EngineConfig, load_config
from .context import RCCookie, RequestContext, RequestContextProtocol
from .errors import (
    ConfigLoadError,
    EmptyStackError,
    HeaderGeneratedError,
    ParseError,
    ScanError,
    ScriptProcessingError,
    ScriptRuntimeError,
    SmartScriptError,
)
from .exec.engine import SmartScriptEngine
from .processor import ScriptProcessor
from .template.nodes import DocumentNode
from .template.parser import parse_script
from .template.writer import write_document


def render_script(
    script_text: str,
    context: RequestContextProtocol,
    config: Optional[EngineConfig] = None,
) -> None:
    """Парсит и сразу исполняет скрипт."""
    SmartScriptEngine(parse_script(script_text), context, config).execute()


__all__ = [
    "EngineConfig",
    "load_config",
    "RCCookie",
    "RequestContext",
    "RequestContextProtocol",
    "SmartScriptError",
    "ScanError",
    "ParseError",
    "ScriptRuntimeError",
    "EmptyStackError",
    "ConfigLoadError",
    "HeaderGeneratedError",
    "ScriptProcessingError",
    "SmartScriptEngine",
    "ScriptProcessor",
    "DocumentNode",
    "parse_script",
    "render_script",
    "write_document",
]
