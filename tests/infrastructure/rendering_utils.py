"""
Утилиты для рендеринга скриптов в тестах.

Собирают контекст запроса поверх BytesIO и возвращают результат
рендеринга в виде строки или байтов.
"""

from __future__ import annotations

import io
from typing import Dict, List, Mapping, MutableMapping, Optional, Tuple, Union

from smartscript.config import EngineConfig
from smartscript.context import RequestContext
from smartscript.exec.engine import SmartScriptEngine
from smartscript.template.parser import parse_script


def make_context(
    parameters: Optional[Mapping[str, str]] = None,
    persistent: Optional[MutableMapping[str, str]] = None,
    emit_header: bool = False,
) -> Tuple[RequestContext, io.BytesIO]:
    """Создаёт контекст без заголовка, пишущий в BytesIO."""
    out = io.BytesIO()
    ctx = RequestContext(out, parameters, persistent, [], emit_header=emit_header)
    return ctx, out


def render_bytes(
    source: str,
    parameters: Optional[Mapping[str, str]] = None,
    persistent: Optional[MutableMapping[str, str]] = None,
    config: Optional[EngineConfig] = None,
) -> bytes:
    ctx, out = make_context(parameters, persistent)
    SmartScriptEngine(parse_script(source), ctx, config).execute()
    return out.getvalue()


def render_text(
    source: str,
    parameters: Optional[Mapping[str, str]] = None,
    persistent: Optional[MutableMapping[str, str]] = None,
    config: Optional[EngineConfig] = None,
) -> str:
    """Парсит и исполняет скрипт, возвращая вывод как строку UTF-8."""
    return render_bytes(source, parameters, persistent, config).decode("utf-8")


class RecordingContext:
    """
    Минимальная реализация протокола контекста для проверки вызовов движка.

    Каждая запись сохраняется отдельным элементом writes.
    """

    def __init__(self, parameters: Optional[Dict[str, str]] = None):
        self.writes: List[Union[bytes, str]] = []
        self.parameters = dict(parameters or {})
        self.persistent: Dict[str, str] = {}
        self.temporary: Dict[str, str] = {}
        self.mime_type: Optional[str] = None

    def write(self, data: Union[bytes, str]) -> "RecordingContext":
        self.writes.append(data)
        return self

    def get_parameter(self, name: str) -> Optional[str]:
        return self.parameters.get(name)

    def get_persistent_parameter(self, name: str) -> Optional[str]:
        return self.persistent.get(name)

    def set_persistent_parameter(self, name: str, value: str) -> None:
        self.persistent[name] = value

    def remove_persistent_parameter(self, name: str) -> None:
        self.persistent.pop(name, None)

    def get_temporary_parameter(self, name: str) -> Optional[str]:
        return self.temporary.get(name)

    def set_temporary_parameter(self, name: str, value: str) -> None:
        self.temporary[name] = value

    def remove_temporary_parameter(self, name: str) -> None:
        self.temporary.pop(name, None)

    def set_mime_type(self, mime_type: str) -> None:
        self.mime_type = mime_type
