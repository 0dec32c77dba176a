"""
Процессор скриптов.

Публичный API, объединяющий лексер, парсер и движок исполнения
в удобный интерфейс. Разобранные деревья кэшируются и разделяются
между параллельными рендерингами.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import BinaryIO, Dict, List, Mapping, MutableMapping, Optional

from .config import EngineConfig
from .context import RCCookie, RequestContext, RequestContextProtocol
from .errors import ScriptProcessingError
from .exec.engine import SmartScriptEngine
from .template.nodes import DocumentNode
from .template.parser import parse_script

logger = logging.getLogger(__name__)


class ScriptProcessor:
    """
    Основной процессор скриптов.
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        """
        Args:
            config: Настройки движка (по умолчанию - дефолтные)
        """
        self.config = config or EngineConfig()

        # Кэш разобранных деревьев
        self._cache: Dict[str, DocumentNode] = {}
        self._lock = threading.Lock()

    def parse(self, script_text: str, script_name: str = "") -> DocumentNode:
        """
        Парсит текст скрипта в дерево документа с кэшированием.

        Raises:
            ScanError: При ошибке лексического анализа
            ParseError: При ошибке синтаксического анализа
        """
        cache_key = f"{script_name}:{hash(script_text)}"

        with self._lock:
            cached = self._cache.get(cache_key)
        if cached is not None:
            logger.debug("Script '%s' taken from cache", script_name)
            return cached

        document = parse_script(script_text)

        with self._lock:
            # Параллельный вызов мог успеть раньше - оставляем первое дерево
            document = self._cache.setdefault(cache_key, document)
        return document

    def render(
        self,
        script_text: str,
        context: RequestContextProtocol,
        script_name: str = "",
    ) -> None:
        """
        Парсит (или берёт из кэша) и исполняет скрипт с указанным контекстом.

        Raises:
            ScanError, ParseError: При ошибке разбора
            ScriptRuntimeError: При ошибке исполнения
        """
        document = self.parse(script_text, script_name)
        SmartScriptEngine(document, context, self.config).execute()

    def render_file(self, path: Path, context: RequestContextProtocol) -> None:
        """Загружает скрипт из файла и исполняет его."""
        self.render(self.load_script(path), context, str(path))

    def load_script(self, path: Path) -> str:
        """
        Читает текст скрипта из файла.

        Raises:
            ScriptProcessingError: Если файл нельзя прочитать
        """
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ScriptProcessingError(f"Failed to read script: {e}", str(path), e) from e

    def create_context(
        self,
        output: BinaryIO,
        parameters: Optional[Mapping[str, str]] = None,
        persistent_parameters: Optional[MutableMapping[str, str]] = None,
        cookies: Optional[List[RCCookie]] = None,
        emit_header: bool = True,
    ) -> RequestContext:
        """Создаёт контекст запроса с метаданными ответа из конфигурации."""
        return RequestContext(
            output,
            parameters,
            persistent_parameters,
            cookies,
            encoding=self.config.encoding,
            status_code=self.config.status_code,
            status_text=self.config.status_text,
            mime_type=self.config.mime_type,
            emit_header=emit_header,
        )

    def clear_cache(self) -> None:
        with self._lock:
            self._cache.clear()


__all__ = ["ScriptProcessor"]
