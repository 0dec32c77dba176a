from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .errors import ConfigLoadError

logger = logging.getLogger(__name__)

DEFAULT_CFG_FILE = "smartscript.yaml"

# --------------------------------------------------------------------------- #
# YAML loader
# --------------------------------------------------------------------------- #
_yaml = YAML(typ="safe")


@dataclass(frozen=True)
class EngineConfig:
    """
    Настройки движка и значения по умолчанию для новых контекстов запроса.
    """
    # Кодировка тела ответа
    encoding: str = "UTF-8"
    # Тип содержимого по умолчанию
    mime_type: str = "text/html"
    status_code: int = 200
    status_text: str = "OK"
    # Снимать значение переменной цикла со стека при выходе из цикла.
    # false - старое поведение: значение остаётся и перекрывает внешние.
    pop_loop_bindings: bool = True
    # Предел итераций одного цикла, 0 - без ограничений
    max_loop_iterations: int = 0

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> EngineConfig:
        """
        Накладывает значения пользователя поверх дефолтов.

        Raises:
            ConfigLoadError: При неизвестном ключе или значении неверного типа
        """
        if not isinstance(raw, dict):
            raise ConfigLoadError(f"<root>: expected mapping, got {type(raw).__name__}")

        defaults = {f.name: f.default for f in dataclasses.fields(cls)}
        values: Dict[str, Any] = {}

        for key, val in raw.items():
            if key not in defaults:
                raise ConfigLoadError(f"{key}: unknown option (known: {', '.join(sorted(defaults))})")
            expected = type(defaults[key])
            # bool является подклассом int, поэтому проверяем строго
            if type(val) is not expected:
                raise ConfigLoadError(
                    f"{key}: expected {expected.__name__}, got {type(val).__name__} ({val!r})"
                )
            values[key] = val

        cfg = dataclasses.replace(cls(), **values)
        cfg._validate()
        return cfg

    def _validate(self) -> None:
        if self.max_loop_iterations < 0:
            raise ConfigLoadError("max_loop_iterations: must be >= 0")
        if not 100 <= self.status_code <= 999:
            raise ConfigLoadError(f"status_code: {self.status_code} is not a valid status code")
        if not self.mime_type:
            raise ConfigLoadError("mime_type: must not be empty")


# --------------------------------------------------------------------------- #
# PUBLIC API
# --------------------------------------------------------------------------- #
def load_config(path: Path) -> EngineConfig:
    """
    Загрузить smartscript.yaml.

    • Если файла нет, вернуть дефолты.
    • Пустой файл эквивалентен пустому словарю.
    """
    if not path.exists():
        logger.debug("Config %s not found, using defaults", path)
        return EngineConfig()

    try:
        with path.open(encoding="utf-8") as f:
            raw = _yaml.load(f) or {}
    except YAMLError as e:
        raise ConfigLoadError(f"{path}: invalid YAML: {e}") from e

    return EngineConfig.from_dict(raw)


__all__ = ["EngineConfig", "load_config", "DEFAULT_CFG_FILE"]
