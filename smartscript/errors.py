"""
Base exceptions for user-facing errors.

All expected errors that should be displayed to the user
as clean messages (without stack traces) must inherit from SmartScriptError.

Programming errors and bugs should NOT inherit from SmartScriptError:
they will propagate with full tracebacks.
"""

from __future__ import annotations

from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .template.tokens import Token


class SmartScriptError(Exception):
    """
    Base class for all user-facing errors in SmartScript.

    These errors indicate problems that the user can fix:
    malformed scripts, unknown variables, invalid configuration, etc.
    """
    pass


class ScanError(SmartScriptError):
    """Ошибка лексического анализа."""

    def __init__(self, message: str, line: int, column: int, position: int):
        super().__init__(f"{message} at {line}:{column}")
        self.line = line
        self.column = column
        self.position = position


class ParseError(SmartScriptError):
    """Ошибка синтаксического анализа."""

    def __init__(self, message: str, token: Optional[Token] = None):
        if token is not None:
            message = f"{message} at {token.line}:{token.column} (token: {token.type.name})"
        super().__init__(message)
        self.token = token
        self.line = token.line if token is not None else None
        self.column = token.column if token is not None else None


class ScriptRuntimeError(SmartScriptError, RuntimeError):
    """Ошибка выполнения скрипта (прерывает текущий рендеринг)."""
    pass


class EmptyStackError(ScriptRuntimeError):
    """Попытка снять или прочитать значение с пустого стека."""
    pass


class ConfigLoadError(SmartScriptError, ValueError):
    """Ошибка загрузки конфигурации с указанием поля."""
    pass


class HeaderGeneratedError(SmartScriptError, RuntimeError):
    """Изменение параметров ответа после того, как заголовок уже записан."""
    pass


class ScriptProcessingError(SmartScriptError):
    """Общая ошибка обработки файла скрипта."""

    def __init__(self, message: str, script_name: str = "", cause: Optional[Exception] = None):
        super().__init__(f"Script processing error in '{script_name}': {message}")
        self.script_name = script_name
        self.cause = cause


__all__ = [
    "SmartScriptError",
    "ScanError",
    "ParseError",
    "ScriptRuntimeError",
    "EmptyStackError",
    "ConfigLoadError",
    "HeaderGeneratedError",
    "ScriptProcessingError",
]
