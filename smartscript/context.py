"""
Контекст запроса.

Граница между движком скриптов и внешним окружением: поток вывода,
параметры запроса (только чтение), постоянные и временные параметры,
метаданные ответа и cookie. При первой записи (если включено) формирует
заголовок ответа в стиле HTTP/1.1, после чего метаданные менять нельзя.
"""

from __future__ import annotations

import codecs
import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import BinaryIO, Dict, List, Mapping, MutableMapping, Optional, Protocol, Set, Union, runtime_checkable

from .errors import HeaderGeneratedError

logger = logging.getLogger(__name__)

HEADER_ENCODING = "iso-8859-1"


@runtime_checkable
class RequestContextProtocol(Protocol):
    """
    Протокол контекста, которым пользуется движок.

    Определяет запись в тело ответа, доступ к параметрам трёх областей
    и установку типа содержимого.
    """

    def write(self, data: Union[bytes, str]) -> object: ...

    def get_parameter(self, name: str) -> Optional[str]: ...

    def get_persistent_parameter(self, name: str) -> Optional[str]: ...

    def set_persistent_parameter(self, name: str, value: str) -> None: ...

    def remove_persistent_parameter(self, name: str) -> None: ...

    def get_temporary_parameter(self, name: str) -> Optional[str]: ...

    def set_temporary_parameter(self, name: str, value: str) -> None: ...

    def remove_temporary_parameter(self, name: str) -> None: ...

    def set_mime_type(self, mime_type: str) -> None: ...


@dataclass(frozen=True)
class RCCookie:
    """Cookie, отправляемая клиенту в заголовке Set-Cookie."""
    name: str
    value: str
    max_age: Optional[int] = None
    domain: Optional[str] = None
    path: Optional[str] = None

    def header_value(self) -> str:
        parts = [f"{self.name}={self.value}"]
        if self.domain is not None:
            parts.append(f"Domain={self.domain}")
        if self.path is not None:
            parts.append(f"Path={self.path}")
        if self.max_age is not None:
            parts.append(f"Max-Age={self.max_age}")
        return "; ".join(parts)


class RequestContext:
    """
    Контекст одного запроса.

    Параметры запроса доступны только для чтения; постоянные параметры
    разделяются с вызывающей стороной (изменения видны снаружи);
    временные параметры живут только внутри этого контекста.
    """

    def __init__(
        self,
        output: BinaryIO,
        parameters: Optional[Mapping[str, str]] = None,
        persistent_parameters: Optional[MutableMapping[str, str]] = None,
        output_cookies: Optional[List[RCCookie]] = None,
        *,
        encoding: str = "UTF-8",
        status_code: int = 200,
        status_text: str = "OK",
        mime_type: str = "text/html",
        emit_header: bool = True,
    ):
        """
        Args:
            output: Бинарный поток, в который пишется ответ
            parameters: Параметры запроса
            persistent_parameters: Постоянные параметры (сессия)
            output_cookies: Cookie для заголовка ответа
            emit_header: Записывать ли заголовок перед телом ответа

        Raises:
            ValueError: Если поток вывода не задан
        """
        if output is None:
            raise ValueError("Output stream must not be None")

        self._output = output
        self._parameters: Mapping[str, str] = MappingProxyType(dict(parameters or {}))
        self._persistent: MutableMapping[str, str] = (
            persistent_parameters if persistent_parameters is not None else {}
        )
        self._temporary: Dict[str, str] = {}
        self._cookies: List[RCCookie] = output_cookies if output_cookies is not None else []

        self._encoding = self._check_encoding(encoding)
        self._status_code = status_code
        self._status_text = status_text
        self._mime_type = mime_type
        self._content_length: Optional[int] = None

        self.emit_header = emit_header
        self.header_generated = False

    # ======= Метаданные ответа =======

    @property
    def encoding(self) -> str:
        return self._encoding

    def set_encoding(self, encoding: str) -> None:
        self._ensure_header_not_generated()
        self._encoding = self._check_encoding(encoding)

    @property
    def status_code(self) -> int:
        return self._status_code

    def set_status_code(self, status_code: int) -> None:
        self._ensure_header_not_generated()
        self._status_code = status_code

    @property
    def status_text(self) -> str:
        return self._status_text

    def set_status_text(self, status_text: str) -> None:
        self._ensure_header_not_generated()
        self._status_text = status_text

    @property
    def mime_type(self) -> str:
        return self._mime_type

    def set_mime_type(self, mime_type: str) -> None:
        self._ensure_header_not_generated()
        self._mime_type = mime_type

    @property
    def content_length(self) -> Optional[int]:
        return self._content_length

    def set_content_length(self, content_length: int) -> None:
        if content_length < 0:
            raise ValueError("Length of content can not be negative")
        self._ensure_header_not_generated()
        self._content_length = content_length

    # ======= Параметры =======

    def get_parameter(self, name: str) -> Optional[str]:
        return self._parameters.get(name)

    def get_parameter_names(self) -> Set[str]:
        return set(self._parameters)

    def get_persistent_parameter(self, name: str) -> Optional[str]:
        return self._persistent.get(name)

    def get_persistent_parameter_names(self) -> Set[str]:
        return set(self._persistent)

    def set_persistent_parameter(self, name: str, value: str) -> None:
        self._persistent[name] = value

    def remove_persistent_parameter(self, name: str) -> None:
        self._persistent.pop(name, None)

    def get_temporary_parameter(self, name: str) -> Optional[str]:
        return self._temporary.get(name)

    def get_temporary_parameter_names(self) -> Set[str]:
        return set(self._temporary)

    def set_temporary_parameter(self, name: str, value: str) -> None:
        self._temporary[name] = value

    def remove_temporary_parameter(self, name: str) -> None:
        self._temporary.pop(name, None)

    # ======= Cookie =======

    def add_rc_cookie(self, cookie: RCCookie) -> None:
        if cookie is None:
            raise ValueError("Cookie must not be None")
        self._ensure_header_not_generated()
        self._cookies.append(cookie)

    @property
    def output_cookies(self) -> List[RCCookie]:
        return list(self._cookies)

    # ======= Запись =======

    def write(self, data: Union[bytes, str]) -> RequestContext:
        """
        Пишет данные в тело ответа; строки кодируются в текущей кодировке.

        При первой записи формирует заголовок (если emit_header включён).
        """
        if data is None:
            raise ValueError("Data must not be None")

        if self.emit_header and not self.header_generated:
            self._write_header()

        payload = data.encode(self._encoding) if isinstance(data, str) else bytes(data)
        self._output.write(payload)
        self._output.flush()
        return self

    def build_header(self) -> str:
        """Текст заголовка ответа для текущих метаданных."""
        lines = [f"HTTP/1.1 {self._status_code} {self._status_text}"]

        content_type = self._mime_type
        if content_type.startswith("text/"):
            content_type += f"; charset={self._encoding}"
        lines.append(f"Content-Type: {content_type}")

        if self._content_length is not None:
            lines.append(f"Content-Length: {self._content_length}")

        for cookie in self._cookies:
            lines.append(f"Set-Cookie: {cookie.header_value()}")

        return "\r\n".join(lines) + "\r\n\r\n"

    # ======= Внутренние методы =======

    def _write_header(self) -> None:
        header = self.build_header()
        self._output.write(header.encode(HEADER_ENCODING))
        self._output.flush()
        self.header_generated = True
        logger.debug("Response header generated: %s %s", self._status_code, self._mime_type)

    def _ensure_header_not_generated(self) -> None:
        if self.header_generated:
            raise HeaderGeneratedError("Header already generated")

    @staticmethod
    def _check_encoding(encoding: str) -> str:
        try:
            codecs.lookup(encoding)
        except LookupError:
            raise ValueError(f"Unknown encoding: {encoding}") from None
        return encoding


__all__ = ["RequestContext", "RequestContextProtocol", "RCCookie", "HEADER_ENCODING"]
