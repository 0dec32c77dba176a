"""
Движок исполнения скриптов.

Обходит дерево документа в глубину в порядке исходного текста
и пишет результат в контекст запроса по мере обхода. Состояние
одного запуска (стеки переменных циклов) создаётся заново в execute(),
поэтому одно дерево можно исполнять параллельно с разными контекстами.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

from .functions import CONTEXT_FUNCTIONS, OPERATOR_FUNCTIONS, STACK_FUNCTIONS
from .multistack import ObjectMultistack, ObjectStack
from .value import StackValue, ValueWrapper, to_text
from ..config import EngineConfig
from ..context import RequestContextProtocol
from ..errors import EmptyStackError, HeaderGeneratedError, ScriptRuntimeError
from ..template.elements import (
    Element, Function, LITERAL_TYPES, Operator, Variable
)
from ..template.nodes import DocumentNode, EchoNode, ForLoopNode, ScriptNode, TextNode

logger = logging.getLogger(__name__)

DEFAULT_STEP = 1


class SmartScriptEngine:
    """
    Исполнитель дерева документа.

    Ошибки исполнения прерывают рендеринг сразу; уже записанный
    в контекст вывод остаётся на месте.
    """

    def __init__(
        self,
        document: DocumentNode,
        context: RequestContextProtocol,
        config: Optional[EngineConfig] = None,
    ):
        if document is None:
            raise ValueError("Document must not be None")
        if context is None:
            raise ValueError("Request context must not be None")

        self.document = document
        self.context = context
        self.config = config or EngineConfig()

    def execute(self) -> None:
        """
        Исполняет документ.

        Raises:
            ScriptRuntimeError: Неизвестная переменная, функция или оператор,
                деление на ноль, нехватка операндов и т.п.
        """
        multistack = ObjectMultistack()
        logger.debug("Executing script with %d top-level nodes", len(self.document.children))
        self._visit(self.document, multistack)

    # ======= Обход дерева =======

    def _visit(self, node: ScriptNode, multistack: ObjectMultistack) -> None:
        if isinstance(node, TextNode):
            self.context.write(node.text)
        elif isinstance(node, EchoNode):
            self._visit_echo(node, multistack)
        elif isinstance(node, ForLoopNode):
            self._visit_loop(node, multistack)
        elif isinstance(node, DocumentNode):
            for child in node.children:
                self._visit(child, multistack)
        else:
            raise TypeError(f"Unsupported node type: {type(node).__name__}")

    def _visit_loop(self, node: ForLoopNode, multistack: ObjectMultistack) -> None:
        name = node.variable.name
        start = self._element_value(node.start, multistack)
        end = self._element_value(node.end, multistack)
        step = self._element_value(node.step, multistack) if node.step is not None else DEFAULT_STEP

        try:
            multistack.push(name, ValueWrapper(start))
        except (ValueError, ArithmeticError) as e:
            raise ScriptRuntimeError(f"Invalid start value of FOR loop '{name}': {e}") from e

        limit = self.config.max_loop_iterations
        iterations = 0

        while self._loop_compare(multistack.peek(name), end, name) <= 0:
            iterations += 1
            if limit and iterations > limit:
                raise ScriptRuntimeError(
                    f"FOR loop '{name}' exceeded {limit} iterations"
                )

            for child in node.children:
                self._visit(child, multistack)

            try:
                multistack.peek(name).increment(step)
            except (ValueError, ArithmeticError) as e:
                raise ScriptRuntimeError(f"Invalid step value of FOR loop '{name}': {e}") from e

        if self.config.pop_loop_bindings:
            multistack.pop(name)

    def _visit_echo(self, node: EchoNode, multistack: ObjectMultistack) -> None:
        stack = ObjectStack()

        for element in node.elements:
            if isinstance(element, LITERAL_TYPES):
                stack.push(element.value)
            elif isinstance(element, Variable):
                stack.push(self._lookup(element.name, multistack))
            elif isinstance(element, Function):
                self._call_function(element.name, stack)
            elif isinstance(element, Operator):
                self._apply_operator(element.symbol, stack)
            else:
                raise ScriptRuntimeError(f"Unsupported element {element.as_text()!r}")

        for value in stack.drain():
            self.context.write(to_text(value))

    # ======= Вычисление элементов =======

    def _element_value(self, element: Element, multistack: ObjectMultistack) -> StackValue:
        """Значение границы или шага цикла."""
        if isinstance(element, Variable):
            return self._lookup(element.name, multistack)
        if isinstance(element, LITERAL_TYPES):
            return element.value
        raise ScriptRuntimeError(f"Unsupported FOR loop argument {element.as_text()!r}")

    @staticmethod
    def _lookup(name: str, multistack: ObjectMultistack) -> Union[int, float]:
        try:
            return multistack.peek(name).get_value()
        except EmptyStackError:
            raise ScriptRuntimeError(f"Unknown variable {name}") from None

    @staticmethod
    def _loop_compare(current: ValueWrapper, end: StackValue, name: str) -> int:
        try:
            return current.num_compare(end)
        except (ValueError, ArithmeticError) as e:
            raise ScriptRuntimeError(f"Invalid end value of FOR loop '{name}': {e}") from e

    def _call_function(self, name: str, stack: ObjectStack) -> None:
        try:
            if name in CONTEXT_FUNCTIONS:
                CONTEXT_FUNCTIONS[name](stack, self.context)
            elif name in STACK_FUNCTIONS:
                STACK_FUNCTIONS[name](stack)
            else:
                raise ScriptRuntimeError(f"Unknown function @{name}")
        except EmptyStackError as e:
            raise ScriptRuntimeError(f"Not enough operands for @{name}") from e
        except HeaderGeneratedError as e:
            raise ScriptRuntimeError(f"Function @{name} failed: {e}") from e
        except (ValueError, ArithmeticError) as e:
            raise ScriptRuntimeError(f"Function @{name} failed: {e}") from e

    @staticmethod
    def _apply_operator(symbol: str, stack: ObjectStack) -> None:
        operator = OPERATOR_FUNCTIONS.get(symbol)
        if operator is None:
            raise ScriptRuntimeError(f"Unsupported operator {symbol}")

        try:
            operator(stack)
        except EmptyStackError as e:
            raise ScriptRuntimeError(f"Not enough operands for operator {symbol}") from e
        except (ValueError, ArithmeticError) as e:
            raise ScriptRuntimeError(f"Operator {symbol} failed: {e}") from e


def render_document(
    document: DocumentNode,
    context: RequestContextProtocol,
    config: Optional[EngineConfig] = None,
) -> None:
    """Удобная функция: исполняет документ с указанным контекстом."""
    SmartScriptEngine(document, context, config).execute()


__all__ = ["SmartScriptEngine", "render_document", "DEFAULT_STEP"]
