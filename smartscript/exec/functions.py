"""
Встроенные функции и операторы echo-выражений.

Таблицы заполняются один раз при импорте и дальше не меняются.
Каждая функция сама снимает свои операнды со стека вычисления
и кладёт на него результат.
"""

from __future__ import annotations

import math
from types import MappingProxyType
from typing import Callable, Mapping

from .decfmt import format_decimal
from .multistack import ObjectStack
from .value import ValueWrapper, to_number, to_text
from ..context import RequestContextProtocol

StackFunction = Callable[[ObjectStack], None]
ContextFunction = Callable[[ObjectStack, RequestContextProtocol], None]


# ---------------------------- операторы ---------------------------- #

def _binary_operator(method: str) -> StackFunction:
    """Оператор над двумя верхними значениями стека; вершина - правый операнд."""
    def apply(stack: ObjectStack) -> None:
        right = stack.pop()
        left = stack.pop()
        cell = ValueWrapper(left)
        getattr(cell, method)(right)
        stack.push(cell.get_value())

    apply.__name__ = f"operator_{method}"
    return apply


OPERATOR_FUNCTIONS: Mapping[str, StackFunction] = MappingProxyType({
    "+": _binary_operator("increment"),
    "-": _binary_operator("decrement"),
    "*": _binary_operator("multiply"),
    "/": _binary_operator("divide"),
})


# ------------------------- функции над стеком ------------------------- #

def fn_sin(stack: ObjectStack) -> None:
    """Синус угла, заданного в градусах."""
    degrees = to_number(stack.pop(), "Argument of @sin is not a number")
    stack.push(math.sin(math.radians(degrees)))


def fn_decfmt(stack: ObjectStack) -> None:
    """Снимает шаблон формата, затем число; кладёт отформатированную строку."""
    pattern = to_text(stack.pop())
    number = to_number(stack.pop(), "Argument of @decfmt is not a number")
    stack.push(format_decimal(number, pattern))


def fn_dup(stack: ObjectStack) -> None:
    stack.push(stack.peek())


def fn_swap(stack: ObjectStack) -> None:
    second = stack.pop()
    first = stack.pop()
    stack.push(second)
    stack.push(first)


STACK_FUNCTIONS: Mapping[str, StackFunction] = MappingProxyType({
    "sin": fn_sin,
    "decfmt": fn_decfmt,
    "dup": fn_dup,
    "swap": fn_swap,
})


# ----------------------- функции над контекстом ----------------------- #

def _unquote(text: str) -> str:
    if len(text) >= 2 and text.startswith('"') and text.endswith('"'):
        return text[1:-1]
    return text


def fn_set_mime_type(stack: ObjectStack, context: RequestContextProtocol) -> None:
    """Снимает тип содержимого (возможно, в кавычках) и передаёт его контексту."""
    mime_type = _unquote(to_text(stack.pop()))
    if mime_type:
        context.set_mime_type(mime_type)


def _param_getter(getter: str) -> ContextFunction:
    """Снимает значение по умолчанию, затем имя; кладёт найденное значение или умолчание."""
    def apply(stack: ObjectStack, context: RequestContextProtocol) -> None:
        default = stack.pop()
        name = to_text(stack.pop())
        value = getattr(context, getter)(name)
        stack.push(value if value is not None else default)

    apply.__name__ = getter
    return apply


def _param_setter(setter: str) -> ContextFunction:
    """Снимает значение, затем имя; сохраняет значение в контексте."""
    def apply(stack: ObjectStack, context: RequestContextProtocol) -> None:
        value = stack.pop()
        name = to_text(stack.pop())
        getattr(context, setter)(name, to_text(value))

    apply.__name__ = setter
    return apply


def _param_remover(remover: str) -> ContextFunction:
    def apply(stack: ObjectStack, context: RequestContextProtocol) -> None:
        getattr(context, remover)(to_text(stack.pop()))

    apply.__name__ = remover
    return apply


CONTEXT_FUNCTIONS: Mapping[str, ContextFunction] = MappingProxyType({
    "setMimeType": fn_set_mime_type,
    "paramGet": _param_getter("get_parameter"),
    "pparamGet": _param_getter("get_persistent_parameter"),
    "pparamSet": _param_setter("set_persistent_parameter"),
    "pparamDel": _param_remover("remove_persistent_parameter"),
    "tparamGet": _param_getter("get_temporary_parameter"),
    "tparamSet": _param_setter("set_temporary_parameter"),
    "tparamDel": _param_remover("remove_temporary_parameter"),
})


__all__ = [
    "StackFunction",
    "ContextFunction",
    "OPERATOR_FUNCTIONS",
    "STACK_FUNCTIONS",
    "CONTEXT_FUNCTIONS",
]
