"""
Стеки исполнения.

ObjectMultistack - набор независимых LIFO-стеков, адресуемых по имени
(значения переменных циклов). ObjectStack - простой стек вычисления
echo-выражения.
"""

from __future__ import annotations

from typing import Dict, List

from .value import StackValue, ValueWrapper
from ..errors import EmptyStackError


class ObjectMultistack:
    """
    Отображение "имя переменной -> стек значений".

    Создаётся заново на каждый рендеринг. Вложенный цикл с тем же
    именем переменной кладёт своё значение поверх внешнего.
    """

    def __init__(self):
        self._stacks: Dict[str, List[ValueWrapper]] = {}

    def push(self, name: str, value: ValueWrapper) -> None:
        if name is None:
            raise ValueError("Given name must not be None")
        self._stacks.setdefault(name, []).append(value)

    def pop(self, name: str) -> ValueWrapper:
        """
        Raises:
            EmptyStackError: Если для имени нет ни одного значения
        """
        stack = self._stack_for(name)
        value = stack.pop()
        if not stack:
            del self._stacks[name]
        return value

    def peek(self, name: str) -> ValueWrapper:
        """
        Raises:
            EmptyStackError: Если для имени нет ни одного значения
        """
        return self._stack_for(name)[-1]

    def is_empty(self, name: str) -> bool:
        if name is None:
            raise ValueError("Given name must not be None")
        return name not in self._stacks

    def depth(self, name: str) -> int:
        """Количество значений, лежащих под именем."""
        return len(self._stacks.get(name, ()))

    def _stack_for(self, name: str) -> List[ValueWrapper]:
        if name is None:
            raise ValueError("Given name must not be None")
        stack = self._stacks.get(name)
        if not stack:
            raise EmptyStackError(f"Stack '{name}' is empty")
        return stack


class ObjectStack:
    """Стек вычисления одного echo-тега."""

    def __init__(self):
        self._items: List[StackValue] = []

    def push(self, value: StackValue) -> None:
        self._items.append(value)

    def pop(self) -> StackValue:
        if not self._items:
            raise EmptyStackError("Evaluation stack is empty")
        return self._items.pop()

    def peek(self) -> StackValue:
        if not self._items:
            raise EmptyStackError("Evaluation stack is empty")
        return self._items[-1]

    def is_empty(self) -> bool:
        return not self._items

    def drain(self) -> List[StackValue]:
        """Снимает все значения и возвращает их в порядке от дна к вершине."""
        items = self._items
        self._items = []
        return items

    def __len__(self) -> int:
        return len(self._items)


__all__ = ["ObjectMultistack", "ObjectStack"]
