"""Тесты стеков исполнения."""

import pytest

from smartscript.errors import EmptyStackError, ScriptRuntimeError
from smartscript.exec.multistack import ObjectMultistack, ObjectStack
from smartscript.exec.value import ValueWrapper


class TestObjectMultistack:

    def test_push_peek_pop(self):
        stacks = ObjectMultistack()
        first, second = ValueWrapper(1), ValueWrapper(2)

        stacks.push("i", first)
        stacks.push("i", second)

        assert stacks.peek("i") is second
        assert stacks.depth("i") == 2
        assert stacks.pop("i") is second
        assert stacks.pop("i") is first
        assert stacks.is_empty("i")

    def test_names_are_independent(self):
        stacks = ObjectMultistack()
        stacks.push("i", ValueWrapper(1))
        stacks.push("j", ValueWrapper(2))

        stacks.pop("j")

        assert stacks.is_empty("j")
        assert not stacks.is_empty("i")

    def test_unknown_name_is_empty(self):
        stacks = ObjectMultistack()

        assert stacks.is_empty("x")
        assert stacks.depth("x") == 0

    def test_pop_empty_raises(self):
        with pytest.raises(EmptyStackError, match="Stack 'x' is empty"):
            ObjectMultistack().pop("x")

    def test_peek_empty_raises(self):
        with pytest.raises(EmptyStackError):
            ObjectMultistack().peek("x")

    def test_empty_stack_error_is_runtime_error(self):
        assert issubclass(EmptyStackError, ScriptRuntimeError)

    def test_none_name(self):
        stacks = ObjectMultistack()
        with pytest.raises(ValueError):
            stacks.push(None, ValueWrapper(1))  # type: ignore[arg-type]
        with pytest.raises(ValueError):
            stacks.is_empty(None)  # type: ignore[arg-type]


class TestObjectStack:

    def test_lifo(self):
        stack = ObjectStack()
        stack.push(1)
        stack.push("a")

        assert len(stack) == 2
        assert stack.peek() == "a"
        assert stack.pop() == "a"
        assert stack.pop() == 1
        assert stack.is_empty()

    def test_drain_bottom_to_top(self):
        stack = ObjectStack()
        for value in (1, 2.5, "x"):
            stack.push(value)

        assert stack.drain() == [1, 2.5, "x"]
        assert stack.is_empty()

    def test_empty_raises(self):
        stack = ObjectStack()
        with pytest.raises(EmptyStackError):
            stack.pop()
        with pytest.raises(EmptyStackError):
            stack.peek()
