import pytest

from vmcalc.stack import STACK_CAPACITY, Stack, StackOverflow, StackUnderflow


def test_stack() -> None:
    stack = Stack()
    stack.push((0, 1.0))
    stack.push((0, 2.0))
    stack.push((0, 3.0))
    assert stack.pop() == (0, 3.0)
    assert stack.top == 2
    assert len(stack) == 2


def test_stack_is_lifo_and_keeps_offsets() -> None:
    stack = Stack()
    stack.push((1, 10.0))
    stack.push((4, 20.0))
    assert stack.pop() == (4, 20.0)
    assert stack.pop() == (1, 10.0)


def test_overflow() -> None:
    stack = Stack()
    for i in range(STACK_CAPACITY):
        stack.push((0, float(i)))
    assert stack.top == STACK_CAPACITY == 1024
    with pytest.raises(StackOverflow):
        stack.push((0, 0.0))
    assert stack.top == STACK_CAPACITY


def test_underflow() -> None:
    stack = Stack()
    with pytest.raises(StackUnderflow):
        stack.pop()
    stack.push((0, 1.0))
    stack.pop()
    with pytest.raises(StackUnderflow):
        stack.pop()
    assert stack.top == 0


def test_custom_capacity() -> None:
    stack = Stack(capacity=1)
    stack.push((0, 1.0))
    with pytest.raises(StackOverflow):
        stack.push((0, 2.0))
