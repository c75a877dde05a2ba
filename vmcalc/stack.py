from dataclasses import dataclass
from typing import Optional

from vmcalc.diagnostics import Diagnostic

STACK_CAPACITY = 1024

# (source offset of the producing token, value)
Slot = tuple[int, float]


@dataclass
class StackError(Diagnostic):
    stage = "Stack error"


@dataclass
class StackOverflow(StackError):
    message: str = "Stack overflow!"
    help: Optional[str] = "try a shorter expression"


@dataclass
class StackUnderflow(StackError):
    message: str = "Stack underflow!"
    help: Optional[str] = "the program popped more values than it pushed"


class Stack:
    def __init__(self, capacity: int = STACK_CAPACITY):
        self.capacity = capacity
        self.items: list[Slot] = [(0, 0.0)] * capacity
        self.top = 0

    def __len__(self) -> int:
        return self.top

    def push(self, slot: Slot) -> None:
        if self.top >= self.capacity:
            raise StackOverflow()
        self.items[self.top] = slot
        self.top += 1

    def pop(self) -> Slot:
        if self.top <= 0:
            raise StackUnderflow()
        self.top -= 1
        return self.items[self.top]
