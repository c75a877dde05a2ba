import logging
import math
from dataclasses import dataclass
from typing import Callable, Optional

from vmcalc.compiler import Chunk, OpCode, compile
from vmcalc.diagnostics import Diagnostic, Span
from vmcalc.stack import Slot, Stack
from vmcalc.utils import format_number

logger = logging.getLogger("vmcalc.vm")


@dataclass
class VmError(Diagnostic):
    stage = "Runtime error"


@dataclass
class DivisionByZero(VmError):
    message: str = "Division by zero!"
    help: Optional[str] = "try to divide by anything other than that"


@dataclass
class NoReturnOpcode(VmError):
    message: str = "No return opcode emitted!"
    help: Optional[str] = "the program must end with a RET instruction"


def _fmod(a: float, b: float) -> float:
    if math.isinf(a):
        return math.nan
    return math.fmod(a, b)


BinaryOperationImpl = Callable[[float, float], float]

binary_impls: dict[OpCode, BinaryOperationImpl] = {
    OpCode.ADD: lambda a, b: a + b,
    OpCode.SUB: lambda a, b: a - b,
    OpCode.MULT: lambda a, b: a * b,
    OpCode.DIV: lambda a, b: a / b,
    OpCode.MOD: _fmod,
}


def _printed_width(value: float) -> int:
    """Rough count of digits the value took in the source"""
    if value == 0 or not math.isfinite(value):
        return 1
    return math.floor(abs(math.log10(abs(value)))) + 1


def division_span(code: str, left: Slot, right: Slot) -> Span:
    """Best-effort span covering both operands of a faulting division.

    Operand offsets point past the end of their tokens, so the gap between
    them covers the operator and the right operand; the left operand's
    width is estimated from its magnitude. Results of earlier operations
    carry offset 0 and produce a clamped, approximate span.
    """
    left_offset, left_value = left
    right_offset, _ = right
    width = _printed_width(left_value)
    start = left_offset - width
    length = right_offset - left_offset + width

    end = min(len(code), start + length)
    start = min(max(0, start), len(code))
    if end <= start:
        end = len(code)
    return start, end - start


class Vm:
    def __init__(self, source: str, chunk: Chunk):
        self.source = source
        self.chunk = chunk
        self.stack = Stack()
        self.ip = 0

    def execute(self) -> str:
        """Run the chunk until RET and return the formatted result"""
        try:
            return self._run()
        except Diagnostic as e:
            logger.debug("Execution of %r failed at ip=%d: %s", self.source, self.ip, e.message)
            raise

    def _run(self) -> str:
        if self.ip >= len(self.chunk):
            raise NoReturnOpcode()

        while self.ip < len(self.chunk):
            instruction = self.chunk[self.ip]
            self.ip += 1
            opcode = instruction.opcode
            if opcode is OpCode.NUM:
                self.stack.push((instruction.offset, instruction.value))
            elif opcode in binary_impls:
                right = self.stack.pop()
                left = self.stack.pop()
                self.stack.push((0, self._binary_operation(opcode, left, right)))
            elif opcode is OpCode.NEG:
                offset, value = self.stack.pop()
                self.stack.push((offset, -value))
            elif opcode is OpCode.NOP:
                pass
            elif opcode is OpCode.RET:
                _, result = self.stack.pop()
                return format_number(result)
            else:
                raise RuntimeError(f"Unexpected opcode: {opcode}")

        raise NoReturnOpcode()

    def _binary_operation(self, opcode: OpCode, left: Slot, right: Slot) -> float:
        if opcode in (OpCode.DIV, OpCode.MOD) and right[1] == 0.0:
            raise DivisionByZero(source=self.source, span=division_span(self.source, left, right))
        return binary_impls[opcode](left[1], right[1])


def execute(source: str, chunk: Chunk) -> str:
    return Vm(source, chunk).execute()


def evaluate(code: str) -> str:
    """Compile and run a single source line"""
    return execute(code, compile(code))
