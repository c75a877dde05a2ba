import enum
import logging
from dataclasses import dataclass
from typing import Iterator

from vmcalc.lexer import TokenKind, TokenStream, tokenize
from vmcalc.parser import (
    Expression,
    Negative,
    NestingTooDeep,
    Number,
    Operator,
    Positive,
    UnexpectedToken,
    parse,
)
from vmcalc.utils import PrintableEnum, format_number

logger = logging.getLogger("vmcalc.compiler")


class OpCode(PrintableEnum):
    ADD = enum.auto()
    SUB = enum.auto()
    DIV = enum.auto()
    MULT = enum.auto()
    MOD = enum.auto()
    NEG = enum.auto()
    NOP = enum.auto()
    NUM = enum.auto()
    RET = enum.auto()


@dataclass(frozen=True)
class Instruction:
    opcode: OpCode
    # only meaningful for NUM
    offset: int = 0
    value: float = 0.0

    def __str__(self) -> str:
        if self.opcode is OpCode.NUM:
            return f"{self.opcode} {format_number(self.value)} @{self.offset}"
        return str(self.opcode)


class Chunk:
    """Append-only instruction sequence produced by the compiler"""

    def __init__(self) -> None:
        self._instructions: list[Instruction] = []

    def emit(self, opcode: OpCode, offset: int = 0, value: float = 0.0) -> int:
        self._instructions.append(Instruction(opcode=opcode, offset=offset, value=value))
        return len(self._instructions) - 1

    def __len__(self) -> int:
        return len(self._instructions)

    def __getitem__(self, idx: int) -> Instruction:
        return self._instructions[idx]

    def __iter__(self) -> Iterator[Instruction]:
        return iter(self._instructions)

    def disassemble(self) -> str:
        return "\n".join(f"{i:04d} {instruction}" for i, instruction in enumerate(self._instructions))


OPERATOR_OPCODES = {
    TokenKind.PLUS: OpCode.ADD,
    TokenKind.MINUS: OpCode.SUB,
    TokenKind.DIV: OpCode.DIV,
    TokenKind.MULT: OpCode.MULT,
    TokenKind.MOD: OpCode.MOD,
}


def _traverse_and_compile(expr: Expression, chunk: Chunk) -> None:
    if isinstance(expr, Number):
        chunk.emit(OpCode.NUM, offset=expr.offset, value=expr.value)
    elif isinstance(expr, Negative):
        _traverse_and_compile(expr.operand, chunk)
        chunk.emit(OpCode.NEG)
    elif isinstance(expr, Positive):
        _traverse_and_compile(expr.operand, chunk)
        chunk.emit(OpCode.NOP)
    elif isinstance(expr, Operator):
        _traverse_and_compile(expr.left, chunk)
        _traverse_and_compile(expr.right, chunk)
        chunk.emit(OPERATOR_OPCODES[expr.op.kind])
    else:
        raise TypeError(f"Unexpected expression type: {expr!r}")


def compile_expression(expr: Expression) -> Chunk:
    chunk = Chunk()
    _traverse_and_compile(expr, chunk)
    chunk.emit(OpCode.RET)
    return chunk


def compile(code: str) -> Chunk:
    """Lex, parse and lower a source line; raises ParserError on malformed input"""
    tokens = TokenStream(tokenize(code))
    try:
        tree = parse(code, tokens, 0)
        leftover = tokens.peek()
        if leftover is not None:
            raise UnexpectedToken(source=code, span=(leftover.start, len(leftover.lexeme)))
        chunk = compile_expression(tree)
    except RecursionError:
        # parse and lowering recurse once per nesting level
        raise NestingTooDeep(source=code, span=(0, len(code.rstrip("\n")))) from None
    logger.debug("Compiled %r:\n%s", code, chunk.disassemble())
    return chunk
