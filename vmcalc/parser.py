from dataclasses import dataclass
from typing import Optional, Union

from vmcalc.diagnostics import Diagnostic
from vmcalc.lexer import Token, TokenKind, TokenStream
from vmcalc.utils import format_number


@dataclass
class ParserError(Diagnostic):
    stage = "Parser error"


@dataclass
class UnexpectedEof(ParserError):
    message: str = "Unexpected end of input!"
    help: Optional[str] = "try writing a complete expression (type help for more info)"


@dataclass
class UnexpectedToken(ParserError):
    message: str = "Unexpected token!"
    help: Optional[str] = "enter the help command for a list of valid operations"


@dataclass
class NumParseError(ParserError):
    message: str = "Failed to parse number!"
    help: Optional[str] = "try entering a valid number"


@dataclass
class UnclosedBracket(ParserError):
    message: str = "Unclosed brackets!"
    help: Optional[str] = "try closing brackets next time?"


@dataclass
class NestingTooDeep(ParserError):
    message: str = "Expression nested too deeply!"
    help: Optional[str] = "try splitting the expression or removing redundant brackets and signs"


@dataclass
class Number:
    offset: int
    value: float

    def __str__(self) -> str:
        return format_expression(self)


@dataclass
class Negative:
    operand: "Expression"

    def __str__(self) -> str:
        return format_expression(self)


@dataclass
class Positive:
    operand: "Expression"

    def __str__(self) -> str:
        return format_expression(self)


@dataclass
class Operator:
    op: Token
    left: "Expression"
    right: "Expression"

    def __str__(self) -> str:
        return format_expression(self)


Expression = Union[Number, Negative, Positive, Operator]

ARITHMETIC_OPERATORS = {
    TokenKind.PLUS: "+",
    TokenKind.MINUS: "-",
    TokenKind.MULT: "*",
    TokenKind.DIV: "/",
    TokenKind.MOD: "%",
}


def get_binding_power(kind: TokenKind) -> tuple[int, int]:
    """(prefix, infix) binding power; the prefix one is only used by unary +/-"""
    if kind in (TokenKind.PLUS, TokenKind.MINUS):
        return 3, 1
    elif kind is TokenKind.MOD:
        return 0, 1
    elif kind in (TokenKind.MULT, TokenKind.DIV):
        return 0, 2
    else:
        raise ValueError(f"{kind} is not an arithmetic operator")


def parse(code: str, tokens: TokenStream, min_binding_power: int = 0) -> Expression:
    token = tokens.next()
    if token is None:
        raise UnexpectedEof()

    lhs: Expression
    if token.kind is TokenKind.NUMBER:
        try:
            value = float(token.lexeme)
        except ValueError:
            raise NumParseError(source=code, span=(token.start, len(token.lexeme))) from None
        lhs = Number(offset=token.offset, value=value)
    elif token.kind is TokenKind.LPAREN:
        lhs = parse(code, tokens, 0)
        closing = tokens.next()
        if closing is None or closing.kind is not TokenKind.RPAREN:
            raise UnclosedBracket(source=code, span=(token.start, 1))
    elif token.kind is TokenKind.MINUS:
        prefix_power, _ = get_binding_power(token.kind)
        lhs = Negative(parse(code, tokens, prefix_power))
    elif token.kind is TokenKind.PLUS:
        prefix_power, _ = get_binding_power(token.kind)
        lhs = Positive(parse(code, tokens, prefix_power))
    else:
        raise UnexpectedToken(source=code, span=(token.start, len(token.lexeme)))

    while True:
        next_token = tokens.peek()
        if next_token is None or next_token.kind not in ARITHMETIC_OPERATORS:
            break
        _, infix_power = get_binding_power(next_token.kind)
        if infix_power <= min_binding_power:
            break
        operator_token = tokens.next()
        assert operator_token is not None
        rhs = parse(code, tokens, infix_power)
        lhs = Operator(op=operator_token, left=lhs, right=rhs)

    return lhs


def format_expression(expr: Expression) -> str:
    """Prefix display form, e.g. '3 * 2 + 1' => '(+ (* 3 2) 1)'"""
    if isinstance(expr, Number):
        return format_number(expr.value)
    elif isinstance(expr, Negative):
        return f"-{format_expression(expr.operand)}"
    elif isinstance(expr, Positive):
        return f"+{format_expression(expr.operand)}"
    elif isinstance(expr, Operator):
        symbol = ARITHMETIC_OPERATORS[expr.op.kind]
        return f"({symbol} {format_expression(expr.left)} {format_expression(expr.right)})"
    else:
        raise TypeError(f"Unexpected expression type: {expr!r}")


def unparse(expr: Expression) -> str:
    """Fully parenthesized infix source that parses back to an equivalent tree"""
    if isinstance(expr, Number):
        return format_number(expr.value)
    elif isinstance(expr, Negative):
        return f"-({unparse(expr.operand)})"
    elif isinstance(expr, Positive):
        return f"+({unparse(expr.operand)})"
    elif isinstance(expr, Operator):
        symbol = ARITHMETIC_OPERATORS[expr.op.kind]
        return f"({unparse(expr.left)} {symbol} {unparse(expr.right)})"
    else:
        raise TypeError(f"Unexpected expression type: {expr!r}")
