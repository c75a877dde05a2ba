import pytest

from vmcalc.diagnostics import Diagnostic
from vmcalc.lexer import Token, TokenKind, TokenStream, tokenize
from vmcalc.parser import (
    Expression,
    Negative,
    Number,
    NumParseError,
    UnclosedBracket,
    UnexpectedEof,
    UnexpectedToken,
    format_expression,
    parse,
    unparse,
)
from vmcalc.vm import evaluate


def parse_code(code: str) -> Expression:
    return parse(code, TokenStream(tokenize(code)), 0)


@pytest.mark.parametrize(
    "code, expected_ast",
    [
        pytest.param("1", "1"),
        pytest.param("2.5", "2.5"),
        pytest.param("3 * 2 + 1", "(+ (* 3 2) 1)"),
        pytest.param("1 + 2 * 3", "(+ 1 (* 2 3))"),
        pytest.param("-3 + 2", "(+ -3 2)"),
        pytest.param("+(-3 + 2)", "+(+ -3 2)"),
        pytest.param("1 - 2 - 3", "(- (- 1 2) 3)"),
        pytest.param("8 / 4 / 2", "(/ (/ 8 4) 2)"),
        pytest.param("(1 + 2) * 3", "(* (+ 1 2) 3)"),
        pytest.param("--1", "--1"),
        pytest.param("2 * -3", "(* 2 -3)"),
        pytest.param("10 % 4 * 2", "(% 10 (* 4 2))"),
        pytest.param("1 + 6 % 4", "(% (+ 1 6) 4)"),
    ],
)
def test_parse(code: str, expected_ast: str) -> None:
    assert format_expression(parse_code(code)) == expected_ast
    assert str(parse_code(code)) == expected_ast


def test_number_keeps_token_offset() -> None:
    assert parse_code("  12") == Number(offset=4, value=12.0)
    assert parse_code("-7") == Negative(Number(offset=2, value=7.0))


def test_parse_stops_before_unknown_token() -> None:
    tokens = TokenStream(tokenize("1 + 2 )"))
    assert format_expression(parse("1 + 2 )", tokens, 0)) == "(+ 1 2)"
    leftover = tokens.peek()
    assert leftover is not None and leftover.kind is TokenKind.RPAREN


@pytest.mark.parametrize("code", ["", "   ", "1 +", "-", "(", "2 * (3 -"])
def test_unexpected_eof(code: str) -> None:
    with pytest.raises(UnexpectedEof) as exc_info:
        parse_code(code)
    assert exc_info.value.span is None


@pytest.mark.parametrize(
    "code, expected_span",
    [
        pytest.param("*1", (0, 1)),
        pytest.param("1 + $", (4, 1)),
        pytest.param("sin", (0, 3)),
        pytest.param("2 * foo", (4, 3)),
        pytest.param("()", (1, 1)),
        pytest.param("1 + #", (4, 1)),
    ],
)
def test_unexpected_token(code: str, expected_span: tuple[int, int]) -> None:
    with pytest.raises(UnexpectedToken) as exc_info:
        parse_code(code)
    assert exc_info.value.span == expected_span
    assert exc_info.value.source == code


@pytest.mark.parametrize(
    "code, expected_span",
    [
        pytest.param("(1 + 2", (0, 1)),
        pytest.param("(1 + 2 3", (0, 1)),
        pytest.param("4 * ((1 + 2)", (4, 1)),
    ],
)
def test_unclosed_bracket(code: str, expected_span: tuple[int, int]) -> None:
    with pytest.raises(UnclosedBracket) as exc_info:
        parse_code(code)
    assert exc_info.value.span == expected_span


def test_num_parse_error_spans_the_number() -> None:
    code = "1 + 1..2"
    tokens = TokenStream(
        [
            Token(kind=TokenKind.NUMBER, lexeme="1", offset=1),
            Token(kind=TokenKind.PLUS, lexeme="+", offset=3),
            Token(kind=TokenKind.NUMBER, lexeme="1..2", offset=8),
        ]
    )
    with pytest.raises(NumParseError) as exc_info:
        parse(code, tokens, 0)
    assert exc_info.value.span == (4, 4)
    assert exc_info.value.snippet == "1..2"


def test_parser_errors_are_diagnostics() -> None:
    with pytest.raises(Diagnostic) as exc_info:
        parse_code("(1 + 2")
    assert str(exc_info.value) == "\n".join(
        [
            "[Parser error] Unclosed brackets!",
            "(1 + 2",
            "^",
            "help: try closing brackets next time?",
        ]
    )


@pytest.mark.parametrize(
    "code",
    [
        "3 * 2 + 1",
        "-(3 + 2) * 4",
        "+(1 - 2) / -4",
        "1 - 2 - 3 - 4",
        "10 % 4 * 2",
        "2.5 * (1 + 2) % 3",
        "--7",
    ],
)
def test_unparse_round_trip(code: str) -> None:
    tree = parse_code(code)
    reparsed = parse_code(unparse(tree))
    assert format_expression(reparsed) == format_expression(tree)
    assert evaluate(unparse(tree)) == evaluate(code)
