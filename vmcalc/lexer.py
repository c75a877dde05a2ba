import enum
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional

from vmcalc.utils import PrintableEnum


class TokenKind(PrintableEnum):
    PLUS = enum.auto()
    MINUS = enum.auto()
    DIV = enum.auto()
    MULT = enum.auto()
    MOD = enum.auto()
    EQUAL = enum.auto()
    LPAREN = enum.auto()
    RPAREN = enum.auto()
    NUMBER = enum.auto()
    IDENTIFIER = enum.auto()
    VAR = enum.auto()
    SIN = enum.auto()
    COS = enum.auto()
    TAN = enum.auto()
    LOG = enum.auto()
    POW = enum.auto()
    ILLEGAL = enum.auto()


@dataclass
class Token:
    kind: TokenKind
    lexeme: str
    offset: int  # 1-based index of the character after the token

    @property
    def start(self) -> int:
        return self.offset - len(self.lexeme)

    def __str__(self) -> str:
        return f"<{self.kind}>{self.lexeme}"


SINGLE_CHAR_TOKENS = {
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "*": TokenKind.MULT,
    "/": TokenKind.DIV,
    "%": TokenKind.MOD,
    "$": TokenKind.VAR,
    "=": TokenKind.EQUAL,
}

RESERVED_WORDS = {
    "sin": TokenKind.SIN,
    "cos": TokenKind.COS,
    "tan": TokenKind.TAN,
    "log": TokenKind.LOG,
    "pow": TokenKind.POW,
}


def _is_digit(s: str) -> bool:
    return s.isascii() and s.isdigit()


def _is_identifier_start(s: str) -> bool:
    return s == "_" or (s.isascii() and s.isalpha())


def _is_valid_in_identifier(s: str) -> bool:
    return s == "_" or (s.isascii() and s.isalnum())


def tokenize(code: str) -> Iterator[Token]:
    """Lazily split a source line into tokens.

    Every call starts over from the beginning of ``code``. Whitespace is
    skipped right before the next token is read, but still counts towards
    the offsets. Unknown characters become ILLEGAL tokens and are left to
    the parser to reject.
    """
    i = 0
    while True:
        while i < len(code) and code[i].isspace():
            i += 1
        if i >= len(code):
            return

        start = i
        char = code[i]
        i += 1
        if char in SINGLE_CHAR_TOKENS:
            kind = SINGLE_CHAR_TOKENS[char]
        elif _is_identifier_start(char):
            while i < len(code) and _is_valid_in_identifier(code[i]):
                i += 1
            kind = RESERVED_WORDS.get(code[start:i], TokenKind.IDENTIFIER)
        elif _is_digit(char):
            while i < len(code) and _is_digit(code[i]):
                i += 1
            # single fractional part, a second '.' starts a new token
            if i < len(code) and code[i] == ".":
                i += 1
                while i < len(code) and _is_digit(code[i]):
                    i += 1
            kind = TokenKind.NUMBER
        else:
            kind = TokenKind.ILLEGAL
        yield Token(kind=kind, lexeme=code[start:i], offset=i)


class TokenStream:
    """Forward-only token iterator with one token of lookahead"""

    def __init__(self, tokens: Iterable[Token]):
        self._tokens = iter(tokens)
        self._peeked: Optional[Token] = None

    def __iter__(self) -> "TokenStream":
        return self

    def __next__(self) -> Token:
        token = self.next()
        if token is None:
            raise StopIteration
        return token

    def peek(self) -> Optional[Token]:
        if self._peeked is None:
            self._peeked = next(self._tokens, None)
        return self._peeked

    def next(self) -> Optional[Token]:
        token = self.peek()
        self._peeked = None
        return token
