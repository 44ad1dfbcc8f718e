"""
Lexer for the Jet language.

Converts source text into a lazy stream of tokens with line/column
tracking. The lexer is total: characters it does not recognise become
ILLEGAL tokens and the stream always ends with a single EOF token.
"""

from __future__ import annotations

from collections.abc import Iterator
from enum import StrEnum


class TokenKind(StrEnum):
    """Token kinds for Jet source."""

    ILLEGAL = "ILLEGAL"
    EOF = "EOF"

    # Identifiers and literals
    IDENT = "IDENT"
    INT = "INT"
    FLOAT = "FLOAT"
    STRING = "STRING"

    # Operators
    ASSIGN = "="
    PLUS = "+"
    MINUS = "-"
    BANG = "!"
    ASTERISK = "*"
    SLASH = "/"
    PERCENT = "%"
    LT = "<"
    GT = ">"
    LE = "<="
    GE = ">="
    EQ = "=="
    NOT_EQ = "!="
    AND = "&&"
    OR = "||"

    # Delimiters
    COMMA = ","
    SEMICOLON = ";"
    COLON = ":"
    LPAREN = "("
    RPAREN = ")"
    LBRACE = "{"
    RBRACE = "}"
    LBRACKET = "["
    RBRACKET = "]"

    # Keywords
    FUNCTION = "FUNCTION"
    LET = "LET"
    TRUE = "TRUE"
    FALSE = "FALSE"
    NULL = "NULL"
    IF = "IF"
    ELSE = "ELSE"
    RETURN = "RETURN"


class Token:
    """A single token produced by the lexer."""

    __slots__ = ("kind", "literal", "line", "column")

    def __init__(self, kind: TokenKind, literal: str, line: int, column: int) -> None:
        self.kind = kind
        self.literal = literal
        self.line = line
        self.column = column

    def __repr__(self) -> str:
        return f"Token({self.kind.name}, {self.literal!r}, {self.line}:{self.column})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Token):
            return NotImplemented
        return (self.kind, self.literal, self.line, self.column) == (
            other.kind,
            other.literal,
            other.line,
            other.column,
        )

    def __hash__(self) -> int:
        return hash((self.kind, self.literal, self.line, self.column))


KEYWORDS: dict[str, TokenKind] = {
    "fn": TokenKind.FUNCTION,
    "let": TokenKind.LET,
    "true": TokenKind.TRUE,
    "false": TokenKind.FALSE,
    "null": TokenKind.NULL,
    "if": TokenKind.IF,
    "else": TokenKind.ELSE,
    "return": TokenKind.RETURN,
}

# Second character completes a two-character operator
_TWO_CHAR_OPERATORS: dict[str, TokenKind] = {
    "==": TokenKind.EQ,
    "!=": TokenKind.NOT_EQ,
    "<=": TokenKind.LE,
    ">=": TokenKind.GE,
    "&&": TokenKind.AND,
    "||": TokenKind.OR,
}

_SINGLE_CHAR_TOKENS: dict[str, TokenKind] = {
    "=": TokenKind.ASSIGN,
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "!": TokenKind.BANG,
    "*": TokenKind.ASTERISK,
    "/": TokenKind.SLASH,
    "%": TokenKind.PERCENT,
    "<": TokenKind.LT,
    ">": TokenKind.GT,
    ",": TokenKind.COMMA,
    ";": TokenKind.SEMICOLON,
    ":": TokenKind.COLON,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    "{": TokenKind.LBRACE,
    "}": TokenKind.RBRACE,
    "[": TokenKind.LBRACKET,
    "]": TokenKind.RBRACKET,
}

_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", '"': '"', "\\": "\\"}


def _is_letter(c: str) -> bool:
    return c == "_" or ("a" <= c <= "z") or ("A" <= c <= "Z")


def _is_digit(c: str) -> bool:
    return "0" <= c <= "9"


class Lexer:
    """
    Cursor over source text producing one token per call.

    The cursor only ever moves forward and looks at most one character
    ahead. Iterating a Lexer yields tokens up to and including EOF.
    """

    def __init__(self, source: str) -> None:
        self.source = source
        self.pos = 0
        self.line = 1
        self.column = 1
        self._done = False

    @property
    def char(self) -> str:
        """Current character, or "" at end of input."""
        if self.pos < len(self.source):
            return self.source[self.pos]
        return ""

    def peek_char(self) -> str:
        idx = self.pos + 1
        if idx < len(self.source):
            return self.source[idx]
        return ""

    def _advance(self) -> None:
        if self.char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        self.pos += 1

    def _skip_whitespace_and_comments(self) -> None:
        while self.char:
            if self.char in " \t\r\n":
                self._advance()
            elif self.char == "#":
                while self.char and self.char != "\n":
                    self._advance()
            else:
                break

    def next_token(self) -> Token:
        """Scan and return the next token. Returns EOF forever once exhausted."""
        self._skip_whitespace_and_comments()
        line, column = self.line, self.column
        c = self.char

        if not c:
            return Token(TokenKind.EOF, "", line, column)

        if _is_letter(c):
            start = self.pos
            while self.char and (_is_letter(self.char) or _is_digit(self.char)):
                self._advance()
            word = self.source[start : self.pos]
            return Token(KEYWORDS.get(word, TokenKind.IDENT), word, line, column)

        if _is_digit(c):
            return self._read_number(line, column)

        if c == '"':
            return self._read_string(line, column)

        two = c + self.peek_char()
        if two in _TWO_CHAR_OPERATORS:
            self._advance()
            self._advance()
            return Token(_TWO_CHAR_OPERATORS[two], two, line, column)

        self._advance()
        kind = _SINGLE_CHAR_TOKENS.get(c, TokenKind.ILLEGAL)
        return Token(kind, c, line, column)

    def _read_number(self, line: int, column: int) -> Token:
        start = self.pos
        while _is_digit(self.char):
            self._advance()
        kind = TokenKind.INT
        # One decimal point, only when followed by a digit
        if self.char == "." and _is_digit(self.peek_char()):
            kind = TokenKind.FLOAT
            self._advance()
            while _is_digit(self.char):
                self._advance()
        return Token(kind, self.source[start : self.pos], line, column)

    def _read_string(self, line: int, column: int) -> Token:
        start = self.pos
        self._advance()  # opening quote
        chars: list[str] = []

        while self.char and self.char != '"':
            if self.char == "\\":
                self._advance()
                if not self.char:
                    break
                chars.append(_ESCAPES.get(self.char, self.char))
                self._advance()
                continue
            chars.append(self.char)
            self._advance()

        if not self.char:
            # Unterminated: hand the raw text to the parser as ILLEGAL
            return Token(TokenKind.ILLEGAL, self.source[start : self.pos], line, column)

        self._advance()  # closing quote
        return Token(TokenKind.STRING, "".join(chars), line, column)

    def __iter__(self) -> Iterator[Token]:
        while not self._done:
            tok = self.next_token()
            if tok.kind == TokenKind.EOF:
                self._done = True
            yield tok


def lex(source: str) -> Iterator[Token]:
    """Lazily tokenize source text.

    Args:
        source: Jet program text.

    Returns:
        A one-shot iterator of tokens ending with EOF.
    """
    return iter(Lexer(source))


def tokenize(source: str) -> list[Token]:
    """Tokenize source text eagerly into a list."""
    return list(lex(source))
