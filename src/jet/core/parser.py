"""
Pratt parser for the Jet language.

Statements are dispatched on their leading token (``let``, ``return``,
otherwise an expression statement). Expressions are parsed by precedence
climbing over a data-driven rule table: each token kind may carry a
prefix rule, an infix rule, a binding precedence and an associativity.

Grammar summary:
    program     → statement*
    statement   → "let" IDENT "=" expr ";"?
                | "return" expr? ";"?
                | expr ";"?
    block       → "{" statement* "}"
    expr        → prefix (infix)*            (Pratt loop)
    prefix      → IDENT | INT | FLOAT | STRING | "true" | "false" | "null"
                | ("!" | "-") expr
                | "(" expr ")"
                | "if" "(" expr ")" block ("else" ("if" ... | block))?
                | "fn" "(" params? ")" block
                | "[" exprs? "]"
                | "{" (expr ":" expr ("," expr ":" expr)*)? "}"
    infix       → binop expr | "=" expr | "(" exprs? ")" | "[" expr "]"

The parser never raises to its caller. A malformed statement is recorded
as an error message and parsing resumes at the next statement boundary.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import IntEnum, StrEnum

from jet.core.ast import (
    ArrayLiteral,
    AssignExpression,
    BlockStatement,
    BooleanLiteral,
    CallExpression,
    Expression,
    ExpressionStatement,
    FloatLiteral,
    FunctionLiteral,
    HashLiteral,
    Identifier,
    IfExpression,
    IndexExpression,
    InfixExpression,
    IntegerLiteral,
    LetStatement,
    NullLiteral,
    PrefixExpression,
    Program,
    ReturnStatement,
    Statement,
    StringLiteral,
)
from jet.core.lexer import Token, TokenKind, lex

logger = logging.getLogger(__name__)

# Deepest expression tree the parser will build, counting both nested
# sub-expressions and left-associative operator chains.
MAX_NESTING = 120


class Precedence(IntEnum):
    """Binding power of operators, lowest first."""

    LOWEST = 1
    ASSIGN = 2  # =
    OR = 3  # ||
    AND = 4  # &&
    EQUALS = 5  # == !=
    LESSGREATER = 6  # < > <= >=
    SUM = 7  # + -
    PRODUCT = 8  # * / %
    PREFIX = 9  # -x !x
    CALL = 10  # f(x)
    INDEX = 11  # a[i]


class Associativity(StrEnum):
    LEFT = "left"
    RIGHT = "right"


PrefixFn = Callable[["Parser"], Expression]
InfixFn = Callable[["Parser", Expression], Expression]


@dataclass(frozen=True)
class ParseRule:
    """How a token kind behaves at the start of, or inside, an expression."""

    prefix: PrefixFn | None = None
    infix: InfixFn | None = None
    precedence: Precedence = Precedence.LOWEST
    associativity: Associativity = Associativity.LEFT


class ParseFailure(Exception):
    """Raised inside the parser to abandon the current statement."""

    def __init__(self, message: str, token: Token) -> None:
        super().__init__(message)
        self.token = token

    def format(self) -> str:
        return f"line {self.token.line}, column {self.token.column}: {self}"


def describe_kind(kind: TokenKind) -> str:
    """Human-readable name of a token kind for error messages."""
    if kind == TokenKind.EOF:
        return "end of input"
    if kind.value.isalpha():
        return kind.name
    return f"'{kind.value}'"


def describe_token(tok: Token) -> str:
    if tok.kind == TokenKind.EOF:
        return "end of input"
    return f"'{tok.literal}'"


class Parser:
    """Pratt parser with one token of lookahead (current + peek)."""

    def __init__(self, tokens: Iterable[Token]) -> None:
        self._tokens = iter(tokens)
        self._last: Token | None = None
        self.errors: list[str] = []
        self._depth = 0  # open braces up to and including current
        self._nesting = 0  # expression depth of the node being built
        self.current = self._pull()
        self.peek = self._pull()
        self._track_depth(self.current)

    # -- Token cursor --

    def _pull(self) -> Token:
        tok = next(self._tokens, None)
        if tok is None:
            # Source exhausted (or the caller's sequence lacked EOF)
            if self._last is not None and self._last.kind == TokenKind.EOF:
                return self._last
            line = self._last.line if self._last else 1
            column = self._last.column + len(self._last.literal) if self._last else 1
            tok = Token(TokenKind.EOF, "", line, column)
        self._last = tok
        return tok

    def _track_depth(self, tok: Token) -> None:
        if tok.kind == TokenKind.LBRACE:
            self._depth += 1
        elif tok.kind == TokenKind.RBRACE:
            self._depth -= 1

    def advance(self) -> Token:
        tok = self.current
        self.current = self.peek
        self.peek = self._pull()
        self._track_depth(self.current)
        return tok

    def current_is(self, kind: TokenKind) -> bool:
        return self.current.kind == kind

    def peek_is(self, kind: TokenKind) -> bool:
        return self.peek.kind == kind

    def expect_peek(self, kind: TokenKind) -> Token:
        """Advance onto the peek token if it has the expected kind."""
        if self.peek.kind != kind:
            raise ParseFailure(
                f"expected next token to be {describe_kind(kind)}, "
                f"got {describe_token(self.peek)} instead",
                self.peek,
            )
        self.advance()
        return self.current

    # -- Program and statements --

    def parse_program(self) -> Program:
        statements: list[Statement] = []

        while not self.current_is(TokenKind.EOF):
            if self.current_is(TokenKind.SEMICOLON):
                self.advance()
                continue
            self._depth = 1 if self.current_is(TokenKind.LBRACE) else 0
            try:
                statements.append(self.parse_statement())
            except ParseFailure as e:
                self._record(e)
                self._synchronize()
                continue
            self.advance()

        return Program(statements=statements)

    def _record(self, failure: ParseFailure) -> None:
        message = failure.format()
        logger.debug("Parse error: %s", message)
        self.errors.append(message)

    def _synchronize(self) -> None:
        """Skip to just past the next statement boundary of the failed statement."""
        while not self.current_is(TokenKind.EOF):
            if self._depth <= 0 and self.current.kind in (TokenKind.SEMICOLON, TokenKind.RBRACE):
                self.advance()
                return
            self.advance()

    def parse_statement(self) -> Statement:
        if self.current_is(TokenKind.LET):
            return self.parse_let_statement()
        if self.current_is(TokenKind.RETURN):
            return self.parse_return_statement()
        return self.parse_expression_statement()

    def parse_let_statement(self) -> LetStatement:
        name = Identifier(name=self.expect_peek(TokenKind.IDENT).literal)
        self.expect_peek(TokenKind.ASSIGN)
        self.advance()
        value = self.parse_expression(Precedence.LOWEST)
        if self.peek_is(TokenKind.SEMICOLON):
            self.advance()
        return LetStatement(name=name, value=value)

    def parse_return_statement(self) -> ReturnStatement:
        if self.peek.kind in (TokenKind.SEMICOLON, TokenKind.RBRACE, TokenKind.EOF):
            if self.peek_is(TokenKind.SEMICOLON):
                self.advance()
            return ReturnStatement()
        self.advance()
        value = self.parse_expression(Precedence.LOWEST)
        if self.peek_is(TokenKind.SEMICOLON):
            self.advance()
        return ReturnStatement(value=value)

    def parse_expression_statement(self) -> ExpressionStatement:
        expression = self.parse_expression(Precedence.LOWEST)
        if self.peek_is(TokenKind.SEMICOLON):
            self.advance()
        return ExpressionStatement(expression=expression)

    def parse_block(self) -> BlockStatement:
        """Parse ``{ statement* }`` with current on the opening brace."""
        self.advance()
        statements: list[Statement] = []
        while not self.current_is(TokenKind.RBRACE):
            if self.current_is(TokenKind.EOF):
                raise ParseFailure(
                    f"expected next token to be {describe_kind(TokenKind.RBRACE)}, "
                    f"got {describe_token(self.current)} instead",
                    self.current,
                )
            if self.current_is(TokenKind.SEMICOLON):
                self.advance()
                continue
            statements.append(self.parse_statement())
            self.advance()
        return BlockStatement(statements=statements)

    # -- Expressions --

    def parse_expression(self, precedence: int) -> Expression:
        entry = self._nesting
        try:
            self._nest()
            rule = rule_for(self.current.kind)
            if rule.prefix is None:
                raise ParseFailure(
                    f"no prefix parse rule for {describe_token(self.current)}", self.current
                )
            left = rule.prefix(self)

            while precedence < precedence_of(self.peek.kind):
                infix = rule_for(self.peek.kind).infix
                if infix is None:
                    return left
                self.advance()
                self._nest()
                left = infix(self, left)

            return left
        finally:
            self._nesting = entry

    def _nest(self) -> None:
        self._nesting += 1
        if self._nesting > MAX_NESTING:
            raise ParseFailure("expression nested too deeply", self.current)

    def parse_identifier(self) -> Expression:
        return Identifier(name=self.current.literal)

    def parse_integer(self) -> Expression:
        try:
            return IntegerLiteral(value=int(self.current.literal))
        except ValueError as e:
            # Literals beyond the interpreter's int conversion limit
            raise ParseFailure(
                f"could not parse {describe_token(self.current)} as integer", self.current
            ) from e

    def parse_float(self) -> Expression:
        return FloatLiteral(value=float(self.current.literal))

    def parse_string(self) -> Expression:
        return StringLiteral(value=self.current.literal)

    def parse_boolean(self) -> Expression:
        return BooleanLiteral(value=self.current_is(TokenKind.TRUE))

    def parse_null(self) -> Expression:
        return NullLiteral()

    def parse_illegal(self) -> Expression:
        tok = self.current
        if tok.literal.startswith('"'):
            raise ParseFailure("unterminated string literal", tok)
        raise ParseFailure(f"illegal character '{tok.literal}'", tok)

    def parse_prefix(self) -> Expression:
        operator = self.current.literal
        self.advance()
        right = self.parse_expression(Precedence.PREFIX)
        return PrefixExpression(operator=operator, right=right)

    def parse_grouped(self) -> Expression:
        self.advance()
        expression = self.parse_expression(Precedence.LOWEST)
        self.expect_peek(TokenKind.RPAREN)
        return expression

    def parse_if(self) -> Expression:
        self.expect_peek(TokenKind.LPAREN)
        self.advance()
        condition = self.parse_expression(Precedence.LOWEST)
        self.expect_peek(TokenKind.RPAREN)
        self.expect_peek(TokenKind.LBRACE)
        consequence = self.parse_block()

        alternative: BlockStatement | None = None
        if self.peek_is(TokenKind.ELSE):
            self.advance()
            if self.peek_is(TokenKind.IF):
                self.advance()
                nested = self.parse_if()
                alternative = BlockStatement(statements=[ExpressionStatement(expression=nested)])
            else:
                self.expect_peek(TokenKind.LBRACE)
                alternative = self.parse_block()

        return IfExpression(condition=condition, consequence=consequence, alternative=alternative)

    def parse_function(self) -> Expression:
        self.expect_peek(TokenKind.LPAREN)
        parameters = self._parse_parameters()
        self.expect_peek(TokenKind.LBRACE)
        body = self.parse_block()
        return FunctionLiteral(parameters=parameters, body=body)

    def _parse_parameters(self) -> list[Identifier]:
        """'(' (IDENT (',' IDENT)*)? ')' with current on the open paren."""
        parameters: list[Identifier] = []
        if self.peek_is(TokenKind.RPAREN):
            self.advance()
            return parameters

        parameters.append(Identifier(name=self.expect_peek(TokenKind.IDENT).literal))
        while self.peek_is(TokenKind.COMMA):
            self.advance()
            parameters.append(Identifier(name=self.expect_peek(TokenKind.IDENT).literal))

        self.expect_peek(TokenKind.RPAREN)
        return parameters

    def _parse_expression_list(self, end: TokenKind) -> list[Expression]:
        items: list[Expression] = []
        if self.peek_is(end):
            self.advance()
            return items

        self.advance()
        items.append(self.parse_expression(Precedence.LOWEST))
        while self.peek_is(TokenKind.COMMA):
            self.advance()
            self.advance()
            items.append(self.parse_expression(Precedence.LOWEST))

        self.expect_peek(end)
        return items

    def parse_array(self) -> Expression:
        return ArrayLiteral(elements=self._parse_expression_list(TokenKind.RBRACKET))

    def parse_hash(self) -> Expression:
        pairs: list[tuple[Expression, Expression]] = []
        while not self.peek_is(TokenKind.RBRACE):
            self.advance()
            key = self.parse_expression(Precedence.LOWEST)
            self.expect_peek(TokenKind.COLON)
            self.advance()
            value = self.parse_expression(Precedence.LOWEST)
            pairs.append((key, value))
            if not self.peek_is(TokenKind.RBRACE):
                self.expect_peek(TokenKind.COMMA)
        self.expect_peek(TokenKind.RBRACE)
        return HashLiteral(pairs=pairs)

    def parse_infix(self, left: Expression) -> Expression:
        tok = self.current
        rule = rule_for(tok.kind)
        self.advance()
        right = self.parse_expression(_right_binding(rule))
        return InfixExpression(left=left, operator=tok.literal, right=right)

    def parse_assign(self, left: Expression) -> Expression:
        tok = self.current
        if not isinstance(left, Identifier):
            raise ParseFailure("invalid assignment target", tok)
        self.advance()
        value = self.parse_expression(_right_binding(rule_for(tok.kind)))
        return AssignExpression(name=left, value=value)

    def parse_call(self, function: Expression) -> Expression:
        return CallExpression(
            function=function, arguments=self._parse_expression_list(TokenKind.RPAREN)
        )

    def parse_index(self, left: Expression) -> Expression:
        self.advance()
        index = self.parse_expression(Precedence.LOWEST)
        self.expect_peek(TokenKind.RBRACKET)
        return IndexExpression(left=left, index=index)


def _right_binding(rule: ParseRule) -> int:
    """Minimum precedence for the right operand of an infix operator."""
    if rule.associativity == Associativity.RIGHT:
        return rule.precedence - 1
    return rule.precedence


def _binary(precedence: Precedence) -> ParseRule:
    return ParseRule(infix=Parser.parse_infix, precedence=precedence)


PARSE_RULES: dict[TokenKind, ParseRule] = {
    TokenKind.IDENT: ParseRule(prefix=Parser.parse_identifier),
    TokenKind.INT: ParseRule(prefix=Parser.parse_integer),
    TokenKind.FLOAT: ParseRule(prefix=Parser.parse_float),
    TokenKind.STRING: ParseRule(prefix=Parser.parse_string),
    TokenKind.TRUE: ParseRule(prefix=Parser.parse_boolean),
    TokenKind.FALSE: ParseRule(prefix=Parser.parse_boolean),
    TokenKind.NULL: ParseRule(prefix=Parser.parse_null),
    TokenKind.ILLEGAL: ParseRule(prefix=Parser.parse_illegal),
    TokenKind.BANG: ParseRule(prefix=Parser.parse_prefix),
    TokenKind.IF: ParseRule(prefix=Parser.parse_if),
    TokenKind.FUNCTION: ParseRule(prefix=Parser.parse_function),
    TokenKind.LBRACE: ParseRule(prefix=Parser.parse_hash),
    TokenKind.MINUS: ParseRule(
        prefix=Parser.parse_prefix, infix=Parser.parse_infix, precedence=Precedence.SUM
    ),
    TokenKind.LPAREN: ParseRule(
        prefix=Parser.parse_grouped, infix=Parser.parse_call, precedence=Precedence.CALL
    ),
    TokenKind.LBRACKET: ParseRule(
        prefix=Parser.parse_array, infix=Parser.parse_index, precedence=Precedence.INDEX
    ),
    TokenKind.ASSIGN: ParseRule(
        infix=Parser.parse_assign,
        precedence=Precedence.ASSIGN,
        associativity=Associativity.RIGHT,
    ),
    TokenKind.PLUS: _binary(Precedence.SUM),
    TokenKind.ASTERISK: _binary(Precedence.PRODUCT),
    TokenKind.SLASH: _binary(Precedence.PRODUCT),
    TokenKind.PERCENT: _binary(Precedence.PRODUCT),
    TokenKind.EQ: _binary(Precedence.EQUALS),
    TokenKind.NOT_EQ: _binary(Precedence.EQUALS),
    TokenKind.LT: _binary(Precedence.LESSGREATER),
    TokenKind.GT: _binary(Precedence.LESSGREATER),
    TokenKind.LE: _binary(Precedence.LESSGREATER),
    TokenKind.GE: _binary(Precedence.LESSGREATER),
    TokenKind.AND: _binary(Precedence.AND),
    TokenKind.OR: _binary(Precedence.OR),
}

_NO_RULE = ParseRule()


def rule_for(kind: TokenKind) -> ParseRule:
    """Look up the parse rule for a token kind (an empty rule if none)."""
    return PARSE_RULES.get(kind, _NO_RULE)


def precedence_of(kind: TokenKind) -> int:
    """Binding precedence of a token kind in infix position."""
    rule = PARSE_RULES.get(kind)
    if rule is None or rule.infix is None:
        return Precedence.LOWEST
    return rule.precedence


def parse(tokens: Iterable[Token]) -> tuple[Program, list[str]]:
    """Parse a token sequence.

    Args:
        tokens: Tokens from ``lex()``; a missing trailing EOF is tolerated.

    Returns:
        The (possibly partial) Program and the error messages in source order.
    """
    parser = Parser(tokens)
    program = parser.parse_program()
    return program, parser.errors


def parse_source(source: str) -> tuple[Program, list[str]]:
    """Lex and parse source text in one step."""
    return parse(lex(source))
