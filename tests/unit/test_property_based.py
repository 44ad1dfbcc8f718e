"""
Property-based tests using Hypothesis.

These tests verify invariants of the pipeline across a wide range of
inputs rather than hand-picked examples.
"""

import math

from hypothesis import assume, given, settings
from hypothesis import strategies as st

from jet.core.environment import Environment
from jet.core.evaluator import run_program
from jet.core.lexer import TokenKind, tokenize
from jet.core.parser import parse_source
from jet.core.values import Integer
from jet.repl import Session

BINARY_OPERATORS = ["+", "-", "*", "/", "%", "<", ">", "<=", ">=", "==", "!=", "&&", "||"]

small_ints = st.integers(min_value=-1_000_000, max_value=1_000_000)

expressions = st.recursive(
    st.one_of(st.integers(min_value=0, max_value=1000).map(str), st.sampled_from(["a", "b", "c"])),
    lambda children: st.one_of(
        st.tuples(children, st.sampled_from(BINARY_OPERATORS), children).map(
            lambda t: f"{t[0]} {t[1]} {t[2]}"
        ),
        children.map(lambda c: f"({c})"),
        children.map(lambda c: f"-{c}"),
        children.map(lambda c: f"!{c}"),
    ),
    max_leaves=10,
)


# =============================================================================
# Lexer Properties
# =============================================================================


class TestLexerProperties:
    @given(st.text(max_size=200))
    @settings(max_examples=200)
    def test_lexing_is_total(self, source: str) -> None:
        """Invariant: any text lexes to a stream ending in exactly one EOF."""
        tokens = tokenize(source)
        assert tokens[-1].kind == TokenKind.EOF
        assert sum(1 for t in tokens if t.kind == TokenKind.EOF) == 1

    @given(st.text(max_size=200))
    @settings(max_examples=100)
    def test_positions_never_go_backwards(self, source: str) -> None:
        tokens = tokenize(source)
        positions = [(t.line, t.column) for t in tokens]
        assert positions == sorted(positions)
        assert all(line >= 1 and column >= 1 for line, column in positions)


# =============================================================================
# Parser Properties
# =============================================================================


class TestParserProperties:
    @given(st.text(max_size=100))
    @settings(max_examples=200)
    def test_parse_never_raises(self, source: str) -> None:
        """Invariant: malformed input yields error strings, never an exception."""
        program, errors = parse_source(source)
        assert all(isinstance(e, str) and e for e in errors)
        assert program is not None

    @given(st.text(alphabet="(){}[];,:=+-*/!<>&|fnletifelsreturn0123456789 \n", max_size=80))
    @settings(max_examples=200)
    def test_parse_never_raises_on_token_soup(self, source: str) -> None:
        parse_source(source)

    @given(st.integers(min_value=1, max_value=3000), st.sampled_from(["(", "-", "!", "[", "1 + "]))
    @settings(max_examples=100)
    def test_nesting_depth_never_raises(self, depth: int, opener: str) -> None:
        """Invariant: arbitrarily deep input is a parse error, not a crash."""
        _, errors = parse_source(opener * depth + "1")
        assert all(isinstance(e, str) for e in errors)

    @given(expressions)
    @settings(max_examples=200)
    def test_canonical_form_is_a_fixed_point(self, source: str) -> None:
        """Invariant: printing then reparsing a program prints the same text."""
        program, errors = parse_source(source)
        assert errors == []
        canonical = str(program)
        reparsed, errors = parse_source(canonical)
        assert errors == []
        assert str(reparsed) == canonical


# =============================================================================
# Evaluator Properties
# =============================================================================


class TestEvaluatorProperties:
    def _eval(self, source: str):
        program, errors = parse_source(source)
        assert errors == []
        return run_program(program, Environment())

    @given(small_ints, small_ints)
    def test_addition_and_multiplication_match_python(self, a: int, b: int) -> None:
        assert self._eval(f"({a}) + ({b})") == Integer(a + b)
        assert self._eval(f"({a}) * ({b})") == Integer(a * b)
        assert self._eval(f"({a}) - ({b})") == Integer(a - b)

    @given(small_ints, small_ints)
    def test_division_truncates_toward_zero(self, a: int, b: int) -> None:
        assume(b != 0)
        assert self._eval(f"({a}) / ({b})") == Integer(int(a / b))
        assert self._eval(f"({a}) % ({b})") == Integer(int(math.fmod(a, b)))

    @given(small_ints, small_ints)
    def test_division_identity(self, a: int, b: int) -> None:
        """Invariant: (a / b) * b + a % b == a."""
        assume(b != 0)
        assert self._eval(f"let a = {a}; let b = {b}; (a / b) * b + a % b") == Integer(a)

    @given(expressions)
    @settings(max_examples=200)
    def test_evaluation_never_raises(self, source: str) -> None:
        """Invariant: runtime failures are Error values, not exceptions."""
        result = Session().execute(f"let a = 1; let b = 2.5; let c = true; {source}")
        assert not result.is_parse_error
        assert result.value is not None
