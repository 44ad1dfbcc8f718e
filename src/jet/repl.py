"""
Driver loop for Jet.

A Session owns one root environment and threads each input through
lex → parse → evaluate. Definitions made by one input stay visible to
the next. A parse failure skips evaluation; a runtime failure yields an
Error value; neither ends the session.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from rich.console import Console

from jet.cli_ui import (
    print_muted,
    print_parse_errors,
    print_runtime_error,
    print_value,
)
from jet.config import ReplConfig
from jet.core.ast import LetStatement, Program
from jet.core.environment import Environment
from jet.core.evaluator import run_program
from jet.core.lexer import lex
from jet.core.parser import parse
from jet.core.values import Error, Value

logger = logging.getLogger(__name__)

_EXIT_COMMANDS = {"exit", "quit"}


@dataclass
class ExecutionResult:
    """Outcome of running one source input through a session."""

    program: Program
    parse_errors: list[str] = field(default_factory=list)
    value: Value | Error | None = None  # None when parsing failed

    @property
    def is_parse_error(self) -> bool:
        return bool(self.parse_errors)

    @property
    def is_runtime_error(self) -> bool:
        return isinstance(self.value, Error)

    @property
    def ok(self) -> bool:
        return not self.is_parse_error and not self.is_runtime_error

    @property
    def is_silent(self) -> bool:
        """A trailing ``let`` produces nothing worth echoing."""
        return bool(self.program.statements) and isinstance(
            self.program.statements[-1], LetStatement
        )


class Session:
    """One interactive or batch session with its own root environment."""

    def __init__(self, env: Environment | None = None, keep_history: bool = True) -> None:
        self.env = env if env is not None else Environment()
        self.keep_history = keep_history
        self.history: list[str] = []

    def execute(self, source: str) -> ExecutionResult:
        """Lex, parse and (if parsing succeeded) evaluate one input."""
        if self.keep_history:
            self.history.append(source)

        program, errors = parse(lex(source))
        if errors:
            logger.debug("Skipping evaluation: %d parse error(s)", len(errors))
            return ExecutionResult(program=program, parse_errors=errors)

        try:
            value = run_program(program, self.env)
        except RecursionError:
            logger.warning("Evaluation exceeded the interpreter recursion limit")
            value = Error("maximum recursion depth exceeded")
        return ExecutionResult(program=program, value=value)


def _read_lines(console: Console, prompt: str, lines: Iterable[str] | None) -> Iterator[str]:
    if lines is not None:
        for line in lines:
            console.print(prompt, end="", markup=False, highlight=False)
            yield line
        return
    while True:
        try:
            yield console.input(prompt)
        except EOFError:
            return


def report(result: ExecutionResult, console: Console, echo_ast: bool = False) -> None:
    """Print one execution result the way the REPL shows it."""
    if result.is_parse_error:
        print_parse_errors(result.parse_errors, out=console)
        return
    if echo_ast:
        print_muted(str(result.program), out=console)
    if isinstance(result.value, Error):
        print_runtime_error(result.value.inspect(), out=console)
        return
    if result.value is None or result.is_silent:
        return
    print_value(result.value.inspect(), out=console)


def start_repl(
    console: Console,
    config: ReplConfig | None = None,
    lines: Iterable[str] | None = None,
    session: Session | None = None,
) -> Session:
    """Run the read-eval-print loop until end of input or an exit command.

    Args:
        console: Where prompts and results are written.
        config: Prompt and echo settings; defaults if omitted.
        lines: Scripted input; reads from the console when None.
        session: Existing session to continue; a fresh one if omitted.

    Returns:
        The session, with its environment holding every definition made.
    """
    config = config or ReplConfig()
    session = session or Session(keep_history=config.history)
    logger.debug("REPL session started")

    for line in _read_lines(console, config.prompt, lines):
        stripped = line.strip()
        if not stripped:
            continue
        if stripped in _EXIT_COMMANDS:
            break
        report(session.execute(line), console, echo_ast=config.echo_ast)

    logger.debug("REPL session ended after %d input(s)", len(session.history))
    return session
