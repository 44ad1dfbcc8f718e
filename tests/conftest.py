"""Shared pytest fixtures for Jet tests."""

from io import StringIO

import pytest
from rich.console import Console

from jet.core.environment import Environment
from jet.core.evaluator import run_program
from jet.core.parser import parse_source
from jet.core.values import Error, Value
from jet.repl import Session


@pytest.fixture
def env() -> Environment:
    """Return a fresh root environment."""
    return Environment()


@pytest.fixture
def session() -> Session:
    """Return a fresh REPL session."""
    return Session()


@pytest.fixture
def console_buffer() -> tuple[Console, StringIO]:
    """Return an in-memory console and the buffer it writes to."""
    buffer = StringIO()
    console = Console(file=buffer, width=200, force_terminal=False, color_system=None)
    return console, buffer


@pytest.fixture
def run_jet():
    """Return a helper that parses (asserting no errors) and evaluates source."""

    def _run(source: str, environment: Environment | None = None) -> Value | Error:
        program, errors = parse_source(source)
        assert errors == [], errors
        return run_program(program, environment if environment is not None else Environment())

    return _run
