"""
Jet CLI - entry point.

Commands:
    jet repl            interactive session
    jet run FILE        evaluate a program file
    jet lex SOURCE...   print the token stream
    jet parse SOURCE    print the canonical program or parser errors
"""

from __future__ import annotations

import logging
import platform
import sys
from pathlib import Path
from typing import Annotated

import typer
from rich.text import Text

from jet._version import get_version
from jet.cli_ui import STYLES, console, print_error, print_header, print_parse_errors
from jet.config import JetConfig, resolve_config
from jet.core.errors import JetError, SourceError, SourceLocation
from jet.core.lexer import lex
from jet.core.parser import parse_source
from jet.core.values import NULL
from jet.repl import Session, report, start_repl

logger = logging.getLogger(__name__)

app = typer.Typer(
    help="Jet - a small expression-oriented interpreted language",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Display version and environment information."""
    if value:
        typer.echo(f"Jet version {get_version()}")
        typer.echo(f"  Python:        {platform.python_implementation()} {platform.python_version()}")
        typer.echo(f"  Platform:      {platform.system()} {platform.release()}")
        raise typer.Exit()


def configure_logging(config: JetConfig, verbose: bool) -> None:
    level = logging.DEBUG if verbose else getattr(logging, config.logging.level)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
        stream=sys.stderr,
    )


@app.callback()
def main_callback(
    ctx: typer.Context,
    config_path: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Path to jet.toml (defaults to ./jet.toml)"),
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging")] = False,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = None,
) -> None:
    """Jet language tools."""
    try:
        config = resolve_config(config_path)
    except JetError as e:
        print_error(str(e))
        raise typer.Exit(1) from e
    configure_logging(config, verbose)
    ctx.obj = config


def _config(ctx: typer.Context) -> JetConfig:
    return ctx.obj if isinstance(ctx.obj, JetConfig) else JetConfig()


@app.command()
def repl(
    ctx: typer.Context,
    echo_ast: Annotated[
        bool, typer.Option("--echo-ast", help="Print the parsed program before each result")
    ] = False,
) -> None:
    """Start an interactive session."""
    config = _config(ctx)
    if echo_ast:
        config.repl.echo_ast = True
    print_header(f"Jet {get_version()}", "Type exit or press Ctrl-D to leave.")
    start_repl(console, config=config.repl)


def _read_source(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise SourceError("file not found", SourceLocation(file=path)) from e
    except UnicodeDecodeError as e:
        raise SourceError("file is not valid UTF-8", SourceLocation(file=path)) from e
    except OSError as e:
        raise SourceError(f"cannot read file: {e.strerror}", SourceLocation(file=path)) from e


@app.command()
def run(
    file: Annotated[Path, typer.Argument(help="Jet program to evaluate")],
) -> None:
    """Evaluate a program file and print its result."""
    try:
        source = _read_source(file)
    except JetError as e:
        print_error(str(e))
        raise typer.Exit(1) from e

    result = Session(keep_history=False).execute(source)
    if not result.ok:
        report(result, console)
        raise typer.Exit(1)
    if result.value is not None and result.value is not NULL:
        report(result, console)


@app.command(name="lex")
def lex_command(
    source: Annotated[list[str], typer.Argument(help="Source text; multiple args join as lines")],
) -> None:
    """Print the token stream for some source text."""
    for tok in lex("\n".join(source)):
        console.print(Text(repr(tok)))


@app.command(name="parse")
def parse_command(
    source: Annotated[str, typer.Argument(help="Source text to parse")],
) -> None:
    """Print the canonical form of a program, or its parser errors."""
    program, errors = parse_source(source)
    if errors:
        print_parse_errors(errors, out=console)
        raise typer.Exit(1)
    console.print(Text(str(program), style=STYLES["value"]), soft_wrap=True)


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the CLI."""
    app(args=argv)


if __name__ == "__main__":
    main()
