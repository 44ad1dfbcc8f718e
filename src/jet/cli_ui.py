"""
Rich output helpers for the Jet CLI and REPL.

All helpers take an optional console so the REPL can be driven against
an in-memory console in tests. Messages are rendered as Text objects,
never as markup, since Jet source is full of square brackets. Output is
soft-wrapped so long values and paths stay on one line.
"""

from rich.console import Console
from rich.style import Style
from rich.text import Text

console = Console()
err_console = Console(stderr=True)

# Style definitions
STYLES = {
    "title": Style(color="bright_cyan", bold=True),
    "subtitle": Style(color="bright_black"),
    "value": Style(color="white"),
    "error": Style(color="red", bold=True),
    "warning": Style(color="yellow"),
    "muted": Style(color="bright_black"),
}


def print_header(title: str, subtitle: str = "", out: Console | None = None) -> None:
    """Print a styled header."""
    out = out or console
    out.print(Text(title, style=STYLES["title"]))
    if subtitle:
        out.print(Text(subtitle, style=STYLES["subtitle"]))


def print_error(message: str, out: Console | None = None) -> None:
    """Print an error message."""
    (out or err_console).print(Text(f"✗ {message}", style=STYLES["error"]), soft_wrap=True)


def print_value(text: str, out: Console | None = None) -> None:
    """Print an evaluation result."""
    (out or console).print(Text(text, style=STYLES["value"]), soft_wrap=True)


def print_runtime_error(text: str, out: Console | None = None) -> None:
    """Print an inspected runtime Error value."""
    (out or console).print(Text(text, style=STYLES["error"]), soft_wrap=True)


def print_parse_errors(errors: list[str], out: Console | None = None) -> None:
    """Print parser errors, one indented line per message."""
    out = out or console
    out.print(Text("parser errors:", style=STYLES["error"]))
    for message in errors:
        out.print(Text(f"\t{message}", style=STYLES["warning"]), soft_wrap=True)


def print_muted(text: str, out: Console | None = None) -> None:
    (out or console).print(Text(text, style=STYLES["muted"]), soft_wrap=True)
