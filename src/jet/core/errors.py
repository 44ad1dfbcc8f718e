"""
Error types for host-level Jet failures.

Lexical, syntactic and runtime errors inside the language never raise:
they surface as ILLEGAL tokens, parser error strings and Error values.
The exceptions here cover the layer around the core (reading source
files, loading configuration) so the CLI can report them uniformly.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


class JetError(Exception):
    """Base exception for all Jet host errors."""

    def __init__(self, message: str, location: Optional["SourceLocation"] = None):
        self.message = message
        self.location = location
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with location if available."""
        if self.location:
            return f"{self.location.format()}: {self.message}"
        return self.message


class SourceError(JetError):
    """
    Raised when a program source cannot be read.

    Examples:
    - Missing file
    - Undecodable bytes
    """

    pass


class ConfigError(JetError):
    """
    Raised when jet.toml is malformed.

    Examples:
    - Invalid TOML syntax
    - A setting with the wrong value type
    """

    pass


@dataclass
class SourceLocation:
    """
    Location of an error in a source file.

    Attributes:
        file: Path to the offending file
        line: Line number (1-indexed), if known
        column: Column number (1-indexed), if known
    """

    file: Path
    line: int | None = None
    column: int | None = None

    def format(self) -> str:
        """Format as "file:line:column", dropping unknown parts."""
        location = str(self.file)
        if self.line is not None:
            location += f":{self.line}"
            if self.column is not None:
                location += f":{self.column}"
        return location


def make_config_error(
    message: str,
    file: Path,
    line: int | None = None,
    column: int | None = None,
) -> ConfigError:
    """
    Helper to create a ConfigError with location context.

    Args:
        message: Error description
        file: Config file path
        line: Optional line number
        column: Optional column number

    Returns:
        ConfigError with location attached
    """
    return ConfigError(message, SourceLocation(file=file, line=line, column=column))
