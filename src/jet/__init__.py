"""
Jet - a small expression-oriented interpreted language.

Source text flows through the lexer, the Pratt parser and the
tree-walking evaluator; the REPL threads one session environment
through successive inputs.
"""

from __future__ import annotations

from ._version import get_version
from .core.errors import ConfigError, JetError, SourceError

__version__ = get_version()

__all__ = [
    "__version__",
    "JetError",
    "ConfigError",
    "SourceError",
]
