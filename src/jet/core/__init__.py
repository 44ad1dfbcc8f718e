"""Core Jet language pipeline: lexer, parser, environment, evaluator."""

from .environment import Environment
from .errors import ConfigError, JetError, SourceError, SourceLocation
from .evaluator import apply_function, evaluate, run_program
from .lexer import Lexer, Token, TokenKind, lex, tokenize
from .parser import Parser, parse, parse_source
from .values import NULL, Error, Value

__all__ = [
    "Environment",
    "JetError",
    "ConfigError",
    "SourceError",
    "SourceLocation",
    "evaluate",
    "run_program",
    "apply_function",
    "Lexer",
    "Token",
    "TokenKind",
    "lex",
    "tokenize",
    "Parser",
    "parse",
    "parse_source",
    "NULL",
    "Error",
    "Value",
]
