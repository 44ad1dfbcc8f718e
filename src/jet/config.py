"""
Configuration for the Jet REPL and CLI.

Settings are read from ``jet.toml`` in the working directory (or an
explicit path). Every setting has a default, so a missing file yields
the default configuration.

Example jet.toml:

    [repl]
    prompt = ">> "
    echo_ast = false
    history = true

    [logging]
    level = "WARNING"
"""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from jet.core.errors import make_config_error

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "jet.toml"
DEFAULT_PROMPT = ">> "

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class ReplConfig:
    """Interactive session settings."""

    prompt: str = DEFAULT_PROMPT
    echo_ast: bool = False  # Print the parsed program before evaluating
    history: bool = True  # Keep input history in the session


@dataclass
class LoggingConfig:
    level: str = "WARNING"


@dataclass
class JetConfig:
    repl: ReplConfig = field(default_factory=ReplConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    source: Path | None = None  # File the settings came from, if any


def _typed(table: dict[str, Any], key: str, expected: type, default: Any, path: Path) -> Any:
    value = table.get(key, default)
    if not isinstance(value, expected):
        raise make_config_error(
            f"'{key}' must be a {expected.__name__}, got {type(value).__name__}", path
        )
    return value


def _table(data: dict[str, Any], name: str, path: Path) -> dict[str, Any]:
    table = data.get(name, {})
    if not isinstance(table, dict):
        raise make_config_error(f"[{name}] must be a table", path)
    return table


def load_config(path: Path) -> JetConfig:
    """Load settings from a TOML file.

    Raises:
        ConfigError: If the file is not valid TOML or a setting has the wrong type.
    """
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        # TOMLDecodeError carries lineno/colno from Python 3.14 on
        raise make_config_error(
            f"invalid TOML: {e}",
            path,
            line=getattr(e, "lineno", None),
            column=getattr(e, "colno", None),
        ) from e
    except OSError as e:
        raise make_config_error(f"cannot read config: {e.strerror}", path) from e

    repl_data = _table(data, "repl", path)
    logging_data = _table(data, "logging", path)

    repl = ReplConfig(
        prompt=_typed(repl_data, "prompt", str, DEFAULT_PROMPT, path),
        echo_ast=_typed(repl_data, "echo_ast", bool, False, path),
        history=_typed(repl_data, "history", bool, True, path),
    )

    level = _typed(logging_data, "level", str, "WARNING", path).upper()
    if level not in _LOG_LEVELS:
        raise make_config_error(
            f"'level' must be one of {', '.join(_LOG_LEVELS)}, got {level!r}", path
        )

    logger.debug("Loaded config from %s", path)
    return JetConfig(repl=repl, logging=LoggingConfig(level=level), source=path)


def resolve_config(path: Path | None = None, cwd: Path | None = None) -> JetConfig:
    """Load an explicit config file, else ``jet.toml`` in ``cwd`` if present, else defaults."""
    if path is not None:
        return load_config(path)
    candidate = (cwd or Path.cwd()) / DEFAULT_CONFIG_FILE
    if candidate.exists():
        return load_config(candidate)
    return JetConfig()
