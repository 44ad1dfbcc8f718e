"""
Runtime values for the Jet evaluator.

Values form a closed set of variants (a tagged union): every operation
site dispatches with an exhaustive ``match``. Two further variants,
ReturnSignal and Error, are control carriers: they never appear inside
user data, they only travel up through evaluation until a call boundary
or the top level unwraps them.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from jet.core.ast import BlockStatement, Identifier
    from jet.core.environment import Environment


class ValueKind(StrEnum):
    """Type names as they appear in runtime error messages."""

    INTEGER = "INTEGER"
    FLOAT = "FLOAT"
    BOOLEAN = "BOOLEAN"
    STRING = "STRING"
    NULL = "NULL"
    FUNCTION = "FUNCTION"
    BUILTIN = "BUILTIN"
    ARRAY = "ARRAY"
    HASH = "HASH"
    RETURN_VALUE = "RETURN_VALUE"
    ERROR = "ERROR"


# ---------------------------------------------------------------------------
# Scalars
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Integer:
    value: int
    kind: ClassVar[ValueKind] = ValueKind.INTEGER

    def inspect(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Float:
    value: float
    kind: ClassVar[ValueKind] = ValueKind.FLOAT

    def inspect(self) -> str:
        return repr(self.value)


@dataclass(frozen=True)
class Boolean:
    value: bool
    kind: ClassVar[ValueKind] = ValueKind.BOOLEAN

    def inspect(self) -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True)
class String:
    value: str
    kind: ClassVar[ValueKind] = ValueKind.STRING

    def inspect(self) -> str:
        return self.value


@dataclass(frozen=True)
class Null:
    kind: ClassVar[ValueKind] = ValueKind.NULL

    def inspect(self) -> str:
        return "null"


TRUE = Boolean(True)
FALSE = Boolean(False)
NULL = Null()


def native_bool(value: bool) -> Boolean:
    return TRUE if value else FALSE


# ---------------------------------------------------------------------------
# Callables
# ---------------------------------------------------------------------------


@dataclass(frozen=True, eq=False)
class Function:
    """
    A closure: parameters and body plus the environment live at the
    definition site. ``env`` is a reference, not a snapshot, so later
    writes to captured bindings are visible to the function.
    """

    parameters: list[Identifier]
    body: BlockStatement
    env: Environment
    kind: ClassVar[ValueKind] = ValueKind.FUNCTION

    def inspect(self) -> str:
        params = ", ".join(p.name for p in self.parameters)
        return f"fn({params}) {{\n{self.body}\n}}"


@dataclass(frozen=True, eq=False)
class Builtin:
    """A primitive function implemented by the evaluator."""

    name: str
    fn: Callable[[list[Value]], Value | Error]
    kind: ClassVar[ValueKind] = ValueKind.BUILTIN

    def inspect(self) -> str:
        return "builtin function"


# ---------------------------------------------------------------------------
# Collections
# ---------------------------------------------------------------------------


@dataclass(eq=False)
class Array:
    elements: list[Value] = field(default_factory=list)
    kind: ClassVar[ValueKind] = ValueKind.ARRAY

    def inspect(self) -> str:
        return "[" + ", ".join(e.inspect() for e in self.elements) + "]"


HashKey = tuple[str, object]


@dataclass(eq=False)
class Hash:
    """Mapping from hashable values; keeps each key value for display."""

    pairs: dict[HashKey, tuple[Value, Value]] = field(default_factory=dict)
    kind: ClassVar[ValueKind] = ValueKind.HASH

    def inspect(self) -> str:
        items = ", ".join(f"{k.inspect()}: {v.inspect()}" for k, v in self.pairs.values())
        return "{" + items + "}"


def hash_key(value: Value) -> HashKey | None:
    """Key under which a value is stored in a Hash, or None if unhashable.

    Integers and floats share one key space so ``1`` and ``1.0`` address
    the same entry.
    """
    match value:
        case Integer(value=v) | Float(value=v):
            return ("number", v)
        case Boolean(value=v):
            return ("boolean", v)
        case String(value=v):
            return ("string", v)
        case Null():
            return ("null", None)
        case _:
            return None


# ---------------------------------------------------------------------------
# Control signals
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ReturnSignal:
    """Wraps the value of a ``return`` until a call boundary unwraps it."""

    value: Value
    kind: ClassVar[ValueKind] = ValueKind.RETURN_VALUE

    def inspect(self) -> str:
        return self.value.inspect()


@dataclass(frozen=True)
class Error:
    """A runtime error; aborts the current evaluation chain."""

    message: str
    kind: ClassVar[ValueKind] = ValueKind.ERROR

    def inspect(self) -> str:
        return f"ERROR: {self.message}"


Value = Integer | Float | Boolean | String | Null | Function | Builtin | Array | Hash
Signal = ReturnSignal | Error
Result = Value | Signal


def is_signal(result: Result) -> bool:
    """True for results that must abort and bubble."""
    return isinstance(result, (ReturnSignal, Error))


def is_truthy(value: Value) -> bool:
    """``false`` and ``null`` are falsy; every other value is truthy."""
    match value:
        case Boolean(value=v):
            return v
        case Null():
            return False
        case _:
            return True
