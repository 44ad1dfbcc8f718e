"""
Primitive functions available to every Jet program.

Builtins are resolved after the environment chain, so a program may
shadow them with its own bindings. They never perform I/O.
"""

from __future__ import annotations

from collections.abc import Callable

from jet.core.values import (
    NULL,
    Array,
    Builtin,
    Error,
    Hash,
    Integer,
    String,
    Value,
)


def _arity_error(want: int, got: int) -> Error:
    return Error(f"wrong number of arguments: want={want}, got={got}")


def _len(args: list[Value]) -> Value | Error:
    if len(args) != 1:
        return _arity_error(1, len(args))
    match args[0]:
        case String(value=s):
            return Integer(len(s))
        case Array(elements=elements):
            return Integer(len(elements))
        case Hash(pairs=pairs):
            return Integer(len(pairs))
        case other:
            return Error(f"argument to `len` not supported, got {other.kind}")


def _array_accessor(name: str, pick: Callable[[list[Value]], Value]) -> Builtin:
    def accessor(args: list[Value]) -> Value | Error:
        if len(args) != 1:
            return _arity_error(1, len(args))
        match args[0]:
            case Array(elements=elements):
                if not elements:
                    return NULL
                return pick(elements)
            case other:
                return Error(f"argument to `{name}` must be ARRAY, got {other.kind}")

    return Builtin(name=name, fn=accessor)


def _push(args: list[Value]) -> Value | Error:
    if len(args) != 2:
        return _arity_error(2, len(args))
    match args[0]:
        case Array(elements=elements):
            return Array([*elements, args[1]])
        case other:
            return Error(f"argument to `push` must be ARRAY, got {other.kind}")


def _type(args: list[Value]) -> Value | Error:
    if len(args) != 1:
        return _arity_error(1, len(args))
    return String(args[0].kind.value)


def _str(args: list[Value]) -> Value | Error:
    if len(args) != 1:
        return _arity_error(1, len(args))
    return String(args[0].inspect())


BUILTINS: dict[str, Builtin] = {
    "len": Builtin(name="len", fn=_len),
    "first": _array_accessor("first", lambda elements: elements[0]),
    "last": _array_accessor("last", lambda elements: elements[-1]),
    "rest": _array_accessor("rest", lambda elements: Array(list(elements[1:]))),
    "push": Builtin(name="push", fn=_push),
    "type": Builtin(name="type", fn=_type),
    "str": Builtin(name="str", fn=_str),
}
