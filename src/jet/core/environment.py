"""
Lexically scoped binding store.

An Environment maps names to values and optionally points at the
enclosing scope that was active when it was created, forming a chain
that lookups walk outward. Child environments are created per function
call and per block; a closure keeps its defining environment alive by
holding a reference to it.

Usage:
    from jet.core.environment import Environment

    root = Environment()
    root.define("x", Integer(1))
    inner = root.enclosed()
    inner.get("x")  # Integer(value=1)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from jet.core.values import Value


class Environment:
    """A single scope plus a reference to its enclosing scope."""

    def __init__(self, outer: Environment | None = None) -> None:
        self.store: dict[str, Value] = {}
        self.outer = outer

    def enclosed(self) -> Environment:
        """Create a child scope whose lookups fall back to this one."""
        return Environment(outer=self)

    def get(self, name: str) -> Value | None:
        """Resolve a name through the scope chain; None if unbound."""
        env: Environment | None = self
        while env is not None:
            if name in env.store:
                return env.store[name]
            env = env.outer
        return None

    def define(self, name: str, value: Value) -> Value:
        """Bind in this scope, shadowing any outer binding of the same name."""
        self.store[name] = value
        return value

    def assign(self, name: str, value: Value) -> bool:
        """Rebind the nearest existing binding of ``name``.

        Returns:
            False if the name is not bound anywhere in the chain.
        """
        env: Environment | None = self
        while env is not None:
            if name in env.store:
                env.store[name] = value
                return True
            env = env.outer
        return False

    @property
    def depth(self) -> int:
        """Number of enclosing scopes above this one."""
        depth = 0
        env = self.outer
        while env is not None:
            depth += 1
            env = env.outer
        return depth

    def __contains__(self, name: str) -> bool:
        return self.get(name) is not None

    def __repr__(self) -> str:
        names = ", ".join(sorted(self.store))
        return f"Environment(depth={self.depth}, names=[{names}])"
