"""
AST node types for Jet programs.

Nodes are frozen pydantic models: each one owns its children and the
tree is immutable once the parser has built it. Every node renders a
canonical, source-like string via ``str()`` for debugging and echoing.
That projection is for display and is not guaranteed to re-parse.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


def _quote(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
    return f'"{escaped}"'


# ---------------------------------------------------------------------------
# Expressions
# ---------------------------------------------------------------------------


class Identifier(BaseModel):
    """A bare name: ``x``, ``add``."""

    name: str

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return self.name


class IntegerLiteral(BaseModel):
    value: int

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return str(self.value)


class FloatLiteral(BaseModel):
    value: float

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return repr(self.value)


class BooleanLiteral(BaseModel):
    value: bool

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return "true" if self.value else "false"


class StringLiteral(BaseModel):
    value: str

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return _quote(self.value)


class NullLiteral(BaseModel):
    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return "null"


class PrefixExpression(BaseModel):
    """Unary operation: ``-x``, ``!ok``."""

    operator: str
    right: Expression

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"({self.operator}{self.right})"


class InfixExpression(BaseModel):
    """Binary operation: ``left operator right``."""

    left: Expression
    operator: str
    right: Expression

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"({self.left} {self.operator} {self.right})"


class AssignExpression(BaseModel):
    """Rebinding of an existing name: ``x = value``."""

    name: Identifier
    value: Expression

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"({self.name} = {self.value})"


class IfExpression(BaseModel):
    """
    Conditional expression.

    ``alternative`` is None when there is no else branch. An ``else if``
    chain is represented as an alternative block holding a single nested
    IfExpression.
    """

    condition: Expression
    consequence: BlockStatement
    alternative: BlockStatement | None = None

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        out = f"if ({self.condition}) {{ {self.consequence} }}"
        if self.alternative is not None:
            out += f" else {{ {self.alternative} }}"
        return out


class FunctionLiteral(BaseModel):
    """Function literal: ``fn(a, b) { body }``."""

    parameters: list[Identifier] = Field(default_factory=list)
    body: BlockStatement

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        params = ", ".join(str(p) for p in self.parameters)
        return f"fn({params}) {{ {self.body} }}"


class CallExpression(BaseModel):
    """Call: ``function(arg1, arg2)``."""

    function: Expression
    arguments: list[Expression] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        args = ", ".join(str(a) for a in self.arguments)
        return f"{self.function}({args})"


class ArrayLiteral(BaseModel):
    elements: list[Expression] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return "[" + ", ".join(str(e) for e in self.elements) + "]"


class IndexExpression(BaseModel):
    """Subscript: ``left[index]``."""

    left: Expression
    index: Expression

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"({self.left}[{self.index}])"


class HashLiteral(BaseModel):
    """Hash literal: ``{key: value, ...}`` with pairs in source order."""

    pairs: list[tuple[Expression, Expression]] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return "{" + ", ".join(f"{k}: {v}" for k, v in self.pairs) + "}"


# ---------------------------------------------------------------------------
# Statements
# ---------------------------------------------------------------------------


class LetStatement(BaseModel):
    """Binding in the innermost scope: ``let name = value;``."""

    name: Identifier
    value: Expression

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"let {self.name} = {self.value};"


class ReturnStatement(BaseModel):
    """``return value;``; ``value`` is None for a bare ``return;``."""

    value: Expression | None = None

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        if self.value is None:
            return "return;"
        return f"return {self.value};"


class ExpressionStatement(BaseModel):
    expression: Expression

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return str(self.expression)


class BlockStatement(BaseModel):
    """Brace-delimited statement sequence; evaluated in its own scope."""

    statements: list[Statement] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return " ".join(str(s) for s in self.statements)


class Program(BaseModel):
    """Root node: the ordered statements of one source input."""

    statements: list[Statement] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return "\n".join(str(s) for s in self.statements)


# ---------------------------------------------------------------------------
# Union types
# ---------------------------------------------------------------------------

Expression = (
    Identifier
    | IntegerLiteral
    | FloatLiteral
    | BooleanLiteral
    | StringLiteral
    | NullLiteral
    | PrefixExpression
    | InfixExpression
    | AssignExpression
    | IfExpression
    | FunctionLiteral
    | CallExpression
    | ArrayLiteral
    | IndexExpression
    | HashLiteral
)

Statement = LetStatement | ReturnStatement | ExpressionStatement | BlockStatement

Node = Program | Statement | Expression

# Rebuild models for recursive forward references
PrefixExpression.model_rebuild()
InfixExpression.model_rebuild()
AssignExpression.model_rebuild()
IfExpression.model_rebuild()
FunctionLiteral.model_rebuild()
CallExpression.model_rebuild()
ArrayLiteral.model_rebuild()
IndexExpression.model_rebuild()
HashLiteral.model_rebuild()
LetStatement.model_rebuild()
ReturnStatement.model_rebuild()
ExpressionStatement.model_rebuild()
BlockStatement.model_rebuild()
Program.model_rebuild()
