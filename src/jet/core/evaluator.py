"""
Tree-walking evaluator for Jet.

``evaluate(node, env)`` walks the AST against an environment and returns
either a plain Value or a control signal (ReturnSignal / Error). There is
no hidden global state: the environment chain is the only state threaded
through. Signals are results, not exceptions; every aggregation point
(program, block, call, operand evaluation) checks for them and
short-circuits, so a return or an error abandons the remaining work and
bubbles up unchanged.
"""

from __future__ import annotations

import logging
import math
import sys

from jet.core.ast import (
    ArrayLiteral,
    AssignExpression,
    BlockStatement,
    BooleanLiteral,
    CallExpression,
    Expression,
    ExpressionStatement,
    FloatLiteral,
    FunctionLiteral,
    HashLiteral,
    Identifier,
    IfExpression,
    IndexExpression,
    InfixExpression,
    IntegerLiteral,
    LetStatement,
    Node,
    NullLiteral,
    PrefixExpression,
    Program,
    ReturnStatement,
    Statement,
    StringLiteral,
)
from jet.core.builtins import BUILTINS
from jet.core.environment import Environment
from jet.core.values import (
    NULL,
    Array,
    Boolean,
    Builtin,
    Error,
    Float,
    Function,
    Hash,
    HashKey,
    Integer,
    Null,
    Result,
    ReturnSignal,
    Signal,
    String,
    Value,
    hash_key,
    is_signal,
    is_truthy,
    native_bool,
)

logger = logging.getLogger(__name__)


def run_program(program: Program, env: Environment) -> Value | Error:
    """Evaluate a whole program; a top-level ``return`` ends it early.

    Args:
        program: Parsed program.
        env: Session root environment; mutated in place.

    Returns:
        The value of the last statement, or the Error that aborted it.
    """
    result = _eval_program(program, env)
    if isinstance(result, Error):
        logger.debug("Runtime error: %s", result.message)
    return result


def evaluate(node: Node, env: Environment) -> Result:
    """Evaluate any AST node against an environment."""
    match node:
        # Statements
        case Program():
            return _eval_program(node, env)
        case BlockStatement():
            return _eval_block(node, env)
        case ExpressionStatement(expression=expression):
            return evaluate(expression, env)
        case LetStatement(name=name, value=value_node):
            value = evaluate(value_node, env)
            if is_signal(value):
                return value
            env.define(name.name, value)
            return NULL
        case ReturnStatement(value=None):
            return ReturnSignal(NULL)
        case ReturnStatement(value=value_node):
            value = evaluate(value_node, env)
            if is_signal(value):
                return value
            return ReturnSignal(value)

        # Literals
        case IntegerLiteral(value=v):
            return Integer(v)
        case FloatLiteral(value=v):
            return Float(v)
        case BooleanLiteral(value=v):
            return native_bool(v)
        case StringLiteral(value=v):
            return String(v)
        case NullLiteral():
            return NULL
        case FunctionLiteral(parameters=parameters, body=body):
            return Function(parameters=parameters, body=body, env=env)
        case ArrayLiteral(elements=elements):
            items = _eval_expressions(elements, env)
            if not isinstance(items, list):
                return items
            return Array(items)
        case HashLiteral():
            return _eval_hash_literal(node, env)

        # Compound expressions
        case Identifier(name=name):
            return _eval_identifier(name, env)
        case AssignExpression():
            return _eval_assign(node, env)
        case PrefixExpression(operator=operator, right=right_node):
            right = evaluate(right_node, env)
            if is_signal(right):
                return right
            return _eval_prefix(operator, right)
        case InfixExpression():
            return _eval_infix_expression(node, env)
        case IfExpression():
            return _eval_if(node, env)
        case CallExpression(function=function_node, arguments=arguments):
            function = evaluate(function_node, env)
            if is_signal(function):
                return function
            args = _eval_expressions(arguments, env)
            if not isinstance(args, list):
                return args
            return apply_function(function, args)
        case IndexExpression(left=left_node, index=index_node):
            left = evaluate(left_node, env)
            if is_signal(left):
                return left
            index = evaluate(index_node, env)
            if is_signal(index):
                return index
            return _eval_index(left, index)

    return Error(f"unknown node: {type(node).__name__}")


# ---------------------------------------------------------------------------
# Statement sequences
# ---------------------------------------------------------------------------


def _eval_program(program: Program, env: Environment) -> Value | Error:
    result: Result = NULL
    for statement in program.statements:
        result = evaluate(statement, env)
        match result:
            case ReturnSignal(value=value):
                return value
            case Error():
                return result
    return result


def _eval_statements(statements: list[Statement], env: Environment) -> Result:
    """Run statements in order; a signal stops the sequence and is passed up as-is."""
    result: Result = NULL
    for statement in statements:
        result = evaluate(statement, env)
        if is_signal(result):
            return result
    return result


def _eval_block(block: BlockStatement, env: Environment) -> Result:
    return _eval_statements(block.statements, env.enclosed())


# ---------------------------------------------------------------------------
# Names
# ---------------------------------------------------------------------------


def _eval_identifier(name: str, env: Environment) -> Result:
    value = env.get(name)
    if value is not None:
        return value
    builtin = BUILTINS.get(name)
    if builtin is not None:
        return builtin
    return Error(f"identifier not found: {name}")


def _eval_assign(node: AssignExpression, env: Environment) -> Result:
    value = evaluate(node.value, env)
    if is_signal(value):
        return value
    if not env.assign(node.name.name, value):
        return Error(f"cannot assign to undeclared identifier: {node.name.name}")
    return value


def _eval_expressions(nodes: list[Expression], env: Environment) -> list[Value] | Signal:
    """Evaluate left to right; the first signal aborts the rest."""
    values: list[Value] = []
    for node in nodes:
        value = evaluate(node, env)
        if isinstance(value, (ReturnSignal, Error)):
            return value
        values.append(value)
    return values


# ---------------------------------------------------------------------------
# Operators
# ---------------------------------------------------------------------------


def _eval_prefix(operator: str, right: Value) -> Value | Error:
    match operator, right:
        case "!", _:
            return native_bool(not is_truthy(right))
        case "-", Integer(value=v):
            return Integer(-v)
        case "-", Float(value=v):
            return Float(-v)
        case _:
            return Error(f"unknown operator: {operator}{right.kind}")


def _eval_infix_expression(node: InfixExpression, env: Environment) -> Result:
    left = evaluate(node.left, env)
    if is_signal(left):
        return left

    # Short-circuit logical operators
    if node.operator in ("&&", "||"):
        truthy = is_truthy(left)
        if node.operator == "&&" and not truthy:
            return native_bool(False)
        if node.operator == "||" and truthy:
            return native_bool(True)
        right = evaluate(node.right, env)
        if is_signal(right):
            return right
        return native_bool(is_truthy(right))

    right = evaluate(node.right, env)
    if is_signal(right):
        return right
    return eval_infix(node.operator, left, right)


def eval_infix(operator: str, left: Value, right: Value) -> Value | Error:
    """Apply a binary operator to two evaluated operands.

    Integer-integer arithmetic stays integral; if either numeric operand
    is a float the operation is carried out in floating point.
    """
    match left, right:
        case Integer(value=a), Integer(value=b):
            return _integer_infix(operator, a, b)
        case (Integer(value=a) | Float(value=a)), (Integer(value=b) | Float(value=b)):
            try:
                return _float_infix(operator, a, b)
            except OverflowError:
                return Error(f"numeric overflow: {left.kind} {operator} {right.kind}")
        case String(value=a), String(value=b):
            return _string_infix(operator, a, b)
        case (Null(), _) | (_, Null()) if operator in ("==", "!="):
            same = isinstance(left, Null) and isinstance(right, Null)
            return native_bool(same if operator == "==" else not same)
        case _ if left.kind != right.kind:
            return Error(f"type mismatch: {left.kind} {operator} {right.kind}")
        case Boolean(value=a), Boolean(value=b) if operator in ("==", "!="):
            return native_bool((a == b) if operator == "==" else (a != b))
        case _ if operator == "==":
            return native_bool(left is right)
        case _ if operator == "!=":
            return native_bool(left is not right)
        case _:
            return Error(f"unknown operator: {left.kind} {operator} {right.kind}")


def _trunc_div(a: int, b: int) -> int:
    """Integer division rounding toward zero."""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b >= 0) else -q


def _checked_integer(value: int) -> Integer | Error:
    """Reject results too long to render as decimal text."""
    limit = sys.get_int_max_str_digits()
    # bit_length pre-check keeps the exact comparison off the common path
    if limit and value.bit_length() > 3 * limit and abs(value) >= 10**limit:
        return Error(f"integer too large: more than {limit} digits")
    return Integer(value)


def _integer_infix(operator: str, a: int, b: int) -> Value | Error:
    match operator:
        case "+":
            return _checked_integer(a + b)
        case "-":
            return _checked_integer(a - b)
        case "*":
            return _checked_integer(a * b)
        case "/":
            if b == 0:
                return Error("division by zero")
            return Integer(_trunc_div(a, b))
        case "%":
            if b == 0:
                return Error("division by zero")
            return Integer(a - b * _trunc_div(a, b))
        case "<":
            return native_bool(a < b)
        case ">":
            return native_bool(a > b)
        case "<=":
            return native_bool(a <= b)
        case ">=":
            return native_bool(a >= b)
        case "==":
            return native_bool(a == b)
        case "!=":
            return native_bool(a != b)
        case _:
            return Error(f"unknown operator: INTEGER {operator} INTEGER")


def _float_infix(operator: str, a: int | float, b: int | float) -> Value | Error:
    # Operands stay unconverted so comparisons against huge integers are exact
    match operator:
        case "+":
            return Float(a + b)
        case "-":
            return Float(a - b)
        case "*":
            return Float(a * b)
        case "/":
            if b == 0:
                return Error("division by zero")
            return Float(a / b)
        case "%":
            if b == 0:
                return Error("division by zero")
            return Float(math.fmod(a, b))
        case "<":
            return native_bool(a < b)
        case ">":
            return native_bool(a > b)
        case "<=":
            return native_bool(a <= b)
        case ">=":
            return native_bool(a >= b)
        case "==":
            return native_bool(a == b)
        case "!=":
            return native_bool(a != b)
        case _:
            return Error(f"unknown operator: FLOAT {operator} FLOAT")


def _string_infix(operator: str, a: str, b: str) -> Value | Error:
    match operator:
        case "+":
            return String(a + b)
        case "<":
            return native_bool(a < b)
        case ">":
            return native_bool(a > b)
        case "<=":
            return native_bool(a <= b)
        case ">=":
            return native_bool(a >= b)
        case "==":
            return native_bool(a == b)
        case "!=":
            return native_bool(a != b)
        case _:
            return Error(f"unknown operator: STRING {operator} STRING")


# ---------------------------------------------------------------------------
# Control flow and calls
# ---------------------------------------------------------------------------


def _eval_if(node: IfExpression, env: Environment) -> Result:
    condition = evaluate(node.condition, env)
    if is_signal(condition):
        return condition
    if is_truthy(condition):
        return _eval_block(node.consequence, env)
    if node.alternative is not None:
        return _eval_block(node.alternative, env)
    return NULL


def apply_function(function: Value, args: list[Value]) -> Value | Error:
    """Call a function value with already-evaluated arguments.

    User functions run in a fresh scope enclosed by their captured
    environment, not the caller's; a trailing return signal is unwrapped.
    """
    match function:
        case Function(parameters=parameters, body=body, env=captured):
            if len(args) != len(parameters):
                return Error(
                    f"wrong number of arguments: want={len(parameters)}, got={len(args)}"
                )
            call_env = captured.enclosed()
            for parameter, arg in zip(parameters, args, strict=True):
                call_env.define(parameter.name, arg)
            result = _eval_statements(body.statements, call_env)
            if isinstance(result, ReturnSignal):
                return result.value
            return result
        case Builtin(fn=fn):
            return fn(args)
        case _:
            return Error(f"not a function: {function.kind}")


# ---------------------------------------------------------------------------
# Collections
# ---------------------------------------------------------------------------


def _eval_index(left: Value, index: Value) -> Value | Error:
    match left, index:
        case Array(elements=elements), Integer(value=i):
            if -len(elements) <= i < len(elements):
                return elements[i]
            return NULL
        case Array(), _:
            return Error(f"array index must be INTEGER, got {index.kind}")
        case Hash(pairs=pairs), _:
            key = hash_key(index)
            if key is None:
                return Error(f"unusable as hash key: {index.kind}")
            entry = pairs.get(key)
            return entry[1] if entry is not None else NULL
        case _:
            return Error(f"index operator not supported: {left.kind}")


def _eval_hash_literal(node: HashLiteral, env: Environment) -> Result:
    pairs: dict[HashKey, tuple[Value, Value]] = {}
    for key_node, value_node in node.pairs:
        key = evaluate(key_node, env)
        if is_signal(key):
            return key
        hashed = hash_key(key)
        if hashed is None:
            return Error(f"unusable as hash key: {key.kind}")
        value = evaluate(value_node, env)
        if is_signal(value):
            return value
        pairs[hashed] = (key, value)
    return Hash(pairs)
