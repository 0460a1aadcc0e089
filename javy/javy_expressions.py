"""
Expression nodes and their evaluation.

Javy values are `float`, `str`, `bool` or `None`. Evaluation is a pure
function of (node, scope): it reads variables but never writes them.
"""
import math
from dataclasses import dataclass
from typing import Any, Union

from javy.javy_tokens import TokenBinding, TokenKind
from javy.javy_datatypes import Scope, InvalidOperationError, UndefinedNameError

Value = Union[float, str, bool, None]


# =================================================================
# Expression nodes
# =================================================================

@dataclass(frozen=True)
class Literal:
    value: Value


@dataclass(frozen=True)
class Identifier:
    name: str
    token: TokenBinding


@dataclass(frozen=True)
class Unary:
    operator: TokenBinding
    operand: 'Expression'


@dataclass(frozen=True)
class Binary:
    left: 'Expression'
    operator: TokenBinding
    right: 'Expression'


@dataclass(frozen=True)
class Logical:
    left: 'Expression'
    operator: TokenBinding
    right: 'Expression'


Expression = Union[Literal, Identifier, Unary, Binary, Logical]


# =================================================================
# Value helpers
# =================================================================

def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_truthy(value: Any) -> bool:
    """null is false, booleans are themselves, everything else is true."""
    match value:
        case None:
            return False
        case bool():
            return value
        case _:
            return True


def to_text(value: Any) -> str:
    """The textual form used when a value meets a string operand."""
    match value:
        case None:
            return "null"
        case bool():
            return "true" if value else "false"
        case float() if value.is_integer():
            return str(int(value))
        case int() | float():
            return repr(value)
        case str():
            return value
        case _:
            return str(value)


def type_name(value: Any) -> str:
    match value:
        case None:
            return "null"
        case bool():
            return "boolean"
        case int() | float():
            return "number"
        case str():
            return "string"
        case _:
            return type(value).__name__


# =================================================================
# Evaluation
# =================================================================

def check_names(node: Expression, scope: Scope):
    """Raises UndefinedNameError at the first identifier in `node` that `scope` cannot resolve."""
    match node:
        case Identifier(name=name, token=token):
            if scope.resolve_variable(name) is None:
                raise UndefinedNameError(f"No such variable exists: {name}", token.location)
        case Unary(operand=operand):
            check_names(operand, scope)
        case Binary(left=left, right=right) | Logical(left=left, right=right):
            check_names(left, scope)
            check_names(right, scope)


def evaluate(node: Expression, scope: Scope) -> Value:
    """Recursively evaluates an expression tree against `scope`."""
    match node:
        case Literal(value=value):
            return value
        case Identifier(name=name, token=token):
            variable = scope.resolve_variable(name)
            if variable is None:
                raise UndefinedNameError(f"No such variable exists: {name}", token.location)
            return variable.value
        case Unary(operator=operator, operand=operand):
            return _unary(operator, evaluate(operand, scope))
        case Logical(left=left, operator=operator, right=right):
            value = evaluate(left, scope)
            if operator.kind is TokenKind.OR:
                skip = is_truthy(value)
            else:
                skip = not is_truthy(value)
            if skip:
                # The skipped operand is not evaluated but its names must still resolve.
                check_names(right, scope)
                return value
            return evaluate(right, scope)
        case Binary(left=left, operator=operator, right=right):
            return _binary(operator, evaluate(left, scope), evaluate(right, scope))
    raise TypeError(f"not an expression node: {node!r}")


def _unary(operator: TokenBinding, operand: Value) -> Value:
    if operator.kind is not TokenKind.MINUS:
        raise InvalidOperationError(f"Unknown unary operator: {operator.lexeme}", operator.location)
    if not is_number(operand):
        raise InvalidOperationError(
            f"Unary minus can only be applied to numbers, not {type_name(operand)}", operator.location)
    return -operand


def _binary(operator: TokenBinding, left: Value, right: Value) -> Value:
    if is_number(left) and is_number(right):
        return _numeric(operator, left, right)
    if isinstance(left, str) or isinstance(right, str):
        return _textual(operator, left, right)
    raise InvalidOperationError(
        f"Invalid operation: {type_name(left)} {operator.lexeme} {type_name(right)}", operator.location)


def _numeric(operator: TokenBinding, left: float, right: float) -> Value:
    match operator.kind:
        case TokenKind.PLUS:
            return left + right
        case TokenKind.MINUS:
            return left - right
        case TokenKind.STAR:
            return left * right
        case TokenKind.SLASH:
            return _divide(left, right)
        case TokenKind.GREATER:
            return left > right
        case TokenKind.LESS:
            return left < right
        case TokenKind.GREATER_EQUAL:
            return left >= right
        case TokenKind.LESS_EQUAL:
            return left <= right
        case TokenKind.IS:
            return left == right
        case TokenKind.NOT:
            return left != right
    raise InvalidOperationError(f"Invalid operator: {operator.lexeme}", operator.location)


def _divide(left: float, right: float) -> float:
    """IEEE 754 division: a zero divisor yields a signed infinity, or NaN for 0 / 0."""
    if right != 0:
        return left / right
    if left == 0 or math.isnan(left):
        return math.nan
    return math.copysign(math.inf, left) * math.copysign(1.0, right)


def _textual(operator: TokenBinding, left: Value, right: Value) -> Value:
    match operator.kind:
        case TokenKind.PLUS:
            return to_text(left) + to_text(right)
        case TokenKind.MINUS:
            return to_text(left).replace(to_text(right), "", 1)
        case TokenKind.STAR:
            return _repeat(operator, left, right)
        case TokenKind.IS:
            return left == right
        case TokenKind.NOT:
            return left != right
    raise InvalidOperationError(
        f"Invalid operator or operand types: {type_name(left)} {operator.lexeme} {type_name(right)}",
        operator.location)


def _repeat(operator: TokenBinding, left: Value, right: Value) -> str:
    if isinstance(left, str) and is_number(right):
        text, count = left, right
    elif isinstance(right, str) and is_number(left):
        text, count = right, left
    else:
        raise InvalidOperationError(
            "Invalid multiplication operation: exactly one operand must be a number", operator.location)
    if count < 0 or not math.isfinite(count):
        raise InvalidOperationError(f"Cannot repeat text {to_text(count)} times", operator.location)
    return text * int(count)
