"""
Operator semantics for the LUMEN evaluator.

Binary and unary operators are dispatched on the operator token kind and then
on the exact pair of operand kinds. Any pairing not listed is a runtime fault.

Binary rules:
    ``+``           String+String (concatenation) and every numeric pairing
    ``- * %``       every numeric pairing
    ``/``           every numeric pairing, always producing a Float
    ``&& || !=``    Boolean with Boolean only

Numeric pairings are Int/Int, Float/Float, Int/Float and Float/Int; a Float on
either side makes the result a Float. Integer results must fit in 64 bits. A
float ``%`` with an infinite dividend is a fault.
"""

import math
from collections.abc import Callable

from lumen.lumen_constants import (
    AMPERSAND_AMPERSAND,
    BANG,
    BANG_EQUALS,
    INT_MAX,
    INT_MIN,
    MINUS,
    PERCENT,
    PIPE_PIPE,
    PLUS,
    SLASH,
    STAR,
)
from lumen.lumen_syntax import SyntaxNode
from lumen.lumen_values import (
    BOOLEAN,
    FLOAT,
    INT,
    STRING,
    EvaluationResult,
)


class EvaluationError(RuntimeError):
    """A fatal fault raised while evaluating a syntax tree.

    Unlike diagnostics these abort the current evaluation immediately.
    """


VERBS = {
    PLUS: "add",
    MINUS: "subtract",
    STAR: "multiply",
    SLASH: "divide",
    PERCENT: "modulo",
    BANG_EQUALS: "compare",
    AMPERSAND_AMPERSAND: "and",
    PIPE_PIPE: "or",
}


def _checked_int(value: int, operator: str) -> EvaluationResult:
    if not INT_MIN <= value <= INT_MAX:
        raise EvaluationError(f"Integer overflow in {operator}: {value}")
    return EvaluationResult.integer(value)


def _truncated_remainder(left: int, right: int) -> int:
    remainder = abs(left) % abs(right)
    return -remainder if left < 0 else remainder


def _float_remainder(left: float, right: float) -> float:
    # fmod rejects an infinite dividend
    if math.isinf(left):
        raise EvaluationError(f"Cannot modulo {left!r} by {right!r}")
    return math.fmod(left, right)


def _numeric(
    left: EvaluationResult,
    right: EvaluationResult,
    operator: str,
    on_int: Callable[[int, int], int],
    on_float: Callable[[float, float], float],
) -> EvaluationResult:
    if left.kind == INT and right.kind == INT:
        return _checked_int(on_int(left.value, right.value), operator)
    result = on_float(float(left.value), float(right.value))
    return EvaluationResult.floating(float(result))


def _is_zero(value: EvaluationResult) -> bool:
    return value.value == 0


def evaluate_binary(
    operator: SyntaxNode, left: EvaluationResult, right: EvaluationResult
) -> EvaluationResult:
    """Applies a binary operator to two forced operands."""
    kind = operator.kind if operator.is_token() else None
    pair = (left.kind, right.kind)
    numeric = left.is_numeric and right.is_numeric
    verb = VERBS.get(kind or "")

    if kind == PLUS:
        if pair == (STRING, STRING):
            return EvaluationResult.string(left.value + right.value)
        if numeric:
            return _numeric(left, right, "+", lambda a, b: a + b, lambda a, b: a + b)
    elif kind == MINUS and numeric:
        return _numeric(left, right, "-", lambda a, b: a - b, lambda a, b: a - b)
    elif kind == STAR and numeric:
        return _numeric(left, right, "*", lambda a, b: a * b, lambda a, b: a * b)
    elif kind == SLASH and numeric:
        if _is_zero(right):
            raise EvaluationError(f"Cannot divide {left!r} by zero")
        return EvaluationResult.floating(float(left.value) / float(right.value))
    elif kind == PERCENT and numeric:
        if _is_zero(right):
            raise EvaluationError(f"Cannot modulo {left!r} by zero")
        return _numeric(left, right, "%", _truncated_remainder, _float_remainder)
    elif kind == BANG_EQUALS and pair == (BOOLEAN, BOOLEAN):
        return EvaluationResult.boolean(left.value != right.value)
    elif kind == AMPERSAND_AMPERSAND and pair == (BOOLEAN, BOOLEAN):
        return EvaluationResult.boolean(left.value and right.value)
    elif kind == PIPE_PIPE and pair == (BOOLEAN, BOOLEAN):
        return EvaluationResult.boolean(left.value or right.value)

    if verb is None:
        raise EvaluationError(
            f"Cannot evaluate binary expression with operator {operator!r} "
            f"on {left!r} and {right!r}"
        )
    raise EvaluationError(f"Cannot {verb} {left!r} and {right!r}")


def evaluate_unary(operator: SyntaxNode, operand: EvaluationResult) -> EvaluationResult:
    """Applies a prefix operator to a forced operand."""
    kind = operator.kind if operator.is_token() else None
    if kind == PLUS and operand.is_numeric:
        return operand
    if kind == MINUS and operand.kind == INT:
        return _checked_int(-operand.value, "unary -")
    if kind == MINUS and operand.kind == FLOAT:
        return EvaluationResult.floating(-operand.value)
    if kind == BANG and operand.kind == BOOLEAN:
        return EvaluationResult.boolean(not operand.value)
    raise EvaluationError(
        f"Cannot evaluate unary expression with operator {operator!r} on {operand!r}"
    )
