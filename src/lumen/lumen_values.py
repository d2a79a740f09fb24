"""
Runtime values of the LUMEN evaluator.

Classes:
    TypedValue: A value stored in the environment (string, char, int, float,
        boolean or null).
    EvaluationResult: What evaluating a node yields. Same shapes as
        ``TypedValue`` plus ``SYNTAX``, a deferred "evaluate this node next"
        result that the evaluator forces before use.
"""

from typing import Any

from lumen.lumen_constants import INT_MAX, INT_MIN
from lumen.lumen_syntax import SyntaxNode

STRING = "String"
CHAR = "Char"
INT = "Int"
FLOAT = "Float"
BOOLEAN = "Boolean"
NULL = "Null"
SYNTAX = "Syntax"

VALUE_KINDS = (STRING, CHAR, INT, FLOAT, BOOLEAN, NULL)
NUMERIC_KINDS = (INT, FLOAT)

_PYTHON_TYPES: dict[str, type] = {
    STRING: str,
    CHAR: str,
    INT: int,
    FLOAT: float,
    BOOLEAN: bool,
    NULL: type(None),
    SYNTAX: SyntaxNode,
}


class TypedValue:
    """A tagged runtime value.

    Attributes:
        kind (str): One of ``VALUE_KINDS``.
        value (Any): The Python payload (``None`` for ``Null``).
    """

    kinds: tuple[str, ...] = VALUE_KINDS

    def __init__(self, kind: str, value: Any = None) -> None:
        if kind not in self.kinds:
            raise ValueError(f"{type(self).__name__} cannot hold kind {kind!r}")
        expected = _PYTHON_TYPES[kind]
        if type(value) is not expected:
            raise TypeError(f"{kind} expects {expected.__name__}, got {value!r}")
        if kind == INT and not INT_MIN <= value <= INT_MAX:
            raise OverflowError(f"{value} does not fit in a 64-bit integer")
        self.kind = kind
        self.value = value

    def __repr__(self) -> str:
        if self.kind == NULL:
            return NULL
        return f"{self.kind}({self.value!r})"

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, TypedValue)
            and self.kind == other.kind
            and self.value == other.value
        )

    def __hash__(self) -> int:
        return hash((self.kind, self.value))

    @property
    def is_numeric(self) -> bool:
        return self.kind in NUMERIC_KINDS

    @classmethod
    def string(cls, value: str) -> "TypedValue":
        return cls(STRING, value)

    @classmethod
    def char(cls, value: str) -> "TypedValue":
        return cls(CHAR, value)

    @classmethod
    def integer(cls, value: int) -> "TypedValue":
        return cls(INT, value)

    @classmethod
    def floating(cls, value: float) -> "TypedValue":
        return cls(FLOAT, value)

    @classmethod
    def boolean(cls, value: bool) -> "TypedValue":
        return cls(BOOLEAN, value)

    @classmethod
    def null(cls) -> "TypedValue":
        return cls(NULL, None)


class EvaluationResult(TypedValue):
    """A ``TypedValue`` that may also be a deferred syntax node."""

    kinds = VALUE_KINDS + (SYNTAX,)

    def __hash__(self) -> int:
        return hash((self.kind, id(self.value) if self.kind == SYNTAX else self.value))

    @property
    def is_deferred(self) -> bool:
        return self.kind == SYNTAX

    @classmethod
    def deferred(cls, node: SyntaxNode) -> "EvaluationResult":
        return cls(SYNTAX, node)

    @classmethod
    def from_typed(cls, value: TypedValue) -> "EvaluationResult":
        return cls(value.kind, value.value)

    def to_typed(self) -> TypedValue:
        """Converts to a storable value; deferred results cannot be stored."""
        if self.is_deferred:
            raise ValueError(f"Deferred result cannot be stored: {self.value!r}")
        return TypedValue(self.kind, self.value)
