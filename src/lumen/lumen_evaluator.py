"""
Tree-walking evaluator for the LUMEN language.

``evaluate(tree, environment)`` walks a syntax tree produced by the parser
and returns an ``EvaluationResult``. The environment is mutated by
declarations (append) and assignments (replace).

Some nodes evaluate to a deferred result (``EvaluationResult.deferred``)
instead of recursing: a block defers to its inner node and a taken
conditional defers to its body. Deferred results are forced in a bounded loop
before an operator or a variable ever sees them, and ``evaluate`` never
returns one.

Every evaluation problem (type mismatch, division by zero, unbound name,
unsupported node) raises ``EvaluationError``. Callers must only evaluate
trees whose diagnostics are empty.
"""

import logging

from lumen.lumen_constants import (
    BINARY,
    BLOCK,
    IDENT,
    IF_STATEMENT,
    LITERAL,
    LITERAL_EXPRESSION,
    PARENTHESIZED,
    UNARY,
    VARIABLE_ASSIGNMENT,
    VARIABLE_DECLARATION,
)
from lumen.lumen_constants import BOOL as LITERAL_BOOL
from lumen.lumen_constants import CHAR as LITERAL_CHAR
from lumen.lumen_constants import FLOAT as LITERAL_FLOAT
from lumen.lumen_constants import INT as LITERAL_INT
from lumen.lumen_constants import NULL as LITERAL_NULL
from lumen.lumen_constants import STRING as LITERAL_STRING
from lumen.lumen_environment import Environment, UnboundVariableError
from lumen.lumen_operators import EvaluationError, evaluate_binary, evaluate_unary
from lumen.lumen_syntax import SyntaxDescriptor, SyntaxNode
from lumen.lumen_values import BOOLEAN, EvaluationResult

logger = logging.getLogger("lumen.evaluator")
logger.addHandler(logging.NullHandler())

MAX_DEFERRALS = 10_000

_LITERAL_RESULTS = {
    LITERAL_INT: EvaluationResult.integer,
    LITERAL_FLOAT: EvaluationResult.floating,
    LITERAL_STRING: EvaluationResult.string,
    LITERAL_CHAR: EvaluationResult.char,
    LITERAL_BOOL: EvaluationResult.boolean,
}


class Evaluator:
    """Evaluates syntax trees against one session environment.

    Attributes:
        environment (Environment): Bindings shared across calls.
        max_deferrals (int): Upper bound on forcing steps for one value.
    """

    def __init__(
        self, environment: Environment | None = None, max_deferrals: int = MAX_DEFERRALS
    ) -> None:
        self.environment = environment if environment is not None else Environment()
        self.max_deferrals = max_deferrals

    def evaluate(self, tree: SyntaxDescriptor | SyntaxNode) -> EvaluationResult:
        node = tree.syntax if isinstance(tree, SyntaxDescriptor) else tree
        try:
            result = self.force(self.dispatch(node))
        except RecursionError as e:
            raise EvaluationError("Expression nests too deeply to evaluate") from e
        logger.debug("evaluated %s -> %r", node.kind, result)
        return result

    def force(self, result: EvaluationResult) -> EvaluationResult:
        """Re-evaluates deferred results until a value comes out."""
        steps = 0
        while result.is_deferred:
            steps += 1
            if steps > self.max_deferrals:
                raise EvaluationError(
                    f"Gave up forcing a deferred result after {self.max_deferrals} steps"
                )
            result = self.dispatch(result.value)
        return result

    def dispatch(self, node: SyntaxNode) -> EvaluationResult:
        if node.is_expression(BINARY):
            left = self.force(self.dispatch(node["left"]))
            right = self.force(self.dispatch(node["right"]))
            return evaluate_binary(node["operator"], left, right)

        if node.is_expression(UNARY):
            operand = self.force(self.dispatch(node["operand"]))
            return evaluate_unary(node["operator"], operand)

        if node.is_expression(PARENTHESIZED):
            return self.dispatch(node["expression"])

        if node.is_expression(LITERAL_EXPRESSION):
            return self.evaluate_literal(node["expression"])

        if node.is_statement(VARIABLE_DECLARATION):
            name, value = self._binding(node)
            self.environment.declare(name, value.to_typed())
            return EvaluationResult.null()

        if node.is_statement(VARIABLE_ASSIGNMENT):
            name, value = self._binding(node)
            self.environment.assign(name, value.to_typed())
            return EvaluationResult.null()

        if node.is_statement(BLOCK):
            return EvaluationResult.deferred(node["statements"])

        if node.is_statement(IF_STATEMENT):
            condition = self.force(self.dispatch(node["condition"]))
            if condition.kind != BOOLEAN:
                raise EvaluationError(f"Condition must be a Boolean, got {condition!r}")
            if condition.value:
                return EvaluationResult.deferred(node["body"])
            return EvaluationResult.null()

        raise EvaluationError(f"Cannot evaluate syntax kind: {node!r}")

    def _binding(self, node: SyntaxNode) -> tuple[str, EvaluationResult]:
        target = node["identifier"]
        if target is None or not target.is_token(IDENT):
            raise EvaluationError(f"Cannot bind a variable to {target!r}")
        value = self.force(self.dispatch(node["expression"]))
        return target.value, value

    def evaluate_literal(self, token: SyntaxNode | None) -> EvaluationResult:
        if token is not None and token.is_token(LITERAL):
            if token.literal_type == LITERAL_NULL:
                return EvaluationResult.null()
            return _LITERAL_RESULTS[token.literal_type](token.value)
        if token is not None and token.is_token(IDENT):
            try:
                return EvaluationResult.from_typed(self.environment.lookup(token.value))
            except UnboundVariableError as e:
                raise EvaluationError(str(e)) from e
        raise EvaluationError(f"Cannot evaluate literal expression: {token!r}")


def evaluate(
    tree: SyntaxDescriptor | SyntaxNode, environment: Environment
) -> EvaluationResult:
    return Evaluator(environment).evaluate(tree)


__all__ = ["EvaluationError", "Evaluator", "MAX_DEFERRALS", "evaluate"]
