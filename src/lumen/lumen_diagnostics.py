"""
Diagnostics collected while tokenizing and parsing LUMEN source.

A diagnostic is a recoverable problem tied to a source offset: the lexer and
parser record one, synthesize a placeholder node and keep going, so a single
pass can report several problems. Runtime faults raised by the evaluator are
not diagnostics (see ``lumen.lumen_evaluator.EvaluationError``).

Classes:
    Diagnostic: One error record (kind, position and the nodes involved).
    Diagnostics: An ordered accumulator that owns a copy of the input text and
        renders a context window around each failing offset.

Example:
    >>> diagnostics = Diagnostics("let = 5;")
    >>> diagnostics.add_error(Diagnostic(EXPECTED_IDENTIFIER, 4))
    >>> print(diagnostics.render())
    Error: Expected identifier, found nothing at position 4 (line 1, column 5).
        let = 5;
            ^
"""

import logging
from collections.abc import Iterator

from lumen.lumen_source import SourceText
from lumen.lumen_syntax import SyntaxDescriptor

logger = logging.getLogger("lumen.diagnostics")
logger.addHandler(logging.NullHandler())

UNKNOWN_TOKEN = "UnknownToken"
UNEXPECTED_TOKEN = "UnexpectedToken"
UNEXPECTED_END_OF_FILE = "UnexpectedEndOfFile"
EXPECTED_TOKEN = "ExpectedToken"
EXPECTED_EXPRESSION = "ExpectedExpression"
EXPECTED_IDENTIFIER = "ExpectedIdentifier"
EXPECTED_EQUALS = "ExpectedEquals"
EXPECTED_SEMICOLON = "ExpectedSemicolon"
PARSER_ERROR = "ParserError"
LEXER_ERROR = "LexerError"
INVALID_CHARACTER_ERROR = "InvalidCharacterError"

ERROR_KINDS = (
    UNKNOWN_TOKEN,
    UNEXPECTED_TOKEN,
    UNEXPECTED_END_OF_FILE,
    EXPECTED_TOKEN,
    EXPECTED_EXPRESSION,
    EXPECTED_IDENTIFIER,
    EXPECTED_EQUALS,
    EXPECTED_SEMICOLON,
    PARSER_ERROR,
    LEXER_ERROR,
    INVALID_CHARACTER_ERROR,
)

DEFAULT_CONTEXT_WIDTH = 10


class Diagnostic:
    """A single recoverable error.

    Attributes:
        kind (str): One of ``ERROR_KINDS``.
        position (int): Source offset the error is reported at.
        expected (SyntaxDescriptor | None): The shape that was required, if any.
        found (SyntaxDescriptor | None): The node actually encountered, if any.
        message (str | None): Free-form detail (used by ``LexerError``).
    """

    def __init__(
        self,
        kind: str,
        position: int,
        expected: SyntaxDescriptor | None = None,
        found: SyntaxDescriptor | None = None,
        message: str | None = None,
    ) -> None:
        if kind not in ERROR_KINDS:
            raise ValueError(f"Unknown diagnostic kind: {kind!r}")
        self.kind = kind
        self.position = position
        self.expected = expected
        self.found = found
        self.message = message

    def __repr__(self) -> str:
        return f"Diagnostic({self.kind}, position={self.position})"

    def __eq__(self, other: object) -> bool:
        return (
            isinstance(other, Diagnostic)
            and self.kind == other.kind
            and self.position == other.position
            and self.expected == other.expected
            and self.found == other.found
            and self.message == other.message
        )

    def describe(self) -> str:
        """Returns the one-line explanation used in rendered output."""
        found = repr(self.found.syntax) if self.found else "nothing"
        expected = repr(self.expected.syntax) if self.expected else "something else"
        if self.kind == UNKNOWN_TOKEN:
            return f"Unknown token {found}"
        if self.kind == UNEXPECTED_END_OF_FILE:
            return f"Unexpected end of file. Expected {expected}"
        if self.kind == EXPECTED_IDENTIFIER:
            return f"Expected identifier, found {found}"
        if self.kind == EXPECTED_EXPRESSION:
            return f"Expected expression, found {found}"
        if self.kind == EXPECTED_EQUALS:
            return f"Expected '=', found {found}"
        if self.kind == EXPECTED_SEMICOLON:
            return f"Expected ';', found {found}"
        if self.kind in (UNEXPECTED_TOKEN, EXPECTED_TOKEN):
            return f"Unexpected token {found}. Expected {expected}"
        detail = f": {self.message}" if self.message else ""
        return f"{self.kind} at {found}{detail}"


class Diagnostics:
    """Ordered accumulator of ``Diagnostic`` records for one input.

    Attributes:
        errors (list[Diagnostic]): Records in discovery order.
        input (str): The full source text, kept for rendering.
    """

    def __init__(self, input_text: str) -> None:
        self.errors: list[Diagnostic] = []
        self.input = input_text

    def __len__(self) -> int:
        return len(self.errors)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self.errors)

    def add_error(self, error: Diagnostic) -> None:
        logger.debug("diagnostic %s at %d", error.kind, error.position)
        self.errors.append(error)

    def merge(self, other: "Diagnostics") -> None:
        """Appends ``other``'s records after this instance's own."""
        self.errors.extend(other.errors)

    def has_errors(self) -> bool:
        return len(self.errors) > 0

    def kinds(self) -> list[str]:
        return [error.kind for error in self.errors]

    def context_window(
        self, position: int, width: int = DEFAULT_CONTEXT_WIDTH
    ) -> tuple[str, int]:
        """Returns the text within ``width`` characters of ``position``.

        The second element is the offset of ``position`` inside the window.
        Line breaks are flattened to spaces so a marker line can sit under it.
        """
        position = min(max(position, 0), len(self.input))
        start = max(position - width, 0)
        end = min(position + width, len(self.input))
        window = self.input[start:end].replace("\r", " ").replace("\n", " ")
        return window, position - start

    def render_error(
        self, error: Diagnostic, width: int = DEFAULT_CONTEXT_WIDTH
    ) -> str:
        window, offset = self.context_window(error.position, width)
        line, column = SourceText(self.input).location(error.position)
        span = 1
        if error.found is not None and error.found.syntax.value is not None:
            span = max(len(str(error.found.syntax.value)), 1)
        span = max(min(span, len(window) - offset), 1)
        return (
            f"Error: {error.describe()} at position {error.position} "
            f"(line {line}, column {column}).\n"
            f"    {window}\n"
            f"    {' ' * offset}{'^' * span}"
        )

    def render(self, width: int = DEFAULT_CONTEXT_WIDTH) -> str:
        return "\n".join(self.render_error(error, width) for error in self.errors)

    def print(self, width: int = DEFAULT_CONTEXT_WIDTH) -> None:
        for error in self.errors:
            print(self.render_error(error, width))
