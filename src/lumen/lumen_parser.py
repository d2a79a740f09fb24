"""
LUMEN Language Parser

Turns the lexer's token list into a single position-tagged syntax tree.

Supported Constructs
--------------------
- Expressions:
    * Infix binary operators with precedence climbing (``+ - * / % && || !=``)
    * Prefix unary operators (``! + -``)
    * Parenthesized expressions, literals and bare identifiers
- Statements:
    * Declarations: ``let x = 1 + 2;``
    * Assignments: ``x = 3``
    * Blocks: ``{ x }``
    * Conditionals: ``if (cond) { body }``

Parser Behavior
---------------
- Never raises on malformed input. A missing token is recorded as a
  diagnostic and replaced by a synthetic node of the expected shape, so one
  pass can report several problems and always yields a tree.
- Nesting (parentheses, prefix operators, blocks, conditionals) is capped at
  ``MAX_NESTING`` levels. Past that a single ``ParserError`` is recorded and
  the rest of the input is skipped.
- Binary operators of equal precedence fold to the left. A unary operator
  takes everything to its right as its operand (``-2 + 3`` is ``-(2 + 3)``).
- Comment tokens are dropped before parsing.

Entry Points
------------
- ``Parser(tokens, text).parse()``: parse one top-level expression.
- ``parse(tokens, text)``: same, returning ``(tree, diagnostics)``.
"""

from __future__ import annotations

import logging

from lumen.lumen_constants import (
    BAD,
    BINARY_OPERATOR,
    BLOCK,
    COMMENT,
    EOF,
    EQUALS,
    IDENT,
    IF,
    IF_STATEMENT,
    LBRACE,
    LET,
    LITERAL,
    LPAREN,
    RBRACE,
    RPAREN,
    SEMICOLON,
    VARIABLE_ASSIGNMENT,
    VARIABLE_DECLARATION,
    binary_precedence,
    unary_precedence,
)
from lumen.lumen_diagnostics import (
    EXPECTED_IDENTIFIER,
    PARSER_ERROR,
    UNEXPECTED_TOKEN,
    Diagnostic,
    Diagnostics,
)
from lumen.lumen_syntax import (
    SyntaxDescriptor,
    SyntaxNode,
    binary,
    literal_expression,
    make_statement,
    make_token,
    parenthesized,
    unary,
)

logger = logging.getLogger("lumen.parser")
logger.addHandler(logging.NullHandler())

BAD_TOKEN_TEXT = "Bad Token"
MAX_NESTING = 128


def bad_token() -> SyntaxNode:
    return make_token(BAD, BAD_TOKEN_TEXT)


class Parser:
    """
    LUMEN Parser Class

    Recursive descent with precedence climbing over a list of
    ``SyntaxDescriptor`` tokens.

    Attributes
    ----------
    tokens : list[SyntaxDescriptor]
        The token stream, comments removed.
    position : int
        Index of the current token.
    diagnostics : Diagnostics
        Problems found while parsing, keyed to source offsets.
    depth : int
        Current nesting level, bounded by ``MAX_NESTING``.
    abandoned : bool
        Set once nesting overflowed; later mismatches are not reported.
    """

    def __init__(self, tokens: list[SyntaxDescriptor], text: str = "") -> None:
        self.tokens = [t for t in tokens if not t.syntax.is_token(COMMENT)]
        self.position = 0
        self.diagnostics = Diagnostics(text)
        self.depth = 0
        self.abandoned = False
        self._eof_position = self.tokens[-1].position if self.tokens else len(text)

    def peek(self, offset: int = 0) -> SyntaxDescriptor:
        index = self.position + offset
        if index >= len(self.tokens):
            return SyntaxDescriptor(self._eof_position, make_token(EOF))
        return self.tokens[index]

    def current(self) -> SyntaxDescriptor:
        return self.peek(0)

    def next_token(self) -> SyntaxDescriptor:
        token = self.current()
        self.position += 1
        return token

    def match_token(self, expected: SyntaxNode) -> SyntaxDescriptor:
        """Consumes the current token if it equals ``expected``.

        On a mismatch nothing is consumed: an ``UnexpectedToken`` diagnostic is
        recorded and a synthetic ``expected`` node at the current offset is
        returned in its place.
        """
        found = self.current()
        if found.syntax == expected:
            return self.next_token()
        if self.abandoned:
            return SyntaxDescriptor(found.position, expected)
        self.diagnostics.add_error(
            Diagnostic(
                UNEXPECTED_TOKEN,
                found.position,
                expected=SyntaxDescriptor(found.position, expected),
                found=found,
            )
        )
        return SyntaxDescriptor(found.position, expected)

    def parse(self) -> SyntaxDescriptor:
        """Parses one expression followed by end of file."""
        tree = self.parse_expression()
        trailing = self.current()
        if self._starts_operand(trailing.syntax):
            # Two operands in a row: the user most likely dropped an operator
            self.diagnostics.add_error(
                Diagnostic(
                    UNEXPECTED_TOKEN,
                    trailing.position,
                    expected=SyntaxDescriptor(
                        trailing.position, make_token(BINARY_OPERATOR)
                    ),
                    found=trailing,
                )
            )
        else:
            self.match_token(make_token(EOF))
        logger.debug("parsed tree with %d diagnostics", len(self.diagnostics))
        return tree

    def _enter(self) -> SyntaxDescriptor | None:
        """Opens one nesting level, or returns a bad node once past the cap."""
        if self.abandoned:
            return SyntaxDescriptor(self.current().position, bad_token())
        if self.depth >= MAX_NESTING:
            found = self.current()
            self.diagnostics.add_error(
                Diagnostic(
                    PARSER_ERROR,
                    found.position,
                    found=found,
                    message=f"nesting deeper than {MAX_NESTING} levels",
                )
            )
            self.abandoned = True
            self.position = len(self.tokens)
            return SyntaxDescriptor(found.position, bad_token())
        self.depth += 1
        return None

    @staticmethod
    def _starts_operand(syntax: SyntaxNode) -> bool:
        return syntax.is_token(LITERAL, IDENT, LPAREN)

    def parse_expression(self, parent_precedence: int = 0) -> SyntaxDescriptor:
        overflow = self._enter()
        if overflow is not None:
            return overflow
        try:
            return self._parse_expression(parent_precedence)
        finally:
            self.depth -= 1

    def _parse_expression(self, parent_precedence: int) -> SyntaxDescriptor:
        start = self.current()
        precedence = unary_precedence.get(start.syntax.kind, 0)
        if start.syntax.is_token() and precedence and precedence >= parent_precedence:
            operator = self.next_token()
            operand = self.parse_expression()
            left = SyntaxDescriptor(
                start.position, unary(operator.syntax, operand.syntax)
            )
        else:
            left = self.parse_primary_expression()

        while True:
            token = self.current().syntax
            precedence = binary_precedence.get(token.kind, 0) if token.is_token() else 0
            if precedence == 0 or precedence <= parent_precedence:
                break
            operator = self.next_token()
            right = self.parse_expression(precedence)
            left = SyntaxDescriptor(
                start.position, binary(left.syntax, operator.syntax, right.syntax)
            )

        return left

    def parse_primary_expression(self) -> SyntaxDescriptor:
        current = self.current()
        syntax = current.syntax

        if syntax.is_token(LPAREN):
            return self.parse_parenthesized()
        if syntax.is_token(LITERAL):
            self.next_token()
            return SyntaxDescriptor(current.position, literal_expression(syntax))
        if syntax.is_token(IDENT):
            if self.peek(1).syntax.is_token(EQUALS):
                return self.parse_assignment()
            self.next_token()
            return SyntaxDescriptor(current.position, literal_expression(syntax))
        if syntax.is_token(LBRACE):
            return self.parse_block()
        if syntax.is_keyword(LET):
            return self.parse_declaration()
        if syntax.is_keyword(IF):
            return self.parse_if()

        self.diagnostics.add_error(
            Diagnostic(EXPECTED_IDENTIFIER, current.position, found=current)
        )
        return SyntaxDescriptor(current.position, bad_token())

    def parse_parenthesized(self) -> SyntaxDescriptor:
        open_paren = self.next_token()
        expression = self.parse_expression()
        close_paren = self.match_token(make_token(RPAREN))
        return SyntaxDescriptor(
            open_paren.position,
            parenthesized(open_paren.syntax, expression.syntax, close_paren.syntax),
        )

    def parse_block(self) -> SyntaxDescriptor:
        open_brace = self.next_token()
        inner = self._enter()
        if inner is None:
            try:
                inner = self.parse_primary_expression()
            finally:
                self.depth -= 1
        close_brace = self.match_token(make_token(RBRACE))
        return SyntaxDescriptor(
            open_brace.position,
            make_statement(
                BLOCK,
                open_brace=open_brace.syntax,
                statements=inner.syntax,
                close_brace=close_brace.syntax,
            ),
        )

    def parse_declaration(self) -> SyntaxDescriptor:
        keyword = self.next_token()
        name = self.next_token()
        if not name.syntax.is_token(IDENT):
            self.diagnostics.add_error(
                Diagnostic(
                    EXPECTED_IDENTIFIER,
                    name.position,
                    expected=SyntaxDescriptor(name.position, make_token(IDENT)),
                    found=name,
                )
            )
            return SyntaxDescriptor(keyword.position, bad_token())

        equals = self.match_token(make_token(EQUALS))
        expression = self.parse_expression()
        semicolon = self.match_token(make_token(SEMICOLON))
        return SyntaxDescriptor(
            keyword.position,
            make_statement(
                VARIABLE_DECLARATION,
                keyword=keyword.syntax,
                identifier=name.syntax,
                equals=equals.syntax,
                expression=expression.syntax,
                semicolon=semicolon.syntax,
            ),
        )

    def parse_assignment(self) -> SyntaxDescriptor:
        name = self.next_token()
        equals = self.next_token()
        expression = self.parse_expression()
        return SyntaxDescriptor(
            name.position,
            make_statement(
                VARIABLE_ASSIGNMENT,
                identifier=name.syntax,
                equals=equals.syntax,
                expression=expression.syntax,
            ),
        )

    def parse_if(self) -> SyntaxDescriptor:
        keyword = self.next_token()
        open_paren = self.match_token(make_token(LPAREN))
        condition = self.parse_expression()
        close_paren = self.match_token(make_token(RPAREN))
        open_brace = self.match_token(make_token(LBRACE))
        body = self.parse_expression()
        close_brace = self.match_token(make_token(RBRACE))
        return SyntaxDescriptor(
            keyword.position,
            make_statement(
                IF_STATEMENT,
                keyword=keyword.syntax,
                open_parenthesis=open_paren.syntax,
                condition=condition.syntax,
                close_parenthesis=close_paren.syntax,
                open_brace=open_brace.syntax,
                body=body.syntax,
                close_brace=close_brace.syntax,
            ),
        )


def parse(
    tokens: list[SyntaxDescriptor], text: str = ""
) -> tuple[SyntaxDescriptor, Diagnostics]:
    parser = Parser(tokens, text)
    tree = parser.parse()
    return tree, parser.diagnostics
