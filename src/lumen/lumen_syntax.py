"""
Defines the syntax tree node structure for the LUMEN language.

Classes:
    SyntaxNode:
        One element of the syntax tree. A node belongs to exactly one of four
        categories: a token (leaf terminal), a keyword, an expression or a
        statement. Composite nodes own their children outright.

    SyntaxDescriptor:
        Pairs a node with the source offset of its first character. The lexer
        emits descriptors, the parser consumes and produces them.

    SyntaxDict:
        TypedDict used when exporting a tree to plain dictionaries (JSON output,
        ``--tree`` display, tests).

Equality is structural over the whole subtree and ignores positions, which is
what lets the parser ask "is the current token a ``)``?" by comparing against a
freshly built ``)`` node.

Example:
    plus = binary(literal_expression(int_literal(1)), make_token(PLUS),
                  literal_expression(int_literal(2)))
"""

from typing import Any, TypedDict

from lumen.lumen_constants import (
    BINARY,
    BOOL,
    CATEGORIES,
    CHAR,
    EXPRESSION,
    EXPRESSION_SHAPES,
    FLOAT,
    IDENT,
    INT,
    KEYWORD,
    KEYWORD_KINDS,
    LITERAL,
    LITERAL_EXPRESSION,
    LITERAL_TYPES,
    NULL,
    OPTIONAL_SLOTS,
    PARENTHESIZED,
    STATEMENT,
    STATEMENT_SHAPES,
    STRING,
    TOKEN,
    TOKEN_KINDS,
    UNARY,
    VALUED_TOKENS,
)


class SyntaxDict(TypedDict, total=False):
    """
    Serialized form of a ``SyntaxNode``.

    Fields:
        category (str): One of ``token``, ``keyword``, ``expression``, ``statement``.
        kind (str): Token/keyword kind or expression/statement shape.
        value (Any): Literal payload, identifier name or comment text.
        literal_type (str | None): ``INT``/``FLOAT``/... for literal tokens.
        position (int): Source offset (only on the root of a descriptor export).
        children (dict[str, SyntaxDict | None]): Named child slots.
    """

    category: str
    kind: str
    value: Any
    literal_type: str | None
    position: int
    children: dict[str, "SyntaxDict | None"]


class SyntaxNode:
    """
    A node in the LUMEN syntax tree.

    Args:
        category (str): ``token``, ``keyword``, ``expression`` or ``statement``.
        kind (str): Token kind (``PLUS``, ``IDENT``...), keyword kind (``LET``...)
            or shape name (``binary``, ``variable_declaration``...).
        value (Any, optional): Payload for literal, identifier, comment,
            unknown and bad tokens.
        literal_type (str, optional): Literal classification for ``LITERAL`` tokens.
        children (dict[str, SyntaxNode | None], optional): Named child slots in
            the order declared by the node's shape.

    Raises:
        ValueError: If the category, kind or child slots do not describe a
            node of the closed taxonomy.
    """

    def __init__(
        self,
        category: str,
        kind: str,
        value: Any = None,
        literal_type: str | None = None,
        children: dict[str, "SyntaxNode | None"] | None = None,
    ) -> None:
        if category not in CATEGORIES:
            raise ValueError(f"Unknown syntax category: {category!r}")
        self.category = category
        self.kind = kind
        self.value = value
        self.literal_type = literal_type
        self.children: dict[str, "SyntaxNode | None"] = children or {}

    def __repr__(self) -> str:
        if self.category == TOKEN:
            if self.kind == LITERAL:
                return f"Token({self.kind}, {self.literal_type}, {self.value!r})"
            if self.kind in VALUED_TOKENS:
                return f"Token({self.kind}, {self.value!r})"
            return f"Token({self.kind})"
        if self.category == KEYWORD:
            return f"Keyword({self.kind})"
        parts = ", ".join(f"{slot}={child!r}" for slot, child in self.children.items())
        return f"{self.category.capitalize()}({self.kind}, {parts})"

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, SyntaxNode):
            return False
        return (
            self.category == other.category
            and self.kind == other.kind
            and self.literal_type == other.literal_type
            and type(self.value) is type(other.value)
            and self.value == other.value
            and self.children == other.children
        )

    def __getitem__(self, slot: str) -> "SyntaxNode | None":
        return self.children[slot]

    def is_token(self, *kinds: str) -> bool:
        return self.category == TOKEN and (not kinds or self.kind in kinds)

    def is_keyword(self, *kinds: str) -> bool:
        return self.category == KEYWORD and (not kinds or self.kind in kinds)

    def is_expression(self, *kinds: str) -> bool:
        return self.category == EXPRESSION and (not kinds or self.kind in kinds)

    def is_statement(self, *kinds: str) -> bool:
        return self.category == STATEMENT and (not kinds or self.kind in kinds)

    def is_literal(self, *literal_types: str) -> bool:
        return self.is_token(LITERAL) and (
            not literal_types or self.literal_type in literal_types
        )

    def to_dict(self) -> SyntaxDict:
        return {
            "category": self.category,
            "kind": self.kind,
            "value": self.value,
            "literal_type": self.literal_type,
            "children": {
                slot: child.to_dict() if child is not None else None
                for slot, child in self.children.items()
            },
        }

    def pretty(self, indent: str = "") -> list[str]:
        """Renders the subtree one node per line, children indented by a tab."""
        if self.category in (TOKEN, KEYWORD):
            return [f"{indent}{self!r}"]
        lines = [f"{indent}{self.category.capitalize()}({self.kind})"]
        for child in self.children.values():
            if child is not None:
                lines.extend(child.pretty(indent + "\t"))
        return lines


class SyntaxDescriptor:
    """A syntax node tagged with the source offset of its first character.

    The offset is fixed at construction. Two descriptors are equal when both
    the offset and the node are.
    """

    def __init__(self, position: int, syntax: SyntaxNode) -> None:
        self.position = position
        self.syntax = syntax

    def __repr__(self) -> str:
        return f"SyntaxDescriptor({self.position}, {self.syntax!r})"

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, SyntaxDescriptor)
            and self.position == other.position
            and self.syntax == other.syntax
        )

    def to_dict(self) -> SyntaxDict:
        data = self.syntax.to_dict()
        data["position"] = self.position
        return data

    def pretty(self) -> str:
        return "\n".join(self.syntax.pretty())


# --- Factories ---------------------------------------------------------------


def make_token(kind: str, value: Any = None) -> SyntaxNode:
    if kind not in TOKEN_KINDS:
        raise ValueError(f"Unknown token kind: {kind!r}")
    return SyntaxNode(TOKEN, kind, value)


def make_literal(literal_type: str, value: Any) -> SyntaxNode:
    if literal_type not in LITERAL_TYPES:
        raise ValueError(f"Unknown literal type: {literal_type!r}")
    return SyntaxNode(TOKEN, LITERAL, value, literal_type)


def int_literal(value: int) -> SyntaxNode:
    return make_literal(INT, value)


def float_literal(value: float) -> SyntaxNode:
    return make_literal(FLOAT, value)


def string_literal(value: str) -> SyntaxNode:
    return make_literal(STRING, value)


def char_literal(value: str) -> SyntaxNode:
    return make_literal(CHAR, value)


def bool_literal(value: bool) -> SyntaxNode:
    return make_literal(BOOL, value)


def null_literal() -> SyntaxNode:
    return make_literal(NULL, None)


def identifier(name: str) -> SyntaxNode:
    return make_token(IDENT, name)


def make_keyword(kind: str) -> SyntaxNode:
    if kind not in KEYWORD_KINDS:
        raise ValueError(f"Unknown keyword: {kind!r}")
    return SyntaxNode(KEYWORD, kind)


def _composite(
    category: str,
    shapes: dict[str, tuple[str, ...]],
    kind: str,
    children: dict[str, SyntaxNode | None],
) -> SyntaxNode:
    if kind not in shapes:
        raise ValueError(f"Unknown {category} shape: {kind!r}")
    slots = shapes[kind]
    if set(children) != set(slots):
        raise ValueError(
            f"{category} {kind!r} expects slots {slots}, got {tuple(children)}"
        )
    optional = OPTIONAL_SLOTS.get(kind, set())
    for slot in slots:
        if children[slot] is None and slot not in optional:
            raise ValueError(f"{category} {kind!r} requires a node in slot {slot!r}")
    return SyntaxNode(category, kind, children={s: children[s] for s in slots})


def make_expression(kind: str, **children: SyntaxNode | None) -> SyntaxNode:
    return _composite(EXPRESSION, EXPRESSION_SHAPES, kind, children)


def make_statement(kind: str, **children: SyntaxNode | None) -> SyntaxNode:
    return _composite(STATEMENT, STATEMENT_SHAPES, kind, children)


def binary(left: SyntaxNode, operator: SyntaxNode, right: SyntaxNode) -> SyntaxNode:
    return make_expression(BINARY, left=left, operator=operator, right=right)


def unary(operator: SyntaxNode, operand: SyntaxNode) -> SyntaxNode:
    return make_expression(UNARY, operator=operator, operand=operand)


def parenthesized(
    open_parenthesis: SyntaxNode, expression: SyntaxNode, close_parenthesis: SyntaxNode
) -> SyntaxNode:
    return make_expression(
        PARENTHESIZED,
        open_parenthesis=open_parenthesis,
        expression=expression,
        close_parenthesis=close_parenthesis,
    )


def literal_expression(token: SyntaxNode) -> SyntaxNode:
    return make_expression(LITERAL_EXPRESSION, expression=token)
