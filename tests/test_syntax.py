import pytest
from hypothesis import given
from hypothesis import strategies as st

from lumen.lumen_constants import (
    BINARY,
    BLOCK,
    IDENT,
    INT,
    LBRACE,
    LET,
    LITERAL,
    PLUS,
    RBRACE,
    RETURN_STATEMENT,
    SEMICOLON,
    STAR,
    VARIABLE_DECLARATION,
)
from lumen.lumen_syntax import (
    SyntaxDescriptor,
    SyntaxNode,
    binary,
    bool_literal,
    float_literal,
    identifier,
    int_literal,
    literal_expression,
    make_keyword,
    make_statement,
    make_token,
    null_literal,
    string_literal,
)


def one_plus_two() -> SyntaxNode:
    return binary(
        literal_expression(int_literal(1)),
        make_token(PLUS),
        literal_expression(int_literal(2)),
    )


def test_token_repr() -> None:
    assert repr(make_token(PLUS)) == "Token(PLUS)"
    assert repr(int_literal(42)) == "Token(LITERAL, INT, 42)"
    assert repr(identifier("x")) == "Token(IDENT, 'x')"
    assert repr(make_keyword(LET)) == "Keyword(LET)"


def test_expression_repr_lists_slots() -> None:
    text = repr(one_plus_two())
    assert text.startswith("Expression(binary, left=")
    assert "operator=Token(PLUS)" in text


def test_structural_equality() -> None:
    assert one_plus_two() == one_plus_two()
    assert make_token(PLUS) != make_token(STAR)
    assert int_literal(1) != float_literal(1.0)
    assert one_plus_two() != "binary"


def test_equality_distinguishes_payload_type() -> None:
    assert int_literal(1) != make_token(LITERAL, True)
    assert bool_literal(True) != int_literal(1)


def test_descriptor_equality_includes_position() -> None:
    assert SyntaxDescriptor(0, make_token(PLUS)) == SyntaxDescriptor(0, make_token(PLUS))
    assert SyntaxDescriptor(0, make_token(PLUS)) != SyntaxDescriptor(1, make_token(PLUS))


def test_slot_access_and_predicates() -> None:
    node = one_plus_two()
    assert node.is_expression(BINARY)
    assert not node.is_statement()
    assert node["operator"].is_token(PLUS)
    assert node["left"]["expression"].is_literal(INT)
    assert not identifier("x").is_literal()


def test_to_dict() -> None:
    data = SyntaxDescriptor(3, literal_expression(string_literal("hi"))).to_dict()
    assert data["position"] == 3
    assert data["category"] == "expression"
    child = data["children"]["expression"]
    assert child is not None
    assert child["kind"] == LITERAL
    assert child["value"] == "hi"
    assert child["literal_type"] == "STRING"


def test_pretty_indents_children() -> None:
    lines = one_plus_two().pretty()
    assert lines[0] == "Expression(binary)"
    assert lines[1] == "\tExpression(literal)"
    assert lines[2] == "\t\tToken(LITERAL, INT, 1)"
    assert "\tToken(PLUS)" in lines


def test_make_statement_validates_slots() -> None:
    block = make_statement(
        BLOCK,
        open_brace=make_token(LBRACE),
        statements=literal_expression(null_literal()),
        close_brace=make_token(RBRACE),
    )
    assert block.is_statement(BLOCK)

    with pytest.raises(ValueError):
        make_statement(BLOCK, open_brace=make_token(LBRACE))

    with pytest.raises(ValueError):
        make_statement(
            VARIABLE_DECLARATION,
            keyword=make_keyword(LET),
            identifier=None,
            equals=make_token(IDENT, "="),
            expression=literal_expression(int_literal(1)),
            semicolon=make_token(SEMICOLON),
        )


def test_optional_slot_may_be_empty() -> None:
    node = make_statement(
        RETURN_STATEMENT,
        keyword=make_keyword(LET),
        expression=None,
        semicolon=make_token(SEMICOLON),
    )
    assert node["expression"] is None
    assert node.to_dict()["children"]["expression"] is None


def test_unknown_kinds_rejected() -> None:
    with pytest.raises(ValueError):
        make_token("NOT_A_TOKEN")
    with pytest.raises(ValueError):
        make_keyword("WHILE")
    with pytest.raises(ValueError):
        SyntaxNode("phrase", "x")


@given(st.integers(min_value=-(2**63), max_value=2**63 - 1))  # type: ignore[misc]
def test_int_literal_roundtrip_equality(value: int) -> None:
    assert int_literal(value) == int_literal(value)
    assert int_literal(value).value == value


@pytest.mark.parametrize("kind", ["NUMBER", "CARET", "UNARY_OPERATOR"])  # type: ignore[misc]
def test_unproduced_token_kinds_are_not_valid(kind: str) -> None:
    with pytest.raises(ValueError):
        make_token(kind)
