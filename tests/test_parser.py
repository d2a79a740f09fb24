import pytest
from hypothesis import given
from hypothesis import strategies as st

from lumen.lumen_constants import (
    BAD,
    BINARY,
    BINARY_OPERATOR,
    BLOCK,
    EOF,
    IF_STATEMENT,
    LITERAL_EXPRESSION,
    MINUS,
    PARENTHESIZED,
    PLUS,
    RBRACE,
    RPAREN,
    SEMICOLON,
    STAR,
    UNARY,
    VARIABLE_ASSIGNMENT,
    VARIABLE_DECLARATION,
)
from lumen.lumen_diagnostics import (
    EXPECTED_IDENTIFIER,
    PARSER_ERROR,
    UNEXPECTED_TOKEN,
)
from lumen.lumen_lexer import tokenize
from lumen.lumen_parser import MAX_NESTING, Parser, parse
from lumen.lumen_syntax import (
    SyntaxDescriptor,
    SyntaxNode,
    binary,
    char_literal,
    identifier,
    int_literal,
    literal_expression,
    make_token,
    null_literal,
)


def parse_text(text: str) -> tuple[SyntaxDescriptor, list[str]]:
    tokens, lexer_diagnostics = tokenize(text)
    assert not lexer_diagnostics.has_errors()
    tree, diagnostics = parse(tokens, text)
    return tree, diagnostics.kinds()


def lit(value: int) -> SyntaxNode:
    return literal_expression(int_literal(value))


def test_single_literal() -> None:
    tree, errors = parse_text("42")
    assert tree == SyntaxDescriptor(0, lit(42))
    assert errors == []


def test_multiplication_binds_tighter() -> None:
    tree, errors = parse_text("2 + 3 * 4")
    assert errors == []
    assert tree.syntax == binary(
        lit(2), make_token(PLUS), binary(lit(3), make_token(STAR), lit(4))
    )


def test_equal_precedence_is_left_associative() -> None:
    tree, _ = parse_text("10 - 3 - 2")
    assert tree.syntax == binary(
        binary(lit(10), make_token(MINUS), lit(3)), make_token(MINUS), lit(2)
    )


def test_parentheses_override_precedence() -> None:
    tree, errors = parse_text("(2 + 3) * 4")
    assert errors == []
    left = tree.syntax["left"]
    assert tree.syntax.is_expression(BINARY)
    assert left.is_expression(PARENTHESIZED)
    assert left["expression"] == binary(lit(2), make_token(PLUS), lit(3))


def test_unary_takes_rest_of_expression() -> None:
    tree, _ = parse_text("-2 + 3")
    assert tree.syntax.is_expression(UNARY)
    assert tree.syntax["operator"] == make_token(MINUS)
    assert tree.syntax["operand"] == binary(lit(2), make_token(PLUS), lit(3))


def test_char_and_null_literals_wrap_directly() -> None:
    tree, _ = parse_text("'c'")
    assert tree.syntax == literal_expression(char_literal("c"))
    tree, _ = parse_text("null")
    assert tree.syntax == literal_expression(null_literal())


def test_identifier_reference() -> None:
    tree, _ = parse_text("count")
    assert tree.syntax.is_expression(LITERAL_EXPRESSION)
    assert tree.syntax["expression"] == identifier("count")


def test_declaration() -> None:
    tree, errors = parse_text("let x = 5 + 5;")
    assert errors == []
    assert tree.position == 0
    node = tree.syntax
    assert node.is_statement(VARIABLE_DECLARATION)
    assert node["identifier"] == identifier("x")
    assert node["expression"] == binary(lit(5), make_token(PLUS), lit(5))
    assert node["semicolon"] == make_token(SEMICOLON)


def test_declaration_missing_semicolon_recovers() -> None:
    tree, errors = parse_text("let x = 1")
    assert tree.syntax.is_statement(VARIABLE_DECLARATION)
    assert tree.syntax["semicolon"] == make_token(SEMICOLON)
    assert errors == [UNEXPECTED_TOKEN]


def test_declaration_without_identifier() -> None:
    tokens, _ = tokenize("let = 5;")
    tree, diagnostics = parse(tokens, "let = 5;")
    assert tree.syntax.is_token(BAD)
    assert diagnostics.errors[0].kind == EXPECTED_IDENTIFIER
    assert diagnostics.errors[0].position == 4


def test_assignment() -> None:
    tree, errors = parse_text("x = x + 1")
    assert errors == []
    assert tree.syntax.is_statement(VARIABLE_ASSIGNMENT)
    assert tree.syntax["expression"] == binary(
        literal_expression(identifier("x")), make_token(PLUS), lit(1)
    )


def test_block_holds_one_expression() -> None:
    tree, errors = parse_text("{ 7 }")
    assert errors == []
    assert tree.syntax.is_statement(BLOCK)
    assert tree.syntax["statements"] == lit(7)


def test_if_statement() -> None:
    tree, errors = parse_text("if (true) { 1 + 2 }")
    assert errors == []
    node = tree.syntax
    assert node.is_statement(IF_STATEMENT)
    assert node["body"] == binary(lit(1), make_token(PLUS), lit(2))


def test_missing_close_paren_synthesizes_node() -> None:
    tree, errors = parse_text("(1 + 2")
    assert errors == [UNEXPECTED_TOKEN]
    assert tree.syntax["close_parenthesis"] == make_token(RPAREN)


def test_block_stops_after_one_primary() -> None:
    _, errors = parse_text("{ 1 + 2 }")
    assert errors[0] == UNEXPECTED_TOKEN


def test_trailing_operand_expects_operator() -> None:
    tokens, _ = tokenize("1 2")
    _, diagnostics = parse(tokens, "1 2")
    error = diagnostics.errors[0]
    assert error.kind == UNEXPECTED_TOKEN
    assert error.position == 2
    assert error.expected is not None
    assert error.expected.syntax == make_token(BINARY_OPERATOR)


def test_trailing_token_expects_eof() -> None:
    tokens, _ = tokenize("1 )")
    _, diagnostics = parse(tokens, "1 )")
    error = diagnostics.errors[0]
    assert error.expected is not None
    assert error.expected.syntax == make_token(EOF)
    assert error.found is not None
    assert error.found.syntax == make_token(RPAREN)


def test_missing_operand() -> None:
    tree, errors = parse_text("1 +")
    assert errors == [EXPECTED_IDENTIFIER]
    assert tree.syntax["right"].is_token(BAD)


def test_comments_are_ignored() -> None:
    tree, errors = parse_text("1 + # ignored\n2")
    assert errors == []
    assert tree.syntax == binary(lit(1), make_token(PLUS), lit(2))


def test_match_token_does_not_consume_on_mismatch() -> None:
    tokens, _ = tokenize("1")
    parser = Parser(tokens, "1")
    synthetic = parser.match_token(make_token(RBRACE))
    assert synthetic == SyntaxDescriptor(0, make_token(RBRACE))
    assert parser.position == 0
    assert parser.diagnostics.kinds() == [UNEXPECTED_TOKEN]


@given(  # type: ignore[misc]
    st.lists(st.integers(min_value=0, max_value=999), min_size=1, max_size=8)
)
def test_additions_fold_left(values: list[int]) -> None:
    text = " + ".join(str(v) for v in values)
    tree, errors = parse_text(text)
    assert errors == []
    expected = lit(values[0])
    for value in values[1:]:
        expected = binary(expected, make_token(PLUS), lit(value))
    assert tree.syntax == expected


@given(st.text(alphabet="ab12 +-*/()!{};=", max_size=30))  # type: ignore[misc]
def test_parser_never_raises(text: str) -> None:
    tokens, _ = tokenize(text)
    tree, _ = parse(tokens, text)
    assert isinstance(tree, SyntaxDescriptor)


def test_nesting_within_limit_parses() -> None:
    _, errors = parse_text("(" * 100 + "1" + ")" * 100)
    assert errors == []


def test_deep_parentheses_report_one_error() -> None:
    text = "(" * 600 + "1" + ")" * 600
    tokens, _ = tokenize(text)
    tree, diagnostics = parse(tokens, text)
    assert diagnostics.kinds() == [PARSER_ERROR]
    assert diagnostics.errors[0].position == MAX_NESTING
    assert tree.syntax.is_expression(PARENTHESIZED)
    assert "nesting deeper than" in diagnostics.render()


@pytest.mark.parametrize(  # type: ignore[misc]
    "text",
    ["-" * 1200 + "1", "{" * 300 + "1" + "}" * 300, "if (true) { " * 200 + "1"],
)
def test_deep_nesting_never_overflows_the_stack(text: str) -> None:
    tokens, _ = tokenize(text)
    _, diagnostics = parse(tokens, text)
    assert diagnostics.kinds() == [PARSER_ERROR]
