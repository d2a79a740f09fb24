"""
Shared lexical and grammatical tables for the LUMEN language.

Everything the lexer, parser and evaluator agree on lives here so that a new
operator or keyword only has to be registered once.

Exports:
    - token kinds (``PLUS``, ``IDENT``, ``EOF``, ...) and ``TOKEN_KINDS``
    - ``token_hashmap``: operator/punctuation spelling -> token kind
    - ``keyword_hashmap`` / ``literal_keywords``: reserved words
    - ``LITERAL_TYPES``, ``EXPRESSION_SHAPES``, ``STATEMENT_SHAPES``
    - ``binary_precedence`` / ``unary_precedence``
"""

# Node categories
TOKEN = "token"
KEYWORD = "keyword"
EXPRESSION = "expression"
STATEMENT = "statement"

CATEGORIES = (TOKEN, KEYWORD, EXPRESSION, STATEMENT)

# Token kinds
BAD = "BAD"
EOF = "EOF"
WHITESPACE = "WHITESPACE"
LITERAL = "LITERAL"
IDENT = "IDENT"
COMMENT = "COMMENT"
PLUS = "PLUS"
MINUS = "MINUS"
STAR = "STAR"
SLASH = "SLASH"
PERCENT = "PERCENT"
EQUALS = "EQUALS"
EQUALS_EQUALS = "EQUALS_EQUALS"
LPAREN = "LPAREN"
RPAREN = "RPAREN"
SEMICOLON = "SEMICOLON"
COLON = "COLON"
BANG = "BANG"
BANG_EQUALS = "BANG_EQUALS"
AMPERSAND = "AMPERSAND"
AMPERSAND_AMPERSAND = "AMPERSAND_AMPERSAND"
PIPE = "PIPE"
PIPE_PIPE = "PIPE_PIPE"
LBRACK = "LBRACK"
RBRACK = "RBRACK"
LBRACE = "LBRACE"
RBRACE = "RBRACE"
UNKNOWN = "UNKNOWN"
# Only ever built to describe what a diagnostic expected
SINGLE_QUOTE = "SINGLE_QUOTE"
DOUBLE_QUOTE = "DOUBLE_QUOTE"
BINARY_OPERATOR = "BINARY_OPERATOR"

TOKEN_KINDS = (
    BAD, EOF, WHITESPACE, LITERAL, IDENT, COMMENT,
    PLUS, MINUS, STAR, SLASH, PERCENT, EQUALS, EQUALS_EQUALS,
    LPAREN, RPAREN, SEMICOLON, COLON, BANG, BANG_EQUALS,
    AMPERSAND, AMPERSAND_AMPERSAND, PIPE, PIPE_PIPE,
    SINGLE_QUOTE, DOUBLE_QUOTE, LBRACK, RBRACK, LBRACE, RBRACE,
    BINARY_OPERATOR, UNKNOWN,
)  # fmt: skip

# Tokens carrying a payload in ``SyntaxNode.value``
VALUED_TOKENS = {BAD, LITERAL, IDENT, COMMENT, UNKNOWN}

# Operators and punctuation recognised by longest match
token_hashmap: dict[str, str] = {
    "+": PLUS,
    "-": MINUS,
    "*": STAR,
    "/": SLASH,
    "%": PERCENT,
    "!": BANG,
    "!=": BANG_EQUALS,
    "=": EQUALS,
    "==": EQUALS_EQUALS,
    "(": LPAREN,
    ")": RPAREN,
    ";": SEMICOLON,
    ":": COLON,
    "{": LBRACE,
    "}": RBRACE,
    "[": LBRACK,
    "]": RBRACK,
    "&": AMPERSAND,
    "&&": AMPERSAND_AMPERSAND,
    "|": PIPE,
    "||": PIPE_PIPE,
}

MAX_OPERATOR_LENGTH = max(len(k) for k in token_hashmap)

WHITESPACE_CHARS = " \t\r\n"

# Keyword kinds
LET = "LET"
IF = "IF"
ELSE = "ELSE"
FOR = "FOR"
LOOP = "LOOP"
BREAK = "BREAK"
CONTINUE = "CONTINUE"
MATCH = "MATCH"
TRUE = "TRUE"
FALSE = "FALSE"
NULL = "NULL"

KEYWORD_KINDS = (LET, IF, ELSE, FOR, LOOP, BREAK, CONTINUE, MATCH, TRUE, FALSE, NULL)

keyword_hashmap: dict[str, str] = {
    "let": LET,
    "if": IF,
    "else": ELSE,
    "for": FOR,
    "loop": LOOP,
    "break": BREAK,
    "continue": CONTINUE,
    "match": MATCH,
}

# Literal token kinds
INT = "INT"
FLOAT = "FLOAT"
STRING = "STRING"
CHAR = "CHAR"
BOOL = "BOOL"

LITERAL_TYPES = (INT, FLOAT, STRING, CHAR, BOOL, NULL)

# Reserved words lexed straight into literal tokens: (literal type, value)
literal_keywords: dict[str, tuple[str, bool | None]] = {
    "true": (BOOL, True),
    "false": (BOOL, False),
    "null": (NULL, None),
}

INT_MIN = -(2**63)
INT_MAX = 2**63 - 1

# Expression and statement shapes: kind -> ordered child slots
BINARY = "binary"
UNARY = "unary"
PARENTHESIZED = "parenthesized"
LITERAL_EXPRESSION = "literal"

EXPRESSION_SHAPES: dict[str, tuple[str, ...]] = {
    BINARY: ("left", "operator", "right"),
    UNARY: ("operator", "operand"),
    PARENTHESIZED: ("open_parenthesis", "expression", "close_parenthesis"),
    LITERAL_EXPRESSION: ("expression",),
}

BLOCK = "block"
EXPRESSION_STATEMENT = "expression_statement"
VARIABLE_DECLARATION = "variable_declaration"
VARIABLE_ASSIGNMENT = "variable_assignment"
IF_STATEMENT = "if"
WHILE_STATEMENT = "while"
FOR_STATEMENT = "for"
BREAK_STATEMENT = "break"
CONTINUE_STATEMENT = "continue"
RETURN_STATEMENT = "return"
MATCH_STATEMENT = "match"

STATEMENT_SHAPES: dict[str, tuple[str, ...]] = {
    BLOCK: ("open_brace", "statements", "close_brace"),
    EXPRESSION_STATEMENT: ("expression", "semicolon"),
    VARIABLE_DECLARATION: (
        "keyword",
        "identifier",
        "equals",
        "expression",
        "semicolon",
    ),
    VARIABLE_ASSIGNMENT: ("identifier", "equals", "expression"),
    IF_STATEMENT: (
        "keyword",
        "open_parenthesis",
        "condition",
        "close_parenthesis",
        "open_brace",
        "body",
        "close_brace",
    ),
    # Declared for extension; the parser has no production for these yet
    WHILE_STATEMENT: (
        "keyword",
        "open_parenthesis",
        "condition",
        "close_parenthesis",
        "open_brace",
        "body",
        "close_brace",
    ),
    FOR_STATEMENT: (
        "keyword",
        "open_parenthesis",
        "initializer",
        "first_semicolon",
        "condition",
        "second_semicolon",
        "incrementor",
        "close_parenthesis",
        "open_brace",
        "body",
        "close_brace",
    ),
    BREAK_STATEMENT: ("keyword", "label", "semicolon"),
    CONTINUE_STATEMENT: ("keyword", "label", "semicolon"),
    RETURN_STATEMENT: ("keyword", "expression", "semicolon"),
    MATCH_STATEMENT: (
        "keyword",
        "open_parenthesis",
        "expression",
        "close_parenthesis",
        "open_brace",
        "arms",
        "close_brace",
    ),
}

# Slots that may legitimately hold no node
OPTIONAL_SLOTS: dict[str, set[str]] = {
    BREAK_STATEMENT: {"label"},
    CONTINUE_STATEMENT: {"label"},
    RETURN_STATEMENT: {"expression"},
}

# Precedence (higher binds tighter, 0 = not an operator)
binary_precedence: dict[str, int] = {
    PLUS: 1,
    MINUS: 1,
    AMPERSAND_AMPERSAND: 2,
    PIPE_PIPE: 2,
    STAR: 3,
    SLASH: 3,
    PERCENT: 4,
    BANG_EQUALS: 4,
}

unary_precedence: dict[str, int] = {
    BANG: 6,
    PLUS: 5,
    MINUS: 5,
}

