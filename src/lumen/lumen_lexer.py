"""
Lexical analyzer for the LUMEN language.

Converts a ``SourceText`` into an ordered list of position-tagged tokens
(``SyntaxDescriptor`` instances) terminated by exactly one end-of-file token.

Classes:
    Lexer: Single forward cursor over a ``SourceText``; collects diagnostics.

Functions:
    tokenize(text): Convenience boundary returning ``(tokens, diagnostics)``.

Features:
    - Drops whitespace tokens from the output; keeps ``#`` comments
    - Longest-match recognition of operators (``!=``, ``==``, ``&&``, ``||``)
    - Recognizes:
        * Identifiers and keywords (``let``, ``if``, ``else``, ``for``, ...)
        * ``true``/``false``/``null`` as literal tokens
        * Numbers (integer and float, permissive scan of digits, ``.``, ``e``, ``+``, ``-``)
        * Strings (no escape sequences) and single characters
        * Operators and punctuation

Never raises on bad input: unknown characters, malformed numerals and
unterminated literals become diagnostics and the scan continues.

Example:
    >>> tokens, diagnostics = tokenize("let x = 1;")
    >>> [t.syntax.kind for t in tokens]
    ['LET', 'IDENT', 'EQUALS', 'LITERAL', 'SEMICOLON', 'EOF']
"""

import logging

from lumen.lumen_constants import (
    BAD,
    COMMENT,
    DOUBLE_QUOTE,
    EOF,
    INT_MAX,
    INT_MIN,
    MAX_OPERATOR_LENGTH,
    SINGLE_QUOTE,
    UNKNOWN,
    WHITESPACE,
    WHITESPACE_CHARS,
    keyword_hashmap,
    literal_keywords,
    token_hashmap,
)
from lumen.lumen_diagnostics import (
    EXPECTED_TOKEN,
    LEXER_ERROR,
    UNEXPECTED_END_OF_FILE,
    UNKNOWN_TOKEN,
    Diagnostic,
    Diagnostics,
)
from lumen.lumen_source import SourceText
from lumen.lumen_syntax import (
    SyntaxDescriptor,
    char_literal,
    float_literal,
    identifier,
    int_literal,
    make_keyword,
    make_literal,
    make_token,
    string_literal,
)

logger = logging.getLogger("lumen.lexer")
logger.addHandler(logging.NullHandler())

NUMERAL_CHARS = "0123456789.e+-"


class Lexer:
    """Lexical analyzer for the LUMEN language.

    Attributes:
        source (SourceText): The text being scanned.
        position (int): Offset of the current character.
        diagnostics (Diagnostics): Problems found so far.
    """

    def __init__(self, source: SourceText | str) -> None:
        if isinstance(source, str):
            source = SourceText(source)
        self.source = source
        self.position = 0
        self.diagnostics = Diagnostics(source.text)

    def peek(self, offset: int = 0) -> str:
        """Returns the character ``offset`` places ahead, or ``""`` past the end."""
        index = self.position + offset
        if index < 0 or index >= len(self.source.text):
            return ""
        return self.source.text[index]

    def current(self) -> str:
        return self.peek(0)

    def advance(self) -> str:
        char = self.current()
        self.position += 1
        return char

    def end_of_file(self) -> bool:
        return self.position >= len(self.source.text)

    def _token(self, start: int, kind: str, value: object = None) -> SyntaxDescriptor:
        return SyntaxDescriptor(start, make_token(kind, value))

    def match_operator(self) -> SyntaxDescriptor | None:
        """Consumes the longest operator spelling at the cursor, if any."""
        start = self.position
        best = ""
        for length in range(1, MAX_OPERATOR_LENGTH + 1):
            candidate = self.source.text[start : start + length]
            if len(candidate) < length:
                break
            if candidate in token_hashmap:
                best = candidate
        if not best:
            return None
        self.position += len(best)
        return self._token(start, token_hashmap[best])

    def next_token(self) -> SyntaxDescriptor:
        """Scans and returns the next token, whitespace included."""
        start = self.position
        ch = self.current()

        if self.end_of_file():
            return self._token(start, EOF)

        if ch in WHITESPACE_CHARS:
            while not self.end_of_file() and self.current() in WHITESPACE_CHARS:
                self.advance()
            return self._token(start, WHITESPACE)

        if ch == "#":
            comment = ""
            while not self.end_of_file() and self.current() not in "\r\n":
                comment += self.advance()
            return self._token(start, COMMENT, comment)

        if "0" <= ch <= "9":
            return self.read_number()

        if (ch.isascii() and ch.isalpha()) or ch == "_":
            return self.read_word()

        if ch == "'":
            return self.read_char()

        if ch == '"':
            return self.read_string()

        token = self.match_operator()
        if token:
            return token

        unknown = self._token(start, UNKNOWN, self.advance())
        self.diagnostics.add_error(Diagnostic(UNKNOWN_TOKEN, start, found=unknown))
        return unknown

    def read_number(self) -> SyntaxDescriptor:
        start = self.position
        text = ""
        while not self.end_of_file() and self.current() in NUMERAL_CHARS:
            text += self.advance()

        try:
            if "." in text:
                return SyntaxDescriptor(start, float_literal(float(text)))
            value = int(text)
        except ValueError:
            return self._bad_numeral(start, text, "malformed numeric literal")
        if not INT_MIN <= value <= INT_MAX:
            return self._bad_numeral(start, text, "integer literal out of range")
        return SyntaxDescriptor(start, int_literal(value))

    def _bad_numeral(self, start: int, text: str, reason: str) -> SyntaxDescriptor:
        bad = self._token(start, BAD, text)
        self.diagnostics.add_error(
            Diagnostic(LEXER_ERROR, start, found=bad, message=f"{reason} {text!r}")
        )
        return bad

    def read_word(self) -> SyntaxDescriptor:
        start = self.position
        word = ""
        while not self.end_of_file() and (
            self.current().isalnum() or self.current() == "_"
        ):
            word += self.advance()

        if word in keyword_hashmap:
            return SyntaxDescriptor(start, make_keyword(keyword_hashmap[word]))
        if word in literal_keywords:
            literal_type, value = literal_keywords[word]
            return SyntaxDescriptor(start, make_literal(literal_type, value))
        return SyntaxDescriptor(start, identifier(word))

    def read_char(self) -> SyntaxDescriptor:
        start = self.position
        self.advance()  # opening quote
        if self.end_of_file():
            literal = SyntaxDescriptor(start, char_literal(""))
            self.diagnostics.add_error(
                Diagnostic(
                    UNEXPECTED_END_OF_FILE,
                    self.position,
                    expected=self._token(self.position, SINGLE_QUOTE),
                    found=literal,
                )
            )
            return literal

        literal = SyntaxDescriptor(start, char_literal(self.advance()))
        if self.current() == "'":
            self.advance()
        else:
            self.diagnostics.add_error(
                Diagnostic(
                    EXPECTED_TOKEN,
                    self.position,
                    expected=self._token(start, SINGLE_QUOTE),
                    found=literal,
                )
            )
        return literal

    def read_string(self) -> SyntaxDescriptor:
        start = self.position
        self.advance()  # opening quote
        value = ""
        while not self.end_of_file() and self.current() != '"':
            value += self.advance()

        literal = SyntaxDescriptor(start, string_literal(value))
        if self.end_of_file():
            self.diagnostics.add_error(
                Diagnostic(
                    UNEXPECTED_END_OF_FILE,
                    self.position,
                    expected=self._token(self.position, DOUBLE_QUOTE),
                    found=literal,
                )
            )
        else:
            self.advance()  # closing quote
        return literal

    def lex(self) -> list[SyntaxDescriptor]:
        """Scans the whole input, dropping whitespace; the last token is EOF."""
        tokens: list[SyntaxDescriptor] = []
        while True:
            token = self.next_token()
            if token.syntax.is_token(WHITESPACE):
                continue
            tokens.append(token)
            if token.syntax.is_token(EOF):
                break
        logger.debug(
            "lexed %d tokens with %d diagnostics", len(tokens), len(self.diagnostics)
        )
        return tokens


def tokenize(text: str) -> tuple[list[SyntaxDescriptor], Diagnostics]:
    lexer = Lexer(SourceText(text))
    tokens = lexer.lex()
    return tokens, lexer.diagnostics


__all__ = ["Lexer", "tokenize"]
