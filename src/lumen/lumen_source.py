"""
Source text bookkeeping for the LUMEN language.

Classes:
    TextSpan: A half-open ``[start, end)`` range of character offsets.
    TextLine: One physical line of the source, with and without its line break.
    SourceText: The immutable input text split into lines.

The lexer walks ``SourceText.text`` by offset; diagnostics use the line table
to turn an offset back into a 1-based ``(line, column)`` pair.

Example:
    >>> source = SourceText("let x = 1;\\r\\nx")
    >>> source.location(12)
    (2, 1)
"""

from bisect import bisect_right


class TextSpan:
    """A range of offsets into a source text.

    Attributes:
        start (int): First offset covered by the span.
        length (int): Number of characters covered.
        end (int): One past the last covered offset.
    """

    def __init__(self, start: int, length: int) -> None:
        self.start = start
        self.length = length
        self.end = start + length

    @classmethod
    def from_bounds(cls, start: int, end: int) -> "TextSpan":
        return cls(start, end - start)

    def __repr__(self) -> str:
        return f"TextSpan({self.start}, {self.length})"

    def __eq__(self, other: object) -> bool:
        return (
            isinstance(other, TextSpan)
            and self.start == other.start
            and self.length == other.length
        )

    def __hash__(self) -> int:
        return hash((self.start, self.length))


class TextLine:
    """A single line of a ``SourceText``.

    Attributes:
        source (SourceText): The text this line belongs to.
        start (int): Offset of the first character of the line.
        length (int): Length of the line without its line break.
        length_with_line_break (int): Length including the line break (0, 1 or 2 extra).
    """

    def __init__(
        self, source: "SourceText", start: int, length: int, length_with_line_break: int
    ) -> None:
        self.source = source
        self.start = start
        self.length = length
        self.length_with_line_break = length_with_line_break

    @property
    def end(self) -> int:
        return self.start + self.length

    @property
    def span(self) -> TextSpan:
        return TextSpan(self.start, self.length)

    @property
    def span_with_line_break(self) -> TextSpan:
        return TextSpan(self.start, self.length_with_line_break)

    def __repr__(self) -> str:
        return f"TextLine({self.start}, {self.length}, {self.length_with_line_break})"

    def __str__(self) -> str:
        return self.source.span_to_string(self.span)


class SourceText:
    """Immutable source text with a line table.

    A line break is ``\\n``, a lone ``\\r`` or the pair ``\\r\\n``. The last
    line is always recorded, so an empty text still has one (empty) line.

    Attributes:
        text (str): The raw input.
        lines (list[TextLine]): Lines in source order.
    """

    def __init__(self, text: str) -> None:
        self.text = text
        self.lines: list[TextLine] = self._parse_lines(text)
        self._line_starts = [line.start for line in self.lines]

    def __len__(self) -> int:
        return len(self.text)

    def __str__(self) -> str:
        return self.text

    def __repr__(self) -> str:
        return f"SourceText({self.text!r})"

    def _parse_lines(self, text: str) -> list[TextLine]:
        lines: list[TextLine] = []
        position = 0
        line_start = 0

        while position < len(text):
            width = self._line_break_width(text, position)
            if width == 0:
                position += 1
                continue
            length = position - line_start
            lines.append(TextLine(self, line_start, length, length + width))
            position += width
            line_start = position

        length = position - line_start
        lines.append(TextLine(self, line_start, length, length))
        return lines

    @staticmethod
    def _line_break_width(text: str, position: int) -> int:
        char = text[position]
        lookahead = text[position + 1] if position + 1 < len(text) else ""
        if char == "\r" and lookahead == "\n":
            return 2
        if char in "\r\n":
            return 1
        return 0

    def span_to_string(self, span: TextSpan) -> str:
        return self.bounds_to_string(span.start, span.end)

    def bounds_to_string(self, start: int, end: int) -> str:
        return self.text[start:end]

    def line_index(self, position: int) -> int:
        """Returns the 0-based index of the line containing ``position``.

        Offsets past the end of the text resolve to the last line.
        """
        return max(bisect_right(self._line_starts, position) - 1, 0)

    def location(self, position: int) -> tuple[int, int]:
        """Returns the 1-based ``(line, column)`` of an offset."""
        index = self.line_index(position)
        return index + 1, position - self.lines[index].start + 1
