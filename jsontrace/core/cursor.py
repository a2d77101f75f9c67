"""
Input cursor for jsontrace - a position into text owned by the caller.
"""

from dataclasses import dataclass
from typing import Optional

import regex

from .error_handling import ErrorContextBuilder


@dataclass
class Position:
    """Position in source text (line and column)."""

    line: int
    column: int


class Cursor:
    """Read-only view into the input text plus the current offset.

    The grammar rules only ever move ``offset``; the text itself is never
    copied or modified.
    """

    def __init__(self, text: str, offset: int = 0) -> None:
        if not 0 <= offset <= len(text):
            raise ValueError(f"Offset {offset} is outside the input text")
        self.text = text
        self.offset = offset

    def __repr__(self) -> str:
        return f"Cursor(offset={self.offset}, remaining={self.remaining()[:20]!r})"

    def at_end(self) -> bool:
        """Whether all input has been consumed."""
        return self.offset >= len(self.text)

    def remaining(self) -> str:
        """Text not yet consumed."""
        return self.text[self.offset :]

    def peek(self, ahead: int = 0) -> str:
        """Peek at character at given offset without consuming it."""
        pos = self.offset + ahead
        if pos >= len(self.text):
            return ""
        return self.text[pos]

    def advance(self, count: int = 1) -> str:
        """Consume ``count`` characters and return them."""
        end = min(self.offset + count, len(self.text))
        consumed = self.text[self.offset : end]
        self.offset = end
        return consumed

    def startswith(self, literal: str) -> bool:
        return self.text.startswith(literal, self.offset)

    def match(self, pattern: "regex.Pattern") -> Optional[str]:
        """Match ``pattern`` at the current offset, consuming the match."""
        found = pattern.match(self.text, self.offset)
        if found is None:
            return None
        self.offset = found.end()
        return found.group()

    def save(self) -> int:
        return self.offset

    def restore(self, mark: int) -> None:
        self.offset = mark

    def slice(self, start: int) -> str:
        """Text consumed between ``start`` and the current offset."""
        return self.text[start : self.offset]

    def position_at(self, offset: Optional[int] = None) -> Position:
        """Line and column (both 1-based) of ``offset``."""
        line, column = ErrorContextBuilder.locate(
            self.text, self.offset if offset is None else offset
        )
        return Position(line, column)
