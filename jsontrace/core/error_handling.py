"""
Common error handling utilities for JSON parsing.

This module turns raw offsets into line/column locations and renders the
source excerpts used by the error reporter.
"""


class ErrorContextBuilder:
    """Builds location and context information from an offset."""

    @staticmethod
    def locate(text: str, offset: int) -> tuple[int, int]:
        """Return the 1-based (line, column) of ``offset`` in ``text``."""
        offset = max(0, min(offset, len(text)))
        line = text.count("\n", 0, offset) + 1
        line_start = text.rfind("\n", 0, offset) + 1
        return line, offset - line_start + 1

    @staticmethod
    def window(line_text: str, index: int, context_length: int = 50) -> tuple[str, str]:
        """Slice up to ``context_length`` characters around ``index``."""
        half = context_length // 2
        start = max(0, index - half)
        end = min(len(line_text), index + half)
        return line_text[start:index], line_text[index:end]


class TraceFormatter:
    """Renders source excerpts with a caret under the failing column."""

    def __init__(self, text: str, context_length: int = 50):
        self.text = text
        self.context_length = context_length

    def describe_offset(self, offset: int) -> str:
        line, column = ErrorContextBuilder.locate(self.text, offset)
        return f"line {line}, column {column}"

    def source_excerpt(self, offset: int) -> list[str]:
        """Return the line containing ``offset`` and a caret marker."""
        line, column = ErrorContextBuilder.locate(self.text, offset)
        line_start = offset - (column - 1)
        line_end = self.text.find("\n", line_start)
        if line_end == -1:
            line_end = len(self.text)
        line_text = self.text[line_start:line_end].rstrip("\r")

        before, after = ErrorContextBuilder.window(
            line_text, column - 1, self.context_length
        )
        # Long lines are clipped around the error
        prefix = "..." if len(before) < column - 1 else ""
        suffix = "..." if column - 1 + len(after) < len(line_text) else ""
        gutter = f"{line:>4} | "
        return [
            f"{gutter}{prefix}{before}{after}{suffix}",
            " " * (len(gutter) - 2) + "| " + " " * (len(prefix) + len(before)) + "^",
        ]
