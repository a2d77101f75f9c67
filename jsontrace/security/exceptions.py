"""
Exception types and error reporting for jsontrace.

Every failure carries the offset at which it was detected. ParseError also
records the chain of grammar rules it unwound through, so a reporter can show
both where and through which productions the parse diverged.
"""

from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple, Optional

from ..core.cursor import Position
from ..core.error_handling import ErrorContextBuilder, TraceFormatter


class ErrorKind(Enum):
    """What went wrong, independent of where."""

    STRUCTURAL = "structural mismatch"
    INCOMPLETE = "incomplete literal"
    SEPARATOR = "separator violation"
    EXTERNAL = "external conversion failure"


class TraceFrame(NamedTuple):
    """A grammar rule that was active when an error unwound through it."""

    rule: str
    offset: int


@dataclass
class ErrorContext:
    """Source text surrounding an error."""

    text: str
    position: Position
    context_before: str
    context_after: str
    error_char: str
    line_text: str
    column_indicator: str


class JsonTraceError(Exception):
    """Base exception for jsontrace."""

    def __init__(
        self,
        message: str,
        position: Optional[Position] = None,
        context: Optional[ErrorContext] = None,
        suggestions: Optional[list[str]] = None,
    ):
        self.message = message
        self.position = position
        self.context = context
        self.suggestions = suggestions or []
        super().__init__(message)

    def __str__(self) -> str:
        parts = [self.message]

        if self.position:
            parts[0] += f" at line {self.position.line}, column {self.position.column}"

        if self.context:
            parts.append("")
            parts.append("Context:")
            parts.append(f"  {self.context.line_text}")
            parts.append(f"  {self.context.column_indicator}")

        if self.suggestions:
            parts.append("")
            parts.append("Suggestions:")
            parts.extend(f"  - {suggestion}" for suggestion in self.suggestions)

        return "\n".join(parts)


class ParseError(JsonTraceError):
    """The input does not match the JSON grammar."""

    def __init__(
        self,
        message: str,
        position: Optional[Position] = None,
        context: Optional[ErrorContext] = None,
        suggestions: Optional[list[str]] = None,
        *,
        offset: int = 0,
        kind: ErrorKind = ErrorKind.STRUCTURAL,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message, position, context, suggestions)
        self.offset = offset
        self.kind = kind
        self.cause = cause
        self.trace: list[TraceFrame] = []

    def add_frame(self, rule: str, offset: int) -> None:
        """Record a grammar rule the error is unwinding through."""
        self.trace.append(TraceFrame(rule, offset))

    @property
    def rules(self) -> list[str]:
        """Rule names of the derivation trace, innermost first."""
        return [frame.rule for frame in self.trace]


class SecurityError(JsonTraceError):
    """Raised when a configured parsing limit is exceeded."""


class ErrorReporter:
    """Turns offsets into positions, context and readable traces."""

    def __init__(self, text: str, max_context: int = 50):
        self.text = text
        # Lines break on "\n" alone, as in ErrorContextBuilder.locate
        self.lines = [line.rstrip("\r") for line in text.split("\n")]
        self.max_context = max_context

    def position_of(self, offset: int) -> Position:
        line, column = ErrorContextBuilder.locate(self.text, offset)
        return Position(line, column)

    def build_context(self, position: Position) -> ErrorContext:
        """Build the context block shown under an error message."""
        line_index = max(0, min(position.line - 1, len(self.lines) - 1))
        line_text = self.lines[line_index]
        column = max(1, min(position.column, len(line_text) + 1))

        before, after = ErrorContextBuilder.window(
            line_text, column - 1, self.max_context
        )
        error_char = line_text[column - 1] if column <= len(line_text) else ""

        return ErrorContext(
            text=self.text,
            position=position,
            context_before=before,
            context_after=after,
            error_char=error_char,
            line_text=line_text,
            column_indicator=" " * (column - 1) + "^",
        )

    def attach(self, error: ParseError, include_context: bool = True) -> ParseError:
        """Fill in position and context of an error from its offset."""
        error.position = self.position_of(error.offset)
        if include_context:
            error.context = self.build_context(error.position)
        return error

    def format_trace(self, error: ParseError) -> str:
        """Render an error together with its derivation trace."""
        position = error.position
        if position is None:
            position = self.position_of(error.offset)

        formatter = TraceFormatter(self.text)
        lines = [
            f"{error.kind.value}: {error.message}",
            f"  --> line {position.line}, column {position.column}"
            f" (offset {error.offset})",
        ]
        lines.extend(formatter.source_excerpt(error.offset))

        if error.trace:
            lines.append("derivation (innermost first):")
            lines.extend(
                f"  {rule} from {formatter.describe_offset(offset)}"
                for rule, offset in error.trace
            )

        if error.cause is not None:
            lines.append(
                f"caused by: {type(error.cause).__name__}: {error.cause}"
            )
        return "\n".join(lines)


class ErrorSuggestionEngine:
    """Provides helpful suggestions for common JSON errors."""

    @staticmethod
    def suggest_for_unexpected_token(token: str) -> list[str]:
        suggestions = []
        if token == "":
            suggestions.append("The input ended early; check for a missing value")
        elif token in "\"'":
            suggestions.append("Strings must be enclosed in double quotes")
            suggestions.append("Check for an unescaped quote inside a string")
        elif token in ",:":
            suggestions.append(f"Check for a missing value before '{token}'")
        elif token in "}]":
            suggestions.append(f"Check for a missing value before '{token}'")
            suggestions.append("Check for mismatched brackets or braces")
        else:
            suggestions.append(
                "A JSON value must be an object, array, string, number, "
                "true, false or null"
            )
        return suggestions

    @staticmethod
    def suggest_for_unclosed_structure(structure_type: str) -> list[str]:
        closing = "}" if structure_type == "object" else "]"
        return [
            f"Add the missing '{closing}' to close the {structure_type}",
            "Check for an unterminated string inside the structure",
        ]

    @staticmethod
    def suggest_for_invalid_value(value: str) -> list[str]:
        suggestions = []
        lowered = value.lower()
        if lowered in ("true", "false", "null") and value != lowered:
            suggestions.append(f"Use lowercase '{lowered}'")
        elif lowered in ("none", "nil", "undefined"):
            suggestions.append("Use 'null' for missing values")
        elif value.startswith("'"):
            suggestions.append("Strings must be enclosed in double quotes")
        return suggestions

    @staticmethod
    def suggest_for_trailing_comma(structure_type: str) -> list[str]:
        return [
            f"Remove the trailing comma before the end of the {structure_type}",
            "Or add the missing element after the comma",
        ]

    @staticmethod
    def suggest_for_missing_comma(structure_type: str) -> list[str]:
        return [f"Separate {structure_type} elements with ','"]
