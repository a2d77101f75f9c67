"""
Parser for jsontrace - recursive descent over a Cursor into Python values.

Each grammar rule is a Parser method. Rules either return a value with the
cursor moved past it or raise ParseError; alternatives and repetition rewind
the cursor themselves (see combinators).
"""

import functools
import logging
from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TextIO, TypeVar, Union

from ..security.exceptions import (
    ErrorKind,
    ErrorReporter,
    ErrorSuggestionEngine,
    ParseError,
)
from ..security.limits import LimitValidator
from ..utils.config import ParseConfig
from .combinators import (
    FoldResult,
    alternation,
    capture,
    describe,
    fail,
    grammar_rule,
    literal,
    optional,
    repeat_fold,
)
from .constants import (
    DIGITS_PATTERN,
    EXPONENT_MARKERS,
    EXPONENT_SIGNS,
    LITERAL_VALUES,
    STRING_BODY_PATTERN,
    STRUCTURE_DELIMITERS,
    WHITESPACE_PATTERN,
    WORD_PATTERN,
)
from .cursor import Cursor
from .parser_base import BaseParserMixin

JsonValue = Union[None, bool, float, str, list[Any], dict[str, Any]]

C = TypeVar("C", list, dict)


@dataclass
class Delimited(Generic[C]):
    """Elements of an array or object parsed so far."""

    values: C
    # Whether the previous element was followed by a comma
    comma: bool = True


class Parser(BaseParserMixin):
    """JSON parser reading values from a shared cursor."""

    def __init__(
        self,
        cursor: Cursor,
        config: Optional[ParseConfig] = None,
        validator: Optional[LimitValidator] = None,
    ):
        self.cursor = cursor
        self.config = config or ParseConfig()
        self.validator = validator or LimitValidator(self.config.limits)

        keywords: list[Callable[[], JsonValue]] = [
            functools.partial(self._parse_keyword, text, value)
            for text, value in LITERAL_VALUES
        ]
        self._value_alternatives: list[Callable[[], JsonValue]] = keywords + [
            self.parse_string,
            self.parse_number,
            self.parse_array,
            self.parse_object,
        ]

    def parse(self) -> JsonValue:
        """Parse a complete document."""
        value = self.parse_value()
        if not self.config.allow_trailing_data and not self.cursor.at_end():
            raise fail(
                self.cursor,
                f"Extra data after root value: {describe(self.cursor.peek())}",
                suggestions=[
                    "Remove the text after the root value",
                    "Wrap multiple values in an array",
                ],
            )
        return value

    def skip_whitespace(self) -> None:
        """Consume spaces, tabs, newlines and carriage returns."""
        self.cursor.match(WHITESPACE_PATTERN)

    def _accept(self, chars: str) -> Optional[str]:
        """Consume the next character if it is one of ``chars``."""
        char = self.cursor.peek()
        if char and char in chars:
            return self.cursor.advance()
        return None

    def _parse_keyword(self, text: str, value: JsonValue) -> JsonValue:
        literal(self.cursor, text)
        return value

    @grammar_rule("value")
    def parse_value(self) -> JsonValue:
        """Parse any JSON value, including surrounding whitespace."""
        self.skip_whitespace()
        value = alternation(
            self.cursor,
            self._value_alternatives,
            "a JSON value",
            suggest=self._suggest_for_value,
        )
        self.skip_whitespace()
        self.validator.count_item()
        return value

    def _suggest_for_value(self) -> list[str]:
        word = WORD_PATTERN.match(self.cursor.text, self.cursor.offset)
        if word is not None:
            suggestions = ErrorSuggestionEngine.suggest_for_invalid_value(word.group())
            if suggestions:
                return suggestions
        return ErrorSuggestionEngine.suggest_for_unexpected_token(self.cursor.peek())

    def _digits(self, message: str, kind: ErrorKind) -> str:
        digits = self.cursor.match(DIGITS_PATTERN)
        if digits is None:
            raise fail(self.cursor, f"{message}, found {describe(self.cursor.peek())}", kind)
        return digits

    @grammar_rule("number")
    def parse_number(self) -> float:
        """
        Parse a number: -? digits (. digits)? ([eE] [+-] digits)?

        Once a '.' or exponent marker has been read, the digits (and the
        exponent sign) after it are required.
        """
        cursor = self.cursor
        start = cursor.offset

        self._accept("-")
        self._digits("Expected a digit", ErrorKind.STRUCTURAL)

        if self._accept("."):
            self._digits("Expected a digit after the decimal point", ErrorKind.INCOMPLETE)

        if self._accept(EXPONENT_MARKERS):
            if not self._accept(EXPONENT_SIGNS):
                raise fail(
                    cursor,
                    "Expected '+' or '-' after the exponent marker, "
                    f"found {describe(cursor.peek())}",
                    ErrorKind.INCOMPLETE,
                )
            self._digits("Expected a digit in the exponent", ErrorKind.INCOMPLETE)

        number_text = cursor.slice(start)
        self.validator.validate_number_length(number_text, start)
        return self.convert_number(number_text, cursor.offset)

    @grammar_rule("string")
    def parse_string(self) -> str:
        """Parse a double-quoted string.

        The result is the source text between the quotes; escape sequences
        are only decoded when the config asks for it.
        """
        cursor = self.cursor
        start = cursor.offset

        literal(cursor, '"')
        raw = capture(cursor, lambda: cursor.match(STRING_BODY_PATTERN))
        if not self._accept('"'):
            raise self._string_error(start)

        self.validator.validate_string_length(raw, start)
        if self.config.decode_escapes:
            return self.unescape_string(raw)
        return raw

    def _string_error(self, start: int) -> ParseError:
        """Explain why the string body stopped before a closing quote."""
        cursor = self.cursor
        char = cursor.peek()

        if char == "" or (char == "\\" and cursor.peek(1) == ""):
            return fail(
                cursor,
                f"Unterminated string starting at offset {start}",
                ErrorKind.INCOMPLETE,
                suggestions=["Add the closing '\"' to the string"],
            )
        if char == "\\":
            escape = cursor.peek(1)
            if escape == "u":
                return fail(
                    cursor,
                    "Incomplete unicode escape, expected 4 hex digits after '\\u'",
                    ErrorKind.INCOMPLETE,
                )
            return fail(
                cursor,
                f"Invalid escape sequence '\\{escape}'",
                suggestions=[
                    "Valid escapes are \\\" \\\\ \\/ \\b \\f \\n \\r \\t and \\uXXXX",
                    "Write a literal backslash as '\\\\'",
                ],
            )
        return fail(
            cursor,
            f"Invalid control character {char!r} in string",
            suggestions=["Escape control characters, e.g. write a newline as '\\n'"],
        )

    @grammar_rule("array")
    def parse_array(self) -> list[JsonValue]:
        """Parse '[' value (',' value)* ']' or an empty array."""
        start = self.cursor.offset
        literal(self.cursor, "[")

        with self.validator.structure(start):
            fold = repeat_fold(
                self.cursor,
                self._parse_array_element,
                Delimited(self.init_empty_array()),
                self._fold_array_element,
            )
            self._finish_delimited(fold, "array")
        return fold.accumulator.values

    def _parse_array_element(self) -> tuple[JsonValue, bool]:
        value = self.parse_value()
        comma = optional(self.cursor, lambda: literal(self.cursor, ","))
        return value, comma is not None

    def _fold_array_element(
        self, acc: Delimited[list], element: tuple[JsonValue, bool]
    ) -> bool:
        if not acc.comma:
            return False
        value, comma = element
        acc.values.append(value)
        acc.comma = comma
        self.validator.validate_array_items(len(acc.values))
        return True

    @grammar_rule("object")
    def parse_object(self) -> dict[str, JsonValue]:
        """Parse '{' member (',' member)* '}' or an empty object."""
        start = self.cursor.offset
        literal(self.cursor, "{")

        with self.validator.structure(start):
            fold = repeat_fold(
                self.cursor,
                self._parse_object_member,
                Delimited(self.init_empty_object()),
                self._fold_object_member,
            )
            self._finish_delimited(fold, "object")
        return fold.accumulator.values

    @grammar_rule("object member")
    def _parse_object_member(self) -> tuple[str, JsonValue, bool]:
        cursor = self.cursor
        self.skip_whitespace()
        key = self.parse_string()
        self.skip_whitespace()
        if not self._accept(":"):
            raise fail(
                cursor,
                f"Expected ':' after object key, found {describe(cursor.peek())}",
                suggestions=["Object keys must be followed by a colon"],
            )
        value = self.parse_value()
        comma = optional(cursor, lambda: literal(cursor, ","))
        return key, value, comma is not None

    def _fold_object_member(
        self, acc: Delimited[dict], member: tuple[str, JsonValue, bool]
    ) -> bool:
        if not acc.comma:
            return False
        key, value, comma = member
        self.handle_duplicate_key(acc.values, key, value)
        acc.comma = comma
        self.validator.validate_object_keys(len(acc.values))
        return True

    def _finish_delimited(self, fold: FoldResult[Delimited], kind: str) -> None:
        """Check how an element list ended and consume its closing token."""
        cursor = self.cursor
        closing = STRUCTURE_DELIMITERS[kind][1]
        self.skip_whitespace()

        # An element that failed part-way explains more than the closing token
        if fold.failure is not None and fold.failure.offset > cursor.offset:
            raise fold.failure

        # JSON forbids trailing commas
        if fold.count and fold.accumulator.comma:
            raise fail(
                cursor,
                f"Trailing comma in {kind}, expected another element after ','",
                ErrorKind.SEPARATOR,
                suggestions=ErrorSuggestionEngine.suggest_for_trailing_comma(kind),
            )

        if self._accept(closing):
            return

        if fold.rejected_at is not None:
            raise fail(
                cursor,
                f"Expected ',' between {kind} elements, "
                f"found {describe(cursor.peek())}",
                ErrorKind.SEPARATOR,
                offset=fold.rejected_at,
                suggestions=ErrorSuggestionEngine.suggest_for_missing_comma(kind),
            )
        if cursor.at_end():
            raise fail(
                cursor,
                f"Unexpected end of input, expected '{closing}' to close {kind}",
                ErrorKind.INCOMPLETE,
                suggestions=ErrorSuggestionEngine.suggest_for_unclosed_structure(kind),
            )
        expected = f"',' or '{closing}'" if fold.count else f"'{closing}'"
        raise fail(
            cursor,
            f"Expected {expected} in {kind}, found {describe(cursor.peek())}",
            suggestions=ErrorSuggestionEngine.suggest_for_unclosed_structure(kind),
        )


def _report(error: ParseError, text: str, config: ParseConfig) -> ParseError:
    """Attach position and context to an error leaving the parser."""
    if config.include_position:
        reporter = ErrorReporter(text, config.max_error_context)
        reporter.attach(error, include_context=config.include_context)
    return error


def parse_value(cursor: Cursor, config: Optional[ParseConfig] = None) -> JsonValue:
    """
    Parse one JSON value starting at ``cursor``.

    The cursor is advanced past the value and any whitespace after it; text
    beyond that is left for the caller. Usable at the root of a document or
    on a cursor positioned inside one.

    Raises:
        ParseError: If no JSON value can be read at the cursor
        SecurityError: If a configured limit is exceeded (the input size
            limit applies to the whole of ``cursor.text``)
    """
    config = config or ParseConfig()
    validator = LimitValidator(config.limits)
    validator.validate_input_size(cursor.text)
    try:
        return Parser(cursor, config, validator).parse_value()
    except ParseError as error:
        _report(error, cursor.text, config)
        raise


def parse(
    text: Union[str, bytes, bytearray],
    *,
    decode_escapes: bool = False,
    allow_trailing_data: bool = False,
    config: Optional[ParseConfig] = None,
) -> JsonValue:
    """
    Parse a JSON document into Python values.

    Objects become dicts, arrays lists, numbers floats, strings str (raw
    source text unless ``decode_escapes``), true/false bool and null None.

    Args:
        text: The JSON document (bytes are decoded as UTF-8)
        decode_escapes: Decode escape sequences inside strings
        allow_trailing_data: Ignore text after the root value instead of failing
        config: Full ParseConfig; when given, the keyword flags are ignored

    Returns:
        Parsed Python data structure

    Raises:
        ParseError: If the text is not valid JSON
        SecurityError: If a configured limit is exceeded
    """
    if isinstance(text, (bytes, bytearray)):
        text = text.decode("utf-8")
    if not isinstance(text, str):
        raise TypeError(f"Expected str or bytes, got {type(text).__name__}")

    if config is None:
        config = ParseConfig(
            decode_escapes=decode_escapes, allow_trailing_data=allow_trailing_data
        )
    logger = config.logger or logging.getLogger(__name__)

    validator = LimitValidator(config.limits)
    validator.validate_input_size(text)

    logger.debug(f"Parsing {len(text)} characters")
    try:
        result = Parser(Cursor(text), config, validator).parse()
    except ParseError as error:
        logger.debug(
            f"Parse failed at offset {error.offset} ({error.kind.value}): "
            f"{error.message}; rules: {' <- '.join(error.rules)}"
        )
        _report(error, text, config)
        raise

    logger.debug(f"Parsed {validator.total_items} values")
    return result


def loads(s: Union[str, bytes, bytearray], **kwargs: Any) -> JsonValue:
    """Deserialize a JSON string (same options as parse())."""
    return parse(s, **kwargs)


def load(fp: TextIO, **kwargs: Any) -> JsonValue:
    """Deserialize JSON read from a file-like object (same options as parse())."""
    return parse(fp.read(), **kwargs)
