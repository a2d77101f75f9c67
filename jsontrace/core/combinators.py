"""
Parsing primitives shared by the grammar rules.

Every parser here is a zero-argument callable that reads from a Cursor and
either returns a value or raises ParseError. Backtracking is explicit: a
primitive that tries something saves the cursor offset first and restores it
when the attempt fails.
"""

import functools
from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar

from ..security.exceptions import ErrorKind, ParseError
from .cursor import Cursor

T = TypeVar("T")
A = TypeVar("A")


def describe(char: str) -> str:
    """Human description of the character at an error location."""
    if char == "":
        return "end of input"
    return repr(char)


def fail(
    cursor: Cursor,
    message: str,
    kind: ErrorKind = ErrorKind.STRUCTURAL,
    offset: Optional[int] = None,
    suggestions: Optional[list[str]] = None,
) -> ParseError:
    """Build a ParseError located at the cursor (or at ``offset``)."""
    return ParseError(
        message,
        suggestions=suggestions,
        offset=cursor.offset if offset is None else offset,
        kind=kind,
    )


def grammar_rule(name: str) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """Label a Parser method so failures record it in their trace.

    The decorated method must belong to an object with a ``cursor``
    attribute; the frame records where the rule started.
    """

    def decorator(method: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(method)
        def wrapper(self: Any, *args: Any, **kwargs: Any) -> T:
            start = self.cursor.offset
            try:
                return method(self, *args, **kwargs)
            except ParseError as error:
                error.add_frame(name, start)
                raise

        return wrapper

    return decorator


def literal(cursor: Cursor, text: str) -> str:
    """Match ``text`` exactly."""
    if not cursor.startswith(text):
        raise fail(cursor, f"Expected {text!r}, found {describe(cursor.peek())}")
    return cursor.advance(len(text))


def optional(cursor: Cursor, parser: Callable[[], T]) -> Optional[T]:
    """Run ``parser``; on failure rewind and return None."""
    mark = cursor.save()
    try:
        return parser()
    except ParseError:
        cursor.restore(mark)
        return None


def alternation(
    cursor: Cursor,
    alternatives: list[Callable[[], T]],
    expected: str,
    suggest: Optional[Callable[[], list[str]]] = None,
) -> T:
    """Ordered choice: the first alternative that succeeds wins.

    If every alternative fails, the failure that got furthest past the
    starting offset is re-raised. When none got past the start a fresh
    error naming ``expected`` is raised there, with hints from ``suggest``.
    """
    mark = cursor.save()
    furthest: Optional[ParseError] = None
    for parser in alternatives:
        try:
            return parser()
        except ParseError as error:
            cursor.restore(mark)
            if furthest is None or error.offset > furthest.offset:
                furthest = error

    if furthest is not None and furthest.offset > mark:
        raise furthest
    raise fail(
        cursor,
        f"Unexpected {describe(cursor.peek())}, expected {expected}",
        suggestions=suggest() if suggest else None,
    )


def capture(cursor: Cursor, parser: Callable[[], Any]) -> str:
    """Run ``parser`` and return the exact text it consumed."""
    start = cursor.save()
    parser()
    return cursor.slice(start)


@dataclass
class FoldResult(Generic[A]):
    """Outcome of a fold: the accumulator and why repetition stopped."""

    accumulator: A
    count: int = 0
    rejected_at: Optional[int] = None
    failure: Optional[ParseError] = None


def repeat_fold(
    cursor: Cursor,
    item: Callable[[], T],
    accumulator: A,
    reducer: Callable[[A, T], bool],
) -> FoldResult[A]:
    """Repeat ``item`` folding each result into ``accumulator``.

    Repetition stops without failing when ``item`` fails (the failure is kept
    for later diagnostics) or when ``reducer`` returns False for a parsed
    item. In both cases the cursor is rewound to just before that attempt.
    """
    result = FoldResult(accumulator)
    while True:
        mark = cursor.save()
        try:
            value = item()
        except ParseError as error:
            cursor.restore(mark)
            result.failure = error
            return result

        if not reducer(accumulator, value):
            cursor.restore(mark)
            result.rejected_at = mark
            return result
        result.count += 1

        if cursor.offset == mark:
            # An item that consumes nothing would repeat forever
            return result
