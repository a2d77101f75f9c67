"""
Test cases for the parsing primitives.

Tests focus on backtracking: which offset the cursor is left at and which
error survives when alternatives fail.
"""

import unittest

from jsontrace.core.combinators import (
    alternation,
    capture,
    describe,
    fail,
    grammar_rule,
    literal,
    optional,
    repeat_fold,
)
from jsontrace.core.cursor import Cursor
from jsontrace.security.exceptions import ErrorKind, ParseError


class Rules:
    """Minimal rule holder for exercising grammar_rule."""

    def __init__(self, text):
        self.cursor = Cursor(text)

    @grammar_rule("pair")
    def pair(self):
        first = self.letter()
        second = self.letter()
        return first + second

    @grammar_rule("letter")
    def letter(self):
        if not self.cursor.peek().isalpha():
            raise fail(self.cursor, "Expected a letter")
        return self.cursor.advance()


class TestBasicPrimitives(unittest.TestCase):
    """Test literal, optional, capture and fail."""

    def test_describe(self):
        self.assertEqual(describe(""), "end of input")
        self.assertEqual(describe("x"), "'x'")

    def test_fail_defaults_to_cursor_offset(self):
        cursor = Cursor("abc", 2)
        error = fail(cursor, "boom")
        self.assertEqual(error.offset, 2)
        self.assertEqual(error.kind, ErrorKind.STRUCTURAL)

        error = fail(cursor, "boom", ErrorKind.SEPARATOR, offset=0)
        self.assertEqual(error.offset, 0)
        self.assertEqual(error.kind, ErrorKind.SEPARATOR)

    def test_literal(self):
        cursor = Cursor("null,")
        self.assertEqual(literal(cursor, "null"), "null")
        self.assertEqual(cursor.offset, 4)

    def test_literal_failure_does_not_consume(self):
        cursor = Cursor("nul")
        with self.assertRaises(ParseError) as cm:
            literal(cursor, "null")
        self.assertEqual(cursor.offset, 0)
        self.assertEqual(cm.exception.offset, 0)
        self.assertEqual(cm.exception.message, "Expected 'null', found 'n'")

    def test_optional_rewinds(self):
        cursor = Cursor("ab")

        def ab_then_c():
            literal(cursor, "ab")
            return literal(cursor, "c")

        self.assertIsNone(optional(cursor, ab_then_c))
        self.assertEqual(cursor.offset, 0)
        self.assertEqual(optional(cursor, lambda: literal(cursor, "a")), "a")
        self.assertEqual(cursor.offset, 1)

    def test_capture(self):
        cursor = Cursor("abc")
        self.assertEqual(capture(cursor, lambda: cursor.advance(2)), "ab")


class TestAlternation(unittest.TestCase):
    """Test ordered choice."""

    def test_first_success_wins(self):
        cursor = Cursor("ab")
        result = alternation(
            cursor,
            [lambda: literal(cursor, "a"), lambda: literal(cursor, "ab")],
            "a or ab",
        )
        self.assertEqual(result, "a")
        self.assertEqual(cursor.offset, 1)

    def test_failed_alternative_is_rewound(self):
        cursor = Cursor("ac")

        def ab():
            literal(cursor, "a")
            return literal(cursor, "b")

        result = alternation(cursor, [ab, lambda: literal(cursor, "ac")], "ab or ac")
        self.assertEqual(result, "ac")

    def test_furthest_failure_is_reported(self):
        cursor = Cursor("ax")

        def ab():
            literal(cursor, "a")
            return literal(cursor, "b")

        with self.assertRaises(ParseError) as cm:
            alternation(cursor, [lambda: literal(cursor, "z"), ab], "z or ab")
        self.assertEqual(cm.exception.offset, 1)
        self.assertEqual(cm.exception.message, "Expected 'b', found 'x'")
        self.assertEqual(cursor.offset, 0)

    def test_failure_at_start_names_expectation(self):
        cursor = Cursor("q")
        with self.assertRaises(ParseError) as cm:
            alternation(
                cursor,
                [lambda: literal(cursor, "a"), lambda: literal(cursor, "b")],
                "a letter",
                suggest=lambda: ["Try 'a'"],
            )
        self.assertEqual(cm.exception.message, "Unexpected 'q', expected a letter")
        self.assertEqual(cm.exception.suggestions, ["Try 'a'"])


class TestRepeatFold(unittest.TestCase):
    """Test repetition with a folding reducer."""

    def test_folds_until_item_fails(self):
        cursor = Cursor("aaab")

        def collect(acc, item):
            acc.append(item)
            return True

        result = repeat_fold(cursor, lambda: literal(cursor, "a"), [], collect)
        self.assertEqual(result.accumulator, ["a", "a", "a"])
        self.assertEqual(result.count, 3)
        self.assertIsNone(result.rejected_at)
        self.assertEqual(result.failure.offset, 3)
        self.assertEqual(cursor.offset, 3)

    def test_zero_items(self):
        cursor = Cursor("b")
        result = repeat_fold(cursor, lambda: literal(cursor, "a"), [], lambda acc, x: True)
        self.assertEqual(result.count, 0)
        self.assertEqual(cursor.offset, 0)

    def test_reducer_rejection_rewinds(self):
        cursor = Cursor("aaaa")

        def at_most_two(acc, item):
            if len(acc) == 2:
                return False
            acc.append(item)
            return True

        result = repeat_fold(cursor, lambda: literal(cursor, "a"), [], at_most_two)
        self.assertEqual(result.accumulator, ["a", "a"])
        self.assertEqual(result.rejected_at, 2)
        self.assertIsNone(result.failure)
        self.assertEqual(cursor.offset, 2)

    def test_item_without_consumption_stops(self):
        cursor = Cursor("abc")
        result = repeat_fold(cursor, lambda: None, [], lambda acc, x: True)
        self.assertEqual(result.count, 1)
        self.assertEqual(cursor.offset, 0)


class TestGrammarRule(unittest.TestCase):
    """Test derivation traces recorded by grammar_rule."""

    def test_success_returns_value(self):
        self.assertEqual(Rules("ab").pair(), "ab")

    def test_trace_is_innermost_first(self):
        rules = Rules("a1")
        with self.assertRaises(ParseError) as cm:
            rules.pair()

        error = cm.exception
        self.assertEqual(error.offset, 1)
        self.assertEqual(error.rules, ["letter", "pair"])
        self.assertEqual([frame.offset for frame in error.trace], [1, 0])

    def test_wrapped_name_is_kept(self):
        self.assertEqual(Rules.pair.__name__, "pair")


if __name__ == "__main__":
    unittest.main()
