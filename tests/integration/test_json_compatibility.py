"""
Test cases comparing jsontrace with the standard json module.

Numbers are always floats in jsontrace, so the reference results are built
with ``parse_int=float``. Documents that json accepts but jsontrace rejects
(exponents without a sign) and the reverse (leading zeros) are covered
in the unit tests.
"""

import io
import json
import os
import tempfile
import unittest

import jsontrace


def reference(text):
    return json.loads(text, parse_int=float)


class TestLoadsCompatibility(unittest.TestCase):
    """Test that valid documents give the same values as json.loads()."""

    def test_escape_free_documents(self):
        test_cases = [
            '{"test": "value"}',
            "[1, 2, 3]",
            '{"nested": {"array": [1, 2, {"deep": true}]}}',
            '{"number": 123, "float": 45.67, "bool": false, "null": null}',
            '[-0.5, 1E+2, 2e-3, 0, -7]',
            '{"unicode": "é中文 \U0001F600"}',
            '  [ { } , [ ] , "" ]  ',
            '{"a": {"b": {"c": {"d": [[[["deep"]]]]}}}}',
        ]

        for test_case in test_cases:
            with self.subTest(test_case=test_case):
                self.assertEqual(jsontrace.loads(test_case), reference(test_case))

    def test_decoded_escapes_match(self):
        test_cases = [
            r'"line\nbreak"',
            r'{"quote": "\"q\"", "slash": "a\/b", "back": "c\\d"}',
            r'["\b\f\r\t"]',
            r'"\u00e9\u4e2d"',
            r'"\ud83d\ude00"',
        ]

        for test_case in test_cases:
            with self.subTest(test_case=test_case):
                self.assertEqual(
                    jsontrace.loads(test_case, decode_escapes=True),
                    reference(test_case),
                )

    def test_serialized_output_parses(self):
        """Anything json.dumps produces (without escapes) parses back."""
        data = {
            "list": [1.5, -2.0, 300.0, True, False, None],
            "text": "plain text",
            "nested": {"empty_list": [], "empty_object": {}},
        }
        for indent in (None, 2, "\t"):
            with self.subTest(indent=indent):
                text = json.dumps(data, indent=indent)
                self.assertEqual(jsontrace.loads(text), data)

    def test_duplicate_keys_match(self):
        text = '{"a": 1, "b": 2, "a": 3}'
        self.assertEqual(jsontrace.loads(text), reference(text))

    def test_rejects_what_json_rejects(self):
        invalid = ["[1,]", '{"a":1,}', "[1 2]", '{"a" 1}', "'x'", "{a: 1}", "[", '"abc']
        for text in invalid:
            with self.subTest(text=text):
                with self.assertRaises(json.JSONDecodeError):
                    json.loads(text)
                with self.assertRaises(jsontrace.ParseError):
                    jsontrace.loads(text)


class TestLoadCompatibility(unittest.TestCase):
    """Test load() with file objects."""

    def test_string_io(self):
        self.assertEqual(jsontrace.load(io.StringIO('{"k": [1]}')), {"k": [1.0]})

    def test_real_file(self):
        with tempfile.NamedTemporaryFile(
            "w", suffix=".json", delete=False, encoding="utf-8"
        ) as f:
            f.write('{\n  "name": "jsontrace",\n  "tags": ["json", "parser"]\n}\n')
            path = f.name

        try:
            with open(path, encoding="utf-8") as f:
                result = jsontrace.load(f)
            self.assertEqual(result, {"name": "jsontrace", "tags": ["json", "parser"]})
        finally:
            os.unlink(path)


if __name__ == "__main__":
    unittest.main()
