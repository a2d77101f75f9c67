"""
Test cases for the command-line entry point.
"""

import io
import os
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout

from jsontrace.__main__ import main


class TestCli(unittest.TestCase):
    """Test main() exit codes and output."""

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.tmpdir.cleanup()

    def write(self, text):
        path = os.path.join(self.tmpdir.name, "input.json")
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)
        return path

    def run_main(self, *argv):
        stdout, stderr = io.StringIO(), io.StringIO()
        with redirect_stdout(stdout), redirect_stderr(stderr):
            code = main(list(argv))
        return code, stdout.getvalue(), stderr.getvalue()

    def test_valid_file(self):
        code, out, err = self.run_main(self.write('{"b": [1, true], "a": null}'))
        self.assertEqual(code, 0)
        self.assertEqual(out, "{'b': [1.0, True], 'a': None}\n")
        self.assertEqual(err, "")

    def test_decode_escapes_flag(self):
        path = self.write(r'"a\tb"')
        self.assertEqual(self.run_main(path)[1], "'a\\\\tb'\n")
        self.assertEqual(self.run_main("--decode-escapes", path)[1], "'a\\tb'\n")

    def test_allow_trailing_data_flag(self):
        path = self.write("[1] [2]")
        self.assertEqual(self.run_main(path)[0], 1)
        self.assertEqual(self.run_main("--allow-trailing-data", path)[0], 0)

    def test_parse_error_prints_trace(self):
        code, out, err = self.run_main(self.write("[1, 2,]"))
        self.assertEqual(code, 1)
        self.assertEqual(out, "")
        self.assertIn("Trailing comma in array", err)
        self.assertIn("separator violation:", err)
        self.assertIn("derivation (innermost first):", err)
        self.assertIn("  array from line 1, column 1", err)

    def test_max_depth(self):
        path = self.write("[[[1]]]")
        self.assertEqual(self.run_main("--max-depth", "3", path)[0], 0)

        code, _, err = self.run_main("--max-depth", "2", path)
        self.assertEqual(code, 1)
        self.assertIn("SecurityError: Nesting depth 3 exceeds limit 2", err)

    def test_invalid_max_depth(self):
        with self.assertRaises(SystemExit) as cm:
            self.run_main("--max-depth", "0", self.write("1"))
        self.assertEqual(cm.exception.code, 2)

    def test_missing_file(self):
        missing = os.path.join(self.tmpdir.name, "missing.json")
        with self.assertRaises(SystemExit) as cm:
            self.run_main(missing)
        self.assertEqual(cm.exception.code, 2)


if __name__ == "__main__":
    unittest.main()
