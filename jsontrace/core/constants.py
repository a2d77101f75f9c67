"""
Common constants and lexical patterns used across the jsontrace library.
"""

import regex

HEX_DIGITS = "0123456789abcdefABCDEF"

# Standard JSON escape sequences mapping
JSON_ESCAPE_MAP = {
    '"': '"',
    "\\": "\\",
    "/": "/",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}

WHITESPACE_PATTERN = regex.compile(r"[ \t\n\r]*")
DIGITS_PATTERN = regex.compile(r"[0-9]+")
WORD_PATTERN = regex.compile(r"[A-Za-z_]\w*")
EXPONENT_MARKERS = "eE"
EXPONENT_SIGNS = "+-"

# Characters allowed inside a string without escaping: anything except
# a control character (general category Cc), backslash or double quote.
STRING_BODY_PATTERN = regex.compile(
    r"""
    (?:
        [^\p{Cc}\\"]
      | \\["\\/bfnrt]
      | \\u[0-9a-fA-F]{4}
    )*
    """,
    regex.VERBOSE,
)

# Keyword literals in the order the value reader tries them
LITERAL_VALUES = (
    ("true", True),
    ("false", False),
    ("null", None),
)

STRUCTURE_DELIMITERS = {
    "array": ("[", "]"),
    "object": ("{", "}"),
}
