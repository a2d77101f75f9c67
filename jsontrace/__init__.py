"""
jsontrace - a strict JSON parser whose errors show where and why parsing failed.

Every error carries the offset it was detected at, its kind (structural
mismatch, incomplete literal, separator violation or external conversion
failure) and the chain of grammar rules that were being parsed, innermost
first.

Quick Start:
    import jsontrace
    data = jsontrace.parse('{"a": [1, 2, {"b": true}]}')

    try:
        jsontrace.parse('[1, 2,]')
    except jsontrace.ParseError as error:
        print(jsontrace.ErrorReporter('[1, 2,]').format_trace(error))

Strings are returned as their raw source text; pass ``decode_escapes=True``
to decode escape sequences.
"""

from .core.engine import JsonValue, Parser, load, loads, parse, parse_value
from .core.cursor import Cursor, Position
from .utils.config import ParseConfig, ParseLimits
from .security.exceptions import (
    ErrorKind,
    ErrorReporter,
    JsonTraceError,
    ParseError,
    SecurityError,
    TraceFrame,
)

__version__ = "0.1.0"
__author__ = "jsontrace contributors"

__all__ = [
    # Parsing functions
    "parse", "parse_value", "loads", "load",
    # Parser building blocks
    "Parser", "Cursor", "Position", "JsonValue",
    # Configuration classes
    "ParseConfig", "ParseLimits",
    # Errors and reporting
    "JsonTraceError", "ParseError", "SecurityError", "ErrorKind",
    "TraceFrame", "ErrorReporter",
]
