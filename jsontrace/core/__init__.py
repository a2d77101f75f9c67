"""
jsontrace Core Parsing Engine.

This module provides the cursor, the parsing primitives and the JSON grammar.
"""

from .cursor import Cursor, Position
from .engine import Parser, parse, parse_value

__all__ = ['Cursor', 'Position', 'Parser', 'parse', 'parse_value']
