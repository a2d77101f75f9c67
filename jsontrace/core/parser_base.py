"""
Base parser functionality: value construction helpers used by the grammar.
"""

from typing import Any, Optional

from ..security.exceptions import ErrorKind, ParseError
from .constants import HEX_DIGITS, JSON_ESCAPE_MAP


class BaseParserMixin:
    """Value construction shared by the grammar rules."""

    def convert_number(self, literal: str, offset: int) -> float:
        """Convert a matched number literal to a float.

        The grammar only hands over text ``float`` accepts, so a failure here
        is reported as an external conversion error carrying the cause.
        """
        try:
            return float(literal)
        except (ValueError, OverflowError) as err:
            raise ParseError(
                f"Could not convert {literal!r} to a number",
                offset=offset,
                kind=ErrorKind.EXTERNAL,
                cause=err,
            ) from err

    def handle_duplicate_key(self, obj: dict[str, Any], key: str, value: Any) -> None:
        """Insert ``key``; a repeated key silently replaces the earlier value."""
        obj[key] = value

    def init_empty_array(self) -> list[Any]:
        return []

    def init_empty_object(self) -> dict[str, Any]:
        return {}

    def _read_code_unit(self, s: str, i: int) -> Optional[int]:
        """Read the 4 hex digits of a ``\\u`` escape starting at ``s[i]``."""
        hex_digits = s[i + 2 : i + 6]
        if len(hex_digits) != 4 or any(c not in HEX_DIGITS for c in hex_digits):
            return None
        return int(hex_digits, 16)

    def _process_unicode_escape(self, s: str, i: int) -> tuple[str, int]:
        """Decode ``\\uXXXX`` at ``s[i]``, pairing surrogates where possible."""
        code_point = self._read_code_unit(s, i)
        if code_point is None:
            return s[i : i + 2], i + 2

        if 0xD800 <= code_point <= 0xDBFF and s.startswith("\\u", i + 6):
            low = self._read_code_unit(s, i + 6)
            if low is not None and 0xDC00 <= low <= 0xDFFF:
                combined = 0x10000 + ((code_point - 0xD800) << 10) + (low - 0xDC00)
                return chr(combined), i + 12

        if 0xD800 <= code_point <= 0xDFFF:
            return "\ufffd", i + 6  # unpaired surrogate
        return chr(code_point), i + 6

    def unescape_string(self, s: str) -> str:
        """Decode the escape sequences of a raw string body."""
        if "\\" not in s:
            return s

        result = []
        i = 0
        while i < len(s):
            if s[i] == "\\" and i + 1 < len(s):
                next_char = s[i + 1]
                if next_char == "u":
                    chars, i = self._process_unicode_escape(s, i)
                else:
                    chars = JSON_ESCAPE_MAP.get(next_char, s[i : i + 2])
                    i += 2
                result.append(chars)
            else:
                result.append(s[i])
                i += 1

        return "".join(result)
