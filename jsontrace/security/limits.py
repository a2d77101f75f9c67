"""
Security limits for jsontrace.

A LimitValidator is owned by a single parse. It tracks nesting depth and value
counts and raises SecurityError as soon as a configured limit is crossed, so a
hostile document fails before it can exhaust the call stack or memory.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Optional

from ..utils.config import ParseLimits
from .exceptions import SecurityError


def _where(offset: Optional[int]) -> str:
    return f" at offset {offset}" if offset is not None else ""


class LimitValidator:
    """Validates parsing limits to prevent resource exhaustion attacks."""

    def __init__(self, limits: ParseLimits):
        self.limits = limits
        self.nesting_depth = 0
        self.total_items = 0

    def validate_input_size(self, text: str) -> None:
        if len(text) > self.limits.max_input_size:
            raise SecurityError(
                f"Input size {len(text)} exceeds limit {self.limits.max_input_size}"
            )

    def validate_string_length(self, string: str, offset: Optional[int] = None) -> None:
        if len(string) > self.limits.max_string_length:
            raise SecurityError(
                f"String length {len(string)} exceeds limit "
                f"{self.limits.max_string_length}{_where(offset)}"
            )

    def validate_number_length(self, literal: str, offset: Optional[int] = None) -> None:
        if len(literal) > self.limits.max_number_length:
            raise SecurityError(
                f"Number length {len(literal)} exceeds limit "
                f"{self.limits.max_number_length}{_where(offset)}"
            )

    def enter_structure(self, offset: Optional[int] = None) -> None:
        """Track entering a nested structure and validate depth."""
        self.nesting_depth += 1
        if self.nesting_depth > self.limits.max_nesting_depth:
            raise SecurityError(
                f"Nesting depth {self.nesting_depth} exceeds limit "
                f"{self.limits.max_nesting_depth}{_where(offset)}"
            )

    def exit_structure(self) -> None:
        if self.nesting_depth > 0:
            self.nesting_depth -= 1

    @contextmanager
    def structure(self, offset: Optional[int] = None) -> Iterator[None]:
        """Depth-track one array or object, also when parsing it fails."""
        self.enter_structure(offset)
        try:
            yield
        finally:
            self.exit_structure()

    def validate_object_keys(self, key_count: int) -> None:
        if key_count > self.limits.max_object_keys:
            raise SecurityError(
                f"Object key count {key_count} exceeds limit "
                f"{self.limits.max_object_keys}"
            )

    def validate_array_items(self, item_count: int) -> None:
        if item_count > self.limits.max_array_items:
            raise SecurityError(
                f"Array item count {item_count} exceeds limit "
                f"{self.limits.max_array_items}"
            )

    def count_item(self) -> None:
        """Track total values parsed and validate count."""
        self.total_items += 1
        if self.total_items > self.limits.max_total_items:
            raise SecurityError(
                f"Total item count {self.total_items} exceeds limit "
                f"{self.limits.max_total_items}"
            )
