"""
Configuration and limits for jsontrace parsing.

This module defines security limits and configuration options for safe JSON parsing.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class SizeLimits:
    """Input and content size limits."""
    max_input_size: int = 10 * 1024 * 1024
    max_string_length: int = 1024 * 1024
    max_number_length: int = 100


@dataclass
class StructureLimits:
    """JSON structure complexity limits."""
    max_nesting_depth: int = 100
    max_object_keys: int = 10000
    max_array_items: int = 100000
    max_total_items: int = 1000000


_SIZE_FIELDS = ("max_input_size", "max_string_length", "max_number_length")
_STRUCTURE_FIELDS = (
    "max_nesting_depth",
    "max_object_keys",
    "max_array_items",
    "max_total_items",
)


@dataclass
class ParseLimits:
    """Security limits for JSON parsing to prevent abuse."""

    size_limits: Optional[SizeLimits] = None
    structure_limits: Optional[StructureLimits] = None

    def __init__(
        self,
        *,
        size_limits: Optional[SizeLimits] = None,
        structure_limits: Optional[StructureLimits] = None,
        **flat_limits: int,  # individual limits, e.g. max_nesting_depth=10
    ):
        unknown = set(flat_limits) - set(_SIZE_FIELDS) - set(_STRUCTURE_FIELDS)
        if unknown:
            raise TypeError(f"Unknown limit(s): {', '.join(sorted(unknown))}")

        if size_limits is not None:
            self.size_limits = size_limits
        else:
            self.size_limits = SizeLimits(
                **{k: v for k, v in flat_limits.items() if k in _SIZE_FIELDS}
            )

        if structure_limits is not None:
            self.structure_limits = structure_limits
        else:
            self.structure_limits = StructureLimits(
                **{k: v for k, v in flat_limits.items() if k in _STRUCTURE_FIELDS}
            )

        if self.size_limits.max_input_size <= 0:
            raise ValueError("max_input_size must be positive")
        if self.structure_limits.max_nesting_depth <= 0:
            raise ValueError("max_nesting_depth must be positive")

    @property
    def max_input_size(self) -> int:
        """Maximum input size in characters."""
        assert self.size_limits is not None
        return self.size_limits.max_input_size

    @property
    def max_string_length(self) -> int:
        """Maximum length for individual strings."""
        assert self.size_limits is not None
        return self.size_limits.max_string_length

    @property
    def max_number_length(self) -> int:
        """Maximum length for number literals."""
        assert self.size_limits is not None
        return self.size_limits.max_number_length

    @property
    def max_nesting_depth(self) -> int:
        """Maximum nesting depth for JSON structures."""
        assert self.structure_limits is not None
        return self.structure_limits.max_nesting_depth

    @property
    def max_object_keys(self) -> int:
        """Maximum number of keys in an object."""
        assert self.structure_limits is not None
        return self.structure_limits.max_object_keys

    @property
    def max_array_items(self) -> int:
        """Maximum number of items in an array."""
        assert self.structure_limits is not None
        return self.structure_limits.max_array_items

    @property
    def max_total_items(self) -> int:
        """Maximum total values across all structures."""
        assert self.structure_limits is not None
        return self.structure_limits.max_total_items


@dataclass
class ParsingBehavior:
    """Core parsing behavior settings."""
    decode_escapes: bool = False
    allow_trailing_data: bool = False


@dataclass
class ErrorReporting:
    """Error reporting and context settings."""
    include_position: bool = True
    include_context: bool = True
    max_error_context: int = 50


@dataclass
class ParseConfig:
    """Configuration options for jsontrace parsing."""

    limits: Optional[ParseLimits] = None
    behavior: Optional[ParsingBehavior] = None
    error_reporting: Optional[ErrorReporting] = None
    logger: Optional[logging.Logger] = None

    def __init__(
        self,
        *,
        limits: Optional[ParseLimits] = None,
        behavior: Optional[ParsingBehavior] = None,
        error_reporting: Optional[ErrorReporting] = None,
        logger: Optional[logging.Logger] = None,
        **config_options: Any,
    ):
        self.limits = limits or ParseLimits()
        self.logger = logger

        if behavior is not None:
            self.behavior = behavior
        else:
            self.behavior = ParsingBehavior(
                decode_escapes=config_options.pop("decode_escapes", False),
                allow_trailing_data=config_options.pop("allow_trailing_data", False),
            )

        if error_reporting is not None:
            self.error_reporting = error_reporting
        else:
            self.error_reporting = ErrorReporting(
                include_position=config_options.pop("include_position", True),
                include_context=config_options.pop("include_context", True),
                max_error_context=config_options.pop("max_error_context", 50),
            )

        if config_options:
            raise TypeError(
                f"Unknown option(s): {', '.join(sorted(config_options))}"
            )

    @property
    def decode_escapes(self) -> bool:
        """Whether string escapes are decoded instead of kept verbatim."""
        assert self.behavior is not None
        return self.behavior.decode_escapes

    @decode_escapes.setter
    def decode_escapes(self, value: bool) -> None:
        assert self.behavior is not None
        self.behavior.decode_escapes = value

    @property
    def allow_trailing_data(self) -> bool:
        """Whether text after the root value is left unparsed."""
        assert self.behavior is not None
        return self.behavior.allow_trailing_data

    @allow_trailing_data.setter
    def allow_trailing_data(self, value: bool) -> None:
        assert self.behavior is not None
        self.behavior.allow_trailing_data = value

    @property
    def include_position(self) -> bool:
        """Whether to include position information in errors."""
        assert self.error_reporting is not None
        return self.error_reporting.include_position

    @include_position.setter
    def include_position(self, value: bool) -> None:
        assert self.error_reporting is not None
        self.error_reporting.include_position = value

    @property
    def include_context(self) -> bool:
        """Whether to include context information in errors."""
        assert self.error_reporting is not None
        return self.error_reporting.include_context

    @include_context.setter
    def include_context(self, value: bool) -> None:
        assert self.error_reporting is not None
        self.error_reporting.include_context = value

    @property
    def max_error_context(self) -> int:
        """Maximum characters of context to include in errors."""
        assert self.error_reporting is not None
        return self.error_reporting.max_error_context

    @max_error_context.setter
    def max_error_context(self, value: int) -> None:
        assert self.error_reporting is not None
        self.error_reporting.max_error_context = value
