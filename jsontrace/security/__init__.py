"""
jsontrace Errors and Security Limits.

This module provides the exception types, error reporting and limits.
"""

from .exceptions import ErrorKind, ErrorReporter, ParseError, SecurityError
from .limits import LimitValidator

__all__ = ['ErrorKind', 'ErrorReporter', 'ParseError', 'SecurityError', 'LimitValidator']
