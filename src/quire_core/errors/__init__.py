"""Quire error handling - Structured errors with context."""

from .errors import ErrorCategory, ErrorTemplate, QuireError
from .factory import ErrorFactory, create_error, get_error_factory
from .registry import ErrorRegistry

__all__ = [
    # Core error types
    "QuireError",
    "ErrorCategory",
    "ErrorTemplate",
    # Registry and factory
    "ErrorRegistry",
    "ErrorFactory",
    # Convenience functions
    "get_error_factory",
    "create_error",
]
