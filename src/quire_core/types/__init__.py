"""Shared types for Quire.

Import from here rather than submodules:
    from quire_core.types import LogLevel, Severity, ValidationResult
"""

from .enums import LogFormat, LogLevel, Severity
from .validation import ValidationIssue, ValidationResult

__all__ = [
    # Enums
    "LogLevel",
    "LogFormat",
    "Severity",
    # Validation
    "ValidationIssue",
    "ValidationResult",
]
