"""Quire error types."""

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from quire_core.types import Severity


class ErrorCategory(str, Enum):
    """Error source categories."""

    TEMPLATE = "TEMPLATE"
    PARTIAL = "PARTIAL"
    CONFIG = "CONFIG"
    BUILD = "BUILD"
    SYSTEM = "SYSTEM"


@dataclass
class QuireError(Exception):
    """Structured error with context. Base exception for all Quire errors.

    Rendering never raises these by default; they are collected as
    diagnostics on the render result instead. The config loader and the
    site generator raise them for fatal conditions.
    """

    # Identity
    code: str  # e.g., "PARTIAL_NOT_FOUND"
    category: ErrorCategory

    # Messages
    message: str  # Human-readable summary
    detail: str | None = None  # Extended explanation
    suggestion: str | None = None  # Actionable fix

    severity: Severity = Severity.ERROR

    # Context
    template: str | None = None  # Template or page being rendered
    partial: str | None = None  # Partial involved, if any
    path: str | None = None  # Variable path involved, if any

    cause: "QuireError | None" = None

    # Metadata
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        """Set Exception message."""
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for reports and logs; the cause nests as its own dict."""
        return {
            "code": self.code,
            "category": self.category.value,
            "severity": self.severity.value,
            "message": self.message,
            "detail": self.detail,
            "suggestion": self.suggestion,
            "template": self.template,
            "partial": self.partial,
            "path": self.path,
            "timestamp": self.timestamp.isoformat(),
            "cause": self.cause.to_dict() if self.cause else None,
        }

    def with_context(
        self,
        template: str | None = None,
        partial: str | None = None,
        path: str | None = None,
    ) -> "QuireError":
        """Copy of this error; only the locations given replace the current ones."""
        return replace(
            self,
            template=template or self.template,
            partial=partial or self.partial,
            path=path or self.path,
        )


@dataclass
class ErrorTemplate:
    """Template for creating errors."""

    code: str
    category: ErrorCategory
    message_template: str  # "Partial '{partial}' not found"
    detail_template: str | None = None
    suggestion_template: str | None = None
    default_severity: Severity = Severity.ERROR
