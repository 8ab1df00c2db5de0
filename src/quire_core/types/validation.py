"""Shared validation types for Quire."""

from dataclasses import dataclass, field


@dataclass
class ValidationIssue:
    """Single validation issue (error or warning)."""

    path: str  # Dotted key, e.g. "templates.max_each_iterations"
    message: str
    severity: str = "error"  # "error" | "warning"

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


@dataclass
class ValidationResult:
    """Issues collected while validating configuration data."""

    errors: list[ValidationIssue] = field(default_factory=list)
    warnings: list[ValidationIssue] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        """True when no errors were recorded; warnings do not count."""
        return not self.errors

    def error(self, path: str, message: str) -> None:
        self.errors.append(ValidationIssue(path=path, message=message))

    def warn(self, path: str, message: str) -> None:
        self.warnings.append(ValidationIssue(path=path, message=message, severity="warning"))
