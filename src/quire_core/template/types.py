"""Template engine type definitions."""

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any

from quire_core.errors import QuireError, create_error
from quire_core.types import Severity


@dataclass
class RenderState:
    """Call-scoped state for one render.

    Created per ``render`` call and passed to every processor, so a single
    engine instance can render several pages at once.
    """

    context: dict[str, Any]  # Page data plus injected helpers
    template_name: str | None = None  # For diagnostics only
    frames: list[dict[str, Any]] = field(default_factory=list)  # Loop frame stack
    yields: dict[str, str] = field(default_factory=dict)  # Child-supplied yield blocks
    diagnostics: list[QuireError] = field(default_factory=list)

    @property
    def frame(self) -> dict[str, Any] | None:
        """Active (innermost) loop frame, if any."""
        return self.frames[-1] if self.frames else None

    @property
    def scope(self) -> dict[str, Any]:
        """Innermost scope: the active frame, or the context."""
        return self.frames[-1] if self.frames else self.context

    @contextmanager
    def push_frame(self, frame: dict[str, Any]) -> Iterator[dict[str, Any]]:
        """Make ``frame`` active for the duration of the block."""
        self.frames.append(frame)
        try:
            yield frame
        finally:
            self.frames.pop()

    def report(self, code: str, **context: Any) -> QuireError:
        """Record a diagnostic and return it."""
        context.setdefault("template", self.template_name)
        error = create_error(code, **context)
        self.diagnostics.append(error)
        return error


@dataclass
class RenderResult:
    """Result of rendering a template."""

    output: str  # Rendered markup
    diagnostics: list[QuireError] = field(default_factory=list)

    def errors_at(self, severity: Severity) -> list[QuireError]:
        """Diagnostics at ``severity`` or above."""
        return [d for d in self.diagnostics if d.severity.at_least(severity)]

    @property
    def has_errors(self) -> bool:
        return bool(self.errors_at(Severity.ERROR))
