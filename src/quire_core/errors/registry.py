"""Error registry: error codes mapped to message templates."""

from typing import Any

from quire_core.types import Severity

from .errors import ErrorCategory, ErrorTemplate, QuireError

_T = ErrorCategory.TEMPLATE
_P = ErrorCategory.PARTIAL
_B = ErrorCategory.BUILD

BUILTIN_TEMPLATES: tuple[ErrorTemplate, ...] = (
    # Rendering diagnostics
    ErrorTemplate(
        "VARIABLE_UNRESOLVED",
        _T,
        "Variable '{path}' could not be resolved",
        detail_template="The path did not match any loop item, context key or 'this' property",
        suggestion_template="Check the page frontmatter for a '{path}' field",
        default_severity=Severity.INFO,
    ),
    ErrorTemplate(
        "HELPER_FAILED",
        _T,
        "Helper '{helper}' failed",
        detail_template="The helper raised while being called with '{argument}'",
        default_severity=Severity.WARNING,
    ),
    ErrorTemplate(
        "ITERATION_LIMIT_EXCEEDED",
        _T,
        "Maximum number of iterations ({limit}) exceeded in {phase}",
        detail_template="Possible infinite loop or self-referencing template detected",
        suggestion_template="Look for partials that include themselves or blocks whose output re-emits the directive",
    ),
    ErrorTemplate(
        "PARTIAL_NOT_FOUND",
        _P,
        "Partial template not found: {partial}",
        detail_template="Looked for {location}",
        suggestion_template="Create the partial or fix the name in the @partial directive",
        default_severity=Severity.WARNING,
    ),
    ErrorTemplate(
        "PARTIAL_NAME_UNRESOLVED",
        _P,
        "Variable '{path}' not found for partial directive",
        suggestion_template="Quote the partial name or define '{path}' in the page data",
        default_severity=Severity.WARNING,
    ),
    ErrorTemplate("PARTIAL_READ_ERROR", _P, "Error loading partial {partial}", default_severity=Severity.WARNING),
    ErrorTemplate(
        "RENDER_PHASE_FAILED",
        ErrorCategory.SYSTEM,
        "Render phase '{phase}' failed",
        detail_template="The phase input was carried forward unchanged",
    ),
    ErrorTemplate("INTERNAL_ERROR", ErrorCategory.SYSTEM, "Internal error: {error_type}"),
    # Fatal site build and config errors
    ErrorTemplate(
        "TEMPLATE_NOT_FOUND",
        _B,
        "Layout template not found: {template}",
        suggestion_template="Add the layout to the templates directory or change the page theme",
    ),
    ErrorTemplate("PAGE_PARSE_ERROR", _B, "Failed to parse page: {template}"),
    ErrorTemplate(
        "CONFIG_INVALID",
        ErrorCategory.CONFIG,
        "Configuration is invalid",
        suggestion_template="Check the configuration file against the documented keys",
    ),
)


def _interpolate(text: str | None, context: dict[str, Any]) -> str | None:
    """Format ``text`` with ``context``; placeholders with no value are left as written."""
    if text is None:
        return None
    try:
        return text.format(**context)
    except (KeyError, IndexError):
        return text


class ErrorRegistry:
    """Registry of error templates. Creates errors from templates + context."""

    def __init__(self) -> None:
        self._templates = {template.code: template for template in BUILTIN_TEMPLATES}

    def get_template(self, code: str) -> ErrorTemplate | None:
        return self._templates.get(code)

    def register(self, template: ErrorTemplate) -> None:
        """Register (or replace) an error template."""
        self._templates[template.code] = template

    def list_codes(self) -> list[str]:
        return list(self._templates)

    def create(
        self,
        code: str,
        context: dict[str, Any] | None = None,
        cause: QuireError | None = None,
    ) -> QuireError:
        """Create error instance from template + context.

        A ``detail`` entry in the context overrides the template's detail.
        The ``template``, ``partial`` and ``path`` entries also populate the
        matching fields of the error.

        Raises:
            ValueError: If error code not found
        """
        template = self._templates.get(code)
        if template is None:
            raise ValueError(f"Unknown error code: {code}")

        context = context or {}
        return QuireError(
            code=code,
            category=template.category,
            message=_interpolate(template.message_template, context) or f"Error {code}",
            detail=context.get("detail") or _interpolate(template.detail_template, context),
            suggestion=_interpolate(template.suggestion_template, context),
            severity=template.default_severity,
            template=context.get("template"),
            partial=context.get("partial"),
            path=context.get("path"),
            cause=cause,
        )
