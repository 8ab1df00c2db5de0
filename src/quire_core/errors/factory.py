"""Error factory for creating QuireErrors from codes or foreign exceptions."""

from typing import Any

from .errors import QuireError
from .registry import ErrorRegistry


class ErrorFactory:
    """Creates QuireErrors from error codes and arbitrary exceptions."""

    def __init__(self, registry: ErrorRegistry | None = None):
        self.registry = registry or ErrorRegistry()

    def from_exception(
        self,
        error: Exception,
        template: str | None = None,
        **context: Any,
    ) -> QuireError:
        """Convert any exception to QuireError.

        Args:
            error: Exception to convert
            template: Optional template or page name
            **context: Additional context variables

        Returns:
            QuireError instance
        """
        # If already a QuireError, just add context
        if isinstance(error, QuireError):
            return error.with_context(template=template)

        merged = {
            "error_type": type(error).__name__,
            "detail": str(error) or None,
            "template": template,
        }
        merged.update(context)
        return self.registry.create(code="INTERNAL_ERROR", context=merged)

    def create(
        self,
        code: str,
        context: dict[str, Any] | None = None,
        cause: QuireError | None = None,
        **kwargs: Any,
    ) -> QuireError:
        """Create QuireError directly from code.

        Args:
            code: Error code
            context: Context variables for template interpolation
            cause: Optional cause error
            **kwargs: Additional context variables

        Returns:
            QuireError instance
        """
        merged_context = dict(context or {})
        merged_context.update(kwargs)

        return self.registry.create(code=code, context=merged_context, cause=cause)


# Convenience singleton
_default_factory: ErrorFactory | None = None


def get_error_factory() -> ErrorFactory:
    """Get default error factory singleton."""
    global _default_factory  # noqa: PLW0603
    if _default_factory is None:
        _default_factory = ErrorFactory()
    return _default_factory


def create_error(code: str, **context: Any) -> QuireError:
    """Create an error from the default factory; keyword arguments fill the message templates."""
    return get_error_factory().create(code, context)
