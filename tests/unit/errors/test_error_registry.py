"""Unit tests for the error registry and factory."""

import pytest

from quire_core.errors import (
    ErrorCategory,
    ErrorFactory,
    ErrorRegistry,
    ErrorTemplate,
    QuireError,
    create_error,
)
from quire_core.types import Severity

BUILTIN_CODES = {
    "VARIABLE_UNRESOLVED": Severity.INFO,
    "PARTIAL_NOT_FOUND": Severity.WARNING,
    "PARTIAL_NAME_UNRESOLVED": Severity.WARNING,
    "PARTIAL_READ_ERROR": Severity.WARNING,
    "HELPER_FAILED": Severity.WARNING,
    "ITERATION_LIMIT_EXCEEDED": Severity.ERROR,
    "RENDER_PHASE_FAILED": Severity.ERROR,
    "TEMPLATE_NOT_FOUND": Severity.ERROR,
    "PAGE_PARSE_ERROR": Severity.ERROR,
    "CONFIG_INVALID": Severity.ERROR,
    "INTERNAL_ERROR": Severity.ERROR,
}


class TestErrorRegistry:
    """Tests for ErrorRegistry."""

    def test_builtin_codes(self):
        registry = ErrorRegistry()
        assert set(registry.list_codes()) == set(BUILTIN_CODES)

    @pytest.mark.parametrize(("code", "severity"), BUILTIN_CODES.items())
    def test_builtin_severity(self, code, severity):
        assert ErrorRegistry().get_template(code).default_severity == severity

    def test_create_interpolates(self):
        error = ErrorRegistry().create(
            "PARTIAL_NOT_FOUND",
            {"partial": "nav", "location": "/t/partials/nav.html", "template": "index.md"},
        )
        assert error.message == "Partial template not found: nav"
        assert error.detail == "Looked for /t/partials/nav.html"
        assert error.category == ErrorCategory.PARTIAL
        assert error.partial == "nav"
        assert error.template == "index.md"

    def test_detail_override(self):
        error = ErrorRegistry().create("CONFIG_INVALID", {"detail": "bad key"})
        assert error.detail == "bad key"

    def test_missing_context_left_uninterpolated(self):
        error = ErrorRegistry().create("VARIABLE_UNRESOLVED")
        assert error.message == "Variable '{path}' could not be resolved"

    def test_unknown_code(self):
        with pytest.raises(ValueError, match="Unknown error code"):
            ErrorRegistry().create("NOPE")

    def test_register_custom_template(self):
        registry = ErrorRegistry()
        registry.register(
            ErrorTemplate(
                code="FEED_INVALID",
                category=ErrorCategory.BUILD,
                message_template="Feed {name} is invalid",
                default_severity=Severity.WARNING,
            )
        )
        error = registry.create("FEED_INVALID", {"name": "rss"})
        assert error.message == "Feed rss is invalid"
        assert error.severity == Severity.WARNING


class TestQuireError:
    """Tests for QuireError."""

    def test_is_exception_with_message(self):
        error = create_error("TEMPLATE_NOT_FOUND", template="themes/post.html")
        assert isinstance(error, Exception)
        assert str(error) == "Layout template not found: themes/post.html"

    def test_to_dict(self):
        cause = create_error("PARTIAL_NOT_FOUND", partial="a", location="x")
        error = ErrorRegistry().create("RENDER_PHASE_FAILED", {"phase": "partials"}, cause=cause)
        data = error.to_dict()
        assert data["code"] == "RENDER_PHASE_FAILED"
        assert data["category"] == "SYSTEM"
        assert data["severity"] == "error"
        assert data["cause"]["code"] == "PARTIAL_NOT_FOUND"
        assert "T" in data["timestamp"]

    def test_with_context(self):
        error = create_error("VARIABLE_UNRESOLVED", path="title")
        updated = error.with_context(template="about.md")
        assert updated.template == "about.md"
        assert updated.path == "title"
        assert error.template is None


class TestErrorFactory:
    """Tests for ErrorFactory."""

    def test_from_exception(self):
        error = ErrorFactory().from_exception(KeyError("x"), template="index.md")
        assert error.code == "INTERNAL_ERROR"
        assert error.message == "Internal error: KeyError"
        assert error.template == "index.md"

    def test_from_quire_error_keeps_code(self):
        source_error = create_error("CONFIG_INVALID", detail="bad")
        error = ErrorFactory().from_exception(source_error, template="quire.yaml")
        assert error.code == "CONFIG_INVALID"
        assert error.template == "quire.yaml"

    def test_create_merges_kwargs(self):
        error = ErrorFactory().create("HELPER_FAILED", {"helper": "assetPath"}, argument="a.css")
        assert error.message == "Helper 'assetPath' failed"
        assert error.detail == "The helper raised while being called with 'a.css'"
