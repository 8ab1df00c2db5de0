"""
Pytest configuration and shared fixtures for Quire tests.
"""

import sys
from collections.abc import Callable, Generator
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from quire_core.logging import reset_loggers  # noqa: E402
from quire_core.template import TemplateEngine  # noqa: E402


# =============================================================================
# Path Fixtures
# =============================================================================


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture(scope="session")
def tests_dir() -> Path:
    """Return the tests directory."""
    return Path(__file__).parent


# =============================================================================
# Template Fixtures
# =============================================================================


@pytest.fixture
def templates_dir(tmp_path: Path) -> Path:
    """Templates directory with an empty partials folder."""
    root = tmp_path / "templates"
    (root / "partials").mkdir(parents=True)
    return root


@pytest.fixture
def write_partial(templates_dir: Path) -> Callable[[str, str], Path]:
    """Write a partial template file and return its path."""

    def _write(name: str, content: str) -> Path:
        path = templates_dir / "partials" / f"{name}.html"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def engine(templates_dir: Path) -> TemplateEngine:
    """Template engine rooted at the temporary templates directory."""
    return TemplateEngine(templates_dir=templates_dir)


# =============================================================================
# Logging Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_logger_state() -> Generator[None, None, None]:
    """Reset logger state before and after each test."""
    reset_loggers()
    yield
    reset_loggers()


# =============================================================================
# Markers Configuration
# =============================================================================


def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "property: Property-based tests")
    config.addinivalue_line("markers", "slow: Slow tests")


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption("--run-slow", action="store_true", default=False, help="Run slow tests")


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless --run-slow is given."""
    if config.getoption("--run-slow"):
        return
    skip_slow = pytest.mark.skip(reason="need --run-slow option to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)
