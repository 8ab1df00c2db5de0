"""Depth-aware path helpers injected into every render context."""

from collections.abc import Callable
from typing import Any


def page_depth_of(context: dict[str, Any]) -> int:
    """Read ``page_depth`` from a context; missing or invalid means 0."""
    try:
        depth = int(context.get("page_depth") or 0)
    except (TypeError, ValueError, OverflowError):
        return 0
    return max(depth, 0)


def depth_prefix(depth: int) -> str:
    """Relative prefix from a page ``depth`` directories deep back to the site root."""
    return "../" * depth if depth > 0 else "./"


def asset_path(path: str, depth: int) -> str:
    """Relative path to a site asset.

    E.g. ``asset_path("style.css", 2)`` → ``"../../style.css"``.
    """
    return f"{depth_prefix(depth)}{path}"


def url_path(path: str, depth: int) -> str:
    """Relative, directory-style URL to a page.

    E.g. ``url_path("/about.html", 1)`` → ``"../about/"``; ``"/"`` and
    ``""`` point at the site root.
    """
    prefix = depth_prefix(depth)
    if path in ("/", ""):
        return prefix

    path = path.removeprefix("/").removesuffix(".html")
    if not path.endswith("/"):
        path += "/"
    return f"{prefix}{path}"


def make_helpers(depth: int) -> dict[str, Callable[[str], str]]:
    """Helpers bound to a page depth, keyed by their directive names."""
    return {
        "assetPath": lambda path: asset_path(path, depth),
        "urlPath": lambda path: url_path(path, depth),
    }
