"""HTML escaping and value stringification."""

import json
import math
from typing import Any

_ESCAPES = (
    ("&", "&amp;"),  # must run first
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&#039;"),
)


def escape_html(value: Any) -> str:
    """Escape HTML special characters.

    ``None`` becomes an empty string; anything else is stringified first.
    """
    if value is None:
        return ""
    text = value if isinstance(value, str) else stringify(value)
    for char, entity in _ESCAPES:
        text = text.replace(char, entity)
    return text


def to_json(value: Any) -> str:
    """Compact JSON, as emitted for maps interpolated into markup."""
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str)


def stringify(value: Any) -> str:
    """Convert a context value to its display string.

    Booleans render as ``true``/``false``, integral floats drop their
    fraction, sequences join with ``,`` and maps become compact JSON.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return str(int(value))
        return str(value)
    if isinstance(value, (list, tuple)):
        return ",".join(stringify(item) for item in value)
    if isinstance(value, dict):
        return to_json(value)
    return str(value)


def join_items(values: list[Any] | tuple[Any, ...]) -> str:
    """Join sequence items for display with ``", "``."""
    return ", ".join(stringify(item) for item in values)


def sanitize_for_data_attribute(value: Any) -> str:
    """Render a value as a quoted, escaped ``data-*`` attribute value."""
    if isinstance(value, (dict, list, tuple)):
        return f'"{escape_html(to_json(value))}"'
    return f'"{escape_html(stringify(value))}"'
