"""Context resolution for template directives."""

import re
from collections.abc import Mapping
from typing import Any

from quire_core.logging import get_logger

_INDEXED_SEGMENT = re.compile(r"^([^\[\]]*)((?:\[\d+\])+)$")

_MISSING = object()


def _lookup(source: Any, key: str) -> Any:
    """Single-key access on a map, or integer index on a sequence."""
    if isinstance(source, Mapping):
        return source.get(key, _MISSING)
    if isinstance(source, (list, tuple)):
        try:
            index = int(key)
        except ValueError:
            return _MISSING
        if -len(source) <= index < len(source):
            return source[index]
    return _MISSING


def _split_path(path: str) -> list[str]:
    """Split ``a.b[0].c`` into ``["a", "b", "0", "c"]``."""
    segments: list[str] = []
    for part in path.split("."):
        indexed = _INDEXED_SEGMENT.match(part)
        if indexed:
            if indexed.group(1):
                segments.append(indexed.group(1))
            segments.extend(re.findall(r"\[(\d+)\]", indexed.group(2)))
        else:
            segments.append(part)
    return segments


class ContextResolver:
    """Resolve variable paths against a context and the active loop frame.

    Lookup order for a key is: the active frame, the context itself, then
    the properties of ``context["this"]`` when it is a map. The resolver
    holds no per-render state; the frame is always passed in.
    """

    def __init__(self) -> None:
        self._logger = get_logger("template.context")

    def _lookup_root(self, context: Mapping[str, Any], key: str, frame: Mapping[str, Any] | None) -> Any:
        if frame is not None and key in frame:
            return frame[key]
        if key in context:
            return context[key]
        this = context.get("this")
        if isinstance(this, Mapping) and key in this:
            return this[key]
        return _MISSING

    def resolve_path(
        self,
        context: Mapping[str, Any],
        path: str,
        frame: Mapping[str, Any] | None = None,
    ) -> Any:
        """Resolve a variable path.

        Args:
            context: Render context
            path: Key, dotted path (``a.b.c``) or indexed path (``a.items[0]``)
            frame: Active loop frame, if any

        Returns:
            Resolved value, or None when any segment is missing
        """
        path = path.strip()
        if not path:
            return None

        if path == "this":
            if frame is not None:
                return frame.get("this")
            return context.get("this")

        value = self._lookup_root(context, path, frame)
        if value is not _MISSING:
            return value

        segments = _split_path(path)
        if len(segments) == 1:
            return None

        current = self._lookup_root(context, segments[0], frame)
        for segment in segments[1:]:
            if current is _MISSING or current is None:
                return None
            current = _lookup(current, segment)

        return None if current is _MISSING else current

    def get_array(
        self,
        context: Mapping[str, Any],
        path: str,
        frame: Mapping[str, Any] | None = None,
    ) -> list[Any]:
        """Resolve a path to a sequence for iteration.

        - a list or tuple is used as-is
        - a map holding a sequence under the same name is unwrapped
        - any other non-null value is wrapped as a one-element list
        - a missing value yields an empty list

        Args:
            context: Render context
            path: Path to the sequence
            frame: Active loop frame, if any

        Returns:
            Items to iterate over
        """
        value = self.resolve_path(context, path, frame)

        if isinstance(value, (list, tuple)):
            return list(value)

        if isinstance(value, Mapping):
            name = _split_path(path.strip())[-1]
            nested = value.get(name)
            if isinstance(nested, (list, tuple)):
                self._logger.debug("Unwrapped same-named sequence", path=path)
                return list(nested)

        if value is None:
            self._logger.debug("Could not find array", path=path)
            return []

        return [value]

    def build_frame(
        self,
        item: Any,
        path: str,
        parent: Mapping[str, Any],
        index: int,
    ) -> dict[str, Any]:
        """Create the frame for one loop item.

        The frame holds the item as ``this``, the item's own keys when it is
        a map, every parent key not already present except the loop's own
        path, and the 1-based ``@index``.

        Args:
            item: Current item
            path: Path of the sequence being iterated
            parent: Enclosing scope (outer frame, or the context)
            index: 1-based position of the item

        Returns:
            New frame
        """
        frame: dict[str, Any] = {"this": item}
        if isinstance(item, Mapping):
            frame.update(item)
        for key, value in parent.items():
            if key not in frame and key != path:
                frame[key] = value
        frame["@index"] = index
        return frame
