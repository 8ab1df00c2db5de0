"""Layout composition with {{@yield}}.

A child page defines ``{{@yield "name"}}content{{/yield}}`` blocks and then
pulls in a layout through a partial. The layout declares the same names,
either as definitions with default content or as bare insertion points.
"""

from quire_core.logging import get_logger

from ..parser import replace_spans, scan_yields
from ..types import RenderState


class YieldProcessor:
    """Extract child yield blocks and insert them at the layout's yield points."""

    def __init__(self) -> None:
        self._logger = get_logger("template.yield")

    def extract(self, template: str, state: RenderState) -> str:
        """Remove yield definitions from the child template into ``state.yields``.

        Bare insertion points are left in place for :meth:`insert`.

        Args:
            template: Child template
            state: Render state receiving the extracted blocks

        Returns:
            Template without its yield definitions
        """
        replacements: list[tuple[int, int, str]] = []
        for tag in scan_yields(template):
            if not tag.is_definition:
                continue
            state.yields[tag.name] = (tag.inner or "").strip()
            self._logger.debug("Extracted yield block", block=tag.name)
            replacements.append((tag.start, tag.end, ""))

        return replace_spans(template, replacements)

    def insert(self, template: str, state: RenderState) -> str:
        """Resolve the layout's yield definitions and insertion points.

        A definition keeps its default content and has any child block of
        the same name appended after it. A bare insertion point becomes the
        child block, or nothing.

        Args:
            template: Template with the layout expanded
            state: Render state holding the extracted blocks

        Returns:
            Template with yields resolved
        """
        if state.yields:
            self._logger.debug("Available yield blocks", blocks=sorted(state.yields))

        replacements: list[tuple[int, int, str]] = []
        for tag in scan_yields(template):
            custom = state.yields.get(tag.name)
            if tag.is_definition:
                default = tag.inner or ""
                if custom is not None:
                    self._logger.debug("Inserting custom content in block", block=tag.name)
                    replacements.append((tag.start, tag.end, default + custom))
                else:
                    self._logger.debug("Using default content for block", block=tag.name)
                    replacements.append((tag.start, tag.end, default))
            else:
                if custom is None:
                    self._logger.debug("No content to insert at point", block=tag.name)
                replacements.append((tag.start, tag.end, custom or ""))

        return replace_spans(template, replacements)
