"""Canvas elements: {{@canvas width height #id .class var1 var2}}."""

import re
from typing import Any

from quire_core.logging import get_logger

from ..context import ContextResolver
from ..html import sanitize_for_data_attribute
from ..parser import CANVAS, parse_attributes
from ..types import RenderState

DEFAULT_WIDTH = "300"
DEFAULT_HEIGHT = "150"

_CAMEL_BOUNDARY = re.compile(r"([a-z])([A-Z])")


def _is_number(token: str) -> bool:
    try:
        float(token)
    except ValueError:
        return False
    return True


def kebab_case(name: str) -> str:
    """``particleCount`` → ``particle-count``."""
    return _CAMEL_BOUNDARY.sub(r"\1-\2", name).lower()


class CanvasProcessor:
    """Emit ``<canvas>`` elements whose ``data-*`` attributes carry context values."""

    def __init__(self, resolver: ContextResolver):
        self._resolver = resolver
        self._logger = get_logger("template.canvas")

    def process(self, template: str, state: RenderState) -> str:
        """Replace every canvas directive with a canvas element."""

        def replace(match: re.Match[str]) -> str:
            return self.render_canvas(match.group(1), state)

        return CANVAS.sub(replace, template)

    def render_canvas(self, arguments: str, state: RenderState) -> str:
        """Build one canvas element from its directive arguments.

        The first token is the width when numeric or a percentage; once a
        width is taken, the next token is the height when numeric, a
        percentage or a viewport unit. Remaining tokens name variables.
        """
        parsed = parse_attributes(arguments)
        tokens = parsed.tokens

        width, height = DEFAULT_WIDTH, DEFAULT_HEIGHT
        if tokens and (tokens[0].endswith("%") or _is_number(tokens[0])):
            width = tokens.pop(0)
            if tokens and (tokens[0].endswith(("%", "vh", "vw")) or _is_number(tokens[0])):
                height = tokens.pop(0)

        attributes = f'width="{width}" height="{height}"'

        style = ""
        if width.endswith("%"):
            style += f"width:{width};"
        if height.endswith(("%", "vh", "vw")):
            style += f"height:{height};"
        if style:
            attributes += f' style="{style}"'

        attributes += parsed.to_html()

        data_attributes = [
            attribute
            for attribute in (self._data_attribute(token, state) for token in tokens)
            if attribute
        ]
        if data_attributes:
            attributes += " " + " ".join(data_attributes)

        self._logger.debug("Creating canvas element", attributes=attributes)
        return f"<canvas {attributes}></canvas>"

    def _data_attribute(self, variable: str, state: RenderState) -> str:
        value: Any = self._resolver.resolve_path(state.context, variable, state.frame)
        if value is None:
            self._logger.debug("Canvas variable not found", path=variable)
            return ""
        return f"data-{kebab_case(variable)}={sanitize_for_data_attribute(value)}"
