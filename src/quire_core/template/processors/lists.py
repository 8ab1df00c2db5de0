"""List helpers: {{@ul #id .class path}} and {{@ol ...}}."""

import re

from quire_core.logging import get_logger

from ..context import ContextResolver
from ..html import escape_html
from ..parser import LIST, parse_attributes
from ..types import RenderState


class ListProcessor:
    """Render a context sequence as an HTML list."""

    def __init__(self, resolver: ContextResolver):
        self._resolver = resolver
        self._logger = get_logger("template.list")

    def process(self, template: str, state: RenderState) -> str:
        def replace(match: re.Match[str]) -> str:
            list_type = match.group(1)
            parsed = parse_attributes(match.group(2))
            items = self._resolver.resolve_path(state.context, parsed.path, state.frame)

            if not isinstance(items, (list, tuple)):
                self._logger.debug(f"@{list_type} directive: path is not an array", path=parsed.path)
                return ""

            list_items = "".join(f"<li>{escape_html(item)}</li>" for item in items)
            return f"<{list_type}{parsed.to_html()}>{list_items}</{list_type}>"

        return LIST.sub(replace, template)
