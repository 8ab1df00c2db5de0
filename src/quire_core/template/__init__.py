"""Template Engine for Quire pages."""

from .context import ContextResolver
from .engine import TemplateEngine
from .html import escape_html
from .parser import ParsedAttributes, parse_attributes
from .types import RenderResult, RenderState

__all__ = [
    "TemplateEngine",
    "ContextResolver",
    "RenderResult",
    "RenderState",
    "ParsedAttributes",
    "parse_attributes",
    "escape_html",
]
