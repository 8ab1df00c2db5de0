"""Quire site generation - Page sources rendered through layout templates."""

from .generator import PageResult, SiteGenerator, page_depth
from .parser import FrontmatterParser, PageParser, ParsedPage

__all__ = [
    "SiteGenerator",
    "PageResult",
    "page_depth",
    "PageParser",
    "FrontmatterParser",
    "ParsedPage",
]
