"""Page source parsing.

Markdown conversion is not done here: the body after the frontmatter is
handed to the template engine as a pre-rendered HTML fragment. Plug a
different :class:`PageParser` into the generator to convert markdown.
"""

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol

import yaml

from quire_core.errors import create_error

_FRONTMATTER = re.compile(r"\A---[ \t]*\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n|\Z)", re.DOTALL)


@dataclass
class ParsedPage:
    """Structured page data plus its HTML body."""

    data: dict[str, Any] = field(default_factory=dict)
    content: str = ""


class PageParser(Protocol):
    """Turns a source file into page data and an HTML fragment."""

    def parse(self, path: Path) -> ParsedPage: ...


class FrontmatterParser:
    """Split a leading ``---`` YAML block from the page body."""

    def parse(self, path: Path) -> ParsedPage:
        """Parse a page file.

        Args:
            path: Page source file

        Returns:
            ParsedPage with frontmatter data and the remaining body

        Raises:
            QuireError(PAGE_PARSE_ERROR): If the file is unreadable or the
                frontmatter is not a YAML mapping
        """
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise create_error("PAGE_PARSE_ERROR", template=str(path), detail=str(e)) from e
        return self.parse_text(text, source=str(path))

    def parse_text(self, text: str, source: str | None = None) -> ParsedPage:
        """Parse page text that may start with YAML frontmatter."""
        match = _FRONTMATTER.match(text)
        if match is None:
            return ParsedPage(data={}, content=text)

        try:
            data = yaml.safe_load(match.group(1)) or {}
        except yaml.YAMLError as e:
            raise create_error(
                "PAGE_PARSE_ERROR",
                template=source,
                detail=f"Invalid YAML frontmatter: {e}",
            ) from e

        if not isinstance(data, dict):
            raise create_error(
                "PAGE_PARSE_ERROR",
                template=source,
                detail="Frontmatter must be a mapping",
            )

        return ParsedPage(data=data, content=text[match.end() :])
