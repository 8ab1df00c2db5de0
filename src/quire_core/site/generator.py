"""Site generator: page sources in, rendered HTML files out."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from quire_core.config import QuireConfig, deep_merge
from quire_core.errors import QuireError, create_error
from quire_core.logging import configure_logging, get_logger
from quire_core.template import TemplateEngine

from .parser import FrontmatterParser, PageParser

INDEX_PAGE = "index.html"
PAGE_SUFFIX = ".md"


@dataclass
class PageResult:
    """Outcome of building one page."""

    source: Path
    output: Path
    layout: str
    diagnostics: list[QuireError] = field(default_factory=list)


def page_depth(output_name: str) -> int:
    """Directory depth of an output file relative to the site root.

    ``index.html`` is 0 and ``about/index.html`` is 1.
    """
    if output_name == INDEX_PAGE:
        return 0
    return output_name.count("/")


class SiteGenerator:
    """Build pages by rendering each source through its layout template."""

    def __init__(
        self,
        config: QuireConfig | None = None,
        engine: TemplateEngine | None = None,
        parser: PageParser | None = None,
    ):
        """Initialize generator.

        Args:
            config: Quire configuration (defaults to QuireConfig()); its
                logging section is applied to every Quire logger
            engine: Template engine (defaults to one built from config.templates)
            parser: Page parser (defaults to FrontmatterParser())
        """
        if config is not None:
            configure_logging(config.logging)
        self.config = config or QuireConfig()
        self.engine = engine or TemplateEngine(self.config.templates)
        self.parser = parser or FrontmatterParser()
        self._logger = get_logger("site")

    @property
    def pages_dir(self) -> Path:
        return Path(self.config.build.pages_dir)

    @property
    def output_dir(self) -> Path:
        return Path(self.config.build.output_dir)

    def build_page(self, source_name: str, output_name: str = INDEX_PAGE) -> PageResult:
        """Build a single page.

        Args:
            source_name: Page file name inside the pages directory
            output_name: Output path relative to the output directory

        Returns:
            PageResult with the written path and render diagnostics

        Raises:
            QuireError: If the page cannot be parsed or its layout is missing
        """
        source = self.pages_dir / source_name
        self._logger.info("Building page", source=str(source), output=output_name)

        page = self.parser.parse(source)

        layout = str(page.data.get("theme") or self.config.build.default_layout)
        layout_path = self.engine.templates_dir / f"{layout}.html"
        try:
            template = layout_path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise create_error("TEMPLATE_NOT_FOUND", template=str(layout_path)) from e

        context: dict[str, Any] = deep_merge(self.config.build.site, page.data)
        context["content"] = page.content
        context["page_depth"] = page_depth(output_name)
        context["current_page"] = Path(source_name).stem

        result = self.engine.render_result(template, context, template_name=source_name)
        if self.engine.config.strict:
            failures = result.errors_at(self.engine.config.strict_severity)
            if failures:
                raise failures[0]

        output = self.output_dir / output_name
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(result.output, encoding="utf-8")
        self._logger.info("HTML written", output=str(output), diagnostics=len(result.diagnostics))

        return PageResult(
            source=source,
            output=output,
            layout=layout,
            diagnostics=result.diagnostics,
        )

    def build_all(self) -> list[PageResult]:
        """Build every page in the pages directory.

        ``index.md`` is written to ``index.html``; any other ``<name>.md``
        is written to ``<name>/index.html`` for clean URLs.

        Returns:
            One PageResult per page, in file name order
        """
        self._logger.info("Building all pages", pages_dir=str(self.pages_dir))

        sources = sorted(p.name for p in self.pages_dir.glob(f"*{PAGE_SUFFIX}")) if self.pages_dir.is_dir() else []
        if not sources:
            self._logger.error("No page files found in directory", pages_dir=str(self.pages_dir))
            return []

        results = []
        for source_name in sources:
            if source_name == f"index{PAGE_SUFFIX}":
                output_name = INDEX_PAGE
            else:
                output_name = f"{source_name.removesuffix(PAGE_SUFFIX)}/{INDEX_PAGE}"
            results.append(self.build_page(source_name, output_name))

        self._logger.info("Build of all pages completed", pages=len(results))
        return results
