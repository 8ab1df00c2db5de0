"""Template Engine implementation."""

from collections.abc import Callable
from dataclasses import replace
from pathlib import Path
from typing import Any

from opentelemetry import trace

from quire_core.config.models import TemplateConfig
from quire_core.logging import get_logger

from .context import ContextResolver
from .helpers import make_helpers, page_depth_of
from .parser import extract_references, has_directives, strip_directives, validate_syntax
from .processors import (
    ConditionalProcessor,
    EachProcessor,
    PartialProcessor,
    VariableProcessor,
    YieldProcessor,
)
from .types import RenderResult, RenderState

Phase = Callable[[str, RenderState], str]


def _loggable_context(context: dict[str, Any]) -> dict[str, Any]:
    """Context summary for debug logs, without large HTML bodies."""
    loggable = dict(context)
    content = loggable.get("content")
    if isinstance(content, str) and len(content) > 100:
        loggable["content"] = f"[HTML content: {len(content)} chars]"
    return loggable


class TemplateEngine:
    """Render page templates against their data.

    Supports:
    - Variables: {{ title }}, {{ author.name }}, raw {{{ content }}}
    - Conditionals: {{@if tags}}...{{/if}}
    - Loops: {{@each posts}}{{title}} #{{@index}}{{/each}}
    - Partials: {{@partial 'header'}}, {{@partial layout_name}}
    - Layout yields: {{@yield "head"}}...{{/yield}}
    - Lists and canvases: {{@ul #nav .menu links}}, {{@canvas 100% 50vh #scene speed}}
    - Path helpers: {{@assetPath 'style.css'}}, {{@urlPath 'about'}}

    Does NOT support:
    - else/elif branches
    - Expressions in conditions
    - Template caching or pre-compilation

    Each render runs a fixed sequence of phases over the whole string:
    extract yields, partials, insert yields, partials again, loops,
    conditionals, variables, then a cleanup of leftover directive syntax.
    """

    def __init__(
        self,
        config: TemplateConfig | None = None,
        templates_dir: str | Path | None = None,
    ) -> None:
        """Initialize template engine.

        Args:
            config: Template configuration (defaults to TemplateConfig())
            templates_dir: Overrides ``config.templates_dir``
        """
        self.config = config or TemplateConfig()
        if templates_dir is not None:
            self.config = replace(self.config, templates_dir=str(templates_dir))

        self._resolver = ContextResolver()
        self._yields = YieldProcessor()
        self._partials = PartialProcessor(
            self._resolver,
            templates_dir=self.config.templates_dir,
            partials_dir=self.config.partials_dir,
            max_substitutions=self.config.max_partial_substitutions,
        )
        self._conditionals = ConditionalProcessor(
            self._resolver,
            max_iterations=self.config.max_conditional_iterations,
        )
        self._variables = VariableProcessor(self._resolver)
        self._each = EachProcessor(
            self._resolver,
            self._conditionals,
            self._variables,
            max_iterations=self.config.max_each_iterations,
        )

        self._phases: list[tuple[str, Phase]] = [
            ("extract_yields", self._yields.extract),
            ("partials", self._partials.resolve),
            ("insert_yields", self._yields.insert),
            ("yield_partials", self._partials.resolve),
            ("each", self._each.process),
            ("conditionals", self._conditionals.process),
            ("variables", self._variables.process),
        ]

        self._tracer = trace.get_tracer(__name__)
        self._logger = get_logger("template.engine")
        self._logger.debug("Initialized template engine", templates_dir=self.config.templates_dir)

    @property
    def templates_dir(self) -> Path:
        return Path(self.config.templates_dir)

    def render(
        self,
        template: str,
        context: dict[str, Any],
        template_name: str | None = None,
    ) -> str:
        """Render a template to markup.

        Never raises unless ``config.strict`` is set; problems are logged
        and substituted with empty output.

        Args:
            template: Template string
            context: Page data (frontmatter fields, ``content``, ``page_depth``)
            template_name: Optional name used in logs and diagnostics

        Returns:
            Rendered markup
        """
        if self.config.strict:
            return self.render_strict(template, context, template_name)
        return self.render_result(template, context, template_name).output

    def render_strict(
        self,
        template: str,
        context: dict[str, Any],
        template_name: str | None = None,
    ) -> str:
        """Render a template, failing on diagnostics.

        Raises:
            QuireError: The first diagnostic at ``config.strict_severity`` or above
        """
        result = self.render_result(template, context, template_name)
        failures = result.errors_at(self.config.strict_severity)
        if failures:
            raise failures[0]
        return result.output

    def render_result(
        self,
        template: str,
        context: dict[str, Any],
        template_name: str | None = None,
    ) -> RenderResult:
        """Render a template and collect diagnostics.

        Args:
            template: Template string
            context: Page data; never mutated
            template_name: Optional name used in logs and diagnostics

        Returns:
            RenderResult with the markup and every diagnostic raised on the way
        """
        depth = page_depth_of(context)
        state = RenderState(
            context={**context, **make_helpers(depth)},
            template_name=template_name,
        )

        with self._tracer.start_as_current_span("template.render") as span:
            span.set_attribute("template.length", len(template))
            span.set_attribute("template.page_depth", depth)
            if template_name:
                span.set_attribute("template.name", template_name)

            self._logger.debug(
                "Starting template processing",
                template=template_name,
                context=_loggable_context(context),
            )

            output = template
            for phase_name, phase in self._phases:
                if not has_directives(output):
                    break
                output = self._run_phase(phase_name, phase, output, state)

            output = strip_directives(output)
            span.set_attribute("template.diagnostics", len(state.diagnostics))

        return RenderResult(output=output, diagnostics=state.diagnostics)

    def _run_phase(self, phase_name: str, phase: Phase, template: str, state: RenderState) -> str:
        try:
            return phase(template, state)
        except Exception:
            self._logger.exception(
                "Render phase failed",
                phase=phase_name,
                template=state.template_name,
            )
            state.report("RENDER_PHASE_FAILED", phase=phase_name)
            return template

    def validate(self, template: str) -> list[str]:
        """Validate directive syntax without rendering.

        Does NOT check variable existence or partial files.

        Args:
            template: Template string

        Returns:
            List of error messages (empty if valid)
        """
        return validate_syntax(template)

    def extract_references(self, template: str) -> list[str]:
        """Extract all variable paths referenced by a template.

        E.g., "{{@each posts}}{{title}}{{/each}}" → ["posts", "title"]

        Useful for checking page data against a layout.

        Args:
            template: Template string

        Returns:
            List of variable paths
        """
        return extract_references(template)
