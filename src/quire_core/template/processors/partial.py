"""Partial inclusion: {{@partial 'name'}} or {{@partial var}}."""

from pathlib import Path

from quire_core.logging import get_logger

from ..context import ContextResolver
from ..html import stringify
from ..parser import PARTIAL
from ..types import RenderState

DEFAULT_MAX_SUBSTITUTIONS = 50


class PartialProcessor:
    """Splice partial templates in place of their directives.

    Partials are plain text inclusion: they see the same context as the
    including template, and any directives they contain are processed by
    the later phases.
    """

    def __init__(
        self,
        resolver: ContextResolver,
        templates_dir: str | Path,
        partials_dir: str = "partials",
        max_substitutions: int = DEFAULT_MAX_SUBSTITUTIONS,
    ):
        self._resolver = resolver
        self.templates_dir = Path(templates_dir)
        self.partials_dir = partials_dir
        self.max_substitutions = max_substitutions
        self._logger = get_logger("template.partial")

    @property
    def partials_path(self) -> Path:
        return self.templates_dir / self.partials_dir

    def partial_path(self, partial_name: str) -> Path:
        """File path for a partial name, adding ``.html`` when absent."""
        if not partial_name.endswith(".html"):
            partial_name = f"{partial_name}.html"
        return self.partials_path / partial_name

    def resolve(self, template: str, state: RenderState) -> str:
        """Expand every partial directive in ``template``.

        Scanning resumes at the insertion point after each substitution, so
        partials included by a partial are expanded as well. Missing or
        unreadable partials are replaced with nothing.

        Args:
            template: Full template string
            state: Render state (context for variable partial names)

        Returns:
            Template with partials expanded
        """
        result = template
        substitutions = 0
        pos = 0

        while (match := PARTIAL.search(result, pos)) is not None:
            substitutions += 1
            if substitutions > self.max_substitutions:
                self._logger.error(
                    f"Maximum number of iterations ({self.max_substitutions}) exceeded in partials. "
                    "Possible infinite loop detected.",
                    template=state.template_name,
                )
                state.report("ITERATION_LIMIT_EXCEEDED", limit=self.max_substitutions, phase="partials")
                break

            content = self._load(match.group(1), match.group(2), state)
            result = result[: match.start()] + content + result[match.end() :]
            pos = match.start()

        return result

    def _load(self, literal_name: str | None, variable: str | None, state: RenderState) -> str:
        if literal_name:
            partial_name = literal_name
        else:
            resolved = self._resolver.resolve_path(state.context, variable or "", state.frame)
            if resolved is None:
                self._logger.warning("Variable not found for partial directive", path=variable)
                state.report("PARTIAL_NAME_UNRESOLVED", path=variable)
                return ""
            partial_name = stringify(resolved)

        path = self.partial_path(partial_name)
        self._logger.debug("Loading partial", partial=partial_name)

        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            self._logger.warning("Partial template not found", partial=partial_name, location=str(path))
            state.report("PARTIAL_NOT_FOUND", partial=partial_name, location=str(path))
        except (OSError, UnicodeDecodeError) as e:
            self._logger.warning("Error loading partial", partial=partial_name, error=str(e))
            state.report("PARTIAL_READ_ERROR", partial=partial_name, detail=str(e))
        return ""
