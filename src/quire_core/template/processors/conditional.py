"""Conditional blocks: {{@if path}}...{{/if}} (legacy {{#if path}})."""

import math
from collections.abc import Mapping
from typing import Any

from quire_core.logging import get_logger

from ..context import ContextResolver
from ..parser import IF_CLOSE, IF_OPEN, find_block
from ..types import RenderState

DEFAULT_MAX_ITERATIONS = 100


def is_truthy(value: Any) -> bool:
    """Truthiness of a resolved condition.

    Sequences are truthy when non-empty. ``None``, ``""``, zero, NaN and
    ``False`` are falsy. Maps are always truthy, even when empty.
    """
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, (list, tuple)):
        return len(value) > 0
    if isinstance(value, Mapping):
        return True
    if isinstance(value, float):
        return value != 0 and not math.isnan(value)
    if isinstance(value, (int, str)):
        return bool(value)
    return True


def _loggable(value: Any) -> Any:
    if isinstance(value, str) and len(value) > 100:
        return f"[String: {len(value)} chars]"
    return value


class ConditionalProcessor:
    """Keep or drop conditional blocks. There is no else branch."""

    def __init__(self, resolver: ContextResolver, max_iterations: int = DEFAULT_MAX_ITERATIONS):
        self._resolver = resolver
        self.max_iterations = max_iterations
        self._logger = get_logger("template.conditional")

    def process(self, template: str, state: RenderState) -> str:
        """Resolve every conditional block in ``template``.

        A truthy block keeps its inner content verbatim; a falsy block is
        removed along with its tags. Scanning restarts from the top after
        each replacement so nested conditionals are handled in turn.

        Args:
            template: Full template string
            state: Render state (context and active frame)

        Returns:
            Template with conditionals resolved
        """
        result = template
        iterations = 0

        while (block := find_block(result, IF_OPEN, IF_CLOSE)) is not None:
            iterations += 1
            if iterations > self.max_iterations:
                self._logger.error(
                    f"Maximum number of iterations ({self.max_iterations}) exceeded in conditionals. "
                    "Possible infinite loop detected.",
                    template=state.template_name,
                )
                state.report("ITERATION_LIMIT_EXCEEDED", limit=self.max_iterations, phase="conditionals")
                break

            value = self._resolver.resolve_path(state.context, block.argument, state.frame)
            truthy = is_truthy(value)
            self._logger.debug(
                "Evaluated condition",
                condition=block.argument,
                value=_loggable(value),
                truthy=truthy,
            )

            replacement = block.inner if truthy else ""
            result = result[: block.start] + replacement + result[block.end :]

        return result
