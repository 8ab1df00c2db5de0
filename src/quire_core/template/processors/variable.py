"""Variable interpolation and inline helper directives."""

import re
from collections.abc import Mapping
from typing import Any

from quire_core.logging import get_logger

from ..context import ContextResolver
from ..html import escape_html, join_items, stringify, to_json
from ..parser import HELPER, RAW_VAR, SPECIAL_VAR, VAR
from ..types import RenderState
from .canvas import CanvasProcessor
from .lists import ListProcessor


class VariableProcessor:
    """Interpolate variables and expand inline helper directives.

    Runs, in order: canvas, ``@ul``/``@ol`` lists, ``@assetPath``/``@urlPath``
    helpers, ``{{@name}}`` special variables, raw ``{{{path}}}`` and
    escaped ``{{path}}``. Every interpolated value is escaped exactly once,
    except raw output and helper return values.
    """

    def __init__(self, resolver: ContextResolver):
        self._resolver = resolver
        self._canvas = CanvasProcessor(resolver)
        self._lists = ListProcessor(resolver)
        self._logger = get_logger("template.variable")

    def process(self, template: str, state: RenderState) -> str:
        """Run every variable step over ``template``.

        Args:
            template: Full template string
            state: Render state (context and active frame)

        Returns:
            Template with variables interpolated
        """
        result = self._canvas.process(template, state)
        result = self._lists.process(result, state)
        result = HELPER.sub(lambda m: self._call_helper(m, state), result)
        result = SPECIAL_VAR.sub(lambda m: self._special(m.group(1), state), result)
        result = RAW_VAR.sub(lambda m: self._raw(m.group(1).strip(), state), result)
        result = VAR.sub(lambda m: self._escaped(m.group(1).strip(), state), result)
        return result

    def _resolve(self, path: str, state: RenderState) -> Any:
        return self._resolver.resolve_path(state.context, path, state.frame)

    def _call_helper(self, match: re.Match[str], state: RenderState) -> str:
        helper_name, literal, variable = match.group(1), match.group(2), match.group(3)

        helper = self._resolve(helper_name, state)
        if not callable(helper):
            self._logger.debug(f"Function {helper_name} not found in context")
            return ""

        if literal is not None:
            argument = literal
        else:
            value = self._resolve(variable, state)
            if value is None:
                self._logger.info(f"Variable {variable} not found for {helper_name} call", path=variable)
                state.report("VARIABLE_UNRESOLVED", path=variable)
                return ""
            argument = stringify(value)

        try:
            return str(helper(argument))
        except Exception as e:
            self._logger.warning(
                f"Error calling {helper_name}",
                helper=helper_name,
                argument=argument,
                error=str(e),
            )
            state.report("HELPER_FAILED", helper=helper_name, argument=argument)
            return ""

    def _special(self, path: str, state: RenderState) -> str:
        return escape_html(self._resolve(path, state))

    def _raw(self, path: str, state: RenderState) -> str:
        return stringify(self._resolve(path, state))

    def _escaped(self, path: str, state: RenderState) -> str:
        if path == "this":
            this = self._resolve("this", state)
            if isinstance(this, (list, tuple)):
                return escape_html(join_items(this))
            if isinstance(this, Mapping):
                return escape_html(to_json(this))
            return escape_html(this)

        value = self._resolve(path, state)

        if value is None:
            self._logger.info("Variable not found", path=path)
            state.report("VARIABLE_UNRESOLVED", path=path)
            return ""

        if isinstance(value, (list, tuple)):
            if len(value) == 1:
                return escape_html(value[0])
            return escape_html(join_items(value))

        return escape_html(value)
