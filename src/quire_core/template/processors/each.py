"""Loop blocks: {{@each path}}...{{/each}} (legacy {{#each path}})."""

from quire_core.logging import get_logger

from ..context import ContextResolver
from ..parser import EACH_CLOSE, EACH_OPEN, IF_OPEN, find_block
from ..types import RenderState
from .conditional import ConditionalProcessor
from .variable import VariableProcessor

DEFAULT_MAX_ITERATIONS = 100


class EachProcessor:
    """Expand loop blocks once per item.

    Each item body is rendered inside its own frame: nested loops first,
    then conditionals, then variables. The frame is pushed on the render
    state's stack and popped when the item is done.
    """

    def __init__(
        self,
        resolver: ContextResolver,
        conditionals: ConditionalProcessor,
        variables: VariableProcessor,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
    ):
        self._resolver = resolver
        self._conditionals = conditionals
        self._variables = variables
        self.max_iterations = max_iterations
        self._logger = get_logger("template.each")

    def process(self, template: str, state: RenderState) -> str:
        """Expand every loop block in ``template``.

        Scanning restarts from the top after each block is replaced, since
        the replacement shifts every later offset.

        Args:
            template: Full template string
            state: Render state (context and frame stack)

        Returns:
            Template with loops expanded
        """
        result = template
        iterations = 0

        while (block := find_block(result, EACH_OPEN, EACH_CLOSE)) is not None:
            iterations += 1
            if iterations > self.max_iterations:
                self._logger.error(
                    f"Maximum number of iterations ({self.max_iterations}) exceeded in each blocks. "
                    "Possible infinite loop detected.",
                    template=state.template_name,
                )
                state.report("ITERATION_LIMIT_EXCEEDED", limit=self.max_iterations, phase="each")
                break

            items = self._resolver.get_array(state.context, block.argument, state.frame)
            self._logger.debug("Processing each block", path=block.argument, items=len(items))

            rendered = "".join(
                self._render_item(block.inner, item, block.argument, index, state)
                for index, item in enumerate(items, start=1)
            )
            result = result[: block.start] + rendered + result[block.end :]

        return result

    def _render_item(self, body: str, item: object, path: str, index: int, state: RenderState) -> str:
        frame = self._resolver.build_frame(item, path, state.scope, index)

        with state.push_frame(frame):
            if find_block(body, EACH_OPEN, EACH_CLOSE) is not None:
                body = self.process(body, state)
            if IF_OPEN.search(body):
                body = self._conditionals.process(body, state)
            return self._variables.process(body, state)
