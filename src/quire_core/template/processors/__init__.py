"""Directive processors. Each one rewrites a full template string."""

from .canvas import CanvasProcessor
from .conditional import ConditionalProcessor, is_truthy
from .each import EachProcessor
from .lists import ListProcessor
from .partial import PartialProcessor
from .variable import VariableProcessor
from .yields import YieldProcessor

__all__ = [
    "CanvasProcessor",
    "ConditionalProcessor",
    "EachProcessor",
    "ListProcessor",
    "PartialProcessor",
    "VariableProcessor",
    "YieldProcessor",
    "is_truthy",
]
