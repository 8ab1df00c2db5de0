"""Quire Logging - Structured JSON or colored logging with trace context."""

from .colors import colorize, component_color, level_color
from .logger import (
    ColoredLogFormatter,
    LogConfig,
    QuireLogger,
    StructuredLogFormatter,
    configure_logging,
    get_logger,
    reset_loggers,
)

__all__ = [
    # Logger classes
    "QuireLogger",
    "LogConfig",
    "StructuredLogFormatter",
    "ColoredLogFormatter",
    # Functions
    "get_logger",
    "configure_logging",
    "reset_loggers",
    # Colors
    "colorize",
    "level_color",
    "component_color",
]
