"""Quire Logger - Structured logging with trace context.

Wraps Python logging with JSON or colored output and automatic
OpenTelemetry trace context injection.

Usage:
    from quire_core.logging import get_logger

    logger = get_logger("template.partial")
    logger.warning("Partial template not found", partial="header.html")
"""

import json
import logging
import sys
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, TextIO

from opentelemetry import trace

from quire_core.logging.colors import EXTRAS_COLOR, colorize, component_color, level_color
from quire_core.types import LogFormat, LogLevel

_LEVELS = {
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.INFO: logging.INFO,
    LogLevel.WARN: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
}

# LogRecord attributes that are not user-supplied extra fields
_RESERVED_ATTRS = frozenset(
    (
        "name", "msg", "args", "created", "filename", "funcName",
        "levelname", "levelno", "lineno", "module", "msecs",
        "pathname", "process", "processName", "relativeCreated",
        "stack_info", "exc_info", "exc_text", "thread", "threadName",
        "message", "taskName",
    )
)


@dataclass
class LogConfig:
    """Logger configuration."""

    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.JSON
    truncate_at: int = 200
    output: TextIO | None = None  # None = sys.stderr

    @property
    def python_level(self) -> int:
        """Equivalent stdlib logging level."""
        return _LEVELS.get(self.level, logging.INFO)


def _extra_fields(record: logging.LogRecord) -> dict[str, Any]:
    return {k: v for k, v in record.__dict__.items() if k not in _RESERVED_ATTRS}


class StructuredLogFormatter(logging.Formatter):
    """JSON formatter with trace context injection.

    Formats log records as JSON with:
    - timestamp (ISO 8601)
    - level
    - component (logger name)
    - message
    - trace_id / span_id (if a span is recording)
    - Additional fields from extra
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON.

        Args:
            record: Log record to format

        Returns:
            JSON-formatted log string
        """
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "component": record.name,
            "message": record.getMessage(),
        }

        span = trace.get_current_span()
        if span and span.is_recording():
            ctx = span.get_span_context()
            if ctx.is_valid:
                log_data["trace_id"] = format(ctx.trace_id, "032x")
                log_data["span_id"] = format(ctx.span_id, "016x")

        log_data.update(_extra_fields(record))

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class ColoredLogFormatter(logging.Formatter):
    """Human-readable formatter: ``[COMPONENT] message {extras}``."""

    def __init__(self, truncate_at: int = 200):
        """Initialize formatter.

        Args:
            truncate_at: Maximum length of the rendered extras
        """
        super().__init__()
        self.truncate_at = truncate_at

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as a colored single line."""
        # quire.template.partial -> partial
        component = record.name.rsplit(".", 1)[-1]
        output = (
            colorize(f"[{component.upper()}]", component_color(component))
            + " "
            + colorize(record.getMessage(), level_color(record.levelno))
        )

        extras = _extra_fields(record)
        if extras:
            extras_str = str(extras)
            if len(extras_str) > self.truncate_at:
                extras_str = extras_str[: self.truncate_at] + "..."
            output += " " + colorize(extras_str, EXTRAS_COLOR)

        if record.exc_info:
            output += "\n" + self.formatException(record.exc_info)

        return output


def _make_formatter(config: LogConfig) -> logging.Formatter:
    if config.format == LogFormat.COLORED:
        return ColoredLogFormatter(truncate_at=config.truncate_at)
    return StructuredLogFormatter()


class QuireLogger:
    """Structured logger facade.

    Wraps Python logging with:
    - Keyword arguments as structured extra fields
    - JSON or colored output
    - Automatic trace context injection
    """

    def __init__(self, name: str, config: LogConfig | None = None):
        """Initialize logger.

        Args:
            name: Logger name (component name)
            config: Logger configuration (defaults to LogConfig())
        """
        self.name = name
        self._logger = logging.getLogger(f"quire.{name}")
        self._handler: logging.Handler | None = None
        self.configure(config or LogConfig())

    def configure(self, config: LogConfig) -> None:
        """Apply level and output format (for hot-reload).

        Args:
            config: New logger configuration
        """
        self._logger.setLevel(config.python_level)
        if self._handler is not None:
            self._logger.removeHandler(self._handler)
        self._handler = logging.StreamHandler(config.output or sys.stderr)
        self._handler.setFormatter(_make_formatter(config))
        self._logger.addHandler(self._handler)
        self._logger.propagate = False

    def is_enabled_for(self, level: int) -> bool:
        """Check whether a stdlib level would be emitted."""
        return self._logger.isEnabledFor(level)

    def _log(self, level: int, message: str, **kwargs: Any) -> None:
        self._logger.log(level, message, extra=kwargs)

    def debug(self, message: str, **kwargs: Any) -> None:
        """Log debug message."""
        self._log(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        """Log info message."""
        self._log(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        """Log warning message."""
        self._log(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        """Log error message."""
        self._log(logging.ERROR, message, **kwargs)

    def exception(self, message: str, **kwargs: Any) -> None:
        """Log exception with traceback."""
        self._logger.exception(message, extra=kwargs)


# Logger cache
_loggers: dict[str, QuireLogger] = {}
_config: LogConfig = LogConfig()


def get_logger(name: str) -> QuireLogger:
    """Get or create a structured logger.

    Args:
        name: Logger name (component name)

    Returns:
        QuireLogger instance
    """
    if name not in _loggers:
        _loggers[name] = QuireLogger(name, _config)
    return _loggers[name]


def configure_logging(config: LogConfig) -> None:
    """Reconfigure every Quire logger, present and future.

    Args:
        config: Logger configuration
    """
    global _config  # noqa: PLW0603
    _config = config
    for logger in _loggers.values():
        logger.configure(config)


def reset_loggers() -> None:
    """Reset logger cache and configuration (for testing)."""
    global _loggers, _config  # noqa: PLW0603
    for logger in _loggers.values():
        if logger._handler is not None:
            logger._logger.removeHandler(logger._handler)
    _loggers = {}
    _config = LogConfig()
