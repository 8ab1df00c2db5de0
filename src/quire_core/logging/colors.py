"""ANSI colors for the colored log format.

Levels and template components each get a fixed 256-color code:

    from quire_core.logging.colors import colorize, level_color

    line = colorize("Partial template not found", level_color(logging.WARNING))
"""

import logging

RESET = "\033[0m"

GREEN = "\033[38;5;82m"
RED = "\033[38;5;196m"
YELLOW = "\033[38;5;226m"
ORANGE = "\033[38;5;208m"
LIGHT_BLUE = "\033[38;5;153m"
CYAN = "\033[38;5;51m"
MAGENTA = "\033[38;5;201m"

_LEVEL_COLORS = {
    logging.DEBUG: LIGHT_BLUE,
    logging.INFO: CYAN,
    logging.WARNING: YELLOW,
    logging.ERROR: RED,
    logging.CRITICAL: RED,
}

# Keyed by the last segment of the logger name (quire.template.partial -> partial)
_COMPONENT_COLORS = {
    "engine": MAGENTA,
    "partial": ORANGE,
    "yield": ORANGE,
    "site": GREEN,
    "config": GREEN,
}

EXTRAS_COLOR = LIGHT_BLUE


def level_color(levelno: int) -> str:
    """Color for a stdlib log level; unknown levels are uncolored."""
    return _LEVEL_COLORS.get(levelno, RESET)


def component_color(component: str) -> str:
    """Color for a logger component; unlisted components are uncolored."""
    return _COMPONENT_COLORS.get(component, RESET)


def colorize(text: str, color: str) -> str:
    return f"{color}{text}{RESET}"
