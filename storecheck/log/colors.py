"""
ANSI color selection for log records.
"""

import logging

from .constants import LogConstants


class ColorManager:
    """Centralized ANSI color code management."""

    RED = "\x1b[31"
    GREEN = "\x1b[32"
    YELLOW = "\x1b[33"
    MAGENTA = "\x1b[35"
    CYAN = "\x1b[36"
    DEFAULT = "\x1b[38"

    RESET = LogConstants.RESET

    COLORS: dict[int, str] = {
        LogConstants.CUSTOM_LEVELS["TRACE"]: f"\x1b[38;5;{LogConstants.GRAY_BASE + 12}",
        logging.DEBUG: "\x1b[38;5;32",
        logging.INFO: CYAN,
        logging.WARNING: YELLOW,
        logging.ERROR: RED,
        logging.CRITICAL: MAGENTA,
    }

    @staticmethod
    def for_level(level: int) -> str:
        """Get the color sequence (without terminator) for a log level."""
        return ColorManager.COLORS.get(level, ColorManager.DEFAULT)

    @staticmethod
    def gray(level: int) -> str:
        """Create a gray color sequence, level clamped to the 0-23 range."""
        level = max(0, min(level, LogConstants.GRAY_MAX_LEVELS - 1))
        return f"\x1b[38;5;{LogConstants.GRAY_BASE + level}"

    @staticmethod
    def bold(color: str) -> str:
        """Create the bold variant of a color sequence."""
        return color + ";1m"
