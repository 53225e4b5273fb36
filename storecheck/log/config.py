"""
Configuration classes for the logging system.

LogConfig is immutable so the same instance can be shared between the root
logger, its handler and its formatter.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class LogConfig:
    """
    Immutable configuration for root loggers.

    Derived loggers only carry a level; display settings (micros, colors)
    are always taken from the root's config.
    """

    level: int | bool = logging.INFO  # int for normal levels, False to disable logging
    micros: bool = False
    colors: bool = True

    @staticmethod
    def _resolve_level(level: str | int | bool) -> int | bool:
        """Resolve level parameter to int or False."""
        from .constants import LogConstants
        from .exceptions import InvalidLogLevelError

        if isinstance(level, bool):
            return False if not level else logging.INFO
        if isinstance(level, str):
            if level.isnumeric():
                return int(level)
            if level.lower() in LogConstants.LEVEL_NAMES:
                return LogConstants.LEVEL_NAMES[level.lower()]
            raise InvalidLogLevelError(level)
        return level

    @classmethod
    def from_params(
        cls,
        level: str | int | bool,
        micros: bool = False,
        colors: bool = True,
    ) -> LogConfig:
        """
        Create LogConfig from individual parameters.

        Args:
            level: Log level (string name, numeric value, or False to disable logging)
            micros: Whether to show microsecond precision
            colors: Whether to enable colored output

        Returns:
            LogConfig instance
        """
        return cls(level=cls._resolve_level(level), micros=micros, colors=colors)

    @classmethod
    def from_config(cls, section: Any) -> LogConfig:
        """
        Create LogConfig from the ``logging`` section of the harness config.

        Args:
            section: Mapping or object with level/micros/colors entries

        Example:
            cfg = load_config()
            log_config = LogConfig.from_config(cfg.logging)
        """
        if isinstance(section, dict):
            values = section
        else:
            values = {
                "level": getattr(section, "level", "info"),
                "micros": getattr(section, "micros", False),
                "colors": getattr(section, "colors", True),
            }

        level = values.get("level", "info")
        if level == "false":
            level = False

        return cls.from_params(
            level=level,
            micros=bool(values.get("micros", False)),
            colors=bool(values.get("colors", True)),
        )
