"""
Logging for the storecheck harness.

Extends Python's standard logging with:
- A custom TRACE level below debug
- Structured logging with extra fields rendered as ``[key:value]``
- Path-named loggers (``/``, ``/db``, ``/db/query``) where derived loggers
  share the root logger's handler
- Optional colored console output
- Complete logging disable (level=False or level="false")
"""

import logging

from .config import LogConfig
from .constants import LogConstants
from .exceptions import InvalidLogLevelError, LogError
from .factory import LoggerFactory
from .formatters import LogFormatter
from .logger import Logger

logging.TRACE = LogConstants.CUSTOM_LEVELS["TRACE"]  # type: ignore[attr-defined]
logging.addLevelName(logging.TRACE, "TRACE")  # type: ignore[attr-defined]


def resolve_level(s: str | int | bool) -> int | bool:
    """
    Resolve log level from string, numeric value, or boolean.

    Args:
        s: Log level as string name, numeric value, or False to disable logging

    Returns:
        Numeric log level or False to disable logging

    Raises:
        InvalidLogLevelError: If the log level is invalid
    """
    if isinstance(s, bool):
        return s

    if str(s).isnumeric():
        return int(s)

    name = str(s).lower()
    if name in LogConstants.LEVEL_NAMES:
        return LogConstants.LEVEL_NAMES[name]

    raise InvalidLogLevelError(s)


def create_root_lg(level: str | int = "info", colors: bool = True) -> Logger:
    """
    Create a root logger with the specified level.

    Example:
        >>> lg = create_root_lg("debug", colors=False)
    """
    return LoggerFactory.create_root(LogConfig.from_params(level, colors=colors))


__all__ = [
    "Logger",
    "LoggerFactory",
    "LogConfig",
    "LogConstants",
    "LogFormatter",
    "LogError",
    "InvalidLogLevelError",
    "resolve_level",
    "create_root_lg",
]
