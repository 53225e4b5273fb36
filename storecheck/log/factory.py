"""
Factory for creating and configuring loggers.

Root loggers own a console handler; derived loggers are lightweight "views"
named by path (``/db``, ``/db/query``) that delegate to the root's handlers.
"""

import collections
import logging
import sys
from typing import Any, cast

from .config import LogConfig
from .formatters import LogFormatter
from .logger import Logger


class LoggerFactory:
    """Factory for creating and configuring loggers."""

    @staticmethod
    def create_root(config: LogConfig, logger_class: type[Logger] = Logger) -> Logger:
        """
        Create the root ("/") logger with the specified configuration.

        Example:
            >>> config = LogConfig.from_params(level="info", colors=False)
            >>> lg = LoggerFactory.create_root(config)
            >>> lg.info("harness started")
            [12:34:56,789] [I] harness started                  [/]
        """
        return LoggerFactory.create("/", config, logger_class)

    @staticmethod
    def create(
        name: str,
        config: LogConfig,
        logger_class: type[Logger] = Logger,
        extra: dict[str, Any] | collections.OrderedDict | None = None,
        stream: Any = None,
    ) -> Logger:
        """
        Create a logger with its own console handler.

        An existing logger registered under the same name is reconfigured
        rather than duplicated, so repeated test sessions do not stack handlers.

        Args:
            name: Logger name
            config: Logger configuration
            logger_class: Logger class to use
            extra: Pre-populated extra fields to include in all log records
            stream: Output stream (stdout when None)

        Returns:
            Configured logger instance
        """
        existing = logging.root.manager.loggerDict.get(name)
        if isinstance(existing, Logger) and existing._root_logger is None:
            existing.handlers.clear()
            lg = existing
            lg._config = config
            lg._logging_disabled = config.level is False
        else:
            lg = logger_class(name, config, extra)

        level = logging.CRITICAL + 1 if config.level is False else config.level
        lg.setLevel(level)

        handler = logging.StreamHandler(stream or sys.stdout)
        handler.setLevel(level)
        handler.setFormatter(LogFormatter(config))
        lg.addHandler(handler)
        lg.propagate = False
        lg.parent = logging.root

        logging.root.manager.loggerDict[name] = lg
        lg.trace(
            "created logger",
            extra={"level": logging.getLevelName(level), "colors": config.colors},
        )
        return lg

    @staticmethod
    def derive(parent: Logger, tags: str | list[str]) -> Logger:
        """
        Derive a "view" logger that delegates to root's handlers.

        Examples:
            >>> derived = LoggerFactory.derive(root, "db")
            >>> derived.name
            '/db'
            >>> LoggerFactory.derive(derived, ["query"]).name
            '/db/query'

        Args:
            parent: Parent logger instance
            tags: Single tag string OR list of tag strings to form hierarchy

        Returns:
            Derived logger instance
        """
        if isinstance(tags, str):
            tags = [tags]

        prefix = parent.name if parent.name == "/" else parent.name + "/"
        name = prefix + "/".join(tags)

        existing = logging.root.manager.loggerDict.get(name)
        if isinstance(existing, Logger):
            root = parent._root_logger or parent
            if existing._root_logger is root:
                return existing

        root = parent._root_logger if parent._root_logger else parent
        lg = parent.__class__(name, LogConfig(level=parent.get_level()))
        lg.setLevel(logging.NOTSET)
        lg._root_logger = root
        lg.parent = parent
        lg.propagate = False

        logging.root.manager.loggerDict[name] = lg
        return cast(Logger, lg)
