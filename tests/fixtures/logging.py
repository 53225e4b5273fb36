"""
Logging fixtures for testing.

Provides fixtures for loggers and log capturing.
"""

import logging
from collections.abc import Generator
from io import StringIO

import pytest

from storecheck.log import LogConfig, Logger, LoggerFactory


@pytest.fixture(autouse=True)
def reset_logging_state() -> Generator[None, None, None]:
    """
    Reset Python logging global state after each test.

    Loggers created by a test are removed from the manager so the next test
    starts from scratch; objects still held by session fixtures keep working.
    Resets: loggerDict, root handlers, root level and logger class.
    """
    original_class = logging.getLoggerClass()
    original_handlers = logging.root.handlers[:]
    original_level = logging.root.level

    yield

    logging.setLoggerClass(original_class)

    for name in list(logging.root.manager.loggerDict.keys()):
        if name.startswith("/") or name.startswith("test"):
            del logging.root.manager.loggerDict[name]

    logging.root.handlers = original_handlers
    logging.root.setLevel(original_level)


@pytest.fixture
def sample_log_config() -> LogConfig:
    """Debug level, no colors."""
    return LogConfig.from_params(level="debug", colors=False)


@pytest.fixture
def log_stream() -> StringIO:
    """Stream the ``lg`` fixture writes to."""
    return StringIO()


@pytest.fixture
def lg(sample_log_config: LogConfig, log_stream: StringIO) -> Logger:
    """A root-style logger named ``/test`` writing plain text to ``log_stream``."""
    return LoggerFactory.create("/test", sample_log_config, stream=log_stream)


@pytest.fixture
def trace_lg(log_stream: StringIO) -> Logger:
    """Like ``lg`` but at TRACE level."""
    config = LogConfig.from_params(level="trace", colors=False)
    return LoggerFactory.create("/test", config, stream=log_stream)
