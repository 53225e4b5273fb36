"""
Tests for the logging package.

Tests key features including:
- LogConfig level resolution
- Root and derived loggers
- Record layout with extra fields
- TRACE level and complete disable
"""

import logging
from io import StringIO

import pytest

from storecheck.config import LoggingConfig
from storecheck.log import (
    InvalidLogLevelError,
    LogConfig,
    LogFormatter,
    Logger,
    LoggerFactory,
    resolve_level,
)


@pytest.mark.unit
class TestLogConfig:
    """Test LogConfig construction."""

    def test_from_params_names(self):
        assert LogConfig.from_params("debug").level == logging.DEBUG
        assert LogConfig.from_params("TRACE").level == 5
        assert LogConfig.from_params("20").level == logging.INFO

    def test_from_params_false_disables(self):
        assert LogConfig.from_params(False).level is False
        assert LogConfig.from_params("false").level is False

    def test_from_params_invalid(self):
        with pytest.raises(InvalidLogLevelError, match="verbose"):
            LogConfig.from_params("verbose")

    def test_from_config_model(self):
        config = LogConfig.from_config(
            LoggingConfig(level="warning", micros=True, colors=False)
        )
        assert config == LogConfig(level=logging.WARNING, micros=True, colors=False)

    def test_from_config_dict_false(self):
        assert LogConfig.from_config({"level": "false"}).level is False

    def test_is_frozen(self):
        config = LogConfig()
        with pytest.raises(AttributeError):
            config.level = logging.DEBUG  # type: ignore[misc]

    def test_resolve_level(self):
        assert resolve_level("error") == logging.ERROR
        assert resolve_level(10) == 10
        assert resolve_level(False) is False
        with pytest.raises(InvalidLogLevelError):
            resolve_level("nope")


@pytest.mark.unit
class TestLoggers:
    """Test root and derived loggers."""

    def test_root_logs_message_and_name(self, lg, log_stream):
        lg.info("harness started")
        line = log_stream.getvalue().strip()
        assert "[I] harness started" in line
        assert line.endswith("[/test]")

    def test_extra_fields_sorted_with_after_first(self, lg, log_stream):
        lg.info("connected", extra={"url": "sqlite://", "after": 0.25, "backend": "x"})
        line = log_stream.getvalue()
        assert "[after:250ms] [backend:x] [url:sqlite://]" in line

    def test_exception_extra_rendered(self, lg, log_stream):
        lg.warning("failed", extra={"exception": ValueError("bad")})
        assert "[exception:ValueError: bad]" in log_stream.getvalue()

    def test_level_filters(self, lg, log_stream):
        lg.trace("hidden")
        lg.debug("shown")
        output = log_stream.getvalue()
        assert "hidden" not in output
        assert "shown" in output

    def test_trace_level(self, trace_lg, log_stream):
        trace_lg.trace("very detailed")
        assert "[T] very detailed" in log_stream.getvalue()

    def test_derived_logger_shares_root_handler(self, lg, log_stream):
        db_lg = LoggerFactory.derive(lg, "db")
        query_lg = LoggerFactory.derive(db_lg, ["query"])
        assert db_lg.name == "/test/db"
        assert query_lg.name == "/test/db/query"

        query_lg.debug("db query", extra={"query": "SELECT 1"})
        line = log_stream.getvalue().strip()
        assert "[query:SELECT 1]" in line
        assert line.endswith("[/test/db/query]")
        assert not db_lg.handlers

    def test_derive_returns_existing_view(self, lg):
        assert LoggerFactory.derive(lg, "db") is LoggerFactory.derive(lg, "db")

    def test_derived_respects_root_level(self, lg, log_stream):
        db_lg = LoggerFactory.derive(lg, "db")
        db_lg.trace("not shown")
        assert "not shown" not in log_stream.getvalue()

    def test_disabled_logger_is_silent(self):
        stream = StringIO()
        lg = LoggerFactory.create("/test", LogConfig.from_params(False), stream=stream)
        lg.critical("nothing")
        LoggerFactory.derive(lg, "db").error("nothing either")
        assert stream.getvalue() == ""
        assert not lg.isEnabledFor(logging.CRITICAL)

    def test_recreate_does_not_stack_handlers(self, sample_log_config):
        stream = StringIO()
        LoggerFactory.create("/test", sample_log_config, stream=StringIO())
        lg = LoggerFactory.create("/test", sample_log_config, stream=stream)
        assert len(lg.handlers) == 1
        lg.info("once")
        assert stream.getvalue().count("once") == 1

    def test_logger_default_extra(self, sample_log_config):
        stream = StringIO()
        lg = LoggerFactory.create(
            "/test", sample_log_config, extra={"run": "r1"}, stream=stream
        )
        assert isinstance(lg, Logger)
        lg.info("hello", extra={"n": 1})
        assert "[n:1] [run:r1]" in stream.getvalue()


@pytest.mark.unit
class TestLogFormatter:
    """Test LogFormatter layout."""

    def _record(self, lg: Logger, msg: str, **extra) -> logging.LogRecord:
        return lg.makeRecord(
            lg.name, logging.INFO, __file__, 1, msg, (), None, extra=extra
        )

    def test_plain_layout(self, lg):
        formatter = LogFormatter(LogConfig(colors=False))
        text = formatter.format(self._record(lg, "hello", key="v"))
        assert text.startswith("[")
        assert "[I] hello" in text
        assert text.endswith("[key:v] [/test]")

    def test_colored_layout_has_escape_codes(self, lg):
        formatter = LogFormatter(LogConfig(colors=True))
        text = formatter.format(self._record(lg, "hello"))
        assert "\x1b[" in text
        assert text.endswith("\x1b[0m")

    def test_list_values_joined(self, lg):
        formatter = LogFormatter(LogConfig(colors=False))
        text = formatter.format(self._record(lg, "tables", names=["a", "b"]))
        assert "[names:a,b]" in text
