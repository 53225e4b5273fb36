"""
Query logging and engine helpers shared by the database backends.

Handles SQLAlchemy event listeners for per-query logging with timings.
"""

import re
import sys
import time
from functools import lru_cache
from typing import Any

import sqlalchemy
import sqlalchemy.event

from ..log import resolve_level

_WHITESPACE = re.compile(r"\s+")


@lru_cache(maxsize=1000)
def format_query_string(query_str: str) -> str:
    """
    Format query string with normalized whitespace.

    Args:
        query_str: Raw query string to format

    Returns:
        Single-line query string
    """
    return _WHITESPACE.sub(" ", query_str).strip()


def safe_url(url: Any) -> str:
    """Render a URL for logging, without credentials."""
    return sqlalchemy.engine.make_url(str(url)).render_as_string(hide_password=True)


def log_query_with_timing(
    lg: Any, query_lg_level: int, secs: float, qstr: str, url: Any
) -> None:
    """Log query execution with timing information."""
    extra = {"after": secs, "query": qstr, "url": safe_url(url)}
    try:
        if lg.isEnabledFor(query_lg_level):
            lg._log(query_lg_level, "db query", (), extra=extra)
    except (TypeError, ValueError) as e:
        sys.stderr.write(
            f"!!!!!!! UNABLE TO LOG: error[{e}] msg[db query] extra[{extra}]\n"
        )


class QueryLogger:
    """
    Manages query logging event listeners on an engine.

    Records the start time of every cursor execution and logs the statement
    with its duration once it completes. Listeners are removed by
    ``remove()`` so a closed connection stops logging.
    """

    def __init__(
        self,
        engine: sqlalchemy.engine.Engine,
        logger: Any,
        query_lg_level: str | int | None,
    ):
        """
        Initialize query logger.

        Args:
            engine: SQLAlchemy engine instance
            logger: Logger for query events
            query_lg_level: Log level for query logging (None to disable)
        """
        self._engine = engine
        self._lg = logger
        self._query_lg_level = (
            None if query_lg_level is None else resolve_level(query_lg_level)
        )
        self._listeners: list[tuple[str, Any]] = []

    @property
    def level(self) -> int | bool | None:
        return self._query_lg_level

    def setup_callbacks(self) -> None:
        """Set up SQLAlchemy event listeners for query logging."""

        def _record_query_start(
            conn: Any,
            cursor: Any,
            statement: str,
            parameters: Any,
            context: Any,
            executemany: bool,
        ) -> None:
            conn.info.setdefault("query_start_time", []).append(time.monotonic())

        def _record_query_end(
            conn: Any,
            cursor: Any,
            statement: str,
            parameters: Any,
            context: Any,
            executemany: bool,
        ) -> None:
            starts = conn.info.get("query_start_time")
            if not starts:
                return
            secs = time.monotonic() - starts.pop(-1)
            if self._query_lg_level in (None, False):
                return
            log_query_with_timing(
                self._lg,
                self._query_lg_level,
                secs,
                format_query_string(statement),
                self._engine.url,
            )

        for name, fn in (
            ("before_cursor_execute", _record_query_start),
            ("after_cursor_execute", _record_query_end),
        ):
            sqlalchemy.event.listen(self._engine, name, fn)
            self._listeners.append((name, fn))

        self._lg.trace(
            "installed query logging hooks",
            extra={"url": safe_url(self._engine.url)},
        )

    def remove(self) -> None:
        """Remove the installed listeners; safe to call more than once."""
        while self._listeners:
            name, fn = self._listeners.pop()
            if sqlalchemy.event.contains(self._engine, name, fn):
                sqlalchemy.event.remove(self._engine, name, fn)
