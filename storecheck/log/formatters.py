"""
Log formatter producing the harness's single-line record layout:

    [12:34:56,789] [I] connected                     [url:sqlite:///...] [/db]

Extra fields passed via ``extra=`` are rendered as ``[key:value]`` pairs,
sorted by key, with ``after`` (a duration in seconds) always first.
"""

import logging
import re
from typing import Any

from .colors import ColorManager
from .config import LogConfig
from .constants import LogConstants

_ANSI_PATTERN = re.compile(r"\x1b\[[0-9;]*m")

# Attribute set on records by Logger.makeRecord
EXTRA_ATTR = "__storecheck__extra"


def _visual_len(text: str) -> int:
    """Calculate visual width of text, excluding ANSI escape codes."""
    if "\x1b" not in text:
        return len(text)
    return len(_ANSI_PATTERN.sub("", text))


def _format_after(secs: float, micros: bool) -> str:
    """Render a duration in seconds."""
    if secs < 1.0:
        return f"{secs * 1000:.3f}ms" if micros else f"{secs * 1000:.0f}ms"
    return f"{secs:.3f}s" if micros else f"{secs:.2f}s"


def _format_value(key: str, value: Any, micros: bool) -> str:
    if key == "after" and isinstance(value, float):
        return _format_after(value, micros)
    if key == "exception" and isinstance(value, BaseException):
        return f"{value.__class__.__name__}: {value}"
    if isinstance(value, (list, tuple)):
        return ",".join(str(v) for v in value)
    return str(value)


class LogFormatter(logging.Formatter):
    """
    Formatter rendering message, extra fields and logger name.

    Colors are applied per level when enabled in the config; the layout is
    otherwise identical, which keeps captured test output easy to match.
    """

    def __init__(self, config: LogConfig) -> None:
        super().__init__(LogConstants.DEFAULT_FORMAT)
        self._config = config

    @property
    def config(self) -> LogConfig:
        return self._config

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        s = super().formatTime(record, "%H:%M:%S")
        if self._config.micros:
            return f"{s},{int(record.msecs):03d}{int((record.created * 1e6) % 1000):03d}"
        return f"{s},{int(record.msecs):03d}"

    def _fields(self, record: logging.LogRecord) -> list[tuple[str, str]]:
        extra = getattr(record, EXTRA_ATTR, None) or {}
        keys = sorted(k for k in extra if k != "after")
        if "after" in extra:
            keys.insert(0, "after")
        return [(k, _format_value(k, extra[k], self._config.micros)) for k in keys]

    def format(self, record: logging.LogRecord) -> str:
        head = super().format(record)
        if record.exc_info or record.stack_info:
            # super() appended the traceback; keep it below the record line
            head, _, tail = head.partition("\n")
            tail = "\n" + tail
        else:
            tail = ""

        rule = (
            LogConstants.MICRO_RULE_WIDTH
            if self._config.micros
            else LogConstants.DEFAULT_RULE_WIDTH
        )
        pad = " " * max(1, rule - _visual_len(head))
        fields = " ".join(f"[{k}:{v}]" for k, v in self._fields(record))
        meta = f"[{record.name}]"

        if not self._config.colors:
            line = head + pad + (fields + " " if fields else "") + meta
            return line + tail

        col = ColorManager.for_level(record.levelno) + "m"
        gray = ColorManager.gray(9) + "m"
        line = col + head + pad
        if fields:
            line += fields + " "
        line += gray + meta + ColorManager.RESET
        return line + tail
