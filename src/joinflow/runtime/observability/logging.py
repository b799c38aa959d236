"""Logging setup for joinflow.

Library modules log through stdlib loggers under the ``joinflow`` namespace
and never configure output themselves. Applications opt in:

    >>> from joinflow.runtime.observability import configure_logging
    >>> configure_logging(format="console", level="DEBUG")
    # => 10:30:45.123 [debug] Group fulfilled with 2 slot(s) logger="joinflow.group" slots=2 state="fulfilled"

    >>> configure_logging(format="json")   # JSON lines for aggregation

Or from the environment (JOINFLOW_LOG_LEVEL, JOINFLOW_LOG_FORMAT):

    >>> configure_from_settings()
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any, TextIO

from joinflow.foundation.config import JoinflowSettings, get_settings

ROOT_LOGGER = "joinflow"

# Attributes every LogRecord carries; anything else arrived through ``extra``
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}

_COLORS = {
    "reset": "\033[0m",
    "bold": "\033[1m",
    "dim": "\033[2m",
    "red": "\033[31m",
    "green": "\033[32m",
    "yellow": "\033[33m",
    "blue": "\033[34m",
    "cyan": "\033[36m",
}
_NO_COLORS = {k: "" for k in _COLORS}
_LEVEL_COLORS = {
    "debug": "dim",
    "info": "green",
    "warning": "yellow",
    "error": "red",
    "critical": "red",
}


def record_context(record: logging.LogRecord) -> dict[str, Any]:
    """Key-value pairs attached to a record via ``extra``."""
    ctx = {k: v for k, v in vars(record).items() if k not in _RECORD_ATTRS}
    ctx["logger"] = record.name
    return ctx


class ConsoleFormatter(logging.Formatter):
    """Human-readable output: ``HH:MM:SS.mmm [level] event key=value``."""

    def __init__(self, *, colors: bool = False, show_timestamp: bool = True) -> None:
        super().__init__()
        self.colors = colors
        self.show_timestamp = show_timestamp

    def format(self, record: logging.LogRecord) -> str:
        c = _COLORS if self.colors else _NO_COLORS
        level = record.levelname.lower()
        parts: list[str] = []
        if self.show_timestamp:
            ts = datetime.fromtimestamp(record.created, tz=UTC).strftime("%H:%M:%S.%f")[:-3]
            parts.append(f"{c['dim']}{ts}{c['reset']}")
        parts.append(f"{c[_LEVEL_COLORS.get(level, 'dim')]}[{level}]{c['reset']}")
        parts.append(f"{c['bold']}{record.getMessage()}{c['reset']}")
        for k, v in sorted(record_context(record).items()):
            parts.append(f"{c['cyan']}{k}{c['reset']}={_format_value(v)}")
        line = " ".join(parts)
        if record.exc_info:
            line += "\n" + c["red"] + self.formatException(record.exc_info) + c["reset"]
        return line


class JsonFormatter(logging.Formatter):
    """JSON Lines output, one object per record."""

    def __init__(self, *, show_timestamp: bool = True) -> None:
        super().__init__()
        self.show_timestamp = show_timestamp

    def format(self, record: logging.LogRecord) -> str:
        data: dict[str, Any] = {}
        if self.show_timestamp:
            data["timestamp"] = datetime.fromtimestamp(record.created, tz=UTC).isoformat()
        data["level"] = record.levelname.lower()
        data["event"] = record.getMessage()
        data.update(record_context(record))
        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(data, default=str)


def configure_logging(
    format: str = "console",  # noqa: A002 - matches the settings field
    level: str = "INFO",
    *,
    output: TextIO | None = None,
    colors: bool | None = None,
    show_timestamp: bool = True,
) -> logging.Logger:
    """Attach a single handler to the ``joinflow`` logger.

    Calling it again replaces the handler installed by the previous call.

    Args:
        format: "console" (human), "json" (machine) or "none" (silent)
        level: Minimum level name
        output: Stream to write to (default: stderr)
        colors: Force colors on/off (None = auto-detect from TTY)
        show_timestamp: Include timestamps in every line

    Returns:
        The configured ``joinflow`` logger
    """
    log = logging.getLogger(ROOT_LOGGER)
    for handler in [h for h in log.handlers if getattr(h, "_joinflow", False)]:
        log.removeHandler(handler)

    stream = output or sys.stderr
    handler: logging.Handler
    if format == "console":
        use_colors = colors if colors is not None else (hasattr(stream, "isatty") and stream.isatty())
        handler = logging.StreamHandler(stream)
        handler.setFormatter(ConsoleFormatter(colors=use_colors, show_timestamp=show_timestamp))
    elif format == "json":
        handler = logging.StreamHandler(stream)
        handler.setFormatter(JsonFormatter(show_timestamp=show_timestamp))
    elif format == "none":
        handler = logging.NullHandler()
    else:
        raise ValueError(f"Unknown format: {format}. Use 'console', 'json', or 'none'")

    handler._joinflow = True  # type: ignore[attr-defined]
    log.addHandler(handler)
    log.setLevel(getattr(logging, level.upper(), logging.INFO))
    return log


def configure_from_settings(settings: JoinflowSettings | None = None, *, output: TextIO | None = None) -> logging.Logger:
    """configure_logging() driven by LoggingSettings."""
    settings = settings or get_settings()
    return configure_logging(
        settings.logging.format,
        settings.effective_log_level,
        output=output,
        show_timestamp=settings.logging.include_timestamps,
    )


def _format_value(v: object) -> str:
    if isinstance(v, str):
        return f'"{v}"'
    if isinstance(v, bool):
        return str(v).lower()
    return repr(v) if not isinstance(v, (int, float)) else str(v)
