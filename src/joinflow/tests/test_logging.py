"""Tests for logging configuration and formatters."""

from __future__ import annotations

import io
import json
import logging
from collections.abc import Iterator

import pytest

from joinflow import Group
from joinflow.foundation.config import JoinflowSettings
from joinflow.runtime.observability import (
    ConsoleFormatter,
    JsonFormatter,
    configure_from_settings,
    configure_logging,
    record_context,
)


@pytest.fixture(autouse=True)
def restore_joinflow_logger() -> Iterator[None]:
    log = logging.getLogger("joinflow")
    handlers, level = list(log.handlers), log.level
    yield
    log.handlers[:] = handlers
    log.setLevel(level)


def make_record(msg: str = "Group fulfilled", **extra: object) -> logging.LogRecord:
    record = logging.LogRecord("joinflow.group", logging.DEBUG, __file__, 1, msg, (), None)
    record.__dict__.update(extra)
    return record


def test_record_context_keeps_only_extras() -> None:
    ctx = record_context(make_record(state="fulfilled", slots=2))
    assert ctx == {"state": "fulfilled", "slots": 2, "logger": "joinflow.group"}


def test_console_formatter_line() -> None:
    line = ConsoleFormatter(show_timestamp=False).format(make_record(state="fulfilled", slots=2))
    assert line == '[debug] Group fulfilled logger="joinflow.group" slots=2 state="fulfilled"'


def test_json_formatter_line() -> None:
    data = json.loads(JsonFormatter().format(make_record(slots=1)))
    assert data["level"] == "debug"
    assert data["event"] == "Group fulfilled"
    assert data["slots"] == 1
    assert "timestamp" in data


def test_configure_logging_replaces_previous_handler() -> None:
    configure_logging("console", "INFO", output=io.StringIO())
    log = configure_logging("json", "DEBUG", output=io.StringIO())

    ours = [h for h in log.handlers if getattr(h, "_joinflow", False)]
    assert len(ours) == 1
    assert isinstance(ours[0].formatter, JsonFormatter)
    assert log.level == logging.DEBUG


def test_configure_logging_rejects_unknown_format() -> None:
    with pytest.raises(ValueError, match="Unknown format"):
        configure_logging("xml")


def test_group_resolution_is_logged_as_json() -> None:
    out = io.StringIO()
    configure_logging("json", "DEBUG", output=out)

    Group().resolve(None, "a", "b")

    events = [json.loads(line) for line in out.getvalue().splitlines()]
    resolved = [e for e in events if e["logger"] == "joinflow.group"]
    assert resolved[-1]["state"] == "fulfilled"
    assert resolved[-1]["slots"] == 2


def test_configure_from_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("JOINFLOW_LOG_FORMAT", "none")
    monkeypatch.setenv("JOINFLOW_LOG_LEVEL", "ERROR")

    log = configure_from_settings(JoinflowSettings())

    assert log.level == logging.ERROR
    assert any(isinstance(h, logging.NullHandler) for h in log.handlers)


def test_group_log_message_is_formatted_lazily(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.DEBUG, logger="joinflow.group"):
        Group().resolve(None, "a", "b")

    record = next(r for r in caplog.records if r.name == "joinflow.group")
    assert record.msg == "Group %s with %d slot(s)"
    assert record.getMessage() == "Group fulfilled with 2 slot(s)"
