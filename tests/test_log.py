import io
import json
import re
from datetime import timedelta

import pytest

from linctl.log import (
    Field,
    LogEntry,
    LogLevel,
    NoOpLogger,
    StructuredLogger,
    bool_field,
    duration_field,
    error_field,
    format_duration,
    int_field,
    new_logger,
    new_noop_logger,
    string_field,
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    monkeypatch.delenv("LINCTL_LOG_LEVEL", raising=False)
    monkeypatch.delenv("LINCTL_LOG_FORMAT", raising=False)


def _lines(buf):
    return buf.getvalue().strip().split("\n")


def test_new_logger_defaults_to_info_text(capsys):
    logger = new_logger()
    logger.debug("hidden")
    logger.info("shown")
    err = capsys.readouterr().err
    assert "hidden" not in err
    assert re.search(r"\] INFO shown$", err.strip())


def test_new_logger_reads_environment(monkeypatch, capsys):
    monkeypatch.setenv("LINCTL_LOG_LEVEL", "debug")
    monkeypatch.setenv("LINCTL_LOG_FORMAT", "json")
    logger = new_logger()
    logger.debug("dbg")
    entry = json.loads(capsys.readouterr().err.strip())
    assert entry["level"] == "DEBUG"
    assert entry["message"] == "dbg"


def test_new_logger_accepts_warning(monkeypatch):
    monkeypatch.setenv("LINCTL_LOG_LEVEL", "WARNING")
    assert new_logger().level == LogLevel.WARN


def test_log_levels():
    buf = io.StringIO()
    logger = StructuredLogger(LogLevel.DEBUG, "text", buf)
    logger.debug("debug message")
    logger.info("info message")
    logger.warn("warn message")
    logger.error("error message")
    output = buf.getvalue()
    assert len(_lines(buf)) == 4
    for name in ("DEBUG", "INFO", "WARN", "ERROR"):
        assert name in output


def test_log_level_filtering():
    buf = io.StringIO()
    logger = StructuredLogger(LogLevel.WARN, "text", buf)
    logger.debug("debug message")
    logger.info("info message")
    logger.warn("warn message")
    logger.error("error message")
    output = buf.getvalue()
    assert len(_lines(buf)) == 2
    assert "DEBUG" not in output
    assert "INFO" not in output


def test_error_level_emits_only_errors():
    buf = io.StringIO()
    logger = StructuredLogger(LogLevel.ERROR, "text", buf)
    logger.debug("d")
    logger.info("i")
    logger.warn("w")
    logger.error("e")
    lines = _lines(buf)
    assert len(lines) == 1
    assert lines[0].endswith("] ERROR e")


def test_json_format():
    buf = io.StringIO()
    logger = StructuredLogger(LogLevel.INFO, "json", buf)
    logger.info("test message", string_field("key", "value"), int_field("number", 42))
    entry = json.loads(buf.getvalue().strip())
    assert entry["level"] == "INFO"
    assert entry["message"] == "test message"
    assert entry["fields"]["key"] == "value"
    assert entry["fields"]["number"] == 42
    assert entry["timestamp"].endswith("Z")


def test_text_format():
    buf = io.StringIO()
    logger = StructuredLogger(LogLevel.INFO, "text", buf)
    logger.info("test message", string_field("key", "value"), int_field("number", 42))
    output = buf.getvalue().strip()
    assert re.match(r"^\[\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}\] INFO test message ", output)
    assert "key=value" in output
    assert "number=42" in output


def test_text_format_without_fields():
    buf = io.StringIO()
    StructuredLogger(LogLevel.INFO, "text", buf).info("plain")
    output = buf.getvalue()
    assert output.endswith("] INFO plain\n")
    assert re.fullmatch(r"\[\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}\] INFO plain\n", output) is not None


def test_text_format_bool_value():
    buf = io.StringIO()
    StructuredLogger(LogLevel.INFO, "text", buf).info("m", bool_field("flag", True))
    assert "flag=true" in buf.getvalue()


def test_with_fields():
    buf = io.StringIO()
    logger = StructuredLogger(LogLevel.INFO, "json", buf)
    context = logger.with_fields(string_field("service", "linctl"), string_field("version", "1.0"))
    context.info("test message", string_field("request_id", "123"))
    entry = json.loads(buf.getvalue().strip())
    assert entry["fields"]["service"] == "linctl"
    assert entry["fields"]["version"] == "1.0"
    assert entry["fields"]["request_id"] == "123"


def test_with_fields_does_not_change_parent():
    buf = io.StringIO()
    logger = StructuredLogger(LogLevel.INFO, "json", buf)
    logger.with_fields(string_field("service", "linctl"))
    logger.info("parent")
    assert "fields" not in json.loads(buf.getvalue().strip())


def test_field_helpers():
    buf = io.StringIO()
    logger = StructuredLogger(LogLevel.INFO, "json", buf)
    logger.info(
        "test message",
        string_field("str", "value"),
        int_field("int", 42),
        bool_field("bool", True),
        duration_field("duration", timedelta(seconds=5)),
        error_field(RuntimeError("test error")),
    )
    fields = json.loads(buf.getvalue().strip())["fields"]
    assert fields["str"] == "value"
    assert fields["int"] == 42
    assert fields["bool"] is True
    assert fields["duration"] == "5s"
    assert fields["error"] == "test error"


def test_error_field_none():
    assert error_field(None) == Field("error", "<nil>")


def test_noop_logger():
    logger = new_noop_logger()
    logger.debug("debug")
    logger.info("info")
    logger.warn("warn")
    logger.error("error")
    context = logger.with_fields(string_field("key", "value"))
    assert context is logger
    assert isinstance(context, NoOpLogger)


@pytest.mark.parametrize(
    "level, expected",
    [
        (LogLevel.DEBUG, "DEBUG"),
        (LogLevel.INFO, "INFO"),
        (LogLevel.WARN, "WARN"),
        (LogLevel.ERROR, "ERROR"),
    ],
)
def test_log_level_string(level, expected):
    assert str(level) == expected


def test_empty_fields():
    buf = io.StringIO()
    StructuredLogger(LogLevel.INFO, "json", buf).info("test message")
    entry = json.loads(buf.getvalue().strip())
    assert "fields" not in entry
    assert entry["message"] == "test message"


def test_json_fallback_for_unserialisable_value():
    buf = io.StringIO()
    StructuredLogger(LogLevel.INFO, "json", buf).info("odd", Field("obj", object()))
    output = buf.getvalue()
    assert output.endswith("] INFO odd\n")
    assert output.startswith("[")
    assert "obj" not in output


def test_log_entry_to_dict_omits_empty_fields():
    from datetime import datetime, timezone

    entry = LogEntry(datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc), "INFO", "m", {})
    assert entry.to_dict() == {
        "timestamp": "2024-01-02T03:04:05Z",
        "level": "INFO",
        "message": "m",
    }


@pytest.mark.parametrize(
    "value, expected",
    [
        (timedelta(0), "0s"),
        (timedelta(seconds=5), "5s"),
        (timedelta(milliseconds=100), "100ms"),
        (timedelta(seconds=90), "1m30s"),
        (timedelta(seconds=1.5), "1.5s"),
        (timedelta(hours=2), "2h0m0s"),
        (timedelta(microseconds=1500), "1.5ms"),
        (timedelta(microseconds=7), "7µs"),
        (timedelta(seconds=-3), "-3s"),
    ],
)
def test_format_duration(value, expected):
    assert format_duration(value) == expected