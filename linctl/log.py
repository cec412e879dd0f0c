"""Structured logging with human-readable text or JSON output."""

from __future__ import annotations

import enum
import json
import os
import sys
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Protocol, TextIO


class LogLevel(enum.IntEnum):
    """Severity of a log entry, ordered from least to most severe."""

    DEBUG = 0
    INFO = 1
    WARN = 2
    ERROR = 3

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Field:
    """A single structured key/value pair attached to a log entry."""

    key: str
    value: Any


@dataclass
class LogEntry:
    """One emitted log record."""

    timestamp: datetime
    level: str
    message: str
    fields: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return the entry as a JSON-ready mapping; empty fields are omitted."""
        data: dict[str, Any] = {
            "timestamp": _rfc3339(self.timestamp),
            "level": self.level,
            "message": self.message,
        }
        if self.fields:
            data["fields"] = dict(self.fields)
        return data


class Logger(Protocol):
    """Interface shared by every logger in the package."""

    def debug(self, msg: str, *args: Field) -> None: ...

    def info(self, msg: str, *args: Field) -> None: ...

    def warn(self, msg: str, *args: Field) -> None: ...

    def error(self, msg: str, *args: Field) -> None: ...

    def with_fields(self, *args: Field) -> Logger: ...


class StructuredLogger:
    """Logger that writes filtered entries as text lines or JSON objects."""

    def __init__(
        self,
        level: LogLevel = LogLevel.INFO,
        format: str = "text",
        writer: TextIO | None = None,
        base_fields: dict[str, Any] | None = None,
    ) -> None:
        self.level = LogLevel(level)
        self.format = format
        self.writer = writer if writer is not None else sys.stderr
        self.base_fields = dict(base_fields or {})

    def debug(self, msg: str, *args: Field) -> None:
        self._log(LogLevel.DEBUG, msg, args)

    def info(self, msg: str, *args: Field) -> None:
        self._log(LogLevel.INFO, msg, args)

    def warn(self, msg: str, *args: Field) -> None:
        self._log(LogLevel.WARN, msg, args)

    def error(self, msg: str, *args: Field) -> None:
        self._log(LogLevel.ERROR, msg, args)

    def with_fields(self, *args: Field) -> StructuredLogger:
        """Return a new logger whose entries always carry the given fields."""
        merged = dict(self.base_fields)
        merged.update((f.key, f.value) for f in args)
        return StructuredLogger(self.level, self.format, self.writer, merged)

    def _log(self, level: LogLevel, msg: str, fields: tuple[Field, ...]) -> None:
        if level < self.level:
            return
        data = dict(self.base_fields)
        data.update((f.key, f.value) for f in fields)
        entry = LogEntry(
            timestamp=datetime.now(timezone.utc),
            level=str(level),
            message=msg,
            fields=data or None,
        )
        if self.format == "json":
            self._write_json(entry)
        else:
            self._write_text(entry)

    def _write_json(self, entry: LogEntry) -> None:
        try:
            line = json.dumps(entry.to_dict(), separators=(",", ":"))
        except (TypeError, ValueError):
            line = f"[{_rfc3339(entry.timestamp)}] {entry.level} {entry.message}"
        print(line, file=self.writer)

    def _write_text(self, entry: LogEntry) -> None:
        stamp = entry.timestamp.strftime("%Y-%m-%d %H:%M:%S")
        line = f"[{stamp}] {entry.level} {entry.message}"
        if entry.fields:
            pairs = " ".join(f"{k}={_text_value(v)}" for k, v in entry.fields.items())
            line = f"{line} {pairs}"
        print(line, file=self.writer)


@dataclass
class NoOpLogger:
    """Logger that writes nothing; it only counts what it discards, per level.

    Loggers derived with ``with_fields`` share the same counter.
    """

    discarded: Counter = field(default_factory=Counter)

    def debug(self, msg: str, *args: Field) -> None:
        self.discarded[LogLevel.DEBUG] += 1

    def info(self, msg: str, *args: Field) -> None:
        self.discarded[LogLevel.INFO] += 1

    def warn(self, msg: str, *args: Field) -> None:
        self.discarded[LogLevel.WARN] += 1

    def error(self, msg: str, *args: Field) -> None:
        self.discarded[LogLevel.ERROR] += 1

    def with_fields(self, *args: Field) -> NoOpLogger:
        """Return a logger that also discards, sharing this logger's counter."""
        return NoOpLogger(self.discarded)


_LEVEL_NAMES = {
    "debug": LogLevel.DEBUG,
    "info": LogLevel.INFO,
    "warn": LogLevel.WARN,
    "warning": LogLevel.WARN,
    "error": LogLevel.ERROR,
}


def new_logger() -> StructuredLogger:
    """Create a stderr logger configured from LINCTL_LOG_LEVEL and LINCTL_LOG_FORMAT."""
    level = LogLevel.INFO
    level_text = os.environ.get("LINCTL_LOG_LEVEL", "")
    if level_text:
        level = _LEVEL_NAMES.get(level_text.lower(), level)
    fmt = "json" if os.environ.get("LINCTL_LOG_FORMAT", "").lower() == "json" else "text"
    return StructuredLogger(level, fmt, sys.stderr)


def new_noop_logger() -> NoOpLogger:
    """Create a logger that writes nothing."""
    return NoOpLogger()


def format_duration(value: timedelta) -> str:
    """Render a duration compactly, e.g. '1.5s', '100ms', '1h2m3s'."""
    micros = (value.days * 86_400 + value.seconds) * 1_000_000 + value.microseconds
    nanos = micros * 1000
    sign = "-" if nanos < 0 else ""
    nanos = abs(nanos)
    if nanos == 0:
        return "0s"
    if nanos < 1_000_000_000:
        if nanos < 1000:
            text = f"{nanos}ns"
        elif nanos < 1_000_000:
            text = _decimal(nanos, 3) + "µs"
        else:
            text = _decimal(nanos, 6) + "ms"
        return sign + text
    seconds, fraction = divmod(nanos, 1_000_000_000)
    second_text = str(seconds % 60)
    if fraction:
        second_text += "." + f"{fraction:09d}".rstrip("0")
    second_text += "s"
    minutes = seconds // 60
    if not minutes:
        return sign + second_text
    hours, minutes = divmod(minutes, 60)
    hour_text = f"{hours}h" if hours else ""
    return f"{sign}{hour_text}{minutes}m{second_text}"


def string_field(key: str, value: str) -> Field:
    return Field(key, value)


def int_field(key: str, value: int) -> Field:
    return Field(key, value)


def bool_field(key: str, value: bool) -> Field:
    return Field(key, value)


def duration_field(key: str, value: timedelta) -> Field:
    return Field(key, format_duration(value))


def error_field(err: BaseException | None) -> Field:
    return Field("error", "<nil>" if err is None else str(err))


def _decimal(value: int, precision: int) -> str:
    whole, rest = divmod(value, 10**precision)
    if not rest:
        return str(whole)
    return f"{whole}." + f"{rest:0{precision}d}".rstrip("0")


def _rfc3339(stamp: datetime) -> str:
    return stamp.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def _text_value(value: Any) -> str:
    if value is None:
        return "<nil>"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)