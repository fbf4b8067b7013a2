"""Logging formatters and CLI logging setup."""

from __future__ import annotations

import json
import logging
import sys
import traceback
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import IO, Any

from opsdesk_table.common.events import EventLogger

ROOT_LOGGER = "opsdesk_table"


def _format_timestamp(created: float) -> str:
    """Format a LogRecord ``created`` timestamp as RFC3339-ish UTC."""
    return (
        datetime.fromtimestamp(created, tz=timezone.utc)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


def _truncate_value(value: Any, *, max_length: int = 120) -> str:
    text = str(value)
    if len(text) <= max_length:
        return text
    return text[: max_length - 1] + "…"


def _format_traceback(record: logging.LogRecord) -> str:
    if not record.exc_info:
        return ""
    return "".join(traceback.format_exception(*record.exc_info)).rstrip("\n")


class JsonFormatter(logging.Formatter):
    """Formatter that renders structured log records as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: A003 - matches logging.Formatter API
        payload: dict[str, Any] = {
            "ts": _format_timestamp(record.created),
            "level": record.levelname.lower(),
            "event": getattr(record, "event", None) or "log",
            "logger": record.name,
            "message": record.getMessage(),
        }

        data = getattr(record, "data", None)
        if data is not None:
            payload["data"] = data

        if record.exc_info:
            exc_type, exc, _ = record.exc_info
            payload["exc_type"] = getattr(exc_type, "__name__", None)
            payload["exc"] = str(exc)
            payload["traceback"] = _format_traceback(record)

        return json.dumps(payload, ensure_ascii=False, default=str)


class TextFormatter(logging.Formatter):
    """Formatter that renders structured records into readable single-line text."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: A003 - matches logging.Formatter API
        timestamp = _format_timestamp(record.created)
        level_name = record.levelname.upper()
        event_name = getattr(record, "event", None)
        message = record.getMessage()

        if event_name:
            head = f"[{timestamp}] {level_name} {event_name}: {message}"
        else:
            head = f"[{timestamp}] {level_name} {record.name}: {message}"

        data = getattr(record, "data", None)
        if isinstance(data, dict) and data:
            extras = [f"{key}={_truncate_value(data[key])}" for key in sorted(data)[:8]]
            if len(data) > 8:
                extras.append("…")
            head += " (" + ", ".join(extras) + ")"

        traceback_text = _format_traceback(record)
        if traceback_text:
            head += "\n" + traceback_text

        return head


@dataclass
class LogContext:
    """Handles installed by :func:`start_logging`; close to release log files."""

    logger: logging.Logger
    events: EventLogger
    _open_handles: list[IO[str]] = field(default_factory=list)

    def close(self) -> None:
        handles, self._open_handles = self._open_handles, []
        for handle in handles:
            handle.close()
        self.logger.handlers = []
        self.logger.propagate = True

    def __enter__(self) -> "LogContext":
        return self

    def __exit__(self, _exc_type, _exc, _tb) -> None:
        self.close()


def start_logging(
    *,
    log_format: str = "text",
    log_level: int = logging.INFO,
    log_file: Path | None = None,
    stream: IO[str] | None = None,
    namespace: str = "cli",
) -> LogContext:
    """Install handlers on the ``opsdesk_table`` logger.

    Library code only creates loggers; the CLI is the one place that decides
    where records go.

    Args:
        log_format:
            Either ``"text"`` or ``"ndjson"``.
        log_level:
            Minimum level for emitted records.
        log_file:
            Optional file that receives the same records as the console.
        stream:
            Console stream (defaults to stderr).
        namespace:
            Namespace for events emitted through the returned ``events``.
    """
    normalized_format = (log_format or "text").strip().lower()
    if normalized_format not in {"text", "ndjson"}:
        raise ValueError("log_format must be 'text' or 'ndjson'")

    formatter: logging.Formatter = JsonFormatter() if normalized_format == "ndjson" else TextFormatter()

    handlers: list[logging.Handler] = []
    open_handles: list[IO[str]] = []

    console_handler = logging.StreamHandler(stream or sys.stderr)
    console_handler.setFormatter(formatter)
    handlers.append(console_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handle = log_file.open("w", encoding="utf-8", newline="\n")
        open_handles.append(file_handle)
        file_handler = logging.StreamHandler(file_handle)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    for handler in handlers:
        handler.setLevel(log_level)

    base_logger = logging.getLogger(ROOT_LOGGER)
    base_logger.setLevel(log_level)
    base_logger.handlers = handlers
    base_logger.propagate = False

    events = EventLogger(base_logger.getChild(namespace), namespace=namespace)
    return LogContext(logger=base_logger, events=events, _open_handles=open_handles)


__all__ = [
    "JsonFormatter",
    "LogContext",
    "ROOT_LOGGER",
    "TextFormatter",
    "start_logging",
]
